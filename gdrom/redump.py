"""
Redump dumps keep a 150 sector pause at the front of every audio track, and
a 75 sector pregap plus the pause in front of a final high density data
track. GDEmu style images leave them out of the stored bytes and move the
track starts forward instead. This module detects which convention an image
uses and plans the byte ranges needed to rewrite it without them.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from gdrom.errors import InconsistentAudioTracksError, InvalidSizeError
from gdrom.gdi.constants import SECTOR_SIZE
from gdrom.gdi.structs import GdiFile, Track
from gdrom.ifilter import IFilter
from gdrom.utils import copy_n, discard, read_exactly

logger = logging.getLogger(__name__)

PAUSE_DATA = 150
PRE_GAP = 75

# an audio track starting with this much silence carries the pause
SILENCE_PROBE = 16


@dataclass
class CopyRange:
    destination: str
    # byte offset into the source track file
    offset: int
    length: int


@dataclass
class TrackCopy:
    number: int
    source: str
    destination: str
    ranges: List[CopyRange] = field(default_factory=list)


def is_redump(gdi_file: GdiFile, reader: IFilter) -> bool:
    '''
    true when every audio track starts with silence, false when none do.
    a mix of both can't be converted reliably and raises
    '''
    audio_tracks, redump_tracks = 0, 0
    for track in gdi_file.tracks:
        if not track.is_audio_track():
            continue

        audio_tracks += 1
        with reader.open_file(track.name) as src:
            head = read_exactly(src, SILENCE_PROBE)

        if head == bytes(SILENCE_PROBE):
            redump_tracks += 1

    if 0 < redump_tracks < audio_tracks:
        logger.warning(f'{redump_tracks} of {audio_tracks} audio tracks start with a pause')
        raise InconsistentAudioTracksError(
            f'{redump_tracks} of {audio_tracks} audio tracks start with a pause')

    logger.debug(f'{audio_tracks} audio tracks, redump layout: {redump_tracks == audio_tracks}')
    return redump_tracks == audio_tracks


def plan_conversion(gdi_file: GdiFile, reader: IFilter, redump: bool,
                    track_rename: Optional[Callable[[Track], str]] = None) -> Tuple[GdiFile, List[TrackCopy]]:
    '''
    returns the rewritten layout and, per track, the source byte ranges and
    where they go. the layout passed in is left untouched
    '''
    converted = gdi_file.copy()
    plan = []
    previous = None

    for i, track in enumerate(gdi_file.tracks):
        size = reader.file_size(track.name)
        destination = track_rename(track) if track_rename else track.name
        converted.tracks[i].name = destination

        copy = TrackCopy(number=track.number, source=track.name, destination=destination)
        offset = 0

        if redump:
            final_data_track = (track.is_data_track() and track.number == gdi_file.count
                                and track.number > 3)
            if final_data_track:
                # the pregap belongs at the end of the preceding track
                copy.ranges.append(CopyRange(previous, 0, PRE_GAP * SECTOR_SIZE))
                offset += PRE_GAP * SECTOR_SIZE
                converted.tracks[i].start += PRE_GAP
            if final_data_track or track.is_audio_track():
                offset += PAUSE_DATA * SECTOR_SIZE
                converted.tracks[i].start += PAUSE_DATA

        if offset > size:
            raise InvalidSizeError(f'{track.name} is {size} bytes, shorter than its {offset} byte gap')

        copy.ranges.append(CopyRange(destination, offset, size - offset))
        logger.debug(f'track {track.number}: {copy.ranges}')
        plan.append(copy)
        previous = destination

    return converted, plan


def copy_tracks(plan: List[TrackCopy], reader: IFilter, writer) -> int:
    '''
    streams the planned ranges in track order. only one destination file is
    open at a time, it stays open while the next track's pregap is appended
    '''
    written = 0
    dst, dst_name = None, None
    try:
        for copy in plan:
            logger.info(f'copying track {copy.number}: {copy.source} -> {copy.destination}')
            with reader.open_file(copy.source) as src:
                position = 0
                for copy_range in copy.ranges:
                    if copy_range.destination != dst_name:
                        if dst is not None:
                            dst.close()
                            dst = None
                        dst = writer.create_file(copy_range.destination)
                        dst_name = copy_range.destination
                    if copy_range.offset > position:
                        discard(src, copy_range.offset - position)
                    written += copy_n(dst, src, copy_range.length)
                    position = copy_range.offset + copy_range.length
    finally:
        if dst is not None:
            dst.close()
    return written
