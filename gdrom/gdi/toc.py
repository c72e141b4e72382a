import logging
from typing import Union

from .constants import *
from .structs import GdiFile, GdiFlag, Track, TrackType
from .utilities import split_fields, validate

logger = logging.getLogger(__name__)


def _track_type(value: int) -> int:
    # unknown types are kept as plain ints and rejected by validation
    try:
        return TrackType(value)
    except ValueError:
        return value


def parse_track_line(line: str) -> Track:
    fields = split_fields(line)
    # int() errors are left to propagate as they are
    return Track(
        number=int(fields[TRACK_NUMBER]),
        start=int(fields[TRACK_START]),
        type=_track_type(int(fields[TRACK_TYPE])),
        sector_size=int(fields[TRACK_SECTOR_SIZE]),
        name=fields[TRACK_NAME].strip(QUOTE),
        zero=int(fields[TRACK_ZERO])
    )


def unmarshal_text(text: Union[str, bytes]) -> GdiFile:
    '''
    decodes a track layout descriptor, nothing is returned unless the
    whole layout parses and validates
    '''
    if isinstance(text, bytes):
        text = text.decode('utf-8', 'surrogateescape')

    count = 0
    tracks = []
    for i, line in enumerate(text.splitlines()):
        if i == 0:
            count = int(line)
        else:
            tracks.append(parse_track_line(line))

    gdi_file = GdiFile(count=count, tracks=tracks)
    validate(gdi_file)
    logger.debug(f'parsed descriptor with {count} tracks')
    return gdi_file


def marshal_text(gdi_file: GdiFile) -> str:
    '''
    encodes a track layout descriptor, number and start columns are right
    aligned to the widest value unless whitespace trimming is requested
    '''
    validate(gdi_file)

    last = gdi_file.tracks[-1]
    if gdi_file.flags & GdiFlag.TRIM_WHITESPACE:
        number_width, start_width = 1, 1
    else:
        number_width = len(str(last.number))
        start_width = len(str(last.start))

    lines = [f'{len(gdi_file.tracks)}']
    for track in gdi_file.tracks:
        name = track.name
        if ' ' in name:
            name = QUOTE + name + QUOTE
        lines.append('%*d %*d %d %d %s %d' % (number_width, track.number, start_width, track.start,
                                              track.type, track.sector_size, name, track.zero))

    return '\n'.join(lines) + '\n'
