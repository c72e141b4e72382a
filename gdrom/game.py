import io
import logging
from typing import Optional

from gdrom.cue import CUE_DATATYPE_AUDIO, CUE_DATATYPE_MODE1_2352, marshal_cue_sheet, parse_cue_sheet
from gdrom.errors import (
    InvalidCueFileError, InvalidCueTrackTypeError, InvalidGameError, InvalidSizeError
)
from gdrom.gdi.constants import SECTOR_SIZE, TRACK_THREE_START
from gdrom.gdi.structs import GdiFile, GdiFlag, Track, TrackType
from gdrom.gdi.toc import marshal_text, unmarshal_text
from gdrom.ifilter import IFilter
from gdrom.ipbin import IPBin
from gdrom.redump import copy_tracks, is_redump, plan_conversion
from gdrom.utils import discard, read_exactly

logger = logging.getLogger(__name__)

# IP.BIN spans the user data of the first 16 sectors of track 3
IPBIN_SECTORS = 16
SECTOR_HEADER = 16
SECTOR_USER_DATA = 2048

cue_datatype_to_track_type = {
    CUE_DATATYPE_AUDIO: TrackType.AUDIO,
    CUE_DATATYPE_MODE1_2352: TrackType.DATA,
}


class Game:
    '''
    a Dreamcast game image read through a byte provider. The layout comes
    from a .gdi descriptor when there is one, otherwise from a cue sheet
    '''
    def __init__(self, reader: IFilter):
        self.gdi_filename: Optional[str] = None
        self.cue_filename: Optional[str] = None
        self.ip_bin: Optional[IPBin] = None
        self._reader = reader
        self._gdi_file = GdiFile()

    @classmethod
    def open(cls, reader: IFilter) -> 'Game':
        game = cls(reader)
        try:
            stream, filename = reader.find_gdi_file()
        except FileNotFoundError:
            logger.debug('no descriptor found, trying a cue sheet')
            game._read_cue_file()
        else:
            with stream:
                game._gdi_file = unmarshal_text(stream.read())
            game.gdi_filename = filename

        game._read_ip_bin()
        return game

    @property
    def gdi_file(self) -> GdiFile:
        return self._gdi_file.copy()

    def _read_cue_file(self):
        stream, filename = self._reader.find_cue_file()
        with stream:
            sheet = parse_cue_sheet(stream.read())
        self.cue_filename = filename

        gdi_file = GdiFile()
        start = 0
        for cue_file in sheet:
            for cue_track in cue_file.tracks:
                track_type = cue_datatype_to_track_type.get(cue_track.data_type)
                if track_type is None:
                    raise InvalidCueTrackTypeError(f'track {cue_track.number} is {cue_track.data_type}')

                gdi_file.tracks.append(Track(
                    number=cue_track.number,
                    start=start,
                    type=track_type,
                    sector_size=SECTOR_SIZE,
                    name=cue_file.name,
                    zero=0
                ))

                if cue_track.number == 2:
                    # track 3 always opens the high density area
                    start = TRACK_THREE_START
                else:
                    size = self._reader.file_size(cue_file.name)
                    if size % SECTOR_SIZE != 0:
                        raise InvalidSizeError(f'{cue_file.name} is {size} bytes')
                    start += size // SECTOR_SIZE

        gdi_file.count = len(gdi_file.tracks)
        if not gdi_file.is_valid():
            raise InvalidCueFileError(f'{filename} does not describe a valid layout')
        self._gdi_file = gdi_file

    def _read_ip_bin(self):
        buffer = io.BytesIO()
        with self._reader.open_file(self._gdi_file.tracks[2].name) as src:
            for _ in range(IPBIN_SECTORS):
                discard(src, SECTOR_HEADER)
                buffer.write(read_exactly(src, SECTOR_USER_DATA))
                discard(src, SECTOR_SIZE - SECTOR_HEADER - SECTOR_USER_DATA)

        self.ip_bin = IPBin.decode(buffer.getvalue())

    def validate(self):
        '''
        checks the layout and that every track file holds whole sectors
        '''
        if not self._gdi_file.is_valid():
            raise InvalidGameError('track layout is not valid')

        for track in self._gdi_file.tracks:
            size = self._reader.file_size(track.name)
            if size % SECTOR_SIZE != 0:
                raise InvalidSizeError(f'{track.name} is {size} bytes, not a multiple of {SECTOR_SIZE}')

    def is_redump(self) -> bool:
        self.validate()
        return is_redump(self._gdi_file, self._reader)

    def write(self, writer) -> GdiFile:
        '''
        copies the image to the writer, dropping redump pauses and pregaps
        when present. returns the layout that was written
        '''
        redump = self.is_redump()
        config = writer.config

        gdi_file, plan = plan_conversion(self._gdi_file, self._reader, redump, config.track_rename)
        written = copy_tracks(plan, self._reader, writer)
        logger.info(f'copied {written} bytes of track data')

        if config.trim_whitespace:
            gdi_file.flags = GdiFlag.TRIM_WHITESPACE

        if config.gdi_file:
            with writer.create_file(config.gdi_file) as dst:
                dst.write(marshal_text(gdi_file).encode('utf-8', 'surrogateescape'))

        if config.cue_file:
            with writer.create_file(config.cue_file) as dst:
                dst.write(marshal_cue_sheet(gdi_file, config.trim_whitespace).encode('utf-8', 'surrogateescape'))

        return gdi_file
