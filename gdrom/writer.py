import logging
import os
import zipfile
from dataclasses import dataclass
from typing import BinaryIO, Callable, Optional

from gdrom.gdi.structs import Track
from gdrom.ifilter import ByteCounter, CountingStream

logger = logging.getLogger(__name__)


@dataclass
class WriterConfig:
    # descriptor to emit after the tracks, empty to skip
    gdi_file: str = ""
    # cue sheet to emit after the tracks, empty to skip
    cue_file: str = ""
    # called with the source track, returns the destination filename
    track_rename: Optional[Callable[[Track], str]] = None
    # drop padding from the emitted descriptor and cue sheet
    trim_whitespace: bool = False


def gdemu_track_name(track: Track) -> str:
    '''
    names each track the way a GDEmu device expects
    '''
    if track.is_audio_track():
        return f'track{track.number:02d}.raw'
    elif track.is_data_track():
        return f'track{track.number:02d}.bin'
    return track.name


class IWriter:
    def __init__(self, config: WriterConfig):
        self._config = config
        self._tx = ByteCounter()

    @property
    def config(self) -> WriterConfig:
        return self._config

    @property
    def tx(self) -> int:
        return self._tx.count

    def create_file(self, filename: str) -> BinaryIO:
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class DirectoryWriter(IWriter):
    def __init__(self, directory: str, config: WriterConfig):
        super().__init__(config)
        os.makedirs(directory, exist_ok=True)
        self._directory = directory

    def create_file(self, filename: str) -> BinaryIO:
        logger.debug(f'creating {filename} in {self._directory}')
        return CountingStream(open(os.path.join(self._directory, filename), 'wb'), self._tx)


class ZipFileWriter(IWriter):
    def __init__(self, filename: str, config: WriterConfig):
        super().__init__(config)
        # count what lands in the archive, not the uncompressed payload
        self._file = CountingStream(open(filename, 'wb'), self._tx)
        try:
            self._zip = zipfile.ZipFile(self._file, 'w', compression=zipfile.ZIP_DEFLATED)
        except Exception:
            self._file.close()
            self._file = None
            raise

    def create_file(self, filename: str) -> BinaryIO:
        logger.debug(f'adding {filename} to archive')
        # track sizes are not known up front
        return self._zip.open(filename, 'w', force_zip64=True)

    def close(self):
        if self._zip:
            self._zip.close()
            self._zip = None
        if self._file:
            self._file.close()
            self._file = None
