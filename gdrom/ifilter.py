"""
byte providers used to read a game image, either from a plain directory or
from inside a zip archive. Every provider counts the bytes it reads from disk.
"""
import errno
import logging
import os
import zipfile
from typing import BinaryIO, Optional, Tuple

from gdrom.gdi.constants import EXTENSION as GDI_EXTENSION

logger = logging.getLogger(__name__)

CUE_EXTENSION = '.cue'


class ByteCounter:
    def __init__(self):
        self._count = 0

    def add(self, n: int):
        self._count += n

    @property
    def count(self) -> int:
        return self._count


class CountingStream:
    '''
    wraps a binary stream and adds every byte read or written to a counter
    '''
    def __init__(self, stream: BinaryIO, counter: ByteCounter):
        self._stream = stream
        self._counter = counter

    def read(self, size: int = -1) -> bytes:
        data = self._stream.read(size)
        self._counter.add(len(data))
        return data

    def readinto(self, buffer) -> int:
        n = self._stream.readinto(buffer)
        self._counter.add(n or 0)
        return n

    def write(self, data) -> int:
        n = self._stream.write(data)
        self._counter.add(len(data) if n is None else n)
        return n

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._stream.seek(offset, whence)

    def tell(self) -> int:
        return self._stream.tell()

    def flush(self):
        self._stream.flush()

    def close(self):
        self._stream.close()

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def __getattr__(self, name):
        return getattr(self._stream, name)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


def _not_found(path: str) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)


class IFilter:
    '''
    source of a game image. Subclasses locate the layout descriptor or cue
    sheet, open track files by name and report their sizes
    '''
    def __init__(self, path: str):
        self._path = path
        self._rx = ByteCounter()

    @property
    def name(self) -> str:
        return "Python IFilter"

    @property
    def path(self) -> str:
        return self._path

    @property
    def rx(self) -> int:
        return self._rx.count

    def identify(self, path: str) -> bool:
        return False

    def open(self):
        pass

    def close(self):
        pass

    def find_file_by_extension(self, extension: str) -> Tuple[BinaryIO, str]:
        raise NotImplementedError

    def find_gdi_file(self) -> Tuple[BinaryIO, str]:
        return self.find_file_by_extension(GDI_EXTENSION)

    def find_cue_file(self) -> Tuple[BinaryIO, str]:
        return self.find_file_by_extension(CUE_EXTENSION)

    def open_file(self, filename: str) -> BinaryIO:
        raise NotImplementedError

    def file_size(self, filename: str) -> int:
        raise NotImplementedError

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc):
        self.close()


class DirectoryFilter(IFilter):
    @property
    def name(self) -> str:
        return "Directory"

    def identify(self, path: str) -> bool:
        return os.path.isdir(path)

    def open(self):
        if not os.path.exists(self._path):
            raise _not_found(self._path)
        if not os.path.isdir(self._path):
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), self._path)

    def find_file_by_extension(self, extension: str) -> Tuple[BinaryIO, str]:
        for filename in sorted(os.listdir(self._path)):
            if filename.lower().endswith(extension) and os.path.isfile(os.path.join(self._path, filename)):
                logger.debug(f'found {filename} in {self._path}')
                return self.open_file(filename), filename
        raise _not_found(os.path.join(self._path, '*' + extension))

    def open_file(self, filename: str) -> BinaryIO:
        return CountingStream(open(os.path.join(self._path, filename), 'rb'), self._rx)

    def file_size(self, filename: str) -> int:
        return os.path.getsize(os.path.join(self._path, filename))


class ZipFileFilter(IFilter):
    def __init__(self, path: str):
        super().__init__(path)
        self._file: Optional[CountingStream] = None
        self._zip: Optional[zipfile.ZipFile] = None

    @property
    def name(self) -> str:
        return "Zip archive"

    def identify(self, path: str) -> bool:
        return os.path.isfile(path) and zipfile.is_zipfile(path)

    def open(self):
        # the archive is read through the counter so compressed bytes are counted
        self._file = CountingStream(open(self._path, 'rb'), self._rx)
        try:
            self._zip = zipfile.ZipFile(self._file)
        except Exception:
            self._file.close()
            self._file = None
            raise

    def close(self):
        if self._zip:
            self._zip.close()
            self._zip = None
        if self._file:
            self._file.close()
            self._file = None

    def _entries(self):
        # skip resource forks added by macOS archivers
        return [info for info in self._zip.infolist()
                if not info.is_dir() and not info.filename.startswith('__MACOSX/')]

    def _entry(self, filename: str) -> zipfile.ZipInfo:
        for info in self._entries():
            if info.filename == filename:
                return info
        raise _not_found(f'{self._path}:{filename}')

    def find_file_by_extension(self, extension: str) -> Tuple[BinaryIO, str]:
        for info in self._entries():
            if info.filename.lower().endswith(extension):
                logger.debug(f'found {info.filename} in {self._path}')
                return self._zip.open(info), info.filename
        raise _not_found(f'{self._path}:*{extension}')

    def open_file(self, filename: str) -> BinaryIO:
        return self._zip.open(self._entry(filename))

    def file_size(self, filename: str) -> int:
        return self._entry(filename).file_size
