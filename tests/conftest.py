"""
Shared fixtures: synthetic IP.BIN blocks, raw track payloads and in-memory
byte providers.
"""

import io
import os

import pytest

from gdrom.checksums import CRC16Context
from gdrom.gdi.constants import SECTOR_SIZE
from gdrom.gdi.structs import GdiFile, Track, TrackType
from gdrom.ifilter import IFilter
from gdrom.writer import IWriter, WriterConfig

GDI_TEXT = """3
1     0 4 2352 track01.bin 0
2   756 0 2352 track02.raw 0
3 45000 4 2352 track03.bin 0
"""


def put(buffer, offset, text, length):
    buffer[offset:offset + length] = text.encode('latin-1').ljust(length, b' ')


def make_ip_bin(disc='GD-ROM1/1', area='JUE', peripherals='0799A10', date='19990909',
                product='MK-51000', version='V1.005', toc=((45000, 0x41),), crc=None):
    data = bytearray(0x8000)
    data[0:0x100] = b' ' * 0x100
    put(data, 0x000, 'SEGA SEGAKATANA', 16)
    put(data, 0x010, 'SEGA ENTERPRISES', 16)
    put(data, 0x030, area, 8)
    put(data, 0x038, peripherals, 8)
    put(data, 0x040, product, 10)
    put(data, 0x04a, version, 6)
    put(data, 0x050, date, 16)
    put(data, 0x060, '1ST_READ.BIN', 16)
    put(data, 0x070, 'SEGA ENTERPRISES', 16)
    put(data, 0x080, 'SONIC ADVENTURE', 128)
    if crc is None:
        crc, _ = CRC16Context.data(bytes(data[0x040:0x050]))
    put(data, 0x020, crc + ' ' + disc, 16)
    data[0x100:0x104] = b'TOC1'
    for i, (start, track_type) in enumerate(toc):
        raw = start + 150
        offset = 0x104 + i * 4
        data[offset:offset + 3] = raw.to_bytes(3, 'little')
        data[offset + 3] = track_type
    return bytes(data)


def sectors(count, fill=0):
    return bytes([fill]) * (count * SECTOR_SIZE)


def make_data_track(ip_bin, extra_sectors=4):
    '''
    raw mode 1 sectors carrying IP.BIN in the user data of the first 16
    '''
    payload = bytearray()
    for i in range(16):
        payload += b'\x00' + b'\xff' * 10 + b'\x00' + bytes([0, 2, i, 1])
        payload += ip_bin[i * 2048:(i + 1) * 2048]
        payload += b'\xee' * (SECTOR_SIZE - 2064)
    payload += sectors(extra_sectors, 0x33)
    return bytes(payload)


def make_track_list(starts=(0, 756, 45000), types=None, names=None):
    types = types or [TrackType.DATA, TrackType.AUDIO, TrackType.DATA]
    names = names or [f'track{n:02d}.{"raw" if t == TrackType.AUDIO else "bin"}'
                      for n, t in enumerate(types, 1)]
    tracks = [Track(number=n, start=s, type=t, sector_size=SECTOR_SIZE, name=name, zero=0)
              for n, (s, t, name) in enumerate(zip(starts, types, names), 1)]
    return GdiFile(count=len(tracks), tracks=tracks)


def three_track_files(redump=False):
    audio = sectors(150) + sectors(8, 0x22) if redump else sectors(8, 0x22)
    return {
        'track01.bin': sectors(4, 0x11),
        'track02.raw': audio,
        'track03.bin': make_data_track(make_ip_bin()),
    }


def five_track_files(redump=False):
    '''
    data / audio / data / audio / data, in redump form the final data track
    carries a 75 sector pregap and a 150 sector pause
    '''
    files = three_track_files(redump)
    files['track04.raw'] = (sectors(150) if redump else b'') + sectors(10, 0x44)
    files['track05.bin'] = ((sectors(75, 0x50) + sectors(150, 0x00)) if redump else b'') + sectors(20, 0x55)
    return files


def five_track_list():
    return make_track_list(
        starts=(0, 756, 45000, 50000, 60000),
        types=[TrackType.DATA, TrackType.AUDIO, TrackType.DATA, TrackType.AUDIO, TrackType.DATA])


class MemoryFilter(IFilter):
    def __init__(self, files):
        super().__init__('memory')
        self.files = files
        self.opened = []

    def find_file_by_extension(self, extension):
        for name in sorted(self.files):
            if name.lower().endswith(extension):
                return io.BytesIO(self.files[name]), name
        raise FileNotFoundError(extension)

    def open_file(self, filename):
        if filename not in self.files:
            raise FileNotFoundError(filename)
        stream = io.BytesIO(self.files[filename])
        self.opened.append(stream)
        return stream

    def file_size(self, filename):
        if filename not in self.files:
            raise FileNotFoundError(filename)
        return len(self.files[filename])


class MemoryFile(io.BytesIO):
    def __init__(self, writer, name):
        super().__init__()
        self._writer = writer
        self._name = name

    def close(self):
        if not self.closed:
            self._writer.files[self._name] = self.getvalue()
            self._writer.open_files -= 1
        super().close()


class MemoryWriter(IWriter):
    def __init__(self, config=None):
        super().__init__(config or WriterConfig())
        self.files = {}
        self.open_files = 0
        self.max_open_files = 0

    def create_file(self, filename):
        self.open_files += 1
        self.max_open_files = max(self.max_open_files, self.open_files)
        return MemoryFile(self, filename)


def write_files(directory, files):
    os.makedirs(directory, exist_ok=True)
    for name, data in files.items():
        with open(os.path.join(directory, name), 'wb') as f:
            f.write(data)


@pytest.fixture
def ip_bin_bytes():
    return make_ip_bin()


@pytest.fixture
def three_tracks():
    return make_track_list()
