"""
decoder for IP.BIN, the 32 KiB initial program found at the start of the
high density data track. Every field lives at a fixed offset, the layout is
described once in IPBIN_FIELDS and decoded by a single routine.
"""
import binascii
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import IntFlag
from typing import List, Optional, Tuple

from gdrom.checksums import CRC16Context
from gdrom.errors import IPBinLengthError, IPBinFormatError

logger = logging.getLogger(__name__)

IPBIN_LENGTH = 0x8000
LAST_SECTOR = 0x861b4
PAUSE_DATA = 150
TOC_ENTRIES = 97

OFFSET_HARDWARE_ID = 0x000
OFFSET_MAKER_ID = 0x010
OFFSET_DEVICE_INFORMATION = 0x020
OFFSET_AREA_SYMBOLS = 0x030
OFFSET_PERIPHERALS = 0x038
OFFSET_PRODUCT_NUMBER = 0x040
OFFSET_PRODUCT_VERSION = 0x04a
OFFSET_RELEASE_DATE = 0x050
OFFSET_BOOT_FILENAME = 0x060
OFFSET_PRODUCER = 0x070
OFFSET_SOFTWARE_NAME = 0x080
OFFSET_TOC = 0x100

TOC_TYPE_AUDIO = 0x01
TOC_TYPE_DATA = 0x41

REGEX_DISC = re.compile(r'GD-ROM(?P<disc>\d+)/(?P<total>\d+)')
REGEX_DATE = re.compile(r'\d{8}$')


class Region(bytes):
    '''
    area symbols, each region is permitted when its letter is in its slot
    '''
    def is_japan(self) -> bool:
        return self[0:1] == b'J'

    def is_usa(self) -> bool:
        return self[1:2] == b'U'

    def is_europe(self) -> bool:
        return self[2:3] == b'E'

    def __str__(self) -> str:
        return self.decode('latin-1')


class Peripheral(IntFlag):
    WINDOWS_CE = 1 << 0
    VGA_BOX = 1 << 4
    OTHER_EXPANSIONS = 1 << 8
    VIBRATION_PACK = 1 << 9
    MICROPHONE = 1 << 10
    MEMORY_CARD = 1 << 11
    START_A_B_DIRECTIONS = 1 << 12
    C_BUTTON = 1 << 13
    D_BUTTON = 1 << 14
    X_BUTTON = 1 << 15
    Y_BUTTON = 1 << 16
    Z_BUTTON = 1 << 17
    EXPANDED_DIRECTIONS = 1 << 18
    R_TRIGGER = 1 << 19
    L_TRIGGER = 1 << 20
    HORIZONTAL = 1 << 21
    VERTICAL = 1 << 22
    EXPANDED_HORIZONTAL = 1 << 23
    EXPANDED_VERTICAL = 1 << 24
    GUN = 1 << 25
    KEYBOARD = 1 << 26
    MOUSE = 1 << 27

    def is_set(self, peripherals: int) -> bool:
        return (peripherals & self) != 0


@dataclass
class TocEntry:
    start: int = 0
    length: int = 0
    type: int = 0

    def is_audio_track(self) -> bool:
        return self.type == TOC_TYPE_AUDIO

    def is_data_track(self) -> bool:
        return self.type == TOC_TYPE_DATA


def _text(raw: bytes) -> str:
    return raw.decode('latin-1').rstrip(' ')


def _crc(raw: bytes) -> int:
    # exactly four hex digits, binascii.Error is a ValueError and is not wrapped
    return int.from_bytes(binascii.unhexlify(raw), 'big')


def _disc(raw: bytes) -> Tuple[int, int]:
    text = raw.decode('latin-1')
    match = REGEX_DISC.match(text)
    if not match:
        raise IPBinFormatError(f'unexpected disc numbering {text!r}')
    return int(match.group('disc')), int(match.group('total'))


def _peripherals(raw: bytes) -> int:
    # seven digits, pad to a whole number of bytes before decoding
    return int.from_bytes(binascii.unhexlify(b'0' + raw), 'big')


def _release_date(raw: bytes) -> date:
    text = _text(raw)
    if not REGEX_DATE.match(text):
        raise IPBinFormatError(f'unexpected release date {text!r}')
    return datetime.strptime(text, '%Y%m%d').date()


# attribute(s), offset, length, decoder
IPBIN_FIELDS = [
    ('hardware_id', OFFSET_HARDWARE_ID, 0x10, _text),
    ('maker_id', OFFSET_MAKER_ID, 0x10, _text),
    ('crc', OFFSET_DEVICE_INFORMATION, 4, _crc),
    (('disc', 'total_discs'), OFFSET_DEVICE_INFORMATION + 5, OFFSET_PERIPHERALS - OFFSET_DEVICE_INFORMATION - 5, _disc),
    ('regions', OFFSET_AREA_SYMBOLS, OFFSET_PERIPHERALS - OFFSET_AREA_SYMBOLS, Region),
    ('peripherals', OFFSET_PERIPHERALS, 7, _peripherals),
    ('product_number', OFFSET_PRODUCT_NUMBER, OFFSET_PRODUCT_VERSION - OFFSET_PRODUCT_NUMBER, _text),
    ('product_version', OFFSET_PRODUCT_VERSION, OFFSET_RELEASE_DATE - OFFSET_PRODUCT_VERSION, _text),
    ('release_date', OFFSET_RELEASE_DATE, 0x10, _release_date),
    ('boot_filename', OFFSET_BOOT_FILENAME, 0x10, _text),
    ('producer', OFFSET_PRODUCER, 0x10, _text),
    ('software_name', OFFSET_SOFTWARE_NAME, OFFSET_TOC - OFFSET_SOFTWARE_NAME, _text),
]


def decode_toc(data: bytes) -> List[TocEntry]:
    '''
    the first two tracks live in the low density area and have no slot,
    scanning stops at the first slot that is neither audio nor data
    '''
    toc = []
    for i in range(TOC_ENTRIES):
        offset = OFFSET_TOC + 4 + i * 4
        entry = TocEntry(
            start=data[offset] + (data[offset + 1] << 8) + (data[offset + 2] << 16) - PAUSE_DATA,
            type=data[offset + 3]
        )
        if not entry.is_audio_track() and not entry.is_data_track():
            break
        toc.append(entry)

    for current, following in zip(toc, toc[1:]):
        current.length = following.start - current.start - PAUSE_DATA
    if toc:
        toc[-1].length = LAST_SECTOR - toc[-1].start - PAUSE_DATA

    return toc


@dataclass
class IPBin:
    hardware_id: str = ''
    maker_id: str = ''
    crc: int = 0
    disc: int = 0
    total_discs: int = 0
    regions: Region = Region(b'')
    peripherals: int = 0
    product_number: str = ''
    product_version: str = ''
    release_date: Optional[date] = None
    boot_filename: str = ''
    producer: str = ''
    software_name: str = ''
    toc: List[TocEntry] = field(default_factory=list)
    raw: bytes = field(default=b'', repr=False)

    @classmethod
    def decode(cls, data: bytes) -> 'IPBin':
        if len(data) != IPBIN_LENGTH:
            raise IPBinLengthError(f'expected {IPBIN_LENGTH} bytes for IP.BIN, got {len(data)}')

        ip_bin = cls(raw=bytes(data))
        for attribute, offset, length, decoder in IPBIN_FIELDS:
            value = decoder(ip_bin.raw[offset:offset + length])
            if isinstance(attribute, tuple):
                for name, part in zip(attribute, value):
                    setattr(ip_bin, name, part)
            else:
                setattr(ip_bin, attribute, value)

        ip_bin.toc = decode_toc(ip_bin.raw)
        logger.debug(f'decoded IP.BIN for {ip_bin.product_number} with {len(ip_bin.toc)} TOC entries')
        return ip_bin

    def has_peripheral(self, peripheral: Peripheral) -> bool:
        return peripheral.is_set(self.peripherals)

    def calculate_crc(self) -> int:
        # covers the product number and version
        return CRC16Context.calculate(self.raw[OFFSET_PRODUCT_NUMBER:OFFSET_RELEASE_DATE])

    def verify_crc(self) -> bool:
        return self.calculate_crc() == self.crc
