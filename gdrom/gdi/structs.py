from dataclasses import dataclass, field, replace
from enum import IntEnum, IntFlag
from typing import List

from gdrom.errors import ValidationError

from .constants import SECTOR_SIZE


class TrackType(IntEnum):
    AUDIO = 0
    DATA = 4


class GdiFlag(IntFlag):
    NONE = 0
    # columns are not padded to a common width
    TRIM_WHITESPACE = 1


@dataclass
class Track:
    number: int = 0
    start: int = 0
    type: int = TrackType.DATA
    sector_size: int = SECTOR_SIZE
    # path of the track payload, relative to the descriptor
    name: str = ""
    zero: int = 0

    def is_audio_track(self) -> bool:
        return self.type == TrackType.AUDIO

    def is_data_track(self) -> bool:
        return self.type == TrackType.DATA


@dataclass
class GdiFile:
    count: int = 0
    tracks: List[Track] = field(default_factory=list)
    # formatting preference only, two layouts differing in flags are equal
    flags: GdiFlag = field(default=GdiFlag.NONE, compare=False)

    def copy(self) -> 'GdiFile':
        return replace(self, tracks=[replace(track) for track in self.tracks])

    def validate(self):
        from .utilities import validate
        validate(self)

    def is_valid(self) -> bool:
        try:
            self.validate()
        except ValidationError:
            return False
        return True
