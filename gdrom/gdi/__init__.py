from .constants import EXTENSION, SECTOR_SIZE, TRACK_THREE_START
from .structs import GdiFile, GdiFlag, Track, TrackType
from .toc import marshal_text, unmarshal_text
