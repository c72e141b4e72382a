# conventional extension of the track layout descriptor
EXTENSION = '.gdi'

# every track is stored as raw 2352 byte sectors
SECTOR_SIZE = 2352

# track three opens the high density area
TRACK_THREE_START = 45000

MIN_TRACKS = 3
MAX_TRACKS = 99

# field positions on a track line
TRACK_NUMBER = 0
TRACK_START = 1
TRACK_TYPE = 2
TRACK_SECTOR_SIZE = 3
TRACK_NAME = 4
TRACK_ZERO = 5
TRACK_FIELDS = 6

QUOTE = '"'
