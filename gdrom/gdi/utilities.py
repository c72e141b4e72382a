from typing import List

from gdrom.errors import (
    InvalidTrackError, NotEnoughTracksError, TooManyTracksError,
    InconsistentTracksError, InvalidStartError, InvalidTypeError,
    NonContinuousTracksError, InvalidSectorSizeError, FieldNotZeroError
)
from .constants import *
from .structs import TrackType


def split_fields(line: str) -> List[str]:
    '''
    splits a track line on whitespace, a double quoted run counts as a
    single field so names can contain spaces. the quotes are kept
    '''
    fields = []
    current = []
    within_quotes = False
    for c in line:
        if c == QUOTE:
            within_quotes = not within_quotes
        if c.isspace() and not within_quotes:
            if current:
                fields.append(''.join(current))
                current = []
            continue
        current.append(c)
    if current:
        fields.append(''.join(current))

    if within_quotes or len(fields) != TRACK_FIELDS:
        raise InvalidTrackError(line)

    return fields


def validate(gdi_file):
    '''
    checks the layout rules in a fixed order and raises on the first one broken
    '''
    if gdi_file.count < MIN_TRACKS:
        raise NotEnoughTracksError(f'{gdi_file.count} < {MIN_TRACKS}')

    if gdi_file.count > MAX_TRACKS:
        raise TooManyTracksError(f'{gdi_file.count} > {MAX_TRACKS}')

    if len(gdi_file.tracks) != gdi_file.count:
        raise InconsistentTracksError(f'expected {gdi_file.count}, found {len(gdi_file.tracks)}')

    for i, track in enumerate(gdi_file.tracks):
        if i == 2 and track.start != TRACK_THREE_START:
            raise InvalidStartError(f'track 3 starts at {track.start}, not {TRACK_THREE_START}')
        if i in (0, 2) and track.type != TrackType.DATA:
            raise InvalidTypeError(f'track {i + 1} is type {int(track.type)}, expected data')
        if i == 1 and track.type != TrackType.AUDIO:
            raise InvalidTypeError(f'track 2 is type {int(track.type)}, expected audio')

        if track.number != i + 1:
            raise NonContinuousTracksError(f'expected track {i + 1}, found {track.number}')

        if track.sector_size != SECTOR_SIZE:
            raise InvalidSectorSizeError(f'track {track.number} uses {track.sector_size}')

        if track.zero != 0:
            raise FieldNotZeroError(f'track {track.number} has {track.zero}')
