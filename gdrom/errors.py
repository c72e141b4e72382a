"""
exceptions raised by the gdrom package, grouped by the stage that raises them
"""


class GdromError(ValueError):
    pass


# descriptor parsing
class InvalidTrackError(GdromError):
    def __init__(self, line: str = ''):
        super().__init__(f'invalid track: {line!r}' if line else 'invalid track')
        self.line = line


# descriptor validation, one class per broken rule
class ValidationError(GdromError):
    message = 'invalid track layout'

    def __init__(self, detail: str = ''):
        super().__init__(f'{self.message}: {detail}' if detail else self.message)


class NotEnoughTracksError(ValidationError):
    message = 'not enough tracks'


class TooManyTracksError(ValidationError):
    message = 'too many tracks'


class InconsistentTracksError(ValidationError):
    message = 'inconsistent tracks'


class InvalidStartError(ValidationError):
    message = 'invalid start'


class InvalidTypeError(ValidationError):
    message = 'invalid track type'


class NonContinuousTracksError(ValidationError):
    message = 'non-continuous tracks'


class InvalidSectorSizeError(ValidationError):
    message = 'invalid sector size'


class FieldNotZeroError(ValidationError):
    message = 'field not zero'


# IP.BIN
class IPBinLengthError(GdromError):
    pass


class IPBinFormatError(GdromError):
    pass


# game images
class InvalidSizeError(GdromError):
    pass


class InvalidCueFileError(GdromError):
    pass


class InvalidCueTrackTypeError(GdromError):
    pass


class InvalidGameError(GdromError):
    pass


class InconsistentAudioTracksError(GdromError):
    pass
