"""
just enough cue sheet handling to rebuild a track layout from a redump style
sheet, and to emit one for a converted image
"""
import re
from dataclasses import dataclass, field
from typing import List, Union

from gdrom.gdi.constants import TRACK_THREE_START
from gdrom.gdi.structs import GdiFile

CUE_DATATYPE_AUDIO = "AUDIO"
CUE_DATATYPE_MODE1_2352 = "MODE1/2352"

REGEX_FILE = r'^\s*FILE\s+(?:"(?P<quoted>[^"]*)"|(?P<plain>\S+))\s+(?P<filetype>\S+)'
REGEX_TRACK = r'^\s*TRACK\s+(?P<number>\d+)\s+(?P<datatype>\S+)'
REGEX_COMMENT = r'^\s*REM\b'


@dataclass
class CueTrack:
    number: int = 0
    data_type: str = ""


@dataclass
class CueFile:
    name: str = ""
    file_type: str = "BINARY"
    tracks: List[CueTrack] = field(default_factory=list)


def parse_cue_sheet(text: Union[str, bytes]) -> List[CueFile]:
    '''
    collects FILE entries and the TRACK lines under them, everything
    else (indexes, pregaps, comments) is ignored
    '''
    if isinstance(text, bytes):
        text = text.decode('utf-8-sig')

    regex_file = re.compile(REGEX_FILE, re.IGNORECASE)
    regex_track = re.compile(REGEX_TRACK, re.IGNORECASE)
    regex_comment = re.compile(REGEX_COMMENT, re.IGNORECASE)

    files = []
    for line in text.splitlines():
        if regex_comment.match(line):
            continue
        fm = regex_file.match(line)
        if fm:
            name = fm.group('quoted') if fm.group('quoted') is not None else fm.group('plain')
            files.append(CueFile(name=name, file_type=fm.group('filetype').upper()))
            continue
        tm = regex_track.match(line)
        if tm and files:
            files[-1].tracks.append(CueTrack(number=int(tm.group('number')),
                                             data_type=tm.group('datatype').upper()))
    return files


def marshal_cue_sheet(gdi_file: GdiFile, trim_whitespace: bool = False) -> str:
    track_indent, index_indent = ('', '') if trim_whitespace else ('  ', '    ')
    lines = []
    for track in gdi_file.tracks:
        if track.number == 1:
            lines.append('REM SINGLE-DENSITY AREA')
        elif track.start == TRACK_THREE_START and track.number == 3:
            lines.append('REM HIGH-DENSITY AREA')
        data_type = CUE_DATATYPE_AUDIO if track.is_audio_track() else CUE_DATATYPE_MODE1_2352
        lines.append(f'FILE "{track.name}" BINARY')
        lines.append(f'{track_indent}TRACK {track.number:02d} {data_type}')
        lines.append(f'{index_indent}INDEX 01 00:00:00')
    return '\n'.join(lines) + '\n'
