import os
import pickle
from typing import BinaryIO

import inquirer

# chunk size used when streaming track payloads
COPY_BUFFER = 64 * 1024


def read_exactly(stream: BinaryIO, length: int) -> bytes:
    data = stream.read(length)
    if len(data) != length:
        raise EOFError(f'expected {length} bytes, read {len(data)}')
    return data


def copy_n(dst: BinaryIO, src: BinaryIO, length: int) -> int:
    '''
    copies exactly length bytes from src to dst, a short source is an error
    '''
    remaining = length
    while remaining > 0:
        chunk = src.read(min(COPY_BUFFER, remaining))
        if not chunk:
            raise EOFError(f'source ended {remaining} bytes early')
        dst.write(chunk)
        remaining -= len(chunk)
    return length


def discard(src: BinaryIO, length: int) -> int:
    remaining = length
    while remaining > 0:
        chunk = src.read(min(COPY_BUFFER, remaining))
        if not chunk:
            raise EOFError(f'source ended {remaining} bytes early')
        remaining -= len(chunk)
    return length


'''
interactive session helpers
'''
def save_data(data_to_save, name, directory):
    with open(directory+os.sep+name+'.cache', 'wb') as f:
        pickle.dump(data_to_save, f)


def restore_dict(name, directory='.'):
    try:
        with open(directory+os.sep+name+'.cache', 'rb') as f:
            return pickle.load(f)
    except (OSError, pickle.UnpicklingError, EOFError):
        return {}


def list_menu(name, choices, message):
    questions = [inquirer.List(name, message=message, choices=choices)]
    return inquirer.prompt(questions)
