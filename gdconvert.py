#!/usr/bin/env python3

""" gdconvert.py: Interactively convert Sega Dreamcast GD-ROM images between
Redump and GDEmu layouts.
"""
import os
import sys
import logging
import inquirer
from gdrom.utils import save_data, restore_dict, list_menu
from gdrom.plugin_register import PluginRegister
from gdrom.game import Game
from gdrom.ipbin import Peripheral
from gdrom.gdi.constants import EXTENSION
from gdrom.writer import DirectoryWriter, ZipFileWriter, WriterConfig, gdemu_track_name

try:
    # settings are saved next to the script
    script_dir = os.path.abspath(os.path.dirname(__file__))
except NameError:
    script_dir = os.getcwd()


__version__ = '0.1'

# Require at least Python 3.8
assert sys.version_info >= (3, 8)


settings = restore_dict('settings', script_dir)

menu_msgs = {'0' : 'Main Menu, select an option',
             'source' : 'Game image to read (directory or zip archive)',
             'dest' : 'Write the converted image as',
             'dest_dir' : 'Destination directory',
             'dest_zip' : 'Destination zip archive',
             'naming' : 'Track file naming',
             'trim' : 'Remove padding from the written descriptor?',
             'cue' : 'Also write a cue sheet?',
             'convert' : 'Begin converting?',
             'debug' : 'Show debug output?'
    }

menu_lists = {'0' : [('1. Show Image Information', 'info_function'),
                     ('2. Convert Image', 'convert_function'),
                     ('3. Exit', 'Exit')],
              'dest' : [('Directory', 'dir'),
                        ('Zip Archive', 'zip')],
              'naming' : [('GDEmu (trackNN.bin / trackNN.raw)', 'gdemu'),
                          ('Keep source names', 'keep')]
    }


def get_path(message, default=None):
    path_query = [inquirer.Path(name='path', message=message, default=default)]
    answer = inquirer.prompt(path_query)
    return answer['path'].rstrip(os.sep)


def open_source():
    '''
    asks for the source image and returns an opened Game and its filter
    '''
    source = get_path(menu_msgs['source'], settings.get('source'))
    image_filter = PluginRegister.get_instance().get_filter(source)
    if image_filter is None:
        print(f'{source} is not a directory or zip archive')
        return None, None
    image_filter.open()
    try:
        game = Game.open(image_filter)
    except Exception:
        image_filter.close()
        raise
    settings.update({'source' : source})
    return game, image_filter


def print_game_info(game):
    ip_bin = game.ip_bin
    if game.gdi_filename:
        print(f'\nLayout read from {game.gdi_filename}')
    else:
        print(f'\nLayout rebuilt from {game.cue_filename}')

    print('IP.BIN information:')
    print(f'Hardware ID: {ip_bin.hardware_id}')
    print(f'Maker ID: {ip_bin.maker_id}')
    print(f'CRC: {ip_bin.crc:04X} ({"valid" if ip_bin.verify_crc() else "invalid"})')
    print(f'Disc: {ip_bin.disc} of {ip_bin.total_discs}')
    regions = [name for name, permitted in (('Japan', ip_bin.regions.is_japan()),
                                            ('USA', ip_bin.regions.is_usa()),
                                            ('Europe', ip_bin.regions.is_europe())) if permitted]
    print(f'Regions: {", ".join(regions) if regions else "none"}')
    print(f'Product: {ip_bin.product_number} {ip_bin.product_version}')
    print(f'Release date: {ip_bin.release_date}')
    print(f'Boot file: {ip_bin.boot_filename}')
    print(f'Producer: {ip_bin.producer}')
    print(f'Software name: {ip_bin.software_name}')
    peripherals = [p.name for p in Peripheral if ip_bin.has_peripheral(p)]
    print('Peripherals: ' + ' '.join(peripherals))

    print('\nImage tracks:')
    print('Track  Type   Start    Bps   File')
    print('=================================================')
    for track in game.gdi_file.tracks:
        track_type = 'Audio' if track.is_audio_track() else 'Data'
        print(f'{track.number:<7}{track_type:<7}{track.start:<9}{track.sector_size:<6}{track.name}')

    print('\nIP.BIN TOC:')
    print('Start    Length   Type')
    print('=========================')
    for entry in ip_bin.toc:
        entry_type = 'Audio' if entry.is_audio_track() else 'Data'
        print(f'{entry.start:<9}{entry.length:<9}{entry_type}')
    print('')


def info_function():
    game, image_filter = open_source()
    if game is None:
        return
    try:
        print_game_info(game)
        print('Layout: ' + ('Redump' if game.is_redump() else 'GDEmu'))
    finally:
        image_filter.close()


def get_writer(config):
    dest_type = list_menu('dest', menu_lists['dest'], menu_msgs['dest'])['dest']
    if dest_type == 'zip':
        destination = get_path(menu_msgs['dest_zip'], settings.get('dest_zip'))
        settings.update({'dest_zip' : destination})
        return ZipFileWriter(destination, config)
    destination = get_path(menu_msgs['dest_dir'], settings.get('dest_dir'))
    settings.update({'dest_dir' : destination})
    return DirectoryWriter(destination, config)


def convert_function():
    game, image_filter = open_source()
    if game is None:
        return
    try:
        naming = list_menu('naming', menu_lists['naming'], menu_msgs['naming'])['naming']
        trim = inquirer.confirm(menu_msgs['trim'], default=settings.get('trim', False))
        cue = inquirer.confirm(menu_msgs['cue'], default=False)
        settings.update({'trim' : trim})

        base_name = game.ip_bin.product_number.replace(' ', '_') or 'disc'
        config = WriterConfig(
            gdi_file='disc'+EXTENSION if naming == 'gdemu' else base_name+EXTENSION,
            cue_file=base_name+'.cue' if cue else '',
            track_rename=gdemu_track_name if naming == 'gdemu' else None,
            trim_whitespace=trim
        )
        if not inquirer.confirm(menu_msgs['convert'], default=False):
            return
        with get_writer(config) as writer:
            layout = game.write(writer)
        print(f'Wrote {len(layout.tracks)} tracks')
        print(f'Read {image_filter.rx} bytes, wrote {writer.tx} bytes')
    finally:
        image_filter.close()


def main():
    debug = inquirer.confirm(menu_msgs['debug'], default=False)
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)

    complete = False
    while not complete:
        answer = list_menu('action', menu_lists['0'], menu_msgs['0'])
        if answer is None or answer['action'] == 'Exit':
            complete = True
            continue
        try:
            globals()[answer['action']]()
        except (OSError, EOFError, ValueError) as error:
            logging.error(f'{type(error).__name__}: {error}')
        save_data(settings, 'settings', script_dir)


if __name__ == '__main__':
    main()
