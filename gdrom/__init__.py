from gdrom.game import Game
from gdrom.ifilter import DirectoryFilter, ZipFileFilter
from gdrom.ipbin import IPBin, Peripheral, Region
from gdrom.plugin_register import PluginRegister
from gdrom.writer import DirectoryWriter, WriterConfig, ZipFileWriter, gdemu_track_name

__version__ = '0.1'
