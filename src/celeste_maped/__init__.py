"""
celeste_maped: Celeste map and save file engine

Reads, edits and writes Celeste binary maps without losing content it does
not understand, and reads, merges and writes save files.
"""

__version__ = "0.1.0"
__author__ = "celeste_maped Contributors"

from .errors import CelesteFormatError
from .maps import ElementRegistry, MapDocument, MapManager, default_registry
from .saves import SaveData, merge_saves, read_save, write_save
from .utils.logging_config import setup_logging

__all__ = [
    'CelesteFormatError',
    'ElementRegistry',
    'MapDocument',
    'MapManager',
    'default_registry',
    'SaveData',
    'merge_saves',
    'read_save',
    'write_save',
    'setup_logging',
]
