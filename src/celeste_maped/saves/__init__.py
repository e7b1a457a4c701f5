"""
Celeste save files (.celeste XML).

Usage:
    from celeste_maped.saves import merge_saves, read_save, write_save

    result = merge_saves(read_save(first), read_save(second))
    for note in result.notes:
        print(note.category, note.message)
    data = write_save(result.save)
"""

from .document import read_save, read_save_file, write_save, write_save_file
from .fields import XML_HEADER, XSD_URL, XSI_URL, ExtensionBlock
from .merge import MergeNote, MergeResult, merge_saves
from .models import AreaMode, AreaModeType, AreaRef, AreaStats, Assists, DashMode, LevelSetStats
from .save_data import SaveData

__all__ = [
    "SaveData",
    "AreaMode",
    "AreaModeType",
    "AreaRef",
    "AreaStats",
    "Assists",
    "DashMode",
    "LevelSetStats",
    "ExtensionBlock",
    "MergeNote",
    "MergeResult",
    "merge_saves",
    "read_save",
    "read_save_file",
    "write_save",
    "write_save_file",
    "XML_HEADER",
    "XSI_URL",
    "XSD_URL",
]
