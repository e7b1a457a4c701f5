"""
Celeste map files (.bin).

Reading goes container bytes -> RawMap -> typed MapDocument; writing goes
the other way and always rebuilds the string table.

Usage:
    from celeste_maped.maps import MapManager

    manager = MapManager()
    document = manager.read_file("1-ForsakenCity.bin")
    for room in document.rooms:
        ...
    manager.write_file("out.bin", document)
"""

from .document import MapDocument
from .export import export_json
from .lookup import StringTable
from .manager import MapManager
from .nodes import RawElement, RawMap
from .parser import DecodeContext, ElementEncoder, ElementParser
from .reader import MAP_HEADER, MapReader, read_raw_map
from .registry import ElementHandler, ElementRegistry, default_registry
from .sources import DirectorySource, EntrySource
from .values import AttrType, Value, ValueKind
from .writer import MapWriter, write_raw_map

__all__ = [
    "MapDocument",
    "MapManager",
    "RawElement",
    "RawMap",
    "StringTable",
    "DecodeContext",
    "ElementEncoder",
    "ElementParser",
    "MAP_HEADER",
    "MapReader",
    "MapWriter",
    "read_raw_map",
    "write_raw_map",
    "export_json",
    "ElementHandler",
    "ElementRegistry",
    "default_registry",
    "EntrySource",
    "DirectorySource",
    "AttrType",
    "Value",
    "ValueKind",
]
