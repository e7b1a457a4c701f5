"""
Encoding of raw elements into the binary map container.
"""

import logging

from ..errors import MapWriteError
from .binary import BinaryWriter
from .lookup import StringTable
from .nodes import RawElement, RawMap
from .reader import MAP_HEADER
from .values import encode_value

MAX_ATTRIBUTES = 0xFF
MAX_CHILDREN = 0xFFFF


class MapWriter:
    """Writes one map container.

    The string table is always rebuilt from the tree being written, so the
    output depends only on the elements and never on the table a document
    was read with.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.writer = BinaryWriter()
        self.table = StringTable()

    def write_map(self, raw_map: RawMap) -> bytes:
        """Encode a raw map.

        Raises:
            MapWriteError: If a count or value does not fit the format
        """
        self.writer = BinaryWriter()
        self.table = StringTable.collect(raw_map.root)

        self.writer.write_string(MAP_HEADER)
        self.writer.write_string(raw_map.package)
        self.write_table()
        self.write_element(raw_map.root)

        self.logger.debug(
            f"Wrote map '{raw_map.package}': {len(self.table)} strings, {len(self.writer)} bytes"
        )
        return self.writer.getvalue()

    def write_table(self) -> None:
        self.writer.write_i16(len(self.table))
        for value in self.table:
            self.writer.write_string(value)

    def write_element(self, element: RawElement) -> None:
        if len(element.attributes) > MAX_ATTRIBUTES:
            raise MapWriteError(
                f"Element '{element.name}' has {len(element.attributes)} attributes "
                f"(maximum {MAX_ATTRIBUTES})"
            )
        if len(element.children) > MAX_CHILDREN:
            raise MapWriteError(
                f"Element '{element.name}' has {len(element.children)} children "
                f"(maximum {MAX_CHILDREN})"
            )

        self.writer.write_u16(self.table.index_of(element.name))
        self.writer.write_u8(len(element.attributes))
        for name, value in element.attributes.items():
            self.writer.write_u16(self.table.index_of(name))
            encode_value(value, self.writer, self.table)

        self.writer.write_u16(len(element.children))
        for child in element.children:
            self.write_element(child)


def write_raw_map(raw_map: RawMap) -> bytes:
    """Encode a raw map container."""
    return MapWriter().write_map(raw_map)
