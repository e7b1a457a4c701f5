"""
Decoding of the binary map container into raw elements.
"""

import logging

from ..errors import (
    BadMagicError,
    CorruptStringTableError,
    MapReadError,
    StructuralMismatchError,
)
from .binary import BinaryReader
from .lookup import StringTable
from .nodes import RawElement, RawMap
from .values import Value, decode_value

MAP_HEADER = "CELESTE MAP"


class MapReader:
    """Reads one map container.

    Layout: header string, package name string, string table (i16 count
    followed by strings), then the root element. An element is a u16 name
    index, a u8 attribute count, the attributes (u16 name index plus a
    value cell), a u16 child count and the children.
    """

    def __init__(self, data: bytes, allow_trailing_data: bool = False):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.reader = BinaryReader(data)
        self.allow_trailing_data = allow_trailing_data
        self.table = StringTable()

    def read_map(self) -> RawMap:
        """Decode the whole buffer.

        Returns:
            RawMap with the package name and root element

        Raises:
            BadMagicError: If the header string is wrong
            MalformedPrimitiveError: If a primitive is truncated or invalid
            CorruptStringTableError: If an index points outside the table
            StructuralMismatchError: If bytes remain after the root element or an
                element repeats an attribute name
        """
        self.read_header()
        package = self.reader.read_string()
        self.table = self.read_table()
        root = self.read_element()

        if not self.reader.at_end():
            message = (
                f"{self.reader.remaining} trailing byte(s) after root element "
                f"at offset {self.reader.offset}"
            )
            if not self.allow_trailing_data:
                raise StructuralMismatchError(message)
            self.logger.warning(f"Ignoring {message}")

        self.logger.debug(
            f"Read map '{package}': {len(self.table)} strings, root '{root.name}'"
        )
        return RawMap(package, root)

    def read_header(self) -> None:
        try:
            header = self.reader.read_string()
        except MapReadError as e:
            raise BadMagicError(repr(self.reader.data[:len(MAP_HEADER) + 1])) from e
        if header != MAP_HEADER:
            raise BadMagicError(header)

    def read_table(self) -> StringTable:
        offset = self.reader.offset
        count = self.reader.read_i16()
        if count < 0:
            raise CorruptStringTableError(count, 0, offset)
        table = StringTable(self.reader.read_string() for _ in range(count))
        table.freeze()
        return table

    def read_name(self) -> str:
        offset = self.reader.offset
        return self.table.get(self.reader.read_u16(), offset)

    def read_value(self) -> Value:
        tag = self.reader.read_u8()
        return decode_value(tag, self.reader, self.table)

    def read_element(self) -> RawElement:
        element = RawElement(self.read_name())

        attribute_count = self.reader.read_u8()
        for _ in range(attribute_count):
            offset = self.reader.offset
            name = self.read_name()
            if name in element.attributes:
                raise StructuralMismatchError(
                    f"Duplicate attribute '{name}' on element '{element.name}' "
                    f"at offset {offset}"
                )
            element.attributes[name] = self.read_value()

        child_count = self.reader.read_u16()
        for _ in range(child_count):
            element.children.append(self.read_element())

        return element


def read_raw_map(data: bytes, allow_trailing_data: bool = False) -> RawMap:
    """Decode a map container without typing any element."""
    return MapReader(data, allow_trailing_data).read_map()
