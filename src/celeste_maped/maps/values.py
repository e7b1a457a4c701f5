"""
Typed value cells stored in element attributes.

A Value keeps the tag it was read with, so an attribute that is never touched
is written back with the same tag and payload width.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Optional, Union

from ..errors import MapWriteError, UnknownValueTagError

if TYPE_CHECKING:
    from .binary import BinaryReader, BinaryWriter
    from .lookup import StringTable

PyValue = Union[bool, int, float, str]


class ValueKind(IntEnum):
    """Tag byte written before every attribute value."""

    BOOL = 0
    BYTE = 1
    SHORT = 2
    INT = 3
    FLOAT = 4
    LOOKUP = 5
    """String stored as an index into the string table."""

    STRING = 6
    """String stored inline."""

    RLE_STRING = 7
    """Run-length encoded inline string (tile grids)."""


INTEGER_KINDS = frozenset({ValueKind.BYTE, ValueKind.SHORT, ValueKind.INT})
NUMERIC_KINDS = INTEGER_KINDS | {ValueKind.FLOAT}
TEXT_KINDS = frozenset({ValueKind.LOOKUP, ValueKind.STRING, ValueKind.RLE_STRING})

_INTEGER_RANGES = {
    ValueKind.BYTE: (0, 0xFF),
    ValueKind.SHORT: (-0x8000, 0x7FFF),
    ValueKind.INT: (-0x80000000, 0x7FFFFFFF),
}

_DECIMAL = re.compile(r"-?[0-9]+")


def display_text(text: str) -> str:
    """Text with bytes that were not valid UTF-8 shown as U+FFFD."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def parse_decimal(text: str) -> Optional[int]:
    """Integer value of a plain ASCII decimal string, or None."""
    if _DECIMAL.fullmatch(text) is None:
        return None
    return int(text)


class AttrType(Enum):
    """Python-side type an element requests for one of its attributes."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STR = "str"
    CHAR = "char"
    """A single tile character; the game packs digit characters as integers."""


def _fits(kind: ValueKind, value: int) -> bool:
    low, high = _INTEGER_RANGES[kind]
    return low <= value <= high


def smallest_integer_kind(value: int) -> ValueKind:
    """Pick the narrowest integer tag the game would use for value."""
    for kind in (ValueKind.BYTE, ValueKind.SHORT, ValueKind.INT):
        if _fits(kind, value):
            return kind
    raise MapWriteError(f"Integer {value} does not fit in a 32-bit value cell")


@dataclass(frozen=True)
class Value:
    """A tagged attribute value.

    Attributes:
        kind: Tag used on disk
        value: Python payload (bool, int, float or str depending on kind)
    """

    kind: ValueKind
    value: PyValue

    def __repr__(self) -> str:
        return f"Value({self.kind.name}, {self.value!r})"

    # === TYPED ACCESS ===

    def as_bool(self) -> Optional[bool]:
        if self.kind == ValueKind.BOOL:
            return bool(self.value)
        return None

    def as_int(self) -> Optional[int]:
        if self.kind in INTEGER_KINDS:
            return int(self.value)
        return None

    def as_float(self) -> Optional[float]:
        """Floats also accept integer cells; the game packs integral floats as integers."""
        if self.kind in NUMERIC_KINDS:
            return float(self.value)
        return None

    def as_str(self) -> Optional[str]:
        if self.kind in TEXT_KINDS:
            return str(self.value)
        return None

    def as_char(self) -> Optional[str]:
        if self.kind in TEXT_KINDS:
            return str(self.value)
        if self.kind in INTEGER_KINDS:
            return str(self.value)
        return None

    def convert(self, attr_type: AttrType) -> Optional[PyValue]:
        """Return the payload as attr_type, or None when the kind does not match."""
        if attr_type is AttrType.BOOL:
            return self.as_bool()
        if attr_type is AttrType.INT:
            return self.as_int()
        if attr_type is AttrType.FLOAT:
            return self.as_float()
        if attr_type is AttrType.STR:
            return self.as_str()
        return self.as_char()

    def to_json(self) -> dict:
        """Plain dict form used by the JSON export.

        Bytes that were not valid UTF-8 are shown as U+FFFD.
        """
        value = self.value
        if isinstance(value, str):
            value = display_text(value)
        return {"kind": self.kind.name.lower(), "value": value}

    # === CONSTRUCTION ===

    @classmethod
    def infer(
        cls,
        value: PyValue,
        hint: Optional[ValueKind] = None,
        rle: bool = False,
    ) -> "Value":
        """Build a Value for a Python payload.

        When hint is given and the payload can still be stored with that
        tag, the hint wins. Otherwise the game's packing rules apply: the
        narrowest integer tag, FLOAT for floats and LOOKUP for strings
        (RLE_STRING when rle is set).

        Args:
            value: Python payload
            hint: Tag the attribute was originally read with
            rle: Whether new strings should be run-length encoded

        Returns:
            Tagged Value
        """
        if hint is not None:
            hinted = cls._with_hint(value, hint)
            if hinted is not None:
                return hinted

        if isinstance(value, bool):
            return cls(ValueKind.BOOL, value)
        if isinstance(value, int):
            return cls(smallest_integer_kind(value), value)
        if isinstance(value, float):
            return cls(ValueKind.FLOAT, value)
        if isinstance(value, str):
            return cls(ValueKind.RLE_STRING if rle else ValueKind.LOOKUP, value)
        raise MapWriteError(f"Cannot store {type(value).__name__} in a value cell")

    @classmethod
    def _with_hint(cls, value: PyValue, hint: ValueKind) -> Optional["Value"]:
        if hint == ValueKind.BOOL:
            return cls(hint, value) if isinstance(value, bool) else None

        if hint in INTEGER_KINDS:
            number: Optional[int] = None
            if isinstance(value, bool):
                return None
            if isinstance(value, int):
                number = value
            elif isinstance(value, float) and math.isfinite(value) and value.is_integer():
                number = int(value)
            elif isinstance(value, str):
                number = parse_decimal(value)
            if number is not None and _fits(hint, number):
                return cls(hint, number)
            return None

        if hint == ValueKind.FLOAT:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return cls(hint, float(value))
            return None

        if isinstance(value, str):
            return cls(hint, value)
        return None


def decode_value(tag: int, reader: "BinaryReader", table: "StringTable") -> Value:
    """Decode the payload that follows a tag byte.

    Args:
        tag: Tag byte already consumed from the reader
        reader: Reader positioned at the payload
        table: String table used to resolve LOOKUP cells

    Returns:
        Decoded Value

    Raises:
        UnknownValueTagError: If tag is not a known ValueKind
        MalformedPrimitiveError: If the payload is truncated or invalid
        CorruptStringTableError: If a LOOKUP index is out of range
    """
    try:
        kind = ValueKind(tag)
    except ValueError:
        raise UnknownValueTagError(reader.offset - 1, tag) from None

    if kind == ValueKind.BOOL:
        return Value(kind, reader.read_bool())
    if kind == ValueKind.BYTE:
        return Value(kind, reader.read_u8())
    if kind == ValueKind.SHORT:
        return Value(kind, reader.read_i16())
    if kind == ValueKind.INT:
        return Value(kind, reader.read_i32())
    if kind == ValueKind.FLOAT:
        return Value(kind, reader.read_f32())
    if kind == ValueKind.LOOKUP:
        offset = reader.offset
        return Value(kind, table.get(reader.read_u16(), offset))
    if kind == ValueKind.STRING:
        return Value(kind, reader.read_string())
    return Value(kind, reader.read_rle_string())


def encode_value(value: Value, writer: "BinaryWriter", table: "StringTable") -> None:
    """Write a tag byte followed by the payload of value."""
    kind = value.kind
    writer.write_u8(int(kind))

    if kind == ValueKind.BOOL:
        writer.write_bool(bool(value.value))
    elif kind == ValueKind.BYTE:
        writer.write_u8(int(value.value))
    elif kind == ValueKind.SHORT:
        writer.write_i16(int(value.value))
    elif kind == ValueKind.INT:
        writer.write_i32(int(value.value))
    elif kind == ValueKind.FLOAT:
        writer.write_f32(float(value.value))
    elif kind == ValueKind.LOOKUP:
        writer.write_u16(table.index_of(str(value.value)))
    elif kind == ValueKind.STRING:
        writer.write_string(str(value.value))
    else:
        writer.write_rle_string(str(value.value))
