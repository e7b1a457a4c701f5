"""
Exception hierarchy for celeste_maped.

Every error raised by the map codec and the save model derives from
CelesteFormatError, so callers can catch a single type at their boundary.
"""

from typing import Optional


class CelesteFormatError(Exception):
    """Base class for all map and save format errors."""
    pass


# === MAP READING ===


class MapReadError(CelesteFormatError):
    """Raised when a binary map container cannot be decoded."""
    pass


class MalformedPrimitiveError(MapReadError):
    """A scalar primitive could not be read at the given byte offset.

    Attributes:
        offset: Byte offset where the primitive starts
        expected: Description of what the reader expected
        found: Description of what was actually there
    """

    def __init__(self, offset: int, expected: str, found: str):
        self.offset = offset
        self.expected = expected
        self.found = found
        super().__init__(f"At byte {offset}: expected {expected}, found {found}")


class UnexpectedEofError(MalformedPrimitiveError):
    """The buffer ended in the middle of a primitive."""
    pass


class UnknownValueTagError(MalformedPrimitiveError):
    """A value cell carried a tag byte outside the known range."""

    def __init__(self, offset: int, tag: int):
        self.tag = tag
        super().__init__(offset, "value tag 0-7", f"tag {tag}")


class CorruptStringTableError(MapReadError):
    """A string table index points outside the table."""

    def __init__(self, index: int, size: int, offset: Optional[int] = None):
        self.index = index
        self.size = size
        self.offset = offset
        location = f"At byte {offset}: " if offset is not None else ""
        super().__init__(
            f"{location}string table index {index} out of range (table has {size} entries)"
        )


class StructuralMismatchError(MapReadError):
    """The container framing does not match the map layout."""
    pass


class BadMagicError(StructuralMismatchError):
    """The buffer does not start with the map header string."""

    def __init__(self, found: str):
        self.found = found
        super().__init__(f"Invalid file header, expected 'CELESTE MAP', found {found!r}")


# === MAP WRITING ===


class MapWriteError(CelesteFormatError):
    """Raised when a document cannot be represented in the binary format."""
    pass


# === ELEMENTS AND REGISTRY ===


class ElementParseError(CelesteFormatError):
    """A registered element decoder rejected the node it was given."""

    def __init__(self, element: str, message: str):
        self.element = element
        super().__init__(f"Element '{element}': {message}")


class ValueKindError(ElementParseError):
    """An attribute holds a value of the wrong kind for the requested type."""

    def __init__(self, element: str, attribute: str, expected: str, found: str):
        self.attribute = attribute
        self.expected = expected
        self.found = found
        super().__init__(
            element, f"attribute '{attribute}' expected {expected}, found {found}"
        )


class RegistryError(CelesteFormatError):
    """Base class for element registry misconfiguration."""
    pass


class RegistryCollisionError(RegistryError):
    """A second handler was registered for an existing element name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Element '{name}' is already registered")


class RegistryFrozenError(RegistryError):
    """A registration was attempted after the registry was frozen."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cannot register '{name}': registry is frozen")


# === SAVES ===


class SchemaViolationError(CelesteFormatError):
    """A save file is missing a required field or holds an unparsable value."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")
