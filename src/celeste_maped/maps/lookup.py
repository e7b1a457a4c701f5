"""
The shared string table of a map container.

Element names, attribute names and LOOKUP values are stored as u16 indices
into this table.
"""

import logging
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

from ..errors import CorruptStringTableError, MapWriteError
from .values import ValueKind

if TYPE_CHECKING:
    from .nodes import RawElement

logger = logging.getLogger(__name__)

# The game reads the table size with ReadInt16.
MAX_TABLE_SIZE = 0x7FFF


class StringTable:
    """Ordered string table.

    A table read from a file is frozen right after decoding. A table built for
    writing is filled in first-use order by collect() and frozen before any
    index is written, so indices stay valid for the whole encode pass.
    """

    def __init__(self, strings: Iterable[str] = ()):
        self._strings: list[str] = []
        self._indices: dict[str, int] = {}
        self._frozen = False
        for value in strings:
            self._append(value)

    def _append(self, value: str) -> int:
        self._strings.append(value)
        # First occurrence wins when a file carries duplicates
        return self._indices.setdefault(value, len(self._strings) - 1)

    def __len__(self) -> int:
        return len(self._strings)

    def __iter__(self) -> Iterator[str]:
        return iter(self._strings)

    def __contains__(self, value: object) -> bool:
        return value in self._indices

    def __repr__(self) -> str:
        return f"StringTable({len(self)} strings, frozen={self._frozen})"

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Forbid further additions."""
        self._frozen = True

    def get(self, index: int, offset: Optional[int] = None) -> str:
        """Resolve an index.

        Raises:
            CorruptStringTableError: If index is out of range
        """
        if not 0 <= index < len(self._strings):
            raise CorruptStringTableError(index, len(self._strings), offset)
        return self._strings[index]

    def add(self, value: str) -> int:
        """Return the index of value, appending it when missing.

        Raises:
            MapWriteError: If the table is frozen or full
        """
        index = self._indices.get(value)
        if index is not None:
            return index
        if self._frozen:
            raise MapWriteError(f"String {value!r} is not in the frozen string table")
        if len(self._strings) >= MAX_TABLE_SIZE:
            raise MapWriteError(f"String table exceeds {MAX_TABLE_SIZE} entries")
        return self._append(value)

    def index_of(self, value: str) -> int:
        """Index of an existing string (adds it while the table is still open)."""
        return self.add(value)

    @classmethod
    def collect(cls, root: "RawElement") -> "StringTable":
        """Build a frozen table in first-use order.

        The walk is depth-first pre-order: the element name, then every
        attribute name followed by its value when the value is a LOOKUP
        cell, then the children.
        """
        table = cls()
        stack = [root]
        while stack:
            element = stack.pop()
            table.add(element.name)
            for name, value in element.attributes.items():
                table.add(name)
                if value.kind == ValueKind.LOOKUP:
                    table.add(str(value.value))
            stack.extend(reversed(element.children))
        table.freeze()
        logger.debug(f"Collected string table with {len(table)} entries")
        return table
