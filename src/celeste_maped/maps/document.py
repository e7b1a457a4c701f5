"""
Map document: the typed (or partially typed) element tree of one map file.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .elements import Backgrounds, Filler, Foregrounds, Levels, MapRoot, Room, Styles
from .elements.base import DynElement
from .nodes import RawElement, RawMap
from .parser import DecodeContext, decode_element, encode_element
from .reader import read_raw_map
from .registry import ElementRegistry, default_registry
from .writer import write_raw_map

logger = logging.getLogger(__name__)


def _find_child(element: Any, name: str) -> Optional[DynElement]:
    finder = getattr(element, "find_child", None)
    return finder(name) if finder is not None else None


def _find_children(element: Any, name: str) -> list[DynElement]:
    finder = getattr(element, "find_children", None)
    return finder(name) if finder is not None else []


def room_name_of(room: DynElement) -> Optional[str]:
    """Name of a typed or raw room."""
    if isinstance(room, Room):
        return room.room_name
    if isinstance(room, RawElement):
        value = room.get_value("name")
        return str(value) if value is not None else None
    return None


@dataclass
class MapDocument:
    """A decoded map.

    Attributes:
        package: Package name stored in the container header
        root: Root element, typed when its name is registered
        warnings: Messages for registered elements that were kept raw
    """

    package: str
    root: DynElement
    warnings: list[str] = field(default_factory=list, compare=False)

    # === DECODING AND ENCODING ===

    @classmethod
    def decode(
        cls,
        data: bytes,
        registry: Optional[ElementRegistry] = None,
        strict: bool = False,
        allow_trailing_data: bool = False,
    ) -> "MapDocument":
        """Decode a map container.

        Args:
            data: Whole file contents
            registry: Element types to resolve; the built-in set when None
            strict: Raise ElementParseError instead of keeping failed elements raw
            allow_trailing_data: Tolerate bytes after the root element

        Raises:
            MapReadError: If the container is malformed
            ElementParseError: If strict and a registered element fails to decode
        """
        raw_map = read_raw_map(data, allow_trailing_data)
        return cls.from_raw(raw_map, registry, strict)

    @classmethod
    def from_raw(
        cls,
        raw_map: RawMap,
        registry: Optional[ElementRegistry] = None,
        strict: bool = False,
    ) -> "MapDocument":
        if registry is None:
            registry = default_registry()
        context = DecodeContext(registry, strict)
        root = decode_element(raw_map.root, context)
        if context.warnings:
            logger.info(
                f"Map '{raw_map.package}' decoded with {len(context.warnings)} raw fallback(s)"
            )
        return cls(raw_map.package, root, context.warnings)

    def to_raw(self, registry: Optional[ElementRegistry] = None) -> RawMap:
        return RawMap(self.package, encode_element(self.root, registry))

    def encode(self, registry: Optional[ElementRegistry] = None) -> bytes:
        """Encode the document; identical documents give identical bytes.

        Raises:
            MapWriteError: If the tree does not fit the format
        """
        return write_raw_map(self.to_raw(registry))

    @classmethod
    def new(cls, package: str) -> "MapDocument":
        """An empty typed map with Filler, levels and Style."""
        root = MapRoot(
            children=[
                Filler(),
                Levels(),
                Styles(children=[Foregrounds(), Backgrounds()]),
            ]
        )
        return cls(package, root)

    # === ROOMS ===

    @property
    def levels(self) -> Optional[DynElement]:
        """The 'levels' element, typed or raw."""
        return _find_child(self.root, Levels.NAME)

    @property
    def rooms(self) -> list[DynElement]:
        """Every 'level' element in file order, typed or raw."""
        levels = self.levels
        if levels is None:
            return []
        return _find_children(levels, Room.NAME)

    def room(self, name: str) -> Optional[DynElement]:
        """First room called name, or None."""
        for room in self.rooms:
            if room_name_of(room) == name:
                return room
        return None

    def room_names(self) -> list[str]:
        return [name for name in map(room_name_of, self.rooms) if name is not None]

    def add_room(self, room: DynElement) -> None:
        """Append a room to the 'levels' element.

        Raises:
            ValueError: If the map has no 'levels' element
        """
        levels = self.levels
        if levels is None:
            raise ValueError(f"Map '{self.package}' has no '{Levels.NAME}' element")
        if isinstance(levels, RawElement):
            if not isinstance(room, RawElement):
                room = encode_element(room)
            levels.children.append(room)
        else:
            levels.append(room)  # type: ignore[union-attr]

    def remove_room(self, name: str) -> DynElement:
        """Remove the first room called name and return it.

        Raises:
            KeyError: If no room has that name
        """
        levels = self.levels
        room = self.room(name)
        if levels is None or room is None:
            raise KeyError(name)
        if isinstance(levels, RawElement):
            levels.children = [child for child in levels.children if child is not room]
        else:
            levels.remove(room)  # type: ignore[union-attr]
        return room
