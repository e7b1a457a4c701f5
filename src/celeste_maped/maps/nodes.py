"""
Wire-level element nodes.

RawElement is both the untyped shape every element has on disk and the
fallback stored for elements no registered type claims.
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from .values import PyValue, Value, display_text


@dataclass
class RawElement:
    """An element exactly as stored in the container.

    Attributes:
        name: Element name
        attributes: Attribute cells in file order (names are unique)
        children: Child elements in file order
    """

    name: str
    attributes: dict[str, Value] = field(default_factory=dict)
    children: list["RawElement"] = field(default_factory=list)

    def get(self, name: str) -> Optional[Value]:
        return self.attributes.get(name)

    def get_value(self, name: str, default: Optional[PyValue] = None) -> Optional[PyValue]:
        """Python payload of an attribute, or default when absent."""
        value = self.attributes.get(name)
        return value.value if value is not None else default

    def set(self, name: str, value: PyValue) -> None:
        """Set an attribute, keeping the existing tag when the payload still fits."""
        current = self.attributes.get(name)
        self.attributes[name] = Value.infer(value, current.kind if current else None)

    def find_child(self, name: str) -> Optional["RawElement"]:
        for child in self.children:
            if child.name == name:
                return child
        return None

    def find_children(self, name: str) -> list["RawElement"]:
        return [child for child in self.children if child.name == name]

    def walk(self) -> Iterator["RawElement"]:
        """Depth-first pre-order iteration over this element and its descendants."""
        yield self
        for child in self.children:
            yield from child.walk()

    def copy(self) -> "RawElement":
        """Deep copy; Value cells are immutable and shared."""
        return RawElement(
            self.name,
            dict(self.attributes),
            [child.copy() for child in self.children],
        )

    def to_dict(self) -> dict[str, Any]:
        """Nested dict form used by the JSON export."""
        result: dict[str, Any] = {"name": display_text(self.name)}
        if self.attributes:
            result["attributes"] = {
                display_text(name): value.to_json() for name, value in self.attributes.items()
            }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass
class RawMap:
    """Untyped map container: package name plus the root element."""

    package: str
    root: RawElement
