"""
Base classes for typed map elements.

A typed element satisfies the capability set the registry needs: a NAME,
from_raw(parser) and to_raw(encoder). SchemaElement derives both functions
from a declarative table of dataclass fields, so most element types only
declare their attributes.
"""

from abc import ABC, abstractmethod
from dataclasses import MISSING, dataclass, field, fields
from typing import Any, ClassVar, Optional, Type, TypeVar, Union

from ..nodes import RawElement
from ..parser import ElementEncoder, ElementParser
from ..values import AttrType, Value, ValueKind

ATTRIBUTE = "celeste_attribute"
NODES = "celeste_nodes"
CHILDREN = "celeste_children"

E = TypeVar("E", bound="MapElement")


class MapElement(ABC):
    """Capability interface of a typed element."""

    NAME: ClassVar[str]

    @classmethod
    @abstractmethod
    def from_raw(cls: Type[E], parser: ElementParser) -> E:
        """Build the element from a raw node."""

    @abstractmethod
    def to_raw(self, encoder: ElementEncoder) -> None:
        """Write the element's attributes and children into encoder."""

    @property
    def name(self) -> str:
        return self.NAME


DynElement = Union[MapElement, RawElement]
"""A child in a dynamic list: a typed element or the raw fallback."""


@dataclass(frozen=True)
class AttributeSpec:
    """How a dataclass field maps to an attribute."""

    name: str
    attr_type: AttrType
    optional: bool = False
    rle: bool = False


def attr(
    name: str,
    attr_type: AttrType,
    *,
    optional: bool = False,
    rle: bool = False,
    default: Any = MISSING,
) -> Any:
    """Declare a dataclass field stored as attribute name.

    Optional attributes default to None and are omitted when None. A
    required attribute may still carry a default for convenient
    construction; decoding always insists on its presence.
    """
    metadata = {ATTRIBUTE: AttributeSpec(name, attr_type, optional, rle)}
    if optional and default is MISSING:
        default = None
    if default is MISSING:
        return field(metadata=metadata)
    return field(default=default, metadata=metadata)


def node_list() -> Any:
    """Declare a field holding the element's 'node' children."""
    return field(default_factory=list, metadata={NODES: True})


def child_list() -> Any:
    """Declare a field holding all children as a dynamic list."""
    return field(default_factory=list, metadata={CHILDREN: True})


@dataclass(kw_only=True)
class SchemaElement(MapElement):
    """Element whose wire form is driven by its dataclass fields.

    Attributes no field claims are kept in extra_attributes and children no
    field claims in extra_children, so an element re-encodes without loss.
    The tag every claimed attribute was read with, the original attribute
    order and the original child order are remembered for re-encoding.
    """

    extra_attributes: dict[str, Value] = field(default_factory=dict)
    extra_children: list[RawElement] = field(default_factory=list)
    attribute_kinds: dict[str, ValueKind] = field(
        default_factory=dict, compare=False, repr=False
    )
    attribute_order: list[str] = field(default_factory=list, compare=False, repr=False)
    child_order: list[Optional[str]] = field(default_factory=list, compare=False, repr=False)
    """Owning field of every child as read; None marks an extra child."""

    @classmethod
    def from_raw(cls, parser: ElementParser) -> "SchemaElement":
        kwargs: dict[str, Any] = {}
        owners: dict[int, str] = {}
        for f in fields(cls):
            spec = f.metadata.get(ATTRIBUTE)
            if spec is not None:
                if spec.optional:
                    kwargs[f.name] = parser.get_optional_attribute(spec.name, spec.attr_type)
                else:
                    kwargs[f.name] = parser.get_attribute(spec.name, spec.attr_type)
            elif f.metadata.get(NODES) or f.metadata.get(CHILDREN):
                before = parser.claimed_child_indices()
                if f.metadata.get(NODES):
                    kwargs[f.name] = parser.parse_all_elements(Node)
                else:
                    kwargs[f.name] = parser.parse_children()
                for index in parser.claimed_child_indices() - before:
                    owners[index] = f.name

        element = cls(**kwargs)
        element.extra_attributes = parser.unclaimed_attributes()
        element.extra_children = parser.unclaimed_children()
        element.attribute_kinds = parser.claimed_kinds()
        element.attribute_order = parser.attribute_order()
        element.child_order = [owners.get(index) for index in range(len(parser.raw.children))]
        return element

    def to_raw(self, encoder: ElementEncoder) -> None:
        sources: dict[Optional[str], list[Any]] = {}
        for f in fields(self):
            spec = f.metadata.get(ATTRIBUTE)
            if spec is not None:
                encoder.optional_attribute(
                    spec.name,
                    getattr(self, f.name),
                    spec.attr_type,
                    self.attribute_kinds.get(spec.name),
                    spec.rle,
                )
            elif f.metadata.get(NODES) or f.metadata.get(CHILDREN):
                sources[f.name] = getattr(self, f.name)
        sources[None] = self.extra_children

        for name, value in self.extra_attributes.items():
            encoder.attribute(name, value)
        encoder.children(self._ordered_children(sources))
        encoder.order_attributes(self.attribute_order)

    def _ordered_children(self, sources: dict[Optional[str], list[Any]]) -> list[Any]:
        """Interleave child lists in the order they were read.

        Children added since decoding, and every child of an element built
        in code, follow in declaration order with extra children last.
        """
        taken = dict.fromkeys(sources, 0)
        result: list[Any] = []
        for owner in self.child_order:
            items = sources.get(owner)
            if items is None or taken[owner] >= len(items):
                continue
            result.append(items[taken[owner]])
            taken[owner] += 1
        for owner, items in sources.items():
            result.extend(items[taken[owner]:])
        return result

    @classmethod
    def attribute_specs(cls) -> dict[str, AttributeSpec]:
        """Field name to attribute spec, in declaration order."""
        return {
            f.name: f.metadata[ATTRIBUTE] for f in fields(cls) if ATTRIBUTE in f.metadata
        }


@dataclass(kw_only=True)
class ContainerElement(SchemaElement):
    """Element whose children form one ordered dynamic list."""

    children: list[DynElement] = child_list()

    def find_child(self, name: str) -> Optional[DynElement]:
        for child in self.children:
            if child.name == name:
                return child
        return None

    def find_children(self, name: str) -> list[DynElement]:
        return [child for child in self.children if child.name == name]

    def children_of_type(self, element_type: Type[E]) -> list[E]:
        return [child for child in self.children if isinstance(child, element_type)]

    def first_of_type(self, element_type: Type[E]) -> Optional[E]:
        for child in self.children:
            if isinstance(child, element_type):
                return child
        return None

    def append(self, element: DynElement) -> None:
        self.children.append(element)

    def insert(self, index: int, element: DynElement) -> None:
        self.children.insert(index, element)

    def remove(self, element: DynElement) -> None:
        """Remove element by identity.

        Raises:
            ValueError: If element is not a child
        """
        for index, child in enumerate(self.children):
            if child is element:
                del self.children[index]
                return
        raise ValueError(f"'{element.name}' is not a child of '{self.name}'")

    def move(self, old_index: int, new_index: int) -> None:
        """Move the child at old_index so it ends up at new_index."""
        element = self.children.pop(old_index)
        self.children.insert(new_index, element)


@dataclass(kw_only=True)
class Node(SchemaElement):
    """A path point of an entity or trigger."""

    NAME: ClassVar[str] = "node"

    x: float = attr("x", AttrType.FLOAT, default=0.0)
    y: float = attr("y", AttrType.FLOAT, default=0.0)
