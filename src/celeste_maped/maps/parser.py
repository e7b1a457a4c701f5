"""
Conversion between raw nodes and typed elements.

ElementParser is what an element decoder sees: checked attribute access,
typed child access and dynamic children resolved through the registry.
ElementEncoder is the inverse used by element encoders.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Optional, Type, TypeVar

from ..errors import ElementParseError, MapWriteError, ValueKindError
from .nodes import RawElement
from .values import AttrType, PyValue, Value, ValueKind

if TYPE_CHECKING:
    from .registry import ElementRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class DecodeContext:
    """State shared by every parser of one decode pass.

    Attributes:
        registry: Registry used to resolve dynamic children
        strict: Propagate decoder failures instead of keeping the node raw
        warnings: Messages for every node that fell back to raw after a failure
    """

    registry: "ElementRegistry"
    strict: bool = False
    warnings: list[str] = field(default_factory=list)


def decode_element(raw: RawElement, context: DecodeContext) -> Any:
    """Type a raw node through the registry.

    Unregistered names stay raw. A registered decoder that rejects the node
    also leaves it raw, with a warning, unless the context is strict.
    """
    handler = context.registry.resolve(raw.name)
    if handler is None:
        return raw

    try:
        return handler.decode(ElementParser(raw, context))
    except ElementParseError as e:
        if context.strict:
            raise
        message = f"Kept '{raw.name}' as raw element: {e}"
        logger.warning(message)
        context.warnings.append(message)
        return raw


def encode_element(element: Any, registry: Optional["ElementRegistry"] = None) -> RawElement:
    """Turn a typed element (or raw fallback) back into a raw node."""
    if isinstance(element, RawElement):
        return element.copy()

    encoder = ElementEncoder(element.name, registry)
    if hasattr(element, "to_raw"):
        element.to_raw(encoder)
    else:
        handler = registry.resolve(element.name) if registry is not None else None
        if handler is None:
            raise MapWriteError(f"No encoder registered for element '{element.name}'")
        handler.encode(element, encoder)
    return encoder.finish()


class ElementParser:
    """Read access to one raw node while it is being typed.

    Every attribute and child that is read is marked as claimed; whatever a
    decoder leaves unclaimed can be kept aside so the node re-encodes
    without loss.
    """

    def __init__(self, raw: RawElement, context: DecodeContext):
        self.raw = raw
        self.context = context
        self._claimed_attributes: dict[str, ValueKind] = {}
        self._claimed_children: set[int] = set()

    @property
    def name(self) -> str:
        return self.raw.name

    # === ATTRIBUTES ===

    def get_optional_value(self, name: str) -> Optional[Value]:
        value = self.raw.attributes.get(name)
        if value is not None:
            self._claimed_attributes[name] = value.kind
        return value

    def get_value(self, name: str) -> Value:
        value = self.get_optional_value(name)
        if value is None:
            raise ElementParseError(self.name, f"missing attribute '{name}'")
        return value

    def get_optional_attribute(self, name: str, attr_type: AttrType) -> Optional[PyValue]:
        """Read an attribute as attr_type; None when the attribute is absent.

        Raises:
            ValueKindError: If the stored kind cannot be read as attr_type
        """
        value = self.get_optional_value(name)
        if value is None:
            return None
        converted = value.convert(attr_type)
        if converted is None:
            raise ValueKindError(self.name, name, attr_type.value, value.kind.name.lower())
        return converted

    def get_attribute(self, name: str, attr_type: AttrType) -> PyValue:
        """Read a required attribute as attr_type.

        Raises:
            ElementParseError: If the attribute is missing
            ValueKindError: If the stored kind cannot be read as attr_type
        """
        converted = self.get_optional_attribute(name, attr_type)
        if converted is None:
            raise ElementParseError(self.name, f"missing attribute '{name}'")
        return converted

    def unclaimed_attributes(self) -> dict[str, Value]:
        return {
            name: value
            for name, value in self.raw.attributes.items()
            if name not in self._claimed_attributes
        }

    def claimed_kinds(self) -> dict[str, ValueKind]:
        return dict(self._claimed_attributes)

    def attribute_order(self) -> list[str]:
        return list(self.raw.attributes)

    # === CHILDREN ===

    def _child_parser(self, child: RawElement) -> "ElementParser":
        return ElementParser(child, self.context)

    def parse_optional_element(self, element_type: Type[T]) -> Optional[T]:
        """Decode the first unclaimed child named element_type.NAME, if any."""
        for index, child in enumerate(self.raw.children):
            if index in self._claimed_children or child.name != element_type.NAME:  # type: ignore[attr-defined]
                continue
            self._claimed_children.add(index)
            return element_type.from_raw(self._child_parser(child))  # type: ignore[attr-defined]
        return None

    def parse_element(self, element_type: Type[T]) -> T:
        element = self.parse_optional_element(element_type)
        if element is None:
            raise ElementParseError(
                self.name, f"missing child '{element_type.NAME}'"  # type: ignore[attr-defined]
            )
        return element

    def parse_all_elements(self, element_type: Type[T]) -> list[T]:
        """Decode every unclaimed child named element_type.NAME, in order."""
        result: list[T] = []
        for index, child in enumerate(self.raw.children):
            if index in self._claimed_children or child.name != element_type.NAME:  # type: ignore[attr-defined]
                continue
            self._claimed_children.add(index)
            result.append(element_type.from_raw(self._child_parser(child)))  # type: ignore[attr-defined]
        return result

    def parse_children(self) -> list[Any]:
        """Decode every unclaimed child through the registry, in order.

        Children the registry does not know stay RawElement.
        """
        result = []
        for index, child in enumerate(self.raw.children):
            if index in self._claimed_children:
                continue
            self._claimed_children.add(index)
            result.append(decode_element(child, self.context))
        return result

    def claimed_child_indices(self) -> set[int]:
        return set(self._claimed_children)

    def unclaimed_children(self) -> list[RawElement]:
        return [
            child
            for index, child in enumerate(self.raw.children)
            if index not in self._claimed_children
        ]


class ElementEncoder:
    """Builds the raw node for one typed element."""

    def __init__(self, name: str, registry: Optional["ElementRegistry"] = None):
        self.element = RawElement(name)
        self.registry = registry

    def attribute(
        self,
        name: str,
        value: Any,
        attr_type: Optional[AttrType] = None,
        kind: Optional[ValueKind] = None,
        rle: bool = False,
    ) -> None:
        """Set an attribute.

        Args:
            name: Attribute name
            value: Value cell or Python payload
            attr_type: Declared type of the attribute, if any
            kind: Tag the attribute was read with, reused when the payload fits
            rle: Store new strings run-length encoded
        """
        if isinstance(value, Value):
            self.element.attributes[name] = value
            return
        if (
            attr_type is AttrType.CHAR
            and kind is None
            and isinstance(value, str)
            and value.isascii()
            and value.isdigit()
        ):
            value = int(value)
        self.element.attributes[name] = Value.infer(value, kind, rle)

    def optional_attribute(
        self,
        name: str,
        value: Any,
        attr_type: Optional[AttrType] = None,
        kind: Optional[ValueKind] = None,
        rle: bool = False,
    ) -> None:
        if value is not None:
            self.attribute(name, value, attr_type, kind, rle)

    def child(self, element: Any) -> None:
        self.element.children.append(encode_element(element, self.registry))

    def children(self, elements: Iterable[Any]) -> None:
        for element in elements:
            self.child(element)

    def order_attributes(self, order: Iterable[str]) -> None:
        """Move known attribute names to the front, in the given order."""
        attributes = self.element.attributes
        ordered = {name: attributes[name] for name in order if name in attributes}
        for name, value in attributes.items():
            ordered.setdefault(name, value)
        self.element.attributes = ordered

    def finish(self) -> RawElement:
        return self.element
