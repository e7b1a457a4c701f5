"""Element type registry.

Maps element names to the functions that turn a raw node into a typed
element and back. The registry is an explicit object handed to decode and
encode calls; it is filled once, frozen, and only read afterwards.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional

from ..errors import RegistryCollisionError, RegistryFrozenError

if TYPE_CHECKING:
    from .parser import ElementEncoder, ElementParser

DecodeFn = Callable[["ElementParser"], Any]
EncodeFn = Callable[[Any, "ElementEncoder"], None]


@dataclass(frozen=True)
class ElementHandler:
    """Decode and encode functions registered for one element name."""

    name: str
    decode: DecodeFn
    encode: EncodeFn


class ElementRegistry:
    """Registry of element handlers keyed by exact, case-sensitive name.

    Lifecycle: register everything, then freeze. A duplicate name is rejected
    as soon as it is registered, and nothing can be registered once the
    registry is frozen. The first resolve() freezes the registry implicitly.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._handlers: dict[str, ElementHandler] = {}
        self._frozen = False

    def register(self, name: str, decode: DecodeFn, encode: EncodeFn) -> None:
        """Register handlers for an element name.

        Args:
            name: Element name as stored in the map
            decode: Called with an ElementParser, returns the typed element
            encode: Called with the typed element and an ElementEncoder

        Raises:
            RegistryFrozenError: If the registry is already frozen
            RegistryCollisionError: If name is already registered
        """
        if self._frozen:
            raise RegistryFrozenError(name)
        if name in self._handlers:
            raise RegistryCollisionError(name)
        self._handlers[name] = ElementHandler(name, decode, encode)

    def register_type(self, element_type: Any) -> None:
        """Register a class exposing NAME, from_raw(parser) and to_raw(encoder)."""
        self.register(element_type.NAME, element_type.from_raw, element_type.to_raw)

    def register_types(self, element_types: Any) -> None:
        for element_type in element_types:
            self.register_type(element_type)

    def resolve(self, name: str) -> Optional[ElementHandler]:
        """Look up the handler for name; None means the element stays raw."""
        if not self._frozen:
            self.freeze()
        return self._handlers.get(name)

    def freeze(self) -> None:
        if not self._frozen:
            self._frozen = True
            self.logger.debug(f"Registry frozen with {len(self._handlers)} element type(s)")

    @property
    def frozen(self) -> bool:
        return self._frozen

    def names(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[ElementHandler]:
        return iter(self._handlers.values())

    @classmethod
    def with_defaults(cls) -> "ElementRegistry":
        """Open registry pre-filled with the built-in element types.

        Mod element types can be added before the registry is frozen.
        """
        from .elements import register_builtin_elements

        registry = cls()
        register_builtin_elements(registry)
        return registry


def default_registry() -> ElementRegistry:
    """Frozen registry holding the built-in structural, entity and trigger types."""
    registry = ElementRegistry.with_defaults()
    registry.freeze()
    return registry
