"""
Built-in typed map elements.

Usage:
    from celeste_maped.maps import ElementRegistry

    registry = ElementRegistry.with_defaults()
    registry.register_type(MyModEntity)
    registry.freeze()
"""

from typing import TYPE_CHECKING

from .base import (
    AttributeSpec,
    ContainerElement,
    DynElement,
    MapElement,
    Node,
    SchemaElement,
    attr,
    child_list,
    node_list,
)
from .entities import ENTITY_TYPES, Entity
from .level import (
    STRUCTURE_TYPES,
    Background,
    BGDecals,
    BGTiles,
    Decal,
    Entities,
    FGDecals,
    FGTiles,
    Filler,
    Levels,
    MapRoot,
    ObjTiles,
    Rect,
    Room,
    Solids,
    Triggers,
)
from .style import STYLE_TYPES, Backgrounds, Foregrounds, Parallax, SnowBG, SnowFG, Styles
from .triggers import TRIGGER_TYPES, Trigger

if TYPE_CHECKING:
    from ..registry import ElementRegistry


def register_builtin_elements(registry: "ElementRegistry") -> None:
    """Register every built-in structural, style, entity and trigger type."""
    registry.register_types(STRUCTURE_TYPES)
    registry.register_types(STYLE_TYPES)
    registry.register_types(ENTITY_TYPES)
    registry.register_types(TRIGGER_TYPES)


__all__ = [
    "AttributeSpec",
    "ContainerElement",
    "DynElement",
    "MapElement",
    "Node",
    "SchemaElement",
    "attr",
    "child_list",
    "node_list",
    "Entity",
    "Trigger",
    "MapRoot",
    "Filler",
    "Rect",
    "Levels",
    "Room",
    "Entities",
    "Triggers",
    "FGDecals",
    "BGDecals",
    "Decal",
    "Solids",
    "Background",
    "FGTiles",
    "BGTiles",
    "ObjTiles",
    "Styles",
    "Backgrounds",
    "Foregrounds",
    "Parallax",
    "SnowBG",
    "SnowFG",
    "ENTITY_TYPES",
    "TRIGGER_TYPES",
    "STRUCTURE_TYPES",
    "STYLE_TYPES",
    "register_builtin_elements",
]
