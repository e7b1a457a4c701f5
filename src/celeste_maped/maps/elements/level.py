"""
Structural elements of a map: root, filler, levels, rooms and room layers.

Containers keep one ordered child list, so the order of mixed children
(typed or raw) is exactly the order found in the file.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional

from ..values import AttrType
from .base import ContainerElement, DynElement, SchemaElement, attr
from .style import Styles

INT = AttrType.INT
FLOAT = AttrType.FLOAT
STR = AttrType.STR
BOOL = AttrType.BOOL


@dataclass(kw_only=True)
class MapRoot(ContainerElement):
    """The 'Map' root element: Filler, levels and Style."""

    NAME: ClassVar[str] = "Map"

    @property
    def filler(self) -> Optional["Filler"]:
        return self.first_of_type(Filler)

    @property
    def levels(self) -> Optional["Levels"]:
        return self.first_of_type(Levels)

    @property
    def style(self) -> Optional[Styles]:
        return self.first_of_type(Styles)


@dataclass(kw_only=True)
class Filler(ContainerElement):
    """Filler rectangles placed outside of rooms."""

    NAME: ClassVar[str] = "Filler"

    @property
    def rects(self) -> list["Rect"]:
        return self.children_of_type(Rect)


@dataclass(kw_only=True)
class Rect(SchemaElement):
    NAME: ClassVar[str] = "rect"

    x: int = attr("x", INT, default=0)
    y: int = attr("y", INT, default=0)
    w: int = attr("w", INT, default=0)
    h: int = attr("h", INT, default=0)


@dataclass(kw_only=True)
class Levels(ContainerElement):
    """The 'levels' element; every 'level' child is a room."""

    NAME: ClassVar[str] = "levels"

    @property
    def rooms(self) -> list[DynElement]:
        """Room children, typed or raw."""
        return self.find_children(Room.NAME)


@dataclass(kw_only=True)
class Room(ContainerElement):
    """A single room ('level' element).

    The attribute called 'name' on disk is exposed as room_name, since
    name is the element type name of every element.
    """

    NAME: ClassVar[str] = "level"

    room_name: str = attr("name", STR, default="")
    width: int = attr("width", INT, default=320)
    height: int = attr("height", INT, default=184)
    x: float = attr("x", FLOAT, default=0.0)
    y: float = attr("y", FLOAT, default=0.0)
    c: int = attr("c", INT, default=0)
    wind_pattern: Optional[str] = attr("windPattern", STR, optional=True)
    dark: Optional[bool] = attr("dark", BOOL, optional=True)
    camera_offset_x: Optional[float] = attr("cameraOffsetX", FLOAT, optional=True)
    camera_offset_y: Optional[float] = attr("cameraOffsetY", FLOAT, optional=True)
    alt_music: Optional[str] = attr("alt_music", STR, optional=True)
    music: Optional[str] = attr("music", STR, optional=True)
    music_layer_1: Optional[bool] = attr("musicLayer1", BOOL, optional=True)
    music_layer_2: Optional[bool] = attr("musicLayer2", BOOL, optional=True)
    music_layer_3: Optional[bool] = attr("musicLayer3", BOOL, optional=True)
    music_layer_4: Optional[bool] = attr("musicLayer4", BOOL, optional=True)
    music_progress: Optional[str] = attr("musicProgress", STR, optional=True)
    ambience: Optional[str] = attr("ambience", STR, optional=True)
    ambience_progress: Optional[str] = attr("ambienceProgress", STR, optional=True)
    underwater: Optional[bool] = attr("underwater", BOOL, optional=True)
    space: Optional[bool] = attr("space", BOOL, optional=True)
    disable_down_transition: Optional[bool] = attr("disableDownTransition", BOOL, optional=True)
    whisper: Optional[bool] = attr("whisper", BOOL, optional=True)
    delay_alt_music_fade: Optional[bool] = attr("delayAltMusicFade", BOOL, optional=True)
    enforce_dash_number: Optional[int] = attr("enforceDashNumber", INT, optional=True)

    @property
    def entities(self) -> Optional["Entities"]:
        return self.first_of_type(Entities)

    @property
    def triggers(self) -> Optional["Triggers"]:
        return self.first_of_type(Triggers)

    @property
    def fg_decals(self) -> Optional["FGDecals"]:
        return self.first_of_type(FGDecals)

    @property
    def bg_decals(self) -> Optional["BGDecals"]:
        return self.first_of_type(BGDecals)

    @property
    def solids(self) -> Optional["Solids"]:
        return self.first_of_type(Solids)

    @property
    def background(self) -> Optional["Background"]:
        return self.first_of_type(Background)

    @property
    def fg_tiles(self) -> Optional["FGTiles"]:
        return self.first_of_type(FGTiles)

    @property
    def bg_tiles(self) -> Optional["BGTiles"]:
        return self.first_of_type(BGTiles)

    @property
    def obj_tiles(self) -> Optional["ObjTiles"]:
        return self.first_of_type(ObjTiles)

    @classmethod
    def empty(cls, room_name: str, width: int = 320, height: int = 184) -> "Room":
        """A room with the layers the game expects, all empty."""
        return cls(
            room_name=room_name,
            width=width,
            height=height,
            children=[
                Triggers(),
                FGDecals(),
                Solids(inner_text=""),
                Entities(),
                BGDecals(),
                Background(inner_text=""),
            ],
        )


# === ROOM LAYERS ===


@dataclass(kw_only=True)
class Entities(ContainerElement):
    """Entity layer of a room; children are entities in placement order."""

    NAME: ClassVar[str] = "entities"

    offset_x: Optional[float] = attr("offsetX", FLOAT, optional=True)
    offset_y: Optional[float] = attr("offsetY", FLOAT, optional=True)


@dataclass(kw_only=True)
class Triggers(ContainerElement):
    NAME: ClassVar[str] = "triggers"

    offset_x: Optional[float] = attr("offsetX", FLOAT, optional=True)
    offset_y: Optional[float] = attr("offsetY", FLOAT, optional=True)


@dataclass(kw_only=True)
class FGDecals(ContainerElement):
    NAME: ClassVar[str] = "fgdecals"

    offset_x: Optional[float] = attr("offsetX", FLOAT, optional=True)
    offset_y: Optional[float] = attr("offsetY", FLOAT, optional=True)

    @property
    def decals(self) -> list["Decal"]:
        return self.children_of_type(Decal)


@dataclass(kw_only=True)
class BGDecals(ContainerElement):
    NAME: ClassVar[str] = "bgdecals"

    offset_x: Optional[float] = attr("offsetX", FLOAT, optional=True)
    offset_y: Optional[float] = attr("offsetY", FLOAT, optional=True)

    @property
    def decals(self) -> list["Decal"]:
        return self.children_of_type(Decal)


@dataclass(kw_only=True)
class Decal(SchemaElement):
    NAME: ClassVar[str] = "decal"

    x: float = attr("x", FLOAT, default=0.0)
    y: float = attr("y", FLOAT, default=0.0)
    scale_x: float = attr("scaleX", FLOAT, default=1.0)
    scale_y: float = attr("scaleY", FLOAT, default=1.0)
    rotation: Optional[float] = attr("rotation", FLOAT, optional=True)
    texture: str = attr("texture", STR, default="")


@dataclass(kw_only=True)
class Solids(SchemaElement):
    """Foreground tile grid, one character per tile, rows split by newlines."""

    NAME: ClassVar[str] = "solids"

    offset_x: Optional[float] = attr("offsetX", FLOAT, optional=True)
    offset_y: Optional[float] = attr("offsetY", FLOAT, optional=True)
    inner_text: Optional[str] = attr("innerText", STR, optional=True, rle=True)


@dataclass(kw_only=True)
class Background(SchemaElement):
    """Background tile grid ('bg' element)."""

    NAME: ClassVar[str] = "bg"

    offset_x: Optional[float] = attr("offsetX", FLOAT, optional=True)
    offset_y: Optional[float] = attr("offsetY", FLOAT, optional=True)
    inner_text: Optional[str] = attr("innerText", STR, optional=True, rle=True)


@dataclass(kw_only=True)
class FGTiles(SchemaElement):
    """Foreground tile-index grid (comma separated sprite indices)."""

    NAME: ClassVar[str] = "fgtiles"

    offset_x: Optional[float] = attr("offsetX", FLOAT, optional=True)
    offset_y: Optional[float] = attr("offsetY", FLOAT, optional=True)
    tileset: Optional[str] = attr("tileset", STR, optional=True)
    export_mode: Optional[int] = attr("exportMode", INT, optional=True)
    inner_text: Optional[str] = attr("innerText", STR, optional=True)


@dataclass(kw_only=True)
class BGTiles(SchemaElement):
    NAME: ClassVar[str] = "bgtiles"

    offset_x: Optional[float] = attr("offsetX", FLOAT, optional=True)
    offset_y: Optional[float] = attr("offsetY", FLOAT, optional=True)
    tileset: Optional[str] = attr("tileset", STR, optional=True)
    export_mode: Optional[int] = attr("exportMode", INT, optional=True)
    inner_text: Optional[str] = attr("innerText", STR, optional=True)


@dataclass(kw_only=True)
class ObjTiles(SchemaElement):
    NAME: ClassVar[str] = "objtiles"

    offset_x: Optional[float] = attr("offsetX", FLOAT, optional=True)
    offset_y: Optional[float] = attr("offsetY", FLOAT, optional=True)
    tileset: Optional[str] = attr("tileset", STR, optional=True)
    export_mode: Optional[int] = attr("exportMode", INT, optional=True)
    inner_text: Optional[str] = attr("innerText", STR, optional=True)


STRUCTURE_TYPES = (
    MapRoot,
    Filler,
    Rect,
    Levels,
    Room,
    Entities,
    Triggers,
    FGDecals,
    BGDecals,
    Decal,
    Solids,
    Background,
    FGTiles,
    BGTiles,
    ObjTiles,
)
