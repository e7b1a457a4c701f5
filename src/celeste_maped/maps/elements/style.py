"""
Style elements: background and foreground parallax layers and effects.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional

from ..values import AttrType
from .base import ContainerElement, SchemaElement, attr


@dataclass(kw_only=True)
class Styles(ContainerElement):
    """The 'Style' element holding Backgrounds and Foregrounds."""

    NAME: ClassVar[str] = "Style"

    @property
    def backgrounds(self) -> Optional["Backgrounds"]:
        return self.first_of_type(Backgrounds)

    @property
    def foregrounds(self) -> Optional["Foregrounds"]:
        return self.first_of_type(Foregrounds)


@dataclass(kw_only=True)
class Backgrounds(ContainerElement):
    NAME: ClassVar[str] = "Backgrounds"

    @property
    def parallax_layers(self) -> list["Parallax"]:
        return self.children_of_type(Parallax)

    @property
    def snow(self) -> bool:
        return self.find_child(SnowBG.NAME) is not None


@dataclass(kw_only=True)
class Foregrounds(ContainerElement):
    NAME: ClassVar[str] = "Foregrounds"

    @property
    def parallax_layers(self) -> list["Parallax"]:
        return self.children_of_type(Parallax)

    @property
    def snow(self) -> bool:
        return self.find_child(SnowFG.NAME) is not None


@dataclass(kw_only=True)
class Parallax(SchemaElement):
    """A textured parallax layer.

    Every attribute is optional: layers grouped under an 'apply' element
    inherit the attributes they omit from that group.
    """

    NAME: ClassVar[str] = "parallax"

    blend_mode: Optional[str] = attr("blendmode", AttrType.STR, optional=True)
    texture: Optional[str] = attr("texture", AttrType.STR, optional=True)
    x: Optional[float] = attr("x", AttrType.FLOAT, optional=True)
    y: Optional[float] = attr("y", AttrType.FLOAT, optional=True)
    scroll_x: Optional[float] = attr("scrollx", AttrType.FLOAT, optional=True)
    scroll_y: Optional[float] = attr("scrolly", AttrType.FLOAT, optional=True)
    loop_x: Optional[bool] = attr("loopx", AttrType.BOOL, optional=True)
    loop_y: Optional[bool] = attr("loopy", AttrType.BOOL, optional=True)
    speed_x: Optional[float] = attr("speedx", AttrType.FLOAT, optional=True)
    speed_y: Optional[float] = attr("speedy", AttrType.FLOAT, optional=True)
    color: Optional[str] = attr("color", AttrType.STR, optional=True)
    alpha: Optional[float] = attr("alpha", AttrType.FLOAT, optional=True)


@dataclass(kw_only=True)
class SnowBG(SchemaElement):
    NAME: ClassVar[str] = "snowBg"


@dataclass(kw_only=True)
class SnowFG(SchemaElement):
    NAME: ClassVar[str] = "snowFg"


STYLE_TYPES = (Styles, Backgrounds, Foregrounds, Parallax, SnowBG, SnowFG)
