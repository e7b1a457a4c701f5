"""
Vanilla entity types.

Every entity carries the common placement attributes declared on Entity.
Subclasses only list their own attributes; decoding and encoding come from
the field table on SchemaElement. Attributes added by mods or newer game
versions end up in extra_attributes and are written back untouched.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, cast

from ...errors import ElementParseError
from ..parser import ElementParser
from ..values import AttrType
from .base import Node, SchemaElement, attr, node_list

INT = AttrType.INT
FLOAT = AttrType.FLOAT
STR = AttrType.STR
BOOL = AttrType.BOOL
CHAR = AttrType.CHAR


@dataclass(kw_only=True)
class Entity(SchemaElement):
    """Common attributes of every entity placed in a room.

    Attributes:
        id: Entity ID, unique within the map
        x: Horizontal position relative to the room
        y: Vertical position relative to the room
        width: Width for resizable entities
        height: Height for resizable entities
        origin_x: Origin written by the map editor
        origin_y: Origin written by the map editor
        nodes: Path points ('node' children)
    """

    NAME: ClassVar[str] = "entity"
    REQUIRED_NODES: ClassVar[int] = 0

    id: int = attr("id", INT, default=0)
    x: float = attr("x", FLOAT, default=0.0)
    y: float = attr("y", FLOAT, default=0.0)
    width: Optional[int] = attr("width", INT, optional=True)
    height: Optional[int] = attr("height", INT, optional=True)
    origin_x: Optional[float] = attr("originX", FLOAT, optional=True)
    origin_y: Optional[float] = attr("originY", FLOAT, optional=True)
    nodes: list[Node] = node_list()

    @classmethod
    def from_raw(cls, parser: ElementParser) -> "Entity":
        element = cast(Entity, super().from_raw(parser))
        if len(element.nodes) < cls.REQUIRED_NODES:
            raise ElementParseError(
                parser.name,
                f"expected at least {cls.REQUIRED_NODES} node(s), found {len(element.nodes)}",
            )
        return element

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    def move_to(self, x: float, y: float) -> None:
        """Move the entity, shifting its nodes by the same offset."""
        dx = x - self.x
        dy = y - self.y
        self.x = x
        self.y = y
        for node in self.nodes:
            node.x += dx
            node.y += dy


# === ENTITIES WITH ATTRIBUTES ===


@dataclass(kw_only=True)
class Spinner(Entity):
    NAME: ClassVar[str] = "spinner"

    attach_to_solid: bool = attr("attachToSolid", BOOL, default=False)


@dataclass(kw_only=True)
class Strawberry(Entity):
    NAME: ClassVar[str] = "strawberry"

    winged: bool = attr("winged", BOOL, default=False)
    checkpoint_id: int = attr("checkpointID", INT, default=0)
    order: Optional[int] = attr("order", INT, optional=True)


@dataclass(kw_only=True)
class Refill(Entity):
    NAME: ClassVar[str] = "refill"

    two_dash: Optional[bool] = attr("twoDash", BOOL, optional=True)
    one_use: Optional[bool] = attr("oneUse", BOOL, optional=True)


@dataclass(kw_only=True)
class Spring(Entity):
    NAME: ClassVar[str] = "spring"

    player_can_use: Optional[bool] = attr("playerCanUse", BOOL, optional=True)


@dataclass(kw_only=True)
class JumpThru(Entity):
    NAME: ClassVar[str] = "jumpThru"

    texture: Optional[str] = attr("texture", STR, optional=True)


@dataclass(kw_only=True)
class SpikesUp(Entity):
    NAME: ClassVar[str] = "spikesUp"

    kind: Optional[str] = attr("type", STR, optional=True)


@dataclass(kw_only=True)
class SpikesDown(Entity):
    NAME: ClassVar[str] = "spikesDown"

    kind: Optional[str] = attr("type", STR, optional=True)


@dataclass(kw_only=True)
class SpikesLeft(Entity):
    NAME: ClassVar[str] = "spikesLeft"

    kind: Optional[str] = attr("type", STR, optional=True)


@dataclass(kw_only=True)
class SpikesRight(Entity):
    NAME: ClassVar[str] = "spikesRight"

    kind: Optional[str] = attr("type", STR, optional=True)


@dataclass(kw_only=True)
class ZipMover(Entity):
    NAME: ClassVar[str] = "zipMover"
    REQUIRED_NODES: ClassVar[int] = 1

    theme: Optional[str] = attr("theme", STR, optional=True)


@dataclass(kw_only=True)
class DashBlock(Entity):
    NAME: ClassVar[str] = "dashBlock"

    permanent: bool = attr("permanent", BOOL, default=True)
    tile_type: str = attr("tiletype", CHAR, default="3")
    blend_in: bool = attr("blendin", BOOL, default=True)
    can_dash: bool = attr("canDash", BOOL, default=True)


@dataclass(kw_only=True)
class FallingBlock(Entity):
    NAME: ClassVar[str] = "fallingBlock"

    tile_type: str = attr("tiletype", CHAR, default="3")
    behind: Optional[bool] = attr("behind", BOOL, optional=True)
    climb_fall: Optional[bool] = attr("climbFall", BOOL, optional=True)


@dataclass(kw_only=True)
class Booster(Entity):
    NAME: ClassVar[str] = "booster"

    red: bool = attr("red", BOOL, default=False)
    ch9_hub_booster: Optional[bool] = attr("ch9_hub_booster", BOOL, optional=True)


@dataclass(kw_only=True)
class Cassette(Entity):
    """Cassette; its nodes are the bubble path points."""

    NAME: ClassVar[str] = "cassette"


@dataclass(kw_only=True)
class Key(Entity):
    NAME: ClassVar[str] = "key"


@dataclass(kw_only=True)
class LockBlock(Entity):
    NAME: ClassVar[str] = "lockBlock"

    step_music_progress: bool = attr("stepMusicProgress", BOOL, default=False)
    sprite: str = attr("sprite", STR, default="wood")
    unlock_sfx: Optional[str] = attr("unlock_sfx", STR, optional=True)


@dataclass(kw_only=True)
class DreamBlock(Entity):
    NAME: ClassVar[str] = "dreamBlock"

    fast_moving: Optional[bool] = attr("fastMoving", BOOL, optional=True)
    one_use: Optional[bool] = attr("oneUse", BOOL, optional=True)
    below: Optional[bool] = attr("below", BOOL, optional=True)


@dataclass(kw_only=True)
class MoveBlock(Entity):
    NAME: ClassVar[str] = "moveBlock"

    direction: str = attr("direction", STR, default="Right")
    can_steer: bool = attr("canSteer", BOOL, default=False)
    fast: bool = attr("fast", BOOL, default=False)


@dataclass(kw_only=True)
class SwapBlock(Entity):
    NAME: ClassVar[str] = "swapBlock"
    REQUIRED_NODES: ClassVar[int] = 1

    theme: Optional[str] = attr("theme", STR, optional=True)


@dataclass(kw_only=True)
class SwitchGate(Entity):
    NAME: ClassVar[str] = "switchGate"
    REQUIRED_NODES: ClassVar[int] = 1

    persistent: bool = attr("persistent", BOOL, default=False)
    sprite: Optional[str] = attr("sprite", STR, optional=True)


@dataclass(kw_only=True)
class Cloud(Entity):
    NAME: ClassVar[str] = "cloud"

    fragile: bool = attr("fragile", BOOL, default=False)


@dataclass(kw_only=True)
class Npc(Entity):
    NAME: ClassVar[str] = "npc"

    npc: str = attr("npc", STR, default="")


@dataclass(kw_only=True)
class Bonfire(Entity):
    NAME: ClassVar[str] = "bonfire"

    mode: str = attr("mode", STR, default="lit")


@dataclass(kw_only=True)
class Torch(Entity):
    NAME: ClassVar[str] = "torch"

    start_lit: bool = attr("startLit", BOOL, default=False)


@dataclass(kw_only=True)
class Lamp(Entity):
    NAME: ClassVar[str] = "lamp"

    broken: bool = attr("broken", BOOL, default=False)


@dataclass(kw_only=True)
class Water(Entity):
    NAME: ClassVar[str] = "water"

    steamy: bool = attr("steamy", BOOL, default=False)
    has_bottom: bool = attr("hasBottom", BOOL, default=False)


@dataclass(kw_only=True)
class Wire(Entity):
    NAME: ClassVar[str] = "wire"
    REQUIRED_NODES: ClassVar[int] = 1

    above: bool = attr("above", BOOL, default=False)


@dataclass(kw_only=True)
class Lightning(Entity):
    NAME: ClassVar[str] = "lightning"

    per_level: bool = attr("perLevel", BOOL, default=False)
    move_time: float = attr("moveTime", FLOAT, default=5.0)


@dataclass(kw_only=True)
class CassetteBlock(Entity):
    NAME: ClassVar[str] = "cassetteBlock"

    index: int = attr("index", INT, default=0)
    finished_state: Optional[bool] = attr("finishedState", BOOL, optional=True)


@dataclass(kw_only=True)
class FakeWall(Entity):
    NAME: ClassVar[str] = "fakeWall"

    tile_type: str = attr("tiletype", CHAR, default="3")
    play_transition_reveal: Optional[bool] = attr("playTransitionReveal", BOOL, optional=True)


# === ENTITIES WITHOUT OWN ATTRIBUTES ===


@dataclass(kw_only=True)
class Player(Entity):
    """Player spawn point."""

    NAME: ClassVar[str] = "player"


@dataclass(kw_only=True)
class GoldenBerry(Entity):
    NAME: ClassVar[str] = "goldenBerry"


@dataclass(kw_only=True)
class Checkpoint(Entity):
    NAME: ClassVar[str] = "checkpoint"


@dataclass(kw_only=True)
class CrumbleBlock(Entity):
    NAME: ClassVar[str] = "crumbleBlock"


@dataclass(kw_only=True)
class TouchSwitch(Entity):
    NAME: ClassVar[str] = "touchSwitch"


@dataclass(kw_only=True)
class BounceBlock(Entity):
    NAME: ClassVar[str] = "bounceBlock"


@dataclass(kw_only=True)
class TheoCrystal(Entity):
    NAME: ClassVar[str] = "theoCrystal"


@dataclass(kw_only=True)
class InvisibleBarrier(Entity):
    NAME: ClassVar[str] = "invisibleBarrier"


@dataclass(kw_only=True)
class KillBox(Entity):
    NAME: ClassVar[str] = "killbox"


ENTITY_TYPES = (
    Spinner,
    Strawberry,
    Refill,
    Spring,
    JumpThru,
    SpikesUp,
    SpikesDown,
    SpikesLeft,
    SpikesRight,
    ZipMover,
    DashBlock,
    FallingBlock,
    Booster,
    Cassette,
    Key,
    LockBlock,
    DreamBlock,
    MoveBlock,
    SwapBlock,
    SwitchGate,
    Cloud,
    Npc,
    Bonfire,
    Torch,
    Lamp,
    Water,
    Wire,
    Lightning,
    CassetteBlock,
    FakeWall,
    Player,
    GoldenBerry,
    Checkpoint,
    CrumbleBlock,
    TouchSwitch,
    BounceBlock,
    TheoCrystal,
    InvisibleBarrier,
    KillBox,
)
