"""
Vanilla trigger types.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional

from ..values import AttrType
from .entities import Entity
from .base import attr

INT = AttrType.INT
FLOAT = AttrType.FLOAT
STR = AttrType.STR
BOOL = AttrType.BOOL
CHAR = AttrType.CHAR


@dataclass(kw_only=True)
class Trigger(Entity):
    """A rectangular trigger area; shares the entity placement attributes."""

    NAME: ClassVar[str] = "trigger"

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """(x, y, width, height) of the trigger area."""
        return (self.x, self.y, float(self.width or 0), float(self.height or 0))


@dataclass(kw_only=True)
class MusicTrigger(Trigger):
    NAME: ClassVar[str] = "musicTrigger"

    track: str = attr("track", STR, default="")
    reset_fade: bool = attr("resetFade", BOOL, default=True)
    set_in_session: bool = attr("setInSession", BOOL, default=True)
    reset_on_leave: bool = attr("resetOnLeave", BOOL, default=False)
    progress: int = attr("progress", INT, default=0)


@dataclass(kw_only=True)
class AltMusicTrigger(Trigger):
    NAME: ClassVar[str] = "altMusicTrigger"

    track: str = attr("track", STR, default="")
    reset_on_leave: bool = attr("resetOnLeave", BOOL, default=True)


@dataclass(kw_only=True)
class WindTrigger(Trigger):
    NAME: ClassVar[str] = "windTrigger"

    pattern: str = attr("pattern", STR, default="None")


@dataclass(kw_only=True)
class EventTrigger(Trigger):
    NAME: ClassVar[str] = "eventTrigger"

    event: str = attr("event", STR, default="")
    on_spawn: Optional[bool] = attr("onSpawn", BOOL, optional=True)


@dataclass(kw_only=True)
class CameraOffsetTrigger(Trigger):
    NAME: ClassVar[str] = "cameraOffsetTrigger"

    camera_x: float = attr("cameraX", FLOAT, default=0.0)
    camera_y: float = attr("cameraY", FLOAT, default=0.0)


@dataclass(kw_only=True)
class CameraTargetTrigger(Trigger):
    NAME: ClassVar[str] = "cameraTargetTrigger"
    REQUIRED_NODES: ClassVar[int] = 1

    lerp_strength: float = attr("lerpStrength", FLOAT, default=0.0)
    position_mode: str = attr("positionMode", STR, default="NoEffect")
    x_only: bool = attr("xOnly", BOOL, default=False)
    y_only: bool = attr("yOnly", BOOL, default=False)
    delete_flag: Optional[str] = attr("deleteFlag", CHAR, optional=True)


@dataclass(kw_only=True)
class ChangeRespawnTrigger(Trigger):
    """Moves the respawn point; its optional node is the new spawn."""

    NAME: ClassVar[str] = "changeRespawnTrigger"


@dataclass(kw_only=True)
class SpawnFacingTrigger(Trigger):
    NAME: ClassVar[str] = "spawnFacingTrigger"

    facing: str = attr("facing", STR, default="Right")


@dataclass(kw_only=True)
class NoRefillTrigger(Trigger):
    NAME: ClassVar[str] = "noRefillTrigger"

    state: bool = attr("state", BOOL, default=True)


@dataclass(kw_only=True)
class InteractTrigger(Trigger):
    NAME: ClassVar[str] = "interactTrigger"

    event: str = attr("event", STR, default="")
    event_2: Optional[str] = attr("event_2", STR, optional=True)
    event_3: Optional[str] = attr("event_3", STR, optional=True)


@dataclass(kw_only=True)
class LookoutBlocker(Trigger):
    NAME: ClassVar[str] = "lookoutBlocker"


@dataclass(kw_only=True)
class CheckpointBlockerTrigger(Trigger):
    NAME: ClassVar[str] = "checkpointBlockerTrigger"


@dataclass(kw_only=True)
class GoldenBerryCollectTrigger(Trigger):
    NAME: ClassVar[str] = "goldenBerryCollectTrigger"


TRIGGER_TYPES = (
    MusicTrigger,
    AltMusicTrigger,
    WindTrigger,
    EventTrigger,
    CameraOffsetTrigger,
    CameraTargetTrigger,
    ChangeRespawnTrigger,
    SpawnFacingTrigger,
    NoRefillTrigger,
    InteractTrigger,
    LookoutBlocker,
    CheckpointBlockerTrigger,
    GoldenBerryCollectTrigger,
)
