"""
Per-area progress records, assists and area references of a save file.

Every class reads itself from an ElementTree element with from_xml() and
writes a fresh element with to_xml(). Fields missing from older files take
their documented defaults.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from ..errors import SchemaViolationError
from .fields import (
    ExtensionBlock,
    add_text,
    append_with_extensions,
    bool_attr,
    bool_field,
    bool_text,
    child_text,
    collect_extensions,
    int_attr,
    int_field,
    parse_int,
    string_list,
    unknown_attributes,
)


class DashMode(Enum):
    """Air dash assist, ordered from least to most permissive."""

    NORMAL = "Normal"
    TWO = "Two"
    INFINITE = "Infinite"

    @property
    def rank(self) -> int:
        return list(DashMode).index(self)

    @classmethod
    def parse(cls, text: Optional[str]) -> "DashMode":
        try:
            return cls((text or "").strip())
        except ValueError:
            raise SchemaViolationError("Assists/DashMode", f"unknown dash mode {text!r}") from None


class AreaModeType(Enum):
    NORMAL = "Normal"
    B_SIDE = "BSide"
    C_SIDE = "CSide"


# === AREA MODE ===

_MODE_INT_ATTRIBUTES = (
    ("total_strawberries", "TotalStrawberries"),
    ("deaths", "Deaths"),
    ("time_played", "TimePlayed"),
    ("best_time", "BestTime"),
    ("best_full_clear_time", "BestFullClearTime"),
    ("best_dashes", "BestDashes"),
    ("best_deaths", "BestDeaths"),
)
_MODE_BOOL_ATTRIBUTES = (
    ("completed", "Completed"),
    ("single_run_completed", "SingleRunCompleted"),
    ("full_clear", "FullClear"),
    ("heart_gem", "HeartGem"),
)
_MODE_ATTRIBUTE_ORDER = (
    "TotalStrawberries",
    "Completed",
    "SingleRunCompleted",
    "FullClear",
    "Deaths",
    "TimePlayed",
    "BestTime",
    "BestFullClearTime",
    "BestDashes",
    "BestDeaths",
    "HeartGem",
)


@dataclass
class AreaMode:
    """Progress in one side (A, B or C) of an area.

    Times are in 100 ns ticks; a best time of 0 means no time recorded.
    Strawberries are entity keys such as "s1:12".
    """

    total_strawberries: int = 0
    completed: bool = False
    single_run_completed: bool = False
    full_clear: bool = False
    deaths: int = 0
    time_played: int = 0
    best_time: int = 0
    best_full_clear_time: int = 0
    best_dashes: int = 0
    best_deaths: int = 0
    heart_gem: bool = False
    strawberries: list[str] = field(default_factory=list)
    checkpoints: list[str] = field(default_factory=list)
    extra_attributes: dict[str, str] = field(default_factory=dict)
    extensions: list[ExtensionBlock] = field(default_factory=list)

    TAG = "AreaModeStats"

    @classmethod
    def from_xml(cls, element: ET.Element) -> "AreaMode":
        mode = cls()
        for name, attribute in _MODE_INT_ATTRIBUTES:
            text = element.get(attribute)
            if text is not None:
                setattr(mode, name, parse_int(text, f"{cls.TAG}@{attribute}"))
        for name, attribute in _MODE_BOOL_ATTRIBUTES:
            setattr(mode, name, bool_attr(element, attribute, f"{cls.TAG}@{attribute}"))
        mode.extra_attributes = unknown_attributes(element, _MODE_ATTRIBUTE_ORDER)

        strawberries = element.find("Strawberries")
        if strawberries is not None:
            for entity in strawberries.findall("EntityID"):
                key = entity.get("Key")
                if key is None:
                    raise SchemaViolationError("EntityID@Key", "required attribute is missing")
                mode.strawberries.append(key)
        mode.checkpoints = string_list(element.find("Checkpoints"))
        mode.extensions = collect_extensions(element, ("Strawberries", "Checkpoints"))
        return mode

    def to_xml(self) -> ET.Element:
        element = ET.Element(self.TAG)
        values = {attribute: getattr(self, name) for name, attribute in _MODE_INT_ATTRIBUTES}
        values.update(
            {attribute: getattr(self, name) for name, attribute in _MODE_BOOL_ATTRIBUTES}
        )
        for attribute in _MODE_ATTRIBUTE_ORDER:
            value = values[attribute]
            element.set(attribute, bool_text(value) if isinstance(value, bool) else str(value))
        for name, value in self.extra_attributes.items():
            element.set(name, value)

        strawberries = ET.Element("Strawberries")
        for key in self.strawberries:
            ET.SubElement(strawberries, "EntityID", {"Key": key})
        checkpoints = ET.Element("Checkpoints")
        for checkpoint in self.checkpoints:
            add_text(checkpoints, "string", checkpoint)

        append_with_extensions(element, [strawberries, checkpoints], self.extensions)
        return element

    def add_strawberry(self, key: str) -> bool:
        """Record a collected strawberry; False if it was already recorded."""
        if key in self.strawberries:
            return False
        self.strawberries.append(key)
        self.total_strawberries = len(self.strawberries)
        return True

    def remove_strawberry(self, key: str) -> bool:
        """Forget a strawberry; False if it was not recorded."""
        if key not in self.strawberries:
            return False
        self.strawberries.remove(key)
        self.total_strawberries = len(self.strawberries)
        return True

    def has_strawberry(self, key: str) -> bool:
        return key in self.strawberries


# === AREA ===


@dataclass
class AreaStats:
    """Progress records of one area (chapter).

    Attributes:
        id: Numeric area ID
        cassette: Whether the cassette was collected
        sid: String ID; set for modded saves
        modes: A, B and C side progress, in that order
    """

    id: int = 0
    cassette: bool = False
    sid: Optional[str] = None
    modes: list[AreaMode] = field(default_factory=list)
    extra_attributes: dict[str, str] = field(default_factory=dict)
    extensions: list[ExtensionBlock] = field(default_factory=list)

    TAG = "AreaStats"

    @property
    def key(self) -> str:
        """Identifier used to match areas: the SID, else the numeric ID."""
        return self.sid if self.sid is not None else str(self.id)

    @property
    def total_strawberries(self) -> int:
        return sum(mode.total_strawberries for mode in self.modes)

    def mode(self, index: int) -> AreaMode:
        """Mode by index, adding empty modes up to it when missing.

        Raises:
            IndexError: If index is negative
        """
        if index < 0:
            raise IndexError(f"Invalid mode index {index}")
        while len(self.modes) <= index:
            self.modes.append(AreaMode())
        return self.modes[index]

    @classmethod
    def from_xml(cls, element: ET.Element) -> "AreaStats":
        area = cls(
            id=int_attr(element, "ID", f"{cls.TAG}@ID"),
            cassette=bool_attr(element, "Cassette", f"{cls.TAG}@Cassette"),
            sid=element.get("SID"),
        )
        area.extra_attributes = unknown_attributes(element, ("ID", "Cassette", "SID"))
        modes = element.find("Modes")
        if modes is not None:
            area.modes = [AreaMode.from_xml(mode) for mode in modes.findall(AreaMode.TAG)]
        area.extensions = collect_extensions(element, ("Modes",))
        return area

    def to_xml(self) -> ET.Element:
        element = ET.Element(self.TAG)
        element.set("ID", str(self.id))
        element.set("Cassette", bool_text(self.cassette))
        if self.sid is not None:
            element.set("SID", self.sid)
        for name, value in self.extra_attributes.items():
            element.set(name, value)

        modes = ET.Element("Modes")
        for mode in self.modes:
            modes.append(mode.to_xml())
        append_with_extensions(element, [modes], self.extensions)
        return element


def parse_areas(parent: Optional[ET.Element], field: str) -> list[AreaStats]:
    """Parse an 'Areas' element.

    Raises:
        SchemaViolationError: If two areas share a key
    """
    if parent is None:
        return []
    areas = [AreaStats.from_xml(element) for element in parent.findall(AreaStats.TAG)]
    seen: set[str] = set()
    for area in areas:
        if area.key in seen:
            raise SchemaViolationError(field, f"duplicate area '{area.key}'")
        seen.add(area.key)
    return areas


def areas_to_xml(areas: list[AreaStats]) -> ET.Element:
    element = ET.Element("Areas")
    for area in areas:
        element.append(area.to_xml())
    return element


def find_area(areas: list[AreaStats], key: str) -> Optional[AreaStats]:
    for area in areas:
        if area.key == key:
            return area
    return None


# === LEVEL SETS ===

_LEVEL_SET_TAGS = ("Areas", "Poem", "UnlockedAreas", "TotalStrawberries")


@dataclass
class LevelSetStats:
    """Progress in one modded level set."""

    name: str = ""
    areas: list[AreaStats] = field(default_factory=list)
    poem: list[str] = field(default_factory=list)
    unlocked_areas: int = 0
    total_strawberries: int = 0
    extensions: list[ExtensionBlock] = field(default_factory=list)

    TAG = "LevelSetStats"

    @classmethod
    def from_xml(cls, element: ET.Element) -> "LevelSetStats":
        name = element.get("Name")
        if name is None:
            raise SchemaViolationError(f"{cls.TAG}@Name", "required attribute is missing")
        return cls(
            name=name,
            areas=parse_areas(element.find("Areas"), f"{cls.TAG}[{name}]/Areas"),
            poem=string_list(element.find("Poem")),
            unlocked_areas=int_field(element, "UnlockedAreas"),
            total_strawberries=int_field(element, "TotalStrawberries"),
            extensions=collect_extensions(element, _LEVEL_SET_TAGS),
        )

    def to_xml(self) -> ET.Element:
        element = ET.Element(self.TAG, {"Name": self.name})
        children = [areas_to_xml(self.areas)]
        poem = ET.Element("Poem")
        for line in self.poem:
            add_text(poem, "string", line)
        children.append(poem)
        for tag, value in (
            ("UnlockedAreas", self.unlocked_areas),
            ("TotalStrawberries", self.total_strawberries),
        ):
            child = ET.Element(tag)
            child.text = str(value)
            children.append(child)
        append_with_extensions(element, children, self.extensions)
        return element

    def area(self, key: str) -> Optional[AreaStats]:
        return find_area(self.areas, key)

    def recompute_totals(self) -> None:
        self.total_strawberries = sum(area.total_strawberries for area in self.areas)


def parse_level_sets(parent: Optional[ET.Element], field: str) -> list[LevelSetStats]:
    """Parse a 'LevelSets' or 'LevelSetRecycleBin' element.

    Raises:
        SchemaViolationError: If two level sets share a name
    """
    if parent is None:
        return []
    level_sets = [LevelSetStats.from_xml(element) for element in parent.findall(LevelSetStats.TAG)]
    seen: set[str] = set()
    for level_set in level_sets:
        if level_set.name in seen:
            raise SchemaViolationError(field, f"duplicate level set '{level_set.name}'")
        seen.add(level_set.name)
    return level_sets


def level_sets_to_xml(tag: str, level_sets: list[LevelSetStats]) -> ET.Element:
    element = ET.Element(tag)
    for level_set in level_sets:
        element.append(level_set.to_xml())
    return element


# === ASSISTS ===

ASSIST_FLAGS = (
    ("invincible", "Invincible"),
    ("dash_assist", "DashAssist"),
    ("infinite_stamina", "InfiniteStamina"),
    ("mirror_mode", "MirrorMode"),
    ("three_sixty_dashing", "ThreeSixtyDashing"),
    ("invisible_motion", "InvisibleMotion"),
    ("no_grabbing", "NoGrabbing"),
    ("low_friction", "LowFriction"),
    ("super_dashing", "SuperDashing"),
    ("hiccups", "Hiccups"),
    ("play_as_badeline", "PlayAsBadeline"),
)


@dataclass
class Assists:
    """Assist mode options. GameSpeed is in tenths: 10 is full speed."""

    game_speed: int = 10
    invincible: bool = False
    dash_mode: DashMode = DashMode.NORMAL
    dash_assist: bool = False
    infinite_stamina: bool = False
    mirror_mode: bool = False
    three_sixty_dashing: bool = False
    invisible_motion: bool = False
    no_grabbing: bool = False
    low_friction: bool = False
    super_dashing: bool = False
    hiccups: bool = False
    play_as_badeline: bool = False
    extensions: list[ExtensionBlock] = field(default_factory=list)

    TAG = "Assists"

    @classmethod
    def from_xml(cls, element: Optional[ET.Element]) -> "Assists":
        assists = cls()
        if element is None:
            return assists
        assists.game_speed = int_field(element, "GameSpeed", 10)
        text = child_text(element, "DashMode")
        if text is not None:
            assists.dash_mode = DashMode.parse(text)
        for name, tag in ASSIST_FLAGS:
            setattr(assists, name, bool_field(element, tag))
        known = ["GameSpeed", "DashMode"] + [tag for _, tag in ASSIST_FLAGS]
        assists.extensions = collect_extensions(element, known)
        return assists

    def to_xml(self) -> ET.Element:
        element = ET.Element(self.TAG)
        values: dict[str, object] = {tag: getattr(self, name) for name, tag in ASSIST_FLAGS}
        values["GameSpeed"] = self.game_speed
        values["DashMode"] = self.dash_mode.value
        children = []
        for tag in (
            "GameSpeed",
            "Invincible",
            "DashMode",
            "DashAssist",
            "InfiniteStamina",
            "MirrorMode",
            "ThreeSixtyDashing",
            "InvisibleMotion",
            "NoGrabbing",
            "LowFriction",
            "SuperDashing",
            "Hiccups",
            "PlayAsBadeline",
        ):
            child = ET.Element(tag)
            value = values[tag]
            child.text = bool_text(value) if isinstance(value, bool) else str(value)
            children.append(child)
        append_with_extensions(element, children, self.extensions)
        return element

    def enabled(self) -> Iterator[str]:
        """Names of the boolean assists that are on."""
        for name, _ in ASSIST_FLAGS:
            if getattr(self, name):
                yield name


# === AREA REFERENCE ===


@dataclass
class AreaRef:
    """Reference to an area side, such as the last area played."""

    id: int = 0
    mode: str = AreaModeType.NORMAL.value
    sid: Optional[str] = None
    extra_attributes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_xml(cls, element: ET.Element) -> "AreaRef":
        return cls(
            id=int_attr(element, "ID", f"{element.tag}@ID", 0),
            mode=element.get("Mode", AreaModeType.NORMAL.value),
            sid=element.get("SID"),
            extra_attributes=unknown_attributes(element, ("ID", "Mode", "SID")),
        )

    def to_xml(self, tag: str) -> ET.Element:
        element = ET.Element(tag, {"ID": str(self.id), "Mode": self.mode})
        if self.sid is not None:
            element.set("SID", self.sid)
        for name, value in self.extra_attributes.items():
            element.set(name, value)
        return element


__all__ = [
    "ASSIST_FLAGS",
    "AreaMode",
    "AreaModeType",
    "AreaRef",
    "AreaStats",
    "Assists",
    "DashMode",
    "LevelSetStats",
    "areas_to_xml",
    "find_area",
    "level_sets_to_xml",
    "parse_areas",
    "parse_level_sets",
]
