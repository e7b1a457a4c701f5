"""
Root of a save file: the SaveData element.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Iterator, Optional

from ..errors import SchemaViolationError
from .fields import (
    XSD_URL,
    XSI_URL,
    ExtensionBlock,
    add_text,
    append_with_extensions,
    bool_field,
    bool_text,
    collect_extensions,
    int_field,
    parse_bool,
    str_field,
    string_list,
)
from .models import (
    AreaRef,
    AreaStats,
    Assists,
    LevelSetStats,
    areas_to_xml,
    find_area,
    level_sets_to_xml,
    parse_areas,
    parse_level_sets,
)

logger = logging.getLogger(__name__)

ROOT_TAG = "SaveData"
DEFAULT_LAST_SAVE = "0001-01-01T00:00:00"

# Scalar children in file order: (attribute, tag, type)
_SCALARS_HEAD = (
    ("version", "Version", str),
    ("name", "Name", str),
    ("time", "Time", int),
    ("last_save", "LastSave", str),
    ("cheat_mode", "CheatMode", bool),
    ("assist_mode", "AssistMode", bool),
    ("variant_mode", "VariantMode", bool),
)
_SCALARS_MIDDLE = (
    ("theo_sister_name", "TheoSisterName", str),
    ("unlocked_areas", "UnlockedAreas", int),
    ("total_deaths", "TotalDeaths", int),
    ("total_strawberries", "TotalStrawberries", int),
    ("total_golden_strawberries", "TotalGoldenStrawberries", int),
    ("total_jumps", "TotalJumps", int),
    ("total_wall_jumps", "TotalWallJumps", int),
    ("total_dashes", "TotalDashes", int),
)

KNOWN_TAGS = (
    [tag for _, tag, _ in _SCALARS_HEAD]
    + ["Assists"]
    + [tag for _, tag, _ in _SCALARS_MIDDLE]
    + [
        "Flags",
        "Poem",
        "SummitGems",
        "RevealedChapter9",
        "LastArea",
        "Areas",
        "LevelSets",
        "LevelSetRecycleBin",
        "HasModdedSaveData",
        "LastArea_Safe",
    ]
)


@dataclass
class SaveData:
    """A player's progress file.

    Children the model does not know (sessions, mod data) are kept as
    extension blocks and written back next to the element they followed.
    Unlocked areas are stored as a count N meaning areas 0..N are open.
    """

    version: str = ""
    name: str = ""
    time: int = 0
    last_save: str = DEFAULT_LAST_SAVE
    cheat_mode: bool = False
    assist_mode: bool = False
    variant_mode: bool = False
    assists: Assists = field(default_factory=Assists)
    theo_sister_name: str = "Alex"
    unlocked_areas: int = 0
    total_deaths: int = 0
    total_strawberries: int = 0
    total_golden_strawberries: int = 0
    total_jumps: int = 0
    total_wall_jumps: int = 0
    total_dashes: int = 0
    flags: list[str] = field(default_factory=list)
    poem: list[str] = field(default_factory=list)
    summit_gems: Optional[list[bool]] = None
    revealed_chapter9: bool = False
    last_area: AreaRef = field(default_factory=AreaRef)
    areas: list[AreaStats] = field(default_factory=list)
    level_sets: list[LevelSetStats] = field(default_factory=list)
    level_set_recycle_bin: list[LevelSetStats] = field(default_factory=list)
    has_modded_save_data: bool = False
    last_area_safe: Optional[AreaRef] = None
    extensions: list[ExtensionBlock] = field(default_factory=list)

    # === XML ===

    @classmethod
    def from_xml(cls, root: ET.Element) -> "SaveData":
        """Build a save from its root element.

        Raises:
            SchemaViolationError: If the root is not SaveData, a required
                attribute is missing, a value is malformed or keys repeat
        """
        if root.tag != ROOT_TAG:
            raise SchemaViolationError(ROOT_TAG, f"root element is '{root.tag}'")

        save = cls()
        for name, tag, kind in _SCALARS_HEAD + _SCALARS_MIDDLE:
            default = getattr(save, name)
            if kind is bool:
                setattr(save, name, bool_field(root, tag, default))
            elif kind is int:
                setattr(save, name, int_field(root, tag, default))
            else:
                setattr(save, name, str_field(root, tag, default))

        save.assists = Assists.from_xml(root.find("Assists"))
        save.flags = string_list(root.find("Flags"))
        save.poem = string_list(root.find("Poem"))
        gems = root.find("SummitGems")
        if gems is not None:
            save.summit_gems = [
                parse_bool(gem.text, "SummitGems/boolean") for gem in gems.findall("boolean")
            ]
        save.revealed_chapter9 = bool_field(root, "RevealedChapter9")

        last_area = root.find("LastArea")
        if last_area is not None:
            save.last_area = AreaRef.from_xml(last_area)
        last_area_safe = root.find("LastArea_Safe")
        if last_area_safe is not None:
            save.last_area_safe = AreaRef.from_xml(last_area_safe)

        save.areas = parse_areas(root.find("Areas"), "Areas")
        save.level_sets = parse_level_sets(root.find("LevelSets"), "LevelSets")
        save.level_set_recycle_bin = parse_level_sets(
            root.find("LevelSetRecycleBin"), "LevelSetRecycleBin"
        )
        save.has_modded_save_data = bool_field(root, "HasModdedSaveData")
        save.extensions = collect_extensions(root, KNOWN_TAGS)

        logger.debug(
            f"Parsed save '{save.name}': {len(save.areas)} area(s), "
            f"{len(save.level_sets)} level set(s), {len(save.extensions)} extension block(s)"
        )
        return save

    def to_xml(self) -> ET.Element:
        """Build the SaveData element, namespace declarations included."""
        root = ET.Element(ROOT_TAG, {"xmlns:xsi": XSI_URL, "xmlns:xsd": XSD_URL})
        children: list[ET.Element] = []

        def scalar(tag: str, value: object) -> None:
            element = ET.Element(tag)
            element.text = bool_text(value) if isinstance(value, bool) else str(value)
            children.append(element)

        def string_items(tag: str, values: list[str]) -> None:
            element = ET.Element(tag)
            for value in values:
                add_text(element, "string", value)
            children.append(element)

        for name, tag, _ in _SCALARS_HEAD:
            scalar(tag, getattr(self, name))
        children.append(self.assists.to_xml())
        for name, tag, _ in _SCALARS_MIDDLE:
            scalar(tag, getattr(self, name))

        string_items("Flags", self.flags)
        string_items("Poem", self.poem)
        if self.summit_gems is not None:
            gems = ET.Element("SummitGems")
            for gem in self.summit_gems:
                add_text(gems, "boolean", gem)
            children.append(gems)
        scalar("RevealedChapter9", self.revealed_chapter9)
        children.append(self.last_area.to_xml("LastArea"))
        children.append(areas_to_xml(self.areas))
        if self.level_sets:
            children.append(level_sets_to_xml("LevelSets", self.level_sets))
        if self.level_set_recycle_bin:
            children.append(level_sets_to_xml("LevelSetRecycleBin", self.level_set_recycle_bin))
        scalar("HasModdedSaveData", self.has_modded_save_data)
        if self.last_area_safe is not None:
            children.append(self.last_area_safe.to_xml("LastArea_Safe"))

        append_with_extensions(root, children, self.extensions)
        return root

    # === AREAS ===

    def all_areas(self) -> Iterator[AreaStats]:
        """Areas of the base game, then of every level set, then of the recycle bin."""
        yield from self.areas
        for level_set in self.level_sets:
            yield from level_set.areas
        for level_set in self.level_set_recycle_bin:
            yield from level_set.areas

    def area(self, key: str) -> Optional[AreaStats]:
        """First area whose key (SID, else numeric ID) is key."""
        for area in self.all_areas():
            if area.key == key:
                return area
        return None

    def level_set(self, name: str) -> Optional[LevelSetStats]:
        for level_set in self.level_sets:
            if level_set.name == name:
                return level_set
        return None

    def add_area(self, area: AreaStats) -> None:
        """Add a base game area.

        Raises:
            SchemaViolationError: If an area with the same key exists
        """
        if find_area(self.areas, area.key) is not None:
            raise SchemaViolationError("Areas", f"duplicate area '{area.key}'")
        self.areas.append(area)
        self.recompute_totals()

    def add_strawberry(self, area_key: str, mode: int, key: str) -> bool:
        """Record a strawberry and keep every total consistent.

        Raises:
            KeyError: If no area has area_key
        """
        area = self.area(area_key)
        if area is None:
            raise KeyError(area_key)
        added = area.mode(mode).add_strawberry(key)
        self.recompute_totals()
        return added

    def remove_strawberry(self, area_key: str, mode: int, key: str) -> bool:
        """Forget a strawberry and keep every total consistent.

        Raises:
            KeyError: If no area has area_key
        """
        area = self.area(area_key)
        if area is None:
            raise KeyError(area_key)
        removed = area.mode(mode).remove_strawberry(key)
        self.recompute_totals()
        return removed

    def recompute_totals(self) -> None:
        """Store every strawberry total as the fold over per-area records.

        Each mode's count becomes the size of its strawberry list, the
        root total sums the base game areas and each level set sums its own.
        """
        for area in self.all_areas():
            for mode in area.modes:
                mode.total_strawberries = len(mode.strawberries)
        self.total_strawberries = sum(area.total_strawberries for area in self.areas)
        for level_set in self.level_sets + self.level_set_recycle_bin:
            level_set.recompute_totals()

    # === FLAGS ===

    def add_flag(self, flag: str) -> None:
        if flag not in self.flags:
            self.flags.append(flag)

    def remove_flag(self, flag: str) -> bool:
        if flag not in self.flags:
            return False
        self.flags.remove(flag)
        return True

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags

    # === UNLOCKED AREAS ===

    @property
    def unlocked_area_ids(self) -> set[int]:
        return set(range(self.unlocked_areas + 1))

    def is_area_unlocked(self, area_id: int) -> bool:
        return 0 <= area_id <= self.unlocked_areas

    def unlock_area(self, area_id: int) -> None:
        """Unlock area_id and, as the game does, every area before it."""
        if area_id < 0:
            raise ValueError(f"Invalid area ID {area_id}")
        self.unlocked_areas = max(self.unlocked_areas, area_id)

    def lock_area(self, area_id: int) -> None:
        """Lock area_id and every area after it.

        Raises:
            ValueError: If area_id is 0 or negative; the prologue is always open
        """
        if area_id <= 0:
            raise ValueError(f"Area {area_id} cannot be locked")
        self.unlocked_areas = min(self.unlocked_areas, area_id - 1)
