"""
Merging two saves that progressed independently.

merge_saves() is a monotonic join: nothing recorded in either input is
lost. Every category has its own rule:

- collected strawberries, checkpoints, flags, poem entries: ordered union
- completion flags, hearts, cassettes, assists: OR
- deaths, play time and global counters: max
- best times, dashes and deaths: the better value among completed runs
- unlocked areas: max
- golden strawberries: max, reported as approximate
- identity fields (name, version, last area): taken from base

The inputs are never mutated. Anything the merge cannot represent exactly
is reported as a MergeNote instead of failing.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, TypeVar

from .fields import ExtensionBlock
from .models import ASSIST_FLAGS, AreaMode, AreaStats, Assists, LevelSetStats
from .save_data import SaveData

T = TypeVar("T")

_COUNTERS = ("time", "total_deaths", "total_jumps", "total_wall_jumps", "total_dashes")
_IDENTITY_FIELDS = (
    "name",
    "version",
    "last_save",
    "theo_sister_name",
    "last_area",
    "last_area_safe",
)


@dataclass
class MergeNote:
    """Something the merge result does not represent exactly.

    Attributes:
        category: Merge category ("golden", "identity", "extension")
        message: Human readable description
    """

    category: str
    message: str


@dataclass
class MergeResult:
    save: SaveData
    notes: list[MergeNote] = field(default_factory=list)


# === PRIMITIVE RULES ===


def ordered_union(first: Iterable[T], second: Iterable[T]) -> list[T]:
    """Items of first, then the items of second not seen yet; duplicates dropped."""
    result: list[T] = []
    for item in list(first) + list(second):
        if item not in result:
            result.append(item)
    return result


def merge_checkpoints(base: list[str], other: list[str]) -> list[str]:
    """Insert checkpoints missing from base at their index in other.

    A checkpoint found at position i in other is assumed to come before
    whatever base has at position i, which keeps [a, b, c] into [b, c] and
    [a, b, c] into [a, b] in order.
    """
    result = ordered_union(base, [])
    for index, checkpoint in enumerate(other):
        if checkpoint not in result:
            result.insert(min(index, len(result)), checkpoint)
    return result


def _min_set(first: int, second: int) -> int:
    """Minimum where 0 means no value recorded."""
    if first == 0:
        return second
    if second == 0:
        return first
    return min(first, second)


def _best(
    base_value: int,
    other_value: int,
    base_done: bool,
    other_done: bool,
    zero_is_unset: bool,
) -> int:
    """Best (lowest) record, preferring the side that actually finished."""
    if base_done and not other_done:
        return base_value
    if other_done and not base_done:
        return other_value
    return _min_set(base_value, other_value) if zero_is_unset else min(base_value, other_value)


def merge_mode(base: AreaMode, other: AreaMode) -> AreaMode:
    merged = copy.deepcopy(base)
    merged.strawberries = ordered_union(base.strawberries, other.strawberries)
    merged.total_strawberries = len(merged.strawberries)
    merged.checkpoints = merge_checkpoints(base.checkpoints, other.checkpoints)

    merged.completed = base.completed or other.completed
    merged.single_run_completed = base.single_run_completed or other.single_run_completed
    merged.full_clear = base.full_clear or other.full_clear
    merged.heart_gem = base.heart_gem or other.heart_gem

    merged.deaths = max(base.deaths, other.deaths)
    merged.time_played = max(base.time_played, other.time_played)

    merged.best_time = _best(
        base.best_time, other.best_time, base.completed, other.completed, True
    )
    merged.best_full_clear_time = _best(
        base.best_full_clear_time,
        other.best_full_clear_time,
        base.full_clear,
        other.full_clear,
        True,
    )
    merged.best_dashes = _best(
        base.best_dashes, other.best_dashes, base.completed, other.completed, False
    )
    merged.best_deaths = _best(
        base.best_deaths, other.best_deaths, base.completed, other.completed, False
    )

    for name, value in other.extra_attributes.items():
        merged.extra_attributes.setdefault(name, value)
    return merged


def merge_extensions(
    base: list[ExtensionBlock],
    other: list[ExtensionBlock],
    notes: list[MergeNote],
    where: str,
) -> list[ExtensionBlock]:
    """Keep base's blocks and add other's blocks with a tag base lacks."""
    merged = copy.deepcopy(base)
    tags = {block.tag for block in base}
    for block in other:
        if block.tag not in tags:
            merged.append(copy.deepcopy(block))
            tags.add(block.tag)
            continue
        if not any(block == kept for kept in base if kept.tag == block.tag):
            notes.append(
                MergeNote(
                    "extension",
                    f"{where}: kept the base version of '{block.tag}', the other differs",
                )
            )
    return merged


# === AREAS AND LEVEL SETS ===


class SaveMerger:
    """Merges one pair of saves, collecting notes along the way."""

    def __init__(self, base: SaveData, other: SaveData):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.base = base
        self.other = other
        self.notes: list[MergeNote] = []

    def note(self, category: str, message: str) -> None:
        self.notes.append(MergeNote(category, message))
        self.logger.warning(f"Merge note [{category}]: {message}")

    def merge(self) -> MergeResult:
        base, other = self.base, self.other
        merged = copy.deepcopy(base)

        self.merge_identity(merged)
        for name in _COUNTERS:
            setattr(merged, name, max(getattr(base, name), getattr(other, name)))

        merged.cheat_mode = base.cheat_mode or other.cheat_mode
        merged.assist_mode = base.assist_mode or other.assist_mode
        merged.variant_mode = base.variant_mode or other.variant_mode
        merged.assists = self.merge_assists(base.assists, other.assists)

        merged.unlocked_areas = max(base.unlocked_areas, other.unlocked_areas)
        merged.flags = ordered_union(base.flags, other.flags)
        merged.poem = ordered_union(base.poem, other.poem)
        merged.summit_gems = self.merge_summit_gems(base.summit_gems, other.summit_gems)
        merged.revealed_chapter9 = base.revealed_chapter9 or other.revealed_chapter9
        merged.has_modded_save_data = base.has_modded_save_data or other.has_modded_save_data

        merged.areas = self.merge_areas(base.areas, other.areas)
        merged.level_sets = self.merge_level_sets(base.level_sets, other.level_sets)
        merged.level_set_recycle_bin = self.merge_level_sets(
            base.level_set_recycle_bin, other.level_set_recycle_bin
        )

        merged.total_golden_strawberries = self.merge_golden(
            base.total_golden_strawberries, other.total_golden_strawberries
        )
        merged.extensions = self.merge_extension_blocks(base.extensions, other.extensions, "SaveData")

        merged.recompute_totals()
        self.logger.info(
            f"Merged saves '{base.name}' and '{other.name}': "
            f"{merged.total_strawberries} strawberries, {len(self.notes)} note(s)"
        )
        return MergeResult(merged, self.notes)

    def merge_identity(self, merged: SaveData) -> None:
        for name in _IDENTITY_FIELDS:
            base_value = getattr(self.base, name)
            other_value = getattr(self.other, name)
            if base_value != other_value:
                self.note(
                    "identity",
                    f"'{name}' differs ({base_value!r} vs {other_value!r}); kept the base value",
                )
            setattr(merged, name, copy.deepcopy(base_value))

    def merge_assists(self, base: Assists, other: Assists) -> Assists:
        merged = copy.deepcopy(base)
        for name, _ in ASSIST_FLAGS:
            setattr(merged, name, getattr(base, name) or getattr(other, name))
        merged.game_speed = min(base.game_speed, other.game_speed)
        merged.dash_mode = max(base.dash_mode, other.dash_mode, key=lambda mode: mode.rank)
        merged.extensions = self.merge_extension_blocks(base.extensions, other.extensions, "Assists")
        return merged

    @staticmethod
    def merge_summit_gems(
        base: Optional[list[bool]], other: Optional[list[bool]]
    ) -> Optional[list[bool]]:
        if base is None and other is None:
            return None
        base = base or []
        other = other or []
        length = max(len(base), len(other))
        padded_base = base + [False] * (length - len(base))
        padded_other = other + [False] * (length - len(other))
        return [a or b for a, b in zip(padded_base, padded_other)]

    def merge_golden(self, base: int, other: int) -> int:
        if base != other or (base > 0 and other > 0):
            self.note(
                "golden",
                f"golden strawberry totals {base} and {other} merged as {max(base, other)}; "
                "per-area golden progress is not reconciled, so this count is approximate",
            )
        return max(base, other)

    def merge_extension_blocks(
        self, base: list[ExtensionBlock], other: list[ExtensionBlock], where: str
    ) -> list[ExtensionBlock]:
        notes: list[MergeNote] = []
        merged = merge_extensions(base, other, notes, where)
        for note in notes:
            self.note(note.category, note.message)
        return merged

    def merge_area(self, base: AreaStats, other: AreaStats) -> AreaStats:
        merged = copy.deepcopy(base)
        merged.cassette = base.cassette or other.cassette
        merged.modes = []
        for index, (base_mode, other_mode) in enumerate(zip(base.modes, other.modes)):
            mode = merge_mode(base_mode, other_mode)
            mode.extensions = self.merge_extension_blocks(
                base_mode.extensions, other_mode.extensions, f"AreaStats[{base.key}]/Modes[{index}]"
            )
            merged.modes.append(mode)
        longer = base.modes if len(base.modes) > len(other.modes) else other.modes
        merged.modes.extend(copy.deepcopy(longer[len(merged.modes):]))
        for name, value in other.extra_attributes.items():
            merged.extra_attributes.setdefault(name, value)
        merged.extensions = self.merge_extension_blocks(
            base.extensions, other.extensions, f"AreaStats[{base.key}]"
        )
        return merged

    def merge_areas(self, base: list[AreaStats], other: list[AreaStats]) -> list[AreaStats]:
        """Match areas by key; areas only in other are appended."""
        others = {area.key: area for area in other}
        merged = []
        for area in base:
            match = others.pop(area.key, None)
            merged.append(self.merge_area(area, match) if match is not None else copy.deepcopy(area))
        merged.extend(copy.deepcopy(area) for area in other if area.key in others)
        return merged

    def merge_level_set(self, base: LevelSetStats, other: LevelSetStats) -> LevelSetStats:
        merged = copy.deepcopy(base)
        merged.areas = self.merge_areas(base.areas, other.areas)
        merged.poem = ordered_union(base.poem, other.poem)
        merged.unlocked_areas = max(base.unlocked_areas, other.unlocked_areas)
        merged.extensions = self.merge_extension_blocks(
            base.extensions, other.extensions, f"LevelSetStats[{base.name}]"
        )
        return merged

    def merge_level_sets(
        self, base: list[LevelSetStats], other: list[LevelSetStats]
    ) -> list[LevelSetStats]:
        others = {level_set.name: level_set for level_set in other}
        merged = []
        for level_set in base:
            match = others.pop(level_set.name, None)
            merged.append(
                self.merge_level_set(level_set, match) if match is not None else copy.deepcopy(level_set)
            )
        merged.extend(copy.deepcopy(level_set) for level_set in other if level_set.name in others)
        return merged


def merge_saves(base: SaveData, other: SaveData) -> MergeResult:
    """Merge other into a copy of base.

    Args:
        base: Save whose identity fields and extension blocks win
        other: Save whose progress is added

    Returns:
        MergeResult with the merged save and notes on approximations
    """
    return SaveMerger(base, other).merge()
