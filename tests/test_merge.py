"""Tests for merging two saves."""

import copy


def make_save(name: str, strawberries: list[str], dash_assist: bool):
    """Save with one area '1a' holding strawberries in its A side."""
    from celeste_maped.saves import AreaMode, AreaStats, SaveData

    save = SaveData(name=name, version="1.4.0.0")
    save.areas.append(AreaStats(id=1, sid="1a", modes=[AreaMode(strawberries=list(strawberries))]))
    save.assists.dash_assist = dash_assist
    save.recompute_totals()
    return save


def strawberry_keys(save) -> set[str]:
    return {
        key for area in save.all_areas() for mode in area.modes for key in mode.strawberries
    }


class TestMergeScenario:
    """Test the two-save scenario from the field."""

    def test_strawberries_and_assists(self) -> None:
        """Test {s1,s2,s3} + {s3,s4} gives four strawberries and dash assist on."""
        from celeste_maped.saves import merge_saves

        first = make_save("Madeline", ["s1", "s2", "s3"], dash_assist=False)
        second = make_save("Madeline", ["s3", "s4"], dash_assist=True)

        result = merge_saves(first, second)
        area = result.save.area("1a")
        assert area.modes[0].strawberries == ["s1", "s2", "s3", "s4"]
        assert area.modes[0].total_strawberries == 4
        assert result.save.total_strawberries == 4
        assert result.save.assists.dash_assist is True
        assert result.notes == []

    def test_inputs_untouched(self) -> None:
        """Test merging never mutates either input."""
        from celeste_maped.saves import merge_saves

        first = make_save("Madeline", ["s1"], dash_assist=False)
        second = make_save("Theo", ["s2"], dash_assist=True)
        first_before = copy.deepcopy(first)
        second_before = copy.deepcopy(second)

        result = merge_saves(first, second)
        result.save.add_flag("edited")
        assert first == first_before
        assert second == second_before


class TestMergeLaws:
    """Test idempotence, commutativity and totals."""

    def test_idempotent(self) -> None:
        """Test merging a save with itself changes nothing."""
        from celeste_maped.saves import merge_saves

        save = make_save("Madeline", ["s1", "s2"], dash_assist=True)
        save.flags = ["MetTheo"]
        save.areas[0].modes[0].checkpoints = ["cp1", "cp2"]
        result = merge_saves(save, save)
        assert result.save == save
        assert result.notes == []

    def test_merging_other_again_changes_nothing(self) -> None:
        """Test merge(merge(a, b), b) equals merge(a, b)."""
        import xml.etree.ElementTree as ET

        from celeste_maped.saves import AreaMode, ExtensionBlock, merge_saves

        first = make_save("Madeline", ["s1", "s2"], dash_assist=False)
        mode = first.areas[0].modes[0]
        mode.checkpoints = ["cp2"]
        mode.completed = True
        mode.best_time = 900
        mode.deaths = 4
        first.flags = ["MetTheo"]
        first.extensions = [
            ExtensionBlock.capture(ET.fromstring("<ModData><Value>1</Value></ModData>"), "Flags")
        ]

        second = make_save("Madeline", ["s3"], dash_assist=True)
        other = second.areas[0].modes[0]
        other.checkpoints = ["cp1", "cp2", "cp3"]
        other.best_time = 400
        other.deaths = 9
        other.heart_gem = True
        second.areas[0].modes.append(AreaMode(strawberries=["b1"], completed=True, best_time=700))
        second.flags = ["Summit"]
        second.total_golden_strawberries = 2
        second.extensions = [
            ExtensionBlock.capture(ET.fromstring("<ModData><Value>2</Value></ModData>"), "Flags"),
            ExtensionBlock.capture(ET.fromstring("<Other />"), None),
        ]

        once = merge_saves(first, second).save
        twice = merge_saves(once, second).save
        assert twice == once
        assert once.areas[0].modes[0].checkpoints == ["cp1", "cp2", "cp3"]
        assert [block.tag for block in once.extensions] == ["ModData", "Other"]

    def test_commutative_on_sets(self) -> None:
        """Test both merge orders collect the same progress."""
        from celeste_maped.saves import AreaStats, merge_saves

        first = make_save("Madeline", ["s1", "s2"], dash_assist=False)
        first.flags = ["a", "b"]
        first.total_deaths = 10
        second = make_save("Madeline", ["s2", "s3"], dash_assist=True)
        second.flags = ["c", "a"]
        second.total_deaths = 30
        second.add_area(AreaStats(id=2, sid="2a"))

        forward = merge_saves(first, second).save
        backward = merge_saves(second, first).save
        assert strawberry_keys(forward) == strawberry_keys(backward) == {"s1", "s2", "s3"}
        assert set(forward.flags) == set(backward.flags) == {"a", "b", "c"}
        assert forward.total_strawberries == backward.total_strawberries == 3
        assert forward.total_deaths == backward.total_deaths == 30
        assert {area.key for area in forward.areas} == {area.key for area in backward.areas}

    def test_totals_consistent(self) -> None:
        """Test stored totals equal the per-area counts after a merge."""
        from celeste_maped.saves import AreaMode, AreaStats, LevelSetStats, merge_saves

        first = make_save("Madeline", ["s1"], dash_assist=False)
        first.level_sets.append(
            LevelSetStats(
                name="Mod/Set",
                areas=[AreaStats(id=10, sid="Mod/Set/a", modes=[AreaMode(strawberries=["m1"])])],
            )
        )
        second = make_save("Madeline", ["s2"], dash_assist=False)
        second.level_sets.append(
            LevelSetStats(
                name="Mod/Set",
                areas=[AreaStats(id=10, sid="Mod/Set/a", modes=[AreaMode(strawberries=["m2"])])],
            )
        )
        second.total_strawberries = 99

        merged = merge_saves(first, second).save
        assert merged.total_strawberries == sum(area.total_strawberries for area in merged.areas)
        assert merged.total_strawberries == 2
        assert merged.level_set("Mod/Set").total_strawberries == 2


class TestMergeRules:
    """Test individual merge rules."""

    def test_records(self) -> None:
        """Test completion flags OR and best records prefer completed runs."""
        from celeste_maped.saves import merge_saves

        first = make_save("Madeline", [], dash_assist=False)
        mode = first.areas[0].modes[0]
        mode.completed = True
        mode.best_time = 900
        mode.deaths = 5

        second = make_save("Madeline", [], dash_assist=False)
        other = second.areas[0].modes[0]
        other.best_time = 400
        other.deaths = 12
        other.heart_gem = True

        merged = merge_saves(first, second).save.areas[0].modes[0]
        assert merged.completed is True
        assert merged.heart_gem is True
        assert merged.best_time == 900
        assert merged.deaths == 12

        other.completed = True
        merged = merge_saves(first, second).save.areas[0].modes[0]
        assert merged.best_time == 400

    def test_checkpoints_keep_order(self) -> None:
        """Test missing checkpoints are inserted at their position."""
        from celeste_maped.saves.merge import merge_checkpoints

        assert merge_checkpoints(["b", "c"], ["a", "b", "c"]) == ["a", "b", "c"]
        assert merge_checkpoints(["a", "b"], ["a", "b", "c"]) == ["a", "b", "c"]
        assert merge_checkpoints(["a"], []) == ["a"]

    def test_golden_is_approximate(self) -> None:
        """Test differing golden totals take the max and add a note."""
        from celeste_maped.saves import merge_saves

        first = make_save("Madeline", [], dash_assist=False)
        first.total_golden_strawberries = 1
        second = make_save("Madeline", [], dash_assist=False)
        second.total_golden_strawberries = 3

        result = merge_saves(first, second)
        assert result.save.total_golden_strawberries == 3
        assert [note.category for note in result.notes] == ["golden"]

    def test_identity_from_base(self) -> None:
        """Test identity fields come from base with a note."""
        from celeste_maped.saves import merge_saves

        result = merge_saves(
            make_save("Madeline", [], dash_assist=False),
            make_save("Badeline", [], dash_assist=False),
        )
        assert result.save.name == "Madeline"
        assert [note.category for note in result.notes] == ["identity"]
        assert "'name'" in result.notes[0].message

    def test_assists_and_unlocks(self) -> None:
        """Test game speed takes the slowest, dash mode the most permissive."""
        from celeste_maped.saves import DashMode, merge_saves

        first = make_save("Madeline", [], dash_assist=False)
        first.assists.game_speed = 8
        first.assists.dash_mode = DashMode.INFINITE
        first.unlocked_areas = 2
        first.summit_gems = [True, False]
        second = make_save("Madeline", [], dash_assist=False)
        second.assists.game_speed = 10
        second.assists.dash_mode = DashMode.TWO
        second.unlocked_areas = 5
        second.summit_gems = [False, False, True]

        merged = merge_saves(first, second).save
        assert merged.assists.game_speed == 8
        assert merged.assists.dash_mode is DashMode.INFINITE
        assert merged.unlocked_areas == 5
        assert merged.summit_gems == [True, False, True]

    def test_extra_modes_and_areas_appended(self) -> None:
        """Test modes and areas only one side has are kept."""
        from celeste_maped.saves import AreaMode, merge_saves

        first = make_save("Madeline", ["s1"], dash_assist=False)
        second = make_save("Madeline", [], dash_assist=False)
        second.areas[0].modes.append(AreaMode(strawberries=["b1"]))
        second.areas[0].cassette = True

        merged = merge_saves(first, second).save
        area = merged.area("1a")
        assert len(area.modes) == 2
        assert area.modes[1].strawberries == ["b1"]
        assert area.cassette is True
        assert merged.total_strawberries == 2

    def test_extension_conflict(self) -> None:
        """Test differing unknown elements keep base's version with a note."""
        from celeste_maped.saves import merge_saves, read_save

        first = read_save("<SaveData><Name>M</Name><ModData><Value>1</Value></ModData></SaveData>")
        second = read_save("<SaveData><Name>M</Name><ModData><Value>2</Value></ModData></SaveData>")
        third = read_save("<SaveData><Name>M</Name><Other /></SaveData>")

        result = merge_saves(first, second)
        assert result.save.extensions[0].element.findtext("Value") == "1"
        assert [note.category for note in result.notes] == ["extension"]

        result = merge_saves(first, third)
        assert [block.tag for block in result.save.extensions] == ["ModData", "Other"]
        assert result.notes == []
