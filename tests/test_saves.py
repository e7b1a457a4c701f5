"""Tests for the save file model."""

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

SAVE_XML = """<?xml version="1.0" encoding="utf-8"?>
<SaveData xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" xmlns:xsd="http://www.w3.org/2001/XMLSchema">
  <Version>1.4.0.0</Version>
  <Name>Madeline</Name>
  <Time>1234567890</Time>
  <LastSave>2024-03-01T18:30:00.1234567+01:00</LastSave>
  <CheatMode>false</CheatMode>
  <AssistMode>true</AssistMode>
  <VariantMode>false</VariantMode>
  <Assists>
    <GameSpeed>7</GameSpeed>
    <Invincible>false</Invincible>
    <DashMode>Two</DashMode>
    <DashAssist>true</DashAssist>
    <InfiniteStamina>false</InfiniteStamina>
    <MirrorMode>false</MirrorMode>
    <ThreeSixtyDashing>false</ThreeSixtyDashing>
    <InvisibleMotion>false</InvisibleMotion>
    <NoGrabbing>false</NoGrabbing>
    <LowFriction>false</LowFriction>
    <SuperDashing>false</SuperDashing>
    <Hiccups>false</Hiccups>
    <PlayAsBadeline>false</PlayAsBadeline>
  </Assists>
  <TheoSisterName>Alex</TheoSisterName>
  <UnlockedAreas>2</UnlockedAreas>
  <TotalDeaths>321</TotalDeaths>
  <TotalStrawberries>2</TotalStrawberries>
  <TotalGoldenStrawberries>0</TotalGoldenStrawberries>
  <TotalJumps>1000</TotalJumps>
  <TotalWallJumps>200</TotalWallJumps>
  <TotalDashes>300</TotalDashes>
  <Flags>
    <string>MetTheo</string>
    <string xsi:nil="true" />
  </Flags>
  <Poem>
    <string>fc</string>
  </Poem>
  <SummitGems>
    <boolean>true</boolean>
    <boolean>false</boolean>
  </SummitGems>
  <RevealedChapter9>false</RevealedChapter9>
  <LastArea ID="1" Mode="Normal" SID="Celeste/1-ForsakenCity" />
  <CurrentSession_Safe>
    <Area ID="1" Mode="Normal" />
    <Counters xsi:nil="true" />
  </CurrentSession_Safe>
  <Areas>
    <AreaStats ID="0" Cassette="false" SID="Celeste/0-Intro">
      <Modes>
        <AreaModeStats TotalStrawberries="0" Completed="true" SingleRunCompleted="true" FullClear="false" Deaths="3" TimePlayed="500" BestTime="400" BestFullClearTime="0" BestDashes="2" BestDeaths="3" HeartGem="false">
          <Strawberries />
          <Checkpoints />
        </AreaModeStats>
      </Modes>
    </AreaStats>
    <AreaStats ID="1" Cassette="true" SID="Celeste/1-ForsakenCity">
      <Modes>
        <AreaModeStats TotalStrawberries="2" Completed="false" SingleRunCompleted="false" FullClear="false" Deaths="40" TimePlayed="9000" BestTime="0" BestFullClearTime="0" BestDashes="0" BestDeaths="0" HeartGem="false">
          <Strawberries>
            <EntityID Key="a-01:12" />
            <EntityID Key="b-02:4" />
          </Strawberries>
          <Checkpoints>
            <string>6</string>
          </Checkpoints>
        </AreaModeStats>
      </Modes>
    </AreaStats>
  </Areas>
  <LevelSets>
    <LevelSetStats Name="SpringCollab/1-Beginner">
      <Areas>
        <AreaStats ID="10" Cassette="false" SID="SpringCollab/1-Beginner/lvl1">
          <Modes>
            <AreaModeStats TotalStrawberries="1" Completed="false" SingleRunCompleted="false" FullClear="false" Deaths="1" TimePlayed="10" BestTime="0" BestFullClearTime="0" BestDashes="0" BestDeaths="0" HeartGem="false">
              <Strawberries>
                <EntityID Key="r1:3" />
              </Strawberries>
              <Checkpoints />
            </AreaModeStats>
          </Modes>
        </AreaStats>
      </Areas>
      <Poem />
      <UnlockedAreas>0</UnlockedAreas>
      <TotalStrawberries>1</TotalStrawberries>
    </LevelSetStats>
  </LevelSets>
  <HasModdedSaveData>true</HasModdedSaveData>
  <LastArea_Safe ID="1" Mode="Normal" SID="Celeste/1-ForsakenCity" />
</SaveData>
"""


class TestReadSave:
    """Test parsing of save documents."""

    def test_fields(self) -> None:
        """Test scalar fields, assists and area records."""
        from celeste_maped.saves import DashMode, read_save

        save = read_save(SAVE_XML)
        assert save.version == "1.4.0.0"
        assert save.name == "Madeline"
        assert save.time == 1234567890
        assert save.last_save == "2024-03-01T18:30:00.1234567+01:00"
        assert save.assist_mode is True
        assert save.assists.game_speed == 7
        assert save.assists.dash_mode is DashMode.TWO
        assert list(save.assists.enabled()) == ["dash_assist"]
        assert save.flags == ["MetTheo"]
        assert save.poem == ["fc"]
        assert save.summit_gems == [True, False]
        assert save.last_area.sid == "Celeste/1-ForsakenCity"
        assert save.last_area_safe is not None

        city = save.area("Celeste/1-ForsakenCity")
        assert city.cassette is True
        assert city.modes[0].strawberries == ["a-01:12", "b-02:4"]
        assert city.modes[0].checkpoints == ["6"]
        assert save.level_set("SpringCollab/1-Beginner").total_strawberries == 1
        assert save.area("SpringCollab/1-Beginner/lvl1").modes[0].has_strawberry("r1:3")

    def test_defaults_for_missing_fields(self) -> None:
        """Test an almost empty document takes the documented defaults."""
        from celeste_maped.saves import DashMode, read_save
        from celeste_maped.saves.save_data import DEFAULT_LAST_SAVE

        save = read_save("<SaveData />")
        assert save.version == ""
        assert save.theo_sister_name == "Alex"
        assert save.last_save == DEFAULT_LAST_SAVE
        assert save.assists.game_speed == 10
        assert save.assists.dash_mode is DashMode.NORMAL
        assert save.summit_gems is None
        assert save.last_area_safe is None
        assert save.areas == []

    def test_bytes_with_bom(self) -> None:
        """Test UTF-8 input with a byte order mark."""
        from celeste_maped.saves import read_save

        save = read_save(b"\xef\xbb\xbf" + SAVE_XML.encode("utf-8"))
        assert save.name == "Madeline"

    @pytest.mark.parametrize(
        "document, field",
        [
            ("<SaveData><Time>soon</Time></SaveData>", "Time"),
            ("<SaveData><CheatMode>maybe</CheatMode></SaveData>", "CheatMode"),
            ("<Settings />", "SaveData"),
            ("<SaveData><Areas><AreaStats Cassette='false' /></Areas></SaveData>", "AreaStats@ID"),
            ("<SaveData><Assists><DashMode>Twice</DashMode></Assists></SaveData>", "Assists/DashMode"),
            ("<SaveData><LevelSets><LevelSetStats /></LevelSets></SaveData>", "LevelSetStats@Name"),
            ("<SaveData><Name>unclosed</SaveData>", "<document>"),
        ],
    )
    def test_schema_violations(self, document: str, field: str) -> None:
        """Test malformed documents name the offending field."""
        from celeste_maped.errors import SchemaViolationError
        from celeste_maped.saves import read_save

        with pytest.raises(SchemaViolationError) as exc_info:
            read_save(document)
        assert exc_info.value.field == field

    def test_duplicate_area_keys(self) -> None:
        """Test two areas with the same SID are rejected."""
        from celeste_maped.errors import SchemaViolationError
        from celeste_maped.saves import read_save

        document = (
            "<SaveData><Areas>"
            "<AreaStats ID='1' SID='x' /><AreaStats ID='2' SID='x' />"
            "</Areas></SaveData>"
        )
        with pytest.raises(SchemaViolationError):
            read_save(document)


class TestWriteSave:
    """Test serialization of save documents."""

    def test_header_and_namespaces(self) -> None:
        """Test the declaration and both namespace prefixes are written once."""
        from celeste_maped.saves import XML_HEADER, XSI_URL, read_save, write_save

        data = write_save(read_save(SAVE_XML))
        text = data.decode("utf-8")
        assert text.startswith(XML_HEADER + "\n<SaveData ")
        assert f'xmlns:xsi="{XSI_URL}"' in text
        assert text.count("xmlns:xsi") == 1
        assert "ns0" not in text
        assert "\n  <Version>1.4.0.0</Version>" in text

    def test_roundtrip(self) -> None:
        """Test a written save reads back equal."""
        from celeste_maped.saves import read_save, write_save

        save = read_save(SAVE_XML)
        assert read_save(write_save(save)) == save
        assert write_save(read_save(write_save(save))) == write_save(save)

    def test_extension_blocks_kept_in_place(self) -> None:
        """Test an element the model does not know is written back after its neighbour."""
        from celeste_maped.saves import XSI_URL, read_save, write_save

        save = read_save(SAVE_XML)
        assert [block.tag for block in save.extensions] == ["CurrentSession_Safe"]
        assert save.extensions[0].after == "LastArea"

        root = ET.fromstring(write_save(save))
        tags = [child.tag for child in root]
        assert tags[tags.index("LastArea") + 1] == "CurrentSession_Safe"
        session = root.find("CurrentSession_Safe")
        assert session.find("Area").get("ID") == "1"
        assert session.find("Counters").get(f"{{{XSI_URL}}}nil") == "true"

    def test_unknown_attributes_kept(self) -> None:
        """Test unknown attributes survive, namespaced ones without a new declaration."""
        from celeste_maped.saves import read_save, write_save

        text = SAVE_XML.replace(
            '<LastArea ID="1" Mode="Normal"', '<LastArea ID="1" Mode="Normal" Chapter="x"'
        ).replace(
            '<AreaStats ID="0" Cassette="false"',
            '<AreaStats ID="0" Cassette="false" xsi:type="Modded"',
        ).replace('FullClear="false" Deaths="3"', 'FullClear="false" xsi:label="m" Deaths="3"')

        save = read_save(text)
        assert save.last_area.extra_attributes == {"Chapter": "x"}
        assert save.areas[0].extra_attributes == {"xsi:type": "Modded"}
        assert save.areas[0].modes[0].extra_attributes == {"xsi:label": "m"}

        data = write_save(save).decode("utf-8")
        assert data.count("xmlns:xsi") == 1
        assert "ns0" not in data
        assert read_save(data) == save

    def test_indent_setting(self, app_settings) -> None:
        """Test indentation can be turned off."""
        from celeste_maped.saves import read_save, write_save

        app_settings.saves.indent_output = False
        data = write_save(read_save(SAVE_XML), app_settings)
        assert b"\n  <Version>" not in data
        assert b"<Version>1.4.0.0</Version>" in data

    def test_file_roundtrip(self, tmp_path: Path) -> None:
        """Test writing and reading a save file."""
        from celeste_maped.saves import read_save, read_save_file, write_save_file

        save = read_save(SAVE_XML)
        path = tmp_path / "Saves" / "0.celeste"
        write_save_file(path, save)
        assert read_save_file(path) == save


class TestSaveEditing:
    """Test edits that keep the save consistent."""

    def test_strawberries_update_totals(self) -> None:
        """Test adding and removing strawberries refreshes every total."""
        from celeste_maped.saves import read_save

        save = read_save(SAVE_XML)
        assert save.add_strawberry("Celeste/1-ForsakenCity", 0, "c-03:1") is True
        assert save.add_strawberry("Celeste/1-ForsakenCity", 0, "c-03:1") is False
        assert save.total_strawberries == 3
        assert save.area("Celeste/1-ForsakenCity").modes[0].total_strawberries == 3

        save.add_strawberry("SpringCollab/1-Beginner/lvl1", 1, "r2:1")
        level_set = save.level_set("SpringCollab/1-Beginner")
        assert level_set.total_strawberries == 2
        assert save.total_strawberries == 3

        assert save.remove_strawberry("Celeste/1-ForsakenCity", 0, "a-01:12") is True
        assert save.total_strawberries == 2
        with pytest.raises(KeyError):
            save.add_strawberry("Celeste/9-Core", 0, "x:1")

    def test_add_area(self) -> None:
        """Test adding an area with an existing key fails."""
        from celeste_maped.errors import SchemaViolationError
        from celeste_maped.saves import AreaMode, AreaStats, SaveData

        save = SaveData()
        save.add_area(AreaStats(id=2, modes=[AreaMode(strawberries=["s1"])]))
        assert save.area("2").total_strawberries == 1
        assert save.total_strawberries == 1
        with pytest.raises(SchemaViolationError):
            save.add_area(AreaStats(id=2))

    def test_flags(self) -> None:
        """Test flag set operations."""
        from celeste_maped.saves import SaveData

        save = SaveData()
        save.add_flag("MetTheo")
        save.add_flag("MetTheo")
        assert save.flags == ["MetTheo"]
        assert save.has_flag("MetTheo")
        assert save.remove_flag("MetTheo") is True
        assert save.remove_flag("MetTheo") is False

    def test_unlocked_areas(self) -> None:
        """Test unlocking and locking keep a contiguous range."""
        from celeste_maped.saves import SaveData

        save = SaveData()
        assert save.unlocked_area_ids == {0}
        save.unlock_area(3)
        assert save.unlocked_area_ids == {0, 1, 2, 3}
        save.unlock_area(1)
        assert save.unlocked_areas == 3
        save.lock_area(2)
        assert save.unlocked_area_ids == {0, 1}
        assert save.is_area_unlocked(1)
        assert not save.is_area_unlocked(2)
        with pytest.raises(ValueError):
            save.lock_area(0)
        with pytest.raises(ValueError):
            save.unlock_area(-1)
