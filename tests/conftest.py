"""Shared fixtures for celeste_maped tests."""

import logging
from pathlib import Path
from typing import Iterator

import pytest

from celeste_maped.maps import RawElement, RawMap, write_raw_map
from celeste_maped.maps.values import Value, ValueKind


def spinner(entity_id: int, x: float, y: float) -> RawElement:
    return RawElement(
        "spinner",
        {
            "id": Value(ValueKind.INT, entity_id),
            "x": Value(ValueKind.FLOAT, x),
            "y": Value(ValueKind.FLOAT, y),
            "attachToSolid": Value(ValueKind.BOOL, False),
        },
    )


def jump_pad() -> RawElement:
    """An entity from a mod; nothing is registered for it."""
    return RawElement(
        "custom_jump_pad",
        {
            "id": Value(ValueKind.INT, 7),
            "x": Value(ValueKind.FLOAT, 24.0),
            "y": Value(ValueKind.FLOAT, 40.0),
            "direction": Value(ValueKind.LOOKUP, "up"),
            "strength": Value(ValueKind.FLOAT, 1.5),
            "label": Value(ValueKind.STRING, "pad é"),
        },
        [RawElement("node", {"x": Value(ValueKind.SHORT, 24), "y": Value(ValueKind.SHORT, 8)})],
    )


def room(name: str, entities: list[RawElement]) -> RawElement:
    return RawElement(
        "level",
        {
            "name": Value(ValueKind.LOOKUP, name),
            "width": Value(ValueKind.SHORT, 320),
            "height": Value(ValueKind.BYTE, 184),
            "x": Value(ValueKind.INT, 0),
            "y": Value(ValueKind.INT, 0),
            "c": Value(ValueKind.BYTE, 0),
        },
        [
            RawElement("entities", children=entities),
            RawElement("solids", {"innerText": Value(ValueKind.RLE_STRING, "000\n111")}),
        ],
    )


def sample_raw_map() -> RawMap:
    """Map > levels > level 'a-00' with [spinner, custom_jump_pad, spinner]."""
    entities = [spinner(1, 8.0, 16.0), jump_pad(), spinner(2, 32.0, 16.0)]
    root = RawElement(
        "Map",
        children=[
            RawElement("Filler"),
            RawElement("levels", children=[room("a-00", entities)]),
            RawElement("Style", children=[RawElement("Foregrounds"), RawElement("Backgrounds")]),
        ],
    )
    return RawMap("sample", root)


@pytest.fixture
def sample_map_bytes() -> bytes:
    return write_raw_map(sample_raw_map())


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    return tmp_path / "celeste_maped.ini"


@pytest.fixture
def app_settings(settings_file: Path):
    from celeste_maped.settings import AppSettings

    return AppSettings(profile="test", settings_file=settings_file)


@pytest.fixture
def restore_root_logging() -> Iterator[None]:
    """Put the root logger back the way it was after setup_logging()."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
