"""
JSON inspection dump of a map's raw element tree.
"""

from typing import Any

import orjson

from .nodes import RawMap
from .values import display_text


def raw_map_to_dict(raw_map: RawMap) -> dict[str, Any]:
    return {"package": display_text(raw_map.package), "root": raw_map.root.to_dict()}


def export_json(raw_map: RawMap, indent: bool = True) -> bytes:
    """Dump a raw map as UTF-8 JSON.

    Every attribute is rendered as {"kind": ..., "value": ...} so the
    stored tag stays visible. Non-finite floats become null and bytes
    that were not valid UTF-8 become U+FFFD.

    Args:
        raw_map: Map to dump
        indent: Pretty-print with two-space indentation

    Returns:
        JSON document as bytes
    """
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(raw_map_to_dict(raw_map), option=option)
