"""
Reading and writing whole save documents.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from ..errors import SchemaViolationError
from .fields import XML_HEADER
from .save_data import ROOT_TAG, SaveData

if TYPE_CHECKING:
    from ..settings import AppSettings

logger = logging.getLogger(__name__)


def read_save(data: Union[bytes, str]) -> SaveData:
    """Parse a save document.

    Raises:
        SchemaViolationError: If the document is not well-formed XML or does
            not match the save schema
    """
    if isinstance(data, str):
        data = data.lstrip("\ufeff")
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise SchemaViolationError("<document>", f"not well-formed XML: {e}") from e
    return SaveData.from_xml(root)


def write_save(save: SaveData, settings: Optional["AppSettings"] = None) -> bytes:
    """Serialize a save with the XML declaration and namespace header.

    Args:
        save: Save to write
        settings: Source of the output options; indented output by default

    Returns:
        UTF-8 encoded document
    """
    indent = settings.saves.indent_output if settings is not None else True
    root = save.to_xml()
    if indent:
        ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return f"{XML_HEADER}\n{body}".encode("utf-8")


def read_save_file(path: Union[str, Path]) -> SaveData:
    path = Path(path)
    logger.info(f"Loading save: {path}")
    return read_save(path.read_bytes())


def write_save_file(
    path: Union[str, Path], save: SaveData, settings: Optional["AppSettings"] = None
) -> None:
    """Serialize save and write it to path; the file is only touched on success."""
    path = Path(path)
    data = write_save(save, settings)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info(f"Saved '{save.name or ROOT_TAG}' to {path} ({len(data)} bytes)")
