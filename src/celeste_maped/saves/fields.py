"""
XML field helpers shared by the save data classes.

Element trees come from xml.etree.ElementTree. Values are element text
(or attribute text) in the format the game's XML serializer writes:
"true"/"false" booleans and plain decimal integers.
"""

import copy
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Iterable, Optional

from ..errors import SchemaViolationError

XSI_URL = "http://www.w3.org/2001/XMLSchema-instance"
XSD_URL = "http://www.w3.org/2001/XMLSchema"
XML_HEADER = '<?xml version="1.0" encoding="utf-8"?>'

_PREFIXES = {f"{{{XSI_URL}}}": "xsi:", f"{{{XSD_URL}}}": "xsd:"}
XSI_NIL = f"{{{XSI_URL}}}nil"


# === PARSING ===


def parse_bool(text: Optional[str], field: str) -> bool:
    """Parse a boolean written as true/false (or 1/0).

    Raises:
        SchemaViolationError: If text is not a boolean
    """
    value = (text or "").strip().lower()
    if value in ("true", "1"):
        return True
    if value in ("false", "0"):
        return False
    raise SchemaViolationError(field, f"expected a boolean, found {text!r}")


def parse_int(text: Optional[str], field: str) -> int:
    """Parse a decimal integer.

    Raises:
        SchemaViolationError: If text is not an integer
    """
    try:
        return int((text or "").strip())
    except ValueError:
        raise SchemaViolationError(field, f"expected an integer, found {text!r}") from None


def bool_text(value: bool) -> str:
    return "true" if value else "false"


def child_text(parent: ET.Element, tag: str) -> Optional[str]:
    """Text of the first child named tag; None when the child is missing."""
    child = parent.find(tag)
    if child is None:
        return None
    return child.text or ""


def str_field(parent: ET.Element, tag: str, default: str = "") -> str:
    text = child_text(parent, tag)
    return default if text is None else text


def int_field(parent: ET.Element, tag: str, default: int = 0) -> int:
    text = child_text(parent, tag)
    return default if text is None else parse_int(text, tag)


def bool_field(parent: ET.Element, tag: str, default: bool = False) -> bool:
    text = child_text(parent, tag)
    return default if text is None else parse_bool(text, tag)


def int_attr(
    element: ET.Element, name: str, field: str, default: Optional[int] = None
) -> int:
    """Integer attribute; required when default is None.

    Raises:
        SchemaViolationError: If the attribute is required and missing, or malformed
    """
    text = element.get(name)
    if text is None:
        if default is None:
            raise SchemaViolationError(field, "required attribute is missing")
        return default
    return parse_int(text, field)


def bool_attr(element: ET.Element, name: str, field: str, default: bool = False) -> bool:
    text = element.get(name)
    return default if text is None else parse_bool(text, field)


def string_list(parent: Optional[ET.Element], tag: str = "string") -> list[str]:
    """Text of every child named tag, skipping xsi:nil and empty entries."""
    if parent is None:
        return []
    return [
        child.text
        for child in parent.findall(tag)
        if child.text and child.get(XSI_NIL) is None
    ]


# === WRITING ===


def add_text(parent: ET.Element, tag: str, value: object) -> ET.Element:
    """Append a child holding value as text (booleans as true/false)."""
    child = ET.SubElement(parent, tag)
    child.text = bool_text(value) if isinstance(value, bool) else str(value)
    return child


def add_string_list(
    parent: ET.Element, tag: str, values: Iterable[str], item_tag: str = "string"
) -> ET.Element:
    container = ET.SubElement(parent, tag)
    for value in values:
        add_text(container, item_tag, value)
    return container


# === EXTENSION BLOCKS ===


def localize_names(element: ET.Element) -> ET.Element:
    """Rewrite xsi/xsd qualified names to their literal prefixed form.

    The root element declares both prefixes literally, so nested elements
    must not carry generated namespace declarations of their own.
    """
    for node in element.iter():
        node.tag = _localize(node.tag)
        if any(name.startswith("{") for name in node.attrib):
            node.attrib = {_localize(name): value for name, value in node.attrib.items()}
    return element


def unknown_attributes(element: ET.Element, known: Iterable[str]) -> dict[str, str]:
    """Attributes of element outside known, with xsi/xsd names in prefixed form."""
    skip = set(known)
    return {
        _localize(name): value for name, value in element.attrib.items() if name not in skip
    }


def _localize(name: str) -> str:
    for qualified, prefix in _PREFIXES.items():
        if name.startswith(qualified):
            return prefix + name[len(qualified):]
    return name


def strip_layout(element: ET.Element) -> ET.Element:
    """Drop whitespace-only text and tails left over from indentation."""
    for node in element.iter():
        if node.text is not None and not node.text.strip():
            node.text = None
        if node.tail is not None and not node.tail.strip():
            node.tail = None
    element.tail = None
    return element


@dataclass(eq=False)
class ExtensionBlock:
    """An element the save model does not understand, kept verbatim.

    Attributes:
        element: The element subtree (names localized, layout stripped)
        after: Tag of the known element it followed, None when it came first
    """

    element: ET.Element
    after: Optional[str] = None

    @classmethod
    def capture(cls, element: ET.Element, after: Optional[str]) -> "ExtensionBlock":
        return cls(strip_layout(localize_names(copy.deepcopy(element))), after)

    @property
    def tag(self) -> str:
        return self.element.tag

    def to_xml(self) -> ET.Element:
        return copy.deepcopy(self.element)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExtensionBlock):
            return NotImplemented
        return (
            self.tag == other.tag
            and self.after == other.after
            and ET.tostring(self.element) == ET.tostring(other.element)
        )

    def __repr__(self) -> str:
        return f"ExtensionBlock({self.tag!r}, after={self.after!r})"


def collect_extensions(
    parent: ET.Element, known_tags: Iterable[str]
) -> list[ExtensionBlock]:
    """Capture every child of parent whose tag is not in known_tags."""
    known = set(known_tags)
    blocks: list[ExtensionBlock] = []
    after: Optional[str] = None
    for child in parent:
        if not isinstance(child.tag, str):
            continue  # comments and processing instructions
        if child.tag in known:
            after = child.tag
        else:
            blocks.append(ExtensionBlock.capture(child, after))
    return blocks


def append_with_extensions(
    parent: ET.Element,
    children: Iterable[ET.Element],
    extensions: Iterable[ExtensionBlock],
) -> None:
    """Append known children, placing each extension block after the child it followed.

    Blocks whose anchor is not written this time go last, in their
    original order.
    """
    pending = list(extensions)
    for block in [block for block in pending if block.after is None]:
        parent.append(block.to_xml())
    pending = [block for block in pending if block.after is not None]

    for child in children:
        parent.append(child)
        placed = [block for block in pending if block.after == child.tag]
        for block in placed:
            parent.append(block.to_xml())
        pending = [block for block in pending if block.after != child.tag]

    for block in pending:
        parent.append(block.to_xml())
