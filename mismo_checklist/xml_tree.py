"""
Namespace-agnostic XML traversal.

Extractors only depend on ``XmlNode`` (local name, children, text), so any XML
library can back them. ``ElementNode`` adapts ``xml.etree.ElementTree``.
"""

import math
import xml.etree.ElementTree as ET
from datetime import date
from typing import Iterator, List, Optional, Union

from mismo_checklist.exceptions import MISMOParseError


class XmlNode:
    """Minimal element interface used by the extractors."""

    @property
    def local_name(self) -> str:
        raise NotImplementedError

    @property
    def children(self) -> List["XmlNode"]:
        raise NotImplementedError

    @property
    def text(self) -> str:
        """Concatenated text content of the element and its descendants."""
        raise NotImplementedError

    def iter_descendants(self) -> Iterator["XmlNode"]:
        """Yield descendants in document order (depth-first, pre-order)."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


class ElementNode(XmlNode):
    """XmlNode backed by an ElementTree element."""

    def __init__(self, element: ET.Element):
        self._element = element

    @property
    def local_name(self) -> str:
        tag = self._element.tag
        if not isinstance(tag, str):
            return ""
        return tag.rsplit("}", 1)[-1]

    @property
    def children(self) -> List[XmlNode]:
        return [ElementNode(child) for child in self._element if isinstance(child.tag, str)]

    @property
    def text(self) -> str:
        return "".join(self._element.itertext())


def parse_xml(source: Union[str, bytes]) -> XmlNode:
    """
    Parse XML text into an XmlNode tree.

    Raises:
        MISMOParseError: If the text is not well-formed XML
    """
    if source is None:
        raise MISMOParseError("no XML content supplied")
    try:
        root = ET.fromstring(source)
    except ET.ParseError as e:
        raise MISMOParseError(str(e)) from e
    return ElementNode(root)


def first(node: Optional[XmlNode], name: str) -> Optional[XmlNode]:
    """Return the first descendant with the given local name, or None."""
    if node is None:
        return None
    for descendant in node.iter_descendants():
        if descendant.local_name == name:
            return descendant
    return None


def first_of(node: Optional[XmlNode], *names: str) -> Optional[XmlNode]:
    """Return the first match for the earliest name that matches anything."""
    for name in names:
        found = first(node, name)
        if found is not None:
            return found
    return None


def all_of(node: Optional[XmlNode], name: str) -> List[XmlNode]:
    """Return every descendant with the given local name, in document order."""
    if node is None:
        return []
    return [d for d in node.iter_descendants() if d.local_name == name]


def text_of(node: Optional[XmlNode]) -> str:
    return node.text.strip() if node is not None else ""


def child_text(node: Optional[XmlNode], *names: str) -> str:
    """Text of the first non-empty descendant among ``names``."""
    for name in names:
        value = text_of(first(node, name))
        if value:
            return value
    return ""


def num_of(node: Optional[XmlNode]) -> Optional[float]:
    value = text_of(node)
    if not value:
        return None
    try:
        number = float(value.replace(",", ""))
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def int_of(node: Optional[XmlNode]) -> Optional[int]:
    value = num_of(node)
    if value is None:
        return None
    return int(value)


def bool_of(node: Optional[XmlNode]) -> Optional[bool]:
    """Tri-state indicator: None when absent or empty."""
    value = text_of(node).lower()
    if value == "":
        return None
    return value == "true"


def date_of(node: Optional[XmlNode]) -> Optional[date]:
    return parse_date(text_of(node))


def parse_date(value: str) -> Optional[date]:
    """Parse an ISO date (time part ignored)."""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None
