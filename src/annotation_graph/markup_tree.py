"""
Markup Tree Capability

The tree walker only needs three things from a markup element:
its attributes, its direct child ``node`` elements and its first
``edge`` wrapper child. ``MarkupNode`` names that capability so the
walk does not depend on any particular XML library's object shape.
"""

import xml.etree.ElementTree as ET
from typing import Iterator, Mapping, Protocol

from src.shared.exceptions import MalformedDocument

ROOT_TAG = "OpenText"
TEXT_TAG = "text"
NODE_TAG = "node"
EDGE_TAG = "edge"


class MarkupNode(Protocol):
    """Generic tree-node capability consumed by the walker."""

    @property
    def attributes(self) -> Mapping[str, str]: ...

    def child_nodes(self) -> Iterator["MarkupNode"]: ...

    def edge_wrapper(self) -> "MarkupNode | None": ...


class ElementTreeNode:
    """``MarkupNode`` adapter over an ``xml.etree.ElementTree.Element``."""

    __slots__ = ("_element",)

    def __init__(self, element: ET.Element):
        self._element = element

    @property
    def attributes(self) -> Mapping[str, str]:
        return self._element.attrib

    def child_nodes(self) -> Iterator["ElementTreeNode"]:
        for child in self._element.findall(NODE_TAG):
            yield ElementTreeNode(child)

    def edge_wrapper(self) -> "ElementTreeNode | None":
        wrapper = self._element.find(EDGE_TAG)
        return ElementTreeNode(wrapper) if wrapper is not None else None

    def __repr__(self) -> str:
        return f"ElementTreeNode({self._element.tag!r}, {dict(self._element.attrib)!r})"


def parse_markup(text: str, name: str | None = None) -> ET.Element:
    """Parse document text into an element tree, failing fast on bad XML."""
    try:
        return ET.fromstring(text)
    except ET.ParseError as e:
        raise MalformedDocument(f"not well-formed XML ({e})", document=name) from e


def locate_root(element: ET.Element, name: str | None = None) -> ElementTreeNode:
    """
    Find the single top-level annotated node: ``OpenText/text[0]/node[0]``.

    Raises:
        MalformedDocument: If any step of the path is missing.
    """
    if element.tag != ROOT_TAG:
        raise MalformedDocument(
            f"expected <{ROOT_TAG}> root element, found <{element.tag}>", document=name
        )
    text = element.find(TEXT_TAG)
    if text is None:
        raise MalformedDocument(f"<{ROOT_TAG}> has no <{TEXT_TAG}> child", document=name)
    root_node = text.find(NODE_TAG)
    if root_node is None:
        raise MalformedDocument(f"<{TEXT_TAG}> has no top-level <{NODE_TAG}>", document=name)
    return ElementTreeNode(root_node)
