"""
Rocket document reading.

An ``.ork`` file is a zip archive holding a ``rocket.ork`` XML entry; older
files are gzip-compressed or plain XML. All three are read into a tree of
``LabeledNode`` (element name, attributes, text, ordered children) which the
walker consumes read-only.
"""
from __future__ import annotations

import gzip
import logging
import xml.etree.ElementTree as ET
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from ork_import.contracts import AUTO, DocumentError, FieldParseError

logger = logging.getLogger(__name__)

ROCKET_ENTRY_NAME = "rocket.ork"
_GZIP_MAGIC = b"\x1f\x8b"


@dataclass(eq=False)
class LabeledNode:
    """One element of the rocket document."""

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    text: str = ""
    children: List["LabeledNode"] = field(default_factory=list)
    parent: Optional["LabeledNode"] = field(default=None, repr=False)

    def child(self, name: str) -> Optional["LabeledNode"]:
        """First direct child named ``name``."""
        for node in self.children:
            if node.name == name:
                return node
        return None

    def children_named(self, name: str) -> Iterator["LabeledNode"]:
        return (node for node in self.children if node.name == name)

    def field_text(self, name: str) -> Optional[str]:
        node = self.child(name)
        return None if node is None else node.text

    @property
    def subcomponents(self) -> List["LabeledNode"]:
        node = self.child("subcomponents")
        return [] if node is None else list(node.children)

    @property
    def siblings(self) -> List["LabeledNode"]:
        """Children of the parent, this node included, in document order."""
        return [self] if self.parent is None else list(self.parent.children)

    def next_sibling(self) -> Optional["LabeledNode"]:
        if self.parent is None:
            return None
        siblings = self.parent.children
        for i, node in enumerate(siblings):
            if node is self:
                return siblings[i + 1] if i + 1 < len(siblings) else None
        return None


def from_element(element: ET.Element, parent: Optional[LabeledNode] = None) -> LabeledNode:
    node = LabeledNode(
        name=element.tag,
        attributes=dict(element.attrib),
        text=(element.text or "").strip(),
        parent=parent,
    )
    node.children = [from_element(child, node) for child in element]
    return node


def parse_document(xml_text: Union[str, bytes]) -> LabeledNode:
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as exc:
        raise DocumentError(f"Malformed rocket document: {exc}") from exc
    return from_element(root)


def read_document(path: Union[str, Path]) -> LabeledNode:
    """Read a zipped, gzipped or plain XML rocket document."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Rocket document not found: {path}")

    if zipfile.is_zipfile(path):
        with zipfile.ZipFile(path) as archive:
            data = None
            for info in archive.infolist():
                if Path(info.filename).name == ROCKET_ENTRY_NAME:
                    data = archive.read(info)
            if data is None:
                raise DocumentError(f"No {ROCKET_ENTRY_NAME} entry in {path}")
        logger.debug("Read %s from zip container %s", ROCKET_ENTRY_NAME, path)
        return parse_document(data)

    raw = path.read_bytes()
    if raw[:2] == _GZIP_MAGIC:
        raw = gzip.decompress(raw)
    return parse_document(raw)


def stage_components(root: LabeledNode) -> List[LabeledNode]:
    """Components of every stage, in document order."""
    rocket = root if root.name == "rocket" else root.child("rocket")
    if rocket is None:
        raise DocumentError(f"Document root <{root.name}> has no <rocket> element")

    components: List[LabeledNode] = []
    for stage in rocket.subcomponents:
        if stage.name != "stage":
            continue
        components.extend(stage.subcomponents)
    logger.info("Read %d stage components", len(components))
    return components


# ─── Field parsing ───────────────────────────────────────────────────────────


def is_auto(node: Optional[LabeledNode]) -> bool:
    return node is not None and node.text == AUTO


def parse_float(text: str, field_name: str) -> float:
    try:
        return float(text)
    except (TypeError, ValueError):
        raise FieldParseError(f"<{field_name}> is not a number: {text!r}") from None


def parse_int(text: str, field_name: str) -> int:
    try:
        return int(text)
    except (TypeError, ValueError):
        raise FieldParseError(f"<{field_name}> is not an integer: {text!r}") from None


def parse_bool(text: str, field_name: str) -> bool:
    value = (text or "").strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise FieldParseError(f"<{field_name}> is not a boolean: {text!r}")
