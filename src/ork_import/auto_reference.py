"""
Resolution of "auto" dimension fields.

Each auto field has its own search scope:

  - body tube radius: first ``radius``/``aftradius`` among the siblings
  - nose cone aft radius: ``radius`` of the immediately following body tube
  - centering ring inner radius: ``outerradius`` of the first sibling inner tube
  - ring/bulkhead/coupler outer radius: inherited from the enclosing tube

The ``find_*`` lookups return None when nothing matches; the resolver maps
that to 0.0 (or raises in strict mode).
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from ork_import.contracts import ComponentKind, UnresolvedReferenceError
from ork_import.document import LabeledNode, is_auto, parse_float

logger = logging.getLogger(__name__)

RADIUS_FIELDS = ("radius", "aftradius")


def _first_concrete(node: LabeledNode, field_names: Iterable[str]) -> Optional[float]:
    names = tuple(field_names)
    for child in node.children:
        if child.name in names and not is_auto(child):
            return parse_float(child.text, child.name)
    return None


def find_sibling_radius(node: LabeledNode) -> Optional[float]:
    """First concrete radius or aft radius declared by any sibling."""
    for sibling in node.siblings:
        value = _first_concrete(sibling, RADIUS_FIELDS)
        if value is not None:
            return value
    return None


def find_next_body_tube_radius(node: LabeledNode) -> Optional[float]:
    """Radius of the next sibling when it is a body tube."""
    sibling = node.next_sibling()
    if sibling is None or sibling.name != ComponentKind.BODY_TUBE.value:
        return None
    radius_node = sibling.child("radius")
    if radius_node is None:
        return None
    if is_auto(radius_node):
        return find_sibling_radius(sibling)
    return parse_float(radius_node.text, "radius")


def find_inner_tube_radius(node: LabeledNode) -> Optional[float]:
    """Outer radius of the first sibling inner tube."""
    for sibling in node.siblings:
        if sibling.name != ComponentKind.INNER_TUBE.value:
            continue
        value = _first_concrete(sibling, ("outerradius",))
        if value is not None:
            return value
    return None


class AutoReferenceResolver:
    """Maps auto lookups to concrete values, defaulting unresolved ones to 0."""

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.unresolved: List[Tuple[str, str]] = []

    def _settle(self, value: Optional[float], node: LabeledNode, field_name: str) -> float:
        if value is not None:
            return value
        if self.strict:
            raise UnresolvedReferenceError(
                f"<{node.name}> {field_name}=auto has no source value"
            )
        logger.warning("<%s> %s=auto unresolved, using 0", node.name, field_name)
        self.unresolved.append((node.name, field_name))
        return 0.0

    def body_tube_radius(self, node: LabeledNode) -> float:
        return self._settle(find_sibling_radius(node), node, "radius")

    def nose_cone_aft_radius(self, node: LabeledNode) -> float:
        return self._settle(find_next_body_tube_radius(node), node, "aftradius")

    def centering_ring_inner_radius(self, node: LabeledNode) -> float:
        return self._settle(find_inner_tube_radius(node), node, "innerradius")

    def inherited_radius(
        self, node: LabeledNode, parent_radius: Optional[float], field_name: str = "outerradius"
    ) -> float:
        return self._settle(parent_radius, node, field_name)
