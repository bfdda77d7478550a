"""
Free-form fin set profiles.

The declared fin points run along the root (y = 0) from the leading edge,
out to the tip and back to the trailing edge. An optional rectangular tab
hangs below the root (negative y); its placement along the root depends on
the tab reference (front, center, end).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from shapely.geometry import Polygon

from ork_import.contracts import FinInstance, OrkImportError, TabPositionMode, Vec2

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TabLayout:
    """Resolved tab placement along the fin root."""

    start: float
    tab_length: float
    tab_height: float
    remaining_length: float

    @property
    def end(self) -> float:
        return self.start + self.tab_length


def root_length(points: Sequence[Vec2]) -> float:
    if len(points) < 2:
        raise OrkImportError(f"Fin needs at least 2 points, got {len(points)}")
    return points[-1][0] - points[0][0]


def resolve_tab(
    root_start: float,
    root_fin_length: float,
    tab_height: float,
    tab_length: float,
    mode: TabPositionMode = TabPositionMode.FRONT,
    offset: float = 0.0,
) -> Optional[TabLayout]:
    """Place a tab on the root; None when the fin has no tab.

    A tab longer than the root is clamped to the root length, leaving no
    remaining length. For CENTER the remaining length is split evenly fore
    and aft of the tab.
    """
    if tab_height * tab_length <= 0.0:
        return None

    remaining = root_fin_length - tab_length
    if remaining < 0.0:
        tab_length = root_fin_length
        remaining = 0.0

    if mode is TabPositionMode.FRONT:
        start = root_start
    elif mode is TabPositionMode.CENTER:
        remaining /= 2.0
        start = root_start + remaining
    else:
        start = root_start + remaining

    return TabLayout(
        start=start + offset,
        tab_length=tab_length,
        tab_height=tab_height,
        remaining_length=remaining,
    )


def tab_points(tab: TabLayout) -> List[Vec2]:
    """Tab outline continuing the fin outline aft-to-fore below the root."""
    return [
        (tab.end, 0.0),
        (tab.end, -tab.tab_height),
        (tab.start, -tab.tab_height),
        (tab.start, 0.0),
    ]


def build_fin_profile(
    points: Sequence[Vec2],
    tab_height: float = 0.0,
    tab_length: float = 0.0,
    tab_mode: TabPositionMode = TabPositionMode.FRONT,
    tab_offset: float = 0.0,
) -> Tuple[Tuple[Vec2, ...], float]:
    """Closed fin outline (with tab, if any) and its root length."""
    length = root_length(points)
    outline = [(float(x), float(y)) for x, y in points]

    tab = resolve_tab(points[0][0], length, tab_height, tab_length, tab_mode, tab_offset)
    if tab is not None:
        outline.extend(tab_points(tab))

    # drop a repeated closing point; the polygon closes implicitly
    if len(outline) > 1 and outline[-1] == outline[0]:
        outline.pop()
    return tuple(outline), length


def fin_polygon(profile: Sequence[Vec2]) -> Polygon:
    polygon = Polygon(profile)
    if not polygon.is_valid:
        logger.warning("Fin outline is not a simple polygon (%d points)", len(profile))
    return polygon


def fin_instances(count: int, rotation_deg: float = 0.0, cant_deg: float = 0.0) -> Tuple[FinInstance, ...]:
    """Evenly spaced fin copies starting at ``rotation_deg``."""
    if count < 1:
        raise OrkImportError(f"Fin count must be at least 1, got {count}")
    step = 360.0 / count
    return tuple(
        FinInstance(angle_deg=rotation_deg + i * step, cant_deg=cant_deg)
        for i in range(count)
    )
