"""
Nose cone profile curves.

Every curve maps an axial coordinate to a cross-section radius. The raw
family functions keep the conventions of the classic closed forms:

  - ogive and Haack are measured from the tip (x = 0) to the base (x = L)
  - the elliptic form is measured from the base, so it peaks at x = 0

``NoseConeCurve`` wraps them as one closed variant whose ``evaluate`` is
always measured from the tip.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List

import numpy as np

from ork_import.contracts import CurveDomainError, NoseConeShape, Vec2

logger = logging.getLogger(__name__)

# Von Karman (LD-Haack) and LV-Haack constants.
VON_KARMAN = 0.0
LV_HAACK = 1.0 / 3.0


def ogive_rho(radius_base: float, length: float) -> float:
    """Radius of the circle generating a tangent ogive."""
    if radius_base <= 0.0:
        raise CurveDomainError(f"Ogive base radius must be positive, got {radius_base}")
    return (radius_base ** 2 + length ** 2) / (2.0 * radius_base)


def ogive_radius(x: float, radius_base: float, length: float) -> float:
    rho = ogive_rho(radius_base, length)
    tmp = rho ** 2 - (length - x) ** 2
    return math.sqrt(max(tmp, 0.0)) + radius_base - rho


def haack_radius(x: float, radius_base: float, length: float, constant: float) -> float:
    """Haack series radius; ``constant`` 0 is Von Karman, 1/3 is LV-Haack."""
    arg = 1.0 - 2.0 * x / length
    if arg < -1.0 or arg > 1.0:
        raise CurveDomainError(
            f"Haack curve evaluated at x={x} outside [0, {length}]"
        )
    theta = math.acos(arg)
    tmp = theta - math.sin(2.0 * theta) / 2.0 + constant * math.sin(theta) ** 3
    if tmp < 0.0:
        raise CurveDomainError(
            f"Haack constant {constant} gives a negative area term at x={x}"
        )
    return radius_base / math.sqrt(math.pi) * math.sqrt(tmp)


def elliptic_radius(x: float, radius_base: float, length: float) -> float:
    """Half-ellipse radius, ``x`` measured from the base, x in [-L, L]."""
    ratio = x ** 2 / length ** 2
    if ratio > 1.0:
        raise CurveDomainError(f"Elliptic curve evaluated at x={x} outside [-{length}, {length}]")
    return radius_base * math.sqrt(1.0 - ratio)


def conical_radius(x: float, radius_base: float, length: float) -> float:
    return radius_base * x / length


def parabolic_radius(x: float, radius_base: float, length: float, k: float) -> float:
    """Parabolic series; k = 1 is a full parabola, k = 0 a cone."""
    xi = x / length
    return radius_base * (2.0 * xi - k * xi ** 2) / (2.0 - k)


class OgiveCurve:
    """Tangent ogive with optional spherical-cap tip blunting."""

    def __init__(self, radius_base: float, length: float):
        self.radius_base = radius_base
        self.length = length
        self.rho = ogive_rho(radius_base, length)

    def evaluate(self, x: float) -> float:
        tmp = self.rho ** 2 - (self.length - x) ** 2
        return math.sqrt(max(tmp, 0.0)) + self.radius_base - self.rho

    def _cap_geometry(self, rn: float):
        """Cap centre x0, tangency x and apex x for blunting radius ``rn``."""
        rho, rb = self.rho, self.radius_base
        if rn < 0.0 or (rn > 0.0 and rn >= rho - rb):
            raise CurveDomainError(
                f"Tip radius {rn} must be in [0, {rho - rb}) for this ogive"
            )
        x0 = self.length - math.sqrt((rho - rn) ** 2 - (rho - rb) ** 2)
        yt = rn * (rho - rb) / (rho - rn)
        xt = x0 - math.sqrt(rn ** 2 - yt ** 2)
        xa = x0 - rn
        return x0, xt, xa

    def tangency_point(self, rn: float) -> float:
        return self._cap_geometry(rn)[1]

    def spherical_cap_apex(self, rn: float) -> float:
        return self._cap_geometry(rn)[2]

    def evaluate_spherical_cap(self, x: float, rn: float) -> float:
        """Blunted profile: ogive aft of the tangency point, circular arc ahead.

        Ahead of the apex the profile is outside the body and evaluates to 0.
        """
        _, xt, xa = self._cap_geometry(rn)
        if x >= xt:
            return self.evaluate(x)
        if x >= xa:
            return math.sqrt(max(rn ** 2 - (x - (xa + rn)) ** 2, 0.0))
        return 0.0


@dataclass(frozen=True)
class NoseConeCurve:
    """A nose cone profile of one shape family, evaluated from the tip."""

    shape: NoseConeShape
    radius_base: float
    length: float
    shape_parameter: float = 0.0

    def evaluate(self, x: float) -> float:
        if self.length <= 0.0:
            raise CurveDomainError(f"Nose cone length must be positive, got {self.length}")
        if self.shape is NoseConeShape.OGIVE:
            return ogive_radius(x, self.radius_base, self.length)
        if self.shape is NoseConeShape.HAACK:
            return haack_radius(x, self.radius_base, self.length, self.shape_parameter)
        if self.shape in (NoseConeShape.ELLIPTIC, NoseConeShape.CIRCULAR):
            return elliptic_radius(self.length - x, self.radius_base, self.length)
        if self.shape is NoseConeShape.CONICAL:
            return conical_radius(x, self.radius_base, self.length)
        if self.shape is NoseConeShape.PARABOLIC:
            return parabolic_radius(x, self.radius_base, self.length, self.shape_parameter)
        raise CurveDomainError(f"No curve for shape {self.shape}")


def sample_profile(
    curve: NoseConeCurve,
    divisions: int = 100,
    tip_radius: float = 0.0,
) -> List[Vec2]:
    """Sample ``divisions`` evenly spaced (x, r) points from the apex to the base.

    A non-zero ``tip_radius`` blunts ogive noses with a spherical cap; the
    samples then start at the cap apex instead of x = 0. A nose without a
    base radius (an unresolved "auto") samples flat on the axis.
    """
    if divisions < 2:
        raise ValueError(f"Need at least 2 profile divisions, got {divisions}")

    if curve.radius_base <= 0.0:
        logger.warning(
            "%s nose cone has base radius %.6g, sampling a flat profile",
            curve.shape.value, curve.radius_base,
        )
        return [(float(x), 0.0) for x in np.linspace(0.0, curve.length, divisions)]

    if tip_radius > 0.0 and curve.shape is not NoseConeShape.OGIVE:
        logger.warning(
            "Tip radius %.6g ignored for %s nose cone; only ogives are blunted",
            tip_radius, curve.shape.value,
        )

    if curve.shape is NoseConeShape.OGIVE:
        ogive = OgiveCurve(curve.radius_base, curve.length)
        xa = ogive.spherical_cap_apex(tip_radius)
        xs = np.linspace(xa, curve.length, divisions)
        if tip_radius > 0.0:
            return [(float(x), ogive.evaluate_spherical_cap(float(x), tip_radius)) for x in xs]
        return [(float(x), ogive.evaluate(float(x))) for x in xs]

    xs = np.linspace(0.0, curve.length, divisions)
    return [(float(x), curve.evaluate(float(x))) for x in xs]
