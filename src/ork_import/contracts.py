"""Contracts for the OpenRocket document -> resolved geometry import."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

Vec2 = Tuple[float, float]

AUTO = "auto"


# ─── Errors ──────────────────────────────────────────────────────────────────


class OrkImportError(ValueError):
    """Base class for fatal import errors."""


class DocumentError(OrkImportError):
    """The container or document does not hold a rocket design."""


class FieldParseError(OrkImportError):
    """A numeric or boolean field holds unparsable text."""


class UnknownTokenError(OrkImportError):
    """An enum token (position mode, shape kind) is not recognized."""


class CurveDomainError(OrkImportError):
    """A profile curve was evaluated outside its mathematical domain."""


class UnresolvedReferenceError(OrkImportError):
    """An "auto" field found no source value (strict mode only)."""


# ─── Enums ───────────────────────────────────────────────────────────────────


class ComponentKind(Enum):
    """Component element names understood by the importer."""
    NOSE_CONE = "nosecone"
    BODY_TUBE = "bodytube"
    INNER_TUBE = "innertube"
    TUBE_COUPLER = "tubecoupler"
    BULKHEAD = "bulkhead"
    CENTERING_RING = "centeringring"
    FIN_SET = "freeformfinset"


class PositionMode(Enum):
    """Axial position modes along the rocket axis."""
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"
    AFTER = "after"
    ABSOLUTE = "absolute"


class PositionAnchor(Enum):
    """Coordinate conventions used to turn a position mode into an x value.

    WINDOW and WINDOW_INSET are anchored to the enclosing [x_start, x_end]
    window and only differ for AFTER. STACK is anchored to 0 and to the
    running stack length.
    """
    WINDOW = "window"
    WINDOW_INSET = "window_inset"
    STACK = "stack"


class TabPositionMode(Enum):
    """Fin tab placement along the fin root."""
    FRONT = "front"
    CENTER = "center"
    END = "end"


class NoseConeShape(Enum):
    """Nose cone profile families."""
    OGIVE = "ogive"
    HAACK = "haack"
    CONICAL = "conical"
    PARABOLIC = "parabolic"
    ELLIPTIC = "elliptic"
    CIRCULAR = "circular"


_SHAPE_ALIASES: Dict[str, NoseConeShape] = {
    "ogive": NoseConeShape.OGIVE,
    "haack": NoseConeShape.HAACK,
    "cone": NoseConeShape.CONICAL,
    "conical": NoseConeShape.CONICAL,
    "parabola": NoseConeShape.PARABOLIC,
    "parabolic": NoseConeShape.PARABOLIC,
    "elliptic": NoseConeShape.ELLIPTIC,
    "ellipsoid": NoseConeShape.ELLIPTIC,
    "circular": NoseConeShape.CIRCULAR,
}


def parse_position_mode(token: str) -> PositionMode:
    try:
        return PositionMode(token.strip().lower())
    except ValueError:
        raise UnknownTokenError(f"Unknown position type: {token!r}") from None


def parse_tab_position_mode(token: str) -> TabPositionMode:
    try:
        return TabPositionMode(token.strip().lower())
    except ValueError:
        raise UnknownTokenError(f"Unknown tab position reference: {token!r}") from None


def parse_nose_cone_shape(token: str) -> NoseConeShape:
    shape = _SHAPE_ALIASES.get(token.strip().lower())
    if shape is None:
        raise UnknownTokenError(f"Unknown nose cone shape: {token!r}")
    return shape


# ─── Configuration ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ImportConfig:
    """Configuration for resolving a rocket document into geometry."""

    profile_divisions: int = 100
    nose_tip_radius: float = 0.0
    strict_auto_references: bool = False
    radial_sections: int = 64
    unit_scale: float = 1.0


# ─── Resolved records ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PositionSpec:
    """Declared position of a component relative to its parent."""

    mode: PositionMode = PositionMode.TOP
    offset: float = 0.0


@dataclass(frozen=True)
class ResolvedShape:
    """Fully resolved axisymmetric component, ready for a geometry kernel.

    ``inner_radius`` is ``outer_radius - thickness``; solid parts
    (bulkheads) carry 0.
    """

    kind: ComponentKind
    name: str
    x_start: float
    x_end: float
    outer_radius: float
    inner_radius: float
    radial_position: float = 0.0
    radial_direction: float = 0.0

    @property
    def length(self) -> float:
        return self.x_end - self.x_start


@dataclass(frozen=True)
class ShoulderSpec:
    """Aft shoulder tube of a nose cone."""

    radius: float
    length: float
    thickness: float
    capped: bool = False

    @property
    def x_offset(self) -> float:
        """Shoulder start relative to the nose base."""
        return -self.thickness


@dataclass(frozen=True)
class ResolvedNoseCone(ResolvedShape):
    """Nose cone with its sampled outer profile (tip at x_start)."""

    shape: NoseConeShape = NoseConeShape.OGIVE
    shape_parameter: float = 0.0
    thickness: float = 0.0
    profile: Tuple[Vec2, ...] = ()
    shoulder: Optional[ShoulderSpec] = None


@dataclass(frozen=True)
class FinInstance:
    """One copy of a fin around the body axis."""

    angle_deg: float
    cant_deg: float = 0.0


@dataclass(frozen=True)
class ResolvedFinSet(ResolvedShape):
    """Fin set: one closed root-profile polygon replicated around the axis.

    ``profile`` is in fin-local coordinates (x along the root, y outward);
    the kernel lifts it to ``outer_radius`` (the parent tube radius) and
    translates it to ``x_start``.
    """

    thickness: float = 0.0
    root_length: float = 0.0
    profile: Tuple[Vec2, ...] = ()
    instances: Tuple[FinInstance, ...] = ()


@dataclass
class ComponentOutcome:
    """Kernel outcome for one emitted record."""

    name: str
    kind: ComponentKind
    success: bool
    body_count: int = 0
    message: str = ""


@dataclass
class ImportResult:
    """In-memory result of an import run."""

    shapes: List[ResolvedShape] = field(default_factory=list)
    outcomes: List[ComponentOutcome] = field(default_factory=list)
    stack_length: float = 0.0

    @property
    def success(self) -> bool:
        return bool(self.outcomes) and all(o.success for o in self.outcomes)
