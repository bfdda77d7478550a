"""
Depth-first resolution of a rocket component tree.

Only nose cones and body tubes are recognized at stage level. Body tubes
carry bulkheads, couplers, centering rings, inner tubes and fin sets; nose
cones carry couplers; couplers carry bulkheads. Every resolved component is
emitted as one record, in document order, to an optional sink (a geometry
kernel) whose failures are recorded without stopping the traversal.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

from ork_import.auto_reference import AutoReferenceResolver
from ork_import.contracts import (
    ComponentKind,
    ComponentOutcome,
    ImportConfig,
    ImportResult,
    NoseConeShape,
    PositionAnchor,
    PositionSpec,
    ResolvedFinSet,
    ResolvedNoseCone,
    ResolvedShape,
    ShoulderSpec,
    TabPositionMode,
    Vec2,
    parse_nose_cone_shape,
    parse_position_mode,
    parse_tab_position_mode,
)
from ork_import.curves import NoseConeCurve, sample_profile
from ork_import.document import (
    LabeledNode,
    is_auto,
    parse_bool,
    parse_float,
    parse_int,
)
from ork_import.fins import build_fin_profile, fin_instances
from ork_import.positions import resolve_spec

logger = logging.getLogger(__name__)

ShapeSink = Callable[[ResolvedShape], ComponentOutcome]


class AxialStack:
    """Running aft-most axial extent of the stacked airframe.

    Body tubes append to the stack; a nose cone restarts it at its own
    length.
    """

    def __init__(self, length: float = 0.0):
        self.length = length

    def append(self, length: float) -> Tuple[float, float]:
        x_start = self.length
        self.length += length
        logger.debug("Stack %.6g -> %.6g", x_start, self.length)
        return x_start, self.length

    def reset(self, length: float) -> None:
        logger.debug("Stack reset %.6g -> %.6g", self.length, length)
        self.length = length


# ─── Field extraction ────────────────────────────────────────────────────────


def _float_field(node: LabeledNode, name: str, default: float = 0.0) -> float:
    text = node.field_text(name)
    return default if text is None else parse_float(text, name)


def _position_field(node: LabeledNode) -> PositionSpec:
    """``<position type=...>``, or the newer ``<axialoffset method=...>``."""
    pos = node.child("position")
    attr = "type"
    if pos is None:
        pos = node.child("axialoffset")
        attr = "method"
    if pos is None:
        return PositionSpec()
    return PositionSpec(
        mode=parse_position_mode(pos.attributes.get(attr, "")),
        offset=parse_float(pos.text, pos.name),
    )


def _fin_points(node: LabeledNode) -> List[Vec2]:
    container = node.child("finpoints")
    if container is None:
        return []
    points = []
    for point in container.children_named("point"):
        points.append((
            parse_float(point.attributes.get("x", ""), "finpoints/point@x"),
            parse_float(point.attributes.get("y", ""), "finpoints/point@y"),
        ))
    return points


class ComponentTreeWalker:
    """Resolves stage components into records, threading the axial stack."""

    def __init__(
        self,
        config: Optional[ImportConfig] = None,
        sink: Optional[ShapeSink] = None,
    ):
        self.config = config or ImportConfig()
        self.sink = sink
        self.references = AutoReferenceResolver(strict=self.config.strict_auto_references)
        self.stack = AxialStack()
        self.result = ImportResult()
        self._name_counts: Dict[ComponentKind, int] = {}

    def walk(self, components: List[LabeledNode]) -> ImportResult:
        """Resolve ``components`` from a fresh stack; each call returns a new result."""
        self.stack = AxialStack()
        self.result = ImportResult()
        self._name_counts = {}
        self.references.unresolved = []

        for node in components:
            if node.name == ComponentKind.NOSE_CONE.value:
                self._nose_cone(node)
            elif node.name == ComponentKind.BODY_TUBE.value:
                self._body_tube(node)
            else:
                logger.warning("Skipping stage component <%s>", node.name)
        self.result.stack_length = self.stack.length
        return self.result

    # ─── Emission ─────────────────────────────────────────────────────────

    def _name(self, node: LabeledNode, kind: ComponentKind) -> str:
        count = self._name_counts.get(kind, 0) + 1
        self._name_counts[kind] = count
        return node.field_text("name") or f"{kind.value}_{count}"

    def _emit(self, shape: ResolvedShape) -> None:
        logger.info(
            "Resolved %s %r: x=[%.6g, %.6g] r=%.6g/%.6g",
            shape.kind.value, shape.name, shape.x_start, shape.x_end,
            shape.outer_radius, shape.inner_radius,
        )
        self.result.shapes.append(shape)
        if self.sink is None:
            return
        try:
            outcome = self.sink(shape)
        except Exception as exc:
            logger.warning("Geometry failed for %s %r: %s", shape.kind.value, shape.name, exc)
            outcome = ComponentOutcome(
                name=shape.name, kind=shape.kind, success=False, message=str(exc)
            )
        self.result.outcomes.append(outcome)

    # ─── Stage level ──────────────────────────────────────────────────────

    def _nose_cone(self, node: LabeledNode) -> None:
        length = _float_field(node, "length")
        thickness = _float_field(node, "thickness")
        shape_text = node.field_text("shape")
        shape = parse_nose_cone_shape(shape_text) if shape_text is not None else NoseConeShape.OGIVE
        shape_parameter = _float_field(node, "shapeparameter")

        aft_node = node.child("aftradius")
        if is_auto(aft_node):
            aft_radius = self.references.nose_cone_aft_radius(node)
        else:
            aft_radius = _float_field(node, "aftradius")

        shoulder = None
        shoulder_length = _float_field(node, "aftshoulderlength")
        if shoulder_length > 0.0:
            capped_text = node.field_text("aftshouldercapped")
            shoulder = ShoulderSpec(
                radius=_float_field(node, "aftshoulderradius"),
                length=shoulder_length,
                thickness=_float_field(node, "aftshoulderthickness"),
                capped=parse_bool(capped_text, "aftshouldercapped") if capped_text else False,
            )

        curve = NoseConeCurve(
            shape=shape, radius_base=aft_radius, length=length, shape_parameter=shape_parameter
        )
        profile = sample_profile(
            curve,
            divisions=self.config.profile_divisions,
            tip_radius=self.config.nose_tip_radius,
        )

        self._emit(ResolvedNoseCone(
            kind=ComponentKind.NOSE_CONE,
            name=self._name(node, ComponentKind.NOSE_CONE),
            x_start=0.0,
            x_end=length,
            outer_radius=aft_radius,
            inner_radius=aft_radius - thickness,
            shape=curve.shape,
            shape_parameter=shape_parameter,
            thickness=thickness,
            profile=tuple(profile),
            shoulder=shoulder,
        ))

        self.stack.reset(length)

        for sub in node.subcomponents:
            if sub.name == ComponentKind.TUBE_COUPLER.value:
                self._tube_coupler(sub, self.stack.length, aft_radius - thickness)

    def _body_tube(self, node: LabeledNode) -> None:
        length = _float_field(node, "length")
        thickness = _float_field(node, "thickness")
        if is_auto(node.child("radius")):
            radius = self.references.body_tube_radius(node)
        else:
            radius = _float_field(node, "radius")

        x_start, x_end = self.stack.append(length)
        self._emit(ResolvedShape(
            kind=ComponentKind.BODY_TUBE,
            name=self._name(node, ComponentKind.BODY_TUBE),
            x_start=x_start,
            x_end=x_end,
            outer_radius=radius,
            inner_radius=radius - thickness,
        ))

        for sub in node.subcomponents:
            if sub.name == ComponentKind.BULKHEAD.value:
                self._bulkhead(sub, radius, x_start, x_end)
            elif sub.name == ComponentKind.TUBE_COUPLER.value:
                self._tube_coupler(sub, self.stack.length, radius - thickness)
            elif sub.name == ComponentKind.CENTERING_RING.value:
                self._centering_ring(sub, radius, x_start, x_end)
            elif sub.name == ComponentKind.INNER_TUBE.value:
                self._inner_tube(sub, x_start, x_end)
            elif sub.name == ComponentKind.FIN_SET.value:
                self._fin_set(sub, radius, x_start, x_end)
            else:
                logger.warning("Skipping <%s> inside body tube", sub.name)

    # ─── Subcomponents ────────────────────────────────────────────────────

    def _radial(self, node: LabeledNode) -> Dict[str, float]:
        return {
            "radial_position": _float_field(node, "radialposition"),
            "radial_direction": _float_field(node, "radialdirection"),
        }

    def _outer_radius(self, node: LabeledNode, parent_radius: Optional[float]) -> float:
        if is_auto(node.child("outerradius")):
            return self.references.inherited_radius(node, parent_radius)
        return _float_field(node, "outerradius")

    def _inner_tube(self, node: LabeledNode, x_start: float, x_end: float) -> None:
        length = _float_field(node, "length")
        thickness = _float_field(node, "thickness")
        outer_radius = _float_field(node, "outerradius")
        x = resolve_spec(
            _position_field(node), x_start, x_end, length, PositionAnchor.WINDOW_INSET
        )
        self._emit(ResolvedShape(
            kind=ComponentKind.INNER_TUBE,
            name=self._name(node, ComponentKind.INNER_TUBE),
            x_start=x,
            x_end=x + length,
            outer_radius=outer_radius,
            inner_radius=outer_radius - thickness,
            **self._radial(node),
        ))

    def _tube_coupler(self, node: LabeledNode, stack_length: float, parent_radius: float) -> None:
        length = _float_field(node, "length")
        thickness = _float_field(node, "thickness")
        outer_radius = self._outer_radius(node, parent_radius)
        x = resolve_spec(
            _position_field(node), 0.0, stack_length, length, PositionAnchor.STACK
        )
        self._emit(ResolvedShape(
            kind=ComponentKind.TUBE_COUPLER,
            name=self._name(node, ComponentKind.TUBE_COUPLER),
            x_start=x,
            x_end=x + length,
            outer_radius=outer_radius,
            inner_radius=outer_radius - thickness,
            **self._radial(node),
        ))

        for sub in node.subcomponents:
            if sub.name == ComponentKind.BULKHEAD.value:
                self._bulkhead(sub, outer_radius, x, x + length)

    def _bulkhead(self, node: LabeledNode, parent_radius: float, x_start: float, x_end: float) -> None:
        length = _float_field(node, "length")
        outer_radius = self._outer_radius(node, parent_radius)
        x = resolve_spec(
            _position_field(node), x_start, x_end, length, PositionAnchor.WINDOW_INSET
        )
        self._emit(ResolvedShape(
            kind=ComponentKind.BULKHEAD,
            name=self._name(node, ComponentKind.BULKHEAD),
            x_start=x,
            x_end=x + length,
            outer_radius=outer_radius,
            inner_radius=0.0,
            **self._radial(node),
        ))

    def _centering_ring(self, node: LabeledNode, parent_radius: float, x_start: float, x_end: float) -> None:
        length = _float_field(node, "length")
        outer_radius = self._outer_radius(node, parent_radius)
        if is_auto(node.child("innerradius")):
            inner_radius = self.references.centering_ring_inner_radius(node)
        else:
            inner_radius = _float_field(node, "innerradius")
        x = resolve_spec(
            _position_field(node), x_start, x_end, length, PositionAnchor.WINDOW_INSET
        )
        self._emit(ResolvedShape(
            kind=ComponentKind.CENTERING_RING,
            name=self._name(node, ComponentKind.CENTERING_RING),
            x_start=x,
            x_end=x + length,
            outer_radius=outer_radius,
            inner_radius=inner_radius,
            **self._radial(node),
        ))

    def _fin_set(self, node: LabeledNode, parent_radius: float, x_start: float, x_end: float) -> None:
        count_text = node.field_text("fincount")
        count = parse_int(count_text, "fincount") if count_text is not None else 1
        thickness = _float_field(node, "thickness")

        tab_mode = TabPositionMode.FRONT
        tab_offset = 0.0
        tab_node = node.child("tabposition")
        if tab_node is not None:
            tab_mode = parse_tab_position_mode(tab_node.attributes.get("relativeto", ""))
            tab_offset = parse_float(tab_node.text, "tabposition")

        profile, root = build_fin_profile(
            _fin_points(node),
            tab_height=_float_field(node, "tabheight"),
            tab_length=_float_field(node, "tablength"),
            tab_mode=tab_mode,
            tab_offset=tab_offset,
        )
        x = resolve_spec(_position_field(node), x_start, x_end, root, PositionAnchor.WINDOW)

        self._emit(ResolvedFinSet(
            kind=ComponentKind.FIN_SET,
            name=self._name(node, ComponentKind.FIN_SET),
            x_start=x,
            x_end=x + root,
            outer_radius=parent_radius,
            inner_radius=parent_radius,
            thickness=thickness,
            root_length=root,
            profile=profile,
            instances=fin_instances(
                count,
                rotation_deg=_float_field(node, "rotation"),
                cant_deg=_float_field(node, "cant"),
            ),
        ))


def resolve_components(
    components: List[LabeledNode],
    config: Optional[ImportConfig] = None,
    sink: Optional[ShapeSink] = None,
) -> ImportResult:
    """Resolve stage components in one pass."""
    return ComponentTreeWalker(config=config, sink=sink).walk(components)
