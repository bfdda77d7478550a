"""Axial position resolution for positioned subcomponents."""

from __future__ import annotations

from ork_import.contracts import PositionAnchor, PositionMode, PositionSpec


def resolve_window_position(
    mode: PositionMode,
    offset: float,
    x_start: float,
    x_end: float,
    local_length: float,
    inset_after: bool = False,
) -> float:
    """Resolve against the enclosing [x_start, x_end] window.

    MIDDLE is (x_end - x_start) / 2 + offset, not offset from the window
    centre. With ``inset_after`` AFTER aligns the component's aft end with
    x_end instead of starting at x_end.
    """
    if mode is PositionMode.TOP:
        return x_start + offset
    if mode is PositionMode.BOTTOM:
        return x_end - local_length + offset
    if mode is PositionMode.MIDDLE:
        return (x_end - x_start) / 2.0 + offset
    if mode is PositionMode.AFTER:
        if inset_after:
            return x_end - local_length + offset
        return x_end + offset
    return offset


def resolve_stack_position(
    mode: PositionMode,
    offset: float,
    stack_length: float,
    local_length: float,
) -> float:
    """Resolve against the origin and the running stack length (couplers).

    TOP and AFTER add the component length; kept as found in the format's
    reference importer.
    """
    if mode is PositionMode.TOP:
        return 0.0 + local_length + offset
    if mode is PositionMode.BOTTOM:
        return stack_length - local_length + offset
    if mode is PositionMode.MIDDLE:
        return stack_length - local_length / 2.0 + offset
    if mode is PositionMode.AFTER:
        return stack_length + local_length + offset
    return offset


def resolve_position(
    mode: PositionMode,
    offset: float,
    x_start: float,
    x_end: float,
    local_length: float,
    anchor: PositionAnchor = PositionAnchor.WINDOW,
) -> float:
    """Map a position mode + offset to an absolute axial coordinate.

    For ``PositionAnchor.STACK`` the running stack length is passed as
    ``x_end``; ``x_start`` is ignored.
    """
    if anchor is PositionAnchor.STACK:
        return resolve_stack_position(mode, offset, x_end, local_length)
    return resolve_window_position(
        mode,
        offset,
        x_start,
        x_end,
        local_length,
        inset_after=anchor is PositionAnchor.WINDOW_INSET,
    )


def resolve_spec(
    spec: PositionSpec,
    x_start: float,
    x_end: float,
    local_length: float,
    anchor: PositionAnchor = PositionAnchor.WINDOW,
) -> float:
    return resolve_position(spec.mode, spec.offset, x_start, x_end, local_length, anchor)
