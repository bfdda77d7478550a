"""
Mesh generation for resolved components.

Solids of revolution are built around Z with trimesh and then laid onto
the rocket axis (+X). Fins are extruded from their root profile, lifted to
the parent tube surface, canted about the mid-root point and copied around
the axis. Bodies are kept per component and can be concatenated into one
assembly mesh for export.
"""
from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence

import numpy as np
import trimesh

from ork_import.contracts import (
    ComponentOutcome,
    ImportConfig,
    ResolvedFinSet,
    ResolvedNoseCone,
    ResolvedShape,
    Vec2,
)
from ork_import.fins import fin_polygon

logger = logging.getLogger(__name__)

# Z (trimesh revolution axis) -> X (rocket axis)
Z_TO_X = trimesh.transformations.rotation_matrix(math.pi / 2.0, [0.0, 1.0, 0.0])


def _radial_offset(shape: ResolvedShape) -> np.ndarray:
    angle = math.radians(shape.radial_direction)
    return np.array([
        0.0,
        shape.radial_position * math.cos(angle),
        shape.radial_position * math.sin(angle),
    ])


def _lay_on_axis(mesh: trimesh.Trimesh, x_center: float) -> trimesh.Trimesh:
    mesh.apply_translation([0.0, 0.0, x_center])
    mesh.apply_transform(Z_TO_X)
    return mesh


def tube_mesh(
    x_start: float,
    x_end: float,
    outer_radius: float,
    inner_radius: float,
    sections: int = 64,
) -> trimesh.Trimesh:
    """Hollow tube between x_start and x_end; solid when inner_radius <= 0."""
    length = x_end - x_start
    if length <= 0.0:
        raise ValueError(f"Tube length must be positive, got {length}")
    if outer_radius <= 0.0:
        raise ValueError(f"Outer radius must be positive, got {outer_radius}")
    if inner_radius >= outer_radius:
        raise ValueError(
            f"Inner radius {inner_radius} must be below outer radius {outer_radius}"
        )

    if inner_radius <= 0.0:
        mesh = trimesh.creation.cylinder(radius=outer_radius, height=length, sections=sections)
    else:
        mesh = trimesh.creation.annulus(
            r_min=inner_radius, r_max=outer_radius, height=length, sections=sections
        )
    return _lay_on_axis(mesh, (x_start + x_end) / 2.0)


def revolve_section(section: Sequence[Vec2], sections: int = 64) -> trimesh.Trimesh:
    """Revolve a closed (x, r) section about the rocket axis."""
    points = [(float(r), float(x)) for x, r in section]
    if points[0] != points[-1]:
        points.append(points[0])
    mesh = trimesh.creation.revolve(linestring=np.array(points), sections=sections)
    mesh.apply_transform(Z_TO_X)
    return mesh


def nose_section(profile: Sequence[Vec2], thickness: float) -> List[Vec2]:
    """Closed (x, r) section of the nose wall.

    The inner wall is the outer profile moved radially inward by
    ``thickness``, cut off where it reaches the axis. A non-positive
    thickness gives a solid nose.
    """
    tip_x = profile[0][0]
    base_x, base_r = profile[-1]
    if thickness <= 0.0 or thickness >= base_r:
        return [(tip_x, 0.0)] + [(x, r) for x, r in profile[1:]] + [(base_x, 0.0)]

    inner = [(x, r - thickness) for x, r in profile if r - thickness > 0.0]
    return [(tip_x, 0.0)] + [(x, r) for x, r in profile[1:]] + list(reversed(inner))


def nose_cone_meshes(shape: ResolvedNoseCone, sections: int = 64) -> List[trimesh.Trimesh]:
    if len(shape.profile) < 2:
        raise ValueError(f"Nose cone {shape.name!r} has no profile")
    if shape.profile[-1][1] <= 0.0:
        raise ValueError(f"Nose cone {shape.name!r} has no base radius")
    shell = revolve_section(nose_section(shape.profile, shape.thickness), sections)
    shell.apply_translation([shape.x_start, 0.0, 0.0])
    meshes = [shell]

    shoulder = shape.shoulder
    if shoulder is not None:
        x0 = shape.x_end + shoulder.x_offset
        x1 = shape.x_end + shoulder.length
        meshes.append(tube_mesh(
            x0, x1, shoulder.radius, shoulder.radius - shoulder.thickness, sections
        ))
        if shoulder.capped and shoulder.thickness > 0.0:
            meshes.append(tube_mesh(x1 - shoulder.thickness, x1, shoulder.radius, 0.0, sections))
    return meshes


def fin_meshes(shape: ResolvedFinSet) -> List[trimesh.Trimesh]:
    if shape.thickness <= 0.0:
        raise ValueError(f"Fin set {shape.name!r} has no thickness")
    polygon = fin_polygon(shape.profile)
    if not polygon.is_valid:
        polygon = polygon.buffer(0)

    root_x = shape.profile[0][0]
    base = trimesh.creation.extrude_polygon(polygon, height=shape.thickness)
    base.apply_translation([0.0, shape.outer_radius, -shape.thickness / 2.0])

    meshes = []
    for instance in shape.instances:
        fin = base.copy()
        if instance.cant_deg:
            fin.apply_transform(trimesh.transformations.rotation_matrix(
                math.radians(instance.cant_deg),
                [0.0, 1.0, 0.0],
                point=[root_x + shape.root_length / 2.0, 0.0, 0.0],
            ))
        fin.apply_translation([shape.x_start - root_x, 0.0, 0.0])
        if instance.angle_deg:
            fin.apply_transform(trimesh.transformations.rotation_matrix(
                math.radians(instance.angle_deg), [1.0, 0.0, 0.0]
            ))
        meshes.append(fin)
    return meshes


def shape_meshes(shape: ResolvedShape, sections: int = 64) -> List[trimesh.Trimesh]:
    """Meshes for one resolved component, in document units."""
    if isinstance(shape, ResolvedNoseCone):
        return nose_cone_meshes(shape, sections)
    if isinstance(shape, ResolvedFinSet):
        return fin_meshes(shape)
    mesh = tube_mesh(shape.x_start, shape.x_end, shape.outer_radius, shape.inner_radius, sections)
    if shape.radial_position:
        mesh.apply_translation(_radial_offset(shape))
    return [mesh]


class TrimeshKernel:
    """Collects meshes for emitted components.

    Used as the walker's sink: ``add`` returns one outcome per component.
    """

    def __init__(self, config: Optional[ImportConfig] = None):
        self.config = config or ImportConfig()
        self.bodies: Dict[str, List[trimesh.Trimesh]] = {}

    def add(self, shape: ResolvedShape) -> ComponentOutcome:
        meshes = shape_meshes(shape, self.config.radial_sections)
        if self.config.unit_scale != 1.0:
            for mesh in meshes:
                mesh.apply_scale(self.config.unit_scale)

        key = shape.name
        suffix = 2
        while key in self.bodies:
            key = f"{shape.name}_{suffix}"
            suffix += 1
        self.bodies[key] = meshes

        logger.debug("Built %d bodies for %s %r", len(meshes), shape.kind.value, key)
        return ComponentOutcome(
            name=key, kind=shape.kind, success=True, body_count=len(meshes)
        )

    def __call__(self, shape: ResolvedShape) -> ComponentOutcome:
        return self.add(shape)

    @property
    def body_count(self) -> int:
        return sum(len(meshes) for meshes in self.bodies.values())

    def assembly(self) -> trimesh.Trimesh:
        meshes = [mesh for group in self.bodies.values() for mesh in group]
        if not meshes:
            return trimesh.Trimesh()
        return trimesh.util.concatenate(meshes)

    def export(self, path: str) -> str:
        mesh = self.assembly()
        if mesh.is_empty:
            raise ValueError("No bodies to export")
        mesh.export(path)
        logger.info("Exported mesh: %s", path)
        return path
