"""
DXF export of 2D component templates.

Uses ezdxf to write one file per profiled component:
  - fin sets: closed root-profile outline (tab included), for cutting
  - nose cones: closed half-section (outer profile, wall, axis), for turning

Layers:
  - PROFILE (red, ACI 1): template outlines
  - LABEL (blue, ACI 5): component name and thickness notes

Coordinates are document units times ``scale``. Format: R2010.
"""
import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Sequence

import ezdxf
from ezdxf.enums import TextEntityAlignment
from shapely import affinity
from shapely.geometry import MultiPolygon, Polygon

from ork_import.contracts import ResolvedFinSet, ResolvedNoseCone, ResolvedShape, Vec2
from ork_import.fins import fin_polygon
from ork_import.kernel import nose_section

logger = logging.getLogger(__name__)


@dataclass
class DXFExportConfig:
    """Configuration for DXF export."""
    profile_layer: str = "PROFILE"
    label_layer: str = "LABEL"
    profile_color: int = 1   # ACI red
    label_color: int = 5     # ACI blue
    add_labels: bool = True
    label_height: float = 5.0
    scale: float = 1.0


def fin_to_dxf(
    shape: ResolvedFinSet,
    filepath: str,
    config: Optional[DXFExportConfig] = None,
) -> str:
    """Export one fin outline of a fin set to a DXF file.

    Returns:
        Path to created DXF file.
    """
    if config is None:
        config = DXFExportConfig()
    outline = _scaled(fin_polygon(shape.profile), config.scale)
    notes = [
        f"t={shape.thickness * config.scale:.3f}",
        f"x{len(shape.instances)}",
    ]
    return _write_outline(outline, filepath, shape.name, notes, config)


def nose_profile_to_dxf(
    shape: ResolvedNoseCone,
    filepath: str,
    config: Optional[DXFExportConfig] = None,
) -> str:
    """Export the nose cone half-section (x along the axis, y radial)."""
    if config is None:
        config = DXFExportConfig()
    section = nose_section(shape.profile, shape.thickness)
    outline = _scaled(Polygon(_offset_x(section, shape.x_start)), config.scale)
    notes = [shape.shape.value]
    if shape.thickness > 0.0:
        notes.append(f"t={shape.thickness * config.scale:.3f}")
    return _write_outline(outline, filepath, shape.name, notes, config)


def shapes_to_dxf(
    shapes: Sequence[ResolvedShape],
    output_dir: str,
    config: Optional[DXFExportConfig] = None,
) -> List[str]:
    """Export every fin set and nose cone to a separate DXF file.

    Returns:
        List of created DXF file paths.
    """
    os.makedirs(output_dir, exist_ok=True)
    paths = []
    used = set()

    for shape in shapes:
        if not isinstance(shape, (ResolvedFinSet, ResolvedNoseCone)):
            continue
        stem = _file_stem(shape.name)
        candidate = stem
        suffix = 2
        while candidate in used:
            candidate = f"{stem}_{suffix}"
            suffix += 1
        used.add(candidate)

        filepath = os.path.join(output_dir, f"{candidate}.dxf")
        if isinstance(shape, ResolvedFinSet):
            fin_to_dxf(shape, filepath, config)
        else:
            nose_profile_to_dxf(shape, filepath, config)
        paths.append(filepath)

    return paths


# ─── Internal helpers ────────────────────────────────────────────────────────

def _file_stem(name: str) -> str:
    stem = "".join(c if c.isalnum() or c in "-_" else "_" for c in name.strip())
    return stem or "component"


def _offset_x(points: Sequence[Vec2], dx: float) -> List[Vec2]:
    return [(x + dx, y) for x, y in points]


def _scaled(polygon: Polygon, scale: float) -> Polygon:
    if scale == 1.0:
        return polygon
    return affinity.scale(polygon, xfact=scale, yfact=scale, origin=(0.0, 0.0))


def _write_outline(
    outline: Polygon,
    filepath: str,
    name: str,
    notes: List[str],
    config: DXFExportConfig,
) -> str:
    doc = ezdxf.new("R2010")
    msp = doc.modelspace()
    _setup_layers(doc, config)
    _add_polygon_to_dxf(msp, outline, config.profile_layer)
    if config.add_labels:
        _add_label(msp, outline, name, notes, config)

    os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)
    doc.saveas(filepath)
    logger.info("Exported DXF: %s", filepath)
    return filepath


def _setup_layers(doc, config: DXFExportConfig) -> None:
    """Create PROFILE and LABEL layers."""
    doc.layers.add(config.profile_layer, color=config.profile_color)
    doc.layers.add(config.label_layer, color=config.label_color)


def _add_polygon_to_dxf(msp, polygon: Polygon, layer: str) -> None:
    """Add a Shapely polygon as a closed LWPolyline."""
    if polygon.is_empty:
        return

    if isinstance(polygon, MultiPolygon):
        for geom in polygon.geoms:
            _add_polygon_to_dxf(msp, geom, layer)
        return

    coords = list(polygon.exterior.coords)
    if len(coords) >= 3:
        msp.add_lwpolyline(
            coords,
            close=True,
            dxfattribs={"layer": layer},
        )


def _add_label(msp, outline: Polygon, name: str, notes: List[str], config: DXFExportConfig) -> None:
    """Add the component name and notes below the outline."""
    if outline.is_empty:
        return
    min_x, min_y, max_x, _ = outline.bounds
    x = (min_x + max_x) / 2
    y = min_y - config.label_height * 2
    msp.add_text(
        name,
        height=config.label_height,
        dxfattribs={"layer": config.label_layer},
    ).set_placement((x, y), align=TextEntityAlignment.MIDDLE_CENTER)

    if notes:
        msp.add_text(
            " ".join(notes),
            height=config.label_height * 0.7,
            dxfattribs={"layer": config.label_layer},
        ).set_placement(
            (x, y - config.label_height * 1.5),
            align=TextEntityAlignment.MIDDLE_CENTER,
        )
