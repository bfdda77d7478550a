#!/usr/bin/env python3
"""Import an OpenRocket design: resolve components and write meshes/templates."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ork_import import ImportConfig, PipelineConfig, run_import_pipeline
from ork_import.contracts import OrkImportError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve an OpenRocket (.ork) design into CAD-ready geometry"
    )
    parser.add_argument("--ork", required=True, help="Path to the .ork document")
    parser.add_argument("--name", default=None, help="Design/run name (default: file stem)")
    parser.add_argument("--runs-dir", default="runs", help="Runs output root")
    parser.add_argument(
        "--tip-radius",
        type=float,
        default=0.0,
        help="Spherical-cap blunting radius for ogive nose tips (document units)",
    )
    parser.add_argument(
        "--divisions",
        type=int,
        default=100,
        help="Number of nose cone profile samples",
    )
    parser.add_argument(
        "--sections",
        type=int,
        default=64,
        help="Angular subdivisions of revolved bodies",
    )
    parser.add_argument(
        "--unit-scale",
        type=float,
        default=1.0,
        help="Scale applied to meshes and templates (1000 turns metres into mm)",
    )
    parser.add_argument(
        "--strict-auto",
        action="store_true",
        help="Fail when an 'auto' dimension cannot be resolved instead of using 0",
    )
    parser.add_argument("--no-stl", action="store_true", help="Skip STL export")
    parser.add_argument("--no-dxf", action="store_true", help="Skip DXF template export")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logs"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = PipelineConfig(
        runs_dir=args.runs_dir,
        export_stl=not args.no_stl,
        export_dxf=not args.no_dxf,
        import_config=ImportConfig(
            profile_divisions=max(2, int(args.divisions)),
            nose_tip_radius=max(0.0, float(args.tip_radius)),
            strict_auto_references=args.strict_auto,
            radial_sections=max(3, int(args.sections)),
            unit_scale=float(args.unit_scale),
        ),
    )

    try:
        result = run_import_pipeline(args.ork, design_name=args.name, config=config)
    except (OrkImportError, FileNotFoundError) as exc:
        logging.getLogger("import_ork").error("Import failed: %s", exc)
        return 2

    imported = result.import_result
    print(f"Run ID: {result.run_id}")
    print(f"Run dir: {result.run_dir}")
    print(f"Status: {'SUCCESS' if result.success else 'FAILURE'}")
    print(f"Components: {len(imported.shapes)}")
    print(f"Stack length: {imported.stack_length:.6g}")
    print(f"Resolved shapes: {result.resolved_json_path}")
    if result.stl_path:
        print(f"STL: {result.stl_path}")
    print(f"DXF files: {len(result.dxf_paths)}")
    print(f"Summary: {result.summary_path}")
    return 0 if result.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
