"""Single-path import: rocket document -> resolved shapes -> meshes -> run artifacts."""

from __future__ import annotations

import logging
import os
import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ork_import.contracts import ImportConfig, ImportResult, ResolvedShape
from ork_import.document import read_document, stage_components
from ork_import.dxf_exporter import DXFExportConfig, shapes_to_dxf
from ork_import.kernel import TrimeshKernel
from ork_import.run_protocol import RunFolder, write_json, write_text
from ork_import.walker import resolve_components

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    runs_dir: str = "runs"
    export_stl: bool = True
    export_dxf: bool = True
    import_config: ImportConfig = field(default_factory=ImportConfig)


@dataclass
class PipelineResult:
    run_id: str
    run_dir: str
    document_path: str
    resolved_json_path: str
    metrics_path: str
    summary_path: str
    manifest_path: str
    stl_path: Optional[str] = None
    dxf_paths: List[str] = field(default_factory=list)
    import_result: Optional[ImportResult] = None

    @property
    def success(self) -> bool:
        return self.import_result is not None and self.import_result.success


def import_document(
    document_path: str,
    config: Optional[ImportConfig] = None,
) -> Tuple[ImportResult, TrimeshKernel]:
    """Resolve a rocket document and build one mesh group per component."""
    if config is None:
        config = ImportConfig()
    root = read_document(document_path)
    kernel = TrimeshKernel(config)
    result = resolve_components(stage_components(root), config=config, sink=kernel.add)
    return result, kernel


def shape_to_dict(shape: ResolvedShape) -> Dict[str, Any]:
    payload = _jsonable(asdict(shape))
    payload["type"] = type(shape).__name__
    return payload


def run_import_pipeline(
    document_path: str,
    design_name: Optional[str] = None,
    config: Optional[PipelineConfig] = None,
) -> PipelineResult:
    if not os.path.isfile(document_path):
        raise FileNotFoundError(f"Rocket document not found: {document_path}")

    if config is None:
        config = PipelineConfig()
    if design_name is None:
        design_name = Path(document_path).stem

    started = time.perf_counter()
    run = RunFolder.create(config.runs_dir, design_name)
    copied = run.copy_input(document_path)

    logger.info("Importing %s", copied)
    result, kernel = import_document(str(copied), config.import_config)

    resolved_json_path = run.artifacts_dir / "resolved_shapes.json"
    write_json(resolved_json_path, {
        "run_id": run.run_id,
        "stack_length": result.stack_length,
        "shapes": [shape_to_dict(s) for s in result.shapes],
    })

    stl_path = None
    if config.export_stl and kernel.body_count:
        stl_path = kernel.export(str(run.artifacts_dir / "rocket.stl"))

    dxf_paths: List[str] = []
    if config.export_dxf:
        dxf_paths = shapes_to_dxf(
            result.shapes,
            str(run.artifacts_dir / "dxf"),
            DXFExportConfig(scale=config.import_config.unit_scale),
        )

    elapsed = time.perf_counter() - started
    failed = [o for o in result.outcomes if not o.success]

    write_json(run.metrics_path, {
        "run_id": run.run_id,
        "status": "success" if result.success else "failure",
        "elapsed_s": round(elapsed, 3),
        "stack_length": result.stack_length,
        "counts": {
            "components": len(result.shapes),
            "bodies": kernel.body_count,
            "failed_components": len(failed),
            "dxf_files": len(dxf_paths),
        },
        "failures": [_jsonable(asdict(o)) for o in failed],
    })
    write_text(run.summary_path, _build_summary(result, run.run_id, elapsed))

    write_json(run.manifest_path, {
        "run_id": run.run_id,
        "design_name": design_name,
        "input_document": str(copied),
        "status": "success" if result.success else "failure",
        "created_utc": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": _jsonable(asdict(config)),
        "artifacts": {
            "resolved_shapes": str(resolved_json_path),
            "stl": stl_path,
            "dxf": dxf_paths,
            "metrics": str(run.metrics_path),
            "summary": str(run.summary_path),
        },
    })
    run.mark_latest()

    return PipelineResult(
        run_id=run.run_id,
        run_dir=str(run.root),
        document_path=str(copied),
        resolved_json_path=str(resolved_json_path),
        metrics_path=str(run.metrics_path),
        summary_path=str(run.summary_path),
        manifest_path=str(run.manifest_path),
        stl_path=stl_path,
        dxf_paths=dxf_paths,
        import_result=result,
    )


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _build_summary(result: ImportResult, run_id: str, elapsed_s: float) -> str:
    lines = [
        f"# Run {run_id}",
        "",
        f"- Status: **{'SUCCESS' if result.success else 'FAILURE'}**",
        f"- Duration: {elapsed_s:.2f}s",
        f"- Components: {len(result.shapes)}",
        f"- Stack length: {result.stack_length:.6g}",
        "",
        "## Components",
    ]
    if not result.shapes:
        lines.append("- None")
    for shape in result.shapes:
        lines.append(
            f"- {shape.kind.value} `{shape.name}`: x=[{shape.x_start:.6g}, {shape.x_end:.6g}] "
            f"r={shape.outer_radius:.6g}/{shape.inner_radius:.6g}"
        )

    failed = [o for o in result.outcomes if not o.success]
    if failed:
        lines += ["", "## Failures"]
        for outcome in failed:
            lines.append(f"- {outcome.kind.value} `{outcome.name}`: {outcome.message}")

    return "\n".join(lines) + "\n"
