"""Public API for importing OpenRocket designs as resolved geometry."""

from ork_import.contracts import ImportConfig, ImportResult, ResolvedShape
from ork_import.document import read_document, stage_components
from ork_import.pipeline import PipelineConfig, import_document, run_import_pipeline
from ork_import.walker import ComponentTreeWalker, resolve_components

__all__ = [
    "ComponentTreeWalker",
    "ImportConfig",
    "ImportResult",
    "PipelineConfig",
    "ResolvedShape",
    "import_document",
    "read_document",
    "resolve_components",
    "run_import_pipeline",
    "stage_components",
]
