"""Run folders: one timestamped directory per import, plus a ``latest`` pointer."""

from __future__ import annotations

import json
import os
import re
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.strip().lower())
    return slug.strip("-") or "rocket"


@dataclass
class RunFolder:
    run_id: str
    root: Path

    @classmethod
    def create(cls, runs_root: str, design_name: str) -> "RunFolder":
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
        run_id = f"{stamp}_{slugify(design_name)}"
        folder = cls(run_id=run_id, root=Path(runs_root) / run_id)
        folder.input_dir.mkdir(parents=True, exist_ok=True)
        folder.artifacts_dir.mkdir(parents=True, exist_ok=True)
        return folder

    @property
    def input_dir(self) -> Path:
        return self.root / "input"

    @property
    def artifacts_dir(self) -> Path:
        return self.root / "artifacts"

    @property
    def manifest_path(self) -> Path:
        return self.root / "manifest.json"

    @property
    def metrics_path(self) -> Path:
        return self.root / "metrics.json"

    @property
    def summary_path(self) -> Path:
        return self.root / "summary.md"

    def copy_input(self, document_path: str) -> Path:
        source = Path(document_path)
        target = self.input_dir / source.name
        if source.resolve() != target.resolve():
            shutil.copy2(source, target)
        return target

    def mark_latest(self) -> None:
        """Point ``<runs_root>/latest`` at this run."""
        runs_root = self.root.parent
        latest = runs_root / "latest"
        if latest.is_symlink() or latest.is_file():
            latest.unlink()
        elif latest.exists():
            shutil.rmtree(latest)

        try:
            latest.symlink_to(os.path.relpath(self.root, runs_root))
        except OSError:
            # no symlink support: record the run name instead
            latest.mkdir(parents=True, exist_ok=True)
            write_text(latest / "latest_run.txt", self.run_id)


def write_json(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
