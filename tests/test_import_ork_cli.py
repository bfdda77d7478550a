from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
SCRIPT = REPO_ROOT / "scripts" / "import_ork.py"


def test_import_ork_cli_runs_and_emits_artifacts(ork_file: str, tmp_path: Path):
    cmd = [
        sys.executable,
        str(SCRIPT),
        "--ork",
        ork_file,
        "--name",
        "cli_rocket",
        "--runs-dir",
        str(tmp_path),
        "--sections",
        "24",
    ]
    proc = subprocess.run(cmd, capture_output=True, text=True)
    assert proc.returncode == 0, proc.stderr
    assert "Run ID:" in proc.stdout
    assert "Status: SUCCESS" in proc.stdout

    run_dirs = sorted(
        [path for path in tmp_path.iterdir() if path.is_dir() and path.name != "latest"]
    )
    assert len(run_dirs) == 1
    artifacts = run_dirs[0] / "artifacts"
    assert (artifacts / "rocket.stl").exists()
    assert len(list((artifacts / "dxf").glob("*.dxf"))) == 2

    resolved = json.loads((artifacts / "resolved_shapes.json").read_text(encoding="utf-8"))
    assert len(resolved["shapes"]) == 6


def test_import_ork_cli_fatal_error_exit_code(tmp_path: Path):
    bad = tmp_path / "bad.ork"
    bad.write_text("<openrocket><rocket>", encoding="utf-8")
    cmd = [sys.executable, str(SCRIPT), "--ork", str(bad), "--runs-dir", str(tmp_path / "runs")]
    proc = subprocess.run(cmd, capture_output=True, text=True)
    assert proc.returncode == 2
    assert "Import failed" in proc.stderr


def test_import_ork_cli_strict_auto(tmp_path: Path):
    doc = tmp_path / "auto.ork"
    doc.write_text(
        "<openrocket><rocket><subcomponents><stage><subcomponents>"
        "<bodytube><length>100</length><radius>auto</radius></bodytube>"
        "</subcomponents></stage></subcomponents></rocket></openrocket>",
        encoding="utf-8",
    )
    cmd = [
        sys.executable, str(SCRIPT), "--ork", str(doc),
        "--runs-dir", str(tmp_path / "runs"), "--strict-auto",
    ]
    proc = subprocess.run(cmd, capture_output=True, text=True)
    assert proc.returncode == 2
