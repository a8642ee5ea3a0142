"""Regression tests for the offline merge script."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

from tests.conftest import make_fragment, make_operation, write_json

_REPO_ROOT = Path(__file__).parent.parent


def _run_script(args: list[str]) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(_REPO_ROOT / "src")
    return subprocess.run(
        [sys.executable, str(_REPO_ROOT / "scripts" / "merge_local_fragments.py"), *args],
        cwd=_REPO_ROOT,
        env=env,
        text=True,
        capture_output=True,
    )


def test_script_merges_files_in_argument_order(tmp_path: Path) -> None:
    scores = make_fragment(
        "scores", base_path="/v3/nfl/scores", paths={"/Teams": {"get": make_operation("Teams")}}
    )
    stats = make_fragment(
        "stats", base_path="/v3/nfl/stats", paths={"/Teams": {"get": make_operation("Teams")}}
    )
    first = write_json(tmp_path / "scores.json", scores.document)
    second = write_json(tmp_path / "stats.json", stats.document)
    output = tmp_path / "merged.json"

    result = _run_script(["NFL", str(first), str(second), "--output", str(output)])

    assert result.returncode == 0, result.stderr
    assert "1 duplicates dropped" in result.stderr
    document = json.loads(output.read_text(encoding="utf-8"))
    assert document["info"]["title"] == "NFL"
    assert document["paths"]["/scores/Teams"]["get"]["operationId"] == "Teams"
    assert document["paths"]["/stats/Teams"] == {}


def test_script_reports_malformed_fragment(tmp_path: Path) -> None:
    broken = write_json(tmp_path / "broken.json", {"paths": {}})
    result = _run_script(["NFL", str(broken)])
    assert result.returncode == 1
    assert "missing basePath" in result.stderr
    assert "route=broken" in result.stderr
