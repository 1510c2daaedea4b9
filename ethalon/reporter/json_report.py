"""JSON report output."""

from __future__ import annotations

import json
from pathlib import Path

from ethalon.models.comparison import RunResult


def generate_json_report(run_result: RunResult, output_path: Path) -> None:
    """Write a machine-readable JSON report."""
    report = run_result.model_dump()
    report["failures"] = [
        {
            "scenario_id": r.scenario_id,
            "result": r.result,
            "failure_reason": r.failure_reason,
        }
        for r in run_result.scenario_results
        if r.result in ("fail", "error")
    ]

    with open(output_path, "w") as f:
        json.dump(report, f, indent=2, default=str)
