"""Report generation orchestration."""

from __future__ import annotations

import logging
from pathlib import Path

from ethalon.models.comparison import RunResult
from ethalon.models.config import HarnessConfig

from .json_report import generate_json_report

logger = logging.getLogger(__name__)


class Reporter:
    """Generates reports from run results."""

    def __init__(self, config: HarnessConfig):
        self.config = config

    def generate_reports(
        self,
        run_result: RunResult,
        output_dir: Path | None = None,
    ) -> dict[str, str]:
        """Generate all configured report formats. Returns format -> file path."""
        out_dir = output_dir or Path(self.config.report_output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        generated = {}
        logger.debug("Report output directory: %s", out_dir)

        for fmt in self.config.report_formats:
            if fmt != "json":
                logger.warning("Unsupported report format '%s', skipping", fmt)

        if "json" in self.config.report_formats:
            path = out_dir / f"report_{run_result.run_id}.json"
            logger.debug("Generating JSON report...")
            generate_json_report(run_result, path)
            generated["json"] = str(path)
            logger.info("JSON report: %s", path)

        return generated

    @staticmethod
    def basic_summary(run_result: RunResult) -> str:
        parts = [
            f"Checked {run_result.total_scenarios} scenarios in {run_result.duration_seconds:.1f}s.",
            f"Results: {run_result.passed} passed, {run_result.failed} failed, "
            f"{run_result.errors} errors, {run_result.skipped} skipped.",
        ]
        failures = [r for r in run_result.scenario_results if r.result in ("fail", "error")]
        if failures:
            parts.append(f"Failing: {', '.join(f.scenario_id for f in failures[:5])}")
        return " ".join(parts)
