"""Run orchestrator — coordinates scenario execution and reporting."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from ethalon.decoder.adapter import Decoder
from ethalon.models.comparison import RunResult
from ethalon.models.config import HarnessConfig, ScenarioSpec
from ethalon.reporter.reporter import Reporter
from ethalon.runner.scenario_runner import ScenarioRunner

logger = logging.getLogger(__name__)


class Orchestrator:
    """Runs the configured ethalon scenarios and writes reports."""

    def __init__(self, config: HarnessConfig, decoder: Decoder | None = None):
        self.config = config
        self.runner = ScenarioRunner(config, decoder=decoder)
        self.reporter = Reporter(config)

    def run(self, specs: list[ScenarioSpec] | None = None) -> dict:
        """Run scenarios, write reports and return a summary dict."""
        start = time.time()
        logger.info("=== Ethalon run: samples=%s ethalons=%s ===",
                    self.config.samples_dir, self.config.ethalons_dir)

        run_result = self.runner.run_all(specs)
        reports = self._report(run_result)

        duration = time.time() - start
        logger.info("=== Run complete in %.1fs ===", duration)
        return {
            "run_id": run_result.run_id,
            "duration": round(duration, 2),
            "run_result": run_result,
            "summary": Reporter.basic_summary(run_result),
            "reports": reports,
        }

    def _report(self, run_result: RunResult) -> dict[str, str]:
        if not self.config.report_formats:
            return {}
        return self.reporter.generate_reports(
            run_result, output_dir=Path(self.config.report_output_dir),
        )
