"""Scenario runner — decode a sample, extract pixels, compare against ethalons."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from pathlib import Path

from ethalon.comparator.chunked import DEFAULT_BLOCK_SIZE
from ethalon.corpus.reference_corpus import ReferenceCorpus, SampleCorpus
from ethalon.decoder.adapter import Decoder, PillowDecoder
from ethalon.errors import DecodeError, SampleNotFound
from ethalon.models.comparison import (
    REFERENCE_NOT_FOUND,
    FrameResult,
    RunResult,
    ScenarioResult,
)
from ethalon.models.config import FramePolicy, HarnessConfig, ScenarioSpec
from ethalon.models.pixel_format import PixelFormat

from .frame_enumerator import check_buffer, enumerate_frames, warn_on_size_mismatch

logger = logging.getLogger(__name__)


def check_encoded(
    data: bytes,
    pixel_format: PixelFormat,
    scenario_id: str,
    corpus: ReferenceCorpus,
    decoder: Decoder,
    frames: bool = False,
    policy: FramePolicy = FramePolicy.FAIL_FAST,
    separator: str = "_",
    block_size: int = DEFAULT_BLOCK_SIZE,
    stream: bool = False,
) -> list[FrameResult]:
    """Decode ``data`` and compare the result with the stored ethalon(s).

    Returns one FrameResult for a simple image, or one per checked frame when
    ``frames`` is set. DecodeError from the decoder is not caught here.
    """
    image = decoder.decode(data)

    if frames:
        return enumerate_frames(
            image, scenario_id, pixel_format, corpus,
            policy=policy, separator=separator,
            block_size=block_size, stream=stream,
        )

    pixels = image.to_bytes(pixel_format)
    warn_on_size_mismatch(image, pixels, pixel_format, scenario_id)
    return [check_buffer(pixels, scenario_id, corpus, block_size=block_size, stream=stream)]


def summarize_frames(frames: list[FrameResult]) -> tuple[str, str | None]:
    """Aggregate frame verdicts into a scenario result and failure reason.

    Both are taken from the first failing frame: a missing ethalon there is a
    setup error, any other non-pass verdict is a failure.
    """
    failures = [f for f in frames if not f.passed]
    if not failures:
        return "pass", None

    first = failures[0]
    reason = first.message
    if first.frame_key is not None:
        reason = f"Frame {first.frame_key}: {reason}"
    if first.verdict == REFERENCE_NOT_FOUND:
        return "error", reason
    return "fail", reason


class ScenarioRunner:
    """Runs ethalon scenarios described by a HarnessConfig."""

    def __init__(self, config: HarnessConfig, decoder: Decoder | None = None):
        self.config = config
        self.decoder = decoder or PillowDecoder()
        self.samples = SampleCorpus(Path(config.samples_dir))
        self.references = ReferenceCorpus(Path(config.ethalons_dir), suffix=config.ethalon_suffix)

    def run_scenario(self, spec: ScenarioSpec) -> ScenarioResult:
        """Run one scenario; every error is turned into a ScenarioResult."""
        start = time.time()
        pixel_format = spec.pixel_format or self.config.pixel_format
        logger.info("Running scenario %s (%s, %s)", spec.scenario_id, spec.category, pixel_format.value)

        frames: list[FrameResult] = []
        try:
            data = self.samples.read(spec.sample)
            frames = check_encoded(
                data, pixel_format, spec.scenario_id, self.references, self.decoder,
                frames=bool(spec.frames),
                policy=self.config.frame_policy,
                separator=self.config.frame_separator,
                block_size=self.config.block_size,
                stream=self.config.stream_references,
            )
            result, reason = summarize_frames(frames)
        except SampleNotFound as e:
            logger.error("%s", e)
            result, reason = "error", str(e)
        except DecodeError as e:
            logger.error("Decode failed for %s: %s", spec.sample, e)
            result, reason = "error", f"Decode error: {e}"

        duration = time.time() - start
        logger.info("[%s] %s (%.2fs)", result.upper(), spec.scenario_id, duration)
        return ScenarioResult(
            scenario_id=spec.scenario_id,
            sample=spec.sample,
            category=spec.category,
            pixel_format=pixel_format.value,
            result=result,
            failure_reason=reason,
            frames=frames,
            duration_seconds=round(duration, 3),
        )

    def run_all(self, specs: list[ScenarioSpec] | None = None) -> RunResult:
        """Run scenarios concurrently and collect a RunResult."""
        return asyncio.run(self._run_all(specs if specs is not None else self.config.scenarios))

    async def _run_all(self, specs: list[ScenarioSpec]) -> RunResult:
        run_id = f"run_{uuid.uuid4().hex[:8]}"
        started_at = time.strftime("%Y-%m-%dT%H:%M:%SZ")
        start_time = time.time()
        total = len(specs)
        logger.info("Starting run %s (%d scenarios, policy=%s, block_size=%d)",
                    run_id, total, self.config.frame_policy.value, self.config.block_size)

        # Scenarios share no mutable state; the semaphore only bounds worker threads.
        semaphore = asyncio.Semaphore(self.config.max_parallel_scenarios)

        async def _run_one(index: int, spec: ScenarioSpec) -> ScenarioResult:
            async with semaphore:
                elapsed = time.time() - start_time
                if elapsed >= self.config.max_execution_time_seconds:
                    logger.warning("Time limit reached, skipping %s", spec.scenario_id)
                    return ScenarioResult(
                        scenario_id=spec.scenario_id, sample=spec.sample,
                        category=spec.category,
                        pixel_format=(spec.pixel_format or self.config.pixel_format).value,
                        result="skip", failure_reason="Time limit reached",
                    )
                logger.debug("Scenario [%d/%d]: %s", index + 1, total, spec.scenario_id)
                try:
                    return await asyncio.to_thread(self.run_scenario, spec)
                except Exception as e:
                    logger.exception("Scenario %s crashed", spec.scenario_id)
                    return ScenarioResult(
                        scenario_id=spec.scenario_id, sample=spec.sample,
                        category=spec.category,
                        pixel_format=(spec.pixel_format or self.config.pixel_format).value,
                        result="error", failure_reason=f"{type(e).__name__}: {e}",
                    )

        results = list(await asyncio.gather(
            *(_run_one(i, spec) for i, spec in enumerate(specs))
        ))

        duration = time.time() - start_time
        run_result = RunResult(
            run_id=run_id,
            started_at=started_at,
            completed_at=time.strftime("%Y-%m-%dT%H:%M:%SZ"),
            samples_dir=self.config.samples_dir,
            ethalons_dir=self.config.ethalons_dir,
            frame_policy=self.config.frame_policy.value,
            block_size=self.config.block_size,
            total_scenarios=len(results),
            passed=sum(1 for r in results if r.result == "pass"),
            failed=sum(1 for r in results if r.result == "fail"),
            errors=sum(1 for r in results if r.result == "error"),
            skipped=sum(1 for r in results if r.result == "skip"),
            duration_seconds=round(duration, 2),
            scenario_results=results,
        )
        logger.info("Run complete: %d passed, %d failed, %d errors, %d skipped (%.1fs)",
                    run_result.passed, run_result.failed, run_result.errors,
                    run_result.skipped, duration)
        return run_result
