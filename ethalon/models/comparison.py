"""Comparison and run result data structures."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

PASS = "pass"
LENGTH_MISMATCH = "length_mismatch"
CONTENT_MISMATCH = "content_mismatch"
REFERENCE_NOT_FOUND = "reference_not_found"


class ComparisonResult(BaseModel):
    """Outcome of comparing one pixel buffer with one ethalon blob."""
    verdict: str  # pass, length_mismatch, content_mismatch
    expected_length: int
    actual_length: int
    offset: Optional[int] = None  # start of the first differing block
    block_size: int = 32

    @property
    def passed(self) -> bool:
        return self.verdict == PASS

    def describe(self) -> str:
        if self.verdict == LENGTH_MISMATCH:
            return (
                f"Ethalon length do not match. Ethalon length equals {self.expected_length}, "
                f"read data length equals {self.actual_length}"
            )
        if self.verdict == CONTENT_MISMATCH:
            return (
                f"Data does not match ethalon at block offset {self.offset} "
                f"(block size {self.block_size})"
            )
        return f"Data matches ethalon ({self.actual_length} bytes)"


class FrameResult(BaseModel):
    """Verdict for one buffer checked inside a scenario."""
    scenario_id: str
    frame_key: Optional[str] = None  # None for the primary frame
    verdict: str  # pass, length_mismatch, content_mismatch, reference_not_found
    message: str = ""
    comparison: Optional[ComparisonResult] = None

    @property
    def passed(self) -> bool:
        return self.verdict == PASS


class ScenarioResult(BaseModel):
    scenario_id: str
    sample: str
    category: str
    pixel_format: str
    result: str  # pass, fail, error, skip
    failure_reason: Optional[str] = None
    frames: list[FrameResult] = Field(default_factory=list)
    duration_seconds: float = 0.0


class RunResult(BaseModel):
    run_id: str
    started_at: str
    completed_at: str
    samples_dir: str
    ethalons_dir: str
    frame_policy: str
    block_size: int
    total_scenarios: int = 0
    passed: int = 0
    failed: int = 0
    errors: int = 0
    skipped: int = 0
    duration_seconds: float = 0.0
    scenario_results: list[ScenarioResult] = Field(default_factory=list)
