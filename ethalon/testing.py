"""Assertion helpers for driving ethalon checks from pytest."""

from __future__ import annotations

import pytest

from ethalon.comparator.chunked import DEFAULT_BLOCK_SIZE
from ethalon.corpus.reference_corpus import ReferenceCorpus
from ethalon.errors import EthalonMismatch
from ethalon.models.comparison import ScenarioResult
from ethalon.runner.frame_enumerator import check_buffer


def assert_matches_ethalon(
    pixels: bytes,
    scenario_id: str,
    corpus: ReferenceCorpus,
    block_size: int = DEFAULT_BLOCK_SIZE,
) -> None:
    """Fail the calling test unless ``pixels`` equal the stored ethalon."""
    result = check_buffer(pixels, scenario_id, corpus, block_size=block_size)
    if not result.passed:
        raise EthalonMismatch(f"{scenario_id}: {result.message}")


def assert_scenario_passes(result: ScenarioResult) -> None:
    """Fail on any non-pass result; a scenario that never ran is skipped."""
    if result.result == "skip":
        pytest.skip(f"{result.scenario_id}: {result.failure_reason}")
    if result.result != "pass":
        raise EthalonMismatch(f"{result.scenario_id} [{result.result}]: {result.failure_reason}")
