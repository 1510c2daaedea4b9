"""Exceptions raised by the ethalon harness."""

from __future__ import annotations

from pathlib import Path


class DecodeError(Exception):
    """The decoder could not turn the encoded bytes into an image."""


class SampleNotFound(FileNotFoundError):
    """An encoded sample input is missing from the samples directory."""

    def __init__(self, name: str, path: Path):
        self.name = name
        self.path = path
        super().__init__(f"Sample not found: {name} ({path})")


class ReferenceNotFound(FileNotFoundError):
    """The ethalon blob for a scenario identifier does not exist."""

    def __init__(self, scenario_id: str, path: Path):
        self.scenario_id = scenario_id
        self.path = path
        super().__init__(f"Ethalon not found for {scenario_id}: {path}")


class EthalonMismatch(AssertionError):
    """Decoded pixels differ from the stored ethalon."""
