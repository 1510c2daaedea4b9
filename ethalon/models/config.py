"""Configuration models for the ethalon harness."""

from __future__ import annotations

import json
import os
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ethalon.models.pixel_format import PixelFormat

CATEGORIES = ("natural", "derived", "collection", "alpha")


class FramePolicy(str, Enum):
    FAIL_FAST = "fail_fast"
    COLLECT_ALL = "collect_all"


class ScenarioSpec(BaseModel):
    sample: str  # path relative to samples_dir
    category: str = "natural"
    frames: Optional[bool] = None  # compare every frame instead of the primary image
    pixel_format: Optional[PixelFormat] = None
    ethalon_name: Optional[str] = None  # base name of the ethalon blob, defaults to sample

    @field_validator("category")
    @classmethod
    def check_category(cls, v: str) -> str:
        if v not in CATEGORIES:
            raise ValueError(f"Unknown scenario category '{v}', expected one of {CATEGORIES}")
        return v

    def model_post_init(self, __context) -> None:
        if self.frames is None:
            self.frames = self.category == "collection"

    @property
    def scenario_id(self) -> str:
        return self.ethalon_name or self.sample


def _default_scenarios() -> list[ScenarioSpec]:
    return [
        ScenarioSpec(sample="iphone_photo.heic", category="natural"),
        ScenarioSpec(sample="iphone_portrait_photo.heic", category="natural"),
        ScenarioSpec(sample="nokia/grid_960x640.heic", category="derived"),
        ScenarioSpec(sample="nokia/overlay_1000x680.heic", category="derived"),
        ScenarioSpec(sample="nokia/random_collection_1440x960.heic", category="collection"),
        ScenarioSpec(sample="gimp_rgb_420_with_alpha.heic", category="alpha"),
    ]


class HarnessConfig(BaseModel):
    # Corpus roots
    samples_dir: str = "TestsData/samples"
    ethalons_dir: str = "TestsData/ethalons"
    ethalon_suffix: str = ".bin"

    # Comparison
    pixel_format: PixelFormat = PixelFormat.ARGB32
    block_size: int = 32
    frame_policy: FramePolicy = FramePolicy.FAIL_FAST
    frame_separator: str = "_"
    stream_references: bool = False

    # Execution limits
    max_parallel_scenarios: int = 4
    max_execution_time_seconds: int = 600

    # Reporting
    report_formats: list[str] = Field(default_factory=lambda: ["json"])
    report_output_dir: str = "./ethalon-reports"

    scenarios: list[ScenarioSpec] = Field(default_factory=_default_scenarios)

    @field_validator("samples_dir", "ethalons_dir", mode="before")
    @classmethod
    def resolve_env_dir(cls, v: str) -> str:
        if isinstance(v, str) and v.startswith("env:"):
            env_var = v[4:]
            resolved = os.environ.get(env_var)
            if resolved is None:
                raise ValueError(f"Environment variable '{env_var}' not set")
            return resolved
        return v

    @field_validator("block_size")
    @classmethod
    def check_block_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("block_size must be at least 1 byte")
        return v

    @field_validator("max_parallel_scenarios")
    @classmethod
    def check_parallelism(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_parallel_scenarios must be at least 1")
        return v

    @classmethod
    def load(cls, path: str | Path) -> "HarnessConfig":
        """Load config from a JSON file.

        Relative corpus and report directories are resolved against the
        directory holding the config file.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        cfg = cls(**data)
        base = path.parent
        for field in ("samples_dir", "ethalons_dir", "report_output_dir"):
            value = getattr(cfg, field)
            if not Path(value).is_absolute():
                setattr(cfg, field, str(base / value))
        return cfg

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)
