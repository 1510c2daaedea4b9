"""Tests for configuration and pixel format models."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from ethalon.models.config import FramePolicy, HarnessConfig, ScenarioSpec
from ethalon.models.pixel_format import PixelFormat


class TestPixelFormat:
    def test_argb_layout(self):
        assert PixelFormat.ARGB32.channels == ("A", "R", "G", "B")
        assert PixelFormat.ARGB32.bytes_per_pixel == 4

    @pytest.mark.parametrize("fmt,bpp", [
        (PixelFormat.RGBA32, 4),
        (PixelFormat.BGRA32, 4),
        (PixelFormat.RGB24, 3),
        (PixelFormat.BGR24, 3),
        (PixelFormat.GRAY8, 1),
    ])
    def test_bytes_per_pixel(self, fmt, bpp):
        assert fmt.bytes_per_pixel == bpp

    def test_buffer_length(self):
        assert PixelFormat.ARGB32.buffer_length(960, 640) == 960 * 640 * 4
        assert PixelFormat.GRAY8.buffer_length(0, 10) == 0

    def test_lookup_by_value(self):
        assert PixelFormat("argb32") is PixelFormat.ARGB32


class TestScenarioSpec:
    def test_collection_enumerates_frames_by_default(self):
        assert ScenarioSpec(sample="c.heic", category="collection").frames is True

    def test_other_categories_use_primary_image(self):
        for category in ("natural", "derived", "alpha"):
            assert ScenarioSpec(sample="x.heic", category=category).frames is False

    def test_explicit_frames_flag_wins(self):
        assert ScenarioSpec(sample="x.heic", category="derived", frames=True).frames is True

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            ScenarioSpec(sample="x.heic", category="video")

    def test_scenario_id_defaults_to_sample(self):
        assert ScenarioSpec(sample="nokia/grid.heic").scenario_id == "nokia/grid.heic"
        assert ScenarioSpec(sample="a.heic", ethalon_name="b").scenario_id == "b"


class TestHarnessConfig:
    def test_default_values(self):
        config = HarnessConfig()
        assert config.pixel_format == PixelFormat.ARGB32
        assert config.block_size == 32
        assert config.frame_policy == FramePolicy.FAIL_FAST
        assert config.frame_separator == "_"
        assert config.ethalon_suffix == ".bin"
        assert config.stream_references is False

    def test_default_scenarios_cover_all_categories(self):
        config = HarnessConfig()
        samples = [s.sample for s in config.scenarios]
        assert "iphone_photo.heic" in samples
        assert "nokia/random_collection_1440x960.heic" in samples
        assert {s.category for s in config.scenarios} == {"natural", "derived", "collection", "alpha"}

    def test_block_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            HarnessConfig(block_size=0)

    def test_parallelism_must_be_positive(self):
        with pytest.raises(ValidationError):
            HarnessConfig(max_parallel_scenarios=0)

    def test_env_directory_resolution(self, monkeypatch):
        monkeypatch.setenv("ETHALON_SAMPLES", "/data/samples")
        config = HarnessConfig(samples_dir="env:ETHALON_SAMPLES")
        assert config.samples_dir == "/data/samples"

    def test_env_directory_missing(self, monkeypatch):
        monkeypatch.delenv("ETHALON_MISSING", raising=False)
        with pytest.raises(ValidationError):
            HarnessConfig(ethalons_dir="env:ETHALON_MISSING")

    def test_load_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            HarnessConfig.load(tmp_path / "nope.json")

    def test_save_and_load_roundtrip(self, tmp_path: Path):
        config = HarnessConfig(
            samples_dir=str(tmp_path / "s"),
            ethalons_dir=str(tmp_path / "e"),
            frame_policy=FramePolicy.COLLECT_ALL,
            pixel_format=PixelFormat.BGRA32,
            scenarios=[ScenarioSpec(sample="a.heic", pixel_format=PixelFormat.GRAY8)],
        )
        path = tmp_path / "cfg" / "config.json"
        config.save(path)

        data = json.loads(path.read_text())
        assert data["frame_policy"] == "collect_all"
        assert data["pixel_format"] == "bgra32"

        loaded = HarnessConfig.load(path)
        assert loaded.frame_policy == FramePolicy.COLLECT_ALL
        assert loaded.pixel_format == PixelFormat.BGRA32
        assert loaded.scenarios[0].pixel_format == PixelFormat.GRAY8
        assert loaded.samples_dir == str(tmp_path / "s")

    def test_relative_dirs_resolve_against_config_file(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"samples_dir": "data/samples", "ethalons_dir": "data/ethalons"}))
        loaded = HarnessConfig.load(path)
        assert loaded.samples_dir == str(tmp_path / "data" / "samples")
        assert loaded.ethalons_dir == str(tmp_path / "data" / "ethalons")

    def test_relative_report_dir_resolves_against_config_file(self, tmp_path: Path):
        path = tmp_path / "cfg" / "config.json"
        path.parent.mkdir()
        path.write_text(json.dumps({"report_output_dir": "out/reports"}))
        loaded = HarnessConfig.load(path)
        assert loaded.report_output_dir == str(tmp_path / "cfg" / "out" / "reports")

    def test_default_report_dir_resolves_against_config_file(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text("{}")
        assert HarnessConfig.load(path).report_output_dir == str(tmp_path / "ethalon-reports")

    def test_absolute_report_dir_kept(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"report_output_dir": str(tmp_path / "abs")}))
        assert HarnessConfig.load(path).report_output_dir == str(tmp_path / "abs")
