"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest
from PIL import Image

from ethalon.corpus.reference_corpus import ReferenceCorpus
from ethalon.models.config import FramePolicy, HarnessConfig, ScenarioSpec


# ============================================================================
# Pixel helpers
# ============================================================================


def argb(pixels) -> bytes:
    """Pack (r, g, b[, a]) tuples into A,R,G,B byte order."""
    out = bytearray()
    for p in pixels:
        r, g, b = p[:3]
        a = p[3] if len(p) == 4 else 255
        out += bytes((a, r, g, b))
    return bytes(out)


def solid(size: tuple[int, int], color) -> Image.Image:
    mode = "RGBA" if len(color) == 4 else "RGB"
    return Image.new(mode, size, color)


def write_ethalon(root: Path, scenario_id: str, data: bytes) -> Path:
    path = root / f"{scenario_id}.bin"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


# ============================================================================
# Fake decoder
# ============================================================================


class FakeImage:
    """Decoder output stand-in returning canned buffers."""

    def __init__(self, pixels: bytes = b"", frames: dict | None = None, size=None):
        self.pixels = pixels
        self._frames = frames or {}
        self.requested_formats = []
        if size is not None:
            self.size = size

    @property
    def frames(self):
        return self._frames

    def to_bytes(self, pixel_format):
        self.requested_formats.append(pixel_format)
        return self.pixels


class FakeDecoder:
    def __init__(self, image: FakeImage | None = None, error: Exception | None = None):
        self.image = image
        self.error = error
        self.calls = 0

    def decode(self, data: bytes):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.image


# ============================================================================
# Corpus fixtures
# ============================================================================


@pytest.fixture
def samples_dir(tmp_path: Path) -> Path:
    path = tmp_path / "samples"
    path.mkdir()
    return path


@pytest.fixture
def ethalons_dir(tmp_path: Path) -> Path:
    path = tmp_path / "ethalons"
    path.mkdir()
    return path


@pytest.fixture
def reference_corpus(ethalons_dir: Path) -> ReferenceCorpus:
    return ReferenceCorpus(ethalons_dir)


@pytest.fixture
def harness_config(samples_dir: Path, ethalons_dir: Path, tmp_path: Path) -> HarnessConfig:
    """A config pointing at empty temporary corpora with no scenarios."""
    return HarnessConfig(
        samples_dir=str(samples_dir),
        ethalons_dir=str(ethalons_dir),
        block_size=32,
        frame_policy=FramePolicy.FAIL_FAST,
        max_parallel_scenarios=2,
        report_output_dir=str(tmp_path / "reports"),
        scenarios=[],
    )


# ============================================================================
# Sample corpus: one scenario per category
# ============================================================================

NATURAL_COLOR = (10, 20, 30)
ALPHA_COLOR = (200, 100, 50, 128)
TILE_COLORS = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 255)]
COLLECTION_COLORS = [(1, 2, 3), (40, 50, 60), (250, 128, 7)]


@pytest.fixture
def sample_corpus(samples_dir: Path, ethalons_dir: Path) -> dict[str, ScenarioSpec]:
    """Write lossless samples for every category together with hand-built ethalons."""
    specs = {}

    # Natural: a plain RGB photo stand-in
    solid((6, 5), NATURAL_COLOR).save(samples_dir / "natural.png")
    write_ethalon(ethalons_dir, "natural.png", argb([NATURAL_COLOR] * 30))
    specs["natural"] = ScenarioSpec(sample="natural.png", category="natural")

    # Derived: a 2x2 grid of 3x2 tiles reassembled into one image
    grid = Image.new("RGB", (6, 4))
    for i, color in enumerate(TILE_COLORS):
        grid.paste(solid((3, 2), color), ((i % 2) * 3, (i // 2) * 2))
    (samples_dir / "derived").mkdir()
    grid.save(samples_dir / "derived" / "grid_6x4.png")
    rows = []
    for y in range(4):
        for x in range(6):
            rows.append(TILE_COLORS[(y // 2) * 2 + x // 3])
    write_ethalon(ethalons_dir, "derived/grid_6x4.png", argb(rows))
    specs["derived"] = ScenarioSpec(sample="derived/grid_6x4.png", category="derived")

    # Collection: a multi-page TIFF, one ethalon per frame
    pages = [solid((4, 4), c) for c in COLLECTION_COLORS]
    pages[0].save(samples_dir / "collection.tiff", save_all=True, append_images=pages[1:])
    for i, color in enumerate(COLLECTION_COLORS):
        write_ethalon(ethalons_dir, f"collection.tiff_{i}", argb([color] * 16))
    specs["collection"] = ScenarioSpec(sample="collection.tiff", category="collection")

    # Alpha: RGBA with partial transparency
    solid((3, 3), ALPHA_COLOR).save(samples_dir / "alpha.png")
    write_ethalon(ethalons_dir, "alpha.png", argb([ALPHA_COLOR] * 9))
    specs["alpha"] = ScenarioSpec(sample="alpha.png", category="alpha")

    return specs
