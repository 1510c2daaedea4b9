"""Frame enumeration — checks every frame of a container image against its own ethalon."""

from __future__ import annotations

import logging

from ethalon.comparator.chunked import DEFAULT_BLOCK_SIZE, compare_buffers, compare_stream
from ethalon.corpus.reference_corpus import ReferenceCorpus
from ethalon.decoder.adapter import ImageLike
from ethalon.errors import ReferenceNotFound
from ethalon.models.comparison import REFERENCE_NOT_FOUND, ComparisonResult, FrameResult
from ethalon.models.config import FramePolicy
from ethalon.models.pixel_format import PixelFormat

logger = logging.getLogger(__name__)


def frame_scenario_id(base_name: str, frame_key: str, separator: str = "_") -> str:
    return f"{base_name}{separator}{frame_key}"


def warn_on_size_mismatch(image, pixels: bytes, pixel_format: PixelFormat, scenario_id: str) -> bool:
    """Log a warning when a buffer's length disagrees with the image dimensions.

    Returns True when the lengths agree or the image reports no size.
    """
    size = getattr(image, "size", None)
    if size is None:
        return True
    pixel_format = PixelFormat(pixel_format)
    expected = pixel_format.buffer_length(*size)
    if len(pixels) == expected:
        return True
    logger.warning("%s: decoder produced %d bytes for a %dx%d %s image (expected %d)",
                   scenario_id, len(pixels), size[0], size[1], pixel_format.value, expected)
    return False


def check_buffer(
    pixels: bytes,
    scenario_id: str,
    corpus: ReferenceCorpus,
    block_size: int = DEFAULT_BLOCK_SIZE,
    stream: bool = False,
    frame_key: str | None = None,
) -> FrameResult:
    """Compare one pixel buffer with the ethalon stored for ``scenario_id``.

    A missing ethalon is recorded as a ``reference_not_found`` verdict rather
    than raised, so the caller can keep or drop sibling frames as it sees fit.
    """
    try:
        if stream:
            with corpus.open(scenario_id) as (handle, length):
                comparison = compare_stream(pixels, handle, length, block_size)
        else:
            comparison = compare_buffers(pixels, corpus.load(scenario_id), block_size)
    except ReferenceNotFound as e:
        logger.warning("No ethalon for %s: %s", scenario_id, e.path)
        return FrameResult(
            scenario_id=scenario_id, frame_key=frame_key,
            verdict=REFERENCE_NOT_FOUND, message=str(e),
        )

    return _frame_result(scenario_id, frame_key, comparison)


def _frame_result(scenario_id: str, frame_key: str | None, comparison: ComparisonResult) -> FrameResult:
    if comparison.passed:
        logger.debug("%s matches ethalon (%d bytes)", scenario_id, comparison.actual_length)
    else:
        logger.warning("%s: %s", scenario_id, comparison.describe())
    return FrameResult(
        scenario_id=scenario_id,
        frame_key=frame_key,
        verdict=comparison.verdict,
        message=comparison.describe(),
        comparison=comparison,
    )


def enumerate_frames(
    image: ImageLike,
    base_name: str,
    pixel_format: PixelFormat,
    corpus: ReferenceCorpus,
    policy: FramePolicy = FramePolicy.FAIL_FAST,
    separator: str = "_",
    block_size: int = DEFAULT_BLOCK_SIZE,
    stream: bool = False,
) -> list[FrameResult]:
    """Check each frame of ``image`` against ``<base_name><separator><frame_key>``.

    Frames are visited in the order the decoder reports them. With
    ``FAIL_FAST`` enumeration stops after the first failing frame; with
    ``COLLECT_ALL`` every frame is checked. Decode errors propagate.
    """
    results: list[FrameResult] = []
    frames = image.frames
    logger.debug("Enumerating %d frame(s) of %s", len(frames), base_name)

    for frame_key, frame in frames.items():
        scenario_id = frame_scenario_id(base_name, frame_key, separator)
        pixels = frame.to_bytes(pixel_format)
        warn_on_size_mismatch(frame, pixels, pixel_format, scenario_id)
        result = check_buffer(
            pixels, scenario_id, corpus,
            block_size=block_size, stream=stream, frame_key=frame_key,
        )
        results.append(result)
        if not result.passed and policy == FramePolicy.FAIL_FAST:
            logger.debug("Stopping frame enumeration of %s after failing frame %s",
                         base_name, frame_key)
            break

    return results
