"""Chunked comparator — byte-exact comparison of pixel buffers against ethalons.

Both buffers are walked in fixed-size blocks. The block size only affects
throughput and the granularity of the reported offset: any size >= 1 yields
the same pass/fail verdict, and the last block is trimmed to the bytes that
remain so nothing past either buffer's end is ever read.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from ethalon.models.comparison import (
    CONTENT_MISMATCH,
    LENGTH_MISMATCH,
    PASS,
    ComparisonResult,
)

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 32


def _check_block_size(block_size: int) -> None:
    if block_size < 1:
        raise ValueError(f"block_size must be at least 1 byte, got {block_size}")


def _as_bytes_view(buffer) -> memoryview:
    view = memoryview(buffer)
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


def _length_mismatch(expected: int, actual: int, block_size: int) -> ComparisonResult:
    logger.debug("Length pre-check failed: expected %d bytes, got %d", expected, actual)
    return ComparisonResult(
        verdict=LENGTH_MISMATCH,
        expected_length=expected,
        actual_length=actual,
        block_size=block_size,
    )


def compare_buffers(actual, expected, block_size: int = DEFAULT_BLOCK_SIZE) -> ComparisonResult:
    """Compare a decoded buffer with an ethalon buffer.

    Accepts any object exposing the buffer protocol (bytes, bytearray,
    memoryview). Lengths are checked first; content is only compared when
    they agree. On mismatch the offset of the first differing block is
    reported.
    """
    _check_block_size(block_size)
    actual_view = _as_bytes_view(actual)
    expected_view = _as_bytes_view(expected)
    length = actual_view.nbytes

    if length != expected_view.nbytes:
        return _length_mismatch(expected_view.nbytes, length, block_size)

    # Bulk equality settles the common case; the block scan only locates the difference.
    if actual_view == expected_view:
        return ComparisonResult(
            verdict=PASS, expected_length=length, actual_length=length, block_size=block_size,
        )

    for offset in range(0, length, block_size):
        end = min(offset + block_size, length)
        if actual_view[offset:end] != expected_view[offset:end]:
            logger.debug("First differing block starts at offset %d", offset)
            return ComparisonResult(
                verdict=CONTENT_MISMATCH,
                expected_length=length,
                actual_length=length,
                offset=offset,
                block_size=block_size,
            )

    # Unreachable for well-behaved buffers: bulk equality failed but no block differed.
    raise RuntimeError("Buffers compared unequal but no differing block was found")


def compare_stream(
    actual,
    stream: BinaryIO,
    expected_length: int,
    block_size: int = DEFAULT_BLOCK_SIZE,
) -> ComparisonResult:
    """Compare a decoded buffer with an ethalon read block by block from a stream.

    ``expected_length`` is the declared size of the ethalon (e.g. its file
    size) and drives the length pre-check. A stream that ends before
    delivering that many bytes is reported as a length mismatch carrying the
    number of bytes it actually held.
    """
    _check_block_size(block_size)
    actual_view = _as_bytes_view(actual)
    length = actual_view.nbytes

    if length != expected_length:
        return _length_mismatch(expected_length, length, block_size)

    block = bytearray(block_size)
    block_view = memoryview(block)
    offset = 0
    while offset < length:
        wanted = min(block_size, length - offset)
        filled = 0
        while filled < wanted:
            read = stream.readinto(block_view[filled:wanted])
            if not read:
                break
            filled += read
        if filled < wanted:
            logger.debug("Ethalon stream ended early at %d of %d bytes",
                         offset + filled, expected_length)
            return _length_mismatch(offset + filled, length, block_size)
        if actual_view[offset:offset + wanted] != block_view[:wanted]:
            logger.debug("First differing block starts at offset %d", offset)
            return ComparisonResult(
                verdict=CONTENT_MISMATCH,
                expected_length=expected_length,
                actual_length=length,
                offset=offset,
                block_size=block_size,
            )
        offset += wanted

    return ComparisonResult(
        verdict=PASS, expected_length=expected_length, actual_length=length, block_size=block_size,
    )
