"""Pixel formats a decoded frame can be materialized in."""

from __future__ import annotations

from enum import Enum


class PixelFormat(str, Enum):
    ARGB32 = "argb32"
    RGBA32 = "rgba32"
    BGRA32 = "bgra32"
    RGB24 = "rgb24"
    BGR24 = "bgr24"
    GRAY8 = "gray8"

    @property
    def channels(self) -> tuple[str, ...]:
        """Channel order of one pixel, as Pillow band names."""
        return _CHANNELS[self]

    @property
    def bytes_per_pixel(self) -> int:
        return len(self.channels)

    def buffer_length(self, width: int, height: int) -> int:
        """Expected byte length of a width x height raster in this format."""
        return width * height * self.bytes_per_pixel


_CHANNELS: dict[PixelFormat, tuple[str, ...]] = {
    PixelFormat.ARGB32: ("A", "R", "G", "B"),
    PixelFormat.RGBA32: ("R", "G", "B", "A"),
    PixelFormat.BGRA32: ("B", "G", "R", "A"),
    PixelFormat.RGB24: ("R", "G", "B"),
    PixelFormat.BGR24: ("B", "G", "R"),
    PixelFormat.GRAY8: ("L",),
}
