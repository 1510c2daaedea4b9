"""Decoder adapter — turns encoded image bytes into raw pixel buffers.

Pillow does the decoding; HEIF/HEIC containers are made readable by
registering the pillow-heif opener. Container images (collections, image
sequences) expose their sub-images through ``DecodedImage.frames``.
"""

from __future__ import annotations

import io
import logging
from typing import Protocol

from PIL import Image, UnidentifiedImageError
from pillow_heif import register_heif_opener

from ethalon.errors import DecodeError
from ethalon.models.pixel_format import PixelFormat

logger = logging.getLogger(__name__)

_DECODE_ERRORS = (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError)


class ImageLike(Protocol):
    def to_bytes(self, pixel_format: PixelFormat) -> bytes: ...

    @property
    def frames(self) -> dict[str, "ImageLike"]: ...


class Decoder(Protocol):
    def decode(self, data: bytes) -> ImageLike: ...


class DecodedImage:
    """One frame of a decoded image, plus access to its sibling frames."""

    def __init__(self, image: Image.Image, index: int | None = None):
        self._image = image
        self._index = image.tell() if index is None else index

    def _select(self) -> Image.Image:
        if getattr(self._image, "n_frames", 1) > 1 and self._image.tell() != self._index:
            self._image.seek(self._index)
        return self._image

    @property
    def size(self) -> tuple[int, int]:
        return self._select().size

    @property
    def frames(self) -> dict[str, DecodedImage]:
        """Sub-images keyed by frame index, in container order."""
        count = getattr(self._image, "n_frames", 1)
        return {str(i): DecodedImage(self._image, i) for i in range(count)}

    def to_bytes(self, pixel_format: PixelFormat) -> bytes:
        """Materialize this frame as a flat buffer in ``pixel_format``."""
        pixel_format = PixelFormat(pixel_format)
        channels = pixel_format.channels
        try:
            frame = self._select()
            if channels == ("L",):
                return frame.convert("L").tobytes()
            source = frame.convert("RGBA" if "A" in channels else "RGB")
            if source.getbands() == channels:
                return source.tobytes()
            bands = dict(zip(source.getbands(), source.split()))
            return Image.merge(source.mode, [bands[c] for c in channels]).tobytes()
        except _DECODE_ERRORS as e:
            raise DecodeError(f"Failed to decode frame {self._index}: {e}") from e


class PillowDecoder:
    """Decodes any format Pillow (with pillow-heif registered) can open."""

    def __init__(self):
        register_heif_opener()

    def decode(self, data: bytes) -> DecodedImage:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except _DECODE_ERRORS as e:
            raise DecodeError(f"Failed to decode image ({len(data)} bytes): {e}") from e
        logger.debug("Decoded %s image %dx%d (%d frame(s))",
                     image.format, image.width, image.height,
                     getattr(image, "n_frames", 1))
        return DecodedImage(image)
