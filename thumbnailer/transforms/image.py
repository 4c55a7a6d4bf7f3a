"""
Fixed-width image resize with Pillow.

Scales the image to a fixed width with proportional height and re-encodes
it in the format it arrived in, so the original ContentType stays valid.
"""
from __future__ import annotations

import io
import logging

from PIL import Image

from thumbnailer.exceptions import ImageTransformError

logger = logging.getLogger(__name__)

# Encoder options per Pillow format name
_SAVE_OPTIONS: dict[str, dict] = {
    "JPEG": {"quality": 85},
    "WEBP": {"quality": 85, "method": 4},
    "PNG": {"optimize": True},
}


class ImageResizeTransform:
    def __init__(self, width: int) -> None:
        self.width = width

    def target_size(self, size: tuple[int, int]) -> tuple[int, int]:
        src_width, src_height = size
        height = max(1, round(src_height * self.width / src_width))
        return self.width, height

    def apply(self, data: bytes) -> bytes:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise ImageTransformError(f"cannot decode image ({exc})") from exc

        fmt = image.format
        if not fmt:
            raise ImageTransformError("unknown image format")

        size = self.target_size(image.size)
        logger.info("Resizing %s image %dx%d -> %dx%d", fmt, *image.size, *size)
        resized = image.resize(size, Image.LANCZOS)

        buf = io.BytesIO()
        try:
            resized.save(buf, format=fmt, **_SAVE_OPTIONS.get(fmt, {}))
        except (OSError, ValueError, KeyError) as exc:
            raise ImageTransformError(f"cannot encode {fmt} ({exc})") from exc
        return buf.getvalue()
