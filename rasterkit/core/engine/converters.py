"""
Image format conversion utilities.

Handles conversions used by the engine adapter:
- Raw bytes <-> PIL Images (decode / encode)
- Color strings -> RGBA tuples
- Working-mode normalization (RGB / RGBA)
"""

import io
import logging
from typing import Any, Optional, Tuple

from PIL import Image, ImageColor

logger = logging.getLogger(__name__)

# Colors ImageMagick understands that Pillow's ImageColor does not
_TRANSPARENT_NAMES = ("none", "transparent")


class ImageConverters:
    """Utilities for converting between image representations."""

    @staticmethod
    def decode(data: bytes, max_pixels: Optional[int] = None) -> Image.Image:
        """
        Decode raw bytes into a fully loaded PIL Image.

        Args:
            data: Encoded image bytes
            max_pixels: Reject images with more pixels than this (None disables)

        Returns:
            Loaded PIL Image (``format`` is set by the decoder)

        Raises:
            ValueError: If the image exceeds max_pixels
            OSError: If Pillow cannot identify or read the data
        """
        image = Image.open(io.BytesIO(data))

        # Check the header size before decoding any pixels
        if max_pixels is not None and image.width * image.height > max_pixels:
            raise ValueError(
                f"{image.width * image.height} pixels exceeds limit of {max_pixels}"
            )

        image.load()
        return image

    @staticmethod
    def encode(image: Image.Image, format: str, **params: Any) -> bytes:
        """
        Encode a PIL Image to bytes.

        Args:
            image: Image to encode
            format: Pillow format name (JPEG, PNG, ...)
            **params: Encoder parameters passed to Image.save

        Returns:
            Encoded bytes
        """
        buffer = io.BytesIO()
        image.save(buffer, format=format, **params)
        return buffer.getvalue()

    @staticmethod
    def parse_color(color: str) -> Tuple[int, int, int, int]:
        """
        Parse a color string into an RGBA tuple.

        Accepts everything PIL.ImageColor does (names, #hex, rgb(), rgba(),
        hsl(), hsv()) plus "none"/"transparent".

        Args:
            color: Color specification

        Returns:
            (red, green, blue, alpha) in 0-255

        Raises:
            ValueError: If the color string is not recognized
        """
        if not isinstance(color, str):
            raise ValueError(f"color must be a string, got {type(color).__name__}")

        if color.strip().lower() in _TRANSPARENT_NAMES:
            return (0, 0, 0, 0)

        rgb = ImageColor.getrgb(color)
        if len(rgb) == 3:
            return (rgb[0], rgb[1], rgb[2], 255)
        return (rgb[0], rgb[1], rgb[2], rgb[3])

    @staticmethod
    def has_alpha(image: Image.Image) -> bool:
        """Check whether the image carries transparency data."""
        return image.has_transparency_data

    @staticmethod
    def ensure_rgb(image: Image.Image) -> Image.Image:
        """
        Ensure image is RGB, or RGBA when it has transparency.

        Args:
            image: Input image in any mode

        Returns:
            The image itself if already RGB/RGBA, else a converted copy
        """
        if image.mode in ("RGB", "RGBA"):
            return image
        return image.convert("RGBA" if ImageConverters.has_alpha(image) else "RGB")
