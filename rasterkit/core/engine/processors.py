"""
Image processing primitives.

Pure functions over PIL Images: each takes an image and returns a new one,
raising ValueError for arguments the engine cannot honour. The raster
handle wraps these and turns failures into PrimitiveError.

Handles:
- Geometry: resize, crop, extent, rotate, flip, flop
- Tone: brightness/contrast, sepia tone, colorize, grayscale
- Compositing: "over" at an offset
"""

import logging
import math
from typing import Tuple

import cv2
import numpy as np
from PIL import Image

from rasterkit.core.constants import ErrorMessages, ToneConstants
from rasterkit.core.engine.converters import ImageConverters

logger = logging.getLogger(__name__)

RESAMPLING_FILTERS = {
    "lanczos": Image.Resampling.LANCZOS,
    "bicubic": Image.Resampling.BICUBIC,
    "bilinear": Image.Resampling.BILINEAR,
    "nearest": Image.Resampling.NEAREST,
}

# Clockwise quarter turns -> Pillow transpose (Pillow's ROTATE_* are counter-clockwise)
_QUARTER_TURNS = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


def _luma(rgba: Tuple[int, ...]) -> int:
    return int(round(sum(w * c for w, c in zip(ToneConstants.LUMA_WEIGHTS, rgba[:3]))))


def _require_positive(operation: str, width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(
            ErrorMessages.INVALID_SIZE.format(operation=operation, width=width, height=height)
        )


def resize(
    image: Image.Image, width: int, height: int, filter: str = "lanczos", blur: float = 1.0
) -> Image.Image:
    """
    Resize image to exactly width x height.

    Args:
        image: Input image
        width: Target width
        height: Target height
        filter: Resampling filter name (lanczos, bicubic, bilinear, nearest)
        blur: Blur factor; only 1.0 (no extra blur/sharpen) is supported by Pillow

    Returns:
        Resized image
    """
    _require_positive("resize", width, height)

    resample = RESAMPLING_FILTERS.get(filter)
    if resample is None:
        raise ValueError(f"unknown resize filter: {filter}")
    if blur != 1.0:
        raise ValueError(f"blur factor {blur} is not supported")

    # Pillow falls back to nearest-neighbour for palette and bilevel images
    if image.mode == "1":
        image = image.convert("L")
    elif image.mode == "P":
        image = ImageConverters.ensure_rgb(image)

    return image.resize((width, height), resample=resample)


def crop(image: Image.Image, width: int, height: int, x: int, y: int) -> Image.Image:
    """
    Crop image to the rectangle (x, y, width, height).

    The rectangle is clipped to the image; a rectangle that misses the image
    entirely is an error.
    """
    _require_positive("crop", width, height)

    left = max(x, 0)
    top = max(y, 0)
    right = min(x + width, image.width)
    bottom = min(y + height, image.height)

    if right <= left or bottom <= top:
        raise ValueError(
            f"geometry {width}x{height}{x:+d}{y:+d} does not contain image "
            f"{image.width}x{image.height}"
        )

    return image.crop((left, top, right, bottom))


def extent(
    image: Image.Image, width: int, height: int, x: int, y: int, background: str = "white"
) -> Image.Image:
    """
    Place image on a new width x height canvas.

    The canvas pixel (0, 0) maps to image pixel (x, y), so positive offsets
    crop from the top-left and negative offsets pad. Images with alpha get a
    transparent canvas; others use the background color.
    """
    _require_positive("extent", width, height)

    source = ImageConverters.ensure_rgb(image) if image.mode not in ("L", "LA") else image

    if ImageConverters.has_alpha(source):
        # Zero-filled RGBA / LA canvas is fully transparent
        canvas = Image.new(source.mode, (width, height))
    elif source.mode == "L":
        canvas = Image.new("L", (width, height), _luma(ImageConverters.parse_color(background)))
    else:
        canvas = Image.new("RGB", (width, height), ImageConverters.parse_color(background)[:3])

    canvas.paste(source, (-x, -y))
    return canvas


def rotate(image: Image.Image, angle: float, fill: str = "none") -> Image.Image:
    """
    Rotate image clockwise by angle degrees, expanding the canvas.

    Quarter turns are exact transposes; other angles resample and fill the
    exposed corners with the fill color.
    """
    turn = angle % 360
    if turn == 0:
        return image.copy()
    if turn in _QUARTER_TURNS:
        return image.transpose(_QUARTER_TURNS[int(turn)])

    rgba = ImageConverters.parse_color(fill)
    if rgba[3] < 255 or ImageConverters.has_alpha(image):
        source = image.convert("RGBA")
        fillcolor: Tuple[int, ...] = rgba
    else:
        source = ImageConverters.ensure_rgb(image)
        fillcolor = rgba[:3]

    # Pillow rotates counter-clockwise
    return source.rotate(-angle, resample=Image.Resampling.BICUBIC, expand=True, fillcolor=fillcolor)


def flip(image: Image.Image) -> Image.Image:
    """Mirror top to bottom."""
    return image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)


def flop(image: Image.Image) -> Image.Image:
    """Mirror left to right."""
    return image.transpose(Image.Transpose.FLIP_LEFT_RIGHT)


def brightness_contrast_lut(brightness: float, contrast: float) -> np.ndarray:
    """
    Build the 8-bit lookup table for a brightness/contrast adjustment.

    Both inputs are percentages in [-100, 100]. The curve is linear in
    normalized space: out = slope * v + intercept with
    slope = tan(pi * (contrast / 100 + 1) / 4) (floored at 0) and
    intercept = brightness / 100 + ((100 - brightness) / 200) * (1 - slope).

    Returns:
        uint8 array of 256 entries
    """
    scale = ToneConstants.PERCENT_SCALE
    slope = math.tan(math.pi * (contrast / scale + 1.0) / 4.0)
    slope = max(slope, 0.0)
    intercept = brightness / scale + ((scale - brightness) / (2.0 * scale)) * (1.0 - slope)

    values = np.arange(256, dtype=np.float64) / 255.0
    curve = (slope * values + intercept) * 255.0 + 0.5
    return np.clip(curve, 0, 255).astype(np.uint8)


def brightness_contrast(image: Image.Image, brightness: float, contrast: float) -> Image.Image:
    """Apply brightness/contrast to the color channels; alpha is untouched."""
    lut = brightness_contrast_lut(brightness, contrast)

    source = image if image.mode in ("L", "LA") else ImageConverters.ensure_rgb(image)
    pixels = np.array(source)

    if pixels.ndim == 2:
        pixels = cv2.LUT(pixels, lut)
    else:
        color_channels = 1 if source.mode == "LA" else 3
        color = np.ascontiguousarray(pixels[..., :color_channels])
        adjusted = cv2.LUT(color, lut)
        pixels[..., :color_channels] = adjusted.reshape(color.shape)

    return Image.fromarray(pixels)


def sepia_tone(image: Image.Image, threshold: float, quantum_range: int = 255) -> Image.Image:
    """
    Apply a sepia tone.

    Works on Rec.601 intensity I with threshold t on the quantum scale:
    red saturates above t, green above 7t/6, blue is I - t/6; green and blue
    are floored at t/7. The result is min-max stretched to the full range.
    """
    source = ImageConverters.ensure_rgb(image)
    pixels = np.asarray(source, dtype=np.float64)
    color = pixels[..., :3] * (quantum_range / 255.0)

    q = float(quantum_range)
    t = float(threshold)
    intensity = color @ np.asarray(ToneConstants.LUMA_WEIGHTS)

    red = np.where(intensity > t, q, intensity + q - t)
    green = np.where(intensity > 7.0 * t / 6.0, q, intensity + q - 7.0 * t / 6.0)
    blue = np.where(intensity < t / 6.0, 0.0, intensity - t / 6.0)

    floor = t / 7.0
    green = np.maximum(green, floor)
    blue = np.maximum(blue, floor)

    toned = np.clip(np.stack([red, green, blue], axis=-1), 0.0, q)

    # Stretch contrast; a flat result has nothing to stretch
    if toned.max() > toned.min():
        flat = cv2.normalize(toned.reshape(-1, 1), None, 0.0, q, cv2.NORM_MINMAX)
        toned = flat.reshape(toned.shape)

    out = np.rint(toned * (255.0 / q)).astype(np.uint8)
    if source.mode == "RGBA":
        out = np.dstack([out, pixels[..., 3].astype(np.uint8)])

    return Image.fromarray(out)


def colorize(image: Image.Image, tint: str, opacity: str) -> Image.Image:
    """
    Blend each color channel toward tint by the matching opacity channel.

    out = (p * (100 - o) + tint * o) / 100, with o the opacity color's channel
    expressed as a percentage.
    """
    tint_rgba = ImageConverters.parse_color(tint)
    opacity_rgba = ImageConverters.parse_color(opacity)

    source = ImageConverters.ensure_rgb(image)
    pixels = np.array(source)

    fraction = np.asarray(opacity_rgba[:3], dtype=np.float64) / 255.0
    target = np.asarray(tint_rgba[:3], dtype=np.float64)
    color = pixels[..., :3].astype(np.float64)

    blended = color * (1.0 - fraction) + target * fraction
    pixels[..., :3] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)

    return Image.fromarray(pixels)


def grayscale(image: Image.Image) -> Image.Image:
    """Convert to a single luminance channel, keeping alpha if present."""
    return image.convert("LA" if ImageConverters.has_alpha(image) else "L")


def composite_over(base: Image.Image, overlay: Image.Image, x: int, y: int) -> Image.Image:
    """
    Draw overlay over base at (x, y) with alpha blending.

    Parts of the overlay outside the base canvas are clipped. The result is
    RGBA if the base had alpha, otherwise RGB.
    """
    keep_alpha = ImageConverters.has_alpha(base)

    base_rgba = base.convert("RGBA")
    layer = Image.new("RGBA", base_rgba.size, (0, 0, 0, 0))
    layer.paste(overlay.convert("RGBA"), (x, y))

    result = Image.alpha_composite(base_rgba, layer)
    return result if keep_alpha else result.convert("RGB")
