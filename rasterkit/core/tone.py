"""
Tone and color adjustments.

Thin mappings from user-facing percentages onto the engine's
brightness/contrast, sepia, colorize and color-type primitives.
"""

import logging
from typing import Union

from rasterkit.core.constants import ToneConstants
from rasterkit.core.engine import RasterHandle
from rasterkit.core.enums import ColorType

logger = logging.getLogger(__name__)


def set_brightness(handle: RasterHandle, brightness: float) -> None:
    """Adjust brightness (percent, -100 to 100) with contrast unchanged."""
    handle.brightness_contrast(brightness, 0.0)


def set_contrast(handle: RasterHandle, contrast: float) -> None:
    """Adjust contrast (percent, -100 to 100) with brightness unchanged."""
    handle.brightness_contrast(0.0, contrast)


def set_grayscale(handle: RasterHandle) -> None:
    handle.set_color_type(ColorType.GRAYSCALE)


def sepia_threshold(threshold_percent: float, quantum_range: int) -> float:
    """Convert a sepia threshold percentage to the quantum scale."""
    return threshold_percent * quantum_range / ToneConstants.SEPIA_THRESHOLD_SCALE


def set_sepia(handle: RasterHandle, threshold_percent: float, quantum_range: int) -> None:
    """
    Apply a sepia tone.

    Args:
        handle: Raster handle to modify
        threshold_percent: Threshold as a percentage of the quantum range
        quantum_range: Maximum channel value of the engine
    """
    threshold = sepia_threshold(threshold_percent, quantum_range)
    logger.debug(f"Sepia threshold {threshold_percent}% -> {threshold}")
    handle.sepia_tone(threshold, quantum_range)


def white_fade_opacity(fade_percent: Union[str, float]) -> str:
    """Opacity color for a white fade: a gray whose lightness is the fade percentage."""
    return ToneConstants.WHITE_FADE_OPACITY.format(fade=fade_percent)


def set_white_fade(handle: RasterHandle, fade_percent: Union[str, float]) -> None:
    """Fade the image toward white by fade_percent."""
    handle.colorize(ToneConstants.WHITE_FADE_TINT, white_fade_opacity(fade_percent))
