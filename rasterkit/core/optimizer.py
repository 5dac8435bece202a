"""
Format optimizer - per-format encode presets followed by a metadata strip.
"""

import logging
from typing import Dict, Optional

from rasterkit.core.constants import OptimizerConstants
from rasterkit.core.engine import RasterHandle
from rasterkit.schemas import JPEG_PRESET, PNG_PRESET, EncodePreset

logger = logging.getLogger(__name__)

PRESETS: Dict[str, EncodePreset] = {
    OptimizerConstants.JPEG_FORMAT: JPEG_PRESET,
    OptimizerConstants.PNG_FORMAT: PNG_PRESET,
}


def preset_for(format: str) -> Optional[EncodePreset]:
    """Return the preset registered for a format, or None."""
    return PRESETS.get(format.upper()) if format else None


def apply_preset(handle: RasterHandle, preset: EncodePreset) -> None:
    """Push every populated preset field into the handle's encoder settings."""
    if preset.interlace is not None:
        handle.set_interlace(preset.interlace)
    if preset.color_type is not None:
        handle.set_color_type(preset.color_type)
    if preset.format is not None:
        handle.set_format(preset.format)
    if preset.quality is not None:
        handle.set_compression_quality(preset.quality)
    for key, value in preset.options.items():
        handle.set_option(key, value)


def optimize(handle: RasterHandle) -> None:
    """
    Apply the preset for the handle's format, then strip all metadata.

    Formats without a preset are only stripped.
    """
    source_format = handle.format
    preset = preset_for(source_format)

    if preset is None:
        logger.debug(f"No encode preset for format {source_format or '<none>'}")
    elif not preset.is_empty:
        apply_preset(handle, preset)

    handle.strip()
    logger.debug(f"Optimized {source_format} -> {handle.format}")
