"""
rasterkit - single-image raster transforms.

Orientation correction, resize/extent/crop/rotate, tone adjustments,
compositing, red-eye correction and format-specific encode presets on top
of Pillow.
"""

from rasterkit.config import Settings, configure_logging, get_settings
from rasterkit.core.enums import ColorType, InterlaceScheme, InvertDirection, Orientation
from rasterkit.core.exceptions import (
    DecodeError,
    DirectionError,
    ImageError,
    InvalidRegionError,
    OrientationError,
    PixelWriteError,
    PrimitiveError,
    RegionLoadError,
    RowCommitError,
)
from rasterkit.core.image import Image

__version__ = "1.0.0"

__all__ = [
    "Image",
    "Orientation",
    "InvertDirection",
    "ColorType",
    "InterlaceScheme",
    "Settings",
    "get_settings",
    "configure_logging",
    "ImageError",
    "DecodeError",
    "OrientationError",
    "InvalidRegionError",
    "RegionLoadError",
    "PixelWriteError",
    "RowCommitError",
    "DirectionError",
    "PrimitiveError",
]
