"""
Pixel engine adapter - Pillow-backed raster handle.

This package provides the engine boundary used by the transform layer:
- converters: Byte/array/color conversions (ImageConverters)
- processors: Geometric and tone primitives over PIL Images
- region: Row iterator over a pixel rectangle (PixelRegion)
- handle: Owned image handle with metadata and encoder state (RasterHandle)
"""

from rasterkit.core.engine.converters import ImageConverters
from rasterkit.core.engine.handle import RasterHandle, get_quantum_range
from rasterkit.core.engine.region import PixelAccessor, PixelRegion

__all__ = [
    "ImageConverters",
    "RasterHandle",
    "PixelRegion",
    "PixelAccessor",
    "get_quantum_range",
]
