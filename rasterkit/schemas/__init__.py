"""
Schemas Package

Pydantic models shared across the transform layer:
- common: Region and Size
- presets: Encode presets used by the format optimizer
"""

from .common import Region, Size
from .presets import JPEG_PRESET, PNG_PRESET, EncodePreset

__all__ = [
    "Region",
    "Size",
    "EncodePreset",
    "JPEG_PRESET",
    "PNG_PRESET",
]
