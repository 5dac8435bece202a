"""
Encode presets applied by the format optimizer.

A preset is a declarative bundle of encoder settings; the optimizer pushes
each populated field into the raster handle before stripping metadata.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from rasterkit.core.constants import OptimizerConstants
from rasterkit.core.enums import ColorType, InterlaceScheme


class EncodePreset(BaseModel):
    """Encoder settings for one output format."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    interlace: Optional[InterlaceScheme] = Field(None, description="Interlace scheme")
    color_type: Optional[ColorType] = Field(None, description="Image type hint")
    format: Optional[str] = Field(None, description="Format to re-tag the image as")
    quality: Optional[int] = Field(None, ge=1, le=100, description="Compression quality")
    options: Dict[str, str] = Field(default_factory=dict, description="Encoder hints")

    @property
    def is_empty(self) -> bool:
        """True if applying this preset changes nothing."""
        return (
            self.interlace is None
            and self.color_type is None
            and self.format is None
            and self.quality is None
            and not self.options
        )


JPEG_PRESET = EncodePreset(
    interlace=InterlaceScheme.PLANE,
    color_type=ColorType.OPTIMIZE,
    format=OptimizerConstants.PROGRESSIVE_JPEG_FORMAT,
    quality=OptimizerConstants.JPEG_QUALITY,
    options={
        OptimizerConstants.JPEG_OPTIMIZE_CODING_OPTION: "true",
        OptimizerConstants.JPEG_DCT_METHOD_OPTION: "float",
    },
)

# Nothing tuned for PNG yet; kept so the optimizer dispatch stays explicit.
PNG_PRESET = EncodePreset()
