"""
Common data structures shared by the transform layer.
"""

from typing import Any, Dict, Tuple

from pydantic import BaseModel, Field


class Size(BaseModel):
    """Image size in pixels"""

    width: int = Field(..., ge=0, description="Width")
    height: int = Field(..., ge=0, description="Height")

    def as_tuple(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)


class Region(BaseModel):
    """
    Rectangular pixel region.

    Unlike a detection ROI, width and height are not constrained here:
    callers decide how to treat empty regions (red-eye correction rejects
    them with InvalidRegionError).
    """

    x: int = Field(0, description="X coordinate of the left edge")
    y: int = Field(0, description="Y coordinate of the top edge")
    width: int = Field(..., description="Width")
    height: int = Field(..., description="Height")

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Region":
        """Create Region from dictionary."""
        return cls(
            x=int(data.get("x", 0)),
            y=int(data.get("y", 0)),
            width=int(data.get("width", 0)),
            height=int(data.get("height", 0)),
        )

    @property
    def x2(self) -> int:
        """Get right edge coordinate (exclusive)."""
        return self.x + self.width

    @property
    def y2(self) -> int:
        """Get bottom edge coordinate (exclusive)."""
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        """True if the region covers no pixels."""
        return self.width <= 0 or self.height <= 0

    def fits_within(self, width: int, height: int) -> bool:
        """Check if region lies completely inside a width x height image."""
        return self.x >= 0 and self.y >= 0 and self.x2 <= width and self.y2 <= height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}+{self.x}+{self.y}"
