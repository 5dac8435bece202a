"""
Enumerations shared across the transform layer.
"""

from enum import Enum, IntEnum


class Orientation(IntEnum):
    """Image orientation, valued as the EXIF 0x0112 tag."""

    UNDEFINED = 0
    TOP_LEFT = 1
    TOP_RIGHT = 2
    BOTTOM_RIGHT = 3
    BOTTOM_LEFT = 4
    LEFT_TOP = 5
    RIGHT_TOP = 6
    RIGHT_BOTTOM = 7
    LEFT_BOTTOM = 8


class InvertDirection(str, Enum):
    """Mirror directions accepted by ``Image.invert``."""

    VERTICAL = "v"  # top-bottom mirror
    HORIZONTAL = "h"  # left-right mirror


class ColorType(str, Enum):
    """Image type requests understood by the engine."""

    GRAYSCALE = "grayscale"
    OPTIMIZE = "optimize"


class InterlaceScheme(str, Enum):
    """Interlace schemes for encoding."""

    NONE = "none"
    PLANE = "plane"  # progressive JPEG


class CompositeOperator(str, Enum):
    """Compositing operators supported by the engine."""

    OVER = "over"
