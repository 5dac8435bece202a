"""
Exception types raised by rasterkit operations.

Every error derives from ImageError so callers can catch the whole family.
"""

from rasterkit.core.constants import ErrorMessages


class ImageError(Exception):
    """Base class for all image transform errors."""


class DecodeError(ImageError):
    """Input bytes could not be decoded into an image."""


class OrientationError(ImageError):
    """Orientation correction requested without orientation data."""

    def __init__(self, message: str = ErrorMessages.NO_ORIENTATION):
        super().__init__(message)


class InvalidRegionError(ImageError):
    """A red-eye region has zero width or height."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        super().__init__(ErrorMessages.RED_EYE_EMPTY_REGION.format(width=width, height=height))


class RegionLoadError(ImageError):
    """The engine cannot open the requested pixel region."""


class PixelWriteError(ImageError):
    """A single pixel color assignment was rejected."""

    def __init__(self, color: str):
        self.color = color
        super().__init__(ErrorMessages.RED_EYE_PIXEL_WRITE.format(color=color))


class RowCommitError(ImageError):
    """A row of pixel mutations could not be persisted."""


class DirectionError(ImageError):
    """An invert operation was given an unrecognized direction token."""

    def __init__(self, direction: object):
        self.direction = direction
        super().__init__(ErrorMessages.WRONG_DIRECTION.format(direction=direction))


class PrimitiveError(ImageError):
    """Generic failure from an engine primitive."""


__all__ = [
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
