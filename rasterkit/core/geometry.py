"""
Geometry calculations for resize, extent and rotate.

Pure functions over integer dimensions; the Image facade decides whether to
call the engine based on their results.
"""

import math
from typing import Tuple

from rasterkit.core.constants import GeometryConstants


def normalize_dimensions(
    current_width: int, current_height: int, target_width: int, target_height: int
) -> Tuple[int, int]:
    """
    Fit the current size into a target box, keeping the aspect ratio.

    The axis needing the larger scale factor wins. A zero target on one axis
    is ignored, so the image scales purely by the other.

    Args:
        current_width: Current image width
        current_height: Current image height
        target_width: Box width (0 to ignore)
        target_height: Box height (0 to ignore)

    Returns:
        (width, height) rounded half up; the current size when both targets are 0
    """
    ratio_width = current_width / target_width if target_width != 0 else 0.0
    ratio_height = current_height / target_height if target_height != 0 else 0.0
    ratio = max(ratio_width, ratio_height)

    if ratio == 0:
        return current_width, current_height

    offset = GeometryConstants.ROUNDING_OFFSET
    return int(current_width / ratio + offset), int(current_height / ratio + offset)


def resize_target(
    current_width: int,
    current_height: int,
    target_width: int,
    target_height: int,
    preserve_aspect: bool,
) -> Tuple[int, int]:
    """Final resize size: aspect fit, or zero targets replaced by the current size."""
    if preserve_aspect:
        return normalize_dimensions(current_width, current_height, target_width, target_height)

    return (target_width or current_width, target_height or current_height)


def extent_offset(
    current_width: int, current_height: int, width: int, height: int
) -> Tuple[int, int]:
    """
    Offset of the new canvas relative to the current image for a centered extent.

    Negative values pad, positive values crop.
    """
    return current_width // 2 - width // 2, current_height // 2 - height // 2


def is_extent_noop(current_width: int, current_height: int, width: int, height: int) -> bool:
    """Check whether extending to (width, height) leaves the image unchanged."""
    if width == 0 and height == current_height:
        return True
    if height == 0 and width == current_width:
        return True
    return width == current_width and height == current_height


def normalize_angle(angle: float) -> float:
    """Fold angles above 359 into [0, 360). Negative angles are returned unchanged."""
    if angle > GeometryConstants.MAX_ANGLE:
        angle = math.fmod(angle, GeometryConstants.FULL_TURN)
    return angle
