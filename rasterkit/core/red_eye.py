"""
Red-eye correction.

Walks a rectangular region row by row and rewrites every pixel whose red
channel dominates the mean of green and blue. Each row is committed to the
image as soon as it is processed; a failure leaves earlier rows applied.
"""

import logging

import numpy as np

from rasterkit.core.constants import ErrorMessages, RedEyeConstants
from rasterkit.core.engine import RasterHandle
from rasterkit.core.exceptions import InvalidRegionError, PixelWriteError
from rasterkit.core.utils.decorators import timer

logger = logging.getLogger(__name__)


def red_intensity(red: float, green: float, blue: float) -> float:
    """
    Ratio of red to the mean of green and blue (channels in [0, 1]).

    Division by zero follows IEEE rules: a red pixel with no green or blue
    gives inf, a black pixel gives nan (which never passes the threshold).
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(red) / ((np.float64(green) + np.float64(blue)) / 2.0))


def is_red_eye(red: float, green: float, blue: float) -> bool:
    return red_intensity(red, green, blue) > RedEyeConstants.INTENSITY_THRESHOLD


def auto_color(green: float, blue: float) -> str:
    """Replacement color for a flagged pixel: red pulled down to the green/blue mean."""
    scale = RedEyeConstants.COLOR_SCALE
    return "rgb(%.0f,%.0f,%.0f)" % (scale * (green + blue) / 2.0, scale * green, scale * blue)


def fix_red_eye(
    handle: RasterHandle,
    x: int,
    y: int,
    width: int,
    height: int,
    color: str = RedEyeConstants.AUTO_COLOR,
) -> int:
    """
    Correct red-eye pixels inside a region.

    Args:
        handle: Raster handle to modify in place
        x: Left edge of the region
        y: Top edge of the region
        width: Region width
        height: Region height
        color: Replacement color, or "auto" to derive one from each pixel

    Returns:
        Number of pixels rewritten

    Raises:
        InvalidRegionError: If width or height is not positive
        RegionLoadError: If the region cannot be opened
        PixelWriteError: If a replacement color is rejected
        RowCommitError: If a processed row cannot be written back
    """
    if width <= 0 or height <= 0:
        raise InvalidRegionError(width, height)

    derive = color == RedEyeConstants.AUTO_COLOR
    fixed = 0

    with timer() as t:
        with handle.open_region(x, y, width, height) as region:
            for _ in range(height):
                for pixel in region.next_row():
                    red, green, blue = pixel.red, pixel.green, pixel.blue
                    if not is_red_eye(red, green, blue):
                        continue

                    replacement = auto_color(green, blue) if derive else color
                    if not pixel.set_color(replacement):
                        logger.error(ErrorMessages.RED_EYE_PIXEL_WRITE.format(color=replacement))
                        raise PixelWriteError(replacement)
                    fixed += 1

                region.sync()

    logger.debug(
        f"Red-eye fixed {fixed} pixel(s) in {width}x{height}+{x}+{y} ({t['ms']:.1f}ms)"
    )
    return fixed
