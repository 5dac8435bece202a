"""
Pixel region iterator.

A PixelRegion is a cursor over the rows of a rectangle of a raster handle's
buffer. Rows are handed out in order as lists of PixelAccessor objects;
changes made through the accessors stay in the region's private copy until
sync() commits the current row back into the handle.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

import numpy as np
from PIL import Image

from rasterkit.core.constants import EngineConstants, ErrorMessages
from rasterkit.core.engine.converters import ImageConverters
from rasterkit.core.exceptions import RegionLoadError, RowCommitError
from rasterkit.schemas import Region

if TYPE_CHECKING:
    from rasterkit.core.engine.handle import RasterHandle

logger = logging.getLogger(__name__)

_CHANNEL_MAX = float((1 << EngineConstants.QUANTUM_DEPTH) - 1)


class PixelAccessor:
    """Read/write view of one pixel inside a region row."""

    __slots__ = ("_row", "_index")

    def __init__(self, row: np.ndarray, index: int):
        self._row = row
        self._index = index

    @property
    def red(self) -> float:
        """Red channel normalized to [0, 1]."""
        return float(self._row[self._index, 0]) / _CHANNEL_MAX

    @property
    def green(self) -> float:
        """Green channel normalized to [0, 1]."""
        return float(self._row[self._index, 1]) / _CHANNEL_MAX

    @property
    def blue(self) -> float:
        """Blue channel normalized to [0, 1]."""
        return float(self._row[self._index, 2]) / _CHANNEL_MAX

    @property
    def alpha(self) -> float:
        """Alpha normalized to [0, 1] (1.0 for opaque images)."""
        if self._row.shape[1] < 4:
            return 1.0
        return float(self._row[self._index, 3]) / _CHANNEL_MAX

    def set_color(self, color: str) -> bool:
        """
        Set the pixel to a color string.

        Returns:
            True on success, False if the color could not be parsed
        """
        try:
            red, green, blue, alpha = ImageConverters.parse_color(color)
        except ValueError:
            return False

        self._row[self._index, :3] = (red, green, blue)
        if self._row.shape[1] == 4:
            self._row[self._index, 3] = alpha
        return True


class PixelRegion:
    """
    Row iterator over a rectangular region of a raster handle.

    Use as a context manager so the region is released on every exit path:

        with handle.open_region(x, y, width, height) as region:
            for _ in range(height):
                row = region.next_row()
                ...
                region.sync()
    """

    def __init__(self, handle: "RasterHandle", region: Region):
        """
        Open a region over the handle's buffer.

        Args:
            handle: Raster handle owning the pixels
            region: Rectangle to iterate

        Raises:
            RegionLoadError: If the handle is gone or the region is empty or
                not fully inside the image
        """
        if handle.is_destroyed:
            raise RegionLoadError(ErrorMessages.RED_EYE_REGION_LOAD.format(region=region))

        if region.is_empty or not region.fits_within(handle.width, handle.height):
            logger.warning(
                f"Region {region} out of bounds for image {handle.width}x{handle.height}"
            )
            raise RegionLoadError(ErrorMessages.RED_EYE_REGION_LOAD.format(region=region))

        self._handle = handle
        self._region = region
        # Working copy is RGB(A); the handle is only converted by a real write
        self._pixels: Optional[np.ndarray] = np.array(
            ImageConverters.ensure_rgb(
                handle.image.crop((region.x, region.y, region.x2, region.y2))
            )
        )
        self._committed: Optional[np.ndarray] = self._pixels.copy()
        self._next = 0
        self._current: Optional[int] = None

    @property
    def region(self) -> Region:
        return self._region

    @property
    def closed(self) -> bool:
        return self._pixels is None

    def next_row(self) -> List[PixelAccessor]:
        """
        Advance to the next row and return its pixels.

        Returns:
            Accessors for the row, or an empty list once all rows are consumed
        """
        if self._pixels is None or self._next >= self._region.height:
            return []

        self._current = self._next
        self._next += 1

        row = self._pixels[self._current]
        return [PixelAccessor(row, index) for index in range(self._region.width)]

    def sync(self) -> None:
        """
        Commit the current row into the handle's buffer.

        A row with no changes since its last commit is not written, so the
        handle keeps its mode until some pixel actually changes.

        Raises:
            RowCommitError: If there is no row to commit or the write fails
        """
        if self._pixels is None or self._current is None:
            raise RowCommitError(
                ErrorMessages.RED_EYE_ROW_COMMIT.format(row=self._next, error="no active row")
            )

        row_index = self._current
        row = self._pixels[row_index : row_index + 1]
        if np.array_equal(row, self._committed[row_index : row_index + 1]):
            return

        try:
            self._handle.ensure_rgb()
            strip = Image.fromarray(row)
            self._handle.image.paste(strip, (self._region.x, self._region.y + row_index))
        except (ValueError, OSError) as e:
            logger.error(f"Failed to commit row {row_index} of region {self._region}: {e}")
            raise RowCommitError(
                ErrorMessages.RED_EYE_ROW_COMMIT.format(row=row_index, error=e)
            ) from e

        self._committed[row_index] = self._pixels[row_index]

    def close(self) -> None:
        """Release the region's pixel copy. Safe to call more than once."""
        self._pixels = None
        self._committed = None
        self._current = None

    def __enter__(self) -> "PixelRegion":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
