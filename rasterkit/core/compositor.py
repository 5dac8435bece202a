"""
Overlay compositing.
"""

import logging

from rasterkit.core.engine import RasterHandle
from rasterkit.core.enums import CompositeOperator

logger = logging.getLogger(__name__)


def add_overlay(base: RasterHandle, overlay: RasterHandle, x: int, y: int) -> None:
    """
    Draw overlay on top of base at (x, y) with "over" alpha blending.

    Offsets are not validated; parts of the overlay outside the base are
    clipped by the engine.

    Args:
        base: Handle receiving the overlay (modified in place)
        overlay: Handle providing the overlay pixels (unchanged)
        x: Left offset in base coordinates
        y: Top offset in base coordinates
    """
    logger.debug(f"Compositing {overlay.width}x{overlay.height} overlay at ({x}, {y})")
    base.composite(overlay, CompositeOperator.OVER, x, y)
