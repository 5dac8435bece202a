"""
Orientation resolution and correction.

Resolution is a two-step fallback: the EXIF orientation tag parsed from the
raw input bytes wins when present, otherwise the orientation the engine
stored with the decoded pixels is used. Correction maps each of the eight
EXIF orientations to a fixed sequence of flip/flop/rotate primitives.
"""

import io
import logging
from typing import Dict, Optional, Tuple

import exifread

from rasterkit.core.constants import EngineConstants, MetadataConstants
from rasterkit.core.engine import RasterHandle
from rasterkit.core.enums import Orientation
from rasterkit.core.exceptions import OrientationError
from rasterkit.core.utils.enum_converter import parse_orientation

logger = logging.getLogger(__name__)

# (primitive, angle) steps; angle is only used by "rotate" (clockwise degrees)
CorrectionStep = Tuple[str, Optional[int]]

CORRECTION_STEPS: Dict[Orientation, Tuple[CorrectionStep, ...]] = {
    Orientation.TOP_LEFT: (),
    Orientation.TOP_RIGHT: (("flop", None),),
    Orientation.BOTTOM_RIGHT: (("rotate", 180),),
    Orientation.BOTTOM_LEFT: (("flip", None),),
    Orientation.LEFT_TOP: (("flip", None), ("rotate", 90)),
    Orientation.RIGHT_TOP: (("rotate", 90),),
    Orientation.RIGHT_BOTTOM: (("flop", None), ("rotate", 90)),
    Orientation.LEFT_BOTTOM: (("rotate", -90),),
}


def read_exif_orientation(raw: bytes) -> Optional[int]:
    """
    Read the EXIF orientation tag from encoded image bytes.

    Args:
        raw: Encoded image bytes

    Returns:
        The tag value as an integer, or None if there is no EXIF block, the
        block is malformed or it has no orientation tag
    """
    try:
        tags = exifread.process_file(io.BytesIO(raw), details=False)
    except Exception as e:
        logger.debug(f"EXIF parse failed, falling back to engine orientation: {e}")
        return None

    tag = tags.get(MetadataConstants.EXIFREAD_ORIENTATION_TAG) if tags else None
    if tag is None:
        return None

    values = getattr(tag, "values", None)
    try:
        if values:
            return int(values[0])
        return int(str(tag))
    except (TypeError, ValueError):
        logger.debug(f"Unparseable EXIF orientation value: {tag}")
        return None


def resolve_orientation(exif_value: Optional[int], engine_value: Optional[int]) -> Orientation:
    """
    Pick the authoritative orientation.

    Args:
        exif_value: Value parsed from the raw EXIF block (None if unavailable)
        engine_value: Orientation tag stored with the decoded pixels

    Returns:
        The EXIF orientation if it is a known value, else the engine's,
        else UNDEFINED
    """
    orientation = parse_orientation(exif_value)
    if orientation is not None:
        return orientation

    if exif_value is not None:
        logger.debug(f"Ignoring unknown EXIF orientation {exif_value}")
    return parse_orientation(engine_value) or Orientation.UNDEFINED


def correct_orientation(handle: RasterHandle, orientation: Orientation) -> None:
    """
    Transform the pixels so that they display as TOP_LEFT.

    Args:
        handle: Raster handle to transform in place
        orientation: Current orientation of the pixels

    Raises:
        OrientationError: If the orientation is UNDEFINED (pixels untouched)
        PrimitiveError: If a flip/flop/rotate primitive fails
    """
    steps = CORRECTION_STEPS.get(orientation)
    if steps is None:
        raise OrientationError()

    for primitive, angle in steps:
        if primitive == "rotate":
            handle.rotate(EngineConstants.TRANSPARENT_FILL, angle)
        else:
            getattr(handle, primitive)()

    logger.debug(f"Corrected orientation {orientation.name} with {len(steps)} step(s)")
