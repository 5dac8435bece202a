"""
Image - single-image transform facade.

Owns one RasterHandle and exposes orientation, geometry, tone, compositing,
red-eye and encoding operations on it. Every operation mutates the image in
place; use duplicate() first when a failed multi-step operation must not
leave partial changes behind.

Example:
    >>> with Image(data) as image:
    ...     image.correct_orientation()
    ...     image.resize(800, 0, preserve_aspect=True)
    ...     image.optimize()
    ...     out = image.to_bytes()
"""

import logging
from typing import Optional, Tuple, Union

from rasterkit.config import Settings, get_settings
from rasterkit.core import compositor, geometry, optimizer, red_eye, tone
from rasterkit.core.constants import (
    EngineConstants,
    ErrorMessages,
    GeometryConstants,
    MetadataConstants,
    RedEyeConstants,
)
from rasterkit.core.engine import RasterHandle, get_quantum_range
from rasterkit.core.enums import InvertDirection, Orientation
from rasterkit.core.exceptions import DirectionError, PrimitiveError
from rasterkit.core.orientation import (
    correct_orientation,
    read_exif_orientation,
    resolve_orientation,
)
from rasterkit.core.utils.decorators import timer
from rasterkit.core.utils.enum_converter import parse_direction
from rasterkit.schemas import Size

logger = logging.getLogger(__name__)


class Image:
    """A decoded raster image with in-place transforms."""

    def __init__(self, data: bytes, settings: Optional[Settings] = None):
        """
        Decode an image and resolve its orientation.

        Args:
            data: Encoded image bytes
            settings: Settings to use (defaults to get_settings())

        Raises:
            DecodeError: If the bytes cannot be decoded
        """
        self._settings = settings or get_settings()
        self._quantum_range: Optional[int] = None

        with timer() as t:
            self._handle: Optional[RasterHandle] = RasterHandle.decode(
                data, max_pixels=self._settings.decode.max_image_pixels
            )
            # Metadata problems never fail construction
            self._orientation = resolve_orientation(
                read_exif_orientation(data), self._handle.orientation
            )

        logger.info(
            f"Loaded {self.format} image {self.width}x{self.height}, "
            f"orientation {self._orientation.name} ({t['ms']:.1f}ms)"
        )

    @classmethod
    def _from_handle(
        cls, handle: RasterHandle, orientation: Orientation, settings: Settings
    ) -> "Image":
        image = cls.__new__(cls)
        image._settings = settings
        image._quantum_range = None
        image._handle = handle
        image._orientation = orientation
        return image

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def handle(self) -> RasterHandle:
        """The owned raster handle."""
        if self._handle is None:
            raise PrimitiveError(ErrorMessages.IMAGE_DESTROYED.format(operation="image"))
        return self._handle

    @property
    def destroyed(self) -> bool:
        return self._handle is None

    def destroy(self) -> None:
        """Release the pixel buffer. Further operations raise PrimitiveError."""
        if self._handle is not None:
            self._handle.destroy()
            self._handle = None
            logger.debug("Image destroyed")

    def duplicate(self) -> "Image":
        """Return an independent copy (pixels, metadata and encoder settings)."""
        return Image._from_handle(self.handle.clone(), self._orientation, self._settings)

    def __enter__(self) -> "Image":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.destroy()

    def __repr__(self) -> str:
        if self._handle is None:
            return "<Image destroyed>"
        return f"<Image {self.format} {self.width}x{self.height} {self._orientation.name}>"

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self.handle.width

    @property
    def height(self) -> int:
        return self.handle.height

    @property
    def size(self) -> Size:
        return Size(width=self.width, height=self.height)

    @property
    def format(self) -> str:
        return self.handle.format

    @property
    def quantum_range(self) -> int:
        """Maximum channel value of the engine (queried once per image)."""
        if self._quantum_range is None:
            _, self._quantum_range = get_quantum_range()
        return self._quantum_range

    def set_format(self, format: str) -> None:
        self.handle.set_format(format)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def get_property(self, key: str) -> str:
        """Return a metadata property, or "" if it is not set."""
        return self.handle.get_property(key)

    def set_property(self, key: str, value: str) -> None:
        self.handle.set_property(key, value)

    def set_profile(self, name: str, data: bytes) -> None:
        """Embed a named binary profile (e.g. "icc" or "exif")."""
        self.handle.apply_profile(name, data)

    def strip(self) -> None:
        """Remove all properties, profiles and EXIF data."""
        self.handle.strip()

    # ------------------------------------------------------------------
    # Orientation
    # ------------------------------------------------------------------

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    def set_orientation(self, orientation: Union[Orientation, int]) -> None:
        """Set the orientation and persist it as the image's orientation tag."""
        orientation = Orientation(orientation)
        self.handle.set_orientation(orientation)
        self.handle.set_property(MetadataConstants.ORIENTATION_PROPERTY, str(int(orientation)))
        self._orientation = orientation

    def correct_orientation(self) -> None:
        """
        Rotate/flip the pixels upright and mark the image TOP_LEFT.

        Raises:
            OrientationError: If the orientation is UNDEFINED (image untouched)
            PrimitiveError: If a primitive fails
        """
        correct_orientation(self.handle, self._orientation)
        self.set_orientation(Orientation.TOP_LEFT)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def normalize_dimensions(self, target_width: int, target_height: int) -> Tuple[int, int]:
        """Fit the current size into (target_width, target_height), keeping the aspect ratio."""
        return geometry.normalize_dimensions(self.width, self.height, target_width, target_height)

    def resize(self, target_width: int, target_height: int, preserve_aspect: bool = True) -> None:
        """
        Resize the image.

        With preserve_aspect the image is fitted into the target box; without
        it, a zero target keeps the current size on that axis. Nothing is done
        when the result equals the current size.
        """
        width, height = geometry.resize_target(
            self.width, self.height, target_width, target_height, preserve_aspect
        )
        if (width, height) == (self.width, self.height):
            logger.debug(f"Resize to {width}x{height} skipped, size unchanged")
            return

        self.handle.resize(
            width, height, GeometryConstants.RESIZE_FILTER, GeometryConstants.RESIZE_BLUR
        )

    def extend(self, width: int, height: int) -> None:
        """Pad or crop the canvas to width x height, keeping the content centered."""
        if geometry.is_extent_noop(self.width, self.height, width, height):
            logger.debug(f"Extent to {width}x{height} skipped, size unchanged")
            return

        x, y = geometry.extent_offset(self.width, self.height, width, height)
        self.handle.extent(width, height, x, y)

    def crop(self, x: int, y: int, width: int, height: int) -> None:
        self.handle.crop(width, height, x, y)

    def rotate(self, angle: float) -> None:
        """Rotate clockwise by angle degrees. Zero and negative angles do nothing."""
        angle = geometry.normalize_angle(angle)
        if angle > 0:
            self.handle.rotate(EngineConstants.TRANSPARENT_FILL, angle)

    def invert(self, direction: Union[str, InvertDirection]) -> None:
        """
        Mirror the image.

        Args:
            direction: "v" for a top-bottom mirror, "h" for left-right

        Raises:
            DirectionError: If the direction is not recognized
        """
        parsed = parse_direction(direction)
        if parsed == InvertDirection.VERTICAL:
            self.handle.flip()
        elif parsed == InvertDirection.HORIZONTAL:
            self.handle.flop()
        else:
            raise DirectionError(direction)

    # ------------------------------------------------------------------
    # Tone
    # ------------------------------------------------------------------

    def set_brightness(self, brightness: float) -> None:
        tone.set_brightness(self.handle, brightness)

    def set_contrast(self, contrast: float) -> None:
        tone.set_contrast(self.handle, contrast)

    def set_grayscale(self) -> None:
        tone.set_grayscale(self.handle)

    def set_sepia(self, threshold: float) -> None:
        """Apply a sepia tone; threshold is a percentage of the quantum range."""
        tone.set_sepia(self.handle, threshold, self.quantum_range)

    def set_white_fade(self, fade: Union[str, float]) -> None:
        """Fade toward white by fade percent."""
        tone.set_white_fade(self.handle, fade)

    # ------------------------------------------------------------------
    # Compositing and red-eye
    # ------------------------------------------------------------------

    def add_overlay(self, overlay: "Image", x: int, y: int) -> None:
        """Draw another image over this one at (x, y)."""
        compositor.add_overlay(self.handle, overlay.handle, x, y)

    def fix_red_eye(
        self, x: int, y: int, width: int, height: int, color: str = RedEyeConstants.AUTO_COLOR
    ) -> int:
        """
        Correct red-eye pixels in a region.

        Returns:
            Number of pixels rewritten
        """
        return red_eye.fix_red_eye(self.handle, x, y, width, height, color)

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def optimize(self) -> None:
        """Apply the encode preset for the current format and strip metadata."""
        optimizer.optimize(self.handle)

    def to_bytes(self) -> bytes:
        """Encode the image in its current format."""
        with timer() as t:
            data = self.handle.encode(self._settings.encode.default_jpeg_quality)
        logger.info(f"Exported {self.format} image: {len(data)} bytes ({t['ms']:.1f}ms)")
        return data

    def set_bytes(self, data: bytes) -> None:
        """
        Replace the pixels and metadata with freshly decoded bytes.

        The orientation value is kept; call set_orientation to change it.

        Raises:
            DecodeError: If the bytes cannot be decoded (image unchanged)
        """
        handle = RasterHandle.decode(data, max_pixels=self._settings.decode.max_image_pixels)
        if self._handle is not None:
            self._handle.destroy()
        self._handle = handle
