"""
Raster handle - owned wrapper around a decoded Pillow image.

The handle is the engine boundary used by the transform layer. It owns the
pixel buffer together with everything ImageMagick keeps next to it: the
format tag, text properties, binary profiles, the EXIF block (and with it the
orientation tag), and encoder settings (interlace, quality, options).
"""

import logging
import numbers
from typing import Callable, Dict, Optional, Tuple

import cv2
from PIL import ExifTags, Image, PngImagePlugin

from rasterkit.core.constants import (
    EngineConstants,
    ErrorMessages,
    MetadataConstants,
    OptimizerConstants,
    SystemConstants,
)
from rasterkit.core.engine import processors
from rasterkit.core.engine.converters import ImageConverters
from rasterkit.core.engine.region import PixelRegion
from rasterkit.core.enums import ColorType, CompositeOperator, InterlaceScheme, Orientation
from rasterkit.core.exceptions import DecodeError, PrimitiveError
from rasterkit.core.utils.enum_converter import parse_enum, parse_orientation
from rasterkit.schemas import Region

logger = logging.getLogger(__name__)

_ORIENTATION_TAG = ExifTags.Base.Orientation
_FORMAT_ALIASES = {"JPG": "JPEG", "TIF": "TIFF"}


def get_quantum_range() -> Tuple[int, int]:
    """
    Query the engine's color depth.

    Returns:
        Tuple of (quantum depth in bits, maximum channel value)
    """
    depth = EngineConstants.QUANTUM_DEPTH
    return depth, (1 << depth) - 1


def _exif_properties(exif: Image.Exif) -> Dict[str, str]:
    """Flatten the base EXIF IFD into "exif:<tag>" text properties."""
    properties = {}
    for tag_id, value in exif.items():
        name = ExifTags.TAGS.get(tag_id)
        if name is None:
            continue
        if isinstance(value, bytes):
            continue
        if isinstance(value, (str, numbers.Real)):
            key = f"{MetadataConstants.EXIF_PROPERTY_PREFIX}{name}".lower()
            properties[key] = str(value).strip("\x00 ")
    return properties


def _text_properties(info: Dict) -> Dict[str, str]:
    """Collect textual decoder info (PNG text chunks, JPEG comment)."""
    properties = {}
    for key, value in info.items():
        if isinstance(value, str):
            properties[key.lower()] = value
    comment = info.get(MetadataConstants.COMMENT_PROPERTY)
    if isinstance(comment, bytes):
        properties[MetadataConstants.COMMENT_PROPERTY] = comment.decode("utf-8", "replace")
    return properties


class RasterHandle:
    """Exclusive owner of one decoded raster image."""

    def __init__(
        self,
        image: Image.Image,
        format: Optional[str] = None,
        exif: Optional[Image.Exif] = None,
        icc_profile: Optional[bytes] = None,
        properties: Optional[Dict[str, str]] = None,
    ):
        self._image: Optional[Image.Image] = image
        self._format = format
        self._exif = exif if exif is not None else Image.Exif()
        self._icc_profile = icc_profile
        self._properties: Dict[str, str] = dict(properties or {})
        self._profiles: Dict[str, bytes] = {}

        # Encoder settings; these are not metadata and survive strip()
        self._interlace = InterlaceScheme.NONE
        self._quality: Optional[int] = None
        self._color_type: Optional[ColorType] = None
        self._options: Dict[str, str] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @classmethod
    def decode(cls, data: bytes, max_pixels: Optional[int] = None) -> "RasterHandle":
        """
        Decode image bytes into a new handle.

        Args:
            data: Encoded image bytes
            max_pixels: Optional pixel-count limit

        Returns:
            New RasterHandle owning the decoded pixels

        Raises:
            DecodeError: If the bytes are empty or cannot be decoded
        """
        if not data:
            raise DecodeError(ErrorMessages.DECODE_EMPTY)

        try:
            image = ImageConverters.decode(data, max_pixels=max_pixels)
        except Exception as e:
            logger.error(f"Failed to decode image: {e}")
            raise DecodeError(ErrorMessages.DECODE_FAILED.format(error=e)) from e

        exif = image.getexif()
        properties = _text_properties(image.info)
        properties.update(_exif_properties(exif))

        handle = cls(
            image,
            format=image.format,
            exif=exif,
            icc_profile=image.info.get("icc_profile"),
            properties=properties,
        )
        logger.debug(
            f"Decoded {handle.format} {handle.width}x{handle.height} ({image.mode}), "
            f"{len(properties)} properties"
        )
        return handle

    def clone(self) -> "RasterHandle":
        """Return an independent deep copy of this handle."""
        exif = Image.Exif()
        if len(self._exif):
            exif.load(self._exif.tobytes())

        copy = RasterHandle(
            self.image.copy(),
            format=self._format,
            exif=exif,
            icc_profile=self._icc_profile,
            properties=self._properties,
        )
        copy._profiles = dict(self._profiles)
        copy._interlace = self._interlace
        copy._quality = self._quality
        copy._color_type = self._color_type
        copy._options = dict(self._options)
        return copy

    def destroy(self) -> None:
        """Release the pixel buffer. Safe to call more than once."""
        if self._image is not None:
            self._image.close()
            self._image = None

    @property
    def is_destroyed(self) -> bool:
        return self._image is None

    @property
    def image(self) -> Image.Image:
        """The live PIL image."""
        if self._image is None:
            raise PrimitiveError(ErrorMessages.IMAGE_DESTROYED.format(operation="access pixels"))
        return self._image

    def ensure_rgb(self) -> None:
        """Convert the buffer to RGB/RGBA in place if it is in another mode."""
        converted = ImageConverters.ensure_rgb(self.image)
        if converted is not self._image:
            logger.debug(f"Converted buffer from {self._image.mode} to {converted.mode}")
            self._image = converted

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def format(self) -> str:
        return self._format or ""

    def set_format(self, format: str) -> None:
        """
        Re-tag the image with an output format.

        Raises:
            PrimitiveError: If the engine cannot write that format
        """
        name = format.strip().upper()
        name = _FORMAT_ALIASES.get(name, name)

        Image.init()
        if name != OptimizerConstants.PROGRESSIVE_JPEG_FORMAT and name not in Image.SAVE:
            raise PrimitiveError(ErrorMessages.INVALID_FORMAT.format(format=format))
        self._format = name

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def get_property(self, key: str) -> str:
        """Return a property value, or "" if it is not set (keys are case-insensitive)."""
        return self._properties.get(key.lower(), "")

    def set_property(self, key: str, value: str) -> None:
        self._properties[key.lower()] = str(value)

    @property
    def properties(self) -> Dict[str, str]:
        return dict(self._properties)

    def apply_profile(self, name: str, data: bytes) -> None:
        """
        Embed a named binary profile.

        "icc"/"icm" set the color profile and "exif" replaces the EXIF block;
        other names are kept as raw profiles. Empty data removes the profile.

        Raises:
            PrimitiveError: If an EXIF profile cannot be parsed
        """
        key = name.lower()

        if key in MetadataConstants.ICC_PROFILE_NAMES:
            self._icc_profile = data or None
        elif key == MetadataConstants.EXIF_PROFILE_NAME:
            exif = Image.Exif()
            if data:
                try:
                    exif.load(data)
                except Exception as e:
                    logger.error(f"Failed to load EXIF profile: {e}")
                    raise PrimitiveError(
                        ErrorMessages.PRIMITIVE_FAILED.format(operation="apply profile", error=e)
                    ) from e
            self._exif = exif
            self._properties = {
                k: v
                for k, v in self._properties.items()
                if not k.startswith(MetadataConstants.EXIF_PROPERTY_PREFIX)
            }
            self._properties.update(_exif_properties(exif))
        elif data:
            self._profiles[key] = bytes(data)
        else:
            self._profiles.pop(key, None)

    def get_profile(self, name: str) -> Optional[bytes]:
        """Return an embedded profile, or None."""
        key = name.lower()
        if key in MetadataConstants.ICC_PROFILE_NAMES:
            return self._icc_profile
        if key == MetadataConstants.EXIF_PROFILE_NAME:
            return self._exif.tobytes() if len(self._exif) else None
        return self._profiles.get(key)

    @property
    def orientation(self) -> Orientation:
        """Orientation tag stored with the pixels (UNDEFINED if absent)."""
        return parse_orientation(self._exif.get(_ORIENTATION_TAG)) or Orientation.UNDEFINED

    def set_orientation(self, orientation: Orientation) -> None:
        """Persist the orientation tag in the EXIF block."""
        if orientation == Orientation.UNDEFINED:
            self._exif.pop(_ORIENTATION_TAG, None)
        else:
            self._exif[_ORIENTATION_TAG] = int(orientation)

    def strip(self) -> None:
        """Remove all properties, profiles and the EXIF block."""
        self._properties.clear()
        self._profiles.clear()
        self._icc_profile = None
        self._exif = Image.Exif()

    # ------------------------------------------------------------------
    # Encoder settings
    # ------------------------------------------------------------------

    @property
    def interlace(self) -> InterlaceScheme:
        return self._interlace

    def set_interlace(self, scheme: InterlaceScheme) -> None:
        self._interlace = InterlaceScheme(scheme)

    @property
    def compression_quality(self) -> Optional[int]:
        return self._quality

    def set_compression_quality(self, quality: int) -> None:
        if not 1 <= quality <= 100:
            raise PrimitiveError(
                ErrorMessages.PRIMITIVE_FAILED.format(
                    operation="set compression quality", error=f"{quality} not in [1, 100]"
                )
            )
        self._quality = quality

    @property
    def color_type(self) -> Optional[ColorType]:
        return self._color_type

    def get_option(self, key: str) -> str:
        return self._options.get(key.lower(), "")

    def set_option(self, key: str, value: str) -> None:
        self._options[key.lower()] = str(value)

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def _is_jpeg(self) -> bool:
        return self.format in (
            OptimizerConstants.JPEG_FORMAT,
            OptimizerConstants.PROGRESSIVE_JPEG_FORMAT,
        )

    def _encoder_params(self, default_quality: int) -> Tuple[str, Dict]:
        """Translate handle state into (Pillow format, Image.save params)."""
        params: Dict = {}
        save_format = OptimizerConstants.JPEG_FORMAT if self._is_jpeg() else self.format

        if self.format in EngineConstants.EXIF_FORMATS and len(self._exif):
            params["exif"] = self._exif.tobytes()
        if self._icc_profile:
            params["icc_profile"] = self._icc_profile

        if self._is_jpeg():
            params["quality"] = self._quality or default_quality
            params["progressive"] = (
                self.format == OptimizerConstants.PROGRESSIVE_JPEG_FORMAT
                or self._interlace == InterlaceScheme.PLANE
            )
            params["optimize"] = (
                self.get_option(OptimizerConstants.JPEG_OPTIMIZE_CODING_OPTION) == "true"
            )
            comment = self.get_property(MetadataConstants.COMMENT_PROPERTY)
            if comment:
                params["comment"] = comment
        elif save_format == OptimizerConstants.PNG_FORMAT:
            text = PngImagePlugin.PngInfo()
            for key, value in self._properties.items():
                if not key.startswith(MetadataConstants.EXIF_PROPERTY_PREFIX):
                    text.add_text(key, value)
            params["pnginfo"] = text
            if self._quality is not None:
                # ImageMagick maps the tens digit of quality to the zlib level
                params["compress_level"] = min(self._quality // 10, 9)
        elif self._quality is not None:
            params["quality"] = self._quality

        return save_format, params

    def encode(self, default_quality: int = SystemConstants.DEFAULT_JPEG_QUALITY) -> bytes:
        """
        Encode the image in its current format.

        Args:
            default_quality: JPEG quality when none was set

        Returns:
            Encoded bytes

        Raises:
            PrimitiveError: If the format is unset or encoding fails
        """
        if not self.format:
            raise PrimitiveError(
                ErrorMessages.ENCODE_FAILED.format(format="<none>", error="no format set")
            )

        save_format, params = self._encoder_params(default_quality)
        image = self.image
        if save_format == OptimizerConstants.JPEG_FORMAT and image.mode not in EngineConstants.JPEG_MODES:
            image = image.convert("RGB")

        try:
            data = ImageConverters.encode(image, save_format, **params)
        except (OSError, ValueError, KeyError) as e:
            logger.error(f"Failed to encode image as {self.format}: {e}")
            raise PrimitiveError(
                ErrorMessages.ENCODE_FAILED.format(format=self.format, error=e)
            ) from e

        logger.debug(f"Encoded {self.format} {self.width}x{self.height}: {len(data)} bytes")
        return data

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def _apply(self, operation: str, func: Callable[..., Image.Image], *args) -> None:
        """Run a processor on the buffer and replace it with the result."""
        try:
            result = func(self.image, *args)
        except (ValueError, OSError, cv2.error) as e:
            logger.error(f"{operation} failed: {e}")
            raise PrimitiveError(
                ErrorMessages.PRIMITIVE_FAILED.format(operation=operation, error=e)
            ) from e
        self._image = result

    def resize(self, width: int, height: int, filter: str, blur: float) -> None:
        self._apply("resize", processors.resize, width, height, filter, blur)

    def crop(self, width: int, height: int, x: int, y: int) -> None:
        self._apply("crop", processors.crop, width, height, x, y)

    def extent(self, width: int, height: int, x: int, y: int) -> None:
        self._apply(
            "extent", processors.extent, width, height, x, y, EngineConstants.OPAQUE_BACKGROUND
        )

    def rotate(self, fill: str, angle: float) -> None:
        self._apply("rotate", processors.rotate, angle, fill)

    def flip(self) -> None:
        self._apply("flip", processors.flip)

    def flop(self) -> None:
        self._apply("flop", processors.flop)

    def brightness_contrast(self, brightness: float, contrast: float) -> None:
        self._apply("brightness/contrast", processors.brightness_contrast, brightness, contrast)

    def set_color_type(self, color_type: ColorType) -> None:
        """Apply an image type; GRAYSCALE converts pixels, OPTIMIZE is an encoder hint."""
        color_type = ColorType(color_type)
        if color_type == ColorType.GRAYSCALE:
            self._apply("set color type", processors.grayscale)
        self._color_type = color_type

    def sepia_tone(self, threshold: float, quantum_range: int) -> None:
        self._apply("sepia tone", processors.sepia_tone, threshold, quantum_range)

    def colorize(self, tint: str, opacity: str) -> None:
        self._apply("colorize", processors.colorize, tint, opacity)

    def composite(
        self, overlay: "RasterHandle", operator: CompositeOperator, x: int, y: int
    ) -> None:
        """Composite another handle's pixels onto this one."""
        if parse_enum(operator, CompositeOperator) != CompositeOperator.OVER:
            raise PrimitiveError(
                ErrorMessages.PRIMITIVE_FAILED.format(
                    operation="composite", error=f"unsupported operator {operator}"
                )
            )
        self._apply("composite", processors.composite_over, overlay.image, x, y)

    def open_region(self, x: int, y: int, width: int, height: int) -> PixelRegion:
        """Open a row iterator over a rectangle of the buffer."""
        return PixelRegion(self, Region(x=x, y=y, width=width, height=height))
