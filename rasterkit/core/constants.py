"""
Constants and configuration values for rasterkit.
Centralizes all magic numbers used by the transform layer.
"""


# Engine Constants
class EngineConstants:
    """Constants describing the pixel engine capabilities."""

    # Channel depth of the Pillow-backed engine (8 bits per channel)
    QUANTUM_DEPTH = 8

    # Fill used for corners exposed by rotation
    TRANSPARENT_FILL = "none"

    # Canvas background for extent when the image has no alpha
    OPAQUE_BACKGROUND = "white"

    # Formats that can carry an EXIF block on export
    EXIF_FORMATS = ("JPEG", "PJPEG", "PNG", "WEBP", "TIFF")

    # Pillow save modes accepted by JPEG
    JPEG_MODES = ("L", "RGB", "CMYK")


# Geometry Constants
class GeometryConstants:
    """Constants related to resize, extent and rotation."""

    # Rounding offset used when scaling dimensions (round half up)
    ROUNDING_OFFSET = 0.5

    # Angles above this are folded back into [0, 360)
    MAX_ANGLE = 359
    FULL_TURN = 360

    # Resize filter and blur factor
    RESIZE_FILTER = "lanczos"
    RESIZE_BLUR = 1.0


# Red-eye Constants
class RedEyeConstants:
    """Constants for the red-eye heuristic."""

    # Pixels whose red / mean(green, blue) exceeds this are corrected
    INTENSITY_THRESHOLD = 1.5

    # Color spec requesting a per-pixel derived replacement
    AUTO_COLOR = "auto"

    # 8-bit scale used when formatting derived colors
    COLOR_SCALE = 255


# Tone Constants
class ToneConstants:
    """Constants for tone and color adjustments."""

    # Brightness/contrast inputs are percentages in [-100, 100]
    PERCENT_SCALE = 100.0

    # Sepia thresholds are percentages of the quantum range
    SEPIA_THRESHOLD_SCALE = 100.0

    # White fade tint and opacity descriptor
    WHITE_FADE_TINT = "white"
    WHITE_FADE_OPACITY = "hsl(0, 0%, {fade}%)"

    # Rec.601 luma weights (R, G, B)
    LUMA_WEIGHTS = (0.299, 0.587, 0.114)


# Optimizer Constants
class OptimizerConstants:
    """Constants for format-specific encode presets."""

    JPEG_FORMAT = "JPEG"
    PROGRESSIVE_JPEG_FORMAT = "PJPEG"
    PNG_FORMAT = "PNG"

    JPEG_QUALITY = 60
    JPEG_OPTIMIZE_CODING_OPTION = "jpeg:optimize-coding"
    JPEG_DCT_METHOD_OPTION = "jpeg:dct-method"


# Metadata Constants
class MetadataConstants:
    """Property and profile keys."""

    ORIENTATION_PROPERTY = "exif:orientation"
    EXIF_PROPERTY_PREFIX = "exif:"
    COMMENT_PROPERTY = "comment"

    ICC_PROFILE_NAMES = ("icc", "icm")
    EXIF_PROFILE_NAME = "exif"

    # Tag name used by exifread for the orientation entry
    EXIFREAD_ORIENTATION_TAG = "Image Orientation"


# System Constants
class SystemConstants:
    """Constants for logging and runtime defaults."""

    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Pillow's own decompression-bomb limit
    MAX_IMAGE_PIXELS_DEFAULT = 178956970

    # ImageMagick's default JPEG quality when none is requested
    DEFAULT_JPEG_QUALITY = 92


# Error Messages
class ErrorMessages:
    """Standard error messages."""

    DECODE_FAILED = "Failed to decode image data: {error}"
    DECODE_EMPTY = "Failed to decode image data: no bytes given"
    ENCODE_FAILED = "Failed to encode image as {format}: {error}"

    NO_ORIENTATION = "no orientation data found in file"

    RED_EYE_EMPTY_REGION = "region cannot be null for red eye reduction: {width}x{height}"
    RED_EYE_REGION_LOAD = "zone cannot be loaded for red eye modification: {region}"
    RED_EYE_PIXEL_WRITE = "red eye: could not set pixel color to {color}"
    RED_EYE_ROW_COMMIT = "red eye: could not commit row {row}: {error}"

    WRONG_DIRECTION = "wrong direction: {direction}"

    PRIMITIVE_FAILED = "{operation} failed: {error}"
    INVALID_SIZE = "{operation} requires a positive size, got {width}x{height}"
    INVALID_FORMAT = "set format: unsupported format {format}"
    IMAGE_DESTROYED = "{operation}: image has been destroyed"
