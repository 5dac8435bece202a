"""
Enum conversion utilities.

Provides standardized methods for turning raw metadata values and caller
tokens into enums, with optional fallback defaults.
"""

from typing import Any, Optional, Type, TypeVar

from rasterkit.core.enums import InvertDirection, Orientation

T = TypeVar("T")


def parse_enum(
    value: Any, enum_class: Type[T], default: Optional[T] = None, as_int: bool = False
) -> Optional[T]:
    """
    Parse value to enum with fallback to default.

    Args:
        value: Value to parse (string, int, enum, or None)
        enum_class: Enum class to parse to
        default: Value returned if parsing fails
        as_int: Coerce the value through int() first (for integer-valued
            enums fed from text metadata such as "6")

    Returns:
        Parsed enum value or default

    Example:
        >>> parse_enum("6", Orientation, as_int=True)
        <Orientation.RIGHT_TOP: 6>
    """
    # Already an enum instance
    if isinstance(value, enum_class):
        return value

    if value is None:
        return default

    try:
        if as_int:
            value = int(str(value).strip())
        return enum_class(value)
    except (TypeError, ValueError):
        return default


def parse_orientation(value: Any) -> Optional[Orientation]:
    """Parse an EXIF orientation value, or return None if it is unknown."""
    return parse_enum(value, Orientation, as_int=True)


def parse_direction(value: Any) -> Optional[InvertDirection]:
    """Parse an invert direction token ("v" or "h"), or return None."""
    return parse_enum(value, InvertDirection)
