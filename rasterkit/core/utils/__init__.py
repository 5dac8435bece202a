"""
Utility modules for core functionality.

Modules:
- decorators: Timing helpers (timer)
- enum_converter: Enum parsing for metadata values and caller tokens
"""

from .decorators import timer
from .enum_converter import parse_direction, parse_enum, parse_orientation

__all__ = [
    "timer",
    "parse_enum",
    "parse_orientation",
    "parse_direction",
]
