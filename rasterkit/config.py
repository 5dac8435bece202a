"""
Configuration for rasterkit.

Settings are read from the environment with the RASTERKIT_ prefix; nested
sections use a double underscore, e.g. RASTERKIT_SYSTEM__LOG_LEVEL=DEBUG or
RASTERKIT_ENCODE__DEFAULT_JPEG_QUALITY=85.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rasterkit.core.constants import SystemConstants


class SystemSettings(BaseModel):
    """Logging and runtime options"""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = (
        SystemConstants.LOG_LEVEL_DEFAULT
    )
    log_format: str = SystemConstants.LOG_FORMAT
    debug: bool = Field(False, description="Force DEBUG logging regardless of log_level")


class DecodeSettings(BaseModel):
    """Decoder limits"""

    max_image_pixels: Optional[int] = Field(
        SystemConstants.MAX_IMAGE_PIXELS_DEFAULT,
        gt=0,
        description="Reject inputs with more pixels than this (None disables the check)",
    )


class EncodeSettings(BaseModel):
    """Encoder defaults"""

    default_jpeg_quality: int = Field(
        SystemConstants.DEFAULT_JPEG_QUALITY,
        ge=1,
        le=100,
        description="JPEG quality used when no compression quality was set",
    )


class Settings(BaseSettings):
    """Top-level settings"""

    model_config = SettingsConfigDict(
        env_prefix="RASTERKIT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    system: SystemSettings = Field(default_factory=SystemSettings)
    decode: DecodeSettings = Field(default_factory=DecodeSettings)
    encode: EncodeSettings = Field(default_factory=EncodeSettings)

    def to_dict(self) -> Dict[str, Any]:
        """Dump settings as a plain dictionary."""
        return self.model_dump()


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings (cached; call cache_clear() to reload)."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure root logging from settings.

    The library never calls this itself; applications embedding rasterkit
    call it once at startup.

    Args:
        settings: Settings to use (defaults to get_settings())
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.system.debug else getattr(logging, settings.system.log_level)
    logging.basicConfig(
        level=level,
        format=settings.system.log_format,
    )
    # Pillow logs every chunk it parses at DEBUG
    logging.getLogger("PIL").setLevel(logging.WARNING)
    # exifread is chatty about unrecognized formats
    logging.getLogger("exifread").setLevel(logging.ERROR)
