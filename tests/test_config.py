"""
Tests for settings and logging configuration
"""

import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from rasterkit.config import Settings, configure_logging, get_settings


class TestSettings:
    """Test Settings loading"""

    def test_defaults(self, monkeypatch):
        """Test default values"""
        monkeypatch.delenv("RASTERKIT_SYSTEM__LOG_LEVEL", raising=False)
        settings = Settings()

        assert settings.system.log_level == "INFO"
        assert settings.decode.max_image_pixels == 178956970
        assert settings.encode.default_jpeg_quality == 92

    def test_env_overrides(self, monkeypatch):
        """Test nested environment overrides"""
        monkeypatch.setenv("RASTERKIT_SYSTEM__LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("RASTERKIT_ENCODE__DEFAULT_JPEG_QUALITY", "85")
        monkeypatch.setenv("RASTERKIT_DECODE__MAX_IMAGE_PIXELS", "1000")

        settings = Settings()

        assert settings.system.log_level == "DEBUG"
        assert settings.encode.default_jpeg_quality == 85
        assert settings.decode.max_image_pixels == 1000

    def test_invalid_quality(self, monkeypatch):
        """Test out-of-range values are rejected"""
        monkeypatch.setenv("RASTERKIT_ENCODE__DEFAULT_JPEG_QUALITY", "0")

        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_log_level(self, monkeypatch):
        """Test unknown log levels are rejected"""
        monkeypatch.setenv("RASTERKIT_SYSTEM__LOG_LEVEL", "LOUD")

        with pytest.raises(ValidationError):
            Settings()

    def test_to_dict(self):
        """Test settings dump to a plain dict"""
        data = Settings().to_dict()

        assert set(data) == {"system", "decode", "encode"}
        assert "default_jpeg_quality" in data["encode"]

    def test_get_settings_cached(self):
        """Test get_settings returns one instance until the cache is cleared"""
        first = get_settings()
        assert get_settings() is first

        get_settings.cache_clear()
        assert get_settings() is not first


class TestLogging:
    """Test configure_logging"""

    def test_quiets_third_party_loggers(self):
        """Test Pillow and exifread loggers are turned down"""
        configure_logging(Settings())

        assert logging.getLogger("PIL").level == logging.WARNING
        assert logging.getLogger("exifread").level == logging.ERROR

    def test_debug_forces_debug_level(self, monkeypatch):
        """Test the debug flag overrides the configured log level"""
        monkeypatch.setenv("RASTERKIT_SYSTEM__LOG_LEVEL", "WARNING")
        monkeypatch.setenv("RASTERKIT_SYSTEM__DEBUG", "true")

        with patch("rasterkit.config.logging.basicConfig") as basic_config:
            configure_logging(Settings())

        assert basic_config.call_args.kwargs["level"] == logging.DEBUG

    def test_log_level_used_without_debug(self, monkeypatch):
        """Test the configured level applies when debug is off"""
        monkeypatch.setenv("RASTERKIT_SYSTEM__LOG_LEVEL", "WARNING")
        monkeypatch.delenv("RASTERKIT_SYSTEM__DEBUG", raising=False)

        with patch("rasterkit.config.logging.basicConfig") as basic_config:
            configure_logging(Settings())

        assert basic_config.call_args.kwargs["level"] == logging.WARNING
