"""
Tests for tone and color adjustments
"""

from unittest.mock import Mock, patch

import numpy as np
import pytest

from rasterkit.core import tone
from rasterkit.core.engine import RasterHandle
from rasterkit.core.exceptions import PrimitiveError


class TestToneMapping:
    """Test percentage mapping onto engine primitives"""

    def test_brightness_uses_zero_contrast(self):
        """Test brightness passes contrast 0"""
        handle = Mock(spec=RasterHandle)
        tone.set_brightness(handle, 30)
        handle.brightness_contrast.assert_called_once_with(30, 0.0)

    def test_contrast_uses_zero_brightness(self):
        """Test contrast passes brightness 0"""
        handle = Mock(spec=RasterHandle)
        tone.set_contrast(handle, -20)
        handle.brightness_contrast.assert_called_once_with(0.0, -20)

    def test_sepia_threshold_scaled(self):
        """Test the percentage is scaled to the quantum range"""
        assert tone.sepia_threshold(80, 255) == pytest.approx(204.0)
        assert tone.sepia_threshold(100, 65535) == pytest.approx(65535.0)

    def test_sepia_passes_scaled_threshold(self):
        """Test set_sepia hands the scaled threshold to the engine"""
        handle = Mock(spec=RasterHandle)
        tone.set_sepia(handle, 50, 255)
        handle.sepia_tone.assert_called_once_with(127.5, 255)

    def test_white_fade_opacity(self):
        """Test the opacity color is a gray with the fade as lightness"""
        assert tone.white_fade_opacity(30) == "hsl(0, 0%, 30%)"
        assert tone.white_fade_opacity("12.5") == "hsl(0, 0%, 12.5%)"

    def test_white_fade_colorizes_white(self):
        """Test white fade uses a white tint"""
        handle = Mock(spec=RasterHandle)
        tone.set_white_fade(handle, 40)
        handle.colorize.assert_called_once_with("white", "hsl(0, 0%, 40%)")


class TestImageTone:
    """Test tone operations on real pixels"""

    def test_brightness_increases_mean(self, make_image, gradient_image):
        """Test positive brightness lightens the image"""
        img = make_image(gradient_image)
        before = np.array(img.handle.image).mean()

        img.set_brightness(40)

        assert np.array(img.handle.image).mean() > before

    def test_negative_brightness_darkens(self, make_image, gradient_image):
        """Test negative brightness darkens the image"""
        img = make_image(gradient_image)
        before = np.array(img.handle.image).mean()

        img.set_brightness(-40)

        assert np.array(img.handle.image).mean() < before

    def test_contrast_increases_spread(self, make_image, gradient_image):
        """Test positive contrast widens the value spread"""
        img = make_image(gradient_image)
        before = np.array(img.handle.image).astype(float).std()

        img.set_contrast(50)

        assert np.array(img.handle.image).astype(float).std() > before

    def test_zero_adjustment_is_identity(self, make_image, gradient_image):
        """Test brightness 0 leaves pixels unchanged"""
        img = make_image(gradient_image)
        before = np.array(img.handle.image)

        img.set_brightness(0)

        np.testing.assert_array_equal(np.array(img.handle.image), before)

    def test_grayscale(self, image):
        """Test grayscale yields a single channel"""
        image.set_grayscale()

        assert image.handle.image.mode == "L"
        assert image.to_bytes().startswith(b"\x89PNG")

    def test_sepia_warms_image(self, make_image, gradient_image):
        """Test sepia makes red dominate blue"""
        img = make_image(gradient_image)

        img.set_sepia(80)

        pixels = np.array(img.handle.image).astype(float)
        assert pixels[..., 0].mean() > pixels[..., 2].mean()

    def test_sepia_uses_quantum_range(self, image):
        """Test the threshold is scaled by the image's quantum range"""
        with patch.object(image.handle, "sepia_tone") as sepia_tone:
            image.set_sepia(80)
            sepia_tone.assert_called_once_with(pytest.approx(204.0), 255)

    def test_sepia_engine_gets_instance_quantum_range(self, image):
        """Test the engine scales with the same quantum range the image cached"""
        with patch("rasterkit.core.image.get_quantum_range", return_value=(16, 65535)):
            assert image.quantum_range == 65535

        with patch.object(image.handle, "sepia_tone") as sepia_tone:
            image.set_sepia(80)
            sepia_tone.assert_called_once_with(pytest.approx(52428.0), 65535)

    def test_full_white_fade(self, image):
        """Test a 100% fade turns everything white"""
        image.set_white_fade(100)
        assert (np.array(image.handle.image) == 255).all()

    def test_zero_white_fade(self, image):
        """Test a 0% fade leaves pixels unchanged"""
        before = np.array(image.handle.image)
        image.set_white_fade(0)
        np.testing.assert_array_equal(np.array(image.handle.image), before)

    def test_half_white_fade(self, make_image, solid_image):
        """Test a 50% fade moves black halfway to white"""
        img = make_image(solid_image(4, 4, (0, 0, 0)))

        img.set_white_fade(50)

        assert abs(int(np.array(img.handle.image)[0, 0, 0]) - 128) <= 1

    def test_invalid_colorize_color(self, image):
        """Test an unparseable color surfaces as PrimitiveError"""
        with pytest.raises(PrimitiveError, match="colorize"):
            image.handle.colorize("no-such-color", "hsl(0, 0%, 50%)")
