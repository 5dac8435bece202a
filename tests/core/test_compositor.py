"""
Tests for overlay compositing
"""

import numpy as np
import pytest

from rasterkit.core.enums import CompositeOperator
from rasterkit.core.exceptions import PrimitiveError


class TestAddOverlay:
    """Test Image.add_overlay"""

    @pytest.fixture
    def base(self, make_image, solid_image):
        """White 40x40 base image"""
        return make_image(solid_image(40, 40, (255, 255, 255)))

    def test_opaque_overlay(self, base, make_image, solid_image):
        """Test an opaque overlay replaces the covered pixels"""
        overlay = make_image(solid_image(10, 10, (0, 0, 255)))  # BGR red

        base.add_overlay(overlay, 5, 5)

        assert base.handle.image.getpixel((5, 5)) == (255, 0, 0)
        assert base.handle.image.getpixel((14, 14)) == (255, 0, 0)
        assert base.handle.image.getpixel((4, 4)) == (255, 255, 255)
        assert base.handle.image.getpixel((15, 15)) == (255, 255, 255)

    def test_overlay_is_unchanged(self, base, make_image, solid_image):
        """Test the overlay image is not modified"""
        overlay = make_image(solid_image(10, 10, (0, 255, 0)))
        before = np.array(overlay.handle.image)

        base.add_overlay(overlay, 0, 0)

        np.testing.assert_array_equal(np.array(overlay.handle.image), before)

    def test_semi_transparent_overlay_blends(self, base, make_image):
        """Test alpha is blended over the base"""
        rgba = np.zeros((10, 10, 4), dtype=np.uint8)
        rgba[:, :] = (0, 0, 0, 128)
        overlay = make_image(rgba, bgr=False)

        base.add_overlay(overlay, 0, 0)

        red, green, blue = base.handle.image.getpixel((0, 0))
        assert 120 <= red <= 135
        assert red == green == blue

    def test_base_without_alpha_stays_rgb(self, base, make_image):
        """Test the base keeps its mode"""
        rgba = np.zeros((4, 4, 4), dtype=np.uint8)
        overlay = make_image(rgba, bgr=False)

        base.add_overlay(overlay, 0, 0)

        assert base.handle.image.mode == "RGB"

    @pytest.mark.parametrize("x,y", [(-5, -5), (35, 35), (100, 100)])
    def test_offsets_are_clipped(self, base, make_image, solid_image, x, y):
        """Test out-of-canvas offsets do not fail"""
        overlay = make_image(solid_image(10, 10, (0, 0, 0)))

        base.add_overlay(overlay, x, y)

        assert (base.width, base.height) == (40, 40)

    def test_unsupported_operator(self, base, make_image, solid_image):
        """Test only "over" is accepted by the engine"""
        overlay = make_image(solid_image(4, 4, (0, 0, 0)))

        with pytest.raises(PrimitiveError, match="multiply"):
            base.handle.composite(overlay.handle, "multiply", 0, 0)

    def test_operator_enum(self, base, make_image, solid_image):
        """Test the operator may be passed as enum or string"""
        overlay = make_image(solid_image(4, 4, (0, 0, 0)))

        base.handle.composite(overlay.handle, CompositeOperator.OVER, 0, 0)
        base.handle.composite(overlay.handle, "over", 4, 4)

        assert base.handle.image.getpixel((5, 5)) == (0, 0, 0)
