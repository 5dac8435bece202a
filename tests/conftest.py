"""
Pytest configuration and fixtures for rasterkit tests
"""

import io

import cv2
import numpy as np
import pytest
from PIL import Image as PILImage

from rasterkit.config import Settings, get_settings
from rasterkit.core.image import Image


def encode_array(array, format="PNG", orientation=None, bgr=True):
    """Encode a numpy image (BGR/BGRA by default) with Pillow"""
    if bgr and array.ndim == 3 and array.shape[2] == 3:
        array = cv2.cvtColor(array, cv2.COLOR_BGR2RGB)
    elif bgr and array.ndim == 3 and array.shape[2] == 4:
        array = cv2.cvtColor(array, cv2.COLOR_BGRA2RGBA)

    params = {}
    if orientation is not None:
        exif = PILImage.Exif()
        exif[0x0112] = orientation
        params["exif"] = exif.tobytes()

    buffer = io.BytesIO()
    PILImage.fromarray(np.ascontiguousarray(array)).save(buffer, format=format, **params)
    return buffer.getvalue()


def solid(width, height, rgb):
    """Create a solid RGB image array"""
    array = np.zeros((height, width, 3), dtype=np.uint8)
    array[:, :] = rgb
    return array


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make sure every test sees freshly loaded settings"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Default settings"""
    return Settings()


@pytest.fixture
def test_image():
    """Create an 80x60 BGR test image"""
    image = np.zeros((60, 80, 3), dtype=np.uint8)
    # Add some content
    cv2.rectangle(image, (10, 10), (30, 30), (255, 255, 255), -1)
    cv2.circle(image, (55, 40), 10, (128, 128, 128), -1)
    return image


@pytest.fixture
def gradient_image():
    """Create a 64x32 horizontal gray gradient"""
    row = np.linspace(0, 255, 64).astype(np.uint8)
    gray = np.tile(row, (32, 1))
    return cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)


@pytest.fixture
def png_bytes(test_image):
    """Test image encoded as PNG"""
    return encode_array(test_image, "PNG")


@pytest.fixture
def jpeg_bytes(test_image):
    """Test image encoded as JPEG without EXIF"""
    return encode_array(test_image, "JPEG")


@pytest.fixture
def rotated_jpeg_bytes():
    """80x40 JPEG tagged with EXIF orientation 6 (right-top)"""
    image = np.zeros((40, 80, 3), dtype=np.uint8)
    cv2.rectangle(image, (0, 0), (20, 20), (0, 0, 255), -1)
    return encode_array(image, "JPEG", orientation=6)


@pytest.fixture
def rgba_png_bytes():
    """40x30 semi-transparent RGBA PNG"""
    image = np.zeros((30, 40, 4), dtype=np.uint8)
    image[:, :] = (255, 0, 0, 128)
    return encode_array(image, "PNG", bgr=False)


@pytest.fixture
def image(png_bytes, settings):
    """Image decoded from the PNG test image"""
    img = Image(png_bytes, settings=settings)
    yield img
    # Cleanup
    img.destroy()


@pytest.fixture
def make_image(settings):
    """Factory building Images from numpy arrays; destroys them afterwards"""
    created = []

    def _make(array, format="PNG", orientation=None, bgr=True):
        img = Image(encode_array(array, format, orientation, bgr), settings=settings)
        created.append(img)
        return img

    yield _make

    for img in created:
        img.destroy()


@pytest.fixture
def encode():
    """Expose encode_array to tests"""
    return encode_array


@pytest.fixture
def solid_image():
    """Expose solid() to tests"""
    return solid
