"""
Test configuration and fixtures for PaletteLab tests.
"""
import base64
import io
import struct
import zlib

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

# Import the main app
from main import app


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from palettelab.utils.metrics import reset_metrics
    reset_metrics()


def make_rgba(width, height, rgb, alpha=255):
    """Solid RGBA buffer."""
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[:, :, :3] = rgb
    image[:, :, 3] = alpha
    return image


def encode_png(rgba):
    """Encode an RGBA buffer to PNG bytes."""
    buffer = io.BytesIO()
    Image.fromarray(rgba).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def solid_red_png():
    """10x10 opaque pure red PNG."""
    return encode_png(make_rgba(10, 10, (255, 0, 0)))


@pytest.fixture
def transparent_png():
    """20x20 fully transparent PNG."""
    return encode_png(make_rgba(20, 20, (90, 160, 30), alpha=0))


@pytest.fixture
def two_tone_rgba():
    """20x20 image: left half pure red, right half pure blue."""
    image = make_rgba(20, 20, (255, 0, 0))
    image[:, 10:, :3] = (0, 0, 255)
    return image


@pytest.fixture
def two_tone_png(two_tone_rgba):
    return encode_png(two_tone_rgba)


@pytest.fixture
def gradient_rgba():
    """48x48 image sweeping hue horizontally and lightness vertically."""
    from palettelab.services.colors.conversion import hsl_to_rgb
    image = np.zeros((48, 48, 4), dtype=np.uint8)
    for y in range(48):
        for x in range(48):
            image[y, x, :3] = hsl_to_rgb(x * 7.5, 80, 15 + y * 1.5)
    image[:, :, 3] = 255
    return image


@pytest.fixture
def gradient_png(gradient_rgba):
    return encode_png(gradient_rgba)


def to_b64(data):
    return base64.b64encode(data).decode("ascii")


def _png_chunk(kind, payload):
    return (struct.pack(">I", len(payload)) + kind + payload
            + struct.pack(">I", zlib.crc32(kind + payload) & 0xFFFFFFFF))


@pytest.fixture
def oversized_png():
    """Tiny PNG whose header declares 14000x14000 1-bit pixels."""
    header = struct.pack(">IIBBBBB", 14000, 14000, 1, 0, 0, 0, 0)
    return (b"\x89PNG\r\n\x1a\n"
            + _png_chunk(b"IHDR", header)
            + _png_chunk(b"IDAT", zlib.compress(b"\x00" * 64))
            + _png_chunk(b"IEND", b""))


@pytest.fixture
def truncated_png():
    """Noisy 64x64 PNG cut off halfway through its pixel data."""
    rng = np.random.default_rng(0)
    rgba = rng.integers(0, 256, size=(64, 64, 4)).astype(np.uint8)
    rgba[:, :, 3] = 255
    data = encode_png(rgba)
    return data[:len(data) // 2]
