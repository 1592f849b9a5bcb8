"""
Pixel decoding for palette extraction.

Turns an image reference (encoded bytes, base64 text, a file path, a PIL
image or a numpy buffer) into an RGBA buffer, then samples every Nth pixel
and drops transparent ones.
"""

import base64
import binascii
import io
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from loguru import logger
from PIL import Image, UnidentifiedImageError

from .errors import DecodeFailure

ImageRef = Union[bytes, bytearray, str, Path, Image.Image, np.ndarray]

ALPHA_THRESHOLD = 128  # ~50% opacity


def decode_base64_image(b64_data: str) -> bytes:
    """Decode base64 image text (optionally a data URL) into raw bytes."""
    if "," in b64_data and b64_data.lstrip().startswith("data:"):
        b64_data = b64_data.split(",", 1)[1]
    try:
        return base64.b64decode(b64_data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeFailure(f"Invalid base64 image data: {e}") from e


def _ndarray_to_rgba(array: np.ndarray) -> np.ndarray:
    if array.size == 0:
        raise DecodeFailure("Empty pixel buffer")
    if array.dtype != np.uint8:
        array = np.clip(array, 0, 255).astype(np.uint8)

    if array.ndim == 2:
        return cv2.cvtColor(array, cv2.COLOR_GRAY2RGBA)
    if array.ndim == 3 and array.shape[2] == 3:
        return cv2.cvtColor(array, cv2.COLOR_RGB2RGBA)
    if array.ndim == 3 and array.shape[2] == 4:
        return array
    raise DecodeFailure(f"Unsupported pixel buffer shape: {array.shape}")


def _bytes_to_rgba(data: bytes) -> np.ndarray:
    if not data:
        raise DecodeFailure("Empty image data")
    try:
        with Image.open(io.BytesIO(data)) as pil_image:
            pil_image.load()
            return np.array(pil_image.convert("RGBA"))
    except (UnidentifiedImageError, Image.DecompressionBombError,
            OSError, SyntaxError, ValueError) as e:
        raise DecodeFailure(f"Failed to decode image: {e}") from e


def decode_image(image: ImageRef) -> np.ndarray:
    """
    Decode an image reference to an RGBA uint8 buffer.

    Args:
        image: Encoded bytes, base64 string / data URL, file path,
            PIL image, or ndarray of shape (H, W), (H, W, 3) RGB or (H, W, 4) RGBA

    Returns:
        RGBA array of shape (H, W, 4)

    Raises:
        DecodeFailure: If the reference cannot be decoded
    """
    if isinstance(image, np.ndarray):
        return _ndarray_to_rgba(image)

    if isinstance(image, Image.Image):
        return np.array(image.convert("RGBA"))

    if isinstance(image, (bytes, bytearray)):
        return _bytes_to_rgba(bytes(image))

    if isinstance(image, Path):
        try:
            return _bytes_to_rgba(image.read_bytes())
        except OSError as e:
            raise DecodeFailure(f"Failed to read image file {image}: {e}") from e

    if isinstance(image, str):
        path = Path(image)
        if len(image) < 4096 and path.suffix and path.is_file():
            return decode_image(path)
        return _bytes_to_rgba(decode_base64_image(image))

    raise DecodeFailure(f"Unsupported image reference type: {type(image).__name__}")


def resize_long_edge(rgba: np.ndarray, max_edge: int) -> np.ndarray:
    """Downscale so the longest edge is at most max_edge pixels."""
    height, width = rgba.shape[:2]
    current_max = max(height, width)
    if max_edge <= 0 or current_max <= max_edge:
        return rgba

    scale = max_edge / current_max
    new_width = max(1, int(width * scale))
    new_height = max(1, int(height * scale))
    return cv2.resize(rgba, (new_width, new_height), interpolation=cv2.INTER_AREA)


def sample_pixels(rgba: np.ndarray, step: int = 1,
                  alpha_threshold: int = ALPHA_THRESHOLD) -> np.ndarray:
    """
    Sample every `step`-th pixel and drop mostly transparent ones.

    Args:
        rgba: RGBA buffer (H, W, 4)
        step: Sampling stride over the flattened pixel sequence
        alpha_threshold: Pixels with alpha below this value are dropped

    Returns:
        Opaque RGB samples (N, 3) uint8

    Raises:
        DecodeFailure: If no usable pixels remain
    """
    step = max(1, int(step))
    flat = rgba.reshape(-1, 4)[::step]
    opaque = flat[flat[:, 3] >= alpha_threshold]

    logger.debug(f"Sampled {len(flat)} pixels (step={step}), {len(opaque)} opaque")

    if len(opaque) == 0:
        raise DecodeFailure("Image has no opaque pixels")
    return np.ascontiguousarray(opaque[:, :3])


def prepare_pixels(image: ImageRef, step: int = 1, max_edge: int = 0) -> np.ndarray:
    """Decode, optionally downscale, and sample an image reference."""
    rgba = decode_image(image)
    if max_edge:
        rgba = resize_long_edge(rgba, max_edge)
    return sample_pixels(rgba, step=step)
