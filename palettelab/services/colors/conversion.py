"""
Color-space conversion utilities.

Pure functions shared by every extractor: RGB <-> HSL, RGB <-> hex and the
perceptual luminance used for palette ordering and histogram bucketing.
HSL values use integer units (hue in degrees 0-359, saturation and
lightness as percentages 0-100).
"""

import re
from typing import Tuple

import numpy as np

from .errors import InvalidColorFormat

RGB = Tuple[int, int, int]
HSL = Tuple[int, int, int]

LUMA_WEIGHTS = (0.299, 0.587, 0.114)

_HEX_RE = re.compile(r"^#([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})$")


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; palette math expects 0.5 -> 1
    return int(np.floor(value + 0.5))


def _clamp_channel(value: float) -> int:
    return max(0, min(255, _round_half_up(value)))


def hex_to_rgb(hex_color: str) -> RGB:
    """
    Convert a hex color string to an RGB tuple.

    Args:
        hex_color: Color in format #RRGGBB (case-insensitive)

    Returns:
        Tuple of (R, G, B) in [0, 255]

    Raises:
        InvalidColorFormat: If the string is not a 6-digit hex with '#' prefix
    """
    if not isinstance(hex_color, str):
        raise InvalidColorFormat(hex_color)
    match = _HEX_RE.match(hex_color)
    if match is None:
        raise InvalidColorFormat(hex_color)
    return tuple(int(part, 16) for part in match.groups())


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert RGB channels to an uppercase #RRGGBB string (clamped to 0-255)."""
    return "#{:02X}{:02X}{:02X}".format(_clamp_channel(r), _clamp_channel(g), _clamp_channel(b))


def normalize_hex(hex_color: str) -> str:
    """Validate a hex color and return its uppercase form."""
    return rgb_to_hex(*hex_to_rgb(hex_color))


def rgb_to_hsl(r: int, g: int, b: int) -> HSL:
    """
    Convert RGB to HSL.

    Returns:
        Tuple of (H, S, L) with H in degrees [0, 359], S and L in percent [0, 100]
    """
    rf, gf, bf = r / 255.0, g / 255.0, b / 255.0
    c_max = max(rf, gf, bf)
    c_min = min(rf, gf, bf)
    lightness = (c_max + c_min) / 2.0
    hue = 0.0
    saturation = 0.0

    if c_max != c_min:
        delta = c_max - c_min
        if lightness > 0.5:
            saturation = delta / (2.0 - c_max - c_min)
        else:
            saturation = delta / (c_max + c_min)

        if c_max == rf:
            hue = ((gf - bf) / delta + (6.0 if gf < bf else 0.0)) / 6.0
        elif c_max == gf:
            hue = ((bf - rf) / delta + 2.0) / 6.0
        else:
            hue = ((rf - gf) / delta + 4.0) / 6.0

    h = _round_half_up(hue * 360) % 360
    return h, _round_half_up(saturation * 100), _round_half_up(lightness * 100)


def hsl_to_rgb(h: float, s: float, l: float) -> RGB:
    """
    Convert HSL back to RGB.

    Args:
        h: Hue in degrees (any value, wrapped to [0, 360))
        s: Saturation percent [0, 100]
        l: Lightness percent [0, 100]
    """
    s /= 100.0
    l /= 100.0
    h = h % 360
    a = s * min(l, 1.0 - l)

    def channel(n: int) -> int:
        k = (n + h / 30.0) % 12
        value = l - a * max(-1.0, min(k - 3.0, 9.0 - k, 1.0))
        return _clamp_channel(value * 255)

    return channel(0), channel(8), channel(4)


def luminance(r: float, g: float, b: float) -> float:
    """Perceptual luminance 0.299R + 0.587G + 0.114B on the 0-255 scale."""
    return LUMA_WEIGHTS[0] * r + LUMA_WEIGHTS[1] * g + LUMA_WEIGHTS[2] * b


def luminance_int(r: float, g: float, b: float) -> int:
    """Luminance rounded to the nearest integer, as used for bucketing."""
    return _round_half_up(luminance(r, g, b))


def hex_luminance(hex_color: str) -> int:
    """Rounded luminance (0-255) of a hex color."""
    return luminance_int(*hex_to_rgb(hex_color))


def luminance_array(pixels_rgb: np.ndarray) -> np.ndarray:
    """Float luminance of every row in an (N, 3) RGB array."""
    return pixels_rgb.astype(np.float64) @ np.array(LUMA_WEIGHTS)


def rgb_to_hsl_array(pixels_rgb: np.ndarray) -> np.ndarray:
    """
    Vectorized RGB -> HSL for an (N, 3) uint8 array.

    Produces the same integer values as rgb_to_hsl, row by row.

    Returns:
        (N, 3) int array of (H, S, L)
    """
    rgb = pixels_rgb.astype(np.float64) / 255.0
    r, g, b = rgb[:, 0], rgb[:, 1], rgb[:, 2]
    c_max = rgb.max(axis=1)
    c_min = rgb.min(axis=1)
    delta = c_max - c_min
    lightness = (c_max + c_min) / 2.0

    chromatic = delta > 0
    safe_delta = np.where(chromatic, delta, 1.0)

    denom = np.where(lightness > 0.5, 2.0 - c_max - c_min, c_max + c_min)
    saturation = np.where(chromatic, delta / np.where(denom == 0, 1.0, denom), 0.0)

    hue = np.zeros_like(c_max)
    r_max = chromatic & (c_max == r)
    g_max = chromatic & ~r_max & (c_max == g)
    b_max = chromatic & ~r_max & ~g_max
    hue[r_max] = ((g - b)[r_max] / safe_delta[r_max] + np.where(g < b, 6.0, 0.0)[r_max]) / 6.0
    hue[g_max] = ((b - r)[g_max] / safe_delta[g_max] + 2.0) / 6.0
    hue[b_max] = ((r - g)[b_max] / safe_delta[b_max] + 4.0) / 6.0

    h = np.floor(hue * 360 + 0.5).astype(np.int64) % 360
    s = np.floor(saturation * 100 + 0.5).astype(np.int64)
    l = np.floor(lightness * 100 + 0.5).astype(np.int64)
    return np.stack([h, s, l], axis=1)
