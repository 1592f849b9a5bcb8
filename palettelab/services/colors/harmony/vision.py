"""
Color vision deficiency simulation.

Uses the Viénot et al. (1999) dichromacy matrices applied in linearized sRGB.
"""

from enum import Enum

import numpy as np

from ..conversion import hex_to_rgb, normalize_hex, rgb_to_hex


class ColorBlindnessType(str, Enum):
    NONE = "none"
    PROTANOPIA = "protanopia"
    DEUTERANOPIA = "deuteranopia"
    TRITANOPIA = "tritanopia"


CVD_MATRICES = {
    ColorBlindnessType.PROTANOPIA: np.array([
        [0.152286, 1.052583, -0.204868],
        [0.114503, 0.786281, 0.099216],
        [-0.003882, -0.048116, 1.051998],
    ]),
    ColorBlindnessType.DEUTERANOPIA: np.array([
        [0.367322, 0.860646, -0.227968],
        [0.280085, 0.672501, 0.047413],
        [-0.011820, 0.042940, 0.968881],
    ]),
    ColorBlindnessType.TRITANOPIA: np.array([
        [1.255528, -0.076749, -0.178779],
        [-0.078411, 0.930809, 0.147602],
        [0.004733, 0.691367, 0.303900],
    ]),
}


def srgb_to_linear(channels: np.ndarray) -> np.ndarray:
    c = np.asarray(channels, dtype=np.float64) / 255.0
    return np.where(c <= 0.04045, c / 12.92, ((c + 0.055) / 1.055) ** 2.4)


def linear_to_srgb(channels: np.ndarray) -> np.ndarray:
    c = np.clip(channels, 0.0, 1.0)
    v = np.where(c <= 0.0031308, c * 12.92, 1.055 * np.power(c, 1 / 2.4) - 0.055)
    return v * 255.0


def simulate_color_blindness(hex_color: str, kind="none") -> str:
    """
    Simulate how a color appears under a color vision deficiency.

    Raises:
        ValueError: For an unknown deficiency type
        InvalidColorFormat: If hex_color is malformed
    """
    kind = ColorBlindnessType(kind)
    if kind is ColorBlindnessType.NONE:
        return normalize_hex(hex_color)

    linear = srgb_to_linear(hex_to_rgb(hex_color))
    simulated = linear_to_srgb(CVD_MATRICES[kind] @ linear)
    return rgb_to_hex(*simulated)
