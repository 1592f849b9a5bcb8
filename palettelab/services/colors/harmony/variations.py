"""
Palette color adjustments: grayscale, saturation/brightness scaling, hue
shifts, and shadow/highlight ramps around a base color.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Tuple

from ..conversion import hex_luminance, hex_to_rgb, hsl_to_rgb, normalize_hex, rgb_to_hex, rgb_to_hsl
from . import rotate_hue

MIN_LIGHTNESS = 5
MAX_LIGHTNESS = 95
MAX_OFFSET = 30
SPACE_USAGE = 0.5
MAX_HUE_SHIFT = 15

SHADOW_TARGET_HUE = 240  # blue
HIGHLIGHT_TARGET_HUE = 60  # yellow


@dataclass
class ColorVariation:
    """One step of a shadow/highlight ramp."""
    hex: str
    label: str
    full_label: str
    hsl: Tuple[int, int, int]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _round(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def to_grayscale(hex_color: str) -> str:
    """Gray with the same luminance as the color."""
    gray = hex_luminance(hex_color)
    return rgb_to_hex(gray, gray, gray)


def adjust_color(hex_color: str, sat_mult: float, bright_mult: float) -> str:
    """Scale saturation and lightness, clamped to [0, 100]."""
    if sat_mult == 1 and bright_mult == 1:
        return normalize_hex(hex_color)

    h, s, l = rgb_to_hsl(*hex_to_rgb(hex_color))
    new_s = min(100.0, max(0.0, s * sat_mult))
    new_l = min(100.0, max(0.0, l * bright_mult))
    return rgb_to_hex(*hsl_to_rgb(h, new_s, new_l))


def shift_hue(hex_color: str, shift: float) -> str:
    """Shift hue by `shift` degrees (wrapping)."""
    h, s, l = rgb_to_hsl(*hex_to_rgb(hex_color))
    return rgb_to_hex(*hsl_to_rgb(rotate_hue(h, shift), s, l))


def _direction(from_h: float, to_h: float) -> int:
    diff = to_h - from_h
    if diff > 180:
        diff -= 360
    if diff < -180:
        diff += 360
    return 1 if diff >= 0 else -1


def _variation(h: int, s: int, l: int, lightness_offset: float, hue_offset: float):
    if lightness_offset < 0:
        available = l - MIN_LIGHTNESS
        new_l = l - available * (abs(lightness_offset) / MAX_OFFSET) * SPACE_USAGE
    elif lightness_offset > 0:
        available = MAX_LIGHTNESS - l
        new_l = l + available * (lightness_offset / MAX_OFFSET) * SPACE_USAGE
    else:
        new_l = l
    new_l = min(max(new_l, MIN_LIGHTNESS), MAX_LIGHTNESS)

    new_h = rotate_hue(h, hue_offset)
    new_s = s
    if lightness_offset < 0:
        new_s = min(s * 1.1, 100)
    elif lightness_offset > 0:
        new_s = s * 0.9

    hex_value = rgb_to_hex(*hsl_to_rgb(new_h, new_s, new_l))
    return hex_value, (_round(new_h) % 360, _round(new_s), _round(new_l))


def generate_color_variations(hex_color: str, use_hue_shift: bool = False) -> List[ColorVariation]:
    """
    Build a five-step ramp: two shadows, the base, two highlights.

    Lightness moves proportionally into the space left between the base and
    the [5, 95] bounds. With `use_hue_shift`, shadows drift toward blue and
    highlights toward yellow, more strongly for saturated colors.
    """
    base = normalize_hex(hex_color)
    h, s, l = rgb_to_hsl(*hex_to_rgb(base))

    base_shift = _round(MAX_HUE_SHIFT * min(s / 100, 1)) if use_hue_shift else 0
    shadow_dir = _direction(h, SHADOW_TARGET_HUE)
    highlight_dir = _direction(h, HIGHLIGHT_TARGET_HUE)

    steps = [
        (-30, shadow_dir * base_shift * 1.5, "S2", "Shadow 2"),
        (-15, shadow_dir * base_shift * 0.75, "S1", "Shadow 1"),
        (0, 0, "Base", "Base"),
        (15, highlight_dir * base_shift * 0.75, "L1", "Light 1"),
        (30, highlight_dir * base_shift * 1.5, "L2", "Light 2"),
    ]

    variations = []
    for lightness_offset, hue_offset, label, full_label in steps:
        if lightness_offset == 0:
            variations.append(ColorVariation(base, label, full_label, (h, s, l)))
            continue
        hex_value, hsl = _variation(h, s, l, lightness_offset, hue_offset)
        variations.append(ColorVariation(hex_value, label, full_label, hsl))
    return variations
