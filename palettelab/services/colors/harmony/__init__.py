"""
PaletteLab Color Harmony

Generates complementary, analogous, triadic, split-complementary and
tetradic companions for a palette color by rotating its hue while keeping
saturation and lightness.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List

from ..conversion import hex_to_rgb, hsl_to_rgb, rgb_to_hex, rgb_to_hsl

# (type, display name, description, [(member name, angle), ...])
HARMONY_RULES = [
    ("complementary", "Complementary", "Opposite hue",
     [("Base", 0), ("Complement", 180)]),
    ("analogous", "Analogous", "Neighbouring hues",
     [("Left", -30), ("Base", 0), ("Right", 30)]),
    ("triadic", "Triadic", "Three hues 120° apart",
     [("Base", 0), ("Second", 120), ("Third", 240)]),
    ("split-complementary", "Split Comp.", "Both sides of the complement",
     [("Base", 0), ("Split 1", 150), ("Split 2", 210)]),
    ("tetradic", "Tetradic", "Four hues 90° apart",
     [("Base", 0), ("Second", 90), ("Third", 180), ("Fourth", 270)]),
]


@dataclass
class HarmonyColor:
    """A member of a harmony with its rotation from the base hue."""
    hex: str
    name: str
    angle: int


@dataclass
class ColorHarmony:
    """A named harmony scheme."""
    type: str
    name: str
    description: str
    colors: List[HarmonyColor]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def rotate_hue(h: float, degrees: float) -> float:
    """Rotate a hue in degrees, wrapping into [0, 360)."""
    return (h + degrees) % 360


def get_hue_separation(h1: float, h2: float) -> float:
    """Minimum angular separation between two hues in degrees [0, 180]."""
    diff = abs(h1 - h2) % 360
    return min(diff, 360 - diff)


def rotate_hex(hex_color: str, degrees: float) -> str:
    """Rotate the hue of a hex color, keeping saturation and lightness."""
    h, s, l = rgb_to_hsl(*hex_to_rgb(hex_color))
    return rgb_to_hex(*hsl_to_rgb(rotate_hue(h, degrees), s, l))


def generate_color_harmonies(hex_color: str) -> List[ColorHarmony]:
    """
    Generate all harmony schemes for a base color.

    Raises:
        InvalidColorFormat: If hex_color is malformed
    """
    base = rgb_to_hex(*hex_to_rgb(hex_color))
    harmonies = []
    for harmony_type, name, description, members in HARMONY_RULES:
        colors = [
            HarmonyColor(hex=base if angle == 0 else rotate_hex(base, angle), name=member, angle=angle)
            for member, angle in members
        ]
        harmonies.append(ColorHarmony(type=harmony_type, name=name, description=description, colors=colors))
    return harmonies
