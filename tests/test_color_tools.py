"""
Tests for color harmonies, shadow/highlight variations, color adjustments
and color vision deficiency simulation.
"""

import pytest

from palettelab.services.colors.errors import InvalidColorFormat
from palettelab.services.colors.harmony import (
    HARMONY_RULES, generate_color_harmonies, get_hue_separation, rotate_hex, rotate_hue,
)
from palettelab.services.colors.harmony.variations import (
    adjust_color, generate_color_variations, shift_hue, to_grayscale,
)
from palettelab.services.colors.harmony.vision import ColorBlindnessType, simulate_color_blindness


class TestHueMath:
    """Test hue rotation helpers"""

    def test_rotate_hue_wraps(self):
        assert rotate_hue(350, 20) == 10
        assert rotate_hue(10, -30) == 340

    def test_hue_separation(self):
        assert get_hue_separation(350, 10) == 20
        assert get_hue_separation(0, 180) == 180

    def test_rotate_hex(self):
        assert rotate_hex("#FF0000", 120) == "#00FF00"
        assert rotate_hex("#FF0000", 240) == "#0000FF"


class TestHarmonies:
    """Test harmony scheme generation"""

    def test_all_schemes_present(self):
        harmonies = generate_color_harmonies("#FF0000")
        assert [h.type for h in harmonies] == [rule[0] for rule in HARMONY_RULES]

    def test_red_harmonies(self):
        by_type = {h.type: [c.hex for c in h.colors] for h in generate_color_harmonies("#ff0000")}

        assert by_type["complementary"] == ["#FF0000", "#00FFFF"]
        assert by_type["analogous"] == ["#FF0080", "#FF0000", "#FF8000"]
        assert by_type["triadic"] == ["#FF0000", "#00FF00", "#0000FF"]
        assert by_type["tetradic"] == ["#FF0000", "#80FF00", "#00FFFF", "#8000FF"]

    def test_to_dict(self):
        data = generate_color_harmonies("#4ECDC4")[0].to_dict()
        assert data["type"] == "complementary"
        assert data["colors"][0] == {"hex": "#4ECDC4", "name": "Base", "angle": 0}

    def test_invalid_hex(self):
        with pytest.raises(InvalidColorFormat):
            generate_color_harmonies("red")


class TestVariations:
    """Test shadow/highlight ramps"""

    def test_gray_ramp(self):
        variations = generate_color_variations("#808080")

        assert [v.label for v in variations] == ["S2", "S1", "Base", "L1", "L2"]
        assert [v.hex for v in variations] == ["#464646", "#636363", "#808080", "#9C9C9C", "#B9B9B9"]
        assert variations[2].hsl == (0, 0, 50)

    def test_lightness_increases(self):
        variations = generate_color_variations("#3366CC")
        lightness = [v.hsl[2] for v in variations]
        assert lightness == sorted(lightness)
        assert all(5 <= l <= 95 for l in lightness)

    def test_hue_shift_toward_blue_and_yellow(self):
        variations = generate_color_variations("#FF0000", use_hue_shift=True)
        assert variations[0].hsl[0] == 338
        assert variations[-1].hsl[0] == 23

    def test_no_hue_shift_keeps_hue(self):
        variations = generate_color_variations("#FF0000")
        assert {v.hsl[0] for v in variations} == {0}


class TestAdjustments:
    """Test grayscale and saturation/brightness adjustments"""

    def test_grayscale_uses_luminance(self):
        assert to_grayscale("#FF0000") == "#4C4C4C"
        assert to_grayscale("#FFFFFF") == "#FFFFFF"

    def test_adjust_identity(self):
        assert adjust_color("#ff0000", 1, 1) == "#FF0000"

    def test_adjust_desaturate_and_brighten(self):
        assert adjust_color("#FF0000", 0, 1) == "#808080"
        assert adjust_color("#FF0000", 1, 2) == "#FFFFFF"

    def test_shift_hue(self):
        assert shift_hue("#FF0000", 120) == "#00FF00"


class TestColorBlindness:
    """Test color vision deficiency simulation"""

    def test_none_is_identity(self):
        assert simulate_color_blindness("#abcdef") == "#ABCDEF"

    @pytest.mark.parametrize("kind", [t.value for t in ColorBlindnessType if t is not ColorBlindnessType.NONE])
    def test_black_and_white_preserved(self, kind):
        assert simulate_color_blindness("#000000", kind) == "#000000"
        assert simulate_color_blindness("#FFFFFF", kind) == "#FFFFFF"

    def test_protanopia_changes_red(self):
        assert simulate_color_blindness("#FF0000", "protanopia") != "#FF0000"

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            simulate_color_blindness("#FF0000", "monochromacy")
