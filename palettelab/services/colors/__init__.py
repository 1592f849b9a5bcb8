"""
PaletteLab Colors Module

Pixel decoding, color-space conversion, the k-means and hue-histogram
palette extractors, luminosity analysis and the extraction entry point.
"""

from .conversion import hex_to_rgb, hsl_to_rgb, luminance, rgb_to_hex, rgb_to_hsl
from .errors import DecodeFailure, InvalidColorFormat
from .extraction import FALLBACK_PALETTE, ExtractionMethod, extract_palette
from .luminosity import LuminosityHistogram, analyze_luminosity

__all__ = [
    "DecodeFailure",
    "ExtractionMethod",
    "FALLBACK_PALETTE",
    "InvalidColorFormat",
    "LuminosityHistogram",
    "analyze_luminosity",
    "extract_palette",
    "hex_to_rgb",
    "hsl_to_rgb",
    "luminance",
    "rgb_to_hex",
    "rgb_to_hsl",
]
