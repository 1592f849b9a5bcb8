"""
Luminosity histogram analysis.

Computes a 32-bin luminance histogram with summary statistics, either over
an image (sampled more densely than palette extraction) or over the colors
of a palette.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from loguru import logger

from .conversion import hex_luminance, luminance_array
from .decoding import ImageRef, prepare_pixels
from .errors import DecodeFailure

LUMA_BINS = 32
BIN_WIDTH = 256 // LUMA_BINS
DARK_LIMIT = 85
BRIGHT_LIMIT = 170
DEFAULT_SAMPLE_STEP = 2


@dataclass
class LuminosityHistogram:
    """Normalized luminance histogram (max bin = 100) and summary statistics."""
    bins: List[int]
    average: int
    contrast: int
    dark_percent: int
    mid_percent: int
    bright_percent: int
    min_value: int
    max_value: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _round(value: float) -> int:
    return int(np.floor(value + 0.5))


def _percent(part: int, total: int) -> int:
    return _round(part / total * 100)


def _normalized_bins(lum: np.ndarray) -> List[int]:
    indices = np.minimum(lum // BIN_WIDTH, LUMA_BINS - 1)
    counts = np.bincount(indices, minlength=LUMA_BINS)
    peak = counts.max() if counts.size else 0
    if peak == 0:
        return [0] * LUMA_BINS
    return [_round(c / peak * 100) for c in counts]


def _zone_percents(lum: np.ndarray) -> tuple:
    total = len(lum)
    dark = int(np.count_nonzero(lum < DARK_LIMIT))
    bright = int(np.count_nonzero(lum >= BRIGHT_LIMIT))
    mid = total - dark - bright
    return _percent(dark, total), _percent(mid, total), _percent(bright, total)


def histogram_from_luminance(lum: np.ndarray) -> Optional[LuminosityHistogram]:
    """
    Build histogram statistics from integer luminance values (0-255).

    Contrast averages the min-max range ratio and the standard deviation
    ratio (sigma / 128), both on a 0-100 scale, clamped to [0, 100].
    """
    lum = np.asarray(lum, dtype=np.int64)
    if lum.size == 0:
        return None

    ordered = np.sort(lum)
    min_value = int(ordered[0])
    max_value = int(ordered[-1])

    range_ratio = (max_value - min_value) / 255.0 * 100.0
    std_ratio = float(np.std(lum)) / 128.0 * 100.0
    contrast = min(100, max(0, _round((range_ratio + std_ratio) / 2.0)))

    dark, mid, bright = _zone_percents(lum)

    return LuminosityHistogram(
        bins=_normalized_bins(lum),
        average=_round(float(lum.mean())),
        contrast=contrast,
        dark_percent=dark,
        mid_percent=mid,
        bright_percent=bright,
        min_value=min_value,
        max_value=max_value,
    )


def analyze_luminosity(image: ImageRef, sample_step: int = DEFAULT_SAMPLE_STEP,
                       max_edge: int = 0) -> Optional[LuminosityHistogram]:
    """
    Analyze the luminance distribution of an image.

    Returns:
        LuminosityHistogram, or None when the image cannot be decoded or has
        no opaque pixels
    """
    try:
        pixels = prepare_pixels(image, step=sample_step, max_edge=max_edge)
    except DecodeFailure as e:
        logger.info(f"Luminosity analysis skipped: {e}")
        return None

    lum = np.floor(luminance_array(pixels) + 0.5).astype(np.int64)
    histogram = histogram_from_luminance(lum)
    logger.debug(f"Luminosity histogram over {len(lum)} pixels: "
                 f"avg={histogram.average}, contrast={histogram.contrast}")
    return histogram


def histogram_from_palette(hex_colors: Sequence[str]) -> Optional[LuminosityHistogram]:
    """
    Approximate a luminosity histogram from palette colors.

    Used when no image histogram is available; contrast is the range ratio
    only since a handful of colors gives no meaningful deviation.

    Raises:
        InvalidColorFormat: If a color is not a valid hex string
    """
    if not hex_colors:
        return None

    lum = np.array([hex_luminance(c) for c in hex_colors], dtype=np.int64)
    min_value = int(lum.min())
    max_value = int(lum.max())
    dark, mid, bright = _zone_percents(lum)

    return LuminosityHistogram(
        bins=_normalized_bins(lum),
        average=_round(float(lum.mean())),
        contrast=_round((max_value - min_value) / 255.0 * 100.0),
        dark_percent=dark,
        mid_percent=mid,
        bright_percent=bright,
        min_value=min_value,
        max_value=max_value,
    )
