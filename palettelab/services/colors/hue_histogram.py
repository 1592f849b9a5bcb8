"""
Hue-histogram palette extraction.

Chromatic pixels are binned by hue into 36 buckets of 10 degrees. The
histogram is smoothed circularly, local maxima become candidate peaks, and
peaks are scored by population, saturation and lightness. The best peaks
with enough hue separation form the palette; remaining slots are filled
from achromatic pixels ordered by lightness.
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np
from loguru import logger

from .conversion import RGB, luminance, rgb_to_hsl, rgb_to_hsl_array

HUE_BINS = 36
BIN_WIDTH = 360 // HUE_BINS
SMOOTHING_RADIUS = 3
MERGE_RATIO = 0.5

CHROMA_MIN_SATURATION = 25
CHROMA_MIN_LIGHTNESS = 10
CHROMA_MAX_LIGHTNESS = 90

PRIMARY_HUE_SEPARATION = 25
RELAXED_HUE_SEPARATION = 15

NEUTRAL_GRAY = (128, 128, 128)


@dataclass(frozen=True)
class PixelSample:
    """A sampled pixel with its HSL coordinates."""
    r: int
    g: int
    b: int
    h: int
    s: int
    l: int

    @property
    def rgb(self) -> RGB:
        return self.r, self.g, self.b

    @property
    def is_chromatic(self) -> bool:
        return (self.s >= CHROMA_MIN_SATURATION
                and CHROMA_MIN_LIGHTNESS <= self.l <= CHROMA_MAX_LIGHTNESS)


@dataclass
class HueBin:
    """One 10-degree hue bucket."""
    index: int
    count: int = 0
    members: List[PixelSample] = field(default_factory=list)


@dataclass
class HuePeak:
    """A merged histogram peak and its score."""
    bin_index: int
    count: int
    members: List[PixelSample]
    score: float = 0.0
    hue: int = 0
    color: RGB = NEUTRAL_GRAY


def build_samples(pixels_rgb: np.ndarray) -> List[PixelSample]:
    """Attach HSL coordinates to every sampled RGB pixel."""
    pixels = np.asarray(pixels_rgb, dtype=np.uint8).reshape(-1, 3)
    hsl = rgb_to_hsl_array(pixels)
    return [
        PixelSample(int(p[0]), int(p[1]), int(p[2]), int(c[0]), int(c[1]), int(c[2]))
        for p, c in zip(pixels, hsl)
    ]


def hue_distance(h1: float, h2: float) -> float:
    """Circular distance between two hues in degrees."""
    diff = abs(h1 - h2) % 360
    return min(diff, 360 - diff)


def weighted_color(samples: Sequence[PixelSample]) -> RGB:
    """
    Saturation-weighted mean color.

    Each pixel contributes with weight 1 + 100 * (s/100)^2, so saturated
    pixels dominate the representative color.
    """
    if not samples:
        return NEUTRAL_GRAY
    weights = np.array([1.0 + 100.0 * (p.s / 100.0) ** 2 for p in samples])
    rgb = np.array([p.rgb for p in samples], dtype=np.float64)
    mean = (rgb * weights[:, None]).sum(axis=0) / weights.sum()
    return tuple(int(np.floor(c + 0.5)) for c in mean)


def lightness_score(avg_lightness: float) -> float:
    """1.0 inside [20, 80], decaying linearly to 0.5 at 0 and 100."""
    if 20 <= avg_lightness <= 80:
        return 1.0
    if avg_lightness < 20:
        return 0.5 + 0.5 * (avg_lightness / 20.0)
    return 0.5 + 0.5 * ((100.0 - avg_lightness) / 20.0)


def score_peak(count: int, avg_saturation: float, avg_lightness: float) -> float:
    """Peak score, floored at 1% of its population."""
    score = math.sqrt(count) * (avg_saturation / 100.0) ** 2 * lightness_score(avg_lightness) * 100.0
    return max(score, count * 0.01)


def build_hue_bins(chromatic: Sequence[PixelSample]) -> List[HueBin]:
    bins = [HueBin(index=i) for i in range(HUE_BINS)]
    for sample in chromatic:
        hue_bin = bins[min(sample.h // BIN_WIDTH, HUE_BINS - 1)]
        hue_bin.count += 1
        hue_bin.members.append(sample)
    return bins


def smooth_counts(counts: np.ndarray, radius: int = SMOOTHING_RADIUS) -> np.ndarray:
    """Circular moving average over +/- radius bins."""
    window = 2 * radius + 1
    padded = np.concatenate([counts[-radius:], counts, counts[:radius]]).astype(np.float64)
    return np.convolve(padded, np.ones(window) / window, mode="valid")


def find_peaks(bins: List[HueBin], smoothed: np.ndarray) -> List[HuePeak]:
    """
    Detect circular local maxima and merge strong neighbours into them.

    A neighbour is merged when its smoothed count exceeds half the peak's.
    """
    peaks = []
    n = len(bins)
    for i in range(n):
        prev_i, next_i = (i - 1) % n, (i + 1) % n
        value = smoothed[i]
        if value <= 0 or value < smoothed[prev_i] or value < smoothed[next_i]:
            continue

        count = bins[i].count
        members = list(bins[i].members)
        for j in (prev_i, next_i):
            if smoothed[j] > value * MERGE_RATIO:
                count += bins[j].count
                members.extend(bins[j].members)
        peaks.append(HuePeak(bin_index=i, count=count, members=members))
    return peaks


def _select_peaks(peaks: List[HuePeak], color_count: int) -> List[HuePeak]:
    ranked = sorted(peaks, key=lambda p: p.score, reverse=True)
    selected: List[HuePeak] = []

    for min_separation in (PRIMARY_HUE_SEPARATION, RELAXED_HUE_SEPARATION):
        for peak in ranked:
            if len(selected) >= color_count:
                return selected
            if any(peak is chosen for chosen in selected):
                continue
            if all(hue_distance(peak.hue, chosen.hue) >= min_separation for chosen in selected):
                selected.append(peak)
    return selected


def _achromatic_fill(achromatic: Sequence[PixelSample], slots: int) -> List[RGB]:
    if slots <= 0 or not achromatic:
        return []
    ordered = sorted(achromatic, key=lambda p: p.l, reverse=True)
    groups = min(slots, len(ordered))
    bounds = np.linspace(0, len(ordered), groups + 1).astype(int)
    return [weighted_color(ordered[bounds[i]:bounds[i + 1]]) for i in range(groups)]


def histogram_palette(samples: Sequence[PixelSample], color_count: int) -> List[RGB]:
    """
    Extract a palette from hue-histogram peaks.

    Args:
        samples: Pixel samples with HSL attached (see build_samples)
        color_count: Number of colors to return

    Returns:
        Exactly color_count RGB tuples sorted by descending luminance
    """
    chromatic = [p for p in samples if p.is_chromatic]
    achromatic = [p for p in samples if not p.is_chromatic]

    bins = build_hue_bins(chromatic)
    smoothed = smooth_counts(np.array([b.count for b in bins]))
    peaks = [p for p in find_peaks(bins, smoothed) if p.count > 0]

    for peak in peaks:
        avg_s = sum(m.s for m in peak.members) / len(peak.members)
        avg_l = sum(m.l for m in peak.members) / len(peak.members)
        peak.score = score_peak(peak.count, avg_s, avg_l)
        peak.color = weighted_color(peak.members)
        peak.hue = rgb_to_hsl(*peak.color)[0]

    selected = _select_peaks(peaks, color_count)
    colors = [peak.color for peak in selected]

    logger.debug(f"Hue histogram: {len(chromatic)} chromatic, {len(achromatic)} achromatic, "
                 f"{len(peaks)} peaks, {len(selected)} selected")

    colors.extend(_achromatic_fill(achromatic, color_count - len(colors)))

    colors.sort(key=lambda rgb: luminance(*rgb), reverse=True)
    colors = colors[:color_count]
    # Pad with the darkest color so the palette stays sorted brightest first;
    # gray only when nothing was selected
    filler = colors[-1] if colors else NEUTRAL_GRAY
    colors.extend([filler] * (color_count - len(colors)))
    return colors
