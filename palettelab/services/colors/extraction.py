"""
Palette extraction entry point.

Decodes an image once, dispatches to the selected extractor and returns an
uppercase hex palette sorted by luminance. Any failure falls back to a
fixed palette so callers always receive `color_count` colors.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

import numpy as np
from loguru import logger

from palettelab.config import config
from .conversion import RGB, rgb_to_hex
from .decoding import ImageRef, prepare_pixels
from .hue_histogram import build_samples, histogram_palette
from .kmeans import DEFAULT_MAX_ITERATIONS, kmeans_palette

FALLBACK_PALETTE = (
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7",
    "#DDA0DD", "#98D8C8", "#F7DC6F", "#BB8FCE", "#85C1E9",
)


class ExtractionMethod(str, Enum):
    """Palette extraction strategies."""
    KMEANS = "kmeans"
    HISTOGRAM = "histogram"


class KMeansExtractor:
    """Redmean k-means clustering extractor."""

    def __init__(self, max_iterations: int = DEFAULT_MAX_ITERATIONS,
                 rng: Optional[np.random.Generator] = None):
        self.max_iterations = max_iterations
        self.rng = rng

    @property
    def name(self) -> str:
        return ExtractionMethod.KMEANS.value

    def extract(self, pixels_rgb: np.ndarray, count: int) -> List[RGB]:
        return kmeans_palette(pixels_rgb, count, max_iterations=self.max_iterations, rng=self.rng)


class HueHistogramExtractor:
    """Hue-histogram peak extractor."""

    @property
    def name(self) -> str:
        return ExtractionMethod.HISTOGRAM.value

    def extract(self, pixels_rgb: np.ndarray, count: int) -> List[RGB]:
        return histogram_palette(build_samples(pixels_rgb), count)


def get_extractor(method: Union[ExtractionMethod, str],
                  max_iterations: int = DEFAULT_MAX_ITERATIONS,
                  rng: Optional[np.random.Generator] = None):
    """Build the extractor for a method (raises ValueError for unknown names)."""
    method = ExtractionMethod(method)
    if method is ExtractionMethod.KMEANS:
        return KMeansExtractor(max_iterations=max_iterations, rng=rng)
    return HueHistogramExtractor()


def fallback_palette(color_count: int) -> List[str]:
    """First `color_count` entries of the fixed fallback palette."""
    return list(FALLBACK_PALETTE[:max(0, color_count)])


@dataclass
class PaletteResult:
    """Outcome of one extraction call."""
    colors: List[str]
    method: str
    fallback_used: bool = False
    sampled_pixels: int = 0
    error: Optional[str] = None


def extract_palette_rgb(image: ImageRef, color_count: int = 5,
                        method: Union[ExtractionMethod, str] = ExtractionMethod.KMEANS,
                        sample_step: Optional[int] = None,
                        max_edge: int = 0,
                        max_iterations: int = DEFAULT_MAX_ITERATIONS,
                        rng: Optional[np.random.Generator] = None) -> Tuple[List[RGB], int]:
    """
    Run extraction without the fallback boundary.

    Returns:
        Tuple of (RGB colors brightest first, number of sampled pixels)

    Raises:
        DecodeFailure: If the image cannot be decoded or has no opaque pixels
        ValueError: For an unknown method, palette size or sample step
    """
    extractor = get_extractor(method, max_iterations=max_iterations, rng=rng)
    step = sample_step if sample_step is not None else config.EXTRACT_SAMPLE_STEP
    if not config.validate_color_count(color_count):
        raise ValueError(f"color_count must be between {config.MIN_COLOR_COUNT} and {config.MAX_COLOR_COUNT}")
    if not config.validate_sample_step(step):
        raise ValueError(f"Invalid sample step: {step}")

    start_time = time.time()
    pixels = prepare_pixels(image, step=step, max_edge=max_edge)
    decode_ms = (time.time() - start_time) * 1000

    start_time = time.time()
    colors = extractor.extract(pixels, color_count)
    extract_ms = (time.time() - start_time) * 1000

    logger.info(f"Extracted {len(colors)} colors with {extractor.name} from {len(pixels)} pixels "
                f"(decode {decode_ms:.1f}ms, extract {extract_ms:.1f}ms)")
    return colors, len(pixels)


def run_extraction(image: ImageRef, color_count: int = 5,
                   method: Union[ExtractionMethod, str] = ExtractionMethod.KMEANS,
                   sample_step: Optional[int] = None,
                   max_edge: int = 0,
                   max_iterations: int = DEFAULT_MAX_ITERATIONS,
                   rng: Optional[np.random.Generator] = None) -> PaletteResult:
    """
    Extract a palette, recording whether the fallback palette was used.

    Never raises: any decode or extraction error yields the fallback
    palette with `fallback_used=True` and the error message attached.
    """
    method_name = method.value if isinstance(method, ExtractionMethod) else str(method)
    try:
        colors, sampled = extract_palette_rgb(
            image, color_count, method,
            sample_step=sample_step, max_edge=max_edge,
            max_iterations=max_iterations, rng=rng,
        )
    except Exception as e:
        logger.warning(f"Palette extraction failed, using fallback palette: {type(e).__name__}: {e}")
        return PaletteResult(
            colors=fallback_palette(color_count),
            method=method_name,
            fallback_used=True,
            error=f"{type(e).__name__}: {e}",
        )

    return PaletteResult(
        colors=[rgb_to_hex(*rgb) for rgb in colors],
        method=method_name,
        sampled_pixels=sampled,
    )


def extract_palette(image: ImageRef, color_count: int = 5,
                    method: Union[ExtractionMethod, str] = ExtractionMethod.KMEANS,
                    sample_step: Optional[int] = None,
                    max_edge: int = 0,
                    max_iterations: int = DEFAULT_MAX_ITERATIONS,
                    rng: Optional[np.random.Generator] = None) -> List[str]:
    """
    Extract a hex palette from an image.

    Args:
        image: Image reference (bytes, base64, path, PIL image or ndarray)
        color_count: Palette size (3-8)
        method: "kmeans" or "histogram"
        sample_step: Pixel sampling stride (default from config)
        max_edge: Downscale bound applied before sampling (0 disables)
        max_iterations: K-means iteration cap
        rng: Random source for k-means seeding

    Returns:
        `color_count` uppercase #RRGGBB strings, brightest first; the fallback
        palette when extraction cannot proceed
    """
    return run_extraction(
        image, color_count, method,
        sample_step=sample_step, max_edge=max_edge,
        max_iterations=max_iterations, rng=rng,
    ).colors
