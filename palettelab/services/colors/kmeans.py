"""
K-means palette extraction.

Clusters sampled pixels in RGB using a redmean-weighted distance and
k-means++ seeding. Degenerate input (fewer pixels than clusters, an empty
sample, identical pixels) is padded rather than rejected, so the extractor
always returns exactly k colors.
"""

from typing import List, Optional

import numpy as np
from loguru import logger

from .conversion import RGB, luminance

NEUTRAL_GRAY = (128, 128, 128)
DEFAULT_MAX_ITERATIONS = 20
CONVERGENCE_DISTANCE = 1.0


def redmean_distance_sq(pixels: np.ndarray, color: np.ndarray) -> np.ndarray:
    """
    Squared redmean distance between every row of `pixels` and one color.

    The red and blue weights depend on the mean red level of the two
    points; green is weighted flat at 4.
    """
    pixels = pixels.astype(np.float64)
    color = np.asarray(color, dtype=np.float64)
    r_mean = (pixels[:, 0] + color[0]) / 2.0
    dr = pixels[:, 0] - color[0]
    dg = pixels[:, 1] - color[1]
    db = pixels[:, 2] - color[2]
    return (2.0 + r_mean / 256.0) * dr * dr + 4.0 * dg * dg + (2.0 + (255.0 - r_mean) / 256.0) * db * db


def redmean_distance(c1, c2) -> float:
    """Redmean distance between two RGB colors."""
    return float(np.sqrt(redmean_distance_sq(np.asarray([c1]), np.asarray(c2))[0]))


def _pad_pixels(pixels: np.ndarray, k: int) -> np.ndarray:
    if len(pixels) == 0:
        return np.tile(np.array(NEUTRAL_GRAY, dtype=np.float64), (k, 1))
    if len(pixels) < k:
        filler = np.tile(pixels[:1], (k - len(pixels), 1))
        return np.vstack([pixels, filler])
    return pixels


def seed_centroids(pixels: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    """
    Choose k initial centroids with k-means++.

    The first centroid is uniform; each further one is drawn with probability
    proportional to the squared distance to its nearest chosen centroid. When
    every pixel already coincides with a centroid the draw falls back to
    uniform.
    """
    n = len(pixels)
    centroids = np.empty((k, 3), dtype=np.float64)
    centroids[0] = pixels[rng.integers(n)]
    nearest_sq = redmean_distance_sq(pixels, centroids[0])

    for i in range(1, k):
        total = float(nearest_sq.sum())
        if total <= 0.0:
            index = int(rng.integers(n))
        else:
            threshold = rng.random() * total
            index = int(np.searchsorted(np.cumsum(nearest_sq), threshold, side="right"))
            index = min(index, n - 1)
        centroids[i] = pixels[index]
        nearest_sq = np.minimum(nearest_sq, redmean_distance_sq(pixels, centroids[i]))

    return centroids


def assign_clusters(pixels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of the nearest centroid for every pixel."""
    distances = np.stack([redmean_distance_sq(pixels, c) for c in centroids], axis=1)
    return np.argmin(distances, axis=1)


def kmeans_palette(pixels_rgb: np.ndarray, k: int,
                   max_iterations: int = DEFAULT_MAX_ITERATIONS,
                   rng: Optional[np.random.Generator] = None) -> List[RGB]:
    """
    Cluster pixels into k representative colors.

    Args:
        pixels_rgb: Sampled RGB pixels (N, 3)
        k: Number of clusters (palette size)
        max_iterations: Upper bound on Lloyd iterations
        rng: Random source for seeding; unseeded when omitted

    Returns:
        k RGB tuples sorted by descending luminance
    """
    if rng is None:
        rng = np.random.default_rng()

    pixels = np.asarray(pixels_rgb, dtype=np.float64).reshape(-1, 3)
    pixels = _pad_pixels(pixels, k)

    centroids = seed_centroids(pixels, k, rng)

    iterations = 0
    for iterations in range(1, max_iterations + 1):
        labels = assign_clusters(pixels, centroids)

        updated = centroids.copy()
        for i in range(k):
            members = pixels[labels == i]
            if len(members):
                updated[i] = members.mean(axis=0)

        moved = np.sqrt(np.max(np.stack([
            redmean_distance_sq(updated[i:i + 1], centroids[i]) for i in range(k)
        ])))
        centroids = updated
        if moved < CONVERGENCE_DISTANCE:
            break

    logger.debug(f"K-means finished after {iterations} iterations (k={k}, n={len(pixels)})")

    colors = [tuple(int(np.floor(c + 0.5)) for c in centroid) for centroid in centroids]
    colors.sort(key=lambda rgb: luminance(*rgb), reverse=True)
    return colors
