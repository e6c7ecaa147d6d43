"""
Segment measurement and size statistics.

- Count pixels per segment of a label map
- Convert areas to an equivalent side length (sqrt(area) x scale)
- Fit a Normal distribution (maximum likelihood) to the accepted sizes
- Basic PSD stats (D10/50/90, mean, std, min, max)

For square particles sqrt(area) is the side length; for rectangles it is
the geometric mean of both sides.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Dict, Tuple
import numpy as np

from .errors import EmptySampleError, DegenerateScaleError, check_2d

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FittedDistribution:
    """Normal distribution fitted by maximum likelihood (population std)."""
    mean: float
    std: float
    n: int

    def pdf(self, x) -> np.ndarray:
        """Normal density at `x` (inf at the mean when std is 0)."""
        x = np.asarray(x, dtype=np.float64)
        if self.std == 0:
            return np.where(x == self.mean, np.inf, 0.0)
        z = (x - self.mean) / self.std
        return np.exp(-0.5 * z * z) / (self.std * math.sqrt(2.0 * math.pi))

    def describe(self, unit: str = "nm") -> str:
        return f"µ={self.mean:.3g} {unit}, σ={self.std:.3g} {unit}, n={self.n:d} particles"


def segment_areas(label_map: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Return (labels, pixel_counts) for every label > 0 present in the map."""
    check_2d("label map", label_map)
    flat = label_map.ravel()
    if flat.size and flat.min() < 0:
        raise ValueError("Label map contains negative labels.")
    counts = np.bincount(flat.astype(np.int64)) if flat.size else np.zeros(1, np.int64)
    labels = np.flatnonzero(counts)
    labels = labels[labels > 0]
    return labels, counts[labels]


def fit_normal(sizes: np.ndarray) -> FittedDistribution:
    """Maximum-likelihood Normal fit: sample mean and population (ddof=0) std."""
    sizes = np.asarray(sizes, dtype=np.float64)
    if sizes.size == 0:
        raise EmptySampleError("Cannot fit a distribution to an empty sample.")
    return FittedDistribution(mean=float(np.mean(sizes)), std=float(np.std(sizes)), n=int(sizes.size))


def measure_sizes(
    label_map: np.ndarray,
    scale_factor: float,
    min_size: float = 0.0,
    max_size: float = 20.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """Return (labels, sizes) of segments whose size lies strictly inside (min_size, max_size)."""
    scale = float(scale_factor)
    if not (math.isfinite(scale) and scale > 0):
        raise DegenerateScaleError(f"Scale factor must be positive and finite, got {scale_factor!r}.")
    if min_size >= max_size:
        raise ValueError(f"min_size ({min_size}) must be smaller than max_size ({max_size}).")

    labels, areas = segment_areas(label_map)
    sizes = np.sqrt(areas.astype(np.float64)) * scale
    keep = (sizes > min_size) & (sizes < max_size)
    logger.debug("Sizes: %d segments, %d inside (%g, %g)", sizes.size, int(keep.sum()), min_size, max_size)
    return labels[keep], sizes[keep]


def estimate_sizes(
    label_map: np.ndarray,
    scale_factor: float,
    min_size: float = 0.0,
    max_size: float = 20.0,
) -> Tuple[np.ndarray, FittedDistribution]:
    """
    Measure segment sizes and fit their distribution.

    Args:
        label_map: Filtered label map (0 = background).
        scale_factor: Physical units per pixel.
        min_size, max_size: Open window (physical units) of accepted sizes;
            removes merged clusters and isolated noise pixels.

    Returns:
        (sizes, fit): accepted sizes in label order, and the Normal fit.

    Raises:
        DegenerateScaleError: scale is not positive and finite.
        EmptySampleError: no size falls inside the window.
    """
    _, sizes = measure_sizes(label_map, scale_factor, min_size, max_size)
    if sizes.size == 0:
        raise EmptySampleError(f"No particle inside the size window ({min_size}, {max_size}).")
    return sizes, fit_normal(sizes)


def stats_from_sizes(sizes: np.ndarray) -> Dict[str, float | int]:
    """Return basic PSD statistics for an array of particle sizes."""
    sizes = np.asarray(sizes, dtype=np.float64)
    if sizes.size == 0:
        raise EmptySampleError("No particle sizes to summarize.")
    return {
        "particles": int(sizes.size),
        "D10": float(np.percentile(sizes, 10)),
        "D50": float(np.percentile(sizes, 50)),
        "D90": float(np.percentile(sizes, 90)),
        "mean": float(np.mean(sizes)),
        "std": float(np.std(sizes)),
        "min": float(np.min(sizes)),
        "max": float(np.max(sizes)),
    }
