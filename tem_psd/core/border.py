"""
Border exclusion.

Particles cut by the image edge are truncated and would bias the size
distribution. A segment is dropped entirely if any of its pixels lies in
the band of width `margin` along the edge (0-based rows/cols):
row <= margin, row >= H-1-margin, col <= margin or col >= W-1-margin.
"""

from __future__ import annotations
import logging
import numpy as np

from .errors import check_2d

logger = logging.getLogger(__name__)


def border_band(shape: tuple[int, int], margin: float) -> np.ndarray:
    """Boolean mask of pixels inside the exclusion band."""
    h, w = shape
    rows = np.arange(h)[:, None]
    cols = np.arange(w)[None, :]
    return (
        (rows <= margin) | (rows >= h - 1 - margin)
        | (cols <= margin) | (cols >= w - 1 - margin)
    )


def filter_border(label_map: np.ndarray, margin: float) -> np.ndarray:
    """Return a copy of `label_map` with every segment touching the band set to 0."""
    check_2d("label map", label_map)
    if margin < 0:
        raise ValueError(f"margin must be >= 0, got {margin!r}")
    touching = np.unique(label_map[border_band(label_map.shape, margin)])
    touching = touching[touching > 0]
    out = label_map.copy()
    if touching.size:
        out[np.isin(out, touching)] = 0
    logger.debug("Border filter: margin=%s, removed %d segments", margin, touching.size)
    return out
