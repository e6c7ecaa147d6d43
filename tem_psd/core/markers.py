"""
Marker extraction.

Markers are the pixels farthest from the background: with quantile q, a
pixel qualifies when its distance exceeds the q-th quantile of all
distances (background zeros included). Touching marker pixels form one seed.
"""

from __future__ import annotations
import logging
import cv2
import numpy as np

from .errors import check_2d

logger = logging.getLogger(__name__)


def marker_threshold(field: np.ndarray, quantile: float) -> float:
    """Distance d* such that a fraction `quantile` of all pixels lie at or below it."""
    check_2d("distance field", field)
    if not 0.0 <= quantile <= 1.0:
        raise ValueError(f"quantile must lie in [0, 1], got {quantile!r}")
    if field.size == 0:
        return 0.0
    return float(np.quantile(field, quantile))


def extract_markers(field: np.ndarray, quantile: float, connectivity: int = 8) -> np.ndarray:
    """
    Label marker seeds of a distance field.

    Candidates are pixels with distance strictly above `marker_threshold`;
    raising `quantile` never adds candidates. Connected candidates share a
    label; labels run 1..n in raster order of their first pixel.

    Returns:
        int32 label map, 0 outside markers.
    """
    if connectivity not in (4, 8):
        raise ValueError(f"connectivity must be 4 or 8, got {connectivity!r}")
    d_star = marker_threshold(field, quantile)
    candidates = (field > d_star).astype(np.uint8)
    n, labels = cv2.connectedComponents(candidates, connectivity=connectivity, ltype=cv2.CV_32S)
    labels = _raster_order(labels, n)
    logger.debug("Markers: q=%.3f, d*=%.3f px, %d candidate pixels, %d seeds",
                 quantile, d_star, int(candidates.sum()), n - 1)
    return labels


def _raster_order(labels: np.ndarray, n: int) -> np.ndarray:
    """Renumber labels 1..n-1 by the raster position of their first pixel."""
    ids, first = np.unique(labels.ravel(), return_index=True)
    keep = ids > 0
    ordered = ids[keep][np.argsort(first[keep], kind="stable")]
    lut = np.zeros(max(n, 1), np.int32)
    lut[ordered] = np.arange(1, ordered.size + 1, dtype=np.int32)
    return lut[labels]
