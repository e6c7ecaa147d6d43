"""
Image I/O utilities.

Loads TEM micrographs as grayscale float images normalized to [0, 1],
the representation every pipeline stage expects.
"""

from __future__ import annotations
import logging
import cv2
import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def to_unit_range(arr: np.ndarray) -> np.ndarray:
    """Convert an integer or float grayscale array to float64 in [0, 1]."""
    if arr.ndim == 3:
        arr = cv2.cvtColor(arr, cv2.COLOR_BGR2GRAY)
    if np.issubdtype(arr.dtype, np.integer):
        return arr.astype(np.float64) / float(np.iinfo(arr.dtype).max)
    out = arr.astype(np.float64)
    lo, hi = (float(out.min()), float(out.max())) if out.size else (0.0, 1.0)
    if lo < 0.0 or hi > 1.0:
        # Normalize out-of-range float data (e.g. raw-count TIFF) by min/max
        logger.warning("Float image outside [0, 1] (min=%g, max=%g); rescaling by min/max", lo, hi)
        out = cv2.normalize(out, None, 0.0, 1.0, cv2.NORM_MINMAX)
    return out


def imread_gray(path: str) -> np.ndarray:
    """Read an image and return it as a float64 grayscale array in [0, 1]."""
    img = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if img is None:
        # Fallback: use Pillow if OpenCV fails
        pil = Image.open(path)
        if pil.mode not in ("L", "I;16", "I;16B", "I;16L"):
            pil = pil.convert("L")
        img = np.array(pil)
        logger.debug("Loaded %s through Pillow (mode %s)", path, pil.mode)

    if img.ndim == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    out = to_unit_range(img)
    logger.debug("Loaded %s: shape=%s, dtype=%s", path, out.shape, img.dtype)
    return out
