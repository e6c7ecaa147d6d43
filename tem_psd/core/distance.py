"""
Euclidean distance transform of a particle mask.

Each particle pixel receives its distance to the nearest background pixel;
background pixels are 0. Deep particle cores are the maxima the watershed
floods from.
"""

from __future__ import annotations
import logging
import cv2
import numpy as np

from .errors import DegenerateMaskError, check_2d

logger = logging.getLogger(__name__)


def distance_field(mask: np.ndarray) -> np.ndarray:
    """Return the exact Euclidean distance transform (float64) of `mask`."""
    check_2d("mask", mask)
    obj = (np.asarray(mask) > 0).astype(np.uint8)
    if obj.size and obj.min() > 0:
        raise DegenerateMaskError("Mask has no background pixel; threshold too high?")
    dist = cv2.distanceTransform(obj, cv2.DIST_L2, cv2.DIST_MASK_PRECISE).astype(np.float64)
    logger.debug("Distance field: max=%.3f px over %d foreground pixels",
                 float(dist.max()) if dist.size else 0.0, int(obj.sum()))
    return dist
