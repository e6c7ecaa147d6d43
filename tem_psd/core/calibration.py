"""
Scale-bar calibration.

The user selects a rectangle around the scale bar and types its physical
length. The brightest pixels of the selection are taken as the bar stroke;
the horizontal span between the left-most and right-most of them gives
the pixel length of the bar.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Tuple
import numpy as np

from .errors import EmptySelectionError, DegenerateScaleError, check_2d

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned pixel selection: rows [top, top+height), cols [left, left+width)."""
    top: int
    left: int
    height: int
    width: int

    def clip(self, shape: Tuple[int, int]) -> Tuple[slice, slice]:
        """Return (row_slice, col_slice) restricted to an image of `shape`."""
        h, w = shape
        r0 = min(max(0, int(self.top)), h)
        c0 = min(max(0, int(self.left)), w)
        r1 = min(max(r0, int(self.top) + int(self.height)), h)
        c1 = min(max(c0, int(self.left) + int(self.width)), w)
        return slice(r0, r1), slice(c0, c1)


def calibrate(image: np.ndarray, rectangle: Rectangle, physical_length: float) -> Tuple[float, np.ndarray]:
    """
    Derive the physical size of one pixel from a selected scale bar.

    Args:
        image: Grayscale image in [0, 1].
        rectangle: Selection around the scale bar.
        physical_length: Length of the bar in physical units (e.g. nm).

    Returns:
        (scale_factor, bar_mask): units per pixel, and the boolean mask of the
        detected bar pixels within the selection (for display).

    Raises:
        EmptySelectionError: selection is empty or no pixel equals its maximum.
        DegenerateScaleError: bar spans a single column, or invalid length.
    """
    check_2d("image", image)
    length = float(physical_length)
    if not (math.isfinite(length) and length > 0):
        raise DegenerateScaleError(f"Physical length must be positive and finite, got {physical_length!r}.")

    rows, cols = rectangle.clip(image.shape)
    sub = image[rows, cols]
    if sub.size == 0:
        raise EmptySelectionError("Selection does not overlap the image.")

    maxi = sub.max()
    bar = sub == maxi
    ys, xs = np.nonzero(bar)
    if xs.size == 0:
        raise EmptySelectionError("No pixel of the selection reaches its maximum intensity.")

    span = int(xs.max()) - int(xs.min())
    if span == 0:
        raise DegenerateScaleError("Scale bar spans a single pixel column.")

    scale = length / span
    logger.debug("Scale bar: %d px span, %d bar pixels, %.6g units/px", span, xs.size, scale)
    return scale, bar
