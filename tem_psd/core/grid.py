"""Pixel-neighbourhood helpers for seeded region growing."""

from __future__ import annotations
from typing import Iterator, Tuple
import cv2
import numpy as np

_OFFSETS_4 = ((-1, 0), (0, -1), (0, 1), (1, 0))
_OFFSETS_8 = ((-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1))


def neighbor_offsets(connectivity: int) -> Tuple[Tuple[int, int], ...]:
    """(drow, dcol) offsets for 4- or 8-connectivity, in raster order."""
    if connectivity == 4:
        return _OFFSETS_4
    if connectivity == 8:
        return _OFFSETS_8
    raise ValueError(f"connectivity must be 4 or 8, got {connectivity!r}")


def structuring_element(connectivity: int) -> np.ndarray:
    """3x3 kernel matching the given connectivity (cross or square)."""
    if connectivity == 4:
        return cv2.getStructuringElement(cv2.MORPH_CROSS, (3, 3))
    if connectivity == 8:
        return cv2.getStructuringElement(cv2.MORPH_RECT, (3, 3))
    raise ValueError(f"connectivity must be 4 or 8, got {connectivity!r}")


def iter_neighbors(idx: int, h: int, w: int, offsets) -> Iterator[int]:
    """Yield flat indices of in-bounds neighbours of flat index `idx`."""
    r, c = divmod(idx, w)
    for dr, dc in offsets:
        rr = r + dr
        cc = c + dc
        if 0 <= rr < h and 0 <= cc < w:
            yield rr * w + cc
