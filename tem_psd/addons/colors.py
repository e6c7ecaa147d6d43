"""
Display helpers for label maps and distance fields.

Colours are a pure function of the label id (seeded RNG), so a segment keeps
its colour across re-runs and rendered outputs are reproducible.
"""

from __future__ import annotations
from typing import Tuple
import numpy as np


def label_color(label: int) -> Tuple[int, int, int]:
    """Stable RGB colour (uint8 triple) for a segment id; 0 is black."""
    if label == 0:
        return (0, 0, 0)
    rng = np.random.default_rng(int(label))
    r, g, b = rng.integers(0, 256, size=3)
    return int(r), int(g), int(b)


def colorize_labels(label_map: np.ndarray) -> np.ndarray:
    """Render a label map as an (H, W, 3) uint8 RGB image."""
    ids, inverse = np.unique(label_map, return_inverse=True)
    palette = np.array([label_color(int(i)) for i in ids], dtype=np.uint8).reshape(-1, 3)
    return palette[inverse.reshape(label_map.shape)]


def distance_display(field: np.ndarray, q: float = 0.995) -> np.ndarray:
    """Scale a distance field to [0, 1] by its q-quantile, clipping the top."""
    top = float(np.quantile(field, q)) if field.size else 0.0
    if top <= 0:
        top = float(field.max()) if field.size and field.max() > 0 else 1.0
    return np.clip(field / top, 0.0, 1.0)
