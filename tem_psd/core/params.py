"""
Analysis parameter data structure.

Holds every user-adjustable value of the TEM size-distribution pipeline,
with the defaults of the interactive application.
"""

from __future__ import annotations
import math
from dataclasses import dataclass


@dataclass
class Params:
    """Configuration parameters for thresholding, segmentation and sizing."""

    # Scale bar
    scalebar_length: float = 100.0
    unit: str = "nm"

    # Thresholding
    threshold: float = 0.5
    repair: bool = False

    # Markers / watershed
    quantile: float = 0.9
    connectivity: int = 8

    # Border exclusion (px)
    border_width: float = 10.0

    # Size window (physical units)
    min_size: float = 0.0
    max_size: float = 20.0

    def validate(self) -> "Params":
        """Raise ValueError on out-of-range values; return self for chaining."""
        if not (math.isfinite(self.scalebar_length) and self.scalebar_length > 0):
            raise ValueError("scalebar_length must be a positive number.")
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError("threshold must lie in [0, 1].")
        if not 0.0 <= self.quantile <= 1.0:
            raise ValueError("quantile must lie in [0, 1].")
        if self.connectivity not in (4, 8):
            raise ValueError("connectivity must be 4 or 8.")
        if self.border_width < 0:
            raise ValueError("border_width must be >= 0.")
        if self.min_size >= self.max_size:
            raise ValueError("min_size must be smaller than max_size.")
        return self
