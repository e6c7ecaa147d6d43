"""
Pipeline session.

Holds the current image, parameters and the latest artifact of every
stage for an interactive front-end. Changing a parameter drops only the
artifacts downstream of the stage it affects; they are recomputed lazily
on the next access. Stored artifacts are read-only arrays.
"""

from __future__ import annotations
import logging
from dataclasses import replace
from typing import Any, Dict, Optional, Tuple
import numpy as np

from .params import Params
from .errors import PipelineError, DegenerateScaleError, check_2d
from .calibration import Rectangle, calibrate
from .threshold import binarize
from .distance import distance_field
from .markers import extract_markers
from .watershed import watershed
from .border import filter_border
from .measure import FittedDistribution, estimate_sizes, measure_sizes

logger = logging.getLogger(__name__)

STAGES = ("mask", "distance", "markers", "segments", "filtered", "sizes")

# first stage invalidated by each parameter (None = no pipeline stage)
_PARAM_STAGE = {
    "threshold": "mask",
    "repair": "mask",
    "quantile": "markers",
    "connectivity": "markers",
    "border_width": "filtered",
    "min_size": "sizes",
    "max_size": "sizes",
    "scalebar_length": "sizes",
    "unit": None,
}


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


class PipelineSession:
    """Latest artifact per stage, with downstream invalidation."""

    def __init__(self, image: Optional[np.ndarray] = None, params: Optional[Params] = None) -> None:
        self.params = (params or Params()).validate()
        self.image: Optional[np.ndarray] = None
        self.scale_factor: Optional[float] = None
        self.bar_mask: Optional[np.ndarray] = None
        self._selection: Optional[Rectangle] = None
        self._artifacts: Dict[str, Any] = {}
        if image is not None:
            self.set_image(image)

    # ---- inputs ----
    def set_image(self, image: np.ndarray) -> None:
        """Replace the image; every artifact and the calibration are dropped."""
        check_2d("image", image)
        self.image = _frozen(np.array(image, dtype=np.float64))
        self.scale_factor = None
        self.bar_mask = None
        self._selection = None
        self._artifacts.clear()
        logger.info("New image %s; all artifacts dropped", self.image.shape)

    def calibrate(self, rectangle: Rectangle) -> float:
        """Calibrate the scale from a scale-bar selection and `params.scalebar_length`."""
        image = self._require_image()
        scale, bar = calibrate(image, rectangle, self.params.scalebar_length)
        self._selection = rectangle
        self._set_scale(scale, _frozen(bar))
        return scale

    def set_scale(self, scale_factor: float) -> None:
        """Set the scale directly (units per pixel), e.g. from instrument metadata."""
        scale = float(scale_factor)
        if not (np.isfinite(scale) and scale > 0):
            raise DegenerateScaleError(f"Scale factor must be positive and finite, got {scale_factor!r}.")
        self._selection = None
        self._set_scale(scale, None)

    def update(self, **changes) -> None:
        """Replace parameters and invalidate the stages they affect."""
        unknown = set(changes) - set(_PARAM_STAGE)
        if unknown:
            raise ValueError(f"Unknown parameter(s): {', '.join(sorted(unknown))}")
        new = replace(self.params, **changes).validate()
        changed = [k for k in changes if getattr(new, k) != getattr(self.params, k)]
        self.params = new
        if "scalebar_length" in changed and self._selection is not None:
            scale, bar = calibrate(self._require_image(), self._selection, new.scalebar_length)
            self.scale_factor, self.bar_mask = scale, _frozen(bar)
        stages = [_PARAM_STAGE[k] for k in changed if _PARAM_STAGE[k] is not None]
        if stages:
            self.invalidate(min(stages, key=STAGES.index))

    def invalidate(self, stage: str) -> None:
        """Drop `stage` and everything downstream of it."""
        dropped = [s for s in STAGES[STAGES.index(stage):] if self._artifacts.pop(s, None) is not None]
        if dropped:
            logger.info("Invalidated %s", ", ".join(dropped))

    # ---- artifacts ----
    @property
    def mask(self) -> np.ndarray:
        return self.get("mask")

    @property
    def distance(self) -> np.ndarray:
        return self.get("distance")

    @property
    def markers(self) -> np.ndarray:
        return self.get("markers")

    @property
    def segments(self) -> np.ndarray:
        return self.get("segments")

    @property
    def filtered(self) -> np.ndarray:
        return self.get("filtered")

    @property
    def sizes(self) -> np.ndarray:
        return self.get("sizes")[0]

    @property
    def fit(self) -> FittedDistribution:
        return self.get("sizes")[1]

    def accepted(self) -> Tuple[np.ndarray, np.ndarray]:
        """(labels, sizes) of the segments inside the size window."""
        P = self.params
        return measure_sizes(self.filtered, self._require_scale(), P.min_size, P.max_size)

    def get(self, stage: str) -> Any:
        """Return the artifact of `stage`, computing it (and its inputs) if stale."""
        if stage not in STAGES:
            raise ValueError(f"Unknown stage {stage!r}")
        if stage not in self._artifacts:
            self._artifacts[stage] = self._compute(stage)
            logger.info("Computed %s", stage)
        return self._artifacts[stage]

    def run(self, until: str = "sizes") -> "PipelineSession":
        """Compute every stage up to and including `until`."""
        for stage in STAGES[: STAGES.index(until) + 1]:
            self.get(stage)
        return self

    def is_current(self, stage: str) -> bool:
        return stage in self._artifacts

    # ---- internals ----
    def _compute(self, stage: str) -> Any:
        P = self.params
        if stage == "mask":
            return _frozen(binarize(self._require_image(), P.threshold, P.repair))
        if stage == "distance":
            return _frozen(distance_field(self.mask))
        if stage == "markers":
            return _frozen(extract_markers(self.distance, P.quantile, P.connectivity))
        if stage == "segments":
            return _frozen(watershed(self.distance, self.markers, self.mask, P.connectivity))
        if stage == "filtered":
            return _frozen(filter_border(self.segments, P.border_width))
        sizes, fit = estimate_sizes(self.filtered, self._require_scale(), P.min_size, P.max_size)
        return _frozen(sizes), fit

    def _set_scale(self, scale: float, bar: Optional[np.ndarray]) -> None:
        self.scale_factor = scale
        self.bar_mask = bar
        self.invalidate("sizes")
        logger.info("Scale set to %.6g %s/px", scale, self.params.unit)

    def _require_image(self) -> np.ndarray:
        if self.image is None:
            raise PipelineError("No image loaded.")
        return self.image

    def _require_scale(self) -> float:
        if self.scale_factor is None:
            raise DegenerateScaleError("Scale is not calibrated.")
        return self.scale_factor
