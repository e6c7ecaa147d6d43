# Публічне API пакета core (re-export)
from .errors import (
    PipelineError,
    EmptySelectionError,
    DegenerateScaleError,
    EmptySampleError,
    DimensionMismatchError,
    DegenerateMaskError,
)
from .io_utils import imread_gray, to_unit_range
from .calibration import Rectangle, calibrate
from .threshold import binarize, repair_mask, seeded_region_growing
from .distance import distance_field
from .markers import marker_threshold, extract_markers
from .watershed import watershed
from .border import border_band, filter_border
from .measure import (
    FittedDistribution,
    segment_areas,
    fit_normal,
    measure_sizes,
    estimate_sizes,
    stats_from_sizes,
)
from .params import Params
from .session import PipelineSession, STAGES

__all__ = [
    # errors
    "PipelineError", "EmptySelectionError", "DegenerateScaleError", "EmptySampleError",
    "DimensionMismatchError", "DegenerateMaskError",
    # io
    "imread_gray", "to_unit_range",
    # calibration
    "Rectangle", "calibrate",
    # threshold / repair
    "binarize", "repair_mask", "seeded_region_growing",
    # distance & markers
    "distance_field", "marker_threshold", "extract_markers",
    # watershed & border
    "watershed", "border_band", "filter_border",
    # measurement & stats
    "FittedDistribution", "segment_areas", "fit_normal", "measure_sizes", "estimate_sizes", "stats_from_sizes",
    # params / session
    "Params", "PipelineSession", "STAGES",
]
