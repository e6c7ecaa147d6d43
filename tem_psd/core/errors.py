"""
Pipeline error types.

Every stage either returns a valid artifact or raises one of these.
All derive from ValueError so callers may catch them broadly.
"""

from __future__ import annotations


class PipelineError(ValueError):
    """Base class for recoverable pipeline failures."""


class EmptySelectionError(PipelineError):
    """Scale-bar selection contains no qualifying bright pixel."""


class DegenerateScaleError(PipelineError):
    """Scale factor would be zero, negative, infinite or undefined."""


class EmptySampleError(PipelineError):
    """No particle survives the size window."""


class DimensionMismatchError(PipelineError):
    """Stage received grids of inconsistent shape (or not 2-D)."""


class DegenerateMaskError(PipelineError):
    """Mask has no background pixel, so distances are undefined."""


def check_2d(name: str, arr) -> None:
    """Raise DimensionMismatchError unless `arr` is a 2-D array."""
    if getattr(arr, "ndim", None) != 2:
        raise DimensionMismatchError(f"{name} must be a 2-D grid, got ndim={getattr(arr, 'ndim', None)}")


def check_same_shape(**grids) -> None:
    """Raise DimensionMismatchError if the named grids differ in shape."""
    shapes = {k: tuple(v.shape) for k, v in grids.items()}
    if len(set(shapes.values())) > 1:
        desc = ", ".join(f"{k}={s}" for k, s in shapes.items())
        raise DimensionMismatchError(f"Inconsistent grid shapes: {desc}")
