import numpy as np
import pytest
from tem_psd.core import binarize, distance_field, DegenerateMaskError, DimensionMismatchError


def test_distance_zero_exactly_on_background(rng):
    mask = rng.random((40, 40)) > 0.3
    d = distance_field(mask)
    assert d.shape == mask.shape and d.dtype == np.float64
    assert np.array_equal(d == 0, ~mask)
    assert (d[mask] >= 1.0).all()


def test_distance_is_euclidean():
    mask = np.zeros((30, 30), bool)
    mask[10:20, 5:25] = True
    d = distance_field(mask)
    assert d.max() == pytest.approx(5.0)
    assert d[10, 12] == pytest.approx(1.0)


def test_distance_disk_max(disk_image):
    d = distance_field(binarize(disk_image, 0.5))
    assert d.max() == pytest.approx(10.0, abs=1.5)
    assert np.unravel_index(np.argmax(d), d.shape) == (50, 50)


def test_distance_errors():
    with pytest.raises(DegenerateMaskError):
        distance_field(np.ones((5, 5), bool))
    with pytest.raises(DimensionMismatchError):
        distance_field(np.ones(5, bool))
