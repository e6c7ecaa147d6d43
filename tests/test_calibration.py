import numpy as np
import pytest
from tem_psd.core import Rectangle, calibrate, EmptySelectionError, DegenerateScaleError, DimensionMismatchError


def _strip_image():
    img = np.zeros((20, 60))
    img[10, 5:55] = 1.0  # 1x50 white strip
    return img


def test_calibrate_strip_scale():
    scale, bar = calibrate(_strip_image(), Rectangle(0, 0, 20, 60), 100.0)
    assert scale == pytest.approx(100.0 / 49.0, rel=1e-9)
    assert bar.shape == (20, 60) and bar.sum() == 50


def test_calibrate_uses_only_brightest_pixels():
    img = _strip_image()
    img[3, 0:60] = 0.9  # тьмяніша лінія не входить у шкалу
    scale, _ = calibrate(img, Rectangle(0, 0, 20, 60), 49.0)
    assert scale == pytest.approx(1.0)


def test_calibrate_selection_clipped_to_image():
    scale, bar = calibrate(_strip_image(), Rectangle(5, 0, 100, 30), 100.0)
    assert bar.shape == (15, 30)
    assert scale == pytest.approx(100.0 / 24.0)


def test_calibrate_errors():
    img = _strip_image()
    with pytest.raises(DegenerateScaleError):
        calibrate(img, Rectangle(10, 5, 1, 1), 100.0)
    with pytest.raises(EmptySelectionError):
        calibrate(img, Rectangle(50, 80, 5, 5), 100.0)
    with pytest.raises(DegenerateScaleError):
        calibrate(img, Rectangle(0, 0, 20, 60), 0.0)
    nan = np.full((4, 4), np.nan)
    with pytest.raises(EmptySelectionError):
        calibrate(nan, Rectangle(0, 0, 4, 4), 10.0)
    with pytest.raises(DimensionMismatchError):
        calibrate(np.zeros(5), Rectangle(0, 0, 1, 5), 10.0)
