import numpy as np
import cv2
import pytest


def _to_unit(img: np.ndarray) -> np.ndarray:
    return img.astype(np.float64) / 255.0


@pytest.fixture
def rng():
    return np.random.default_rng(0)


@pytest.fixture
def disk_image():
    # 100x100, темний диск r=10 у центрі на світлому фоні
    img = np.full((100, 100), 255, np.uint8)
    cv2.circle(img, (50, 50), 10, 0, -1)
    return _to_unit(img)


@pytest.fixture
def two_disks_mask():
    # два диски r=14, центри на відстані 25 px (стикаються)
    m = np.zeros((100, 100), np.uint8)
    cv2.circle(m, (37, 50), 14, 1, -1)
    cv2.circle(m, (62, 50), 14, 1, -1)
    return m.astype(bool)


@pytest.fixture
def holey_disk_image():
    # dark particle with a bright hole inside
    img = np.full((80, 80), 255, np.uint8)
    cv2.circle(img, (40, 40), 15, 0, -1)
    cv2.circle(img, (40, 40), 3, 255, -1)
    return _to_unit(img)


@pytest.fixture
def particles_image(rng):
    img = np.full((160, 160), 230, np.uint8)
    cv2.circle(img, (40, 40), 9, 30, -1)
    cv2.circle(img, (100, 45), 12, 40, -1)
    cv2.circle(img, (60, 110), 10, 20, -1)
    cv2.rectangle(img, (105, 95), (125, 115), 35, -1)
    noise = rng.normal(0, 3, img.shape).astype(np.int16)
    img = np.clip(img.astype(np.int16) + noise, 0, 255).astype(np.uint8)
    return _to_unit(img)
