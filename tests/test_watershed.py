import numpy as np
import cv2
import pytest
from tem_psd.core import binarize, distance_field, extract_markers, watershed, DimensionMismatchError


def _disk_markers(shape, centers, r=3):
    m = np.zeros(shape, np.uint8)
    for lab, (x, y) in enumerate(centers, start=1):
        cv2.circle(m, (x, y), r, lab, -1)
    return m.astype(np.int32)


def test_single_disk_one_label(disk_image):
    mask = binarize(disk_image, 0.5)
    d = distance_field(mask)
    labels = watershed(d, extract_markers(d, 0.9), mask)
    assert set(np.unique(labels)) == {0, 1}
    assert np.array_equal(labels > 0, mask)


def test_two_touching_disks_split_on_midline(two_disks_mask):
    mask = two_disks_mask
    d = distance_field(mask)
    markers = _disk_markers(mask.shape, [(37, 50), (62, 50)])
    labels = watershed(d, markers, mask)

    assert set(np.unique(labels)) == {0, 1, 2}
    assert labels[50, 37] == 1 and labels[50, 62] == 2
    # лінія вододілу лише біля рівновіддалених колонок 49/50
    _, zc = np.nonzero(mask & (labels == 0))
    assert zc.size > 0 and set(zc.tolist()) <= {48, 49, 50, 51}
    assert 1 <= int((mask[50] & (labels[50] == 0)).sum()) <= 2
    # no pixel of one segment touches the other (8-neighbourhood)
    one = (labels == 1).astype(np.uint8)
    grown = cv2.dilate(one, np.ones((3, 3), np.uint8)).astype(bool)
    assert not (grown & (labels == 2)).any()


def test_segments_stay_connected_to_their_seed(two_disks_mask):
    mask = two_disks_mask
    d = distance_field(mask)
    markers = _disk_markers(mask.shape, [(37, 50), (62, 50)])
    labels = watershed(d, markers, mask)
    for lab in (1, 2):
        n, comp = cv2.connectedComponents((labels == lab).astype(np.uint8), connectivity=8)
        assert n == 2
        assert (comp[markers == lab] == 1).all()


def test_equidistant_pixel_on_flat_strip_becomes_line():
    field = np.ones((1, 5))
    markers = np.array([[1, 0, 0, 0, 2]], np.int32)
    labels = watershed(field, markers, np.ones((1, 5), bool))
    assert labels.tolist() == [[1, 1, 0, 2, 2]]
    assert np.array_equal(watershed(field, markers, np.ones((1, 5), bool)), labels)


def test_unmarked_particle_stays_unlabeled():
    mask = np.zeros((120, 120), np.uint8)
    cv2.circle(mask, (40, 50), 18, 1, -1)
    cv2.circle(mask, (85, 60), 6, 1, -1)
    mask = mask.astype(bool)
    d = distance_field(mask)
    markers = _disk_markers(mask.shape, [(40, 50)])
    labels = watershed(d, markers, mask)

    small = np.zeros(mask.shape, np.uint8)
    cv2.circle(small, (85, 60), 6, 1, -1)
    assert labels[60, 85] == 0
    assert not labels[small.astype(bool)].any()
    # the marked disk is one connected segment
    n, _ = cv2.connectedComponents((labels == 1).astype(np.uint8), connectivity=8)
    assert n == 2


def test_clipped_to_mask_and_inputs_untouched(two_disks_mask):
    mask = two_disks_mask
    d = distance_field(mask)
    markers = _disk_markers(mask.shape, [(37, 50), (62, 50)])
    m_before, d_before = markers.copy(), d.copy()
    labels = watershed(d, markers, mask)
    assert not labels[~mask].any()
    assert np.array_equal(markers, m_before) and np.array_equal(d, d_before)


def test_no_markers_and_shape_mismatch():
    d = np.ones((5, 5))
    assert not watershed(d, np.zeros((5, 5), np.int32), np.ones((5, 5), bool)).any()
    with pytest.raises(DimensionMismatchError):
        watershed(d, np.zeros((4, 5), np.int32), np.ones((5, 5), bool))
    with pytest.raises(ValueError):
        watershed(d, np.ones((5, 5), np.int32), np.ones((5, 5), bool), connectivity=6)
