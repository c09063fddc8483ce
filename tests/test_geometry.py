"""
Tests for the geometry module.
"""

import random

import pytest

from object_detection.geometry import iou


def test_iou_identity():
    """A box with positive area overlaps itself completely."""
    assert iou((10, 20, 30, 40), (10, 20, 30, 40)) == pytest.approx(1.0)


def test_iou_symmetric_and_bounded():
    """IoU is symmetric and always within [0, 1]."""
    rng = random.Random(7)
    for _ in range(200):
        a = (rng.uniform(0, 100), rng.uniform(0, 100), rng.uniform(1, 50), rng.uniform(1, 50))
        b = (rng.uniform(0, 100), rng.uniform(0, 100), rng.uniform(1, 50), rng.uniform(1, 50))
        assert iou(a, b) == pytest.approx(iou(b, a))
        assert 0.0 <= iou(a, b) <= 1.0


def test_iou_partial_overlap():
    """Two 10x10 boxes offset by half a width share a third of their union."""
    # intersection 5*10 = 50, union 100 + 100 - 50 = 150
    assert iou((0, 0, 10, 10), (5, 0, 10, 10)) == pytest.approx(50 / 150)


def test_iou_disjoint_boxes():
    """Boxes that do not overlap have IoU 0, never negative."""
    assert iou((0, 0, 10, 10), (20, 20, 10, 10)) == 0.0
    # Touching edges only
    assert iou((0, 0, 10, 10), (10, 0, 10, 10)) == 0.0


def test_iou_contained_box():
    """A box inside another gives the area ratio."""
    assert iou((0, 0, 10, 10), (0, 0, 5, 5)) == pytest.approx(25 / 100)


def test_iou_degenerate_boxes():
    """Two zero-area boxes give 0 instead of a division error."""
    assert iou((5, 5, 0, 0), (5, 5, 0, 0)) == 0.0
    assert iou((5, 5, 0, 10), (0, 0, 10, 10)) == 0.0
