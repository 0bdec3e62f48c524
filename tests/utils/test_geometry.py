"""
Unit tests for geometry utilities.
"""

import numpy as np
import pytest

from src.utils.geometry import order_corners, quadrilateral_from_points


class TestOrderCorners:
    """Tests for order_corners function."""

    def test_shuffled_rectangle(self):
        pts = np.array([[100, 100], [0, 100], [100, 0], [0, 0]])
        ordered = order_corners(pts)

        np.testing.assert_array_equal(ordered, [[0, 0], [100, 0], [100, 100], [0, 100]])

    def test_tilted_quad(self):
        pts = [[320, 400], [100, 200], [80, 380], [300, 150]]
        tl, tr, br, bl = order_corners(pts)

        np.testing.assert_array_equal(tl, [100, 200])
        np.testing.assert_array_equal(tr, [300, 150])
        np.testing.assert_array_equal(br, [320, 400])
        np.testing.assert_array_equal(bl, [80, 380])

    def test_invalid_shape(self):
        with pytest.raises(ValueError, match="Expected exactly 4 points"):
            order_corners([[0, 0], [1, 1]])


class TestQuadrilateralFromPoints:
    """Tests for quadrilateral_from_points function."""

    def test_builds_ordered_quadrilateral(self):
        quad = quadrilateral_from_points([[600, 800], [0, 0], [0, 800], [600, 0]])

        assert quad.top_left.to_tuple() == (0.0, 0.0)
        assert quad.top_right.to_tuple() == (600.0, 0.0)
        assert quad.bottom_right.to_tuple() == (600.0, 800.0)
        assert quad.bottom_left.to_tuple() == (0.0, 800.0)
        assert quad.aspect_ratio == pytest.approx(0.75)
