import itertools
import math

import cv2
import numpy as np
import pytest

from common.geometry import distance, polygon_area, order_quad, quad_size


class TestDistance:
    def test_distance_345(self):
        assert distance((0, 0), (3, 4)) == 5.0

    def test_distance_symmetric(self):
        assert distance((1.5, -2), (7, 3)) == distance((7, 3), (1.5, -2))


class TestPolygonArea:
    def test_square(self):
        assert polygon_area([(0, 0), (10, 0), (10, 10), (0, 10)]) == 100.0

    def test_orientation_does_not_matter(self):
        clockwise = [(0, 0), (0, 10), (10, 10), (10, 0)]
        assert polygon_area(clockwise) == 100.0

    def test_triangle(self):
        assert polygon_area([(0, 0), (4, 0), (0, 3)]) == 6.0

    def test_degenerate(self):
        assert polygon_area([(0, 0), (5, 5)]) == 0.0


class TestOrderQuad:
    """Tests for corner ordering TL, TR, BR, BL"""

    QUAD = [(10, 20), (110, 5), (130, 90), (20, 120)]

    def test_order_correct(self):
        pts = np.array([
            [100, 200],  # bottom-left
            [100, 100],  # top-left
            [200, 100],  # top-right
            [200, 200]   # bottom-right
        ], dtype=np.float32)

        ordered = order_quad(pts)

        assert np.array_equal(ordered[0], [100, 100])
        assert np.array_equal(ordered[1], [200, 100])
        assert np.array_equal(ordered[2], [200, 200])
        assert np.array_equal(ordered[3], [100, 200])

    def test_permutation_invariant(self):
        expected = order_quad(self.QUAD)
        assert np.array_equal(expected, np.array(self.QUAD, dtype=np.float32))

        for perm in itertools.permutations(self.QUAD):
            assert np.array_equal(order_quad(perm), expected)

    def test_rotated_min_area_rect(self):
        rect = ((300.0, 200.0), (200.0, 100.0), 20.0)
        box = cv2.boxPoints(rect)

        ordered = order_quad(box)
        tl, tr, br, bl = ordered

        assert tl.sum() == pytest.approx(box.sum(axis=1).min(), abs=1e-3)
        assert br.sum() == pytest.approx(box.sum(axis=1).max(), abs=1e-3)
        assert tr[0] - tr[1] == pytest.approx((box[:, 0] - box[:, 1]).max(), abs=1e-3)
        assert bl[0] - bl[1] == pytest.approx((box[:, 0] - box[:, 1]).min(), abs=1e-3)

    def test_output_shape_and_type(self):
        ordered = order_quad(np.array(self.QUAD).reshape(4, 1, 2))
        assert ordered.shape == (4, 2)
        assert ordered.dtype == np.float32


class TestQuadSize:
    def test_rectangle(self):
        width, height = quad_size(order_quad([(0, 0), (40, 0), (40, 30), (0, 30)]))
        assert width == 40
        assert height == 30

    def test_averages_opposite_edges(self):
        width, height = quad_size(order_quad([(0, 0), (10, 0), (12, 10), (-2, 10)]))
        assert width == pytest.approx(12.0)
        assert height == pytest.approx(math.hypot(2, 10))
