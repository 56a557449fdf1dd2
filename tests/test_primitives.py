"""Tests for geometry primitives."""

import math

import pytest

from livecontour.geometry.primitives import (
    aabb_from_points,
    aabb_union,
    distance_to_point,
    distance_to_point_squared,
    distance_to_segment,
    distance_to_segment_squared_info,
    point_in_aabb,
    polyline_length,
)
from livecontour.models import AABB


class TestDistances:
    """Tests for point and segment distances."""

    def test_point_distance(self):
        """Test point-to-point distance."""
        assert distance_to_point_squared([0, 0], [3, 4]) == 25
        assert distance_to_point([0, 0], [3, 4]) == 5

    def test_projection_inside_segment(self):
        """Test the closest point strictly inside a segment."""
        closest, d2 = distance_to_segment_squared_info([0, 0], [10, 0], [4, 3])

        assert closest == [4.0, 0.0]
        assert d2 == pytest.approx(9.0)

    def test_projection_clamped_to_endpoints(self):
        """Points beyond the ends snap to the nearest endpoint."""
        before, d2_before = distance_to_segment_squared_info([0, 0], [10, 0], [-3, 4])
        after, d2_after = distance_to_segment_squared_info([0, 0], [10, 0], [13, -4])

        assert before == [0.0, 0.0]
        assert d2_before == pytest.approx(25.0)
        assert after == [10.0, 0.0]
        assert d2_after == pytest.approx(25.0)

    def test_zero_length_segment(self):
        """Test that a zero-length segment resolves to its start."""
        closest, d2 = distance_to_segment_squared_info([2, 2], [2, 2], [5, 6])

        assert closest == [2.0, 2.0]
        assert d2 == pytest.approx(25.0)

    def test_segment_distance(self):
        """Test point-to-segment distance."""
        assert distance_to_segment([0, 0], [0, 10], [2, 5]) == pytest.approx(2.0)


class TestBoxes:
    """Tests for bounding box helpers."""

    def test_aabb_from_points(self):
        """Test the bounding box of a point list."""
        box = aabb_from_points([[1, 5], [-2, 3], [4, -1]])

        assert (box.min_x, box.min_y, box.max_x, box.max_y) == (-2, -1, 4, 5)
        assert box.width == 6
        assert box.height == 6

    def test_aabb_from_no_points(self):
        """Test that no points give no bounding box."""
        assert aabb_from_points([]) is None

    def test_aabb_union_skips_none(self):
        """Test that missing boxes are skipped in a union."""
        a = AABB(min_x=0, min_y=0, max_x=1, max_y=1)
        b = AABB(min_x=-1, min_y=0.5, max_x=0.5, max_y=3)

        box = aabb_union([a, None, b])

        assert (box.min_x, box.min_y, box.max_x, box.max_y) == (-1, 0, 1, 3)
        assert aabb_union([]) is None

    def test_point_in_aabb_with_margin(self):
        """Test the box hit-test with a margin."""
        box = AABB(min_x=0, min_y=0, max_x=10, max_y=10)

        assert point_in_aabb([5, 5], box)
        assert not point_in_aabb([12, 5], box)
        assert point_in_aabb([12, 5], box, margin=2)


class TestPolylineLength:
    """Tests for polyline length."""

    def test_open_and_closed(self):
        """Test open and closed polyline lengths."""
        square = [[0, 0], [1, 0], [1, 1], [0, 1]]

        assert polyline_length(square) == pytest.approx(3.0)
        assert polyline_length(square, closed=True) == pytest.approx(4.0)

    def test_degenerate(self):
        """Test lengths of empty and single-point polylines."""
        assert polyline_length([]) == 0.0
        assert polyline_length([[1, 1]], closed=True) == 0.0

    def test_diagonal(self):
        """Test the length of a diagonal step."""
        assert polyline_length([[0, 0], [1, 1]]) == pytest.approx(math.sqrt(2))
