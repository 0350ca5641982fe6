"""
Tests for polygon offsetting and the gutter inset policy.
"""

import pytest

from panel_toolkit.geometry import bounding_box, inset_polygon, offset_polygon, polygon_area

RECT = [(0.0, 0.0), (100.0, 0.0), (100.0, 50.0), (0.0, 50.0)]

# Two squares joined by a thin bar; a 3px inset cuts the bar
DUMBBELL = [
    (0, 0), (40, 0), (40, 18), (60, 18), (60, 10), (80, 10),
    (80, 30), (60, 30), (60, 22), (40, 22), (40, 40), (0, 40),
]


class TestInsetIdentity:
    """Cases where the polygon must come back unchanged."""

    def test_inset_when_zero_then_same_object(self):
        assert inset_polygon(RECT, 0) is RECT

    def test_inset_when_negative_then_same_object(self):
        assert inset_polygon(RECT, -3) is RECT

    def test_inset_when_two_points_then_unchanged(self):
        line = [(0, 0), (10, 10)]
        assert inset_polygon(line, 5) is line

    def test_inset_when_polygon_collapses_then_original(self):
        thin = [(0, 0), (10, 0), (10, 100), (0, 100)]
        assert inset_polygon(thin, 6) is thin

    def test_inset_when_degenerate_polygon_then_original(self):
        collinear = [(0, 0), (50, 0), (100, 0)]
        assert inset_polygon(collinear, 2) is collinear


class TestInsetShape:
    """Geometry of successful insets."""

    def test_rectangle_inset_when_five_then_shrinks_each_side(self):
        inset = inset_polygon(RECT, 5)

        min_x, min_y, max_x, max_y = bounding_box(inset)
        assert min_x == pytest.approx(5)
        assert min_y == pytest.approx(5)
        assert max_x == pytest.approx(95)
        assert max_y == pytest.approx(45)
        assert polygon_area(inset) == pytest.approx(90 * 40)

    def test_inset_result_is_inside_original(self):
        inset = inset_polygon(RECT, 2)
        assert polygon_area(inset) < polygon_area(RECT)

    def test_inset_when_split_then_largest_part_kept(self):
        inset = inset_polygon(DUMBBELL, 3)

        min_x, min_y, max_x, max_y = bounding_box(inset)
        assert min_x == pytest.approx(3)
        assert min_y == pytest.approx(3)
        assert max_y == pytest.approx(37)
        # Only the left square survives; the cut bar leaves a small bulge
        assert 37 <= max_x < 40

    def test_offset_polygon_when_split_then_returns_every_part(self):
        parts = offset_polygon(DUMBBELL, -3)
        assert len(parts) == 2

    def test_offset_polygon_when_collapsed_then_empty(self):
        assert offset_polygon([(0, 0), (4, 0), (4, 4), (0, 4)], -3) == []

    def test_offset_polygon_when_growing_then_rounds_corners(self):
        grown = offset_polygon(RECT, 5)[0]
        # Round joins add arc vertices at each corner
        assert len(grown) > len(RECT)
        assert polygon_area(grown) > polygon_area(RECT)
