"""Tests for orientation and angular predicates."""

import pytest

from polyvalid.geometry.orientation import (
    CLOCKWISE,
    COLLINEAR,
    COUNTERCLOCKWISE,
    NE,
    NW,
    SE,
    SW,
    compare_angle,
    is_angle_greater,
    is_ccw,
    is_crossing,
    is_interior_segment,
    orientation_index,
    quadrant,
)

CCW_SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), (0.0, 0.0)]
CW_SQUARE = list(reversed(CCW_SQUARE))


class TestOrientationIndex:
    """Test orientation_index function."""

    def test_left_is_counterclockwise(self):
        assert orientation_index((0, 0), (1, 0), (0.5, 1)) == COUNTERCLOCKWISE

    def test_right_is_clockwise(self):
        assert orientation_index((0, 0), (1, 0), (0.5, -1)) == CLOCKWISE

    def test_on_line_is_collinear(self):
        assert orientation_index((0, 0), (1, 1), (0.5, 0.5)) == COLLINEAR
        assert orientation_index((0, 0), (1, 1), (3, 3)) == COLLINEAR

    def test_large_coordinates_collinear(self):
        """Exact fallback classifies nearly-degenerate large inputs."""
        p1 = (1e15, 1e15)
        p2 = (1e15 + 2, 1e15 + 2)
        q = (1e15 + 4, 1e15 + 4)
        assert orientation_index(p1, p2, q) == COLLINEAR

    def test_tiny_offset_detected(self):
        """A point a tiny distance off the line is not collinear."""
        assert orientation_index((0, 0), (1, 1), (0.5, 0.5 + 1e-12)) == COUNTERCLOCKWISE


class TestQuadrant:
    """Test quadrant function."""

    @pytest.mark.parametrize(
        "p, expected",
        [
            ((1, 1), NE),
            ((1, 0), NE),
            ((0, 1), NE),
            ((-1, 1), NW),
            ((-1, 0), NW),
            ((-1, -1), SW),
            ((1, -1), SE),
            ((0, -1), SE),
        ],
    )
    def test_quadrants(self, p, expected):
        assert quadrant((0, 0), p) == expected

    def test_zero_vector_raises(self):
        with pytest.raises(ValueError):
            quadrant((3, 4), (3, 4))


class TestAngleComparison:
    """Test is_angle_greater and compare_angle."""

    def test_greater_quadrant(self):
        assert is_angle_greater((0, 0), (-1, 1), (1, 1))
        assert not is_angle_greater((0, 0), (1, 1), (-1, 1))

    def test_same_quadrant(self):
        assert is_angle_greater((0, 0), (1, 2), (2, 1))
        assert not is_angle_greater((0, 0), (2, 1), (1, 2))

    def test_compare_equal_angle(self):
        assert compare_angle((0, 0), (1, 1), (2, 2)) == 0

    def test_compare_signs(self):
        assert compare_angle((0, 0), (0, 1), (1, 0)) == 1
        assert compare_angle((0, 0), (1, 0), (0, 1)) == -1


class TestIsCrossing:
    """Test is_crossing for edge pairs meeting at a node."""

    def test_crossing_pairs(self):
        """Horizontal pair is crossed by the vertical pair."""
        node = (0, 0)
        assert is_crossing(node, (-1, 0), (1, 0), (0, -1), (0, 1))

    def test_touching_pairs(self):
        """Both edges of B lie on the same side of A."""
        node = (0, 0)
        assert not is_crossing(node, (-1, -1), (1, -1), (-1, 1), (1, 1))

    def test_collinear_edge_is_not_crossing(self):
        node = (0, 0)
        assert not is_crossing(node, (-1, 0), (1, 0), (-2, 0), (0, 1))


class TestIsInteriorSegment:
    """Test is_interior_segment at a ring corner."""

    def test_segment_inside_cw_corner(self):
        """CW square corner at the origin: interior is up and right."""
        # CW ring passes (10,0) -> (0,0) -> (0,10), interior on the right
        assert is_interior_segment((0, 0), (10, 0), (0, 10), (5, 5))

    def test_segment_outside_cw_corner(self):
        assert not is_interior_segment((0, 0), (10, 0), (0, 10), (-5, -5))


class TestIsCCW:
    """Test ring orientation."""

    def test_ccw_square(self):
        assert is_ccw(CCW_SQUARE)

    def test_cw_square(self):
        assert not is_ccw(CW_SQUARE)
