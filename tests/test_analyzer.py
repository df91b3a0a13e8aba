"""Tests for polygon topology analysis and nested-hole detection."""

import pytest

from polyvalid.models.geometry import MultiPolygon, Polygon
from polyvalid.topology.analyzer import (
    PolygonTopologyAnalyzer,
    find_non_equal_vertex,
    is_incident_segment_in_ring,
    remove_repeated_points,
)
from polyvalid.topology.nested_holes import NestedHoleTester

SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), (0.0, 0.0)]

# Holes touching the shell and each other: a cycle of three rings
HOLE_LOWER = [(5.0, 0.0), (7.0, 3.0), (5.0, 5.0), (3.0, 3.0), (5.0, 0.0)]
HOLE_UPPER = [(5.0, 5.0), (7.0, 7.0), (5.0, 10.0), (3.0, 7.0), (5.0, 5.0)]

# Hole touching the shell at two points
HOLE_SPLITTING = [(5.0, 0.0), (8.0, 5.0), (5.0, 10.0), (2.0, 5.0), (5.0, 0.0)]

# Shell self-touching at (5, 10) to enclose a triangular hole
INVERTED_SHELL = [
    (0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (5.0, 10.0), (7.0, 5.0),
    (3.0, 5.0), (5.0, 10.0), (0.0, 10.0), (0.0, 0.0),
]


def box_ring(x0, y0, x1, y1):
    return [(x0, y0), (x1, y0), (x1, y1), (x0, y1), (x0, y0)]


class TestRingHelpers:
    """Test ring helper functions."""

    def test_remove_repeated_points(self):
        coords = [(0, 0), (0, 0), (1, 0), (1, 1), (1, 1), (0, 0)]
        assert remove_repeated_points(coords) == [(0, 0), (1, 0), (1, 1), (0, 0)]

    def test_find_non_equal_vertex_skips_repeats(self):
        ring = [(0, 0), (0, 0), (0, 0), (4, 0), (4, 4), (0, 0)]
        assert find_non_equal_vertex(ring, (0, 0)) == (4, 0)

    def test_incident_segment_in_ring(self):
        assert is_incident_segment_in_ring((0.0, 5.0), (5.0, 5.0), SQUARE)
        assert not is_incident_segment_in_ring((0.0, 5.0), (-5.0, 5.0), SQUARE)

    def test_incident_segment_same_for_cw_ring(self):
        cw = list(reversed(SQUARE))
        assert is_incident_segment_in_ring((0.0, 5.0), (5.0, 5.0), cw)
        assert not is_incident_segment_in_ring((0.0, 5.0), (-5.0, 5.0), cw)

    def test_incident_segment_off_ring_raises(self):
        with pytest.raises(ValueError):
            is_incident_segment_in_ring((5.0, 5.0), (6.0, 6.0), SQUARE)


class TestIntersectionAnalysis:
    """Test classification of ring intersections."""

    def test_simple_polygon_has_no_intersection(self):
        analyzer = PolygonTopologyAnalyzer(Polygon(coordinates=[SQUARE]))
        assert not analyzer.has_intersection()
        assert not analyzer.has_double_touch()
        assert not analyzer.is_interior_disconnected_by_self_touch()

    def test_bow_tie_is_self_intersection(self):
        bow_tie = [(0.0, 0.0), (4.0, 4.0), (4.0, 0.0), (0.0, 4.0), (0.0, 0.0)]
        analyzer = PolygonTopologyAnalyzer(Polygon(coordinates=[bow_tie]))
        assert analyzer.has_intersection()
        assert analyzer.intersection_location() == (2.0, 2.0)

    def test_collinear_overlap_is_self_intersection(self):
        """A hole sharing part of a shell edge overlaps it."""
        hole = [(2.0, 0.0), (6.0, 0.0), (4.0, 4.0), (2.0, 0.0)]
        analyzer = PolygonTopologyAnalyzer(Polygon(coordinates=[SQUARE, hole]))
        assert analyzer.has_intersection()

    def test_double_touch(self):
        analyzer = PolygonTopologyAnalyzer(Polygon(coordinates=[SQUARE, HOLE_SPLITTING]))
        assert not analyzer.has_intersection()
        assert analyzer.has_double_touch()
        assert analyzer.intersection_location() == (5.0, 10.0)

    def test_touch_cycle_graph(self):
        analyzer = PolygonTopologyAnalyzer(
            Polygon(coordinates=[SQUARE, HOLE_LOWER, HOLE_UPPER])
        )
        assert not analyzer.has_intersection()
        assert not analyzer.has_double_touch()
        assert len(analyzer.graph) == 3
        assert analyzer.graph.to_networkx().number_of_edges() == 3
        assert not analyzer.graph.is_forest()
        assert analyzer.is_interior_disconnected_by_ring_cycle()
        assert analyzer.disconnection_location() in {(5.0, 0.0), (5.0, 5.0), (5.0, 10.0)}

    def test_touch_chain_is_connected(self):
        analyzer = PolygonTopologyAnalyzer(Polygon(coordinates=[SQUARE, HOLE_LOWER]))
        assert analyzer.graph.to_networkx().number_of_edges() == 1
        assert not analyzer.is_interior_disconnected_by_ring_cycle()

    def test_multipolygon_shared_edge_is_self_intersection(self):
        mpoly = MultiPolygon(
            coordinates=[[box_ring(0, 0, 5, 5)], [box_ring(5, 0, 10, 5)]]
        )
        analyzer = PolygonTopologyAnalyzer(mpoly)
        assert analyzer.has_intersection()

    def test_multipolygon_elements_touching_at_point(self):
        """Touches between different elements are not ring-graph edges."""
        mpoly = MultiPolygon(
            coordinates=[[box_ring(0, 0, 5, 5)], [box_ring(5, 5, 10, 10)]]
        )
        analyzer = PolygonTopologyAnalyzer(mpoly)
        assert not analyzer.has_intersection()
        assert not analyzer.has_double_touch()
        assert not analyzer.is_interior_disconnected_by_ring_cycle()

    def test_polygon_without_shell_adds_no_rings(self):
        analyzer = PolygonTopologyAnalyzer(Polygon(coordinates=[[], box_ring(1, 1, 2, 2)]))
        assert not analyzer.has_intersection()
        assert len(analyzer.graph) == 0


class TestSelfTouchAnalysis:
    """Test inverted-ring handling."""

    def test_inverted_shell_strict(self):
        analyzer = PolygonTopologyAnalyzer(Polygon(coordinates=[INVERTED_SHELL]))
        assert not analyzer.has_intersection()
        assert analyzer.is_interior_disconnected_by_self_touch()
        assert analyzer.disconnection_location() == (5.0, 10.0)

    def test_inverted_shell_lenient(self):
        analyzer = PolygonTopologyAnalyzer(
            Polygon(coordinates=[INVERTED_SHELL]), allow_inverted_rings=True
        )
        assert not analyzer.has_intersection()
        assert len(analyzer.graph[0].self_nodes) == 1
        assert not analyzer.is_interior_disconnected_by_self_touch()

    def test_vertex_bow_tie_lenient(self):
        bow_tie = [(0.0, 0.0), (2.0, 2.0), (4.0, 0.0), (4.0, 4.0), (2.0, 2.0), (0.0, 4.0), (0.0, 0.0)]
        analyzer = PolygonTopologyAnalyzer(
            Polygon(coordinates=[bow_tie]), allow_inverted_rings=True
        )
        assert analyzer.is_interior_disconnected_by_self_touch()
        assert analyzer.disconnection_location() == (2.0, 2.0)


class TestStaticPredicates:
    """Test the static ring predicates."""

    def test_find_self_intersection_simple_ring(self):
        assert PolygonTopologyAnalyzer.find_self_intersection(SQUARE) is None

    def test_find_self_intersection_self_touch(self):
        ring = [(0.0, 0.0), (2.0, 2.0), (4.0, 0.0), (4.0, 4.0), (2.0, 2.0), (0.0, 4.0), (0.0, 0.0)]
        assert PolygonTopologyAnalyzer.find_self_intersection(ring) == (2.0, 2.0)

    def test_is_segment_in_ring(self):
        assert PolygonTopologyAnalyzer.is_segment_in_ring((2.0, 2.0), (4.0, 2.0), SQUARE)
        assert not PolygonTopologyAnalyzer.is_segment_in_ring((20.0, 2.0), (24.0, 2.0), SQUARE)
        # starts on the boundary, pointing inward
        assert PolygonTopologyAnalyzer.is_segment_in_ring((0.0, 0.0), (2.0, 0.0), box_ring(0, -5, 5, 5))

    def test_is_ring_nested(self):
        inner = box_ring(2, 2, 4, 4)
        assert PolygonTopologyAnalyzer.is_ring_nested(inner, SQUARE)
        assert not PolygonTopologyAnalyzer.is_ring_nested(SQUARE, inner)

    def test_is_ring_nested_touching(self):
        """A ring touching the target at its first vertex."""
        inner = [(0.0, 5.0), (3.0, 3.0), (3.0, 7.0), (0.0, 5.0)]
        assert PolygonTopologyAnalyzer.is_ring_nested(inner, SQUARE)


class TestNestedHoleTester:
    """Test NestedHoleTester."""

    def test_disjoint_holes(self):
        poly = Polygon(coordinates=[SQUARE, box_ring(1, 1, 3, 3), box_ring(5, 5, 7, 7)])
        tester = NestedHoleTester(poly)
        assert not tester.is_nested()
        assert tester.nested_point() is None

    def test_nested_holes(self):
        poly = Polygon(coordinates=[SQUARE, box_ring(1, 1, 9, 9), box_ring(2, 2, 4, 4)])
        tester = NestedHoleTester(poly)
        assert tester.is_nested()
        assert tester.nested_point() == (2, 2)

    def test_no_holes(self):
        assert not NestedHoleTester(Polygon(coordinates=[SQUARE])).is_nested()
