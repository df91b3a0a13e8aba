"""Topology analysis of polygonal geometries.

Finds the intersections between the rings of a polygon (or of all the
elements of a multipolygon) and classifies them:

- proper crossings and collinear overlaps are self-intersections
- vertex intersections where the rings cross are self-intersections
- vertex intersections where the rings only touch are registered in the
  ring touch graph, which detects double touches and touch cycles
- touches of a ring with itself are self-touches, allowed only under the
  inverted-ring (ESRI) model and only when they keep the interior connected

Candidate segment pairs are found with a shapely STRtree over all ring
segments.
"""

import logging
from dataclasses import dataclass

import numpy as np
import shapely
from shapely.strtree import STRtree

from ..geometry.intersection import compute_intersection, point_on_segment
from ..geometry.locate import Location, locate_point_in_ring
from ..geometry.orientation import is_ccw, is_crossing, is_interior_segment
from ..models.errors import ErrorKind
from ..models.geometry import Coordinate, LinearRing, MultiPolygon, Polygon, Ring
from .ring_graph import RingTouchGraph

logger = logging.getLogger(__name__)


@dataclass
class SegmentString:
    """A ring with repeated points removed, linked to its touch graph node."""

    coords: Ring
    node: int | None = None  # arena index in the RingTouchGraph
    is_polygon_ring: bool = True

    @property
    def size(self) -> int:
        return len(self.coords)

    @property
    def num_segments(self) -> int:
        return len(self.coords) - 1


def remove_repeated_points(coords: Ring) -> Ring:
    """Drop consecutive duplicate coordinates."""
    result: Ring = []
    for pt in coords:
        if not result or result[-1] != pt:
            result.append(pt)
    return result


class PolygonIntersectionAnalyzer:
    """Classifies the intersection of each pair of ring segments.

    Stops as soon as an invalid intersection or a double touch is found.
    """

    def __init__(self, graph: RingTouchGraph, allow_inverted_rings: bool = False):
        self.graph = graph
        self.allow_inverted_rings = allow_inverted_rings
        self.invalid_kind: ErrorKind | None = None
        self.invalid_location: Coordinate | None = None
        self.has_double_touch = False
        self.double_touch_location: Coordinate | None = None
        self.self_touch_location: Coordinate | None = None  # first self-touch seen

    @property
    def is_invalid(self) -> bool:
        return self.invalid_kind is not None

    @property
    def is_done(self) -> bool:
        return self.is_invalid or self.has_double_touch

    def process(self, ss0: SegmentString, seg0: int, ss1: SegmentString, seg1: int) -> None:
        """Analyze the intersection of segment seg0 of ss0 with segment seg1 of ss1."""
        if ss0 is ss1 and seg0 == seg1:
            return
        kind, location = self._find_invalid_intersection(ss0, seg0, ss1, seg1)
        if kind is not None:
            self.invalid_kind = kind
            self.invalid_location = location

    def _find_invalid_intersection(
        self, ss0: SegmentString, seg0: int, ss1: SegmentString, seg1: int
    ) -> tuple[ErrorKind | None, Coordinate | None]:
        p00 = ss0.coords[seg0]
        p01 = ss0.coords[seg0 + 1]
        p10 = ss1.coords[seg1]
        p11 = ss1.coords[seg1 + 1]

        intersection = compute_intersection(p00, p01, p10, p11)
        if not intersection.has_intersection:
            return None, None

        # crossing in the interior of a segment, or a collinear overlap
        if intersection.is_proper or intersection.num_points >= 2:
            return ErrorKind.SELF_INTERSECTION, intersection.point

        # exactly one intersection, at a vertex of at least one segment
        int_pt = intersection.point
        is_same_ring = ss0 is ss1

        # adjacent segments meet at their common endpoint
        if is_same_ring and _is_adjacent_in_ring(ss0, seg0, seg1):
            return None, None

        # a standalone ring must be simple
        if is_same_ring and not ss0.is_polygon_ring:
            return ErrorKind.RING_SELF_INTERSECTION, int_pt

        # vertex intersections are analysed once, at the segments they start
        if int_pt == p01 or int_pt == p11:
            return None, None

        e00, e01 = p00, p01
        if int_pt == p00:
            e00 = _prev_coordinate_in_ring(ss0, seg0)
        e10, e11 = p10, p11
        if int_pt == p10:
            e10 = _prev_coordinate_in_ring(ss1, seg1)

        if is_crossing(int_pt, e00, e01, e10, e11):
            return ErrorKind.SELF_INTERSECTION, int_pt

        if is_same_ring:
            self._add_self_touch(ss0, int_pt, e00, e01, e10, e11)
            return None, None

        if self.graph.register_touch(ss0.node, ss1.node, int_pt):
            self.has_double_touch = True
            self.double_touch_location = int_pt
        return None, None

    def _add_self_touch(
        self,
        ss: SegmentString,
        int_pt: Coordinate,
        e00: Coordinate,
        e01: Coordinate,
        e10: Coordinate,
        e11: Coordinate,
    ) -> None:
        if self.self_touch_location is None:
            self.self_touch_location = int_pt
        if not self.allow_inverted_rings:
            return
        if ss.node is None:
            raise ValueError("Ring has no touch graph node while recording a self-touch")
        self.graph.record_self_touch(ss.node, int_pt, e00, e01, e10, e11)


def _prev_coordinate_in_ring(ss: SegmentString, seg_index: int) -> Coordinate:
    prev_index = seg_index - 1
    if prev_index < 0:
        prev_index = ss.size - 2
    return ss.coords[prev_index]


def _is_adjacent_in_ring(ss: SegmentString, seg0: int, seg1: int) -> bool:
    delta = abs(seg1 - seg0)
    if delta <= 1:
        return True
    # first and last segments of a closed ring share the start point
    return delta >= ss.size - 2


def _segment_index(segment_strings: list[SegmentString]) -> tuple[list[tuple[int, int]], STRtree]:
    """Build an STRtree over every segment of every ring."""
    refs = []
    coords = []
    for string_index, ss in enumerate(segment_strings):
        for seg in range(ss.num_segments):
            refs.append((string_index, seg))
            coords.append((ss.coords[seg], ss.coords[seg + 1]))
    segments = shapely.linestrings(np.asarray(coords, dtype=float).reshape(-1, 2, 2))
    return refs, STRtree(segments)


def analyze_intersections(
    segment_strings: list[SegmentString],
    analyzer: PolygonIntersectionAnalyzer,
) -> None:
    """Run the analyzer over all pairs of segments with intersecting envelopes."""
    strings = [ss for ss in segment_strings if ss.num_segments > 0]
    if not strings:
        return

    refs, tree = _segment_index(strings)
    pairs = tree.query(tree.geometries)
    pairs = pairs[:, pairs[0] < pairs[1]]
    order = np.lexsort((pairs[1], pairs[0]))
    logger.debug(f"Analyzing {pairs.shape[1]} candidate pairs over {len(refs)} segments")

    for i, j in pairs[:, order].T:
        string0, seg0 = refs[i]
        string1, seg1 = refs[j]
        analyzer.process(strings[string0], seg0, strings[string1], seg1)
        if analyzer.is_done:
            return


class PolygonTopologyAnalyzer:
    """Analyzes the topology of the rings of a polygonal geometry.

    Given a Polygon, MultiPolygon or standalone LinearRing whose rings are
    closed and have enough points, determines whether the rings intersect
    invalidly, whether two rings touch twice, and whether self-touches or
    ring-touch cycles disconnect the interior.
    """

    def __init__(
        self,
        geometry: Polygon | MultiPolygon | LinearRing,
        allow_inverted_rings: bool = False,
    ):
        self.allow_inverted_rings = allow_inverted_rings
        self.graph = RingTouchGraph()
        self._disconnection_location: Coordinate | None = None

        segment_strings = self._create_segment_strings(geometry)
        self._intersections = PolygonIntersectionAnalyzer(self.graph, allow_inverted_rings)
        analyze_intersections(segment_strings, self._intersections)

    def _create_segment_strings(
        self, geometry: Polygon | MultiPolygon | LinearRing
    ) -> list[SegmentString]:
        if isinstance(geometry, LinearRing):
            return [
                SegmentString(
                    remove_repeated_points(geometry.coordinates), is_polygon_ring=False
                )
            ]

        polygons = geometry.polygons if isinstance(geometry, MultiPolygon) else [geometry]
        segment_strings = []
        for polygon_index, polygon in enumerate(polygons):
            if not polygon.shell:
                continue
            # polygons without holes only need ring nodes to classify self-touches
            shell_node = None
            if polygon.holes or self.allow_inverted_rings:
                shell_node = self.graph.add_shell(polygon.shell, polygon_index)
            segment_strings.append(
                SegmentString(remove_repeated_points(polygon.shell), shell_node)
            )
            for hole_index, hole in enumerate(polygon.holes):
                if not hole:
                    continue
                hole_node = self.graph.add_hole(hole, hole_index, shell_node)
                segment_strings.append(
                    SegmentString(remove_repeated_points(hole), hole_node)
                )
        return segment_strings

    def has_intersection(self) -> bool:
        """Whether the rings intersect invalidly."""
        return self._intersections.is_invalid

    def intersection_location(self) -> Coordinate | None:
        """Location of the invalid intersection, or of the double touch."""
        if self._intersections.invalid_location is not None:
            return self._intersections.invalid_location
        return self._intersections.double_touch_location

    def has_double_touch(self) -> bool:
        """Whether two rings of one polygon touch at more than one point."""
        return self._intersections.has_double_touch

    def is_interior_disconnected_by_self_touch(self) -> bool:
        """Whether a ring self-touch disconnects the interior.

        Under the OGC model every ring self-touch is a disconnection. Under
        the inverted-ring model only self-touches whose halves lie in the
        interior are.
        """
        if self.allow_inverted_rings:
            location = self.graph.find_interior_self_touch()
        else:
            location = self._intersections.self_touch_location
        if location is not None:
            self._disconnection_location = location
        return location is not None

    def is_interior_disconnected_by_ring_cycle(self) -> bool:
        """Whether a cycle of touching rings disconnects the interior."""
        location = self.graph.find_touch_cycle_location()
        if location is not None:
            self._disconnection_location = location
        return location is not None

    def disconnection_location(self) -> Coordinate | None:
        return self._disconnection_location

    @staticmethod
    def find_self_intersection(ring: Ring) -> Coordinate | None:
        """Find a point where a standalone ring is not simple, if any."""
        analyzer = PolygonTopologyAnalyzer(LinearRing(coordinates=ring))
        if analyzer.has_intersection():
            return analyzer.intersection_location()
        return None

    @staticmethod
    def is_segment_in_ring(p0: Coordinate, p1: Coordinate, ring: Ring) -> bool:
        """Test if segment p0-p1 lies in the interior of a ring.

        The segment is assumed not to cross the ring and to touch it at
        most at its endpoints.
        """
        location = locate_point_in_ring(p0, ring)
        if location == Location.EXTERIOR:
            return False
        if location == Location.INTERIOR:
            return True
        return is_incident_segment_in_ring(p0, p1, ring)

    @staticmethod
    def is_ring_nested(test: Ring, target: Ring) -> bool:
        """Test if a ring lies inside another ring.

        The rings are assumed not to cross and to touch at most at vertices.
        """
        p0 = test[0]
        location = locate_point_in_ring(p0, target)
        if location == Location.EXTERIOR:
            return False
        if location == Location.INTERIOR:
            return True
        # p0 is on the target boundary, so the incident segment decides
        p1 = find_non_equal_vertex(test, p0)
        return is_incident_segment_in_ring(p0, p1, target)


def find_non_equal_vertex(ring: Ring, pt: Coordinate) -> Coordinate:
    """First vertex of a ring after the start which differs from pt."""
    i = 1
    nxt = ring[i]
    while nxt == pt and i < len(ring) - 1:
        i += 1
        nxt = ring[i]
    return nxt


def is_incident_segment_in_ring(p0: Coordinate, p1: Coordinate, ring: Ring) -> bool:
    """Test if a segment starting on a ring boundary points into its interior.

    Raises:
        ValueError: If p0 does not lie on the ring
    """
    index = _intersecting_segment_index(ring, p0)
    if index < 0:
        raise ValueError("Segment vertex does not intersect ring")
    r_prev = _find_ring_vertex_prev(ring, index, p0)
    r_next = _find_ring_vertex_next(ring, index, p0)

    # the corner test needs the ring interior on the right
    if is_ccw(ring):
        r_prev, r_next = r_next, r_prev
    return is_interior_segment(p0, r_prev, r_next, p1)


def _intersecting_segment_index(ring: Ring, pt: Coordinate) -> int:
    for i in range(len(ring) - 1):
        if point_on_segment(pt, ring[i], ring[i + 1]):
            # pt may be the start point of the next segment
            if pt == ring[i + 1]:
                return i + 1
            return i
    return -1


def _find_ring_vertex_prev(ring: Ring, index: int, node: Coordinate) -> Coordinate:
    i_prev = index
    prev = ring[i_prev]
    while prev == node:
        i_prev = _ring_index_prev(ring, i_prev)
        prev = ring[i_prev]
    return prev


def _find_ring_vertex_next(ring: Ring, index: int, node: Coordinate) -> Coordinate:
    i_next = index + 1
    nxt = ring[i_next]
    while nxt == node:
        i_next = _ring_index_next(ring, i_next)
        nxt = ring[i_next]
    return nxt


def _ring_index_prev(ring: Ring, index: int) -> int:
    if index == 0:
        return len(ring) - 2
    return index - 1


def _ring_index_next(ring: Ring, index: int) -> int:
    if index >= len(ring) - 2:
        return 0
    return index + 1
