"""Validity checking of geometries against the OGC Simple Features rules.

Checks run in a fixed order and stop at the first defect, so exactly one
error (or none) is reported for a geometry:

1. Coordinates are finite
2. Rings are closed
3. Lines and rings have enough distinct points
4. Rings do not self-intersect; rings do not touch twice; self-touches do
   not disconnect the interior
5. Holes lie inside their shell
6. Holes are not nested
7. Multipolygon element shells are not nested
8. Touching rings do not form a cycle which disconnects the interior

The order decides which error is reported for a geometry with several
defects, so it must not be changed.
"""

import logging
import math

from ..geometry.envelope import envelope_covers, ring_envelope
from ..geometry.locate import Location, RingLocator
from ..models.errors import ErrorKind, TopologyValidationError, UnsupportedGeometryError
from ..models.geometry import (
    Coordinate,
    Geometry,
    GeometryCollection,
    LinearRing,
    LineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    Ring,
)
from ..models.options import ValidityOptions
from ..topology.analyzer import PolygonTopologyAnalyzer, find_non_equal_vertex
from ..topology.nested_holes import NestedHoleTester

logger = logging.getLogger(__name__)

MIN_SIZE_LINESTRING = 2
MIN_SIZE_RING = 4

CheckResult = TopologyValidationError | None


def is_valid_coordinate(coord: Coordinate) -> bool:
    """Check that both ordinates are finite (not NaN or infinite)."""
    return math.isfinite(coord[0]) and math.isfinite(coord[1])


class ValidityChecker:
    """Tests geometries for validity and reports the first defect found.

    The checker holds only its options. All analysis state is created per
    call, so one checker can be shared freely.

    Example:
        checker = ValidityChecker()
        error = checker.get_validation_error(polygon)
        if error is not None:
            print(error.kind, error.coordinate)
    """

    def __init__(self, options: ValidityOptions | None = None):
        self.options = options or ValidityOptions()

    @property
    def allow_inverted_rings_forming_holes(self) -> bool:
        return self.options.allow_inverted_rings_forming_holes

    def is_valid(self, geometry: Geometry) -> bool:
        """Test whether a geometry is valid."""
        return self.get_validation_error(geometry) is None

    def get_validation_error(self, geometry: Geometry) -> CheckResult:
        """Get the first validity error of a geometry, or None if it is valid.

        Collection members are checked in order with an explicit stack, so
        nesting depth is not limited by the interpreter recursion limit.

        Raises:
            UnsupportedGeometryError: If a geometry (or collection member)
                is not one of the supported geometry variants
        """
        stack = [geometry]
        while stack:
            geom = stack.pop()
            if isinstance(geom, GeometryCollection):
                stack.extend(reversed(geom.geometries))
                continue

            error = self._check_geometry(geom)
            if error is not None:
                logger.info(f"Invalid {geom.type}: {error}")
                return error
        return None

    def _check_geometry(self, geom: Geometry) -> CheckResult:
        if isinstance(geom, (Point, MultiPoint)):
            check = _check_points
        elif isinstance(geom, LinearRing):
            check = _check_linear_ring
        elif isinstance(geom, LineString):
            check = _check_line_string
        elif isinstance(geom, Polygon):
            check = self._check_polygon
        elif isinstance(geom, MultiPolygon):
            check = self._check_multi_polygon
        else:
            raise UnsupportedGeometryError(type(geom).__name__)

        # empty geometries are always valid
        if geom.is_empty:
            return None
        logger.debug(f"Checking {geom.type}")
        return check(geom)

    def _check_polygon(self, poly: Polygon) -> CheckResult:
        error = (
            _check_polygon_coordinates(poly)
            or _check_rings_closed(poly)
            or _check_rings_too_few_points(poly)
        )
        if error is not None:
            return error

        analyzer = PolygonTopologyAnalyzer(poly, self.allow_inverted_rings_forming_holes)
        return (
            _check_area_intersections(analyzer)
            or _check_holes_outside_shell(poly)
            or _check_holes_not_nested(poly)
            or _check_interior_disconnected(analyzer)
        )

    def _check_multi_polygon(self, mpoly: MultiPolygon) -> CheckResult:
        polygons = mpoly.polygons
        for poly in polygons:
            error = (
                _check_polygon_coordinates(poly)
                or _check_rings_closed(poly)
                or _check_rings_too_few_points(poly)
            )
            if error is not None:
                return error

        analyzer = PolygonTopologyAnalyzer(mpoly, self.allow_inverted_rings_forming_holes)
        error = _check_area_intersections(analyzer)
        if error is not None:
            return error

        for poly in polygons:
            error = _check_holes_outside_shell(poly)
            if error is not None:
                return error
        for poly in polygons:
            error = _check_holes_not_nested(poly)
            if error is not None:
                return error

        return _check_shells_not_nested(polygons) or _check_interior_disconnected(analyzer)


def is_valid(geometry: Geometry, options: ValidityOptions | None = None) -> bool:
    """Test whether a geometry is valid."""
    return ValidityChecker(options).is_valid(geometry)


def get_validation_error(geometry: Geometry, options: ValidityOptions | None = None) -> CheckResult:
    """Get the first validity error of a geometry, or None if it is valid."""
    return ValidityChecker(options).get_validation_error(geometry)


def _check_points(geom: Point | MultiPoint) -> CheckResult:
    return _check_coordinates(geom.all_coordinates())


def _check_line_string(line: LineString) -> CheckResult:
    return (
        _check_coordinates(line.coordinates)
        or _check_too_few_points(line.coordinates, MIN_SIZE_LINESTRING)
    )


def _check_linear_ring(ring: LinearRing) -> CheckResult:
    return (
        _check_coordinates(ring.coordinates)
        or _check_ring_closed(ring.coordinates)
        or _check_ring_too_few_points(ring.coordinates)
        or _check_ring_self_intersection(ring.coordinates)
    )


def _check_coordinates(coords: list[Coordinate]) -> CheckResult:
    for coord in coords:
        if not is_valid_coordinate(coord):
            return TopologyValidationError(ErrorKind.INVALID_COORDINATE, coord)
    return None


def _check_polygon_coordinates(poly: Polygon) -> CheckResult:
    for ring in poly.coordinates:
        error = _check_coordinates(ring)
        if error is not None:
            return error
    return None


def _check_ring_closed(ring: Ring) -> CheckResult:
    if not ring:
        return None
    if ring[0] != ring[-1]:
        return TopologyValidationError(ErrorKind.RING_NOT_CLOSED, ring[0])
    return None


def _check_rings_closed(poly: Polygon) -> CheckResult:
    for ring in poly.coordinates:
        error = _check_ring_closed(ring)
        if error is not None:
            return error
    return None


def _check_ring_too_few_points(ring: Ring) -> CheckResult:
    if not ring:
        return None
    return _check_too_few_points(ring, MIN_SIZE_RING)


def _check_rings_too_few_points(poly: Polygon) -> CheckResult:
    for ring in poly.coordinates:
        error = _check_ring_too_few_points(ring)
        if error is not None:
            return error
    return None


def _check_too_few_points(coords: list[Coordinate], min_size: int) -> CheckResult:
    if not _is_non_repeated_size_at_least(coords, min_size):
        pt = coords[0] if coords else None
        return TopologyValidationError(ErrorKind.TOO_FEW_POINTS, pt)
    return None


def _is_non_repeated_size_at_least(coords: list[Coordinate], min_size: int) -> bool:
    """Test if a line has at least min_size points, ignoring consecutive repeats."""
    num_pts = 0
    prev_pt = None
    for pt in coords:
        if num_pts >= min_size:
            return True
        if prev_pt is None or pt != prev_pt:
            num_pts += 1
        prev_pt = pt
    return num_pts >= min_size


def _check_ring_self_intersection(ring: Ring) -> CheckResult:
    int_pt = PolygonTopologyAnalyzer.find_self_intersection(ring)
    if int_pt is not None:
        return TopologyValidationError(ErrorKind.RING_SELF_INTERSECTION, int_pt)
    return None


def _check_area_intersections(analyzer: PolygonTopologyAnalyzer) -> CheckResult:
    if analyzer.has_intersection():
        return TopologyValidationError(
            ErrorKind.SELF_INTERSECTION, analyzer.intersection_location()
        )
    if analyzer.has_double_touch():
        return TopologyValidationError(
            ErrorKind.DISCONNECTED_INTERIOR, analyzer.intersection_location()
        )
    if analyzer.is_interior_disconnected_by_self_touch():
        return TopologyValidationError(
            ErrorKind.DISCONNECTED_INTERIOR, analyzer.disconnection_location()
        )
    return None


def _check_holes_outside_shell(poly: Polygon) -> CheckResult:
    """Check that each hole lies inside the shell.

    Holes are known not to cross the shell, so one hole vertex which is not
    on the shell boundary decides containment.
    """
    if not poly.holes:
        return None

    shell = poly.shell
    locator = RingLocator(shell) if shell else None
    for hole in poly.holes:
        if not hole:
            continue
        if locator is None:
            invalid_pt = hole[0]
        else:
            invalid_pt = _find_hole_outside_shell_point(locator, hole)
        if invalid_pt is not None:
            return TopologyValidationError(ErrorKind.HOLE_OUTSIDE_SHELL, invalid_pt)
    return None


def _find_hole_outside_shell_point(shell_locator: RingLocator, hole: Ring) -> Coordinate | None:
    # A valid hole touches the shell at most once, so this decides
    # within the first two vertices
    for hole_pt in hole[:-1]:
        location = shell_locator.locate(hole_pt)
        if location == Location.BOUNDARY:
            continue
        if location == Location.INTERIOR:
            return None
        return hole_pt
    return None


def _check_holes_not_nested(poly: Polygon) -> CheckResult:
    if not poly.holes:
        return None
    tester = NestedHoleTester(poly)
    if tester.is_nested():
        return TopologyValidationError(ErrorKind.NESTED_HOLES, tester.nested_point())
    return None


def _check_shells_not_nested(polygons: list[Polygon]) -> CheckResult:
    """Check that no element polygon lies inside another element.

    Shells are known not to cross or overlap at this point.
    """
    for i, poly in enumerate(polygons):
        if not poly.shell:
            continue
        shell = poly.shell
        for j, other in enumerate(polygons):
            if i == j:
                continue
            invalid_pt = _find_shell_segment_in_polygon(shell, other)
            if invalid_pt is not None:
                return TopologyValidationError(ErrorKind.NESTED_SHELLS, invalid_pt)
    return None


def _find_shell_segment_in_polygon(shell: Ring, poly: Polygon) -> Coordinate | None:
    """Point of a shell segment lying inside a polygon, if the shell is nested in it."""
    poly_shell = poly.shell
    if not poly_shell:
        return None

    shell_env = ring_envelope(shell)
    if not envelope_covers(ring_envelope(poly_shell), shell_env):
        return None

    shell0 = shell[0]
    shell1 = find_non_equal_vertex(shell, shell0)
    if not PolygonTopologyAnalyzer.is_segment_in_ring(shell0, shell1, poly_shell):
        return None

    # a shell inside one of the holes is correctly nested
    for hole in poly.holes:
        if not hole:
            continue
        if envelope_covers(ring_envelope(hole), shell_env) and (
            PolygonTopologyAnalyzer.is_segment_in_ring(shell0, shell1, hole)
        ):
            return None
    return shell0


def _check_interior_disconnected(analyzer: PolygonTopologyAnalyzer) -> CheckResult:
    if analyzer.is_interior_disconnected_by_ring_cycle():
        return TopologyValidationError(
            ErrorKind.DISCONNECTED_INTERIOR, analyzer.disconnection_location()
        )
    return None
