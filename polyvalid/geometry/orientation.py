"""Orientation and angular predicates.

Orientation is computed with a floating-point filter and falls back to exact
rational arithmetic when the filter cannot decide the sign, so collinearity
and vertex touches are classified exactly.
"""

from fractions import Fraction

from shapely.geometry import LinearRing as ShapelyLinearRing

from ..models.geometry import Coordinate

CLOCKWISE = -1
COLLINEAR = 0
COUNTERCLOCKWISE = 1

# Quadrants, numbered counter-clockwise from the positive x axis
NE, NW, SW, SE = 0, 1, 2, 3

_DP_SAFE_EPSILON = 1e-15


def _sign(value) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def _orientation_filter(pa: Coordinate, pb: Coordinate, pc: Coordinate) -> int | None:
    """Fast orientation sign, or None when rounding could affect the result."""
    detleft = (pa[0] - pc[0]) * (pb[1] - pc[1])
    detright = (pa[1] - pc[1]) * (pb[0] - pc[0])
    det = detleft - detright

    if detleft > 0.0:
        if detright <= 0.0:
            return _sign(det)
        detsum = detleft + detright
    elif detleft < 0.0:
        if detright >= 0.0:
            return _sign(det)
        detsum = -detleft - detright
    else:
        return _sign(det)

    errbound = _DP_SAFE_EPSILON * detsum
    if det >= errbound or -det >= errbound:
        return _sign(det)
    return None


def orientation_index(p1: Coordinate, p2: Coordinate, q: Coordinate) -> int:
    """Orientation of point q relative to the directed segment p1->p2.

    Returns:
        COUNTERCLOCKWISE (1) if q is left of the segment, CLOCKWISE (-1) if
        right, COLLINEAR (0) if on the line through it
    """
    index = _orientation_filter(p1, p2, q)
    if index is not None:
        return index

    dx1 = Fraction(p2[0]) - Fraction(p1[0])
    dy1 = Fraction(p2[1]) - Fraction(p1[1])
    dx2 = Fraction(q[0]) - Fraction(p2[0])
    dy2 = Fraction(q[1]) - Fraction(p2[1])
    return _sign(dx1 * dy2 - dy1 * dx2)


def quadrant(origin: Coordinate, p: Coordinate) -> int:
    """Quadrant of the vector origin->p.

    Raises:
        ValueError: If the vector has zero length
    """
    dx = p[0] - origin[0]
    dy = p[1] - origin[1]
    if dx == 0.0 and dy == 0.0:
        raise ValueError(f"Cannot compute the quadrant for point ( {origin[0]}, {origin[1]} )")
    if dx >= 0.0:
        return NE if dy >= 0.0 else SE
    return NW if dy >= 0.0 else SW


def is_angle_greater(origin: Coordinate, p: Coordinate, q: Coordinate) -> bool:
    """Test if the angle of origin->p is greater than that of origin->q.

    Angles are measured counter-clockwise from the positive x axis.
    """
    quadrant_p = quadrant(origin, p)
    quadrant_q = quadrant(origin, q)
    if quadrant_p > quadrant_q:
        return True
    if quadrant_p < quadrant_q:
        return False
    # same quadrant: p is greater if it is CCW of q
    return orientation_index(origin, q, p) == COUNTERCLOCKWISE


def compare_angle(origin: Coordinate, p: Coordinate, q: Coordinate) -> int:
    """Compare the angles of origin->p and origin->q (1, -1 or 0)."""
    quadrant_p = quadrant(origin, p)
    quadrant_q = quadrant(origin, q)
    if quadrant_p > quadrant_q:
        return 1
    if quadrant_p < quadrant_q:
        return -1
    orient = orientation_index(origin, q, p)
    if orient == COUNTERCLOCKWISE:
        return 1
    if orient == CLOCKWISE:
        return -1
    return 0


def _is_between(origin: Coordinate, p: Coordinate, e0: Coordinate, e1: Coordinate) -> bool:
    """Test if origin->p lies strictly inside the angle e0..e1 (e0 < e1)."""
    if not is_angle_greater(origin, p, e0):
        return False
    return not is_angle_greater(origin, p, e1)


def _compare_between(origin: Coordinate, p: Coordinate, e0: Coordinate, e1: Coordinate) -> int:
    """Position of origin->p relative to the angle e0..e1.

    Returns 1 if strictly inside, -1 if strictly outside, 0 if collinear
    with either bounding edge.
    """
    comp0 = compare_angle(origin, p, e0)
    if comp0 == 0:
        return 0
    comp1 = compare_angle(origin, p, e1)
    if comp1 == 0:
        return 0
    if comp0 > 0 and comp1 < 0:
        return 1
    return -1


def is_crossing(
    node: Coordinate,
    a0: Coordinate,
    a1: Coordinate,
    b0: Coordinate,
    b1: Coordinate,
) -> bool:
    """Test if two edge pairs meeting at a node cross each other.

    Edge pair A is (node-a0, node-a1) and edge pair B is (node-b0, node-b1).
    They cross when b0 and b1 lie on different sides of the angle formed by
    A. Collinear edges are not a crossing.
    """
    a_lo, a_hi = a0, a1
    if is_angle_greater(node, a_lo, a_hi):
        a_lo, a_hi = a1, a0

    comp_between0 = _compare_between(node, b0, a_lo, a_hi)
    if comp_between0 == 0:
        return False
    comp_between1 = _compare_between(node, b1, a_lo, a_hi)
    if comp_between1 == 0:
        return False
    return comp_between0 != comp_between1


def is_interior_segment(node: Coordinate, a0: Coordinate, a1: Coordinate, b: Coordinate) -> bool:
    """Test if the segment node-b lies in the interior of a corner.

    The corner is formed by a ring passing a0 -> node -> a1 whose interior
    is on the right of that path.
    """
    a_lo, a_hi = a0, a1
    is_interior_between = True
    if is_angle_greater(node, a_lo, a_hi):
        a_lo, a_hi = a1, a0
        is_interior_between = False

    is_between = _is_between(node, b, a_lo, a_hi)
    return (is_between and is_interior_between) or (not is_between and not is_interior_between)


def is_ccw(ring: list[Coordinate]) -> bool:
    """Test if a closed ring is oriented counter-clockwise."""
    return bool(ShapelyLinearRing(ring).is_ccw)
