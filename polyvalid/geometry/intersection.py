"""Segment intersection classification.

Computes whether two line segments intersect, whether the intersection is
proper (interior to both segments), a single endpoint touch, or a
collinear overlap.
"""

from dataclasses import dataclass
from fractions import Fraction

from ..models.geometry import Coordinate
from .orientation import orientation_index

NO_INTERSECTION = 0
POINT_INTERSECTION = 1
COLLINEAR_INTERSECTION = 2


@dataclass(frozen=True)
class SegmentIntersection:
    """Result of intersecting two segments."""

    kind: int = NO_INTERSECTION
    points: tuple[Coordinate, ...] = ()
    is_proper: bool = False

    @property
    def has_intersection(self) -> bool:
        return self.kind != NO_INTERSECTION

    @property
    def num_points(self) -> int:
        """Number of intersection points (2 for a collinear overlap)."""
        return len(self.points)

    @property
    def point(self) -> Coordinate:
        """The first intersection point."""
        return self.points[0]


_NONE = SegmentIntersection()


def _in_envelope(p: Coordinate, a: Coordinate, b: Coordinate) -> bool:
    return (
        min(a[0], b[0]) <= p[0] <= max(a[0], b[0])
        and min(a[1], b[1]) <= p[1] <= max(a[1], b[1])
    )


def _envelopes_intersect(
    p1: Coordinate, p2: Coordinate, q1: Coordinate, q2: Coordinate
) -> bool:
    return not (
        max(q1[0], q2[0]) < min(p1[0], p2[0])
        or min(q1[0], q2[0]) > max(p1[0], p2[0])
        or max(q1[1], q2[1]) < min(p1[1], p2[1])
        or min(q1[1], q2[1]) > max(p1[1], p2[1])
    )


def point_on_segment(p: Coordinate, a: Coordinate, b: Coordinate) -> bool:
    """Test if point p lies on the closed segment a-b."""
    if not _in_envelope(p, a, b):
        return False
    if a == b:
        return p == a
    return orientation_index(a, b, p) == 0


def _collinear_intersection(
    p1: Coordinate, p2: Coordinate, q1: Coordinate, q2: Coordinate
) -> SegmentIntersection:
    q1_in_p = _in_envelope(q1, p1, p2)
    q2_in_p = _in_envelope(q2, p1, p2)
    p1_in_q = _in_envelope(p1, q1, q2)
    p2_in_q = _in_envelope(p2, q1, q2)

    if q1_in_p and q2_in_p:
        return SegmentIntersection(COLLINEAR_INTERSECTION, (q1, q2))
    if p1_in_q and p2_in_q:
        return SegmentIntersection(COLLINEAR_INTERSECTION, (p1, p2))
    if q1_in_p and p1_in_q:
        if q1 == p1 and not q2_in_p and not p2_in_q:
            return SegmentIntersection(POINT_INTERSECTION, (q1,))
        return SegmentIntersection(COLLINEAR_INTERSECTION, (q1, p1))
    if q1_in_p and p2_in_q:
        if q1 == p2 and not q2_in_p and not p1_in_q:
            return SegmentIntersection(POINT_INTERSECTION, (q1,))
        return SegmentIntersection(COLLINEAR_INTERSECTION, (q1, p2))
    if q2_in_p and p1_in_q:
        if q2 == p1 and not q1_in_p and not p2_in_q:
            return SegmentIntersection(POINT_INTERSECTION, (q2,))
        return SegmentIntersection(COLLINEAR_INTERSECTION, (q2, p1))
    if q2_in_p and p2_in_q:
        if q2 == p2 and not q1_in_p and not p1_in_q:
            return SegmentIntersection(POINT_INTERSECTION, (q2,))
        return SegmentIntersection(COLLINEAR_INTERSECTION, (q2, p2))
    return _NONE


def _proper_intersection_point(
    p1: Coordinate, p2: Coordinate, q1: Coordinate, q2: Coordinate
) -> Coordinate:
    """Exact intersection of two properly crossing segments, rounded to floats."""
    px, py = Fraction(p1[0]), Fraction(p1[1])
    rx, ry = Fraction(p2[0]) - px, Fraction(p2[1]) - py
    qx, qy = Fraction(q1[0]), Fraction(q1[1])
    sx, sy = Fraction(q2[0]) - qx, Fraction(q2[1]) - qy

    denom = rx * sy - ry * sx
    t = ((qx - px) * sy - (qy - py) * sx) / denom
    return (float(px + t * rx), float(py + t * ry))


def compute_intersection(
    p1: Coordinate, p2: Coordinate, q1: Coordinate, q2: Coordinate
) -> SegmentIntersection:
    """Intersect segment p1-p2 with segment q1-q2.

    Args:
        p1, p2: Endpoints of the first segment
        q1, q2: Endpoints of the second segment

    Returns:
        SegmentIntersection describing the intersection (possibly none)
    """
    if not _envelopes_intersect(p1, p2, q1, q2):
        return _NONE

    pq1 = orientation_index(p1, p2, q1)
    pq2 = orientation_index(p1, p2, q2)
    if (pq1 > 0 and pq2 > 0) or (pq1 < 0 and pq2 < 0):
        return _NONE

    qp1 = orientation_index(q1, q2, p1)
    qp2 = orientation_index(q1, q2, p2)
    if (qp1 > 0 and qp2 > 0) or (qp1 < 0 and qp2 < 0):
        return _NONE

    if pq1 == 0 and pq2 == 0 and qp1 == 0 and qp2 == 0:
        return _collinear_intersection(p1, p2, q1, q2)

    # An endpoint of one segment lies on the other: not proper
    if pq1 == 0 or pq2 == 0 or qp1 == 0 or qp2 == 0:
        if p1 == q1 or p1 == q2:
            pt = p1
        elif p2 == q1 or p2 == q2:
            pt = p2
        elif pq1 == 0:
            pt = q1
        elif pq2 == 0:
            pt = q2
        elif qp1 == 0:
            pt = p1
        else:
            pt = p2
        return SegmentIntersection(POINT_INTERSECTION, (pt,))

    return SegmentIntersection(
        POINT_INTERSECTION,
        (_proper_intersection_point(p1, p2, q1, q2),),
        is_proper=True,
    )
