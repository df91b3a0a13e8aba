"""Low-level geometric predicates using exact orientation and Shapely."""

from .envelope import Envelope, envelope_covers, ring_envelope
from .intersection import (
    COLLINEAR_INTERSECTION,
    NO_INTERSECTION,
    POINT_INTERSECTION,
    SegmentIntersection,
    compute_intersection,
    point_on_segment,
)
from .locate import Location, RingLocator, locate_point_in_ring
from .orientation import (
    CLOCKWISE,
    COLLINEAR,
    COUNTERCLOCKWISE,
    compare_angle,
    is_angle_greater,
    is_ccw,
    is_crossing,
    is_interior_segment,
    orientation_index,
    quadrant,
)

__all__ = [
    # Orientation
    "orientation_index",
    "quadrant",
    "is_angle_greater",
    "compare_angle",
    "is_crossing",
    "is_interior_segment",
    "is_ccw",
    "CLOCKWISE",
    "COLLINEAR",
    "COUNTERCLOCKWISE",
    # Segment intersection
    "compute_intersection",
    "point_on_segment",
    "SegmentIntersection",
    "NO_INTERSECTION",
    "POINT_INTERSECTION",
    "COLLINEAR_INTERSECTION",
    # Point location
    "Location",
    "RingLocator",
    "locate_point_in_ring",
    # Envelopes
    "Envelope",
    "ring_envelope",
    "envelope_covers",
]
