"""Point location relative to a ring."""

from enum import Enum

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.prepared import prep

from ..models.geometry import Coordinate, Ring


class Location(Enum):
    """Topological location of a point relative to an area."""

    INTERIOR = "interior"
    BOUNDARY = "boundary"
    EXTERIOR = "exterior"


class RingLocator:
    """Locates points against the area enclosed by a single ring.

    Uses a prepared geometry, whose point-in-area test is a ray-crossing
    count over an indexed ring. It gives correct results for self-touching
    rings too, which is required for inverted shells.
    """

    def __init__(self, ring: Ring):
        self.ring = ring
        self._prepared = prep(ShapelyPolygon(ring))

    def locate(self, pt: Coordinate) -> Location:
        point = ShapelyPoint(pt)
        if self._prepared.contains(point):
            return Location.INTERIOR
        if self._prepared.covers(point):
            return Location.BOUNDARY
        return Location.EXTERIOR


def locate_point_in_ring(pt: Coordinate, ring: Ring) -> Location:
    """Locate a point against a ring without keeping the prepared locator."""
    return RingLocator(ring).locate(pt)
