"""Detection of polygon holes nested inside other holes."""

import logging

from shapely.geometry import box
from shapely.strtree import STRtree

from ..geometry.envelope import envelope_covers, ring_envelope
from ..models.geometry import Coordinate, Polygon
from .analyzer import PolygonTopologyAnalyzer

logger = logging.getLogger(__name__)


class NestedHoleTester:
    """Tests whether any hole of a polygon lies inside another hole.

    Holes are assumed not to cross each other (checked earlier), so a hole
    whose envelope is covered by another hole's envelope is nested exactly
    when one of its points, or its first segment, lies inside that hole.
    Candidate pairs come from an STRtree over the hole envelopes.
    """

    def __init__(self, polygon: Polygon):
        self.holes = [hole for hole in polygon.holes if hole]
        self._nested_point: Coordinate | None = None
        self._envelopes = [ring_envelope(hole) for hole in self.holes]
        self._index = STRtree([box(*env) for env in self._envelopes]) if self.holes else None

    def is_nested(self) -> bool:
        """Check whether some hole is nested in another."""
        if self._index is None:
            return False

        for i, hole in enumerate(self.holes):
            env = self._envelopes[i]
            for j in sorted(self._index.query(box(*env)).tolist()):
                if i == j:
                    continue
                # the test hole must cover the hole to contain it
                if not envelope_covers(self._envelopes[j], env):
                    continue
                if PolygonTopologyAnalyzer.is_ring_nested(hole, self.holes[j]):
                    self._nested_point = hole[0]
                    logger.debug(f"Hole {i} is nested in hole {j}")
                    return True
        return False

    def nested_point(self) -> Coordinate | None:
        """A point of the nested hole (set after is_nested returns True)."""
        return self._nested_point
