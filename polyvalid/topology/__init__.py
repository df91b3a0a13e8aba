"""Ring touch graph and polygon topology analysis."""

from .analyzer import (
    PolygonIntersectionAnalyzer,
    PolygonTopologyAnalyzer,
    SegmentString,
    remove_repeated_points,
)
from .nested_holes import NestedHoleTester
from .ring_graph import SHELL_ID, RingNode, RingTouchGraph, SelfTouchNode, TouchEdge

__all__ = [
    # Touch graph
    "RingTouchGraph",
    "RingNode",
    "TouchEdge",
    "SelfTouchNode",
    "SHELL_ID",
    # Analysis
    "PolygonTopologyAnalyzer",
    "PolygonIntersectionAnalyzer",
    "SegmentString",
    "remove_repeated_points",
    "NestedHoleTester",
]
