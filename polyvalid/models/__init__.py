"""Pydantic models and result types for polyvalid."""

from .errors import (
    ErrorKind,
    GeometryParseError,
    TopologyValidationError,
    UnsupportedGeometryError,
)
from .geometry import (
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
from .options import ValidityOptions

__all__ = [
    # Geometry
    "Coordinate",
    "Ring",
    "Geometry",
    "Point",
    "MultiPoint",
    "LineString",
    "LinearRing",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
    # Errors
    "ErrorKind",
    "TopologyValidationError",
    "UnsupportedGeometryError",
    "GeometryParseError",
    # Options
    "ValidityOptions",
]
