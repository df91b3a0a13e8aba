"""Loading geometries from GeoJSON and Shapely.

Supports:
- GeoJSON geometry objects (including the non-standard ``LinearRing`` type)
- GeoJSON Features and FeatureCollections
- GeoJSON files (.geojson, .json)
- Shapely geometries

Coordinates are reduced to 2D. No other repair is done: unclosed rings,
repeated points and non-finite ordinates are kept for the validity checker
to report.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError
from shapely.geometry import mapping
from shapely.geometry.base import BaseGeometry

from ..models.errors import GeometryParseError
from ..models.geometry import Geometry, GeometryCollection

logger = logging.getLogger(__name__)

_GEOMETRY_ADAPTER = TypeAdapter(Geometry)

_EMPTY_COLLECTION = {"type": "GeometryCollection", "geometries": []}

# Nesting depth of the coordinate arrays of each geometry type
_COORDINATE_DEPTH = {
    "Point": 0,
    "MultiPoint": 1,
    "LineString": 1,
    "LinearRing": 1,
    "Polygon": 2,
    "MultiPolygon": 3,
}


def geometry_from_geojson(data: dict[str, Any]) -> Geometry:
    """Convert a GeoJSON mapping into a geometry model.

    Collections are assembled bottom-up without recursion, so nesting depth
    is not limited by the interpreter or by pydantic.

    Args:
        data: GeoJSON geometry, Feature or FeatureCollection

    Returns:
        The geometry (a FeatureCollection becomes a GeometryCollection)

    Raises:
        GeometryParseError: If the mapping is not a supported geometry
    """
    if not isinstance(data, dict):
        raise GeometryParseError(f"Expected a GeoJSON object, got {type(data).__name__}")

    gtype = data.get("type")
    if gtype == "Feature":
        data = data.get("geometry") or _EMPTY_COLLECTION
    elif gtype == "FeatureCollection":
        features = data.get("features", [])
        if not isinstance(features, list):
            raise GeometryParseError("FeatureCollection 'features' must be an array")
        data = {
            "type": "GeometryCollection",
            "geometries": [
                (f.get("geometry") if isinstance(f, dict) else None) or _EMPTY_COLLECTION
                for f in features
            ],
        }

    # Breadth-first listing: every member comes after its collection
    nodes: list[Any] = [data]
    members_of: dict[int, range] = {}
    i = 0
    while i < len(nodes):
        geom = nodes[i]
        if isinstance(geom, dict) and geom.get("type") == "GeometryCollection":
            members = geom.get("geometries", [])
            if not isinstance(members, (list, tuple)):
                raise GeometryParseError("GeometryCollection 'geometries' must be an array")
            members_of[i] = range(len(nodes), len(nodes) + len(members))
            nodes.extend(members)
        i += 1

    built: list[Geometry | None] = [None] * len(nodes)
    for i in reversed(range(len(nodes))):
        if i in members_of:
            built[i] = GeometryCollection.model_construct(
                geometries=[built[j] for j in members_of[i]]
            )
        else:
            built[i] = _simple_geometry(nodes[i])
    return built[0]


def geometry_from_shapely(geom: BaseGeometry) -> Geometry:
    """Convert a Shapely geometry into a geometry model.

    Shapely closes rings on construction, so geometries built by Shapely
    never have unclosed rings.
    """
    return geometry_from_geojson(mapping(geom))


def load_geometry(file_path: str | Path) -> Geometry:
    """Load a geometry from a GeoJSON file.

    Args:
        file_path: Path to a .geojson or .json file

    Returns:
        The geometry model

    Raises:
        FileNotFoundError: If the file doesn't exist
        GeometryParseError: If the file is not valid GeoJSON
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"GeoJSON file not found: {file_path}")

    try:
        with open(file_path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise GeometryParseError(f"{file_path.name} is not valid JSON: {e}") from e

    geometry = geometry_from_geojson(data)
    logger.info(f"Loaded {geometry.type} from {file_path.name}")
    return geometry


def _simple_geometry(data: Any) -> Geometry:
    """Validate one non-collection geometry with 2D coordinate tuples."""
    if not isinstance(data, dict):
        raise GeometryParseError(f"Expected a GeoJSON geometry, got {type(data).__name__}")

    gtype = data.get("type")
    if gtype in _COORDINATE_DEPTH and "coordinates" in data:
        data = {**data, "coordinates": _to_2d(data["coordinates"], _COORDINATE_DEPTH[gtype])}
    try:
        return _GEOMETRY_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise GeometryParseError(f"Invalid GeoJSON geometry: {e}") from e


def _to_2d(coords: Any, depth: int) -> Any:
    if depth == 0:
        # empty point
        if coords is None:
            return None
        if not isinstance(coords, (list, tuple)):
            raise GeometryParseError(f"Position must be an array, got {coords!r}")
        if len(coords) == 0:
            return None
        if len(coords) < 2:
            raise GeometryParseError(f"Position needs at least 2 ordinates: {coords}")
        return (coords[0], coords[1])
    if not isinstance(coords, (list, tuple)):
        raise GeometryParseError(f"Coordinates must be an array, got {coords!r}")
    return [_to_2d(c, depth - 1) for c in coords]
