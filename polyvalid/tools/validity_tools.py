"""MCP tool request/response schemas and implementations."""

import logging
from typing import Any

from pydantic import BaseModel, Field

from ..loaders.geojson_loader import geometry_from_geojson, load_geometry
from ..models.errors import ErrorKind, GeometryParseError
from ..models.geometry import MultiPolygon, Polygon
from ..rules.loader import DEFAULT_PROFILE, load_profile
from ..topology.analyzer import PolygonTopologyAnalyzer
from ..validation.checker import ValidityChecker

logger = logging.getLogger(__name__)

# Defects which leave rings unfit for topology analysis
_MALFORMED_RING_KINDS = {
    ErrorKind.INVALID_COORDINATE,
    ErrorKind.RING_NOT_CLOSED,
    ErrorKind.TOO_FEW_POINTS,
}


class ValidityRequest(BaseModel):
    """Request to check a GeoJSON geometry."""

    geometry: dict[str, Any] = Field(
        ...,
        description="GeoJSON geometry, Feature or FeatureCollection (LinearRing type allowed)",
    )
    profile: str = Field(
        default=DEFAULT_PROFILE,
        description="Validity profile name: 'ogc' (default) or 'esri'",
    )
    allow_inverted_rings: bool | None = Field(
        default=None,
        description="Override the profile's acceptance of self-touching rings forming holes",
    )


class ValidityErrorInfo(BaseModel):
    """Description of the defect found."""

    kind: str
    message: str
    coordinate: list[float] | None = None


class TouchGraphSummary(BaseModel):
    """Shape of the ring touch graph of a polygonal geometry.

    Rings appear as nodes only when they can take part in a touch cycle:
    holes, shells of polygons with holes, and every shell when inverted
    rings are allowed.
    """

    rings: int = Field(..., description="Ring nodes in the graph")
    touches: int = Field(..., description="Pairs of distinct rings which touch")
    self_touches: int = Field(
        ..., description="Ring self-touches forming holes (inverted-ring profiles only)"
    )
    is_forest: bool = Field(..., description="Whether the touch relation has no cycle")


class ValidityResponse(BaseModel):
    """Result of a validity check."""

    is_valid: bool
    geometry_type: str | None = None
    profile: str
    error: ValidityErrorInfo | None = Field(
        default=None, description="The first defect found, if invalid"
    )
    parse_error: str | None = Field(
        default=None, description="Set when the input could not be read as a geometry"
    )
    touch_graph: TouchGraphSummary | None = Field(
        default=None, description="Ring touch graph of a polygon or multipolygon"
    )


def _options_for(request: ValidityRequest):
    override = None
    if request.allow_inverted_rings is not None:
        override = {"allow_inverted_rings_forming_holes": request.allow_inverted_rings}
    return load_profile(request.profile, override)


def check_geometry(request: ValidityRequest) -> ValidityResponse:
    """Check a GeoJSON geometry for validity.

    Parse errors are returned in the response rather than raised; an
    unknown profile raises ProfileNotFoundError.
    """
    options = _options_for(request)
    try:
        geometry = geometry_from_geojson(request.geometry)
    except GeometryParseError as e:
        logger.warning(f"Could not parse geometry: {e}")
        return ValidityResponse(is_valid=False, profile=options.name, parse_error=str(e))

    return _run_check(geometry, options)


def check_geometry_file(file_path: str, profile: str = DEFAULT_PROFILE) -> ValidityResponse:
    """Check the geometry stored in a GeoJSON file."""
    options = load_profile(profile)
    try:
        geometry = load_geometry(file_path)
    except GeometryParseError as e:
        logger.warning(f"Could not parse {file_path}: {e}")
        return ValidityResponse(is_valid=False, profile=options.name, parse_error=str(e))

    return _run_check(geometry, options)


def _run_check(geometry, options) -> ValidityResponse:
    error = ValidityChecker(options).get_validation_error(geometry)
    touch_graph = None
    if error is None or error.kind not in _MALFORMED_RING_KINDS:
        touch_graph = summarize_touch_graph(geometry, options.allow_inverted_rings_forming_holes)
    return ValidityResponse(
        is_valid=error is None,
        geometry_type=geometry.type,
        profile=options.name,
        error=ValidityErrorInfo(**error.to_dict()) if error is not None else None,
        touch_graph=touch_graph,
    )


def summarize_touch_graph(geometry, allow_inverted_rings: bool = False) -> TouchGraphSummary | None:
    """Summarize the ring touch graph of a polygon or multipolygon.

    Returns None for other geometry types and for empty geometries. The
    rings must be well formed (closed, finite, long enough).
    """
    if not isinstance(geometry, (Polygon, MultiPolygon)) or geometry.is_empty:
        return None
    graph = PolygonTopologyAnalyzer(geometry, allow_inverted_rings).graph
    nx_graph = graph.to_networkx()
    return TouchGraphSummary(
        rings=nx_graph.number_of_nodes(),
        touches=nx_graph.number_of_edges(),
        self_touches=sum(len(node.self_nodes) for node in graph.nodes),
        is_forest=graph.is_forest(),
    )
