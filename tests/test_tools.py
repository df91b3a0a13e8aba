"""Tests for the MCP tool layer and server tools."""

import json

import pytest

from polyvalid.models.geometry import Polygon
from polyvalid.tools.validity_tools import (
    TouchGraphSummary,
    ValidityRequest,
    check_geometry,
    check_geometry_file,
    summarize_touch_graph,
)

SQUARE = [[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]]
INVERTED_SHELL = [
    [0, 0], [10, 0], [10, 10], [5, 10], [7, 5],
    [3, 5], [5, 10], [0, 10], [0, 0],
]
VERTEX_BOW_TIE = [[0, 0], [2, 2], [4, 0], [4, 4], [2, 2], [0, 4], [0, 0]]
HOLE_LOWER = [[5, 0], [7, 3], [5, 5], [3, 3], [5, 0]]
HOLE_UPPER = [[5, 5], [7, 7], [5, 10], [3, 7], [5, 5]]


class TestCheckGeometry:
    """Test check_geometry tool implementation."""

    def test_valid_polygon(self):
        response = check_geometry(
            ValidityRequest(geometry={"type": "Polygon", "coordinates": [SQUARE]})
        )
        assert response.is_valid
        assert response.geometry_type == "Polygon"
        assert response.profile == "ogc"
        assert response.error is None

    def test_invalid_polygon(self):
        hole = [[20, 20], [22, 20], [22, 22], [20, 22], [20, 20]]
        response = check_geometry(
            ValidityRequest(geometry={"type": "Polygon", "coordinates": [SQUARE, hole]})
        )
        assert not response.is_valid
        assert response.error.kind == "hole_outside_shell"
        assert response.error.coordinate == [20.0, 20.0]

    def test_profile_selection(self):
        geometry = {"type": "Polygon", "coordinates": [INVERTED_SHELL]}
        assert not check_geometry(ValidityRequest(geometry=geometry)).is_valid
        assert check_geometry(ValidityRequest(geometry=geometry, profile="esri")).is_valid

    def test_option_override(self):
        geometry = {"type": "Polygon", "coordinates": [INVERTED_SHELL]}
        response = check_geometry(
            ValidityRequest(geometry=geometry, profile="esri", allow_inverted_rings=False)
        )
        assert response.error.kind == "disconnected_interior"
        assert response.profile == "esri"

    def test_parse_error_in_response(self):
        response = check_geometry(ValidityRequest(geometry={"type": "Hexagon"}))
        assert not response.is_valid
        assert response.parse_error
        assert response.error is None

    def test_unknown_profile(self):
        with pytest.raises(FileNotFoundError):
            check_geometry(ValidityRequest(geometry={"type": "Point"}, profile="nope"))

    def test_check_file(self, tmp_path):
        path = tmp_path / "ring.geojson"
        path.write_text(json.dumps({"type": "LinearRing", "coordinates": SQUARE[:-1]}))
        response = check_geometry_file(str(path))
        assert response.error.kind == "ring_not_closed"

    @pytest.mark.parametrize(
        "geometry",
        [
            {"type": "Point", "coordinates": 5},
            {"type": "Polygon", "coordinates": [[5, 6, 7, 8]]},
        ],
    )
    def test_malformed_coordinates(self, geometry):
        response = check_geometry(ValidityRequest(geometry=geometry))
        assert not response.is_valid
        assert response.parse_error
        assert response.error is None

    def test_deeply_nested_collection(self):
        data = {"type": "Polygon", "coordinates": [VERTEX_BOW_TIE]}
        for _ in range(2500):
            data = {"type": "GeometryCollection", "geometries": [data]}

        response = check_geometry(ValidityRequest(geometry=data))
        assert response.geometry_type == "GeometryCollection"
        assert response.error.kind == "disconnected_interior"
        assert response.error.coordinate == [2.0, 2.0]
        assert response.touch_graph is None


class TestTouchGraphSummary:
    """Test the ring touch graph reported for polygonal geometries."""

    def test_hole_touching_shell(self):
        response = check_geometry(
            ValidityRequest(geometry={"type": "Polygon", "coordinates": [SQUARE, HOLE_LOWER]})
        )
        assert response.is_valid
        assert response.touch_graph == TouchGraphSummary(
            rings=2, touches=1, self_touches=0, is_forest=True
        )

    def test_touch_cycle(self):
        geometry = {"type": "Polygon", "coordinates": [SQUARE, HOLE_LOWER, HOLE_UPPER]}
        response = check_geometry(ValidityRequest(geometry=geometry))
        assert response.error.kind == "disconnected_interior"
        assert response.touch_graph.rings == 3
        assert response.touch_graph.touches == 3
        assert not response.touch_graph.is_forest

    def test_inverted_shell_self_touch(self):
        geometry = {"type": "Polygon", "coordinates": [INVERTED_SHELL]}
        response = check_geometry(ValidityRequest(geometry=geometry, profile="esri"))
        assert response.touch_graph == TouchGraphSummary(
            rings=1, touches=0, self_touches=1, is_forest=True
        )

    def test_hole_free_polygon_has_no_ring_nodes(self):
        response = check_geometry(
            ValidityRequest(geometry={"type": "MultiPolygon", "coordinates": [[SQUARE]]})
        )
        assert response.touch_graph.rings == 0
        assert response.touch_graph.is_forest

    def test_not_polygonal(self):
        response = check_geometry(
            ValidityRequest(geometry={"type": "Point", "coordinates": [1, 2]})
        )
        assert response.touch_graph is None

    def test_malformed_rings_are_not_summarized(self):
        response = check_geometry(
            ValidityRequest(geometry={"type": "Polygon", "coordinates": [SQUARE[:-1]]})
        )
        assert response.error.kind == "ring_not_closed"
        assert response.touch_graph is None

    def test_summarize_empty_polygon(self):
        assert summarize_touch_graph(Polygon()) is None


class TestServerTools:
    """Test the MCP server tool functions."""

    @pytest.mark.asyncio
    async def test_polyvalid_check(self):
        from polyvalid.server import polyvalid_check

        result = await polyvalid_check({"type": "Polygon", "coordinates": [SQUARE]})
        assert result["is_valid"] is True
        assert result["profile"] == "ogc"
        assert "isError" not in result

    @pytest.mark.asyncio
    async def test_polyvalid_check_parse_error(self):
        from polyvalid.server import polyvalid_check

        result = await polyvalid_check({"type": "Polygon", "coordinates": "bad"})
        assert result["isError"] is True
        assert result["parse_error"]

    @pytest.mark.asyncio
    async def test_polyvalid_check_unknown_profile(self):
        from polyvalid.server import polyvalid_check

        result = await polyvalid_check({"type": "Point"}, profile="nope")
        assert result["isError"] is True
        assert "suggestion" in result

    @pytest.mark.asyncio
    async def test_polyvalid_check_file_missing(self, tmp_path):
        from polyvalid.server import polyvalid_check_file

        result = await polyvalid_check_file(str(tmp_path / "missing.geojson"))
        assert result["isError"] is True
        assert "suggestion" not in result

    @pytest.mark.asyncio
    async def test_polyvalid_check_file_unknown_profile(self, tmp_path):
        from polyvalid.server import polyvalid_check_file

        path = tmp_path / "square.geojson"
        path.write_text(json.dumps({"type": "Polygon", "coordinates": [SQUARE]}))
        result = await polyvalid_check_file(str(path), profile="nope")
        assert result["isError"] is True
        assert "available: esri, ogc" in result["error"]
        assert "suggestion" in result

    @pytest.mark.asyncio
    async def test_polyvalid_list_profiles(self):
        from polyvalid.server import polyvalid_list_profiles

        result = await polyvalid_list_profiles()
        assert result["count"] == 2
        assert {p["name"] for p in result["profiles"]} == {"ogc", "esri"}
        assert all("allow_inverted_rings_forming_holes" in p for p in result["profiles"])

    def test_get_mcp(self):
        from polyvalid import get_mcp

        assert get_mcp().name == "polyvalid_mcp"
