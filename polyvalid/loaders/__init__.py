"""Geometry loading from GeoJSON and Shapely."""

from .geojson_loader import geometry_from_geojson, geometry_from_shapely, load_geometry

__all__ = ["geometry_from_geojson", "geometry_from_shapely", "load_geometry"]
