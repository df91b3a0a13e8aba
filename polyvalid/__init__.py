"""Polyvalid - Topological validity checking for polygonal geometries.

This package provides:
- OGC Simple Features validity checks for points, lines, rings, polygons,
  multipolygons and geometry collections
- A ring touch graph for detecting interiors disconnected by touching rings
- GeoJSON loading and YAML validity profiles
- MCP tools for validity checking

Core functionality can be imported without MCP server dependencies:
    from polyvalid import is_valid, get_validation_error
    from polyvalid.validation import ValidityChecker

To get the MCP server instance:
    from polyvalid import get_mcp
    mcp = get_mcp()
"""

from .validation.checker import ValidityChecker, get_validation_error, is_valid

__version__ = "0.1.0"

__all__ = ["ValidityChecker", "get_validation_error", "is_valid", "get_mcp"]


def get_mcp():
    """Get the MCP server instance (lazy import to avoid coupling).

    Returns:
        FastMCP: The configured MCP server instance.
    """
    from .server import mcp
    return mcp
