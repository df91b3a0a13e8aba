"""FastMCP server for polygon validity checking.

Exposes MCP tools for checking GeoJSON geometries against the OGC Simple
Features validity rules and for browsing the available validity profiles.
"""

import logging
import sys
from typing import Any

from mcp.server.fastmcp import FastMCP

from .models.errors import ProfileNotFoundError
from .tools.validity_tools import ValidityRequest, check_geometry, check_geometry_file

# Configure logging to stderr (required for MCP stdio transport)
# stdio servers must NOT log to stdout as it interferes with JSON-RPC
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

mcp = FastMCP(
    name="polyvalid_mcp",
    instructions="Check polygonal geometries for topological validity. "
    "Use polyvalid_check with a GeoJSON geometry, polyvalid_check_file for a "
    "GeoJSON file on disk, and polyvalid_list_profiles to see validity profiles.",
)


def _response_dict(response) -> dict[str, Any]:
    result = response.model_dump()
    if response.parse_error is not None:
        result["isError"] = True
    return result


@mcp.tool(
    annotations={
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    }
)
async def polyvalid_check(
    geometry: dict[str, Any],
    profile: str = "ogc",
    allow_inverted_rings: bool | None = None,
) -> dict[str, Any]:
    """Check a GeoJSON geometry for topological validity.

    Reports the first defect found, such as a self-intersection, a hole
    outside its shell or a disconnected interior, with a nearby coordinate.

    Args:
        geometry: GeoJSON geometry, Feature or FeatureCollection
        profile: Validity profile name (use polyvalid_list_profiles)
        allow_inverted_rings: Override whether self-touching rings may form holes

    Returns:
        Dict with is_valid, geometry_type, profile and error {kind, message, coordinate}
    """
    try:
        request = ValidityRequest(
            geometry=geometry,
            profile=profile,
            allow_inverted_rings=allow_inverted_rings,
        )
        return _response_dict(check_geometry(request))
    except ProfileNotFoundError as e:
        return {
            "isError": True,
            "error": str(e),
            "suggestion": "Use polyvalid_list_profiles to see available profiles",
        }
    except Exception as e:
        logger.exception("Validity check failed")
        return {
            "isError": True,
            "error": str(e),
        }


@mcp.tool(
    annotations={
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    }
)
async def polyvalid_check_file(
    file_path: str,
    profile: str = "ogc",
) -> dict[str, Any]:
    """Check the geometry stored in a GeoJSON file for topological validity.

    Args:
        file_path: Path to a .geojson or .json file
        profile: Validity profile name (use polyvalid_list_profiles)

    Returns:
        Dict with is_valid, geometry_type, profile and error {kind, message, coordinate}
    """
    try:
        return _response_dict(check_geometry_file(file_path, profile))
    except ProfileNotFoundError as e:
        return {
            "isError": True,
            "error": str(e),
            "suggestion": "Use polyvalid_list_profiles to see available profiles",
        }
    except FileNotFoundError as e:
        return {
            "isError": True,
            "error": str(e),
        }
    except Exception as e:
        logger.exception(f"Validity check of {file_path} failed")
        return {
            "isError": True,
            "error": str(e),
        }


@mcp.tool(
    annotations={
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    }
)
async def polyvalid_list_profiles() -> dict[str, Any]:
    """List available validity profiles.

    Returns:
        Dict with profiles array containing {name, description, allow_inverted_rings_forming_holes} objects
    """
    from .rules.loader import list_profiles

    try:
        profiles = list_profiles()
        return {
            "profiles": profiles,
            "count": len(profiles),
        }
    except Exception as e:
        logger.exception("Failed to list profiles")
        return {
            "isError": True,
            "error": str(e),
            "profiles": [],
        }


def run_server():
    """Run the MCP server over stdio."""
    mcp.run()


def main():
    """Main entry point."""
    run_server()


if __name__ == "__main__":
    main()
