"""MCP tool schemas and implementations."""

from .validity_tools import (
    ValidityErrorInfo,
    ValidityRequest,
    ValidityResponse,
    check_geometry,
    check_geometry_file,
)

__all__ = [
    "ValidityRequest",
    "ValidityResponse",
    "ValidityErrorInfo",
    "check_geometry",
    "check_geometry_file",
]
