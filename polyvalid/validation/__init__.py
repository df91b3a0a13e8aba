"""Geometry validity checking."""

from .checker import (
    MIN_SIZE_LINESTRING,
    MIN_SIZE_RING,
    ValidityChecker,
    get_validation_error,
    is_valid,
    is_valid_coordinate,
)

__all__ = [
    "ValidityChecker",
    "is_valid",
    "get_validation_error",
    "is_valid_coordinate",
    "MIN_SIZE_LINESTRING",
    "MIN_SIZE_RING",
]
