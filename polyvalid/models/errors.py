"""Validity error kinds, the reported error record, and exceptions."""

from dataclasses import dataclass
from enum import Enum

from .geometry import Coordinate


class ErrorKind(Enum):
    """Kind of validity defect found in a geometry."""

    INVALID_COORDINATE = "invalid_coordinate"
    RING_NOT_CLOSED = "ring_not_closed"
    TOO_FEW_POINTS = "too_few_points"
    RING_SELF_INTERSECTION = "ring_self_intersection"
    SELF_INTERSECTION = "self_intersection"
    DISCONNECTED_INTERIOR = "disconnected_interior"
    HOLE_OUTSIDE_SHELL = "hole_outside_shell"
    NESTED_HOLES = "nested_holes"
    NESTED_SHELLS = "nested_shells"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    ErrorKind.INVALID_COORDINATE: "Invalid Coordinate",
    ErrorKind.RING_NOT_CLOSED: "Ring is not closed",
    ErrorKind.TOO_FEW_POINTS: "Too few distinct points in geometry component",
    ErrorKind.RING_SELF_INTERSECTION: "Ring Self-intersection",
    ErrorKind.SELF_INTERSECTION: "Self-intersection",
    ErrorKind.DISCONNECTED_INTERIOR: "Interior is disconnected",
    ErrorKind.HOLE_OUTSIDE_SHELL: "Hole lies outside shell",
    ErrorKind.NESTED_HOLES: "Holes are nested",
    ErrorKind.NESTED_SHELLS: "Nested shells",
}


@dataclass(frozen=True)
class TopologyValidationError:
    """The single defect reported for an invalid geometry."""

    kind: ErrorKind
    coordinate: Coordinate | None = None  # witness location

    @property
    def message(self) -> str:
        return self.kind.message

    def to_dict(self) -> dict:
        """Serialize for tool responses."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "coordinate": list(self.coordinate) if self.coordinate is not None else None,
        }

    def __str__(self) -> str:
        if self.coordinate is None:
            return self.message
        x, y = self.coordinate
        return f"{self.message} at or near point ({x}, {y})"


class UnsupportedGeometryError(TypeError):
    """Raised for an object that is not one of the supported geometry variants."""

    pass


class GeometryParseError(ValueError):
    """Error converting external data (GeoJSON, shapely) into a geometry model."""

    pass


class ProfileNotFoundError(FileNotFoundError):
    """Raised for a validity profile name with no bundled profile file."""

    def __init__(self, profile: str, available: list[str]):
        super().__init__(
            f"Profile '{profile}' not found (available: {', '.join(available) or 'none'})"
        )
        self.profile = profile
        self.available = available
