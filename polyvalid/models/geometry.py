"""Geometry models checked for validity.

The geometry variants mirror GeoJSON naming (plus ``LinearRing``) and are
discriminated by their ``type`` field, so a ``Geometry`` is always exactly
one of the seven variants below.

The models deliberately accept malformed data: unclosed rings, rings with
too few points and non-finite ordinates are conditions the validity checker
reports, so they must be representable.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

Coordinate = tuple[float, float]
Ring = list[Coordinate]


class Point(BaseModel):
    """A single position, or an empty point."""

    type: Literal["Point"] = "Point"
    coordinates: Coordinate | None = Field(
        default=None, description="[x, y] position, or null for an empty point"
    )

    @property
    def is_empty(self) -> bool:
        return self.coordinates is None

    def all_coordinates(self) -> list[Coordinate]:
        return [] if self.coordinates is None else [self.coordinates]


class MultiPoint(BaseModel):
    """A set of positions."""

    type: Literal["MultiPoint"] = "MultiPoint"
    coordinates: list[Coordinate] = Field(default_factory=list, description="Positions")

    @property
    def is_empty(self) -> bool:
        return not self.coordinates

    def all_coordinates(self) -> list[Coordinate]:
        return list(self.coordinates)


class LineString(BaseModel):
    """An open (or accidentally closed) sequence of positions."""

    type: Literal["LineString"] = "LineString"
    coordinates: list[Coordinate] = Field(default_factory=list, description="Vertices")

    @property
    def is_empty(self) -> bool:
        return not self.coordinates

    def all_coordinates(self) -> list[Coordinate]:
        return list(self.coordinates)


class LinearRing(BaseModel):
    """A standalone ring, expected to be closed and simple."""

    type: Literal["LinearRing"] = "LinearRing"
    coordinates: Ring = Field(default_factory=list, description="Ring vertices")

    @property
    def is_empty(self) -> bool:
        return not self.coordinates

    def all_coordinates(self) -> list[Coordinate]:
        return list(self.coordinates)


class Polygon(BaseModel):
    """A polygon as a list of rings.

    The first ring is the shell (exterior), the rest are holes.
    """

    type: Literal["Polygon"] = "Polygon"
    coordinates: list[Ring] = Field(
        default_factory=list, description="Shell ring followed by hole rings"
    )

    @property
    def shell(self) -> Ring:
        """Shell ring coordinates (empty list for an empty polygon)."""
        return self.coordinates[0] if self.coordinates else []

    @property
    def holes(self) -> list[Ring]:
        """Hole rings, in order."""
        return self.coordinates[1:]

    @property
    def is_empty(self) -> bool:
        # holes without a shell are still checked (they lie outside it)
        return all(not ring for ring in self.coordinates)

    def all_coordinates(self) -> list[Coordinate]:
        return [pt for ring in self.coordinates for pt in ring]


class MultiPolygon(BaseModel):
    """A set of polygons, each given as its list of rings."""

    type: Literal["MultiPolygon"] = "MultiPolygon"
    coordinates: list[list[Ring]] = Field(
        default_factory=list, description="Element polygons, each a list of rings"
    )

    @property
    def polygons(self) -> list[Polygon]:
        """Element polygons as Polygon models."""
        return [Polygon(coordinates=rings) for rings in self.coordinates]

    @property
    def is_empty(self) -> bool:
        return all(not ring for rings in self.coordinates for ring in rings)

    def all_coordinates(self) -> list[Coordinate]:
        return [pt for rings in self.coordinates for ring in rings for pt in ring]


class GeometryCollection(BaseModel):
    """A heterogeneous, possibly nested, collection of geometries."""

    type: Literal["GeometryCollection"] = "GeometryCollection"
    geometries: list["Geometry"] = Field(default_factory=list, description="Member geometries")

    @property
    def is_empty(self) -> bool:
        # Iterative so that deeply nested collections cannot exhaust the stack
        stack: list[BaseModel] = list(self.geometries)
        while stack:
            geom = stack.pop()
            if isinstance(geom, GeometryCollection):
                stack.extend(geom.geometries)
            elif not geom.is_empty:
                return False
        return True

    def all_coordinates(self) -> list[Coordinate]:
        coords: list[Coordinate] = []
        stack: list[BaseModel] = list(reversed(self.geometries))
        while stack:
            geom = stack.pop()
            if isinstance(geom, GeometryCollection):
                stack.extend(reversed(geom.geometries))
            else:
                coords.extend(geom.all_coordinates())
        return coords


Geometry = Annotated[
    Union[
        Point,
        MultiPoint,
        LineString,
        LinearRing,
        Polygon,
        MultiPolygon,
        GeometryCollection,
    ],
    Field(discriminator="type"),
]

GeometryCollection.model_rebuild()
