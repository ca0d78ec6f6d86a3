"""Geometry primitives: points, boxes, ward polygons and the math over them.

Geometries are GeoJSON-shaped (``Polygon`` / ``MultiPolygon``) with
positions in ``[longitude, latitude]`` order, as GeoJSON files and most GIS exports
deliver them. Containment and shape operations go through Shapely; distances
are great-circle (haversine) and areas are geodesic on the WGS84 ellipsoid.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pyproj import Geod
from shapely.errors import GEOSException
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import MultiPoint, box, shape
from shapely.geometry.base import BaseGeometry
from shapely.ops import nearest_points

from ward_analytics.errors import EmptyGeometryError, MalformedGeometryError

EARTH_RADIUS_KM = 6371.0088

SIMPLE_VERTEX_LIMIT = 50
MODERATE_VERTEX_LIMIT = 200

_GEOD = Geod(ellps="WGS84")

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class Point(BaseModel):
    """A geographic position in degrees."""

    latitude: float = Field(allow_inf_nan=False)
    longitude: float = Field(allow_inf_nan=False)

    model_config = ConfigDict(frozen=True)

    def to_shape(self) -> ShapelyPoint:
        """Return the point as a Shapely point (x=longitude, y=latitude)."""
        return ShapelyPoint(self.longitude, self.latitude)


class BoundingBox(BaseModel):
    """An axis-aligned latitude/longitude box. Degenerate boxes are valid."""

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_order(self) -> BoundingBox:
        if self.min_lat > self.max_lat:
            raise ValueError(f"min_lat {self.min_lat} exceeds max_lat {self.max_lat}")
        if self.min_lng > self.max_lng:
            raise ValueError(f"min_lng {self.min_lng} exceeds max_lng {self.max_lng}")
        return self

    @property
    def lat_range(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def lng_range(self) -> float:
        return self.max_lng - self.min_lng

    def union(self, other: BoundingBox) -> BoundingBox:
        """Return the smallest box covering both boxes."""
        return BoundingBox(
            min_lat=min(self.min_lat, other.min_lat),
            max_lat=max(self.max_lat, other.max_lat),
            min_lng=min(self.min_lng, other.min_lng),
            max_lng=max(self.max_lng, other.max_lng),
        )

    def to_shape(self) -> BaseGeometry:
        """Return the box as a Shapely geometry.

        A degenerate box becomes a point or a line so that intersection
        tests against it still behave.
        """
        if self.lat_range and self.lng_range:
            return box(self.min_lng, self.min_lat, self.max_lng, self.max_lat)
        return MultiPoint([(self.min_lng, self.min_lat), (self.max_lng, self.max_lat)]).envelope


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


class Geometry(BaseModel):
    """A ward boundary: a GeoJSON Polygon or MultiPolygon.

    Coordinates are stored as nested tuples so a geometry handed out by a
    backend cannot be altered in place.
    """

    type: Literal["Polygon", "MultiPolygon"]
    coordinates: tuple[Any, ...]

    model_config = ConfigDict(frozen=True)

    @field_validator("coordinates", mode="before")
    @classmethod
    def freeze_coordinates(cls, v: Any) -> Any:
        """Convert nested lists (as parsed from GeoJSON) into nested tuples."""
        return _freeze(v)

    def polygons(self) -> tuple[tuple[Any, ...], ...]:
        """Return the geometry as a tuple of polygons, each a tuple of rings."""
        if self.type == "Polygon":
            return (self.coordinates,) if self.coordinates else ()
        return self.coordinates

    def rings(self) -> Iterator[tuple[Any, ...]]:
        """Yield every ring of every polygon, outer rings and holes alike."""
        for polygon in self.polygons():
            yield from polygon

    def positions(self) -> Iterator[tuple[float, float]]:
        """Yield every ``(longitude, latitude)`` vertex."""
        for ring in self.rings():
            for pt in ring:
                yield float(pt[0]), float(pt[1])

    def is_empty(self) -> bool:
        return not any(self.rings())


class BoundaryComplexity(StrEnum):
    """Coarse shape classification by vertex count."""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


# ---------------------------------------------------------------------------
# Counting and extent
# ---------------------------------------------------------------------------


def vertex_count(geometry: Geometry) -> int:
    """Return the number of positions across all rings and polygons."""
    return sum(len(ring) for ring in geometry.rings())


def classify_complexity(vertices: int) -> BoundaryComplexity:
    """Classify a boundary: <50 simple, 50-199 moderate, 200+ complex."""
    if vertices < SIMPLE_VERTEX_LIMIT:
        return BoundaryComplexity.SIMPLE
    if vertices < MODERATE_VERTEX_LIMIT:
        return BoundaryComplexity.MODERATE
    return BoundaryComplexity.COMPLEX


def bounding_box(geometry: Geometry) -> BoundingBox:
    """Return the extent of all vertices of the geometry.

    Raises:
        EmptyGeometryError: If the geometry has no rings (or only empty ones).
    """
    lngs: list[float] = []
    lats: list[float] = []
    for lng, lat in geometry.positions():
        lngs.append(lng)
        lats.append(lat)
    if not lngs:
        raise EmptyGeometryError(f"{geometry.type} has no rings")
    return BoundingBox(min_lat=min(lats), max_lat=max(lats), min_lng=min(lngs), max_lng=max(lngs))


# ---------------------------------------------------------------------------
# Shape operations
# ---------------------------------------------------------------------------


def to_shape(geometry: Geometry) -> BaseGeometry:
    """Parse the geometry into a Shapely geometry.

    Raises:
        EmptyGeometryError: If the geometry has no rings.
        MalformedGeometryError: If a ring cannot be built, e.g. it has
            fewer than four positions.
    """
    if geometry.is_empty():
        raise EmptyGeometryError(f"{geometry.type} has no rings")
    try:
        return shape(geometry.model_dump(mode="json"))
    except (ValueError, GEOSException) as exc:
        raise MalformedGeometryError(f"{geometry.type} cannot be parsed: {exc}") from exc


def contains_point(geometry: Geometry, point: Point) -> bool:
    """Return True if the point lies inside the geometry.

    Inside means within the outer ring of some polygon and outside that
    polygon's holes. Points exactly on a ring count as inside.
    """
    return shape_covers(to_shape(geometry), point)


def shape_covers(geom: BaseGeometry, point: Point) -> bool:
    """Inclusive point-in-polygon test on an already parsed shape."""
    return bool(geom.covers(point.to_shape()))


def haversine_distance_km(a: Point, b: Point) -> float:
    """Great-circle distance between two points in kilometres."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlng = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def shape_distance_km(geom: BaseGeometry, point: Point) -> float:
    """Haversine distance from a point to the nearest point of a shape.

    Zero when the shape covers the point. The nearest point is located in
    degree space and then measured on the sphere.
    """
    target = point.to_shape()
    if geom.covers(target):
        return 0.0
    nearest, _ = nearest_points(geom, target)
    return haversine_distance_km(point, Point(latitude=nearest.y, longitude=nearest.x))


def distance_to_geometry_km(geometry: Geometry, point: Point) -> float:
    """Distance in km from a point to a ward boundary (0 when inside)."""
    return shape_distance_km(to_shape(geometry), point)


def centroid(geometry: Geometry) -> Point:
    """Return the area centroid of the geometry."""
    return shape_centroid(to_shape(geometry))


def shape_centroid(geom: BaseGeometry) -> Point:
    c = geom.centroid
    return Point(latitude=c.y, longitude=c.x)


def geodesic_area_km2(geometry: Geometry) -> float:
    """Geodesic area on the WGS84 ellipsoid in square kilometres."""
    return shape_area_km2(to_shape(geometry))


def shape_area_km2(geom: BaseGeometry) -> float:
    area, _ = _GEOD.geometry_area_perimeter(geom)
    return abs(area) / 1_000_000


def geodesic_perimeter_km(geometry: Geometry) -> float:
    """Geodesic length of all rings (holes included) in kilometres."""
    _, perimeter = _GEOD.geometry_area_perimeter(to_shape(geometry))
    return abs(perimeter) / 1000
