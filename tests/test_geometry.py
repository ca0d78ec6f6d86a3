"""Tests for ward_analytics.geometry."""

import math

import pytest
from pydantic import ValidationError

from ward_analytics.data_access.mock import rectangle
from ward_analytics.errors import EmptyGeometryError, MalformedGeometryError
from ward_analytics.geometry import (
    BoundaryComplexity,
    BoundingBox,
    Geometry,
    Point,
    bounding_box,
    centroid,
    classify_complexity,
    contains_point,
    distance_to_geometry_km,
    geodesic_area_km2,
    geodesic_perimeter_km,
    haversine_distance_km,
    to_shape,
    vertex_count,
)

SQUARE_WITH_HOLE = Geometry(
    type="Polygon",
    coordinates=[
        [[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]],
        [[4, 4], [6, 4], [6, 6], [4, 6], [4, 4]],
    ],
)

TWO_SQUARES = Geometry(
    type="MultiPolygon",
    coordinates=[
        [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]],
        [[[5, 5], [6, 5], [6, 6], [5, 6], [5, 5]]],
    ],
)

EMPTY = Geometry(type="Polygon", coordinates=[])


class TestPoint:
    def test_shape_is_lng_lat(self) -> None:
        shp = Point(latitude=-1.28, longitude=36.82).to_shape()
        assert shp.x == 36.82
        assert shp.y == -1.28

    def test_rejects_nan(self) -> None:
        with pytest.raises(ValidationError):
            Point(latitude=float("nan"), longitude=0.0)

    def test_frozen(self) -> None:
        p = Point(latitude=0.0, longitude=0.0)
        with pytest.raises(ValidationError):
            p.latitude = 1.0  # type: ignore[misc]


class TestBoundingBox:
    def test_degenerate_box_is_valid(self) -> None:
        bbox = BoundingBox(min_lat=1.0, max_lat=1.0, min_lng=2.0, max_lng=2.0)
        assert bbox.lat_range == 0.0
        assert bbox.lng_range == 0.0

    def test_inverted_latitudes_rejected(self) -> None:
        with pytest.raises(ValidationError, match="min_lat"):
            BoundingBox(min_lat=2.0, max_lat=1.0, min_lng=0.0, max_lng=1.0)

    def test_inverted_longitudes_rejected(self) -> None:
        with pytest.raises(ValidationError, match="min_lng"):
            BoundingBox(min_lat=0.0, max_lat=1.0, min_lng=3.0, max_lng=1.0)

    def test_union(self) -> None:
        a = BoundingBox(min_lat=0.0, max_lat=1.0, min_lng=0.0, max_lng=1.0)
        b = BoundingBox(min_lat=-2.0, max_lat=0.5, min_lng=3.0, max_lng=4.0)
        assert a.union(b) == BoundingBox(min_lat=-2.0, max_lat=1.0, min_lng=0.0, max_lng=4.0)


class TestVertexCount:
    def test_counts_holes(self) -> None:
        assert vertex_count(SQUARE_WITH_HOLE) == 10

    def test_counts_every_polygon(self) -> None:
        assert vertex_count(TWO_SQUARES) == 10

    def test_empty(self) -> None:
        assert vertex_count(EMPTY) == 0

    def test_rectangle_steps(self) -> None:
        assert vertex_count(rectangle(0, 0, 1, 1, steps=15)) == 61


@pytest.mark.parametrize(
    ("vertices", "expected"),
    [
        (0, BoundaryComplexity.SIMPLE),
        (49, BoundaryComplexity.SIMPLE),
        (50, BoundaryComplexity.MODERATE),
        (60, BoundaryComplexity.MODERATE),
        (199, BoundaryComplexity.MODERATE),
        (200, BoundaryComplexity.COMPLEX),
        (1500, BoundaryComplexity.COMPLEX),
    ],
)
def test_classify_complexity(vertices: int, expected: BoundaryComplexity) -> None:
    assert classify_complexity(vertices) is expected


def test_sixty_point_ring_is_moderate() -> None:
    ring = [[math.cos(2 * math.pi * i / 59), math.sin(2 * math.pi * i / 59)] for i in range(59)]
    ring.append(ring[0])
    geometry = Geometry(type="Polygon", coordinates=[ring])
    assert vertex_count(geometry) == 60
    assert classify_complexity(vertex_count(geometry)) is BoundaryComplexity.MODERATE


def test_complexity_values() -> None:
    assert [c.value for c in BoundaryComplexity] == ["simple", "moderate", "complex"]


class TestBoundingBoxOf:
    def test_multipolygon_extent(self) -> None:
        bbox = bounding_box(TWO_SQUARES)
        assert bbox == BoundingBox(min_lat=0, max_lat=6, min_lng=0, max_lng=6)

    def test_axes_not_swapped(self) -> None:
        bbox = bounding_box(rectangle(36.74, -1.24, 36.80, -1.20))
        assert bbox.min_lng == 36.74
        assert bbox.max_lat == -1.20

    def test_empty_raises(self) -> None:
        with pytest.raises(EmptyGeometryError):
            bounding_box(EMPTY)

    def test_multipolygon_of_empty_rings_raises(self) -> None:
        with pytest.raises(EmptyGeometryError):
            bounding_box(Geometry(type="MultiPolygon", coordinates=[[[]]]))


class TestContainsPoint:
    def test_inside(self) -> None:
        assert contains_point(SQUARE_WITH_HOLE, Point(latitude=1, longitude=1))

    def test_in_hole_is_outside(self) -> None:
        assert not contains_point(SQUARE_WITH_HOLE, Point(latitude=5, longitude=5))

    def test_on_boundary_is_inside(self) -> None:
        assert contains_point(SQUARE_WITH_HOLE, Point(latitude=0, longitude=5))

    def test_on_vertex_is_inside(self) -> None:
        assert contains_point(SQUARE_WITH_HOLE, Point(latitude=10, longitude=10))

    def test_second_polygon(self) -> None:
        assert contains_point(TWO_SQUARES, Point(latitude=5.5, longitude=5.5))
        assert not contains_point(TWO_SQUARES, Point(latitude=3, longitude=3))

    def test_coordinates_are_lng_lat(self) -> None:
        geom = rectangle(36.0, -2.0, 37.0, -1.0)
        assert contains_point(geom, Point(latitude=-1.5, longitude=36.5))
        assert not contains_point(geom, Point(latitude=36.5, longitude=-1.5))

    def test_empty_raises(self) -> None:
        with pytest.raises(EmptyGeometryError):
            contains_point(EMPTY, Point(latitude=0, longitude=0))

    def test_short_ring_raises(self) -> None:
        sliver = Geometry(type="Polygon", coordinates=[[[0, 0], [1, 1], [0, 0]]])
        with pytest.raises(MalformedGeometryError) as exc_info:
            contains_point(sliver, Point(latitude=0, longitude=0))
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.__cause__ is not None


class TestDistances:
    def test_haversine_zero(self) -> None:
        p = Point(latitude=-1.28, longitude=36.82)
        assert haversine_distance_km(p, p) == 0.0

    def test_haversine_one_degree_at_equator(self) -> None:
        d = haversine_distance_km(Point(latitude=0, longitude=0), Point(latitude=0, longitude=1))
        assert d == pytest.approx(111.195, abs=0.01)

    def test_haversine_symmetric(self) -> None:
        a = Point(latitude=-1.28, longitude=36.82)
        b = Point(latitude=-4.04, longitude=39.67)
        assert haversine_distance_km(a, b) == pytest.approx(haversine_distance_km(b, a))
        assert haversine_distance_km(a, b) == pytest.approx(440, abs=10)

    def test_distance_inside_is_zero(self) -> None:
        assert distance_to_geometry_km(rectangle(0, 0, 1, 1), Point(latitude=0.5, longitude=0.5)) == 0.0

    def test_distance_to_nearest_edge(self) -> None:
        d = distance_to_geometry_km(rectangle(0, 0, 1, 1), Point(latitude=0.5, longitude=2.0))
        assert d == pytest.approx(111.2, abs=0.1)


class TestAreaAndCentroid:
    def test_centroid(self) -> None:
        c = centroid(rectangle(0, 0, 2, 2))
        assert c.latitude == pytest.approx(1.0)
        assert c.longitude == pytest.approx(1.0)

    def test_area_one_degree_square_at_equator(self) -> None:
        assert geodesic_area_km2(rectangle(0, 0, 1, 1)) == pytest.approx(12308, rel=0.01)

    def test_hole_reduces_area(self) -> None:
        solid = geodesic_area_km2(rectangle(0, 0, 10, 10))
        assert geodesic_area_km2(SQUARE_WITH_HOLE) < solid

    def test_perimeter(self) -> None:
        assert geodesic_perimeter_km(rectangle(0, 0, 1, 1)) == pytest.approx(4 * 111.0, rel=0.01)

    def test_area_is_positive_for_clockwise_ring(self) -> None:
        clockwise = Geometry(type="Polygon", coordinates=[[[0, 0], [0, 1], [1, 1], [1, 0], [0, 0]]])
        assert geodesic_area_km2(clockwise) > 0
        assert not math.isnan(geodesic_area_km2(clockwise))


class TestGeometryImmutability:
    def test_nested_lists_become_tuples(self) -> None:
        assert SQUARE_WITH_HOLE.coordinates[0][0] == (0, 0)
        assert isinstance(TWO_SQUARES.coordinates[1][0], tuple)

    def test_positions_cannot_be_reassigned(self) -> None:
        geom = rectangle(0, 0, 1, 1)
        with pytest.raises(TypeError):
            geom.coordinates[0][0] = (5.0, 5.0)  # type: ignore[index]
        with pytest.raises(AttributeError):
            geom.coordinates[0].append((5.0, 5.0))  # type: ignore[attr-defined]
        assert bounding_box(geom) == BoundingBox(min_lat=0, max_lat=1, min_lng=0, max_lng=1)

    def test_caller_list_is_copied(self) -> None:
        ring = [[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]
        geom = Geometry(type="Polygon", coordinates=[ring])
        ring[1][0] = 9
        assert bounding_box(geom).max_lng == 1

    def test_still_parses_into_shapely(self) -> None:
        assert to_shape(SQUARE_WITH_HOLE).area == pytest.approx(96.0)
