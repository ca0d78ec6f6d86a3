"""Kenya Ward Lookup.

Resolve a coordinate against the ward boundaries: the containing ward, its
nearest neighbours, every ward within a radius, and the boundary profile of
the containing ward.

Airflow equivalent: PostGIS ST_Contains / ST_DWithin queries in operators.
Prefect approach:    Contract queries as tasks, results in a Pydantic model
                     and a markdown artifact.
"""

from __future__ import annotations

from prefect import flow, get_run_logger, task
from prefect.artifacts import create_markdown_artifact
from pydantic import BaseModel

from ward_analytics.config import DEFAULT_BLOCK_NAME, timestamp
from ward_analytics.data_access import DataAccess, get_data_source
from ward_analytics.engine import AnalyticsEngine
from ward_analytics.geometry import Point, distance_to_geometry_km
from ward_analytics.models import BoundaryAnalytics, Ward

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class WardDistance(BaseModel):
    """A ward and its distance from the query point."""

    ward_name: str
    county_name: str
    distance_km: float


class WardLookupResult(BaseModel):
    """Everything known about a coordinate."""

    point: Point
    containing_ward: str | None
    nearest: list[WardDistance]
    within_radius: list[WardDistance]
    radius_km: float
    boundary: BoundaryAnalytics | None


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


def _distances(wards: list[Ward], point: Point) -> list[WardDistance]:
    return [
        WardDistance(
            ward_name=w.name,
            county_name=w.county_name,
            distance_km=round(distance_to_geometry_km(w.geometry, point), 3),
        )
        for w in wards
    ]


@task
def locate_ward(data: DataAccess, point: Point) -> Ward | None:
    """Find the ward containing the point.

    Args:
        data: Bound ward data backend.
        point: Query coordinate.

    Returns:
        The containing ward, or None.
    """
    logger = get_run_logger()
    ward = data.find_ward_by_point(point)
    if ward is None:
        logger.info("No ward contains %s", point)
    else:
        logger.info("Point lies in %s (%s)", ward.name, ward.county_name, extra={"ward_id": ward.id})
    return ward


@task
def nearest_wards(data: DataAccess, point: Point, limit: int) -> list[WardDistance]:
    """Rank the nearest wards to the point.

    Args:
        data: Bound ward data backend.
        point: Query coordinate.
        limit: Maximum number of wards.

    Returns:
        Wards with distances, nearest first.
    """
    ranked = _distances(data.find_nearest_ward(point, limit), point)
    print(f"Nearest {len(ranked)} wards: {[w.ward_name for w in ranked]}")
    return ranked


@task
def wards_within_radius(data: DataAccess, point: Point, radius_km: float) -> list[WardDistance]:
    """List wards within ``radius_km`` of the point.

    Args:
        data: Bound ward data backend.
        point: Query coordinate.
        radius_km: Search radius in kilometres.

    Returns:
        Wards with distances, nearest first.
    """
    found = _distances(data.find_wards_within_distance(point, radius_km), point)
    print(f"{len(found)} wards within {radius_km} km")
    return found


@task
def describe_boundary(data: DataAccess, ward: Ward | None) -> BoundaryAnalytics | None:
    """Profile the containing ward's boundary.

    Args:
        data: Bound ward data backend.
        ward: The containing ward, if any.

    Returns:
        BoundaryAnalytics, or None without a containing ward.
    """
    if ward is None:
        return None
    return AnalyticsEngine(data).boundary_analytics(ward.name)


@task
def publish_lookup(result: WardLookupResult) -> str:
    """Publish the lookup as a markdown artifact.

    Args:
        result: Lookup result.

    Returns:
        The markdown text.
    """
    lines = [
        "## Ward Lookup",
        "",
        f"- **Point:** {result.point.latitude}, {result.point.longitude}",
        f"- **Containing ward:** {result.containing_ward or 'none'}",
        f"- **Looked up:** {timestamp()}",
    ]
    if result.boundary is not None:
        b = result.boundary
        lines.append(f"- **Boundary:** {b.complexity.value}, {b.vertex_count} vertices, {b.area_km2:.2f} km²")
    lines.extend(["", "| Ward | County | Distance (km) |", "|------|--------|---------------|"])
    lines.extend(f"| {w.ward_name} | {w.county_name} | {w.distance_km} |" for w in result.nearest)
    markdown = "\n".join(lines)
    create_markdown_artifact(key="kenya-ward-lookup", markdown=markdown)
    return markdown


# ---------------------------------------------------------------------------
# Flow
# ---------------------------------------------------------------------------


@flow(name="kenya_ward_lookup", log_prints=True)
def ward_lookup_flow(
    latitude: float,
    longitude: float,
    radius_km: float = 5.0,
    nearest: int = 3,
    source: str = DEFAULT_BLOCK_NAME,
) -> WardLookupResult:
    """Resolve a coordinate against the ward boundaries.

    Args:
        latitude: Query latitude in degrees.
        longitude: Query longitude in degrees.
        radius_km: Radius for the range query.
        nearest: Number of nearest wards to list.
        source: WardDataSource block name.

    Returns:
        WardLookupResult.
    """
    data = get_data_source(source).get_data_access()
    point = Point(latitude=latitude, longitude=longitude)

    ward = locate_ward(data, point)
    result = WardLookupResult(
        point=point,
        containing_ward=ward.name if ward else None,
        nearest=nearest_wards(data, point, nearest),
        within_radius=wards_within_radius(data, point, radius_km),
        radius_km=radius_km,
        boundary=describe_boundary(data, ward),
    )
    publish_lookup(result)
    return result


if __name__ == "__main__":
    ward_lookup_flow(latitude=-1.22, longitude=36.77)
