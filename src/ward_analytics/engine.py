"""Analytics engine: counts, shares, rankings and boundary statistics.

``AnalyticsEngine`` is bound to one ``DataAccess`` backend and keeps no
state of its own, so one engine can serve concurrent callers. Every call
re-reads what it needs from the backend.
"""

from __future__ import annotations

import logging
import math
import statistics
from collections.abc import Callable
from functools import reduce
from typing import Any, TypeVar

from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from ward_analytics.config import COMPLEX_BOUNDARY_THRESHOLD, TOP_COUNTIES_LIMIT, utc_now
from ward_analytics.data_access.base import DataAccess
from ward_analytics.errors import (
    BackendError,
    DivisionGuardError,
    MalformedGeometryError,
    RegionNotFoundError,
    WardAnalyticsError,
    WardNotFoundError,
    percentage,
    ratio,
)
from ward_analytics.geometry import (
    BoundingBox,
    bounding_box,
    classify_complexity,
    geodesic_area_km2,
    geodesic_perimeter_km,
    shape_area_km2,
    shape_centroid,
    to_shape,
    vertex_count,
)
from ward_analytics.models import (
    AnalyticsMetrics,
    AnalyticsReport,
    BoundaryAnalytics,
    ConstituencyAnalytics,
    County,
    CountyAnalytics,
    CountyComparison,
    DatasetStatistics,
    DensityAnalytics,
    RegionWardCount,
    SpatialDistribution,
    Ward,
    WardDifference,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _located(wards: list[Ward]) -> list[tuple[Ward, BaseGeometry]]:
    """Pair each ward that has a usable geometry with its parsed shape."""
    located: list[tuple[Ward, BaseGeometry]] = []
    for w in wards:
        if w.geometry.is_empty():
            continue
        try:
            located.append((w, to_shape(w.geometry)))
        except MalformedGeometryError as exc:
            logger.warning("Skipping ward %s: %s", w.name, exc)
    return located


class AnalyticsEngine:
    """Statistical and spatial analytics over a ``DataAccess`` backend."""

    def __init__(self, data_access: DataAccess) -> None:
        self._data = data_access

    # -- backend access ------------------------------------------------------

    def _query(self, call: Callable[..., T], *args: Any) -> T:
        """Call a backend method, tagging unexpected failures as BackendError."""
        operation = getattr(call, "__name__", repr(call))
        logger.debug("Backend query %s%r", operation, args)
        try:
            return call(*args)
        except WardAnalyticsError:
            raise
        except Exception as exc:
            raise BackendError(operation, exc) from exc

    def _require_county(self, county_name: str) -> County:
        county = self._query(self._data.get_county_by_name, county_name)
        if county is None:
            raise RegionNotFoundError(county_name)
        return county

    def _regions(self, region: str | None) -> list[County]:
        if region is None:
            return self._query(self._data.get_all_counties)
        return [self._require_county(region)]

    # -- overview ------------------------------------------------------------

    def metrics(self) -> AnalyticsMetrics:
        """Dataset totals, averages and the largest/smallest county.

        Counties are ranked with a stable descending sort on ward count, so
        among equal counts the first county seen is the largest and the last
        county seen is the smallest. Averages round half up; a zero
        denominator yields an average of 0.
        """
        stats: DatasetStatistics = self._query(self._data.get_statistics)
        counties: list[County] = self._query(self._data.get_all_counties)
        total_sub_counties = sum(len(self._query(self._data.get_sub_counties_by_county, c.name)) for c in counties)

        ranked = sorted(counties, key=lambda c: c.ward_count, reverse=True)
        largest = RegionWardCount(region=ranked[0].name, ward_count=ranked[0].ward_count) if ranked else None
        smallest = RegionWardCount(region=ranked[-1].name, ward_count=ranked[-1].ward_count) if ranked else None

        return AnalyticsMetrics(
            total_wards=stats.total_wards,
            total_counties=stats.total_counties,
            total_constituencies=stats.total_constituencies,
            total_sub_counties=total_sub_counties,
            average_wards_per_county=self._average(stats.total_wards, stats.total_counties),
            average_wards_per_constituency=self._average(stats.total_wards, stats.total_constituencies),
            largest_county=largest,
            smallest_county=smallest,
        )

    @staticmethod
    def _average(total: int, count: int) -> int:
        try:
            return _round_half_up(ratio(total, count))
        except DivisionGuardError:
            logger.warning("Average of %d over zero regions reported as 0", total)
            return 0

    # -- counties ------------------------------------------------------------

    def county_analytics(self, county_name: str) -> CountyAnalytics:
        """Counts and national ward share for one county.

        Raises:
            RegionNotFoundError: If the county does not exist.
        """
        county = self._require_county(county_name)
        return self._analyse_county(county, self._query(self._data.get_statistics))

    def all_county_analytics(self) -> list[CountyAnalytics]:
        """Analytics for every county, in backend order."""
        counties: list[County] = self._query(self._data.get_all_counties)
        stats: DatasetStatistics = self._query(self._data.get_statistics)
        return [self._analyse_county(c, stats) for c in counties]

    def _analyse_county(self, county: County, stats: DatasetStatistics) -> CountyAnalytics:
        constituencies = self._query(self._data.get_constituencies_by_county, county.name)
        sub_counties = self._query(self._data.get_sub_counties_by_county, county.name)
        located = _located(self._query(self._data.find_wards_by_county, county.name))

        extent: BoundingBox | None = None
        average_area: float | None = None
        if located:
            extent = reduce(BoundingBox.union, (bounding_box(w.geometry) for w, _ in located))
            average_area = statistics.fmean(shape_area_km2(geom) for _, geom in located)

        return CountyAnalytics(
            county_name=county.name,
            ward_count=county.ward_count,
            constituency_count=len(constituencies),
            sub_county_count=len(sub_counties),
            percentage_of_total_wards=percentage(county.ward_count, stats.total_wards),
            average_ward_area_km2=average_area,
            bounding_box=extent,
        )

    def top_counties_by_wards(self, limit: int = TOP_COUNTIES_LIMIT) -> list[CountyAnalytics]:
        """The ``limit`` counties with the most wards, largest first."""
        return self.rank_by_wards(self.all_county_analytics(), limit)

    @staticmethod
    def rank_by_wards(analytics: list[CountyAnalytics], limit: int) -> list[CountyAnalytics]:
        """Sort county analytics by ward count (stable, descending) and cut at ``limit``."""
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        return sorted(analytics, key=lambda c: c.ward_count, reverse=True)[:limit]

    def find_wards_in_range(self, min_wards: int, max_wards: int) -> list[RegionWardCount]:
        """Counties whose ward count lies in ``[min_wards, max_wards]``."""
        counties: list[County] = self._query(self._data.get_all_counties)
        return [
            RegionWardCount(region=c.name, ward_count=c.ward_count)
            for c in counties
            if min_wards <= c.ward_count <= max_wards
        ]

    def compare_counties(self, county1: str, county2: str) -> CountyComparison:
        """Compare two counties, first minus second.

        ``percentage_difference`` is the ward difference as a share of the
        second county, truncated toward zero; 0 when the second county has
        no wards.

        Raises:
            RegionNotFoundError: If either county does not exist.
        """
        first = self.county_analytics(county1)
        second = self.county_analytics(county2)
        ward_difference = first.ward_count - second.ward_count
        try:
            percentage_difference = int(ratio(ward_difference, second.ward_count) * 100)
        except DivisionGuardError:
            logger.warning("%s has no wards; percentage difference reported as 0", second.county_name)
            percentage_difference = 0
        return CountyComparison(
            county1=first,
            county2=second,
            difference=WardDifference(ward_difference=ward_difference, percentage_difference=percentage_difference),
        )

    # -- constituencies ------------------------------------------------------

    def constituencies_by_county(self, county_name: str) -> list[ConstituencyAnalytics]:
        """Each constituency's share of its county's wards.

        Raises:
            RegionNotFoundError: If the county does not exist.
        """
        county = self._require_county(county_name)
        constituencies = self._query(self._data.get_constituencies_by_county, county.name)
        sub_counties_by_constituency: dict[str, set[str]] = {}
        for w in self._query(self._data.find_wards_by_county, county.name):
            sub_counties_by_constituency.setdefault(w.constituency_id, set()).add(w.sub_county_id)

        return [
            ConstituencyAnalytics(
                constituency_name=c.name,
                county_name=county.name,
                ward_count=c.ward_count,
                sub_county_count=len(sub_counties_by_constituency.get(c.id, ())),
                percentage_of_county_wards=percentage(c.ward_count, county.ward_count),
            )
            for c in constituencies
        ]

    def constituency_analytics(self, constituency_name: str) -> ConstituencyAnalytics:
        """Analytics for one constituency, searched across all counties.

        Raises:
            RegionNotFoundError: If no county has a constituency of that name.
        """
        key = constituency_name.casefold()
        for county in self._query(self._data.get_all_counties):
            for item in self.constituencies_by_county(county.name):
                if item.constituency_name.casefold() == key:
                    return item
        raise RegionNotFoundError(constituency_name, kind="constituency")

    # -- boundaries ----------------------------------------------------------

    def boundary_analytics(self, ward_name: str) -> BoundaryAnalytics:
        """Vertex count, complexity, extent, area and perimeter of a ward.

        Raises:
            WardNotFoundError: If the ward does not exist.
            EmptyGeometryError: If the ward's geometry has no rings.
            MalformedGeometryError: If the ward's geometry cannot be parsed.
        """
        ward = self._query(self._data.find_ward_by_name, ward_name)
        if ward is None:
            raise WardNotFoundError(ward_name)
        return self._analyse_boundary(ward)

    @staticmethod
    def _analyse_boundary(ward: Ward) -> BoundaryAnalytics:
        extent = bounding_box(ward.geometry)
        vertices = vertex_count(ward.geometry)
        return BoundaryAnalytics(
            ward_name=ward.name,
            county_name=ward.county_name,
            constituency_name=ward.constituency_name,
            vertex_count=vertices,
            complexity=classify_complexity(vertices),
            bounding_box=extent,
            area_km2=geodesic_area_km2(ward.geometry),
            perimeter_km=geodesic_perimeter_km(ward.geometry),
        )

    def complex_boundaries(self, threshold: int = COMPLEX_BOUNDARY_THRESHOLD) -> list[BoundaryAnalytics]:
        """Every ward with at least ``threshold`` vertices, county by county."""
        results: list[BoundaryAnalytics] = []
        for county in self._query(self._data.get_all_counties):
            for ward in self._query(self._data.find_wards_by_county, county.name):
                if ward.geometry.is_empty():
                    logger.warning("Skipping ward %s: empty geometry", ward.name)
                    continue
                if vertex_count(ward.geometry) < threshold:
                    continue
                try:
                    results.append(self._analyse_boundary(ward))
                except MalformedGeometryError as exc:
                    logger.warning("Skipping ward %s: %s", ward.name, exc)
        return results

    # -- spatial -------------------------------------------------------------

    def spatial_distribution(self, region: str | None = None) -> list[SpatialDistribution]:
        """Centroid and lat/lng spread of each county's wards.

        ``ward_count`` is the number of wards with geometry that were
        located; counties without any are left out.

        Raises:
            RegionNotFoundError: If ``region`` is given and does not exist.
        """
        results: list[SpatialDistribution] = []
        for county in self._regions(region):
            located = _located(self._query(self._data.find_wards_by_county, county.name))
            if not located:
                continue
            merged = unary_union([geom for _, geom in located])
            extent = reduce(BoundingBox.union, (bounding_box(w.geometry) for w, _ in located))
            results.append(
                SpatialDistribution(
                    region=county.name,
                    ward_count=len(located),
                    center=shape_centroid(merged),
                    lat_range=extent.lat_range,
                    lng_range=extent.lng_range,
                )
            )
        return results

    def density_analysis(self, region: str | None = None) -> list[DensityAnalytics]:
        """Wards per 1000 km² for each county, from geodesic ward areas.

        Area and count cover the same wards (those with geometry), so the
        density stays meaningful when only part of a county is mapped. A
        zero area gives a density of 0.0.

        Raises:
            RegionNotFoundError: If ``region`` is given and does not exist.
        """
        results: list[DensityAnalytics] = []
        for county in self._regions(region):
            located = _located(self._query(self._data.find_wards_by_county, county.name))
            if not located:
                continue
            area = sum(shape_area_km2(geom) for _, geom in located)
            try:
                density = ratio(len(located), area) * 1000
            except DivisionGuardError:
                logger.warning("%s has zero mapped area; density reported as 0.0", county.name)
                density = 0.0
            results.append(
                DensityAnalytics(region=county.name, ward_count=len(located), area_km2=area, ward_density=density)
            )
        return results

    # -- report --------------------------------------------------------------

    def generate_report(self) -> AnalyticsReport:
        """Assemble a fresh, timestamped snapshot of the headline analytics."""
        return AnalyticsReport(
            generated_at=utc_now(),
            metrics=self.metrics(),
            county_breakdown=self.all_county_analytics(),
            top_counties_by_wards=self.top_counties_by_wards(TOP_COUNTIES_LIMIT),
            spatial_distribution=self.spatial_distribution(),
            density_analysis=self.density_analysis(),
        )
