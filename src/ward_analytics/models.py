"""Administrative entities and analytics result records.

Every model is frozen: records handed to formatters and exporters are not
meant to be changed after the engine builds them.
"""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict

from ward_analytics.geometry import BoundaryComplexity, BoundingBox, Geometry, Point

# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class Ward(BaseModel):
    """Leaf administrative unit, the unit boundaries attach to."""

    id: str
    name: str
    county_id: str
    county_name: str
    constituency_id: str
    constituency_name: str
    sub_county_id: str
    sub_county_name: str
    geometry: Geometry

    model_config = ConfigDict(frozen=True)


class County(BaseModel):
    """A county and the number of wards it holds."""

    id: str
    name: str
    ward_count: int

    model_config = ConfigDict(frozen=True)


class Constituency(BaseModel):
    """An electoral constituency within a county."""

    id: str
    name: str
    county_id: str
    ward_count: int

    model_config = ConfigDict(frozen=True)


class SubCounty(BaseModel):
    """An administrative sub-county within a county."""

    id: str
    name: str
    county_id: str
    ward_count: int

    model_config = ConfigDict(frozen=True)


class DatasetStatistics(BaseModel):
    """Dataset-wide counts used as percentage denominators."""

    total_wards: int
    total_counties: int
    total_constituencies: int

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Analytics results
# ---------------------------------------------------------------------------


class RegionWardCount(BaseModel):
    """A region name paired with its ward count."""

    region: str
    ward_count: int

    model_config = ConfigDict(frozen=True)


class AnalyticsMetrics(BaseModel):
    """Dataset overview."""

    total_wards: int
    total_counties: int
    total_constituencies: int
    total_sub_counties: int
    average_wards_per_county: int
    average_wards_per_constituency: int
    largest_county: RegionWardCount | None
    smallest_county: RegionWardCount | None

    model_config = ConfigDict(frozen=True)


class CountyAnalytics(BaseModel):
    """Per-county counts and national share."""

    county_name: str
    ward_count: int
    constituency_count: int
    sub_county_count: int
    percentage_of_total_wards: float
    average_ward_area_km2: float | None = None
    bounding_box: BoundingBox | None = None

    model_config = ConfigDict(frozen=True)


class ConstituencyAnalytics(BaseModel):
    """A constituency's share of its county's wards."""

    constituency_name: str
    county_name: str
    ward_count: int
    sub_county_count: int
    percentage_of_county_wards: float

    model_config = ConfigDict(frozen=True)


class SpatialDistribution(BaseModel):
    """Where a region's wards sit and how far they spread."""

    region: str
    ward_count: int
    center: Point
    lat_range: float
    lng_range: float

    model_config = ConfigDict(frozen=True)


class DensityAnalytics(BaseModel):
    """Ward density of a region in wards per 1000 km²."""

    region: str
    ward_count: int
    area_km2: float
    ward_density: float

    model_config = ConfigDict(frozen=True)


class BoundaryAnalytics(BaseModel):
    """Shape summary of a single ward boundary."""

    ward_name: str
    county_name: str
    constituency_name: str
    vertex_count: int
    complexity: BoundaryComplexity
    bounding_box: BoundingBox
    area_km2: float
    perimeter_km: float

    model_config = ConfigDict(frozen=True)


class WardDifference(BaseModel):
    """Difference between two counties, first minus second."""

    ward_difference: int
    percentage_difference: int

    model_config = ConfigDict(frozen=True)


class CountyComparison(BaseModel):
    """Side-by-side analytics for two counties."""

    county1: CountyAnalytics
    county2: CountyAnalytics
    difference: WardDifference

    model_config = ConfigDict(frozen=True)


class AnalyticsReport(BaseModel):
    """Timestamped snapshot of the headline analytics."""

    generated_at: datetime.datetime
    metrics: AnalyticsMetrics
    county_breakdown: tuple[CountyAnalytics, ...]
    top_counties_by_wards: tuple[CountyAnalytics, ...]
    spatial_distribution: tuple[SpatialDistribution, ...]
    density_analysis: tuple[DensityAnalytics, ...]

    model_config = ConfigDict(frozen=True)


class CountySizeCategories(BaseModel):
    """Counties bucketed by ward count."""

    large: tuple[RegionWardCount, ...]
    medium: tuple[RegionWardCount, ...]
    small: tuple[RegionWardCount, ...]

    model_config = ConfigDict(frozen=True)


class VarianceAnalysis(BaseModel):
    """Spread of ward counts across counties."""

    mean: float
    std_dev: float
    coefficient_of_variation: float
    high_variation: bool
    significant_disparity: bool

    model_config = ConfigDict(frozen=True)
