"""The query surface a storage backend exposes to the analytics engine."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ward_analytics.geometry import BoundingBox, Point
from ward_analytics.models import Constituency, County, DatasetStatistics, SubCounty, Ward


class DataAccess(ABC):
    """Read-only access to one snapshot of boundary data.

    Single-entity lookups return ``None`` when nothing matches; collection
    lookups return an empty list. Name matching is exact and
    case-insensitive throughout.

    Proximity queries measure the haversine distance from the query point to
    the nearest point of a ward's boundary, which is zero for a ward that
    contains the point. Ties are broken by ward id.
    """

    # Ward queries

    @abstractmethod
    def find_ward_by_point(self, point: Point) -> Ward | None:
        """Return the ward containing the point (lowest id if several do)."""

    @abstractmethod
    def find_nearest_ward(self, point: Point, limit: int = 1) -> list[Ward]:
        """Return up to ``limit`` wards ordered by ascending distance."""

    @abstractmethod
    def find_wards_within_distance(self, point: Point, distance_km: float) -> list[Ward]:
        """Return wards within ``distance_km``, nearest first."""

    @abstractmethod
    def find_wards_by_county(self, county_name: str) -> list[Ward]:
        """Return all wards of the named county."""

    @abstractmethod
    def find_wards_in_bounding_box(self, bbox: BoundingBox) -> list[Ward]:
        """Return wards whose geometry intersects the box."""

    @abstractmethod
    def find_ward_by_name(self, name: str) -> Ward | None:
        """Return the ward with this name."""

    # County queries

    @abstractmethod
    def get_all_counties(self) -> list[County]: ...

    @abstractmethod
    def get_county_by_name(self, name: str) -> County | None: ...

    # Constituency and sub-county queries

    @abstractmethod
    def get_constituencies_by_county(self, county_name: str) -> list[Constituency]: ...

    @abstractmethod
    def get_sub_counties_by_county(self, county_name: str) -> list[SubCounty]: ...

    # Statistics

    @abstractmethod
    def get_statistics(self) -> DatasetStatistics:
        """Return dataset-wide totals."""
