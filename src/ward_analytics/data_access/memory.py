"""In-memory backend over plain lists of wards and hierarchy records."""

from __future__ import annotations

import logging

from shapely.geometry.base import BaseGeometry

from ward_analytics.data_access.base import DataAccess
from ward_analytics.errors import MalformedGeometryError
from ward_analytics.geometry import BoundingBox, Point, shape_covers, shape_distance_km, to_shape
from ward_analytics.models import Constituency, County, DatasetStatistics, SubCounty, Ward

logger = logging.getLogger(__name__)


def _key(name: str) -> str:
    return name.casefold()


def derive_counties(wards: list[Ward]) -> list[County]:
    """Build county records from wards, in first-seen order."""
    counts: dict[str, int] = {}
    names: dict[str, str] = {}
    for w in wards:
        counts[w.county_id] = counts.get(w.county_id, 0) + 1
        names.setdefault(w.county_id, w.county_name)
    return [County(id=cid, name=names[cid], ward_count=n) for cid, n in counts.items()]


def derive_constituencies(wards: list[Ward]) -> list[Constituency]:
    """Build constituency records from wards, in first-seen order."""
    counts: dict[str, int] = {}
    first: dict[str, Ward] = {}
    for w in wards:
        counts[w.constituency_id] = counts.get(w.constituency_id, 0) + 1
        first.setdefault(w.constituency_id, w)
    return [
        Constituency(id=cid, name=first[cid].constituency_name, county_id=first[cid].county_id, ward_count=n)
        for cid, n in counts.items()
    ]


def derive_sub_counties(wards: list[Ward]) -> list[SubCounty]:
    """Build sub-county records from wards, in first-seen order."""
    counts: dict[str, int] = {}
    first: dict[str, Ward] = {}
    for w in wards:
        counts[w.sub_county_id] = counts.get(w.sub_county_id, 0) + 1
        first.setdefault(w.sub_county_id, w)
    return [
        SubCounty(id=sid, name=first[sid].sub_county_name, county_id=first[sid].county_id, ward_count=n)
        for sid, n in counts.items()
    ]


class InMemoryDataAccess(DataAccess):
    """Backend holding the whole snapshot in Python lists.

    Counties, constituencies and sub-counties are derived from the wards
    when not supplied. Supplied records keep their stored ward counts, so a
    dataset can carry full counts while only some wards have geometry.
    """

    def __init__(
        self,
        wards: list[Ward],
        counties: list[County] | None = None,
        constituencies: list[Constituency] | None = None,
        sub_counties: list[SubCounty] | None = None,
    ) -> None:
        self._wards = list(wards)
        self._counties = list(counties) if counties is not None else derive_counties(self._wards)
        self._constituencies = (
            list(constituencies) if constituencies is not None else derive_constituencies(self._wards)
        )
        self._sub_counties = list(sub_counties) if sub_counties is not None else derive_sub_counties(self._wards)
        self._shapes: dict[str, BaseGeometry] = {}
        for w in self._wards:
            if w.geometry.is_empty():
                logger.warning("Ward %s has an empty geometry; excluded from spatial queries", w.name)
                continue
            try:
                self._shapes[w.id] = to_shape(w.geometry)
            except MalformedGeometryError as exc:
                logger.warning("Ward %s has a malformed geometry (%s); excluded from spatial queries", w.name, exc)
        logger.debug(
            "Loaded %d wards, %d counties, %d constituencies, %d sub-counties",
            len(self._wards),
            len(self._counties),
            len(self._constituencies),
            len(self._sub_counties),
        )

    # -- helpers -------------------------------------------------------------

    def _spatial_wards(self) -> list[tuple[Ward, BaseGeometry]]:
        return [(w, self._shapes[w.id]) for w in self._wards if w.id in self._shapes]

    def _ranked(self, point: Point) -> list[tuple[float, Ward]]:
        ranked = [(shape_distance_km(geom, point), w) for w, geom in self._spatial_wards()]
        ranked.sort(key=lambda pair: (pair[0], pair[1].id))
        return ranked

    # -- ward queries --------------------------------------------------------

    def find_ward_by_point(self, point: Point) -> Ward | None:
        matches = [w for w, geom in self._spatial_wards() if shape_covers(geom, point)]
        if not matches:
            return None
        if len(matches) > 1:
            logger.debug("Point %s covered by %d wards; taking lowest id", point, len(matches))
        return min(matches, key=lambda w: w.id)

    def find_nearest_ward(self, point: Point, limit: int = 1) -> list[Ward]:
        if limit <= 0:
            return []
        return [w for _, w in self._ranked(point)[:limit]]

    def find_wards_within_distance(self, point: Point, distance_km: float) -> list[Ward]:
        return [w for d, w in self._ranked(point) if d <= distance_km]

    def find_wards_by_county(self, county_name: str) -> list[Ward]:
        key = _key(county_name)
        return [w for w in self._wards if _key(w.county_name) == key]

    def find_wards_in_bounding_box(self, bbox: BoundingBox) -> list[Ward]:
        area = bbox.to_shape()
        return [w for w, geom in self._spatial_wards() if geom.intersects(area)]

    def find_ward_by_name(self, name: str) -> Ward | None:
        key = _key(name)
        return next((w for w in self._wards if _key(w.name) == key), None)

    # -- hierarchy queries ---------------------------------------------------

    def get_all_counties(self) -> list[County]:
        return list(self._counties)

    def get_county_by_name(self, name: str) -> County | None:
        key = _key(name)
        return next((c for c in self._counties if _key(c.name) == key), None)

    def get_constituencies_by_county(self, county_name: str) -> list[Constituency]:
        county = self.get_county_by_name(county_name)
        if county is None:
            return []
        return [c for c in self._constituencies if c.county_id == county.id]

    def get_sub_counties_by_county(self, county_name: str) -> list[SubCounty]:
        county = self.get_county_by_name(county_name)
        if county is None:
            return []
        return [s for s in self._sub_counties if s.county_id == county.id]

    def get_statistics(self) -> DatasetStatistics:
        return DatasetStatistics(
            total_wards=sum(c.ward_count for c in self._counties),
            total_counties=len(self._counties),
            total_constituencies=len(self._constituencies),
        )
