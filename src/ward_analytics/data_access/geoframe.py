"""GeoDataFrame backend: one row per ward, geometry in EPSG:4326.

Loads ward boundaries from any file GeoPandas can read (GeoJSON, GeoPackage,
Shapefile) or from GeoParquet, and answers spatial queries with the frame's
spatial index and vectorised Shapely predicates.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import geopandas as gpd
import pandas as pd
import shapely

from ward_analytics.data_access.base import DataAccess
from ward_analytics.geometry import BoundingBox, Geometry, Point, shape_distance_km
from ward_analytics.models import Constituency, County, DatasetStatistics, SubCounty, Ward

logger = logging.getLogger(__name__)

WARD_COLUMNS = [
    "id",
    "name",
    "county_id",
    "county_name",
    "constituency_id",
    "constituency_name",
    "sub_county_id",
    "sub_county_name",
]

_PARQUET_SUFFIXES = {".parquet", ".geoparquet"}


def _geometry_from_shape(geom: Any) -> Geometry:
    if geom is None or geom.is_empty:
        return Geometry(type="Polygon", coordinates=[])
    return Geometry.model_validate(json.loads(shapely.to_geojson(geom)))


def _ward_from_row(row: dict[str, Any]) -> Ward:
    return Ward(
        **{col: str(row[col]) for col in WARD_COLUMNS},
        geometry=_geometry_from_shape(row["geometry"]),
    )


class GeoDataFrameDataAccess(DataAccess):
    """Backend over a GeoDataFrame of wards.

    Hierarchy records (counties, constituencies, sub-counties) are derived by
    grouping the ward rows, so their counts always match the loaded wards.
    """

    def __init__(self, gdf: gpd.GeoDataFrame) -> None:
        missing = [col for col in WARD_COLUMNS if col not in gdf.columns]
        if missing:
            raise ValueError(f"Ward frame is missing columns: {missing}")
        if gdf.crs is None:
            gdf = gdf.set_crs("EPSG:4326")
        elif gdf.crs.to_epsg() != 4326:
            raise ValueError(f"Ward frame must be in EPSG:4326, got {gdf.crs}")

        frame = gdf.copy()
        for col in WARD_COLUMNS:
            frame[col] = frame[col].astype(str)
        self._gdf = frame.reset_index(drop=True)
        has_shape = self._gdf.geometry.notna() & ~self._gdf.geometry.is_empty
        self._spatial = self._gdf[has_shape].reset_index(drop=True)
        skipped = len(self._gdf) - len(self._spatial)
        if skipped:
            logger.warning("%d ward rows have no geometry; excluded from spatial queries", skipped)

        self._counties = [
            County(id=cid, name=name, ward_count=int(n))
            for (cid, name), n in self._group_sizes(["county_id", "county_name"]).items()
        ]
        self._constituencies = [
            Constituency(id=cid, name=name, county_id=county_id, ward_count=int(n))
            for (cid, name, county_id), n in self._group_sizes(
                ["constituency_id", "constituency_name", "county_id"]
            ).items()
        ]
        self._sub_counties = [
            SubCounty(id=sid, name=name, county_id=county_id, ward_count=int(n))
            for (sid, name, county_id), n in self._group_sizes(
                ["sub_county_id", "sub_county_name", "county_id"]
            ).items()
        ]
        logger.debug("Loaded ward frame: %d wards, %d counties", len(self._gdf), len(self._counties))

    @classmethod
    def from_file(cls, path: str | Path) -> GeoDataFrameDataAccess:
        """Read a ward file (GeoParquet by suffix, anything else via ``read_file``)."""
        path = Path(path)
        if path.suffix.lower() in _PARQUET_SUFFIXES:
            gdf = gpd.read_parquet(path)
        else:
            gdf = gpd.read_file(path)
        logger.info("Read %d ward rows from %s", len(gdf), path)
        return cls(gdf)

    # -- helpers -------------------------------------------------------------

    def _group_sizes(self, columns: list[str]) -> pd.Series:
        return self._gdf.groupby(columns, sort=False).size()

    def _wards(self, frame: pd.DataFrame) -> list[Ward]:
        return [_ward_from_row(row) for row in frame.to_dict("records")]

    def _ranked(self, point: Point) -> pd.DataFrame:
        ranked = self._spatial.assign(
            _distance=self._spatial.geometry.apply(lambda geom: shape_distance_km(geom, point)),
        )
        return ranked.sort_values(["_distance", "id"], kind="mergesort")

    @staticmethod
    def _name_mask(series: pd.Series, name: str) -> pd.Series:
        return series.str.casefold() == name.casefold()

    # -- ward queries --------------------------------------------------------

    def find_ward_by_point(self, point: Point) -> Ward | None:
        matches = self._spatial[self._spatial.geometry.covers(point.to_shape())]
        if matches.empty:
            return None
        return self._wards(matches.sort_values("id", kind="mergesort").head(1))[0]

    def find_nearest_ward(self, point: Point, limit: int = 1) -> list[Ward]:
        if limit <= 0 or self._spatial.empty:
            return []
        return self._wards(self._ranked(point).head(limit))

    def find_wards_within_distance(self, point: Point, distance_km: float) -> list[Ward]:
        if self._spatial.empty:
            return []
        ranked = self._ranked(point)
        return self._wards(ranked[ranked["_distance"] <= distance_km])

    def find_wards_by_county(self, county_name: str) -> list[Ward]:
        return self._wards(self._gdf[self._name_mask(self._gdf["county_name"], county_name)])

    def find_wards_in_bounding_box(self, bbox: BoundingBox) -> list[Ward]:
        if self._spatial.empty:
            return []
        positions = self._spatial.sindex.query(bbox.to_shape(), predicate="intersects")
        return self._wards(self._spatial.iloc[sorted(positions)])

    def find_ward_by_name(self, name: str) -> Ward | None:
        matches = self._gdf[self._name_mask(self._gdf["name"], name)]
        if matches.empty:
            return None
        return self._wards(matches.head(1))[0]

    # -- hierarchy queries ---------------------------------------------------

    def get_all_counties(self) -> list[County]:
        return list(self._counties)

    def get_county_by_name(self, name: str) -> County | None:
        key = name.casefold()
        return next((c for c in self._counties if c.name.casefold() == key), None)

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
            total_wards=len(self._gdf),
            total_counties=len(self._counties),
            total_constituencies=len(self._constituencies),
        )
