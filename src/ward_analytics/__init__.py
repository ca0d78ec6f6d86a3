"""ward-analytics -- geospatial queries and statistics for Kenyan wards."""

from ward_analytics.data_access import (
    BackendType,
    DataAccess,
    GeoDataFrameDataAccess,
    InMemoryDataAccess,
    MockDataAccess,
    WardDataSource,
    create_data_access,
    get_data_source,
)
from ward_analytics.engine import AnalyticsEngine
from ward_analytics.errors import (
    BackendError,
    DivisionGuardError,
    EmptyGeometryError,
    MalformedGeometryError,
    NotFoundError,
    RegionNotFoundError,
    WardAnalyticsError,
    WardNotFoundError,
)
from ward_analytics.geometry import BoundaryComplexity, BoundingBox, Geometry, Point
from ward_analytics.queries import AnalyticsQueries

__all__ = [
    "AnalyticsEngine",
    "AnalyticsQueries",
    "BackendError",
    "BackendType",
    "BoundaryComplexity",
    "BoundingBox",
    "DataAccess",
    "DivisionGuardError",
    "EmptyGeometryError",
    "MalformedGeometryError",
    "Geometry",
    "GeoDataFrameDataAccess",
    "InMemoryDataAccess",
    "MockDataAccess",
    "NotFoundError",
    "Point",
    "RegionNotFoundError",
    "WardAnalyticsError",
    "WardDataSource",
    "WardNotFoundError",
    "create_data_access",
    "get_data_source",
]
