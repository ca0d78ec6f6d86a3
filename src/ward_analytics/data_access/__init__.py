"""Storage backends behind the ``DataAccess`` contract."""

from ward_analytics.data_access.base import DataAccess
from ward_analytics.data_access.geoframe import GeoDataFrameDataAccess
from ward_analytics.data_access.memory import InMemoryDataAccess
from ward_analytics.data_access.mock import MockDataAccess
from ward_analytics.data_access.source import (
    BackendType,
    WardDataSource,
    create_data_access,
    get_data_source,
)

__all__ = [
    "BackendType",
    "DataAccess",
    "GeoDataFrameDataAccess",
    "InMemoryDataAccess",
    "MockDataAccess",
    "WardDataSource",
    "create_data_access",
    "get_data_source",
]
