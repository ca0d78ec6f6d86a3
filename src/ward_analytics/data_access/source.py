"""Backend selection: the ``WardDataSource`` block and its factory."""

from __future__ import annotations

import os
from enum import StrEnum
from pathlib import Path

from dotenv import load_dotenv
from prefect.blocks.core import Block
from pydantic import Field

from ward_analytics.config import BACKEND_ENV_VAR, DATA_PATH_ENV_VAR, DEFAULT_BACKEND, DEFAULT_BLOCK_NAME
from ward_analytics.data_access.base import DataAccess
from ward_analytics.data_access.geoframe import GeoDataFrameDataAccess
from ward_analytics.data_access.mock import MockDataAccess


class BackendType(StrEnum):
    """Storage backends the engine can be bound to."""

    MOCK = "mock"
    GEOFILE = "geofile"


def create_data_access(backend: BackendType | str, data_path: str | Path | None = None) -> DataAccess:
    """Build the configured backend.

    Args:
        backend: Which backend to build.
        data_path: Ward file for the ``geofile`` backend.

    Returns:
        A ready DataAccess implementation.

    Raises:
        ValueError: If the backend is unknown or a required path is missing.
    """
    backend = BackendType(backend)
    if backend is BackendType.MOCK:
        return MockDataAccess()
    if not data_path:
        raise ValueError("The geofile backend needs a data_path")
    return GeoDataFrameDataAccess.from_file(data_path)


class WardDataSource(Block):
    """Block describing where ward boundary data comes from.

    Stores the backend type and, for file-backed data, the path to a
    GeoJSON / GeoParquet file of wards. ``get_data_access()`` returns the
    backend bound to that data.
    """

    _block_type_name = "ward-data-source"
    _block_type_slug = "ward-data-source"
    _description = "Selects the storage backend for Kenya ward analytics."

    backend: BackendType = Field(
        default=BackendType(DEFAULT_BACKEND),
        description="Backend type (mock or geofile)",
    )
    data_path: str | None = Field(
        default=None,
        description="Path to a ward GeoJSON or GeoParquet file",
    )

    def get_data_access(self) -> DataAccess:
        """Return the configured ``DataAccess`` backend."""
        return create_data_access(self.backend, self.data_path)


def data_source_from_env() -> WardDataSource:
    """Build a ``WardDataSource`` from environment variables (and ``.env``)."""
    load_dotenv()
    return WardDataSource(
        backend=BackendType(os.environ.get(BACKEND_ENV_VAR, DEFAULT_BACKEND)),
        data_path=os.environ.get(DATA_PATH_ENV_VAR) or None,
    )


def get_data_source(name: str = DEFAULT_BLOCK_NAME) -> WardDataSource:
    """Load a saved ``WardDataSource`` block, falling back to the environment.

    Args:
        name: Block name to load (default ``"ward-data"``).

    Returns:
        WardDataSource instance.
    """
    try:
        return WardDataSource.load(name)  # type: ignore[return-value]
    except Exception:
        return data_source_from_env()
