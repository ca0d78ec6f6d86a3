"""Shared test fixtures."""

import importlib
import importlib.util
import sys
from collections.abc import Callable
from pathlib import Path
from types import ModuleType

import pytest

from ward_analytics.data_access import InMemoryDataAccess, MockDataAccess
from ward_analytics.data_access.mock import rectangle
from ward_analytics.engine import AnalyticsEngine
from ward_analytics.geometry import Geometry
from ward_analytics.models import County, Ward

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def flow_module() -> type:
    """Factory fixture that imports a flow file by group and name.

    Usage::

        def test_something(flow_module):
            mod = flow_module("kenya", "kenya_ward_report")
            mod.ward_report_flow()
    """

    class _Loader:
        @staticmethod
        def __call__(group: str, name: str) -> ModuleType:
            path = PROJECT_ROOT / "flows" / group / f"{name}.py"
            spec = importlib.util.spec_from_file_location(name, path)
            assert spec and spec.loader
            mod = importlib.util.module_from_spec(spec)
            sys.modules[name] = mod
            spec.loader.exec_module(mod)
            return mod

    return _Loader()


@pytest.fixture
def make_ward() -> Callable[..., Ward]:
    """Factory fixture building a Ward with sensible hierarchy defaults."""

    def _make(
        ward_id: str,
        name: str,
        geometry: Geometry,
        county: tuple[str, str] = ("C1", "Alpha"),
        constituency: tuple[str, str] = ("K1", "Alpha East"),
        sub_county: tuple[str, str] = ("S1", "Alpha Sub 1"),
    ) -> Ward:
        return Ward(
            id=ward_id,
            name=name,
            county_id=county[0],
            county_name=county[1],
            constituency_id=constituency[0],
            constituency_name=constituency[1],
            sub_county_id=sub_county[0],
            sub_county_name=sub_county[1],
            geometry=geometry,
        )

    return _make


@pytest.fixture
def grid_wards(make_ward: Callable[..., Ward]) -> list[Ward]:
    """Three one-degree wards in two counties, laid out west to east.

    Alpha: W1 [0,1]x[0,1], W2 [1,2]x[0,1] (shares an edge with W1).
    Beta:  W3 [3,4]x[0,1].
    """
    beta = {"county": ("C2", "Beta"), "constituency": ("K2", "Beta Central"), "sub_county": ("S3", "Beta Sub 1")}
    return [
        make_ward("W1", "West End", rectangle(0.0, 0.0, 1.0, 1.0)),
        make_ward("W2", "Midtown", rectangle(1.0, 0.0, 2.0, 1.0), sub_county=("S2", "Alpha Sub 2")),
        make_ward("W3", "Far East", rectangle(3.0, 0.0, 4.0, 1.0), **beta),
    ]


@pytest.fixture
def grid_data(grid_wards: list[Ward]) -> InMemoryDataAccess:
    return InMemoryDataAccess(grid_wards)


@pytest.fixture
def mock_data() -> MockDataAccess:
    return MockDataAccess()


@pytest.fixture
def mock_engine(mock_data: MockDataAccess) -> AnalyticsEngine:
    return AnalyticsEngine(mock_data)


@pytest.fixture
def counties_only() -> Callable[[list[tuple[str, int]]], AnalyticsEngine]:
    """Factory for an engine over counties with stored counts and no wards."""

    def _build(counts: list[tuple[str, int]]) -> AnalyticsEngine:
        counties = [County(id=str(i), name=name, ward_count=n) for i, (name, n) in enumerate(counts, start=1)]
        return AnalyticsEngine(InMemoryDataAccess([], counties=counties, constituencies=[], sub_counties=[]))

    return _build
