"""Tests for ward_analytics.errors."""

import logging

import pytest

from ward_analytics.errors import (
    BackendError,
    DivisionGuardError,
    EmptyGeometryError,
    MalformedGeometryError,
    NotFoundError,
    RegionNotFoundError,
    WardAnalyticsError,
    WardNotFoundError,
    percentage,
    ratio,
)


def test_region_not_found_message() -> None:
    err = RegionNotFoundError("Atlantis")
    assert str(err) == "County not found: Atlantis"
    assert err.kind == "county"
    assert err.key == "Atlantis"


def test_region_not_found_kind() -> None:
    err = RegionNotFoundError("Nowhere", kind="constituency")
    assert str(err) == "Constituency not found: Nowhere"


def test_ward_not_found() -> None:
    err = WardNotFoundError("Ghost")
    assert str(err) == "Ward not found: Ghost"
    assert isinstance(err, NotFoundError)
    assert isinstance(err, LookupError)


def test_hierarchy() -> None:
    raised = [
        RegionNotFoundError("x"),
        WardNotFoundError("x"),
        EmptyGeometryError("x"),
        MalformedGeometryError("x"),
        DivisionGuardError("x"),
    ]
    for exc in raised:
        assert isinstance(exc, WardAnalyticsError)
    assert isinstance(EmptyGeometryError("x"), ValueError)
    assert isinstance(MalformedGeometryError("x"), ValueError)
    assert isinstance(DivisionGuardError("x"), ArithmeticError)


def test_backend_error_keeps_original() -> None:
    original = ConnectionError("db down")
    err = BackendError("get_statistics", original)
    assert err.original is original
    assert err.operation == "get_statistics"
    assert "get_statistics" in str(err)


def test_ratio() -> None:
    assert ratio(1, 4) == 0.25


def test_ratio_zero_denominator() -> None:
    with pytest.raises(DivisionGuardError):
        ratio(5, 0)


def test_percentage() -> None:
    assert percentage(85, 1450) == pytest.approx(5.862, abs=0.001)


def test_percentage_zero_whole(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="ward_analytics.errors"):
        assert percentage(3, 0) == 0.0
    assert "zero total" in caplog.text
