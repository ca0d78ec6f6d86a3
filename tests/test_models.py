"""Tests for ward_analytics.models."""

import pytest
from pydantic import ValidationError

from ward_analytics.data_access.mock import rectangle
from ward_analytics.models import County, CountyAnalytics, Ward


def test_ward_round_trips_through_json() -> None:
    ward = Ward(
        id="W1",
        name="Kitisuru",
        county_id="1",
        county_name="Nairobi",
        constituency_id="1",
        constituency_name="Westlands",
        sub_county_id="1-1",
        sub_county_name="Westlands",
        geometry=rectangle(36.74, -1.24, 36.80, -1.20),
    )
    assert Ward.model_validate_json(ward.model_dump_json()) == ward


def test_records_are_frozen() -> None:
    county = County(id="1", name="Nairobi", ward_count=85)
    with pytest.raises(ValidationError):
        county.ward_count = 86  # type: ignore[misc]


def test_geometry_type_restricted() -> None:
    with pytest.raises(ValidationError):
        Ward.model_validate(
            {
                "id": "W1",
                "name": "x",
                "county_id": "1",
                "county_name": "x",
                "constituency_id": "1",
                "constituency_name": "x",
                "sub_county_id": "1",
                "sub_county_name": "x",
                "geometry": {"type": "LineString", "coordinates": [[0, 0], [1, 1]]},
            }
        )


def test_county_analytics_optional_spatial_fields() -> None:
    analytics = CountyAnalytics(
        county_name="Lamu", ward_count=10, constituency_count=2, sub_county_count=2, percentage_of_total_wards=0.69
    )
    assert analytics.bounding_box is None
    assert analytics.average_ward_area_km2 is None
