"""Deterministic sample dataset and the mock backend built on it.

County ward counts are stored figures (47 counties); constituency records
cover Nairobi only and a few Nairobi wards carry real-looking boundaries so
spatial queries have something to answer.
"""

from __future__ import annotations

from ward_analytics.data_access.memory import InMemoryDataAccess
from ward_analytics.geometry import Geometry
from ward_analytics.models import Constituency, County, SubCounty, Ward

SAMPLE_COUNTY_WARDS: list[tuple[str, int]] = [
    ("Nairobi", 85),
    ("Kiambu", 58),
    ("Nakuru", 47),
    ("Mombasa", 42),
    ("Kisii", 40),
    ("Nyeri", 38),
    ("Machakos", 37),
    ("Kajiado", 36),
    ("Uasin Gishu", 35),
    ("Kericho", 34),
    ("Bomet", 33),
    ("Muranga", 32),
    ("Kilifi", 31),
    ("Kwale", 30),
    ("Makueni", 29),
    ("Laikipia", 28),
    ("Isiolo", 27),
    ("Samburu", 26),
    ("Turkana", 25),
    ("West Pokot", 24),
    ("Baringo", 23),
    ("Elgeyo Marakwet", 22),
    ("Nandi", 21),
    ("Trans Nzoia", 20),
    ("Bungoma", 19),
    ("Busia", 18),
    ("Siaya", 17),
    ("Kisumu", 16),
    ("Homa Bay", 15),
    ("Migori", 14),
    ("Nyamira", 13),
    ("Narok", 12),
    ("Wajir", 11),
    ("Mandera", 10),
    ("Garissa", 9),
    ("Tana River", 8),
    ("Taita Taveta", 7),
    ("Lamu", 6),
    ("Embu", 28),
    ("Tharaka Nithi", 27),
    ("Meru", 26),
    ("Kirinyaga", 25),
    ("Nyandarua", 24),
    ("Kitui", 23),
    ("Marsabit", 22),
    ("Vihiga", 21),
    ("Kakamega", 20),
]

SAMPLE_COUNTIES: list[County] = [
    County(id=str(i), name=name, ward_count=wards) for i, (name, wards) in enumerate(SAMPLE_COUNTY_WARDS, start=1)
]

_NAIROBI_CONSTITUENCY_WARDS: list[tuple[str, int]] = [
    ("Westlands", 8),
    ("Dagoretti North", 7),
    ("Dagoretti South", 7),
    ("Langata", 8),
    ("Kibra", 8),
    ("Roysambu", 6),
    ("Embakasi East", 7),
    ("Embakasi Central", 7),
    ("Embakasi South", 7),
    ("Embakasi North", 7),
    ("Makadara", 6),
    ("Kamukunji", 7),
]

SAMPLE_CONSTITUENCIES: list[Constituency] = [
    Constituency(id=str(i), name=name, county_id="1", ward_count=wards)
    for i, (name, wards) in enumerate(_NAIROBI_CONSTITUENCY_WARDS, start=1)
]


def sample_sub_counties() -> list[SubCounty]:
    """Two sub-counties per county, splitting its wards floor/ceil."""
    subs: list[SubCounty] = []
    for county in SAMPLE_COUNTIES:
        half = county.ward_count // 2
        subs.append(
            SubCounty(id=f"{county.id}-1", name=f"{county.name} Sub-county 1", county_id=county.id, ward_count=half)
        )
        subs.append(
            SubCounty(
                id=f"{county.id}-2",
                name=f"{county.name} Sub-county 2",
                county_id=county.id,
                ward_count=county.ward_count - half,
            )
        )
    return subs


def rectangle(min_lng: float, min_lat: float, max_lng: float, max_lat: float, steps: int = 1) -> Geometry:
    """Closed rectangular Polygon with ``steps`` segments per edge.

    The ring has ``4 * steps + 1`` positions, which makes it easy to build
    boundaries of a chosen complexity.
    """
    corners = [(min_lng, min_lat), (max_lng, min_lat), (max_lng, max_lat), (min_lng, max_lat), (min_lng, min_lat)]
    ring: list[list[float]] = []
    for (x0, y0), (x1, y1) in zip(corners, corners[1:]):
        for i in range(steps):
            t = i / steps
            ring.append([round(x0 + (x1 - x0) * t, 6), round(y0 + (y1 - y0) * t, 6)])
    ring.append([min_lng, min_lat])
    return Geometry(type="Polygon", coordinates=[ring])


def sample_wards() -> list[Ward]:
    """Four Nairobi wards on a 2x2 grid of differing boundary complexity."""
    westlands = {"constituency_id": "1", "constituency_name": "Westlands", "sub_county_id": "1-1"}
    dagoretti = {"constituency_id": "2", "constituency_name": "Dagoretti North", "sub_county_id": "1-2"}
    layout = [
        ("W001", "Kitisuru", westlands, rectangle(36.74, -1.24, 36.80, -1.20, steps=15)),
        ("W002", "Parklands/Highridge", westlands, rectangle(36.80, -1.24, 36.86, -1.20, steps=50)),
        ("W003", "Kileleshwa", dagoretti, rectangle(36.74, -1.30, 36.80, -1.24)),
        ("W004", "Kilimani", dagoretti, rectangle(36.80, -1.30, 36.86, -1.24)),
    ]
    wards: list[Ward] = []
    for ward_id, name, parents, geometry in layout:
        sub_id = parents["sub_county_id"]
        wards.append(
            Ward(
                id=ward_id,
                name=name,
                county_id="1",
                county_name="Nairobi",
                constituency_id=parents["constituency_id"],
                constituency_name=parents["constituency_name"],
                sub_county_id=sub_id,
                sub_county_name=f"Nairobi Sub-county {sub_id[-1]}",
                geometry=geometry,
            )
        )
    return wards


class MockDataAccess(InMemoryDataAccess):
    """In-memory backend preloaded with the sample dataset."""

    def __init__(self) -> None:
        super().__init__(
            sample_wards(),
            counties=SAMPLE_COUNTIES,
            constituencies=SAMPLE_CONSTITUENCIES,
            sub_counties=sample_sub_counties(),
        )
