from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest

from schoolclosings.config import VOTECH_TABLE
from schoolclosings.schema import Catalog, CatalogType, GeoEntity, RawClosureRow


class FakeClock:
    """Clock whose time only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


def _feature(properties: dict) -> dict:
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "Polygon", "coordinates": [[[-75.6, 39.5], [-75.5, 39.5], [-75.6, 39.5]]]},
    }


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 15, 6, 30, tzinfo=timezone.utc))


@pytest.fixture
def make_row() -> Callable[..., RawClosureRow]:
    def factory(label: str, detail: str = "", title: str = "", date: str = "2024-01-15") -> RawClosureRow:
        return RawClosureRow(entity_label=label, detail_text=detail, title_text=title, date_text=date)

    return factory


@pytest.fixture
def district_catalog() -> Catalog:
    names = [
        "Appoquinimink School District",
        "Brandywine School District",
        "Christina School District",
        "Red Clay Consolidated School District",
        "Indian River School District",
    ]
    return Catalog(
        CatalogType.DISTRICT,
        tuple(GeoEntity(CatalogType.DISTRICT, name=n, key=n) for n in names),
    )


@pytest.fixture
def votech_catalog() -> Catalog:
    entities = tuple(
        GeoEntity(
            CatalogType.VOTECH,
            name=entry.display_name,
            key=code,
            display_name=entry.display_name,
            match_terms=entry.match_terms,
        )
        for code, entry in VOTECH_TABLE.items()
    )
    return Catalog(CatalogType.VOTECH, entities)


@pytest.fixture
def charter_catalog() -> Catalog:
    names = [
        "Odyssey Charter School",
        "Newark Charter School (Lower School)",
        "Newark Charter School (Upper School)",
        "Kuumba Academy Charter School",
    ]
    return Catalog(
        CatalogType.CHARTER,
        tuple(GeoEntity(CatalogType.CHARTER, name=n, key=n) for n in names),
    )


@pytest.fixture
def catalogs(district_catalog, votech_catalog, charter_catalog) -> dict[CatalogType, Catalog]:
    return {
        CatalogType.DISTRICT: district_catalog,
        CatalogType.VOTECH: votech_catalog,
        CatalogType.CHARTER: charter_catalog,
    }


@pytest.fixture
def districts_geojson() -> dict:
    return {
        "type": "FeatureCollection",
        "features": [
            _feature({"NAME": "Appoquinimink School District", "DIST_ID": 29, "SHORTNAME": "APPO"}),
            _feature({"NAME": "Christina School District", "DIST_ID": 33, "SHORTNAME": "CHRIS"}),
            _feature({"NAME": "Christina School District", "DIST_ID": 33, "SHORTNAME": "CHRIS"}),
            _feature({"NAME": None, "DIST_ID": 0}),
        ],
    }


@pytest.fixture
def votech_geojson() -> dict:
    return {
        "type": "FeatureCollection",
        "features": [
            _feature({"VOTECH": "NEW CASTLE", "SHORTNAME": "NCCVT", "DIST_ID": 38}),
            _feature({"VOTECH": "POLYTECH", "SHORTNAME": "POLY", "DIST_ID": 39}),
            _feature({"VOTECH": "SUSSEX TECH", "SHORTNAME": "SUSTECH", "DIST_ID": 40}),
        ],
    }


@pytest.fixture
def charter_geojson() -> dict:
    return {
        "type": "FeatureCollection",
        "features": [
            _feature({"SCHOOLNAME": "Odyssey Charter School", "SCHOOLSHOR": "Odyssey"}),
            _feature({"SCHOOLNAME": "Newark Charter School (Lower School)", "SCHOOLSHOR": "NCS"}),
            _feature({"SCHOOLNAME": "", "SCHOOLSHOR": "blank"}),
        ],
    }


@pytest.fixture
def closings_xml() -> str:
    return """<?xml version="1.0" encoding="utf-8"?>
<rows>
  <row>
    <cell>Appoquinimink School District</cell>
    <cell>Schools closed today due to weather</cell>
    <cell>Closed</cell>
    <cell>2024-01-15</cell>
  </row>
  <row>
    <cell>Polytech School District</cell>
    <cell>2 hour delay</cell>
    <cell></cell>
    <cell>2024-01-15</cell>
  </row>
  <row>
    <cell>   </cell>
    <cell>Orphan detail</cell>
    <cell></cell>
    <cell>2024-01-15</cell>
  </row>
  <row>
    <cell>Odyssey Charter</cell>
    <cell>Early dismissal at noon</cell>
  </row>
</rows>
"""
