"""ArcGIS FeatureServer scrapers: districts, votech districts, charter schools."""

import logging
from collections.abc import Callable

import requests

from schoolclosings.config import VOTECH_TABLE, Settings, validate_votech_codes
from schoolclosings.errors import UpstreamFetchError
from schoolclosings.schema import Catalog, CatalogType, GeoEntity
from schoolclosings.utils import fetch, parse_geojson_features, safe_strip

logger = logging.getLogger(__name__)


def _fetch_geojson(url: str, source: str, timeout: float) -> dict:
    try:
        data = fetch(url, timeout=timeout).json()
    except requests.RequestException as e:
        raise UpstreamFetchError(source, str(e)) from e
    except ValueError as e:
        raise UpstreamFetchError(source, f"invalid JSON: {e}") from e

    # ArcGIS reports query errors with HTTP 200 and an "error" body
    if not isinstance(data, dict) or "error" in data:
        detail = data.get("error") if isinstance(data, dict) else data
        raise UpstreamFetchError(source, f"unexpected response: {detail}")
    return data


def _unique_entities(entities: list[GeoEntity]) -> tuple[GeoEntity, ...]:
    # Several polygons can share one name/code; the first one identifies it
    seen: set[str] = set()
    unique = []
    for entity in entities:
        if entity.key in seen:
            continue
        seen.add(entity.key)
        unique.append(entity)
    return tuple(unique)


def scrape_districts(settings: Settings | None = None) -> Catalog:
    """Scrape traditional school district boundaries."""
    settings = settings or Settings()
    data = _fetch_geojson(settings.catalog_url(CatalogType.DISTRICT), "districts", settings.request_timeout)

    entities = []
    for f in parse_geojson_features(data):
        name = safe_strip(f["properties"].get("NAME"))
        if not name:
            continue
        entities.append(GeoEntity(
            catalog_type=CatalogType.DISTRICT,
            name=name,
            key=name,
            properties=f["properties"],
            geometry=f.get("geometry"),
        ))

    logger.info("Fetched %d district boundaries", len(entities))
    return Catalog(CatalogType.DISTRICT, _unique_entities(entities), data)


def scrape_votech_districts(settings: Settings | None = None) -> Catalog:
    """Scrape votech district boundaries and name them from the votech table.

    Raises:
        VotechTableError: If a feature carries a code the table doesn't cover.
    """
    settings = settings or Settings()
    data = _fetch_geojson(settings.catalog_url(CatalogType.VOTECH), "votech districts", settings.request_timeout)
    features = parse_geojson_features(data)

    codes = [f["properties"].get("VOTECH") for f in features]
    validate_votech_codes(code for code in codes if code)

    enriched_features = []
    entities = []
    for f in features:
        key = f["properties"].get("VOTECH")
        if not key:
            enriched_features.append(f)
            continue
        entry = VOTECH_TABLE[key]
        properties = {**f["properties"], "NAME": entry.display_name}
        enriched_features.append({**f, "properties": properties})
        entities.append(GeoEntity(
            catalog_type=CatalogType.VOTECH,
            name=entry.display_name,
            key=key,
            display_name=entry.display_name,
            match_terms=entry.match_terms,
            properties=properties,
            geometry=f.get("geometry"),
        ))

    enriched = {**data, "features": enriched_features}
    logger.info("Fetched %d votech district boundaries", len(entities))
    return Catalog(CatalogType.VOTECH, _unique_entities(entities), enriched)


def scrape_charter_schools(settings: Settings | None = None) -> Catalog:
    """Scrape charter school locations."""
    settings = settings or Settings()
    data = _fetch_geojson(settings.catalog_url(CatalogType.CHARTER), "charter schools", settings.request_timeout)

    entities = []
    for f in parse_geojson_features(data):
        name = safe_strip(f["properties"].get("SCHOOLNAME"))
        if not name:
            continue
        entities.append(GeoEntity(
            catalog_type=CatalogType.CHARTER,
            name=name,
            key=name,
            properties=f["properties"],
            geometry=f.get("geometry"),
        ))

    logger.info("Fetched %d charter schools", len(entities))
    return Catalog(CatalogType.CHARTER, _unique_entities(entities), data)


# Registry: catalog type → scraper function
SCRAPERS: dict[CatalogType, Callable[[Settings | None], Catalog]] = {
    CatalogType.DISTRICT: scrape_districts,
    CatalogType.VOTECH: scrape_votech_districts,
    CatalogType.CHARTER: scrape_charter_schools,
}


def fetch_catalog(catalog_type: CatalogType, settings: Settings | None = None) -> Catalog:
    """Fetch one catalog.

    Raises:
        UpstreamFetchError: If the layer is unreachable or returns garbage.
    """
    return SCRAPERS[CatalogType(catalog_type)](settings)
