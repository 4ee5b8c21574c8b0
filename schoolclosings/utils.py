"""Shared utilities for schoolclosings scrapers."""

import logging
import time

import requests

from schoolclosings.config import DEFAULT_TIMEOUT

MAX_RETRIES = 3

logger = logging.getLogger(__name__)


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with a terse CLI format.

    Pass ``force=True`` to reconfigure during tests or alternate entry points.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )


def fetch(url: str, *, timeout: float = DEFAULT_TIMEOUT, **kwargs) -> requests.Response:
    """Fetch a URL with retry logic."""
    for attempt in range(MAX_RETRIES):
        try:
            response = requests.get(url, timeout=timeout, **kwargs)
            response.raise_for_status()
            return response
        except requests.RequestException as e:
            if attempt < MAX_RETRIES - 1:
                wait = 2 ** (attempt + 1)
                logger.warning("Retry %d/%d for %s...: %s", attempt + 1, MAX_RETRIES, url[:80], e)
                time.sleep(wait)
            else:
                raise


def safe_strip(value: str | None) -> str | None:
    """Strip whitespace, return None if empty."""
    if not value or not value.strip():
        return None
    return value.strip()


def parse_geojson_features(data: dict) -> list[dict]:
    """Return the features of a FeatureCollection, each with a properties dict."""
    results = []
    for feature in data.get("features") or []:
        if not isinstance(feature, dict):
            continue
        results.append({
            **feature,
            "properties": feature.get("properties") or {},
        })
    return results
