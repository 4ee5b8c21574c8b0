"""Closings portal XML feed scraper."""

import logging

import requests
from bs4 import BeautifulSoup

from schoolclosings.config import Settings
from schoolclosings.errors import UpstreamFetchError
from schoolclosings.schema import RawClosureRow
from schoolclosings.utils import fetch

logger = logging.getLogger(__name__)

# Cell order within each <row> of the portal feed
_CELL_FIELDS = ("entity_label", "detail_text", "title_text", "date_text")


def parse_closings_xml(xml_text: str) -> list[RawClosureRow]:
    """Parse <row>/<cell> elements from the closings portal feed.

    Rows are returned as-is, including rows with an empty label; dropping
    those is up to the reconciliation step.

    Raises:
        UpstreamFetchError: If the payload contains no markup at all.
    """
    soup = BeautifulSoup(xml_text or "", "html.parser")
    if soup.find() is None:
        raise UpstreamFetchError("closings feed", "response is not an XML document")

    rows = []
    for row in soup.find_all("row"):
        cells = [cell.get_text().strip() for cell in row.find_all("cell")]
        cells += [""] * (len(_CELL_FIELDS) - len(cells))
        rows.append(RawClosureRow(**dict(zip(_CELL_FIELDS, cells))))
    return rows


def scrape_closings(settings: Settings | None = None) -> list[RawClosureRow]:
    """Fetch and parse the closings feed.

    Raises:
        UpstreamFetchError: If the feed is unreachable or unparseable.
    """
    settings = settings or Settings()
    try:
        response = fetch(settings.closings_url, timeout=settings.request_timeout)
    except requests.RequestException as e:
        raise UpstreamFetchError("closings feed", str(e)) from e

    rows = parse_closings_xml(response.text)
    logger.info("Fetched %d closing rows", len(rows))
    return rows
