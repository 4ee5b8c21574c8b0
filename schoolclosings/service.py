"""Consumer-facing access to catalogs and reconciled closings."""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from schoolclosings.cache import CatalogCache, FreshnessCache
from schoolclosings.config import Settings
from schoolclosings.errors import UpstreamFetchError
from schoolclosings.reconcile import Clock, reconcile, utc_now
from schoolclosings.schema import Catalog, CatalogType, RawClosureRow, ReconciliationResult
from schoolclosings.scrapers.catalogs import fetch_catalog
from schoolclosings.scrapers.feed import scrape_closings

logger = logging.getLogger(__name__)


class ClosuresService:
    """Owns the catalog cache and the closings freshness cache.

    Construct one per process and hand it to whatever serves the data.
    Catalogs are fetched once and kept; closings are recomputed once the
    cached result is older than ``settings.closings_ttl``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        catalog_loader: Callable[[CatalogType], Catalog] | None = None,
        feed_fetcher: Callable[[], list[RawClosureRow]] | None = None,
        clock: Clock = utc_now,
    ):
        self.settings = settings or Settings()
        self._load_catalog = catalog_loader or (lambda t: fetch_catalog(t, self.settings))
        self._fetch_feed = feed_fetcher or (lambda: scrape_closings(self.settings))
        self._clock = clock
        self.catalogs = CatalogCache(self._load_catalog)
        self.closings = FreshnessCache(self._refresh, self.settings.closings_ttl, clock=clock)

    def get_districts(self) -> dict:
        return self.catalogs.get(CatalogType.DISTRICT).geojson

    def get_votech_units(self) -> dict:
        return self.catalogs.get(CatalogType.VOTECH).geojson

    def get_charter_schools(self) -> dict:
        return self.catalogs.get(CatalogType.CHARTER).geojson

    def get_closures(self) -> ReconciliationResult:
        """Return the reconciled closings, refreshing them if expired.

        Raises:
            UpstreamFetchError: If a refresh was needed and failed.
        """
        return self.closings.get_or_refresh()

    def get_closures_or_stale(self) -> ReconciliationResult:
        """Like ``get_closures`` but falls back to the last good result on failure."""
        try:
            return self.closings.get_or_refresh()
        except UpstreamFetchError as e:
            stale = self.closings.current
            if stale is None:
                raise
            logger.warning(
                "Closings refresh failed, serving result from %s: %s",
                stale.fetched_at.isoformat(),
                e,
            )
            return stale

    def _refresh(self) -> ReconciliationResult:
        # The feed and the three catalogs are independent; fetch them together
        with ThreadPoolExecutor(max_workers=1 + len(CatalogType)) as executor:
            feed_future = executor.submit(self._fetch_feed)
            catalog_futures = {
                catalog_type: executor.submit(self.catalogs.get, catalog_type)
                for catalog_type in CatalogType
            }
            rows = feed_future.result()
            catalogs = {t: future.result() for t, future in catalog_futures.items()}

        return reconcile(
            rows,
            catalogs,
            scheme=self.settings.status_scheme,
            clock=self._clock,
        )
