"""In-process caches for reconciliation results and catalogs."""

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Generic, TypeVar

from schoolclosings.reconcile import Clock, utc_now
from schoolclosings.schema import Catalog, CatalogType

T = TypeVar("T")

logger = logging.getLogger(__name__)


class FreshnessCache(Generic[T]):
    """Holds one computed value and recomputes it once it is older than ``ttl``.

    Refreshes are serialized: callers that find the value expired while
    another thread is refreshing wait for that refresh and reuse its
    result instead of starting their own.

    A failed refresh propagates to the caller and leaves the previous value
    in place (see ``current``); the refresh instant is not advanced, so the
    next call tries again.
    """

    def __init__(self, refresh: Callable[[], T], ttl: timedelta, *, clock: Clock = utc_now):
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        self._refresh = refresh
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._value: T | None = None
        self._refreshed_at: datetime | None = None

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def current(self) -> T | None:
        """The last successfully computed value, fresh or not."""
        return self._value

    @property
    def refreshed_at(self) -> datetime | None:
        return self._refreshed_at

    def is_fresh(self) -> bool:
        refreshed_at = self._refreshed_at
        if refreshed_at is None:
            return False
        return self._clock() - refreshed_at <= self._ttl

    def get_or_refresh(self) -> T:
        if self.is_fresh():
            return self._value

        with self._lock:
            # Another caller may have refreshed while we waited for the lock
            if self.is_fresh():
                return self._value

            logger.debug("Cache expired or empty, refreshing")
            value = self._refresh()
            self._value, self._refreshed_at = value, self._clock()
            return value

    def invalidate(self) -> None:
        """Force the next call to refresh; the current value stays readable."""
        with self._lock:
            self._refreshed_at = None


class CatalogCache:
    """Caches each catalog for the lifetime of the process.

    Failed loads are not cached, so a catalog that couldn't be fetched is
    retried on the next call.
    """

    def __init__(self, loader: Callable[[CatalogType], Catalog]):
        self._loader = loader
        self._catalogs: dict[CatalogType, Catalog] = {}
        self._locks = {catalog_type: threading.Lock() for catalog_type in CatalogType}

    def get(self, catalog_type: CatalogType) -> Catalog:
        catalog_type = CatalogType(catalog_type)
        catalog = self._catalogs.get(catalog_type)
        if catalog is not None:
            return catalog

        with self._locks[catalog_type]:
            catalog = self._catalogs.get(catalog_type)
            if catalog is None:
                catalog = self._loader(catalog_type)
                self._catalogs[catalog_type] = catalog
        return catalog

    def peek(self, catalog_type: CatalogType) -> Catalog | None:
        """Return the cached catalog without loading it."""
        return self._catalogs.get(CatalogType(catalog_type))

    def is_loaded(self, catalog_type: CatalogType) -> bool:
        return CatalogType(catalog_type) in self._catalogs
