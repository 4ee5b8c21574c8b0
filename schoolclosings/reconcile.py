"""Reconcile the closings feed against the three catalogs."""

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone

from schoolclosings.classifier import classify, combined_text
from schoolclosings.matching import (
    build_charter_lookup,
    build_district_lookup,
    build_votech_lookup,
)
from schoolclosings.schema import (
    Catalog,
    CatalogType,
    ClosureRecord,
    RawClosureRow,
    ReconciliationResult,
    StatusScheme,
)

Clock = Callable[[], datetime]

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_rows(
    rows: Iterable[RawClosureRow],
    scheme: StatusScheme = StatusScheme.STRICT,
) -> list[ClosureRecord]:
    """Turn raw feed rows into classified closure records.

    Rows without an entity label carry no information and are dropped.
    """
    records = []
    dropped = 0
    for row in rows:
        label = (row.entity_label or "").strip()
        if not label:
            dropped += 1
            continue
        detail = (row.detail_text or "").strip()
        title = (row.title_text or "").strip()
        records.append(ClosureRecord(
            school_name=label,
            status_text=detail,
            title=title,
            date=(row.date_text or "").strip(),
            status_category=classify(combined_text(detail, label, title), scheme),
        ))

    if dropped:
        logger.debug("Dropped %d feed rows without a label", dropped)
    return records


def reconcile(
    rows: Iterable[RawClosureRow],
    catalogs: Mapping[CatalogType, Catalog],
    *,
    scheme: StatusScheme = StatusScheme.STRICT,
    clock: Clock = utc_now,
) -> ReconciliationResult:
    """Classify every feed row and build the per-catalog lookups.

    A missing catalog is treated as empty, which simply yields no matches
    for that entity class.
    """
    closures = normalize_rows(rows, scheme)

    def catalog(catalog_type: CatalogType) -> Catalog:
        return catalogs.get(catalog_type) or Catalog.empty(catalog_type)

    result = ReconciliationResult(
        closures=tuple(closures),
        by_district=build_district_lookup(closures, catalog(CatalogType.DISTRICT)),
        by_votech=build_votech_lookup(closures, catalog(CatalogType.VOTECH)),
        by_charter=build_charter_lookup(closures, catalog(CatalogType.CHARTER)),
        fetched_at=clock(),
    )

    logger.info(
        "Reconciled %d closings: %d districts, %d votech, %d charter",
        len(result.closures),
        len(result.by_district),
        len(result.by_votech),
        len(result.by_charter),
    )
    for record in result.unmatched:
        logger.debug("Unmatched closing: %r", record.school_name)
    return result
