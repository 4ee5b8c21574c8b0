"""Normalized data model for catalogs, closures and reconciliation results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class CatalogType(str, Enum):
    DISTRICT = "district"
    VOTECH = "votech"
    CHARTER = "charter"


class StatusCategory(str, Enum):
    CLOSED = "closed"
    DELAY = "delay"
    EARLY_DISMISSAL = "early_dismissal"
    INFORMATIONAL = "informational"


class StatusScheme(str, Enum):
    """Which keyword rules and default apply when classifying closures.

    LENIENT: delay, early/dismiss, otherwise closed.
    STRICT: delay, early dismissal, closed keywords, otherwise informational.
    """

    LENIENT = "lenient"
    STRICT = "strict"


@dataclass(frozen=True)
class GeoEntity:
    """One named unit of a catalog.

    ``key`` identifies the entity within its catalog. Districts and charter
    schools use their display name as key; votech units use the raw
    ``VOTECH`` code and carry a separate ``display_name`` plus ``match_terms``
    that are only used for matching.
    """

    catalog_type: CatalogType
    name: str
    key: str
    display_name: str | None = None
    match_terms: tuple[str, ...] = ()
    properties: dict = field(default_factory=dict, compare=False, repr=False)
    geometry: dict | None = field(default=None, compare=False, repr=False)

    @property
    def label(self) -> str:
        return self.display_name or self.name


@dataclass(frozen=True)
class Catalog:
    catalog_type: CatalogType
    entities: tuple[GeoEntity, ...] = ()
    geojson: dict = field(
        default_factory=lambda: {"type": "FeatureCollection", "features": []},
        compare=False,
        repr=False,
    )

    @classmethod
    def empty(cls, catalog_type: CatalogType) -> "Catalog":
        return cls(catalog_type=catalog_type)

    def __len__(self) -> int:
        return len(self.entities)

    def __iter__(self):
        return iter(self.entities)


@dataclass(frozen=True)
class RawClosureRow:
    """A feed row as extracted from the closings XML, before classification."""

    entity_label: str = ""
    detail_text: str = ""
    title_text: str = ""
    date_text: str = ""


@dataclass(frozen=True)
class ClosureRecord:
    school_name: str
    status_text: str
    title: str
    date: str
    status_category: StatusCategory

    @property
    def status(self) -> str:
        return self.status_text or "Closed"

    @property
    def match_text(self) -> str:
        """Lowercased label + detail, the haystack the matchers search in."""
        return f"{self.school_name} {self.status_text}".lower()

    def to_dict(self) -> dict:
        return {
            "schoolName": self.school_name,
            "status": self.status,
            "title": self.title,
            "date": self.date,
            "statusType": self.status_category.value,
        }


MatchResult = dict[str, ClosureRecord]


@dataclass(frozen=True)
class ReconciliationResult:
    closures: tuple[ClosureRecord, ...]
    by_district: MatchResult
    by_votech: MatchResult
    by_charter: MatchResult
    fetched_at: datetime

    @property
    def unmatched(self) -> list[ClosureRecord]:
        matched = {
            id(record)
            for lookup in (self.by_district, self.by_votech, self.by_charter)
            for record in lookup.values()
        }
        return [c for c in self.closures if id(c) not in matched]

    def closures_with_matches(self) -> list[dict]:
        """Every closure with the entity it matched per catalog, or None."""
        lookups = (
            ("matchedDistrict", self.by_district),
            ("matchedVotech", self.by_votech),
            ("matchedCharter", self.by_charter),
        )
        matched_keys: dict[str, dict[int, str]] = {}
        for field_name, lookup in lookups:
            keys: dict[int, str] = {}
            for key, record in lookup.items():
                keys.setdefault(id(record), key)
            matched_keys[field_name] = keys

        return [
            {
                **c.to_dict(),
                **{name: keys.get(id(c)) for name, keys in matched_keys.items()},
            }
            for c in self.closures
        ]

    def to_dict(self) -> dict:
        return {
            "closures": [c.to_dict() for c in self.closures],
            "byDistrict": _matched_dict(self.by_district, "matchedDistrict"),
            "byVotech": _matched_dict(self.by_votech, "matchedVotech"),
            "byCharter": _matched_dict(self.by_charter, "matchedCharter"),
            "fetchedAt": self.fetched_at.isoformat(),
        }


def _matched_dict(lookup: MatchResult, field_name: str) -> dict:
    return {key: {**record.to_dict(), field_name: key} for key, record in lookup.items()}
