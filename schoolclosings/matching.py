"""Match closure records to catalog entities.

Districts and votech units are found by searching the closure text for a
"core" of each catalog name. Charter school names are shorter and more
generic, so that direction is inverted: each charter is checked against
the feed, and a feed label may also match when it is contained in the
charter's name.
"""

import re
from collections.abc import Iterable

from schoolclosings.schema import Catalog, ClosureRecord, MatchResult

_SCHOOL_DISTRICT_RE = re.compile(r"\s*school\s*district\s*$", re.IGNORECASE)
_PARENTHETICAL_RE = re.compile(r"\s*\(.*?\)\s*")

MIN_CORE_LENGTH = 3
MIN_FEED_LABEL_LENGTH = 6


def name_core(name: str) -> str:
    """Lowercased name without a trailing "school district"."""
    return _SCHOOL_DISTRICT_RE.sub("", name.lower()).strip()


def charter_core(name: str) -> str:
    """Lowercased charter name without parenthetical parts like "(Lower School)"."""
    return " ".join(_PARENTHETICAL_RE.sub(" ", name.lower()).split())


def match_district(record: ClosureRecord, catalog: Catalog) -> str | None:
    text = record.match_text
    for entity in catalog:
        core = name_core(entity.name)
        if len(core) >= MIN_CORE_LENGTH and core in text:
            return entity.key
    return None


def match_votech(record: ClosureRecord, catalog: Catalog) -> str | None:
    text = record.match_text
    for entity in catalog:
        core = name_core(entity.label)
        if len(core) >= MIN_CORE_LENGTH and core in text:
            return entity.key
        if any(term.lower() in text for term in entity.match_terms if term):
            return entity.key
        if entity.key.lower() in text:
            return entity.key
    return None


def match_charter(name: str, records: Iterable[ClosureRecord]) -> ClosureRecord | None:
    """Return the first record (in feed order) that refers to the charter ``name``."""
    core = charter_core(name)
    for record in records:
        feed_name = record.school_name.lower()
        if core and core in record.match_text:
            return record
        if len(feed_name) >= MIN_FEED_LABEL_LENGTH and feed_name in core:
            return record
    return None


def build_district_lookup(records: Iterable[ClosureRecord], catalog: Catalog) -> MatchResult:
    return _first_match_wins(records, catalog, match_district)


def build_votech_lookup(records: Iterable[ClosureRecord], catalog: Catalog) -> MatchResult:
    return _first_match_wins(records, catalog, match_votech)


def build_charter_lookup(records: Iterable[ClosureRecord], catalog: Catalog) -> MatchResult:
    records = list(records)
    lookup: MatchResult = {}
    for entity in catalog:
        if entity.key in lookup:
            continue
        record = match_charter(entity.name, records)
        if record is not None:
            lookup[entity.key] = record
    return lookup


def _first_match_wins(records, catalog, matcher) -> MatchResult:
    lookup: MatchResult = {}
    if not len(catalog):
        return lookup
    for record in records:
        key = matcher(record, catalog)
        if key is not None and key not in lookup:
            lookup[key] = record
    return lookup
