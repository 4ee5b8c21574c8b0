"""Endpoints, refresh policy and the votech code table."""

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import timedelta

from schoolclosings.errors import ConfigurationError, VotechTableError
from schoolclosings.schema import CatalogType, StatusScheme

_ARCGIS_BASE = (
    "https://enterprise.firstmap.delaware.gov/arcgis/rest/services/"
    "Society/DE_Schools/FeatureServer"
)

DISTRICTS_URL = (
    f"{_ARCGIS_BASE}/3/query?"
    "where=1%3D1&outFields=NAME,DIST_ID,SHORTNAME&outSR=4326&f=geojson"
)
VOTECH_URL = (
    f"{_ARCGIS_BASE}/2/query?"
    "where=1%3D1&outFields=VOTECH,SHORTNAME,DIST_ID&outSR=4326&f=geojson"
)
CHARTER_URL = (
    f"{_ARCGIS_BASE}/0/query?"
    "where=CHARTER%3D%27Y%27&outFields=SCHOOLNAME,SCHOOLSHOR&outSR=4326"
    "&f=geojson&resultRecordCount=1000"
)
CLOSINGS_URL = "https://schoolclosings.delaware.gov/XML/PortalFeed"

DEFAULT_CLOSINGS_TTL = timedelta(minutes=3)
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class VotechEntry:
    display_name: str
    match_terms: tuple[str, ...] = ()


# VOTECH field value → display name + aliases used in the closings feed
VOTECH_TABLE: dict[str, VotechEntry] = {
    "NEW CASTLE": VotechEntry(
        display_name="New Castle County Vocational-Technical School District",
        match_terms=(
            "new castle county vo",
            "ncc votech",
            "ncco votech",
            "new castle vocational",
        ),
    ),
    "POLYTECH": VotechEntry(
        display_name="Polytech School District",
        match_terms=("polytech",),
    ),
    "SUSSEX TECH": VotechEntry(
        display_name="Sussex Technical School District",
        match_terms=("sussex tech",),
    ),
}


def validate_votech_codes(
    codes: Iterable[str], table: Mapping[str, VotechEntry] = VOTECH_TABLE
) -> None:
    """Fail fast if the votech layer uses a code the table doesn't know."""
    missing = sorted({code for code in codes if code not in table})
    if missing:
        raise VotechTableError(missing)


@dataclass(frozen=True)
class Settings:
    districts_url: str = DISTRICTS_URL
    votech_url: str = VOTECH_URL
    charter_url: str = CHARTER_URL
    closings_url: str = CLOSINGS_URL
    closings_ttl: timedelta = DEFAULT_CLOSINGS_TTL
    status_scheme: StatusScheme = StatusScheme.STRICT
    request_timeout: float = DEFAULT_TIMEOUT

    def catalog_url(self, catalog_type: CatalogType) -> str:
        return {
            CatalogType.DISTRICT: self.districts_url,
            CatalogType.VOTECH: self.votech_url,
            CatalogType.CHARTER: self.charter_url,
        }[catalog_type]

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ``SCHOOLCLOSINGS_*`` environment variables.

        Unset or blank variables fall back to the defaults above.

        Raises:
            ConfigurationError: If a value can't be parsed.
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            value = env.get(f"SCHOOLCLOSINGS_{name}")
            if value is None or not value.strip():
                return None
            return value.strip()

        kwargs: dict = {}
        for name in ("districts_url", "votech_url", "charter_url", "closings_url"):
            value = get(name.upper())
            if value:
                kwargs[name] = value

        ttl = get("CLOSINGS_TTL_SECONDS")
        if ttl is not None:
            kwargs["closings_ttl"] = timedelta(seconds=_positive_number("CLOSINGS_TTL_SECONDS", ttl))

        timeout = get("REQUEST_TIMEOUT")
        if timeout is not None:
            kwargs["request_timeout"] = _positive_number("REQUEST_TIMEOUT", timeout)

        scheme = get("STATUS_SCHEME")
        if scheme is not None:
            try:
                kwargs["status_scheme"] = StatusScheme(scheme.lower())
            except ValueError:
                options = ", ".join(s.value for s in StatusScheme)
                raise ConfigurationError(
                    f"Invalid SCHOOLCLOSINGS_STATUS_SCHEME '{scheme}'. Available: {options}"
                ) from None

        return cls(**kwargs)


def _positive_number(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"SCHOOLCLOSINGS_{name} must be a number, got '{raw}'") from None
    if value <= 0:
        raise ConfigurationError(f"SCHOOLCLOSINGS_{name} must be positive, got '{raw}'")
    return value
