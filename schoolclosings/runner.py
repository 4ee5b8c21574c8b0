"""Runner: fetches everything once and writes static JSON files."""

import argparse
import json
import logging
import sys
import time
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from schoolclosings.config import Settings
from schoolclosings.errors import SchoolClosingsError
from schoolclosings.schema import StatusScheme
from schoolclosings.service import ClosuresService
from schoolclosings.utils import configure_logging


def _write_json(path: Path, data) -> None:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def export(out_dir: str | Path, service: ClosuresService | None = None) -> dict[str, Path]:
    """Write catalog GeoJSON and reconciled closings into ``out_dir``.

    Args:
        out_dir: Target directory, created if missing.
        service: Service to read from. Defaults to one built from the environment.

    Returns:
        Mapping of written file name → path.
    """
    service = service or ClosuresService(Settings.from_env())
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    start = time.time()
    result = service.get_closures()
    payload = result.to_dict()

    files = {
        "districts.geojson": service.get_districts(),
        "votech-districts.geojson": service.get_votech_units(),
        "charter-schools.geojson": service.get_charter_schools(),
        "closings.json": result.closures_with_matches(),
        "closingsByDistrict.json": payload["byDistrict"],
        "closingsByVotech.json": payload["byVotech"],
        "closingsByCharter.json": payload["byCharter"],
    }
    written = {}
    for name, data in files.items():
        written[name] = out / name
        _write_json(written[name], data)

    elapsed = time.time() - start
    print(f"{len(result.closures)} closings → {out / 'closings.json'} ({elapsed:.1f}s)")
    print(f"  {len(result.by_district)} matched to districts")
    print(f"  {len(result.by_votech)} matched to votech districts")
    print(f"  {len(result.by_charter)} matched to charter schools")

    if result.by_district or result.by_votech or result.by_charter:
        print("\nMatched closings:")
        for lookup in (result.by_district, result.by_votech, result.by_charter):
            for key, record in lookup.items():
                print(f"  {key} → {record.status_category.value}")

    unmatched = result.unmatched
    if unmatched:
        print("\nUnmatched closings:")
        for record in unmatched:
            print(f'  "{record.school_name}"')

    return written


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Delaware school closings map data")
    subparsers = parser.add_subparsers(dest="command", required=True)

    exporter = subparsers.add_parser("export", help="Write catalogs and closings as JSON files")
    exporter.add_argument(
        "--out",
        default="public",
        help="Output directory (default: public)",
    )
    exporter.add_argument(
        "--scheme",
        choices=[s.value for s in StatusScheme],
        help="Status classification scheme (defaults to config)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = Settings.from_env()
        if args.scheme:
            settings = replace(settings, status_scheme=StatusScheme(args.scheme))
        export(args.out, ClosuresService(settings))
    except SchoolClosingsError as e:
        print(f"FAILED: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
