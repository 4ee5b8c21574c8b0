"""
schoolclosings: Delaware school closings reconciled against district,
votech and charter school catalogs.

Usage:
    from schoolclosings import ClosuresService

    service = ClosuresService()
    result = service.get_closures()
    result.by_district["Appoquinimink School District"].status_category

    # One-shot export of static JSON for the map client
    python -m schoolclosings.runner export --out public
"""

from schoolclosings.classifier import classify
from schoolclosings.reconcile import reconcile
from schoolclosings.schema import (
    CatalogType,
    ClosureRecord,
    ReconciliationResult,
    StatusCategory,
    StatusScheme,
)
from schoolclosings.service import ClosuresService

__all__ = [
    "CatalogType",
    "ClosureRecord",
    "ClosuresService",
    "ReconciliationResult",
    "StatusCategory",
    "StatusScheme",
    "classify",
    "reconcile",
]
