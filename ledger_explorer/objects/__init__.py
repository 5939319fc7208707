"""
Owned objects and dynamic fields, hydrated and classified for display.
"""

from ledger_explorer.objects.loader import (
    DynamicFieldsPage,
    OwnedObjectsLoader,
    OwnedObjectsPage,
    classify_response,
)

__all__ = [
    "DynamicFieldsPage",
    "OwnedObjectsLoader",
    "OwnedObjectsPage",
    "classify_response",
]
