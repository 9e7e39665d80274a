"""
Core domain models and selection logic.

This package contains data types and the selection tracker, which are
independent of how pages are fetched or displayed.
"""

from .errors import BulkSelectionInProgress, PageFetchError, PageSelectError
from .selection import SelectionState, SelectionTracker
from .types import BulkSelectResult, Item, Page

__all__ = [
    "Item",
    "Page",
    "BulkSelectResult",
    "SelectionState",
    "SelectionTracker",
    "PageSelectError",
    "PageFetchError",
    "BulkSelectionInProgress",
]
