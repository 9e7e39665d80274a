"""
Core data types for page browsing and selection.

This module defines the fundamental data structures shared by the loader,
the selection tracker and the browse session:
- Item: One record of the remote collection
- Page: An ordered slice of the collection plus size metadata
- BulkSelectResult: Outcome of a select-first-N run
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable


@dataclass(frozen=True)
class Item:
    """A single record of the remote collection.

    Only ``id`` matters to selection; everything else the API returned is
    kept verbatim in ``fields`` for display.

    Attributes:
        id: Stable unique identifier of the record
        fields: Remaining attributes of the record
    """
    id: Hashable
    fields: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)


@dataclass
class Page:
    """A bounded, ordered slice of the collection.

    Attributes:
        items: Items on this page, in collection order
        total: Total number of items in the whole collection
        page_size: Requested number of items per page
        page_index: 1-based index of this page
    """
    items: list[Item]
    total: int = 0
    page_size: int = 0
    page_index: int = 1

    @property
    def ids(self) -> list[Hashable]:
        return [item.id for item in self.items]

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def page_count(self) -> int:
        if self.page_size <= 0:
            return 0
        return (self.total + self.page_size - 1) // self.page_size

    def has_next(self) -> bool:
        return self.page_index < self.page_count


STOP_FILLED = "filled"
STOP_END_OF_COLLECTION = "end_of_collection"
STOP_PAGE_LIMIT = "page_limit"
STOP_FETCH_FAILED = "fetch_failed"
STOP_INVALID_COUNT = "invalid_count"


@dataclass
class BulkSelectResult:
    """Outcome of a select-first-N run.

    A run never raises for fetch failures; they are reported here instead.

    Attributes:
        requested: Number of items the caller asked for (0 if invalid)
        selected: Number of items the run marked selected
        pages_visited: Pages whose items were reconciled, current page included
        pages_fetched: Pages requested from the loader
        stop_reason: Why traversal ended ("filled", "end_of_collection",
            "page_limit", "fetch_failed", "invalid_count")
        error: Error message when stop_reason is "fetch_failed"
    """
    requested: int = 0
    selected: int = 0
    pages_visited: int = 0
    pages_fetched: int = 0
    stop_reason: str = STOP_FILLED
    error: str | None = None

    @property
    def ended_early(self) -> bool:
        return self.selected < self.requested or self.stop_reason == STOP_INVALID_COUNT
