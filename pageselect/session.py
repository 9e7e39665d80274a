"""
Browse session: the state a table view keeps between user actions.

A BrowseSession owns the page currently on screen and routes user actions
(row toggles, page selection changes, the header checkbox, select-first-N)
to the SelectionTracker. The view re-reads ``selected_items()`` and
``header_checked()`` after every action; nothing is pushed to it.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .core.errors import PageFetchError
from .core.selection import FetchPage, SelectionTracker
from .core.types import BulkSelectResult, Item, Page
from .logging_utils import get_logger, log_event


class BrowseSession:
    """Current page plus selection for one browsing session.

    Attributes:
        tracker: Selection state shared by every page of the session
        current_page: Page currently displayed, or None before the first load
        current_page_index: 1-based index of the displayed page
        total_records: Collection size reported by the last loaded page
        loading: True while a page load is awaiting the network
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        tracker: SelectionTracker | None = None,
        page_size: int = 12,
        logger: logging.Logger | None = None,
    ):
        self.fetch_page = fetch_page
        self.tracker = tracker or SelectionTracker(fetch_page=fetch_page)
        self.page_size = page_size
        self.logger = logger or get_logger("session")
        self.current_page: Page | None = None
        self.current_page_index = 1
        self.total_records = 0
        self.loading = False

    @property
    def bulk_running(self) -> bool:
        return self.tracker.bulk_running

    @property
    def items(self) -> list[Item]:
        return self.current_page.items if self.current_page is not None else []

    async def load_page(self, page_index: int) -> Page:
        """Fetch a page and make it current.

        On failure the previously displayed page stays current.
        """
        if page_index < 1:
            raise ValueError(f"page_index must be >= 1, got {page_index}")
        self.loading = True
        try:
            page = await self.fetch_page(page_index)
        except Exception as exc:  # noqa: BLE001
            error = f"{type(exc).__name__}: {exc}"
            log_event(
                self.logger,
                "Page load failed",
                level=logging.ERROR,
                event="page_load_failed",
                page=page_index,
                error=error,
            )
            if isinstance(exc, PageFetchError):
                raise
            raise PageFetchError(page_index, error) from exc
        finally:
            self.loading = False

        if page is None:
            page = Page(items=[], total=self.total_records, page_size=self.page_size, page_index=page_index)
        self.current_page = page
        self.current_page_index = page_index
        self.total_records = page.total
        return page

    def selected_items(self) -> list[Item]:
        return self.tracker.selected_on_page(self.items)

    def header_checked(self) -> bool:
        return self.tracker.all_selected_on_page(self.items)

    def toggle_row(self, item: Item | Any, selected: bool) -> None:
        item_id = item.id if isinstance(item, Item) else item
        self.tracker.set_selected(item_id, selected)

    def change_page_selection(self, selected_subset: Iterable[Any]) -> None:
        self.tracker.apply_page_selection(self.items, selected_subset)

    def toggle_page(self, selected: bool) -> None:
        self.tracker.set_page_all_selected(self.items, selected)

    async def select_first_n(self, n: Any) -> BulkSelectResult:
        return await self.tracker.select_first_n(
            n,
            self.current_page,
            self.current_page_index,
            fetch_page=self.fetch_page,
        )

    def selection_count(self) -> int:
        return self.tracker.selection_count()

    def page_count(self) -> int:
        if self.page_size <= 0:
            return 0
        return (self.total_records + self.page_size - 1) // self.page_size

    def first_record_offset(self) -> int:
        return (self.current_page_index - 1) * self.page_size
