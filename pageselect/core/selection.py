"""Selection tracking across pages of a remote collection.

Selected state is kept as two disjoint id sets. ``included`` holds ids the
user marked selected and ``excluded`` holds ids the user explicitly
deselected. An id in neither set is undecided and reads as not selected.
Because state is keyed by id rather than by row position, a selection can
cover pages that were never rendered.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Hashable, Iterable

from ..logging_utils import get_logger, log_event
from .errors import BulkSelectionInProgress
from .types import (
    STOP_END_OF_COLLECTION,
    STOP_FETCH_FAILED,
    STOP_FILLED,
    STOP_INVALID_COUNT,
    STOP_PAGE_LIMIT,
    BulkSelectResult,
    Item,
    Page,
)

FetchPage = Callable[[int], Awaitable["Page | None"]]

DEFAULT_MAX_PAGES = 100


class SelectionState:
    """The included/excluded id sets.

    Every mutation goes through ``include`` or ``exclude``, which keep the
    two sets disjoint.
    """

    __slots__ = ("included", "excluded")

    def __init__(self, included: Iterable[Hashable] = (), excluded: Iterable[Hashable] = ()):
        self.included: set[Hashable] = set(included)
        self.excluded: set[Hashable] = set(excluded) - self.included

    def include(self, item_id: Hashable) -> None:
        self.included.add(item_id)
        self.excluded.discard(item_id)

    def exclude(self, item_id: Hashable) -> None:
        self.excluded.add(item_id)
        self.included.discard(item_id)

    def set(self, item_id: Hashable, selected: bool) -> None:
        if selected:
            self.include(item_id)
        else:
            self.exclude(item_id)

    def is_selected(self, item_id: Hashable) -> bool:
        return item_id in self.included and item_id not in self.excluded

    def is_decided(self, item_id: Hashable) -> bool:
        return item_id in self.included or item_id in self.excluded

    def copy(self) -> "SelectionState":
        return SelectionState(self.included, self.excluded)


class SelectionTracker:
    """Single source of truth for which item ids are selected.

    The synchronous methods never suspend and may be called from any
    render/update path. ``select_first_n`` is the only coroutine: it walks
    pages forward from the current one and may fetch pages the user never
    opened.
    """

    def __init__(
        self,
        fetch_page: FetchPage | None = None,
        max_pages: int = DEFAULT_MAX_PAGES,
        logger: logging.Logger | None = None,
    ):
        if max_pages < 1:
            raise ValueError("max_pages must be at least 1")
        self._state = SelectionState()
        self._fetch_page = fetch_page
        self.max_pages = max_pages
        self.logger = logger or get_logger("selection")
        self._bulk_running = False

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def bulk_running(self) -> bool:
        return self._bulk_running

    def is_selected(self, item_id: Hashable) -> bool:
        return self._state.is_selected(item_id)

    def set_selected(self, item_id: Hashable, selected: bool) -> None:
        self._state.set(item_id, selected)

    def apply_page_selection(self, page_items: Iterable[Item], selected_subset: Iterable[Any]) -> None:
        """Reconcile a whole page against the new selected subset for it.

        Every item on the page ends up explicitly selected or explicitly
        deselected. Ids in ``selected_subset`` that are not on the page are
        ignored.

        Args:
            page_items: Items currently on the page
            selected_subset: Items (or bare ids) the page now shows as selected
        """
        page_ids = [_id_of(item) for item in page_items]
        wanted = {_id_of(item) for item in selected_subset}
        for item_id in page_ids:
            self._state.set(item_id, item_id in wanted)

        unknown = wanted.difference(page_ids)
        if unknown:
            self.logger.debug("Ignoring %d selected ids not on the page", len(unknown))

    def set_page_all_selected(self, page_items: Iterable[Item], selected: bool) -> None:
        for item in page_items:
            self._state.set(_id_of(item), selected)

    def selection_count(self) -> int:
        return len(self._state.included)

    def selected_ids(self) -> frozenset:
        return frozenset(self._state.included)

    def selected_on_page(self, page_items: Iterable[Item]) -> list[Item]:
        return [item for item in page_items if self.is_selected(_id_of(item))]

    def all_selected_on_page(self, page_items: Iterable[Item]) -> bool:
        """Header checkbox state: true only for a non-empty, fully selected page."""
        items = list(page_items)
        return bool(items) and all(self.is_selected(_id_of(item)) for item in items)

    def clear(self) -> None:
        self._state = SelectionState()

    async def select_first_n(
        self,
        n: Any,
        current_page: Page | None,
        current_page_index: int,
        fetch_page: FetchPage | None = None,
    ) -> BulkSelectResult:
        """Select the first ``n`` items in collection order, starting at the current page.

        Every other item on the visited pages is explicitly deselected. The
        already-loaded ``current_page`` is reused; following pages are
        requested one at a time, in order, through ``fetch_page`` (or the
        fetcher given to the constructor).

        Traversal stops once ``n`` items are selected, on an empty or missing
        page, after ``max_pages`` pages, or on the first failed fetch.
        Decisions for the pages visited so far are committed in every one of
        those cases. Fetch failures are logged and reported through the
        result, never raised.

        Args:
            n: Number of items to select; must be a positive integer (an
                integer string such as "15" is accepted)
            current_page: The page currently on screen
            current_page_index: 1-based index of ``current_page``
            fetch_page: Optional override for the page fetcher

        Returns:
            BulkSelectResult describing how far the run got

        Raises:
            BulkSelectionInProgress: If another run has not finished yet
            ValueError: If more items than the current page holds are
                requested and no page fetcher is available
        """
        count = _coerce_count(n)
        if count is None:
            log_event(
                self.logger,
                "Bulk select ignored: count must be a positive integer",
                level=logging.WARNING,
                event="bulk_select_invalid",
                count=repr(n),
            )
            return BulkSelectResult(stop_reason=STOP_INVALID_COUNT)

        if self._bulk_running:
            raise BulkSelectionInProgress("A select-first-N run is already in progress")

        fetcher = fetch_page or self._fetch_page
        current_items = _page_items(current_page)
        if fetcher is None and count > len(current_items):
            raise ValueError("A page fetcher is required to select beyond the current page")

        log_event(
            self.logger,
            "Bulk select start",
            event="bulk_select_start",
            count=count,
            page=current_page_index,
        )

        self._bulk_running = True
        try:
            working = self._state.copy()
            result = BulkSelectResult(requested=count)
            remaining = count
            seen: set[Hashable] = set()
            page_index = current_page_index
            items = current_items

            while remaining > 0:
                if result.pages_visited >= self.max_pages:
                    result.stop_reason = STOP_PAGE_LIMIT
                    break

                if result.pages_visited > 0:
                    try:
                        page = await fetcher(page_index)
                    except Exception as exc:  # noqa: BLE001
                        result.stop_reason = STOP_FETCH_FAILED
                        result.error = f"{type(exc).__name__}: {exc}"
                        log_event(
                            self.logger,
                            "Bulk select stopped: page fetch failed",
                            level=logging.ERROR,
                            event="bulk_select_fetch_failed",
                            page=page_index,
                            error=result.error,
                        )
                        break
                    result.pages_fetched += 1
                    items = _page_items(page)

                if not items:
                    result.stop_reason = STOP_END_OF_COLLECTION
                    break

                # Ids repeated by a shifting collection keep their first decision
                for item in items:
                    item_id = _id_of(item)
                    if item_id in seen:
                        continue
                    seen.add(item_id)
                    working.set(item_id, remaining > 0)
                    if remaining > 0:
                        remaining -= 1
                        result.selected += 1

                result.pages_visited += 1
                page_index += 1

            if remaining == 0:
                result.stop_reason = STOP_FILLED

            self._state = working
        finally:
            self._bulk_running = False

        log_event(
            self.logger,
            "Bulk select done",
            event="bulk_select_done",
            requested=result.requested,
            selected=result.selected,
            pages_visited=result.pages_visited,
            pages_fetched=result.pages_fetched,
            stop_reason=result.stop_reason,
        )
        return result


def _id_of(item: Any) -> Hashable:
    return item.id if isinstance(item, Item) else item


def _page_items(page: Any) -> list[Item]:
    # Missing or malformed pages read as end of collection
    items = getattr(page, "items", None)
    if not isinstance(items, list):
        return []
    return items


def _coerce_count(n: Any) -> int | None:
    if isinstance(n, bool):
        return None
    if isinstance(n, int):
        value = n
    elif isinstance(n, float) and n.is_integer():
        value = int(n)
    elif isinstance(n, str):
        try:
            value = int(n.strip())
        except ValueError:
            return None
    else:
        return None
    return value if value > 0 else None
