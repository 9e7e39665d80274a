"""Tests for BrowseSession: current page handling and selection glue."""

from __future__ import annotations

import asyncio

import pytest

from pageselect.core.errors import BulkSelectionInProgress, PageFetchError
from pageselect.session import BrowseSession

from helpers import FakeFetcher, make_collection


def _session(fail_on=None):
    fetcher = FakeFetcher(make_collection(), fail_on=fail_on)
    return BrowseSession(fetcher, page_size=12), fetcher


def test_load_page_makes_page_current():
    session, fetcher = _session()

    page = asyncio.run(session.load_page(2))

    assert session.current_page is page
    assert session.current_page_index == 2
    assert session.total_records == 30
    assert session.page_count() == 3
    assert session.first_record_offset() == 12
    assert not session.loading
    assert fetcher.calls == [2]


def test_failed_load_keeps_previous_page():
    session, _ = _session(fail_on={3})
    asyncio.run(session.load_page(1))

    with pytest.raises(PageFetchError):
        asyncio.run(session.load_page(3))

    assert session.current_page_index == 1
    assert session.items[0].id == 1
    assert not session.loading


def test_load_page_rejects_non_positive_index():
    session, fetcher = _session()

    with pytest.raises(ValueError):
        asyncio.run(session.load_page(0))
    assert fetcher.calls == []


def test_row_toggle_and_header_checkbox():
    session, _ = _session()
    asyncio.run(session.load_page(1))

    session.toggle_row(session.items[0], True)
    session.toggle_row(2, True)
    assert [item.id for item in session.selected_items()] == [1, 2]
    assert not session.header_checked()

    session.toggle_page(True)
    assert session.header_checked()
    assert session.selection_count() == 12

    session.toggle_row(5, False)
    assert not session.header_checked()
    assert session.selection_count() == 11


def test_change_page_selection_reconciles_current_page():
    session, _ = _session()
    asyncio.run(session.load_page(1))
    session.toggle_page(True)

    session.change_page_selection(session.items[:3])

    assert [item.id for item in session.selected_items()] == [1, 2, 3]
    assert session.tracker.state.excluded == set(range(4, 13))


def test_selection_is_kept_when_changing_pages():
    session, _ = _session()
    asyncio.run(session.load_page(1))
    session.toggle_row(1, True)

    asyncio.run(session.load_page(2))
    assert session.selected_items() == []
    session.toggle_row(13, True)

    asyncio.run(session.load_page(1))
    assert [item.id for item in session.selected_items()] == [1]
    assert session.selection_count() == 2


def test_select_first_n_from_current_page():
    session, fetcher = _session()
    asyncio.run(session.load_page(1))

    result = asyncio.run(session.select_first_n("15"))

    assert result.selected == 15
    assert session.header_checked()
    assert fetcher.calls == [1, 2]

    asyncio.run(session.load_page(2))
    assert [item.id for item in session.selected_items()] == [13, 14, 15]


def test_select_first_n_failure_is_reported_not_raised():
    session, _ = _session(fail_on={2})
    asyncio.run(session.load_page(1))

    result = asyncio.run(session.select_first_n(20))

    assert result.stop_reason == "fetch_failed"
    assert session.selection_count() == 12
    assert session.header_checked()


def test_select_first_n_reentry_is_rejected_by_tracker():
    pages = make_collection()

    async def scenario():
        gate = asyncio.Event()

        async def slow_fetch(page_index):
            if page_index > 1:
                await gate.wait()
            return pages.get(page_index)

        session = BrowseSession(slow_fetch, page_size=12)
        await session.load_page(1)
        first = asyncio.create_task(session.select_first_n(20))
        await asyncio.sleep(0)
        assert session.bulk_running
        with pytest.raises(BulkSelectionInProgress):
            await session.select_first_n(3)
        gate.set()
        return session, await first

    session, result = asyncio.run(scenario())

    assert result.selected == 20
    assert session.selection_count() == 20
    assert not session.bulk_running
