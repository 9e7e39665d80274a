"""Shared fakes for selection tests."""

from __future__ import annotations

from pageselect.core.types import Item, Page


def make_collection(total: int = 30, page_size: int = 12) -> dict[int, Page]:
    """Build pages 1..N of a collection whose item ids run 1..total."""
    pages: dict[int, Page] = {}
    index = 1
    for start in range(1, total + 1, page_size):
        ids = range(start, min(start + page_size, total + 1))
        pages[index] = Page(
            items=[Item(id=i, fields={"title": f"Item {i}"}) for i in ids],
            total=total,
            page_size=page_size,
            page_index=index,
        )
        index += 1
    return pages


class FakeFetcher:
    """Serves pages from a dict and records which pages were requested."""

    def __init__(self, pages: dict[int, Page], fail_on: set[int] | None = None, missing: str = "empty"):
        self.pages = pages
        self.fail_on = fail_on or set()
        self.missing = missing
        self.calls: list[int] = []

    async def __call__(self, page_index: int) -> Page | None:
        self.calls.append(page_index)
        if page_index in self.fail_on:
            raise ConnectionError(f"boom on page {page_index}")
        if page_index in self.pages:
            return self.pages[page_index]
        if self.missing == "none":
            return None
        any_page = next(iter(self.pages.values()))
        return Page(items=[], total=any_page.total, page_size=any_page.page_size, page_index=page_index)
