from __future__ import annotations


class PageSelectError(Exception):
    """Base class for errors raised by pageselect."""


class PageFetchError(PageSelectError):
    """A page could not be retrieved from the remote collection."""

    def __init__(self, page_index: int, message: str, status_code: int | None = None):
        super().__init__(f"page {page_index}: {message}")
        self.page_index = page_index
        self.status_code = status_code


class BulkSelectionInProgress(PageSelectError):
    """A select-first-N run was started while another one is outstanding."""
