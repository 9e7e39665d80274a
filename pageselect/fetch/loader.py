"""
Page fetching from a remote paginated JSON API.

The default endpoint is the Art Institute of Chicago collection API, which
answers ``GET /artworks?page=N&limit=M`` with::

    {"pagination": {"total": 128000, "limit": 12, "current_page": N, ...},
     "data": [{"id": 1, "title": "...", ...}, ...]}

Any API with the same ``data`` / ``pagination.total`` shape works.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ..config import LoaderConfig
from ..core.errors import PageFetchError
from ..core.types import Item, Page
from ..logging_utils import get_logger, log_event


class PageLoader:
    """Fetches one page of the collection per call.

    No caching: every call goes to the network. Transport errors and
    non-200 responses are retried ``cfg.retries`` times before a
    PageFetchError is raised. Bodies that are not JSON, or that carry no item
    list, produce an empty Page, which callers treat as end of collection.
    """

    def __init__(
        self,
        cfg: LoaderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ):
        self.cfg = cfg
        self.transport = transport
        self.logger = logger or get_logger("loader")

    async def __call__(self, page_index: int) -> Page:
        return await self.fetch_page(page_index)

    async def fetch_page(self, page_index: int) -> Page:
        """Fetch a single page.

        Args:
            page_index: 1-based page number

        Returns:
            Page with the items on that page and the collection total

        Raises:
            ValueError: If page_index is less than 1
            PageFetchError: If the page could not be retrieved after retries
        """
        if page_index < 1:
            raise ValueError(f"page_index must be >= 1, got {page_index}")

        params: dict[str, Any] = {"page": page_index, "limit": self.cfg.page_size}
        if self.cfg.fields:
            params["fields"] = ",".join(self.cfg.fields)
        headers = {"Accept": "application/json", "User-Agent": self.cfg.user_agent}

        log_event(
            self.logger,
            "Page fetch start",
            level=logging.DEBUG,
            event="page_fetch_start",
            page=page_index,
            url=self.cfg.base_url,
        )

        last_error: str | None = None
        status_code: int | None = None

        for attempt in range(self.cfg.retries + 1):
            try:
                async with httpx.AsyncClient(
                    timeout=self.cfg.timeout_seconds,
                    headers=headers,
                    follow_redirects=True,
                    trust_env=self.cfg.trust_env,
                    transport=self.transport,
                ) as client:
                    resp = await client.get(self.cfg.base_url, params=params)

                if resp.status_code == 200:
                    page = self._parse_response(resp, page_index)
                    log_event(
                        self.logger,
                        "Page loaded",
                        level=logging.DEBUG,
                        event="page_loaded",
                        page=page_index,
                        items=len(page.items),
                        total=page.total,
                    )
                    return page

                status_code = resp.status_code
                last_error = f"HTTP {resp.status_code}"
            except httpx.HTTPError as exc:
                status_code = None
                last_error = f"{type(exc).__name__}: {exc}"

            log_event(
                self.logger,
                "Page fetch failed",
                level=logging.WARNING,
                event="page_fetch_failed",
                page=page_index,
                attempt=attempt + 1,
                error=last_error,
                status_code=status_code,
            )
            if attempt < self.cfg.retries:
                # Linear backoff: 1x, 2x, 3x the base delay
                await asyncio.sleep(self.cfg.backoff_seconds * (attempt + 1))

        raise PageFetchError(page_index, last_error or "unknown error", status_code)

    def _parse_response(self, resp: httpx.Response, page_index: int) -> Page:
        try:
            payload = resp.json()
        except ValueError:
            self.logger.warning("Page %d: response body is not JSON, treating as empty", page_index)
            payload = None
        return parse_page(payload, page_index, self.cfg.page_size, self.cfg.id_field)


def parse_page(payload: Any, page_index: int, page_size: int, id_field: str = "id") -> Page:
    """Build a Page from a decoded API payload.

    Records that are not objects or lack an id are dropped. A payload without
    a ``data`` list yields an empty page.
    """
    if not isinstance(payload, dict):
        return Page(items=[], total=0, page_size=page_size, page_index=page_index)

    pagination = payload.get("pagination")
    total = _as_int(pagination.get("total")) if isinstance(pagination, dict) else 0

    raw_items = payload.get("data")
    if not isinstance(raw_items, list):
        return Page(items=[], total=total, page_size=page_size, page_index=page_index)

    items = []
    for raw in raw_items:
        if not isinstance(raw, dict) or raw.get(id_field) is None:
            continue
        fields = {key: value for key, value in raw.items() if key != id_field}
        items.append(Item(id=raw[id_field], fields=fields))

    return Page(items=items, total=total, page_size=page_size, page_index=page_index)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
