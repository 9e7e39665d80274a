"""
Command-line interface for pageselect.

Uses Typer to browse a page of the remote collection or to run a
select-first-N pass starting at a given page and report what it selected.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console

from .config import AppConfig, load_config
from .core.errors import PageFetchError
from .core.selection import SelectionTracker
from .core.types import STOP_INVALID_COUNT, BulkSelectResult, Item
from .fetch.loader import PageLoader
from .logging_utils import setup_logging
from .session import BrowseSession

app = typer.Typer(add_completion=False)
console = Console()


def _build_config(
    config: Path | None,
    base_url: str | None,
    page_size: int | None,
    max_pages: int | None,
    log_level: str | None,
) -> AppConfig:
    cfg = load_config(str(config) if config else None)

    # Override with CLI options
    if base_url:
        cfg.loader.base_url = base_url
    if page_size is not None:
        cfg.loader.page_size = page_size
    if max_pages is not None:
        cfg.selection.max_pages = max_pages
    if log_level:
        cfg.logging.level = log_level
    return cfg


def _build_session(cfg: AppConfig) -> BrowseSession:
    loader = PageLoader(cfg.loader)
    try:
        tracker = SelectionTracker(fetch_page=loader.fetch_page, max_pages=cfg.selection.max_pages)
    except ValueError as exc:
        console.print(f"[red]Invalid configuration[/red]: {exc}")
        raise typer.Exit(code=1) from exc
    return BrowseSession(loader.fetch_page, tracker, page_size=cfg.loader.page_size)


def _item_label(item: Item) -> str:
    title = item.get("title")
    return f"{item.id}  {title}" if title else str(item.id)


@app.command("page")
def show_page(
    page: int = typer.Option(1, "--page", "-p", min=1, help="1-based page number."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    base_url: str | None = typer.Option(None, "--base-url", help="Collection endpoint."),
    page_size: int | None = typer.Option(None, "--page-size", min=1, help="Items per page."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Print the items on one page of the collection."""
    cfg = _build_config(config, base_url, page_size, None, log_level)
    setup_logging(cfg.logging)
    session = _build_session(cfg)

    try:
        loaded = asyncio.run(session.load_page(page))
    except PageFetchError as exc:
        console.print(f"[red]Could not load page {page}[/red]: {exc}")
        raise typer.Exit(code=1) from exc

    console.print(
        f"[bold]Page {page}/{session.page_count()}[/bold] "
        f"(records {session.first_record_offset() + 1}-{session.first_record_offset() + len(loaded.items)} "
        f"of {session.total_records})"
    )
    for item in loaded.items:
        console.print(_item_label(item))


@app.command()
def select(
    count: str = typer.Option(..., "--count", "-n", help="Number of items to select."),
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page to start selecting from."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    base_url: str | None = typer.Option(None, "--base-url", help="Collection endpoint."),
    page_size: int | None = typer.Option(None, "--page-size", min=1, help="Items per page."),
    max_pages: int | None = typer.Option(
        None, "--max-pages", min=1, help="Upper bound on pages visited by one run."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Select the first N items starting at a page.

    Loads the starting page, selects the first N items in collection order
    (fetching following pages as needed) and prints a summary together with
    the ids selected on the starting page.
    """
    cfg = _build_config(config, base_url, page_size, max_pages, log_level)
    setup_logging(cfg.logging)
    session = _build_session(cfg)

    try:
        result = asyncio.run(_run_select(session, page, count))
    except PageFetchError as exc:
        console.print(f"[red]Could not load page {page}[/red]: {exc}")
        raise typer.Exit(code=1) from exc

    _render_result(result, session)
    if result.stop_reason == STOP_INVALID_COUNT:
        raise typer.Exit(code=2)


async def _run_select(session: BrowseSession, page_index: int, count: str) -> BulkSelectResult:
    await session.load_page(page_index)
    return await session.select_first_n(count)


def _render_result(result: BulkSelectResult, session: BrowseSession) -> None:
    if result.stop_reason == STOP_INVALID_COUNT:
        console.print("[red]Count must be a positive integer[/red]")
        return

    console.print(
        "[bold]Selection summary[/bold]: "
        f"requested={result.requested}, selected={result.selected}, "
        f"pages_visited={result.pages_visited}, pages_fetched={result.pages_fetched}, "
        f"stop_reason={result.stop_reason}"
    )
    if result.error:
        console.print(f"[yellow]Stopped early[/yellow]: {result.error}")
    console.print(f"Selected: {session.selection_count()} items")

    selected_here = [str(item.id) for item in session.selected_items()]
    console.print(f"Selected on page {session.current_page_index}: {', '.join(selected_here) or '-'}")


if __name__ == "__main__":
    app()
