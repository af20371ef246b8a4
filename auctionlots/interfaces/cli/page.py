"""Interactive scrape CLI: extract the lots from one listing page."""

from __future__ import annotations

import asyncio
import dataclasses
from pathlib import Path

import click
from rich.console import Console

from auctionlots.app.config import ScraperSettings
from auctionlots.infrastructure.observability import get_logger, log_exception
from auctionlots.infrastructure.web.dom import SoupDocument, open_browser_document
from auctionlots.services.dto import SCRAPE_PAGE, PageScrapeResponse
from auctionlots.services.scrape import UnsupportedSiteError, extractor_for, handle_message

from .options import config_option, dump_json, load_settings

console = Console(stderr=True)
logger = get_logger(__name__)


async def _scrape_live(url: str, settings: ScraperSettings, *, headless: bool) -> PageScrapeResponse:
    from playwright.async_api import Error as PlaywrightError

    try:
        async with open_browser_document(url, headless=headless) as document:
            return await handle_message({"type": SCRAPE_PAGE}, document, settings=settings)
    except PlaywrightError as exc:
        log_exception(logger, "Browser failed", exc, url=url)
        reason = str(exc).strip().splitlines()[0] if str(exc).strip() else exc.__class__.__name__
        return PageScrapeResponse.failure(f"Could not load {url}: {reason}")


async def _scrape_saved(url: str, html: str, settings: ScraperSettings) -> PageScrapeResponse:
    document = SoupDocument(html, url)
    return await handle_message({"type": SCRAPE_PAGE}, document, settings=settings)


@click.command(name="page")
@click.argument("url")
@config_option
@click.option(
    "--timeout-ms",
    type=click.IntRange(min=0),
    default=None,
    help="How long to wait for lot cards to render (default 15000).",
)
@click.option(
    "--headed",
    is_flag=True,
    default=False,
    help="Show the browser window instead of running headless.",
)
@click.option(
    "--html",
    "html_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read a saved copy of the page instead of opening a browser.",
)
@click.pass_context
def page(
    ctx: click.Context,
    url: str,
    config_path: str | None,
    timeout_ms: int | None,
    headed: bool,
    html_path: Path | None,
) -> None:
    """Open URL and print its lots as {ok, data} or {ok, error} JSON.

    Opening a live page requires the ``browser`` extra and a Chromium install
    (``playwright install chromium``).
    """
    settings = load_settings(config_path)
    if timeout_ms is not None:
        settings = dataclasses.replace(settings, dom_timeout_ms=timeout_ms)

    if html_path is not None:
        response = asyncio.run(
            _scrape_saved(url, html_path.read_text(encoding="utf-8"), settings)
        )
    else:
        try:
            extractor_for(url)
        except UnsupportedSiteError as exc:
            response = PageScrapeResponse.failure(str(exc))
        else:
            response = _run_live(url, settings, headless=not headed)

    click.echo(dump_json(response.to_wire()))
    if not response.ok:
        console.print(f"[red]{response.error}[/red]")
        ctx.exit(1)
    console.print(f"[green]{len(response.data or [])} lot(s) extracted[/green]")


def _run_live(url: str, settings: ScraperSettings, *, headless: bool) -> PageScrapeResponse:
    try:
        with console.status(f"Loading {url}..."):
            return asyncio.run(_scrape_live(url, settings, headless=headless))
    except ModuleNotFoundError as exc:
        raise click.ClickException(
            "Playwright is not installed; install the 'browser' extra "
            "(pip install 'auctionlots[browser]')."
        ) from exc
