"""Live document adapters for interactive scraping.

Interactive extractors work on a page that is already open in a browser. They
only need three things from it: the page URL, a parsed snapshot of the current
DOM, and a way to hear about DOM mutations while content is still rendering.
:class:`LiveDocument` captures that surface.

Two implementations are provided:

- :class:`SoupDocument` keeps HTML in memory. Tests and saved-page tooling use
  it; calling :meth:`SoupDocument.replace_html` simulates a render and notifies
  observers.
- :class:`PlaywrightDocument` wraps a Playwright page. Mutations are reported
  by an in-page ``MutationObserver`` that calls back into Python through
  ``page.expose_function``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Callable, Protocol

from bs4 import BeautifulSoup

from auctionlots.infrastructure.http import BROWSER_HEADERS
from auctionlots.infrastructure.observability.logging import get_logger

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = get_logger(__name__)

MutationCallback = Callable[[], None]

# Browsers expose the image actually chosen from srcset/lazy loading only as
# the ``currentSrc`` property; snapshots copy it into this attribute.
CURRENT_SRC_ATTR = "data-current-src"

_BINDING_NAME = "__auctionlotsMutated"

_OBSERVE_JS = """
() => {
  if (window.__auctionlotsObserver) return;
  window.__auctionlotsObserver = new MutationObserver(() => window.__auctionlotsMutated());
  window.__auctionlotsObserver.observe(document.documentElement, {childList: true, subtree: true});
}
"""

_DISCONNECT_JS = """
() => {
  if (!window.__auctionlotsObserver) return;
  window.__auctionlotsObserver.disconnect();
  window.__auctionlotsObserver = undefined;
}
"""

_MARK_CURRENT_SRC_JS = f"""
() => {{
  document.querySelectorAll('img').forEach((img) => {{
    if (img.currentSrc) img.setAttribute('{CURRENT_SRC_ATTR}', img.currentSrc);
  }});
}}
"""


class LiveDocument(Protocol):
    """The slice of a rendered page that interactive extractors rely on."""

    @property
    def url(self) -> str: ...

    async def snapshot(self) -> BeautifulSoup: ...

    async def observe(self, callback: MutationCallback) -> None: ...

    async def disconnect(self, callback: MutationCallback) -> None: ...


class SoupDocument:
    """In-memory document backed by an HTML string."""

    def __init__(self, html: str, url: str) -> None:
        self._html = html
        self._url = url
        self._observers: list[MutationCallback] = []

    @property
    def url(self) -> str:
        return self._url

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    async def snapshot(self) -> BeautifulSoup:
        return BeautifulSoup(self._html, "html.parser")

    async def observe(self, callback: MutationCallback) -> None:
        self._observers.append(callback)

    async def disconnect(self, callback: MutationCallback) -> None:
        if callback in self._observers:
            self._observers.remove(callback)

    def replace_html(self, html: str) -> None:
        """Swap the document content and notify observers, like a DOM render."""
        self._html = html
        for callback in list(self._observers):
            callback()


class PlaywrightDocument:
    """Adapter exposing a Playwright ``Page`` as a :class:`LiveDocument`."""

    def __init__(self, page: "Page") -> None:
        self._page = page
        self._callbacks: list[MutationCallback] = []
        self._bound = False

    @property
    def url(self) -> str:
        return self._page.url

    async def snapshot(self) -> BeautifulSoup:
        await self._page.evaluate(_MARK_CURRENT_SRC_JS)
        html = await self._page.content()
        return BeautifulSoup(html, "html.parser")

    async def observe(self, callback: MutationCallback) -> None:
        if not self._bound:
            await self._page.expose_function(_BINDING_NAME, self._notify)
            self._bound = True
        self._callbacks.append(callback)
        await self._page.evaluate(_OBSERVE_JS)

    async def disconnect(self, callback: MutationCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)
        if not self._callbacks:
            await self._page.evaluate(_DISCONNECT_JS)

    def _notify(self) -> None:
        for callback in list(self._callbacks):
            callback()


@asynccontextmanager
async def open_browser_document(
    url: str,
    *,
    headless: bool = True,
    navigation_timeout_ms: int = 30000,
) -> AsyncIterator[PlaywrightDocument]:
    """Launch Chromium, open ``url`` and yield it as a live document.

    Requires the ``browser`` extra (``playwright``) and an installed Chromium
    (``playwright install chromium``).
    """
    from playwright.async_api import async_playwright

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=headless)
        try:
            context = await browser.new_context(
                viewport={"width": 1920, "height": 1080},
                user_agent=BROWSER_HEADERS["User-Agent"],
                locale="en-US",
            )
            page = await context.new_page()
            logger.info(f"Opening {url} in browser")
            await page.goto(url, wait_until="domcontentloaded", timeout=navigation_timeout_ms)
            yield PlaywrightDocument(page)
        finally:
            await browser.close()


__all__ = [
    "CURRENT_SRC_ATTR",
    "LiveDocument",
    "MutationCallback",
    "PlaywrightDocument",
    "SoupDocument",
    "open_browser_document",
]
