"""Interactive scrape of a single page the user already has open.

The page host selects the extractor from :data:`KNOWN_SITES`. Every failure
is turned into ``{"ok": false, "error": ...}`` so the caller always receives
a response.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping
from urllib.parse import urlsplit

from auctionlots.app.config import ScraperSettings
from auctionlots.infrastructure.observability import (
    get_logger,
    log_context,
    log_exception,
    record_exception,
    set_span_attribute,
    traced,
)
from auctionlots.infrastructure.web.dom import LiveDocument
from auctionlots.infrastructure.web.extractors import (
    RMSothebysLiveExtractor,
    UnsupportedPageError,
)
from auctionlots.infrastructure.web.readiness import DomTimeoutError
from auctionlots.services.dto import SCRAPE_PAGE, PageScrapeResponse, ScrapeRequest

logger = get_logger(__name__)


class UnsupportedSiteError(Exception):
    """Raised when the page belongs to a site with no interactive extractor."""

    def __init__(self, message: str = "Unsupported site.") -> None:
        super().__init__(message)


KNOWN_SITES: dict[str, Callable[[], RMSothebysLiveExtractor]] = {
    "rmsothebys.com": RMSothebysLiveExtractor,
    "www.rmsothebys.com": RMSothebysLiveExtractor,
}


def extractor_for(url: str) -> RMSothebysLiveExtractor:
    """Return the interactive extractor for ``url``.

    Raises:
        UnsupportedSiteError: If the host is not a known site.
    """
    host = (urlsplit(url or "").hostname or "").lower()
    factory = KNOWN_SITES.get(host)
    if factory is None:
        raise UnsupportedSiteError()
    return factory()


@traced("scrape_page")
async def scrape_page(
    document: LiveDocument,
    *,
    settings: ScraperSettings | None = None,
    extractor: RMSothebysLiveExtractor | None = None,
) -> PageScrapeResponse:
    """Extract the lots on ``document`` and wrap them in a response."""
    settings = settings or ScraperSettings()
    with log_context(url=document.url):
        try:
            extractor = extractor or extractor_for(document.url)
            lots = await extractor.scrape(
                document,
                timeout_ms=settings.dom_timeout_ms,
                poll_interval_ms=settings.dom_poll_interval_ms,
            )
        except (UnsupportedSiteError, UnsupportedPageError, DomTimeoutError) as exc:
            logger.warning(f"Page scrape refused: {exc}")
            return PageScrapeResponse.failure(str(exc))
        except Exception as exc:
            log_exception(logger, "Page scrape failed", exc)
            record_exception(exc)
            return PageScrapeResponse.failure(str(exc) or exc.__class__.__name__)
        set_span_attribute("lots", len(lots))
        return PageScrapeResponse.success(lots)


async def handle_message(
    message: Mapping[str, Any] | None,
    document: LiveDocument,
    *,
    settings: ScraperSettings | None = None,
) -> PageScrapeResponse | None:
    """Answer a ``SCRAPE_PAGE`` request; any other message gets ``None``."""
    if not isinstance(message, Mapping) or message.get("type") != SCRAPE_PAGE:
        return None
    ScrapeRequest.model_validate(dict(message))
    return await scrape_page(document, settings=settings)


__all__ = [
    "KNOWN_SITES",
    "UnsupportedSiteError",
    "extractor_for",
    "handle_message",
    "scrape_page",
]
