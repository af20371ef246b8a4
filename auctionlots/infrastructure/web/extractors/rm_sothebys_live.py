"""RM Sotheby's interactive extractor for an open lots listing page.

The listing renders its lot cards client-side. Extraction waits for the first
titled card to appear, then reads every ``.search-result`` card from the same
snapshot.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Callable
from urllib.parse import urlsplit

from bs4 import BeautifulSoup, Tag

from auctionlots.domain.models import AuctionLot, LotStatus, ReserveStatus
from auctionlots.infrastructure.observability.logging import get_logger
from auctionlots.infrastructure.web.dom import CURRENT_SRC_ATTR, LiveDocument
from auctionlots.infrastructure.web.parsers import (
    attr,
    clean_text,
    extract_text,
    first_non_empty,
    looks_like_estimate,
    lot_number_from_text,
    lot_number_from_url,
    origin_of,
)
from auctionlots.infrastructure.web.readiness import (
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_TIMEOUT_MS,
    DomReadinessWaiter,
)

from .base import ExtractionContext, SiteExtractor, UnsupportedPageError, as_soup

logger = get_logger(__name__)

LOTS_PATH_RE = re.compile(r"/auctions/[^/]+/lots/?", re.IGNORECASE)
CARD_SELECTOR = "#search-results-row .search-result"
ESTIMATE_SELECTOR = "span.lot-value-status, span.heading-subtitle.lot-value-status"

_STATUS_LABELS = frozenset({"sold", "not sold", "unsold", "withdrawn", "passed", "live"})


def has_rendered_lots(soup: BeautifulSoup) -> bool:
    """True once at least one lot card shows a non-empty title."""
    return any(
        extract_text(card.select_one(".lot-title")) for card in soup.select(CARD_SELECTOR)
    )


def pick_estimate_text(candidates: list[str]) -> str:
    """Choose the estimate among a card's status labels.

    Labels look like ``"Lot 12 | $100,000 - $120,000 USD"``. The first label
    with a currency and a dash wins, reduced to its last ``|`` segment.
    """
    for candidate in candidates:
        if looks_like_estimate(candidate):
            segments = [clean_text(part) for part in candidate.split("|")]
            segments = [part for part in segments if part]
            return segments[-1] if segments else candidate
    return candidates[0] if candidates else ""


def status_from_labels(candidates: list[str]) -> LotStatus:
    for candidate in candidates:
        for segment in candidate.split("|"):
            label = clean_text(segment).lower()
            if label in _STATUS_LABELS:
                return LotStatus.from_string(label)
    return LotStatus.UPCOMING


def reserve_from_labels(candidates: list[str]) -> ReserveStatus:
    """First reserve label among the card labels, e.g. ``"Offered Without Reserve"``."""
    for candidate in candidates:
        for segment in candidate.split("|"):
            reserve = ReserveStatus.from_string(clean_text(segment))
            if reserve is not ReserveStatus.UNKNOWN:
                return reserve
    return ReserveStatus.UNKNOWN


class RMSothebysLiveExtractor(SiteExtractor):
    name = "RM Sotheby's"
    key = "rm_sothebys_live"
    origin = "https://rmsothebys.com"
    default_currency = "USD"
    default_auction_name = "RM Sotheby's Auction"

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @staticmethod
    def is_lots_page(url: str) -> bool:
        return bool(LOTS_PATH_RE.search(urlsplit(url or "").path))

    def auction_name(self, soup: BeautifulSoup) -> str:
        meta = soup.find("meta", attrs={"property": "og:title"})
        raw = first_non_empty(attr(meta, "content"), extract_text(soup.find("title")))
        name = clean_text(raw.split("|")[0]) if raw else ""
        return name or self.default_auction_name

    async def scrape(
        self,
        document: LiveDocument,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    ) -> list[AuctionLot]:
        """Wait for the listing to render and extract its lots.

        Raises:
            UnsupportedPageError: If the document is not a lots listing.
            DomTimeoutError: If no titled card renders within ``timeout_ms``.
        """
        if not self.is_lots_page(document.url):
            raise UnsupportedPageError("This doesn't look like an RM Sotheby's lots page.")

        waiter = DomReadinessWaiter(
            document,
            has_rendered_lots,
            timeout_ms=timeout_ms,
            poll_interval_ms=poll_interval_ms,
        )
        soup = await waiter.wait()
        context = self.context(
            origin=origin_of(document.url) or self.origin,
            auction_name=self.auction_name(soup),
            auction_url=document.url,
            extracted_at=self._clock(),
        )
        lots = self.extract(soup, context)
        logger.info(f"Extracted {len(lots)} lot(s) from {document.url}")
        return lots

    def extract(
        self, document: BeautifulSoup | str, context: ExtractionContext
    ) -> list[AuctionLot]:
        soup = as_soup(document)
        return self.collect(
            soup.select(CARD_SELECTOR),
            context,
            lambda card, position: self._parse_card(card, position, context),
        )

    def _parse_card(
        self, card: Tag, position: int, context: ExtractionContext
    ) -> AuctionLot | None:
        candidates = [
            text for text in (extract_text(span) for span in card.select(ESTIMATE_SELECTOR)) if text
        ]
        link = card.select_one('a[href*="/lots/"]')
        lot_url = attr(link, "href")
        image = card.select_one("img.expanded-content, img")
        return self.build_lot(
            context,
            position=position,
            title=extract_text(card.select_one(".lot-title")),
            image_url=first_non_empty(
                attr(image, CURRENT_SRC_ATTR), attr(image, "src"), attr(image, "data-src")
            ),
            estimate_text=pick_estimate_text(candidates),
            lot_url=lot_url,
            lot_number=(
                lot_number_from_text(extract_text(card.select_one("span.lot-value-status > span")))
                or lot_number_from_url(lot_url)
            ),
            description=extract_text(card.select_one(".collection-tagline")),
            status=status_from_labels(candidates),
            reserve_status=reserve_from_labels(candidates),
        )


__all__ = [
    "CARD_SELECTOR",
    "LOTS_PATH_RE",
    "RMSothebysLiveExtractor",
    "has_rendered_lots",
    "pick_estimate_text",
    "reserve_from_labels",
    "status_from_labels",
]
