"""RM Sotheby's scheduled extractor.

The auctions index lists upcoming sales as links under ``/en/auctions/``.
Each auction page renders ``lot-card`` elements server-side, so a plain HTTP
fetch is enough.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from bs4 import BeautifulSoup, Tag

from auctionlots.app.config import SourceLimits
from auctionlots.domain.models import AuctionLot
from auctionlots.infrastructure.http import NetworkError
from auctionlots.infrastructure.observability.logging import (
    get_logger,
    log_context,
    log_exception,
)
from auctionlots.infrastructure.web.parsers import (
    attr,
    extract_text,
    first_non_empty,
    lot_number_from_url,
    resolve_url,
)

from .base import (
    ExtractionContext,
    PageFetcher,
    ScheduledExtractor,
    SourceRun,
    as_soup,
    lot_number_label,
)

logger = get_logger(__name__)

AUCTION_PATH_RE = re.compile(r"^/en/auctions/.+")
_ESTIMATE_CLASS_RE = re.compile(r"estimate", re.IGNORECASE)
_RM_HOSTS = ("rmsothebys.com", "www.rmsothebys.com")


class RMSothebysExtractor(ScheduledExtractor):
    name = "RM Sotheby's"
    key = "rm_sothebys"
    origin = "https://rmsothebys.com"
    index_url = "https://rmsothebys.com/en/home/auctions/"
    default_currency = "USD"
    default_auction_name = "RM Sotheby's Auction"

    def find_auction_paths(self, index_html: BeautifulSoup | str) -> list[str]:
        """Return unique auction paths from the index, in page order."""
        soup = as_soup(index_html)
        seen: set[str] = set()
        paths: list[str] = []
        for anchor in soup.find_all("a", href=True):
            path = self._auction_path(anchor["href"])
            if path and path not in seen:
                seen.add(path)
                paths.append(path)
        return paths

    @staticmethod
    def _auction_path(href: str) -> str | None:
        parts = urlsplit(href.strip())
        if parts.netloc and parts.netloc.lower() not in _RM_HOSTS:
            return None
        return parts.path if AUCTION_PATH_RE.match(parts.path) else None

    def page_context(
        self,
        soup: BeautifulSoup,
        *,
        auction_url: str | None = None,
        max_lots: int | None = None,
    ) -> ExtractionContext:
        return self.context(
            auction_name=extract_text(soup.find("h1")) or self.default_auction_name,
            auction_url=auction_url,
            max_lots=max_lots,
        )

    def scrape(self, client: PageFetcher, limits: SourceLimits) -> SourceRun:
        index_html = client.fetch(self.index_url)
        paths = self.find_auction_paths(index_html)[: limits.max_auctions]
        logger.info(f"{self.name}: visiting {len(paths)} auction page(s)")

        lots: list[AuctionLot] = []
        errors: list[str] = []
        for path in paths:
            auction_url = resolve_url(path, self.origin)
            with log_context(url=auction_url):
                try:
                    html = client.fetch(auction_url)
                except NetworkError as exc:
                    log_exception(logger, "Auction page fetch failed", exc)
                    errors.append(f"{auction_url}: {exc}")
                    continue
                soup = as_soup(html)
                context = self.page_context(
                    soup, auction_url=auction_url, max_lots=limits.max_lots
                )
                page_lots = self.extract(soup, context)
                logger.info(f"{self.name}: {len(page_lots)} lot(s) on {auction_url}")
                lots.extend(page_lots)
        return SourceRun(source=self.name, lots=tuple(lots), errors=tuple(errors))

    def extract(
        self, document: BeautifulSoup | str, context: ExtractionContext
    ) -> list[AuctionLot]:
        soup = as_soup(document)
        cards = soup.find_all(class_="lot-card")

        def parse_card(card: Tag, position: int) -> AuctionLot | None:
            link = card.find("a", href=True)
            lot_url = attr(link, "href")
            image = card.find("img")
            return self.build_lot(
                context,
                position=position,
                title=extract_text(card.find(class_="lot-title")),
                image_url=first_non_empty(attr(image, "src"), attr(image, "data-src")),
                estimate_text=extract_text(card.find(class_=_ESTIMATE_CLASS_RE)),
                lot_url=lot_url,
                lot_number=lot_number_label(card) or lot_number_from_url(lot_url),
            )

        return self.collect(cards, context, parse_card)


__all__ = ["AUCTION_PATH_RE", "RMSothebysExtractor"]
