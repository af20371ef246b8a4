"""Common extractor interface and the shared lot emit step.

Every auction house (and mode) is one :class:`SiteExtractor` subclass with
the same capability: ``extract(document, context) -> list[AuctionLot]``.
Adding a site means adding a subclass; orchestration code never changes.

Extraction is best-effort pattern matching over third-party markup. A field
that cannot be found is left empty; a card that raises while being read is
logged with a structure checksum and skipped. Blank cards (no title, image
or estimate text) are never emitted.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Protocol

from bs4 import BeautifulSoup, Tag

from auctionlots.app.config import SourceLimits
from auctionlots.domain.models import AuctionLot, LotStatus, ReserveStatus
from auctionlots.infrastructure.observability.logging import get_logger
from auctionlots.infrastructure.web.parsers import (
    EstimateRange,
    clean_text,
    extract_text,
    log_structure_signature,
    lot_number_from_text,
    parse_estimate,
    record_parsing_error,
    resolve_url,
)

logger = get_logger(__name__)

_LOT_NUMBER_CLASS_RE = re.compile(r"lot-?num", re.IGNORECASE)

CardParser = Callable[[Tag, int], "AuctionLot | None"]


class UnsupportedPageError(Exception):
    """Raised when an extractor is pointed at a page shape it cannot read."""


class PageFetcher(Protocol):
    def fetch(self, url: str) -> str: ...


@dataclass(frozen=True)
class ExtractionContext:
    """Page-level data derived once and shared by every lot on the page."""

    origin: str
    auction_name: str | None = None
    auction_url: str | None = None
    auction_date: str | None = None
    max_lots: int | None = None
    extracted_at: datetime | None = None


@dataclass(frozen=True)
class SourceRun:
    """Lots from one scheduled source plus non-fatal page-level errors."""

    source: str
    lots: tuple[AuctionLot, ...] = ()
    errors: tuple[str, ...] = ()


def as_soup(document: BeautifulSoup | str) -> BeautifulSoup:
    if isinstance(document, BeautifulSoup):
        return document
    return BeautifulSoup(document or "", "html.parser")


def lot_number_label(card: Tag) -> str | None:
    """Read an explicit "Lot N" label from a card, if it shows one."""
    label = card.find(class_=_LOT_NUMBER_CLASS_RE)
    return lot_number_from_text(extract_text(label))


class SiteExtractor(ABC):
    """Turns one auction house's markup into :class:`AuctionLot` records."""

    #: Auction house name, used as ``AuctionLot.auction_house`` and as the
    #: source name in results.
    name: str
    #: Stable identifier used in configuration and on the command line.
    key: str
    origin: str
    default_currency: str = "USD"
    default_auction_name: str | None = None

    @abstractmethod
    def extract(
        self, document: BeautifulSoup | str, context: ExtractionContext
    ) -> list[AuctionLot]:
        """Return the lots found in ``document``."""

    def context(self, **overrides) -> ExtractionContext:
        values = {"origin": self.origin, "auction_name": self.default_auction_name}
        values.update(overrides)
        return ExtractionContext(**values)

    def collect(
        self,
        cards: Iterable[Tag],
        context: ExtractionContext,
        parse_card: CardParser,
    ) -> list[AuctionLot]:
        """Run ``parse_card`` over cards, honouring the lot cap.

        ``parse_card`` receives each card with its 1-based position on the
        page and returns a lot or ``None`` for a blank card.
        """
        lots: list[AuctionLot] = []
        section = f"{self.key}.card"
        for position, card in enumerate(cards, start=1):
            if context.max_lots is not None and len(lots) >= context.max_lots:
                break
            card_html = str(card)
            log_structure_signature(logger, section, card_html)
            try:
                lot = parse_card(card, position)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                record_parsing_error(logger, section, card_html, exc)
                continue
            if lot is not None:
                lots.append(lot)
        return lots

    def build_lot(
        self,
        context: ExtractionContext,
        *,
        position: int,
        title: str | None,
        image_url: str | None = None,
        estimate_text: str | None = None,
        lot_url: str | None = None,
        lot_number: str | None = None,
        description: str | None = None,
        auction_date: str | None = None,
        status: LotStatus = LotStatus.UPCOMING,
        reserve_status: ReserveStatus = ReserveStatus.UNKNOWN,
        parse_estimates: bool = True,
    ) -> AuctionLot | None:
        """Normalize raw card fields into a lot, or ``None`` if the card is blank."""
        title = clean_text(title)
        estimate_text = clean_text(estimate_text)
        image_url = resolve_url(image_url, context.origin) if image_url else ""

        estimate = parse_estimate(estimate_text) if parse_estimates else EstimateRange()
        lot = AuctionLot(
            auction_house=self.name,
            lot_number=lot_number or str(position),
            title=title,
            description=clean_text(description) or None,
            image_url=image_url or None,
            estimate_text=estimate_text or None,
            estimate_low=estimate.low if estimate.has_range else None,
            estimate_high=estimate.high if estimate.has_range else None,
            currency=estimate.currency or self.default_currency,
            reserve_status=reserve_status,
            status=status,
            auction_date=clean_text(auction_date) or context.auction_date,
            auction_name=context.auction_name,
            auction_url=context.auction_url,
            lot_url=resolve_url(lot_url, context.origin) if lot_url else None,
            last_updated=context.extracted_at,
        )
        return None if lot.is_blank else lot


class ScheduledExtractor(SiteExtractor):
    """Extractor for raw HTML fetched over HTTP on a schedule.

    The default :meth:`scrape` fetches a single listing page. Houses that
    need to walk several pages override it.
    """

    index_url: str

    def page_context(
        self,
        soup: BeautifulSoup,
        *,
        auction_url: str | None = None,
        max_lots: int | None = None,
    ) -> ExtractionContext:
        """Derive the page-level context for a fetched listing page."""
        return self.context(auction_url=auction_url, max_lots=max_lots)

    def scrape(self, client: PageFetcher, limits: SourceLimits) -> SourceRun:
        soup = as_soup(client.fetch(self.index_url))
        context = self.page_context(soup, auction_url=self.index_url, max_lots=limits.max_lots)
        lots = self.extract(soup, context)
        logger.info(f"{self.name}: extracted {len(lots)} lot(s) from {self.index_url}")
        return SourceRun(source=self.name, lots=tuple(lots))


__all__ = [
    "ExtractionContext",
    "PageFetcher",
    "ScheduledExtractor",
    "SiteExtractor",
    "SourceRun",
    "UnsupportedPageError",
    "as_soup",
    "lot_number_label",
]
