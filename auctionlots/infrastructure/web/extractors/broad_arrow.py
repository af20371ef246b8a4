"""Broad Arrow Auctions listing."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag

from auctionlots.domain.models import AuctionLot
from auctionlots.infrastructure.web.parsers import attr, extract_text, first_non_empty

from .base import ExtractionContext, ScheduledExtractor, as_soup, lot_number_label

_ESTIMATE_CLASS_RE = re.compile(r"estimate", re.IGNORECASE)


class BroadArrowExtractor(ScheduledExtractor):
    name = "Broad Arrow"
    key = "broad_arrow"
    origin = "https://www.broadarrowauctions.com"
    index_url = "https://www.broadarrowauctions.com/auctions"
    default_currency = "USD"
    default_auction_name = "Broad Arrow Auction"

    def extract(
        self, document: BeautifulSoup | str, context: ExtractionContext
    ) -> list[AuctionLot]:
        soup = as_soup(document)
        cards = soup.find_all(class_="vehicle-card")

        def parse_card(card: Tag, position: int) -> AuctionLot | None:
            image = card.find("img")
            return self.build_lot(
                context,
                position=position,
                title=extract_text(card.find(class_="vehicle-title")),
                image_url=first_non_empty(attr(image, "src"), attr(image, "data-src")),
                estimate_text=extract_text(card.find(class_=_ESTIMATE_CLASS_RE)),
                lot_url=attr(card.find("a", href=True), "href"),
                lot_number=lot_number_label(card),
            )

        return self.collect(cards, context, parse_card)


__all__ = ["BroadArrowExtractor"]
