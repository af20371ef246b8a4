"""Bonhams motoring department listing."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag

from auctionlots.domain.models import AuctionLot
from auctionlots.infrastructure.web.parsers import attr, extract_text, first_non_empty

from .base import ExtractionContext, ScheduledExtractor, as_soup, lot_number_label

_TITLE_CLASS_RE = re.compile(r"title", re.IGNORECASE)
_DATE_CLASS_RE = re.compile(r"date", re.IGNORECASE)


class BonhamsExtractor(ScheduledExtractor):
    name = "Bonhams"
    key = "bonhams"
    origin = "https://www.bonhams.com"
    index_url = "https://www.bonhams.com/departments/MOT-CAR/"
    default_currency = "GBP"
    default_auction_name = "Bonhams Motoring"

    def extract(
        self, document: BeautifulSoup | str, context: ExtractionContext
    ) -> list[AuctionLot]:
        soup = as_soup(document)
        cards = soup.find_all(class_="auction-item")

        def parse_card(card: Tag, position: int) -> AuctionLot | None:
            image = card.find("img")
            # The department listing shows no estimates.
            return self.build_lot(
                context,
                position=position,
                title=extract_text(card.find(class_=_TITLE_CLASS_RE)),
                image_url=first_non_empty(attr(image, "src"), attr(image, "data-src")),
                lot_url=attr(card.find("a", href=True), "href"),
                lot_number=lot_number_label(card),
                auction_date=extract_text(card.find(class_=_DATE_CLASS_RE)),
                parse_estimates=False,
            )

        return self.collect(cards, context, parse_card)


__all__ = ["BonhamsExtractor"]
