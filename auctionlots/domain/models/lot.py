"""Auction lot domain model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class ReserveStatus(str, Enum):
    """Whether a lot is offered with a reserve price."""

    RESERVE = "reserve"
    NO_RESERVE = "no_reserve"
    UNKNOWN = "unknown"

    @classmethod
    def from_string(cls, value: str | None) -> "ReserveStatus":
        """Convert a free-text label to a ReserveStatus, defaulting to UNKNOWN."""
        if not value:
            return cls.UNKNOWN
        normalized = value.lower().strip().replace("-", " ").replace("_", " ")
        if not normalized:
            return cls.UNKNOWN
        if "reserve" in normalized:
            if "no " in normalized or "without" in normalized:
                return cls.NO_RESERVE
            return cls.RESERVE
        return cls.UNKNOWN


class LotStatus(str, Enum):
    """Sale status of a lot."""

    UPCOMING = "upcoming"
    LIVE = "live"
    SOLD = "sold"
    NOT_SOLD = "not_sold"
    WITHDRAWN = "withdrawn"

    @classmethod
    def from_string(cls, value: str | None) -> "LotStatus":
        """Convert a page label to a LotStatus, defaulting to UPCOMING."""
        if not value:
            return cls.UPCOMING
        normalized = value.lower().strip().replace("_", " ")
        if normalized in ("not sold", "notsold", "unsold") or "pass" in normalized:
            return cls.NOT_SOLD
        if "withdrawn" in normalized:
            return cls.WITHDRAWN
        if "sold" in normalized:
            return cls.SOLD
        if "live" in normalized:
            return cls.LIVE
        return cls.UPCOMING


@dataclass(frozen=True)
class AuctionLot:
    """One lot offered by an auction house, normalized across sites.

    Instances are immutable value objects. The low and high estimates are
    either both set or both ``None``; constructing a lot with only one of them
    raises ``ValueError``.
    """

    auction_house: str
    lot_number: str
    title: str
    currency: str
    reserve_status: ReserveStatus = ReserveStatus.UNKNOWN
    status: LotStatus = LotStatus.UPCOMING
    description: str | None = None
    image_url: str | None = None
    estimate_text: str | None = None
    estimate_low: float | None = None
    estimate_high: float | None = None
    auction_date: str | None = None
    auction_location: str | None = None
    auction_name: str | None = None
    auction_url: str | None = None
    lot_url: str | None = None
    last_updated: datetime | None = None

    def __post_init__(self) -> None:
        if (self.estimate_low is None) != (self.estimate_high is None):
            raise ValueError(
                f"Lot {self.lot_number}: estimate_low and estimate_high must both be set or both be empty"
            )
        if not self.lot_number:
            raise ValueError("lot_number must not be empty")

    @property
    def has_estimate(self) -> bool:
        return self.estimate_low is not None

    @property
    def is_blank(self) -> bool:
        """True when the lot carries no title, image or estimate text."""
        return not (self.title or self.image_url or self.estimate_text)

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase wire representation, omitting empty fields."""
        payload: dict[str, Any] = {
            "auctionHouse": self.auction_house,
            "lotNumber": self.lot_number,
            "title": self.title,
            "description": self.description,
            "imageUrl": self.image_url,
            "estimate": self.estimate_text,
            "estimateLow": self.estimate_low,
            "estimateHigh": self.estimate_high,
            "currency": self.currency,
            "reserveStatus": self.reserve_status.value,
            "status": self.status.value,
            "auctionDate": self.auction_date,
            "auctionLocation": self.auction_location,
            "auctionName": self.auction_name,
            "auctionUrl": self.auction_url,
            "lotUrl": self.lot_url,
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
        }
        return {key: value for key, value in payload.items() if value is not None}


__all__ = ["AuctionLot", "LotStatus", "ReserveStatus"]
