"""Domain models package.

This package contains the value objects produced by the scrapers.
"""

from .lot import AuctionLot, LotStatus, ReserveStatus
from .result import ScrapeResult, SourceError

__all__ = [
    "AuctionLot",
    "LotStatus",
    "ReserveStatus",
    "ScrapeResult",
    "SourceError",
]
