"""HTTP adapters for auctionlots.

This package provides the browser-impersonating fetch client used by the
scheduled scrapers.
"""

from .client import BROWSER_HEADERS, FetchClient, NetworkError

__all__ = [
    "BROWSER_HEADERS",
    "FetchClient",
    "NetworkError",
]
