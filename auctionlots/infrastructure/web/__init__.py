"""Web scraping: live documents, readiness waiting, parsers and extractors."""

from .dom import LiveDocument, PlaywrightDocument, SoupDocument, open_browser_document
from .readiness import DomReadinessWaiter, DomTimeoutError, ReadinessState

__all__ = [
    "DomReadinessWaiter",
    "DomTimeoutError",
    "LiveDocument",
    "PlaywrightDocument",
    "ReadinessState",
    "SoupDocument",
    "open_browser_document",
]
