"""Scrape orchestration for scheduled and interactive modes."""

from .interactive import (
    KNOWN_SITES,
    UnsupportedSiteError,
    extractor_for,
    handle_message,
    scrape_page,
)
from .scheduled import default_client_factory, run_scheduled_scrape, scheduled_handler

__all__ = [
    "KNOWN_SITES",
    "UnsupportedSiteError",
    "default_client_factory",
    "extractor_for",
    "handle_message",
    "run_scheduled_scrape",
    "scheduled_handler",
    "scrape_page",
]
