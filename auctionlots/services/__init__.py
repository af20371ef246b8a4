"""Service layer: scrape orchestration and response envelopes."""

from .dto import PageScrapeResponse, ScheduledScrapeResponse, ScrapeRequest
from .scrape import handle_message, run_scheduled_scrape, scheduled_handler, scrape_page

__all__ = [
    "PageScrapeResponse",
    "ScheduledScrapeResponse",
    "ScrapeRequest",
    "handle_message",
    "run_scheduled_scrape",
    "scheduled_handler",
    "scrape_page",
]
