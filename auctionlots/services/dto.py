"""
Response envelopes and request messages for the scrape services.

Both modes hand their results to external callers as JSON. The models here
fix the wire shape; ``to_wire()`` returns the plain dictionary to serialize.

Scheduled mode::

    {"statusCode": 200, "body": {"message": ..., "results": {...}, "errors": [...], "lots": [...]}}
    {"statusCode": 500, "body": {"error": "Failed to scrape auctions", "message": ...}}

Interactive mode::

    {"ok": true, "data": [...]}
    {"ok": false, "error": "..."}
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from auctionlots.domain.models import AuctionLot, ScrapeResult

SCRAPE_PAGE = "SCRAPE_PAGE"
SCHEDULED_FAILURE = "Failed to scrape auctions"


# --- Scheduled mode ---
class SourceErrorDTO(BaseModel):
    model_config = ConfigDict(extra="forbid")

    source: str
    message: str


class ScheduledSuccessBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str
    results: dict[str, int]
    errors: list[SourceErrorDTO] = Field(default_factory=list)
    lots: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: ScrapeResult) -> "ScheduledSuccessBody":
        payload = result.to_dict()
        return cls(message=f"Scraped {result.total} auction lots", **payload)


class ScheduledFailureBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    error: str = SCHEDULED_FAILURE
    message: str


class ScheduledScrapeResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    status_code: int = Field(alias="statusCode")
    body: ScheduledSuccessBody | ScheduledFailureBody

    @classmethod
    def success(cls, result: ScrapeResult) -> "ScheduledScrapeResponse":
        return cls(status_code=200, body=ScheduledSuccessBody.from_result(result))

    @classmethod
    def failure(cls, message: str) -> "ScheduledScrapeResponse":
        return cls(status_code=500, body=ScheduledFailureBody(message=message))

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# --- Interactive mode ---
class ScrapeRequest(BaseModel):
    """Message asking the interactive service to scrape the current page."""

    type: Literal["SCRAPE_PAGE"] = SCRAPE_PAGE


class PageScrapeResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ok: bool
    data: list[dict[str, Any]] | None = None
    error: str | None = None

    @classmethod
    def success(cls, lots: list[AuctionLot]) -> "PageScrapeResponse":
        return cls(ok=True, data=[lot.to_dict() for lot in lots])

    @classmethod
    def failure(cls, error: str) -> "PageScrapeResponse":
        return cls(ok=False, error=error)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


__all__ = [
    "PageScrapeResponse",
    "SCHEDULED_FAILURE",
    "SCRAPE_PAGE",
    "ScheduledFailureBody",
    "ScheduledScrapeResponse",
    "ScheduledSuccessBody",
    "ScrapeRequest",
    "SourceErrorDTO",
]
