"""Aggregate result of a scrape run."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from .lot import AuctionLot


@dataclass(frozen=True)
class SourceError:
    """A failure attributed to one source (auction house)."""

    source: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"source": self.source, "message": self.message}


@dataclass(frozen=True)
class ScrapeResult:
    """Lots and errors collected from one or more sources.

    ``lots`` keeps per-source extraction order with sources concatenated in
    their declared order. Every source that was attempted has an entry in
    ``per_source_counts``; a failing source is counted as zero.
    """

    lots: tuple[AuctionLot, ...] = ()
    per_source_counts: Mapping[str, int] = field(default_factory=dict)
    errors: tuple[SourceError, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "lots", tuple(self.lots))
        object.__setattr__(self, "errors", tuple(self.errors))
        object.__setattr__(
            self, "per_source_counts", MappingProxyType(dict(self.per_source_counts))
        )

    @property
    def total(self) -> int:
        return len(self.lots)

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": dict(self.per_source_counts),
            "errors": [error.to_dict() for error in self.errors],
            "lots": [lot.to_dict() for lot in self.lots],
        }


__all__ = ["ScrapeResult", "SourceError"]
