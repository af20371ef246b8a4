"""Configuration utilities for auctionlots.

Provides helpers for loading scraper settings from JSON files. Settings cover
the interactive DOM wait, the fetch client and per-source request-volume
limits. Every value has a default, so an empty file (or no file) is valid.

Example file::

    {
        "dom_timeout_ms": 20000,
        "run_budget_seconds": 45,
        "sources": {
            "rm_sothebys": {"max_auctions": 3, "max_lots": 30}
        }
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping

#: Keys accepted under ``sources``, in declared scrape order.
SCHEDULED_SOURCE_KEYS = ("rm_sothebys", "bonhams", "broad_arrow")


def load_config(path: str) -> Dict[str, Any]:
    """Load configuration from a JSON file.

    Args:
        path: Path to the JSON configuration file.

    Returns:
        A dictionary of configuration values.
    """
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


@dataclass(frozen=True)
class SourceLimits:
    """Request-volume caps for one scheduled source."""

    max_auctions: int = 2
    max_lots: int = 20


@dataclass(frozen=True)
class ScraperSettings:
    """Runtime settings shared by both scrape modes."""

    dom_timeout_ms: int = 15000
    dom_poll_interval_ms: int = 250
    max_redirects: int = 5
    request_timeout_seconds: float | None = None
    run_budget_seconds: float | None = None
    sources: Mapping[str, SourceLimits] = field(default_factory=dict)

    def limits_for(self, source_key: str) -> SourceLimits:
        return self.sources.get(source_key) or SourceLimits()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ScraperSettings":
        """Build settings from a parsed config mapping.

        Raises:
            ValueError: If the mapping contains unknown settings, source keys
                or limit names.
        """
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(unknown)}")

        raw_sources = data.pop("sources", None) or {}
        stray = sorted(set(raw_sources) - set(SCHEDULED_SOURCE_KEYS))
        if stray:
            raise ValueError(
                f"Unknown source(s): {', '.join(stray)} "
                f"(choose from {', '.join(SCHEDULED_SOURCE_KEYS)})"
            )
        limit_keys = {f.name for f in fields(SourceLimits)}
        sources: dict[str, SourceLimits] = {}
        for key, values in raw_sources.items():
            bad = sorted(set(values) - limit_keys)
            if bad:
                raise ValueError(f"Unknown limit(s) for source {key}: {', '.join(bad)}")
            sources[key] = SourceLimits(**values)
        return cls(sources=sources, **data)

    @classmethod
    def from_file(cls, path: str) -> "ScraperSettings":
        return cls.from_mapping(load_config(path))


__all__ = ["SCHEDULED_SOURCE_KEYS", "ScraperSettings", "SourceLimits", "load_config"]
