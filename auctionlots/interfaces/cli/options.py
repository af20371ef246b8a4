"""Shared Click options and helpers for the scrape commands."""

from __future__ import annotations

import json
from typing import Any

import click

from auctionlots.app.config import ScraperSettings

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=str),
    default=None,
    help="JSON settings file (timeouts, budget, per-source limits).",
)


def load_settings(config_path: str | None) -> ScraperSettings:
    """Load settings from ``config_path``, or defaults when it is omitted."""
    if not config_path:
        return ScraperSettings()
    try:
        return ScraperSettings.from_file(config_path)
    except (OSError, ValueError, TypeError) as exc:
        raise click.ClickException(f"Invalid config {config_path}: {exc}") from exc


def dump_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)
