"""Offline extraction of a saved listing page.

Useful for checking an extractor against a page saved from the browser when
a site changes its markup.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from auctionlots.infrastructure.web.extractors import SCHEDULED_EXTRACTORS, scheduled_extractors
from auctionlots.infrastructure.web.extractors.base import as_soup

from .options import dump_json

console = Console(stderr=True)


@click.command(name="extract")
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--source",
    "source_key",
    required=True,
    type=click.Choice([cls.key for cls in SCHEDULED_EXTRACTORS]),
    help="Extractor to run over the file.",
)
@click.option(
    "--origin",
    default=None,
    help="Origin used to resolve relative URLs. Defaults to the source's site.",
)
@click.option(
    "--max-lots",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many lots (no cap by default).",
)
def extract(
    html_file: Path,
    source_key: str,
    origin: str | None,
    max_lots: int | None,
) -> None:
    """Run one scheduled extractor over HTML_FILE and print the lots as JSON."""
    extractor = scheduled_extractors([source_key])[0]
    soup = as_soup(html_file.read_text(encoding="utf-8"))
    context = extractor.page_context(soup, max_lots=max_lots)
    if origin:
        context = dataclasses.replace(context, origin=origin.rstrip("/"))

    lots = extractor.extract(soup, context)
    click.echo(dump_json([lot.to_dict() for lot in lots]))

    table = Table(title=f"{extractor.name}: {len(lots)} lot(s)")
    table.add_column("Lot")
    table.add_column("Title")
    table.add_column("Estimate")
    for lot in lots:
        estimate = (
            f"{lot.estimate_low:,}-{lot.estimate_high:,} {lot.currency}" if lot.has_estimate else "-"
        )
        table.add_row(lot.lot_number, lot.title or "-", estimate)
    console.print(table)
