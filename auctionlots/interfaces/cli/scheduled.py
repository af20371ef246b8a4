"""Scheduled scrape CLI for auctionlots."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import click
from rich.console import Console

from auctionlots.infrastructure.web.extractors import SCHEDULED_EXTRACTORS
from auctionlots.services.scrape import scheduled_handler

from .options import config_option, dump_json, load_settings

console = Console(stderr=True)


@click.command(name="scheduled")
@config_option
@click.option(
    "--source",
    "source_keys",
    multiple=True,
    type=click.Choice([cls.key for cls in SCHEDULED_EXTRACTORS]),
    help="Only scrape this source (repeatable). Defaults to all sources.",
)
@click.option(
    "--budget",
    type=float,
    default=None,
    help="Overall time budget in seconds; sources still running are reported as errors.",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write the JSON envelope to this file instead of stdout.",
)
@click.pass_context
def scheduled(
    ctx: click.Context,
    config_path: str | None,
    source_keys: tuple[str, ...],
    budget: float | None,
    output: Path | None,
) -> None:
    """Scrape every scheduled auction house and print the result envelope.

    Sources run concurrently. A failing source is listed under ``errors``
    without affecting the others. The command exits with status 1 only when
    the whole run fails.
    """
    settings = load_settings(config_path)
    if budget is not None:
        settings = dataclasses.replace(settings, run_budget_seconds=budget)

    with console.status("Scraping auction houses..."):
        envelope = scheduled_handler(settings=settings, sources=source_keys or None)

    text = dump_json(envelope)
    if output is not None:
        output.write_text(text + "\n", encoding="utf-8")
        console.print(f"Wrote results to [blue]{output}[/blue]")
    else:
        click.echo(text)

    body = envelope["body"]
    if envelope["statusCode"] != 200:
        console.print(f"[red]{body['error']}: {body['message']}[/red]")
        ctx.exit(1)

    console.print(f"[bold]{body['message']}[/bold]")
    for source, count in body["results"].items():
        console.print(f"  {source}: {count}")
    for error in body["errors"]:
        console.print(f"[yellow]  {error['source']}: {error['message']}[/yellow]")
