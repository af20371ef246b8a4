"""Entry point for running the auctionlots CLI.

This module defines the top-level Click group that aggregates the scrape
commands. Executing ``python -m auctionlots.interfaces.cli`` invokes this
group. Human-readable progress goes to stderr; JSON results go to stdout so
they can be piped.
"""

import logging

import click

from auctionlots.infrastructure.observability import configure_logging, configure_tracing

from .extract import extract
from .page import page
from .scheduled import scheduled


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--verbose/--quiet",
    default=False,
    help="Log scrape progress (INFO) instead of warnings only.",
)
@click.option(
    "--otlp-endpoint",
    default=None,
    envvar="AUCTIONLOTS_OTLP_ENDPOINT",
    help="Export OpenTelemetry spans to this OTLP endpoint.",
)
def cli(verbose: bool, otlp_endpoint: str | None) -> None:
    """Scrape auction lots from auction-house websites."""
    configure_logging(level=logging.INFO if verbose else logging.WARNING)
    if otlp_endpoint:
        configure_tracing(endpoint=otlp_endpoint)


cli.add_command(scheduled)
cli.add_command(page)
cli.add_command(extract)


if __name__ == "__main__":
    cli()
