"""Scheduled scrape across every configured auction house.

Each source runs in its own daemon thread with its own fetch client. A source
that raises is reported as a :class:`SourceError` with a zero count while the
others carry on. Lots are concatenated in declared source order once every
branch has settled (or the optional run budget has expired). A branch still
running at the budget is abandoned; being a daemon thread it does not hold
the process open.
"""

from __future__ import annotations

import asyncio
import contextvars
import threading
from typing import Any, Callable, Iterable, Sequence

from auctionlots.app.config import ScraperSettings, SourceLimits
from auctionlots.domain.models import AuctionLot, ScrapeResult, SourceError
from auctionlots.infrastructure.http import FetchClient
from auctionlots.infrastructure.observability import (
    get_logger,
    log_context,
    log_exception,
    record_exception,
    set_span_attribute,
    trace_span,
)
from auctionlots.infrastructure.web.extractors import (
    PageFetcher,
    ScheduledExtractor,
    SourceRun,
    scheduled_extractors,
)
from auctionlots.services.dto import ScheduledScrapeResponse

logger = get_logger(__name__)

ClientFactory = Callable[[ScraperSettings], PageFetcher]


def default_client_factory(settings: ScraperSettings) -> FetchClient:
    return FetchClient(
        max_redirects=settings.max_redirects,
        timeout_seconds=settings.request_timeout_seconds,
    )


def _run_source(
    extractor: ScheduledExtractor, client: PageFetcher, limits: SourceLimits
) -> SourceRun:
    with log_context(source=extractor.key), trace_span("scrape_source", source=extractor.name):
        logger.info(f"Scraping {extractor.name}")
        try:
            run = extractor.scrape(client, limits)
        except Exception as exc:
            log_exception(logger, f"{extractor.name} scrape failed", exc)
            record_exception(exc)
            raise
        finally:
            close = getattr(client, "close", None)
            if callable(close):
                close()
        set_span_attribute("lots", len(run.lots))
        logger.info(
            f"{extractor.name}: {len(run.lots)} lot(s), {len(run.errors)} page error(s)"
        )
        return run


def _settle(future: asyncio.Future, result: Any, exc: BaseException | None) -> None:
    if future.done():
        return
    if exc is not None:
        future.set_exception(exc)
    else:
        future.set_result(result)


def _start_branch(
    loop: asyncio.AbstractEventLoop, name: str, target: Callable[..., Any], *args: Any
) -> asyncio.Future:
    """Run ``target`` on a daemon thread and return a loop future for its outcome."""
    future = loop.create_future()
    context = contextvars.copy_context()

    def runner() -> None:
        try:
            result = context.run(target, *args)
        except BaseException as exc:
            outcome: tuple[Any, BaseException | None] = (None, exc)
        else:
            outcome = (result, None)
        try:
            loop.call_soon_threadsafe(_settle, future, *outcome)
        except RuntimeError:
            # Loop already closed: the branch outlived the run budget.
            logger.debug(f"Discarding late result from {name}")

    threading.Thread(target=runner, name=f"scrape-{name}", daemon=True).start()
    return future


def _error_message(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


async def run_scheduled_scrape(
    *,
    settings: ScraperSettings | None = None,
    sources: Iterable[str] | None = None,
    extractors: Sequence[ScheduledExtractor] | None = None,
    client_factory: ClientFactory | None = None,
) -> ScrapeResult:
    """Scrape all scheduled sources concurrently and aggregate the results.

    Args:
        settings: Runtime settings; defaults apply when omitted.
        sources: Optional source keys to restrict the run to.
        extractors: Explicit extractor instances, overriding ``sources``.
        client_factory: Builds one fetch client per source branch.

    Returns:
        A :class:`ScrapeResult` with one count per attempted source.
    """
    settings = settings or ScraperSettings()
    if extractors is None:
        extractors = scheduled_extractors(sources)
    if not extractors:
        return ScrapeResult()
    factory = client_factory or default_client_factory
    budget = settings.run_budget_seconds

    loop = asyncio.get_running_loop()
    futures = [
        _start_branch(
            loop,
            extractor.key,
            _run_source,
            extractor,
            factory(settings),
            settings.limits_for(extractor.key),
        )
        for extractor in extractors
    ]
    _, pending = await asyncio.wait(futures, timeout=budget)

    lots: list[AuctionLot] = []
    counts: dict[str, int] = {}
    errors: list[SourceError] = []
    for extractor, future in zip(extractors, futures):
        if future in pending:
            future.cancel()
            logger.warning(f"{extractor.name} still running after {budget:g} s budget")
            counts[extractor.name] = 0
            errors.append(
                SourceError(extractor.name, f"exceeded run budget of {budget:g} s")
            )
            continue
        exc = future.exception()
        if exc is not None:
            counts[extractor.name] = 0
            errors.append(SourceError(extractor.name, _error_message(exc)))
            continue
        run: SourceRun = future.result()
        counts[extractor.name] = len(run.lots)
        lots.extend(run.lots)
        errors.extend(SourceError(extractor.name, message) for message in run.errors)

    result = ScrapeResult(lots=lots, per_source_counts=counts, errors=errors)
    logger.info(
        f"Scheduled scrape finished: {result.total} lot(s) from {len(counts)} source(s), "
        f"{len(errors)} error(s)"
    )
    return result


def scheduled_handler(
    event: Any = None,
    *,
    settings: ScraperSettings | None = None,
    sources: Iterable[str] | None = None,
    extractors: Sequence[ScheduledExtractor] | None = None,
    client_factory: ClientFactory | None = None,
) -> dict[str, Any]:
    """Entry point for a scheduler: run the scrape and return the JSON envelope.

    ``event`` is accepted for scheduler compatibility and ignored. Any fault
    outside the per-source boundary produces the 500 envelope.
    """
    try:
        result = asyncio.run(
            run_scheduled_scrape(
                settings=settings,
                sources=sources,
                extractors=extractors,
                client_factory=client_factory,
            )
        )
    except Exception as exc:
        log_exception(logger, "Scheduled scrape failed", exc)
        return ScheduledScrapeResponse.failure(_error_message(exc)).to_wire()
    return ScheduledScrapeResponse.success(result).to_wire()


__all__ = [
    "ClientFactory",
    "default_client_factory",
    "run_scheduled_scrape",
    "scheduled_handler",
]
