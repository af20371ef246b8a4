"""Tests for the scheduled scrape orchestrator and its envelope."""

import asyncio
import json
import subprocess
import sys
import threading
import time
from pathlib import Path

from auctionlots.app.config import ScraperSettings, SourceLimits
from auctionlots.domain.models import AuctionLot
from auctionlots.infrastructure.http import NetworkError
from auctionlots.infrastructure.web.extractors import RMSothebysExtractor, ScheduledExtractor, SourceRun
from auctionlots.services.scrape import run_scheduled_scrape, scheduled_handler

FIXTURES = Path(__file__).resolve().parents[1] / "snapshots"


class StubSource(ScheduledExtractor):
    origin = "https://stub.test"
    index_url = "https://stub.test/"

    def __init__(self, name, key, lots=0, error=None, delay=0.0, gate=None):
        self.name = name
        self.key = key
        self.lot_count = lots
        self.error = error
        self.delay = delay
        self.gate = gate
        self.limits = None

    def scrape(self, client, limits):
        self.limits = limits
        if self.gate is not None:
            self.gate.wait(5)
        time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        lots = tuple(
            AuctionLot(auction_house=self.name, lot_number=str(i), title=f"{self.name} {i}", currency="USD")
            for i in range(1, self.lot_count + 1)
        )
        return SourceRun(source=self.name, lots=lots)

    def extract(self, document, context):
        return []


class NullClient:
    def __init__(self):
        self.closed = False

    def fetch(self, url):
        raise AssertionError("stub sources never fetch")

    def close(self):
        self.closed = True


def _run(**kwargs):
    kwargs.setdefault("client_factory", lambda settings: NullClient())
    return asyncio.run(run_scheduled_scrape(**kwargs))


def test_lots_follow_declared_order_not_completion_order():
    sources = [
        StubSource("Slow", "slow", lots=2, delay=0.1),
        StubSource("Fast", "fast", lots=1),
    ]
    result = _run(extractors=sources)

    assert [lot.auction_house for lot in result.lots] == ["Slow", "Slow", "Fast"]
    assert dict(result.per_source_counts) == {"Slow": 2, "Fast": 1}
    assert result.errors == ()


def test_failing_source_is_isolated():
    sources = [
        StubSource("A", "a", lots=2),
        StubSource("B", "b", error=NetworkError("HTTP 503 for https://b.test/", url="https://b.test/")),
        StubSource("C", "c", lots=1),
    ]
    result = _run(extractors=sources)

    assert len(result.errors) == 1
    assert result.errors[0].source == "B"
    assert "HTTP 503" in result.errors[0].message
    assert result.per_source_counts["B"] == 0
    assert result.per_source_counts["A"] == 2
    assert result.per_source_counts["C"] == 1
    assert [lot.auction_house for lot in result.lots] == ["A", "A", "C"]


def test_error_without_message_uses_exception_name():
    result = _run(extractors=[StubSource("A", "a", error=KeyError())])
    assert result.errors[0].message == "KeyError"


def test_run_budget_abandons_slow_sources():
    gate = threading.Event()
    sources = [
        StubSource("Stuck", "stuck", lots=5, gate=gate),
        StubSource("Quick", "quick", lots=1),
    ]
    try:
        result = _run(extractors=sources, settings=ScraperSettings(run_budget_seconds=0.2))
    finally:
        gate.set()

    assert result.per_source_counts["Stuck"] == 0
    assert result.per_source_counts["Quick"] == 1
    assert [error.source for error in result.errors] == ["Stuck"]
    assert result.errors[0].message == "exceeded run budget of 0.2 s"
    assert [lot.auction_house for lot in result.lots] == ["Quick"]


def test_each_source_gets_its_own_limits_and_client():
    clients = []

    def factory(settings):
        client = NullClient()
        clients.append(client)
        return client

    settings = ScraperSettings(sources={"a": SourceLimits(max_auctions=1, max_lots=5)})
    sources = [StubSource("A", "a"), StubSource("B", "b")]
    _run(extractors=sources, settings=settings, client_factory=factory)

    assert sources[0].limits == SourceLimits(max_auctions=1, max_lots=5)
    assert sources[1].limits == SourceLimits()
    assert len(clients) == 2
    assert all(client.closed for client in clients)


def test_page_errors_are_reported_under_the_source():
    class Fetcher:
        def fetch(self, url):
            if url == RMSothebysExtractor.index_url:
                return (FIXTURES / "rm_sothebys" / "index.html").read_text(encoding="utf-8")
            if url == "https://rmsothebys.com/en/auctions/mo24/":
                return (FIXTURES / "rm_sothebys" / "auction.html").read_text(encoding="utf-8")
            raise NetworkError(f"HTTP 500 for {url}", url=url, status=500)

    result = _run(extractors=[RMSothebysExtractor()], client_factory=lambda settings: Fetcher())

    assert dict(result.per_source_counts) == {"RM Sotheby's": 3}
    assert len(result.errors) == 1
    assert result.errors[0].source == "RM Sotheby's"
    assert "az25" in result.errors[0].message


def test_empty_source_selection_runs_nothing():
    result = _run(sources=[])
    assert result.total == 0
    assert dict(result.per_source_counts) == {}


def test_handler_success_envelope():
    envelope = scheduled_handler(
        extractors=[StubSource("A", "a", lots=2), StubSource("B", "b", error=RuntimeError("boom"))],
        client_factory=lambda settings: NullClient(),
    )

    assert envelope["statusCode"] == 200
    body = envelope["body"]
    assert body["message"] == "Scraped 2 auction lots"
    assert body["results"] == {"A": 2, "B": 0}
    assert body["errors"] == [{"source": "B", "message": "boom"}]
    assert [lot["lotNumber"] for lot in body["lots"]] == ["1", "2"]
    json.dumps(envelope)


def test_handler_failure_envelope():
    def broken_factory(settings):
        raise RuntimeError("no network stack")

    envelope = scheduled_handler(extractors=[StubSource("A", "a")], client_factory=broken_factory)

    assert envelope == {
        "statusCode": 500,
        "body": {"error": "Failed to scrape auctions", "message": "no network stack"},
    }


def test_handler_rejects_unknown_source_keys():
    envelope = scheduled_handler(sources=["christies"])
    assert envelope["statusCode"] == 500
    assert "christies" in envelope["body"]["message"]


_HUNG_SOURCE_SCRIPT = """
import time
from auctionlots.app.config import ScraperSettings
from auctionlots.infrastructure.web.extractors import ScheduledExtractor
from auctionlots.services.scrape import scheduled_handler


class Hung(ScheduledExtractor):
    name = "Hung"
    key = "hung"
    origin = "https://hung.test"
    index_url = "https://hung.test/"

    def scrape(self, client, limits):
        time.sleep(10)

    def extract(self, document, context):
        return []


class Client:
    def fetch(self, url):
        return ""


envelope = scheduled_handler(
    settings=ScraperSettings(run_budget_seconds=0.3),
    extractors=[Hung()],
    client_factory=lambda settings: Client(),
)
print(envelope["body"]["errors"][0]["message"])
"""


def test_run_budget_does_not_hold_the_process_open():
    started = time.monotonic()
    completed = subprocess.run(
        [sys.executable, "-c", _HUNG_SOURCE_SCRIPT],
        cwd=Path(__file__).resolve().parents[2],
        capture_output=True,
        text=True,
        timeout=30,
    )
    elapsed = time.monotonic() - started

    assert completed.returncode == 0, completed.stderr
    assert completed.stdout.strip() == "exceeded run budget of 0.3 s"
    assert elapsed < 8
