from __future__ import annotations

import importlib
import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from auctionlots.interfaces.cli import cli
from auctionlots.interfaces.cli.extract import extract
from auctionlots.interfaces.cli.page import page
from auctionlots.interfaces.cli.scheduled import scheduled

FIXTURES = Path(__file__).resolve().parents[1] / "snapshots"
LOTS_URL = "https://rmsothebys.com/en/auctions/mo24/lots/"

# The package re-exports the command under the module's name.
scheduled_module = importlib.import_module("auctionlots.interfaces.cli.scheduled")


def _first_json(output: str):
    start = min(i for i in (output.find("{"), output.find("[")) if i >= 0)
    return json.JSONDecoder().raw_decode(output[start:])[0]


def test_help_lists_commands() -> None:
    result = CliRunner().invoke(cli, ["--help"])

    assert result.exit_code == 0
    for name in ("scheduled", "page", "extract"):
        assert name in result.output


def test_extract_saved_listing() -> None:
    runner = CliRunner()
    result = runner.invoke(
        extract, [str(FIXTURES / "broad_arrow" / "listing.html"), "--source", "broad_arrow"]
    )

    assert result.exit_code == 0
    lots = _first_json(result.output)
    assert [lot["lotNumber"] for lot in lots] == ["1", "2"]
    assert lots[0]["estimateLow"] == 250000
    assert lots[0]["lotUrl"].startswith("https://www.broadarrowauctions.com/")


def test_extract_with_origin_and_cap() -> None:
    result = CliRunner().invoke(
        extract,
        [
            str(FIXTURES / "rm_sothebys" / "auction.html"),
            "--source",
            "rm_sothebys",
            "--origin",
            "https://staging.rmsothebys.test/",
            "--max-lots",
            "1",
        ],
    )

    assert result.exit_code == 0
    lots = _first_json(result.output)
    assert len(lots) == 1
    assert lots[0]["auctionName"] == "Monterey 2024"
    assert lots[0]["lotUrl"].startswith("https://staging.rmsothebys.test/en/auctions/mo24/")


def test_extract_rejects_unknown_source() -> None:
    result = CliRunner().invoke(
        extract, [str(FIXTURES / "bonhams" / "listing.html"), "--source", "christies"]
    )
    assert result.exit_code == 2


def test_page_from_saved_html() -> None:
    result = CliRunner().invoke(
        page, [LOTS_URL, "--html", str(FIXTURES / "rm_sothebys_live" / "lots.html")]
    )

    assert result.exit_code == 0
    payload = _first_json(result.output)
    assert payload["ok"] is True
    assert [lot["lotNumber"] for lot in payload["data"]] == ["101", "42", "4"]


def test_page_reports_unsupported_site() -> None:
    result = CliRunner().invoke(
        page,
        [
            "https://example.com/en/auctions/x/lots/",
            "--html",
            str(FIXTURES / "rm_sothebys_live" / "lots.html"),
        ],
    )

    assert result.exit_code == 1
    assert _first_json(result.output) == {"ok": False, "error": "Unsupported site."}


def test_page_timeout_option(tmp_path: Path) -> None:
    html_file = tmp_path / "empty.html"
    html_file.write_text('<div id="search-results-row"></div>', encoding="utf-8")

    result = CliRunner().invoke(page, [LOTS_URL, "--html", str(html_file), "--timeout-ms", "50"])

    assert result.exit_code == 1
    assert _first_json(result.output)["error"] == "Timed out waiting for lots to load."


def test_scheduled_writes_envelope(tmp_path: Path, monkeypatch) -> None:
    calls = {}

    def fake_handler(*, settings, sources):
        calls["settings"] = settings
        calls["sources"] = sources
        return {
            "statusCode": 200,
            "body": {
                "message": "Scraped 0 auction lots",
                "results": {"Bonhams": 0},
                "errors": [{"source": "Bonhams", "message": "HTTP 503"}],
                "lots": [],
            },
        }

    monkeypatch.setattr(scheduled_module, "scheduled_handler", fake_handler)
    config = tmp_path / "settings.json"
    config.write_text(json.dumps({"run_budget_seconds": 30}), encoding="utf-8")
    output = tmp_path / "out.json"

    result = CliRunner().invoke(
        scheduled,
        ["--config", str(config), "--source", "bonhams", "--budget", "12", "--output", str(output)],
    )

    assert result.exit_code == 0
    assert calls["sources"] == ("bonhams",)
    assert calls["settings"].run_budget_seconds == 12
    assert json.loads(output.read_text(encoding="utf-8"))["body"]["results"] == {"Bonhams": 0}
    assert "HTTP 503" in result.output


def test_scheduled_failure_exits_nonzero(monkeypatch) -> None:
    monkeypatch.setattr(
        scheduled_module,
        "scheduled_handler",
        lambda **kwargs: {
            "statusCode": 500,
            "body": {"error": "Failed to scrape auctions", "message": "boom"},
        },
    )

    result = CliRunner().invoke(scheduled, [])

    assert result.exit_code == 1
    assert _first_json(result.output)["statusCode"] == 500


def test_scheduled_rejects_invalid_config(tmp_path: Path) -> None:
    config = tmp_path / "settings.json"
    config.write_text(json.dumps({"dom_timeout": 5}), encoding="utf-8")

    result = CliRunner().invoke(scheduled, ["--config", str(config)])

    assert result.exit_code == 1
    assert "dom_timeout" in result.output


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


def test_quiet_suppresses_info_logs(caplog, restore_root_logging) -> None:
    result = CliRunner().invoke(
        cli, ["--quiet", "page", LOTS_URL, "--html", str(FIXTURES / "rm_sothebys_live" / "lots.html")]
    )

    assert result.exit_code == 0
    assert "INFO" not in result.output
    assert [record for record in caplog.records if record.levelno < logging.WARNING] == []


def test_verbose_logs_each_record_once(restore_root_logging) -> None:
    result = CliRunner().invoke(
        cli, ["--verbose", "page", LOTS_URL, "--html", str(FIXTURES / "rm_sothebys_live" / "lots.html")]
    )

    assert result.exit_code == 0
    assert result.output.count("Extracted 3 lot(s)") == 1
    assert f"[url={LOTS_URL}] [url=" not in result.output


page_module = importlib.import_module("auctionlots.interfaces.cli.page")


def test_page_checks_the_host_before_opening_a_browser(monkeypatch) -> None:
    def no_browser(url, **kwargs):
        raise AssertionError("browser should not be opened for an unsupported host")

    monkeypatch.setattr(page_module, "open_browser_document", no_browser)

    result = CliRunner().invoke(page, ["https://www.christies.com/en/auction/lots"])

    assert result.exit_code == 1
    assert _first_json(result.output) == {"ok": False, "error": "Unsupported site."}


def test_page_reports_browser_failures_as_json(monkeypatch) -> None:
    playwright_api = pytest.importorskip("playwright.async_api")

    class FailingBrowser:
        def __init__(self, url, **kwargs):
            pass

        async def __aenter__(self):
            raise playwright_api.Error("net::ERR_NAME_NOT_RESOLVED at https://rmsothebys.com/\nCall log:")

        async def __aexit__(self, *exc_info):
            return False

    monkeypatch.setattr(page_module, "open_browser_document", FailingBrowser)

    result = CliRunner().invoke(page, [LOTS_URL])

    assert result.exit_code == 1
    payload = _first_json(result.output)
    assert payload["ok"] is False
    assert payload["error"] == f"Could not load {LOTS_URL}: net::ERR_NAME_NOT_RESOLVED at https://rmsothebys.com/"
