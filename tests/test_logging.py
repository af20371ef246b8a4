"""Tests for the logging facade."""

import logging

import pytest

from auctionlots.infrastructure.observability.logging import (
    ContextualFormatter,
    configure_logging,
    get_logger,
    log_context,
    log_exception,
)


def _record(message: str) -> logging.LogRecord:
    return logging.LogRecord("auctionlots.test", logging.INFO, __file__, 1, message, None, None)


def test_formatter_appends_context_fields():
    formatter = ContextualFormatter("%(message)s")
    with log_context(source="bonhams", url="https://www.bonhams.com/"):
        text = formatter.format(_record("fetched"))
    assert text.startswith("fetched")
    assert "source=bonhams" in text
    assert "url=https://www.bonhams.com/" in text


def test_context_is_restored_after_block():
    formatter = ContextualFormatter("%(message)s")
    with log_context(source="bonhams"):
        with log_context(url="https://x.test/"):
            pass
        inner = formatter.format(_record("a"))
    outer = formatter.format(_record("b"))
    assert "source=bonhams" in inner
    assert "url=" not in inner
    assert outer == "b"


def test_get_logger_namespaces_under_package():
    assert get_logger("auctionlots.services").name == "auctionlots.services"


def test_log_exception_includes_message(caplog):
    logger = logging.getLogger("auctionlots.test")
    with caplog.at_level(logging.ERROR, logger="auctionlots.test"):
        try:
            raise RuntimeError("HTTP 503")
        except RuntimeError as exc:
            log_exception(logger, "Bonhams scrape failed", exc, source="bonhams")
    assert "Bonhams scrape failed: HTTP 503" in caplog.text


@pytest.fixture
def root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


def test_formatter_leaves_the_record_untouched():
    formatter = ContextualFormatter("%(message)s")
    record = _record("fetched %s")
    record.args = ("index",)
    with log_context(source="bonhams"):
        first = formatter.format(record)
        second = formatter.format(record)
    assert first == second == "fetched index [source=bonhams]"
    assert record.msg == "fetched %s"


def test_configure_logging_replaces_its_own_handler(root_logging):
    before = len(root_logging.handlers)
    configure_logging(logging.INFO)
    configure_logging(logging.WARNING)
    assert len(root_logging.handlers) == before + 1
    assert root_logging.level == logging.WARNING


def test_module_loggers_have_no_handlers_of_their_own():
    logger = get_logger("auctionlots.services.scrape.scheduled")
    assert logger.handlers == []
    assert logger.propagate


def test_records_are_written_once(root_logging, capsys):
    configure_logging(logging.INFO)
    with log_context(url="https://x.test/"):
        get_logger("auctionlots.test").info("Extracted 3 lot(s)")
    err = capsys.readouterr().err
    assert err.count("Extracted 3 lot(s)") == 1
    assert err.count("[url=https://x.test/]") == 1
