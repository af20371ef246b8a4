"""Logging for auctionlots.

Modules obtain loggers with :func:`get_logger` and never attach handlers
themselves. Output is set up once by the entry point (CLI group, scheduled
job) through :func:`configure_logging`, which owns a single stderr handler on
the root logger. Until then records follow the standard library defaults.

Per-source and per-page fields are attached with :func:`log_context` and
rendered by :class:`ContextualFormatter` as a ``[key=value ...]`` suffix.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Mapping

_log_context: ContextVar[Mapping[str, Any]] = ContextVar("auctionlots_log_context", default={})

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

NOISY_LOGGERS = ("urllib3", "requests", "asyncio", "playwright")


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Add ``fields`` to every record logged inside the block.

    Usage::

        with log_context(source="bonhams", url=index_url):
            logger.info("Fetching index")

    Nested blocks merge their fields; the outer set is restored on exit.
    The scheduled orchestrator copies the context into each source thread,
    so per-source fields follow each branch.
    """
    token = _log_context.set({**_log_context.get(), **fields})
    try:
        yield
    finally:
        _log_context.reset(token)


class ContextualFormatter(logging.Formatter):
    """Formatter that renders the active :func:`log_context` fields."""

    def format(self, record: logging.LogRecord) -> str:
        fields = _log_context.get()
        if not fields:
            return super().format(record)
        suffix = " ".join(f"{key}={value}" for key, value in fields.items())
        local = logging.makeLogRecord(record.__dict__)
        local.msg = f"{record.getMessage()} [{suffix}]"
        local.args = None
        return super().format(local)


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stderr`` is when the record is emitted."""

    @property
    def stream(self):  # type: ignore[override]
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


_handler: logging.Handler | None = None


def configure_logging(
    level: int = logging.INFO,
    third_party_level: int = logging.WARNING,
) -> None:
    """Route application logs to stderr at ``level``.

    Safe to call more than once: the handler installed by an earlier call is
    replaced, and handlers added by anything else (test capture, a hosting
    scheduler) are left alone.

    Args:
        level: Threshold for auctionlots and the root logger.
        third_party_level: Threshold for chatty libraries such as urllib3.
    """
    global _handler
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    _handler = _StderrHandler()
    _handler.setFormatter(ContextualFormatter(LOG_FORMAT))
    root.addHandler(_handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, third_party_level))


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``; configuration is left to the entry point."""
    return logging.getLogger(name)


def log_exception(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """Log ``exc`` with its traceback, adding ``context`` fields to the record."""
    with log_context(**context):
        logger.error(f"{message}: {exc}", exc_info=exc)
