"""Wait for a live page to finish rendering its lot listing.

Listing pages render lot cards client-side, so the DOM is often empty when a
scrape is requested. :class:`DomReadinessWaiter` races two triggers under a
single deadline: DOM mutation notifications and a fixed polling interval.
Whichever sees a ready document first wins. Both triggers are torn down as
soon as the waiter reaches a terminal state.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Callable

from bs4 import BeautifulSoup

from auctionlots.infrastructure.observability.logging import get_logger

from .dom import LiveDocument

logger = get_logger(__name__)

ReadyCheck = Callable[[BeautifulSoup], bool]

DEFAULT_TIMEOUT_MS = 15000
DEFAULT_POLL_INTERVAL_MS = 250


class DomTimeoutError(Exception):
    """Raised when the page does not become ready within the timeout."""


class ReadinessState(str, Enum):
    WAITING = "waiting"
    READY = "ready"
    TIMED_OUT = "timed_out"


class DomReadinessWaiter:
    """One-shot waiter: ``WAITING -> READY`` or ``WAITING -> TIMED_OUT``."""

    def __init__(
        self,
        document: LiveDocument,
        is_ready: ReadyCheck,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    ) -> None:
        self._document = document
        self._is_ready = is_ready
        self.timeout_ms = timeout_ms
        self.poll_interval_ms = poll_interval_ms
        self.state = ReadinessState.WAITING

    async def wait(self) -> BeautifulSoup:
        """Block until the document is ready and return the ready snapshot.

        Raises:
            DomTimeoutError: If the timeout elapses first.
            RuntimeError: If this waiter already reached a terminal state.
        """
        if self.state is not ReadinessState.WAITING:
            raise RuntimeError(f"Readiness waiter already finished ({self.state.value})")

        snapshot = await self._document.snapshot()
        if self._is_ready(snapshot):
            self.state = ReadinessState.READY
            return snapshot

        mutated = asyncio.Event()
        on_mutation = mutated.set
        await self._document.observe(on_mutation)
        watcher = asyncio.create_task(self._watch_mutations(mutated))
        poller = asyncio.create_task(self._poll())
        try:
            done, _ = await asyncio.wait(
                {watcher, poller},
                timeout=self.timeout_ms / 1000,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for task in (watcher, poller):
                task.cancel()
            await asyncio.gather(watcher, poller, return_exceptions=True)
            await self._document.disconnect(on_mutation)

        if not done:
            self.state = ReadinessState.TIMED_OUT
            logger.warning(f"No lots rendered on {self._document.url} after {self.timeout_ms} ms")
            raise DomTimeoutError("Timed out waiting for lots to load.")

        snapshot = done.pop().result()
        self.state = ReadinessState.READY
        return snapshot

    async def _watch_mutations(self, mutated: asyncio.Event) -> BeautifulSoup:
        while True:
            await mutated.wait()
            mutated.clear()
            snapshot = await self._document.snapshot()
            if self._is_ready(snapshot):
                return snapshot

    async def _poll(self) -> BeautifulSoup:
        while True:
            await asyncio.sleep(self.poll_interval_ms / 1000)
            snapshot = await self._document.snapshot()
            if self._is_ready(snapshot):
                return snapshot


__all__ = [
    "DEFAULT_POLL_INTERVAL_MS",
    "DEFAULT_TIMEOUT_MS",
    "DomReadinessWaiter",
    "DomTimeoutError",
    "ReadinessState",
    "ReadyCheck",
]
