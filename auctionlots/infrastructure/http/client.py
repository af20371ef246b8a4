"""HTTP fetch client for auction-house pages.

Auction sites routinely reject non-browser clients, so every request carries
a desktop browser identity. Redirects are followed by hand rather than by
``requests`` so the chain depth is explicit and capped. The client makes a
single attempt per call; retry policy belongs to the caller.
"""

from __future__ import annotations

from urllib.parse import urljoin

import requests
from requests import Response, Session

from auctionlots.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


class NetworkError(Exception):
    """Raised when a page cannot be fetched or returns an unusable status."""

    def __init__(self, message: str, *, url: str, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class FetchClient:
    """Fetch page bodies with browser headers and bounded redirect following."""

    def __init__(
        self,
        *,
        max_redirects: int = 5,
        timeout_seconds: float | None = None,
        session: Session | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.max_redirects = max(0, max_redirects)
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.headers = {**BROWSER_HEADERS, **(headers or {})}

    def fetch(self, url: str) -> str:
        """GET ``url`` and return the decoded body.

        Raises:
            NetworkError: On connection failure, a non-2xx final status, or a
                redirect chain longer than ``max_redirects``.
        """
        return self._fetch(url, depth=0)

    def _fetch(self, url: str, *, depth: int) -> str:
        try:
            response = self.session.get(
                url,
                headers=self.headers,
                allow_redirects=False,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.warning(f"Request to {url} failed: {exc}")
            raise NetworkError(f"Request to {url} failed: {exc}", url=url) from exc

        location = response.headers.get("Location")
        if response.status_code in REDIRECT_STATUSES and location:
            if depth >= self.max_redirects:
                raise NetworkError(
                    f"Too many redirects (>{self.max_redirects}) fetching {url}",
                    url=url,
                    status=response.status_code,
                )
            target = urljoin(url, location)
            logger.debug(f"Following {response.status_code} redirect {url} -> {target}")
            return self._fetch(target, depth=depth + 1)

        self._raise_for_status(response, url)
        return self._decode(response)

    def _raise_for_status(self, response: Response, url: str) -> None:
        if 200 <= response.status_code < 300:
            return
        logger.warning(f"HTTP {response.status_code} for {url}")
        raise NetworkError(
            f"HTTP {response.status_code} for {url}",
            url=url,
            status=response.status_code,
        )

    def _decode(self, response: Response) -> str:
        content_type = response.headers.get("Content-Type", "").lower()
        if "charset" not in content_type:
            response.encoding = "utf-8"
        elif response.encoding is None:
            response.encoding = requests.utils.get_encoding_from_headers(response.headers)
        return response.text

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "FetchClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


__all__ = ["BROWSER_HEADERS", "FetchClient", "NetworkError"]
