"""Resolve lot and image URLs against a site origin."""

from __future__ import annotations

from urllib.parse import urlsplit

_ABSOLUTE_PREFIXES = ("http://", "https://")


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` for a page URL, or ``""`` if it has none."""

    try:
        parts = urlsplit(url or "")
    except ValueError:
        return ""
    if not parts.scheme or not parts.netloc:
        return ""
    return f"{parts.scheme}://{parts.netloc}"


def resolve_url(candidate: str | None, origin: str) -> str:
    """Make ``candidate`` absolute against ``origin``.

    Absolute ``http``/``https`` URLs come back unchanged, so resolving twice
    gives the same result as resolving once. Anything that cannot be resolved
    (empty input, no usable origin, data URIs) is returned as-is.
    """

    if not candidate:
        return candidate or ""
    value = candidate.strip()
    if value.lower().startswith(_ABSOLUTE_PREFIXES):
        return value
    base = (origin or "").rstrip("/")
    if not base or ":" in value.split("/", 1)[0]:
        return value
    if value.startswith("//"):
        scheme = base.split("://", 1)[0] if "://" in base else "https"
        return f"{scheme}:{value}"
    if value.startswith("/"):
        return base + value
    return f"{base}/{value}"


__all__ = ["origin_of", "resolve_url"]
