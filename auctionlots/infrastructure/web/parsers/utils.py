"""Reusable parsing helpers for the site extractors.

This module centralizes HTML text and attribute extraction, lot number
heuristics, and lightweight structure checksums to detect markup drift at
runtime.
"""

from __future__ import annotations

import hashlib
import logging
import re

from bs4 import Tag

_WHITESPACE_RE = re.compile(r"\s+")
_LOT_PREFIX_RE = re.compile(r"\bLot\s+([0-9A-Za-z-]+)\b", re.IGNORECASE)
_LOT_SLUG_RE = re.compile(r"^[a-z]0*([0-9]+)-", re.IGNORECASE)


# HTML helpers


def clean_text(text: str | None) -> str:
    """Collapse runs of whitespace (including non-breaking spaces) and trim."""

    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text.replace("\u00a0", " ")).strip()


def extract_text(element, default: str = "", separator: str = " ") -> str:
    """Return flattened, whitespace-collapsed text from a BeautifulSoup element.

    Args:
        element: A BeautifulSoup Tag or NavigableString.
        default: Value returned when the element is falsy.
        separator: Separator passed to ``get_text``.
    """

    if element is None:
        return default
    return clean_text(element.get_text(separator, strip=True)) or default


def attr(element: Tag | None, name: str) -> str:
    """Return an attribute as a stripped string, or ``""`` when absent."""

    if element is None:
        return ""
    value = element.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


def first_non_empty(*values: str | None) -> str:
    """Return the first value that is a non-blank string, stripped."""

    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


# Lot number heuristics


def lot_number_from_text(text: str | None) -> str | None:
    """Extract ``N`` from a "Lot N" label such as ``"Lot 112 | Sold"``."""

    if not text:
        return None
    match = _LOT_PREFIX_RE.search(text)
    return match.group(1) if match else None


def lot_number_from_url(url: str | None) -> str | None:
    """Decode the lot number embedded in an RM Sotheby's lot slug.

    Lot detail URLs end in a slug such as ``r0050-1967-ferrari-275-gtb4``;
    the leading letter and zero padding are dropped (``"50"``).
    """

    if not url:
        return None
    path = url.split("?")[0].split("#")[0]
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return None
    match = _LOT_SLUG_RE.match(segments[-1])
    return match.group(1) if match else None


# Diagnostics helpers


def structure_checksum(html_fragment: str) -> str:
    """Return a stable checksum for a markup fragment."""

    normalized = _WHITESPACE_RE.sub(" ", html_fragment or "").strip()
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def log_structure_signature(
    logger: logging.Logger, section: str, html_fragment: str
) -> None:
    """Log a checksum for a specific parser section to detect layout drift."""

    checksum = structure_checksum(html_fragment)
    logger.debug(f"structure-signature section={section} checksum={checksum[:16]}")


def record_parsing_error(
    logger: logging.Logger, section: str, html_fragment: str, error: Exception
) -> None:
    """Log a parsing failure with a checksum and a clipped HTML snippet."""

    checksum = structure_checksum(html_fragment)
    snippet = (html_fragment or "").strip()
    if len(snippet) > 500:
        snippet = snippet[:500] + "…"
    logger.error(
        "parsing-error",
        extra={
            "section": section,
            "checksum": checksum,
            "snippet": snippet,
            "error": str(error),
        },
    )
