"""Parse free-text price estimates into a numeric range and currency.

Auction houses publish estimates in many shapes: ``"$12,000 - $15,000"``,
``"£45,000-£50,000 GBP"``, ``"Estimate | USD 100,000 – 120,000"``. A range
needs two numbers joined by a dash, which keeps lot labels such as
``"Lot 42"`` from being read as a price.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

CURRENCY_CODES = ("USD", "EUR", "GBP", "CHF", "CAD", "AUD")

CURRENCY_SYMBOLS = {
    "$": "USD",
    "€": "EUR",
    "£": "GBP",
}

_NUMBER = r"\d[\d,]*(?:\.\d+)?"
_CODES = "|".join(CURRENCY_CODES)

_RANGE_RE = re.compile(
    rf"([$€£])?\s*({_NUMBER})\s*[-–]\s*(?:[$€£])?\s*({_NUMBER})\s*({_CODES})?\b",
    re.IGNORECASE,
)
_CODE_RE = re.compile(rf"\b({_CODES})\b", re.IGNORECASE)
_SYMBOL_RE = re.compile(r"[$€£]")
_DASH_RE = re.compile(r"[-–]")


@dataclass(frozen=True)
class EstimateRange:
    """Result of parsing an estimate string; every field may be absent."""

    low: int | float | None = None
    high: int | float | None = None
    currency: str | None = None

    @property
    def has_range(self) -> bool:
        return self.low is not None and self.high is not None


def _to_number(token: str) -> int | float | None:
    try:
        value = float(token.replace(",", ""))
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return int(value) if value.is_integer() else value


def parse_estimate(text: str | None) -> EstimateRange:
    """Parse an estimate string.

    Currency precedence for a matched range is the trailing ISO code, then the
    leading symbol. Without a range, a standalone ISO code still yields the
    currency alone.
    """

    cleaned = (text or "").replace("\u00a0", " ").strip()
    if not cleaned:
        return EstimateRange()

    match = _RANGE_RE.search(cleaned)
    if match:
        symbol, low_token, high_token, code = match.groups()
        low = _to_number(low_token)
        high = _to_number(high_token)
        if low is not None and high is not None:
            currency = code.upper() if code else CURRENCY_SYMBOLS.get(symbol or "")
            return EstimateRange(low=low, high=high, currency=currency)

    code_match = _CODE_RE.search(cleaned)
    if code_match:
        return EstimateRange(currency=code_match.group(1).upper())
    return EstimateRange()


def looks_like_estimate(text: str | None) -> bool:
    """True when the text names a currency (symbol or code) and has a dash."""

    if not text:
        return False
    has_currency = bool(_SYMBOL_RE.search(text) or _CODE_RE.search(text))
    return has_currency and bool(_DASH_RE.search(text))


__all__ = [
    "CURRENCY_CODES",
    "CURRENCY_SYMBOLS",
    "EstimateRange",
    "looks_like_estimate",
    "parse_estimate",
]
