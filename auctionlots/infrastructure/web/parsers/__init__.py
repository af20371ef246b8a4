"""Parsing helpers shared by the site extractors.

This package contains the estimate/currency parser, the URL resolver and
the HTML text helpers used across auction houses.
"""

from .estimate import (
    CURRENCY_CODES,
    CURRENCY_SYMBOLS,
    EstimateRange,
    looks_like_estimate,
    parse_estimate,
)
from .urls import origin_of, resolve_url
from .utils import (
    attr,
    clean_text,
    extract_text,
    first_non_empty,
    log_structure_signature,
    lot_number_from_text,
    lot_number_from_url,
    record_parsing_error,
    structure_checksum,
)

__all__ = [
    "CURRENCY_CODES",
    "CURRENCY_SYMBOLS",
    "EstimateRange",
    "attr",
    "clean_text",
    "extract_text",
    "first_non_empty",
    "log_structure_signature",
    "looks_like_estimate",
    "lot_number_from_text",
    "lot_number_from_url",
    "origin_of",
    "parse_estimate",
    "record_parsing_error",
    "resolve_url",
    "structure_checksum",
]
