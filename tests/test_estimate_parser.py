"""Tests for the estimate/currency parser."""

import pytest

from auctionlots.infrastructure.web.parsers import EstimateRange, looks_like_estimate, parse_estimate


@pytest.mark.parametrize(
    "text,expected",
    [
        ("$12,000 - $15,000", EstimateRange(12000, 15000, "USD")),
        ("£45,000-£50,000 GBP", EstimateRange(45000, 50000, "GBP")),
        ("€1,200,000 – €1,400,000", EstimateRange(1200000, 1400000, "EUR")),
        ("USD 100,000 - 120,000 CHF", EstimateRange(100000, 120000, "CHF")),
        ("Estimate 80,000 - 95,000 eur", EstimateRange(80000, 95000, "EUR")),
        ("$1,500.50 - $2,000.75", EstimateRange(1500.5, 2000.75, "USD")),
        ("12,000 - 15,000", EstimateRange(12000, 15000, None)),
    ],
)
def test_parse_estimate_ranges(text, expected):
    assert parse_estimate(text) == expected


def test_trailing_code_beats_symbol():
    result = parse_estimate("$45,000 - $50,000 CAD")
    assert result.currency == "CAD"
    assert (result.low, result.high) == (45000, 50000)


def test_whole_numbers_are_ints():
    result = parse_estimate("$12,000 - $15,000")
    assert isinstance(result.low, int)
    assert isinstance(result.high, int)


def test_non_breaking_spaces_are_normalized():
    result = parse_estimate("\u00a0\u00a345,000\u00a0-\u00a0\u00a350,000\u00a0")
    assert result == EstimateRange(45000, 50000, "GBP")


def test_lot_label_is_not_a_price():
    assert parse_estimate("Lot 42") == EstimateRange()


@pytest.mark.parametrize("text", ["", "   ", None, "Estimate Upon Request", "Without Reserve"])
def test_unparseable_text_yields_nothing(text):
    result = parse_estimate(text)
    assert result == EstimateRange()
    assert result.has_range is False


def test_standalone_code_gives_currency_only():
    result = parse_estimate("Estimate on request (GBP)")
    assert result == EstimateRange(currency="GBP")


def test_single_amount_keeps_code_only():
    result = parse_estimate("Sold for 1,100,000 USD")
    assert result.low is None and result.high is None
    assert result.currency == "USD"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Lot 12 | $100,000 - $120,000", True),
        ("USD 5,000 - 7,000", True),
        ("Sold | $1,100,000", False),
        ("Lot 12 - Ferrari", False),
        ("", False),
        (None, False),
    ],
)
def test_looks_like_estimate(text, expected):
    assert looks_like_estimate(text) is expected
