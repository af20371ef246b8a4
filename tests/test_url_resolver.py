"""Tests for URL resolution against a site origin."""

import pytest

from auctionlots.infrastructure.web.parsers import origin_of, resolve_url

ORIGIN = "https://rmsothebys.com"


def test_root_relative_path_is_joined():
    assert resolve_url("/en/auctions/x", ORIGIN) == "https://rmsothebys.com/en/auctions/x"


@pytest.mark.parametrize(
    "candidate",
    [
        "/en/auctions/x",
        "https://cdn.example.com/a.jpg",
        "//cdn.example.com/a.jpg",
        "images/a.jpg",
    ],
)
def test_resolve_is_idempotent(candidate):
    once = resolve_url(candidate, ORIGIN)
    assert resolve_url(once, ORIGIN) == once


def test_absolute_urls_are_unchanged():
    assert resolve_url("http://example.com/a", ORIGIN) == "http://example.com/a"
    assert resolve_url("HTTPS://Example.com/a", ORIGIN) == "HTTPS://Example.com/a"


def test_protocol_relative_takes_origin_scheme():
    assert resolve_url("//cdn.example.com/a.jpg", ORIGIN) == "https://cdn.example.com/a.jpg"
    assert resolve_url("//cdn.example.com/a.jpg", "http://localhost:8000") == "http://cdn.example.com/a.jpg"


def test_bare_relative_path_gets_separator():
    assert resolve_url("images/a.jpg", ORIGIN + "/") == "https://rmsothebys.com/images/a.jpg"


@pytest.mark.parametrize("candidate", ["", None])
def test_empty_input_stays_empty(candidate):
    assert resolve_url(candidate, ORIGIN) == ""


def test_unresolvable_input_returned_as_is():
    assert resolve_url("data:image/png;base64,AAAA", ORIGIN) == "data:image/png;base64,AAAA"
    assert resolve_url("/a.jpg", "") == "/a.jpg"


def test_origin_of():
    assert origin_of("https://rmsothebys.com/en/auctions/mo24/lots/?page=2") == ORIGIN
    assert origin_of("http://localhost:8000/x") == "http://localhost:8000"
    assert origin_of("not a url") == ""
    assert origin_of("") == ""
