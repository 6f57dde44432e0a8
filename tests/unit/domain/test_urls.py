"""Unit tests for URL scheme normalization."""

import pytest

from sitesync.domain.urls import (
    HTTPS_CHECK_HISTORY,
    normalize_url_protocol,
    set_url_scheme,
    url_scheme,
)


@pytest.mark.parametrize(
    "url,scheme,expected",
    [
        ("http://example.com", "https", "https://example.com"),
        ("https://example.com/blog", "http", "http://example.com/blog"),
        ("//example.com", "https", "https://example.com"),
        ("example.com", "https", "https://example.com"),
        ("  http://example.com  ", "https", "https://example.com"),
    ],
)
def test_set_url_scheme(url, scheme, expected):
    assert set_url_scheme(url, scheme) == expected


@pytest.mark.parametrize(
    "url,expected",
    [("https://example.com", "https"), ("http://example.com", "http"), ("example.com", "")],
)
def test_url_scheme(url, expected):
    assert url_scheme(url) == expected


def test_plain_http_stays_http():
    url, history = normalize_url_protocol("http://example.com", [])
    assert url == "http://example.com"
    assert history == ["http"]


def test_recent_https_wins_over_a_stray_http_read():
    url, history = normalize_url_protocol("http://example.com", ["https", "https"])
    assert url == "https://example.com"
    assert history == ["https", "https", "http"]


def test_history_is_bounded():
    history = ["https"] + ["http"] * HTTPS_CHECK_HISTORY
    url, new_history = normalize_url_protocol("http://example.com", history)
    assert len(new_history) == HTTPS_CHECK_HISTORY
    # the https observation has aged out
    assert url == "http://example.com"


def test_input_history_is_not_mutated():
    history = ["http"]
    normalize_url_protocol("https://example.com", history)
    assert history == ["http"]
