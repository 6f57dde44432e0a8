"""Unit tests for OSC-8 hyperlink rendering."""

import io
import sys

import pytest

from sitesync.entrypoints.cli.helpers import hyperlinks
from sitesync.entrypoints.cli.helpers.hyperlinks import hyperlink, supports_osc8

URL = "https://alembic.sqlalchemy.org/"


class TTY(io.StringIO):
    def isatty(self) -> bool:
        return True


@pytest.fixture
def plain_terminal(monkeypatch):
    for var in ("TERM_PROGRAM", "WT_SESSION", "VTE_VERSION"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("TERM", "xterm")


def test_pipes_never_support_links(monkeypatch):
    monkeypatch.setenv("TERM_PROGRAM", "vscode")
    assert not supports_osc8(io.StringIO())


def test_unknown_terminal(plain_terminal):
    assert not supports_osc8(TTY())


@pytest.mark.parametrize(
    "var,value",
    [("TERM_PROGRAM", "WezTerm"), ("WT_SESSION", "1"), ("VTE_VERSION", "7600"), ("TERM", "alacritty")],
)
def test_known_terminals(plain_terminal, monkeypatch, var, value):
    monkeypatch.setenv(var, value)
    assert supports_osc8(TTY())


def test_plain_text_fallback(monkeypatch):
    monkeypatch.setattr(hyperlinks, "supports_osc8", lambda stream=None: False)
    assert hyperlink(URL) == URL
    assert hyperlink(URL, "Alembic") == f"Alembic ({URL})"


def test_osc8_escape(monkeypatch):
    monkeypatch.setattr(hyperlinks, "supports_osc8", lambda stream=None: True)
    assert hyperlink(URL, "Alembic") == f"\x1b]8;;{URL}\x07Alembic\x1b]8;;\x07"


def test_defaults_to_stdout(plain_terminal, monkeypatch):
    monkeypatch.setattr(sys, "stdout", io.StringIO())
    assert not supports_osc8()
