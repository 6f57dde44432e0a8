"""OSC-8 hyperlink helpers for the SITESYNC CLI."""

import os
import sys
from typing import TextIO

_OSC8_TERMINALS = {"apple_terminal", "vscode", "iterm.app", "wezterm", "kitty"}


def supports_osc8(stream: TextIO | None = None) -> bool:
    """Guess whether ``stream`` (default stdout) renders OSC-8 hyperlinks.

    Piped or redirected streams never do. Otherwise a short allowlist of
    terminal identifiers is consulted.
    """
    stream = stream or sys.stdout
    if not getattr(stream, "isatty", lambda: False)():
        return False
    terminal_program = (os.getenv("TERM_PROGRAM") or "").lower()
    return bool(
        terminal_program in _OSC8_TERMINALS
        or os.getenv("WT_SESSION")  # Windows Terminal
        or os.getenv("VTE_VERSION")  # GNOME Terminal, Tilix
        or os.getenv("TERM", "").startswith(("alacritty", "konsole"))
    )


def hyperlink(url: str, label: str | None = None) -> str:
    """Render ``url`` as a clickable link, or as plain text when unsupported."""
    if not supports_osc8():
        return url if label is None else f"{label} ({url})"
    return f"\x1b]8;;{url}\x07{label or url}\x1b]8;;\x07"
