"""Status lines for the SITESYNC CLI.

Messages go to stderr so stdout stays machine-readable (``queue send`` writes
JSON lines there). Glyphs fall back to ASCII when stderr cannot encode them.
"""

import click

_GLYPHS = {
    "warn": ("⚠️", "[!]"),
    "success": ("✅", "[OK]"),
    "error": ("❌", "[X]"),
    "info": ("ℹ️", "[i]"),
}


def _supports_character(character: str) -> bool:
    """Return True if stderr can encode ``character``."""
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except (UnicodeEncodeError, LookupError):
        return False
    return True


def glyph(kind: str) -> str:
    """Return the glyph for ``kind`` (warn, success, error or info)."""
    emoji, fallback = _GLYPHS[kind]
    return emoji if _supports_character(emoji) else fallback


def warn(msg: str) -> None:
    """Yellow warning line on stderr."""
    click.secho(f"{glyph('warn')}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Green success line on stderr."""
    click.secho(f"{glyph('success')}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Red error line on stderr."""
    click.secho(f"{glyph('error')}  {msg}", fg="red", bold=True, err=True)


def info(msg: str) -> None:
    """Plain informational line on stderr."""
    click.secho(f"{glyph('info')}  {msg}", err=True)
