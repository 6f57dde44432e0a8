"""Helpers shared by the CLI commands."""

from .app import CliState, cli_errors, get_app
from .db_url import sanitize_url
from .hyperlinks import hyperlink
from .messages import error, info, success, warn

__all__ = [
    "CliState",
    "cli_errors",
    "error",
    "get_app",
    "hyperlink",
    "info",
    "sanitize_url",
    "success",
    "warn",
]
