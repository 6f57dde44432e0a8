"""URL scheme normalization for site URL callables.

Some hosts briefly report a site URL with the wrong scheme (e.g. while a TLS
terminating proxy is misconfigured). To avoid flapping between ``http`` and
``https``, the scheme observed on each read is appended to a short history;
if ``https`` appears anywhere in that history the URL is reported as https.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

#: Number of scheme observations kept per callable.
HTTPS_CHECK_HISTORY = 5

_SCHEME_RE = re.compile(r"^\w+://")


def set_url_scheme(url: str, scheme: str) -> str:
    """Replace (or add) the scheme of ``url``.

    Protocol-relative URLs (``//example.com``) and scheme-less URLs receive the
    new scheme; anything else has its existing scheme swapped.
    """
    url = url.strip()
    if url.startswith("//"):
        url = "http:" + url
    if not _SCHEME_RE.match(url):
        return f"{scheme}://{url}"
    return _SCHEME_RE.sub(f"{scheme}://", url, count=1)


def url_scheme(url: str) -> str:
    """Return the scheme of ``url`` (empty string if it has none)."""
    try:
        return urlsplit(url.strip()).scheme
    except ValueError:
        return ""


def normalize_url_protocol(url: str, history: list[str]) -> tuple[str, list[str]]:
    """Record the scheme of ``url`` and return the normalized URL.

    Args:
        url: The URL as currently configured.
        history: Previously observed schemes, oldest first.

    Returns:
        A ``(normalized_url, new_history)`` tuple. ``new_history`` holds at most
        `HTTPS_CHECK_HISTORY` entries.
    """
    new_history = [*history, url_scheme(url)][-HTTPS_CHECK_HISTORY:]
    forced_scheme = "https" if "https" in new_history else "http"
    return set_url_scheme(url, forced_scheme), new_history
