"""Engine factory.

Every Engine in SITESYNC comes from `make_engine` so that connections are
configured the same way. SQLite connections get a fixed set of PRAGMAs
(`SQLITE_PRAGMAS`); a busy timeout lets a CLI run and a background sender
share one database file. Other backends are used as configured.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

SQLITE_PRAGMAS = (
    "PRAGMA foreign_keys=ON",
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA temp_store=MEMORY",
    "PRAGMA busy_timeout=5000",
)


def is_sqlite(url: str | URL) -> bool:
    """Return True if ``url`` points at a SQLite database."""
    return make_url(str(url)).get_backend_name() == "sqlite"


def _apply_sqlite_pragmas(dbapi_conn: Any, _conn_record: Any) -> None:
    cursor = dbapi_conn.cursor()
    try:
        for pragma in SQLITE_PRAGMAS:
            cursor.execute(pragma)
    finally:
        cursor.close()


def make_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Create an Engine for ``url``, with `SQLITE_PRAGMAS` applied on SQLite."""
    engine = create_engine(url, echo=echo)
    if is_sqlite(url):
        event.listen(engine, "connect", _apply_sqlite_pragmas)
    return engine
