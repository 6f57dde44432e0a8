"""Database backends the store adapters know how to talk to."""

from __future__ import annotations

from enum import Enum


class UnsupportedDialect(Exception):
    """The database backend is not one SITESYNC supports."""


class DialectName(str, Enum):
    """Supported backends, by SQLAlchemy dialect name."""

    POSTGRES = "postgresql"
    SQLITE = "sqlite"

    @classmethod
    def from_string(cls, dialect_str: str | None) -> DialectName:
        """Map a dialect or ``dialect+driver`` name (or alias) to a member.

        Raises:
            UnsupportedDialect: For anything other than PostgreSQL or SQLite.
        """
        backend = (dialect_str or "").strip().lower().partition("+")[0]
        if backend in _ALIASES:
            return _ALIASES[backend]
        raise UnsupportedDialect(f"Unsupported dialect: {dialect_str!r}")


_ALIASES = {
    "postgresql": DialectName.POSTGRES,
    "postgres": DialectName.POSTGRES,
    "pg": DialectName.POSTGRES,
    "sqlite": DialectName.SQLITE,
}
