"""Site state schema.

Defines the tables backing the SQLAlchemy adapters:

| Table        | Purpose                                            |
|--------------|----------------------------------------------------|
| `options`    | persistent site options (name → JSON value)        |
| `transients` | expiring entries (name → JSON value, expiry time)  |
| `sync_queue` | FIFO outbox of actions waiting to be sent          |
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Float,
    Identity,
    Index,
    String,
    Table,
    true,
)

from sitesync.adapters.db.metadata import metadata
from sitesync.adapters.db.sa_types import BIGINT_PK, PORTABLE_JSON, UTCDateTime

__all__ = ["options", "transients", "sync_queue"]

NAME_LENGTH = 191

options = Table(
    "options",
    metadata,
    Column("name", String(NAME_LENGTH), primary_key=True, comment="Option name."),
    Column("value", PORTABLE_JSON, nullable=True, comment="Option value (JSON)."),
    Column(
        "autoload",
        Boolean,
        nullable=False,
        server_default=true(),
        comment="False for raw (large, non-autoloaded) options.",
    ),
    comment="Persistent site options.",
)

transients = Table(
    "transients",
    metadata,
    Column("name", String(NAME_LENGTH), primary_key=True, comment="Transient name."),
    Column("value", PORTABLE_JSON, nullable=True, comment="Transient value (JSON)."),
    Column(
        "expires_at",
        Float,
        nullable=True,
        comment="POSIX expiry time; NULL never expires.",
    ),
    Index("ix_transients_expires_at", "expires_at"),
    comment="Expiring key-value entries.",
)

sync_queue = Table(
    "sync_queue",
    metadata,
    Column(
        "seq",
        BIGINT_PK,
        Identity(start=1),
        primary_key=True,
        nullable=False,
        comment="Monotonic enqueue order.",
    ),
    Column(
        "item_id",
        String(26),
        nullable=False,
        unique=True,
        comment="ULID (26 chars). Uniquely identifies this item.",
    ),
    Column("action", String(120), nullable=False, comment="Hook action name."),
    Column("args", PORTABLE_JSON, nullable=False, comment="Positional hook args."),
    Column(
        "enqueued_at",
        UTCDateTime(),
        nullable=False,
        comment="UTC time the item was enqueued.",
    ),
    CheckConstraint("length(item_id) = 26", name="item_id_26_char"),
    comment="FIFO outbox of sync actions.",
)
