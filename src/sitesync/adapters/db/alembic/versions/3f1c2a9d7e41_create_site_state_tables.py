"""Create options, transients and sync_queue tables

Revision ID: 3f1c2a9d7e41
Revises:
Create Date: 2026-10-19

"""

# pylint: disable=invalid-name

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from sitesync.adapters.db.sa_types import BIGINT_PK, PORTABLE_JSON, UTCDateTime

# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7e41"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "options",
        sa.Column(
            "name", sa.String(length=191), nullable=False, comment="Option name."
        ),
        sa.Column(
            "value", PORTABLE_JSON, nullable=True, comment="Option value (JSON)."
        ),
        sa.Column(
            "autoload",
            sa.Boolean(),
            server_default=sa.true(),
            nullable=False,
            comment="False for raw (large, non-autoloaded) options.",
        ),
        sa.PrimaryKeyConstraint("name", name=op.f("pk_options")),
        comment="Persistent site options.",
    )

    op.create_table(
        "transients",
        sa.Column(
            "name", sa.String(length=191), nullable=False, comment="Transient name."
        ),
        sa.Column(
            "value", PORTABLE_JSON, nullable=True, comment="Transient value (JSON)."
        ),
        sa.Column(
            "expires_at",
            sa.Float(),
            nullable=True,
            comment="POSIX expiry time; NULL never expires.",
        ),
        sa.PrimaryKeyConstraint("name", name=op.f("pk_transients")),
        comment="Expiring key-value entries.",
    )
    op.create_index(
        op.f("ix_transients_expires_at"), "transients", ["expires_at"], unique=False
    )

    op.create_table(
        "sync_queue",
        sa.Column(
            "seq",
            BIGINT_PK,
            sa.Identity(always=False, start=1),
            nullable=False,
            comment="Monotonic enqueue order.",
        ),
        sa.Column(
            "item_id",
            sa.String(length=26),
            nullable=False,
            comment="ULID (26 chars). Uniquely identifies this item.",
        ),
        sa.Column(
            "action", sa.String(length=120), nullable=False, comment="Hook action name."
        ),
        sa.Column(
            "args", PORTABLE_JSON, nullable=False, comment="Positional hook args."
        ),
        sa.Column(
            "enqueued_at",
            UTCDateTime(),
            nullable=False,
            comment="UTC time the item was enqueued.",
        ),
        sa.CheckConstraint(
            "length(item_id) = 26", name=op.f("ck_sync_queue_item_id_26_char")
        ),
        sa.PrimaryKeyConstraint("seq", name=op.f("pk_sync_queue")),
        sa.UniqueConstraint("item_id", name=op.f("uq_sync_queue_item_id")),
        comment="FIFO outbox of sync actions.",
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("sync_queue")
    op.drop_index(op.f("ix_transients_expires_at"), table_name="transients")
    op.drop_table("transients")
    op.drop_table("options")
