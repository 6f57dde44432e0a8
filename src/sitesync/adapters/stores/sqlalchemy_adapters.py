"""SQLAlchemy-backed store adapters for SITESYNC.

Persist options, transients and the sync queue to the tables defined in
`sitesync.adapters.stores.schema`. Each adapter works on a caller-provided
Connection so that the unit of work owns the transaction.

Driver errors (`DBAPIError` and subclasses) are mapped to
`StoreUnavailableError`.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import Table, delete, func, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import DBAPIError

from sitesync.adapters.clock import SystemClock
from sitesync.adapters.db.dialects import DialectName
from sitesync.adapters.id_generators import ULIDGenerator
from sitesync.interfaces.clock import Clock
from sitesync.interfaces.errors import StoreUnavailableError, validate_name
from sitesync.interfaces.id_generator import IdGenerator
from sitesync.interfaces.options import OptionStore
from sitesync.interfaces.sync_queue import InvalidQueueItemError, QueueItem, SyncQueue
from sitesync.interfaces.transients import TransientStore

from .json_values import to_json_value
from .schema import options, sync_queue, transients

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Result
    from sqlalchemy.sql import Executable
    from sqlalchemy.sql.dml import Insert

_MISSING = object()


class _SqlAlchemyAdapter:
    """Shared connection handling for the SQLAlchemy adapters."""

    def __init__(self, connection: Connection):
        self.connection = connection
        self.dialect = connection.engine.dialect.name

    def _execute(self, stmt: Executable) -> Result:
        try:
            return self.connection.execute(stmt)
        except DBAPIError as e:
            raise StoreUnavailableError(str(e)) from e

    def _build_upsert(
        self, table: Table, values: dict[str, Any], update_columns: Iterable[str]
    ) -> Insert:
        # raises UnsupportedDialect for anything but PostgreSQL and SQLite
        dialect_name = DialectName.from_string(self.dialect)
        make_insert = pg_insert if dialect_name is DialectName.POSTGRES else sqlite_insert
        stmt = make_insert(table).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=[column.name for column in table.primary_key.columns],
            set_={column: stmt.excluded[column] for column in update_columns},
        )


class SqlAlchemyOptionStore(_SqlAlchemyAdapter, OptionStore):
    """OptionStore over the `options` table."""

    # --------------------------------------------------------------------- #
    # Interface implementation
    # --------------------------------------------------------------------- #

    def get(self, name: str, default: Any = None) -> Any:
        value = self._fetch(name)
        return default if value is _MISSING else value

    def update(self, name: str, value: Any) -> bool:
        return self._write(name, value, autoload=True)

    def delete(self, name: str) -> bool:
        result = self._execute(delete(options).where(options.c.name == name))
        return result.rowcount == 1

    def get_raw(self, name: str, default: Any = None) -> Any:
        return self.get(name, default)

    def update_raw(self, name: str, value: Any) -> bool:
        return self._write(name, value, autoload=False)

    def exists(self, name: str) -> bool:
        return self._fetch(name) is not _MISSING

    def names(self) -> list[str]:
        stmt = select(options.c.name).order_by(options.c.name.asc())
        return list(self._execute(stmt).scalars().all())

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _fetch(self, name: str) -> Any:
        stmt = select(options.c.value).where(options.c.name == name)
        if (row := self._execute(stmt).fetchone()) is None:
            return _MISSING
        return row.value

    def _write(self, name: str, value: Any, autoload: bool) -> bool:
        validate_name(name)
        value = to_json_value(value)
        existing = self._fetch(name)
        self._execute(
            self._build_upsert(
                options,
                {"name": name, "value": value, "autoload": autoload},
                update_columns=("value", "autoload"),
            )
        )
        return existing is _MISSING or existing != value

    def is_autoloaded(self, name: str) -> bool | None:
        """Return the autoload flag of ``name`` (None if absent)."""
        stmt = select(options.c.autoload).where(options.c.name == name)
        return self._execute(stmt).scalar_one_or_none()


class SqlAlchemyTransientStore(_SqlAlchemyAdapter, TransientStore):
    """TransientStore over the `transients` table; expiry uses ``clock``."""

    def __init__(self, connection: Connection, clock: Clock | None = None):
        super().__init__(connection)
        self.clock = clock or SystemClock()

    def get(self, name: str) -> Any:
        row = self._live_row(name)
        return None if row is None else row.value

    def set(self, name: str, value: Any, ttl: float = 0) -> None:
        validate_name(name)
        if ttl < 0:
            raise ValueError("ttl must be >= 0")
        self._execute(
            self._build_upsert(
                transients,
                {
                    "name": name,
                    "value": to_json_value(value),
                    "expires_at": self.clock.now() + ttl if ttl else None,
                },
                update_columns=("value", "expires_at"),
            )
        )

    def delete(self, name: str) -> bool:
        live = self._live_row(name) is not None
        self._execute(delete(transients).where(transients.c.name == name))
        return live

    def expires_at(self, name: str) -> float | None:
        row = self._live_row(name)
        return None if row is None else row.expires_at

    def _live_row(self, name: str):
        stmt = select(transients.c.value, transients.c.expires_at).where(
            transients.c.name == name
        )
        if (row := self._execute(stmt).fetchone()) is None:
            return None
        if row.expires_at is not None and row.expires_at <= self.clock.now():
            self._execute(delete(transients).where(transients.c.name == name))
            return None
        return row


class SqlAlchemySyncQueue(_SqlAlchemyAdapter, SyncQueue):
    """SyncQueue over the `sync_queue` table, ordered by insertion sequence."""

    def __init__(
        self,
        connection: Connection,
        clock: Clock | None = None,
        id_generator: IdGenerator | None = None,
    ):
        super().__init__(connection)
        self.clock = clock or SystemClock()
        self.id_generator = id_generator or ULIDGenerator()

    def enqueue(self, action: str, args: Sequence[Any]) -> QueueItem:
        if not action.strip():
            raise InvalidQueueItemError("action must be non-empty.")
        item = QueueItem(
            item_id=self.id_generator.new_id(),
            action=action,
            args=to_json_value(list(args)),
            enqueued_at=datetime.fromtimestamp(self.clock.now(), timezone.utc),
        )
        self._execute(
            insert(sync_queue).values(
                item_id=item.item_id,
                action=item.action,
                args=item.args,
                enqueued_at=item.enqueued_at,
            )
        )
        return item

    def peek(self, limit: int | None = None) -> Sequence[QueueItem]:
        if limit is not None and limit < 1:
            raise ValueError("limit cannot be <= 0")
        stmt = select(
            sync_queue.c.item_id,
            sync_queue.c.action,
            sync_queue.c.args,
            sync_queue.c.enqueued_at,
        ).order_by(sync_queue.c.seq.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return [QueueItem(**row) for row in self._execute(stmt).mappings().all()]

    def remove(self, item_ids: Iterable[str]) -> int:
        if not (ids := list(item_ids)):
            return 0
        result = self._execute(delete(sync_queue).where(sync_queue.c.item_id.in_(ids)))
        return result.rowcount

    def size(self) -> int:
        stmt = select(func.count()).select_from(sync_queue)
        return int(self._execute(stmt).scalar_one())

    def clear(self) -> int:
        return self._execute(delete(sync_queue)).rowcount
