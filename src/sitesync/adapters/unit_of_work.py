"""Unit of Work adapters for SITESYNC.

- `SqlAlchemyUnitOfWork` opens a Connection per ``with`` block and binds the
  SQLAlchemy store adapters to it.
- `InMemoryUnitOfWork` keeps long-lived in-memory stores and snapshots them
  on entry so that rollback restores the snapshot.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.exc import DBAPIError

from sitesync.adapters.clock import SystemClock
from sitesync.adapters.id_generators import ULIDGenerator
from sitesync.adapters.stores import (
    InMemoryOptionStore,
    InMemorySyncQueue,
    InMemoryTransientStore,
    SqlAlchemyOptionStore,
    SqlAlchemySyncQueue,
    SqlAlchemyTransientStore,
)
from sitesync.interfaces.errors import StoreUnavailableError
from sitesync.interfaces.unit_of_work import AbstractUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

    from sitesync.interfaces.clock import Clock
    from sitesync.interfaces.id_generator import IdGenerator


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy-backed Unit of Work."""

    def __init__(
        self,
        engine: Engine,
        clock: Clock | None = None,
        id_generator: IdGenerator | None = None,
    ):
        self.engine = engine
        self.clock = clock or SystemClock()
        self.id_generator = id_generator or ULIDGenerator()
        self.connection: Connection

    def __enter__(self):
        try:
            self.connection = self.engine.connect()
        except DBAPIError as e:
            raise StoreUnavailableError(str(e)) from e
        self.options = SqlAlchemyOptionStore(self.connection)
        self.transients = SqlAlchemyTransientStore(self.connection, clock=self.clock)
        self.queue = SqlAlchemySyncQueue(
            self.connection, clock=self.clock, id_generator=self.id_generator
        )
        return super().__enter__()

    def __exit__(self, *args):
        super().__exit__(*args)
        self.connection.close()

    def commit(self):
        self.connection.commit()

    def rollback(self):
        self.connection.rollback()


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """In-memory Unit of Work.

    The stores outlive each ``with`` block, so state committed in one block is
    visible in the next. Uncommitted changes are discarded on exit.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        id_generator: IdGenerator | None = None,
    ):
        self.clock = clock or SystemClock()
        self.options = InMemoryOptionStore()
        self.transients = InMemoryTransientStore(clock=self.clock)
        self.queue = InMemorySyncQueue(
            clock=self.clock, id_generator=id_generator or ULIDGenerator()
        )
        self.committed = False
        self._snapshots: tuple | None = None

    def __enter__(self):
        self._take_snapshot()
        return super().__enter__()

    def commit(self):
        self.committed = True
        self._take_snapshot()

    def rollback(self):
        if self._snapshots is None:
            return
        options, transients, queue = self._snapshots
        self.options.restore(options)
        self.transients.restore(transients)
        self.queue.restore(queue)

    def _take_snapshot(self) -> None:
        self._snapshots = (
            self.options.snapshot(),
            self.transients.snapshot(),
            self.queue.snapshot(),
        )
