"""Fixtures for the store contract tests.

Every store fixture is parametrized over the adapters implementing the port:

- ``"memory"`` → the in-memory adapter;
- ``"sqlite"`` → the SQLAlchemy adapter on a connection to an in-memory
  SQLite database (tables from `metadata.create_all()`).

Each test gets a fresh store and a `ManualClock` it can advance.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

import pytest

from sitesync.adapters.clock import ManualClock
from sitesync.adapters.id_generators import SimpleIdGenerator
from sitesync.adapters.stores import (
    InMemoryOptionStore,
    InMemorySyncQueue,
    InMemoryTransientStore,
    SqlAlchemyOptionStore,
    SqlAlchemySyncQueue,
    SqlAlchemyTransientStore,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

    from sitesync.interfaces.options import OptionStore
    from sitesync.interfaces.sync_queue import SyncQueue
    from sitesync.interfaces.transients import TransientStore

# pylint: disable=redefined-outer-name

BACKENDS = ["memory", "sqlite"]


@pytest.fixture
def connection(sqlite_engine_memory: Engine) -> Iterator[Connection]:
    """A connection whose transaction is rolled back after the test."""
    with sqlite_engine_memory.connect() as cxn:
        yield cxn
        cxn.rollback()


@pytest.fixture(params=BACKENDS)
def option_store(request: pytest.FixtureRequest) -> OptionStore:
    match request.param:
        case "memory":
            return InMemoryOptionStore()
        case "sqlite":
            return SqlAlchemyOptionStore(request.getfixturevalue("connection"))
        case _:
            raise ValueError(f"unknown option store: {request.param}")


@pytest.fixture(params=BACKENDS)
def transient_store(
    request: pytest.FixtureRequest, clock: ManualClock
) -> TransientStore:
    match request.param:
        case "memory":
            return InMemoryTransientStore(clock=clock)
        case "sqlite":
            return SqlAlchemyTransientStore(
                request.getfixturevalue("connection"), clock=clock
            )
        case _:
            raise ValueError(f"unknown transient store: {request.param}")


@pytest.fixture(params=BACKENDS)
def sync_queue(request: pytest.FixtureRequest, clock: ManualClock) -> SyncQueue:
    match request.param:
        case "memory":
            return InMemorySyncQueue(clock=clock, id_generator=SimpleIdGenerator())
        case "sqlite":
            return SqlAlchemySyncQueue(
                request.getfixturevalue("connection"),
                clock=clock,
                id_generator=SimpleIdGenerator(),
            )
        case _:
            raise ValueError(f"unknown sync queue: {request.param}")
