"""Option, transient and sync queue adapters.

In-memory implementations are non-durable and suited to tests and one-shot
runs; SQLAlchemy implementations persist to the tables defined in
`sitesync.adapters.stores.schema`. Both pass the same contract tests.
"""

from .memory import InMemoryOptionStore, InMemorySyncQueue, InMemoryTransientStore
from .sqlalchemy_adapters import SqlAlchemyOptionStore, SqlAlchemySyncQueue, SqlAlchemyTransientStore

__all__ = [
    "InMemoryOptionStore",
    "InMemorySyncQueue",
    "InMemoryTransientStore",
    "SqlAlchemyOptionStore",
    "SqlAlchemySyncQueue",
    "SqlAlchemyTransientStore",
]
