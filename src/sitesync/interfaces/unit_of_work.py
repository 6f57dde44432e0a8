"""Unit of Work interface for SITESYNC.

Defines the AbstractUnitOfWork contract: a context-managed unit of work
exposing the option store, the transient store and the sync queue, with
abstract commit/rollback methods.
"""

from __future__ import annotations

import abc

from .options import OptionStore
from .sync_queue import SyncQueue
from .transients import TransientStore


class AbstractUnitOfWork(abc.ABC):
    """Contract for a transactional unit of work."""

    options: OptionStore
    transients: TransientStore
    queue: SyncQueue

    def __enter__(self) -> AbstractUnitOfWork:
        """Enter the unit of work context and return the unit.

        Implementations may acquire transactional resources here.
        """
        return self

    def __exit__(self, *args):
        """Exit the unit of work context.

        Default behavior is to roll back on exit.
        """
        self.rollback()

    @abc.abstractmethod
    def commit(self):
        """Persist changes and finalize the transaction."""

    @abc.abstractmethod
    def rollback(self):
        """Revert changes and clean up transactional resources."""
