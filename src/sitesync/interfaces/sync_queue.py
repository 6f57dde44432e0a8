"""Sync queue port.

The sync queue is the outbox between change detection and delivery: sync
modules fire actions, the listener enqueues them, and the sender drains the
queue in FIFO order to a transport.

Contract overview
-----------------
- `enqueue(action, args)` appends one item and returns it with its id and
  `enqueued_at` populated. Ids are 26-char ULIDs supplied by the adapter's
  `IdGenerator`.
- `peek(limit)` returns up to ``limit`` items, oldest first, without removing them.
- `remove(ids)` deletes the given items (unknown ids are ignored) and returns
  how many were removed.
- `size()` and `clear()` do what their names say.
"""

from __future__ import annotations

import abc
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any


class SyncQueueError(Exception):
    """Base class for sync queue errors."""


class InvalidQueueItemError(SyncQueueError):
    """The queue item is invalid."""


@dataclass(frozen=True, slots=True)
class QueueItem:
    """A single queued sync action.

    Notes:
      - `args` is a JSON-serializable list of positional hook arguments.
      - `enqueued_at` is UTC, tz-aware.
    """

    item_id: str  # 26-char ULID
    action: str
    args: list[Any]
    enqueued_at: datetime

    def __post_init__(self) -> None:
        if len(self.item_id) != 26:
            raise InvalidQueueItemError("item_id must be a 26-character ULID.")
        if not self.action.strip():
            raise InvalidQueueItemError("action must be non-empty.")
        if self.enqueued_at.tzinfo is None or self.enqueued_at.utcoffset() is None:
            raise InvalidQueueItemError("enqueued_at must be tz-aware.")
        if self.enqueued_at.utcoffset() != timedelta(0):
            raise InvalidQueueItemError("enqueued_at must be UTC.")


class SyncQueue(abc.ABC):
    """An abstract base class for the sync queue."""

    @abc.abstractmethod
    def enqueue(self, action: str, args: Sequence[Any]) -> QueueItem:
        """Append an action to the queue.

        Raises:
            InvalidQueueItemError: If ``action`` is empty.
            InvalidValueError: If ``args`` is not JSON-serializable.
        """

    @abc.abstractmethod
    def peek(self, limit: int | None = None) -> Sequence[QueueItem]:
        """Return up to ``limit`` items, oldest first.

        Raises:
            ValueError: If ``limit`` is not None and < 1.
        """

    @abc.abstractmethod
    def remove(self, item_ids: Iterable[str]) -> int:
        """Remove items by id; returns the number removed."""

    @abc.abstractmethod
    def size(self) -> int:
        """Return the number of queued items."""

    @abc.abstractmethod
    def clear(self) -> int:
        """Remove every item; returns the number removed."""
