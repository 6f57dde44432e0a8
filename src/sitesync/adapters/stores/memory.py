"""In-memory store adapters.

All data lives in process memory and is lost when the instance is discarded.
Use for unit tests, prototyping, or one-shot runs where durability is not
required.

These implementations pass all contract tests for their interfaces.
Note: not thread-safe; intended for single-threaded use.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any

from sitesync.adapters.clock import SystemClock
from sitesync.adapters.id_generators import ULIDGenerator
from sitesync.interfaces.clock import Clock
from sitesync.interfaces.errors import validate_name
from sitesync.interfaces.id_generator import IdGenerator
from sitesync.interfaces.options import OptionStore
from sitesync.interfaces.sync_queue import InvalidQueueItemError, QueueItem, SyncQueue
from sitesync.interfaces.transients import TransientStore

from .json_values import to_json_value


@dataclass
class _OptionRow:
    value: Any
    autoload: bool


class InMemoryOptionStore(OptionStore):
    """In-memory OptionStore."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._rows: dict[str, _OptionRow] = {}
        for name, value in (initial or {}).items():
            self.update(name, value)

    # --------------------------------------------------------------------- #
    # Interface implementation
    # --------------------------------------------------------------------- #

    def get(self, name: str, default: Any = None) -> Any:
        if (row := self._rows.get(name)) is None:
            return default
        return copy.deepcopy(row.value)

    def update(self, name: str, value: Any) -> bool:
        return self._write(name, value, autoload=True)

    def delete(self, name: str) -> bool:
        return self._rows.pop(name, None) is not None

    def get_raw(self, name: str, default: Any = None) -> Any:
        return self.get(name, default)

    def update_raw(self, name: str, value: Any) -> bool:
        return self._write(name, value, autoload=False)

    def exists(self, name: str) -> bool:
        return name in self._rows

    def names(self) -> list[str]:
        return sorted(self._rows)

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _write(self, name: str, value: Any, autoload: bool) -> bool:
        validate_name(name)
        value = to_json_value(value)
        existing = self._rows.get(name)
        self._rows[name] = _OptionRow(value=value, autoload=autoload)
        return existing is None or existing.value != value

    def is_autoloaded(self, name: str) -> bool | None:
        """Return the autoload flag of ``name`` (None if absent)."""
        row = self._rows.get(name)
        return None if row is None else row.autoload

    def snapshot(self) -> dict[str, _OptionRow]:
        """Return a deep copy of the stored rows (see `restore`)."""
        return copy.deepcopy(self._rows)

    def restore(self, rows: dict[str, _OptionRow]) -> None:
        """Replace the stored rows with a snapshot."""
        self._rows = copy.deepcopy(rows)


@dataclass
class _TransientRow:
    value: Any
    expires_at: float | None


class InMemoryTransientStore(TransientStore):
    """In-memory TransientStore; expiry is measured with ``clock``."""

    def __init__(self, clock: Clock | None = None):
        self.clock = clock or SystemClock()
        self._rows: dict[str, _TransientRow] = {}

    def get(self, name: str) -> Any:
        if (row := self._live_row(name)) is None:
            return None
        return copy.deepcopy(row.value)

    def set(self, name: str, value: Any, ttl: float = 0) -> None:
        validate_name(name)
        if ttl < 0:
            raise ValueError("ttl must be >= 0")
        self._rows[name] = _TransientRow(
            value=to_json_value(value),
            expires_at=self.clock.now() + ttl if ttl else None,
        )

    def delete(self, name: str) -> bool:
        live = self._live_row(name) is not None
        self._rows.pop(name, None)
        return live

    def expires_at(self, name: str) -> float | None:
        if (row := self._live_row(name)) is None:
            return None
        return row.expires_at

    def _live_row(self, name: str) -> _TransientRow | None:
        if (row := self._rows.get(name)) is None:
            return None
        if row.expires_at is not None and row.expires_at <= self.clock.now():
            del self._rows[name]
            return None
        return row

    def snapshot(self) -> dict[str, _TransientRow]:
        """Return a deep copy of the stored rows (see `restore`)."""
        return copy.deepcopy(self._rows)

    def restore(self, rows: dict[str, _TransientRow]) -> None:
        """Replace the stored rows with a snapshot."""
        self._rows = copy.deepcopy(rows)


class InMemorySyncQueue(SyncQueue):
    """In-memory SyncQueue; items are kept in enqueue order."""

    def __init__(
        self, clock: Clock | None = None, id_generator: IdGenerator | None = None
    ):
        self.clock = clock or SystemClock()
        self.id_generator = id_generator or ULIDGenerator()
        self._items: list[QueueItem] = []

    def enqueue(self, action: str, args: Sequence[Any]) -> QueueItem:
        if not action.strip():
            raise InvalidQueueItemError("action must be non-empty.")
        item = QueueItem(
            item_id=self.id_generator.new_id(),
            action=action,
            args=to_json_value(list(args)),
            enqueued_at=datetime.fromtimestamp(self.clock.now(), timezone.utc),
        )
        self._items.append(item)
        return _copy_item(item)

    def peek(self, limit: int | None = None) -> Sequence[QueueItem]:
        if limit is not None and limit < 1:
            raise ValueError("limit cannot be <= 0")
        items = self._items if limit is None else self._items[:limit]
        return [_copy_item(item) for item in items]

    def remove(self, item_ids: Iterable[str]) -> int:
        doomed = set(item_ids)
        before = len(self._items)
        self._items = [item for item in self._items if item.item_id not in doomed]
        return before - len(self._items)

    def size(self) -> int:
        return len(self._items)

    def clear(self) -> int:
        removed = len(self._items)
        self._items = []
        return removed

    def snapshot(self) -> list[QueueItem]:
        """Return a copy of the queued items (see `restore`)."""
        return list(self._items)

    def restore(self, items: list[QueueItem]) -> None:
        """Replace the queued items with a snapshot."""
        self._items = list(items)


def _copy_item(item: QueueItem) -> QueueItem:
    return replace(item, args=copy.deepcopy(item.args))
