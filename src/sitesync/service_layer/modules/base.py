"""Base class for sync modules."""

from __future__ import annotations

import abc
from collections.abc import Callable, Mapping
from typing import Any

from sitesync.domain.checksum import checksum
from sitesync.interfaces.unit_of_work import AbstractUnitOfWork
from sitesync.service_layer.hooks import Hooks

FullSyncConfig = Mapping[str, Any] | bool | None


class Module(abc.ABC):
    """A sync module.

    Modules act on the stores of ``uow`` and expect to be called while that
    unit of work is open; the caller owns the transaction.

    Args:
        uow: Unit of work whose stores the module reads and writes.
        hooks: Hook bus used to fire actions and register listeners.
    """

    def __init__(self, uow: AbstractUnitOfWork, hooks: Hooks) -> None:
        self.uow = uow
        self.hooks = hooks

    @abc.abstractmethod
    def name(self) -> str:
        """Return the module name."""

    def set_defaults(self) -> None:
        """Set module defaults."""

    def init_listeners(self, handler: Callable[..., None]) -> None:
        """Subscribe ``handler`` (the listener) to the module's incremental actions."""

    def init_full_sync_listeners(self, handler: Callable[..., None]) -> None:
        """Subscribe ``handler`` (the listener) to the module's full sync actions."""

    def init_before_send(self) -> None:
        """Register hooks that run in the sender before the queue is sent."""

    def reset_data(self) -> None:
        """Delete all options and transients the module owns."""

    def enqueue_full_sync_actions(
        self,
        config: FullSyncConfig,
        max_items_to_enqueue: int,
        state: bool,
    ) -> tuple[int, bool]:
        """Enqueue the module's full sync actions.

        Returns:
            The number of actions enqueued and whether the module is done.
        """
        return 0, True

    def estimate_full_sync_actions(self, config: FullSyncConfig) -> int | None:
        """Return an estimate of the actions a full sync will enqueue."""
        return None

    def get_full_sync_actions(self) -> list[str]:
        """Return the actions this module sends during a full sync."""
        return []

    @staticmethod
    def get_check_sum(values: Any) -> int:
        """Return the checksum of ``values``."""
        return checksum(values)

    @staticmethod
    def still_valid_checksum(
        sums_to_check: Mapping[str, Any], name: str, new_sum: int
    ) -> bool:
        """Return True if ``sums_to_check`` already holds ``new_sum`` for ``name``."""
        return name in sums_to_check and sums_to_check[name] == new_sum
