"""Listener: turns fired sync actions into queue items."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sitesync.interfaces.sync_queue import QueueItem
from sitesync.interfaces.unit_of_work import AbstractUnitOfWork

from .hooks import Hooks
from .modules.base import Module

logger = logging.getLogger(__name__)


class Listener:
    """Enqueue sync actions onto the unit of work's queue.

    Args:
        uow: Unit of work whose queue receives the items. It must be open
            when the actions fire.
        hooks: Hook bus the modules register their actions on.
    """

    def __init__(self, uow: AbstractUnitOfWork, hooks: Hooks) -> None:
        self.uow = uow
        self.hooks = hooks

    def init_modules(self, modules: Sequence[Module]) -> None:
        """Subscribe the listener to every module's incremental and full sync actions."""
        for module in modules:
            module.init_listeners(self.handle_current_action)
            module.init_full_sync_listeners(self.handle_current_action)

    def handle_current_action(self, *args: Any) -> QueueItem:
        """Enqueue the action currently being fired on ``hooks``."""
        action = self.hooks.current_hook()
        if action is None:
            raise RuntimeError("handle_current_action called outside of a hook")
        return self.enqueue_action(action, args)

    def enqueue_action(self, action: str, args: Sequence[Any]) -> QueueItem:
        """Append ``action`` with ``args`` to the queue."""
        item = self.uow.queue.enqueue(action, list(args))
        logger.debug("Enqueued %s as %s", action, item.item_id)
        return item
