"""Full sync: asks every module to enqueue its complete state."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from .modules.base import FullSyncConfig, Module

logger = logging.getLogger(__name__)

#: Upper bound on the items a single module may enqueue per call.
DEFAULT_MAX_ITEMS_TO_ENQUEUE = 100


@dataclass
class FullSyncStatus:
    """Per-module progress of a full sync."""

    estimated: dict[str, int | None] = field(default_factory=dict)
    enqueued: dict[str, int] = field(default_factory=dict)
    finished: dict[str, bool] = field(default_factory=dict)

    @property
    def is_finished(self) -> bool:
        return all(self.finished.values())

    @property
    def total_enqueued(self) -> int:
        return sum(self.enqueued.values())


def enqueue_full_sync(
    modules: Sequence[Module],
    config: FullSyncConfig = True,
    max_items_to_enqueue: int = DEFAULT_MAX_ITEMS_TO_ENQUEUE,
) -> FullSyncStatus:
    """Run one enqueue round of a full sync over ``modules``.

    Modules whose `Module.get_full_sync_actions` is empty take no part.
    """
    status = FullSyncStatus()
    for module in modules:
        if not module.get_full_sync_actions():
            continue
        name = module.name()
        status.estimated[name] = module.estimate_full_sync_actions(config)
        enqueued, finished = module.enqueue_full_sync_actions(
            config, max_items_to_enqueue, False
        )
        status.enqueued[name] = enqueued
        status.finished[name] = finished
        logger.info(
            "Full sync of %s: enqueued %d action(s)%s",
            name,
            enqueued,
            "" if finished else " (more to go)",
        )
    return status
