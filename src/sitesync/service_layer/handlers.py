"""Service layer handlers.

Each handler opens the unit of work, acts through the sync modules and the
hook bus, and commits. Dependencies are injected by parameter name at
bootstrap: ``uow``, ``hooks``, ``modules`` and ``transport``.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from sitesync.interfaces.transport import Transport
from sitesync.interfaces.unit_of_work import AbstractUnitOfWork

from . import commands
from .full_sync import FullSyncStatus, enqueue_full_sync
from .hooks import Hooks
from .modules.base import Module
from .modules.callables import (
    CHECK_AND_SEND_CALLABLES_FILTER,
    UNLOCK_SYNC_CALLABLE_ACTION,
    UPGRADER_PROCESS_COMPLETE_ACTION,
    Callables,
    delete_option_action,
    update_option_action,
)
from .sender import SendResult, Sender

logger = logging.getLogger(__name__)


class UnknownModuleError(LookupError):
    """No sync module has the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown sync module: {name}")
        self.name = name


def get_callables_module(modules: Sequence[Module]) -> Callables:
    """Return the callables module from ``modules``."""
    for module in modules:
        if isinstance(module, Callables):
            return module
    raise UnknownModuleError("functions")


# ============================================================================
#                          Callables Handlers
# ============================================================================


def sync_callables(
    cmd: commands.SyncCallables,
    uow: AbstractUnitOfWork,
    hooks: Hooks,
    modules: Sequence[Module],
) -> int:
    """Run a callables pass; returns the number of actions enqueued."""

    def force(_value: Any) -> bool:
        return True

    callables = get_callables_module(modules)
    with uow:
        before = uow.queue.size()
        if cmd.force:
            hooks.add_filter(CHECK_AND_SEND_CALLABLES_FILTER, force)
        try:
            callables.maybe_sync_callables()
        finally:
            if cmd.force:
                hooks.remove_filter(CHECK_AND_SEND_CALLABLES_FILTER, force)
        enqueued = uow.queue.size() - before
        uow.commit()

    logger.debug("SyncCallables enqueued %d action(s)", enqueued)
    return enqueued


def unlock_callables(
    cmd: commands.UnlockCallables,  # pylint: disable=unused-argument
    uow: AbstractUnitOfWork,
    hooks: Hooks,
) -> None:
    """Fire the explicit unlock action and commit."""
    with uow:
        hooks.do_action(UNLOCK_SYNC_CALLABLE_ACTION)
        uow.commit()


def reset_callables(
    cmd: commands.ResetCallables,  # pylint: disable=unused-argument
    uow: AbstractUnitOfWork,
    modules: Sequence[Module],
) -> None:
    """Delete the callables module's stored state."""
    callables = get_callables_module(modules)
    with uow:
        callables.reset_data()
        uow.commit()


# ============================================================================
#                             Full Sync Handlers
# ============================================================================


def enqueue_full_sync_actions(
    cmd: commands.EnqueueFullSync,
    uow: AbstractUnitOfWork,
    modules: Sequence[Module],
) -> FullSyncStatus:
    """Enqueue the full sync actions of the selected modules (all by default)."""
    selected = list(modules)
    if cmd.modules:
        by_name = {module.name(): module for module in modules}
        missing = [name for name in cmd.modules if name not in by_name]
        if missing:
            raise UnknownModuleError(missing[0])
        selected = [by_name[name] for name in cmd.modules]

    with uow:
        status = enqueue_full_sync(
            selected, max_items_to_enqueue=cmd.max_items_to_enqueue
        )
        uow.commit()
    return status


# ============================================================================
#                         Host Event Handlers
# ============================================================================


def update_option(
    cmd: commands.UpdateOption, uow: AbstractUnitOfWork, hooks: Hooks
) -> bool:
    """Write an option; fire ``update_option_<name>`` when the value changed."""
    with uow:
        old_value = uow.options.get(cmd.name)
        changed = uow.options.update(cmd.name, cmd.value)
        if not changed:
            logger.debug("UpdateOption %s: unchanged; noop", cmd.name)
            return False
        hooks.do_action(update_option_action(cmd.name), old_value, cmd.value, cmd.name)
        uow.commit()
    return True


def delete_option(
    cmd: commands.DeleteOption, uow: AbstractUnitOfWork, hooks: Hooks
) -> bool:
    """Delete an option; fire ``delete_option_<name>`` when it existed."""
    with uow:
        if not uow.options.delete(cmd.name):
            logger.debug("DeleteOption %s: not found; noop", cmd.name)
            return False
        hooks.do_action(delete_option_action(cmd.name), cmd.name)
        uow.commit()
    return True


def complete_upgrade(
    cmd: commands.CompleteUpgrade, uow: AbstractUnitOfWork, hooks: Hooks
) -> None:
    """Fire the upgrade-complete action."""
    with uow:
        hooks.do_action(UPGRADER_PROCESS_COMPLETE_ACTION, {"type": cmd.kind})
        uow.commit()


# ============================================================================
#                              Sender Handlers
# ============================================================================


def send_queue(
    cmd: commands.SendQueue,
    uow: AbstractUnitOfWork,
    hooks: Hooks,
    transport: Transport,
) -> SendResult:
    """Drain up to ``cmd.limit`` actions to the transport."""
    with uow:
        result = Sender(uow, hooks).do_sync(transport, cmd.limit)
        uow.commit()
    return result


COMMAND_HANDLERS: dict[type[commands.Command], Callable[..., Any]] = {
    commands.SyncCallables: sync_callables,
    commands.UnlockCallables: unlock_callables,
    commands.ResetCallables: reset_callables,
    commands.EnqueueFullSync: enqueue_full_sync_actions,
    commands.UpdateOption: update_option,
    commands.DeleteOption: delete_option,
    commands.CompleteUpgrade: complete_upgrade,
    commands.SendQueue: send_queue,
}
