"""Callables sync module.

Tracks "callables": named, zero-argument producers of site state (home URL,
active modules, plugin list, ...). Each pass evaluates the producers, compares
the checksum of every value against the checksum recorded on the previous
pass, and fires `SYNC_CALLABLE_ACTION` for the values that changed.

Passes are throttled by a debounce lock (a transient that lives for
``wait_time`` seconds). The lock is cleared early when an option that feeds a
latency-sensitive callable changes (see `ALWAYS_SEND_UPDATES_TO_THESE_OPTIONS`)
or when a host fires `UNLOCK_SYNC_CALLABLE_ACTION`.

Only admin requests and cron jobs sync callables. Cron jobs (outside admin)
only evaluate the always-send subset. The `CHECK_AND_SEND_CALLABLES_FILTER`
filter overrides both the context policy and the lock.

Producer exceptions are not caught: the pass aborts and nothing is persisted
by the caller's unit of work. The identity switch around evaluation is still
undone.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from sitesync.domain.checksum import canonical_value
from sitesync.interfaces.clock import Clock
from sitesync.interfaces.context import ExecutionContext, IdentitySwitcher
from sitesync.interfaces.unit_of_work import AbstractUnitOfWork
from sitesync.service_layer.hooks import Hooks, return_true
from sitesync.service_layer.site_functions import (
    HTTPS_CHECK_OPTION_PREFIX,
    SiteFunctions,
    get_callable_whitelist,
    get_multisite_callable_whitelist,
)

from .base import FullSyncConfig, Module

logger = logging.getLogger(__name__)

Producer = Callable[[], Any]

CALLABLES_CHECKSUM_OPTION_NAME = "callables_sync_checksum"
CALLABLES_AWAIT_TRANSIENT_NAME = "sync_callables_await"
PLUGIN_ACTION_LINKS_REFRESH_TRANSIENT = "plugin_api_action_links_refresh"
MASTER_USER_OPTION = "master_user"
MIGRATE_FOR_IDC_OPTION = "migrate_for_idc"

# hooks
SYNC_CALLABLE_ACTION = "sync_callable"
FULL_SYNC_CALLABLES_ACTION = "full_sync_callables"
UNLOCK_SYNC_CALLABLE_ACTION = "unlock_sync_callable"
UPGRADER_PROCESS_COMPLETE_ACTION = "upgrader_process_complete"
BEFORE_SEND_QUEUE_SYNC_ACTION = "before_send_queue_sync"
CHECK_AND_SEND_CALLABLES_FILTER = "check_and_send_callables"

#: Changes to these options are sent right away (they clear the lock).
ALWAYS_SEND_UPDATES_TO_THESE_OPTIONS = (
    "active_modules",
    "home",  # option is home, callable is home_url
    "siteurl",
    "sync_error_idc",
    "paused_plugins",
    "paused_themes",
)

#: Option names whose callable has a different name.
OPTION_NAMES_TO_CALLABLE_NAMES = {
    "home": "home_url",
}

#: Sent on every pass while the site is migrating after an identity crisis.
IDC_OVERRIDE_CALLABLES = (
    "main_network_site",
    "home_url",
    "site_url",
)

#: Callables whose URL scheme history is cached in options.
URL_CALLABLES = ("home_url", "site_url", "main_network_site_url")


def update_option_action(option: str) -> str:
    """Return the action fired after ``option`` is updated."""
    return f"update_option_{option}"


def delete_option_action(option: str) -> str:
    """Return the action fired after ``option`` is deleted."""
    return f"delete_option_{option}"


def before_send_filter(action: str) -> str:
    """Return the filter applied to a queued ``action`` before it is sent."""
    return f"before_send_{action}"


class Callables(Module):
    """Sync module for callables.

    Args:
        uow: Unit of work holding the checksum option and the lock transient.
        hooks: Hook bus.
        context: Tells admin, cron and multisite contexts apart.
        identity: Used to evaluate producers as the site's master user.
        clock: Source of the lock timestamp.
        wait_time: Debounce window in seconds; ``0`` disables the lock.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        uow: AbstractUnitOfWork,
        hooks: Hooks,
        *,
        context: ExecutionContext,
        identity: IdentitySwitcher,
        clock: Clock,
        wait_time: int,
    ) -> None:
        super().__init__(uow, hooks)
        self.context = context
        self.identity = identity
        self.clock = clock
        self.wait_time = wait_time
        self._callable_whitelist: dict[str, Producer] = {}

    def name(self) -> str:
        return "functions"

    def set_defaults(self) -> None:
        """Build the whitelist for a single site or a multisite network."""
        site = SiteFunctions(self.uow, self.context)
        whitelist = get_callable_whitelist(site)
        if self.context.is_multisite():
            whitelist.update(get_multisite_callable_whitelist(site))
        self._callable_whitelist = whitelist

    # --------------------------------------------------------------------- #
    # Wiring
    # --------------------------------------------------------------------- #

    def init_listeners(self, handler: Callable[..., None]) -> None:
        self.hooks.add_action(SYNC_CALLABLE_ACTION, handler)

        for option in ALWAYS_SEND_UPDATES_TO_THESE_OPTIONS:
            self.hooks.add_action(
                update_option_action(option), self.unlock_sync_callable
            )
            self.hooks.add_action(
                delete_option_action(option), self.unlock_sync_callable
            )

        # hosts that pin home/siteurl outside the option store use this to push changes
        self.hooks.add_action(UNLOCK_SYNC_CALLABLE_ACTION, self.unlock_sync_callable)

        # new code was installed or activated
        self.hooks.add_action(
            UPGRADER_PROCESS_COMPLETE_ACTION,
            self.unlock_plugin_action_link_and_callables,
        )
        self.hooks.add_action(
            update_option_action("active_plugins"),
            self.unlock_plugin_action_link_and_callables,
        )

    def init_full_sync_listeners(self, handler: Callable[..., None]) -> None:
        self.hooks.add_action(FULL_SYNC_CALLABLES_ACTION, handler)

    def init_before_send(self) -> None:
        self.hooks.add_action(BEFORE_SEND_QUEUE_SYNC_ACTION, self.maybe_sync_callables)
        self.hooks.add_filter(
            before_send_filter(FULL_SYNC_CALLABLES_ACTION), self.expand_callables
        )

    def reset_data(self) -> None:
        self.uow.options.delete(CALLABLES_CHECKSUM_OPTION_NAME)
        self.uow.transients.delete(CALLABLES_AWAIT_TRANSIENT_NAME)
        for callable_name in URL_CALLABLES:
            self.uow.options.delete(HTTPS_CHECK_OPTION_PREFIX + callable_name)
        logger.info("Reset callables checksums, lock and URL scheme history")

    # --------------------------------------------------------------------- #
    # Whitelist
    # --------------------------------------------------------------------- #

    def set_callable_whitelist(self, callables: Mapping[str, Producer]) -> None:
        """Replace the whitelist (order is preserved)."""
        self._callable_whitelist = dict(callables)

    def get_callable_whitelist(self) -> dict[str, Producer]:
        """Return the whitelist."""
        return self._callable_whitelist

    def get_all_callables(self) -> dict[str, Any]:
        """Evaluate every whitelisted callable as the master user."""
        return self._evaluate(self._callable_whitelist)

    def get_always_sent_callables(self) -> dict[str, Any]:
        """Evaluate the callables fed by the always-send options.

        Entries follow `ALWAYS_SEND_UPDATES_TO_THESE_OPTIONS` order; options
        with no matching callable are skipped.
        """
        return self._evaluate(self._always_sent_names())

    def _always_sent_names(self) -> list[str]:
        names = []
        for option_name in ALWAYS_SEND_UPDATES_TO_THESE_OPTIONS:
            if option_name in self._callable_whitelist:
                names.append(option_name)
                continue
            callable_name = OPTION_NAMES_TO_CALLABLE_NAMES.get(option_name)
            if callable_name is not None and callable_name in self._callable_whitelist:
                names.append(callable_name)
        return names

    def _evaluate(self, names: Iterable[str]) -> dict[str, Any]:
        master_user = self.uow.options.get(MASTER_USER_OPTION)
        with self.identity.switched_to(master_user):
            return {name: self._callable_whitelist[name]() for name in names}

    # --------------------------------------------------------------------- #
    # Full sync
    # --------------------------------------------------------------------- #

    def enqueue_full_sync_actions(
        self,
        config: FullSyncConfig,
        max_items_to_enqueue: int,
        state: bool,
    ) -> tuple[int, bool]:
        # the payload is expanded in the sender; see expand_callables
        self.hooks.do_action(FULL_SYNC_CALLABLES_ACTION, True)
        return 1, True

    def estimate_full_sync_actions(self, config: FullSyncConfig) -> int:
        return 1

    def get_full_sync_actions(self) -> list[str]:
        return [FULL_SYNC_CALLABLES_ACTION]

    def expand_callables(self, args: list[Any], *_extra: Any) -> Any:
        """Replace a queued full sync action's args with every callable's value.

        Also records the checksum of every value so the next incremental pass
        only sends what changed after the full sync.
        """
        if not args or not args[0]:
            return args
        callables = self.get_all_callables()
        checksums = {name: self.get_check_sum(value) for name, value in callables.items()}
        self.uow.options.update_raw(CALLABLES_CHECKSUM_OPTION_NAME, checksums)
        return {name: canonical_value(value) for name, value in callables.items()}

    # --------------------------------------------------------------------- #
    # Locking
    # --------------------------------------------------------------------- #

    def unlock_sync_callable(self, *_args: Any) -> None:
        """Clear the debounce lock so the next pass runs."""
        if self.uow.transients.delete(CALLABLES_AWAIT_TRANSIENT_NAME):
            logger.debug("Callables sync unlocked")

    def unlock_plugin_action_link_and_callables(self, *_args: Any) -> None:
        """Clear the lock and force callables to be checked for the rest of the process."""
        self.uow.transients.delete(CALLABLES_AWAIT_TRANSIENT_NAME)
        self.uow.transients.delete(PLUGIN_ACTION_LINKS_REFRESH_TRANSIENT)
        self.hooks.add_filter(CHECK_AND_SEND_CALLABLES_FILTER, return_true)
        logger.debug("Callables sync unlocked and forced after a code change")

    def is_locked(self) -> bool:
        """Return True while the debounce lock is live."""
        return bool(self.uow.transients.get(CALLABLES_AWAIT_TRANSIENT_NAME))

    # --------------------------------------------------------------------- #
    # Incremental sync
    # --------------------------------------------------------------------- #

    def should_send_callable(
        self, callable_checksums: Mapping[str, Any], name: str, checksum: int
    ) -> bool:
        """Return True if the callable ``name`` must be sent."""
        if name in IDC_OVERRIDE_CALLABLES and self.uow.options.get(
            MIGRATE_FOR_IDC_OPTION
        ):
            return True
        return not self.still_valid_checksum(callable_checksums, name, checksum)

    def maybe_sync_callables(self, *_args: Any) -> None:
        """Send the callables that changed since the last pass, if allowed.

        Returns without side effects when the context may not sync, when the
        debounce lock is live, or when there is nothing to evaluate.
        """
        if self.hooks.apply_filters(CHECK_AND_SEND_CALLABLES_FILTER, False):
            names: Iterable[str] = list(self._callable_whitelist)
        else:
            if self.context.is_admin():
                names = list(self._callable_whitelist)
            elif self.context.is_doing_cron():
                names = self._always_sent_names()
            else:
                logger.debug("Skipping callables sync outside admin and cron")
                return
            if self.is_locked():
                logger.debug("Skipping callables sync: lock is live")
                return

        if not (callables := self._evaluate(names)):
            return

        if self.wait_time > 0:
            self.uow.transients.set(
                CALLABLES_AWAIT_TRANSIENT_NAME, self.clock.now(), self.wait_time
            )

        stored = self.uow.options.get_raw(CALLABLES_CHECKSUM_OPTION_NAME, {})
        if not isinstance(stored, dict):
            stored = {}
        callable_checksums = dict(stored)

        sent = []
        for name, value in callables.items():
            checksum = self.get_check_sum(value)
            if value is not None and self.should_send_callable(
                callable_checksums, name, checksum
            ):
                self.hooks.do_action(SYNC_CALLABLE_ACTION, name, canonical_value(value))
                sent.append(name)
            callable_checksums[name] = checksum

        if sent or callable_checksums != stored:
            self.uow.options.update_raw(
                CALLABLES_CHECKSUM_OPTION_NAME, callable_checksums
            )

        if sent:
            logger.info("Sent %d changed callable(s): %s", len(sent), ", ".join(sent))
        else:
            logger.debug("No callables changed (%d checked)", len(callables))
