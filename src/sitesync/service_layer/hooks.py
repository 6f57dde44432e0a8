"""Action/filter hook bus.

A small publish/subscribe registry modelled on host-style hooks:

- **Actions** are fire-and-forget notifications: `do_action(topic, *args)`
  calls every handler subscribed to ``topic`` with the positional args.
- **Filters** transform a value: `apply_filters(topic, value, *args)` passes
  ``value`` through every handler in turn; each handler returns the new value.

Handlers run in ascending ``priority`` order; handlers with equal priority run
in registration order. Registering the same handler twice for the same topic
and priority is a no-op. A handler that raises is logged and the exception is
re-raised to the caller; remaining handlers for that call do not run.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10


@dataclass(order=True, frozen=True)
class _Subscription:
    priority: int
    seq: int
    handler: Callable[..., Any] = field(compare=False)


class Hooks:
    """Registry of action and filter handlers keyed by topic."""

    def __init__(self) -> None:
        self._actions: dict[str, list[_Subscription]] = {}
        self._filters: dict[str, list[_Subscription]] = {}
        self._seq = itertools.count()
        self._running: list[str] = []

    # --- actions ---

    def add_action(
        self, topic: str, handler: Callable[..., Any], priority: int = DEFAULT_PRIORITY
    ) -> None:
        """Subscribe ``handler`` to the action ``topic``."""
        self._subscribe(self._actions, topic, handler, priority)

    def remove_action(
        self, topic: str, handler: Callable[..., Any], priority: int = DEFAULT_PRIORITY
    ) -> bool:
        """Unsubscribe ``handler``; returns True if it was subscribed."""
        return self._unsubscribe(self._actions, topic, handler, priority)

    def has_action(self, topic: str, handler: Callable[..., Any] | None = None) -> bool:
        """Return True if ``topic`` has any handler (or the given ``handler``)."""
        return self._has(self._actions, topic, handler)

    def do_action(self, topic: str, *args: Any) -> None:
        """Call every handler subscribed to ``topic`` with ``args``."""
        subscriptions = list(self._actions.get(topic, ()))
        if not subscriptions:
            return
        logger.debug("Firing action %s to %d handler(s)", topic, len(subscriptions))
        self._running.append(topic)
        try:
            for subscription in subscriptions:
                self._call(topic, subscription.handler, *args)
        finally:
            self._running.pop()

    # --- filters ---

    def add_filter(
        self, topic: str, handler: Callable[..., Any], priority: int = DEFAULT_PRIORITY
    ) -> None:
        """Subscribe ``handler`` to the filter ``topic``."""
        self._subscribe(self._filters, topic, handler, priority)

    def remove_filter(
        self, topic: str, handler: Callable[..., Any], priority: int = DEFAULT_PRIORITY
    ) -> bool:
        """Unsubscribe ``handler``; returns True if it was subscribed."""
        return self._unsubscribe(self._filters, topic, handler, priority)

    def has_filter(self, topic: str, handler: Callable[..., Any] | None = None) -> bool:
        """Return True if ``topic`` has any handler (or the given ``handler``)."""
        return self._has(self._filters, topic, handler)

    def apply_filters(self, topic: str, value: Any, *args: Any) -> Any:
        """Pass ``value`` (and ``args``) through every filter on ``topic``."""
        self._running.append(topic)
        try:
            for subscription in list(self._filters.get(topic, ())):
                value = self._call(topic, subscription.handler, value, *args)
        finally:
            self._running.pop()
        return value

    def current_hook(self) -> str | None:
        """Return the topic of the innermost action or filter being run."""
        return self._running[-1] if self._running else None

    # --- internals ---

    def _subscribe(
        self,
        registry: dict[str, list[_Subscription]],
        topic: str,
        handler: Callable[..., Any],
        priority: int,
    ) -> None:
        if not topic:
            raise ValueError("topic must be non-empty")
        subscriptions = registry.setdefault(topic, [])
        if any(
            s.handler == handler and s.priority == priority for s in subscriptions
        ):
            return
        subscriptions.append(_Subscription(priority, next(self._seq), handler))
        subscriptions.sort()

    @staticmethod
    def _unsubscribe(
        registry: dict[str, list[_Subscription]],
        topic: str,
        handler: Callable[..., Any],
        priority: int,
    ) -> bool:
        subscriptions = registry.get(topic, [])
        for subscription in subscriptions:
            if subscription.handler == handler and subscription.priority == priority:
                subscriptions.remove(subscription)
                return True
        return False

    @staticmethod
    def _has(
        registry: dict[str, list[_Subscription]],
        topic: str,
        handler: Callable[..., Any] | None,
    ) -> bool:
        subscriptions = registry.get(topic, [])
        if handler is None:
            return bool(subscriptions)
        return any(s.handler == handler for s in subscriptions)

    @staticmethod
    def _call(topic: str, handler: Callable[..., Any], *args: Any) -> Any:
        try:
            return handler(*args)
        except Exception:  # pylint: disable=broad-except
            logger.exception(
                "Exception in handler %s for hook %s", _handler_name(handler), topic
            )
            raise


def _handler_name(fn: Callable[..., Any]) -> str:
    if hasattr(fn, "__qualname__"):
        return fn.__qualname__
    if hasattr(fn, "func") and hasattr(fn.func, "__qualname__"):
        return fn.func.__qualname__
    return repr(fn)


def return_true(*_args: Any) -> bool:
    """Filter handler that always returns True."""
    return True
