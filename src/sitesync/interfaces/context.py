"""Execution-context and identity ports.

`ExecutionContext` answers the questions the sync modules ask about the
current request: is it an interactive admin request, a background (cron)
job, and is the site part of a multisite network.

`IdentitySwitcher` changes the acting user. `switched_to` runs a block as a
different user and restores the previous identity on every exit path,
including exceptions raised inside the block.
"""

from __future__ import annotations

import abc
from collections.abc import Iterator
from contextlib import contextmanager


class ExecutionContext(abc.ABC):
    """Queries about the current execution context."""

    @abc.abstractmethod
    def is_admin(self) -> bool:
        """Return True for interactive admin requests."""

    @abc.abstractmethod
    def is_doing_cron(self) -> bool:
        """Return True when running as a background/cron job."""

    @abc.abstractmethod
    def is_multisite(self) -> bool:
        """Return True if the site belongs to a multisite network."""


class IdentitySwitcher(abc.ABC):
    """Changes the user the current process acts as."""

    @abc.abstractmethod
    def get_current_user(self) -> int | None:
        """Return the id of the acting user (None for anonymous)."""

    @abc.abstractmethod
    def set_current_user(self, user_id: int | None) -> None:
        """Act as ``user_id`` from now on."""

    @contextmanager
    def switched_to(self, user_id: int | None) -> Iterator[None]:
        """Act as ``user_id`` for the duration of the block."""
        previous = self.get_current_user()
        self.set_current_user(user_id)
        try:
            yield
        finally:
            self.set_current_user(previous)
