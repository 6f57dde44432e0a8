"""Execution-context and identity adapters.

The CLI and tests describe the execution context explicitly rather than
deriving it from a web request.
"""

from __future__ import annotations

from dataclasses import dataclass

from sitesync.interfaces.context import ExecutionContext, IdentitySwitcher


@dataclass(frozen=True)
class StaticExecutionContext(ExecutionContext):
    """An execution context fixed at construction time."""

    admin: bool = False
    doing_cron: bool = False
    multisite: bool = False

    def is_admin(self) -> bool:
        return self.admin

    def is_doing_cron(self) -> bool:
        return self.doing_cron

    def is_multisite(self) -> bool:
        return self.multisite


class InMemoryIdentitySwitcher(IdentitySwitcher):
    """Keeps the acting user id in process memory.

    Records every switch in `history` so callers can audit elevation.
    """

    def __init__(self, user_id: int | None = None) -> None:
        self._user_id = user_id
        self.history: list[int | None] = []

    def get_current_user(self) -> int | None:
        return self._user_id

    def set_current_user(self, user_id: int | None) -> None:
        self.history.append(user_id)
        self._user_id = user_id
