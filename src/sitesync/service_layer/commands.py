"""Service-layer commands."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""


@dataclass(frozen=True)
class SyncCallables(Command):
    """Run a callables pass and enqueue what changed.

    ``force`` bypasses the context policy and the debounce lock.
    """

    force: bool = False


@dataclass(frozen=True)
class UnlockCallables(Command):
    """Clear the callables debounce lock."""


@dataclass(frozen=True)
class ResetCallables(Command):
    """Forget stored checksums, the lock and the URL scheme history."""


@dataclass(frozen=True)
class EnqueueFullSync(Command):
    """Enqueue every module's full sync actions."""

    modules: tuple[str, ...] = ()
    max_items_to_enqueue: int = 100


@dataclass(frozen=True)
class UpdateOption(Command):
    """Write an option and fire ``update_option_<name>`` if it changed."""

    name: str
    value: Any = field(default=None)


@dataclass(frozen=True)
class DeleteOption(Command):
    """Delete an option and fire ``delete_option_<name>`` if it existed."""

    name: str


@dataclass(frozen=True)
class CompleteUpgrade(Command):
    """Announce that code was installed or upgraded."""

    kind: str = "plugin"


@dataclass(frozen=True)
class SendQueue(Command):
    """Drain up to ``limit`` queued actions to the transport."""

    limit: int = 100
