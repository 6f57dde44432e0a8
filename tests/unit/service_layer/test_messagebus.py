"""Unit tests for the MessageBus."""

from dataclasses import dataclass
from functools import partial

import pytest

from sitesync.adapters.unit_of_work import InMemoryUnitOfWork
from sitesync.service_layer.commands import Command, SyncCallables
from sitesync.service_layer.messagebus import MessageBus, NoHandlerForCommand

# pylint: disable=unused-argument, too-few-public-methods


@dataclass(frozen=True)
class Ping(Command):
    """A fake command."""

    n: int = 0


def messages(records, level: str) -> list[str]:
    return [rec.getMessage() for rec in records if rec.levelname == level]


def test_dispatches_and_returns_handler_result(caplog):
    """The handler for the command's type runs once and its result comes back."""
    calls = []

    def handle_ping(cmd: Ping) -> int:
        calls.append(cmd)
        return cmd.n * 2

    bus = MessageBus(InMemoryUnitOfWork(), command_handlers={Ping: handle_ping})

    with caplog.at_level("DEBUG"):
        assert bus.handle(Ping(21)) == 42

    assert calls == [Ping(21)]
    assert "Handling command Ping(n=21) with handler handle_ping" in messages(
        caplog.records, "DEBUG"
    )


def test_missing_handler_raises_and_logs(caplog):
    """Unregistered command types raise NoHandlerForCommand."""
    bus = MessageBus(InMemoryUnitOfWork(), command_handlers={})

    with pytest.raises(NoHandlerForCommand, match="SyncCallables") as excinfo:
        bus.handle(SyncCallables())

    assert excinfo.value.command == SyncCallables()
    assert "No handler found for command SyncCallables" in messages(
        caplog.records, "ERROR"
    )


def test_handler_exception_is_logged_and_reraised(caplog):
    """Handler failures propagate after being logged with a traceback."""

    def fail(cmd: Ping) -> None:
        raise ValueError("nope")

    bus = MessageBus(InMemoryUnitOfWork(), command_handlers={Ping: fail})

    with pytest.raises(ValueError, match="nope"):
        bus.handle(Ping())

    [record] = [r for r in caplog.records if r.levelname == "ERROR"]
    assert record.exc_info is not None
    assert "with handler fail" in record.getMessage()


def test_partial_handler_name_is_resolved(caplog):
    """functools.partial handlers are logged by their function's name."""

    def handle(cmd: Ping, extra: int) -> int:
        return extra

    bus = MessageBus(
        InMemoryUnitOfWork(), command_handlers={Ping: partial(handle, extra=5)}
    )

    with caplog.at_level("DEBUG"):
        assert bus.handle(Ping()) == 5

    assert any("with handler handle" in m for m in messages(caplog.records, "DEBUG"))
