"""Bootstrap the message bus, hooks and sync modules."""

from __future__ import annotations

import inspect
import logging
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sitesync import config
from sitesync.adapters.clock import SystemClock
from sitesync.adapters.context import InMemoryIdentitySwitcher, StaticExecutionContext
from sitesync.adapters.db.engine import make_engine
from sitesync.adapters.transport import JsonLinesTransport
from sitesync.adapters.unit_of_work import SqlAlchemyUnitOfWork
from sitesync.service_layer.handlers import COMMAND_HANDLERS, UnknownModuleError
from sitesync.service_layer.hooks import Hooks
from sitesync.service_layer.listener import Listener
from sitesync.service_layer.messagebus import MessageBus
from sitesync.service_layer.modules import Callables, Module

if TYPE_CHECKING:
    from sitesync.interfaces.clock import Clock
    from sitesync.interfaces.context import ExecutionContext, IdentitySwitcher
    from sitesync.interfaces.transport import Transport
    from sitesync.interfaces.unit_of_work import AbstractUnitOfWork
    from sitesync.service_layer.commands import Command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContainer:
    """A class to hold application wiring constants."""

    message_bus: MessageBus
    hooks: Hooks
    modules: tuple[Module, ...]

    @property
    def uow(self) -> AbstractUnitOfWork:
        return self.message_bus.uow

    def get_module(self, name: str) -> Module:
        """Return the module called ``name``."""
        for module in self.modules:
            if module.name() == name:
                return module
        raise UnknownModuleError(name)


def build_write_uow(url: str, clock: Clock | None = None) -> AbstractUnitOfWork:
    """Build a new unit of work for write operations."""
    engine = make_engine(url)
    return SqlAlchemyUnitOfWork(engine, clock=clock)


def build_context(
    *, admin: bool = False, cron: bool = False, multisite: bool = False
) -> ExecutionContext:
    """Build the execution context the modules consult."""
    return StaticExecutionContext(admin=admin, doing_cron=cron, multisite=multisite)


def build_modules(  # pylint: disable=too-many-arguments
    uow: AbstractUnitOfWork,
    hooks: Hooks,
    *,
    context: ExecutionContext,
    identity: IdentitySwitcher,
    clock: Clock,
    wait_time: int,
) -> tuple[Module, ...]:
    """Build the sync modules, set their defaults and register their hooks."""
    modules: tuple[Module, ...] = (
        Callables(
            uow,
            hooks,
            context=context,
            identity=identity,
            clock=clock,
            wait_time=wait_time,
        ),
    )
    for module in modules:
        module.set_defaults()
        module.init_before_send()

    Listener(uow, hooks).init_modules(modules)
    logger.debug("Registered sync modules: %s", ", ".join(m.name() for m in modules))
    return modules


def build_message_bus(
    uow: AbstractUnitOfWork,
    command_handlers: dict[type[Command], Callable[..., Any]],
    dependencies: Mapping[str, object] | None = None,
) -> MessageBus:
    """Build a message bus with injected dependencies.

    ``uow`` is always available to handlers; ``dependencies`` adds more
    (e.g. ``hooks``, ``modules``, ``transport``).
    """
    dependencies = {"uow": uow, **(dependencies or {})}
    injected_command_handlers = {
        command_type: inject_dependencies(handler, dependencies)
        for command_type, handler in command_handlers.items()
    }

    return MessageBus(
        uow,
        command_handlers=injected_command_handlers,
    )


def bootstrap(  # pylint: disable=too-many-arguments
    *,
    uow: AbstractUnitOfWork | None = None,
    context: ExecutionContext | None = None,
    identity: IdentitySwitcher | None = None,
    clock: Clock | None = None,
    transport: Transport | None = None,
    wait_time: int | None = None,
) -> AppContainer:
    """Bootstrap the message bus, hooks and sync modules.

    Anything not supplied is built from configuration: the unit of work from
    ``SITESYNC_DB_URL``, the wait time from ``SITESYNC_CALLABLES_WAIT_TIME``,
    and a JSON-lines transport on stdout.
    """
    clock = clock if clock is not None else SystemClock()
    uow = uow if uow is not None else build_write_uow(config.get_db_url(), clock)
    context = context if context is not None else StaticExecutionContext()
    identity = identity if identity is not None else InMemoryIdentitySwitcher()
    transport = transport if transport is not None else JsonLinesTransport(sys.stdout)
    if wait_time is None:
        wait_time = config.get_callables_wait_time()

    hooks = Hooks()
    modules = build_modules(
        uow,
        hooks,
        context=context,
        identity=identity,
        clock=clock,
        wait_time=wait_time,
    )
    message_bus = build_message_bus(
        uow,
        COMMAND_HANDLERS,
        {"hooks": hooks, "modules": modules, "transport": transport},
    )

    return AppContainer(message_bus=message_bus, hooks=hooks, modules=modules)


def inject_dependencies(
    handler: Callable, dependencies: Mapping[str, object]
) -> Callable:
    """Inject dependencies into a handler function based on its parameters."""
    params = inspect.signature(handler).parameters
    deps = {
        name: dependency for name, dependency in dependencies.items() if name in params
    }

    def injected(message):
        return handler(message, **deps)

    injected.__name__ = getattr(handler, "__name__", repr(handler))
    return injected
