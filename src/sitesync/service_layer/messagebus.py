"""Message bus routing service-layer commands to their handlers."""

import logging
from collections.abc import Callable

from sitesync.interfaces.unit_of_work import AbstractUnitOfWork

from .commands import Command

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class NoHandlerForCommand(LookupError):
    """No handler is registered for the command's type."""

    def __init__(self, cmd: Command) -> None:
        super().__init__(f"No handler found for command {type(cmd).__name__}")
        self.command = cmd


class MessageBus:
    """Dispatch commands to handlers.

    Handlers take the command as their only positional argument; their other
    dependencies (unit of work, hooks, modules, transport) are bound at
    bootstrap. The unit of work is also exposed here so entrypoints can run
    read-only queries against the same stores.

    Args:
        uow: The unit of work the handlers were bound to.
        command_handlers: Mapping of command type to handler.
    """

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        command_handlers: dict[type[Command], Callable[..., object]],
    ) -> None:
        self.uow = uow
        self._command_handlers = command_handlers

    def handle(self, cmd: Command) -> object:
        """Dispatch ``cmd`` and return whatever its handler returns.

        Raises:
            NoHandlerForCommand: If no handler is registered for ``type(cmd)``.
            Exception: Whatever the handler raises, after it is logged.
        """
        handler = self._command_handlers.get(type(cmd))
        if handler is None:
            logger.error("No handler found for command %s", type(cmd).__name__)
            raise NoHandlerForCommand(cmd)

        handler_name = self._get_handler_name(handler)
        logger.debug("Handling command %s with handler %s", cmd, handler_name)
        try:
            return handler(cmd)
        except Exception:  # pylint: disable=broad-except
            logger.exception(
                "Exception handling command %s with handler %s", cmd, handler_name
            )
            raise

    @staticmethod
    def _get_handler_name(fn: Callable[..., object]) -> str:
        if hasattr(fn, "__name__"):
            return fn.__name__
        if hasattr(fn, "func") and hasattr(fn.func, "__name__"):
            return fn.func.__name__
        return repr(fn)
