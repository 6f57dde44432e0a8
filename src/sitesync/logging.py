"""Logging setup for the SITESYNC CLI.

Two handlers hang off the root logger:

- a Rich console handler on stderr, filtered by the ``-v``/``-q`` verbosity;
- an optional "flight recorder": a `MemoryHandler` that keeps the last N
  records at DEBUG and writes them to a log file once something at WARNING
  or above happens (or on exit, when forced).

`configure_logging` wires both from CLI options; the pieces stay separate so
tests can build them individually.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from collections.abc import Mapping
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING

import alembic
import sqlalchemy
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "sitesync"

CONSOLE_FORMAT = "%(prefix)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
FLIGHT_RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] "
    "%(levelname)s %(name)s:%(lineno)d: %(message)s"
)


class ThirdPartyPrefixFilter(logging.Filter):
    """Tag records from other libraries with their top-level package.

    ``sqlalchemy.engine.Engine`` records get ``record.prefix = "[sqlalchemy]"``;
    SITESYNC's own records get an empty prefix. Nothing is filtered out.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        top_level = record.name.split(".", 1)[0]
        record.prefix = "" if top_level == PROJECT_PREFIX else f"[{top_level}]"
        return True


def verbosity_level(verbose_count: int = 0, quiet_count: int = 0) -> int:
    """Return the console level for ``-v``/``-q`` counts, starting at WARNING."""
    level = logging.WARNING - 10 * verbose_count + 10 * quiet_count
    return max(logging.DEBUG, min(logging.CRITICAL, level))


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Return a RichHandler writing to stderr.

    Debug mode forces DEBUG, shows timestamps, logger names and source paths,
    and drops the third-party prefix.
    """
    # None disables colour, matching click-extra's --no-color
    console = Console(color_system="auto" if color else None, stderr=True)

    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    if debug_mode:
        handler.setFormatter(logging.Formatter(DEBUG_CONSOLE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handler.addFilter(ThirdPartyPrefixFilter())
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Return a flight recorder that dumps to ``path``.

    Up to ``capacity`` records are buffered; a record at ``flush_level`` or
    above writes the buffer out. The file is only created on the first flush.
    """
    file_handler = logging.FileHandler(path, mode="w", encoding="utf-8", delay=True)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FLIGHT_RECORDER_FORMAT))

    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=file_handler,
        flushOnClose=flush_on_close,
    )


def configure_logging(  # pylint: disable=too-many-arguments
    *,
    level: int,
    debug_mode: bool = False,
    color: bool = True,
    log_path: Path | None = None,
    flight_recorder_capacity: int | None = None,
    force_flush: bool = False,
    logger_levels: Mapping[str, int] | None = None,
) -> list[logging.Handler]:
    """Install the console handler (and flight recorder) on the root logger.

    The flight recorder is enabled when both ``log_path`` and
    ``flight_recorder_capacity`` are given. Per-logger levels are applied
    last, so they bound both handlers.

    Returns:
        The installed handlers, console first.
    """
    handlers: list[logging.Handler] = [
        config_console_handler(level=level, debug_mode=debug_mode, color=color)
    ]
    if log_path is not None and flight_recorder_capacity:
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush,
            )
        )

    # the root logger sees everything; each handler filters for itself
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    for name, lvl in (logger_levels or {}).items():
        logging.getLogger(name).setLevel(lvl)
    return handlers


def log_startup(  # pylint: disable=too-many-arguments
    logger: Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    log_path: Path | None,
    flight_recorder: bool,
    flight_capacity: int | None,
    force_flush_fr: bool,
    logger_levels: Mapping[str, int],
) -> None:
    """Log a one-line summary at INFO and environment diagnostics at DEBUG."""
    logger.info(
        "SITESYNC %s: console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(level),
        "ON" if flight_recorder else "OFF",
    )

    diagnostics = {
        "Python": sys.version.split()[0],
        "Platform": f"{platform.system()} {platform.release()}",
        "PID": os.getpid(),
        "CWD": Path.cwd(),
        "SQLAlchemy": sqlalchemy.__version__,
        "Alembic": alembic.__version__,
        "Handlers": [type(h).__name__ for h in handlers],
    }
    for key, value in diagnostics.items():
        logger.debug("%s: %s", key, value)

    if flight_recorder:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            log_path or "<none>",
            flight_capacity,
            force_flush_fr,
        )
    logger.debug(
        "Per-logger levels: %s",
        {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()}
        or "<none>",
    )
