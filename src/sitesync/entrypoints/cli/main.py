"""SITESYNC CLI entry point.

Defines the top-level ``sitesync`` command (via Click-Extra) and registers
the command groups:

- ``sitesync db``: database schema management (upgrade/current/heads/history/status).
- ``sitesync callables``: run, unlock, reset and inspect callables syncs.
- ``sitesync option``: read and write site options (firing the option hooks).
- ``sitesync queue``: inspect and send the sync queue.

The ``--admin``/``--cron``/``--multisite`` flags describe the execution
context that the sync modules consult.

Examples
    $ sitesync --version
    $ sitesync db upgrade
    $ sitesync --admin callables sync
    $ sitesync queue send
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from sitesync import __version__
from sitesync.logging import configure_logging, log_startup, verbosity_level

from .callables import callables as callables_group
from .db import db as db_group
from .helpers import CliState, hyperlink
from .helpers.log_level_parser import parse_log_level
from .options import option as option_group
from .queue import queue as queue_group

logger = logging.getLogger(__name__)


HELP = """SITESYNC command-line interface.

    SITESYNC tracks computed site state (home URL, active modules, plugins,
    timezone, ...) and queues the values that changed since the last sync for
    delivery to a remote event sink.
    """


EPILOG = "\b\n" + "\n".join(
    [
        f"{click.style('Environment:', fg='blue', bold=True, underline=True)}",
        "  SITESYNC_DB_URL               database holding options, transients and the queue",
        "  SITESYNC_CALLABLES_WAIT_TIME  seconds between callables syncs (default 300)",
        f"{click.style('See Also:', fg='blue', bold=True, underline=True)}",
        "  Alembic: " + hyperlink("https://alembic.sqlalchemy.org/"),
    ]
)


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
    epilog=EPILOG,
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help="Raise console verbosity above WARNING by one level per repetition.",
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help="Lower console verbosity below WARNING by one level per repetition.",
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (tracebacks with locals, file paths in log lines).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to log file (overrides default flight recorder path).",
    default=Path(user_log_dir("sitesync", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar="SITESYNC_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=click.IntRange(min=1),
    default=2000,
    hidden=True,
    envvar="SITESYNC_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Keep the last N log records (SITESYNC_FLIGHT_RECORDER_CAPACITY) at DEBUG "
        "granularity and write them to --log-path when a WARNING/ERROR occurs, or "
        "on exit with --force-flush. Console verbosity is unchanged."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help="Write the flight recorder buffer to --log-path on exit even without errors.",
    default=False,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set the minimum LEVEL of the logger NAME (NAME=LEVEL). Applies to both "
        "console and flight recorder. Repeatable (e.g. -L sqlalchemy=INFO) or "
        "via SITESYNC_LOGGER_LEVELS (comma/space list)."
    ),
    envvar="SITESYNC_LOGGER_LEVELS",
    default=("sqlalchemy=WARNING", "alembic=WARNING"),
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--admin/--no-admin",
    default=False,
    show_envvar=True,
    help="Run as an interactive admin request (callables syncs are allowed).",
)
@click.option(
    "--cron/--no-cron",
    default=False,
    show_envvar=True,
    help="Run as a background job (only always-send callables are checked).",
)
@click.option(
    "--multisite/--no-multisite",
    default=False,
    show_envvar=True,
    help="Treat the site as part of a multisite network.",
)
@clickx.pass_context
def sitesync(  # pylint: disable=too-many-arguments, too-many-locals, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
    admin: bool,
    cron: bool,
    multisite: bool,
) -> None:
    """SITESYNC command-line interface."""

    level = verbosity_level(verbose_count, quiet_count)
    handlers = configure_logging(
        level=level,
        debug_mode=debug,
        color=ctx.color is not False,
        log_path=log_path if flight_recorder else None,
        flight_recorder_capacity=flight_recorder_capacity,
        force_flush=force_flush_flight_recorder,
        logger_levels=logger_levels,
    )

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        force_flush_fr=force_flush_flight_recorder,
        logger_levels=logger_levels,
    )

    ctx.obj = CliState(admin=admin, cron=cron, multisite=multisite)
    ctx.call_on_close(logging.shutdown)


sitesync.add_command(db_group)
sitesync.add_command(callables_group)
sitesync.add_command(option_group)
sitesync.add_command(queue_group)
