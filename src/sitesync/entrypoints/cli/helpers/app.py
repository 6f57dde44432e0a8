"""Per-invocation application state for the CLI.

The top-level group stores a `CliState` on the click context; subcommands
call `get_app` to bootstrap lazily, so ``--help`` and the ``db`` group never
need a configured database.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import click

from sitesync import config
from sitesync.bootstrap import AppContainer, bootstrap
from sitesync.bootstrap.bootstrap import build_context
from sitesync.domain.errors import DomainError
from sitesync.interfaces.errors import StoreError, StoreUnavailableError
from sitesync.interfaces.sync_queue import SyncQueueError
from sitesync.interfaces.transport import TransportError
from sitesync.service_layer.handlers import UnknownModuleError

MISSING_DB_URL_MSG = (
    "SITESYNC_DB_URL is not set.\n\n"
    "Set it before running this command, e.g.:\n"
    "  export SITESYNC_DB_URL='sqlite:///sitesync.db'\n"
    "  or in PowerShell:\n"
    "  $env:SITESYNC_DB_URL='sqlite:///sitesync.db'"
)

STORE_ERROR_HINT = "Is the schema up to date? Run 'sitesync db upgrade'."


@dataclass
class CliState:
    """Options of the top-level group that subcommands need."""

    admin: bool = False
    cron: bool = False
    multisite: bool = False
    app: AppContainer | None = None


def get_app(ctx: click.Context) -> AppContainer:
    """Return the application for this invocation, bootstrapping it once."""
    state = ctx.ensure_object(CliState)
    if state.app is None:
        try:
            state.app = bootstrap(
                context=build_context(
                    admin=state.admin, cron=state.cron, multisite=state.multisite
                )
            )
        except config.DatabaseUrlNotSetError as e:
            raise click.ClickException(MISSING_DB_URL_MSG) from e
        except config.InvalidSettingError as e:
            raise click.ClickException(str(e)) from e
    return state.app


@contextmanager
def cli_errors() -> Iterator[None]:
    """Turn service-layer failures into `click.ClickException`."""
    try:
        yield
    except StoreUnavailableError as e:
        raise click.ClickException(f"{e}\n{STORE_ERROR_HINT}") from e
    except (
        StoreError,
        DomainError,
        SyncQueueError,
        TransportError,
        UnknownModuleError,
    ) as e:
        raise click.ClickException(str(e)) from e
