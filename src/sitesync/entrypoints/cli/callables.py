"""``sitesync callables``: run and inspect callables syncs.

Passes honour the execution context given to the top-level command:
``sitesync --admin callables sync`` checks every callable,
``sitesync --cron callables sync`` only the always-send ones, and without
either flag nothing is checked unless ``--force`` is given.
"""

from __future__ import annotations

import json

import click
import click_extra as clickx

from sitesync.service_layer import commands
from sitesync.service_layer.handlers import get_callables_module
from sitesync.service_layer.modules.callables import CALLABLES_CHECKSUM_OPTION_NAME

from .helpers import cli_errors, get_app, info, success, warn


@click.group(cls=clickx.ExtraGroup)
def callables() -> None:
    """Callables sync commands."""


@callables.command()
@click.option(
    "--force",
    is_flag=True,
    help="Check every callable regardless of context and debounce lock.",
)
@click.pass_context
def sync(ctx: click.Context, force: bool) -> None:
    """Check callables and enqueue the ones that changed."""
    app = get_app(ctx)
    with cli_errors():
        enqueued = app.message_bus.handle(commands.SyncCallables(force=force))
    if enqueued:
        success(f"Enqueued {enqueued} changed callable(s).")
    else:
        info("No callables enqueued.")


@callables.command()
@click.pass_context
def unlock(ctx: click.Context) -> None:
    """Clear the debounce lock so the next sync runs right away."""
    app = get_app(ctx)
    with cli_errors():
        app.message_bus.handle(commands.UnlockCallables())
    success("Callables sync unlocked.")


@callables.command()
@click.option("--yes", "-y", is_flag=True, help="Reset without confirmation.")
@click.pass_context
def reset(ctx: click.Context, yes: bool) -> None:
    """Forget stored checksums so every callable is sent again."""
    if not yes:
        warn("Every callable will be re-sent on the next sync.")
        click.confirm("Are you sure you want to proceed?", abort=True, err=True)
    app = get_app(ctx)
    with cli_errors():
        app.message_bus.handle(commands.ResetCallables())
    success("Callables state reset.")


@callables.command("full-sync")
@click.option(
    "--module",
    "-m",
    "module_names",
    multiple=True,
    help="Only enqueue this module's full sync (repeatable). Defaults to all.",
)
@click.pass_context
def full_sync(ctx: click.Context, module_names: tuple[str, ...]) -> None:
    """Enqueue a full sync; values are expanded when the queue is sent."""
    app = get_app(ctx)
    with cli_errors():
        status = app.message_bus.handle(commands.EnqueueFullSync(modules=module_names))
    for name, enqueued in status.enqueued.items():
        state = "done" if status.finished[name] else "in progress"
        click.echo(f"{name}: {enqueued} action(s) enqueued ({state})")
    success(f"Full sync enqueued: {status.total_enqueued} action(s).")


@callables.command()
@click.option(
    "--values",
    "show_values",
    is_flag=True,
    help="Also evaluate and print every callable (nothing is stored or sent).",
)
@click.pass_context
def status(ctx: click.Context, show_values: bool) -> None:
    """Show the debounce lock, tracked checksums and queue size."""
    app = get_app(ctx)
    module = get_callables_module(app.modules)
    with cli_errors(), app.uow as uow:
        locked = module.is_locked()
        checksums = uow.options.get_raw(CALLABLES_CHECKSUM_OPTION_NAME, {})
        queued = uow.queue.size()
        values = module.get_all_callables() if show_values else None
        # leaving the block rolls back the URL history writes made by --values

    click.echo(f"Lock    : {'active' if locked else 'inactive'}")
    tracked = len(checksums) if isinstance(checksums, dict) else 0
    click.echo(f"Tracked : {tracked} callable(s)")
    click.echo(f"Queue   : {queued} item(s)")
    click.echo(f"Wait    : {module.wait_time}s")
    if values is not None:
        click.echo(json.dumps(values, indent=2, sort_keys=True, default=str))


@callables.command("code-changed")
@click.option(
    "--kind",
    type=click.Choice(["plugin", "theme", "core"]),
    default="plugin",
    show_default=True,
    help="What was installed or upgraded.",
)
@click.pass_context
def code_changed(ctx: click.Context, kind: str) -> None:
    """Report an install or upgrade; clears the callables lock."""
    app = get_app(ctx)
    with cli_errors():
        app.message_bus.handle(commands.CompleteUpgrade(kind=kind))
    success(f"Recorded {kind} upgrade; callables unlocked.")
