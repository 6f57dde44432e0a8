"""``sitesync queue``: inspect and send the sync queue.

``queue send`` writes one JSON document per action to stdout; status lines
go to stderr.
"""

from __future__ import annotations

import json

import click
import click_extra as clickx

from sitesync.service_layer import commands

from .helpers import cli_errors, get_app, info, success, warn


@click.group(cls=clickx.ExtraGroup)
def queue() -> None:
    """Sync queue commands."""


@queue.command("list")
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(min=1),
    default=20,
    show_default=True,
    help="Show at most this many items, oldest first.",
)
@click.pass_context
def list_queue(ctx: click.Context, limit: int) -> None:
    """List queued actions."""
    app = get_app(ctx)
    with cli_errors(), app.uow as uow:
        items = uow.queue.peek(limit)
        total = uow.queue.size()

    if not items:
        info("Queue is empty.")
        return
    for item in items:
        args = json.dumps(item.args, sort_keys=True)
        click.echo(
            f"{item.item_id}  {item.enqueued_at.isoformat(timespec='seconds')}  "
            f"{item.action}  {args}"
        )
    if total > len(items):
        info(f"{total - len(items)} more item(s) not shown.")


@queue.command()
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(min=1),
    default=100,
    show_default=True,
    help="Send at most this many items.",
)
@click.pass_context
def send(ctx: click.Context, limit: int) -> None:
    """Run the before-send hooks and send queued actions to stdout."""
    app = get_app(ctx)
    with cli_errors():
        result = app.message_bus.handle(commands.SendQueue(limit=limit))
    success(f"Sent {result.sent} action(s).")
    if result.skipped:
        info(f"Dropped {result.skipped} action(s) filtered out before sending.")
    if result.remaining:
        warn(f"{result.remaining} action(s) still queued; run 'sitesync queue send' again.")


@queue.command()
@click.option("--yes", "-y", is_flag=True, help="Clear without confirmation.")
@click.pass_context
def clear(ctx: click.Context, yes: bool) -> None:
    """Drop every queued action without sending it."""
    if not yes:
        click.confirm("Drop every queued action?", abort=True, err=True)
    app = get_app(ctx)
    with cli_errors(), app.uow as uow:
        removed = uow.queue.clear()
        uow.commit()
    success(f"Removed {removed} action(s).")
