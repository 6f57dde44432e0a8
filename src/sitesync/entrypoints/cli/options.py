"""``sitesync option``: read and write site options.

Writes go through the service layer so the ``update_option_<name>`` and
``delete_option_<name>`` hooks fire (changing ``home`` or ``siteurl``, for
example, unlocks the callables sync).
"""

from __future__ import annotations

import json

import click
import click_extra as clickx

from sitesync.service_layer import commands

from .helpers import cli_errors, get_app, info, success


def _parse_value(raw: str, as_json: bool) -> object:
    if not as_json:
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e.msg}", param_hint="VALUE") from e


@click.group(cls=clickx.ExtraGroup)
def option() -> None:
    """Site option commands."""


@option.command("get")
@click.argument("name")
@click.pass_context
def get_option(ctx: click.Context, name: str) -> None:
    """Print the value of option NAME as JSON."""
    app = get_app(ctx)
    with cli_errors(), app.uow as uow:
        if not uow.options.exists(name):
            raise click.ClickException(f"Option {name!r} does not exist.")
        value = uow.options.get(name)
    click.echo(json.dumps(value, indent=2, sort_keys=True))


@option.command("list")
@click.pass_context
def list_options(ctx: click.Context) -> None:
    """Print every option name."""
    app = get_app(ctx)
    with cli_errors(), app.uow as uow:
        names = uow.options.names()
    for name in names:
        click.echo(name)


@option.command("set")
@click.argument("name")
@click.argument("value")
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Parse VALUE as JSON instead of storing it as a string.",
)
@click.pass_context
def set_option(ctx: click.Context, name: str, value: str, as_json: bool) -> None:
    """Set option NAME to VALUE."""
    parsed = _parse_value(value, as_json)
    app = get_app(ctx)
    with cli_errors():
        changed = app.message_bus.handle(commands.UpdateOption(name=name, value=parsed))
    if changed:
        success(f"Option {name!r} updated.")
    else:
        info(f"Option {name!r} unchanged.")


@option.command("delete")
@click.argument("name")
@click.pass_context
def delete_option(ctx: click.Context, name: str) -> None:
    """Delete option NAME."""
    app = get_app(ctx)
    with cli_errors():
        deleted = app.message_bus.handle(commands.DeleteOption(name=name))
    if deleted:
        success(f"Option {name!r} deleted.")
    else:
        info(f"Option {name!r} did not exist.")
