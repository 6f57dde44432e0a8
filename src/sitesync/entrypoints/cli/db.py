"""SITESYNC DB CLI: thin wrappers over Alembic.

Human-oriented notices go to **stderr** and Alembic's own output to
**stdout**. Schema-changing commands ask for confirmation unless ``--force``
is given. ``SITESYNC_DB_URL`` must be set for commands that connect.
"""

from __future__ import annotations

import sys
from enum import Enum
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import text
from sqlalchemy.exc import ArgumentError, OperationalError

from sitesync import config
from sitesync.adapters.db.engine import make_engine

from .helpers import error, sanitize_url, success, warn
from .helpers.app import MISSING_DB_URL_MSG

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

INVALID_URL_FORMAT_MSG = (
    "The value of SITESYNC_DB_URL is not a valid SQLAlchemy database URL."
)

CANNOT_CONNECT_MSG = (
    "SITESYNC_DB_URL is set, but the database is not reachable.\n"
    "Please ensure the database is running and the URL is correct."
)

UPGRADE_SCHEMA_WARNING = (
    "This will upgrade the database schema to the latest version.\n"
    "Please ensure you have a backup before proceeding."
)

UPGRADE_SCHEMA_INSTRUCTIONS = "Run 'sitesync db upgrade' to update the schema."


class MigrationStatus(Enum):
    """Migration status of the database schema."""

    UP_TO_DATE = "up to date"
    OUT_OF_DATE = "out of date"
    UNINITIALIZED = "uninitialized"


def _check_connection(url: str) -> None:
    engine = make_engine(url)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))  # pragma: no mutate
    finally:
        engine.dispose()


def _get_url() -> str:
    try:
        url = config.get_db_url()
    except config.DatabaseUrlNotSetError as e:
        raise click.ClickException(MISSING_DB_URL_MSG) from e
    try:
        _check_connection(url)
    except OperationalError as e:
        raise click.ClickException(CANNOT_CONNECT_MSG) from e
    except ArgumentError as e:
        raise click.ClickException(INVALID_URL_FORMAT_MSG) from e
    return url


def _get_current_revision(engine: Engine) -> str | None:
    with engine.connect() as conn:
        return MigrationContext.configure(conn).get_current_revision()


def _get_head_revision(cfg: Config) -> str | None:
    heads = ScriptDirectory.from_config(cfg).get_heads()
    return heads[0] if heads else None


def get_migration_status(engine: Engine) -> tuple[str | None, MigrationStatus]:
    """Return the current revision of ``engine``'s database and its status."""
    cfg = config.build_alembic_config(db_url=str(engine.url))
    rev = _get_current_revision(engine)
    if rev is None:
        return None, MigrationStatus.UNINITIALIZED
    if rev == _get_head_revision(cfg):
        return rev, MigrationStatus.UP_TO_DATE
    return rev, MigrationStatus.OUT_OF_DATE


@click.group(cls=clickx.ExtraGroup)
def db() -> None:
    """Database management commands."""


@db.command()
@click.option("--verbose", "-v", is_flag=True, help="Show alembic's more verbose output.")
def current(verbose: bool) -> None:
    """Show current DB revision."""
    cfg = config.build_alembic_config(db_url=_get_url(), stdout=sys.stdout)
    command.current(cfg, verbose=verbose)


@db.command()
@click.option("--verbose", "-v", is_flag=True, help="Show alembic's more verbose output.")
def heads(verbose: bool) -> None:
    """Show available head revisions."""
    cfg = config.build_alembic_config(stdout=sys.stdout)
    command.heads(cfg, verbose=verbose)


@db.command()
@click.option("--verbose", "-v", is_flag=True, help="Show alembic's more verbose output.")
@click.option(
    "--indicate-current",
    "-i",
    is_flag=True,
    help="Indicate the current revision.",
)
def history(verbose: bool, indicate_current: bool) -> None:
    """Show revision history."""
    url = _get_url() if indicate_current else None
    cfg = config.build_alembic_config(db_url=url, stdout=sys.stdout)
    command.history(cfg, verbose=verbose, indicate_current=indicate_current)


@db.command()
@click.option("--sql", is_flag=True, help="Generate SQL without executing.")
@click.option("--force", is_flag=True, help="Upgrade without confirmation.")
def upgrade(sql: bool, force: bool) -> None:
    """Upgrade the database to the head revision."""
    url = _get_url()
    cfg = config.build_alembic_config(db_url=url, stdout=sys.stdout)
    if not force and not sql:
        warn(UPGRADE_SCHEMA_WARNING)
        click.secho(f"db: {click.style(sanitize_url(url), underline=True)}", err=True)
        click.confirm("Are you sure you want to proceed?", abort=True, err=True)
    command.upgrade(cfg, revision="head", sql=sql)
    success("Upgrade complete!")


@db.command()
def status() -> None:
    """Show database connection and schema status."""
    try:
        engine = make_engine(_get_url())
    except click.ClickException as e:
        error("Cannot connect to database")
        click.echo(e.format_message())
        return

    success("Database reachable")
    click.echo(f"Backend : {engine.dialect.name}")
    click.echo(f"URL     : {sanitize_url(str(engine.url))}")
    try:
        rev, migration_status = get_migration_status(engine)
    finally:
        engine.dispose()
    message = (
        f"{rev} ({migration_status.value})" if rev is not None else migration_status.value
    )
    click.echo(f"Schema  : {message}")

    if migration_status != MigrationStatus.UP_TO_DATE:
        warn(UPGRADE_SCHEMA_INSTRUCTIONS)
