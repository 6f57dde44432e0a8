"""Configuration utilities for SITESYNC.

This module centralizes small helpers and constants related to application configuration.
"""

import os
import sys
from importlib.resources import files
from typing import TextIO

from alembic.config import Config

ALEMBIC_URL_KEY = "sqlalchemy.url"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION_KEY = "script_location"  # pragma: no mutate

DB_URL_ENV = "SITESYNC_DB_URL"
CALLABLES_WAIT_TIME_ENV = "SITESYNC_CALLABLES_WAIT_TIME"

#: Seconds a sync pass locks out the next ordinary pass.
DEFAULT_CALLABLES_WAIT_TIME = 5 * 60


class DatabaseUrlNotSetError(Exception):
    """Raised when the SITESYNC_DB_URL environment variable is not set."""


class InvalidSettingError(ValueError):
    """Raised when a setting read from the environment cannot be parsed."""


def get_db_url() -> str:
    """Get the database URL from the environment.

    Returns:
        The value of the `SITESYNC_DB_URL` environment variable.

    Raises:
        DatabaseUrlNotSetError: If `SITESYNC_DB_URL` is not set.
    """
    if not (url := os.environ.get(DB_URL_ENV)):
        raise DatabaseUrlNotSetError
    return url


def get_callables_wait_time() -> int:
    """Get the callables debounce window (seconds) from the environment.

    Falls back to `DEFAULT_CALLABLES_WAIT_TIME` when the variable is unset or empty.

    Raises:
        InvalidSettingError: If the value is not a non-negative integer.
    """
    if not (raw := os.environ.get(CALLABLES_WAIT_TIME_ENV, "").strip()):
        return DEFAULT_CALLABLES_WAIT_TIME
    try:
        seconds = int(raw)
    except ValueError as e:
        raise InvalidSettingError(
            f"{CALLABLES_WAIT_TIME_ENV} must be an integer, got {raw!r}"
        ) from e
    if seconds < 0:
        raise InvalidSettingError(f"{CALLABLES_WAIT_TIME_ENV} must be >= 0")
    return seconds


def build_alembic_config(
    db_url: str | None = None, stdout: TextIO = sys.stdout
) -> Config:
    """Build an Alembic `Config` object for SITESYNC's migrations.

    Sets only Alembic "main" options:
    - `sqlalchemy.url` → the database URL you pass
    - `script_location` → SITESYNC's packaged Alembic scripts

    Args:
        db_url: SQLAlchemy database URL (e.g., `sqlite:///:memory:`). Can be `None`
            (default) only in contexts where Alembic won't need to connect to the DB.
        stdout: Text stream Alembic will write status lines to. Defaults to
            `sys.stdout`; override in tests to capture output.

    Returns:
        An `alembic.config.Config` pointing to SITESYNC's migration scripts.
    """
    cfg = Config(stdout=stdout)
    if db_url is not None:
        cfg.set_main_option(ALEMBIC_URL_KEY, db_url)
    cfg.set_main_option(
        ALEMBIC_SCRIPT_LOCATION_KEY,
        str(files("sitesync.adapters.db.alembic")),
    )
    return cfg
