"""Fixtures for CLI workflow tests.

Each test gets a `CliRunner` whose environment points SITESYNC at its own
SQLite file and keeps the flight recorder log inside the test's temp dir.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from sitesync.entrypoints.cli.main import sitesync

# pylint: disable=redefined-outer-name

Invoke = Callable[..., Result]


def cli_env(db_url: str, log_dir: Path) -> dict[str, str]:
    return {
        "SITESYNC_DB_URL": db_url,
        "SITESYNC_LOG_PATH": str(log_dir / "latest.log"),
        "SITESYNC_CALLABLES_WAIT_TIME": "",
    }


@pytest.fixture
def runner(migrated_sqlite_url: str, tmp_path: Path) -> CliRunner:
    """A runner against a migrated database."""
    return CliRunner(env=cli_env(migrated_sqlite_url, tmp_path))


@pytest.fixture
def fresh_runner(sqlite_url: str, tmp_path: Path) -> CliRunner:
    """A runner against a database no migration has touched yet."""
    return CliRunner(env=cli_env(sqlite_url, tmp_path))


@pytest.fixture
def invoke(runner: CliRunner) -> Invoke:
    """Run ``sitesync`` with ``args`` and assert it succeeded."""

    def run(args: Sequence[str], input: str | None = None) -> Result:  # pylint: disable=redefined-builtin
        result = runner.invoke(sitesync, list(args), input=input)
        assert result.exit_code == 0, result.output
        return result

    return run
