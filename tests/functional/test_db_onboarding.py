"""Functional tests for the ``sitesync db`` subcommands.

A new user points SITESYNC at an empty SQLite file, inspects it, and
upgrades the schema. Commands are run through ``click.testing.CliRunner``.
"""

import re

import pytest
from click.testing import CliRunner

from sitesync.entrypoints.cli.db import UPGRADE_SCHEMA_INSTRUCTIONS, UPGRADE_SCHEMA_WARNING
from sitesync.entrypoints.cli.helpers.app import MISSING_DB_URL_MSG
from sitesync.entrypoints.cli.main import sitesync

BASE_REVISION = "3f1c2a9d7e41"


def _normalize(s: str) -> str:
    return re.sub(r"\s+", " ", s)


@pytest.mark.parametrize(
    "cmd",
    [
        ["db", "current"],
        ["db", "history", "-i"],
        ["db", "upgrade"],
        ["option", "list"],
        ["queue", "list"],
        ["callables", "status"],
    ],
)
def test_commands_need_a_db_url(cmd, tmp_path):
    runner = CliRunner(env={"SITESYNC_DB_URL": "", "SITESYNC_LOG_PATH": str(tmp_path / "x.log")})
    result = runner.invoke(sitesync, cmd)
    assert result.exit_code == 1
    assert MISSING_DB_URL_MSG in result.output


def test_heads_needs_no_database(tmp_path):
    runner = CliRunner(env={"SITESYNC_DB_URL": "", "SITESYNC_LOG_PATH": str(tmp_path / "x.log")})
    result = runner.invoke(sitesync, ["db", "heads"])
    assert result.exit_code == 0
    assert BASE_REVISION in result.output


def test_new_user_initial_db_setup(fresh_runner: CliRunner):
    # the schema is not there yet
    result = fresh_runner.invoke(sitesync, ["db", "status"])
    assert result.exit_code == 0
    assert "Database reachable" in result.output
    assert "Backend : sqlite" in result.output
    assert "Schema  : uninitialized" in result.output
    assert UPGRADE_SCHEMA_INSTRUCTIONS in result.output

    # using the stores before upgrading points at the fix
    result = fresh_runner.invoke(sitesync, ["option", "list"])
    assert result.exit_code == 1
    assert "sitesync db upgrade" in result.output

    # a dry run only prints SQL
    result = fresh_runner.invoke(sitesync, ["db", "upgrade", "--sql"])
    assert result.exit_code == 0
    assert "CREATE TABLE sync_queue" in result.output

    # declining the prompt leaves the database alone
    result = fresh_runner.invoke(sitesync, ["db", "upgrade"], input="n\n")
    assert result.exit_code == 1
    assert _normalize(UPGRADE_SCHEMA_WARNING) in _normalize(result.output)
    result = fresh_runner.invoke(sitesync, ["db", "current"])
    assert BASE_REVISION not in result.output

    # confirming applies the migration
    result = fresh_runner.invoke(sitesync, ["db", "upgrade"], input="y\n")
    assert result.exit_code == 0
    assert "Upgrade complete!" in result.output

    result = fresh_runner.invoke(sitesync, ["db", "status"])
    assert f"Schema  : {BASE_REVISION} (up to date)" in result.output

    result = fresh_runner.invoke(sitesync, ["db", "history", "-i"])
    assert f"{BASE_REVISION} (head) (current)" in result.output


def test_upgrade_force_skips_prompt(fresh_runner: CliRunner):
    result = fresh_runner.invoke(sitesync, ["db", "upgrade", "--force"])
    assert result.exit_code == 0
    assert UPGRADE_SCHEMA_WARNING not in result.output


def test_invalid_url(tmp_path):
    runner = CliRunner(
        env={"SITESYNC_DB_URL": "not a url", "SITESYNC_LOG_PATH": str(tmp_path / "x.log")}
    )
    result = runner.invoke(sitesync, ["db", "current"])
    assert result.exit_code == 1
    assert "not a valid SQLAlchemy database URL" in result.output
