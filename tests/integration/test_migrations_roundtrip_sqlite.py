"""Alembic round-trip smoke test for SQLite.

Runs *upgrade head → downgrade base* against a temporary SQLite file and
checks that the site state tables appear and disappear.
"""

from __future__ import annotations

from pathlib import Path

from alembic import command
from sqlalchemy import inspect

from sitesync import config
from sitesync.adapters.db.engine import make_engine

TABLES = {"options", "transients", "sync_queue"}


def _tables(url: str) -> set[str]:
    engine = make_engine(url)
    try:
        return set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


def test_upgrade_then_downgrade(tmp_path: Path):
    url = f"sqlite:///{tmp_path / 'sitesync.db'}"

    command.upgrade(config.build_alembic_config(url), "head")
    assert TABLES <= _tables(url)

    command.downgrade(config.build_alembic_config(url), "base")
    assert not TABLES & _tables(url)


def test_migrated_schema_matches_metadata(migrated_sqlite_url: str):
    """The migration and the declared tables agree on columns."""
    from sitesync.adapters.db.metadata import metadata  # pylint: disable=import-outside-toplevel

    engine = make_engine(migrated_sqlite_url)
    try:
        inspector = inspect(engine)
        for name in TABLES:
            reflected = {c["name"] for c in inspector.get_columns(name)}
            assert reflected == set(metadata.tables[name].columns.keys()), name
    finally:
        engine.dispose()
