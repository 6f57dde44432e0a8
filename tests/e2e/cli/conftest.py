"""Fixtures for end-to-end CLI logging tests.

A test-only ``log-demo`` command is attached to the ``sitesync`` group for
the duration of a test. It logs at every level on a SITESYNC logger and on
a third-party logger, so verbosity, per-logger levels and the flight
recorder can be checked from the outside.
"""

import logging

import click
import pytest
from click.testing import CliRunner

from sitesync.entrypoints.cli.main import sitesync

# pylint: disable=redefined-outer-name


@click.command()
def log_demo():
    """Log one message per level on ``sitesync.demo`` and ``some.thirdparty``."""
    logger = logging.getLogger("sitesync.demo")
    third_party_logger = logging.getLogger("some.thirdparty")

    logger.debug("demo debug message")
    logger.info("demo info message")
    third_party_logger.debug("third-party debug message")
    third_party_logger.info("third-party info message")
    logger.warning("demo warning message")
    logger.error("demo error message")
    logger.critical("demo critical message")
    logger.debug("demo trailing debug message")


@pytest.fixture
def registered_log_demo():
    """Attach ``log-demo`` to the top-level group, then detach it."""
    sitesync.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        sitesync.commands.pop("log-demo", None)
        # cloup also tracks the command in its default help section.
        sitesync._default_section.commands.pop("log-demo", None)  # pylint: disable=protected-access


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Run the test inside an isolated working directory."""
    with runner.isolated_filesystem():
        yield
