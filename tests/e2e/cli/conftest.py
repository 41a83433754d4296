"""Fixtures and test helpers for end-to-end CLI tests.

Provides a test-only `log-demo` Click command that emits log messages on a
project logger and a third-party logger, fixtures to register that command,
obtain a CliRunner and run tests within an isolated filesystem, and a factory
that writes scenario files.
"""

import logging
import textwrap
from collections.abc import Callable
from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from gerbil.entrypoints.cli.main import gerbil

# pylint: disable=redefined-outer-name


@click.command()
def log_demo():
    """Emit representative log messages for CLI/flight-recorder tests."""
    logger = logging.getLogger("gerbil.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    third_party_logger = logging.getLogger("some.thirdparty")
    third_party_logger.debug("This is a debug-level third-party test message.")
    third_party_logger.info("This is an info-level third-party test message.")
    third_party_logger.warning("This is a warning-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


def _remove_command_everywhere(group, name: str) -> None:
    """Remove a command from a Click group and any section registries it keeps."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Register the 'log-demo' command on `gerbil` for the duration of a test."""
    gerbil.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(gerbil, "log-demo")


@pytest.fixture
def runner():
    """Return a Click CliRunner for invoking CLI commands in tests."""
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Provide an isolated filesystem context for tests using CliRunner."""
    with runner.isolated_filesystem():
        yield


@pytest.fixture
def write_scenario(fs) -> Callable[[str, str], Path]:
    """Factory fixture: write a scenario file into the isolated filesystem.

    The body is dedented and prefixed with ``from gerbil import scenario``.
    """

    def _write(name: str, body: str) -> Path:
        path = Path(name)
        path.write_text(
            "from gerbil import scenario\n\n" + textwrap.dedent(body),
            encoding="utf-8",
        )
        return path

    return _write
