"""``gerbil run`` — execute scenario files.

A scenario file is a plain Python script that calls :func:`gerbil.scenario`
for each of its scenarios. Every file is executed as ``__main__`` with a
default report logger installed, so scenarios created without an explicit
logger report through it.

Behavior
- Report lines go to the console (coloured, stdout/stderr) or, with
  ``--sink logging``, to the ``gerbil.report`` logger.
- Every failing test counts as a failure. An exception escaping a file (for
  example one raised by a hook) aborts that file and also counts. A file that
  calls ``sys.exit()`` stops there; a non-zero status counts as a failure and
  the remaining files still run.
- Exit status is 1 when anything failed, 0 otherwise.

Limitations
- Only scenarios that report through the default logger are counted. A
  scenario given its own logger, ``scenario(name, tests, logger)``, reports
  there and its failures do not affect the exit status.
"""

from __future__ import annotations

import logging
import runpy
from pathlib import Path

import click

from gerbil import config
from gerbil.errors import InvalidReportSinkError
from gerbil.logging import (
    ConsoleLogger,
    LoggingAdapter,
    ScenarioLogger,
    TallyLogger,
    log_run_plan,
    use_default_logger,
)

from .helpers import error, success, warn

logger = logging.getLogger(__name__)


def _resolve_sink(sink: str | None) -> str:
    if sink is not None:
        return sink.lower()
    try:
        return config.get_report_sink()
    except InvalidReportSinkError as e:
        raise click.ClickException(str(e)) from e


def _make_report_logger(sink: str, color: bool) -> ScenarioLogger:
    if sink == "logging":
        return LoggingAdapter()
    return ConsoleLogger(color=color)


def _run_file(path: Path) -> bool:
    """Execute one scenario file; return False if it aborted."""
    logger.info("Running scenario file %s", path)
    try:
        runpy.run_path(str(path), run_name="__main__")
    except SystemExit as e:
        if e.code in (None, 0):
            logger.debug("Scenario file %s exited cleanly", path)
            return True
        error(f"{path} exited with status {e.code}")
        return False
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.debug("Scenario file %s aborted", path, exc_info=True)
        error(f"{path} aborted: {type(e).__name__}: {e}")
        return False
    return True


@click.command()
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--sink",
    type=click.Choice(config.REPORT_SINKS, case_sensitive=False),
    default=None,
    help=(
        "Where scenario reports go: 'console' (coloured lines) or 'logging' "
        f"(the gerbil.report logger). Defaults to ${config.REPORT_SINK_ENV} or 'console'."
    ),
)
@click.option(
    "--fail-fast/--no-fail-fast",
    default=False,
    help="Stop after the first scenario file that reports a failure.",
)
@click.pass_context
def run(ctx: click.Context, files: tuple[Path, ...], sink: str | None, fail_fast: bool) -> None:
    """Run scenario FILES and report the outcome.

    Failures are counted from scenarios that report through the default
    logger; a scenario created with its own logger is not counted.
    """
    sink_name = _resolve_sink(sink)
    log_run_plan(logger, files, sink=sink_name, fail_fast=fail_fast)
    report_logger = _make_report_logger(sink_name, ctx.color is not False)
    tally = TallyLogger(report_logger)
    aborted = 0
    executed = 0

    with use_default_logger(tally):
        for path in files:
            errors_before = tally.errors
            executed += 1
            if not _run_file(path):
                aborted += 1
            elif tally.errors == errors_before:
                continue
            if fail_fast:
                logger.info("Stopping after %s (--fail-fast)", path)
                break

    failed = tally.errors + aborted
    if failed:
        warn(f"{failed} failure(s) across {executed} scenario file(s).")
        ctx.exit(1)
    success(f"{executed} scenario file(s) passed.")
