"""GERBIL CLI entry point.

The top-level ``gerbil`` group (built with Click-Extra) owns the CLI's own
logging: console verbosity, per-logger levels and the flight recorder. Scenario
reports are separate; ``gerbil run`` decides where they go.

Commands
- ``gerbil run`` runs scenario files and exits non-zero on any failure.

Every option can also be set through a ``GERBIL_*`` environment variable,
listed in ``--help``.

Examples
    $ gerbil --version
    $ gerbil -v run scenarios/*.py
    $ gerbil --no-flight-recorder run --sink logging scenarios/parser.py
"""

import logging
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx

from gerbil import __version__, config
from gerbil.logging import config_console_handler, config_flight_recorder, log_startup

from .helpers.log_level_parser import parse_log_level
from .run import run as run_command

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """GERBIL command-line interface.

    GERBIL is a minimal unit-testing micro-framework. A scenario is a named
    mapping of test functions wrapped by optional setup/before/after/cleanup
    hooks; scenario files are plain Python scripts that run their scenarios
    when executed.
    """


def console_level(verbose_count: int, quiet_count: int) -> int:
    """Shift WARNING by one level per -v (down) or -q (up), within DEBUG..CRITICAL."""
    level = logging.WARNING + 10 * (quiet_count - verbose_count)
    return max(logging.DEBUG, min(logging.CRITICAL, level))


def configure_logging(  # pylint: disable=too-many-arguments
    *,
    level: int,
    debug: bool,
    color: bool,
    recorder_path: Path | None,
    recorder_capacity: int,
    force_flush: bool,
    logger_levels: dict[str, int],
) -> MemoryHandler | None:
    """Install the console handler and, with a path, the flight recorder.

    The root logger passes everything down to DEBUG; each handler applies its
    own threshold. Returns the flight recorder, if any.
    """
    handlers: list[Handler] = [
        config_console_handler(level=level, debug_mode=debug, color=color)
    ]
    recorder = None
    if recorder_path is not None:
        recorder = config_flight_recorder(
            recorder_path, capacity=recorder_capacity, flush_on_close=force_flush
        )
        handlers.append(recorder)
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)
    return recorder


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    default=0,
    help="Show more diagnostics: -v for INFO, -vv for DEBUG (default WARNING).",
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    default=0,
    help="Show fewer diagnostics: -q for ERROR, -qq for CRITICAL only.",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Show every diagnostic with timestamps and source locations.",
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=config.default_log_path,
    envvar="GERBIL_LOG_PATH",
    show_envvar=True,
    help="File the flight recorder writes to.",
)
@click.option(
    "--flight-recorder-capacity",
    type=click.IntRange(min=1),
    default=config.DEFAULT_FLIGHT_RECORDER_CAPACITY,
    hidden=True,
    envvar="GERBIL_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Number of log records the flight recorder keeps.",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    default=True,
    show_envvar=True,
    help=(
        "Keep recent DEBUG diagnostics in memory, whatever -v/-q say, and write "
        "them to --log-path as soon as a WARNING or ERROR is logged."
    ),
)
@click.option(
    "--force-flush/--no-force-flush",
    default=False,
    show_envvar=True,
    help="Also write the flight recorder to --log-path when the command ends.",
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    show_envvar=True,
    help=(
        "Set the level of one logger as NAME=LEVEL, e.g. -L gerbil.scenario=DEBUG "
        "to trace the runner. Applies to the console and the flight recorder. "
        "Repeatable; GERBIL_LOGGER_LEVEL takes a comma or space separated list."
    ),
)
@clickx.pass_context
def gerbil(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush: bool,
    logger_levels: dict[str, int],
) -> None:
    """GERBIL command-line interface."""
    level = console_level(verbose_count, quiet_count)
    recorder = configure_logging(
        level=level,
        debug=debug,
        color=ctx.color is not False,
        recorder_path=log_path if flight_recorder else None,
        recorder_capacity=flight_recorder_capacity,
        force_flush=force_flush,
        logger_levels=logger_levels,
    )
    log_startup(
        logger,
        app_version=__version__,
        level=level,
        recorder=recorder,
        logger_levels=logger_levels,
    )
    # flushes the flight recorder when --force-flush is set
    ctx.call_on_close(logging.shutdown)


gerbil.add_command(run_command)
