"""Logging helpers used by GERBIL scenarios and the CLI.

Two separate concerns live here:

- **Report loggers**: the objects a scenario writes its status lines to. Any
  object exposing ``log``/``info``/``warn``/``error`` works; this module ships
  a coloured console adapter, an adapter onto stdlib :mod:`logging` and a
  counting decorator used by the CLI.
- **Diagnostics**: the CLI's own logging. A Rich console handler whose
  records are tagged with their origin, an in-memory "flight recorder" that
  dumps recent records to a file when something goes wrong, and the lines
  logged when an invocation starts and when `gerbil run` starts.
"""

from __future__ import annotations

import contextvars
import logging
import platform
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, Protocol, TypeAlias

from rich.console import Console
from rich.logging import RichHandler

from .config import DEFAULT_FLIGHT_RECORDER_CAPACITY

if TYPE_CHECKING:
    from logging import Logger

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "gerbil"
REPORT_LOGGER_NAME = "gerbil.report"

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


# ============================================================================
#                               Report loggers
# ============================================================================


class ScenarioLogger(Protocol):
    """Sink for the status lines a scenario emits."""

    def log(self, msg: str) -> None:
        """Report a passing test."""

    def info(self, msg: str) -> None:
        """Report a banner or separator."""

    def warn(self, msg: str) -> None:
        """Report the run summary."""

    def error(self, msg: str) -> None:
        """Report a failing test."""


class ConsoleLogger:
    """Colour each channel like a terminal console would.

    ``log`` is green and ``info`` blue, both on stdout; ``warn`` is yellow and
    ``error`` red, both on stderr. Messages are printed literally (no Rich
    markup or highlighting).

    Args:
        color: Disable styling when False.
        stdout: Console for the ``log``/``info`` channels.
        stderr: Console for the ``warn``/``error`` channels.
    """

    STYLES = {"log": "green", "info": "blue", "warn": "yellow", "error": "red"}

    def __init__(
        self,
        color: bool = True,
        stdout: Console | None = None,
        stderr: Console | None = None,
    ) -> None:
        color_system: ColorSystem | None = "auto" if color else None
        self._stdout = stdout or Console(color_system=color_system)
        self._stderr = stderr or Console(color_system=color_system, stderr=True)

    def _print(self, console: Console, channel: str, msg: str) -> None:
        console.print(
            msg,
            style=self.STYLES[channel],
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )

    def log(self, msg: str) -> None:
        self._print(self._stdout, "log", msg)

    def info(self, msg: str) -> None:
        self._print(self._stdout, "info", msg)

    def warn(self, msg: str) -> None:
        self._print(self._stderr, "warn", msg)

    def error(self, msg: str) -> None:
        self._print(self._stderr, "error", msg)


class LoggingAdapter:
    """Route report lines to a stdlib logger.

    ``log`` and ``info`` map to INFO, ``warn`` to WARNING and ``error`` to ERROR.
    """

    def __init__(self, logger: Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(REPORT_LOGGER_NAME)

    def log(self, msg: str) -> None:
        self.logger.info("%s", msg)

    def info(self, msg: str) -> None:
        self.logger.info("%s", msg)

    def warn(self, msg: str) -> None:
        self.logger.warning("%s", msg)

    def error(self, msg: str) -> None:
        self.logger.error("%s", msg)


class TallyLogger:
    """Forward every line to ``target`` while counting ``error`` lines."""

    def __init__(self, target: ScenarioLogger) -> None:
        self.target = target
        self.errors = 0

    def log(self, msg: str) -> None:
        self.target.log(msg)

    def info(self, msg: str) -> None:
        self.target.info(msg)

    def warn(self, msg: str) -> None:
        self.target.warn(msg)

    def error(self, msg: str) -> None:
        self.errors += 1
        self.target.error(msg)


_default_logger: contextvars.ContextVar[ScenarioLogger | None] = (
    contextvars.ContextVar("gerbil_default_logger", default=None)
)


def default_logger() -> ScenarioLogger:
    """Return the report logger used when a scenario is given none.

    This is the logger installed by :func:`use_default_logger` if any,
    otherwise a new :class:`ConsoleLogger`.
    """
    return _default_logger.get() or ConsoleLogger()


@contextmanager
def use_default_logger(logger: ScenarioLogger) -> Iterator[ScenarioLogger]:
    """Install ``logger`` as the default report logger within the block."""
    token = _default_logger.set(logger)
    try:
        yield logger
    finally:
        _default_logger.reset(token)


# ============================================================================
#                               Diagnostics
# ============================================================================

FLIGHT_RECORDER_FORMAT = (
    "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d [%(threadName)s] %(message)s"
)


class OriginFilter(logging.Filter):
    """Tag console records with the part of the run that produced them.

    Report lines from ``gerbil.report`` are left untagged so ``--sink logging``
    output reads like the console sink. Other GERBIL loggers are tagged with
    their module (``[scenario]``, ``[run]``); anything else, such as a logger
    created inside a scenario file, with its top-level name.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == REPORT_LOGGER_NAME:
            record.origin = ""
        elif name == PROJECT_PREFIX or name.startswith(f"{PROJECT_PREFIX}."):
            record.origin = f"[{name.rsplit('.', 1)[-1]}] "
        else:
            record.origin = f"[{name.split('.', 1)[0]}] "
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Return the stderr handler for diagnostics and logging-sink reports.

    Records are tagged by :class:`OriginFilter`. Debug mode lowers the level
    to DEBUG and adds timestamps and source locations.
    """
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=Console(color_system="auto" if color else None, stderr=True),
        markup=False,
        rich_tracebacks=True,
        show_time=debug_mode,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    handler.addFilter(OriginFilter())
    handler.setFormatter(logging.Formatter("%(origin)s%(message)s"))
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = DEFAULT_FLIGHT_RECORDER_CAPACITY,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Buffer the last ``capacity`` records and dump them to ``path`` on WARNING.

    The file is truncated when the recorder is created, so it only holds
    records of the latest invocation. With ``flush_on_close`` whatever is
    still buffered is written when logging shuts down.
    """
    target = logging.FileHandler(path, mode="w", encoding="utf-8")
    target.setFormatter(logging.Formatter(FLIGHT_RECORDER_FORMAT))
    return MemoryHandler(
        capacity,
        flushLevel=logging.WARNING,
        target=target,
        flushOnClose=flush_on_close,
    )


def describe_flight_recorder(recorder: MemoryHandler | None) -> str:
    """Summarize a flight recorder for the startup line, or ``"off"``."""
    if recorder is None:
        return "off"
    target = recorder.target
    where = target.baseFilename if isinstance(target, logging.FileHandler) else target
    on_exit = ", flush on exit" if recorder.flushOnClose else ""
    return f"{where} (capacity {recorder.capacity}{on_exit})"


def log_startup(
    logger: Logger,
    *,
    app_version: str,
    level: int,
    recorder: MemoryHandler | None,
    logger_levels: dict[str, int],
) -> None:
    """Log the console level and flight recorder chosen for this invocation.

    Per-logger overrides from ``-L`` follow at DEBUG, one line each.
    """
    logger.info(
        "GERBIL %s on Python %s - console=%s, flight-recorder=%s",
        app_version,
        platform.python_version(),
        logging.getLevelName(level),
        describe_flight_recorder(recorder),
    )
    for name, lvl in sorted(logger_levels.items()):
        logger.debug("Logger %s set to %s", name, logging.getLevelName(lvl))


def log_run_plan(
    logger: Logger, files: Sequence[Path], *, sink: str, fail_fast: bool
) -> None:
    """Log what ``gerbil run`` is about to execute."""
    logger.info(
        "Running %d scenario file(s), reporting to the %s sink%s",
        len(files),
        sink,
        " (fail fast)" if fail_fast else "",
    )
    for path in files:
        logger.debug("Scenario file %s", path.resolve())
