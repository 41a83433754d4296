"""Configuration utilities for GERBIL.

This module centralizes small helpers and constants related to configuration.
"""

import os
from pathlib import Path

from platformdirs import user_log_dir

from .errors import InvalidReportSinkError

RESERVED_HOOKS = ("setup", "before", "after", "cleanup")

DEFAULT_FLIGHT_RECORDER_CAPACITY = 2000

REPORT_SINK_ENV = "GERBIL_REPORT_SINK"  # pragma: no mutate
REPORT_SINKS = ("console", "logging")


def default_log_path() -> Path:
    """Return the default flight-recorder file, creating its directory if needed."""
    return Path(user_log_dir("gerbil", appauthor=False, ensure_exists=True)) / "latest.log"


def get_report_sink() -> str:
    """Get the report sink name from the environment.

    Returns:
        The lower-cased value of `GERBIL_REPORT_SINK`, or ``"console"`` when unset.

    Raises:
        InvalidReportSinkError: If the value names an unknown sink.
    """
    sink = (os.environ.get(REPORT_SINK_ENV) or REPORT_SINKS[0]).strip().lower()
    if sink not in REPORT_SINKS:
        raise InvalidReportSinkError(sink, REPORT_SINKS)
    return sink
