"""Helpers for parsing logger-level CLI options.

This module provides utilities used by the CLI to parse options of the
form NAME=LEVEL (repeatable or comma/space-separated). It normalizes input
values into individual items and converts/validates textual log level names
into the corresponding numeric logging levels.
"""

import logging
import re

import click


def _normalize_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Split a string, or each string of a sequence, on commas and whitespace.

    Args:
        value: The option value from Click; a single string (for example from
            an environment variable) or the tuple of a repeatable option.

    Returns:
        list[str]: A flat list of non-empty item strings.
    """
    if isinstance(value, str):
        value = (value,)
    return [s for v in value for s in re.split(r"[,\s]+", v) if s]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback that parses NAME=LEVEL pairs into a name->level dict.

    Each item must be of the form NAME=LEVEL where LEVEL is a standard logging
    level name (e.g. DEBUG, INFO, WARNING), in any case. When a logger is
    named more than once the last item wins.

    Returns:
        dict[str, int]: Mapping of logger names to numeric logging levels.

    Raises:
        click.BadParameter: If an item is malformed (not NAME=LEVEL) or LEVEL is invalid.
    """
    levels: dict[str, int] = {}
    for item in _normalize_items(value or ()):
        try:
            name, level_str = item.split("=", 1)
        except ValueError as e:
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}") from e
        lvl = logging.getLevelNamesMapping().get(level_str.strip().upper())
        if lvl is None:
            raise click.BadParameter(f"Invalid log level: {level_str}")
        levels[name.strip()] = lvl
    return levels
