"""Global pytest configuration for GERBIL.

Registers the shared fixture modules and marks every test with the suite it
lives in (`unit` under `tests/unit/`, `e2e` under `tests/e2e/`).
"""

from __future__ import annotations

from pathlib import Path

import pytest

# pylint: disable=unused-argument

pytest_plugins = [
    "tests.fixtures.loggers",
    "tests.fixtures.scenarios",
]

TESTS_ROOT = Path(__file__).parent.resolve()
SUITE_MARKS = {
    "unit": TESTS_ROOT / "unit",
    "e2e": TESTS_ROOT / "e2e",
}


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add the default suite mark to items that do not carry it already."""
    for item in items:
        path = item.path.resolve()  # pytest>=8: pathlib.Path
        for marker_name, root in SUITE_MARKS.items():
            if root not in path.parents:
                continue
            if not any(marker.name == marker_name for marker in item.iter_markers()):
                item.add_marker(getattr(pytest.mark, marker_name))
