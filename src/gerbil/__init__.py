"""GERBIL

A minimal unit-testing micro-framework. A scenario is a named mapping of test
functions, optionally wrapped by ``setup``/``before``/``after``/``cleanup``
hooks, run sequentially with a pass/fail summary at the end.
"""

from .errors import AssertionFailed, GerbilError
from .scenario import Scenario, ScenarioResult, TestRecord, scenario

__all__ = [
    "__version__",
    "AssertionFailed",
    "GerbilError",
    "Scenario",
    "ScenarioResult",
    "TestRecord",
    "scenario",
]
__version__ = "0.1.0"
