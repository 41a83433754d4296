"""Scenario runner.

A :class:`Scenario` owns one run of a named mapping of test functions. It
pulls the four reserved hooks (``setup``, ``before``, ``after``, ``cleanup``)
out of the mapping, queues every remaining entry in mapping order, and drains
the queue one test at a time::

    setup
    before, test 1, after
    before, test 2, after
    ...
    cleanup

Tests and hooks are called as ``fn(scope, scenario)``. ``scope`` is a fresh
:class:`types.SimpleNamespace` shared by every call of the run, so hooks can
stash fixtures on it; ``scenario`` gives access to the assertion helpers.

An exception raised by a test is recorded as a failure and the run goes on.
An exception raised by a hook is not caught: it aborts the run and reaches
the caller, and no summary is printed.

The summary is deferred: once every queued test has completed it is scheduled
on the run's event scheduler, and is emitted only after all work registered
through :meth:`Scenario.set_timeout` has settled.
"""

from __future__ import annotations

import logging
import sched
import time
from collections.abc import Callable, MutableMapping
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from types import SimpleNamespace
from typing import Any

from .assertions import Assertions
from .config import RESERVED_HOOKS
from .logging import ScenarioLogger, default_logger
from .queue import Queue

logger = logging.getLogger(__name__)

TestFunction = Callable[[Any, "Scenario"], Any]
DeferredFunction = Callable[["Scenario"], Any]

# deferred work due at the same instant as the summary runs first
DEFERRED_PRIORITY = 0
SUMMARY_PRIORITY = 1


def _noop(scope: Any, scenario: Scenario) -> None:  # pylint: disable=unused-argument
    return None


class ScenarioState(Enum):
    """Lifecycle of a scenario run."""

    IDLE = "idle"
    ENQUEUING = "enqueuing"
    DRAINING = "draining"
    HOOK_BEFORE = "hook-before"
    EXECUTING = "executing"
    HOOK_AFTER = "hook-after"
    COMPLETED = "completed"
    SUMMARIZED = "summarized"


@dataclass(frozen=True)
class TestRecord:
    """A queued test: its name, its callable and when it was enqueued."""

    __test__ = False  # not a pytest test class

    name: str
    fn: TestFunction
    time: datetime


@dataclass(frozen=True)
class ScenarioResult:
    """Totals reported by the summary of a run."""

    description: str
    success: int
    failures: int
    count: int
    assertions: int


class Scenario(Assertions):  # pylint: disable=too-many-instance-attributes
    """One run of a named collection of tests.

    Args:
        description: Name of the scenario, shown in the start banner.
        tests: Mapping of test name to test function. Reserved hook names are
            removed from it when the scenario is enqueued.
        logger: Report logger exposing ``log``/``info``/``warn``/``error``.
            Defaults to :func:`gerbil.logging.default_logger`.

    Attributes:
        success: Number of tests that completed without raising.
        failures: Number of tests that raised.
        count: Number of tests enqueued.
        assertions: Running total of assertions made during the whole run.
        timeout: Sum of the delays requested through :meth:`set_timeout`, in
            milliseconds.
        completion: Resolved with a :class:`ScenarioResult` by the summary.
    """

    def __init__(
        self,
        description: str,
        tests: MutableMapping[str, TestFunction],
        logger: ScenarioLogger | None = None,  # pylint: disable=redefined-outer-name
    ) -> None:
        self.success = 0
        self.failures = 0
        self.count = 0
        self.assertions = 0
        self.timeout: float = 0
        self.queue: Queue[TestRecord] = Queue()
        self.description = description
        self.tests = tests
        self.logger: ScenarioLogger = (
            logger if logger is not None else default_logger()
        )

        self.setup: TestFunction = _noop
        self.before: TestFunction = _noop
        self.after: TestFunction = _noop
        self.cleanup: TestFunction = _noop

        self.scope: SimpleNamespace | None = None
        self.state = ScenarioState.IDLE
        self.completion: Future[ScenarioResult] = Future()
        self._deferred: list[Future[Any]] = []
        self._scheduler = sched.scheduler(time.monotonic, time.sleep)

    def extract_test(self, key: str) -> TestFunction:
        """Remove ``key`` from the test mapping and return it, or a no-op."""
        return self.tests.pop(key, None) or _noop

    def enqueue(self) -> None:
        """Print the start banner, take out the hooks and queue every test."""
        self.state = ScenarioState.ENQUEUING
        self.logger.info(f"== Running {self.description} ==")
        self.setup, self.before, self.after, self.cleanup = (
            self.extract_test(key) for key in RESERVED_HOOKS
        )

        for name, fn in self.tests.items():
            self.queue.push(
                TestRecord(name=name, fn=fn, time=datetime.now(timezone.utc))
            )
            self.count += 1
        logger.debug("Enqueued %d test(s) for %r", self.count, self.description)

    def consume(self) -> None:
        """Run ``setup``, every queued test between ``before``/``after``, then ``cleanup``.

        Hook exceptions are not caught.
        """
        self.state = ScenarioState.DRAINING
        scope = self.scope = SimpleNamespace()

        self.setup(scope, self)
        while (record := self.queue.pull()) is not None:
            self.state = ScenarioState.HOOK_BEFORE
            self.before(scope, self)
            self.execute(record, scope)
            self.state = ScenarioState.HOOK_AFTER
            self.after(scope, self)
        self.cleanup(scope, self)
        self.state = ScenarioState.COMPLETED

    def execute(self, record: TestRecord, scope: Any) -> None:
        """Run a single test and record its outcome.

        Once every enqueued test has an outcome the summary is scheduled.
        """
        self.state = ScenarioState.EXECUTING
        name = record.name
        logger.debug("Executing %r", name)
        try:
            record.fn(scope, self)
        except Exception as exception:  # pylint: disable=broad-exception-caught
            self.fail(f"{name} ({exception})")
        else:
            self.ok(name)
        finally:
            if self.success + self.failures == self.count:
                logger.debug("All %d test(s) of %r completed", self.count, self.description)
                self._schedule_summary()

    def ok(self, message: str) -> None:
        """Count a pass and report it with the running assertion total."""
        self.success += 1
        self.logger.log(f"   * {message} ({self.assertions} assertions)")

    def fail(self, message: str) -> None:
        """Count a failure and report it."""
        self.failures += 1
        self.logger.error(f"   x {message}")

    def summary(self) -> ScenarioResult:
        """Report the totals and resolve :attr:`completion`."""
        self.logger.warn(
            f"All tests completed: {self.success} passed, "
            f"{self.failures} failed of {self.count} tests"
        )
        self.logger.info("")
        self.state = ScenarioState.SUMMARIZED

        result = ScenarioResult(
            description=self.description,
            success=self.success,
            failures=self.failures,
            count=self.count,
            assertions=self.assertions,
        )
        if not self.completion.done():
            self.completion.set_result(result)
        return result

    def set_timeout(self, fn: DeferredFunction, milliseconds: float) -> Future[Any]:
        """Call ``fn(scenario)`` after ``milliseconds`` and return its completion handle.

        The summary of the run waits for the handle to resolve. The delay is
        also added to :attr:`timeout`.

        Args:
            fn: Deferred callback; it receives this scenario.
            milliseconds: Delay before the call.

        Returns:
            Future: Resolved with the callback's return value, or with the
            exception it raised.
        """
        self.timeout += milliseconds
        handle: Future[Any] = Future()
        self._deferred.append(handle)
        self._scheduler.enter(
            milliseconds / 1000, DEFERRED_PRIORITY, self._run_deferred, (fn, handle)
        )
        return handle

    def _run_deferred(self, fn: DeferredFunction, handle: Future[Any]) -> None:
        try:
            result = fn(self)
        except Exception as exception:  # pylint: disable=broad-exception-caught
            name = getattr(fn, "__name__", repr(fn))
            self.logger.error(f"   x deferred {name} ({exception})")
            handle.set_exception(exception)
        else:
            handle.set_result(result)

    def _schedule_summary(self) -> None:
        self._scheduler.enter(0, SUMMARY_PRIORITY, self._summarize_when_settled)

    def _summarize_when_settled(self) -> None:
        pending = [handle for handle in self._deferred if not handle.done()]
        if pending:
            logger.debug("Summary waits for %d deferred callback(s)", len(pending))
            pending[0].add_done_callback(lambda _handle: self._schedule_summary())
            return
        self.summary()

    def settle(self) -> None:
        """Run scheduled deferred work and the summary until none is left."""
        self._scheduler.run()

    def run(self) -> Scenario:
        """Enqueue, drain and settle this scenario."""
        self.enqueue()
        self.consume()
        self.settle()
        return self


def scenario(
    description: str,
    tests: MutableMapping[str, TestFunction],
    logger: ScenarioLogger | None = None,  # pylint: disable=redefined-outer-name
) -> Scenario:
    """Run ``tests`` as a scenario named ``description`` and return the runner.

    Example:
        ```py
        def test_addition(self, g):
            g.assert_equal(1 + 1, 2)

        scenario("arithmetic", {"addition": test_addition})
        ```
    """
    return Scenario(description, tests, logger).run()
