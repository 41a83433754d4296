"""Assertion primitives mixed into the scenario runner.

Every helper counts one assertion on the owning scenario as soon as it is
called, whether or not the expectation holds, and signals failure by raising
:class:`~gerbil.errors.AssertionFailed`. The helpers never catch their own
failures; the runner does that at the test boundary.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from .errors import AssertionFailed


class Kind(Enum):
    """Operand kinds that decide how ``assert_equal`` compares values."""

    SEQUENCE = "sequence"
    TEXT = "text"
    NUMBER = "number"
    OTHER = "other"


def kind_of(value: Any) -> Kind:
    """Classify ``value`` for equality dispatch.

    ``bool`` is an ``int`` subclass but is classified as ``OTHER``.
    """
    if isinstance(value, (list, tuple)):
        return Kind.SEQUENCE
    if isinstance(value, str):
        return Kind.TEXT
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Kind.NUMBER
    return Kind.OTHER


def _error_name(error: Any) -> str:
    if isinstance(error, type):
        return error.__name__
    return type(error).__name__


def _matches(raised: BaseException, expected_error: Any) -> bool:
    expected_type = (
        expected_error if isinstance(expected_error, type) else type(expected_error)
    )
    return type(raised) is expected_type


class Assertions:
    """Mixin providing the assertion helpers.

    Subclasses must provide an integer ``assertions`` attribute.
    """

    assertions: int

    def assert_(self, expectation: Any) -> None:
        """Fail unless ``expectation`` is truthy."""
        self.assertions += 1
        if not expectation:
            raise AssertionFailed("Assertion Failed")

    def assert_throw(self, expected_error: Any, fn: Callable[[], Any]) -> None:
        """Fail unless calling ``fn()`` raises exactly ``expected_error``'s type.

        Args:
            expected_error: An exception class, or an exception instance whose
                type is expected. Matching is by exact type; subclasses of the
                expected type do not match.
            fn: Zero-argument callable expected to raise.

        Raises:
            AssertionFailed: If nothing is raised or the raised type differs.
        """
        self.assertions += 1
        error_message = None
        try:
            fn()
            error_message = f"{_error_name(expected_error)} was expected but not raised."
        except BaseException as exception:  # pylint: disable=broad-exception-caught
            if not _matches(exception, expected_error):
                error_message = (
                    f"{_error_name(expected_error)} was expected but "
                    f"{type(exception).__name__} was raised."
                )
        if error_message:
            raise AssertionFailed(error_message)

    def assert_equal(self, first: Any, second: Any) -> None:
        """Fail unless ``first`` and ``second`` are equal.

        Both operands must be present and of the same type, where ``int`` and
        ``float`` count as one number type. Sequences are
        compared by length and then item by item; text and numbers are
        compared directly. Any other kind passes once the presence and type
        checks hold.
        """
        self.assertions += 1
        if first is None or second is None:
            raise AssertionFailed(
                f"attr1 = {first} ({type(first).__name__}) "
                f"and attr2 = {second} ({type(second).__name__})"
            )
        kind = kind_of(first)
        same_type = (
            kind_of(second) is Kind.NUMBER
            if kind is Kind.NUMBER
            else type(first) is type(second)
        )
        if not same_type:
            raise AssertionFailed(
                f"Different type {type(first).__name__} vs {type(second).__name__}"
            )

        if kind is Kind.SEQUENCE:
            if len(first) != len(second):
                raise AssertionFailed("Different Lengths")
            for a, b in zip(first, second):
                if a != b:
                    raise AssertionFailed(f"Items not equal {a} != {b}")
        elif kind in (Kind.TEXT, Kind.NUMBER):
            if first != second:
                raise AssertionFailed(f"Not equal {first} != {second}")
        # Kind.OTHER: only the presence and type checks apply
