"""Error definitions for GERBIL."""

import traceback

# frames kept in the stack of an AssertionFailed
STACK_DEPTH = 10


class GerbilError(Exception):
    """Base class for GERBIL errors."""


class AssertionFailed(GerbilError, AssertionError):
    """Raised by the assertion helpers when an expectation does not hold.

    The innermost ``STACK_DEPTH`` frames of the call stack at construction
    time are captured as text so the failure line reported for a test points
    back at the failing assertion. When no stack could be captured the bare
    message is used instead.

    Attributes:
        message (str): The human-readable failure description.
        stack (str): ``"AssertionFailed: <message>"`` followed by the formatted
            call stack, or an empty string.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        # the last frame is this constructor; the trace ends at the caller
        frames = traceback.format_stack(limit=STACK_DEPTH + 1)[:-1]
        self.stack = (
            f"{type(self).__name__}: {message}\n" + "".join(frames).rstrip()
            if frames
            else ""
        )

    def __str__(self) -> str:
        return self.stack or self.message


class InvalidReportSinkError(GerbilError):
    """Raised when an unknown report sink is configured."""

    def __init__(self, sink: str, choices: tuple[str, ...]) -> None:
        super().__init__(
            f"Unknown report sink '{sink}'. Expected one of: {', '.join(choices)}."
        )
        self.sink = sink
        self.choices = choices
