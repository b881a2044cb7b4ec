"""Exception hierarchy for call-mox."""

from __future__ import annotations

import typing as t


class CallMoxError(Exception):
    """Base class for all call-mox errors."""


class UsageError(CallMoxError):
    """Raised when the stubbing or verification DSL is misused.

    A usage error means the test itself is broken, so it is raised
    immediately instead of being routed through the failure sink.
    """


class AssignabilityError(UsageError):
    """Raised when stubbed return values do not fit the declared return types."""


class StubbedPanic(CallMoxError):
    """Raised by a ``then_panic`` stub when the payload is not an exception."""

    def __init__(self, value: t.Any) -> None:  # noqa: ANN401 - arbitrary payload
        super().__init__(f"stubbed panic: {value!r}")
        self.value = value


class VerificationError(CallMoxError, AssertionError):
    """Raised by :func:`~call_mox.fail_handlers.raising_fail_handler`."""


__all__ = [
    "AssignabilityError",
    "CallMoxError",
    "StubbedPanic",
    "UsageError",
    "VerificationError",
]
