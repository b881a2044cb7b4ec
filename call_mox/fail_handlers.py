"""Failure sinks receiving verification mismatches."""

from __future__ import annotations

import typing as t

import pytest

from .errors import VerificationError

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .verifiers import FailHandler


def raising_fail_handler(message: str) -> t.NoReturn:
    """Raise :class:`~call_mox.errors.VerificationError` with *message*."""
    raise VerificationError(message)


def pytest_fail_handler(message: str) -> t.NoReturn:
    """Fail the running pytest test with *message*."""
    pytest.fail(message, pytrace=False)


class RecordingFailHandler:
    """Collect failure messages instead of raising."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        """Store *message*."""
        self.messages.append(message)

    @property
    def failed(self) -> bool:
        """Return ``True`` once any failure was reported."""
        return bool(self.messages)

    @property
    def last_message(self) -> str | None:
        """Return the most recent failure message, if any."""
        return self.messages[-1] if self.messages else None

    def clear(self) -> None:
        """Forget the collected messages."""
        self.messages.clear()


FAIL_HANDLERS: t.Final[dict[str, FailHandler]] = {
    "pytest": pytest_fail_handler,
    "raise": raising_fail_handler,
}


def resolve_fail_handler(name: str) -> FailHandler:
    """Return the failure sink registered under *name*."""
    try:
        return FAIL_HANDLERS[name]
    except KeyError:
        choices = ", ".join(sorted(FAIL_HANDLERS))
        msg = f"unknown fail handler {name!r}; expected one of: {choices}"
        raise ValueError(msg) from None


__all__ = [
    "FAIL_HANDLERS",
    "RecordingFailHandler",
    "pytest_fail_handler",
    "raising_fail_handler",
    "resolve_fail_handler",
]
