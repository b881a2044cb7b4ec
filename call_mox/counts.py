"""Invocation-count matchers for verification."""

from __future__ import annotations

import dataclasses as dc


def _plural(count: int) -> str:
    return "invocation" if count == 1 else "invocations"


@dc.dataclass(slots=True)
class CountMatcher:
    """Base class for matchers evaluated against a number of invocations."""

    _actual: int = dc.field(default=0, init=False, repr=False, compare=False)

    def matches(self, param: int) -> bool:
        """Return ``True`` if *param* invocations satisfy the expectation."""
        self._actual = param
        return self._check(param)

    def _check(self, count: int) -> bool:
        """Test *count*; every concrete count matcher overrides this."""
        raise NotImplementedError

    def failure_message(self) -> str:
        """Describe the expected and the observed number of invocations."""
        return f"Expected {self}, but got {self._actual}"

    def __call__(self, param: int) -> bool:
        """Alias for :meth:`matches`."""
        return self.matches(param)


@dc.dataclass(slots=True)
class Times(CountMatcher):
    """Exactly ``count`` invocations."""

    count: int

    def _check(self, count: int) -> bool:
        return count == self.count

    def __str__(self) -> str:
        """Return ``exactly N invocations``."""
        return f"exactly {self.count} {_plural(self.count)}"


@dc.dataclass(slots=True)
class AtLeast(CountMatcher):
    """At least ``count`` invocations."""

    count: int

    def _check(self, count: int) -> bool:
        return count >= self.count

    def __str__(self) -> str:
        """Return ``at least N invocations``."""
        return f"at least {self.count} {_plural(self.count)}"


@dc.dataclass(slots=True)
class AtMost(CountMatcher):
    """At most ``count`` invocations."""

    count: int

    def _check(self, count: int) -> bool:
        return count <= self.count

    def __str__(self) -> str:
        """Return ``at most N invocations``."""
        return f"at most {self.count} {_plural(self.count)}"


def times(count: int) -> Times:
    """Expect exactly *count* invocations."""
    if count < 0:
        msg = "count must be >= 0"
        raise ValueError(msg)
    return Times(count)


def at_least(count: int) -> AtLeast:
    """Expect *count* or more invocations."""
    if count < 0:
        msg = "count must be >= 0"
        raise ValueError(msg)
    return AtLeast(count)


def at_most(count: int) -> AtMost:
    """Expect no more than *count* invocations."""
    if count < 0:
        msg = "count must be >= 0"
        raise ValueError(msg)
    return AtMost(count)


def never() -> Times:
    """Expect no invocations."""
    return Times(0)


def once() -> Times:
    """Expect a single invocation."""
    return Times(1)


def twice() -> Times:
    """Expect two invocations."""
    return Times(2)


__all__ = [
    "AtLeast",
    "AtMost",
    "CountMatcher",
    "Times",
    "at_least",
    "at_most",
    "never",
    "once",
    "times",
    "twice",
]
