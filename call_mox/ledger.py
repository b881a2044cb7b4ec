"""Invocation history and stubbing tables for mocked methods."""

from __future__ import annotations

import dataclasses as dc
import logging
import threading
import typing as t

from .return_types import zero_values

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .matchers import MatcherSequence
    from .return_types import ReturnType

logger = logging.getLogger(__name__)

ReturnValues = tuple[t.Any, ...]
Callback = t.Callable[[list[t.Any]], t.Sequence[t.Any]]


class InvocationCounter:
    """Monotonically increasing sequence numbers shared by all mocks."""

    def __init__(self, start: int = 0) -> None:
        self._count = start
        self._lock = threading.Lock()

    def next_number(self) -> int:
        """Return the current number and advance the counter."""
        with self._lock:
            number = self._count
            self._count += 1
            return number


GLOBAL_INVOCATION_COUNTER = InvocationCounter()


@dc.dataclass(frozen=True, slots=True)
class InvocationRecord:
    """Snapshot of one call made on a mocked method."""

    params: tuple[t.Any, ...]
    sequence_number: int


class Stubbing:
    """A matcher sequence bound to a sequence of callbacks.

    Each matching call runs the callback under the cursor and then moves the
    cursor on, except that the last callback keeps answering once reached.
    """

    __slots__ = ("_cursor", "callbacks", "matchers")

    def __init__(self, matchers: MatcherSequence) -> None:
        self.matchers = matchers
        self.callbacks: list[Callback] = []
        self._cursor = 0

    @property
    def cursor(self) -> int:
        """Index of the callback answering the next matching call."""
        return self._cursor

    def append(self, callback: Callback) -> None:
        """Add *callback* to the end of the sequence."""
        self.callbacks.append(callback)

    def next_callback(self) -> Callback:
        """Return the current callback and advance the cursor."""
        callback = self.callbacks[self._cursor]
        if self._cursor < len(self.callbacks) - 1:
            self._cursor += 1
        return callback


class Stubbings:
    """Ordered stubbing table of one mocked method."""

    def __init__(self) -> None:
        self._stubbings: list[Stubbing] = []

    def find(self, params: t.Sequence[t.Any]) -> Stubbing | None:
        """Return the most recently registered stubbing matching *params*."""
        for stubbing in reversed(self._stubbings):
            if stubbing.matchers.matches(params):
                return stubbing
        return None

    def find_by_matchers(self, matchers: MatcherSequence) -> Stubbing | None:
        """Return the stubbing registered with an equal matcher sequence."""
        for stubbing in self._stubbings:
            if stubbing.matchers == matchers:
                return stubbing
        return None

    def add(self, stubbing: Stubbing) -> None:
        """Register *stubbing* as the most recent entry."""
        self._stubbings.append(stubbing)

    def remove_by_matchers(self, matchers: MatcherSequence) -> None:
        """Drop every stubbing registered with an equal matcher sequence."""
        self._stubbings = [s for s in self._stubbings if s.matchers != matchers]

    def clear(self) -> None:
        """Forget all stubbings."""
        self._stubbings.clear()

    def __len__(self) -> int:
        """Return the number of registered stubbings."""
        return len(self._stubbings)

    def __iter__(self) -> t.Iterator[Stubbing]:
        """Iterate in registration order."""
        return iter(list(self._stubbings))


class MockedMethod:
    """Ledger of one method on one stand-in: call history plus stubbings."""

    def __init__(
        self, name: str, counter: InvocationCounter = GLOBAL_INVOCATION_COUNTER
    ) -> None:
        self.name = name
        self.stubbings = Stubbings()
        self._invocations: list[InvocationRecord] = []
        self._counter = counter
        self._lock = threading.RLock()

    @property
    def invocations(self) -> list[InvocationRecord]:
        """Return a snapshot of the recorded invocations."""
        with self._lock:
            return list(self._invocations)

    def record(self, params: t.Sequence[t.Any]) -> InvocationRecord:
        """Append a new invocation of this method to the history."""
        with self._lock:
            record = InvocationRecord(tuple(params), self._counter.next_number())
            self._invocations.append(record)
        logger.debug(
            "Recorded call #%d: %s%r", record.sequence_number, self.name, record.params
        )
        return record

    def remove_invocation(self, record: InvocationRecord) -> None:
        """Discard *record* so it no longer counts as a real call."""
        with self._lock:
            self._invocations = [
                inv
                for inv in self._invocations
                if inv.sequence_number != record.sequence_number
            ]

    def resolve(
        self, params: t.Sequence[t.Any], return_types: t.Sequence[ReturnType]
    ) -> ReturnValues:
        """Run the stubbed behaviour for *params* or return zero values."""
        with self._lock:
            stubbing = self.stubbings.find(params)
            callback = None if stubbing is None else stubbing.next_callback()
        if callback is None:
            return zero_values(return_types)
        return tuple(callback(list(params)))

    def stub(self, matchers: MatcherSequence, callback: Callback) -> Stubbing:
        """Append *callback* to the stubbing registered for *matchers*."""
        with self._lock:
            stubbing = self.stubbings.find_by_matchers(matchers)
            if stubbing is None:
                stubbing = Stubbing(matchers)
                self.stubbings.add(stubbing)
            stubbing.append(callback)
        logger.debug(
            "Stubbed %s%s with %d callback(s)",
            self.name,
            matchers,
            len(stubbing.callbacks),
        )
        return stubbing

    def reset(self, matchers: MatcherSequence) -> None:
        """Remove the stubbings registered for *matchers*."""
        with self._lock:
            self.stubbings.remove_by_matchers(matchers)

    def clear(self) -> None:
        """Forget every invocation and stubbing."""
        with self._lock:
            self._invocations.clear()
            self.stubbings.clear()


__all__ = [
    "GLOBAL_INVOCATION_COUNTER",
    "Callback",
    "InvocationCounter",
    "InvocationRecord",
    "MockedMethod",
    "ReturnValues",
    "Stubbing",
    "Stubbings",
]
