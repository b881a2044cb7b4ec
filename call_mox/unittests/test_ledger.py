"""Unit tests for the invocation ledger and stubbing tables."""

from __future__ import annotations

import threading

import pytest

from call_mox.ledger import (
    InvocationCounter,
    MockedMethod,
    Stubbing,
    Stubbings,
)
from call_mox.matchers import AnyOfType, EqMatcher, MatcherSequence
from call_mox.return_types import descriptor_for


def _seq(*values: object) -> MatcherSequence:
    return MatcherSequence.from_params(values)


def test_counter_returns_then_increments() -> None:
    """Sequence numbers start at the given value and grow by one."""
    counter = InvocationCounter(start=5)
    assert [counter.next_number() for _ in range(3)] == [5, 6, 7]


def test_counter_is_thread_safe() -> None:
    """Concurrent callers never receive the same number."""
    counter = InvocationCounter()
    seen: list[int] = []
    lock = threading.Lock()

    def worker() -> None:
        numbers = [counter.next_number() for _ in range(200)]
        with lock:
            seen.extend(numbers)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(seen) == list(range(1600))


class TestStubbing:
    """Tests for :class:`Stubbing` cursor handling."""

    def test_last_callback_is_sticky(self) -> None:
        """Answers advance once per call and then repeat the last one."""
        stubbing = Stubbing(_seq(1))
        for value in ("a", "b"):
            stubbing.append(lambda _params, v=value: (v,))

        answers = [stubbing.next_callback()([])[0] for _ in range(4)]

        assert answers == ["a", "b", "b", "b"]
        assert stubbing.cursor == 1

    def test_single_callback_never_moves(self) -> None:
        """A lone callback keeps the cursor at zero."""
        stubbing = Stubbing(_seq())
        stubbing.append(lambda _params: ())
        stubbing.next_callback()
        stubbing.next_callback()
        assert stubbing.cursor == 0


class TestStubbings:
    """Tests for :class:`Stubbings` lookups."""

    def test_most_recent_match_wins(self) -> None:
        """Lookup scans from the newest stubbing backwards."""
        stubbings = Stubbings()
        generic = Stubbing(MatcherSequence([AnyOfType(int)]))
        specific = Stubbing(_seq(1))
        stubbings.add(specific)
        stubbings.add(generic)

        assert stubbings.find((1,)) is generic
        assert stubbings.find(("x",)) is None

    def test_find_and_remove_by_matchers(self) -> None:
        """Structurally equal sequences identify the same stubbing."""
        stubbings = Stubbings()
        stubbing = Stubbing(_seq("a"))
        stubbings.add(stubbing)
        stubbings.add(Stubbing(_seq("b")))

        assert stubbings.find_by_matchers(_seq("a")) is stubbing
        stubbings.remove_by_matchers(_seq("a"))
        assert stubbings.find_by_matchers(_seq("a")) is None
        assert len(stubbings) == 1


class TestMockedMethod:
    """Tests for :class:`MockedMethod`."""

    @pytest.fixture
    def method(self) -> MockedMethod:
        """Return a ledger with its own counter."""
        return MockedMethod("lookup", InvocationCounter())

    def test_records_invocations_in_order(self, method: MockedMethod) -> None:
        """Each call gets the next sequence number."""
        method.record(["a"])
        method.record(["b"])
        assert [(inv.params, inv.sequence_number) for inv in method.invocations] == [
            (("a",), 0),
            (("b",), 1),
        ]

    def test_remove_invocation(self, method: MockedMethod) -> None:
        """Removed records no longer appear in the history."""
        first = method.record([1])
        method.record([2])
        method.remove_invocation(first)
        assert [inv.params for inv in method.invocations] == [(2,)]

    def test_unstubbed_call_returns_zero_values(self, method: MockedMethod) -> None:
        """Without a matching stubbing the zero values come back."""
        declared = [descriptor_for(int), descriptor_for(str)]
        assert method.resolve((1,), declared) == (0, "")

    def test_stub_appends_to_equal_sequence(self, method: MockedMethod) -> None:
        """Re-stubbing with an equal sequence extends one stubbing."""
        first = method.stub(_seq(1), lambda _params: ("one",))
        second = method.stub(_seq(1), lambda _params: ("uno",))

        assert first is second
        assert len(method.stubbings) == 1
        assert method.resolve((1,), []) == ("one",)
        assert method.resolve((1,), []) == ("uno",)
        assert method.resolve((1,), []) == ("uno",)

    def test_callback_receives_params(self, method: MockedMethod) -> None:
        """Callbacks compute answers from the call's parameters."""
        method.stub(MatcherSequence([AnyOfType(int)]), lambda params: (params[0] * 2,))
        assert method.resolve((21,), []) == (42,)

    def test_reset_removes_stubbing(self, method: MockedMethod) -> None:
        """Resetting a matcher sequence forgets its answers."""
        method.stub(MatcherSequence([EqMatcher(1)]), lambda _params: ("x",))
        method.reset(_seq(1))
        assert method.resolve((1,), [descriptor_for(str)]) == ("",)

    def test_clear_forgets_everything(self, method: MockedMethod) -> None:
        """``clear`` drops history and stubbings."""
        method.record([1])
        method.stub(_seq(1), lambda _params: ())
        method.clear()
        assert method.invocations == []
        assert len(method.stubbings) == 0
