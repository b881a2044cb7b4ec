"""Per stand-in bookkeeping of mocked methods."""

from __future__ import annotations

import dataclasses as dc
import logging
import threading
import typing as t

from .errors import UsageError
from .ledger import GLOBAL_INVOCATION_COUNTER, InvocationCounter, MockedMethod
from .matchers import contains_matchers
from .return_types import descriptor_for, zero_values
from .verifiers import (
    NO_FAIL_HANDLER_MESSAGE,
    check_count,
    check_order,
    columns_of,
    describe_params,
    param_matchers,
    select_invocations,
)

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .counts import CountMatcher
    from .ledger import Callback, InvocationRecord, ReturnValues
    from .matchers import Matcher, MatcherSequence
    from .return_types import ReturnType
    from .verifiers import FailHandler, InOrderContext

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class PendingInvocation:
    """The most recent call on a mock, waiting to be turned into a stubbing."""

    generic_mock: GenericMock
    method_name: str
    record: InvocationRecord
    return_types: tuple[ReturnType, ...]
    is_variadic: bool


class MockOwner(t.Protocol):
    """Controller holding the DSL context a :class:`GenericMock` reports to."""

    @property
    def fail_handler(self) -> FailHandler | None:
        """Return the registered failure sink."""
        ...

    def publish_invocation(self, pending: PendingInvocation) -> None:
        """Remember *pending* as the last invocation made on any mock."""
        ...

    def is_setting_up(self) -> bool:
        """Return ``True`` while a stubbing or verification is being declared."""
        ...

    def pending_matchers(self) -> list[Matcher]:
        """Return the ad-hoc matchers registered since the last DSL call."""
        ...

    def clear_context(self) -> None:
        """Forget the last invocation and the pending matchers."""
        ...


class GenericMock:
    """Mapping from method name to :class:`MockedMethod` for one stand-in."""

    def __init__(
        self,
        owner: MockOwner,
        counter: InvocationCounter = GLOBAL_INVOCATION_COUNTER,
    ) -> None:
        self.owner = owner
        self._counter = counter
        self._mocked_methods: dict[str, MockedMethod] = {}
        self._lock = threading.Lock()

    def mocked_method(self, method_name: str) -> MockedMethod:
        """Return the ledger for *method_name*, creating it on first use."""
        with self._lock:
            method = self._mocked_methods.get(method_name)
            if method is None:
                method = MockedMethod(method_name, self._counter)
                self._mocked_methods[method_name] = method
            return method

    @property
    def method_names(self) -> list[str]:
        """Return the names of every method referenced so far."""
        with self._lock:
            return list(self._mocked_methods)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def invoke(
        self,
        method_name: str,
        params: t.Sequence[t.Any],
        is_variadic: bool = False,  # noqa: FBT001, FBT002 - stand-in hook signature
        return_types: t.Sequence[t.Any] = (),
    ) -> ReturnValues:
        """Record a call of *method_name* and return its stubbed result.

        Unstubbed calls return the zero value of every declared return
        type. While a stubbing or verification is being declared the call is
        recorded but no stubbed behaviour runs.
        """
        params = tuple(params)
        declared = tuple(descriptor_for(rt) for rt in return_types)
        method = self.mocked_method(method_name)
        record = method.record(params)
        setting_up = self.owner.is_setting_up() or contains_matchers(params)
        self.owner.publish_invocation(
            PendingInvocation(self, method_name, record, declared, is_variadic)
        )
        if setting_up:
            return zero_values(declared)
        return method.resolve(params, declared)

    # ------------------------------------------------------------------
    # Stubbing
    # ------------------------------------------------------------------
    def stub(
        self,
        method_name: str,
        matchers: MatcherSequence,
        return_values: t.Sequence[t.Any],
    ) -> None:
        """Answer calls matching *matchers* with *return_values*."""
        values = tuple(return_values)
        self.stub_with_callback(method_name, matchers, lambda _params: values)

    def stub_with_callback(
        self, method_name: str, matchers: MatcherSequence, callback: Callback
    ) -> None:
        """Answer calls matching *matchers* by running *callback*."""
        self.mocked_method(method_name).stub(matchers, callback)

    def reset_stubbing(self, method_name: str, matchers: MatcherSequence) -> None:
        """Remove the stubbings of *method_name* registered for *matchers*."""
        self.mocked_method(method_name).reset(matchers)

    def remove_invocation(self, method_name: str, record: InvocationRecord) -> None:
        """Discard *record* from the history of *method_name*."""
        self.mocked_method(method_name).remove_invocation(record)

    def reset(self) -> None:
        """Forget every invocation and stubbing of this stand-in."""
        with self._lock:
            self._mocked_methods.clear()

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------
    def invocations(self, method_name: str) -> list[InvocationRecord]:
        """Return every recorded invocation of *method_name*."""
        return self.mocked_method(method_name).invocations

    def get_invocation_params(self, method_name: str) -> list[list[t.Any]] | None:
        """Return the params of all invocations, one list per position."""
        invocations = self.invocations(method_name)
        if not invocations:
            return None
        return columns_of(invocations)

    def verify(
        self,
        in_order: InOrderContext | None,
        count_matcher: CountMatcher,
        method_name: str,
        params: t.Sequence[t.Any],
        is_variadic: bool = False,  # noqa: FBT001, FBT002 - stand-in hook signature
    ) -> list[InvocationRecord]:
        """Check the calls of *method_name* against the expectation.

        Mismatches are reported through the owner's failure sink. The
        matching invocations are returned either way.
        """
        try:
            fail = self.owner.fail_handler
            if fail is None:
                raise UsageError(NO_FAIL_HANDLER_MESSAGE)
            matchers = param_matchers(
                self.owner.pending_matchers(), params, is_variadic=is_variadic
            )
            matching = select_invocations(
                self.invocations(method_name), params, matchers
            )
            expected = describe_params(params if matchers is None else matchers)
            logger.debug(
                "Verifying %s%s: %d matching invocation(s)",
                method_name,
                expected,
                len(matching),
            )
            if in_order is not None:
                check_order(in_order, method_name, expected, matching, fail)
            check_count(count_matcher, method_name, expected, matching, fail)
        finally:
            self.owner.clear_context()
        return matching


__all__ = ["GenericMock", "MockOwner", "PendingInvocation"]
