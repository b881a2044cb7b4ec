"""Fluent builder returned by :meth:`CallMox.when`."""

from __future__ import annotations

import typing as t

from .errors import StubbedPanic
from .return_types import check_assignability

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .generic_mock import GenericMock
    from .ledger import Callback
    from .matchers import MatcherSequence
    from .return_types import ReturnType


def _panic(value: t.Any) -> t.NoReturn:  # noqa: ANN401 - arbitrary payload
    if isinstance(value, BaseException) or (
        isinstance(value, type) and issubclass(value, BaseException)
    ):
        raise value
    raise StubbedPanic(value)


class OngoingStubbing:
    """Declare what a stubbed call does.

    Every ``then*`` call appends to the same stubbing: consecutive matching
    calls get consecutive answers and the last one repeats afterwards.
    """

    def __init__(
        self,
        generic_mock: GenericMock,
        method_name: str,
        matchers: MatcherSequence,
        return_types: t.Sequence[ReturnType],
    ) -> None:
        self.generic_mock = generic_mock
        self.method_name = method_name
        self.matchers = matchers
        self.return_types = tuple(return_types)

    def then_return(self, *values: t.Any) -> OngoingStubbing:  # noqa: ANN401
        """Answer with *values*, one per declared return type."""
        check_assignability(values, self.return_types)
        self.generic_mock.stub(self.method_name, self.matchers, values)
        return self

    def then_panic(self, value: t.Any) -> OngoingStubbing:  # noqa: ANN401
        """Raise *value* when called.

        Exception instances and classes are raised as they are; any other
        payload is wrapped in :class:`~call_mox.errors.StubbedPanic`.
        """
        self.generic_mock.stub_with_callback(
            self.method_name, self.matchers, lambda _params: _panic(value)
        )
        return self

    def then(self, callback: Callback) -> OngoingStubbing:
        """Answer with ``callback(params)``, a sequence of return values."""
        self.generic_mock.stub_with_callback(self.method_name, self.matchers, callback)
        return self

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"OngoingStubbing({self.method_name}{self.matchers})"


__all__ = ["OngoingStubbing"]
