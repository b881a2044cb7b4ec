"""CallMox controller: stubbing and verification entry points."""

from __future__ import annotations

import inspect
import logging
import threading
import typing as t

from .counts import once
from .errors import UsageError
from .generic_mock import GenericMock
from .standin import create_stand_in, generic_mock_of, method_specs
from .stubbing import OngoingStubbing
from .verifiers import InOrderContext, VerificationResult, stubbing_matchers

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import types

    from .counts import CountMatcher
    from .generic_mock import PendingInvocation
    from .matchers import Matcher
    from .standin import MethodSpec
    from .verifiers import FailHandler

logger = logging.getLogger(__name__)

_M = t.TypeVar("_M")

_WHEN_USAGE: t.Final[str] = (
    "when() requires an argument which has to be 'a method call on a mock'."
)
_WHEN_FUNCTION_USAGE: t.Final[str] = (
    "When using when() with a function that does not return a value, "
    "it expects a function with no arguments."
)


def _requires_arguments(func: t.Callable[..., t.Any]) -> bool:
    """Return ``True`` if *func* cannot be called without arguments."""
    return any(
        param.default is param.empty
        and param.kind
        not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for param in inspect.signature(func).parameters.values()
    )


class CallMox:
    """Owner of stand-ins and of the transient stubbing/verification context.

    The context (last invocation on any owned mock and pending ad-hoc
    matchers) assumes one thread declares stubbings and verifications at a
    time. Stand-ins themselves may be called from any thread.
    """

    # Track the active controller per thread for matcher constructors.
    _state: t.ClassVar[threading.local] = threading.local()

    @classmethod
    def get_active(cls) -> CallMox | None:
        """Return the active controller for the current thread, if any."""
        return getattr(cls._state, "active", None)

    @classmethod
    def reset_active(cls) -> None:
        """Clear any active controller for the current thread."""
        cls._state.active = None

    @classmethod
    def _set_active(cls, mox: CallMox) -> None:
        cls._state.active = mox

    def __init__(self, *, fail_handler: FailHandler | None = None) -> None:
        """Create a new controller.

        Parameters
        ----------
        fail_handler:
            Sink receiving verification failure messages. Verification is a
            usage error until one is registered, either here or through
            :meth:`register_fail_handler`.
        """
        self._fail_handler = fail_handler
        self._last_invocation: PendingInvocation | None = None
        self._arg_matchers: list[Matcher] = []
        self._triggering = False
        self._generic_mocks: list[GenericMock] = []
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Context manager protocol
    # ------------------------------------------------------------------
    def __enter__(self) -> CallMox:
        """Make this controller the active one for the current thread."""
        if type(self).get_active() is not None:
            msg = "CallMox contexts cannot be nested"
            raise UsageError(msg)
        type(self)._set_active(self)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Deactivate the controller and drop any half-declared context."""
        self.clear_context()
        if type(self).get_active() is self:
            type(self).reset_active()

    # ------------------------------------------------------------------
    # Failure sink
    # ------------------------------------------------------------------
    @property
    def fail_handler(self) -> FailHandler | None:
        """Return the registered failure sink."""
        return self._fail_handler

    def register_fail_handler(self, handler: FailHandler | None) -> None:
        """Route verification failures to *handler*."""
        self._fail_handler = handler

    # ------------------------------------------------------------------
    # Transient DSL context
    # ------------------------------------------------------------------
    def publish_invocation(self, pending: PendingInvocation) -> None:
        """Remember *pending* as the last invocation made on any mock."""
        self._last_invocation = pending

    def is_setting_up(self) -> bool:
        """Return ``True`` while a stubbing or verification is being declared."""
        return self._triggering or bool(self._arg_matchers)

    def pending_matchers(self) -> list[Matcher]:
        """Return the ad-hoc matchers registered since the last DSL call."""
        return list(self._arg_matchers)

    def register_matcher(self, matcher: _M) -> _M:
        """Add *matcher* to the ad-hoc list and return it for inline use."""
        self._arg_matchers.append(t.cast("Matcher", matcher))
        return matcher

    def clear_context(self) -> None:
        """Forget the last invocation and the pending matchers."""
        self._last_invocation = None
        self._arg_matchers = []

    # ------------------------------------------------------------------
    # Stand-ins
    # ------------------------------------------------------------------
    def new_generic_mock(self) -> GenericMock:
        """Create a generic mock reporting to this controller."""
        generic_mock = GenericMock(self)
        with self._lock:
            self._generic_mocks.append(generic_mock)
        return generic_mock

    def mock(self, interface: type[_M]) -> _M:
        """Return a new stand-in for *interface*."""
        stand_in = create_stand_in(interface, self)
        logger.debug("Created stand-in for %s", interface.__qualname__)
        return t.cast("_M", stand_in)

    def _generic_mock_for(self, stand_in: object) -> GenericMock:
        generic_mock = generic_mock_of(stand_in, self)
        if generic_mock.owner is not self:
            msg = f"{stand_in!r} belongs to a different CallMox"
            raise UsageError(msg)
        return generic_mock

    # ------------------------------------------------------------------
    # Stubbing
    # ------------------------------------------------------------------
    def when(self, call_result: object = None) -> OngoingStubbing:
        """Turn the last mock invocation into a stubbing.

        Pass the result of a mock call, ``when(mock.method(1))``, or a
        function making the call, ``when(lambda: mock.method(1))``. The
        latter works for methods returning ``None`` and never runs
        previously stubbed behaviour.
        """
        try:
            self._call_if_function(call_result)
            pending = self._last_invocation
            if pending is None:
                raise UsageError(_WHEN_USAGE)
            generic_mock = pending.generic_mock
            generic_mock.remove_invocation(pending.method_name, pending.record)
            matchers = stubbing_matchers(
                self._arg_matchers,
                pending.record.params,
                is_variadic=pending.is_variadic,
            )
            generic_mock.reset_stubbing(pending.method_name, matchers)
            logger.debug("Stubbing %s%s", pending.method_name, matchers)
            return OngoingStubbing(
                generic_mock, pending.method_name, matchers, pending.return_types
            )
        finally:
            self.clear_context()

    def _call_if_function(self, call_result: object) -> None:
        if not (inspect.isfunction(call_result) or inspect.ismethod(call_result)):
            return
        if _requires_arguments(call_result):
            raise UsageError(_WHEN_FUNCTION_USAGE)
        self._triggering = True
        try:
            call_result()
        finally:
            self._triggering = False

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------
    def in_order(self) -> InOrderContext:
        """Return a fresh context for a chain of in-order verifications."""
        return InOrderContext()

    def verify(
        self,
        stand_in: _M,
        count: CountMatcher | None = None,
        *,
        in_order: InOrderContext | None = None,
    ) -> _M:
        """Return a proxy whose method calls verify calls on *stand_in*.

        ``count`` defaults to :func:`~call_mox.counts.once`. The proxy's
        methods return a :class:`~call_mox.verifiers.VerificationResult`.
        """
        proxy = VerifyingProxy(
            self._generic_mock_for(stand_in),
            method_specs(stand_in),
            once() if count is None else count,
            in_order,
        )
        return t.cast("_M", proxy)

    def verify_in_order(
        self,
        stand_in: _M,
        in_order: InOrderContext,
        count: CountMatcher | None = None,
    ) -> _M:
        """Shorthand for :meth:`verify` with an ordering context."""
        return self.verify(stand_in, count, in_order=in_order)

    def invocations(self, stand_in: object, method_name: str) -> list[t.Any]:
        """Return the recorded invocations of *method_name* on *stand_in*."""
        return self._generic_mock_for(stand_in).invocations(method_name)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Forget all invocations, stubbings and pending context."""
        self.clear_context()
        with self._lock:
            generic_mocks = list(self._generic_mocks)
        for generic_mock in generic_mocks:
            generic_mock.reset()


class VerifyingProxy:
    """Stand-in lookalike whose calls run verifications instead."""

    def __init__(
        self,
        generic_mock: GenericMock,
        specs: t.Mapping[str, MethodSpec],
        count: CountMatcher,
        in_order: InOrderContext | None,
    ) -> None:
        self._generic_mock = generic_mock
        self._specs = specs
        self._count = count
        self._in_order = in_order

    def __getattr__(self, name: str) -> t.Callable[..., VerificationResult]:
        """Return a function verifying calls of *name*."""
        if name.startswith("_"):
            raise AttributeError(name)
        spec = self._specs.get(name)

        def verify_call(
            *args: t.Any,  # noqa: ANN401
            **kwargs: t.Any,  # noqa: ANN401
        ) -> VerificationResult:
            if spec is not None:
                params = spec.pack(args, kwargs)
                is_variadic = spec.is_variadic
            elif kwargs:
                msg = f"{name}() has no known signature; pass arguments positionally"
                raise UsageError(msg)
            else:
                params, is_variadic = tuple(args), False
            matching = self._generic_mock.verify(
                self._in_order, self._count, name, params, is_variadic
            )
            return VerificationResult(name, tuple(matching))

        return verify_call


__all__ = ["CallMox", "VerifyingProxy"]
