"""Verification helpers for :class:`~call_mox.generic_mock.GenericMock`."""

from __future__ import annotations

import dataclasses as dc
import typing as t
from textwrap import indent

from .errors import UsageError
from .matchers import (
    EqMatcher,
    Matcher,
    MatcherSequence,
    VariadicMatcher,
    contains_matchers,
    is_group_matcher,
)

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .counts import CountMatcher
    from .ledger import InvocationRecord

FailHandler = t.Callable[[str], None]

NO_FAIL_HANDLER_MESSAGE: t.Final[str] = (
    "No fail handler set. Use CallMox(fail_handler=...) or "
    "CallMox.register_fail_handler() to set one."
)

_MATCHER_USE_HINT: t.Final[str] = (
    "This error may occur if matchers are combined with raw values:\n"
    "    # incorrect:\n"
    "    some_func(any_int(), 'raw string')\n"
    "When using matchers, all arguments have to be provided by matchers.\n"
    "For example:\n"
    "    # correct:\n"
    "    some_func(any_int(), eq('string by matcher'))"
)


@dc.dataclass(slots=True)
class InOrderContext:
    """Position reached by a chain of in-order verifications."""

    invocation_counter: int = -1
    last_method_name: str | None = None
    last_params: str = "[]"


@dc.dataclass(frozen=True, slots=True)
class VerificationResult:
    """Invocations selected by a verification, usable as argument captors."""

    method_name: str
    invocations: tuple[InvocationRecord, ...]

    def captured_arguments(self) -> tuple[t.Any, ...]:
        """Return the parameters of the last matching invocation."""
        if not self.invocations:
            msg = f"No invocations of {self.method_name!r} were captured"
            raise UsageError(msg)
        return self.invocations[-1].params

    def all_captured_arguments(self) -> list[list[t.Any]]:
        """Return the parameters of every matching invocation, per position."""
        return columns_of(self.invocations)


def columns_of(invocations: t.Sequence[InvocationRecord]) -> list[list[t.Any]]:
    """Transpose invocation params into one list per parameter position."""
    if not invocations:
        return []
    columns: list[list[t.Any]] = [[] for _ in invocations[-1].params]
    for invocation in invocations:
        for column, param in zip(columns, invocation.params, strict=False):
            column.append(param)
    return columns


def describe_params(params: t.Sequence[t.Any] | MatcherSequence) -> str:
    """Return ``[p1, p2]`` using matcher descriptions where present."""
    if isinstance(params, MatcherSequence):
        return str(params)
    return repr(list(params))


def group_variadic_matchers(
    matchers: t.Sequence[Matcher], params_count: int
) -> list[Matcher]:
    """Collapse the matchers of a variadic call's tail into one matcher.

    Variadic arguments arrive packed into the last parameter, while matcher
    constructors register one matcher per argument. The first
    ``params_count - 1`` matchers stay positional; the rest become a
    :class:`VariadicMatcher`. A single group matcher such as ``AnyVarargs``
    in the variadic position is kept as it is.
    """
    regular = params_count - 1
    if regular < 0 or len(matchers) < regular:
        return list(matchers)
    tail = list(matchers[regular:])
    if len(tail) == 1 and is_group_matcher(tail[0]):
        return list(matchers)
    return [*matchers[:regular], VariadicMatcher(tuple(tail))]


def verify_arg_matcher_use(
    matchers: t.Sequence[Matcher], params: t.Sequence[t.Any]
) -> None:
    """Raise :class:`UsageError` unless there is one matcher per parameter."""
    if len(matchers) != len(params):
        msg = (
            "Invalid use of matchers!\n\n"
            f" {len(params)} matchers expected, {len(matchers)} recorded.\n\n"
            f"{_MATCHER_USE_HINT}"
        )
        raise UsageError(msg)


def matchers_from_params(
    params: t.Sequence[t.Any], *, is_variadic: bool = False
) -> MatcherSequence:
    """Build a sequence from literals, keeping inline matcher objects."""
    if is_variadic and params and contains_matchers(params[-1]):
        tail = MatcherSequence.from_params(params[-1])
        head = MatcherSequence.from_params(params[:-1])
        if len(tail) == 1 and is_group_matcher(tail[0]):
            return MatcherSequence([*head, tail[0]])
        return MatcherSequence([*head, VariadicMatcher(tuple(tail))])
    return MatcherSequence.from_params(params)


def param_matchers(
    arg_matchers: t.Sequence[Matcher],
    params: t.Sequence[t.Any],
    *,
    is_variadic: bool = False,
) -> MatcherSequence | None:
    """Return the matchers to use for *params*, or ``None`` for exact equality.

    Registered ad-hoc matchers win over literal parameters. Matcher objects
    passed directly as parameters are used next, with literals around them
    compared for equality.
    """
    if arg_matchers:
        matchers = list(arg_matchers)
        if is_variadic:
            matchers = group_variadic_matchers(matchers, len(params))
        verify_arg_matcher_use(matchers, params)
        return MatcherSequence(matchers)
    if contains_matchers(params):
        return matchers_from_params(params, is_variadic=is_variadic)
    return None


def stubbing_matchers(
    arg_matchers: t.Sequence[Matcher],
    params: t.Sequence[t.Any],
    *,
    is_variadic: bool = False,
) -> MatcherSequence:
    """Return the matchers a stubbing registers; literals become equality."""
    matchers = param_matchers(arg_matchers, params, is_variadic=is_variadic)
    if matchers is None:
        return MatcherSequence(EqMatcher(value=p) for p in params)
    return matchers


def select_invocations(
    invocations: t.Iterable[InvocationRecord],
    params: t.Sequence[t.Any],
    matchers: MatcherSequence | None,
) -> list[InvocationRecord]:
    """Return the invocations matching *matchers*, or equal to *params*."""
    if matchers is not None:
        return [inv for inv in invocations if matchers.matches(inv.params)]
    expected = tuple(params)
    return [inv for inv in invocations if inv.params == expected]


def _format_sections(title: str, sections: list[tuple[str, str]]) -> str:
    parts = [title]
    for label, body in sections:
        if not body:
            continue
        parts.append("")
        parts.append(f"{label}:")
        parts.append(indent(body, "  "))
    return "\n".join(parts)


def _format_call(name: str | None, params: str) -> str:
    return f'"{name}" with params {params}'


def check_order(
    context: InOrderContext,
    method_name: str,
    params: str,
    invocations: t.Iterable[InvocationRecord],
    fail: FailHandler,
) -> None:
    """Report invocations happening before the context's last position.

    The context always moves on to the latest inspected invocation, also
    after a violation.
    """
    for invocation in invocations:
        if invocation.sequence_number <= context.invocation_counter:
            fail(
                _format_sections(
                    "Mock invocation order does not match expectation.",
                    [
                        (
                            "Expected function call",
                            _format_call(method_name, params),
                        ),
                        (
                            "To happen after function call",
                            _format_call(context.last_method_name, context.last_params),
                        ),
                    ],
                )
            )
        context.invocation_counter = invocation.sequence_number
        context.last_method_name = method_name
        context.last_params = params


def check_count(
    count_matcher: CountMatcher,
    method_name: str,
    params: str,
    invocations: t.Sized,
    fail: FailHandler,
) -> None:
    """Report a mismatch between expected and observed invocation counts."""
    if count_matcher.matches(len(invocations)):
        return
    fail(
        f'Mock invocation count for method "{method_name}" with params {params} '
        f"does not match expectation.\n\n\t{count_matcher.failure_message()}"
    )


__all__ = [
    "NO_FAIL_HANDLER_MESSAGE",
    "FailHandler",
    "InOrderContext",
    "VerificationResult",
    "check_count",
    "check_order",
    "columns_of",
    "describe_params",
    "group_variadic_matchers",
    "matchers_from_params",
    "param_matchers",
    "select_invocations",
    "stubbing_matchers",
    "verify_arg_matcher_use",
]
