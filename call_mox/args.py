"""Ad-hoc matcher constructors for use inside ``when()`` and ``verify()``.

Every constructor registers its matcher with the active
:class:`~call_mox.controller.CallMox` and returns it, so it can be passed
straight into the stand-in call being declared::

    with CallMox() as mox:
        mox.when(display.show(args.any_str())).then_return(True)

Once a call uses one of these constructors, every parameter of that call
has to be given by a constructor (use :func:`eq` for literals).
"""

from __future__ import annotations

import typing as t

from .errors import UsageError
from .matchers import (
    AnyMatcher,
    AnyOfType,
    AnyVarargs,
    Contains,
    EqMatcher,
    IsA,
    Matcher,
    NotEq,
    Predicate,
    Regex,
    StartsWith,
)

_M = t.TypeVar("_M", bound=Matcher)


def _register(matcher: _M) -> _M:
    from .controller import CallMox

    mox = CallMox.get_active()
    if mox is None:
        msg = (
            "argument matchers need an active CallMox; use them inside "
            "'with CallMox():' or the call_mox fixture"
        )
        raise UsageError(msg)
    return mox.register_matcher(matcher)


def matching(matcher: _M) -> _M:
    """Register a custom *matcher* implementing the matcher protocol."""
    if not isinstance(matcher, Matcher):
        msg = f"{matcher!r} does not implement matches() and failure_message()"
        raise TypeError(msg)
    return _register(matcher)


def any_value() -> AnyMatcher:
    """Match any parameter."""
    return _register(AnyMatcher())


def any_of_type(typ: type) -> AnyOfType:
    """Match instances of *typ*."""
    return _register(AnyOfType(typ))


def any_int() -> AnyOfType:
    """Match ``int`` parameters."""
    return any_of_type(int)


def any_float() -> AnyOfType:
    """Match ``float`` parameters."""
    return any_of_type(float)


def any_str() -> AnyOfType:
    """Match ``str`` parameters."""
    return any_of_type(str)


def any_bool() -> AnyOfType:
    """Match ``bool`` parameters."""
    return any_of_type(bool)


def any_bytes() -> AnyOfType:
    """Match ``bytes`` parameters."""
    return any_of_type(bytes)


def any_varargs() -> AnyVarargs:
    """Match the whole variadic tail of a call, however long."""
    return _register(AnyVarargs())


def eq(value: t.Any) -> EqMatcher:  # noqa: ANN401 - any parameter
    """Match parameters equal to *value*."""
    return _register(EqMatcher(value))


def not_eq(value: t.Any) -> NotEq:  # noqa: ANN401 - any parameter
    """Match parameters different from *value*."""
    return _register(NotEq(value))


def is_a(typ: type) -> IsA:
    """Match parameters that *typ* accepts as constructor argument."""
    return _register(IsA(typ))


def regex(pattern: str) -> Regex:
    """Match strings containing *pattern*."""
    return _register(Regex(pattern))


def contains(item: t.Any) -> Contains:  # noqa: ANN401 - any item
    """Match containers holding *item*."""
    return _register(Contains(item))


def starts_with(prefix: str) -> StartsWith:
    """Match strings beginning with *prefix*."""
    return _register(StartsWith(prefix))


def arg_that(func: t.Callable[[t.Any], object]) -> Predicate:
    """Match parameters for which *func* returns a truthy value."""
    return _register(Predicate(func))


__all__ = [
    "any_bool",
    "any_bytes",
    "any_float",
    "any_int",
    "any_of_type",
    "any_str",
    "any_value",
    "any_varargs",
    "arg_that",
    "contains",
    "eq",
    "is_a",
    "matching",
    "not_eq",
    "regex",
    "starts_with",
]
