"""Argument matchers used for stubbing and verification."""

from __future__ import annotations

import dataclasses as dc
import re
import typing as t

from .errors import UsageError


@t.runtime_checkable
class Matcher(t.Protocol):
    """Predicate over a single parameter.

    :meth:`failure_message` is only ever called after :meth:`matches`
    returned ``False`` for the same evaluation, so implementations may keep
    context from :meth:`matches` around for the message.
    """

    def matches(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        """Return ``True`` if *param* satisfies the matcher."""
        ...

    def failure_message(self) -> str:
        """Describe why the last evaluated parameter did not match."""
        ...


@dc.dataclass(slots=True)
class BaseMatcher:
    """Shared behaviour for the built-in matchers."""

    # Value seen by the most recent failed ``matches`` call.
    _actual: t.Any = dc.field(default=None, init=False, repr=False, compare=False)

    # Group matchers describe the packed variadic collection as a whole.
    groups_variadic: t.ClassVar[bool] = False

    def matches(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        """Return ``True`` when *param* matches, remembering it otherwise."""
        if self._check(param):
            return True
        self._actual = param
        return False

    def _check(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        """Test *param*; every concrete matcher overrides this."""
        raise NotImplementedError

    def failure_message(self) -> str:
        """Describe the expectation and the offending value."""
        return f"Expected: {self}; but got: {self._actual!r}"

    def __call__(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        """Alias for :meth:`matches` so matchers work as plain predicates."""
        return self.matches(param)

    def __str__(self) -> str:
        """Return the description used in verification messages."""
        return repr(self)


@dc.dataclass(slots=True)
class EqMatcher(BaseMatcher):
    """Match parameters equal to ``value``."""

    value: t.Any

    def _check(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        return bool(param == self.value)

    def __str__(self) -> str:
        """Return ``Eq(<value>)``."""
        return f"Eq({self.value!r})"


@dc.dataclass(slots=True)
class NotEq(BaseMatcher):
    """Match parameters that differ from ``value``."""

    value: t.Any

    def _check(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        return bool(param != self.value)


@dc.dataclass(slots=True)
class AnyMatcher(BaseMatcher):
    """Match any value."""

    def _check(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        return True

    def __repr__(self) -> str:
        """Return ``Any()``."""
        return "Any()"


@dc.dataclass(slots=True)
class AnyOfType(BaseMatcher):
    """Match instances of ``typ``."""

    typ: type

    def _check(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        return isinstance(param, self.typ)


@dc.dataclass(slots=True)
class IsA(BaseMatcher):
    """Match values convertible to ``typ``."""

    typ: type

    def _check(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        try:
            self.typ(param)
        except Exception:  # noqa: BLE001 - conversion may fail
            return False
        return True


@dc.dataclass(slots=True)
class Regex(BaseMatcher):
    """Match strings in which ``pattern`` is found."""

    pattern: str
    _compiled: re.Pattern[str] = dc.field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._compiled = re.compile(self.pattern)

    def _check(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        return isinstance(param, str) and bool(self._compiled.search(param))


@dc.dataclass(slots=True)
class Contains(BaseMatcher):
    """Match containers holding ``item``."""

    item: t.Any

    def _check(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        try:
            return self.item in param
        except TypeError:
            return False


@dc.dataclass(slots=True)
class StartsWith(BaseMatcher):
    """Match strings beginning with ``prefix``."""

    prefix: str

    def _check(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        return isinstance(param, str) and param.startswith(self.prefix)


@dc.dataclass(slots=True)
class Predicate(BaseMatcher):
    """Use a custom ``func`` to determine a match."""

    func: t.Callable[[t.Any], object]

    def _check(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        return bool(self.func(param))


@dc.dataclass(slots=True)
class VariadicMatcher(BaseMatcher):
    """Match a packed variadic collection element by element."""

    matchers: tuple[Matcher, ...]
    groups_variadic: t.ClassVar[bool] = True

    def _check(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        if not isinstance(param, (tuple, list)) or len(param) != len(self.matchers):
            return False
        return all(m.matches(p) for m, p in zip(self.matchers, param, strict=True))

    def __str__(self) -> str:
        """Describe the grouped matchers."""
        return "Variadic(" + ", ".join(str(m) for m in self.matchers) + ")"


@dc.dataclass(slots=True)
class AnyVarargs(BaseMatcher):
    """Match a variadic collection of any length, including none."""

    groups_variadic: t.ClassVar[bool] = True

    def _check(self, param: t.Any) -> bool:  # noqa: ANN401 - any parameter
        return isinstance(param, (tuple, list))

    def __repr__(self) -> str:
        """Return ``AnyVarargs()``."""
        return "AnyVarargs()"


def is_group_matcher(matcher: Matcher) -> bool:
    """Return ``True`` if *matcher* stands for a whole variadic collection."""
    return bool(getattr(matcher, "groups_variadic", False))


class MatcherSequence:
    """Ordered matchers, one per formal parameter of a mocked method."""

    __slots__ = ("_matchers",)

    def __init__(self, matchers: t.Iterable[Matcher]) -> None:
        self._matchers: tuple[Matcher, ...] = tuple(matchers)

    @classmethod
    def from_params(cls, params: t.Iterable[t.Any]) -> MatcherSequence:
        """Wrap each literal in *params* in an :class:`EqMatcher`.

        Parameters that already are matchers are kept as they are.
        """
        return cls(p if isinstance(p, Matcher) else EqMatcher(value=p) for p in params)

    def matches(self, params: t.Sequence[t.Any]) -> bool:
        """Return ``True`` if every positional matcher accepts its parameter."""
        if len(self._matchers) != len(params):
            msg = (
                "Number of params and matchers different: "
                f"params: {list(params)!r}, matchers: {self}"
            )
            raise UsageError(msg)
        return all(m.matches(p) for m, p in zip(self._matchers, params, strict=True))

    def __len__(self) -> int:
        """Return the number of matchers."""
        return len(self._matchers)

    def __iter__(self) -> t.Iterator[Matcher]:
        """Iterate over the matchers in positional order."""
        return iter(self._matchers)

    def __getitem__(self, index: int) -> Matcher:
        """Return the matcher at *index*."""
        return self._matchers[index]

    def __eq__(self, other: object) -> bool:
        """Compare matcher by matcher."""
        if not isinstance(other, MatcherSequence):
            return NotImplemented
        return self._matchers == other._matchers

    def __str__(self) -> str:
        """Return ``[m1, m2, ...]`` using each matcher's description."""
        return "[" + ", ".join(str(m) for m in self._matchers) + "]"

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"MatcherSequence({list(self._matchers)!r})"


def contains_matchers(params: t.Iterable[t.Any]) -> bool:
    """Return ``True`` if any parameter is itself a matcher object.

    Packed variadic collections are searched one level deep.
    """
    for param in params:
        if isinstance(param, Matcher):
            return True
        if isinstance(param, tuple) and any(isinstance(p, Matcher) for p in param):
            return True
    return False


__all__ = [
    "AnyMatcher",
    "AnyOfType",
    "AnyVarargs",
    "BaseMatcher",
    "Contains",
    "EqMatcher",
    "IsA",
    "Matcher",
    "MatcherSequence",
    "NotEq",
    "Predicate",
    "Regex",
    "StartsWith",
    "VariadicMatcher",
    "contains_matchers",
    "is_group_matcher",
]
