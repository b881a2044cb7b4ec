"""Descriptors for the declared return types of mocked methods.

Stand-ins declare the return types of each method as a sequence of
descriptors. The engine uses them for two things only: producing zero
values for unstubbed calls and checking values passed to
:meth:`~call_mox.stubbing.OngoingStubbing.then_return`. Anything
implementing :class:`ReturnType` can be supplied; plain annotations are
converted with :func:`descriptor_for`.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import types
import typing as t

from .errors import AssignabilityError


class Kind(enum.StrEnum):
    """Coarse classification of a return type."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    COMPLEX = "complex"
    STR = "str"
    BYTES = "bytes"
    TUPLE = "tuple"
    REFERENCE = "reference"


_ZERO_VALUES: dict[Kind, t.Any] = {
    Kind.BOOL: False,
    Kind.INT: 0,
    Kind.FLOAT: 0.0,
    Kind.COMPLEX: 0j,
    Kind.STR: "",
    Kind.BYTES: b"",
    Kind.TUPLE: (),
    Kind.REFERENCE: None,
}

_KINDS_BY_TYPE: dict[type, Kind] = {
    bool: Kind.BOOL,
    int: Kind.INT,
    float: Kind.FLOAT,
    complex: Kind.COMPLEX,
    str: Kind.STR,
    bytes: Kind.BYTES,
    tuple: Kind.TUPLE,
}

# Numeric tower: ``int`` is acceptable where ``float`` is declared, and so on.
_NUMERIC_WIDENING: dict[type, tuple[type, ...]] = {
    float: (int, float),
    complex: (int, float, complex),
}


@t.runtime_checkable
class ReturnType(t.Protocol):
    """Pluggable description of one declared return type."""

    @property
    def nullable(self) -> bool:
        """Return ``True`` when ``None`` is a legal value."""
        ...

    def zero_value(self) -> t.Any:  # noqa: ANN401 - depends on the type
        """Return the value used when a call is not stubbed."""
        ...

    def accepts(self, value: object) -> bool:
        """Return ``True`` if the non-``None`` *value* fits this type."""
        ...


@dc.dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """:class:`ReturnType` built from a Python annotation."""

    kind: Kind
    annotation: t.Any = None

    @property
    def nullable(self) -> bool:
        """Only reference kinds can represent absence."""
        return self.kind is Kind.REFERENCE

    def zero_value(self) -> t.Any:  # noqa: ANN401 - depends on the kind
        """Return the zero value of this kind."""
        if self.kind is Kind.TUPLE:
            items = t.get_args(self.annotation)
            # Fixed-size tuples get one zero per position.
            if items and items[-1] is not Ellipsis:
                return tuple(descriptor_for(item).zero_value() for item in items)
        return _ZERO_VALUES[self.kind]

    def accepts(self, value: object) -> bool:
        """Check *value* against the annotation."""
        return _accepts(self.annotation, value)

    def __str__(self) -> str:
        """Return a readable name for messages."""
        if self.annotation is None:
            return "Any"
        if isinstance(self.annotation, type):
            return self.annotation.__qualname__
        return str(self.annotation)


ANY_TYPE: t.Final[TypeDescriptor] = TypeDescriptor(Kind.REFERENCE)


def _accepts(annotation: t.Any, value: object) -> bool:  # noqa: ANN401
    if annotation is None or annotation is t.Any or annotation is object:
        return True
    origin = t.get_origin(annotation)
    if origin is t.Union or origin is types.UnionType:
        return any(_accepts(arg, value) for arg in t.get_args(annotation))
    if origin is t.Literal:
        return value in t.get_args(annotation)
    if origin is not None:
        annotation = origin
    if not isinstance(annotation, type):
        # Type variables and unresolved forward references cannot be checked.
        return True
    if getattr(annotation, "_is_protocol", False) and not getattr(
        annotation, "_is_runtime_protocol", False
    ):
        return True
    return isinstance(value, _NUMERIC_WIDENING.get(annotation, annotation))


def descriptor_for(annotation: t.Any) -> ReturnType:  # noqa: ANN401
    """Return a :class:`ReturnType` for *annotation*.

    Existing descriptors are returned unchanged.
    """
    if isinstance(annotation, ReturnType):
        return annotation
    if annotation is None or annotation is t.Any:
        return ANY_TYPE
    origin = t.get_origin(annotation)
    kind = _KINDS_BY_TYPE.get(origin if origin is tuple else annotation)
    if kind is None:
        return TypeDescriptor(Kind.REFERENCE, annotation)
    return TypeDescriptor(kind, annotation)


def zero_values(return_types: t.Sequence[ReturnType]) -> tuple[t.Any, ...]:
    """Return the zero value of every declared return type."""
    return tuple(rt.zero_value() for rt in return_types)


def check_assignability(
    values: t.Sequence[t.Any], return_types: t.Sequence[ReturnType]
) -> None:
    """Raise :class:`AssignabilityError` unless *values* fit *return_types*."""
    if len(values) != len(return_types):
        msg = (
            "Different number of return values: "
            f"expected {len(return_types)}, got {len(values)}"
        )
        raise AssignabilityError(msg)
    for value, return_type in zip(values, return_types, strict=True):
        if value is None:
            if not return_type.nullable:
                msg = f"Return value 'None' not assignable to return type {return_type}"
                raise AssignabilityError(msg)
        elif not return_type.accepts(value):
            msg = (
                f"Return value of type {type(value).__qualname__} not assignable "
                f"to return type {return_type}"
            )
            raise AssignabilityError(msg)


__all__ = [
    "ANY_TYPE",
    "Kind",
    "ReturnType",
    "TypeDescriptor",
    "check_assignability",
    "descriptor_for",
    "zero_values",
]
