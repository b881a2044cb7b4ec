"""Build stand-in classes for Python interfaces at run time.

A stand-in is a subclass of the mocked interface whose public methods all
forward to :meth:`GenericMock.invoke`. Hand-written stand-ins can do the
same by calling :func:`generic_mock_of` themselves.
"""

from __future__ import annotations

import dataclasses as dc
import functools
import inspect
import threading
import typing as t

from .errors import UsageError
from .return_types import ANY_TYPE, descriptor_for

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .controller import CallMox
    from .generic_mock import GenericMock
    from .ledger import ReturnValues
    from .return_types import ReturnType

GENERIC_MOCK_ATTR: t.Final[str] = "_call_mox_generic_mock"
METHOD_SPECS_ATTR: t.Final[str] = "__call_mox_specs__"

_SKIPPED_MODULES: t.Final[frozenset[str]] = frozenset({"abc", "builtins", "typing"})
_NO_RETURN: t.Final[tuple[t.Any, ...]] = (None, type(None), "None", t.NoReturn)

_bind_lock = threading.Lock()


@dc.dataclass(frozen=True, slots=True)
class MethodSpec:
    """How a stand-in method packs its arguments and unpacks its result."""

    name: str
    signature: inspect.Signature
    return_types: tuple[ReturnType, ...]
    is_variadic: bool

    @classmethod
    def from_function(cls, name: str, func: t.Callable[..., t.Any]) -> MethodSpec:
        """Describe the instance method *func* of an interface."""
        signature = inspect.signature(func)
        params = list(signature.parameters.values())[1:]
        signature = signature.replace(parameters=params)
        is_variadic = (
            bool(params) and params[-1].kind is inspect.Parameter.VAR_POSITIONAL
        )
        return cls(name, signature, _return_types(func), is_variadic)

    def pack(self, args: t.Sequence[t.Any], kwargs: t.Mapping[str, t.Any]) -> tuple:
        """Bind a call's arguments into positional params.

        Defaults are applied, ``*args`` becomes a tuple and ``**kwargs`` a
        dict, each at the position of its declaration.
        """
        bound = self.signature.bind(*args, **kwargs)
        bound.apply_defaults()
        params: list[t.Any] = []
        for name, param in self.signature.parameters.items():
            value = bound.arguments[name]
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                params.append(tuple(value))
            elif param.kind is inspect.Parameter.VAR_KEYWORD:
                params.append(dict(value))
            else:
                params.append(value)
        return tuple(params)

    def unpack(self, values: ReturnValues) -> t.Any:  # noqa: ANN401 - any result
        """Turn engine return values into a Python return value."""
        if not self.return_types:
            return None
        if len(self.return_types) == 1:
            return values[0]
        return values


def _return_types(func: t.Callable[..., t.Any]) -> tuple[ReturnType, ...]:
    try:
        hints = t.get_type_hints(func)
    except (NameError, TypeError):
        hints = dict(getattr(func, "__annotations__", {}))
    if "return" not in hints:
        return (ANY_TYPE,)
    annotation = hints["return"]
    if any(annotation is marker or annotation == marker for marker in _NO_RETURN):
        return ()
    return (descriptor_for(annotation),)


def _interface_methods(interface: type) -> dict[str, t.Callable[..., t.Any]]:
    methods: dict[str, t.Callable[..., t.Any]] = {}
    for klass in reversed(interface.__mro__):
        if klass.__module__ in _SKIPPED_MODULES:
            continue
        for name, member in vars(klass).items():
            if name.startswith("_"):
                continue
            if inspect.isfunction(member):
                methods[name] = member
            else:
                methods.pop(name, None)
    return methods


@functools.cache
def _class_specs(cls: type) -> dict[str, MethodSpec]:
    return {
        name: MethodSpec.from_function(name, func)
        for name, func in _interface_methods(cls).items()
    }


def _forwarder(spec: MethodSpec) -> t.Callable[..., t.Any]:
    def forward(self: object, *args: t.Any, **kwargs: t.Any) -> t.Any:  # noqa: ANN401
        params = spec.pack(args, kwargs)
        values = generic_mock_of(self).invoke(
            spec.name, params, spec.is_variadic, spec.return_types
        )
        return spec.unpack(values)

    forward.__name__ = spec.name
    forward.__qualname__ = spec.name
    forward.__doc__ = f"Forward ``{spec.name}`` to the generic mock."
    return forward


def _stand_in_repr(self: object) -> str:
    return f"<stand-in for {type(self).__mro__[1].__qualname__} at {id(self):#x}>"


@functools.cache
def stand_in_class(interface: type) -> type:
    """Return the (cached) stand-in class for *interface*."""
    if not isinstance(interface, type):
        msg = f"can only mock classes, got {interface!r}"
        raise TypeError(msg)
    specs = _class_specs(interface)
    namespace: dict[str, t.Any] = {
        name: _forwarder(spec) for name, spec in specs.items()
    }
    namespace[METHOD_SPECS_ATTR] = specs
    namespace["__repr__"] = _stand_in_repr
    namespace["__module__"] = interface.__module__
    cls = type(f"{interface.__name__}StandIn", (interface,), namespace)
    # Every public method is implemented; private abstract ones never run.
    cls.__abstractmethods__ = frozenset()
    return cls


def create_stand_in(interface: type, owner: CallMox) -> t.Any:  # noqa: ANN401
    """Instantiate a stand-in for *interface* reporting to *owner*."""
    cls = stand_in_class(interface)
    stand_in = object.__new__(cls)
    object.__setattr__(stand_in, GENERIC_MOCK_ATTR, owner.new_generic_mock())
    return stand_in


def method_specs(stand_in: object) -> t.Mapping[str, MethodSpec]:
    """Return how the methods of *stand_in* pack their arguments.

    Generated stand-ins publish their specs; for hand-written ones the
    signatures of their own public methods are used.
    """
    specs = getattr(type(stand_in), METHOD_SPECS_ATTR, None)
    if specs is None:
        specs = _class_specs(type(stand_in))
    return specs


def _attached(stand_in: object) -> GenericMock | None:
    return getattr(stand_in, "__dict__", {}).get(GENERIC_MOCK_ATTR)


def generic_mock_of(stand_in: object, owner: CallMox | None = None) -> GenericMock:
    """Return the generic mock backing *stand_in*, creating it if absent.

    New generic mocks report to *owner*, or to the active
    :class:`~call_mox.controller.CallMox` of the current thread.
    """
    existing = _attached(stand_in)
    if existing is not None:
        return existing
    if owner is None:
        from .controller import CallMox

        owner = CallMox.get_active()
    if owner is None:
        msg = (
            f"{type(stand_in).__name__} is not bound to a CallMox; create it "
            "with CallMox.mock() or inside 'with CallMox():'"
        )
        raise UsageError(msg)
    with _bind_lock:
        existing = _attached(stand_in)
        if existing is not None:
            return existing
        generic_mock = owner.new_generic_mock()
        try:
            object.__setattr__(stand_in, GENERIC_MOCK_ATTR, generic_mock)
        except AttributeError as exc:
            msg = f"cannot attach a generic mock to {type(stand_in).__name__}"
            raise UsageError(msg) from exc
    return generic_mock


__all__ = [
    "GENERIC_MOCK_ATTR",
    "METHOD_SPECS_ATTR",
    "MethodSpec",
    "create_stand_in",
    "generic_mock_of",
    "method_specs",
    "stand_in_class",
]
