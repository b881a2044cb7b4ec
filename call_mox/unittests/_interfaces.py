"""Interfaces and stand-ins shared by the unit tests."""

from __future__ import annotations

import abc
import dataclasses as dc
import typing as t

from call_mox.standin import generic_mock_of

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from call_mox.controller import CallMox


@dc.dataclass(slots=True)
class Widget:
    """Value returned by :meth:`Display.lookup`."""

    name: str


class Display(t.Protocol):
    """Protocol mocked throughout the tests."""

    def show(self, message: str) -> None: ...

    def flash(self, message: str, times: int = 1) -> bool: ...

    def render(self, template: str, *values: t.Any) -> str: ...

    def size(self) -> tuple[int, int]: ...

    def ratio(self) -> float: ...

    def lookup(self, key: str) -> Widget | None: ...

    def configure(self, **options: t.Any) -> int: ...

    def untyped(self, value):  # noqa: ANN001, ANN201
        ...


class Calculator(abc.ABC):
    """Abstract base class mocked by the stand-in factory tests."""

    @abc.abstractmethod
    def add(self, left: int, right: int) -> int:
        """Return ``left + right``."""

    def describe(self) -> str:
        """Concrete methods are replaced too."""
        return "calculator"

    @staticmethod
    def version() -> str:
        return "1.0"

    def _internal(self) -> int:
        return 42


class PhoneBook:
    """Hand-written stand-in returning two values, as generated code would."""

    def __init__(self, mox: CallMox) -> None:
        generic_mock_of(self, mox)

    def get_phone_number(self, name: str) -> tuple[str, Exception | None]:
        values = generic_mock_of(self).invoke(
            "get_phone_number", [name], False, (str, Exception)
        )
        return values[0], values[1]

    def dial(self, *numbers: str) -> None:
        generic_mock_of(self).invoke("dial", [numbers], True)
