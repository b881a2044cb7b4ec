"""pytest-bdd steps declaring stubbings and calling stand-ins."""

from __future__ import annotations

import typing as t

from pytest_bdd import given, parsers, when

from call_mox import args
from call_mox.errors import UsageError

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from call_mox.controller import CallMox
    from tests.helpers.inventory import Inventory


@given(parsers.cfparse('counting "{item}" answers {value:d}'))
def stub_count(mox: CallMox, inventory: Inventory, item: str, value: int) -> None:
    """Stub the stock count of *item*."""
    mox.when(inventory.count(item)).then_return(value)


@given(parsers.cfparse('counting "{item}" answers {first:d} then {second:d}'))
def stub_count_twice(
    mox: CallMox, inventory: Inventory, item: str, first: int, second: int
) -> None:
    """Stub two consecutive stock counts of *item*."""
    mox.when(inventory.count(item)).then_return(first).then_return(second)


@given(parsers.cfparse("counting any item answers {value:d}"))
def stub_count_any(mox: CallMox, inventory: Inventory, value: int) -> None:
    """Stub the stock count of every item."""
    with mox:
        mox.when(inventory.count(args.any_str())).then_return(value)


@given(parsers.cfparse('counting "{item}" raises a LookupError'))
def stub_count_failure(mox: CallMox, inventory: Inventory, item: str) -> None:
    """Make counting *item* fail."""
    mox.when(inventory.count(item)).then_panic(LookupError(item))


@when(parsers.cfparse('I count the stock of "{item}"'), target_fixture="results")
def count_once(inventory: Inventory, item: str) -> list[int]:
    """Count the stock of *item* once."""
    return [inventory.count(item)]


@when(
    parsers.cfparse('I count the stock of "{item}" {times:d} times'),
    target_fixture="results",
)
def count_repeatedly(inventory: Inventory, item: str, times: int) -> list[int]:
    """Count the stock of *item* several times."""
    return [inventory.count(item) for _ in range(times)]


@when(
    parsers.cfparse('I count the stock of "{item}" expecting an error'),
    target_fixture="error",
)
def count_failing(inventory: Inventory, item: str) -> Exception:
    """Count the stock of *item* and capture the raised error."""
    try:
        inventory.count(item)
    except LookupError as exc:
        return exc
    msg = f"counting {item!r} did not fail"
    raise AssertionError(msg)


@when("I stub something that is not a mock call", target_fixture="error")
def stub_without_call(mox: CallMox) -> Exception:
    """Call ``when`` without a preceding mock call."""
    try:
        mox.when("not a mock call")
    except UsageError as exc:
        return exc
    msg = "when() accepted a plain value"
    raise AssertionError(msg)
