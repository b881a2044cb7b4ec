"""Example tests demonstrating verification."""

from __future__ import annotations

import typing as t

from call_mox import args, at_least, never, times
from examples._services import Checkout, PaymentGateway

pytest_plugins = ("call_mox.pytest_plugin",)

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from call_mox.controller import CallMox


def test_verify_calls_and_counts(call_mox: CallMox) -> None:
    """Verification checks arguments and invocation counts."""
    gateway = call_mox.mock(PaymentGateway)
    call_mox.when(gateway.refund("tx-1")).then_return(False)

    Checkout(gateway).cancel("tx-1")

    call_mox.verify(gateway, times(2)).refund("tx-1")
    call_mox.verify(gateway, never()).charge(
        args.any_str(), args.any_int(), args.any_str()
    )


def test_verify_in_order(call_mox: CallMox) -> None:
    """Calls can be verified in the order they happened."""
    gateway = call_mox.mock(PaymentGateway)

    Checkout(gateway).pay("acc-1", {"tea": 150})

    in_order = call_mox.in_order()
    call_mox.verify(gateway, in_order=in_order).charge("acc-1", 150)
    call_mox.verify(gateway, in_order=in_order).audit(
        args.eq("charged"), args.any_varargs()
    )


def test_verify_at_least(call_mox: CallMox) -> None:
    """Lower bounds accept extra calls."""
    gateway = call_mox.mock(PaymentGateway)
    for _ in range(3):
        gateway.audit("ping")

    call_mox.verify(gateway, at_least(2)).audit("ping")
