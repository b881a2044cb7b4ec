"""Small application code exercised by the runnable examples."""

from __future__ import annotations

import typing as t


class PaymentGateway(t.Protocol):
    """Remote payment provider."""

    def charge(self, account: str, cents: int, currency: str = "EUR") -> str: ...

    def refund(self, transaction_id: str) -> bool: ...

    def audit(self, event: str, *details: str) -> None: ...


class Checkout:
    """Charges orders through a :class:`PaymentGateway`."""

    def __init__(self, gateway: PaymentGateway) -> None:
        self._gateway = gateway

    def pay(self, account: str, items: t.Mapping[str, int]) -> str:
        """Charge *account* for the summed *items* and return the transaction."""
        total = sum(items.values())
        transaction_id = self._gateway.charge(account, total)
        self._gateway.audit("charged", account, transaction_id)
        return transaction_id

    def cancel(self, transaction_id: str) -> None:
        """Refund *transaction_id*, retrying once."""
        if not self._gateway.refund(transaction_id):
            self._gateway.refund(transaction_id)
