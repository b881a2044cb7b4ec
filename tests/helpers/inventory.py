"""Interface mocked by the behavioural scenarios."""

from __future__ import annotations

import typing as t


class Inventory(t.Protocol):
    """Stock keeping of a small shop."""

    def count(self, item: str) -> int: ...

    def restock(self, item: str, amount: int) -> None: ...

    def tag(self, item: str, *tags: str) -> None: ...
