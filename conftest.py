"""Global test configuration and shared fixtures."""

from __future__ import annotations

import typing as t

import pytest

from call_mox.controller import CallMox

pytest_plugins = ("call_mox.pytest_plugin", "pytester")


@pytest.fixture(autouse=True)
def reset_active_call_mox() -> t.Generator[None, None, None]:
    """Ensure no ``CallMox`` stays active between tests."""
    CallMox.reset_active()
    yield
    CallMox.reset_active()
