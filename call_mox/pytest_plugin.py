"""Pytest plugin providing the ``call_mox`` fixture."""

from __future__ import annotations

import logging
import typing as t

import pytest

from .controller import CallMox
from .fail_handlers import FAIL_HANDLERS, resolve_fail_handler

logger = logging.getLogger(__name__)

DEFAULT_FAIL_HANDLER: t.Final[str] = "pytest"


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line and ini options for the plugin."""
    group = parser.getgroup("call_mox")
    group.addoption(
        "--call-mox-fail-handler",
        action="store",
        dest="call_mox_fail_handler",
        choices=sorted(FAIL_HANDLERS),
        default=None,
        help=(
            "Failure sink used by the call_mox fixture for verification "
            "mismatches. Overrides the pytest.ini setting."
        ),
    )
    parser.addini(
        "call_mox_fail_handler",
        (
            "Failure sink used by the call_mox fixture: 'pytest' fails the "
            "test, 'raise' raises VerificationError."
        ),
        default=DEFAULT_FAIL_HANDLER,
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register plugin-specific markers."""
    config.addinivalue_line(
        "markers",
        (
            "call_mox(fail_handler: str = 'pytest'): override the failure sink "
            "of the call_mox fixture for a single test."
        ),
    )


def _fail_handler_name(request: pytest.FixtureRequest) -> str:
    """Return the name of the failure sink the fixture should install."""
    # Priority order: marker > fixture param > CLI option > INI setting

    marker_value = _get_marker_fail_handler(request)
    if marker_value is not None:
        return marker_value

    param_value = _get_param_fail_handler(request)
    if param_value is not None:
        return param_value

    config = request.config
    cli_value = config.getoption("call_mox_fail_handler")
    if cli_value is not None:
        return str(cli_value)

    return str(config.getini("call_mox_fail_handler") or DEFAULT_FAIL_HANDLER)


def _get_marker_fail_handler(request: pytest.FixtureRequest) -> str | None:
    """Return marker override for the failure sink if present."""
    marker = request.node.get_closest_marker("call_mox")
    if marker is None or "fail_handler" not in marker.kwargs:
        return None
    return str(marker.kwargs["fail_handler"])


def _get_param_fail_handler(request: pytest.FixtureRequest) -> str | None:
    """Return fixture parameter override for the failure sink if present."""
    param = getattr(request, "param", None)
    if param is None:
        return None
    if isinstance(param, dict):
        if "fail_handler" in param:
            return str(param["fail_handler"])
        keys = list(param.keys())
        msg = (
            "call_mox fixture param dict must contain 'fail_handler' key, "
            f"got keys: {keys}"
        )
        raise TypeError(msg)
    if isinstance(param, str):
        return param
    msg = (
        "call_mox fixture param must be a str or dict with 'fail_handler' key, "
        f"got {type(param).__name__}"
    )
    raise TypeError(msg)


@pytest.fixture
def call_mox(request: pytest.FixtureRequest) -> t.Generator[CallMox, None, None]:
    """Provide an active :class:`CallMox` wired to the configured failure sink."""
    mox = CallMox(fail_handler=resolve_fail_handler(_fail_handler_name(request)))
    try:
        mox.__enter__()
        yield mox
    except Exception:
        logger.exception("Error during call_mox fixture setup or test execution")
        raise
    finally:
        _teardown_call_mox(mox)


def _teardown_call_mox(mox: CallMox) -> None:
    """Reset the controller and leave its context."""
    try:
        mox.reset()
        mox.__exit__(None, None, None)
    except Exception:
        logger.exception("Error during call_mox fixture cleanup")
        pytest.fail("call_mox fixture cleanup failed")


__all__ = ["call_mox", "pytest_addoption", "pytest_configure"]
