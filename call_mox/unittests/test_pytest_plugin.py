"""Unit tests for the pytest plugin."""

from __future__ import annotations

import dataclasses as dc
import textwrap

import pytest

from call_mox.controller import CallMox
from call_mox.fail_handlers import raising_fail_handler

pytest_plugins = ("call_mox.pytest_plugin", "pytester")


@dc.dataclass(slots=True, frozen=True)
class FailHandlerCase:
    """Configuration scenario for the fixture's failure sink."""

    ini_setting: str | None
    cli_args: tuple[str, ...]
    test_decorator: str
    raises: bool


_MODULE_TEMPLATE = textwrap.dedent(
    """
    import typing as t

    import pytest

    from call_mox.errors import VerificationError

    pytest_plugins = ("call_mox.pytest_plugin",)


    class Greeter(t.Protocol):
        def greet(self, name: str) -> str: ...


    {decorator}
    def test_unmet_verification(call_mox):
        greeter = call_mox.mock(Greeter)
        try:
            call_mox.verify(greeter).greet("Ann")
        except VerificationError:
            raise RuntimeError("raised VerificationError")
    """
)


def _run(pytester: pytest.Pytester, *args: str) -> pytest.RunResult:
    """Run pytest with the plugin loaded early enough for its CLI option."""
    return pytester.runpytest("-p", "call_mox.pytest_plugin", *args)


def test_fixture_basic(call_mox: CallMox) -> None:
    """The fixture yields the active controller."""
    assert CallMox.get_active() is call_mox
    assert call_mox.fail_handler is raising_fail_handler


def test_fixture_resets_after_test(pytester: pytest.Pytester) -> None:
    """No controller stays active once a test finishes."""
    pytester.makepyfile(
        """
        from call_mox.controller import CallMox

        pytest_plugins = ("call_mox.pytest_plugin",)

        def test_uses_fixture(call_mox):
            assert CallMox.get_active() is call_mox

        def test_afterwards():
            assert CallMox.get_active() is None
        """
    )
    result = _run(pytester)
    result.assert_outcomes(passed=2)


@pytest.mark.parametrize(
    "case",
    [
        FailHandlerCase(None, (), "", False),
        FailHandlerCase("raise", (), "", True),
        FailHandlerCase(
            "raise",
            ("--call-mox-fail-handler=pytest",),
            "",
            False,
        ),
        FailHandlerCase(
            None,
            ("--call-mox-fail-handler=pytest",),
            "@pytest.mark.call_mox(fail_handler='raise')",
            True,
        ),
        FailHandlerCase(
            "pytest",
            (),
            "@pytest.mark.parametrize('call_mox', ['raise'], indirect=True)",
            True,
        ),
        FailHandlerCase(
            None,
            (),
            "@pytest.mark.parametrize("
            "'call_mox', [{'fail_handler': 'raise'}], indirect=True)",
            True,
        ),
    ],
    ids=["default", "ini", "cli-over-ini", "marker-over-cli", "param", "param-dict"],
)
def test_fail_handler_configuration(
    pytester: pytest.Pytester, case: FailHandlerCase
) -> None:
    """Marker, fixture param, CLI option and ini setting pick the sink."""
    if case.ini_setting is not None:
        pytester.makeini(
            f"""
            [pytest]
            call_mox_fail_handler = {case.ini_setting}
            """
        )
    pytester.makepyfile(_MODULE_TEMPLATE.format(decorator=case.test_decorator))
    result = _run(pytester, *case.cli_args)
    result.assert_outcomes(failed=1)
    if case.raises:
        result.stdout.fnmatch_lines(["*raised VerificationError*"])
    else:
        result.stdout.fnmatch_lines(["*Mock invocation count*"])
        result.stdout.no_fnmatch_line("*raised VerificationError*")


def test_invalid_param_type(pytester: pytest.Pytester) -> None:
    """Fixture params must be a str or a dict."""
    pytester.makepyfile(
        """
        import pytest

        pytest_plugins = ("call_mox.pytest_plugin",)

        @pytest.mark.parametrize("call_mox", [3], indirect=True)
        def test_bad_param(call_mox):
            pass
        """
    )
    result = _run(pytester)
    result.assert_outcomes(errors=1)
    result.stdout.fnmatch_lines(["*fixture param must be a str or dict*"])


def test_marker_is_registered(pytester: pytest.Pytester) -> None:
    """The ``call_mox`` marker is known with ``--strict-markers``."""
    pytester.makepyfile(
        """
        import pytest

        pytest_plugins = ("call_mox.pytest_plugin",)

        @pytest.mark.call_mox(fail_handler="raise")
        def test_marked(call_mox):
            pass
        """
    )
    result = _run(pytester, "--strict-markers")
    result.assert_outcomes(passed=1)
