"""Behavioural tests for verifying stand-in calls using pytest-bdd."""

from __future__ import annotations

from pathlib import Path

from pytest_bdd import scenario

from tests.steps import *  # noqa: F403

FEATURES_DIR = Path(__file__).resolve().parent.parent / "features"
FEATURE = str(FEATURES_DIR / "verification.feature")


@scenario(FEATURE, "exact count verification passes")
def test_exact_count_verification_passes() -> None:
    """Matching counts pass silently."""


@scenario(FEATURE, "count mismatch is reported")
def test_count_mismatch_is_reported() -> None:
    """Count mismatches reach the failure sink."""


@scenario(FEATURE, "ordering violation is reported")
def test_ordering_violation_is_reported() -> None:
    """Out-of-order verifications reach the failure sink."""


@scenario(FEATURE, "variadic matchers are grouped")
def test_variadic_matchers_are_grouped() -> None:
    """One matcher per variadic argument is grouped into one."""


@scenario(FEATURE, "any varargs matches a call without variadic arguments")
def test_any_varargs_matches_no_arguments() -> None:
    """``any_varargs`` accepts an empty variadic tail."""


@scenario(FEATURE, "verification without a failure sink is rejected")
def test_verification_without_a_failure_sink_is_rejected() -> None:
    """Verification needs a failure sink."""
