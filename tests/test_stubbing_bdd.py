"""Behavioural tests for stubbing stand-ins using pytest-bdd."""

from __future__ import annotations

from pathlib import Path

from pytest_bdd import scenario

from tests.steps import *  # noqa: F403

FEATURES_DIR = Path(__file__).resolve().parent.parent / "features"
FEATURE = str(FEATURES_DIR / "stubbing.feature")


@scenario(FEATURE, "unstubbed calls return zero values")
def test_unstubbed_calls_return_zero_values() -> None:
    """Unstubbed calls answer with the zero value of the return type."""


@scenario(FEATURE, "consecutive answers repeat the last one")
def test_consecutive_answers_repeat_the_last_one() -> None:
    """Stubbed answers are consumed in order and the last one sticks."""


@scenario(FEATURE, "the most recent stubbing wins")
def test_the_most_recent_stubbing_wins() -> None:
    """Later stubbings take precedence over earlier ones."""


@scenario(FEATURE, "stubbed failures are raised")
def test_stubbed_failures_are_raised() -> None:
    """``then_panic`` raises the given exception."""


@scenario(FEATURE, "stubbing without a mock call is rejected")
def test_stubbing_without_a_mock_call_is_rejected() -> None:
    """``when`` needs a preceding mock call."""
