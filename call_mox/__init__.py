"""Runtime test doubles: stub calls on stand-ins, then verify how they were made.

A :class:`CallMox` controller creates stand-ins for Python classes and
protocols, turns calls on them into stubbings with :meth:`CallMox.when`
and checks the recorded history with :meth:`CallMox.verify`.
"""

from __future__ import annotations

from . import args
from .controller import CallMox, VerifyingProxy
from .counts import at_least, at_most, never, once, times, twice
from .errors import (
    AssignabilityError,
    CallMoxError,
    StubbedPanic,
    UsageError,
    VerificationError,
)
from .fail_handlers import (
    RecordingFailHandler,
    pytest_fail_handler,
    raising_fail_handler,
)
from .generic_mock import GenericMock
from .matchers import (
    AnyMatcher,
    AnyOfType,
    AnyVarargs,
    Contains,
    EqMatcher,
    IsA,
    Matcher,
    MatcherSequence,
    NotEq,
    Predicate,
    Regex,
    StartsWith,
    VariadicMatcher,
)
from .return_types import Kind, ReturnType, TypeDescriptor
from .standin import create_stand_in, generic_mock_of
from .stubbing import OngoingStubbing
from .verifiers import InOrderContext, VerificationResult

__all__ = [
    "AnyMatcher",
    "AnyOfType",
    "AnyVarargs",
    "AssignabilityError",
    "CallMox",
    "CallMoxError",
    "Contains",
    "EqMatcher",
    "GenericMock",
    "InOrderContext",
    "IsA",
    "Kind",
    "Matcher",
    "MatcherSequence",
    "NotEq",
    "OngoingStubbing",
    "Predicate",
    "RecordingFailHandler",
    "Regex",
    "ReturnType",
    "StartsWith",
    "StubbedPanic",
    "TypeDescriptor",
    "UsageError",
    "VariadicMatcher",
    "VerificationError",
    "VerificationResult",
    "VerifyingProxy",
    "args",
    "at_least",
    "at_most",
    "create_stand_in",
    "generic_mock_of",
    "never",
    "once",
    "pytest_fail_handler",
    "raising_fail_handler",
    "times",
    "twice",
]
