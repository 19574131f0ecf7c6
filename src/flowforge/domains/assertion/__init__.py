"""Assertion Bounded Context.

Suggests verification points after state-changing actions.
"""
from .value_objects import (
    AssertionKind,
    AssertionSuggestion,
    AssertionTemplate,
    AssertionTrigger,
    VerificationPoint,
)
from .services import ASSERTION_TRIGGERS, AssertionSuggester

__all__ = [
    "ASSERTION_TRIGGERS",
    "AssertionKind",
    "AssertionSuggester",
    "AssertionSuggestion",
    "AssertionTemplate",
    "AssertionTrigger",
    "VerificationPoint",
]
