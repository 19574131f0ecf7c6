"""Assertion Domain Value Objects."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple

from flowforge.domains.shared.kernel import Action


class AssertionKind(str, Enum):
    """What a suggested assertion verifies."""
    VISIBILITY = "visibility"
    TEXT_CONTAINS = "text-contains"
    TEXT_EQUALS = "text-equals"
    URL_CONTAINS = "url-contains"
    URL_EQUALS = "url-equals"
    ELEMENT_ENABLED = "element-enabled"
    ELEMENT_DISABLED = "element-disabled"
    CHECKBOX_CHECKED = "checkbox-checked"
    CHECKBOX_UNCHECKED = "checkbox-unchecked"
    VALUE_EQUALS = "value-equals"
    COUNT_EQUALS = "count-equals"
    ELEMENT_ABSENT = "element-absent"


@dataclass(frozen=True)
class AssertionTemplate:
    """A canned assertion offered when a trigger matches.

    ``target`` may hold ``|``-separated alternatives
    (``welcome|logout|user``).
    """
    kind: AssertionKind
    target: str
    behavior: str
    confidence: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(
                f"Assertion confidence must be in [0, 1], got {self.confidence}"
            )

    @property
    def alternatives(self) -> Tuple[str, ...]:
        return tuple(self.target.split("|"))


@dataclass(frozen=True)
class AssertionTrigger:
    """A case-insensitive pattern over the action target and its templates."""
    pattern: re.Pattern[str]
    templates: Tuple[AssertionTemplate, ...]

    @classmethod
    def of(cls, pattern: str, *templates: AssertionTemplate) -> "AssertionTrigger":
        return cls(re.compile(pattern, re.IGNORECASE), tuple(templates))

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


@dataclass(frozen=True)
class AssertionSuggestion:
    """One proposed verification step.

    Attributes:
        kind: What is verified
        target: Element or URL fragment the assertion is about
        expected_behavior: Plain-language expectation
        gherkin_step: ``Then ...`` phrase for a feature file
        implementation: Illustrative page-object snippet
        confidence: Likelihood the assertion is wanted, in [0, 1]
        reason: Why it was proposed
    """
    kind: AssertionKind
    target: str
    expected_behavior: str
    gherkin_step: str
    implementation: str
    confidence: float
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "target": self.target,
            "expectedBehavior": self.expected_behavior,
            "gherkinStep": self.gherkin_step,
            "implementation": self.implementation,
            "confidence": self.confidence,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class VerificationPoint:
    """Assertions suggested right after the action at ``action_index``."""
    action_index: int
    action: Action
    suggestions: Tuple[AssertionSuggestion, ...] = field(default_factory=tuple)

    @property
    def best(self) -> AssertionSuggestion:
        return self.suggestions[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "afterActionIndex": self.action_index,
            "action": self.action.to_dict(),
            "suggestions": [s.to_dict() for s in self.suggestions],
        }
