"""Locator Domain Value Objects.

Immutable results of locator analysis: suggestions, issues and the
per-action analysis bundle.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Tuple


class LocatorStrategy(str, Enum):
    """Strategy that produced a locator suggestion."""
    ROLE = "role"
    LABEL = "label"
    PLACEHOLDER = "placeholder"
    TEST_ID = "testid"
    TEXT = "text"
    CSS = "css"
    COMPOSITE = "composite"


class StabilityBand(str, Enum):
    """Coarse stability rating derived from a stability score."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    @classmethod
    def from_score(cls, score: float) -> "StabilityBand":
        if score >= 0.9:
            return cls.EXCELLENT
        if score >= 0.7:
            return cls.GOOD
        if score >= 0.5:
            return cls.FAIR
        return cls.POOR


class IssueType(str, Enum):
    BRITTLENESS = "brittleness"
    PERFORMANCE = "performance"
    MAINTAINABILITY = "maintainability"
    ACCESSIBILITY = "accessibility"


class IssueSeverity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class LocatorSuggestion:
    """A candidate locator with its stability score.

    Attributes:
        strategy: Strategy that produced the candidate
        locator: Locator string; ``|`` separates a composite fallback
        score: Stability estimate in [0, 1]
        benefits: Reasons to prefer this locator
        tradeoffs: Known weaknesses
    """
    strategy: LocatorStrategy
    locator: str
    score: float
    benefits: Tuple[str, ...] = ()
    tradeoffs: Tuple[str, ...] = ()

    COMPOSITE_SEPARATOR: ClassVar[str] = "|"

    def __post_init__(self) -> None:
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"Locator score must be in [0, 1], got {self.score}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy.value,
            "locator": self.locator,
            "score": self.score,
            "benefits": list(self.benefits),
            "tradeoffs": list(self.tradeoffs),
        }


@dataclass(frozen=True)
class LocatorIssue:
    """A detected weakness of the recorded locator."""
    type: IssueType
    severity: IssueSeverity
    description: str
    impact: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "description": self.description,
            "impact": self.impact,
        }


@dataclass(frozen=True)
class LocatorAnalysis:
    """Full locator analysis of one action.

    Attributes:
        original: Locator as recorded ('' when the action has no target)
        stability_score: Score of the recorded locator
        issues: Weaknesses of the recorded locator
        suggestions: Alternatives ranked by score, best first
        optimized: Chosen locator
        fallbacks: Up to three distinct alternates to try in order
        reasoning: Human-readable rationale for the choice
        recommended_strategy: General hint for this kind of action
    """
    original: str
    stability_score: float
    issues: Tuple[LocatorIssue, ...] = ()
    suggestions: Tuple[LocatorSuggestion, ...] = ()
    optimized: str = ""
    fallbacks: Tuple[str, ...] = ()
    reasoning: Tuple[str, ...] = ()
    recommended_strategy: str = ""

    @property
    def stability(self) -> StabilityBand:
        return StabilityBand.from_score(self.stability_score)

    @property
    def improved(self) -> bool:
        return self.optimized != self.original

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original": self.original,
            "stability": self.stability.value,
            "stabilityScore": round(self.stability_score, 4),
            "issues": [i.to_dict() for i in self.issues],
            "suggestions": [s.to_dict() for s in self.suggestions],
            "optimized": self.optimized,
            "fallbacks": list(self.fallbacks),
            "reasoning": list(self.reasoning),
            "recommendedStrategy": self.recommended_strategy,
        }
