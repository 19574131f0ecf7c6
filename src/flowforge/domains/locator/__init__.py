"""Locator Bounded Context.

Stability scoring of recorded locators, ranked alternatives and
self-healing fallback chains.
"""
from .value_objects import (
    IssueSeverity,
    IssueType,
    LocatorAnalysis,
    LocatorIssue,
    LocatorStrategy,
    LocatorSuggestion,
    StabilityBand,
)
from .services import LocatorOptimizer, extract_text, infer_role

__all__ = [
    "IssueSeverity",
    "IssueType",
    "LocatorAnalysis",
    "LocatorIssue",
    "LocatorOptimizer",
    "LocatorStrategy",
    "LocatorSuggestion",
    "StabilityBand",
    "extract_text",
    "infer_role",
]
