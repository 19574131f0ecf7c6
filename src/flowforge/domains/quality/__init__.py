"""Quality Bounded Context.

Read-only scoring of generated page objects and step definitions.
"""
from .value_objects import (
    CategoryScore,
    Effort,
    GeneratedCode,
    GeneratedPageObject,
    GeneratedStepDefinition,
    Impact,
    Improvement,
    QualityCategory,
    QualityIssue,
    QualityReport,
    Severity,
)
from .services import CATEGORY_WEIGHTS, CodeQualityAnalyzer

__all__ = [
    "CATEGORY_WEIGHTS",
    "CategoryScore",
    "CodeQualityAnalyzer",
    "Effort",
    "GeneratedCode",
    "GeneratedPageObject",
    "GeneratedStepDefinition",
    "Impact",
    "Improvement",
    "QualityCategory",
    "QualityIssue",
    "QualityReport",
    "Severity",
]
