"""Quality Domain Value Objects.

The generated-code input model (page objects and step definitions as
text) and the report the CodeQualityAnalyzer produces for it.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple

from flowforge.domains.shared.kernel import RecordingPayloadError


class QualityCategory(str, Enum):
    LOCATOR_STABILITY = "locator-stability"
    FRAMEWORK_COMPLIANCE = "framework-compliance"
    NAMING_CONVENTIONS = "naming-conventions"
    CODE_STRUCTURE = "code-structure"
    MAINTAINABILITY = "maintainability"
    REUSABILITY = "reusability"
    ERROR_HANDLING = "error-handling"
    DOCUMENTATION = "documentation"


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class Impact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Effort(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# =============================================================================
# Generated code
# =============================================================================


@dataclass(frozen=True)
class GeneratedPageObject:
    class_name: str
    file_name: str
    content: str


@dataclass(frozen=True)
class GeneratedStepDefinition:
    file_name: str
    content: str


@dataclass(frozen=True)
class GeneratedCode:
    """Output of the external code generator, as text.

    Attributes:
        page_objects: Generated page-object classes
        step_definitions: Generated step-definition files
        step_count: Number of recorded steps the code was generated from
    """
    page_objects: Tuple[GeneratedPageObject, ...] = ()
    step_definitions: Tuple[GeneratedStepDefinition, ...] = ()
    step_count: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GeneratedCode":
        """Parse ``{"pageObjects": [...], "stepDefinitions": [...], "steps": N}``.

        The step count may also sit at ``metadata.intelligence.steps``.

        Raises:
            RecordingPayloadError: If the payload or one of its entries is
                not an object.
        """
        if not isinstance(data, Mapping):
            raise RecordingPayloadError(
                f"Generated code must be an object, got {type(data).__name__}"
            )
        page_objects = tuple(
            GeneratedPageObject(
                class_name=str(item.get("className", "")),
                file_name=str(item.get("fileName", "")),
                content=str(item.get("content", "")),
            )
            for item in _entries(data, "pageObjects")
        )
        step_definitions = tuple(
            GeneratedStepDefinition(
                file_name=str(item.get("fileName", "")),
                content=str(item.get("content", "")),
            )
            for item in _entries(data, "stepDefinitions")
        )
        steps = data.get("steps")
        if steps is None:
            metadata = data.get("metadata")
            intelligence = metadata.get("intelligence") if isinstance(metadata, Mapping) else None
            steps = intelligence.get("steps", 0) if isinstance(intelligence, Mapping) else 0
        try:
            step_count = int(steps or 0)
        except (TypeError, ValueError) as e:
            raise RecordingPayloadError(f"Invalid step count: {steps!r}") from e
        return cls(page_objects, step_definitions, step_count)


def _entries(data: Mapping[str, Any], key: str):
    items = data.get(key) or []
    if not isinstance(items, list):
        raise RecordingPayloadError(f"'{key}' must be a list")
    for item in items:
        if not isinstance(item, Mapping):
            raise RecordingPayloadError(f"Entries of '{key}' must be objects")
        yield item


# =============================================================================
# Report
# =============================================================================


@dataclass(frozen=True)
class QualityIssue:
    severity: Severity
    category: QualityCategory
    message: str
    location: Optional[str] = None
    auto_fixable: bool = False
    fix: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "severity": self.severity.value,
            "category": self.category.value,
            "message": self.message,
            "autoFixable": self.auto_fixable,
        }
        if self.location:
            data["location"] = self.location
        if self.fix:
            data["fix"] = self.fix
        return data


@dataclass(frozen=True)
class Improvement:
    category: QualityCategory
    suggestion: str
    impact: Impact
    effort: Effort

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "suggestion": self.suggestion,
            "impact": self.impact.value,
            "effort": self.effort.value,
        }


@dataclass(frozen=True)
class CategoryScore:
    category: QualityCategory
    score: int
    details: str
    max_score: int = 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "score": self.score,
            "maxScore": self.max_score,
            "details": self.details,
        }


@dataclass(frozen=True)
class QualityReport:
    """Scored audit of generated code.

    ``overall_score`` is the weighted average of the category scores,
    rounded, in [0, 100].
    """
    overall_score: int
    categories: Tuple[CategoryScore, ...]
    issues: Tuple[QualityIssue, ...]
    improvements: Tuple[Improvement, ...]
    summary: str

    GRADES: ClassVar[Tuple[Tuple[int, str], ...]] = (
        (90, "A - Excellent"),
        (80, "B - Good"),
        (70, "C - Acceptable"),
        (60, "D - Needs Improvement"),
    )

    @classmethod
    def grade_for(cls, score: int) -> str:
        for threshold, grade in cls.GRADES:
            if score >= threshold:
                return grade
        return "F - Poor"

    @property
    def grade(self) -> str:
        return self.grade_for(self.overall_score)

    def score_of(self, category: QualityCategory) -> Optional[int]:
        for entry in self.categories:
            if entry.category == category:
                return entry.score
        return None

    def issues_with(self, severity: Severity) -> Tuple[QualityIssue, ...]:
        return tuple(i for i in self.issues if i.severity == severity)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overallScore": self.overall_score,
            "grade": self.grade,
            "categories": [c.to_dict() for c in self.categories],
            "issues": [i.to_dict() for i in self.issues],
            "improvements": [i.to_dict() for i in self.improvements],
            "summary": self.summary,
        }
