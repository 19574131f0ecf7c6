"""Quality Domain Services.

The CodeQualityAnalyzer audits generated page objects and step
definitions. It never changes them: every category starts at 100 and is
debited per anti-pattern found, and the overall score is the weighted
average of the categories.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List

from flowforge.domains.naming.step_patterns import StepPatternCompiler
from flowforge.models.config_models import IntelligenceConfig

from .value_objects import (
    CategoryScore,
    Effort,
    GeneratedCode,
    Impact,
    Improvement,
    QualityCategory,
    QualityIssue,
    QualityReport,
    Severity,
)

logger = logging.getLogger(__name__)

Q = QualityCategory

CATEGORY_WEIGHTS: Dict[QualityCategory, int] = {
    Q.LOCATOR_STABILITY: 25,
    Q.FRAMEWORK_COMPLIANCE: 20,
    Q.NAMING_CONVENTIONS: 15,
    Q.CODE_STRUCTURE: 15,
    Q.MAINTAINABILITY: 10,
    Q.REUSABILITY: 10,
    Q.ERROR_HANDLING: 5,
    Q.DOCUMENTATION: 0,
}

CATEGORY_LABELS: Dict[QualityCategory, str] = {
    Q.LOCATOR_STABILITY: "Locator stability",
    Q.FRAMEWORK_COMPLIANCE: "Framework compliance",
    Q.NAMING_CONVENTIONS: "Naming conventions",
    Q.CODE_STRUCTURE: "Code structure",
    Q.MAINTAINABILITY: "Maintainability",
    Q.REUSABILITY: "Reusability",
    Q.ERROR_HANDLING: "Error handling",
    Q.DOCUMENTATION: "Documentation",
}

INDEX_LOCATOR = re.compile(r"\[\d+\]")
NTH_LOCATOR = re.compile(r":nth-child|:nth-of-type|\.nth\(")
SELF_HEAL = re.compile(r"selfHeal:\s*true")
ELEMENT_PROPERTY = re.compile(r"public\s+(\w+)!?:\s*\w*Element\b")
GENERIC_NAME = re.compile(r"\b(?:element|field|button)\d+\b")
PUBLIC_METHOD = re.compile(r"public async \w+")
METHOD_BODY = re.compile(r"public async \w+[^}]+\}")
HARDCODED_URL = re.compile(r"https?://[^\s'\"]+")
HARDCODED_TIMEOUT = re.compile(r"\b\d{4,5}\b")
TRY_BLOCK = re.compile(r"try\s*\{")
THROW = re.compile(r"throw new Error")
DOC_BLOCK = re.compile(r"/\*\*")

# (pattern, message) for direct browser calls that bypass the base page
DIRECT_CALLS = (
    (re.compile(r"page\.goto\("), "Direct page.goto() - use this.navigate()"),
    (re.compile(r"page\.click\("), "Direct page.click() - use element.click()"),
    (re.compile(r"page\.fill\("), "Direct page.fill() - use element.fillWithTimeout()"),
    (re.compile(r"page\.locator\("), "Direct page.locator() - use an element decorator"),
    (re.compile(r"page\.waitForTimeout\("), "Direct page.waitForTimeout() - use this.wait()"),
    (re.compile(r"page\.keyboard\."), "Direct page.keyboard - use this.pressKey() methods"),
)

MAX_SINGLE_PAGE_STEPS = 10
MAX_METHODS_PER_PAGE = 20
MAX_METHOD_LINES = 30
MIN_PARAMETERIZED_RATIO = 0.3
MAX_FILL_CALLS = 5
MIN_METHODS_FOR_ERROR_HANDLING = 5


@dataclass
class CodeQualityAnalyzer:
    """Scores generated code across eight weighted categories.

    Framework markers (base page class, decorators, import path and
    reporter prefix) come from the configuration.

    Usage:

        analyzer = CodeQualityAnalyzer()
        report = analyzer.analyze(GeneratedCode.from_dict(payload))
        report.overall_score  # 0..100
        report.grade          # "B - Good"
    """
    config: IntelligenceConfig = field(default_factory=IntelligenceConfig)
    compiler: StepPatternCompiler = field(default_factory=StepPatternCompiler)

    def analyze(self, code: GeneratedCode) -> QualityReport:
        issues: List[QualityIssue] = []
        improvements: List[Improvement] = []
        categories = [
            self._locator_stability(code, issues, improvements),
            self._framework_compliance(code, issues, improvements),
            self._naming_conventions(code, issues),
            self._code_structure(code, issues, improvements),
            self._maintainability(code, issues, improvements),
            self._reusability(code, improvements),
            self._error_handling(code, improvements),
            self._documentation(code, improvements),
        ]
        overall = overall_score(categories)
        report = QualityReport(
            overall_score=overall,
            categories=tuple(categories),
            issues=tuple(issues),
            improvements=tuple(improvements),
            summary=summarize(overall, issues, improvements),
        )
        logger.debug(
            f"Quality score {overall} with {len(issues)} issues "
            f"and {len(improvements)} improvements"
        )
        return report

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def _locator_stability(
        self, code: GeneratedCode, issues: List[QualityIssue], improvements: List[Improvement]
    ) -> CategoryScore:
        score = 100
        for page in code.page_objects:
            content = page.content

            index_count = len(INDEX_LOCATOR.findall(content))
            if index_count:
                score -= index_count * 10
                issues.append(QualityIssue(
                    Severity.WARNING, Q.LOCATOR_STABILITY,
                    f"Found {index_count} index-based locators which are fragile",
                    location=page.file_name,
                ))

            nth_count = len(NTH_LOCATOR.findall(content))
            if nth_count:
                score -= nth_count * 8
                issues.append(QualityIssue(
                    Severity.WARNING, Q.LOCATOR_STABILITY,
                    f"Found {nth_count} nth selectors which may break with layout changes",
                    location=page.file_name,
                ))

            if "alternativeLocators" not in content:
                score -= 15
                issues.append(QualityIssue(
                    Severity.INFO, Q.LOCATOR_STABILITY,
                    "No alternative locators defined for self-healing",
                    location=page.file_name,
                    auto_fixable=True,
                    fix=f"Add alternativeLocators to {self.config.ELEMENT_DECORATOR} decorators",
                ))

            element_count = content.count(self.config.ELEMENT_DECORATOR)
            if len(SELF_HEAL.findall(content)) < element_count:
                score -= 10
                improvements.append(Improvement(
                    Q.LOCATOR_STABILITY, "Enable selfHeal: true for all elements",
                    Impact.HIGH, Effort.EASY,
                ))
        return _category(Q.LOCATOR_STABILITY, score)

    def _framework_compliance(
        self, code: GeneratedCode, issues: List[QualityIssue], improvements: List[Improvement]
    ) -> CategoryScore:
        score = 100
        for page in code.page_objects:
            content = page.content

            for pattern, message in DIRECT_CALLS:
                count = len(pattern.findall(content))
                if count:
                    score -= count * 5
                    issues.append(QualityIssue(
                        Severity.WARNING, Q.FRAMEWORK_COMPLIANCE,
                        f"{message} ({count} occurrences)",
                        location=page.file_name,
                        auto_fixable=True,
                    ))

            if self.config.FRAMEWORK_IMPORT not in content:
                score -= 10
                issues.append(QualityIssue(
                    Severity.WARNING, Q.FRAMEWORK_COMPLIANCE,
                    "Missing framework import",
                    location=page.file_name,
                    auto_fixable=True,
                ))

            if self.config.REPORTER_PREFIX not in content:
                score -= 5
                improvements.append(Improvement(
                    Q.FRAMEWORK_COMPLIANCE,
                    f"Add {self.config.REPORTER_PREFIX.rstrip('.')} logging for better test reporting",
                    Impact.MEDIUM, Effort.EASY,
                ))

            if f"extends {self.config.BASE_PAGE_CLASS}" not in content:
                score -= 15
                issues.append(QualityIssue(
                    Severity.CRITICAL, Q.FRAMEWORK_COMPLIANCE,
                    f"Page class does not extend {self.config.BASE_PAGE_CLASS}",
                    location=page.file_name,
                    auto_fixable=True,
                ))
        return _category(Q.FRAMEWORK_COMPLIANCE, score)

    def _naming_conventions(
        self, code: GeneratedCode, issues: List[QualityIssue]
    ) -> CategoryScore:
        score = 100
        for page in code.page_objects:
            content = page.content

            for name in ELEMENT_PROPERTY.findall(content):
                if name[:1].isupper():
                    score -= 2
                    issues.append(QualityIssue(
                        Severity.INFO, Q.NAMING_CONVENTIONS,
                        f'Element "{name}" should use camelCase',
                        location=page.file_name,
                        auto_fixable=True,
                    ))

            generic_count = len(GENERIC_NAME.findall(content))
            if generic_count:
                score -= generic_count * 3
                issues.append(QualityIssue(
                    Severity.INFO, Q.NAMING_CONVENTIONS,
                    f"Found {generic_count} generic element names - use descriptive names",
                    location=page.file_name,
                ))

            if not page.class_name.endswith("Page"):
                score -= 5
                issues.append(QualityIssue(
                    Severity.INFO, Q.NAMING_CONVENTIONS,
                    f'Class "{page.class_name}" should end with "Page"',
                    location=page.file_name,
                    auto_fixable=True,
                ))
        return _category(Q.NAMING_CONVENTIONS, score)

    def _code_structure(
        self, code: GeneratedCode, issues: List[QualityIssue], improvements: List[Improvement]
    ) -> CategoryScore:
        score = 100
        if len(code.page_objects) == 1 and code.step_count > MAX_SINGLE_PAGE_STEPS:
            score -= 15
            issues.append(QualityIssue(
                Severity.WARNING, Q.CODE_STRUCTURE,
                "All actions in single page - consider splitting into multiple pages",
            ))

        for step_file in code.step_definitions:
            patterns = self.step_patterns(step_file.content)
            if len(patterns) != len(set(patterns)):
                score -= 20
                issues.append(QualityIssue(
                    Severity.CRITICAL, Q.CODE_STRUCTURE,
                    "Duplicate step definition patterns found - will cause runtime errors",
                    location=step_file.file_name,
                    auto_fixable=True,
                ))

        for page in code.page_objects:
            method_count = len(PUBLIC_METHOD.findall(page.content))
            if method_count > MAX_METHODS_PER_PAGE:
                score -= 10
                improvements.append(Improvement(
                    Q.CODE_STRUCTURE,
                    f"{page.class_name} has {method_count} methods - consider splitting",
                    Impact.MEDIUM, Effort.MEDIUM,
                ))
        return _category(Q.CODE_STRUCTURE, score)

    def _maintainability(
        self, code: GeneratedCode, issues: List[QualityIssue], improvements: List[Improvement]
    ) -> CategoryScore:
        score = 100
        for page in code.page_objects:
            content = page.content

            url_count = len(HARDCODED_URL.findall(content))
            if url_count:
                score -= url_count * 5
                issues.append(QualityIssue(
                    Severity.WARNING, Q.MAINTAINABILITY,
                    f"Found {url_count} hardcoded URLs - use config",
                    location=page.file_name,
                    auto_fixable=True,
                    fix='Replace with this.config.get("BASE_URL")',
                ))

            if HARDCODED_TIMEOUT.search(content):
                improvements.append(Improvement(
                    Q.MAINTAINABILITY, "Replace hardcoded timeouts with config values",
                    Impact.MEDIUM, Effort.EASY,
                ))

            if any(
                body.count("\n") + 1 > MAX_METHOD_LINES
                for body in METHOD_BODY.findall(content)
            ):
                score -= 5
                improvements.append(Improvement(
                    Q.MAINTAINABILITY,
                    "Break down long methods into smaller, focused methods",
                    Impact.MEDIUM, Effort.MEDIUM,
                ))
        return _category(Q.MAINTAINABILITY, score)

    def _reusability(
        self, code: GeneratedCode, improvements: List[Improvement]
    ) -> CategoryScore:
        score = 100
        for step_file in code.step_definitions:
            patterns = self.step_patterns(step_file.content)
            if not patterns:
                continue
            parameters = sum(self.compiler.count_parameters(p) for p in patterns)
            if parameters / len(patterns) < MIN_PARAMETERIZED_RATIO:
                score -= 10
                improvements.append(Improvement(
                    Q.REUSABILITY, "Add more parameterized steps for better reusability",
                    Impact.HIGH, Effort.EASY,
                ))

        for page in code.page_objects:
            if page.content.count("fillWithTimeout") > MAX_FILL_CALLS:
                improvements.append(Improvement(
                    Q.REUSABILITY, "Consider a generic fill method with element parameter",
                    Impact.MEDIUM, Effort.MEDIUM,
                ))
        return _category(Q.REUSABILITY, score)

    def _error_handling(
        self, code: GeneratedCode, improvements: List[Improvement]
    ) -> CategoryScore:
        score = 100
        for page in code.page_objects:
            content = page.content
            method_count = len(PUBLIC_METHOD.findall(content))
            if method_count > MIN_METHODS_FOR_ERROR_HANDLING and not TRY_BLOCK.search(content):
                score -= 10
                improvements.append(Improvement(
                    Q.ERROR_HANDLING, "Add error handling for critical operations",
                    Impact.MEDIUM, Effort.MEDIUM,
                ))
            if THROW.search(content):
                score += 5
        return _category(Q.ERROR_HANDLING, score)

    def _documentation(
        self, code: GeneratedCode, improvements: List[Improvement]
    ) -> CategoryScore:
        members = 0
        documented = 0
        for page in code.page_objects:
            members += len(PUBLIC_METHOD.findall(page.content))
            members += len(ELEMENT_PROPERTY.findall(page.content))
            documented += len(DOC_BLOCK.findall(page.content))
        if not members:
            return _category(Q.DOCUMENTATION, 100)
        score = round(100 * min(documented, members) / members)
        if score < 50:
            improvements.append(Improvement(
                Q.DOCUMENTATION, "Add doc comments to page-object members",
                Impact.LOW, Effort.EASY,
            ))
        return _category(Q.DOCUMENTATION, score)

    def step_patterns(self, content: str) -> List[str]:
        """Step phrases declared with the step decorator in ``content``."""
        decorator = re.escape(self.config.STEP_DECORATOR)
        return re.findall(decorator + r"\(\s*['\"]([^'\"]+)['\"]", content)


def _category(category: QualityCategory, score: int) -> CategoryScore:
    score = min(100, max(0, score))
    return CategoryScore(
        category=category,
        score=score,
        details=f"{CATEGORY_LABELS[category]}: {score}%",
    )


def overall_score(categories: List[CategoryScore]) -> int:
    """Weighted average of category scores on a 0-100 scale."""
    total_weight = 0
    weighted = 0.0
    for entry in categories:
        weight = CATEGORY_WEIGHTS[entry.category]
        total_weight += weight
        weighted += entry.score * 100 / entry.max_score * weight
    if not total_weight:
        return 0
    # Halves round up.
    return int(weighted / total_weight + 0.5)


def summarize(
    score: int, issues: List[QualityIssue], improvements: List[Improvement]
) -> str:
    critical = sum(1 for i in issues if i.severity == Severity.CRITICAL)
    warnings = sum(1 for i in issues if i.severity == Severity.WARNING)
    return "\n".join([
        f"Code Quality Score: {score}/100 ({QualityReport.grade_for(score)})",
        f"   Critical Issues: {critical}",
        f"   Warnings: {warnings}",
        f"   Improvement Suggestions: {len(improvements)}",
    ])
