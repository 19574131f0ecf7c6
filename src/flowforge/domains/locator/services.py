"""Locator Domain Service.

The LocatorOptimizer scores the recorded locator of an action, lists
its weaknesses and proposes ranked alternatives with a fallback chain
for self-healing. It is a pure function of the action.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from flowforge.domains.shared.kernel import Action, ActionType, LocatorKind
from flowforge.models.config_models import IntelligenceConfig

from .value_objects import (
    IssueSeverity,
    IssueType,
    LocatorAnalysis,
    LocatorIssue,
    LocatorStrategy,
    LocatorSuggestion,
)

logger = logging.getLogger(__name__)

DYNAMIC_ID_PATTERN = re.compile(r"\d{5,}|uuid|guid|temp|generated", re.IGNORECASE)
CLASS_TOKEN_PATTERN = re.compile(r"\.\w+")
LABEL_PATTERN = re.compile(r"getByLabel\(['\"]([^'\"]+)['\"]")
PLACEHOLDER_PATTERN = re.compile(r"getByPlaceholder\(['\"]([^'\"]+)['\"]", re.IGNORECASE)
TEXT_PATTERN = re.compile(r"getByText\(['\"]([^'\"]+)['\"]", re.IGNORECASE)
NAME_PATTERN = re.compile(r"name:\s*['\"]([^'\"]+)['\"]")
DATA_ATTRIBUTE_PATTERN = re.compile(
    r"\[data-[\w-]+(?:[~|^$*]?=(?:'[^']*'|\"[^\"]*\"|[^\]]*))?\]"
)

# Role inference from expression text, first match wins.
ROLE_HINTS = (
    ("textbox", ("textbox", "input")),
    ("combobox", ("combobox", "select")),
    ("checkbox", ("checkbox",)),
    ("radio", ("radio",)),
    ("link", ("link",)),
    ("heading", ("heading",)),
)

RECOMMENDED_STRATEGIES = {
    ActionType.CLICK.value: "Use getByRole with button/link role and visible name",
    ActionType.FILL.value: "Use getByLabel or getByPlaceholder for form fields",
    ActionType.ASSERTION.value: "Use semantic queries (role, text) over CSS selectors",
}
DEFAULT_RECOMMENDATION = "Use semantic locators when possible"


@dataclass
class LocatorOptimizer:
    """Scores and improves the locators of recorded actions.

    Usage:

        analysis = LocatorOptimizer().optimize(action)
        analysis.optimized        # best locator
        analysis.fallbacks        # alternates, tried in order
    """
    config: IntelligenceConfig = field(default_factory=IntelligenceConfig)

    def optimize(self, action: Action) -> LocatorAnalysis:
        """Analyze one action's locator. Never raises."""
        original = self.original_locator(action)
        suggestions = self.suggest(action)
        optimized = self._select(suggestions, original)
        analysis = LocatorAnalysis(
            original=original,
            stability_score=self.stability_score(action),
            issues=tuple(self.find_issues(action)),
            suggestions=tuple(suggestions),
            optimized=optimized,
            fallbacks=tuple(self.fallbacks(action, optimized)),
            reasoning=tuple(self._explain(original, optimized, suggestions)),
            recommended_strategy=self.recommended_strategy(action),
        )
        logger.debug(
            f"Locator '{original}' scored {analysis.stability_score:.2f}, "
            f"optimized to '{optimized}'"
        )
        return analysis

    def optimize_all(self, actions: Sequence[Action]) -> List[LocatorAnalysis]:
        return [self.optimize(action) for action in actions]

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    @staticmethod
    def original_locator(action: Action) -> str:
        """The recorded locator as a single string ('' without a target)."""
        target = action.target
        if target is None:
            return ""
        if target.type == LocatorKind.ROLE:
            if target.name:
                return f'role={target.selector}[name="{target.name}"]'
            return f"role={target.selector}"
        if target.type == LocatorKind.PLACEHOLDER:
            return f'[placeholder="{target.selector}"]'
        if target.type == LocatorKind.LABEL:
            return f'[label="{target.selector}"]'
        if target.type == LocatorKind.TEXT:
            return f"text={target.selector}"
        if target.type == LocatorKind.TEST_ID:
            return f'[data-testid="{target.selector}"]'
        return target.selector

    @staticmethod
    def stability_score(action: Action) -> float:
        """Heuristic resilience of the recorded locator, clamped to [0, 1].

        Semantic strategies score highest; structural CSS is penalized
        for leading ids, deep nesting, generated ids and over-specific
        chains. An action without a target scores 0.
        """
        target = action.target
        if target is None:
            return 0.0
        selector = target.selector
        score = 0.5

        if target.type == LocatorKind.ROLE:
            score += 0.4
        elif target.type in (LocatorKind.LABEL, LocatorKind.PLACEHOLDER):
            score += 0.35
        elif target.type == LocatorKind.TEST_ID:
            score += 0.3
        elif target.type == LocatorKind.TEXT:
            score += 0.2
        elif target.type == LocatorKind.CSS:
            if selector.startswith("#"):
                score -= 0.2
            elif "[data-" in selector:
                score += 0.25
            elif len(selector.split(" ")) > 3:
                score -= 0.15

        if DYNAMIC_ID_PATTERN.search(selector):
            score -= 0.3
        if ">" in selector or len(selector.split(".")) > 4:
            score -= 0.1

        return max(0.0, min(1.0, round(score, 4)))

    @staticmethod
    def find_issues(action: Action) -> List[LocatorIssue]:
        target = action.target
        if target is None:
            return []
        selector = target.selector
        issues: List[LocatorIssue] = []

        if DYNAMIC_ID_PATTERN.search(selector):
            issues.append(LocatorIssue(
                IssueType.BRITTLENESS, IssueSeverity.HIGH,
                "Locator contains generated/dynamic ID",
                "Test will break when IDs change",
            ))
        if selector.startswith("/") or selector.startswith("./"):
            issues.append(LocatorIssue(
                IssueType.BRITTLENESS, IssueSeverity.HIGH,
                "XPath locators are fragile",
                "Breaks easily with DOM changes",
            ))
        if len(selector.split(">")) > 3 or len(selector.split(" ")) > 4:
            issues.append(LocatorIssue(
                IssueType.BRITTLENESS, IssueSeverity.MEDIUM,
                "Overly specific selector",
                "Small DOM changes will break this",
            ))
        if "*" in selector or len(CLASS_TOKEN_PATTERN.findall(selector)) > 5:
            issues.append(LocatorIssue(
                IssueType.PERFORMANCE, IssueSeverity.MEDIUM,
                "Inefficient selector",
                "Slower element lookup",
            ))
        if len(selector) > 80:
            issues.append(LocatorIssue(
                IssueType.MAINTAINABILITY, IssueSeverity.LOW,
                "Locator is too long",
                "Harder to read and maintain",
            ))
        return issues

    @staticmethod
    def recommended_strategy(action: Action) -> str:
        return RECOMMENDED_STRATEGIES.get(action.type, DEFAULT_RECOMMENDATION)

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    def suggest(self, action: Action) -> List[LocatorSuggestion]:
        """Alternative locators, best first."""
        target = action.target
        if target is None:
            return []
        source = action.source
        suggestions: List[LocatorSuggestion] = []
        role = infer_role(action)

        if target.type != LocatorKind.ROLE and role:
            name = target.name or _first_group(NAME_PATTERN, source)
            suggestions.append(LocatorSuggestion(
                LocatorStrategy.ROLE,
                f'role={role}[name="{name}"]' if name else f"role={role}",
                0.95,
                benefits=(
                    "Based on accessibility tree",
                    "Stable across refactoring",
                    "Improves accessibility",
                ),
                tradeoffs=("Requires proper ARIA roles",),
            ))

        if target.type != LocatorKind.LABEL and _is_form_field(action):
            label = _first_group(LABEL_PATTERN, source)
            if label:
                suggestions.append(LocatorSuggestion(
                    LocatorStrategy.LABEL, f'[label="{label}"]', 0.90,
                    benefits=("Semantic and stable", "Tied to visible label"),
                    tradeoffs=("Requires associated label",),
                ))

        if target.type != LocatorKind.PLACEHOLDER and _is_form_field(action):
            placeholder = _first_group(PLACEHOLDER_PATTERN, source)
            if placeholder:
                suggestions.append(LocatorSuggestion(
                    LocatorStrategy.PLACEHOLDER, f'[placeholder="{placeholder}"]', 0.85,
                    benefits=("Stable for input fields", "Visible to users"),
                    tradeoffs=("Only works for inputs", "Placeholders may change"),
                ))

        test_id_locator = f'[data-testid="{generate_test_id(action)}"]'
        suggestions.append(LocatorSuggestion(
            LocatorStrategy.TEST_ID, test_id_locator, 0.80,
            benefits=("Dedicated test attribute", "Independent of content"),
            tradeoffs=("Requires adding data-testid to DOM", "Not semantic"),
        ))

        if target.type != LocatorKind.TEXT:
            text = extract_text(source)
            if text and len(text) < 50:
                suggestions.append(LocatorSuggestion(
                    LocatorStrategy.TEXT, f"text={text}", 0.70,
                    benefits=("Simple and readable", "Matches user perception"),
                    tradeoffs=("Breaks when text changes", "Issues with i18n"),
                ))

        data_match = (
            DATA_ATTRIBUTE_PATTERN.search(target.selector)
            or DATA_ATTRIBUTE_PATTERN.search(action.expression)
        )
        if data_match:
            data_locator = data_match.group(0)
            if data_locator != test_id_locator:
                suggestions.append(LocatorSuggestion(
                    LocatorStrategy.CSS, data_locator, 0.75,
                    benefits=("Stable data attributes", "Good performance"),
                    tradeoffs=("Requires proper data attributes",),
                ))

        if role:
            separator = LocatorSuggestion.COMPOSITE_SEPARATOR
            suggestions.append(LocatorSuggestion(
                LocatorStrategy.COMPOSITE,
                f"{self.original_locator(action)}{separator}role={role}",
                0.88,
                benefits=("Multiple fallback strategies", "Self-healing capability"),
                tradeoffs=("More complex", "Requires framework support"),
            ))

        suggestions.sort(key=lambda s: s.score, reverse=True)
        return suggestions

    def fallbacks(self, action: Action, primary: str) -> List[str]:
        """Up to ``MAX_FALLBACKS`` distinct alternates to ``primary``."""
        if action.target is None:
            return []
        candidates: List[Optional[str]] = [self.original_locator(action)]
        role = infer_role(action)
        text = extract_text(action.source)
        candidates.append(f"role={role}" if role else None)
        candidates.append(f"text={text}" if text else None)
        candidates.append(f'{role}[aria-label*="{text}"]' if role and text else None)

        chain: List[str] = []
        for candidate in candidates:
            if candidate and candidate != primary and candidate not in chain:
                chain.append(candidate)
        return chain[: self.config.MAX_FALLBACKS]

    def _select(self, suggestions: List[LocatorSuggestion], original: str) -> str:
        if not suggestions:
            return original
        for suggestion in suggestions:
            if (
                suggestion.strategy == LocatorStrategy.ROLE
                and suggestion.score >= self.config.ROLE_PREFERENCE_THRESHOLD
            ):
                return suggestion.locator
        return suggestions[0].locator

    @staticmethod
    def _explain(
        original: str, optimized: str, suggestions: List[LocatorSuggestion]
    ) -> List[str]:
        if original == optimized:
            return ["Original locator is already optimal"]
        selected = next((s for s in suggestions if s.locator == optimized), None)
        if selected is None:
            return []
        reasoning = [
            f"Selected {selected.strategy.value} strategy "
            f"(score: {round(selected.score * 100)}%)"
        ]
        reasoning.extend(f"+ {b}" for b in selected.benefits)
        if selected.tradeoffs:
            reasoning.append("Tradeoffs:")
            reasoning.extend(f"- {t}" for t in selected.tradeoffs)
        return reasoning


def infer_role(action: Action) -> Optional[str]:
    """Guess the ARIA role of the target from the action's expression."""
    source = action.source.lower()
    if "button" in source or (action.type == ActionType.CLICK and "getbyrole" in source):
        return "button"
    for role, hints in ROLE_HINTS:
        if any(hint in source for hint in hints):
            return role
    return None


def extract_text(source: str) -> Optional[str]:
    """Visible text of the target: getByText argument, else accessible name."""
    return _first_group(TEXT_PATTERN, source) or _first_group(NAME_PATTERN, source)


def generate_test_id(action: Action) -> str:
    text = extract_text(action.source) or (action.target.selector if action.target else "")
    text = (text or "element").lower()
    return re.sub(r"[^a-z0-9-]", "", re.sub(r"\s+", "-", text))


def _is_form_field(action: Action) -> bool:
    return action.type in (ActionType.FILL, ActionType.SELECT)


def _first_group(pattern: "re.Pattern[str]", text: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(1) if match else None
