"""Assertion Domain Services.

The AssertionSuggester proposes verification steps after the actions
that usually change application state: submitting, saving, deleting,
logging in or out, searching, selecting and navigating. Everything else
is left alone; a short list of likely assertions is preferred over a
long list of noise.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Sequence

from flowforge.domains.naming.services import to_camel_case
from flowforge.domains.shared.kernel import Action, ActionType
from flowforge.models.config_models import IntelligenceConfig

from .value_objects import (
    AssertionKind,
    AssertionSuggestion,
    AssertionTemplate,
    AssertionTrigger,
    VerificationPoint,
)

logger = logging.getLogger(__name__)

# "method:target" keys (lowercase substring match) that need verification
VERIFICATION_TRIGGERS = (
    "click:submit",
    "click:save",
    "click:delete",
    "click:login",
    "click:logout",
    "click:search",
    "click:confirm",
    "click:ok",
    "click:cancel",
    "fill:search",
    "selectoption",
    "navigation",
)

SUBMIT_WORDS = ("submit", "save", "confirm")

K = AssertionKind

ASSERTION_TRIGGERS = (
    AssertionTrigger.of(
        r"login|sign.?in",
        AssertionTemplate(K.URL_CONTAINS, "dashboard|home", "should redirect to dashboard", 0.9),
        AssertionTemplate(K.VISIBILITY, "welcome|logout|user", "should show user is logged in", 0.85),
        AssertionTemplate(K.ELEMENT_ABSENT, "login|sign in", "should hide login form", 0.8),
    ),
    AssertionTrigger.of(
        r"logout|sign.?out",
        AssertionTemplate(K.URL_CONTAINS, "login", "should redirect to login", 0.9),
        AssertionTemplate(K.VISIBILITY, "login|sign in", "should show login form", 0.85),
    ),
    AssertionTrigger.of(
        r"search",
        AssertionTemplate(K.VISIBILITY, "result|list|table", "should show search results", 0.85),
        AssertionTemplate(K.TEXT_CONTAINS, "result", "should contain search term", 0.7),
    ),
    AssertionTrigger.of(
        r"save|submit|create|add",
        AssertionTemplate(K.VISIBILITY, "success|saved|created", "should show success message", 0.85),
        AssertionTemplate(K.ELEMENT_ABSENT, "error", "should not show error", 0.7),
    ),
    AssertionTrigger.of(
        r"delete|remove",
        AssertionTemplate(K.VISIBILITY, "deleted|removed|confirm", "should confirm deletion", 0.8),
        AssertionTemplate(K.ELEMENT_ABSENT, "deleted-item", "deleted item should not be visible", 0.85),
    ),
    AssertionTrigger.of(
        r"upload",
        AssertionTemplate(K.VISIBILITY, "uploaded|success|file", "should show file uploaded", 0.85),
        AssertionTemplate(K.TEXT_CONTAINS, "filename", "should show filename", 0.7),
    ),
)

PAGE_LOAD_CONFIDENCE = 0.9
LINK_TARGET_CONFIDENCE = 0.75
SUBMIT_ENABLED_CONFIDENCE = 0.6


@dataclass
class AssertionSuggester:
    """Suggests assertions for a filtered recording.

    Usage:

        points = AssertionSuggester().suggest(actions)
        points[0].action_index          # 2
        points[0].best.kind             # AssertionKind.URL_CONTAINS
        points[0].best.gherkin_step     # 'Then URL should contain "dashboard"'
    """
    config: IntelligenceConfig = field(default_factory=IntelligenceConfig)
    triggers: Sequence[AssertionTrigger] = ASSERTION_TRIGGERS

    def suggest(self, actions: Sequence[Action]) -> List[VerificationPoint]:
        """Verification points in action order; actions without
        suggestions are skipped."""
        points: List[VerificationPoint] = []
        for index, action in enumerate(actions):
            suggestions = self.suggest_for(action, actions, index)
            if suggestions:
                points.append(VerificationPoint(index, action, tuple(suggestions)))
        logger.debug(f"Suggested assertions after {len(points)} of {len(actions)} actions")
        return points

    def suggest_for(
        self, action: Action, actions: Sequence[Action], index: int
    ) -> List[AssertionSuggestion]:
        """Top suggestions for one action, highest confidence first."""
        if not self.needs_verification(action):
            return []

        target = assertion_target(action)
        suggestions = [
            self._from_template(action, template)
            for trigger in self.triggers
            if trigger.matches(target)
            for template in trigger.templates
        ]
        suggestions.extend(self._context_suggestions(action, actions, index))
        suggestions.sort(key=lambda s: s.confidence, reverse=True)
        return suggestions[: self.config.MAX_ASSERTIONS_PER_ACTION]

    @staticmethod
    def needs_verification(action: Action) -> bool:
        target = assertion_target(action)
        key = f"{action.method}:{target}".lower()
        if any(trigger in key for trigger in VERIFICATION_TRIGGERS):
            return True
        if action.type == ActionType.NAVIGATION:
            return True
        return action.method == "click" and any(w in target.lower() for w in SUBMIT_WORDS)

    def _from_template(self, action: Action, template: AssertionTemplate) -> AssertionSuggestion:
        return AssertionSuggestion(
            kind=template.kind,
            target=template.target,
            expected_behavior=template.behavior,
            gherkin_step=gherkin_step(template.kind, template.target, template.behavior),
            implementation=implementation(template.kind, template.target),
            confidence=template.confidence,
            reason=f"After {action.method} on {assertion_target(action)}",
        )

    @staticmethod
    def _context_suggestions(
        action: Action, actions: Sequence[Action], index: int
    ) -> List[AssertionSuggestion]:
        suggestions: List[AssertionSuggestion] = []

        if action.type == ActionType.NAVIGATION:
            suggestions.append(AssertionSuggestion(
                kind=AssertionKind.VISIBILITY,
                target="main-content",
                expected_behavior="Page should load completely",
                gherkin_step="Then the page should load successfully",
                implementation=(
                    "await this.waitForPageLoad();\n"
                    "const isLoaded = await this.mainContent.isVisibleWithTimeout(10000);\n"
                    "expect(isLoaded).toBeTruthy();"
                ),
                confidence=PAGE_LOAD_CONFIDENCE,
                reason="Navigation requires page load verification",
            ))

        if action.method == "fill":
            submit_ahead = any(
                later.method == "click" and "submit" in assertion_target(later).lower()
                for later in actions[index + 1:]
            )
            if not submit_ahead:
                suggestions.append(AssertionSuggestion(
                    kind=AssertionKind.ELEMENT_ENABLED,
                    target="submit-button",
                    expected_behavior="Submit button should be enabled",
                    gherkin_step="Then the submit button should be enabled",
                    implementation=(
                        "const isEnabled = await this.submitButton.isEnabled();\n"
                        "expect(isEnabled).toBeTruthy();"
                    ),
                    confidence=SUBMIT_ENABLED_CONFIDENCE,
                    reason="Form input may enable submit button",
                ))

        if action.method == "click" and action.target is not None and action.target.is_role("link"):
            link = action.target.name or "page"
            suggestions.append(AssertionSuggestion(
                kind=AssertionKind.VISIBILITY,
                target=link,
                expected_behavior=f"Should navigate to {link} page",
                gherkin_step=f"Then user should see {link} page",
                implementation=(
                    "await this.waitForPageLoad();\n"
                    "const header = await this.pageHeader.textContentWithTimeout(5000);\n"
                    f"expect(header).toContain('{link}');"
                ),
                confidence=LINK_TARGET_CONFIDENCE,
                reason="Link click typically navigates to new page",
            ))

        return suggestions


def assertion_target(action: Action) -> str:
    """Accessible name, else selector, else the URL of a goto, else the method."""
    if action.target_name:
        return action.target_name
    if action.method == "goto" and action.first_arg:
        return action.first_arg
    return action.method


def gherkin_step(kind: AssertionKind, target: str, behavior: str) -> str:
    subject = target.replace("|", " or ")
    first = target.split("|")[0]
    phrases = {
        AssertionKind.VISIBILITY: f"Then {subject} should be visible",
        AssertionKind.TEXT_CONTAINS: f"Then {first} should contain {{string}}",
        AssertionKind.TEXT_EQUALS: f"Then {first} should equal {{string}}",
        AssertionKind.URL_CONTAINS: f'Then URL should contain "{first}"',
        AssertionKind.URL_EQUALS: "Then URL should be {string}",
        AssertionKind.ELEMENT_ENABLED: f"Then {first} should be enabled",
        AssertionKind.ELEMENT_DISABLED: f"Then {first} should be disabled",
        AssertionKind.CHECKBOX_CHECKED: f"Then {first} should be checked",
        AssertionKind.CHECKBOX_UNCHECKED: f"Then {first} should be unchecked",
        AssertionKind.VALUE_EQUALS: f"Then {first} should have value {{string}}",
        AssertionKind.COUNT_EQUALS: f"Then {first} count should be {{int}}",
        AssertionKind.ELEMENT_ABSENT: f"Then {subject} should not be visible",
    }
    return phrases.get(kind, f"Then {behavior}")


def implementation(kind: AssertionKind, target: str) -> str:
    first = target.split("|")[0]
    element = to_camel_case(re.sub(r"[^a-zA-Z0-9]+", " ", first).split()) or "element"
    snippets = {
        AssertionKind.VISIBILITY: (
            f"const isVisible = await this.{element}.isVisibleWithTimeout(10000);\n"
            f"if (!isVisible) throw new Error('{first} not visible');"
        ),
        AssertionKind.TEXT_CONTAINS: (
            f"const text = await this.{element}.textContentWithTimeout(5000);\n"
            "if (!text?.includes(expectedText)) throw new Error('Text not found');"
        ),
        AssertionKind.TEXT_EQUALS: (
            f"const text = await this.{element}.textContentWithTimeout(5000);\n"
            "if (text?.trim() !== expectedText) throw new Error('Text mismatch');"
        ),
        AssertionKind.URL_CONTAINS: (
            "const url = await this.getUrl();\n"
            f"if (!url.includes('{first}')) throw new Error('URL mismatch');"
        ),
        AssertionKind.URL_EQUALS: (
            "const url = await this.getUrl();\n"
            "if (url !== expectedUrl) throw new Error('URL mismatch');"
        ),
        AssertionKind.ELEMENT_ENABLED: (
            f"const isEnabled = await this.{element}.isEnabled();\n"
            "if (!isEnabled) throw new Error('Element not enabled');"
        ),
        AssertionKind.ELEMENT_DISABLED: (
            f"const isDisabled = await this.{element}.isDisabled();\n"
            "if (!isDisabled) throw new Error('Element not disabled');"
        ),
        AssertionKind.CHECKBOX_CHECKED: (
            f"const isChecked = await this.{element}.isChecked();\n"
            "if (!isChecked) throw new Error('Checkbox not checked');"
        ),
        AssertionKind.CHECKBOX_UNCHECKED: (
            f"const isChecked = await this.{element}.isChecked();\n"
            "if (isChecked) throw new Error('Checkbox should not be checked');"
        ),
        AssertionKind.VALUE_EQUALS: (
            f"const value = await this.{element}.inputValue();\n"
            "if (value !== expectedValue) throw new Error('Value mismatch');"
        ),
        AssertionKind.COUNT_EQUALS: (
            f"const count = await this.{element}.count();\n"
            "if (count !== expectedCount) throw new Error('Count mismatch');"
        ),
        AssertionKind.ELEMENT_ABSENT: (
            f"const isVisible = await this.{element}.isVisibleWithTimeout(3000);\n"
            "if (isVisible) throw new Error('Element should not be visible');"
        ),
    }
    return snippets[kind]
