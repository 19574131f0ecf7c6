"""Flow Domain Services.

Two complementary views of a recording:

- FlowDetector matches signature sequences from the FlowPatternRegistry
  and claims action indices greedily, in registration order.
- IntentSegmenter walks the recording once and cuts it into segments
  that share one user intent (authenticate, search, select, ...).
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from flowforge.domains.shared.kernel import Action, ActionType
from flowforge.models.config_models import IntelligenceConfig

from .aggregates import (
    DEFAULT_METHOD_NAME,
    DEFAULT_STEP_PATTERN,
    METHOD_NAMES,
    STEP_PATTERNS,
    FlowPatternRegistry,
)
from .value_objects import (
    DetectedFlow,
    FlowOutcome,
    FlowSignature,
    FlowType,
    Intent,
    SignatureStep,
    UserFlow,
)

logger = logging.getLogger(__name__)

FILL_METHODS = ("fill", "type")
GENERIC_FLOW_NAME = "Recorded Flow"
GENERIC_FLOW_CONFIDENCE = 0.5


def capitalize_words(text: str) -> str:
    """PascalCase with each word's tail lowercased (``'log OUT'`` -> ``'LogOut'``)."""
    words = re.sub(r"[^a-zA-Z0-9]+", " ", text).split()
    return "".join(w[:1].upper() + w[1:].lower() for w in words)


def fill_bindings(actions: Sequence[Action]) -> Dict[str, str]:
    """Field name to value for every fill/type action."""
    bindings: Dict[str, str] = {}
    for action in actions:
        if action.method in FILL_METHODS:
            name = action.target.name if action.target else None
            bindings[name or "field"] = action.first_arg
    return bindings


@dataclass
class FlowDetector:
    """Detects business flows by signature matching.

    A signature matches at an offset when every step matches the action
    at the same position. Matched indices are claimed and never reused,
    so detected flows never overlap.

    Usage:

        flows = FlowDetector().detect(actions)
        flows[0].flow_type   # FlowType.LOGIN
        flows[0].method_name # "performLogin"
    """
    registry: FlowPatternRegistry = field(default_factory=FlowPatternRegistry.with_builtins)

    def detect(self, actions: Sequence[Action]) -> List[DetectedFlow]:
        """Detected flows ordered by start index; empty when nothing matches."""
        used: Set[int] = set()
        flows: List[DetectedFlow] = []
        for pattern in self.registry:
            for signature in pattern.signatures:
                for start in self._match_offsets(actions, signature, used):
                    end = start + len(signature) - 1
                    used.update(range(start, end + 1))
                    span = tuple(actions[start:end + 1])
                    flows.append(DetectedFlow(
                        flow_type=pattern.flow_type,
                        name=pattern.name,
                        start_index=start,
                        end_index=end,
                        confidence=signature.confidence,
                        method_name=self.method_name(pattern.flow_type, span),
                        step_pattern=STEP_PATTERNS.get(pattern.flow_type, DEFAULT_STEP_PATTERN),
                        data_bindings=fill_bindings(span),
                        actions=span,
                    ))
                    logger.debug(
                        f"Matched {pattern.flow_type.value} flow at [{start}, {end}] "
                        f"(confidence {signature.confidence})"
                    )
        flows.sort(key=lambda f: f.start_index)
        return flows

    def detect_or_default(self, actions: Sequence[Action]) -> List[DetectedFlow]:
        """Detected flows, or one generic flow spanning the whole recording."""
        flows = self.detect(actions)
        if flows or not actions:
            return flows
        return [DetectedFlow(
            flow_type=FlowType.GENERIC,
            name=GENERIC_FLOW_NAME,
            start_index=0,
            end_index=len(actions) - 1,
            confidence=GENERIC_FLOW_CONFIDENCE,
            method_name=DEFAULT_METHOD_NAME,
            step_pattern=DEFAULT_STEP_PATTERN,
            data_bindings=fill_bindings(actions),
            actions=tuple(actions),
        )]

    def _match_offsets(
        self, actions: Sequence[Action], signature: FlowSignature, used: Set[int]
    ):
        size = len(signature)
        for start in range(0, len(actions) - size + 1):
            window = range(start, start + size)
            if any(i in used for i in window):
                continue
            if all(
                matches_step(actions[i], step)
                for i, step in zip(window, signature.steps)
            ):
                yield start

    @staticmethod
    def method_name(flow_type: FlowType, actions: Sequence[Action]) -> str:
        if flow_type == FlowType.SEARCH and actions:
            return f"searchBy{capitalize_words(actions[0].target_name)}"
        return METHOD_NAMES.get(flow_type, DEFAULT_METHOD_NAME)


def matches_step(action: Action, step: SignatureStep) -> bool:
    """True if ``action`` satisfies one signature step.

    The method matches the action's method or type, with fill and type
    treated as equivalent. A target substring must occur in the
    accessible name (else selector), case-insensitively; for key presses
    the pressed key also counts.
    """
    method_ok = step.method in (action.method, action.type) or (
        step.method in FILL_METHODS and action.method in FILL_METHODS
    )
    if not method_ok:
        return False
    if not step.target:
        return True
    wanted = step.target.lower()
    if wanted in action.target_name.lower():
        return True
    return action.method == "press" and wanted in action.first_arg.lower()


# =============================================================================
# Intent segmentation
# =============================================================================

EXPECTED_TEXT_PATTERN = re.compile(r"getByText\(['\"]([^'\"]+)['\"]")
EXPECTED_HEADING_PATTERN = re.compile(
    r"getByRole\(['\"]heading['\"],\s*\{\s*name:\s*['\"]([^'\"]+)['\"]"
)


@dataclass
class IntentSegmenter:
    """Cuts a recording into segments that share one user intent.

    A new segment starts at a link click whose name is a known module
    (``MODULE_NAMES``), and after an authentication segment's submitting
    click when a role-based click follows. Every segment's intent is
    detected from its first action and the action after it.
    """
    config: IntelligenceConfig = field(default_factory=IntelligenceConfig)

    def segment(self, actions: Sequence[Action]) -> List[UserFlow]:
        flows: List[UserFlow] = []
        buffer: List[Action] = []
        intent = Intent.INTERACT
        start = 0

        for i, action in enumerate(actions):
            nxt = actions[i + 1] if i + 1 < len(actions) else None
            if buffer and self._opens_module(action):
                flows.append(self._create_flow(buffer, intent, start, i - 1))
                buffer = []
            if not buffer:
                start = i
                intent = detect_intent(action, nxt)
            buffer.append(action)
            if (
                intent == Intent.AUTHENTICATE
                and action.type == ActionType.CLICK
                and nxt is not None
                and nxt.is_role_click()
            ):
                flows.append(self._create_flow(buffer, intent, start, i))
                buffer = []

        if buffer:
            flows.append(self._create_flow(buffer, intent, start, len(actions) - 1))
        return flows

    def _opens_module(self, action: Action) -> bool:
        return (
            action.is_role_click("link")
            and action.target.name in self.config.MODULE_NAMES
        )

    def _create_flow(
        self, actions: List[Action], intent: Intent, start: int, end: int
    ) -> UserFlow:
        data_inputs: Dict[str, str] = {}
        expected: Optional[str] = None
        module: Optional[str] = None
        for action in actions:
            if action.type == ActionType.FILL:
                name = action.target.name if action.target else None
                data_inputs[name or "field"] = action.first_arg
            elif action.type == ActionType.ASSERTION:
                match = (
                    EXPECTED_TEXT_PATTERN.search(action.source)
                    or EXPECTED_HEADING_PATTERN.search(action.source)
                )
                if match:
                    expected = match.group(1)
            elif action.is_role_click("link"):
                module = action.target.name or module

        flow = UserFlow(
            name=flow_name(intent, module),
            intent=intent,
            start_index=start,
            end_index=end,
            description=flow_description(intent, module, data_inputs),
            outcome=FlowOutcome.SUCCESS if expected else FlowOutcome.UNKNOWN,
            data_inputs=data_inputs,
            expected_result=expected,
            module=module,
            actions=tuple(actions),
        )
        logger.debug(f"Segmented '{flow.name}' at [{start}, {end}]")
        return flow


def detect_intent(action: Action, next_action: Optional[Action]) -> Intent:
    source = action.source.lower()
    if any(word in source for word in ("username", "password", "login")):
        return Intent.AUTHENTICATE
    if "search" in source or (
        action.type == ActionType.FILL
        and next_action is not None
        and "search" in next_action.source.lower()
    ):
        return Intent.SEARCH
    if any(word in source for word in ("checkbox", "check", "select")):
        return Intent.SELECT
    if action.is_role_click("link"):
        return Intent.NAVIGATE
    return Intent.INTERACT


def flow_name(intent: Intent, module: Optional[str]) -> str:
    if intent == Intent.AUTHENTICATE:
        return "User Authentication"
    if intent == Intent.NAVIGATE:
        return f"Navigate to {module}" if module else "Navigation"
    if intent == Intent.SEARCH:
        return f"Search in {module}" if module else "Search"
    if intent == Intent.SELECT:
        return f"Select item in {module}" if module else "Item Selection"
    return "User Interaction"


def flow_description(
    intent: Intent, module: Optional[str], data_inputs: Dict[str, str]
) -> str:
    if intent == Intent.AUTHENTICATE:
        return "User logs into the system with valid credentials"
    if intent == Intent.NAVIGATE:
        if module:
            return f"User navigates to the {module} module"
        return "User navigates through the application"
    if intent == Intent.SEARCH:
        criteria = next(iter(data_inputs.values()), "") or "criteria"
        if module:
            return f'User searches for "{criteria}" in the {module} module'
        return f'User performs a search with criteria "{criteria}"'
    if intent == Intent.SELECT:
        return "User selects items from the list"
    return "User interacts with the application"
