"""Naming Domain Service.

The NamingEngine derives identifiers and Gherkin step phrases from
recorded actions. The raw name of an element comes from, in priority
order: the accessible name, getByText text, getByPlaceholder text, the
role keyword, then attributes mined from a CSS selector. The raw name
is cleaned, split into words, stripped of stop-words and capped before
any identifier is built from it.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from flowforge.domains.flow.value_objects import DetectedFlow
from flowforge.domains.shared.kernel import Action, ActionType, LocatorKind
from flowforge.models.config_models import IntelligenceConfig

from .step_patterns import StepPatternCompiler
from .value_objects import ElementNaming, MethodNaming, NamingBundle

logger = logging.getLogger(__name__)

ELEMENT_TYPE_SUFFIXES = {
    "textbox": "Field",
    "password": "Field",
    "text": "Field",
    "input": "Field",
    "button": "Button",
    "link": "Link",
    "checkbox": "Checkbox",
    "radio": "Radio",
    "combobox": "Dropdown",
    "listbox": "Listbox",
    "select": "Dropdown",
    "option": "Option",
    "menu": "Menu",
    "menuitem": "MenuItem",
    "tab": "Tab",
    "heading": "Header",
    "img": "Image",
    "table": "Table",
    "row": "Row",
    "cell": "Cell",
    "dialog": "Modal",
    "alert": "Alert",
}
SUFFIX_WORDS = frozenset(s.lower() for s in ELEMENT_TYPE_SUFFIXES.values())
GENERIC_ELEMENT = "Element"

NOISE_WORDS = frozenset((
    "the", "a", "an", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "shall", "can", "need", "dare",
    "ought", "used", "to", "of", "in", "for", "on", "with", "at", "by",
    "from", "as", "into", "through", "during", "before", "after", "above",
    "below", "between", "under", "again", "further", "then", "once",
))

ABBREVIATIONS = frozenset((
    "ID", "URL", "API", "UI", "CSS", "HTML", "XML", "JSON", "HTTP", "HTTPS",
    "FTP", "SSH", "SQL", "DB", "CPU", "AD", "ENT", "SSO", "AAA", "LDAP",
    "DNS", "IP", "TCP", "UDP",
))

ACTION_VERBS = {
    "fill": "enter",
    "type": "type",
    "click": "click",
    "dblclick": "doubleClick",
    "check": "check",
    "uncheck": "uncheck",
    "select": "select",
    "selectOption": "select",
    "hover": "hoverOver",
    "focus": "focusOn",
    "press": "press",
    "clear": "clear",
    "goto": "navigateTo",
    "toBeVisible": "verify",
    "toContainText": "verify",
    "toHaveText": "verify",
    "toHaveValue": "verify",
}

# Selector mining, first match wins
SELECTOR_ATTRIBUTE_PATTERNS = (
    re.compile(r"#([a-zA-Z][\w-]*)"),
    re.compile(r"\[aria-label=[\"']([^\"']+)[\"']\]"),
    re.compile(r"\[data-testid=[\"']([^\"']+)[\"']\]"),
    re.compile(r"\[name=[\"']([^\"']+)[\"']\]"),
    re.compile(r"\[placeholder=[\"']([^\"']+)[\"']\]"),
)
CLASS_PATTERN = re.compile(r"\.([a-zA-Z][\w-]*)")
UTILITY_CLASS_PATTERN = re.compile(r"^(btn|col|row|flex|grid|container|wrapper|css-)")
CLASS_PREFIX_PATTERN = re.compile(r"^(btn-|form-|input-|css-|ng-|v-|el-)")
CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


# =============================================================================
# Case conversion
# =============================================================================


def to_camel_case(words: Sequence[str]) -> str:
    """camelCase with abbreviations kept upper-case (except when first)."""
    result = []
    for index, word in enumerate(words):
        upper = word.upper()
        if upper in ABBREVIATIONS:
            result.append(upper.lower() if index == 0 else upper)
        elif index == 0:
            result.append(word.lower())
        else:
            result.append(word[:1].upper() + word[1:].lower())
    return "".join(result)


def to_pascal_case(words: Sequence[str]) -> str:
    """PascalCase with abbreviations kept upper-case."""
    result = []
    for word in words:
        upper = word.upper()
        if upper in ABBREVIATIONS:
            result.append(upper)
        else:
            result.append(word[:1].upper() + word[1:].lower())
    return "".join(result)


def to_kebab_case(text: str) -> str:
    return re.sub(r"[\s_]+", "-", CAMEL_BOUNDARY.sub(r"\1-\2", text)).lower()


def sanitize_identifier(name: str) -> str:
    """Drop characters invalid in an identifier; never returns ''."""
    sanitized = re.sub(r"[^a-zA-Z0-9_$]", "", name or "")
    if sanitized[:1].isdigit():
        sanitized = "_" + sanitized
    return sanitized or "element"


def clean_name(name: str) -> str:
    return re.sub(r"\s+", " ", re.sub(r"[^a-zA-Z0-9\s]", " ", name)).strip()


# =============================================================================
# Engine
# =============================================================================


@dataclass
class NamingEngine:
    """Derives element, method and flow names from recorded actions.

    Usage:

        engine = NamingEngine()
        bundle = engine.name_action(action)
        bundle.element.property_name   # "usernameField"
        bundle.method.method_name      # "enterUsername"
        bundle.method.step_pattern     # "user enters {string} in username field"
    """
    config: IntelligenceConfig = field(default_factory=IntelligenceConfig)
    compiler: StepPatternCompiler = field(default_factory=StepPatternCompiler)

    def name_action(
        self,
        action: Action,
        flow: Optional[DetectedFlow] = None,
        page: Optional[str] = None,
        index: Optional[int] = None,
    ) -> NamingBundle:
        """Name one action.

        Args:
            action: The action to name
            flow: Detected flow covering the action, if any. The flow's
                method is attached to the flow's last action.
            page: Page the action happens on, if known
            index: Position of the action in the recording; when given it
                is compared with the flow end instead of the action itself

        Returns:
            NamingBundle with element, method and optional flow method
        """
        element = self.name_element(action, page)
        method = self.name_method(action, element)
        flow_method = None
        if flow is not None and flow.actions:
            if index is not None:
                ends_flow = index == flow.end_index
            else:
                ends_flow = flow.actions[-1] == action
            if ends_flow:
                flow_method = self.name_flow(flow)
        logger.debug(
            f"Named {action.method} on '{action.target_name}' as {element.property_name}"
        )
        return NamingBundle(element=element, method=method, flow_method=flow_method)

    def name_element(self, action: Action, page: Optional[str] = None) -> ElementNaming:
        words = self.split_words(clean_name(self.raw_name(action)))
        element_type = self.element_type(action)
        return ElementNaming(
            property_name=self._property_name(words, element_type),
            description=self._description(words, element_type),
            element_type=element_type,
            method_prefix=to_pascal_case(words),
            parameter_name=to_camel_case(words),
            page=page,
        )

    def name_method(self, action: Action, element: ElementNaming) -> MethodNaming:
        verb = ACTION_VERBS.get(action.method, action.method)
        words = CAMEL_BOUNDARY.sub(r"\1 \2", verb).split()
        words += self.split_words(element.method_prefix)
        return MethodNaming(
            method_name=sanitize_identifier(to_camel_case(words)),
            step_pattern=self._step_pattern(action, element),
            parameter_names=tuple(self._parameter_names(action, element)),
        )

    def name_flow(self, flow: DetectedFlow) -> MethodNaming:
        """Method naming for a whole detected flow.

        Parameter names come from the flow's input actions and always
        match the number of parameters in the flow's step phrase.
        """
        names: List[str] = []
        for action in flow.actions:
            if action.method in ("fill", "type"):
                names.append(self.name_element(action).parameter_name or "value")
            elif action.method == "selectOption":
                names.append("option")
            elif action.method == "setInputFiles":
                names.append("filePath")
        expected = self.compiler.count_parameters(flow.step_pattern)
        names = names[:expected]
        while len(names) < expected:
            names.append(f"value{len(names) + 1}")
        return MethodNaming(
            method_name=flow.method_name,
            step_pattern=flow.step_pattern,
            parameter_names=tuple(names),
        )

    # ------------------------------------------------------------------
    # Raw name extraction
    # ------------------------------------------------------------------

    def raw_name(self, action: Action) -> str:
        target = action.target
        if target is None:
            return "element"
        if target.name:
            return target.name
        if target.type in (
            LocatorKind.TEXT, LocatorKind.PLACEHOLDER, LocatorKind.ROLE,
            LocatorKind.LABEL, LocatorKind.TEST_ID,
        ):
            return target.selector or "element"
        if target.selector:
            return name_from_selector(target.selector)
        return "element"

    def split_words(self, name: str) -> List[str]:
        spaced = re.sub(r"[-_]+", " ", CAMEL_BOUNDARY.sub(r"\1 \2", name))
        words = [w for w in spaced.split() if w.lower() not in NOISE_WORDS]
        return words[: self.config.MAX_NAME_WORDS]

    @staticmethod
    def element_type(action: Action) -> str:
        target = action.target
        if target is not None and target.type == LocatorKind.ROLE:
            return ELEMENT_TYPE_SUFFIXES.get(target.selector.lower(), GENERIC_ELEMENT)
        if ActionType.FILL in (action.type, action.method):
            return "Field"
        if ActionType.CLICK in (action.type, action.method):
            selector = target.selector.lower() if target else ""
            for hint in ("button", "link", "checkbox", "radio"):
                if hint in selector:
                    return ELEMENT_TYPE_SUFFIXES[hint]
        return GENERIC_ELEMENT

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    @staticmethod
    def _property_name(words: List[str], element_type: str) -> str:
        if not words:
            return "element"
        final = list(words)
        if words[-1].lower() not in SUFFIX_WORDS and element_type != GENERIC_ELEMENT:
            final.append(element_type)
        return sanitize_identifier(to_camel_case(final))

    @staticmethod
    def _description(words: List[str], element_type: str) -> str:
        text = " ".join(w[:1].upper() + w[1:].lower() for w in words)
        type_text = element_type.lower()
        if type_text in text.lower():
            return text
        return f"{text} {type_text}".strip()

    @staticmethod
    def _step_pattern(action: Action, element: ElementNaming) -> str:
        description = element.description.lower()
        method = action.method
        if method in ("fill", "type"):
            return f"user enters {{string}} in {description}"
        if method == "click":
            return f"user clicks {description}"
        if method == "check":
            return f"user checks {description}"
        if method == "uncheck":
            return f"user unchecks {description}"
        if method == "selectOption":
            return f"user selects {{string}} from {description}"
        if method == "hover":
            return f"user hovers over {description}"
        if method == "press":
            return f"user presses {action.first_arg or 'key'} on {description}"
        if method == "goto":
            return "user navigates to {string}"
        if method == "toBeVisible":
            return f"{description} should be visible"
        if method == "toContainText":
            return f"{description} should contain {{string}}"
        return f"user performs {method} on {description}"

    @staticmethod
    def _parameter_names(action: Action, element: ElementNaming) -> List[str]:
        method = action.method
        if method in ("fill", "type"):
            return [element.parameter_name or "value"]
        if method == "selectOption":
            return ["option"]
        if method == "press":
            return ["key"]
        if method == "goto":
            return ["url"]
        if method in ("toContainText", "toHaveText"):
            return ["expectedText"]
        if method == "toHaveValue":
            return ["expectedValue"]
        return []


def name_from_selector(selector: str) -> str:
    """Mine a meaningful name from a CSS selector."""
    for pattern in SELECTOR_ATTRIBUTE_PATTERNS:
        match = pattern.search(selector)
        if match:
            return match.group(1)

    context = _context_from_selector(selector)
    if context:
        return context

    for class_name in CLASS_PATTERN.findall(selector):
        if not UTILITY_CLASS_PATTERN.match(class_name):
            return _semantic_class_name(class_name)
    return "element"


def _context_from_selector(selector: str) -> Optional[str]:
    lowered = selector.lower()
    if any(word in lowered for word in ("select", "dropdown", "listbox")):
        if "icon" in lowered:
            return "dropdownIcon"
        if "text" in lowered:
            return "dropdownText"
        if "wrapper" in lowered:
            return "dropdown"
        return "dropdownSelector"
    if "checkbox" in lowered:
        return "checkboxIcon" if "icon" in lowered else "checkbox"
    if "table" in lowered or "grid" in lowered:
        if "row" in lowered:
            return "tableRow"
        if "cell" in lowered:
            return "tableCell"
        if "icon" in lowered:
            return "tableIcon"
        return "tableElement"
    if "input-group" in lowered or "form-group" in lowered:
        return "formField"
    if "icon" in lowered:
        return "actionIcon"
    if "search" in lowered:
        return "searchElement"
    if "filter" in lowered:
        return "filterElement"
    return None


def _semantic_class_name(class_name: str) -> str:
    cleaned = CLASS_PREFIX_PATTERN.sub("", class_name, count=1)
    if cleaned == class_name and len(cleaned) > 3:
        return cleaned
    parts = cleaned.split("-")
    return parts[0] + "".join(p[:1].upper() + p[1:] for p in parts[1:])
