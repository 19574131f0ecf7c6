"""Flow Domain Aggregate Root.

The FlowPatternRegistry owns the ordered list of flow patterns. Order
is significant: the detector claims action indices greedily, pattern by
pattern, so a pattern registered earlier wins overlapping spans.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .value_objects import FlowPattern, FlowSignature, FlowType


@dataclass
class FlowPatternRegistry:
    """Ordered registry of flow patterns.

    Invariants:
        - Each flow type appears at most once
        - Iteration follows registration order
    """
    _patterns: List[FlowPattern] = field(default_factory=list)

    def register(self, pattern: FlowPattern, first: bool = False) -> None:
        """Register a pattern, replacing any pattern of the same type.

        Args:
            pattern: The pattern to register
            first: Put the pattern ahead of every registered pattern so it
                claims overlapping spans first
        """
        self._patterns = [p for p in self._patterns if p.flow_type != pattern.flow_type]
        if first:
            self._patterns.insert(0, pattern)
        else:
            self._patterns.append(pattern)

    def resolve(self, flow_type: FlowType) -> Optional[FlowPattern]:
        for pattern in self._patterns:
            if pattern.flow_type == flow_type:
                return pattern
        return None

    @property
    def flow_types(self) -> List[FlowType]:
        return [p.flow_type for p in self._patterns]

    def __iter__(self) -> Iterator[FlowPattern]:
        return iter(list(self._patterns))

    def __len__(self) -> int:
        return len(self._patterns)

    @classmethod
    def with_builtins(cls) -> "FlowPatternRegistry":
        """Create a registry with the built-in patterns, most specific first."""
        registry = cls()
        for pattern in BUILTIN_PATTERNS:
            registry.register(pattern)
        return registry


BUILTIN_PATTERNS = (
    FlowPattern(FlowType.LOGIN, "Login", (
        FlowSignature.of(0.95, "fill:username", "fill:password", "click:login"),
        FlowSignature.of(0.90, "fill:user", "fill:pass", "click:log"),
        FlowSignature.of(0.90, "fill:email", "fill:password", "click:sign"),
        FlowSignature.of(0.70, "fill", "fill", "click:submit"),
    )),
    FlowPattern(FlowType.LOGOUT, "Logout", (
        FlowSignature.of(0.95, "click:logout"),
        FlowSignature.of(0.95, "click:sign out"),
        FlowSignature.of(0.95, "click:log out"),
    )),
    FlowPattern(FlowType.SEARCH, "Search", (
        FlowSignature.of(0.90, "fill:search", "click:search"),
        FlowSignature.of(0.90, "fill:search", "press:Enter"),
        FlowSignature.of(0.85, "fill:query", "click:find"),
        FlowSignature.of(0.75, "fill", "click:search"),
    )),
    FlowPattern(FlowType.FORM_SUBMIT, "Form Submit", (
        FlowSignature.of(0.80, "fill", "fill", "click:submit"),
        FlowSignature.of(0.80, "fill", "fill", "fill", "click:save"),
        FlowSignature.of(0.75, "fill", "click:confirm"),
    )),
    FlowPattern(FlowType.FILE_UPLOAD, "File Upload", (
        FlowSignature.of(0.95, "click:upload", "setInputFiles"),
        FlowSignature.of(0.95, "click:browse", "setInputFiles"),
        FlowSignature.of(0.95, "click:add file", "setInputFiles"),
        FlowSignature.of(0.90, "setInputFiles"),
    )),
    FlowPattern(FlowType.DROPDOWN_SELECT, "Dropdown Selection", (
        FlowSignature.of(0.85, "click:dropdown", "click:option"),
        FlowSignature.of(0.80, "click:select", "click"),
        FlowSignature.of(0.95, "selectOption"),
    )),
    FlowPattern(FlowType.MODAL_INTERACTION, "Modal Interaction", (
        FlowSignature.of(0.85, "click", "toBeVisible:modal", "click:close"),
        FlowSignature.of(0.85, "click", "toBeVisible:dialog", "click:ok"),
        FlowSignature.of(0.70, "click:cancel"),
        FlowSignature.of(0.70, "click:confirm"),
    )),
)

METHOD_NAMES: Dict[FlowType, str] = {
    FlowType.LOGIN: "performLogin",
    FlowType.LOGOUT: "performLogout",
    FlowType.FORM_SUBMIT: "submitForm",
    FlowType.FILE_UPLOAD: "uploadFile",
    FlowType.DROPDOWN_SELECT: "selectFromDropdown",
}

STEP_PATTERNS: Dict[FlowType, str] = {
    FlowType.LOGIN: "user logs in with username {string} and password {string}",
    FlowType.LOGOUT: "user logs out",
    FlowType.SEARCH: "user searches for {string}",
    FlowType.FORM_SUBMIT: "user submits the form",
    FlowType.FILE_UPLOAD: "user uploads file {string}",
    FlowType.DROPDOWN_SELECT: "user selects {string} from dropdown",
}
DEFAULT_METHOD_NAME = "performAction"
DEFAULT_STEP_PATTERN = "user performs action"
