"""Shared Kernel - the recorded Action model shared across bounded contexts.

Every context (filtering, locator, flow, naming, assertion, test_data)
consumes the same immutable ``Action`` value object. The kernel is kept
minimal: parsing of raw payloads, a few read-only helpers and
the case-insensitive pattern search used by the flow context.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Tuple

from pydantic import BeforeValidator


class RecordingPayloadError(ValueError):
    """Raised when a raw recording payload cannot be read as actions."""


class ActionType(str, Enum):
    """Coarse category of a recorded action (the ``type`` field)."""
    CLICK = "click"
    FILL = "fill"
    TYPE = "type"
    CHECK = "check"
    SELECT = "select"
    HOVER = "hover"
    PRESS = "press"
    NAVIGATION = "navigation"
    ASSERTION = "assertion"


class LocatorKind(str, Enum):
    """Locator strategy used by the recorder to find the target element."""
    ROLE = "getByRole"
    LABEL = "getByLabel"
    PLACEHOLDER = "getByPlaceholder"
    TEXT = "getByText"
    TEST_ID = "getByTestId"
    CSS = "locator"


@dataclass(frozen=True)
class ActionTarget:
    """Target descriptor of a recorded action.

    Attributes:
        type: Locator strategy (getByRole, getByText, locator, ...).
            Unknown strategies are kept verbatim.
        selector: Strategy-specific selector (role name, text, CSS).
        options: Extra strategy options; ``name`` carries the
            accessible name for role-based targets.
    """
    type: str
    selector: str = ""
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> Optional[str]:
        """Accessible name option, if any."""
        value = self.options.get("name")
        if value is None or value == "":
            return None
        return str(value)

    @property
    def display_name(self) -> str:
        """Accessible name, else the selector, else empty string."""
        return self.name or self.selector or ""

    def is_role(self, *roles: str) -> bool:
        """True if this is a role-based target (optionally one of ``roles``)."""
        if self.type != LocatorKind.ROLE:
            return False
        return not roles or self.selector in roles

    def same_element(self, other: Optional["ActionTarget"]) -> bool:
        """Two targets address the same element when strategy, selector
        and accessible name all match."""
        if other is None:
            return False
        return (
            self.type == other.type
            and self.selector == other.selector
            and self.name == other.name
        )

    def render(self) -> str:
        """Render the target as a Playwright-style locator call."""
        selector = _quote(self.selector)
        if self.type == LocatorKind.CSS:
            return f"page.locator({selector})"
        if self.name:
            return f"page.{self.type}({selector}, {{ name: {_quote(self.name)} }})"
        return f"page.{self.type}({selector})"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "selector": self.selector}
        if self.options:
            data["options"] = dict(self.options)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ActionTarget":
        """Build a target from its JSON form.

        Accepts ``{"type", "selector", "options": {"name"}}`` and the
        flattened ``{"type", "selector", "name"}`` shorthand.

        Raises:
            RecordingPayloadError: If ``data`` is not a mapping or the
                options are malformed.
        """
        if not isinstance(data, Mapping):
            raise RecordingPayloadError(
                f"Action target must be an object, got {type(data).__name__}"
            )
        options = data.get("options") or {}
        if not isinstance(options, Mapping):
            raise RecordingPayloadError("Action target options must be an object")
        options = dict(options)
        if "name" in data and "name" not in options:
            options["name"] = data["name"]
        return cls(
            type=str(data.get("type") or LocatorKind.CSS.value),
            selector=str(data.get("selector") or ""),
            options=options,
        )

    # Convenience constructors

    @classmethod
    def role(cls, role: str, name: Optional[str] = None) -> "ActionTarget":
        return cls(LocatorKind.ROLE.value, role, {"name": name} if name else {})

    @classmethod
    def text(cls, text: str) -> "ActionTarget":
        return cls(LocatorKind.TEXT.value, text)

    @classmethod
    def label(cls, label: str) -> "ActionTarget":
        return cls(LocatorKind.LABEL.value, label)

    @classmethod
    def placeholder(cls, placeholder: str) -> "ActionTarget":
        return cls(LocatorKind.PLACEHOLDER.value, placeholder)

    @classmethod
    def test_id(cls, test_id: str) -> "ActionTarget":
        return cls(LocatorKind.TEST_ID.value, test_id)

    @classmethod
    def css(cls, selector: str) -> "ActionTarget":
        return cls(LocatorKind.CSS.value, selector)


@dataclass(frozen=True)
class Action:
    """One recorded browser action.

    Actions are immutable; every analysis pass produces new sequences
    and never mutates its input.

    Attributes:
        type: Coarse category (click, fill, navigation, assertion, ...)
        method: Concrete recorder method (click, fill, press, goto,
            toBeVisible, selectOption, setInputFiles, ...)
        target: Element descriptor, absent for page-level actions
        args: Positional arguments (fill value, key name, URL, ...)
        expression: Source expression as recorded, if known
        id: Recorder-assigned identifier
        line_number: Line in the recorded script, 0 when unknown

    Examples:
        >>> Action.create("fill", target=ActionTarget.role("textbox", "Username"),
        ...               args=["Admin"])
        >>> Action.create("goto", type="navigation", args=["https://example.com"])
    """
    type: str
    method: str
    target: Optional[ActionTarget] = None
    args: Tuple[Any, ...] = ()
    expression: str = ""
    id: str = ""
    line_number: int = 0

    @classmethod
    def create(
        cls,
        method: str,
        target: Optional[ActionTarget] = None,
        args: Optional[List[Any]] = None,
        type: Optional[str] = None,
        expression: str = "",
        id: str = "",
        line_number: int = 0,
    ) -> "Action":
        """Build an action, defaulting ``type`` to ``method``."""
        return cls(
            type=type or method,
            method=method,
            target=target,
            args=tuple(args or ()),
            expression=expression,
            id=id,
            line_number=line_number,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Action":
        """Parse an action from its JSON form.

        Missing ``type``/``method`` fall back to each other; a missing
        ``args`` becomes empty.

        Raises:
            RecordingPayloadError: If the payload is not an object, has
                neither type nor method, or carries a malformed target.
        """
        if not isinstance(data, Mapping):
            raise RecordingPayloadError(
                f"Action must be an object, got {type(data).__name__}"
            )
        action_type = data.get("type") or data.get("method")
        method = data.get("method") or data.get("type")
        if not action_type:
            raise RecordingPayloadError("Action needs at least a 'type' or 'method'")

        raw_target = data.get("target")
        target = ActionTarget.from_dict(raw_target) if raw_target else None

        args = data.get("args")
        if args is None:
            args = ()
        elif isinstance(args, (str, bytes)) or not isinstance(args, (list, tuple)):
            args = (args,)

        line_number = data.get("lineNumber", data.get("line_number", 0)) or 0
        try:
            line_number = int(line_number)
        except (TypeError, ValueError) as e:
            raise RecordingPayloadError(f"Invalid line number: {line_number!r}") from e

        return cls(
            type=str(action_type),
            method=str(method),
            target=target,
            args=tuple(args),
            expression=str(data.get("expression") or ""),
            id=str(data.get("id") or ""),
            line_number=line_number,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type,
            "method": self.method,
            "args": list(self.args),
        }
        if self.target is not None:
            data["target"] = self.target.to_dict()
        if self.expression:
            data["expression"] = self.expression
        if self.id:
            data["id"] = self.id
        if self.line_number:
            data["lineNumber"] = self.line_number
        return data

    @property
    def first_arg(self) -> str:
        """First positional argument as a string ('' when absent)."""
        if not self.args or self.args[0] is None:
            return ""
        return str(self.args[0])

    @property
    def target_name(self) -> str:
        """Accessible name, else selector, else ''."""
        return self.target.display_name if self.target else ""

    @property
    def source(self) -> str:
        """Recorded expression, or a rendering of the action when absent.

        Heuristics that inspect expression text use this so that actions
        built from bare JSON still carry the same signals.
        """
        if self.expression:
            return self.expression
        args = ", ".join(_quote(a) for a in self.args)
        if self.target is None:
            return f"await page.{self.method}({args})"
        if self.type == ActionType.ASSERTION:
            return f"await expect({self.target.render()}).{self.method}({args})"
        return f"await {self.target.render()}.{self.method}({args})"

    def is_role_click(self, *roles: str) -> bool:
        return (
            self.type == ActionType.CLICK
            and self.target is not None
            and self.target.is_role(*roles)
        )

    def same_element(self, other: "Action") -> bool:
        """True if both actions have targets that address the same element."""
        return self.target is not None and self.target.same_element(other.target)


def parse_actions(payload: Any) -> List[Action]:
    """Parse a recording payload into actions.

    Accepts a list of action objects, an object with an ``actions`` list,
    or a JSON string of either form.

    Raises:
        RecordingPayloadError: On invalid JSON or a non-list payload.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise RecordingPayloadError(f"Recording is not valid JSON: {e}") from e
    if isinstance(payload, Mapping):
        payload = payload.get("actions")
    if not isinstance(payload, list):
        raise RecordingPayloadError("Recording must be a list of actions")
    return [
        item if isinstance(item, Action) else Action.from_dict(item)
        for item in payload
    ]


def _quote(value: Any) -> str:
    if isinstance(value, str):
        return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"
    return json.dumps(value)


# =============================================================================
# Pattern matching helpers
# =============================================================================


def safe_search(pattern: str, text: str) -> bool:
    """Case-insensitive regex search that never raises.

    A pattern that does not compile degrades to a literal,
    case-insensitive substring comparison.
    """
    try:
        return re.search(pattern, text, re.IGNORECASE) is not None
    except re.error:
        return pattern.lower() in text.lower()


# =============================================================================
# Type-constrained tool parameter aliases
# =============================================================================


def _normalize_str(v: Any) -> Any:
    """Normalize string input: strip whitespace, lowercase."""
    return v.strip().lower() if isinstance(v, str) else v


DataFormat = Annotated[
    Literal["json", "yaml"],
    BeforeValidator(_normalize_str),
]

FlowView = Annotated[
    Literal["patterns", "intents", "pages", "all"],
    BeforeValidator(_normalize_str),
]
