"""Flow Domain Value Objects.

Immutable types describing flow signatures and the spans detected in
a recording. Equality is structural.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple

from flowforge.domains.shared.kernel import Action


class FlowType(str, Enum):
    """Business flow recognized by signature matching."""
    LOGIN = "login"
    LOGOUT = "logout"
    SEARCH = "search"
    FORM_SUBMIT = "form-submit"
    FILE_UPLOAD = "file-upload"
    DROPDOWN_SELECT = "dropdown-select"
    MODAL_INTERACTION = "modal-interaction"
    GENERIC = "generic"


class Intent(str, Enum):
    """Goal of a segment found by intent segmentation."""
    AUTHENTICATE = "authenticate"
    SEARCH = "search"
    SELECT = "select"
    NAVIGATE = "navigate"
    INTERACT = "interact"


class FlowOutcome(str, Enum):
    SUCCESS = "success"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SignatureStep:
    """One ``method[:target-substring]`` element of a flow signature.

    Examples:
        >>> SignatureStep.parse("fill:username")
        SignatureStep(method='fill', target='username')
        >>> SignatureStep.parse("setInputFiles")
        SignatureStep(method='setInputFiles', target=None)
    """
    method: str
    target: Optional[str] = None

    SEPARATOR: ClassVar[str] = ":"

    @classmethod
    def parse(cls, text: str) -> "SignatureStep":
        method, sep, target = text.partition(cls.SEPARATOR)
        if not method:
            raise ValueError(f"Signature step needs a method: {text!r}")
        return cls(method=method, target=target if sep and target else None)

    def __str__(self) -> str:
        return f"{self.method}{self.SEPARATOR}{self.target}" if self.target else self.method


@dataclass(frozen=True)
class FlowSignature:
    """An ordered sequence of steps and the confidence of a full match."""
    steps: Tuple[SignatureStep, ...]
    confidence: float

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("Flow signature must have at least one step")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(
                f"Flow signature confidence must be in [0, 1], got {self.confidence}"
            )

    @classmethod
    def of(cls, confidence: float, *steps: str) -> "FlowSignature":
        return cls(tuple(SignatureStep.parse(s) for s in steps), confidence)

    def __len__(self) -> int:
        return len(self.steps)


@dataclass(frozen=True)
class FlowPattern:
    """A named flow type with its signatures, tried in order."""
    flow_type: FlowType
    name: str
    signatures: Tuple[FlowSignature, ...]

    def __post_init__(self) -> None:
        if not self.signatures:
            raise ValueError(f"Flow pattern '{self.name}' has no signatures")


@dataclass(frozen=True)
class DetectedFlow:
    """A contiguous span of actions matched to a flow type.

    Attributes:
        flow_type: Recognized flow
        name: Display name of the flow
        start_index: First action index (inclusive)
        end_index: Last action index (inclusive)
        confidence: Confidence of the matching signature
        method_name: Suggested page-object method name
        step_pattern: Suggested Gherkin step phrase
        data_bindings: Field name to value, from fills in the span
        actions: The spanned actions
    """
    flow_type: FlowType
    name: str
    start_index: int
    end_index: int
    confidence: float
    method_name: str
    step_pattern: str
    data_bindings: Dict[str, str] = field(default_factory=dict)
    actions: Tuple[Action, ...] = ()

    def __post_init__(self) -> None:
        if self.start_index < 0 or self.end_index < self.start_index:
            raise ValueError(
                f"Invalid flow span [{self.start_index}, {self.end_index}]"
            )

    def covers(self, index: int) -> bool:
        return self.start_index <= index <= self.end_index

    @property
    def description(self) -> str:
        return f"{self.name} flow ({len(self.actions)} actions)"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.flow_type.value,
            "name": self.name,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "confidence": self.confidence,
            "methodName": self.method_name,
            "stepPattern": self.step_pattern,
            "description": self.description,
            "dataBindings": dict(self.data_bindings),
        }


@dataclass(frozen=True)
class UserFlow:
    """A span of actions sharing one user intent."""
    name: str
    intent: Intent
    start_index: int
    end_index: int
    description: str
    outcome: FlowOutcome = FlowOutcome.UNKNOWN
    data_inputs: Dict[str, str] = field(default_factory=dict)
    expected_result: Optional[str] = None
    module: Optional[str] = None
    actions: Tuple[Action, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "intent": self.intent.value,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "description": self.description,
            "outcome": self.outcome.value,
            "dataInputs": dict(self.data_inputs),
            "expectedResult": self.expected_result,
            "module": self.module,
        }


@dataclass(frozen=True)
class PageBoundary:
    """A segment of the recording spent on one page."""
    page_name: str
    start_index: int
    end_index: int
    reason: str
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pageName": self.page_name,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "reason": self.reason,
            "url": self.url,
        }
