"""Shared kernel for the recording intelligence contexts."""
from .kernel import (
    Action,
    ActionTarget,
    ActionType,
    DataFormat,
    FlowView,
    LocatorKind,
    RecordingPayloadError,
    parse_actions,
    safe_search,
)

__all__ = [
    "Action",
    "ActionTarget",
    "ActionType",
    "DataFormat",
    "FlowView",
    "LocatorKind",
    "RecordingPayloadError",
    "parse_actions",
    "safe_search",
]
