"""Flow Bounded Context.

Groups filtered actions into named, confidence-scored business flows,
intent segments and page segments.
"""
from .value_objects import (
    DetectedFlow,
    FlowOutcome,
    FlowPattern,
    FlowSignature,
    FlowType,
    Intent,
    PageBoundary,
    SignatureStep,
    UserFlow,
)
from .aggregates import FlowPatternRegistry
from .services import FlowDetector, IntentSegmenter, detect_intent, matches_step
from .page_boundaries import PageBoundaryDetector

__all__ = [
    "DetectedFlow",
    "FlowOutcome",
    "FlowPattern",
    "FlowSignature",
    "FlowType",
    "Intent",
    "PageBoundary",
    "SignatureStep",
    "UserFlow",
    "FlowPatternRegistry",
    "FlowDetector",
    "IntentSegmenter",
    "detect_intent",
    "matches_step",
    "PageBoundaryDetector",
]
