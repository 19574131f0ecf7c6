"""Recording Bounded Context.

Orchestrates every analysis stage over one recorded session.
"""
from .value_objects import RecordingAnalysis
from .events import RecordingAnalyzed
from .services import EventPublisher, RecordingAnalyzer

__all__ = [
    "EventPublisher",
    "RecordingAnalysis",
    "RecordingAnalyzed",
    "RecordingAnalyzer",
]
