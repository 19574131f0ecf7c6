"""Recording Domain Events.

Events emitted by the RecordingAnalyzer for observability.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RecordingAnalyzed:
    """Emitted when a recording has been run through every analysis stage.

    Consumers:
    - Code generation (start rendering page objects and steps)
    - Analytics (removal rate, flow coverage per recording)
    """
    action_count: int
    kept_count: int
    flow_count: int
    verification_count: int
    data_count: int
    timestamp: datetime = field(default_factory=datetime.now)
