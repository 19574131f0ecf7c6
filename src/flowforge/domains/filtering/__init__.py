"""Filtering Bounded Context.

Removes noise, duplicate, redundant and container-click actions from a
recording and merges clear + fill pairs, keeping an audit trail.
"""
from .value_objects import (
    FilterResult,
    FilterStats,
    MergeDecision,
    RemovalCategory,
    RemovalDecision,
)
from .services import ActionFilter

__all__ = [
    "ActionFilter",
    "FilterResult",
    "FilterStats",
    "MergeDecision",
    "RemovalCategory",
    "RemovalDecision",
]
