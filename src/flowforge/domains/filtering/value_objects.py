"""Filtering Domain Value Objects.

Immutable results of a filter run: the kept actions plus an audit
trail of every removal and merge.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from flowforge.domains.shared.kernel import Action


class RemovalCategory(str, Enum):
    """Why an action was dropped from the recording."""
    NOISE = "noise"
    DUPLICATE = "duplicate"
    REDUNDANT = "redundant"
    CONTAINER_CLICK = "container-click"


@dataclass(frozen=True)
class RemovalDecision:
    """A dropped action and the reason it was dropped."""
    action: Action
    reason: str
    category: RemovalCategory

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.to_dict(),
            "reason": self.reason,
            "category": self.category.value,
        }


@dataclass(frozen=True)
class MergeDecision:
    """Consecutive actions absorbed into a single surviving action.

    Attributes:
        originals: The actions as recorded, in order
        merged: The action that stays in the filtered list
        reason: Human-readable explanation
    """
    originals: Tuple[Action, ...]
    merged: Action
    reason: str

    @property
    def absorbed(self) -> int:
        """Number of recorded actions that disappeared in the merge."""
        return len(self.originals) - 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original": [a.to_dict() for a in self.originals],
            "merged": self.merged.to_dict(),
            "reason": self.reason,
        }


@dataclass(frozen=True)
class FilterStats:
    """Per-category counts of a filter run.

    ``redundant_removed`` includes container clicks.
    """
    original: int = 0
    filtered: int = 0
    removed: int = 0
    merged: int = 0
    noise_removed: int = 0
    duplicates_removed: int = 0
    redundant_removed: int = 0

    @property
    def removal_rate(self) -> float:
        """Share of recorded actions that did not survive (0.0 when empty)."""
        if self.original == 0:
            return 0.0
        return (self.original - self.filtered) / self.original

    def to_dict(self) -> Dict[str, Any]:
        return {
            "originalCount": self.original,
            "filteredCount": self.filtered,
            "removedCount": self.removed,
            "mergedCount": self.merged,
            "noiseRemoved": self.noise_removed,
            "duplicatesRemoved": self.duplicates_removed,
            "redundantRemoved": self.redundant_removed,
            "removalRate": round(self.removal_rate, 4),
        }


@dataclass(frozen=True)
class FilterResult:
    """Kept actions and the audit trail of a filter run.

    Invariant: ``len(actions) + len(removed) + sum(m.absorbed for m in
    merged) == stats.original``.
    """
    actions: Tuple[Action, ...]
    removed: Tuple[RemovalDecision, ...]
    merged: Tuple[MergeDecision, ...]
    stats: FilterStats

    def removed_in(self, category: RemovalCategory) -> Tuple[RemovalDecision, ...]:
        return tuple(r for r in self.removed if r.category == category)

    def summary(self) -> str:
        """Human-readable multi-line summary of the run."""
        s = self.stats
        lines = [
            "Action Filtering Summary:",
            f"  Original actions: {s.original}",
            f"  Filtered actions: {s.filtered}",
            f"  Removed: {s.removed} ({s.removal_rate * 100:.1f}%)",
            f"    - Noise: {s.noise_removed}",
            f"    - Duplicates: {s.duplicates_removed}",
            f"    - Redundant: {s.redundant_removed}",
            f"  Merged: {s.merged}",
        ]
        if self.removed:
            lines.append("")
            lines.append("Removed Actions:")
            for decision in self.removed[:10]:
                lines.append(f"  - {decision.action.method}: {decision.reason}")
            if len(self.removed) > 10:
                lines.append(f"  ... and {len(self.removed) - 10} more")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actions": [a.to_dict() for a in self.actions],
            "removed": [r.to_dict() for r in self.removed],
            "merged": [m.to_dict() for m in self.merged],
            "stats": self.stats.to_dict(),
        }
