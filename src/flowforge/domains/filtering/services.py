"""Filtering Domain Service.

The ActionFilter removes recording artifacts that carry no test intent.
It runs five ordered passes, each consuming the previous pass's output:

1. Noise removal (runs of arrow/backspace/delete key presses)
2. Container-click removal (clicks on layout wrappers)
3. Redundant pre-fill removal (click/focus right before a fill)
4. Clear + fill merge
5. Consecutive-duplicate removal

Dropping an action can make two formerly separated actions adjacent,
so the passes are repeated until a round changes nothing. This makes
filtering idempotent: re-filtering the output removes nothing further.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from flowforge.domains.shared.kernel import Action, ActionType
from flowforge.models.config_models import IntelligenceConfig

from .value_objects import (
    FilterResult,
    FilterStats,
    MergeDecision,
    RemovalCategory,
    RemovalDecision,
)

logger = logging.getLogger(__name__)

PRE_FILL_METHODS = ("click", "focus")
FILL_METHODS = ("fill", "type")


@dataclass
class ActionFilter:
    """Reduces a recorded action list and keeps an audit trail.

    Usage:

        result = ActionFilter().filter(actions)
        result.actions      # kept actions, recorded order
        result.removed      # RemovalDecision per dropped action
        print(result.summary())
    """
    config: IntelligenceConfig = field(default_factory=IntelligenceConfig)

    def filter(self, actions: Sequence[Action]) -> FilterResult:
        """Filter ``actions``. Never raises; an empty list yields empty stats."""
        current: List[Action] = list(actions)
        removed: List[RemovalDecision] = []
        merged: List[MergeDecision] = []

        while True:
            round_removed: List[RemovalDecision] = []
            round_merged: List[MergeDecision] = []
            result = self._remove_noise(current, round_removed)
            result = self._remove_container_clicks(result, round_removed)
            result = self._remove_redundant(result, round_removed)
            result = self._merge_clear_fill(result, round_merged)
            result = self._remove_duplicates(result, round_removed)
            removed.extend(round_removed)
            merged.extend(round_merged)
            current = result
            if not round_removed and not round_merged:
                break

        stats = FilterStats(
            original=len(actions),
            filtered=len(current),
            removed=len(removed),
            merged=len(merged),
            noise_removed=_count(removed, RemovalCategory.NOISE),
            duplicates_removed=_count(removed, RemovalCategory.DUPLICATE),
            redundant_removed=(
                _count(removed, RemovalCategory.REDUNDANT)
                + _count(removed, RemovalCategory.CONTAINER_CLICK)
            ),
        )
        logger.debug(
            f"Filtered {stats.original} actions to {stats.filtered} "
            f"({stats.removed} removed, {stats.merged} merged)"
        )
        return FilterResult(
            actions=tuple(current),
            removed=tuple(removed),
            merged=tuple(merged),
            stats=stats,
        )

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _remove_noise(
        self, actions: List[Action], removed: List[RemovalDecision]
    ) -> List[Action]:
        kept: List[Action] = []
        last_key = ""
        count = 0
        for action in actions:
            key = action.first_arg
            if self._is_noise_key(action):
                count = count + 1 if key == last_key else 1
                last_key = key
                if count > self.config.MAX_CONSECUTIVE_NOISE_KEYS:
                    self._drop(
                        removed, action, RemovalCategory.NOISE,
                        f"Consecutive {key} keypress (occurrence {count})",
                    )
                    continue
            else:
                count = 0
                last_key = ""
            kept.append(action)
        return kept

    def _remove_container_clicks(
        self, actions: List[Action], removed: List[RemovalDecision]
    ) -> List[Action]:
        kept: List[Action] = []
        for action in actions:
            if self._is_container_click(action):
                self._drop(
                    removed, action, RemovalCategory.CONTAINER_CLICK,
                    f"Click on container element: {action.target.selector}",
                )
                continue
            kept.append(action)
        return kept

    def _remove_redundant(
        self, actions: List[Action], removed: List[RemovalDecision]
    ) -> List[Action]:
        kept: List[Action] = []
        for i, action in enumerate(actions):
            nxt = actions[i + 1] if i + 1 < len(actions) else None
            if (
                nxt is not None
                and action.method in PRE_FILL_METHODS
                and nxt.method in FILL_METHODS
                and action.same_element(nxt)
            ):
                self._drop(
                    removed, action, RemovalCategory.REDUNDANT,
                    f"{action.method} before {nxt.method} on the same element",
                )
                continue
            kept.append(action)
        return kept

    def _merge_clear_fill(
        self, actions: List[Action], merged: List[MergeDecision]
    ) -> List[Action]:
        kept: List[Action] = []
        for i, action in enumerate(actions):
            nxt = actions[i + 1] if i + 1 < len(actions) else None
            if (
                nxt is not None
                and action.method == "clear"
                and nxt.method == "fill"
                and action.same_element(nxt)
            ):
                merged.append(MergeDecision(
                    originals=(action, nxt),
                    merged=nxt,
                    reason="Merged clear + fill (fill already clears the field)",
                ))
                logger.debug(f"Merged clear into fill on '{nxt.target_name}'")
                continue
            kept.append(action)
        return kept

    def _remove_duplicates(
        self, actions: List[Action], removed: List[RemovalDecision]
    ) -> List[Action]:
        kept: List[Action] = []
        for action in actions:
            if self._is_noise_key(action):
                kept.append(action)
                continue
            if kept and _is_duplicate(kept[-1], action):
                self._drop(
                    removed, action, RemovalCategory.DUPLICATE,
                    f"Duplicate {action.method} on {action.target_name or 'page'}",
                )
                continue
            kept.append(action)
        return kept

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def _is_noise_key(self, action: Action) -> bool:
        # Runs of noise keys are governed by the noise pass alone.
        return action.method == "press" and action.first_arg in self.config.NOISE_KEYS

    def _is_container_click(self, action: Action) -> bool:
        if action.type != ActionType.CLICK or action.target is None:
            return False
        selector = action.target.selector
        if not any(pattern in selector for pattern in self.config.CONTAINER_SELECTORS):
            return False
        return not self._has_interactive_role(action)

    def _has_interactive_role(self, action: Action) -> bool:
        target = action.target
        if target is None:
            return False
        if target.is_role(*self.config.INTERACTIVE_ROLES):
            return True
        return bool(target.name)

    @staticmethod
    def _drop(
        removed: List[RemovalDecision],
        action: Action,
        category: RemovalCategory,
        reason: str,
    ) -> None:
        removed.append(RemovalDecision(action=action, reason=reason, category=category))
        logger.debug(f"Removed {action.method} ({category.value}): {reason}")


def _is_duplicate(previous: Action, action: Action) -> bool:
    if previous.method != action.method or previous.type != action.type:
        return False
    if not previous.same_element(action):
        return False
    if previous.method in FILL_METHODS:
        return previous.args == action.args
    return True


def _count(removed: List[RemovalDecision], category: RemovalCategory) -> int:
    return sum(1 for r in removed if r.category == category)
