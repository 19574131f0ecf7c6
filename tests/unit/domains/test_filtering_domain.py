"""Comprehensive unit tests for the ActionFilter.

Tests cover:
- Noise key runs and the consecutive threshold
- Container-click removal and its accessible-name guard
- Redundant click/focus before fill
- clear + fill merging
- Consecutive duplicates
- Statistics, summary and the audit trail

Run with: uv run pytest tests/unit/domains/test_filtering_domain.py -v
"""

from __future__ import annotations

__test__ = True

import pytest

from flowforge.domains.filtering import ActionFilter, RemovalCategory
from flowforge.domains.shared import Action, ActionTarget
from flowforge.models.config_models import IntelligenceConfig


def _press(key, field_name="Notes"):
    return Action.create("press", ActionTarget.role("textbox", field_name), [key])


def _fill(name, value):
    return Action.create("fill", ActionTarget.role("textbox", name), [value])


def _click(role, name):
    return Action.create("click", ActionTarget.role(role, name))


@pytest.fixture
def action_filter():
    return ActionFilter()


# =============================================================================
# Noise
# =============================================================================


class TestNoiseRemoval:
    """Runs of arrow, backspace and delete presses."""

    def test_keeps_first_two_of_a_run(self, action_filter):
        actions = [_press("ArrowDown") for _ in range(5)]
        result = action_filter.filter(actions)
        assert len(result.actions) == 2
        assert len(result.removed_in(RemovalCategory.NOISE)) == 3
        assert result.stats.noise_removed == 3

    def test_counter_resets_on_key_change(self, action_filter):
        actions = [_press("ArrowDown")] * 3 + [_press("ArrowUp")] * 3
        result = action_filter.filter(actions)
        assert [a.first_arg for a in result.actions] == [
            "ArrowDown", "ArrowDown", "ArrowUp", "ArrowUp",
        ]

    def test_counter_resets_on_other_action(self, action_filter):
        actions = [
            _press("Backspace"), _press("Backspace"),
            _fill("Notes", "x"),
            _press("Backspace"), _press("Backspace"),
        ]
        assert len(action_filter.filter(actions).actions) == 5

    def test_non_noise_keys_are_kept(self, action_filter):
        actions = [_press("Enter", "Search"), _press("Tab", "Notes")] * 3
        result = action_filter.filter(actions)
        assert len(result.actions) == 6
        assert result.stats.noise_removed == 0

    def test_threshold_is_configurable(self):
        action_filter = ActionFilter(IntelligenceConfig(MAX_CONSECUTIVE_NOISE_KEYS=0))
        result = action_filter.filter([_press("Delete")] * 3)
        assert result.actions == ()


# =============================================================================
# Container clicks
# =============================================================================


class TestContainerClicks:
    """Clicks on layout wrappers."""

    @pytest.mark.parametrize(
        "selector",
        ["#wrapper", "#content > div", ".container", 'div[class*="view"]'],
    )
    def test_removes_unnamed_container_clicks(self, action_filter, selector):
        result = action_filter.filter([Action.create("click", ActionTarget.css(selector))])
        assert result.actions == ()
        assert result.removed[0].category == RemovalCategory.CONTAINER_CLICK
        assert selector in result.removed[0].reason

    def test_named_container_click_is_kept(self, action_filter):
        target = ActionTarget("locator", "#wrapper .menu", {"name": "Open menu"})
        result = action_filter.filter([Action.create("click", target)])
        assert len(result.actions) == 1

    def test_non_click_on_container_is_kept(self, action_filter):
        action = Action.create("hover", ActionTarget.css("#wrapper"))
        assert len(action_filter.filter([action]).actions) == 1

    def test_container_clicks_count_as_redundant(self, action_filter, wrapper_clicks):
        result = action_filter.filter(wrapper_clicks)
        assert result.stats.redundant_removed == 2


# =============================================================================
# Redundant pre-fill and merge
# =============================================================================


class TestRedundantAndMerge:
    """click/focus before fill and clear before fill."""

    def test_click_before_fill_on_same_field(self, action_filter):
        actions = [
            Action.create("click", ActionTarget.role("textbox", "Username")),
            _fill("Username", "bob"),
        ]
        result = action_filter.filter(actions)
        assert [a.method for a in result.actions] == ["fill"]
        assert result.removed[0].category == RemovalCategory.REDUNDANT

    def test_focus_before_type_on_same_field(self, action_filter):
        actions = [
            Action.create("focus", ActionTarget.label("Email")),
            Action.create("type", ActionTarget.label("Email"), ["a@b.co"]),
        ]
        assert [a.method for a in action_filter.filter(actions).actions] == ["type"]

    def test_click_before_fill_on_other_field_is_kept(self, action_filter):
        actions = [
            Action.create("click", ActionTarget.role("textbox", "Username")),
            _fill("Password", "pw"),
        ]
        assert len(action_filter.filter(actions).actions) == 2

    def test_clear_then_fill_is_merged(self, action_filter):
        actions = [
            Action.create("clear", ActionTarget.role("textbox", "Search")),
            _fill("Search", "Linda"),
        ]
        result = action_filter.filter(actions)
        assert [a.method for a in result.actions] == ["fill"]
        assert result.stats.merged == 1
        assert result.merged[0].absorbed == 1
        assert result.merged[0].merged.first_arg == "Linda"
        assert result.removed == ()


# =============================================================================
# Duplicates
# =============================================================================


class TestDuplicates:
    """Consecutive identical actions."""

    def test_repeated_click_is_removed(self, action_filter):
        result = action_filter.filter([_click("button", "Save"), _click("button", "Save")])
        assert len(result.actions) == 1
        assert result.stats.duplicates_removed == 1

    def test_fills_with_different_values_are_kept(self, action_filter):
        actions = [_fill("Search", "a"), _fill("Search", "ab")]
        assert len(action_filter.filter(actions).actions) == 2

    def test_identical_fills_are_removed(self, action_filter):
        result = action_filter.filter([_fill("Search", "a"), _fill("Search", "a")])
        assert len(result.actions) == 1
        assert result.stats.duplicates_removed == 1

    def test_arguments_ignored_outside_fill_and_type(self, action_filter):
        country = ActionTarget.role("combobox", "Country")
        actions = [
            Action.create("press", country, ["Enter"]),
            Action.create("press", country, ["Tab"]),
            Action.create("selectOption", country, ["US"]),
            Action.create("selectOption", country, ["UK"]),
        ]
        result = action_filter.filter(actions)
        assert [(a.method, a.args) for a in result.actions] == [
            ("press", ("Enter",)),
            ("selectOption", ("US",)),
        ]
        assert len(result.removed_in(RemovalCategory.DUPLICATE)) == 2

    def test_page_level_actions_are_not_duplicates(self, action_filter):
        goto = Action.create("goto", type="navigation", args=["https://example.com"])
        assert len(action_filter.filter([goto, goto]).actions) == 2

    def test_removal_can_expose_new_redundancy(self, action_filter):
        actions = [
            Action.create("click", ActionTarget.role("textbox", "Username")),
            Action.create("click", ActionTarget.role("textbox", "Username")),
            _fill("Username", "bob"),
        ]
        result = action_filter.filter(actions)
        assert [a.method for a in result.actions] == ["fill"]
        assert len(result.removed) == 2


# =============================================================================
# Stats and summary
# =============================================================================


class TestFilterResult:
    """Stats, summary and serialization."""

    def test_empty_input(self, action_filter):
        result = action_filter.filter([])
        assert result.actions == ()
        assert result.stats.original == 0
        assert result.stats.removal_rate == 0.0

    def test_stats_and_removal_rate(self, action_filter, wrapper_clicks, login_actions):
        result = action_filter.filter(wrapper_clicks + login_actions)
        assert result.stats.original == 5
        assert result.stats.filtered == 3
        assert result.stats.removed == 2
        assert result.stats.removal_rate == pytest.approx(0.4)

    def test_input_is_not_mutated(self, action_filter, wrapper_clicks):
        snapshot = list(wrapper_clicks)
        action_filter.filter(wrapper_clicks)
        assert wrapper_clicks == snapshot

    def test_summary(self, action_filter, wrapper_clicks):
        summary = action_filter.filter(wrapper_clicks).summary()
        assert summary.startswith("Action Filtering Summary:")
        assert "Original actions: 2" in summary
        assert "Removed: 2 (100.0%)" in summary
        assert "Removed Actions:" in summary

    def test_to_dict(self, action_filter, wrapper_clicks):
        data = action_filter.filter(wrapper_clicks).to_dict()
        assert data["actions"] == []
        assert data["removed"][0]["category"] == "container-click"
        assert data["stats"]["removedCount"] == 2
        assert data["stats"]["removalRate"] == 1.0
