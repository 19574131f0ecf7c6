"""Cross-context behaviour of the recording intelligence pipeline.

Tests cover:
- Filter idempotence, conservation and the noise threshold
- The container-click allow-list
- Locator monotonicity and flow non-overlap
- Masking of sensitive values
- The login and wrapper-click recordings end to end

Run with: uv run pytest tests/unit/test_properties.py -v
"""

from __future__ import annotations

__test__ = True

import pytest

from flowforge.domains.assertion import AssertionKind, AssertionSuggester
from flowforge.domains.filtering import ActionFilter, RemovalCategory
from flowforge.domains.flow import FlowDetector, FlowType
from flowforge.domains.locator import LocatorOptimizer
from flowforge.domains.recording import RecordingAnalyzer
from flowforge.domains.shared import Action, ActionTarget, LocatorKind
from flowforge.domains.test_data import TestDataExtractor, mask_value


def _press(key, name="Search"):
    return Action.create("press", ActionTarget.role("textbox", name), [key])


def _fill(name, value):
    return Action.create("fill", ActionTarget.role("textbox", name), [value])


def _click(role, name):
    return Action.create("click", ActionTarget.role(role, name))


RECORDINGS = {
    "empty": [],
    "noise": [_fill("Search", "Lind")] + [_press("Backspace")] * 6 + [_fill("Search", "Linda")],
    "focus_then_fill": [
        Action.create("focus", ActionTarget.role("textbox", "Email")),
        _fill("Email", "a@b.test"),
        _click("button", "Save"),
    ],
    "clear_fill": [
        Action.create("clear", ActionTarget.role("textbox", "Name")),
        _fill("Name", "Ada"),
        Action.create("clear", ActionTarget.role("textbox", "Name")),
        _fill("Name", "Ada"),
    ],
    "duplicates_behind_containers": [
        _click("button", "Next"),
        Action.create("click", ActionTarget.css("#container")),
        _click("button", "Next"),
        Action.create("click", ActionTarget.css(".wrapper")),
        _click("button", "Next"),
    ],
    "mixed": [
        Action.create("goto", type="navigation", args=["https://shop.test/login"]),
        Action.create("click", ActionTarget.role("textbox", "Username")),
        _fill("Username", "bob"),
        _fill("Password", "pw"),
        _click("button", "Login"),
        _press("ArrowLeft"), _press("ArrowLeft"), _press("ArrowLeft"),
        _fill("Search", "shoes"),
        _press("Enter"),
        _click("button", "Logout"),
    ],
}


@pytest.fixture
def action_filter():
    return ActionFilter()


# =============================================================================
# Filtering
# =============================================================================


class TestFilterProperties:
    """Properties that hold for every recording."""

    @pytest.mark.parametrize("name", list(RECORDINGS))
    def test_idempotent(self, action_filter, name):
        once = action_filter.filter(RECORDINGS[name])
        twice = action_filter.filter(once.actions)
        assert twice.removed == ()
        assert twice.merged == ()
        assert twice.actions == once.actions

    @pytest.mark.parametrize("name", list(RECORDINGS))
    def test_conservation(self, action_filter, name):
        actions = RECORDINGS[name]
        result = action_filter.filter(actions)
        assert len(result.actions) + len(result.removed) + len(result.merged) == len(actions)

    @pytest.mark.parametrize("name", list(RECORDINGS))
    def test_order_is_preserved(self, action_filter, name):
        actions = RECORDINGS[name]
        kept = action_filter.filter(actions).actions
        positions = [next(i for i, a in enumerate(actions) if a is k) for k in kept]
        assert positions == sorted(positions)

    @pytest.mark.parametrize("count", [3, 4, 7, 12])
    def test_noise_threshold(self, action_filter, count):
        actions = [_fill("Search", "x")] + [_press("ArrowRight") for _ in range(count)]
        result = action_filter.filter(actions)
        threshold = action_filter.config.MAX_CONSECUTIVE_NOISE_KEYS
        assert len(result.removed_in(RemovalCategory.NOISE)) == count - threshold
        assert result.actions == tuple(actions[: threshold + 1])

    @pytest.mark.parametrize("count", [0, 1, 2])
    def test_noise_within_threshold_is_kept(self, action_filter, count):
        actions = [_press("Delete") for _ in range(count)]
        assert len(action_filter.filter(actions).actions) == count

    @pytest.mark.parametrize("selector", ["#wrapper", "div.container", "#content > a", ".main"])
    def test_container_allow_list(self, action_filter, selector):
        named = Action.create(
            "click", ActionTarget(LocatorKind.CSS.value, selector, {"name": "Open menu"})
        )
        bare = Action.create("click", ActionTarget.css(selector))
        assert action_filter.filter([named]).actions == (named,)
        result = action_filter.filter([bare])
        assert result.actions == ()
        assert result.removed[0].category == RemovalCategory.CONTAINER_CLICK


# =============================================================================
# Locators, flows and masking
# =============================================================================


class TestLocatorMonotonicity:
    """A named role locator never scores below a bare id selector."""

    @pytest.mark.parametrize(
        "selector", ["#x", "#login-button", "#row-1234567", "#a-b-c-d-e", "#Save"]
    )
    def test_role_beats_id(self, selector):
        role = Action.create("click", ActionTarget.role("button", "Save"))
        css = Action.create("click", ActionTarget.css(selector))
        assert LocatorOptimizer.stability_score(role) >= LocatorOptimizer.stability_score(css)


class TestFlowNonOverlap:
    """Detected flows never share an index."""

    @pytest.mark.parametrize("name", list(RECORDINGS))
    def test_disjoint_spans(self, action_filter, name):
        kept = action_filter.filter(RECORDINGS[name]).actions
        seen = set()
        for flow in FlowDetector().detect(kept):
            span = set(range(flow.start_index, flow.end_index + 1))
            assert not span & seen
            seen |= span

    def test_disjoint_admin_session(self, admin_session):
        flows = FlowDetector().detect(admin_session)
        for earlier, later in zip(flows, flows[1:]):
            assert earlier.end_index < later.start_index


class TestMasking:
    """Sensitive values are never displayed as recorded."""

    @pytest.mark.parametrize(
        "value", ["x", "ab", "****", "*****", "secret123", "pässwörd", "a" * 64]
    )
    def test_mask_is_not_identity(self, value):
        assert mask_value(value) != value

    @pytest.mark.parametrize("value", ["zq", "hunter2", "correct horse battery staple"])
    def test_true_value_only_via_original(self, value):
        extracted = TestDataExtractor().extract([_fill("Password", value)])
        datum = extracted["password"]
        assert datum.value != value
        assert datum.original_value == value
        assert value not in extracted.to_json()


# =============================================================================
# End to end
# =============================================================================


class TestLoginRecording:
    """Username, password and Login click through every stage."""

    def test_each_stage(self, login_actions):
        filtered = ActionFilter().filter(login_actions)
        assert filtered.actions == tuple(login_actions)

        flows = FlowDetector().detect(filtered.actions)
        assert [(f.flow_type, f.confidence) for f in flows] == [(FlowType.LOGIN, 0.95)]

        data = TestDataExtractor().extract(filtered.actions)
        assert data["username"].value == "bob"
        assert not data["username"].is_sensitive
        assert data["password"].is_sensitive
        assert data["password"].value != "secret123"
        assert data["password"].to_dict(reveal=True)["originalValue"] == "secret123"

        points = AssertionSuggester().suggest(filtered.actions)
        top = [(s.kind, s.target, s.confidence) for s in points[0].suggestions[:2]]
        assert top == [
            (AssertionKind.URL_CONTAINS, "dashboard|home", 0.9),
            (AssertionKind.VISIBILITY, "welcome|logout|user", 0.85),
        ]

    def test_analyzer(self, login_actions):
        analysis = RecordingAnalyzer().analyze(login_actions)
        assert analysis.filter_result.stats.removed == 0
        assert analysis.flows[0].method_name == "performLogin"
        assert analysis.namings[-1].effective_method.method_name == "performLogin"
        assert analysis.verification_points[0].best.target == "dashboard|home"


class TestWrapperClicks:
    """Unnamed wrapper clicks are all removed."""

    def test_both_removed(self, wrapper_clicks):
        result = ActionFilter().filter(wrapper_clicks)
        assert result.actions == ()
        assert len(result.removed) == 2
        assert all(r.category == RemovalCategory.CONTAINER_CLICK for r in result.removed)
        assert result.stats.redundant_removed == 2
