"""Comprehensive unit tests for the Test Data bounded context.

Tests cover:
- DataTypeClassifier rule order (field hints before value patterns)
- Sensitivity screening and masking
- TestDataExtractor harvesting, records and environment bindings
- Serialization of the data-table payload
- Step parameterization helpers

Run with: uv run pytest tests/unit/domains/test_test_data_domain.py -v
"""

from __future__ import annotations

__test__ = True

import json

import pytest
import yaml

from flowforge.domains.shared import Action, ActionTarget
from flowforge.domains.test_data import (
    DataSource,
    DataType,
    DataTypeClassifier,
    TestDataExtractor,
    VariationType,
    is_data_value,
    is_sensitive,
    mask_value,
    parameterize_step,
    slugify,
)


@pytest.fixture
def extractor():
    return TestDataExtractor()


def _fill(name, value):
    return Action.create("fill", ActionTarget.role("textbox", name), [value])


# =============================================================================
# Classification
# =============================================================================


class TestDataTypeClassifier:
    """First matching rule wins; hints outrank value patterns."""

    @pytest.fixture
    def classifier(self):
        return DataTypeClassifier()

    @pytest.mark.parametrize(
        "value, field_name, expected",
        [
            ("bob@example.com", "Contact", DataType.EMAIL),
            ("anything", "Password", DataType.PASSWORD),
            ("42", "Email", DataType.EMAIL),
            ("x@y.test", "Username", DataType.USERNAME),
            ("42", "Quantity", DataType.NUMBER),
            ("https://x.test", "Homepage", DataType.URL),
            ("hello world", "Notes", DataType.NAME),
            ("hello, world!", "Notes", DataType.TEXT),
        ],
    )
    def test_classify(self, classifier, value, field_name, expected):
        assert classifier.classify(value, field_name) == expected

    def test_rule_count(self, classifier):
        # every type has a hint rule; all but password have a value rule
        assert len(classifier) == 21


class TestSensitivity:
    """Sensitive field detection and value masking."""

    @pytest.mark.parametrize(
        "field_name", ["Password", "API-Key", "Credit Card Number", "auth_token", "PIN"]
    )
    def test_sensitive_fields(self, field_name):
        assert is_sensitive(field_name)

    @pytest.mark.parametrize("field_name", ["Username", "Email", "Search"])
    def test_plain_fields(self, field_name):
        assert not is_sensitive(field_name)

    @pytest.mark.parametrize(
        "value, masked",
        [
            ("secret123", "se*****23"),
            ("abcde", "ab*de"),
            ("abc", "****"),
            ("", "****"),
            ("****", "*****"),
        ],
    )
    def test_mask_value(self, value, masked):
        assert mask_value(value) == masked

    @pytest.mark.parametrize("value", ["a", "pass", "hunter2", "*****", "x" * 40])
    def test_mask_never_returns_the_value(self, value):
        assert mask_value(value) != value


# =============================================================================
# Extraction
# =============================================================================


class TestExtract:
    """Values harvested from a recording."""

    def test_login_values(self, extractor, login_actions):
        extracted = extractor.extract(login_actions)
        assert list(extracted.data) == ["username", "password"]

        username = extracted["username"]
        assert username.value == "bob"
        assert username.data_type == DataType.USERNAME
        assert username.parameter_name == "username"
        assert username.source == DataSource.FILL
        assert not username.is_sensitive

        password = extracted["password"]
        assert password.value == "se*****23"
        assert password.original_value == "secret123"
        assert password.data_type == DataType.PASSWORD
        assert password.is_sensitive
        assert extracted.sensitive_fields == ("Password",)

    def test_secret_is_hidden_from_display(self, extractor, login_actions):
        password = extractor.extract(login_actions)["password"]
        assert "secret123" not in repr(password)
        assert "originalValue" not in password.to_dict()
        assert password.to_dict(reveal=True)["originalValue"] == "secret123"

    def test_records_use_placeholders_for_secrets(self, extractor, login_actions):
        primary, variation = extractor.extract(login_actions).records
        assert primary["testCaseId"] == "TC01_Recorded_Flow"
        assert primary["runFlag"] == "Yes"
        assert primary["username"] == "bob"
        assert primary["password"] == "${PASSWORD}"
        assert variation["testCaseId"] == "TC02_Recorded_Flow_Variation"
        assert variation["runFlag"] == "No"
        assert variation["username"] == "testuser_variation"
        assert variation["password"] == "${PASSWORD_ALT}"

    def test_variations_follow_data_type(self, extractor, login_actions):
        variations = extractor.extract(login_actions).variations
        assert {v.field_name for v in variations} == {"password"}
        assert [v.variation_type for v in variations] == [
            VariationType.INVALID,
            VariationType.EMPTY,
            VariationType.BOUNDARY,
        ]

    def test_navigation_becomes_base_url(self, extractor, admin_session):
        extracted = extractor.extract(admin_session)
        assert extracted.base_url == "https://hr.example.com"
        assert extracted.environment[0].name == "BASE_URL"
        assert list(extracted.data) == ["username", "password", "search"]

    def test_one_binding_per_base(self, extractor):
        actions = [
            Action.create("goto", type="navigation", args=["https://a.test/x"]),
            Action.create("goto", type="navigation", args=["https://a.test/y"]),
            Action.create("goto", type="navigation", args=["https://b.test:8080/z"]),
        ]
        environment = extractor.extract(actions).environment
        assert [(e.name, e.value) for e in environment] == [
            ("BASE_URL", "https://a.test"),
            ("BASE_URL_2", "https://b.test:8080"),
        ]

    def test_later_value_keeps_position(self, extractor):
        actions = [_fill("Username", "a"), _fill("Password", "pw12345"), _fill("Username", "b")]
        extracted = extractor.extract(actions)
        assert list(extracted.data) == ["username", "password"]
        assert extracted["username"].value == "b"

    def test_select_and_clicked_text(self, extractor):
        actions = [
            Action.create("selectOption", ActionTarget.role("combobox", "Country"), ["NL"]),
            Action.create("click", ActionTarget.text("Order 1234")),
        ]
        extracted = extractor.extract(actions)
        assert extracted["country"].value == "NL"
        assert extracted["country"].source == DataSource.SELECT
        assert extracted["order_1234"].source == DataSource.CLICK

    def test_data_like_row_click(self, extractor):
        action = Action.create("click", ActionTarget.role("row", "John Smith 2024"))
        datum = extractor.extract([action])["john_smith_2024"]
        assert datum.field_name == "row_John_Smith_2024"
        assert datum.value == "John Smith 2024"

    def test_control_clicks_are_ignored(self, extractor):
        actions = [
            Action.create("click", ActionTarget.role("button", "Save")),
            Action.create("click", ActionTarget.role("link", "Admin")),
        ]
        assert len(extractor.extract(actions)) == 0

    def test_asserted_text(self, extractor):
        action = Action.create(
            "toHaveText", ActionTarget.role("heading", "Dashboard"), ["Welcome Admin"],
            type="assertion",
        )
        datum = extractor.extract([action])["expected_dashboard"]
        assert datum.value == "Welcome Admin"
        assert datum.parameter_name == "expectedDashboard"
        assert datum.source == DataSource.ASSERTION

    def test_unnamed_fields(self, extractor):
        extracted = extractor.extract(
            [
                Action.create("fill", ActionTarget.placeholder("Search employees"), ["Linda"]),
                Action.create("fill", ActionTarget.css("#q"), ["shoes"]),
            ]
        )
        assert extracted["search_employees"].value == "Linda"
        assert extracted["field"].value == "shoes"

    def test_empty_recording(self, extractor):
        extracted = extractor.extract([])
        assert len(extracted) == 0
        assert extracted.base_url == ""
        assert len(extracted.records) == 2


# =============================================================================
# Serialization and helpers
# =============================================================================


class TestSerialization:
    """Data-table payload in JSON, YAML and dict form."""

    def test_json_and_yaml_carry_the_records(self, extractor, login_actions):
        extracted = extractor.extract(login_actions)
        assert json.loads(extracted.to_json()) == list(extracted.records)
        assert yaml.safe_load(extracted.to_yaml()) == list(extracted.records)

    def test_secrets_stay_out_of_payloads(self, extractor, login_actions):
        extracted = extractor.extract(login_actions)
        assert "secret123" not in extracted.to_json()
        assert "secret123" not in extracted.to_yaml()
        assert "secret123" not in json.dumps(extracted.to_dict())

    def test_to_dict(self, extractor, admin_session):
        data = extractor.extract(admin_session).to_dict()
        assert set(data) == {
            "data", "sensitiveFields", "suggestedVariations",
            "environmentVariables", "records",
        }
        assert data["environmentVariables"][0]["name"] == "BASE_URL"
        assert data["data"]["username"]["suggestedParamName"] == "username"

    def test_substitutions(self, extractor, login_actions):
        assert extractor.extract(login_actions).substitutions() == [
            ("bob", "username"),
            ("secret123", "password"),
        ]


class TestHelpers:
    """Slugs, data-like names and parameterized steps."""

    def test_slugify(self):
        assert slugify("First Name!") == "first_name"
        assert slugify("  ") == ""

    @pytest.mark.parametrize(
        "value, role, expected",
        [
            ("Login", "button", False),
            ("Profile", "link", False),
            ("Details", "link", False),
            ("John", "row", True),
            ("Active", "cell", True),
            ("INV-001", "link", True),
        ],
    )
    def test_is_data_value(self, value, role, expected):
        assert is_data_value(value, role) is expected

    def test_parameterize_step(self):
        step = parameterize_step(
            'user enters "bob" in username field', {"bob": "username"}
        )
        assert step == 'user enters "<username>" in username field'

    def test_parameterize_replaces_first_occurrence(self):
        step = parameterize_step('"a" and "a"', {"a": "first"})
        assert step == '"<first>" and "a"'
