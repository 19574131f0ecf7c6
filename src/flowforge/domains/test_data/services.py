"""Test Data Domain Services.

The TestDataExtractor walks a filtered recording once and harvests the
literal values a data-driven scenario would parameterize: typed and
selected values, clicked text, data-like accessible names and asserted
text. Navigation URLs become environment bindings instead.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlparse

from flowforge.domains.naming.services import to_camel_case, to_pascal_case
from flowforge.domains.shared.kernel import Action, ActionType, LocatorKind

from .classifier import DataTypeClassifier, is_sensitive, mask_value
from .value_objects import (
    DataSource,
    DataType,
    DataVariation,
    EnvironmentBinding,
    ExtractedDatum,
    ExtractedTestData,
    VariationType,
)

logger = logging.getLogger(__name__)

FILL_METHODS = ("fill", "type")

# Accessible names of generic controls that are never test data
UI_ELEMENT_NAMES = frozenset((
    "login", "logout", "submit", "cancel", "save", "delete", "edit",
    "add", "remove", "search", "filter", "reset", "clear", "close",
    "ok", "yes", "no", "confirm", "apply", "next", "previous", "back",
    "home", "admin", "dashboard", "settings", "profile", "menu",
    "time", "leave", "pim", "recruitment", "performance", "directory",
    "maintenance", "claim", "buzz",
))

STATUS_VALUES = frozenset((
    "enabled", "disabled", "active", "inactive", "pending", "approved", "rejected",
))

DATA_LIKE_PATTERN = re.compile(r"\d{2,}|[-/]")

PRIMARY_RECORD = {
    "testCaseId": "TC01_Recorded_Flow",
    "scenarioName": "Execute recorded test flow - Primary data",
    "runFlag": "Yes",
}
VARIATION_RECORD = {
    "testCaseId": "TC02_Recorded_Flow_Variation",
    "scenarioName": "Execute recorded test flow - Variation data",
    "runFlag": "No",
}

V = VariationType

VARIATIONS: Dict[DataType, Tuple[Tuple[VariationType, str, str], ...]] = {
    DataType.EMAIL: (
        (V.INVALID, "invalid-email", "Invalid email format"),
        (V.EMPTY, "", "Empty email"),
        (V.SPECIAL, "test+special@example.com", "Email with special chars"),
    ),
    DataType.PASSWORD: (
        (V.INVALID, "123", "Too short password"),
        (V.EMPTY, "", "Empty password"),
        (V.BOUNDARY, "a" * 100, "Very long password"),
    ),
    DataType.PHONE: (
        (V.INVALID, "abc", "Non-numeric phone"),
        (V.BOUNDARY, "1", "Too short phone"),
        (V.SPECIAL, "+1 (555) 123-4567", "Phone with formatting"),
    ),
    DataType.NUMBER: (
        (V.INVALID, "abc", "Non-numeric value"),
        (V.BOUNDARY, "0", "Zero value"),
        (V.BOUNDARY, "-1", "Negative value"),
        (V.BOUNDARY, "999999999", "Large value"),
    ),
    DataType.TEXT: (
        (V.EMPTY, "", "Empty text"),
        (V.SPECIAL, "<script>alert(1)</script>", "XSS attempt"),
        (V.SPECIAL, "'; DROP TABLE users; --", "SQL injection attempt"),
        (V.BOUNDARY, "a" * 500, "Very long text"),
    ),
}


def slugify(text: str) -> str:
    """Lowercase, non-alphanumeric runs to ``_``, edges trimmed."""
    return re.sub(r"[^a-zA-Z0-9]+", "_", text).strip("_").lower()


def _words(text: str) -> List[str]:
    return re.sub(r"[^a-zA-Z0-9]+", " ", text).split()


@dataclass
class TestDataExtractor:
    """Harvests literal values from a recording.

    Values are keyed by the slug of their field name. A later value for
    the same key replaces the earlier one but keeps its position.

    Usage:

        extracted = TestDataExtractor().extract(actions)
        extracted["username"].value           # "bob"
        extracted["password"].value           # "se*****23"
        extracted["password"].original_value  # "secret123"
        extracted.to_json()                   # data-table payload
    """
    __test__ = False

    classifier: DataTypeClassifier = field(default_factory=DataTypeClassifier)

    def extract(self, actions: Sequence[Action]) -> ExtractedTestData:
        data: Dict[str, ExtractedDatum] = {}
        sensitive: List[str] = []
        environment: List[EnvironmentBinding] = []

        for action in actions:
            datum = self._harvest(action, len(data))
            if datum is not None:
                data[datum.key] = datum
                if datum.is_sensitive and datum.field_name not in sensitive:
                    sensitive.append(datum.field_name)
            if action.method == "goto" and action.first_arg:
                self._bind_base_url(environment, action.first_arg)

        extracted = ExtractedTestData(
            data=data,
            sensitive_fields=tuple(sensitive),
            variations=tuple(self.variations(data)),
            environment=tuple(environment),
            records=tuple(self.records(data)),
        )
        logger.debug(
            f"Extracted {len(data)} values ({len(sensitive)} sensitive) "
            f"from {len(actions)} actions"
        )
        return extracted

    # ------------------------------------------------------------------
    # Harvesting
    # ------------------------------------------------------------------

    def _harvest(self, action: Action, position: int) -> Optional[ExtractedDatum]:
        target = action.target

        if action.method in FILL_METHODS and action.args:
            value = action.first_arg
            field_name = input_field_name(action)
            sensitive = is_sensitive(field_name)
            return ExtractedDatum(
                key=slugify(field_name) or f"field_{position}",
                field_name=field_name,
                value=mask_value(value) if sensitive else value,
                data_type=self.classifier.classify(value, field_name),
                source=DataSource.FILL,
                is_sensitive=sensitive,
                parameter_name=parameter_name(field_name),
                original_value=value,
            )

        if action.method == "selectOption" and action.args:
            field_name = input_field_name(action)
            return self._plain(
                field_name, action.first_arg, DataSource.SELECT, position, field_name
            )

        if action.method == "click" and target is not None:
            if target.type == LocatorKind.TEXT and target.selector:
                return self._plain(
                    target.selector, target.selector, DataSource.CLICK, position
                )
            if target.is_role() and target.name and is_data_value(target.name, target.selector):
                value = target.name
                field_name = re.sub(r"\s+", "_", f"{target.selector}_{value}")
                return self._plain(
                    value, value, DataSource.CLICK, position, field_name
                )

        asserted = action.args[0] if action.args else None
        if action.type == ActionType.ASSERTION and isinstance(asserted, str) and asserted:
            field_name = assertion_field_name(action)
            return self._plain(
                f"expected_{field_name}", asserted, DataSource.ASSERTION, position,
                field_name=field_name,
                param="expected" + to_pascal_case(_words(field_name)),
            )

        return None

    @staticmethod
    def _plain(
        key_source: str,
        value: str,
        source: DataSource,
        position: int,
        field_name: Optional[str] = None,
        param: Optional[str] = None,
    ) -> ExtractedDatum:
        field_name = field_name or key_source
        return ExtractedDatum(
            key=slugify(key_source) or f"field_{position}",
            field_name=field_name,
            value=value,
            data_type=DataType.TEXT,
            source=source,
            is_sensitive=False,
            parameter_name=param or parameter_name(key_source),
            original_value=value,
        )

    @staticmethod
    def _bind_base_url(environment: List[EnvironmentBinding], url: str) -> None:
        base = base_url(url)
        if any(binding.value == base for binding in environment):
            return
        name = "BASE_URL" if not environment else f"BASE_URL_{len(environment) + 1}"
        environment.append(EnvironmentBinding(name=name, value=base))

    # ------------------------------------------------------------------
    # Derived payloads
    # ------------------------------------------------------------------

    @staticmethod
    def variations(data: Mapping[str, ExtractedDatum]) -> List[DataVariation]:
        return [
            DataVariation(key, variation_type, value, description)
            for key, datum in data.items()
            for variation_type, value, description in VARIATIONS.get(datum.data_type, ())
        ]

    @staticmethod
    def records(data: Mapping[str, ExtractedDatum]) -> List[Dict[str, Any]]:
        """Primary and variation data-table records.

        Sensitive values never appear; they are replaced by ``${KEY}`` and
        ``${KEY_ALT}`` placeholders resolved from the environment.
        """
        primary: Dict[str, Any] = dict(PRIMARY_RECORD)
        variation: Dict[str, Any] = dict(VARIATION_RECORD)
        for key, datum in data.items():
            placeholder = key.upper()
            if datum.is_sensitive:
                primary[key] = f"${{{placeholder}}}"
                variation[key] = f"${{{placeholder}_ALT}}"
                continue
            primary[key] = datum.value
            if datum.data_type == DataType.EMAIL:
                variation[key] = "test.variation@example.com"
            elif datum.data_type == DataType.USERNAME:
                variation[key] = "testuser_variation"
            else:
                variation[key] = f"{datum.value}_variation"
        return [primary, variation]


def input_field_name(action: Action) -> str:
    """Accessible name, else placeholder or label text, else ``field``."""
    target = action.target
    if target is None:
        return "field"
    if target.name:
        return target.name
    if target.type in (LocatorKind.PLACEHOLDER, LocatorKind.LABEL) and target.selector:
        return target.selector
    return "field"


def assertion_field_name(action: Action) -> str:
    target = action.target
    if target is None:
        return "text"
    if target.name:
        return target.name
    return slugify(target.selector) or "text"


def parameter_name(field_name: str) -> str:
    return to_camel_case(_words(field_name))


def is_data_value(value: str, role: str) -> bool:
    """True when an accessible name looks like data rather than a control.

    Generic control names (Login, Save, menu modules) are rejected; row
    names, status words and values with digit runs, dashes or slashes
    are accepted.
    """
    lowered = value.lower()
    if lowered in UI_ELEMENT_NAMES:
        return False
    if role == "row":
        return True
    if lowered in STATUS_VALUES:
        return True
    return DATA_LIKE_PATTERN.search(value) is not None


def base_url(url: str) -> str:
    """``scheme://host[:port]`` of ``url``, or ``url`` itself if it has none."""
    parsed = urlparse(url)
    if parsed.scheme and parsed.netloc:
        return f"{parsed.scheme}://{parsed.netloc}"
    return url


def parameterize_step(step: str, references: Mapping[str, str]) -> str:
    """Replace each quoted recorded value with a ``"<key>"`` placeholder.

    Examples:
        >>> parameterize_step('user enters "bob" in username field', {"bob": "username"})
        'user enters "<username>" in username field'
    """
    for value, key in references.items():
        step = step.replace(f'"{value}"', f'"<{key}>"', 1)
    return step
