"""Test Data Domain Value Objects.

Literal values harvested from a recording, their inferred types, and the
data-driven payload built from them. Sensitive values are masked in
every displayed form; the recorded value stays on ``original_value``
which is left out of ``repr`` and of ``to_dict()`` unless asked for.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple

import yaml


class DataType(str, Enum):
    """Inferred type of an extracted value."""
    EMAIL = "email"
    PASSWORD = "password"
    PHONE = "phone"
    URL = "url"
    DATE = "date"
    NUMBER = "number"
    CURRENCY = "currency"
    USERNAME = "username"
    NAME = "name"
    ID = "id"
    TOKEN = "token"
    TEXT = "text"


class DataSource(str, Enum):
    """Kind of action a value was harvested from."""
    FILL = "fill"
    SELECT = "select"
    CLICK = "click"
    ASSERTION = "assertion"


class VariationType(str, Enum):
    INVALID = "invalid"
    BOUNDARY = "boundary"
    EMPTY = "empty"
    SPECIAL = "special"


@dataclass(frozen=True)
class ExtractedDatum:
    """One harvested value.

    Attributes:
        key: Slug of the field name, unique within one extraction
        field_name: Field the value was entered into or read from
        value: Display value (masked when sensitive)
        data_type: Inferred type
        source: Kind of action the value came from
        is_sensitive: Whether the field holds a secret
        parameter_name: camelCase parameter name for generated steps
        original_value: The recorded value, never displayed
    """
    key: str
    field_name: str
    value: str
    data_type: DataType
    source: DataSource
    is_sensitive: bool
    parameter_name: str
    original_value: str = field(default="", repr=False)

    def to_dict(self, reveal: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "key": self.key,
            "field": self.field_name,
            "value": self.value,
            "type": self.data_type.value,
            "source": self.source.value,
            "isSensitive": self.is_sensitive,
            "suggestedParamName": self.parameter_name,
        }
        if reveal:
            data["originalValue"] = self.original_value
        return data


@dataclass(frozen=True)
class DataVariation:
    """A suggested alternative value for negative or boundary testing."""
    field_name: str
    variation_type: VariationType
    value: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field_name,
            "variationType": self.variation_type.value,
            "value": self.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class EnvironmentBinding:
    """A value that belongs in environment configuration (``BASE_URL``)."""
    name: str
    value: str
    kind: str = "url"
    description: str = "Application base URL"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "type": self.kind,
            "description": self.description,
        }


@dataclass(frozen=True)
class ExtractedTestData:
    """Everything the test data extractor found in one recording.

    ``data`` is keyed by datum key in first-seen order. ``records`` is the
    data-table payload: a primary record and a disabled variation record.
    """
    data: Dict[str, ExtractedDatum] = field(default_factory=dict)
    sensitive_fields: Tuple[str, ...] = ()
    variations: Tuple[DataVariation, ...] = ()
    environment: Tuple[EnvironmentBinding, ...] = ()
    records: Tuple[Dict[str, Any], ...] = ()

    def __getitem__(self, key: str) -> ExtractedDatum:
        return self.data[key]

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def __len__(self) -> int:
        return len(self.data)

    @property
    def base_url(self) -> str:
        """First discovered base URL, or ''."""
        return self.environment[0].value if self.environment else ""

    def to_json(self) -> str:
        """Data-table payload as a JSON array."""
        return json.dumps(list(self.records), indent=2)

    def to_yaml(self) -> str:
        """Data-table payload as a YAML sequence."""
        return yaml.safe_dump(list(self.records), sort_keys=False, allow_unicode=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": {key: datum.to_dict() for key, datum in self.data.items()},
            "sensitiveFields": list(self.sensitive_fields),
            "suggestedVariations": [v.to_dict() for v in self.variations],
            "environmentVariables": [e.to_dict() for e in self.environment],
            "records": [dict(r) for r in self.records],
        }

    def substitutions(self) -> List[Tuple[str, str]]:
        """(recorded value, datum key) pairs for step parameterization."""
        return [(d.original_value, key) for key, d in self.data.items() if d.original_value]
