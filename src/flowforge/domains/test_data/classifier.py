"""Data type classification and sensitivity screening.

Classification is an ordered list of (predicate, outcome) rules and the
first rule that holds decides. All field-name hint rules come before all
value-pattern rules, each group in ``DATA_TYPE_RULES`` order, so a field
named ``email`` is an email whatever was typed into it.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .value_objects import DataType


@dataclass(frozen=True)
class DataTypeRule:
    """Field-name hints and an optional value pattern for one data type."""
    data_type: DataType
    field_hints: Tuple[str, ...]
    value_pattern: Optional[re.Pattern[str]] = None


def _rule(data_type: DataType, pattern: Optional[str], *hints: str) -> DataTypeRule:
    return DataTypeRule(data_type, hints, re.compile(pattern) if pattern else None)


# Passwords are recognized by field name only; any value fits a password.
DATA_TYPE_RULES = (
    _rule(DataType.EMAIL, r"^[^\s@]+@[^\s@]+\.[^\s@]+$", "email", "mail", "e-mail"),
    _rule(DataType.PASSWORD, None, "password", "passwd", "pwd", "secret", "pass"),
    _rule(DataType.PHONE, r"^[\d\s\-+()]{7,20}$", "phone", "mobile", "tel", "cell"),
    _rule(DataType.URL, r"^https?://", "url", "link", "website", "site"),
    _rule(DataType.DATE, r"^\d{1,4}[-/]\d{1,2}[-/]\d{1,4}$", "date", "dob", "birth", "expir"),
    _rule(DataType.NUMBER, r"^-?\d+(\.\d+)?$", "amount", "quantity", "count", "number", "num"),
    _rule(DataType.CURRENCY, r"^[$€£¥]?\d+([,.]\d{2})?$", "price", "cost", "amount", "total", "balance"),
    _rule(DataType.USERNAME, r"^[\w.-]+$", "username", "user", "login", "userid", "user_id"),
    _rule(DataType.NAME, r"^[a-zA-Z\s'-]+$", "name", "firstname", "lastname", "fullname"),
    _rule(DataType.ID, r"^[a-zA-Z0-9_-]+$", "id", "identifier", "code", "key"),
    _rule(DataType.TOKEN, r"^[a-zA-Z0-9_-]{20,}$", "token", "api_key", "apikey", "auth"),
)

SENSITIVE_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"password", r"passwd", r"secret", r"token", r"api[_-]?key", r"auth",
        r"credential", r"private", r"ssn", r"social", r"credit", r"card",
        r"cvv", r"pin",
    )
)

# (value, lowercase field name) -> matched?
Predicate = Callable[[str, str], bool]


class DataTypeClassifier:
    """First-match-wins data type classifier.

    Usage:

        classifier = DataTypeClassifier()
        classifier.classify("bob@example.com", "Contact")  # DataType.EMAIL
        classifier.classify("anything", "Password")         # DataType.PASSWORD
    """

    def __init__(self, rules: Sequence[DataTypeRule] = DATA_TYPE_RULES) -> None:
        self._rules: List[Tuple[Predicate, DataType]] = []
        for rule in rules:
            self._rules.append((_hint_predicate(rule.field_hints), rule.data_type))
        for rule in rules:
            if rule.value_pattern is not None:
                self._rules.append((_value_predicate(rule.value_pattern), rule.data_type))

    def classify(self, value: str, field_name: str) -> DataType:
        lowered = field_name.lower()
        for predicate, data_type in self._rules:
            if predicate(value, lowered):
                return data_type
        return DataType.TEXT

    def __len__(self) -> int:
        return len(self._rules)


def _hint_predicate(hints: Tuple[str, ...]) -> Predicate:
    return lambda value, field_name: any(hint in field_name for hint in hints)


def _value_predicate(pattern: re.Pattern[str]) -> Predicate:
    return lambda value, field_name: pattern.search(value) is not None


def is_sensitive(field_name: str) -> bool:
    return any(p.search(field_name) for p in SENSITIVE_PATTERNS)


def mask_value(value: str) -> str:
    """Mask a sensitive value for display.

    Keeps the first and last two characters of values longer than four;
    shorter values become ``****``. The result never equals ``value``.

    Examples:
        >>> mask_value("secret123")
        'se*****23'
        >>> mask_value("abc")
        '****'
    """
    if len(value) <= 4:
        masked = "****"
    else:
        masked = value[:2] + "*" * (len(value) - 4) + value[-2:]
    if masked == value:
        masked = "*" * (len(value) + 1)
    return masked
