"""Naming Domain Aggregate.

A NameScope owns the identifiers already handed out within one scope
(a page object, a step-definition file) and keeps them unique.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Set


def make_unique(base_name: str, existing: Iterable[str]) -> str:
    """Return ``base_name``, or ``base_name`` plus the first free counter from 2.

    Examples:
        >>> make_unique("loginButton", {"loginButton"})
        'loginButton2'
    """
    taken = existing if isinstance(existing, (set, frozenset)) else set(existing)
    if base_name not in taken:
        return base_name
    counter = 2
    while f"{base_name}{counter}" in taken:
        counter += 1
    return f"{base_name}{counter}"


@dataclass
class NameScope:
    """Identifiers claimed within one scope.

    Invariants:
        - ``claim`` never returns a name that was already claimed
    """
    _names: Set[str] = field(default_factory=set)

    def claim(self, base_name: str) -> str:
        name = make_unique(base_name, self._names)
        self._names.add(name)
        return name

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)
