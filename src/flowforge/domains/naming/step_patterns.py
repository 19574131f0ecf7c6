"""Compilation of parameterized Gherkin step patterns.

A step pattern such as ``user enters {string} in username field`` is
compiled in a single pass into an anchored regular expression. Literal
text is escaped, so punctuation in a step never leaks regex meaning, and
each parameter token maps to exactly one capture group.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

TOKEN_PATTERN = re.compile(r"\{(string|int|float|word)\}")

# token -> (capture group, converter)
TOKEN_TYPES: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    "string": (r'"([^"]*)"', str),
    "int": (r"(-?\d+)", int),
    "float": (r"(-?\d*\.?\d+)", float),
    "word": (r"([^\s]+)", str),
}


@dataclass(frozen=True)
class CompiledStepPattern:
    """A step pattern compiled to an anchored regex.

    Attributes:
        source: The pattern as written
        regex: Anchored expression, or None when compilation failed and
            matching falls back to literal comparison
        parameter_types: Token names in order of appearance
    """
    source: str
    regex: Optional[re.Pattern[str]]
    parameter_types: Tuple[str, ...]

    @property
    def parameter_count(self) -> int:
        return len(self.parameter_types)

    def match(self, text: str) -> Optional[List[Any]]:
        """Converted arguments if ``text`` matches, else None."""
        if self.regex is None:
            return [] if text == self.source else None
        found = self.regex.match(text)
        if found is None:
            return None
        return [
            TOKEN_TYPES[kind][1](value)
            for kind, value in zip(self.parameter_types, found.groups())
        ]

    def matches(self, text: str) -> bool:
        return self.match(text) is not None


class StepPatternCompiler:
    """Compiles step patterns, caching by source text."""

    def __init__(self) -> None:
        self._cache: Dict[str, CompiledStepPattern] = {}

    def compile(self, pattern: str) -> CompiledStepPattern:
        cached = self._cache.get(pattern)
        if cached is not None:
            return cached

        parts: List[str] = []
        kinds: List[str] = []
        position = 0
        for token in TOKEN_PATTERN.finditer(pattern):
            parts.append(re.escape(pattern[position:token.start()]))
            kind = token.group(1)
            parts.append(TOKEN_TYPES[kind][0])
            kinds.append(kind)
            position = token.end()
        parts.append(re.escape(pattern[position:]))

        try:
            regex: Optional[re.Pattern[str]] = re.compile("^" + "".join(parts) + "$")
        except re.error:
            regex = None
        compiled = CompiledStepPattern(pattern, regex, tuple(kinds))
        self._cache[pattern] = compiled
        return compiled

    def count_parameters(self, pattern: str) -> int:
        return self.compile(pattern).parameter_count
