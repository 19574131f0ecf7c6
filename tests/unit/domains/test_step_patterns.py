"""Unit tests for the step-pattern compiler.

Run with: uv run pytest tests/unit/domains/test_step_patterns.py -v
"""

from __future__ import annotations

__test__ = True

import pytest

from flowforge.domains.naming import StepPatternCompiler


@pytest.fixture
def compiler():
    return StepPatternCompiler()


class TestStepPatternCompiler:
    """Compilation of {string}, {int}, {float} and {word} tokens."""

    def test_string_parameter(self, compiler):
        pattern = compiler.compile("user enters {string} in username field")
        assert pattern.match('user enters "bob" in username field') == ["bob"]
        assert pattern.parameter_types == ("string",)

    def test_mixed_tokens_convert_values(self, compiler):
        pattern = compiler.compile("{int} items of {word} cost {float}")
        assert pattern.match("3 items of tea-green cost 4.5") == [3, "tea-green", 4.5]
        assert pattern.parameter_count == 3

    def test_literal_text_is_escaped(self, compiler):
        pattern = compiler.compile("price (USD) is {int}")
        assert pattern.matches("price (USD) is 5")
        assert not pattern.matches("price USD is 5")

    def test_pattern_is_anchored(self, compiler):
        pattern = compiler.compile("user logs out")
        assert pattern.matches("user logs out")
        assert not pattern.matches("user logs out now")
        assert not pattern.matches("then user logs out")

    def test_unknown_tokens_stay_literal(self, compiler):
        pattern = compiler.compile("user sees {thing}")
        assert pattern.parameter_count == 0
        assert pattern.matches("user sees {thing}")

    def test_count_parameters(self, compiler):
        assert compiler.count_parameters(
            "user logs in with username {string} and password {string}"
        ) == 2
        assert compiler.count_parameters("user logs out") == 0

    def test_compiled_patterns_are_cached(self, compiler):
        assert compiler.compile("a {int}") is compiler.compile("a {int}")
