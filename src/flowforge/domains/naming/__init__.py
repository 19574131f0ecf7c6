"""Naming Bounded Context.

Identifiers, descriptions and Gherkin step phrases for recorded actions
and detected flows, plus the step-pattern compiler.
"""
from .value_objects import ElementNaming, MethodNaming, NamingBundle
from .aggregates import NameScope, make_unique
from .step_patterns import CompiledStepPattern, StepPatternCompiler
from .services import (
    NamingEngine,
    sanitize_identifier,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
)

__all__ = [
    "ElementNaming",
    "MethodNaming",
    "NamingBundle",
    "NameScope",
    "make_unique",
    "CompiledStepPattern",
    "StepPatternCompiler",
    "NamingEngine",
    "sanitize_identifier",
    "to_camel_case",
    "to_kebab_case",
    "to_pascal_case",
]
