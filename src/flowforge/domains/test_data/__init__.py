"""Test Data Bounded Context.

Harvests, classifies and masks literal values from a recording and
builds the data-table payload for data-driven scenarios.
"""
from .value_objects import (
    DataSource,
    DataType,
    DataVariation,
    EnvironmentBinding,
    ExtractedDatum,
    ExtractedTestData,
    VariationType,
)
from .classifier import DataTypeClassifier, DataTypeRule, is_sensitive, mask_value
from .services import TestDataExtractor, is_data_value, parameterize_step, slugify

__all__ = [
    "DataSource",
    "DataType",
    "DataVariation",
    "EnvironmentBinding",
    "ExtractedDatum",
    "ExtractedTestData",
    "VariationType",
    "DataTypeClassifier",
    "DataTypeRule",
    "is_sensitive",
    "mask_value",
    "TestDataExtractor",
    "is_data_value",
    "parameterize_step",
    "slugify",
]
