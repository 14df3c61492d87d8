"""Refinement Filters and Decode Failure Reports

Usage:
    from shapekit.core.validation import min_length, max_length, pattern

    username = (min_length(3) & max_length(20)).apply(string_keyword)
    slug = pattern(r"^[a-z0-9-]+$").apply(string_keyword, message="not a slug")
"""
from .filters import (
    Filter,
    AllOf,
    MinLength,
    MaxLength,
    Length,
    NonEmpty,
    MinItems,
    MaxItems,
    StartsWith,
    EndsWith,
    Pattern,
    Includes,
    LessThan,
    LessThanOrEqualTo,
    GreaterThan,
    GreaterThanOrEqualTo,
    Int,
    NonNaN,
    Finite,
    MultipleOf,
    InstanceOf,
    Custom,
    min_length,
    max_length,
    length,
    non_empty,
    starts_with,
    ends_with,
    pattern,
    includes,
    less_than,
    less_than_or_equal_to,
    greater_than,
    greater_than_or_equal_to,
    int_,
    non_nan,
    finite,
    multiple_of,
    min_items,
    max_items,
    instance_of,
    custom,
)

from .errors import DecodeFailedError, format_path, render_tree

__all__ = [
    "Filter",
    "AllOf",
    "MinLength",
    "MaxLength",
    "Length",
    "NonEmpty",
    "MinItems",
    "MaxItems",
    "StartsWith",
    "EndsWith",
    "Pattern",
    "Includes",
    "LessThan",
    "LessThanOrEqualTo",
    "GreaterThan",
    "GreaterThanOrEqualTo",
    "Int",
    "NonNaN",
    "Finite",
    "MultipleOf",
    "InstanceOf",
    "Custom",
    "min_length",
    "max_length",
    "length",
    "non_empty",
    "starts_with",
    "ends_with",
    "pattern",
    "includes",
    "less_than",
    "less_than_or_equal_to",
    "greater_than",
    "greater_than_or_equal_to",
    "int_",
    "non_nan",
    "finite",
    "multiple_of",
    "min_items",
    "max_items",
    "instance_of",
    "custom",
    "DecodeFailedError",
    "format_path",
    "render_tree",
]
