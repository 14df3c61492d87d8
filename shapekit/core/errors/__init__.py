"""Graded Result and Error Handling

Data errors are values: every decoder returns a graded result (Success,
Warning, Failure) carrying DecodeError records. Programmer errors are
exceptions derived from SchemaError, raised while artifacts are derived.

Usage:
    from shapekit.core.errors import Success, Warning, Failure

    match decoder.decode(payload):
        case Success(value):
            use(value)
        case Warning(errors, value):
            log.warning("decoded with warnings", count=len(errors))
            use(value)
        case Failure(errors):
            report(errors)
"""
from .types import (
    # Core types
    Graded,
    Success,
    Warning,
    Failure,
    Grade,
    DecodeError,
    ErrorCode,
    PathSegment,
    # Exceptions
    SchemaError,
    InvalidSchemaError,
    MissingProviderError,
    GenerationError,
    UnsupportedNodeError,
    # Constructors
    success,
    warning,
    failure,
    # Combinators
    combine,
    collect_graded,
    worst,
)

from .builders import (
    type_mismatch,
    literal_mismatch,
    enum_mismatch,
    missing_key,
    missing_index,
    unexpected_key,
    unexpected_index,
    union_member,
    refinement_failed,
    parse_failed,
    decode_error,
    describe,
)

__all__ = [
    "Graded",
    "Success",
    "Warning",
    "Failure",
    "Grade",
    "DecodeError",
    "ErrorCode",
    "PathSegment",
    "SchemaError",
    "InvalidSchemaError",
    "MissingProviderError",
    "GenerationError",
    "UnsupportedNodeError",
    "success",
    "warning",
    "failure",
    "combine",
    "collect_graded",
    "worst",
    "type_mismatch",
    "literal_mismatch",
    "enum_mismatch",
    "missing_key",
    "missing_index",
    "unexpected_key",
    "unexpected_index",
    "union_member",
    "refinement_failed",
    "parse_failed",
    "decode_error",
    "describe",
]
