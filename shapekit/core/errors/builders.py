"""Decode Error Builders

Ergonomic constructors for each DecodeError kind. Errors about a value itself
have an empty path; missing and unexpected keys or indices carry that one key
or index. Parents prefix their own key or index as the error travels up the
structure.
"""
import json
import math
from typing import Any, Sequence

from .types import DecodeError, ErrorCode, PathSegment


def _show(value: Any) -> str:
    """Compact rendering of an arbitrary input for messages."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
    try:
        return json.dumps(value, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError):
        return repr(value)


# =============================================================================
# Type errors (E2001 - E2003)
# =============================================================================

def type_mismatch(expected: str, actual: Any) -> DecodeError:
    return DecodeError(path=(), kind=ErrorCode.E2001_TYPE_MISMATCH,
        details={"expected": expected, "actual": actual})


def literal_mismatch(expected: Any, actual: Any) -> DecodeError:
    return DecodeError(path=(), kind=ErrorCode.E2002_LITERAL_MISMATCH,
        details={"expected": expected, "actual": actual})


def enum_mismatch(members: Sequence[tuple[str, Any]], actual: Any) -> DecodeError:
    return DecodeError(path=(), kind=ErrorCode.E2003_ENUM_MISMATCH,
        details={"expected": tuple(value for _, value in members), "actual": actual})


# =============================================================================
# Structural errors (E2004 - E2008)
# =============================================================================

def missing_key(key: PathSegment) -> DecodeError:
    return DecodeError(path=(key,), kind=ErrorCode.E2004_MISSING_KEY, details={"key": key})


def missing_index(index: int) -> DecodeError:
    return DecodeError(path=(index,), kind=ErrorCode.E2005_MISSING_INDEX, details={"index": index})


def unexpected_key(key: PathSegment, actual: Any) -> DecodeError:
    return DecodeError(path=(key,), kind=ErrorCode.E2006_UNEXPECTED_KEY,
        details={"key": key, "actual": actual})


def unexpected_index(index: int, actual: Any) -> DecodeError:
    return DecodeError(path=(index,), kind=ErrorCode.E2007_UNEXPECTED_INDEX,
        details={"index": index, "actual": actual})


def union_member(index: int, errors: Sequence[DecodeError], actual: Any) -> DecodeError:
    return DecodeError(path=(), kind=ErrorCode.E2008_UNION_MEMBER,
        details={"member": index, "errors": tuple(errors), "actual": actual})


# =============================================================================
# Refinement and parse errors (E2009 - E2010)
# =============================================================================

def refinement_failed(meta: Any, actual: Any, message: str | None = None) -> DecodeError:
    details = {"meta": meta, "actual": actual}
    if message:
        details["message"] = message
    return DecodeError(path=(), kind=ErrorCode.E2009_REFINEMENT_FAILED, details=details)


def parse_failed(source: str, target: str, actual: Any, reason: str = "") -> DecodeError:
    details = {"from": source, "to": target, "actual": actual}
    if reason:
        details["reason"] = reason
    return DecodeError(path=(), kind=ErrorCode.E2010_PARSE_FAILED, details=details)


def decode_error(message: str, actual: Any = None, **metadata) -> DecodeError:
    """Generic error for provider-defined decoders."""
    return DecodeError(path=(), kind=ErrorCode.E2000_DECODE_GENERIC,
        details={"message": message, "actual": actual, **metadata})


# =============================================================================
# Rendering
# =============================================================================

def describe(error: DecodeError) -> str:
    """Human-readable one-line description of an error (path not included)."""
    d = error.details
    actual = _show(d.get("actual"))
    renderers = {
        ErrorCode.E2001_TYPE_MISMATCH: lambda: f"{actual} did not satisfy is({d.get('expected')})",
        ErrorCode.E2002_LITERAL_MISMATCH: lambda: f"{actual} did not satisfy isEqual({_show(d.get('expected'))})",
        ErrorCode.E2003_ENUM_MISMATCH: lambda: (
            f"{actual} did not satisfy isEnum({', '.join(_show(v) for v in d.get('expected', ()))})"),
        ErrorCode.E2004_MISSING_KEY: lambda: f"missing key {_show(d.get('key'))}",
        ErrorCode.E2005_MISSING_INDEX: lambda: f"missing index {d.get('index')}",
        ErrorCode.E2006_UNEXPECTED_KEY: lambda: f"unexpected key {_show(d.get('key'))}",
        ErrorCode.E2007_UNEXPECTED_INDEX: lambda: f"unexpected index {d.get('index')}",
        ErrorCode.E2008_UNION_MEMBER: lambda: f"union member {d.get('member')}",
        ErrorCode.E2009_REFINEMENT_FAILED: lambda: f"{actual} did not satisfy refinement({_show(d.get('meta'))})",
        ErrorCode.E2010_PARSE_FAILED: lambda: f"{actual} could not be parsed from {d.get('from')} to {d.get('to')}",
    }
    if error.kind is ErrorCode.E2009_REFINEMENT_FAILED and d.get("message"):
        return str(d["message"])
    if error.kind in renderers:
        return renderers[error.kind]()
    return str(d.get("message", "decode failed"))
