"""Compositional Filters

Filters are the predicates behind Refinement nodes. Each one is an immutable
dataclass that:

- tests an already-decoded value (``filter(value) -> bool``)
- describes itself for error messages (``meta``)
- knows its JSON-Schema keyword, if one exists (``json_schema``)
- wraps a schema in a Refinement (``filter.apply(ast)``)

Filters combine with ``&``: ``(min_length(1) & max_length(5)).apply(ast)``
nests two refinements, innermost first.
"""
from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from shapekit.ast import AST, AnnotationKey, Refinement
from shapekit.core.errors import Grade


class Filter(ABC):
    """Base class for refinement filters."""

    @abstractmethod
    def check(self, value: Any) -> bool:
        """Whether ``value`` satisfies the filter."""

    @property
    @abstractmethod
    def meta(self) -> str:
        """Human-readable description used in refinement errors."""

    @property
    def json_schema(self) -> Mapping[str, Any] | None:
        return None

    def __call__(self, value: Any) -> bool: return self.check(value)

    def __and__(self, other: Filter) -> AllOf: return AllOf(self, other)

    def apply(self, ast: AST, *, on_failure: Grade = Grade.FAILURE, message: str | None = None) -> AST:
        annotations: dict[Any, Any] = {}
        if self.json_schema is not None:
            annotations[AnnotationKey.JSON_SCHEMA] = dict(self.json_schema)
        if message is not None:
            annotations[AnnotationKey.MESSAGE] = message
        return Refinement(ast, self.check, meta=self.meta, on_failure=on_failure, annotations=annotations)


@dataclass(frozen=True, slots=True)
class AllOf(Filter):
    """Both filters, applied left then right."""
    left: Filter
    right: Filter

    @property
    def meta(self) -> str:
        return f"{self.left.meta} & {self.right.meta}"

    def check(self, value: Any) -> bool:
        return self.left.check(value) and self.right.check(value)

    def apply(self, ast: AST, *, on_failure: Grade = Grade.FAILURE, message: str | None = None) -> AST:
        inner = self.left.apply(ast, on_failure=on_failure, message=message)
        return self.right.apply(inner, on_failure=on_failure, message=message)


# ============================================================================
# Length Filters (strings and sequences)
# ============================================================================

@dataclass(frozen=True, slots=True)
class MinLength(Filter):
    min_length: int

    @property
    def meta(self) -> str:
        return f"minLength({self.min_length})"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"minLength": self.min_length}

    def check(self, value: Any) -> bool:
        return len(value) >= self.min_length


@dataclass(frozen=True, slots=True)
class MaxLength(Filter):
    max_length: int

    @property
    def meta(self) -> str:
        return f"maxLength({self.max_length})"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"maxLength": self.max_length}

    def check(self, value: Any) -> bool:
        return len(value) <= self.max_length


@dataclass(frozen=True, slots=True)
class Length(Filter):
    """Exact length, or an inclusive ``[min_length, max_length]`` range."""
    min_length: int
    max_length: int | None = None

    @property
    def _max(self) -> int:
        return self.min_length if self.max_length is None else self.max_length

    @property
    def meta(self) -> str:
        if self.max_length is None:
            return f"length({self.min_length})"
        return f"length({self.min_length}, {self.max_length})"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"minLength": self.min_length, "maxLength": self._max}

    def check(self, value: Any) -> bool:
        return self.min_length <= len(value) <= self._max


@dataclass(frozen=True, slots=True)
class NonEmpty(Filter):
    @property
    def meta(self) -> str:
        return "nonEmpty"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"minLength": 1}

    def check(self, value: Any) -> bool:
        return len(value) > 0


@dataclass(frozen=True, slots=True)
class MinItems(Filter):
    min_items: int

    @property
    def meta(self) -> str:
        return f"minItems({self.min_items})"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"minItems": self.min_items}

    def check(self, value: Any) -> bool:
        return len(value) >= self.min_items


@dataclass(frozen=True, slots=True)
class MaxItems(Filter):
    max_items: int

    @property
    def meta(self) -> str:
        return f"maxItems({self.max_items})"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"maxItems": self.max_items}

    def check(self, value: Any) -> bool:
        return len(value) <= self.max_items


# ============================================================================
# String Filters
# ============================================================================

@dataclass(frozen=True, slots=True)
class StartsWith(Filter):
    prefix: str

    @property
    def meta(self) -> str:
        return f"startsWith({self.prefix!r})"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"pattern": f"^{re.escape(self.prefix)}"}

    def check(self, value: Any) -> bool:
        return value.startswith(self.prefix)


@dataclass(frozen=True, slots=True)
class EndsWith(Filter):
    suffix: str

    @property
    def meta(self) -> str:
        return f"endsWith({self.suffix!r})"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"pattern": f"{re.escape(self.suffix)}$"}

    def check(self, value: Any) -> bool:
        return value.endswith(self.suffix)


@dataclass(frozen=True, slots=True)
class Pattern(Filter):
    """Regex search (unanchored unless the pattern anchors itself)."""
    pattern: str
    flags: int = 0
    _compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_compiled", re.compile(self.pattern, self.flags))

    @property
    def meta(self) -> str:
        return f"pattern({self.pattern})"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"pattern": self.pattern}

    def check(self, value: Any) -> bool:
        return self._compiled.search(value) is not None


@dataclass(frozen=True, slots=True)
class Includes(Filter):
    """Substring for strings, membership for other containers."""
    item: Any

    @property
    def meta(self) -> str:
        return f"includes({self.item!r})"

    def check(self, value: Any) -> bool:
        return self.item in value


# ============================================================================
# Numeric Filters
# ============================================================================

@dataclass(frozen=True, slots=True)
class LessThan(Filter):
    bound: float | int

    @property
    def meta(self) -> str:
        return f"lessThan({self.bound})"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"exclusiveMaximum": self.bound}

    def check(self, value: Any) -> bool:
        return value < self.bound


@dataclass(frozen=True, slots=True)
class LessThanOrEqualTo(Filter):
    bound: float | int

    @property
    def meta(self) -> str:
        return f"lessThanOrEqualTo({self.bound})"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"maximum": self.bound}

    def check(self, value: Any) -> bool:
        return value <= self.bound


@dataclass(frozen=True, slots=True)
class GreaterThan(Filter):
    bound: float | int

    @property
    def meta(self) -> str:
        return f"greaterThan({self.bound})"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"exclusiveMinimum": self.bound}

    def check(self, value: Any) -> bool:
        return value > self.bound


@dataclass(frozen=True, slots=True)
class GreaterThanOrEqualTo(Filter):
    bound: float | int

    @property
    def meta(self) -> str:
        return f"greaterThanOrEqualTo({self.bound})"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"minimum": self.bound}

    def check(self, value: Any) -> bool:
        return value >= self.bound


@dataclass(frozen=True, slots=True)
class Int(Filter):
    @property
    def meta(self) -> str:
        return "int"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"type": "integer"}

    def check(self, value: Any) -> bool:
        if isinstance(value, int):
            return True
        return isinstance(value, float) and value.is_integer()


@dataclass(frozen=True, slots=True)
class NonNaN(Filter):
    @property
    def meta(self) -> str:
        return "nonNaN"

    def check(self, value: Any) -> bool:
        return not (isinstance(value, float) and math.isnan(value))


@dataclass(frozen=True, slots=True)
class Finite(Filter):
    @property
    def meta(self) -> str:
        return "finite"

    def check(self, value: Any) -> bool:
        return math.isfinite(value)


@dataclass(frozen=True, slots=True)
class MultipleOf(Filter):
    divisor: float | int

    def __post_init__(self):
        if self.divisor == 0:
            raise ValueError("multiple_of divisor must be non-zero")

    @property
    def meta(self) -> str:
        return f"multipleOf({self.divisor})"

    @property
    def json_schema(self) -> Mapping[str, Any]:
        return {"multipleOf": self.divisor}

    def check(self, value: Any) -> bool:
        if isinstance(self.divisor, int) and isinstance(value, int):
            return value % self.divisor == 0
        if not math.isfinite(value):
            return False
        quotient = value / self.divisor
        return math.isclose(quotient, round(quotient), rel_tol=0, abs_tol=1e-9)


# ============================================================================
# Other Filters
# ============================================================================

@dataclass(frozen=True, slots=True)
class InstanceOf(Filter):
    cls: type

    @property
    def meta(self) -> str:
        return f"instanceOf({self.cls.__name__})"

    def check(self, value: Any) -> bool:
        return isinstance(value, self.cls)


@dataclass(frozen=True, slots=True)
class Custom(Filter):
    """Arbitrary predicate with a caller-supplied description."""
    predicate: Callable[[Any], bool]
    description: str = "custom"
    schema: Mapping[str, Any] | None = None

    @property
    def meta(self) -> str:
        return self.description

    @property
    def json_schema(self) -> Mapping[str, Any] | None:
        return self.schema

    def check(self, value: Any) -> bool:
        return bool(self.predicate(value))


# ============================================================================
# Constructors
# ============================================================================

def min_length(n: int) -> MinLength: return MinLength(n)


def max_length(n: int) -> MaxLength: return MaxLength(n)


def length(min_length: int, max_length: int | None = None) -> Length: return Length(min_length, max_length)


def non_empty() -> NonEmpty: return NonEmpty()


def starts_with(prefix: str) -> StartsWith: return StartsWith(prefix)


def ends_with(suffix: str) -> EndsWith: return EndsWith(suffix)


def pattern(regex: str, flags: int = 0) -> Pattern: return Pattern(regex, flags)


def includes(item: Any) -> Includes: return Includes(item)


def less_than(bound: float | int) -> LessThan: return LessThan(bound)


def less_than_or_equal_to(bound: float | int) -> LessThanOrEqualTo: return LessThanOrEqualTo(bound)


def greater_than(bound: float | int) -> GreaterThan: return GreaterThan(bound)


def greater_than_or_equal_to(bound: float | int) -> GreaterThanOrEqualTo: return GreaterThanOrEqualTo(bound)


def int_() -> Int: return Int()


def non_nan() -> NonNaN: return NonNaN()


def finite() -> Finite: return Finite()


def multiple_of(divisor: float | int) -> MultipleOf: return MultipleOf(divisor)


def min_items(n: int) -> MinItems: return MinItems(n)


def max_items(n: int) -> MaxItems: return MaxItems(n)


def instance_of(cls: type) -> InstanceOf: return InstanceOf(cls)


def custom(predicate: Callable[[Any], bool], description: str = "custom",
           json_schema: Mapping[str, Any] | None = None) -> Custom:
    return Custom(predicate, description, json_schema)
