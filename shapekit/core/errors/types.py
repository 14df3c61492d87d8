"""Graded Result Types and Error Taxonomy

Every validating operation returns one of three outcomes:

- Success(value): no error
- Warning(errors, value): value is usable but issues were recorded
- Failure(errors): no usable value

Errors are plain DecodeError records carried inside the result. Exceptions are
reserved for programmer errors (malformed schemas, missing providers) and are
raised while an artifact is derived, never while a value is decoded.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Generic, Iterable, Iterator, Mapping, NoReturn, TypeVar, Union, final

T = TypeVar("T")
U = TypeVar("U")

PathSegment = Union[str, int]


class ErrorCode(Enum):
    """Hierarchical error code taxonomy.

    E2xxx: Data errors (reported inside Failure / Warning)
    E9xxx: Programmer errors (raised as SchemaError)
    """
    # Data (E2xxx)
    E2000_DECODE_GENERIC = 2000
    E2001_TYPE_MISMATCH = 2001
    E2002_LITERAL_MISMATCH = 2002
    E2003_ENUM_MISMATCH = 2003
    E2004_MISSING_KEY = 2004
    E2005_MISSING_INDEX = 2005
    E2006_UNEXPECTED_KEY = 2006
    E2007_UNEXPECTED_INDEX = 2007
    E2008_UNION_MEMBER = 2008
    E2009_REFINEMENT_FAILED = 2009
    E2010_PARSE_FAILED = 2010

    # Programmer (E9xxx)
    E9000_SCHEMA_GENERIC = 9000
    E9001_INVALID_SCHEMA = 9001
    E9002_MISSING_PROVIDER_ARTIFACT = 9002
    E9003_GENERATION_EXHAUSTED = 9003
    E9004_UNSUPPORTED_NODE = 9004

    @property
    def category(self) -> str:
        """Human-readable error category."""
        code = self.value
        if 2000 <= code < 3000:
            return "data"
        return "programmer"

    @property
    def label(self) -> str:
        """Short snake_case tag, e.g. ``"missing_key"``."""
        return self.name.split("_", 1)[1].lower()


class Grade(str, Enum):
    """Outcome grades, ordered from best to worst."""
    SUCCESS = "success"
    WARNING = "warning"
    FAILURE = "failure"


_EMPTY: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class DecodeError:
    """A single data error.

    - path: keys / indices from the root to the offending value (empty at root)
    - kind: ErrorCode naming the failure category
    - details: structured payload specific to kind
    """
    path: tuple[PathSegment, ...]
    kind: ErrorCode
    details: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)

    def prefixed(self, segment: PathSegment) -> DecodeError:
        """Return a copy with ``segment`` prepended to the path."""
        return DecodeError(path=(segment, *self.path), kind=self.kind, details=self.details)

    @property
    def message(self) -> str:
        from .builders import describe
        return describe(self)

    def to_dict(self) -> dict[str, Any]:
        details = dict(self.details)
        if "errors" in details:
            details["errors"] = [e.to_dict() for e in details["errors"]]
        return {"path": list(self.path), "kind": self.kind.label, "code": self.kind.value,
            "message": self.message, "details": details}

    def __str__(self) -> str:
        return self.message


@dataclass
class SchemaError(Exception):
    """Base programmer error with a typed code and structured metadata."""
    code: ErrorCode
    message: str
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "message": self.message,
                "category": self.code.category,
                "metadata": self.metadata,
            }
        }


class InvalidSchemaError(SchemaError):
    """Raised when a combinator would build an AST that violates an invariant."""

    def __init__(self, message: str, **metadata):
        super().__init__(code=ErrorCode.E9001_INVALID_SCHEMA, message=message, metadata=metadata)


class MissingProviderError(SchemaError):
    """Raised when a Declaration has no provider entry for an artifact kind."""

    def __init__(self, artifact: str, declaration_id: str):
        super().__init__(
            code=ErrorCode.E9002_MISSING_PROVIDER_ARTIFACT,
            message=f"Missing {artifact} provider for declaration {declaration_id!r}",
            metadata={"artifact": artifact, "declaration_id": declaration_id},
        )


class GenerationError(SchemaError):
    """Raised when a generator cannot produce a valid value."""

    def __init__(self, message: str, **metadata):
        super().__init__(code=ErrorCode.E9003_GENERATION_EXHAUSTED, message=message, metadata=metadata)


class UnsupportedNodeError(SchemaError):
    """Raised when an interpreter meets a value that is not an AST node."""

    def __init__(self, node: Any, artifact: str):
        super().__init__(
            code=ErrorCode.E9004_UNSUPPORTED_NODE,
            message=f"Cannot derive {artifact} for {type(node).__name__}",
            metadata={"artifact": artifact, "node_type": type(node).__name__},
        )


# =============================================================================
# Graded result
# =============================================================================

@final
@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """Exact success. Carries the decoded value and no errors."""
    value: T

    @property
    def grade(self) -> Grade:
        return Grade.SUCCESS

    @property
    def errors(self) -> tuple[DecodeError, ...]:
        return ()

    def is_success(self) -> bool:
        return True

    def is_warning(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return False

    def has_value(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Graded[U]:
        return Success(f(self.value))

    def flat_map(self, f: Callable[[T], Graded[U]]) -> Graded[U]:
        return f(self.value)

    def with_errors(self, errors: Iterable[DecodeError], grade: Grade = Grade.WARNING) -> Graded[T]:
        """Escalate by appending ``errors`` at (at least) ``grade``."""
        extra = tuple(errors)
        if not extra:
            return self
        if grade is Grade.FAILURE:
            return Failure(extra)
        return Warning(extra, self.value)

    def prefixed(self, segment: PathSegment) -> Graded[T]:
        return self

    def match(
        self,
        success: Callable[[T], U],
        warning: Callable[[tuple[DecodeError, ...], T], U],
        failure: Callable[[tuple[DecodeError, ...]], U],
    ) -> U:
        """Pattern match on the grade. Forces exhaustive handling."""
        return success(self.value)

    def __iter__(self) -> Iterator[T]:
        yield self.value


@final
@dataclass(frozen=True, slots=True)
class Warning(Generic[T]):
    """Success with recoverable issues recorded."""
    errors: tuple[DecodeError, ...]
    value: T

    def __post_init__(self):
        if not self.errors:
            raise ValueError("Warning requires at least one error")

    @property
    def grade(self) -> Grade:
        return Grade.WARNING

    def is_success(self) -> bool:
        return False

    def is_warning(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def has_value(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Graded[U]:
        return Warning(self.errors, f(self.value))

    def flat_map(self, f: Callable[[T], Graded[U]]) -> Graded[U]:
        match f(self.value):
            case Success(value):
                return Warning(self.errors, value)
            case Warning(errors, value):
                return Warning(self.errors + errors, value)
            case Failure(errors):
                return Failure(self.errors + errors)

    def with_errors(self, errors: Iterable[DecodeError], grade: Grade = Grade.WARNING) -> Graded[T]:
        extra = tuple(errors)
        if grade is Grade.FAILURE and extra:
            return Failure(self.errors + extra)
        return Warning(self.errors + extra, self.value)

    def prefixed(self, segment: PathSegment) -> Graded[T]:
        return Warning(tuple(e.prefixed(segment) for e in self.errors), self.value)

    def match(
        self,
        success: Callable[[T], U],
        warning: Callable[[tuple[DecodeError, ...], T], U],
        failure: Callable[[tuple[DecodeError, ...]], U],
    ) -> U:
        return warning(self.errors, self.value)

    def __iter__(self) -> Iterator[T]:
        yield self.value


@final
@dataclass(frozen=True, slots=True)
class Failure:
    """No usable value. Carries every error found at this level."""
    errors: tuple[DecodeError, ...]

    def __post_init__(self):
        if not self.errors:
            raise ValueError("Failure requires at least one error")

    @property
    def grade(self) -> Grade:
        return Grade.FAILURE

    def is_success(self) -> bool:
        return False

    def is_warning(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def has_value(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Called unwrap on Failure: {self.errors[0].message}")

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[[Any], U]) -> Graded[U]:
        return self

    def flat_map(self, f: Callable[[Any], Graded[U]]) -> Graded[U]:
        return self

    def with_errors(self, errors: Iterable[DecodeError], grade: Grade = Grade.FAILURE) -> Graded[Any]:
        return Failure(self.errors + tuple(errors))

    def prefixed(self, segment: PathSegment) -> Failure:
        return Failure(tuple(e.prefixed(segment) for e in self.errors))

    def match(
        self,
        success: Callable[[Any], U],
        warning: Callable[[tuple[DecodeError, ...], Any], U],
        failure: Callable[[tuple[DecodeError, ...]], U],
    ) -> U:
        return failure(self.errors)

    def __iter__(self) -> Iterator:
        return iter([])


Graded = Union[Success[T], Warning[T], Failure]


def success(value: T) -> Success[T]:
    """Construct Success variant."""
    return Success(value)


def warning(errors: DecodeError | Iterable[DecodeError], value: T) -> Warning[T]:
    """Construct Warning variant from one or more errors."""
    return Warning(_as_tuple(errors), value)


def failure(errors: DecodeError | Iterable[DecodeError]) -> Failure:
    """Construct Failure variant from one or more errors."""
    return Failure(_as_tuple(errors))


def _as_tuple(errors: DecodeError | Iterable[DecodeError]) -> tuple[DecodeError, ...]:
    if isinstance(errors, DecodeError):
        return (errors,)
    return tuple(errors)


def worst(a: Grade, b: Grade) -> Grade:
    """Escalation order: FAILURE > WARNING > SUCCESS."""
    order = (Grade.SUCCESS, Grade.WARNING, Grade.FAILURE)
    return a if order.index(a) >= order.index(b) else b


def combine(left: Graded[T], right: Graded[U], f: Callable[[T, U], Any] = lambda a, b: (a, b)) -> Graded[Any]:
    """Merge two outcomes, concatenating errors left-to-right.

    Failure if either side is Failure, else Warning if either side carries
    errors, else Success of ``f(left.value, right.value)``.
    """
    errors = left.errors + right.errors
    if left.is_failure() or right.is_failure():
        return Failure(errors)
    value = f(left.value, right.value)
    return Warning(errors, value) if errors else Success(value)


def collect_graded(results: Iterable[Graded[T]]) -> Graded[list[T]]:
    """Collect outcomes into one outcome of a list, accumulating every error.

    Unlike a fail-fast sequence, all results are inspected.
    """
    values: list[T] = []
    errors: list[DecodeError] = []
    failed = False
    for r in results:
        match r:
            case Success(v):
                values.append(v)
            case Warning(es, v):
                errors.extend(es)
                values.append(v)
            case Failure(es):
                errors.extend(es)
                failed = True
    if failed:
        return Failure(tuple(errors))
    if errors:
        return Warning(tuple(errors), values)
    return Success(values)
