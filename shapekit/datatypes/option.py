"""Optional values: ``None`` on the wire, ``Some(value)`` or ``nothing`` once decoded."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from shapekit.ast import AST, AnnotationKey, Literal, TypeAlias, union
from shapekit.core.errors import Failure, Graded, literal_mismatch, success, union_member

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Some(Generic[T]):
    value: T

    def __repr__(self) -> str:
        return f"Some({self.value!r})"


@dataclass(frozen=True, slots=True)
class Nothing:
    def __repr__(self) -> str:
        return "nothing"


nothing = Nothing()

Option = Some | Nothing


def _decoder(item: Callable[[Any], Graded]) -> Callable[[Any], Graded]:
    def decode(value: Any) -> Graded:
        if value is None:
            return success(nothing)
        result = item(value)
        if result.has_value():
            return result.map(Some)
        return Failure((
            union_member(0, (literal_mismatch(None, value),), value),
            union_member(1, result.errors, value),
        ))

    return decode


def _guard(item: Callable[[Any], bool]) -> Callable[[Any], bool]:
    return lambda value: isinstance(value, Nothing) or (isinstance(value, Some) and item(value.value))


def _encoder(item: Callable[[Any], Any]) -> Callable[[Any], Any]:
    return lambda value: item(value.value) if isinstance(value, Some) else None


def _pretty(item: Callable[[Any], str]) -> Callable[[Any], str]:
    return lambda value: f"some({item(value.value)})" if isinstance(value, Some) else "none"


def _arbitrary(item: Callable[[random.Random, int], Any]) -> Callable[[random.Random, int], Any]:
    def generate(rng: random.Random, depth: int) -> Any:
        if rng.random() < 0.5:
            return nothing
        return Some(item(rng, depth))

    return generate


def option(item: AST) -> TypeAlias:
    """``item`` or ``None`` on the wire, decoded to ``Some(item)`` or ``nothing``."""
    return TypeAlias((item,), union([Literal(None), item]), annotations={
        AnnotationKey.IDENTIFIER: "Option",
        AnnotationKey.DECODER_HOOK: _decoder,
        AnnotationKey.GUARD_HOOK: _guard,
        AnnotationKey.ENCODER_HOOK: _encoder,
        AnnotationKey.PRETTY_HOOK: _pretty,
        AnnotationKey.ARBITRARY_HOOK: _arbitrary,
    })
