"""Immutable sets of a parameter type.

The wire form is any list, tuple, set or frozenset; the value form is a
``frozenset``. Encoding produces a list, sorted when the elements allow it.
"""
from __future__ import annotations

import random
from typing import Any, Callable

from shapekit.ast import AST, AnnotationKey, Declaration
from shapekit.core.config import Settings
from shapekit.core.errors import Graded, collect_graded, decode_error, failure, type_mismatch
from shapekit.providers.registry import ProviderBundle, default_registry

FROZENSET_ID = "shapekit/FrozenSet"

_WIRE_TYPES = (list, tuple, set, frozenset)


def _decoder(item: Callable[[Any], Graded]) -> Callable[[Any], Graded]:
    def decode(value: Any) -> Graded:
        if not isinstance(value, _WIRE_TYPES):
            return failure(type_mismatch("FrozenSet", value))
        decoded = collect_graded(item(v).prefixed(i) for i, v in enumerate(value))
        if not decoded.has_value():
            return decoded
        try:
            return decoded.map(frozenset)
        except TypeError as exc:
            return failure(decode_error("elements must be hashable", value, reason=str(exc)))

    return decode


def _guard(item: Callable[[Any], bool]) -> Callable[[Any], bool]:
    return lambda value: isinstance(value, frozenset) and all(item(v) for v in value)


def _encoder(item: Callable[[Any], Any]) -> Callable[[Any], list[Any]]:
    def encode(value: frozenset) -> list[Any]:
        items = [item(v) for v in value]
        try:
            return sorted(items)
        except TypeError:
            # mixed or unorderable elements keep iteration order
            return items

    return encode


def _pretty(item: Callable[[Any], str]) -> Callable[[Any], str]:
    return lambda value: "FrozenSet([" + ",".join(sorted(item(v) for v in value)) + "])"


def _arbitrary(
    item: Callable[[random.Random, int], Any], *, settings: Settings
) -> Callable[[random.Random, int], frozenset]:
    max_size = settings.GENERATOR_MAX_REST_LENGTH

    def generate(rng: random.Random, depth: int) -> frozenset:
        size = rng.randint(0, max_size)
        return frozenset(item(rng, depth) for _ in range(size))

    return generate


FROZENSET_BUNDLE = ProviderBundle(
    decoder=_decoder,
    guard=_guard,
    encoder=_encoder,
    pretty=_pretty,
    arbitrary=_arbitrary,
)


def frozenset_of(item: AST) -> Declaration:
    return Declaration(FROZENSET_ID, (item,), annotations={AnnotationKey.IDENTIFIER: "FrozenSet"})


default_registry.register(FROZENSET_ID, FROZENSET_BUNDLE)
