"""Immutable sequences: a list on the wire, a ``tuple`` once decoded.

The alias carries the item and the wire array as its type parameters, so each
hook receives both artifacts and reuses the array's accumulating decoder and
bounded generator.
"""
from __future__ import annotations

import random
from typing import Any, Callable

from shapekit.ast import AST, AnnotationKey, Tuple, TypeAlias
from shapekit.core.errors import Graded


def _decoder(item: Callable[[Any], Graded], array: Callable[[Any], Graded]) -> Callable[[Any], Graded]:
    return lambda value: array(value).map(tuple)


def _guard(item: Callable[[Any], bool], array: Callable[[Any], bool]) -> Callable[[Any], bool]:
    return lambda value: isinstance(value, tuple) and array(value)


def _encoder(item: Callable[[Any], Any], array: Callable[[Any], list]) -> Callable[[Any], list]:
    return array


def _pretty(item: Callable[[Any], str], array: Callable[[Any], str]) -> Callable[[Any], str]:
    return lambda value: "Chunk(" + ", ".join(item(v) for v in value) + ")"


def _arbitrary(
    item: Callable[[random.Random, int], Any], array: Callable[[random.Random, int], list]
) -> Callable[[random.Random, int], tuple]:
    return lambda rng, depth: tuple(array(rng, depth))


def chunk(item: AST) -> TypeAlias:
    array = Tuple((), rest=item)
    return TypeAlias((item, array), array, annotations={
        AnnotationKey.IDENTIFIER: "Chunk",
        AnnotationKey.DECODER_HOOK: _decoder,
        AnnotationKey.GUARD_HOOK: _guard,
        AnnotationKey.ENCODER_HOOK: _encoder,
        AnnotationKey.PRETTY_HOOK: _pretty,
        AnnotationKey.ARBITRARY_HOOK: _arbitrary,
    })
