"""Parse aliases: a wire shape decoded, then converted into a value shape.

``parse(source, target, decode, encode)`` builds a TypeAlias over ``source``
whose hooks give every engine the right behaviour:

- decoder: decode ``source``, convert with ``decode``, then decode ``target``
- encoder: encode ``target``, convert back with ``encode``, encode ``source``
- guard / pretty / arbitrary: those of ``target`` (the value form)
"""
from __future__ import annotations

import math
import random
from typing import Any, Callable

from shapekit.ast import AST, AnnotationKey, TypeAlias, number_keyword, string_keyword
from shapekit.core.errors import Graded, failure, parse_failed, success


def parse(
    source: AST,
    target: AST,
    decode: Callable[[Any], Graded],
    encode: Callable[[Any], Any],
    *,
    identifier: str | None = None,
) -> TypeAlias:
    def decoder_hook(source_decoder, target_decoder):
        return lambda value: source_decoder(value).flat_map(decode).flat_map(target_decoder)

    def encoder_hook(source_encoder, target_encoder):
        return lambda value: source_encoder(encode(target_encoder(value)))

    annotations = {
        AnnotationKey.DECODER_HOOK: decoder_hook,
        AnnotationKey.ENCODER_HOOK: encoder_hook,
        AnnotationKey.GUARD_HOOK: lambda source_guard, target_guard: target_guard,
        AnnotationKey.PRETTY_HOOK: lambda source_pretty, target_pretty: target_pretty,
        AnnotationKey.ARBITRARY_HOOK: lambda source_arbitrary, target_arbitrary: target_arbitrary,
    }
    if identifier:
        annotations[AnnotationKey.IDENTIFIER] = identifier
    return TypeAlias((source, target), source, annotations=annotations)


def _string_to_float(value: str) -> Graded:
    try:
        parsed = float(value)
    except ValueError as exc:
        return failure(parse_failed("string", "number", value, reason=str(exc)))
    if math.isnan(parsed):
        return failure(parse_failed("string", "number", value, reason="not a number"))
    return success(parsed)


def _float_to_string(value: float) -> str:
    return repr(float(value))


def _finite_float(rng: random.Random, depth: int) -> float:
    return rng.uniform(-1e6, 1e6)


def parse_float(source: AST = string_keyword) -> TypeAlias:
    """Strings holding a float, decoded to ``float`` and encoded back via ``repr``."""
    alias = parse(source, number_keyword, _string_to_float, _float_to_string, identifier="FloatFromString")
    return TypeAlias(alias.type_parameters, alias.expansion,
        annotations={**alias.annotations, AnnotationKey.ARBITRARY_HOOK: lambda *_: _finite_float})
