"""Decoder engine: ``value -> Graded``.

Decoders never raise for bad data. Struct and tuple decoders accumulate every
error of every field before returning; errors are ordered by declaration, and
each carries the path from the root to the offending value.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from shapekit.ast import (
    AST,
    AnnotationKey,
    Enums,
    Keyword,
    KeywordKind,
    Literal,
    Refinement,
    Struct,
    Tuple,
    Union,
    UniqueSymbol,
    get_annotation,
)
from shapekit.core.config import Settings
from shapekit.core.errors import (
    DecodeError,
    Failure,
    Graded,
    MissingProviderError,
    PathSegment,
    Success,
    Warning,
    enum_mismatch,
    failure,
    literal_mismatch,
    missing_index,
    missing_key,
    refinement_failed,
    success,
    type_mismatch,
    unexpected_index,
    unexpected_key,
    union_member,
)
from shapekit.core.validation.errors import DecodeFailedError
from shapekit.providers.registry import ProviderRegistry

from .base import Interpreter, is_sequence_input, keyword_accepts, literal_equals
from .guard import GuardInterpreter

DecodeFn = Callable[[Any], Graded]


class _Collector:
    """Accumulates child outcomes for a struct or tuple decode."""

    __slots__ = ("errors", "failed")

    def __init__(self):
        self.errors: list[DecodeError] = []
        self.failed = False

    def take(self, result: Graded, segment: PathSegment) -> tuple[bool, Any]:
        match result.prefixed(segment):
            case Success(value):
                return True, value
            case Warning(errors, value):
                self.errors.extend(errors)
                return True, value
            case Failure(errors):
                self.errors.extend(errors)
                self.failed = True
                return False, None

    def fail(self, error: DecodeError) -> None:
        self.errors.append(error)
        self.failed = True

    def result(self, value: Any) -> Graded:
        if self.failed:
            return Failure(tuple(self.errors))
        if self.errors:
            return Warning(tuple(self.errors), value)
        return Success(value)


class DecoderInterpreter(Interpreter):
    artifact = "decoder"
    hook_key = AnnotationKey.DECODER_HOOK

    def __init__(self, registry: ProviderRegistry | None = None, settings: Settings | None = None):
        super().__init__(registry, settings)
        self.guards = GuardInterpreter(self.registry, self.settings)

    def literal(self, node: Literal) -> DecodeFn:
        expected = node.value

        def decode(value: Any) -> Graded:
            if literal_equals(expected, value):
                return success(value)
            return failure(literal_mismatch(expected, value))

        return decode

    def keyword(self, node: Keyword) -> DecodeFn:
        kind = node.kind
        expected = kind.value

        def decode(value: Any) -> Graded:
            if kind is not KeywordKind.NEVER and keyword_accepts(kind, value):
                if kind is KeywordKind.NUMBER and isinstance(value, float) and math.isnan(value):
                    return Warning((refinement_failed("not(isNaN)", value),), value)
                return success(value)
            return failure(type_mismatch(expected, value))

        return decode

    def unique_symbol(self, node: UniqueSymbol) -> DecodeFn:
        symbol = node.symbol

        def decode(value: Any) -> Graded:
            if value is symbol:
                return success(value)
            return failure(literal_mismatch(symbol, value))

        return decode

    def enums(self, node: Enums) -> DecodeFn:
        members = node.members

        def decode(value: Any) -> Graded:
            if any(literal_equals(v, value) for _, v in members):
                return success(value)
            return failure(enum_mismatch(members, value))

        return decode

    def tuple_(self, node: Tuple) -> DecodeFn:
        elements = [(e.is_optional, self.go(e.ast)) for e in node.elements]
        rest = self.go(node.rest) if node.rest is not None else None
        allow_unexpected = node.allow_unexpected

        def decode(value: Any) -> Graded:
            if not is_sequence_input(value):
                return failure(type_mismatch("array", value))
            out: list[Any] = []
            acc = _Collector()
            for i, (optional, element) in enumerate(elements):
                if i >= len(value):
                    if not optional:
                        acc.fail(missing_index(i))
                    continue
                ok, item = acc.take(element(value[i]), i)
                if ok:
                    out.append(item)
            for i in range(len(elements), len(value)):
                if rest is not None:
                    ok, item = acc.take(rest(value[i]), i)
                    if ok:
                        out.append(item)
                elif allow_unexpected:
                    out.append(value[i])
                else:
                    acc.fail(unexpected_index(i, value[i]))
            return acc.result(out)

        return decode

    def struct(self, node: Struct) -> DecodeFn:
        fields = [(f.key, f.is_optional, self.go(f.ast)) for f in node.fields]
        declared = {f.key for f in node.fields}
        signatures = [(self.guards.go(s.key), self.go(s.value)) for s in node.index_signatures]
        allow_unexpected = node.allow_unexpected

        def decode(value: Any) -> Graded:
            if not isinstance(value, Mapping):
                return failure(type_mismatch("object", value))
            out: dict[Any, Any] = {}
            acc = _Collector()
            for key, optional, field_decoder in fields:
                if key not in value:
                    if not optional:
                        acc.fail(missing_key(key))
                    continue
                ok, item = acc.take(field_decoder(value[key]), key)
                if ok:
                    out[key] = item
            for key, item in value.items():
                if key in declared:
                    continue
                signature = next((vd for kg, vd in signatures if kg(key)), None)
                if signature is not None:
                    ok, decoded = acc.take(signature(item), key)
                    if ok:
                        out[key] = decoded
                elif not allow_unexpected:
                    acc.fail(unexpected_key(key, item))
            return acc.result(out)

        return decode

    def union(self, node: Union) -> DecodeFn:
        members = [(self._member_guard(m), self.go(m)) for m in node.members]

        def decode(value: Any) -> Graded:
            for guard, member in members:
                if guard is not None and guard(value):
                    return member(value)
            # No guard matched: a member whose wire form differs from its
            # value form (providers, parse aliases) may still decode.
            results = [member(value) for _, member in members]
            for result in results:
                if result.has_value():
                    return result
            return Failure(tuple(
                union_member(i, result.errors, value) for i, result in enumerate(results)
            ))

        return decode

    def _member_guard(self, member: AST) -> Callable[[Any], bool] | None:
        # Decoder-only providers are tried in the fallback pass
        try:
            return self.guards.go(member)
        except MissingProviderError:
            return None

    def refinement(self, node: Refinement) -> DecodeFn:
        source = self.go(node.source)
        predicate, meta, grade = node.predicate, node.meta, node.on_failure
        message = get_annotation(node, AnnotationKey.MESSAGE)

        def decode(value: Any) -> Graded:
            result = source(value)
            if not result.has_value() or predicate(result.value):
                return result
            return result.with_errors((refinement_failed(meta, result.value, message),), grade)

        return decode


@dataclass(frozen=True, slots=True)
class Decoder:
    """Derived decoder for one schema."""
    ast: AST
    decoder: DecodeFn

    def decode(self, value: Any) -> Graded:
        return self.decoder(value)

    def decode_or_raise(self, value: Any) -> Any:
        """Decoded value, or DecodeFailedError on Failure. Warnings are accepted."""
        result = self.decoder(value)
        if result.is_failure():
            raise DecodeFailedError(result.errors)
        return result.value

    def __call__(self, value: Any) -> Graded:
        return self.decoder(value)


def decoder_for(ast: AST, *, registry: ProviderRegistry | None = None, settings: Settings | None = None) -> Decoder:
    return Decoder(ast, DecoderInterpreter(registry, settings).derive(ast))


def decode(ast: AST, value: Any) -> Graded:
    return decoder_for(ast).decode(value)


def decode_or_raise(ast: AST, value: Any) -> Any:
    return decoder_for(ast).decode_or_raise(value)
