"""Encoder engine: decoded value -> wire value.

Encoders assume their input was produced by the matching decoder (or is
otherwise valid); they do not validate. Unions dispatch on member guards over
the value form.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from shapekit.ast import (
    AST,
    AnnotationKey,
    Enums,
    Keyword,
    Literal,
    Refinement,
    Struct,
    Tuple,
    Union,
    UniqueSymbol,
)
from shapekit.core.config import Settings
from shapekit.providers.registry import ProviderRegistry

from .base import Interpreter
from .guard import GuardInterpreter

EncodeFn = Callable[[Any], Any]


def _identity(value: Any) -> Any:
    return value


class EncoderInterpreter(Interpreter):
    artifact = "encoder"
    hook_key = AnnotationKey.ENCODER_HOOK

    def __init__(self, registry: ProviderRegistry | None = None, settings: Settings | None = None):
        super().__init__(registry, settings)
        self.guards = GuardInterpreter(self.registry, self.settings)

    def literal(self, node: Literal) -> EncodeFn:
        return _identity

    def keyword(self, node: Keyword) -> EncodeFn:
        return _identity

    def unique_symbol(self, node: UniqueSymbol) -> EncodeFn:
        return _identity

    def enums(self, node: Enums) -> EncodeFn:
        return _identity

    def tuple_(self, node: Tuple) -> EncodeFn:
        elements = [self.go(e.ast) for e in node.elements]
        rest = self.go(node.rest) if node.rest is not None else _identity

        def encode(value: Any) -> list[Any]:
            out = [element(item) for element, item in zip(elements, value)]
            out.extend(rest(item) for item in value[len(elements):])
            return out

        return encode

    def struct(self, node: Struct) -> EncodeFn:
        fields = [(f.key, self.go(f.ast)) for f in node.fields]
        declared = {f.key for f in node.fields}
        signatures = [(self.guards.go(s.key), self.go(s.value)) for s in node.index_signatures]

        def encode(value: Mapping[Any, Any]) -> dict[Any, Any]:
            out = {key: field_encoder(value[key]) for key, field_encoder in fields if key in value}
            for key, item in value.items():
                if key in declared:
                    continue
                encoder = next((ve for kg, ve in signatures if kg(key)), _identity)
                out[key] = encoder(item)
            return out

        return encode

    def union(self, node: Union) -> EncodeFn:
        members = [(self.guards.go(m), self.go(m)) for m in node.members]

        def encode(value: Any) -> Any:
            for guard, member in members:
                if guard(value):
                    return member(value)
            return value

        return encode

    def refinement(self, node: Refinement) -> EncodeFn:
        return self.go(node.source)


@dataclass(frozen=True, slots=True)
class Encoder:
    """Derived encoder for one schema."""
    ast: AST
    encoder: EncodeFn

    def encode(self, value: Any) -> Any:
        return self.encoder(value)

    def __call__(self, value: Any) -> Any:
        return self.encoder(value)


def encoder_for(ast: AST, *, registry: ProviderRegistry | None = None, settings: Settings | None = None) -> Encoder:
    return Encoder(ast, EncoderInterpreter(registry, settings).derive(ast))


def encode(ast: AST, value: Any) -> Any:
    return encoder_for(ast).encode(value)
