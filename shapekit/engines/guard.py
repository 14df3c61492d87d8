"""Guard engine: ``value -> bool`` membership tests."""
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
from shapekit.core.errors import Grade
from shapekit.providers.registry import ProviderRegistry

from .base import Interpreter, is_sequence_input, keyword_accepts, literal_equals

GuardFn = Callable[[Any], bool]


class GuardInterpreter(Interpreter):
    artifact = "guard"
    hook_key = AnnotationKey.GUARD_HOOK

    def literal(self, node: Literal) -> GuardFn:
        expected = node.value
        return lambda value: literal_equals(expected, value)

    def keyword(self, node: Keyword) -> GuardFn:
        kind = node.kind
        return lambda value: keyword_accepts(kind, value)

    def unique_symbol(self, node: UniqueSymbol) -> GuardFn:
        symbol = node.symbol
        return lambda value: value is symbol

    def enums(self, node: Enums) -> GuardFn:
        values = tuple(v for _, v in node.members)
        return lambda value: any(literal_equals(v, value) for v in values)

    def tuple_(self, node: Tuple) -> GuardFn:
        elements = [(e.is_optional, self.go(e.ast)) for e in node.elements]
        rest = self.go(node.rest) if node.rest is not None else None
        allow_unexpected = node.allow_unexpected

        def guard(value: Any) -> bool:
            if not is_sequence_input(value):
                return False
            for i, (optional, element) in enumerate(elements):
                if i >= len(value):
                    if not optional:
                        return False
                elif not element(value[i]):
                    return False
            extra = value[len(elements):]
            if rest is not None:
                return all(rest(v) for v in extra)
            return allow_unexpected or not extra

        return guard

    def struct(self, node: Struct) -> GuardFn:
        fields = [(f.key, f.is_optional, self.go(f.ast)) for f in node.fields]
        declared = {f.key for f in node.fields}
        signatures = [(self.go(s.key), self.go(s.value)) for s in node.index_signatures]
        allow_unexpected = node.allow_unexpected

        def guard(value: Any) -> bool:
            if not isinstance(value, Mapping):
                return False
            for key, optional, field_guard in fields:
                if key in value:
                    if not field_guard(value[key]):
                        return False
                elif not optional:
                    return False
            for key, item in value.items():
                if key in declared:
                    continue
                signature = next((vg for kg, vg in signatures if kg(key)), None)
                if signature is not None:
                    if not signature(item):
                        return False
                elif not allow_unexpected:
                    return False
            return True

        return guard

    def union(self, node: Union) -> GuardFn:
        members = [self.go(m) for m in node.members]
        return lambda value: any(member(value) for member in members)

    def refinement(self, node: Refinement) -> GuardFn:
        source = self.go(node.source)
        predicate = node.predicate
        if node.on_failure is Grade.WARNING:
            return source
        return lambda value: source(value) and bool(predicate(value))


@dataclass(frozen=True, slots=True)
class Guard:
    """Derived membership test for one schema."""
    ast: AST
    guard: GuardFn

    def is_valid(self, value: Any) -> bool:
        return self.guard(value)

    def __call__(self, value: Any) -> bool:
        return self.guard(value)


def guard_for(ast: AST, *, registry: ProviderRegistry | None = None, settings: Settings | None = None) -> Guard:
    return Guard(ast, GuardInterpreter(registry, settings).derive(ast))


def is_valid(ast: AST, value: Any) -> bool:
    return guard_for(ast).is_valid(value)
