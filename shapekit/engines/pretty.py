"""Pretty engine: deterministic, compact, JSON-like rendering of values."""
from __future__ import annotations

import json
import math
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
    Symbol,
    Tuple,
    Union,
    UniqueSymbol,
)
from shapekit.core.config import Settings
from shapekit.providers.registry import ProviderRegistry

from .base import Interpreter
from .guard import GuardInterpreter

PrettyFn = Callable[[Any], str]


def format_value(value: Any) -> str:
    """Render any value, falling back to ``repr`` for non-JSON objects."""
    match value:
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case float() if math.isnan(value):
            return "NaN"
        case float() if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        case int() | float() | str():
            return json.dumps(value)
        case Symbol():
            return repr(value)
        case Mapping():
            return "{" + ",".join(f"{format_key(k)}:{format_value(v)}" for k, v in value.items()) + "}"
        case list() | tuple():
            return "[" + ",".join(format_value(v) for v in value) + "]"
        case _:
            return repr(value)


def format_key(key: Any) -> str:
    return json.dumps(key) if isinstance(key, str) else format_value(key)


class PrettyInterpreter(Interpreter):
    artifact = "pretty"
    hook_key = AnnotationKey.PRETTY_HOOK

    def __init__(self, registry: ProviderRegistry | None = None, settings: Settings | None = None):
        super().__init__(registry, settings)
        self.guards = GuardInterpreter(self.registry, self.settings)

    def literal(self, node: Literal) -> PrettyFn:
        return format_value

    def keyword(self, node: Keyword) -> PrettyFn:
        return format_value

    def unique_symbol(self, node: UniqueSymbol) -> PrettyFn:
        return format_value

    def enums(self, node: Enums) -> PrettyFn:
        return format_value

    def tuple_(self, node: Tuple) -> PrettyFn:
        elements = [self.go(e.ast) for e in node.elements]
        rest = self.go(node.rest) if node.rest is not None else format_value

        def pretty(value: Any) -> str:
            parts = [element(item) for element, item in zip(elements, value)]
            parts.extend(rest(item) for item in value[len(elements):])
            return "[" + ",".join(parts) + "]"

        return pretty

    def struct(self, node: Struct) -> PrettyFn:
        fields = [(f.key, self.go(f.ast)) for f in node.fields]
        declared = {f.key for f in node.fields}
        signatures = [(self.guards.go(s.key), self.go(s.value)) for s in node.index_signatures]

        def pretty(value: Mapping[Any, Any]) -> str:
            parts = [f"{format_key(key)}:{field_pretty(value[key])}" for key, field_pretty in fields if key in value]
            for key, item in value.items():
                if key in declared:
                    continue
                renderer = next((vp for kg, vp in signatures if kg(key)), format_value)
                parts.append(f"{format_key(key)}:{renderer(item)}")
            return "{" + ",".join(parts) + "}"

        return pretty

    def union(self, node: Union) -> PrettyFn:
        members = [(self.guards.go(m), self.go(m)) for m in node.members]

        def pretty(value: Any) -> str:
            for guard, member in members:
                if guard(value):
                    return member(value)
            return format_value(value)

        return pretty

    def refinement(self, node: Refinement) -> PrettyFn:
        return self.go(node.source)


@dataclass(frozen=True, slots=True)
class Pretty:
    """Derived pretty printer for one schema."""
    ast: AST
    printer: PrettyFn

    def pretty(self, value: Any) -> str:
        return self.printer(value)

    def __call__(self, value: Any) -> str:
        return self.printer(value)


def pretty_for(ast: AST, *, registry: ProviderRegistry | None = None, settings: Settings | None = None) -> Pretty:
    return Pretty(ast, PrettyInterpreter(registry, settings).derive(ast))


def pretty(ast: AST, value: Any) -> str:
    return pretty_for(ast).pretty(value)
