"""Generator engine: random values inhabiting a schema.

A derived generator is a function ``(rng, depth) -> value``. ``depth`` counts
the Lazy nodes entered so far; past ``GENERATOR_MAX_DEPTH`` optional fields
and elements are omitted, rest runs are empty and unions prefer members that
do not recurse, so recursive schemas terminate. All randomness comes from the
caller's ``random.Random``.
"""
from __future__ import annotations

import random
import string
import sys
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from shapekit.ast import (
    AST,
    AnnotationKey,
    Declaration,
    Enums,
    Keyword,
    KeywordKind,
    Lazy,
    Literal,
    Refinement,
    Struct,
    Symbol,
    Tuple,
    TypeAlias,
    Union,
    UniqueSymbol,
)
from shapekit.core.config import Settings
from shapekit.core.errors import GenerationError
from shapekit.core.logging import engine_logger
from shapekit.providers.registry import ProviderRegistry

from .base import Interpreter

log = engine_logger()

GenerateFn = Callable[[random.Random, int], Any]

_ALPHABET = string.ascii_letters + string.digits


def _mentions_lazy(ast: AST) -> bool:
    """Whether a Lazy node is reachable without resolving any thunk."""
    match ast:
        case Lazy():
            return True
        case Tuple(elements=elements, rest=rest):
            return any(_mentions_lazy(e.ast) for e in elements) or (rest is not None and _mentions_lazy(rest))
        case Struct(fields=fields, index_signatures=sigs):
            return any(_mentions_lazy(f.ast) for f in fields) or any(_mentions_lazy(s.value) for s in sigs)
        case Union(members=members):
            return any(_mentions_lazy(m) for m in members)
        case Refinement(source=source):
            return _mentions_lazy(source)
        case TypeAlias(type_parameters=params, expansion=expansion):
            return any(_mentions_lazy(p) for p in params) or _mentions_lazy(expansion)
        case Declaration(type_parameters=params):
            return any(_mentions_lazy(p) for p in params)
        case _:
            return False


class ArbitraryInterpreter(Interpreter):
    artifact = "arbitrary"
    hook_key = AnnotationKey.ARBITRARY_HOOK

    def __init__(self, registry: ProviderRegistry | None = None, settings: Settings | None = None):
        super().__init__(registry, settings)
        self.max_depth = self.settings.GENERATOR_MAX_DEPTH
        self.max_rest = self.settings.GENERATOR_MAX_REST_LENGTH
        self.max_string = self.settings.GENERATOR_MAX_STRING_LENGTH
        self.max_retries = self.settings.GENERATOR_MAX_RETRIES

    def forward(self, cell: list[Any]) -> GenerateFn:
        return lambda rng, depth: cell[0](rng, depth + 1)

    def provide(self, factory: Callable[..., Any], parameters: list[Any]) -> GenerateFn:
        # generator factories also receive the active size bounds
        return factory(*parameters, settings=self.settings)

    def literal(self, node: Literal) -> GenerateFn:
        value = node.value
        return lambda rng, depth: value

    def keyword(self, node: Keyword) -> GenerateFn:
        max_string = self.max_string

        def gen_string(rng: random.Random, depth: int) -> str:
            return "".join(rng.choice(_ALPHABET) for _ in range(rng.randint(0, max_string)))

        def gen_number(rng: random.Random, depth: int) -> int | float:
            if rng.random() < 0.5:
                return rng.randint(-1000, 1000)
            return rng.uniform(-1000.0, 1000.0)

        def gen_unknown(rng: random.Random, depth: int) -> Any:
            return rng.choice((gen_string, gen_number, gen_boolean, gen_none))(rng, depth)

        def gen_boolean(rng: random.Random, depth: int) -> bool:
            return rng.random() < 0.5

        def gen_none(rng: random.Random, depth: int) -> None:
            return None

        def gen_never(rng: random.Random, depth: int) -> Any:
            raise GenerationError("Cannot generate a value of type never")

        generators: dict[KeywordKind, GenerateFn] = {
            KeywordKind.STRING: gen_string,
            KeywordKind.NUMBER: gen_number,
            KeywordKind.BOOLEAN: gen_boolean,
            KeywordKind.BIGINT: lambda rng, depth: rng.randint(-sys.maxsize, sys.maxsize),
            KeywordKind.SYMBOL: lambda rng, depth: Symbol(gen_string(rng, depth)),
            KeywordKind.OBJECT: lambda rng, depth: rng.choice((dict, list))(),
            KeywordKind.UNKNOWN: gen_unknown,
            KeywordKind.ANY: gen_unknown,
            KeywordKind.NEVER: gen_never,
            KeywordKind.UNDEFINED: gen_none,
            KeywordKind.VOID: gen_none,
        }
        return generators[node.kind]

    def unique_symbol(self, node: UniqueSymbol) -> GenerateFn:
        symbol = node.symbol
        return lambda rng, depth: symbol

    def enums(self, node: Enums) -> GenerateFn:
        values = [v for _, v in node.members]
        return lambda rng, depth: rng.choice(values)

    def tuple_(self, node: Tuple) -> GenerateFn:
        elements = [(e.is_optional, self.go(e.ast)) for e in node.elements]
        rest = self.go(node.rest) if node.rest is not None else None
        max_depth, max_rest = self.max_depth, self.max_rest

        def generate(rng: random.Random, depth: int) -> list[Any]:
            out: list[Any] = []
            for optional, element in elements:
                # optional elements form a suffix; stop at the first one skipped
                if optional and (depth > max_depth or rng.random() < 0.5):
                    break
                out.append(element(rng, depth))
            if rest is not None and len(out) == len(elements) and depth <= max_depth:
                out.extend(rest(rng, depth) for _ in range(rng.randint(0, max_rest)))
            return out

        return generate

    def struct(self, node: Struct) -> GenerateFn:
        fields = [(f.key, f.is_optional, self.go(f.ast)) for f in node.fields]
        declared = {f.key for f in node.fields}
        signatures = [(self.go(s.key), self.go(s.value)) for s in node.index_signatures]
        max_depth, max_rest = self.max_depth, self.max_rest

        def generate(rng: random.Random, depth: int) -> dict[Any, Any]:
            out: dict[Any, Any] = {}
            for key, optional, field_gen in fields:
                if optional and (depth > max_depth or rng.random() < 0.5):
                    continue
                out[key] = field_gen(rng, depth)
            if depth <= max_depth:
                for key_gen, value_gen in signatures:
                    for _ in range(rng.randint(0, min(2, max_rest))):
                        key = key_gen(rng, depth)
                        if key not in declared and key not in out:
                            out[key] = value_gen(rng, depth)
            return out

        return generate

    def union(self, node: Union) -> GenerateFn:
        members = [self.go(m) for m in node.members]
        finite = [gen for m, gen in zip(node.members, members) if not _mentions_lazy(m)] or members
        max_depth = self.max_depth

        def generate(rng: random.Random, depth: int) -> Any:
            pool = members if depth <= max_depth else finite
            return rng.choice(pool)(rng, depth)

        return generate

    def refinement(self, node: Refinement) -> GenerateFn:
        source = self.go(node.source)
        predicate, meta, retries = node.predicate, node.meta, self.max_retries

        def generate(rng: random.Random, depth: int) -> Any:
            for _ in range(retries):
                value = source(rng, depth)
                if predicate(value):
                    return value
            log.warning("generation_exhausted", refinement=str(meta), attempts=retries)
            raise GenerationError(f"No value satisfying {meta} after {retries} attempts",
                meta=str(meta), attempts=retries)

        return generate


@dataclass(frozen=True, slots=True)
class Arbitrary:
    """Derived generator for one schema."""
    ast: AST
    generate: GenerateFn

    def sample(self, rng: random.Random | None = None) -> Any:
        return self.generate(rng if rng is not None else random.Random(), 0)

    def stream(self, rng: random.Random | None = None) -> Iterator[Any]:
        """Infinite lazy stream of samples. Re-seed ``rng`` to restart it."""
        rng = rng if rng is not None else random.Random()
        while True:
            yield self.generate(rng, 0)

    def examples(self, count: int = 10, seed: int | None = None) -> list[Any]:
        rng = random.Random(seed)
        return [self.generate(rng, 0) for _ in range(count)]


def arbitrary_for(ast: AST, *, registry: ProviderRegistry | None = None, settings: Settings | None = None) -> Arbitrary:
    return Arbitrary(ast, ArbitraryInterpreter(registry, settings).derive(ast))
