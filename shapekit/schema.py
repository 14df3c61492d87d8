"""Schema builders.

Thin constructors over the AST for writing schemas by hand:

    from shapekit import schema as S

    person = S.struct({
        "name": S.string,
        "age": S.optional(S.number),
        "tags": S.array(S.string),
    })

Builders only assemble AST nodes; they carry no behaviour of their own.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from shapekit.ast import (
    AST,
    AnnotationKey,
    Declaration,
    Element,
    Enums,
    Field,
    Lazy,
    Literal,
    LiteralValue,
    Refinement,
    Struct,
    Symbol,
    Tuple,
    TypeAlias,
    UniqueSymbol,
    allow_unexpected,
    any_keyword,
    append_element,
    append_rest,
    bigint_keyword,
    boolean_keyword,
    disallow_unexpected,
    extend,
    get_fields,
    keyof,
    never_keyword,
    number_keyword,
    object_keyword,
    omit,
    partial,
    pick,
    record,
    string_keyword,
    symbol_keyword,
    undefined_keyword,
    union as _union,
    unknown_keyword,
    void_keyword,
    with_annotations,
)
from shapekit.core.errors import Grade
from shapekit.core.validation.filters import Filter
from shapekit.providers.registry import ProviderBundle

string = string_keyword
number = number_keyword
boolean = boolean_keyword
bigint = bigint_keyword
symbol = symbol_keyword
object_ = object_keyword
unknown = unknown_keyword
any_ = any_keyword
never = never_keyword
undefined = undefined_keyword
void = void_keyword


@dataclass(frozen=True, slots=True)
class Optional:
    """Marks a struct field or tuple element as optional."""
    ast: AST


def optional(ast: AST) -> Optional:
    return Optional(ast)


def literal(*values: LiteralValue) -> AST:
    return _union(Literal(v) for v in values)


def unique_symbol(sym: Symbol) -> UniqueSymbol:
    return UniqueSymbol(sym)


def enums(members: Mapping[str, LiteralValue] | type) -> Enums:
    """From a name -> value mapping or a Python ``enum.Enum`` class."""
    if isinstance(members, type):
        return Enums(tuple((m.name, m.value) for m in members))
    return Enums(tuple(members.items()))


def union(*members: AST) -> AST:
    return _union(members)


def nullable(ast: AST) -> AST:
    return _union([Literal(None), ast])


# =============================================================================
# Tuples and arrays
# =============================================================================

def tuple_(*items: AST | Optional) -> Tuple:
    return Tuple(tuple(
        Element(i.ast, True) if isinstance(i, Optional) else Element(i) for i in items
    ))


def element(tup: AST, ast: AST) -> Tuple:
    return append_element(tup, Element(ast))


def optional_element(tup: AST, ast: AST) -> Tuple:
    return append_element(tup, Element(ast, True))


def rest(tup: AST, ast: AST) -> Tuple:
    return append_rest(tup, ast)


def array(item: AST) -> Tuple:
    return Tuple((), rest=item)


def non_empty_array(item: AST) -> Tuple:
    return Tuple((Element(item),), rest=item)


# =============================================================================
# Structs
# =============================================================================

def struct(fields: Mapping[str | Symbol, AST | Optional], *, readonly: bool = True) -> Struct:
    return Struct(tuple(
        Field(key, value.ast, is_optional=True, is_readonly=readonly) if isinstance(value, Optional)
        else Field(key, value, is_readonly=readonly)
        for key, value in fields.items()
    ))


# =============================================================================
# Refinements, aliases, declarations
# =============================================================================

def refine(ast: AST, predicate: Callable[[Any], bool], meta: Any = None, *,
           on_failure: Grade = Grade.FAILURE) -> Refinement:
    return Refinement(ast, predicate, meta, on_failure)


def filter(ast: AST, f: Filter, *, on_failure: Grade = Grade.FAILURE, message: str | None = None) -> AST:
    return f.apply(ast, on_failure=on_failure, message=message)


def lazy(thunk: Callable[[], AST]) -> Lazy:
    return Lazy(thunk)


def type_alias(expansion: AST, *type_parameters: AST, annotations: Mapping[Any, Any] | None = None) -> TypeAlias:
    return TypeAlias(type_parameters, expansion, annotations=annotations or {})


def declare(id: str, *type_parameters: AST, provider: ProviderBundle | None = None,
            annotations: Mapping[Any, Any] | None = None) -> Declaration:
    return Declaration(id, type_parameters, provider, annotations=annotations or {})


def annotate(ast: AST, **annotations: Any) -> AST:
    """Attach annotations by well-known key name (``title=...``) or any custom name."""
    resolved = {}
    for name, value in annotations.items():
        try:
            resolved[AnnotationKey(name)] = value
        except ValueError:
            resolved[name] = value
    return with_annotations(ast, resolved)


__all__ = [
    "string", "number", "boolean", "bigint", "symbol", "object_", "unknown", "any_",
    "never", "undefined", "void",
    "Optional", "optional", "literal", "unique_symbol", "enums", "union", "nullable",
    "tuple_", "element", "optional_element", "rest", "array", "non_empty_array",
    "struct", "record", "pick", "omit", "partial", "extend", "keyof", "get_fields",
    "allow_unexpected", "disallow_unexpected",
    "refine", "filter", "lazy", "type_alias", "declare", "annotate",
]
