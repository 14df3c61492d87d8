"""Structural Combinators

Every combinator returns a new AST built from an existing one's parts; nodes
are never mutated. Applying a struct-only or tuple-only combinator to the wrong
kind of node is a programmer error and raises InvalidSchemaError immediately.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Sequence

from shapekit.core.errors import InvalidSchemaError
from shapekit.core.logging import ast_logger

from .nodes import (
    AST,
    Element,
    Field,
    IndexSignature,
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
    never_keyword,
    node_tag,
    number_keyword,
)

log = ast_logger()


def union(members: Iterable[AST]) -> AST:
    """Flattened, order-preserving union.

    No members yields ``never``; a single member is returned as is.
    """
    flat: list[AST] = []
    for member in members:
        if isinstance(member, Union):
            flat.extend(member.members)
        else:
            flat.append(member)
    if not flat:
        return never_keyword
    if len(flat) == 1:
        return flat[0]
    return Union(tuple(flat))


# =============================================================================
# Field resolution
# =============================================================================

def get_fields(ast: AST) -> tuple[Field, ...]:
    """Declared fields visible through Lazy, Refinement and TypeAlias wrapping.

    For a union, the fields whose keys appear in every member (in the first
    member's order), typed as the union of the members' field types and
    optional if any member declares them optional.
    """
    match ast:
        case Struct(fields=fields):
            return fields
        case Lazy():
            return get_fields(ast.resolve())
        case Refinement(source=source):
            return get_fields(source)
        case TypeAlias(expansion=expansion):
            return get_fields(expansion)
        case Union(members=members):
            per_member = [get_fields(m) for m in members]
            first, others = per_member[0], per_member[1:]
            common: list[Field] = []
            for f in first:
                matches = [next((g for g in fs if g.key == f.key), None) for fs in others]
                if any(m is None for m in matches):
                    continue
                common.append(Field(
                    key=f.key,
                    ast=union([f.ast, *(m.ast for m in matches)]),
                    is_optional=f.is_optional or any(m.is_optional for m in matches),
                    is_readonly=f.is_readonly and all(m.is_readonly for m in matches),
                ))
            return tuple(common)
        case _:
            return ()


def _key_ast(key: str | Symbol) -> AST:
    return UniqueSymbol(key) if isinstance(key, Symbol) else Literal(key)


def keyof(ast: AST) -> AST:
    """Union of the keys a value of ``ast`` is known to carry."""
    match ast:
        case Struct(fields=fields, index_signatures=sigs):
            return union([*(_key_ast(f.key) for f in fields), *(s.key for s in sigs)])
        case Tuple(elements=elements, rest=rest):
            keys: list[AST] = [Literal(i) for i in range(len(elements))]
            if rest is not None:
                keys.append(number_keyword)
            return union(keys)
        case Lazy():
            return keyof(ast.resolve())
        case Refinement(source=source):
            return keyof(source)
        case TypeAlias(expansion=expansion):
            return keyof(expansion)
        case Union():
            return union([_key_ast(f.key) for f in get_fields(ast)])
        case _:
            return never_keyword


# =============================================================================
# Struct combinators
# =============================================================================

def _require_struct(ast: AST, op: str) -> Struct:
    if not isinstance(ast, Struct):
        raise InvalidSchemaError(f"`{op}` is not supported on {node_tag(ast)}", op=op, node=node_tag(ast))
    return ast


def _require_fields(ast: AST, op: str) -> tuple[Field, ...]:
    """Fields of a struct-shaped node; anything else is rejected."""
    inner = ast
    while isinstance(inner, (Lazy, Refinement, TypeAlias)):
        match inner:
            case Lazy():
                inner = inner.resolve()
            case Refinement(source=source):
                inner = source
            case TypeAlias(expansion=expansion):
                inner = expansion
    if isinstance(inner, Union):
        for member in inner.members:
            _require_fields(member, op)
    else:
        _require_struct(inner, op)
    return get_fields(ast)


def pick(ast: AST, keys: Sequence[Any]) -> Struct:
    """Struct of the named fields, in declaration order."""
    wanted = set(keys)
    fields = _require_fields(ast, "pick")
    missing = wanted - {f.key for f in fields}
    if missing:
        raise InvalidSchemaError(f"`pick` refers to unknown keys: {sorted(map(str, missing))}", keys=sorted(map(str, missing)))
    return Struct(tuple(f for f in fields if f.key in wanted))


def omit(ast: AST, keys: Sequence[Any]) -> Struct:
    """Struct of every field except the named ones."""
    unwanted = set(keys)
    return Struct(tuple(f for f in _require_fields(ast, "omit") if f.key not in unwanted))


def partial(ast: AST) -> AST:
    """Make every struct field / tuple element optional."""
    match ast:
        case Struct(fields=fields):
            return replace(ast, fields=tuple(replace(f, is_optional=True) for f in fields))
        case Tuple(elements=elements):
            return replace(ast, elements=tuple(replace(e, is_optional=True) for e in elements))
        case Union(members=members):
            return union([partial(m) for m in members])
        case Lazy():
            return Lazy(lambda: partial(ast.resolve()))
        case _:
            return ast


def extend(ast: AST, that: AST) -> Struct:
    """Concatenate fields and index signatures of two structs.

    Duplicate keys are rejected by Struct itself.
    """
    left, right = _require_struct(ast, "extend"), _require_struct(that, "extend")
    log.debug("extend", left_fields=len(left.fields), right_fields=len(right.fields))
    return Struct(
        left.fields + right.fields,
        left.index_signatures + right.index_signatures,
        allow_unexpected=left.allow_unexpected and right.allow_unexpected,
    )


def record(key: AST, value: AST) -> Struct:
    """Struct with a single index signature."""
    return Struct((), (IndexSignature(key, value),))


# =============================================================================
# Tuple combinators
# =============================================================================

def _require_tuple(ast: AST, op: str) -> Tuple:
    if not isinstance(ast, Tuple):
        raise InvalidSchemaError(f"`{op}` is not supported on {node_tag(ast)}", op=op, node=node_tag(ast))
    return ast


def append_element(ast: AST, element: Element) -> Tuple:
    """Append a positional element.

    Rejected after a rest element, and a required element after an optional one.
    """
    tup = _require_tuple(ast, "element")
    if tup.rest is not None:
        raise InvalidSchemaError("An element cannot follow a rest element")
    return replace(tup, elements=tup.elements + (element,))


def append_rest(ast: AST, rest: AST) -> Tuple:
    """Set the variadic tail of a tuple. A tuple has at most one rest element."""
    tup = _require_tuple(ast, "rest")
    if tup.rest is not None:
        raise InvalidSchemaError("A rest element cannot follow another rest element")
    return replace(tup, rest=rest)


# =============================================================================
# Unexpected keys / indexes
# =============================================================================

def allow_unexpected(ast: AST) -> AST:
    if isinstance(ast, (Struct, Tuple)):
        return replace(ast, allow_unexpected=True)
    return ast


def disallow_unexpected(ast: AST) -> AST:
    if isinstance(ast, (Struct, Tuple)):
        return replace(ast, allow_unexpected=False)
    return ast


def is_keyword(ast: AST, kind: KeywordKind) -> bool:
    return isinstance(ast, Keyword) and ast.kind is kind
