"""Schema AST

Immutable node taxonomy, annotations and structural combinators. Nodes are
plain frozen dataclasses; interpreters in ``shapekit.engines`` derive artifacts
from them.
"""
from .annotations import (
    AnnotationKey,
    Annotations,
    EMPTY_ANNOTATIONS,
    get_annotation,
    merge,
)

from .nodes import (
    AST,
    NODE_TYPES,
    Symbol,
    LiteralValue,
    KeywordKind,
    Literal,
    Keyword,
    UniqueSymbol,
    Enums,
    Element,
    Tuple,
    Field,
    IndexSignature,
    Struct,
    Union,
    Refinement,
    Declaration,
    TypeAlias,
    Lazy,
    is_node,
    node_tag,
    node_size,
    with_annotations,
    string_keyword,
    number_keyword,
    boolean_keyword,
    bigint_keyword,
    symbol_keyword,
    object_keyword,
    unknown_keyword,
    any_keyword,
    never_keyword,
    undefined_keyword,
    void_keyword,
)

from .combinators import (
    union,
    get_fields,
    keyof,
    pick,
    omit,
    partial,
    extend,
    record,
    append_element,
    append_rest,
    allow_unexpected,
    disallow_unexpected,
    is_keyword,
)

__all__ = [
    "AnnotationKey",
    "Annotations",
    "EMPTY_ANNOTATIONS",
    "get_annotation",
    "merge",
    "AST",
    "NODE_TYPES",
    "Symbol",
    "LiteralValue",
    "KeywordKind",
    "Literal",
    "Keyword",
    "UniqueSymbol",
    "Enums",
    "Element",
    "Tuple",
    "Field",
    "IndexSignature",
    "Struct",
    "Union",
    "Refinement",
    "Declaration",
    "TypeAlias",
    "Lazy",
    "is_node",
    "node_tag",
    "node_size",
    "with_annotations",
    "string_keyword",
    "number_keyword",
    "boolean_keyword",
    "bigint_keyword",
    "symbol_keyword",
    "object_keyword",
    "unknown_keyword",
    "any_keyword",
    "never_keyword",
    "undefined_keyword",
    "void_keyword",
    "union",
    "get_fields",
    "keyof",
    "pick",
    "omit",
    "partial",
    "extend",
    "record",
    "append_element",
    "append_rest",
    "allow_unexpected",
    "disallow_unexpected",
    "is_keyword",
]
