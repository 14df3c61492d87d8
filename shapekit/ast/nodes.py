from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from shapekit.core.errors import Grade, InvalidSchemaError

from .annotations import EMPTY_ANNOTATIONS, Annotations, freeze

if TYPE_CHECKING:
    from shapekit.providers.registry import ProviderBundle


class Symbol:
    """A unique token. Two symbols are equal only if they are the same object.

    ``Symbol.for_(key)`` returns the same interned symbol for the same key.
    """

    __slots__ = ("description",)

    _registry: dict[str, Symbol] = {}
    _lock = threading.Lock()

    def __init__(self, description: str = ""):
        self.description = description

    @classmethod
    def for_(cls, key: str) -> Symbol:
        with cls._lock:
            if key not in cls._registry:
                cls._registry[key] = cls(key)
            return cls._registry[key]

    def __repr__(self) -> str:
        return f"Symbol({self.description})"


LiteralValue = str | int | float | bool | None


class KeywordKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    BIGINT = "bigint"
    SYMBOL = "symbol"
    OBJECT = "object"
    UNKNOWN = "unknown"
    ANY = "any"
    NEVER = "never"
    UNDEFINED = "undefined"
    VOID = "void"


def _init_annotations(node: Any) -> None:
    object.__setattr__(node, "annotations", freeze(node.annotations))


@dataclass(frozen=True, slots=True)
class Literal:
    value: LiteralValue
    annotations: Annotations = field(default_factory=lambda: EMPTY_ANNOTATIONS)

    def __post_init__(self):
        if not isinstance(self.value, (str, int, float, bool)) and self.value is not None:
            raise InvalidSchemaError(f"Literal value must be str/int/float/bool/None, got {type(self.value).__name__}")
        _init_annotations(self)


@dataclass(frozen=True, slots=True)
class Keyword:
    kind: KeywordKind
    annotations: Annotations = field(default_factory=lambda: EMPTY_ANNOTATIONS)

    def __post_init__(self):
        object.__setattr__(self, "kind", KeywordKind(self.kind))
        _init_annotations(self)


@dataclass(frozen=True, slots=True)
class UniqueSymbol:
    symbol: Symbol
    annotations: Annotations = field(default_factory=lambda: EMPTY_ANNOTATIONS)

    def __post_init__(self):
        if not isinstance(self.symbol, Symbol):
            raise InvalidSchemaError("UniqueSymbol requires a Symbol")
        _init_annotations(self)


@dataclass(frozen=True, slots=True)
class Enums:
    members: tuple[tuple[str, LiteralValue], ...]
    annotations: Annotations = field(default_factory=lambda: EMPTY_ANNOTATIONS)

    def __post_init__(self):
        members = tuple((str(name), value) for name, value in self.members)
        if not members:
            raise InvalidSchemaError("Enums requires at least one member")
        object.__setattr__(self, "members", members)
        _init_annotations(self)


@dataclass(frozen=True, slots=True)
class Element:
    ast: AST
    is_optional: bool = False


@dataclass(frozen=True, slots=True)
class Tuple:
    """Ordered elements, an optional variadic ``rest`` and the excess-index policy."""
    elements: tuple[Element, ...] = ()
    rest: AST | None = None
    allow_unexpected: bool = False
    annotations: Annotations = field(default_factory=lambda: EMPTY_ANNOTATIONS)

    def __post_init__(self):
        elements = tuple(self.elements)
        seen_optional = False
        for idx, element in enumerate(elements):
            if element.is_optional:
                seen_optional = True
            elif seen_optional:
                raise InvalidSchemaError(
                    f"A required element cannot follow an optional element (index {idx})", index=idx
                )
        object.__setattr__(self, "elements", elements)
        _init_annotations(self)


@dataclass(frozen=True, slots=True)
class Field:
    key: str | Symbol
    ast: AST
    is_optional: bool = False
    is_readonly: bool = True


@dataclass(frozen=True, slots=True)
class IndexSignature:
    key: AST
    value: AST


@dataclass(frozen=True, slots=True)
class Struct:
    """Declared fields, index signatures and the unexpected-key policy."""
    fields: tuple[Field, ...] = ()
    index_signatures: tuple[IndexSignature, ...] = ()
    allow_unexpected: bool = False
    annotations: Annotations = field(default_factory=lambda: EMPTY_ANNOTATIONS)

    def __post_init__(self):
        fields = tuple(self.fields)
        seen: set[Any] = set()
        for f in fields:
            if f.key in seen:
                raise InvalidSchemaError(f"Duplicate field key {f.key!r}", key=f.key)
            seen.add(f.key)
        object.__setattr__(self, "fields", fields)
        object.__setattr__(self, "index_signatures", tuple(self.index_signatures))
        _init_annotations(self)

    def field_for(self, key: Any) -> Field | None:
        for f in self.fields:
            if f.key == key:
                return f
        return None


@dataclass(frozen=True, slots=True)
class Union:
    """Two or more members, flattened, in declaration order.

    Build with ``shapekit.ast.union()``, which also collapses degenerate cases.
    """
    members: tuple[AST, ...]
    annotations: Annotations = field(default_factory=lambda: EMPTY_ANNOTATIONS)

    def __post_init__(self):
        members = tuple(self.members)
        if len(members) < 2:
            raise InvalidSchemaError("Union requires at least two members; use union() to normalize")
        if any(isinstance(m, Union) for m in members):
            raise InvalidSchemaError("Union members must not be unions; use union() to flatten")
        object.__setattr__(self, "members", members)
        _init_annotations(self)


@dataclass(frozen=True, slots=True)
class Refinement:
    """Narrows ``source`` with a predicate over already-decoded values.

    ``meta`` describes the predicate for error messages; ``on_failure`` is the
    grade a failed predicate escalates to.
    """
    source: AST
    predicate: Callable[[Any], bool]
    meta: Any = None
    on_failure: Grade = Grade.FAILURE
    annotations: Annotations = field(default_factory=lambda: EMPTY_ANNOTATIONS)

    def __post_init__(self):
        if Grade(self.on_failure) is Grade.SUCCESS:
            raise InvalidSchemaError("Refinement on_failure must be WARNING or FAILURE")
        object.__setattr__(self, "on_failure", Grade(self.on_failure))
        _init_annotations(self)


@dataclass(frozen=True, slots=True)
class Declaration:
    """Opaque type whose artifacts come from a provider rather than structure."""
    id: str
    type_parameters: tuple[AST, ...] = ()
    provider: ProviderBundle | None = None
    annotations: Annotations = field(default_factory=lambda: EMPTY_ANNOTATIONS)

    def __post_init__(self):
        object.__setattr__(self, "type_parameters", tuple(self.type_parameters))
        _init_annotations(self)


@dataclass(frozen=True, slots=True)
class TypeAlias:
    """Named wrapper around ``expansion``; annotations may carry artifact hooks."""
    type_parameters: tuple[AST, ...]
    expansion: AST
    annotations: Annotations = field(default_factory=lambda: EMPTY_ANNOTATIONS)

    def __post_init__(self):
        object.__setattr__(self, "type_parameters", tuple(self.type_parameters))
        _init_annotations(self)


@dataclass(frozen=True, slots=True, eq=False)
class Lazy:
    """Deferred node for self-referential schemas. Compared by identity."""
    thunk: Callable[[], AST]
    annotations: Annotations = field(default_factory=lambda: EMPTY_ANNOTATIONS)

    def __post_init__(self):
        _init_annotations(self)

    def resolve(self) -> AST:
        return self.thunk()


AST = (
    Literal | Keyword | UniqueSymbol | Enums | Tuple | Struct | Union
    | Refinement | Declaration | TypeAlias | Lazy
)

NODE_TYPES = (
    Literal, Keyword, UniqueSymbol, Enums, Tuple, Struct, Union,
    Refinement, Declaration, TypeAlias, Lazy,
)


def is_node(value: Any) -> bool:
    return isinstance(value, NODE_TYPES)


def node_tag(node: AST) -> str:
    return type(node).__name__


def with_annotations(node: AST, annotations: Annotations) -> AST:
    """Return a copy of ``node`` with ``annotations`` merged over its own."""
    from .annotations import merge
    return replace(node, annotations=merge(node.annotations, annotations))


def node_size(node: AST) -> int:
    """Number of nodes reachable without resolving Lazy thunks."""
    match node:
        case Tuple(elements=elements, rest=rest):
            return 1 + sum(node_size(e.ast) for e in elements) + (node_size(rest) if rest is not None else 0)
        case Struct(fields=fields, index_signatures=sigs):
            return (1 + sum(node_size(f.ast) for f in fields)
                + sum(node_size(s.key) + node_size(s.value) for s in sigs))
        case Union(members=members):
            return 1 + sum(node_size(m) for m in members)
        case Refinement(source=source):
            return 1 + node_size(source)
        case TypeAlias(type_parameters=params, expansion=expansion):
            return 1 + sum(node_size(p) for p in params) + node_size(expansion)
        case Declaration(type_parameters=params):
            return 1 + sum(node_size(p) for p in params)
        case _:
            return 1


# Keyword singletons
string_keyword = Keyword(KeywordKind.STRING)
number_keyword = Keyword(KeywordKind.NUMBER)
boolean_keyword = Keyword(KeywordKind.BOOLEAN)
bigint_keyword = Keyword(KeywordKind.BIGINT)
symbol_keyword = Keyword(KeywordKind.SYMBOL)
object_keyword = Keyword(KeywordKind.OBJECT)
unknown_keyword = Keyword(KeywordKind.UNKNOWN)
any_keyword = Keyword(KeywordKind.ANY)
never_keyword = Keyword(KeywordKind.NEVER)
undefined_keyword = Keyword(KeywordKind.UNDEFINED)
void_keyword = Keyword(KeywordKind.VOID)
