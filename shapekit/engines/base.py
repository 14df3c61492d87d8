"""Shared traversal skeleton for artifact derivation.

Each engine subclasses Interpreter and supplies one method per structural node
kind. The base class owns what every engine handles the same way:

- Lazy: memoized per node identity, with a forwarding artifact installed
  before the thunk is resolved so self-reference terminates
- Declaration: artifact factory from the node's provider or the registry
- TypeAlias: artifact hook from annotations, else the expansion

An Interpreter instance is one derivation: its memo table lives only as long
as the ``*_for`` call that created it.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar

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
    get_annotation,
    node_tag,
)
from shapekit.core.config import Settings, get_settings
from shapekit.core.errors import MissingProviderError, UnsupportedNodeError
from shapekit.core.logging import engine_logger, provider_logger
from shapekit.providers.registry import ProviderRegistry, default_registry

log = engine_logger()
plog = provider_logger()


# =============================================================================
# Runtime type checks shared by guard and decoder
# =============================================================================

_PRIMITIVE_TYPES = (type(None), bool, int, float, complex, str, bytes, Symbol)


def keyword_accepts(kind: KeywordKind, value: Any) -> bool:
    """Whether ``value`` inhabits the keyword type ``kind``."""
    match kind:
        case KeywordKind.STRING:
            return isinstance(value, str)
        case KeywordKind.NUMBER:
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        case KeywordKind.BOOLEAN:
            return isinstance(value, bool)
        case KeywordKind.BIGINT:
            return isinstance(value, int) and not isinstance(value, bool)
        case KeywordKind.SYMBOL:
            return isinstance(value, Symbol)
        case KeywordKind.OBJECT:
            return not isinstance(value, _PRIMITIVE_TYPES)
        case KeywordKind.UNDEFINED | KeywordKind.VOID:
            return value is None
        case KeywordKind.UNKNOWN | KeywordKind.ANY:
            return True
        case _:
            return False


def literal_equals(expected: Any, actual: Any) -> bool:
    """Strict equality: same type and equal value (``True`` is not ``1``)."""
    return type(expected) is type(actual) and expected == actual


def is_sequence_input(value: Any) -> bool:
    return isinstance(value, (list, tuple))


# =============================================================================
# Interpreter
# =============================================================================

class Interpreter(ABC):
    """Base class for engines. One instance per derivation."""

    artifact: ClassVar[str]
    hook_key: ClassVar[AnnotationKey]

    def __init__(self, registry: ProviderRegistry | None = None, settings: Settings | None = None):
        self.registry = default_registry if registry is None else registry
        self.settings = settings or get_settings()
        self._memo: dict[int, tuple[Lazy, Any]] = {}

    def derive(self, ast: AST) -> Any:
        """Derive the root artifact, logging one event per derivation."""
        log.debug("derive", artifact=self.artifact, root=node_tag(ast))
        return self.go(ast)

    def go(self, ast: AST) -> Any:
        match ast:
            case Lazy():
                return self._lazy(ast)
            case Declaration():
                return self._declaration(ast)
            case TypeAlias():
                return self._type_alias(ast)
            case Literal():
                return self.literal(ast)
            case Keyword():
                return self.keyword(ast)
            case UniqueSymbol():
                return self.unique_symbol(ast)
            case Enums():
                return self.enums(ast)
            case Tuple():
                return self.tuple_(ast)
            case Struct():
                return self.struct(ast)
            case Union():
                return self.union(ast)
            case Refinement():
                return self.refinement(ast)
            case _:
                raise UnsupportedNodeError(ast, self.artifact)

    # -- shared handling ------------------------------------------------------

    def forward(self, cell: list[Any]) -> Callable[..., Any]:
        """Artifact standing in for a Lazy node until its thunk is derived."""
        return lambda *args: cell[0](*args)

    def _lazy(self, node: Lazy) -> Any:
        key = id(node)
        if key in self._memo:
            return self._memo[key][1]
        cell: list[Any] = []
        forwarding = self.forward(cell)
        self._memo[key] = (node, forwarding)
        cell.append(self.go(node.resolve()))
        return forwarding

    def _declaration(self, node: Declaration) -> Any:
        if node.provider is not None:
            factory = node.provider.factory_for(self.artifact)
            if factory is None:
                raise MissingProviderError(self.artifact, node.id)
        else:
            factory = self.registry.resolve(node.id, self.artifact)
        plog.debug("declaration", artifact=self.artifact, declaration_id=node.id,
            parameters=len(node.type_parameters))
        return self.provide(factory, [self.go(p) for p in node.type_parameters])

    def provide(self, factory: Callable[..., Any], parameters: list[Any]) -> Any:
        """Call a provider factory with the derived parameter artifacts."""
        return factory(*parameters)

    def _type_alias(self, node: TypeAlias) -> Any:
        hook = get_annotation(node, self.hook_key)
        if hook is not None:
            return hook(*(self.go(p) for p in node.type_parameters))
        return self.go(node.expansion)

    # -- per-engine rules -----------------------------------------------------

    @abstractmethod
    def literal(self, node: Literal) -> Any: ...

    @abstractmethod
    def keyword(self, node: Keyword) -> Any: ...

    @abstractmethod
    def unique_symbol(self, node: UniqueSymbol) -> Any: ...

    @abstractmethod
    def enums(self, node: Enums) -> Any: ...

    @abstractmethod
    def tuple_(self, node: Tuple) -> Any: ...

    @abstractmethod
    def struct(self, node: Struct) -> Any: ...

    @abstractmethod
    def union(self, node: Union) -> Any: ...

    @abstractmethod
    def refinement(self, node: Refinement) -> Any: ...
