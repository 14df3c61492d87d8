"""Optics derivation: a tree of lenses mirroring a schema's structure.

    optics = optics_for(person)
    city = optics["address"]["city"].lens
    moved = city.set(value, "Lyon")      # new root, ``value`` untouched

Refinement and TypeAlias wrappers are looked through. Unions, Declarations,
Lazy nodes and scalars are leaves: no lens is derived below them.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterator

from shapekit.ast import AST, Refinement, Struct, Tuple, TypeAlias, node_tag
from shapekit.core.errors import PathSegment
from shapekit.core.logging import engine_logger

log = engine_logger()


@dataclass(frozen=True, slots=True)
class Lens:
    """Focus on the value at ``path`` inside a root value.

    Lenses compare equal by path; composition is path concatenation, hence
    associative with the empty lens as identity.
    """
    path: tuple[PathSegment, ...] = ()

    @classmethod
    def of(cls, *path: PathSegment) -> Lens:
        return cls(tuple(path))

    def at(self, segment: PathSegment) -> Lens:
        return Lens(self.path + (segment,))

    def compose(self, other: Lens) -> Lens:
        return Lens(self.path + other.path)

    def get(self, root: Any) -> Any:
        value = root
        for segment in self.path:
            value = value[segment]
        return value

    def set(self, root: Any, value: Any) -> Any:
        """Return a copy of ``root`` with the focus replaced. ``root`` is not mutated."""
        return _set_in(root, self.path, value)

    def modify(self, root: Any, f: Callable[[Any], Any]) -> Any:
        return self.set(root, f(self.get(root)))


def _set_in(container: Any, path: tuple[PathSegment, ...], value: Any) -> Any:
    if not path:
        return value
    head, tail = path[0], path[1:]
    child = _set_in(container[head], tail, value)
    if isinstance(container, tuple):
        return container[:head] + (child,) + container[head + 1:]
    if isinstance(container, list):
        copy = list(container)
        copy[head] = child
        return copy
    copy = dict(container)
    copy[head] = child
    return copy


@dataclass(frozen=True, slots=True)
class Optics:
    """One node of the optics tree: the schema at this position and its lens."""
    ast: AST
    lens: Lens
    children: Mapping[PathSegment, Optics] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def __getitem__(self, segment: PathSegment) -> Optics:
        return self.children[segment]

    def __contains__(self, segment: object) -> bool:
        return segment in self.children

    def __iter__(self) -> Iterator[PathSegment]:
        return iter(self.children)

    def lenses(self) -> Iterator[Lens]:
        """Every lens in the subtree, depth first, parents before children."""
        yield self.lens
        for child in self.children.values():
            yield from child.lenses()


def _strip(ast: AST) -> AST:
    while isinstance(ast, (Refinement, TypeAlias)):
        ast = ast.source if isinstance(ast, Refinement) else ast.expansion
    return ast


def _derive(ast: AST, lens: Lens) -> Optics:
    inner = _strip(ast)
    match inner:
        case Struct(fields=fields):
            children = {f.key: _derive(f.ast, lens.at(f.key)) for f in fields}
        case Tuple(elements=elements):
            children = {i: _derive(e.ast, lens.at(i)) for i, e in enumerate(elements)}
        case _:
            children = {}
    return Optics(ast, lens, MappingProxyType(children))


def optics_for(ast: AST) -> Optics:
    log.debug("derive", artifact="optics", root=node_tag(ast))
    return _derive(ast, Lens())
