"""Annotation keys and lookup.

Annotations are an opaque, read-only mapping attached to every node. The core
only reads a few well-known keys (type-alias hooks, custom messages); any other
key is stored and returned untouched.
"""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Union


class AnnotationKey(str, Enum):
    """Well-known annotation keys."""
    IDENTIFIER = "identifier"
    TITLE = "title"
    DESCRIPTION = "description"
    MESSAGE = "message"
    JSON_SCHEMA = "json_schema"
    # Type-alias hooks: callables receiving the derived artifacts of the
    # alias's type parameters and returning the artifact for the alias.
    DECODER_HOOK = "decoder_hook"
    GUARD_HOOK = "guard_hook"
    ENCODER_HOOK = "encoder_hook"
    PRETTY_HOOK = "pretty_hook"
    ARBITRARY_HOOK = "arbitrary_hook"


Key = Union[AnnotationKey, str]
Annotations = Mapping[Key, Any]

EMPTY_ANNOTATIONS: Annotations = MappingProxyType({})


def freeze(annotations: Annotations | None) -> Annotations:
    """Return a read-only copy of ``annotations``."""
    if not annotations:
        return EMPTY_ANNOTATIONS
    if isinstance(annotations, MappingProxyType):
        return annotations
    return MappingProxyType(dict(annotations))


def merge(base: Annotations, extra: Annotations | None) -> Annotations:
    """Right-biased merge of two annotation mappings."""
    if not extra:
        return base
    return MappingProxyType({**base, **extra})


def get_annotation(node: Any, key: Key, default: Any = None) -> Any:
    """Look up ``key`` on a node's annotations. Unknown keys yield ``default``."""
    annotations = getattr(node, "annotations", None) or EMPTY_ANNOTATIONS
    if key in annotations:
        return annotations[key]
    # enum members hash by name, so look up the other spelling explicitly
    if isinstance(key, AnnotationKey):
        return annotations.get(key.value, default)
    try:
        return annotations.get(AnnotationKey(key), default)
    except ValueError:
        return default
