"""JSON values: None, bool, finite numbers, str, lists and str-keyed dicts."""
from __future__ import annotations

import json
import math
import random
from collections.abc import Mapping
from typing import Any

from shapekit.ast import AnnotationKey, Declaration
from shapekit.core.config import Settings
from shapekit.core.errors import Graded, failure, success, type_mismatch
from shapekit.providers.registry import ProviderBundle, default_registry

JSON_VALUE_ID = "shapekit/JsonValue"


def is_json(value: Any) -> bool:
    match value:
        case None | bool() | str():
            return True
        case int() | float():
            return math.isfinite(value)
        case list() | tuple():
            return all(is_json(v) for v in value)
        case Mapping():
            return all(isinstance(k, str) and is_json(v) for k, v in value.items())
        case _:
            return False


def _to_json(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    if isinstance(value, Mapping):
        return {k: _to_json(v) for k, v in value.items()}
    return value


def _decode(value: Any) -> Graded:
    if is_json(value):
        return success(_to_json(value))
    return failure(type_mismatch("JsonValue", value))


def _pretty(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def _generate(rng: random.Random, depth: int, settings: Settings) -> Any:
    scalars = (
        lambda: None,
        lambda: rng.random() < 0.5,
        lambda: rng.randint(-1000, 1000),
        lambda: rng.uniform(-1000.0, 1000.0),
        lambda: "".join(rng.choice("abcdefghij") for _ in range(rng.randint(0, settings.GENERATOR_MAX_STRING_LENGTH))),
    )
    if depth >= 2 or rng.random() < 0.6:
        return rng.choice(scalars)()
    size = rng.randint(0, min(3, settings.GENERATOR_MAX_REST_LENGTH))
    if rng.random() < 0.5:
        return [_generate(rng, depth + 1, settings) for _ in range(size)]
    return {f"k{i}": _generate(rng, depth + 1, settings) for i in range(size)}


JSON_VALUE_BUNDLE = ProviderBundle(
    decoder=lambda: _decode,
    guard=lambda: is_json,
    encoder=lambda: _to_json,
    pretty=lambda: _pretty,
    arbitrary=lambda *, settings: (lambda rng, depth: _generate(rng, depth, settings)),
)

json_value = Declaration(JSON_VALUE_ID, annotations={AnnotationKey.IDENTIFIER: "JsonValue"})

default_registry.register(JSON_VALUE_ID, JSON_VALUE_BUNDLE)
