"""Built-in data types.

Importing this package registers the declaration providers of the built-in
types in ``shapekit.providers.default_registry``. ``option``, ``chunk`` and
``parse`` are type aliases and need no registration.
"""
from .json_value import JSON_VALUE_BUNDLE, JSON_VALUE_ID, is_json, json_value
from .frozenset import FROZENSET_BUNDLE, FROZENSET_ID, frozenset_of
from .parsers import parse, parse_float
from .option import Nothing, Option, Some, nothing, option
from .chunk import chunk

__all__ = [
    "JSON_VALUE_BUNDLE",
    "JSON_VALUE_ID",
    "is_json",
    "json_value",
    "FROZENSET_BUNDLE",
    "FROZENSET_ID",
    "frozenset_of",
    "parse",
    "parse_float",
    "Nothing",
    "Option",
    "Some",
    "nothing",
    "option",
    "chunk",
]
