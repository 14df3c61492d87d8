"""Public package API for shapekit."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("shapekit")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

from .ast import AST, AnnotationKey, Symbol
from .core.errors import Failure, Grade, Graded, SchemaError, Success, Warning
from .core.validation import DecodeFailedError
from .engines import (
    Lens,
    arbitrary_for,
    decode,
    decode_or_raise,
    decoder_for,
    encode,
    encoder_for,
    guard_for,
    is_valid,
    optics_for,
    pretty,
    pretty_for,
)
from .providers import ProviderBundle, ProviderRegistry, default_registry
from . import schema

__all__ = [
    "__version__",
    "AST",
    "AnnotationKey",
    "Symbol",
    "Failure",
    "Grade",
    "Graded",
    "SchemaError",
    "Success",
    "Warning",
    "DecodeFailedError",
    "Lens",
    "arbitrary_for",
    "decode",
    "decode_or_raise",
    "decoder_for",
    "encode",
    "encoder_for",
    "guard_for",
    "is_valid",
    "optics_for",
    "pretty",
    "pretty_for",
    "ProviderBundle",
    "ProviderRegistry",
    "default_registry",
    "schema",
]
