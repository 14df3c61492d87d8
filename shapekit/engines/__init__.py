"""Artifact engines.

Each ``*_for(ast)`` call runs one derivation over the AST and returns a small
wrapper around the derived function:

    decoder_for(ast).decode(value)      -> Success | Warning | Failure
    guard_for(ast).is_valid(value)      -> bool
    encoder_for(ast).encode(value)      -> wire value
    pretty_for(ast).pretty(value)       -> str
    arbitrary_for(ast).sample(rng)      -> value
    optics_for(ast)["a"]["b"].lens      -> Lens

Derivation raises SchemaError subclasses for programmer errors (for example a
Declaration without a provider); using the derived artifacts never does.
"""
from .base import Interpreter, keyword_accepts, literal_equals
from .decoder import Decoder, DecoderInterpreter, decode, decode_or_raise, decoder_for
from .guard import Guard, GuardInterpreter, guard_for, is_valid
from .encoder import Encoder, EncoderInterpreter, encode, encoder_for
from .pretty import Pretty, PrettyInterpreter, format_value, pretty, pretty_for
from .arbitrary import Arbitrary, ArbitraryInterpreter, arbitrary_for
from .optics import Lens, Optics, optics_for

__all__ = [
    "Interpreter",
    "keyword_accepts",
    "literal_equals",
    "Decoder",
    "DecoderInterpreter",
    "decode",
    "decode_or_raise",
    "decoder_for",
    "Guard",
    "GuardInterpreter",
    "guard_for",
    "is_valid",
    "Encoder",
    "EncoderInterpreter",
    "encode",
    "encoder_for",
    "Pretty",
    "PrettyInterpreter",
    "format_value",
    "pretty",
    "pretty_for",
    "Arbitrary",
    "ArbitraryInterpreter",
    "arbitrary_for",
    "Lens",
    "Optics",
    "optics_for",
]
