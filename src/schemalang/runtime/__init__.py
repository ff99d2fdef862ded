"""
Decode / encode runtime.
"""

from .result import DecodeResult, OutcomeTag
from .environment import DecodeEnvironment
from .decoder import (
    Direction, ParserCompiler, describe,
    decode, encode, is_valid, decode_or_raise, encode_or_raise,
)
