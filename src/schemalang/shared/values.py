"""
Runtime Value Model

Python values the engine decodes: the `UNDEFINED` sentinel, interned
`Symbol` identifiers, and the runtime tag checks shared by every
interpreter (number/boolean/sequence/mapping detection, literal equality,
value rendering for messages).
"""

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Hashable

import numpy as np

from ..utils.config import INTEGRAL_FLOAT_LIMIT


class _Undefined:
    """Singleton standing for an explicitly undefined value."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo: Any):
        return self

    def __reduce__(self):
        return (_Undefined, ())


UNDEFINED = _Undefined()


@dataclass(frozen=True)
class Symbol:
    """
    Interned identifier with value-equality semantics.

    Two symbols built from the same key are the same symbol; no process-wide
    registry is involved.
    """
    key: str

    def __str__(self) -> str:
        return f"Symbol({self.key})"

    def __repr__(self) -> str:
        return f"Symbol({self.key!r})"


# ==================== RUNTIME TAG CHECKS ====================

def is_boolean(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def is_number(value: Any) -> bool:
    """int/float (bool excluded) and numpy numeric scalars."""
    if is_boolean(value):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def is_integer(value: Any) -> bool:
    if is_boolean(value):
        return False
    return isinstance(value, (int, np.integer))


def is_nan(value: Any) -> bool:
    return isinstance(value, (float, np.floating)) and bool(np.isnan(value))


def is_infinite(value: Any) -> bool:
    return isinstance(value, (float, np.floating)) and bool(np.isinf(value))


def is_sequence(value: Any) -> bool:
    """Tuple-schema input: list, tuple or ndarray (strings are never sequences)."""
    return isinstance(value, (list, tuple, np.ndarray))


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_object(value: Any) -> bool:
    if value is None or value is UNDEFINED:
        return False
    return not isinstance(value, (str, bytes, bool, int, float, Symbol, np.generic))


def literal_equals(a: Any, b: Any) -> bool:
    """Literal equality that never conflates booleans with numbers."""
    if is_boolean(a) or is_boolean(b):
        return is_boolean(a) and is_boolean(b) and bool(a) == bool(b)
    if a is None or b is None:
        return a is None and b is None
    if is_number(a) or is_number(b):
        return is_number(a) and is_number(b) and a == b
    return type(a) is type(b) and a == b


# ==================== RENDERING ====================

def _json_default(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    if value is UNDEFINED:
        return "undefined"
    return str(value)


def _plain_numbers(value: Any) -> Any:
    """Integral floats as ints, recursively through lists, tuples and dict values."""
    if isinstance(value, (float, np.floating)):
        if math.isfinite(value) and float(value).is_integer() and abs(value) < INTEGRAL_FLOAT_LIMIT:
            return int(value)
        return float(value)
    if isinstance(value, (list, tuple)):
        return [_plain_numbers(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain_numbers(v) for k, v in value.items()}
    return value


def format_value(value: Any) -> str:
    """Render a value for a diagnostic message (JSON-flavoured)."""
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, Symbol):
        return str(value)
    if isinstance(value, (float, np.floating)) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    try:
        return json.dumps(
            _plain_numbers(value), default=_json_default, ensure_ascii=False, separators=(",", ":")
        )
    except (TypeError, ValueError, RecursionError):
        return repr(value)


def format_key(key: Hashable) -> str:
    """Render a struct key or tuple index as a path segment (symbols render as Symbol(key))."""
    return str(key)


def literal_text(value: Any) -> str:
    """Text of a literal spliced into a template literal."""
    if value is None:
        return "null"
    if is_boolean(value):
        return "true" if value else "false"
    return str(value)
