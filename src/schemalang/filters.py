"""
Filters

Refinement factories. Each wraps a schema in a Refinement whose label
names the constraint, so a violation reads `<value> did not satisfy is(<label>)`.
"""

import re
from typing import Any, Callable, Optional, Pattern, Union

from .ast.nodes import AST, Refinement
from .shared.annotations import Annotations
from .shared.values import is_infinite, is_integer, is_nan, is_number


def _refine(ast: AST, predicate: Callable[[Any], bool], label: str,
            annotations: Optional[Annotations]) -> Refinement:
    return Refinement(ast, predicate, Annotations(label=label).merge(annotations))


# ==================== STRINGS / SEQUENCES ====================

def min_length(ast: AST, n: int, annotations: Optional[Annotations] = None) -> Refinement:
    return _refine(ast, lambda v: len(v) >= n, f"MinLength({n})", annotations)


def max_length(ast: AST, n: int, annotations: Optional[Annotations] = None) -> Refinement:
    return _refine(ast, lambda v: len(v) <= n, f"MaxLength({n})", annotations)


def length(ast: AST, n: int, annotations: Optional[Annotations] = None) -> Refinement:
    """Exactly `n` long: MinLength(n) is checked before MaxLength(n)."""
    return max_length(min_length(ast, n), n, annotations)


def non_empty(ast: AST, annotations: Optional[Annotations] = None) -> Refinement:
    return min_length(ast, 1, annotations)


def starts_with(ast: AST, prefix: str, annotations: Optional[Annotations] = None) -> Refinement:
    return _refine(ast, lambda v: v.startswith(prefix), f"StartsWith({prefix})", annotations)


def ends_with(ast: AST, suffix: str, annotations: Optional[Annotations] = None) -> Refinement:
    return _refine(ast, lambda v: v.endswith(suffix), f"EndsWith({suffix})", annotations)


def includes(ast: AST, needle: str, annotations: Optional[Annotations] = None) -> Refinement:
    return _refine(ast, lambda v: needle in v, f"Includes({needle})", annotations)


def pattern(ast: AST, regex: Union[str, Pattern], annotations: Optional[Annotations] = None) -> Refinement:
    """Matches anywhere in the string (anchor the regex to match the whole value)."""
    compiled = re.compile(regex) if isinstance(regex, str) else regex
    return _refine(ast, lambda v: compiled.search(v) is not None,
                   f"Regex({compiled.pattern})", annotations)


# ==================== NUMBERS ====================

def less_than(ast: AST, bound: Any, annotations: Optional[Annotations] = None) -> Refinement:
    return _refine(ast, lambda v: v < bound, f"LessThan({bound})", annotations)


def less_than_or_equal_to(ast: AST, bound: Any, annotations: Optional[Annotations] = None) -> Refinement:
    return _refine(ast, lambda v: v <= bound, f"LessThanOrEqualTo({bound})", annotations)


def greater_than(ast: AST, bound: Any, annotations: Optional[Annotations] = None) -> Refinement:
    return _refine(ast, lambda v: v > bound, f"GreaterThan({bound})", annotations)


def greater_than_or_equal_to(ast: AST, bound: Any, annotations: Optional[Annotations] = None) -> Refinement:
    return _refine(ast, lambda v: v >= bound, f"GreaterThanOrEqualTo({bound})", annotations)


def _is_int(value: Any) -> bool:
    if is_integer(value):
        return True
    return is_number(value) and not is_nan(value) and not is_infinite(value) and float(value).is_integer()


def int_(ast: AST, annotations: Optional[Annotations] = None) -> Refinement:
    return _refine(ast, _is_int, "Int", annotations)


def non_nan(ast: AST, annotations: Optional[Annotations] = None) -> Refinement:
    """Turns the NaN warning of `number` into a hard failure."""
    return _refine(ast, lambda v: not is_nan(v), "NonNaN", annotations)


def finite(ast: AST, annotations: Optional[Annotations] = None) -> Refinement:
    return _refine(ast, lambda v: not is_nan(v) and not is_infinite(v), "Finite", annotations)


# ==================== OBJECTS ====================

def instance_of(ast: AST, cls: type, annotations: Optional[Annotations] = None) -> Refinement:
    return _refine(ast, lambda v: isinstance(v, cls), f"InstanceOf({cls.__name__})", annotations)
