"""
Construction-time Canonicalization

Rust Pattern: rustc_middle::ty::TyCtxt::mk_* interning constructors

Nodes that have a canonical form are only built through these functions:
- union(): flatten, deduplicate, elide redundant literals, rank by weight
- type_literal(): members ordered by ascending cardinality
- append_element() / append_rest_element(): tuple growth rules
"""

import logging
from typing import List, Optional, Sequence

from ..shared.annotations import EMPTY, Annotations
from ..shared.errors import SchemaError
from ..utils.config import (
    CARDINALITY_BOOLEAN,
    CARDINALITY_COMPOUND,
    CARDINALITY_NEVER,
    CARDINALITY_OBJECT,
    CARDINALITY_SCALAR,
    CARDINALITY_TOP,
    CARDINALITY_UNIT,
    LAZY_UNION_WEIGHT,
)
from .nodes import (
    AST,
    ASTKind,
    Element,
    IndexSignature,
    Literal,
    NEVER_KEYWORD,
    PropertySignature,
    TupleType,
    TypeLiteral,
    Union,
)

logger = logging.getLogger(__name__)


_CARDINALITY = {
    ASTKind.NEVER_KEYWORD: CARDINALITY_NEVER,
    ASTKind.LITERAL: CARDINALITY_UNIT,
    ASTKind.UNDEFINED_KEYWORD: CARDINALITY_UNIT,
    ASTKind.VOID_KEYWORD: CARDINALITY_UNIT,
    ASTKind.UNIQUE_SYMBOL: CARDINALITY_UNIT,
    ASTKind.BOOLEAN_KEYWORD: CARDINALITY_BOOLEAN,
    ASTKind.STRING_KEYWORD: CARDINALITY_SCALAR,
    ASTKind.NUMBER_KEYWORD: CARDINALITY_SCALAR,
    ASTKind.BIGINT_KEYWORD: CARDINALITY_SCALAR,
    ASTKind.SYMBOL_KEYWORD: CARDINALITY_SCALAR,
    ASTKind.OBJECT_KEYWORD: CARDINALITY_OBJECT,
    ASTKind.UNKNOWN_KEYWORD: CARDINALITY_TOP,
    ASTKind.ANY_KEYWORD: CARDINALITY_TOP,
}


def cardinality(ast: AST) -> int:
    """
    Rank of how many values a type admits (lower = narrower, cheaper to check).

    Wrappers delegate: TypeAlias -> type, Refinement -> from, Transform -> to.
    """
    if ast.kind == ASTKind.TYPE_ALIAS:
        return cardinality(ast.type)
    if ast.kind == ASTKind.REFINEMENT:
        return cardinality(ast.from_)
    if ast.kind == ASTKind.TRANSFORM:
        return cardinality(ast.to)
    return _CARDINALITY.get(ast.kind, CARDINALITY_COMPOUND)


def weight(ast: AST) -> int:
    """
    Union ranking heuristic (higher = structurally richer, tried first).

    Lazy nodes get a fixed weight so ranking never forces the thunk.
    """
    if ast.kind == ASTKind.TYPE_ALIAS:
        return weight(ast.type)
    if ast.kind == ASTKind.TUPLE:
        return len(ast.elements) + (1 if ast.rest is not None else 0)
    if ast.kind == ASTKind.TYPE_LITERAL:
        return len(ast.property_signatures) + len(ast.index_signatures)
    if ast.kind == ASTKind.UNION:
        return sum(weight(member) for member in ast.types)
    if ast.kind == ASTKind.LAZY:
        return LAZY_UNION_WEIGHT
    return 0


def _is_string_literal(ast: AST) -> bool:
    return ast.kind == ASTKind.LITERAL and ast.is_string


def _is_number_literal(ast: AST) -> bool:
    return ast.kind == ASTKind.LITERAL and ast.is_numeric


def unify(candidates: Sequence[AST]) -> List[AST]:
    """Flatten nested unions, drop duplicates and literals absorbed by a keyword."""
    out: List[AST] = []
    for candidate in candidates:
        members = candidate.types if candidate.kind == ASTKind.UNION else (candidate,)
        for member in members:
            if member not in out:
                out.append(member)
    kinds = {member.kind for member in out}
    if ASTKind.STRING_KEYWORD in kinds:
        out = [m for m in out if not _is_string_literal(m)]
    if ASTKind.NUMBER_KEYWORD in kinds:
        out = [m for m in out if not _is_number_literal(m)]
    if ASTKind.SYMBOL_KEYWORD in kinds:
        out = [m for m in out if m.kind != ASTKind.UNIQUE_SYMBOL]
    return out


def union(candidates: Sequence[AST], annotations: Optional[Annotations] = None) -> AST:
    """
    Canonical union.

    0 effective members -> never; 1 -> that member; otherwise a Union whose
    members are sorted by descending weight (stable for ties).
    """
    types = unify(candidates)
    if len(types) < 2:
        logger.debug("union of %d candidates collapsed to %d member(s)", len(candidates), len(types))
    if not types:
        return NEVER_KEYWORD
    if len(types) == 1:
        return types[0]
    ranked = sorted(types, key=weight, reverse=True)
    return Union(ranked, annotations if annotations is not None else EMPTY)


def nullable(ast: AST) -> AST:
    return union([ast, Literal(None)])


def type_literal(property_signatures: Sequence[PropertySignature] = (),
                 index_signatures: Sequence[IndexSignature] = (),
                 annotations: Optional[Annotations] = None) -> TypeLiteral:
    return TypeLiteral(
        sorted(property_signatures, key=lambda ps: cardinality(ps.type)),
        sorted(index_signatures, key=lambda sig: cardinality(sig.type)),
        annotations if annotations is not None else EMPTY,
    )


def append_rest_element(ast: TupleType, rest_element: AST) -> TupleType:
    if ast.rest is not None:
        # [...string[], ...number[]] is illegal
        raise SchemaError("A rest element cannot follow another rest element.", "E0101")
    return TupleType(ast.elements, (rest_element,), ast.is_readonly)


def append_element(ast: TupleType, new_element: Element) -> TupleType:
    """
    Append a positional element.

    After a rest run, a required element extends the run's trailing part.
    """
    if any(e.is_optional for e in ast.elements) and not new_element.is_optional:
        raise SchemaError("A required element cannot follow an optional element.", "E0102")
    if ast.rest is None:
        return TupleType(ast.elements + (new_element,), None, ast.is_readonly)
    if new_element.is_optional:
        raise SchemaError("An optional element cannot follow a rest element.", "E0103")
    return TupleType(ast.elements, ast.rest + (new_element.type,), ast.is_readonly)
