"""
Structural Query Layer

Rust Pattern: rustc_middle::ty::TyCtxt queries

Representation-level questions about a schema: which keys it has, what its
property signatures are, and derived struct shapes (pick / omit / partial /
record / extend). Wrappers are looked through: TypeAlias -> type,
Lazy -> forced thunk, Refinement -> from, Transform -> to.

Failures here are programmer errors and raise SchemaError.
"""

import logging
from typing import Hashable, List, Sequence

from ..ast.canonical import type_literal, union
from ..ast.nodes import (
    AST,
    ASTKind,
    Element,
    IndexSignature,
    Lazy,
    Literal,
    NEVER_KEYWORD,
    NUMBER_KEYWORD,
    PropertySignature,
    STRING_KEYWORD,
    SYMBOL_KEYWORD,
    TupleType,
    TypeLiteral,
    UNDEFINED_KEYWORD,
    UniqueSymbol,
)
from ..shared.errors import SchemaError
from ..shared.values import Symbol, is_number

logger = logging.getLogger(__name__)


def _unwrap(ast: AST) -> AST:
    """Look through the wrappers that keep the underlying representation."""
    while True:
        if ast.kind == ASTKind.TYPE_ALIAS:
            ast = ast.type
        elif ast.kind == ASTKind.LAZY:
            ast = ast.thunk()
        elif ast.kind == ASTKind.REFINEMENT:
            ast = ast.from_
        elif ast.kind == ASTKind.TRANSFORM:
            ast = ast.to
        else:
            return ast


def _intersect(lists: Sequence[List]) -> List:
    out = list(lists[0])
    for other in lists[1:]:
        out = [item for item in out if item in other]
    return out


def _key_node(name: Hashable) -> AST:
    return UniqueSymbol(name) if isinstance(name, Symbol) else Literal(name)


def _keyof(ast: AST) -> List[AST]:
    ast = _unwrap(ast)
    if ast.kind in (ASTKind.NEVER_KEYWORD, ASTKind.ANY_KEYWORD):
        return [STRING_KEYWORD, NUMBER_KEYWORD, SYMBOL_KEYWORD]
    if ast.kind == ASTKind.STRING_KEYWORD:
        return [Literal("length")]
    if ast.kind == ASTKind.TYPE_LITERAL:
        keys = [_key_node(ps.name) for ps in ast.property_signatures]
        return keys + [sig.parameter for sig in ast.index_signatures]
    if ast.kind == ASTKind.UNION:
        return _intersect([_keyof(member) for member in ast.types])
    if ast.kind in (ASTKind.LITERAL, ASTKind.TEMPLATE_LITERAL, ASTKind.TUPLE):
        raise SchemaError(f"cannot compute `keyof` of {ast.kind.value}", "E0201")
    return [NEVER_KEYWORD]


def keyof(ast: AST) -> AST:
    """
    Union of the key types of `ast`.

    For a union, only keys present in every member survive.
    """
    return union(_keyof(ast))


def record(key: AST, value: AST, is_readonly: bool = True) -> TypeLiteral:
    """
    Struct with one property per literal / unique-symbol key and one index
    signature per string, symbol, template-literal or refinement key.
    """
    property_signatures: List[PropertySignature] = []
    index_signatures: List[IndexSignature] = []

    def go(k: AST) -> None:
        if k.kind == ASTKind.TYPE_ALIAS:
            go(k.type)
        elif k.kind == ASTKind.NEVER_KEYWORD:
            pass
        elif k.kind in (ASTKind.STRING_KEYWORD, ASTKind.SYMBOL_KEYWORD,
                        ASTKind.TEMPLATE_LITERAL, ASTKind.REFINEMENT):
            index_signatures.append(IndexSignature(k, value, is_readonly))
        elif k.kind == ASTKind.LITERAL:
            if isinstance(k.literal, str) or is_number(k.literal):
                property_signatures.append(PropertySignature(k.literal, value, False, is_readonly))
        elif k.kind == ASTKind.UNIQUE_SYMBOL:
            property_signatures.append(PropertySignature(k.symbol, value, False, is_readonly))
        elif k.kind == ASTKind.UNION:
            for member in k.types:
                go(member)
        else:
            raise SchemaError(f"cannot compute `record` for a {k.kind.value} key", "E0202")

    go(key)
    return type_literal(property_signatures, index_signatures)


def property_keys(ast: AST) -> List[Hashable]:
    ast = _unwrap(ast)
    if ast.kind == ASTKind.TUPLE:
        return [str(i) for i in range(len(ast.elements))]
    if ast.kind == ASTKind.TYPE_LITERAL:
        return [ps.name for ps in ast.property_signatures]
    if ast.kind == ASTKind.UNION:
        return _intersect([property_keys(member) for member in ast.types])
    return []


def get_property_signatures(ast: AST) -> List[PropertySignature]:
    """
    Property signatures of a struct, tuple (one per element) or union.

    For a union: one signature per key shared by every member, typed as the
    union of the member types; optional / readonly if any member says so.
    """
    ast = _unwrap(ast)
    if ast.kind == ASTKind.TUPLE:
        return [
            PropertySignature(str(i), e.type, e.is_optional, ast.is_readonly)
            for i, e in enumerate(ast.elements)
        ]
    if ast.kind == ASTKind.TYPE_LITERAL:
        return list(ast.property_signatures)
    if ast.kind == ASTKind.UNION:
        signatures = [ps for member in ast.types for ps in get_property_signatures(member)]
        out = []
        for key in property_keys(ast):
            matching = [ps for ps in signatures if ps.name == key]
            out.append(PropertySignature(
                key,
                union([ps.type for ps in matching]),
                any(ps.is_optional for ps in matching),
                any(ps.is_readonly for ps in matching),
            ))
        return out
    logger.debug("no property signatures for %s", ast.kind.value)
    return []


def pick(ast: AST, *keys: Hashable) -> TypeLiteral:
    """Struct of the named property signatures (index signatures dropped)."""
    wanted = frozenset(keys)
    return type_literal([ps for ps in get_property_signatures(ast) if ps.name in wanted], [])


def omit(ast: AST, *keys: Hashable) -> TypeLiteral:
    """Struct without the named property signatures (index signatures dropped)."""
    unwanted = frozenset(keys)
    return type_literal([ps for ps in get_property_signatures(ast) if ps.name not in unwanted], [])


def partial(ast: AST) -> AST:
    """
    Every element / property made optional.

    Refinements and transforms are dropped: the result describes the
    underlying (from) or target (to) representation.
    """
    if ast.kind == ASTKind.TYPE_ALIAS:
        return partial(ast.type)
    if ast.kind == ASTKind.TUPLE:
        rest = None
        if ast.rest is not None:
            rest = (union(list(ast.rest) + [UNDEFINED_KEYWORD]),)
        return TupleType([Element(e.type, True) for e in ast.elements], rest, ast.is_readonly)
    if ast.kind == ASTKind.TYPE_LITERAL:
        return type_literal(
            [PropertySignature(ps.name, ps.type, True, ps.is_readonly, ps.annotations)
             for ps in ast.property_signatures],
            ast.index_signatures,
        )
    if ast.kind == ASTKind.UNION:
        return union([partial(member) for member in ast.types])
    if ast.kind == ASTKind.LAZY:
        return Lazy(lambda: partial(ast.thunk()))
    if ast.kind == ASTKind.REFINEMENT:
        return partial(ast.from_)
    if ast.kind == ASTKind.TRANSFORM:
        return partial(ast.to)
    return ast


def extend(a: AST, b: AST) -> TypeLiteral:
    """Struct with the property and index signatures of both structs."""
    left, right = _unwrap(a), _unwrap(b)
    if left.kind != ASTKind.TYPE_LITERAL or right.kind != ASTKind.TYPE_LITERAL:
        raise SchemaError(
            f"cannot extend {left.kind.value} with {right.kind.value}; both must be structs",
            "E0203",
        )
    return type_literal(
        left.property_signatures + right.property_signatures,
        left.index_signatures + right.index_signatures,
    )
