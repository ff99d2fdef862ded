"""
AST Nodes

Rust Pattern: rustc_middle::ty::TyKind

A schema is an immutable tree of AST nodes. The set of variants is closed:
every node carries an ASTKind and `accept` dispatches on it, so adding a
variant means touching exactly this module and ASTVisitor.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Hashable, Optional, Sequence, Tuple, Type, TypeVar, TYPE_CHECKING

from ..shared.annotations import EMPTY, Annotations, titled
from ..shared.errors import SchemaError, SchemaImplementationError
from ..shared.handles import LazyId, allocate_lazy_id, assert_lazy_id
from ..shared.values import Symbol, is_boolean, is_number

if TYPE_CHECKING:
    from .visitor import ASTVisitor

T = TypeVar('T')


class ASTKind(Enum):
    """
    AST variant tag (Rust pattern: rustc_middle::ty::TyKind).
    """
    TYPE_ALIAS = "TypeAlias"
    LITERAL = "Literal"
    UNIQUE_SYMBOL = "UniqueSymbol"
    UNDEFINED_KEYWORD = "UndefinedKeyword"
    VOID_KEYWORD = "VoidKeyword"
    NEVER_KEYWORD = "NeverKeyword"
    UNKNOWN_KEYWORD = "UnknownKeyword"
    ANY_KEYWORD = "AnyKeyword"
    STRING_KEYWORD = "StringKeyword"
    NUMBER_KEYWORD = "NumberKeyword"
    BOOLEAN_KEYWORD = "BooleanKeyword"
    BIGINT_KEYWORD = "BigIntKeyword"
    SYMBOL_KEYWORD = "SymbolKeyword"
    OBJECT_KEYWORD = "ObjectKeyword"
    ENUMS = "Enums"
    TEMPLATE_LITERAL = "TemplateLiteral"
    TUPLE = "Tuple"
    TYPE_LITERAL = "TypeLiteral"
    UNION = "Union"
    LAZY = "Lazy"
    REFINEMENT = "Refinement"
    TRANSFORM = "Transform"


KEYWORD_KINDS = frozenset({
    ASTKind.UNDEFINED_KEYWORD,
    ASTKind.VOID_KEYWORD,
    ASTKind.NEVER_KEYWORD,
    ASTKind.UNKNOWN_KEYWORD,
    ASTKind.ANY_KEYWORD,
    ASTKind.STRING_KEYWORD,
    ASTKind.NUMBER_KEYWORD,
    ASTKind.BOOLEAN_KEYWORD,
    ASTKind.BIGINT_KEYWORD,
    ASTKind.SYMBOL_KEYWORD,
    ASTKind.OBJECT_KEYWORD,
})

# Visitor method per variant; every keyword goes through visit_keyword
_VISIT_METHODS = {
    ASTKind.TYPE_ALIAS: "visit_type_alias",
    ASTKind.LITERAL: "visit_literal",
    ASTKind.UNIQUE_SYMBOL: "visit_unique_symbol",
    ASTKind.ENUMS: "visit_enums",
    ASTKind.TEMPLATE_LITERAL: "visit_template_literal",
    ASTKind.TUPLE: "visit_tuple",
    ASTKind.TYPE_LITERAL: "visit_type_literal",
    ASTKind.UNION: "visit_union",
    ASTKind.LAZY: "visit_lazy",
    ASTKind.REFINEMENT: "visit_refinement",
    ASTKind.TRANSFORM: "visit_transform",
}


@dataclass(frozen=True)
class AST:
    """
    Base schema node (Rust pattern: rustc_middle::ty::Ty).

    - Immutable (frozen dataclass); structural equality and hashing
    - `kind` drives visitor dispatch (no isinstance chains in interpreters)
    - `annotations` is diagnostic metadata, never interpreted structurally
    """
    kind: ASTKind
    annotations: Annotations

    def accept(self, visitor: 'ASTVisitor[T]') -> T:
        if self.kind in KEYWORD_KINDS:
            return visitor.visit_keyword(self)  # type: ignore
        return getattr(visitor, _VISIT_METHODS[self.kind])(self)

    def annotate(self, annotations: Optional[Annotations]) -> 'AST':
        """Copy of this node with `annotations` overlaid."""
        merged = self.annotations.merge(annotations)
        if merged is self.annotations:
            return self
        node = copy.copy(self)
        object.__setattr__(node, 'annotations', merged)
        return node

    @property
    def is_keyword(self) -> bool:
        return self.kind in KEYWORD_KINDS


@dataclass(frozen=True)
class TypeAlias(AST):
    """Named wrapper; transparent to decoding."""
    type_parameters: Tuple[AST, ...]
    type: AST

    def __init__(self, type_parameters: Sequence[AST], type: AST,
                 annotations: Annotations = EMPTY):
        super().__init__(kind=ASTKind.TYPE_ALIAS, annotations=annotations)
        object.__setattr__(self, 'type_parameters', tuple(type_parameters))
        object.__setattr__(self, 'type', type)


def _literal_tag(value: Any) -> str:
    if value is None:
        return "null"
    if is_boolean(value):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    raise SchemaError(
        f"literal must be a string, number, boolean or None, got {type(value).__name__}",
        "E0105",
    )


@dataclass(frozen=True)
class Literal(AST):
    """Single scalar value: str, int/float, bool or None."""
    literal: Any

    def __init__(self, literal: Any, annotations: Annotations = EMPTY):
        _literal_tag(literal)
        super().__init__(kind=ASTKind.LITERAL, annotations=annotations)
        object.__setattr__(self, 'literal', literal)

    def __eq__(self, other):
        """Literal(1) and Literal(True) are different literals."""
        if not isinstance(other, Literal):
            return NotImplemented
        return (_literal_tag(self.literal) == _literal_tag(other.literal)
                and self.literal == other.literal
                and self.annotations == other.annotations)

    def __hash__(self):
        return hash((self.kind, _literal_tag(self.literal), self.literal, self.annotations))

    @property
    def is_string(self) -> bool:
        return isinstance(self.literal, str)

    @property
    def is_numeric(self) -> bool:
        return is_number(self.literal)


@dataclass(frozen=True)
class UniqueSymbol(AST):
    symbol: Symbol

    def __init__(self, symbol: Symbol, annotations: Annotations = EMPTY):
        if not isinstance(symbol, Symbol):
            raise SchemaError(f"unique symbol must be a Symbol, got {type(symbol).__name__}", "E0105")
        super().__init__(kind=ASTKind.UNIQUE_SYMBOL, annotations=annotations)
        object.__setattr__(self, 'symbol', symbol)


@dataclass(frozen=True)
class Keyword(AST):
    """Payload-free keyword node; use the module-level singletons."""

    def __init__(self, kind: ASTKind, annotations: Annotations = EMPTY):
        if kind not in KEYWORD_KINDS:
            raise SchemaError(f"{kind.value} is not a keyword", "E0105")
        super().__init__(kind=kind, annotations=annotations)

    def __repr__(self) -> str:
        return f"Keyword({self.kind.value})"


UNDEFINED_KEYWORD = Keyword(ASTKind.UNDEFINED_KEYWORD, titled("undefined"))
VOID_KEYWORD = Keyword(ASTKind.VOID_KEYWORD, titled("void"))
NEVER_KEYWORD = Keyword(ASTKind.NEVER_KEYWORD, titled("never"))
UNKNOWN_KEYWORD = Keyword(ASTKind.UNKNOWN_KEYWORD, titled("unknown"))
ANY_KEYWORD = Keyword(ASTKind.ANY_KEYWORD, titled("any"))
STRING_KEYWORD = Keyword(ASTKind.STRING_KEYWORD, titled("string"))
NUMBER_KEYWORD = Keyword(ASTKind.NUMBER_KEYWORD, titled("number"))
BOOLEAN_KEYWORD = Keyword(ASTKind.BOOLEAN_KEYWORD, titled("boolean"))
BIGINT_KEYWORD = Keyword(ASTKind.BIGINT_KEYWORD, titled("bigint"))
SYMBOL_KEYWORD = Keyword(ASTKind.SYMBOL_KEYWORD, titled("symbol"))
OBJECT_KEYWORD = Keyword(ASTKind.OBJECT_KEYWORD, titled("object"))


@dataclass(frozen=True)
class Enums(AST):
    """Ordered (label, value) pairs; values are str or numbers."""
    enums: Tuple[Tuple[str, Any], ...]

    def __init__(self, enums: Sequence[Tuple[str, Any]], annotations: Annotations = EMPTY):
        super().__init__(kind=ASTKind.ENUMS, annotations=annotations)
        object.__setattr__(self, 'enums', tuple((str(name), value) for name, value in enums))


@dataclass(frozen=True)
class TemplateLiteralSpan:
    """Placeholder (string/number keyword) followed by a literal run."""
    type: AST
    literal: str

    def __post_init__(self):
        if self.type.kind not in (ASTKind.STRING_KEYWORD, ASTKind.NUMBER_KEYWORD):
            raise SchemaError(f"Unsupported template literal span {self.type.kind.value}", "E0301")


@dataclass(frozen=True)
class TemplateLiteral(AST):
    head: str
    spans: Tuple[TemplateLiteralSpan, ...]

    def __init__(self, head: str, spans: Sequence[TemplateLiteralSpan],
                 annotations: Annotations = EMPTY):
        if not spans:
            raise SchemaImplementationError("template literal needs at least one span; use template_literal()")
        super().__init__(kind=ASTKind.TEMPLATE_LITERAL, annotations=annotations)
        object.__setattr__(self, 'head', head)
        object.__setattr__(self, 'spans', tuple(spans))


@dataclass(frozen=True)
class Element:
    type: AST
    is_optional: bool = False


@dataclass(frozen=True)
class TupleType(AST):
    """
    Positional elements, then an optional rest run.

    `rest[0]` is the repeated element; `rest[1:]` are required elements that
    follow the repeated run (`[...number[], boolean]`).
    """
    elements: Tuple[Element, ...]
    rest: Optional[Tuple[AST, ...]]
    is_readonly: bool

    def __init__(self, elements: Sequence[Element] = (), rest: Optional[Sequence[AST]] = None,
                 is_readonly: bool = True, annotations: Annotations = EMPTY):
        if rest is not None and len(rest) == 0:
            raise SchemaError("a rest run needs at least one element", "E0106")
        super().__init__(kind=ASTKind.TUPLE, annotations=annotations)
        object.__setattr__(self, 'elements', tuple(elements))
        object.__setattr__(self, 'rest', tuple(rest) if rest is not None else None)
        object.__setattr__(self, 'is_readonly', is_readonly)


@dataclass(frozen=True)
class PropertySignature:
    name: Hashable  # str, int or Symbol
    type: AST
    is_optional: bool = False
    is_readonly: bool = True
    annotations: Annotations = EMPTY


_INDEX_PARAMETER_KINDS = (
    ASTKind.STRING_KEYWORD,
    ASTKind.SYMBOL_KEYWORD,
    ASTKind.TEMPLATE_LITERAL,
    ASTKind.REFINEMENT,
)


@dataclass(frozen=True)
class IndexSignature:
    parameter: AST  # string / symbol keyword, template literal or refinement
    type: AST
    is_readonly: bool = True

    def __post_init__(self):
        if self.parameter.kind not in _INDEX_PARAMETER_KINDS:
            raise SchemaError(
                f"An index signature parameter type must be string, symbol, a template literal "
                f"or a refinement, got {self.parameter.kind.value}",
                "E0104",
            )

    @property
    def claims_symbols(self) -> bool:
        return self.parameter.kind == ASTKind.SYMBOL_KEYWORD


@dataclass(frozen=True)
class TypeLiteral(AST):
    """Struct node. Build through canonical.type_literal() so members are ordered."""
    property_signatures: Tuple[PropertySignature, ...]
    index_signatures: Tuple[IndexSignature, ...]

    def __init__(self, property_signatures: Sequence[PropertySignature],
                 index_signatures: Sequence[IndexSignature], annotations: Annotations = EMPTY):
        super().__init__(kind=ASTKind.TYPE_LITERAL, annotations=annotations)
        object.__setattr__(self, 'property_signatures', tuple(property_signatures))
        object.__setattr__(self, 'index_signatures', tuple(index_signatures))


@dataclass(frozen=True)
class Union(AST):
    """Two or more members. Build through canonical.union()."""
    types: Tuple[AST, ...]

    def __init__(self, types: Sequence[AST], annotations: Annotations = EMPTY):
        if len(types) < 2:
            raise SchemaImplementationError(f"Union needs at least 2 members, got {len(types)}")
        super().__init__(kind=ASTKind.UNION, annotations=annotations)
        object.__setattr__(self, 'types', tuple(types))


@dataclass(frozen=True)
class Lazy(AST):
    """
    Deferred node for self-referential schemas.

    Identity is the LazyId handle, not the thunk: two Lazy nodes are equal
    only when they share a handle.
    """
    thunk: Callable[[], AST] = field(compare=False)
    lazy_id: LazyId = field(compare=True)

    def __init__(self, thunk: Callable[[], AST], annotations: Annotations = EMPTY,
                 lazy_id: Optional[LazyId] = None):
        handle = lazy_id if lazy_id is not None else allocate_lazy_id()
        assert_lazy_id(handle)
        super().__init__(kind=ASTKind.LAZY, annotations=annotations)
        object.__setattr__(self, 'thunk', thunk)
        object.__setattr__(self, 'lazy_id', handle)

    def __repr__(self) -> str:
        return f"Lazy({self.lazy_id})"


@dataclass(frozen=True)
class Refinement(AST):
    from_: AST
    predicate: Callable[[Any], bool]

    def __init__(self, from_: AST, predicate: Callable[[Any], bool],
                 annotations: Annotations = EMPTY):
        super().__init__(kind=ASTKind.REFINEMENT, annotations=annotations)
        object.__setattr__(self, 'from_', from_)
        object.__setattr__(self, 'predicate', predicate)


@dataclass(frozen=True)
class Transform(AST):
    """
    Representation change between `from_` and `to`.

    `decode` maps a decoded from-value to a DecodeResult of the to-value;
    `encode` maps a to-value back to a DecodeResult of the from-value.
    """
    from_: AST
    to: AST
    decode: Callable[[Any], Any]
    encode: Callable[[Any], Any]

    def __init__(self, from_: AST, to: AST, decode: Callable[[Any], Any],
                 encode: Callable[[Any], Any], annotations: Annotations = EMPTY):
        super().__init__(kind=ASTKind.TRANSFORM, annotations=annotations)
        object.__setattr__(self, 'from_', from_)
        object.__setattr__(self, 'to', to)
        object.__setattr__(self, 'decode', decode)
        object.__setattr__(self, 'encode', encode)


# ============================================================================
# Constructors
# ============================================================================

def _coerce(annotations: Optional[Annotations]) -> Annotations:
    return annotations if annotations is not None else EMPTY


def type_alias(type_parameters: Sequence[AST], type: AST,
               annotations: Optional[Annotations] = None) -> TypeAlias:
    return TypeAlias(type_parameters, type, _coerce(annotations))


def literal(value: Any, annotations: Optional[Annotations] = None) -> Literal:
    return Literal(value, _coerce(annotations))


def unique_symbol(symbol: Symbol, annotations: Optional[Annotations] = None) -> UniqueSymbol:
    return UniqueSymbol(symbol, _coerce(annotations))


def enums(pairs: Sequence[Tuple[str, Any]], annotations: Optional[Annotations] = None) -> Enums:
    return Enums(pairs, _coerce(annotations))


def enums_from(enum_class: Type[Enum], annotations: Optional[Annotations] = None) -> Enums:
    """Enums node from a Python Enum class, in definition order."""
    return Enums([(member.name, member.value) for member in enum_class], _coerce(annotations))


def template_literal(head: str, spans: Sequence[TemplateLiteralSpan]) -> AST:
    """TemplateLiteral, or a plain string Literal when there are no spans."""
    if not spans:
        return Literal(head)
    return TemplateLiteral(head, spans)


def element(type: AST, is_optional: bool = False) -> Element:
    return Element(type, is_optional)


def tuple_type(elements: Sequence[Element] = (), rest: Optional[Sequence[AST]] = None,
               is_readonly: bool = True, annotations: Optional[Annotations] = None) -> TupleType:
    return TupleType(elements, rest, is_readonly, _coerce(annotations))


def array_type(item: AST, is_readonly: bool = True) -> TupleType:
    """Homogeneous sequence: no positional elements, rest of `[item]`."""
    return TupleType((), (item,), is_readonly)


def non_empty_array_type(item: AST, is_readonly: bool = True) -> TupleType:
    return TupleType((Element(item, False),), (item,), is_readonly)


def property_signature(name: Hashable, type: AST, is_optional: bool = False,
                       is_readonly: bool = True,
                       annotations: Optional[Annotations] = None) -> PropertySignature:
    return PropertySignature(name, type, is_optional, is_readonly, _coerce(annotations))


def index_signature(parameter: AST, type: AST, is_readonly: bool = True) -> IndexSignature:
    return IndexSignature(parameter, type, is_readonly)


def lazy(thunk: Callable[[], AST], annotations: Optional[Annotations] = None) -> Lazy:
    return Lazy(thunk, _coerce(annotations))


def refinement(from_: AST, predicate: Callable[[Any], bool],
               annotations: Optional[Annotations] = None) -> Refinement:
    return Refinement(from_, predicate, _coerce(annotations))


def annotate(ast: AST, annotations: Optional[Annotations] = None, **fields: Any) -> AST:
    """
    Copy of `ast` with merged annotations.

    Accepts an Annotations record, keyword fields, or both (fields win).
    """
    overlay = _coerce(annotations)
    if fields:
        overlay = overlay.merge(Annotations(**fields))
    return ast.annotate(overlay)


