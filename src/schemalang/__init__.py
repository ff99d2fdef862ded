"""
schemalang: runtime schema engine.

An immutable schema AST, structural queries over it, and a decoder that
validates untrusted values into Success / Warning / Failure outcomes.
"""

__version__ = "0.1.0"

from .shared import (
    UNDEFINED, Symbol, Annotations,
    DecodeError, ErrorKind, TypeMismatch, MissingRequired, UnexpectedKey, UnexpectedIndex,
    RefinementViolation, TransformFailure, NumericAnomaly,
    BranchError, KeyBranch, IndexBranch, MemberBranch,
    format_error, format_errors, format_error_tree,
    SchemaLangError, SchemaError, DecodeFailure, SchemaImplementationError,
)
from .ast import (
    AST, ASTKind, ASTVisitor,
    TypeAlias, Literal, UniqueSymbol, Keyword, Enums, TemplateLiteral, TemplateLiteralSpan,
    Element, TupleType, PropertySignature, IndexSignature, TypeLiteral, Union, Lazy,
    Refinement, Transform,
    UNDEFINED_KEYWORD, VOID_KEYWORD, NEVER_KEYWORD, UNKNOWN_KEYWORD, ANY_KEYWORD,
    STRING_KEYWORD, NUMBER_KEYWORD, BOOLEAN_KEYWORD, BIGINT_KEYWORD, SYMBOL_KEYWORD,
    OBJECT_KEYWORD,
    type_alias, literal, unique_symbol, enums, enums_from, template_literal,
    element, tuple_type, array_type, non_empty_array_type,
    property_signature, index_signature, lazy, refinement, annotate,
    cardinality, weight, union, nullable, type_literal, append_element, append_rest_element,
    template_literal_union,
)
from .analysis import (
    keyof, record, property_keys, get_property_signatures, pick, omit, partial, extend,
)
from .runtime import (
    DecodeResult, OutcomeTag, decode, encode, is_valid, decode_or_raise, encode_or_raise,
)
from .transforms import transform, transform_or_fail, parse_failure
from . import filters
