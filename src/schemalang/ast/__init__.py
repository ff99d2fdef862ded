"""
Schema AST: node variants, canonical constructors and the template-pattern compiler.
"""

from .nodes import (
    AST, ASTKind, KEYWORD_KINDS,
    TypeAlias, Literal, UniqueSymbol, Keyword, Enums,
    TemplateLiteral, TemplateLiteralSpan, Element, TupleType,
    PropertySignature, IndexSignature, TypeLiteral, Union, Lazy, Refinement, Transform,
    UNDEFINED_KEYWORD, VOID_KEYWORD, NEVER_KEYWORD, UNKNOWN_KEYWORD, ANY_KEYWORD,
    STRING_KEYWORD, NUMBER_KEYWORD, BOOLEAN_KEYWORD, BIGINT_KEYWORD, SYMBOL_KEYWORD,
    OBJECT_KEYWORD,
    type_alias, literal, unique_symbol, enums, enums_from, template_literal,
    element, tuple_type, array_type, non_empty_array_type,
    property_signature, index_signature, lazy, refinement, annotate,
)
from .canonical import (
    cardinality, weight, unify, union, nullable, type_literal,
    append_element, append_rest_element,
)
from .template import (
    get_template_literals, combine_template_literals, template_literal_union,
    compile_template_pattern, matches_template,
)
from .visitor import ASTVisitor
