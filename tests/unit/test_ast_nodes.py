#!/usr/bin/env python3
"""
Tests for AST node construction, equality and visitor dispatch.
"""

import copy
import enum

import pytest

from schemalang import (
    AST,
    ASTKind,
    ASTVisitor,
    Annotations,
    BOOLEAN_KEYWORD,
    Keyword,
    Literal,
    NUMBER_KEYWORD,
    STRING_KEYWORD,
    SchemaError,
    SchemaImplementationError,
    Symbol,
    TemplateLiteralSpan,
    TupleType,
    UNKNOWN_KEYWORD,
    Union,
    annotate,
    array_type,
    element,
    enums,
    enums_from,
    index_signature,
    lazy,
    literal,
    non_empty_array_type,
    property_signature,
    refinement,
    template_literal,
    transform,
    tuple_type,
    type_alias,
    type_literal,
    union,
    unique_symbol,
)


class KindNames(ASTVisitor[str]):
    """Visitor returning the visit method that handled a node."""

    def visit_type_alias(self, node):
        return "type_alias"

    def visit_literal(self, node):
        return "literal"

    def visit_unique_symbol(self, node):
        return "unique_symbol"

    def visit_keyword(self, node):
        return "keyword"

    def visit_enums(self, node):
        return "enums"

    def visit_template_literal(self, node):
        return "template_literal"

    def visit_tuple(self, node):
        return "tuple"

    def visit_type_literal(self, node):
        return "type_literal"

    def visit_union(self, node):
        return "union"

    def visit_lazy(self, node):
        return "lazy"

    def visit_refinement(self, node):
        return "refinement"

    def visit_transform(self, node):
        return "transform"


class TestLiteral:
    def test_scalar_literals(self):
        for value in ("a", 1, 1.5, True, None):
            assert literal(value).literal == value

    def test_rejects_non_scalars(self):
        with pytest.raises(SchemaError) as exc_info:
            literal([1])
        assert exc_info.value.error_code == "E0105"

    def test_boolean_and_number_literals_differ(self):
        assert literal(1) != literal(True)
        assert literal(0) != literal(False)
        assert literal(1) == literal(1)

    def test_hashable(self):
        assert len({literal("a"), literal("a"), literal("b")}) == 2


class TestKeywords:
    def test_singletons_are_titled(self):
        assert STRING_KEYWORD.annotations.title == "string"
        assert NUMBER_KEYWORD.is_keyword

    def test_non_keyword_kind_rejected(self):
        with pytest.raises(SchemaError):
            Keyword(ASTKind.UNION)


class TestContainers:
    def test_array_type_is_a_rest_tuple(self):
        ast = array_type(NUMBER_KEYWORD)
        assert ast.elements == ()
        assert ast.rest == (NUMBER_KEYWORD,)

    def test_non_empty_array_type(self):
        ast = non_empty_array_type(NUMBER_KEYWORD)
        assert ast.elements == (element(NUMBER_KEYWORD),)
        assert ast.rest == (NUMBER_KEYWORD,)

    def test_empty_rest_rejected(self):
        with pytest.raises(SchemaError) as exc_info:
            TupleType((), ())
        assert exc_info.value.error_code == "E0106"

    def test_index_signature_parameter_must_be_string_like(self):
        with pytest.raises(SchemaError) as exc_info:
            index_signature(NUMBER_KEYWORD, STRING_KEYWORD)
        assert exc_info.value.error_code == "E0104"

    def test_symbol_index_signature_claims_symbols(self):
        from schemalang import SYMBOL_KEYWORD
        assert index_signature(SYMBOL_KEYWORD, NUMBER_KEYWORD).claims_symbols
        assert not index_signature(STRING_KEYWORD, NUMBER_KEYWORD).claims_symbols

    def test_union_node_needs_two_members(self):
        with pytest.raises(SchemaImplementationError):
            Union([STRING_KEYWORD])


class TestTemplateLiteralNodes:
    def test_no_spans_collapses_to_literal(self):
        assert template_literal("abc", []) == literal("abc")

    def test_span_type_restricted(self):
        with pytest.raises(SchemaError) as exc_info:
            TemplateLiteralSpan(BOOLEAN_KEYWORD, "")
        assert "Unsupported template literal span" in exc_info.value.message


class TestEnumsNodes:
    def test_enums_from_python_enum(self):
        class Color(enum.Enum):
            Red = "red"
            Green = 1

        assert enums_from(Color).enums == (("Red", "red"), ("Green", 1))

    def test_enums_pairs(self):
        assert enums([("A", 0)]).enums == (("A", 0),)


class TestLazyIdentity:
    def test_each_lazy_gets_its_own_handle(self):
        a = lazy(lambda: STRING_KEYWORD)
        b = lazy(lambda: STRING_KEYWORD)
        assert a != b
        assert a.lazy_id != b.lazy_id

    def test_copies_keep_the_handle(self):
        a = lazy(lambda: STRING_KEYWORD)
        assert copy.deepcopy(a).lazy_id == a.lazy_id
        assert annotate(a, title="A").lazy_id == a.lazy_id


class TestAnnotate:
    def test_returns_a_copy(self):
        titled = annotate(STRING_KEYWORD, title="Name")
        assert titled.annotations.title == "Name"
        assert STRING_KEYWORD.annotations.title == "string"

    def test_record_and_fields_merge(self):
        ast = annotate(NUMBER_KEYWORD, Annotations(identifier="Age"), description="years")
        assert ast.annotations.identifier == "Age"
        assert ast.annotations.description == "years"
        assert ast.annotations.title == "number"

    def test_no_change_returns_same_node(self):
        assert annotate(STRING_KEYWORD) is STRING_KEYWORD


class TestVisitorDispatch:
    @pytest.mark.parametrize("node, expected", [
        (type_alias([], STRING_KEYWORD), "type_alias"),
        (literal(1), "literal"),
        (unique_symbol(Symbol("k")), "unique_symbol"),
        (UNKNOWN_KEYWORD, "keyword"),
        (enums([("A", 0)]), "enums"),
        (template_literal("a", [TemplateLiteralSpan(STRING_KEYWORD, "")]), "template_literal"),
        (tuple_type(), "tuple"),
        (type_literal([property_signature("a", STRING_KEYWORD)]), "type_literal"),
        (union([STRING_KEYWORD, NUMBER_KEYWORD]), "union"),
        (lazy(lambda: STRING_KEYWORD), "lazy"),
        (refinement(STRING_KEYWORD, bool), "refinement"),
        (transform(STRING_KEYWORD, NUMBER_KEYWORD, float, str), "transform"),
    ])
    def test_every_variant_dispatches(self, node: AST, expected: str):
        assert KindNames().visit(node) == expected
        assert node.accept(KindNames()) == expected

    def test_visitor_is_abstract(self):
        class Incomplete(ASTVisitor[str]):
            def visit_literal(self, node):
                return "literal"

        with pytest.raises(TypeError):
            Incomplete()
