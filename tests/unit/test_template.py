#!/usr/bin/env python3
"""
Tests for template literal construction and matching.
"""

import pytest

from tests.test_utils import expect_failure, expect_success
from schemalang import (
    BOOLEAN_KEYWORD,
    NUMBER_KEYWORD,
    STRING_KEYWORD,
    SchemaError,
    TemplateLiteral,
    TemplateLiteralSpan,
    annotate,
    literal,
    record,
    template_literal,
    template_literal_union,
    union,
)
from schemalang.ast import matches_template


class TestConstruction:
    def test_literal_then_literal(self):
        assert template_literal_union(literal("a"), literal("b")) == literal("ab")

    def test_non_string_literals_are_spliced_as_text(self):
        assert template_literal_union(literal("a"), literal(1)) == literal("a1")
        assert template_literal_union(literal(True), literal(None)) == literal("truenull")

    def test_literal_then_placeholder(self):
        ast = template_literal_union(literal("a"), STRING_KEYWORD)
        assert ast == TemplateLiteral("a", [TemplateLiteralSpan(STRING_KEYWORD, "")])

    def test_placeholder_then_literal(self):
        ast = template_literal_union(NUMBER_KEYWORD, literal("px"))
        assert ast == TemplateLiteral("", [TemplateLiteralSpan(NUMBER_KEYWORD, "px")])

    def test_placeholder_then_placeholder(self):
        ast = template_literal_union(STRING_KEYWORD, literal("-"), NUMBER_KEYWORD)
        assert ast == TemplateLiteral("", [
            TemplateLiteralSpan(STRING_KEYWORD, "-"),
            TemplateLiteralSpan(NUMBER_KEYWORD, ""),
        ])

    def test_union_component_multiplies_alternatives(self):
        ast = template_literal_union(
            union([literal("a"), literal("b")]),
            union([literal("1"), literal("2")]),
        )
        assert set(ast.types) == {literal("a1"), literal("a2"), literal("b1"), literal("b2")}

    def test_duplicates_collapse(self):
        ast = template_literal_union(union([literal("a"), literal("ab")]), union([literal("b"), literal("")]))
        assert set(ast.types) == {literal("ab"), literal("a"), literal("abb")}

    def test_unsupported_component(self):
        with pytest.raises(SchemaError) as exc_info:
            template_literal_union(literal("a"), BOOLEAN_KEYWORD)
        assert exc_info.value.error_code == "E0301"

    def test_no_components(self):
        with pytest.raises(SchemaError):
            template_literal_union()


class TestMatching:
    def test_string_placeholder(self):
        ast = template_literal("a", [TemplateLiteralSpan(STRING_KEYWORD, "")])
        assert matches_template(ast, "a")
        assert matches_template(ast, "abc")
        assert not matches_template(ast, "ba")

    def test_number_placeholder(self):
        ast = template_literal("a", [TemplateLiteralSpan(NUMBER_KEYWORD, "")])
        for text in ("a1", "a1.5", "a-1", "a.5", "a1e10"):
            assert matches_template(ast, text), text
        for text in ("a", "ab", "a1b"):
            assert not matches_template(ast, text), text

    def test_trailing_literal_is_anchored(self):
        ast = template_literal("", [TemplateLiteralSpan(STRING_KEYWORD, "-end")])
        assert matches_template(ast, "x-end")
        assert matches_template(ast, "-end")
        assert not matches_template(ast, "x-end!")

    def test_multiline_values(self):
        ast = template_literal("<", [TemplateLiteralSpan(STRING_KEYWORD, ">")])
        assert matches_template(ast, "<a\nb>")

    def test_special_characters_are_literal(self):
        ast = template_literal("a.b", [TemplateLiteralSpan(NUMBER_KEYWORD, "(x)")])
        assert matches_template(ast, "a.b1(x)")
        assert not matches_template(ast, "aXb1(x)")


class TestDecode:
    def test_template_decode(self):
        ast = template_literal_union(literal("a"), STRING_KEYWORD)
        expect_success(ast, "a")
        expect_success(ast, "ab")
        expect_failure(ast, "b", '"b" did not satisfy is(a${string})')
        expect_failure(ast, 1, "1 did not satisfy is(a${string})")

    def test_template_with_number_and_trailing_literal(self):
        ast = template_literal_union(literal("a"), NUMBER_KEYWORD, literal("b"))
        expect_success(ast, "a1b")
        expect_failure(ast, "axb", '"axb" did not satisfy is(a${number}b)')

    def test_annotations_with_unhashable_values(self):
        ast = annotate(template_literal_union(STRING_KEYWORD, literal("-")), examples=({"x": 1},))
        expect_success(ast, "a-")
        expect_failure(ast, "a", '"a" did not satisfy is(${string}-)')

        listed = annotate(template_literal_union(STRING_KEYWORD, literal("-")), examples=["a-b"])
        expect_success(listed, "b-")

    def test_annotated_template_record_key(self):
        key = annotate(template_literal_union(literal("k"), NUMBER_KEYWORD), examples=[{"k1": 0}])
        ast = record(key, STRING_KEYWORD)
        expect_success(ast, {"k1": "a", "k22": "b"})
        expect_failure(ast, {"kx": "a"}, '/kx "kx" did not satisfy is(k${number})')
