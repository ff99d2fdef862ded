#!/usr/bin/env python3
"""
Tests for is_valid: decode without a hard failure.
"""

import math

import pytest

from schemalang import (
    BIGINT_KEYWORD,
    NUMBER_KEYWORD,
    STRING_KEYWORD,
    SYMBOL_KEYWORD,
    TemplateLiteralSpan,
    array_type,
    element,
    filters,
    index_signature,
    is_valid,
    literal,
    record,
    template_literal,
    tuple_type,
    type_literal,
    union,
)


class TestIsValid:
    def test_warnings_count_as_valid(self):
        assert is_valid(NUMBER_KEYWORD, math.nan)
        assert is_valid(tuple_type([element(NUMBER_KEYWORD)]), [1, 2])
        assert is_valid(type_literal([]), {"extra": 1})

    def test_failures_are_invalid(self):
        assert not is_valid(NUMBER_KEYWORD, "1")
        assert not is_valid(tuple_type([element(NUMBER_KEYWORD)]), [])

    def test_refinements(self):
        assert not is_valid(filters.non_nan(NUMBER_KEYWORD), math.nan)

    def test_bigint_accepts_convertible_input(self):
        assert is_valid(BIGINT_KEYWORD, "10")
        assert not is_valid(BIGINT_KEYWORD, "1.5")

    @pytest.mark.parametrize("value, expected", [
        ({}, True),
        ({"a": "a"}, True),
        ({"a": 1}, False),
        ({"a": "a", "b": "b"}, True),
    ])
    def test_record(self, value, expected):
        assert is_valid(record(STRING_KEYWORD, STRING_KEYWORD), value) is expected

    def test_record_with_template_literal_key(self):
        key = template_literal("a", [TemplateLiteralSpan(STRING_KEYWORD, "")])
        ast = record(key, NUMBER_KEYWORD)
        assert is_valid(ast, {"a": 1})
        assert is_valid(ast, {"ab": 1})
        assert not is_valid(ast, {"b": 1})
        assert not is_valid(ast, {"a": "a"})

    def test_symbol_index_signature_ignores_string_keys(self, symbol_a):
        ast = type_literal([], [index_signature(SYMBOL_KEYWORD, NUMBER_KEYWORD)])
        assert is_valid(ast, {symbol_a: 1})
        assert is_valid(ast, {"a": "not checked"})
        assert not is_valid(ast, {symbol_a: "a"})

    def test_union_of_literals(self):
        ast = union([literal("a"), literal(1), literal(None)])
        for value in ("a", 1, None):
            assert is_valid(ast, value)
        assert not is_valid(ast, True)

    def test_array_of_union(self):
        ast = array_type(union([STRING_KEYWORD, NUMBER_KEYWORD]))
        assert is_valid(ast, ["a", 1])
        assert not is_valid(ast, ["a", None])
