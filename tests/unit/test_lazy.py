#!/usr/bin/env python3
"""
Tests for recursive schemas and the per-call Lazy memo table.
"""

from concurrent.futures import ThreadPoolExecutor

from tests.test_utils import expect_failure, expect_success
from schemalang import (
    NUMBER_KEYWORD,
    STRING_KEYWORD,
    array_type,
    decode,
    encode,
    lazy,
    literal,
    property_signature,
    type_literal,
    union,
)
from schemalang.runtime import DecodeEnvironment, Direction, ParserCompiler


class CountingThunk:
    def __init__(self, build):
        self.build = build
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.build()


def make_tree():
    """{ value: number, children: tree[] } with a thunk call counter."""
    thunk = CountingThunk(lambda: type_literal([
        property_signature("value", NUMBER_KEYWORD),
        property_signature("children", array_type(node)),
    ]))
    node = lazy(thunk)
    return node, thunk


def deep_tree(depth):
    value = {"value": depth, "children": []}
    for i in range(depth):
        value = {"value": i, "children": [value, {"value": -i, "children": []}]}
    return value


class TestForcing:
    def test_thunk_forced_once_per_decode(self):
        node, thunk = make_tree()
        expect_success(node, deep_tree(20))
        assert thunk.calls == 1

    def test_each_call_owns_its_memo(self):
        node, thunk = make_tree()
        decode(node, deep_tree(3))
        decode(node, deep_tree(3))
        encode(node, deep_tree(3))
        assert thunk.calls == 3

    def test_construction_does_not_force(self):
        node, thunk = make_tree()
        union([node, STRING_KEYWORD])
        assert thunk.calls == 0

    def test_unreached_lazy_is_not_forced(self):
        node, thunk = make_tree()
        ast = type_literal([property_signature("tree", node, is_optional=True)])
        expect_success(ast, {})
        assert thunk.calls == 0


class TestRecursion:
    def test_nested_failure_path(self):
        node, _ = make_tree()
        value = {"value": 1, "children": [{"value": 2, "children": [{"value": "x", "children": []}]}]}
        expect_failure(node, value, '/children /0 /children /0 /value "x" did not satisfy is(number)')

    def test_mutual_recursion(self):
        expression = lazy(lambda: union([
            NUMBER_KEYWORD,
            type_literal([
                property_signature("op", literal("+")),
                property_signature("args", array_type(operation)),
            ]),
        ]))
        operation = lazy(lambda: type_literal([
            property_signature("name", STRING_KEYWORD),
            property_signature("value", expression),
        ]))
        expect_success(expression, 1)
        expect_success(expression, {"op": "+", "args": [{"name": "a", "value": 1}]})
        expect_success(expression, {
            "op": "+",
            "args": [{"name": "a", "value": {"op": "+", "args": []}}],
        })
        assert decode(expression, {"op": "+", "args": [{"name": "a"}]}).is_failure()

    def test_concurrent_decodes(self):
        node, _ = make_tree()
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda d: decode(node, deep_tree(d)), range(8)))
        assert all(r.is_success() for r in results)
        assert [r.value for r in results] == [deep_tree(d) for d in range(8)]


class TestDecodeEnvironment:
    def test_force_memoizes(self):
        node, thunk = make_tree()
        env = DecodeEnvironment()
        first = env.force(node)
        assert env.force(node) is first
        assert thunk.calls == 1
        assert env.forced_count == 1
        assert node.lazy_id in env

    def test_shared_environment_across_compiles(self):
        node, thunk = make_tree()
        env = DecodeEnvironment()
        compiler = ParserCompiler(Direction.DECODE, env)
        parse = compiler.compile(node)
        assert parse(deep_tree(2)).is_success()
        assert parse(deep_tree(4)).is_success()
        assert thunk.calls == 1
