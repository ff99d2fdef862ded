"""
Decode / Encode Engine

Rust Pattern: rustc_hir_typeck (recursive checker producing diagnostics)

A schema is compiled into a tree of closures (`Parser = value -> DecodeResult`)
by ParserCompiler, one compiler per top-level call. Lazy nodes compile to a
stub that forces the thunk and builds the real parser on first use, memoized
in the call's DecodeEnvironment, so recursive schemas compile finitely.

Rules that hold in both directions:
- struct and tuple decoding stops at the first hard failure
- unexpected keys / indices are dropped with a warning
- warnings of nested values are re-labelled under their key or index
- union members are tried in canonical order; a clean success wins at once
"""

import logging
import re
from enum import Enum
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence, Tuple

import numpy as np

from ..ast.canonical import weight
from ..ast.nodes import (
    AST,
    ASTKind,
    Enums,
    IndexSignature,
    Keyword,
    Lazy,
    Literal,
    Refinement,
    TemplateLiteral,
    Transform,
    TupleType,
    TypeAlias,
    TypeLiteral,
    Union,
    UniqueSymbol,
)
from ..ast.template import compile_template_pattern
from ..ast.visitor import ASTVisitor
from ..shared.errors import (
    AnomalyReason,
    DecodeError,
    DecodeFailure,
    IndexBranch,
    KeyBranch,
    MemberBranch,
    MissingRequired,
    NumericAnomaly,
    RefinementViolation,
    TransformFailure,
    TypeMismatch,
    UnexpectedIndex,
    UnexpectedKey,
)
from ..shared.values import (
    UNDEFINED,
    Symbol,
    format_value,
    is_boolean,
    is_infinite,
    is_integer,
    is_mapping,
    is_nan,
    is_number,
    is_object,
    is_sequence,
    literal_equals,
)
from ..utils.config import (
    BIGINT_SOURCE_KIND,
    BIGINT_STRING_PATTERN,
    IS_ENUM_PREDICATE,
    IS_EQUAL_PREDICATE,
    IS_PREDICATE,
    MAPPING_KIND,
    SEQUENCE_KIND,
)
from .environment import DecodeEnvironment
from .result import DecodeResult

logger = logging.getLogger(__name__)

Parser = Callable[[Any], DecodeResult]


class Direction(Enum):
    DECODE = "decode"
    ENCODE = "encode"


_KEYWORD_NAMES = {
    ASTKind.UNDEFINED_KEYWORD: "undefined",
    ASTKind.VOID_KEYWORD: "void",
    ASTKind.NEVER_KEYWORD: "never",
    ASTKind.UNKNOWN_KEYWORD: "unknown",
    ASTKind.ANY_KEYWORD: "any",
    ASTKind.STRING_KEYWORD: "string",
    ASTKind.NUMBER_KEYWORD: "number",
    ASTKind.BOOLEAN_KEYWORD: "boolean",
    ASTKind.BIGINT_KEYWORD: "bigint",
    ASTKind.SYMBOL_KEYWORD: "symbol",
    ASTKind.OBJECT_KEYWORD: "object",
}

_KEYWORD_GUARDS: Dict[ASTKind, Callable[[Any], bool]] = {
    ASTKind.UNDEFINED_KEYWORD: lambda v: v is UNDEFINED,
    ASTKind.VOID_KEYWORD: lambda v: v is UNDEFINED,
    ASTKind.NEVER_KEYWORD: lambda v: False,
    ASTKind.UNKNOWN_KEYWORD: lambda v: True,
    ASTKind.ANY_KEYWORD: lambda v: True,
    ASTKind.STRING_KEYWORD: lambda v: isinstance(v, str),
    ASTKind.NUMBER_KEYWORD: is_number,
    ASTKind.BOOLEAN_KEYWORD: is_boolean,
    ASTKind.SYMBOL_KEYWORD: lambda v: isinstance(v, Symbol),
    ASTKind.OBJECT_KEYWORD: is_object,
}


def describe(ast: AST) -> str:
    """Short human label of a schema, used in transform failure messages."""
    if ast.kind in _KEYWORD_NAMES:
        return ast.annotations.display_label(_KEYWORD_NAMES[ast.kind])
    return ast.annotations.display_label(ast.kind.value)


def _template_text(node: TemplateLiteral) -> str:
    parts = [node.head]
    for span in node.spans:
        parts.append("${" + _KEYWORD_NAMES[span.type.kind] + "}")
        parts.append(span.literal)
    return "".join(parts)


def _enum_text(node: Enums) -> str:
    pairs = ",".join(f"[{format_value(name)},{format_value(value)}]" for name, value in node.enums)
    return f"[{pairs}]"


def _retained(value: Any) -> int:
    """How many input members a decoded container kept."""
    if is_mapping(value) or isinstance(value, (list, tuple)):
        return len(value)
    return 0


def _numeric_anomaly(value: Any) -> Optional[NumericAnomaly]:
    if is_nan(value):
        return NumericAnomaly(value, AnomalyReason.NAN)
    if is_infinite(value):
        return NumericAnomaly(value, AnomalyReason.NOT_FINITE)
    return None


def _parse_bigint(value: Any) -> Optional[int]:
    """int from str / number / bool input, or None when not integral."""
    if is_boolean(value):
        return int(bool(value))
    if is_integer(value):
        return int(value)
    if is_number(value):
        if is_nan(value) or is_infinite(value) or not float(value).is_integer():
            return None
        return int(value)
    text = value.strip()
    if not text:
        return 0
    if re.fullmatch(BIGINT_STRING_PATTERN, text) is None:
        return None
    return int(text)


class ParserCompiler(ASTVisitor[Parser]):
    """
    Compiles an AST into a Parser for one direction.

    One instance per top-level call: the environment it owns is the call's
    Lazy memo table.
    """

    def __init__(self, direction: Direction = Direction.DECODE,
                 env: Optional[DecodeEnvironment] = None):
        self.direction = direction
        self.env = env if env is not None else DecodeEnvironment()

    @property
    def decoding(self) -> bool:
        return self.direction == Direction.DECODE

    def compile(self, ast: AST) -> Parser:
        return ast.accept(self)

    def _mismatch(self, node: AST, predicate: str, value: Any) -> DecodeResult:
        override = node.annotations.render_message(value)
        return DecodeResult.failure([TypeMismatch(predicate, value, override)])

    def _is(self, node: AST, kind: str, value: Any) -> DecodeResult:
        return self._mismatch(node, IS_PREDICATE.format(kind=kind), value)

    # ==================== LEAVES ====================

    def visit_type_alias(self, node: TypeAlias) -> Parser:
        return self.compile(node.type)

    def visit_literal(self, node: Literal) -> Parser:
        predicate = IS_EQUAL_PREDICATE.format(expected=format_value(node.literal))

        def parse(value: Any) -> DecodeResult:
            if literal_equals(value, node.literal):
                return DecodeResult.success(value)
            return self._mismatch(node, predicate, value)
        return parse

    def visit_unique_symbol(self, node: UniqueSymbol) -> Parser:
        predicate = IS_EQUAL_PREDICATE.format(expected=format_value(node.symbol))

        def parse(value: Any) -> DecodeResult:
            if isinstance(value, Symbol) and value == node.symbol:
                return DecodeResult.success(value)
            return self._mismatch(node, predicate, value)
        return parse

    def visit_keyword(self, node: Keyword) -> Parser:
        if node.kind == ASTKind.BIGINT_KEYWORD:
            return self._bigint_parser(node)
        guard = _KEYWORD_GUARDS[node.kind]
        kind = _KEYWORD_NAMES[node.kind]
        check_numeric = node.kind == ASTKind.NUMBER_KEYWORD

        def parse(value: Any) -> DecodeResult:
            if not guard(value):
                return self._is(node, kind, value)
            if check_numeric:
                anomaly = _numeric_anomaly(value)
                if anomaly is not None:
                    return DecodeResult.warning(value, [anomaly])
            return DecodeResult.success(value)
        return parse

    def _bigint_parser(self, node: Keyword) -> Parser:
        if not self.decoding:
            def encode(value: Any) -> DecodeResult:
                if is_integer(value):
                    return DecodeResult.success(int(value))
                return self._is(node, "bigint", value)
            return encode

        def decode(value: Any) -> DecodeResult:
            if is_integer(value):
                return DecodeResult.success(int(value))
            if not (isinstance(value, str) or is_number(value) or is_boolean(value)):
                return self._is(node, BIGINT_SOURCE_KIND, value)
            parsed = _parse_bigint(value)
            if parsed is None:
                override = node.annotations.render_message(value)
                return DecodeResult.failure(
                    [TransformFailure(BIGINT_SOURCE_KIND, "bigint", value, override)]
                )
            return DecodeResult.success(parsed)
        return decode

    def visit_enums(self, node: Enums) -> Parser:
        predicate = IS_ENUM_PREDICATE.format(expected=_enum_text(node))
        values = [value for _, value in node.enums]

        def parse(value: Any) -> DecodeResult:
            if any(literal_equals(value, v) for v in values):
                return DecodeResult.success(value)
            return self._mismatch(node, predicate, value)
        return parse

    def visit_template_literal(self, node: TemplateLiteral) -> Parser:
        predicate = IS_PREDICATE.format(kind=_template_text(node))
        pattern = compile_template_pattern(node)

        def parse(value: Any) -> DecodeResult:
            if isinstance(value, str) and pattern.fullmatch(value) is not None:
                return DecodeResult.success(value)
            return self._mismatch(node, predicate, value)
        return parse

    # ==================== CONTAINERS ====================

    def visit_tuple(self, node: TupleType) -> Parser:
        elements = [(e.is_optional, self.compile(e.type)) for e in node.elements]
        rest: Optional[Tuple[Parser, List[Parser]]] = None
        if node.rest is not None:
            head, *tail = node.rest
            rest = (self.compile(head), [self.compile(t) for t in tail])

        def parse(value: Any) -> DecodeResult:
            if not is_sequence(value):
                return self._is(node, SEQUENCE_KIND, value)
            items = value.tolist() if isinstance(value, np.ndarray) else list(value)
            out: List[Any] = []
            warnings: List[DecodeError] = []

            def step(i: int, parser: Parser) -> Optional[DecodeResult]:
                r = parser(items[i])
                if r.is_failure():
                    return DecodeResult.failure([IndexBranch(i, r.errors)])
                if r.is_warning():
                    warnings.append(IndexBranch(i, r.errors))
                out.append(r.value)
                return None

            for i, (is_optional, parser) in enumerate(elements):
                if i >= len(items):
                    if is_optional:
                        continue
                    return DecodeResult.failure([IndexBranch(i, (MissingRequired(),))])
                failed = step(i, parser)
                if failed is not None:
                    return failed

            if rest is not None:
                head_parser, tail_parsers = rest
                tail_start = max(len(items) - len(tail_parsers), len(elements))
                for i in range(len(elements), tail_start):
                    failed = step(i, head_parser)
                    if failed is not None:
                        return failed
                for j, parser in enumerate(tail_parsers):
                    i = tail_start + j
                    if i >= len(items):
                        return DecodeResult.failure([IndexBranch(i, (MissingRequired(),))])
                    failed = step(i, parser)
                    if failed is not None:
                        return failed
            else:
                for i in range(len(elements), len(items)):
                    warnings.append(IndexBranch(i, (UnexpectedIndex(i),)))

            result = tuple(out) if isinstance(value, tuple) else out
            return DecodeResult.warning(result, warnings)
        return parse

    def _index_parsers(self, signatures: Sequence[IndexSignature]) -> List[Tuple[IndexSignature, Parser, Parser]]:
        return [(sig, self.compile(sig.parameter), self.compile(sig.type)) for sig in signatures]

    def visit_type_literal(self, node: TypeLiteral) -> Parser:
        properties = [(ps.name, ps.is_optional, self.compile(ps.type)) for ps in node.property_signatures]
        declared = {ps.name for ps in node.property_signatures}
        indexes = self._index_parsers(node.index_signatures)

        def claims(sig: IndexSignature, key: Hashable) -> bool:
            if sig.claims_symbols:
                return isinstance(key, Symbol)
            return isinstance(key, str)

        def parse(value: Any) -> DecodeResult:
            if not is_mapping(value):
                return self._is(node, MAPPING_KIND, value)
            out: Dict[Hashable, Any] = {}
            warnings: List[DecodeError] = []

            for name, is_optional, parser in properties:
                if name not in value:
                    if is_optional:
                        continue
                    return DecodeResult.failure([KeyBranch(name, (MissingRequired(),))])
                r = parser(value[name])
                if r.is_failure():
                    return DecodeResult.failure([KeyBranch(name, r.errors)])
                if r.is_warning():
                    warnings.append(KeyBranch(name, r.errors))
                out[name] = r.value

            for key in value:
                if key in declared:
                    continue
                matching = [entry for entry in indexes if claims(entry[0], key)]
                if not matching:
                    warnings.append(KeyBranch(key, (UnexpectedKey(key),)))
                    continue
                for _, key_parser, value_parser in matching:
                    key_result = key_parser(key)
                    if key_result.is_failure():
                        return DecodeResult.failure([KeyBranch(key, key_result.errors)])
                    r = value_parser(value[key])
                    if r.is_failure():
                        return DecodeResult.failure([KeyBranch(key, r.errors)])
                    if r.is_warning():
                        warnings.append(KeyBranch(key, r.errors))
                    out[key] = r.value

            return DecodeResult.warning(out, warnings)
        return parse

    # ==================== COMBINATORS ====================

    def visit_union(self, node: Union) -> Parser:
        members = [(member, weight(member), self.compile(member)) for member in node.types]

        def parse(value: Any) -> DecodeResult:
            candidates = []
            failures: List[DecodeError] = []
            for position, (member, member_weight, parser) in enumerate(members):
                r = parser(value)
                if r.is_success():
                    logger.debug("union member %d (%s) matched cleanly", position, member.kind.value)
                    return r
                if r.is_warning():
                    rank = (len(r.errors), -_retained(r.value), -member_weight, position)
                    candidates.append((rank, r))
                else:
                    failures.append(MemberBranch(r.errors))
            if candidates:
                rank, best = min(candidates, key=lambda c: c[0])
                logger.debug("union member %d chosen among %d with warnings", rank[3], len(candidates))
                return best
            return DecodeResult.failure(failures)
        return parse

    def visit_lazy(self, node: Lazy) -> Parser:
        env = self.env

        def parse(value: Any) -> DecodeResult:
            parser = env.parser_for(node.lazy_id, lambda: self.compile(env.force(node)))
            return parser(value)
        return parse

    def visit_refinement(self, node: Refinement) -> Parser:
        from_parser = self.compile(node.from_)
        label = node.annotations.display_label()

        def violation(value: Any) -> DecodeResult:
            override = node.annotations.render_message(value)
            return DecodeResult.failure([RefinementViolation(label, value, override)])

        if self.decoding:
            def decode(value: Any) -> DecodeResult:
                r = from_parser(value)
                if r.is_failure():
                    return r
                if not node.predicate(r.value):
                    return violation(r.value)
                return r
            return decode

        def encode(value: Any) -> DecodeResult:
            if not node.predicate(value):
                return violation(value)
            return from_parser(value)
        return encode

    def visit_transform(self, node: Transform) -> Parser:
        from_parser = self.compile(node.from_)

        if self.decoding:
            def decode(value: Any) -> DecodeResult:
                return from_parser(value).and_then(node.decode)
            return decode

        def encode(value: Any) -> DecodeResult:
            return node.encode(value).and_then(from_parser)
        return encode


# ============================================================================
# Entry points (one compiler, hence one memo table, per call)
# ============================================================================

def decode(ast: AST, value: Any) -> DecodeResult:
    """Validate and transform untrusted `value` against `ast`."""
    return ParserCompiler(Direction.DECODE).compile(ast)(value)


def encode(ast: AST, value: Any) -> DecodeResult:
    """Structural inverse of decode (Transform.encode instead of decode)."""
    return ParserCompiler(Direction.ENCODE).compile(ast)(value)


def is_valid(ast: AST, value: Any) -> bool:
    """True when `value` decodes without a hard failure (warnings allowed)."""
    return not decode(ast, value).is_failure()


def decode_or_raise(ast: AST, value: Any) -> Any:
    result = decode(ast, value)
    if result.is_failure():
        raise DecodeFailure(result.errors)
    return result.value


def encode_or_raise(ast: AST, value: Any) -> Any:
    result = encode(ast, value)
    if result.is_failure():
        raise DecodeFailure(result.errors)
    return result.value
