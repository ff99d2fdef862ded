"""
Template-Pattern Compiler

Builds template literals out of component schemas and compiles a
TemplateLiteral into an anchored regular expression for matching.

Combination rules for two adjacent alternatives a, b:
- literal + literal   -> concatenated literal
- literal + template  -> literal prepended to the template head
- template + literal  -> literal appended to the last span
- template + template -> b's head appended to a's last span, then b's spans
"""

import logging
import re
from functools import lru_cache
from typing import List, Pattern, Sequence, Tuple

from ..shared.errors import SchemaError
from ..shared.values import literal_text
from ..utils.config import NUMBER_PLACEHOLDER_PATTERN, STRING_PLACEHOLDER_PATTERN
from .canonical import union
from .nodes import AST, ASTKind, Literal, TemplateLiteral, TemplateLiteralSpan, template_literal

logger = logging.getLogger(__name__)


def get_template_literals(ast: AST) -> List[AST]:
    """Expand one component into its literal / template alternatives."""
    if ast.kind == ASTKind.LITERAL:
        return [ast]
    if ast.kind in (ASTKind.STRING_KEYWORD, ASTKind.NUMBER_KEYWORD):
        return [TemplateLiteral("", [TemplateLiteralSpan(ast, "")])]
    if ast.kind == ASTKind.UNION:
        out: List[AST] = []
        for member in ast.types:
            out.extend(get_template_literals(member))
        return out
    raise SchemaError(f"Unsupported template literal span {ast.kind.value}", "E0301")


def _with_last_literal(spans: Sequence[TemplateLiteralSpan], suffix: str) -> List[TemplateLiteralSpan]:
    *init, last = spans
    return init + [TemplateLiteralSpan(last.type, last.literal + suffix)]


def combine_template_literals(a: AST, b: AST) -> AST:
    if a.kind == ASTKind.LITERAL:
        if b.kind == ASTKind.LITERAL:
            return Literal(literal_text(a.literal) + literal_text(b.literal))
        return template_literal(literal_text(a.literal) + b.head, b.spans)
    if b.kind == ASTKind.LITERAL:
        return template_literal(a.head, _with_last_literal(a.spans, literal_text(b.literal)))
    return template_literal(a.head, _with_last_literal(a.spans, b.head) + list(b.spans))


def template_literal_union(*components: AST) -> AST:
    """
    Template literal built from a sequence of components.

    A component that is a union of N alternatives multiplies the number of
    combinations; the result is deduplicated through union().
    """
    if not components:
        raise SchemaError("a template literal needs at least one component", "E0301")
    head, *tail = components
    types = get_template_literals(head)
    for span in tail:
        alternatives = get_template_literals(span)
        types = [combine_template_literals(a, b) for a in types for b in alternatives]
    logger.debug("template literal expanded to %d alternative(s)", len(types))
    return union(types)


_PLACEHOLDERS = {
    ASTKind.STRING_KEYWORD: STRING_PLACEHOLDER_PATTERN,
    ASTKind.NUMBER_KEYWORD: NUMBER_PLACEHOLDER_PATTERN,
}


@lru_cache(maxsize=256)
def _compile(head: str, spans: Tuple[Tuple[ASTKind, str], ...]) -> Pattern:
    parts = [re.escape(head)]
    for kind, literal in spans:
        parts.append(f"(?:{_PLACEHOLDERS[kind]})")
        parts.append(re.escape(literal))
    return re.compile("".join(parts), re.DOTALL)


def compile_template_pattern(ast: TemplateLiteral) -> Pattern:
    """
    Pattern for head, then each placeholder followed by its literal run (match with fullmatch).

    Cached on the head and span shape only; annotations never reach the cache key.
    """
    return _compile(ast.head, tuple((span.type.kind, span.literal) for span in ast.spans))


def matches_template(ast: TemplateLiteral, value: str) -> bool:
    return compile_template_pattern(ast).fullmatch(value) is not None
