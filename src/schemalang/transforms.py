"""
Transform helpers

Build Transform nodes from plain functions. The node itself expects
functions returning a DecodeResult; `transform` lifts total functions,
`transform_or_fail` takes fallible ones as they are.
"""

from typing import Any, Callable, Optional

from .ast.nodes import AST, Transform
from .runtime.decoder import describe
from .runtime.result import DecodeResult
from .shared.annotations import EMPTY, Annotations
from .shared.errors import TransformFailure


def transform(from_: AST, to: AST, decode: Callable[[Any], Any], encode: Callable[[Any], Any],
              annotations: Optional[Annotations] = None) -> Transform:
    """Transform between total functions (they never reject a value)."""
    return Transform(
        from_,
        to,
        lambda value: DecodeResult.success(decode(value)),
        lambda value: DecodeResult.success(encode(value)),
        annotations if annotations is not None else EMPTY,
    )


def transform_or_fail(from_: AST, to: AST,
                      decode: Callable[[Any], DecodeResult],
                      encode: Callable[[Any], DecodeResult],
                      annotations: Optional[Annotations] = None) -> Transform:
    return Transform(from_, to, decode, encode, annotations if annotations is not None else EMPTY)


def parse_failure(from_: AST, to: AST, actual: Any) -> DecodeResult:
    """
    Failure for a rejected conversion, for use inside transform_or_fail functions.

    Renders as `<actual> did not satisfy parsing from (<from>) to (<to>)`.
    """
    return DecodeResult.failure([TransformFailure(describe(from_), describe(to), actual)])
