"""
Error Reporting

Rust Pattern: rustc_errors::Diagnostic

Decode problems are data: a tree of DecodeError nodes returned inside a
decode outcome. Leaves describe which expectation failed; branches
(key / index / union member) qualify their children with a path segment.
Schema-construction mistakes are programmer errors and raise SchemaError.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, List, Optional, Sequence, Tuple

from ..utils.config import (
    COLOR_DISABLED_VALUES,
    COLOR_ENV,
    ERROR_COUNT_TEMPLATE,
    FAILURE_TEMPLATE,
    INDEX_BRANCH_TEMPLATE,
    KEY_BRANCH_TEMPLATE,
    MEMBER_BRANCH_LABEL,
    MEMBER_INLINE_PREFIX,
    MISSING_REQUIRED_MESSAGE,
    NAN_MESSAGE,
    NO_COLOR_ENV,
    NOT_FINITE_MESSAGE,
    PARSE_FAILURE_TEMPLATE,
    PATH_SEPARATOR,
    TREE_BLANK,
    TREE_BRANCH,
    TREE_CONTINUATION,
    TREE_LAST_BRANCH,
    UNEXPECTED_INDEX_MESSAGE,
    UNEXPECTED_KEY_MESSAGE,
)
from .values import format_key, format_value


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set or explicitly turned off)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get(NO_COLOR_ENV):
        return False
    explicit = os.environ.get(COLOR_ENV, "").lower()
    if explicit in COLOR_DISABLED_VALUES:
        return False
    return True

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


# ---------------------------------------------------------------------------
# Error taxonomy
# ---------------------------------------------------------------------------

class ErrorKind(Enum):
    """Decode error categories."""
    TYPE_MISMATCH = "type_mismatch"
    MISSING_REQUIRED = "missing_required"
    UNEXPECTED_MEMBER = "unexpected_member"        # always a warning
    REFINEMENT_VIOLATION = "refinement_violation"
    TRANSFORM_FAILURE = "transform_failure"
    NUMERIC_ANOMALY = "numeric_anomaly"            # warning unless refined
    KEY = "key"
    INDEX = "index"
    MEMBER = "member"


class AnomalyReason(Enum):
    NAN = NAN_MESSAGE
    NOT_FINITE = NOT_FINITE_MESSAGE


class DecodeError(ABC):
    """
    Base class of every decode error node.

    Every node renders a `message`; branches also carry `label` and `errors`.
    """
    kind: ErrorKind

    @property
    @abstractmethod
    def message(self) -> str:
        raise NotImplementedError

    @property
    def errors(self) -> Tuple["DecodeError", ...]:
        return ()

    @property
    def label(self) -> str:
        return self.message

    @property
    def is_branch(self) -> bool:
        return False


def _failure(actual: Any, predicate: str) -> str:
    return FAILURE_TEMPLATE.format(actual=format_value(actual), predicate=predicate)


@dataclass(frozen=True, eq=True)
class TypeMismatch(DecodeError):
    """Runtime shape, literal or enum membership mismatch."""
    predicate: str  # "is(number)", "isEqual(1)", "isEnum([...])"
    actual: Any
    override: Optional[str] = None
    kind = ErrorKind.TYPE_MISMATCH

    @property
    def message(self) -> str:
        return self.override or _failure(self.actual, self.predicate)


@dataclass(frozen=True, eq=True)
class MissingRequired(DecodeError):
    kind = ErrorKind.MISSING_REQUIRED

    @property
    def message(self) -> str:
        return MISSING_REQUIRED_MESSAGE


@dataclass(frozen=True, eq=True)
class UnexpectedKey(DecodeError):
    key: Hashable
    kind = ErrorKind.UNEXPECTED_MEMBER

    @property
    def message(self) -> str:
        return UNEXPECTED_KEY_MESSAGE


@dataclass(frozen=True, eq=True)
class UnexpectedIndex(DecodeError):
    index: int
    kind = ErrorKind.UNEXPECTED_MEMBER

    @property
    def message(self) -> str:
        return UNEXPECTED_INDEX_MESSAGE


@dataclass(frozen=True, eq=True)
class RefinementViolation(DecodeError):
    predicate_label: str
    actual: Any
    override: Optional[str] = None
    kind = ErrorKind.REFINEMENT_VIOLATION

    @property
    def message(self) -> str:
        return self.override or _failure(self.actual, f"is({self.predicate_label})")


@dataclass(frozen=True, eq=True)
class TransformFailure(DecodeError):
    source: str
    target: str
    actual: Any
    override: Optional[str] = None
    kind = ErrorKind.TRANSFORM_FAILURE

    @property
    def message(self) -> str:
        if self.override:
            return self.override
        return PARSE_FAILURE_TEMPLATE.format(
            actual=format_value(self.actual), source=self.source, target=self.target
        )


@dataclass(frozen=True, eq=True)
class NumericAnomaly(DecodeError):
    actual: Any
    reason: AnomalyReason
    kind = ErrorKind.NUMERIC_ANOMALY

    @property
    def message(self) -> str:
        return self.reason.value


class BranchError(DecodeError):
    """Error node that groups child errors under a path segment or union member."""
    children: Tuple[DecodeError, ...]

    @property
    def message(self) -> str:
        return format_error(self)

    @property
    def errors(self) -> Tuple[DecodeError, ...]:
        return self.children

    @property
    def is_branch(self) -> bool:
        return True


@dataclass(frozen=True, eq=True)
class KeyBranch(BranchError):
    key: Hashable
    children: Tuple[DecodeError, ...]
    kind = ErrorKind.KEY

    @property
    def label(self) -> str:
        return KEY_BRANCH_TEMPLATE.format(key=format_key(self.key))


@dataclass(frozen=True, eq=True)
class IndexBranch(BranchError):
    index: int
    children: Tuple[DecodeError, ...]
    kind = ErrorKind.INDEX

    @property
    def label(self) -> str:
        return INDEX_BRANCH_TEMPLATE.format(index=self.index)


@dataclass(frozen=True, eq=True)
class MemberBranch(BranchError):
    children: Tuple[DecodeError, ...]
    kind = ErrorKind.MEMBER

    @property
    def label(self) -> str:
        return MEMBER_BRANCH_LABEL


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

def format_error(error: DecodeError) -> str:
    """
    Render one error on a single line, path segments first.

    Example output::

        /as /0 /as /0 1 did not satisfy is(Mapping)
        /a member: "a" did not satisfy is(number), member: "a" did not satisfy is(undefined)
    """
    if isinstance(error, KeyBranch):
        return f"{PATH_SEPARATOR}{format_key(error.key)} {format_errors(error.errors)}"
    if isinstance(error, IndexBranch):
        return f"{PATH_SEPARATOR}{error.index} {format_errors(error.errors)}"
    if isinstance(error, MemberBranch):
        return f"{MEMBER_INLINE_PREFIX}{format_errors(error.errors)}"
    return error.message


def format_errors(errors: Sequence[DecodeError]) -> str:
    return ", ".join(format_error(e) for e in errors)


def _draw(out: List[str], indentation: str, forest: Sequence[DecodeError], color: bool) -> None:
    count = len(forest)
    for i, tree in enumerate(forest):
        is_last = i == count - 1
        glyph = TREE_LAST_BRANCH if is_last else TREE_BRANCH
        text = _style(tree.label, _CYAN, color=color) if tree.is_branch else tree.label
        out.append(indentation + glyph + text)
        nested = TREE_CONTINUATION if count > 1 and not is_last else TREE_BLANK
        _draw(out, indentation + nested, tree.errors, color)


def format_error_tree(errors: Sequence[DecodeError], color: Optional[bool] = False) -> str:
    """
    Render errors as a tree.

    Example output (plain, no color)::

        1 error(s) found
        └─ index 0
           ├─ union member
           │  └─ "a" did not satisfy is(number)
           └─ union member
              └─ "a" did not satisfy is(undefined)

    A single leaf error renders as its bare message.
    """
    use_color = _use_color() if color is None else color
    if len(errors) == 1 and not errors[0].is_branch:
        return errors[0].message
    out: List[str] = [
        _style(ERROR_COUNT_TEMPLATE.format(count=len(errors)), _BOLD, _RED, color=use_color)
    ]
    _draw(out, "", errors, use_color)
    return "\n".join(out)


# ============================================================================
# Exception Classes
# ============================================================================

class SchemaLangError(Exception):
    """Base exception for all schemalang errors"""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SchemaError(SchemaLangError):
    """
    Illegal schema construction or structural query.

    Use this for programmer errors, never for untrusted input:
    - appending a tuple element where no element may follow
    - computing `keyof` of a literal, template literal or tuple
    - unsupported record key / template span / index-signature parameter
    """
    def __init__(self, message: str, error_code: str = "E0001"):
        super().__init__(message)
        self.error_code = error_code

    def __str__(self):
        return f"error[{self.error_code}]: {self.message}"


class DecodeFailure(SchemaLangError):
    """Raised by the *_or_raise entry points; carries the error tree."""
    def __init__(self, errors: Sequence[DecodeError]):
        self.errors: Tuple[DecodeError, ...] = tuple(errors)
        super().__init__(format_errors(self.errors))

    def __str__(self):
        return format_error_tree(self.errors, color=False)


class SchemaImplementationError(Exception):
    """
    Error in Python implementation code (not in a user's schema or input).

    Use this for internal invariant breaks only.
    """
    def __init__(self, message: str, error_code: str = "E9999"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"
