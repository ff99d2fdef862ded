"""
Decode Outcomes

Three-valued result of a decode / encode: Success(value),
Warning(value, errors) or Failure(errors). Warnings carry a usable value;
failures do not.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from ..shared.errors import DecodeError, DecodeFailure, format_error, format_error_tree

T = TypeVar('T')
U = TypeVar('U')


class OutcomeTag(Enum):
    """Decode outcome discriminant"""
    SUCCESS = "success"
    WARNING = "warning"
    FAILURE = "failure"


@dataclass(frozen=True)
class DecodeResult(Generic[T]):
    """Success(value) | Warning(value, errors) | Failure(errors)"""
    tag: OutcomeTag
    value: Optional[T] = None
    errors: Tuple[DecodeError, ...] = ()

    @classmethod
    def success(cls, value: T) -> 'DecodeResult[T]':
        return cls(OutcomeTag.SUCCESS, value)

    @classmethod
    def warning(cls, value: T, errors: Sequence[DecodeError]) -> 'DecodeResult[T]':
        """Accepted after a lossy correction; no errors degrades to success."""
        if not errors:
            return cls(OutcomeTag.SUCCESS, value)
        return cls(OutcomeTag.WARNING, value, tuple(errors))

    @classmethod
    def failure(cls, errors: Sequence[DecodeError]) -> 'DecodeResult[T]':
        if not errors:
            raise ValueError("a failure needs at least one error")
        return cls(OutcomeTag.FAILURE, None, tuple(errors))

    def is_success(self) -> bool:
        return self.tag == OutcomeTag.SUCCESS

    def is_warning(self) -> bool:
        return self.tag == OutcomeTag.WARNING

    def is_failure(self) -> bool:
        return self.tag == OutcomeTag.FAILURE

    @property
    def warnings(self) -> Tuple[DecodeError, ...]:
        return self.errors if self.is_warning() else ()

    @property
    def messages(self) -> List[str]:
        """Single-line, path-qualified message per error."""
        return [format_error(e) for e in self.errors]

    def unwrap(self) -> T:
        """Value of a success or warning (raises DecodeFailure on failure)"""
        if self.is_failure():
            raise DecodeFailure(self.errors)
        return self.value

    def map(self, func: Callable[[T], U]) -> 'DecodeResult[U]':
        """Transform the value, keep tag and errors"""
        if self.is_failure():
            return self  # type: ignore
        return DecodeResult(self.tag, func(self.value), self.errors)

    def and_then(self, func: Callable[[T], 'DecodeResult[U]']) -> 'DecodeResult[U]':
        """Chain a step; warnings of both steps are kept"""
        if self.is_failure():
            return self  # type: ignore
        following = func(self.value)
        if following.is_failure() or not self.errors:
            return following
        return DecodeResult.warning(following.value, self.errors + following.errors)

    def __str__(self) -> str:
        if self.is_success():
            return f"Success({self.value!r})"
        if self.is_warning():
            return f"Warning({self.value!r}, {self.messages})"
        return f"Failure({format_error_tree(self.errors)})"
