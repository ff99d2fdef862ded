"""
Lazy Handle System

Rust Pattern: rustc_hir::def_id::DefId

Design:
- Every Lazy node receives a LazyId at construction. The decoder memoizes
  forced thunks by LazyId, so a self-referential schema is forced at most
  once per traversal no matter how often the node is reached.
- LazyIds are allocated from one process-wide counter and never reused;
  two distinct Lazy nodes never share a handle.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LazyId:
    """
    Identity handle of a Lazy node.

    Immutable and hashable; deep copies return the same handle so a copied
    schema keeps referring to the same memo slot.
    """
    index: int

    def __str__(self) -> str:
        return f"lazy:{self.index}"

    def __deepcopy__(self, memo: Any) -> "LazyId":
        return self


class HandleAllocator:
    """
    Sequential LazyId allocator.

    itertools.count is advanced atomically under the GIL, so concurrent
    schema construction never hands out the same index twice.
    """

    def __init__(self, start: int = 0):
        self._counter = itertools.count(start)

    def allocate(self) -> LazyId:
        handle = LazyId(next(self._counter))
        logger.debug("allocated %s", handle)
        return handle


_ALLOCATOR = HandleAllocator()


def allocate_lazy_id() -> LazyId:
    return _ALLOCATOR.allocate()


def assert_lazy_id(value: Any) -> None:
    """Raise if value is not a LazyId."""
    if not isinstance(value, LazyId):
        raise TypeError(f"handle must be LazyId, got {type(value).__name__}: {value}")
