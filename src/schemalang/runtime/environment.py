"""
Decode Environment

Per-invocation memo table for Lazy nodes, keyed by LazyId. One environment
belongs to exactly one top-level decode / encode call: it is never shared
between calls or threads, so the AST itself stays the only shared state.

Rule: a Lazy thunk is forced at most once per environment, and its compiled
parser is built at most once; every later occurrence reuses the memo entry.
"""

import logging
from typing import Any, Callable, Dict

from ..ast.nodes import AST, Lazy
from ..shared.handles import LazyId, assert_lazy_id

logger = logging.getLogger(__name__)


class DecodeEnvironment:
    """
    Memo table for one traversal.
    - force(node): forced AST of a Lazy node (thunk called once)
    - parser_for(handle, build): compiled parser of a Lazy node (built once)
    """
    _forced: Dict[LazyId, AST]
    _parsers: Dict[LazyId, Callable[[Any], Any]]

    def __init__(self):
        self._forced = {}
        self._parsers = {}

    def force(self, node: Lazy) -> AST:
        handle = node.lazy_id
        assert_lazy_id(handle)
        if handle not in self._forced:
            logger.debug("forcing %s", handle)
            self._forced[handle] = node.thunk()
        return self._forced[handle]

    def parser_for(self, handle: LazyId, build: Callable[[], Callable[[Any], Any]]) -> Callable[[Any], Any]:
        if handle not in self._parsers:
            self._parsers[handle] = build()
        return self._parsers[handle]

    @property
    def forced_count(self) -> int:
        """Number of distinct Lazy nodes forced so far (debug / tests)."""
        return len(self._forced)

    def __contains__(self, handle: LazyId) -> bool:
        return handle in self._forced
