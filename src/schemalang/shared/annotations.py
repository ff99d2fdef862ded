"""
Annotations

The fixed set of annotation kinds the engine and its diagnostics consume.
Stored as optional fields on an immutable record instead of an open map.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Optional, Tuple

from ..utils.config import DEFAULT_REFINEMENT_LABEL


@dataclass(frozen=True)
class Annotations:
    """
    Diagnostic metadata attached to every AST node.

    - identifier: stable name for the schema (used by derived interpreters)
    - title / description: human-readable documentation
    - message: callable value -> str overriding the node's own leaf failure message
    - label: custom predicate label cited in "is(<label>)" messages
    - examples: sample values
    """
    identifier: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    message: Optional[Callable[[Any], str]] = None
    label: Optional[str] = None
    examples: Optional[Tuple[Any, ...]] = None

    def merge(self, other: Optional["Annotations"]) -> "Annotations":
        """Overlay the fields set on `other`."""
        if other is None:
            return self
        changes = {
            f.name: getattr(other, f.name)
            for f in fields(other)
            if getattr(other, f.name) is not None
        }
        return replace(self, **changes) if changes else self

    def display_label(self, default: str = DEFAULT_REFINEMENT_LABEL) -> str:
        for candidate in (self.label, self.identifier, self.title, self.description):
            if candidate:
                return candidate
        return default

    def render_message(self, actual: Any) -> Optional[str]:
        if self.message is None:
            return None
        return self.message(actual)


EMPTY = Annotations()


def titled(title: str) -> Annotations:
    return Annotations(title=title)
