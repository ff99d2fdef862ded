"""
Structural queries over schemas.
"""

from .structure import (
    keyof, record, property_keys, get_property_signatures,
    pick, omit, partial, extend,
)
