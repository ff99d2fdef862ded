"""
Shared components: value model, annotations, lazy handles and error reporting.
"""

from .values import UNDEFINED, Symbol, format_value
from .annotations import Annotations, EMPTY, titled
from .handles import LazyId, HandleAllocator, allocate_lazy_id
from .errors import (
    ErrorKind, AnomalyReason, DecodeError,
    TypeMismatch, MissingRequired, UnexpectedKey, UnexpectedIndex,
    RefinementViolation, TransformFailure, NumericAnomaly,
    BranchError, KeyBranch, IndexBranch, MemberBranch,
    format_error, format_errors, format_error_tree,
    SchemaLangError, SchemaError, DecodeFailure, SchemaImplementationError,
)
