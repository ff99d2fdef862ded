"""
Configuration constants to replace magic numbers and load-bearing strings throughout schemalang
"""

# Union ranking constants
LAZY_UNION_WEIGHT = 10  # Fixed weight so ranking never forces a lazy thunk

# Property-signature ranking constants (ascending: cheapest checks first)
CARDINALITY_NEVER = 0
CARDINALITY_UNIT = 1      # literal, undefined, void, unique symbol
CARDINALITY_BOOLEAN = 2
CARDINALITY_SCALAR = 3    # string, number, bigint, symbol
CARDINALITY_OBJECT = 4
CARDINALITY_COMPOUND = 5  # struct, tuple, union, lazy, ...
CARDINALITY_TOP = 6       # unknown, any

# Container kind labels used in "is(<kind>)" messages
SEQUENCE_KIND = "Sequence"
MAPPING_KIND = "Mapping"
BIGINT_SOURCE_KIND = "string | number | boolean"

# Message templates (consumers match on exact wording)
FAILURE_TEMPLATE = "{actual} did not satisfy {predicate}"
IS_PREDICATE = "is({kind})"
IS_EQUAL_PREDICATE = "isEqual({expected})"
IS_ENUM_PREDICATE = "isEnum({expected})"
PARSE_FAILURE_TEMPLATE = "{actual} did not satisfy parsing from ({source}) to ({target})"
MISSING_REQUIRED_MESSAGE = "did not satisfy is(required)"
UNEXPECTED_KEY_MESSAGE = "key is unexpected"
UNEXPECTED_INDEX_MESSAGE = "index is unexpected"
NAN_MESSAGE = "did not satisfy not(isNaN)"
NOT_FINITE_MESSAGE = "did not satisfy isFinite"
ERROR_COUNT_TEMPLATE = "{count} error(s) found"
DEFAULT_REFINEMENT_LABEL = "<refinement>"

# Branch labels for error trees
MEMBER_BRANCH_LABEL = "union member"
INDEX_BRANCH_TEMPLATE = "index {index}"
KEY_BRANCH_TEMPLATE = "key {key}"
MEMBER_INLINE_PREFIX = "member: "
PATH_SEPARATOR = "/"

# Tree drawing glyphs
TREE_BRANCH = "├─ "
TREE_LAST_BRANCH = "└─ "
TREE_CONTINUATION = "│  "
TREE_BLANK = "   "

# Template literal placeholder patterns (non-greedy, anchored by the caller)
STRING_PLACEHOLDER_PATTERN = r".*?"
NUMBER_PLACEHOLDER_PATTERN = r"[+-]?\d*\.?\d+(?:[Ee][+-]?\d+)?"

# Accepted bigint source text (after trimming whitespace)
BIGINT_STRING_PATTERN = r"[+-]?[0-9]+"

# Colour control for rendered error trees
NO_COLOR_ENV = "NO_COLOR"
COLOR_ENV = "SCHEMALANG_COLOR"
COLOR_DISABLED_VALUES = ("0", "false", "no", "never")

# Integral floats below this magnitude render without a fractional part ("2", not "2.0")
INTEGRAL_FLOAT_LIMIT = 1e21
