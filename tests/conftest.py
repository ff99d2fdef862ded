"""
Pytest configuration and shared fixtures for all schemalang tests.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from schemalang import (
    NUMBER_KEYWORD,
    STRING_KEYWORD,
    Symbol,
    property_signature,
    type_literal,
)


@pytest.fixture(scope="session")
def symbol_a():
    return Symbol("schemalang/test/a")


@pytest.fixture(scope="session")
def symbol_b():
    return Symbol("schemalang/test/b")


@pytest.fixture(scope="module")
def person():
    """{ first_name: string, last_name: string, age?: number }"""
    return type_literal([
        property_signature("first_name", STRING_KEYWORD),
        property_signature("last_name", STRING_KEYWORD),
        property_signature("age", NUMBER_KEYWORD, is_optional=True),
    ])
