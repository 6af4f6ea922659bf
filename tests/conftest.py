"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from fort.lexer import tokenize
from fort.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns the full token list."""

    def _lex(source: str) -> list[Token]:
        return tokenize(source)

    return _lex


def stmt(text: str, label: str = "") -> str:
    """Build one fixed-form line: label in columns 1-5, statement from column 7."""
    return f"{label:<5} {text}\n"


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_texts(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token texts match the expected list."""
    actual = [t.text for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def find_tokens(tokens: list[Token], tt: TokenType) -> list[Token]:
    """Return all tokens of the given type."""
    return [t for t in tokens if t.type == tt]
