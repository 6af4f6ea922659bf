"""FORTRAN 66 lexical analyzer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fort.tokens import Token

__version__ = "0.1.0"


def tokenize(source: str) -> list[Token]:
    """Tokenize FORTRAN 66 source text into a list of tokens."""
    from fort.lexer import tokenize as _tokenize

    return _tokenize(source)
