"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

# Physical line limits (Section 3.2)
MAX_LINE_LENGTH = 72
PREFIX_LENGTH = 6
MAX_SYMBOLIC_NAME_LENGTH = 6

COMMENT_MARKER = "C"


class TokenType(Enum):
    ERROR = auto()  # composed diagnostic message
    COMMENT = auto()  # comment line text after the marker
    END = auto()  # end of program, emitted at end of stream after END
    LABEL = auto()  # statement label, prefix or GO TO target
    IDENT = auto()  # symbolic name
    KEYWORD = auto()  # END, GOTO, IF, ...
    NEWLINE = auto()  # \n


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column."""

    line: int
    column: int


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token.

    ``line`` and ``column`` are recorded when the token is emitted, so they
    name the point the lexer had reached at the end of the lexeme.
    """

    type: TokenType
    text: str
    line: int
    column: int

    @property
    def position(self) -> Position:
        return Position(self.line, self.column)


# Section 3.1 character classes
DIGITS = frozenset("0123456789")  # 3.1.1
LETTERS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ")  # 3.1.2
SPECIAL = frozenset(" =+-*/(),.$")  # 3.1.4


def is_digit(ch: str) -> bool:
    return ch in DIGITS


def is_letter(ch: str) -> bool:
    return ch in LETTERS


def is_alphanumeric(ch: str) -> bool:
    """Return True if ch is a digit or a letter (Section 3.1.3)."""
    return ch in DIGITS or ch in LETTERS


def is_special(ch: str) -> bool:
    return ch in SPECIAL


class OperatorClass(Enum):
    """Expression operator families, valued by their section number."""

    ARITHMETIC = "6.1"
    RELATIONAL = "6.2"
    LOGICAL = "6.3"


OPERATORS: dict[str, OperatorClass] = {
    "+": OperatorClass.ARITHMETIC,
    "-": OperatorClass.ARITHMETIC,
    "*": OperatorClass.ARITHMETIC,
    "/": OperatorClass.ARITHMETIC,
    "**": OperatorClass.ARITHMETIC,
    ".LT.": OperatorClass.RELATIONAL,
    ".LE.": OperatorClass.RELATIONAL,
    ".EQ.": OperatorClass.RELATIONAL,
    ".NE.": OperatorClass.RELATIONAL,
    ".GT.": OperatorClass.RELATIONAL,
    ".GE.": OperatorClass.RELATIONAL,
    ".OR.": OperatorClass.LOGICAL,
    ".AND.": OperatorClass.LOGICAL,
    ".NOT.": OperatorClass.LOGICAL,
}
