"""FORTRAN 66 lexer: a column-sensitive state machine over a character source."""

from __future__ import annotations

import io
from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum, auto

from fort.errors import LexError, format_error
from fort.hashtable import HashTable
from fort.source import EOF, CharSource
from fort.tokens import (
    COMMENT_MARKER,
    MAX_LINE_LENGTH,
    MAX_SYMBOLIC_NAME_LENGTH,
    OPERATORS,
    PREFIX_LENGTH,
    Token,
    TokenType,
    is_digit,
    is_letter,
)


class State(Enum):
    START = auto()
    PREFIX = auto()
    PREFIX_LABEL = auto()
    LINE = auto()
    IDENT_OR_KEYWORD = auto()
    GOTO = auto()
    GOTO_LABEL = auto()
    ASSIGNED_GOTO = auto()
    COMMENT_LINE = auto()
    END = auto()
    DONE = auto()


@dataclass(frozen=True, slots=True)
class KeywordRule:
    """Token kind emitted for a keyword and the state that lexes the rest of its statement."""

    kind: TokenType
    follow: State


# IF, CALL, RETURN, CONTINUE and DO statements are not lexed past the keyword.
_KEYWORD_FOLLOW = (
    ("END", State.END),
    ("GOTO", State.GOTO),
    ("IF", State.DONE),
    ("CALL", State.DONE),
    ("RETURN", State.DONE),
    ("CONTINUE", State.DONE),
    ("DO", State.DONE),
)


def _keyword_table() -> HashTable:
    table = HashTable()
    for text, follow in _KEYWORD_FOLLOW:
        table.put(text, KeywordRule(TokenType.KEYWORD, follow))
    return table


KEYWORDS = _keyword_table()

# Names may run past the symbolic name limit only while they can still become a keyword
_KEYWORD_PREFIXES = frozenset(
    text[:n] for text, _ in _KEYWORD_FOLLOW for n in range(1, len(text) + 1)
)


class Lexer:
    """Produce FORTRAN tokens on demand from a CharSource.

    Each state handler consumes input, may queue tokens, and returns the next
    state. ``next_token()`` runs handlers until a token is queued or the
    machine reaches ``State.DONE``.
    """

    def __init__(self, source: CharSource) -> None:
        self._source = source
        self._buf: list[str] = []
        self._queue: deque[Token] = deque()
        self._line = 0
        self._col = 0
        self._line_chars: list[str] = []
        self._state = State.START

    @property
    def state(self) -> State:
        return self._state

    @property
    def line_text(self) -> str:
        """Characters read so far on the current physical line."""
        return "".join(self._line_chars)

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def next_token(self) -> Token | None:
        """Return the next token, or None once the stream is exhausted."""
        while self._state is not State.DONE and not self._queue:
            self._state = _TRANSITIONS[self._state](self)
        if self._queue:
            return self._queue.popleft()
        return None

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            if tok is None:
                return
            yield tok

    # ------------------------------------------------------------------
    # Buffering helpers
    # ------------------------------------------------------------------

    def _advance(self) -> str:
        ch = self._source.next()
        if ch == "\n":
            self._line += 1
            self._col = 0
            self._line_chars.clear()
        elif ch != EOF:
            self._col += 1
            self._line_chars.append(ch)
        return ch

    def _peek(self) -> str:
        return self._source.peek()

    def _next(self) -> str:
        ch = self._advance()
        if ch != EOF:
            self._buf.append(ch)
        return ch

    def _skip(self) -> str:
        return self._advance()

    def _ignore(self) -> str:
        ch = self._advance()
        self._buf.clear()
        return ch

    def _emit(self, tt: TokenType, text: str | None = None) -> Token:
        if text is None:
            text = "".join(self._buf)
        tok = Token(tt, text, self._line + 1, self._col + 1)
        self._buf = []
        self._queue.append(tok)
        return tok

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _emit_error(self, message: str, section: str | None) -> Token:
        return self._emit(TokenType.ERROR, format_error(message, section))

    def _error(self, message: str, section: str | None) -> State:
        self._emit_error(message, section)
        return State.DONE

    def _line_too_long(self, line_type: str) -> State:
        return self._error(
            f"{line_type} exceeds maximum line length ({MAX_LINE_LENGTH})", "3.2"
        )

    def _early_termination(self, line_type: str) -> State:
        return self._error(f"{line_type} terminated program, expected End Line", "3.2.2")

    # ------------------------------------------------------------------
    # Lines and prefixes (Section 3.2)
    # ------------------------------------------------------------------

    def _start(self) -> State:
        return State.PREFIX

    def _prefix(self) -> State:
        ch = self._peek()
        if ch == EOF:
            return State.DONE
        if ch == COMMENT_MARKER:
            self._ignore()
            return State.COMMENT_LINE

        while self._col < PREFIX_LENGTH - 1:
            ch = self._peek()
            if ch == EOF:
                return self._early_termination("Line Prefix")
            if ch == "\n":
                if self._col == 0:
                    self._ignore()  # blank line
                    return State.START
                return self._error("Truncated Line Prefix", "3.2")
            if is_digit(ch):
                return State.PREFIX_LABEL
            if ch != " ":
                return self._error(f"Unexpected character '{ch}' in Line Prefix", "3.2")
            self._next()

        # Column 6 is the continuation column
        ch = self._peek()
        if ch == EOF:
            return self._early_termination("Line Prefix")
        if ch == "\n":
            return self._error("Truncated Line Prefix", "3.2")
        if ch not in ("0", " "):
            return self._error("Continuation Lines are not supported", "3.2.4")
        self._ignore()
        return State.LINE

    def _prefix_label(self) -> State:
        while self._col < PREFIX_LENGTH:
            ch = self._peek()
            if ch == EOF:
                return self._early_termination("Label in Line Prefix")
            if ch == "\n":
                return self._error("Line terminated before Line Prefix ended", "3.2.2")
            if self._col < PREFIX_LENGTH - 1:
                valid = is_digit(ch) or ch == " "
            else:
                valid = ch in ("0", " ")
            if not valid:
                return self._error("Malformed Label", "3.4")
            self._next()
        self._emit(TokenType.LABEL)
        return State.LINE

    def _comment_line(self) -> State:
        while True:
            ch = self._peek()
            if ch == EOF:
                return self._early_termination("Comment Line")
            if ch == "\n":
                self._emit(TokenType.COMMENT)
                self._next()
                self._emit(TokenType.NEWLINE)
                return State.START
            if self._col >= MAX_LINE_LENGTH:
                return self._line_too_long("Comment Line")
            self._next()

    def _line(self) -> State:
        while True:
            ch = self._peek()
            if ch == EOF:
                return self._early_termination("Statement")
            if ch == "\n":
                self._next()
                self._emit(TokenType.NEWLINE)
                return State.START
            if self._col >= MAX_LINE_LENGTH:
                return self._line_too_long("Line")
            if ch == " ":
                self._skip()
                continue
            if is_letter(ch):
                return State.IDENT_OR_KEYWORD
            op = OPERATORS.get(ch)
            if op is not None:
                return self._error(
                    f"{op.name.capitalize()} operator '{ch}' outside of an expression",
                    op.value,
                )
            return self._error(f"Unknown character '{ch}' in Line", "3.1")

    # ------------------------------------------------------------------
    # Symbolic names and keywords (Sections 3.5, 10.1)
    # ------------------------------------------------------------------

    def _ident_or_keyword(self) -> State:
        too_long = (
            f"Identifier exceeds maximum Symbolic Name length ({MAX_SYMBOLIC_NAME_LENGTH})"
        )
        ch = self._peek()
        while ch != EOF and ch != "\n" and self._col < MAX_LINE_LENGTH:
            if ch == " ":
                self._skip()
            elif is_letter(ch):
                self._next()
                if (
                    len(self._buf) > MAX_SYMBOLIC_NAME_LENGTH
                    and "".join(self._buf) not in _KEYWORD_PREFIXES
                ):
                    return self._error(too_long, "3.5")
            else:
                break
            ch = self._peek()
        if ch not in (EOF, "\n") and self._col >= MAX_LINE_LENGTH:
            return self._line_too_long("Line")

        name = "".join(self._buf)
        rule = KEYWORDS.fetch(name)
        if rule is not None:
            self._emit(rule.kind)
            return rule.follow
        if ch == EOF:
            return self._early_termination("Symbolic Name")
        if len(name) > MAX_SYMBOLIC_NAME_LENGTH:
            return self._error(too_long, "3.5")
        self._emit(TokenType.IDENT)
        return State.LINE

    # ------------------------------------------------------------------
    # GO TO statements (Section 7.1.2.1)
    # ------------------------------------------------------------------

    def _goto(self) -> State:
        while True:
            ch = self._peek()
            if ch == EOF:
                return self._early_termination("GO TO Statement")
            if ch == "\n":
                return self._error(
                    "Unexpected newline, expected Label in GO TO Statement", "7.1.2.1"
                )
            if self._col >= MAX_LINE_LENGTH:
                return self._line_too_long("GO TO Statement")
            if ch == " ":
                self._skip()
                continue
            if is_digit(ch):
                return State.GOTO_LABEL
            if ch == "(":
                # Computed GO TO (Section 7.1.2.1.3) is not lexed
                return State.DONE
            return self._error(f"Unexpected character '{ch}' in GO TO Statement", "7.1.2.1")

    def _goto_label(self) -> State:
        while True:
            ch = self._peek()
            if ch == EOF:
                return self._early_termination("GO TO Statement")
            if ch == "\n":
                self._emit(TokenType.LABEL)
                self._next()
                self._emit(TokenType.NEWLINE)
                return State.START
            if self._col >= MAX_LINE_LENGTH:
                return self._line_too_long("GO TO Label")
            if is_digit(ch):
                self._next()
            elif ch == " ":
                self._skip()
            elif ch == ",":
                self._emit(TokenType.LABEL)
                return State.ASSIGNED_GOTO
            else:
                return self._error(
                    f"Unexpected character '{ch}' in GO TO Label", "7.1.2.1.1, 7.1.2.1.3"
                )

    def _assigned_goto(self) -> State:
        return State.DONE

    # ------------------------------------------------------------------
    # End line (Section 3.2.2)
    # ------------------------------------------------------------------

    def _end(self) -> State:
        # Newlines after END are tolerated as an extension.
        while True:
            ch = self._peek()
            if ch == EOF:
                self._emit(TokenType.END)
                return State.DONE
            if ch != "\n" and self._col >= MAX_LINE_LENGTH:
                return self._line_too_long("End Line")
            self._skip()
            if ch not in ("\n", " "):
                # Stray characters are reported without stopping the scan
                self._emit_error(f"Unexpected character '{ch}' in End Line", "3.2.2")
                return State.END


_TRANSITIONS: dict[State, Callable[[Lexer], State]] = {
    State.START: Lexer._start,
    State.PREFIX: Lexer._prefix,
    State.PREFIX_LABEL: Lexer._prefix_label,
    State.LINE: Lexer._line,
    State.IDENT_OR_KEYWORD: Lexer._ident_or_keyword,
    State.GOTO: Lexer._goto,
    State.GOTO_LABEL: Lexer._goto_label,
    State.ASSIGNED_GOTO: Lexer._assigned_goto,
    State.COMMENT_LINE: Lexer._comment_line,
    State.END: Lexer._end,
}


def tokenize(source: str) -> list[Token]:
    """Convenience function: tokenize source text and return the token list."""
    return list(Lexer(CharSource(io.StringIO(source))))


def check(source: str) -> list[Token]:
    """Tokenize source text, raising LexError at the first ERROR token."""
    lexer = Lexer(CharSource(io.StringIO(source)))
    tokens: list[Token] = []
    for tok in lexer:
        if tok.type is TokenType.ERROR:
            raise LexError.from_token(tok, lexer.line_text)
        tokens.append(tok)
    return tokens
