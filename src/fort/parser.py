"""Token consumer that records statement labels and symbolic names."""

from __future__ import annotations

from collections.abc import Iterator

from fort.hashtable import HashTable
from fort.lexer import Lexer
from fort.tokens import PREFIX_LENGTH, Token, TokenType


def label_key(text: str, *, prefix: bool = False) -> str:
    """Normalize label text: blanks are insignificant and leading zeros ignored.

    A line prefix label carries the continuation column as its sixth
    character, which is not part of the label.
    """
    if prefix:
        text = text[: PREFIX_LENGTH - 1]
    digits = text.replace(" ", "")
    return str(int(digits)) if digits else ""


class Parser:
    """Pull tokens from a Lexer one at a time, filling the symbol tables.

    ``labels`` maps each defined statement label to the LABEL token that
    defined it and ``names`` maps each symbolic name to its first IDENT token.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.labels = HashTable()
        self.names = HashTable()
        self.references: list[Token] = []
        self.duplicates: list[Token] = []
        self._prev: Token | None = None

    def next_token(self) -> Token | None:
        tok = self.lexer.next_token()
        if tok is not None:
            self._record(tok)
            self._prev = tok
        return tok

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            if tok is None:
                return
            yield tok

    def parse(self) -> list[Token]:
        """Consume the whole token stream and return it."""
        return list(self)

    def _record(self, tok: Token) -> None:
        if tok.type is TokenType.LABEL:
            if self._after_goto():
                self.references.append(tok)
            else:
                key = label_key(tok.text, prefix=True)
                if key in self.labels:
                    self.duplicates.append(tok)
                else:
                    self.labels.put(key, tok)
        elif tok.type is TokenType.IDENT and tok.text not in self.names:
            self.names.put(tok.text, tok)

    def _after_goto(self) -> bool:
        prev = self._prev
        return prev is not None and prev.type is TokenType.KEYWORD and prev.text == "GOTO"

    def undefined_labels(self) -> list[Token]:
        """Return GO TO targets that no statement label defines."""
        return [tok for tok in self.references if label_key(tok.text) not in self.labels]
