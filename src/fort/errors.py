"""Diagnostic messages and the LexError exception with formatted source context."""

from __future__ import annotations

from fort.tokens import Position, Token, TokenType


def format_error(message: str, section: str | None = None) -> str:
    """Compose the text of an ERROR token, citing the ASA FORTRAN section."""
    if section is not None:
        return f"Error: {message}. (ASA FORTRAN S. {section})"
    return f"Error: {message}."


class LexError(Exception):
    """Raised for an ERROR token, with position and the offending source line."""

    def __init__(self, message: str, position: Position, source_line: str = "") -> None:
        self.message = message
        self.position = position
        self.source_line = source_line
        super().__init__(self.format())

    @classmethod
    def from_token(cls, token: Token, source_line: str = "") -> LexError:
        if token.type is not TokenType.ERROR:
            raise ValueError(f"expected an ERROR token, got {token.type.name}")
        return cls(token.text.removeprefix("Error: "), token.position, source_line)

    def format(self, filename: str = "<stdin>") -> str:
        source_line = self.source_line.rstrip("\n")
        col = self.position.column

        pad = " " * (col - 1)

        line_num = str(self.position.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.position.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}^"
        )
