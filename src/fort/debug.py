"""Human-readable token lines and --debug symbol table dumps."""

from __future__ import annotations

import sys
from typing import TextIO

from fort.hashtable import HashTable
from fort.parser import Parser
from fort.tokens import Token


def format_token(tok: Token) -> str:
    """Render a token as ``<line>:<col> (<KIND>) '<text>'`` on a single line."""
    text = tok.text.replace("\n", "\\n")
    return f"{tok.line}:{tok.column} ({tok.type.name}) '{text}'"


def dump_symbols(parser: Parser, *, file: TextIO = sys.stderr) -> None:
    """Print the label and name tables collected by *parser* to *file*."""
    _dump_table("Labels", parser.labels, file)
    _dump_table("Names", parser.names, file)
    undefined = parser.undefined_labels()
    if undefined:
        file.write("Undefined labels\n")
        for tok in undefined:
            file.write(f"  {tok.text.strip()} at {tok.line}:{tok.column}\n")


def _dump_table(title: str, table: HashTable, f: TextIO) -> None:
    f.write(f"{title} ({len(table)} of {table.capacity} slots)\n")
    for key, tok in sorted(table.items(), key=lambda item: (item[1].line, item[1].column)):
        f.write(f"  {key} at {tok.line}:{tok.column}\n")
