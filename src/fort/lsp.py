"""Minimal LSP server for FORTRAN 66 sources, diagnostics only."""

from __future__ import annotations

import io

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from fort import __version__
from fort.lexer import Lexer
from fort.parser import Parser, label_key
from fort.source import CharSource
from fort.tokens import Token, TokenType

server = LanguageServer("fort-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)


def _token_range(tok: Token, width: int) -> Range:
    """Range of *width* characters ending where *tok* was emitted."""
    line = tok.line - 1
    end = tok.column - 1
    start = max(0, end - width)
    return Range(
        start=Position(line=line, character=start),
        end=Position(line=line, character=end),
    )


def _error_range(tok: Token) -> Range:
    line = tok.line - 1
    col = tok.column - 1
    return Range(
        start=Position(line=line, character=col),
        end=Position(line=line, character=col + 1),
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Lex the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    parser = Parser(Lexer(CharSource(io.StringIO(doc.source))))
    diagnostics: list[Diagnostic] = []

    for tok in parser:
        if tok.type is TokenType.ERROR:
            diagnostics.append(
                Diagnostic(
                    range=_error_range(tok),
                    message=tok.text,
                    severity=DiagnosticSeverity.Error,
                    source="fort",
                )
            )

    for tok in parser.undefined_labels():
        diagnostics.append(
            Diagnostic(
                range=_token_range(tok, len(tok.text)),
                message=f"GO TO references undefined label {label_key(tok.text)}",
                severity=DiagnosticSeverity.Warning,
                source="fort",
            )
        )
    for tok in parser.duplicates:
        diagnostics.append(
            Diagnostic(
                range=_token_range(tok, len(tok.text)),
                message=f"Label {label_key(tok.text, prefix=True)} is already defined",
                severity=DiagnosticSeverity.Warning,
                source="fort",
            )
        )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
