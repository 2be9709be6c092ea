"""Minimal LSP server for Leg — diagnostics only."""

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

from leg import __version__
from leg.errors import InterpError, ParsingError, TokenizationError
from leg.eval import evaluate
from leg.lexer import tokenize
from leg.parser import parse
from leg.tokens import Span

server = LanguageServer("leg-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)


def _span_range(span: Span) -> Range:
    """Convert a 1-based source span to a 0-based LSP range."""
    return Range(
        start=Position(line=span.start.line - 1, character=span.start.column - 1),
        end=Position(line=span.end.line - 1, character=span.end.column - 1),
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the Leg pipeline and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    diagnostics: list[Diagnostic] = []

    try:
        ast = parse(tokenize(source), source)
    except TokenizationError as exc:
        line = exc.position.line - 1
        col = exc.position.column - 1
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col + 1),
                ),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="leg",
            )
        )
    except ParsingError as exc:
        diagnostics.append(
            Diagnostic(
                range=_span_range(exc.span),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="leg",
            )
        )
    else:
        try:
            # print output must never reach the protocol stream
            evaluate(ast, out=io.StringIO())
        except InterpError as exc:
            if exc.span is not None:
                rng = _span_range(exc.span)
            else:
                rng = Range(
                    start=Position(line=0, character=0),
                    end=Position(line=0, character=1),
                )
            message = exc.message
            if exc.call_stack:
                chain = " -> ".join(f"{name}()" for name in exc.call_stack)
                message += f" (in call chain: {chain})"
            diagnostics.append(
                Diagnostic(
                    range=rng,
                    message=message,
                    severity=DiagnosticSeverity.Warning,
                    source="leg",
                )
            )
        except AssertionError as exc:
            # Call arity mismatch; no position is attached
            diagnostics.append(
                Diagnostic(
                    range=Range(
                        start=Position(line=0, character=0),
                        end=Position(line=0, character=1),
                    ),
                    message=str(exc),
                    severity=DiagnosticSeverity.Warning,
                    source="leg",
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
