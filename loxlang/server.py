"""
loxlang Language Server entry point.

This server provides basic language features for loxlang source files using
`pygls`. It reuses the lexer, parser and resolver to publish diagnostics for
every scan, parse and resolution error, and builds a simple index of
top-level declarations supporting hover information and document symbols.
Programs are never executed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_HOVER,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
    SymbolKind,
)
from pygls.server import LanguageServer

from loxlang.exceptions import LoxError
from loxlang.nodes import Function, Var
from loxlang.runner import Analysis, analyze

logger = logging.getLogger(__name__)


@dataclass
class LoxSymbol:
    """Represents a top-level symbol in a loxlang file."""

    name: str
    kind: SymbolKind
    line: int
    detail: str


def _line_range(line: int) -> Range:
    """Range covering the whole of 0-based ``line``."""
    return Range(Position(line, 0), Position(line + 1, 0))


def to_diagnostic(error: LoxError) -> Diagnostic:
    """Convert a collected error into an LSP diagnostic."""
    line = max((error.line or 1) - 1, 0)
    return Diagnostic(
        range=_line_range(line),
        message=error.message,
        severity=DiagnosticSeverity.Error,
        code=error.kind.value,
        source="loxlang",
    )


def diagnostics_from(analysis: Analysis) -> List[Diagnostic]:
    """Diagnostics for every error the static stages reported."""
    return [to_diagnostic(error) for error in analysis.errors]


def symbols_from(analysis: Analysis) -> List[LoxSymbol]:
    """Extract top-level function and variable declarations."""
    symbols: List[LoxSymbol] = []
    for stmt in analysis.statements:
        if isinstance(stmt, Function):
            params = ", ".join(param.lexeme for param in stmt.params)
            detail = f"fun {stmt.name.lexeme}({params})"
            symbols.append(
                LoxSymbol(stmt.name.lexeme, SymbolKind.Function, stmt.name.line - 1, detail)
            )
        elif isinstance(stmt, Var):
            detail = f"var {stmt.name.lexeme}"
            symbols.append(
                LoxSymbol(stmt.name.lexeme, SymbolKind.Variable, stmt.name.line - 1, detail)
            )
    return symbols


def collect_diagnostics(text: str) -> List[Diagnostic]:
    """Run the static stages over ``text`` and return their errors."""
    return diagnostics_from(analyze(text))


def collect_symbols(text: str) -> List[LoxSymbol]:
    """Top-level declarations in ``text``."""
    return symbols_from(analyze(text))


class LoxLanguageServer(LanguageServer):
    """Language server for loxlang source files."""

    def __init__(self) -> None:
        super().__init__("loxlang-ls", "v0.1")
        self.symbols_by_uri: Dict[str, List[LoxSymbol]] = {}

    def update(self, uri: str, text: str) -> None:
        """Re-analyze ``text`` and publish diagnostics for ``uri``."""
        analysis = analyze(text)
        diagnostics = diagnostics_from(analysis)
        self.symbols_by_uri[uri] = symbols_from(analysis)
        logger.debug("%s: %d diagnostic(s)", uri, len(diagnostics))
        self.publish_diagnostics(uri, diagnostics)

    def find_symbol(self, uri: str, word: str) -> Optional[LoxSymbol]:
        for sym in self.symbols_by_uri.get(uri, []):
            if sym.name == word:
                return sym
        return None


lang_server = LoxLanguageServer()


@lang_server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LoxLanguageServer, params: DidOpenTextDocumentParams) -> None:
    """Analyze a document when it is opened."""
    ls.update(params.text_document.uri, params.text_document.text)


@lang_server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LoxLanguageServer, params: DidChangeTextDocumentParams) -> None:
    """Re-analyze a document when it changes."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    ls.update(doc.uri, doc.source)


@lang_server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls: LoxLanguageServer, params: HoverParams) -> Optional[Hover]:
    """Return hover information for the symbol under the cursor."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    word = doc.word_at_position(params.position)
    if not word:
        return None
    sym = ls.find_symbol(doc.uri, word)
    if sym is None:
        return None
    contents = MarkupContent(kind=MarkupKind.PlainText, value=sym.detail)
    return Hover(contents=contents)


@lang_server.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbols(ls: LoxLanguageServer, params: DocumentSymbolParams):
    """Return top-level symbols for the given document."""
    symbols = ls.symbols_by_uri.get(params.text_document.uri, [])
    result: List[DocumentSymbol] = []
    for sym in symbols:
        rng = Range(Position(sym.line, 0), Position(sym.line, len(sym.name)))
        result.append(
            DocumentSymbol(
                name=sym.name,
                kind=sym.kind,
                range=rng,
                selection_range=rng,
                detail=sym.detail,
            )
        )
    return result


def main() -> None:
    """Start the language server."""
    lang_server.start_io()


if __name__ == "__main__":
    main()
