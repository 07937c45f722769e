"""
Tests for the loxlang language server helpers.
"""
import pytest

pytest.importorskip("pygls")

from lsprotocol.types import DiagnosticSeverity, SymbolKind  # noqa: E402

from loxlang.server import collect_diagnostics, collect_symbols  # noqa: E402


def test_clean_source_has_no_diagnostics():
    assert collect_diagnostics("var a = 1;\nprint a;\n") == []


def test_diagnostics_use_zero_based_lines():
    diagnostics = collect_diagnostics("var a = 1;\n\nprint ;\n{ var b = b; }\n")
    assert [d.range.start.line for d in diagnostics] == [2, 3]
    assert [d.code for d in diagnostics] == [
        "unexpected_token",
        "self_referential_initializer",
    ]
    assert all(d.severity == DiagnosticSeverity.Error for d in diagnostics)
    assert all(d.source == "loxlang" for d in diagnostics)


def test_scan_errors_become_diagnostics():
    diagnostics = collect_diagnostics('print "open')
    assert diagnostics[0].code == "unterminated_string"
    assert diagnostics[0].message == "Unterminated string"
    # The missing string also leaves the print statement without an operand.
    assert diagnostics[1].code == "unexpected_token"


def test_collect_symbols():
    symbols = collect_symbols("var count = 0;\n\nfun add(a, b) { return a + b; }\n")
    assert [(s.name, s.kind, s.line, s.detail) for s in symbols] == [
        ("count", SymbolKind.Variable, 0, "var count"),
        ("add", SymbolKind.Function, 2, "fun add(a, b)"),
    ]


def test_update_analyzes_each_edit_once(monkeypatch):
    from loxlang import server

    calls = []
    published = []
    real_analyze = server.analyze

    def counting_analyze(text):
        calls.append(text)
        return real_analyze(text)

    monkeypatch.setattr(server, "analyze", counting_analyze)
    monkeypatch.setattr(
        server.lang_server, "publish_diagnostics",
        lambda uri, diagnostics: published.append((uri, diagnostics)),
    )

    server.lang_server.update("file:///a.lox", "fun f() {}\nprint ;\n")

    assert calls == ["fun f() {}\nprint ;\n"]
    ((uri, diagnostics),) = published
    assert uri == "file:///a.lox"
    assert [d.code for d in diagnostics] == ["unexpected_token"]
    assert server.lang_server.find_symbol("file:///a.lox", "f").detail == "fun f()"
