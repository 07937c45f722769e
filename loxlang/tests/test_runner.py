"""
Tests for the loxlang pipeline: error collection across stages and the
rule that nothing runs after a static error.
"""
import logging
import sys

from loxlang.exceptions import ErrorKind, LoxRuntimeError, ParseError, ResolutionError, ScanError
from loxlang.interpreter import Interpreter
from loxlang.runner import analyze, run

from loxlang.tests.utils import run_source


def test_successful_run():
    lines, result = run_source('print "hi";')
    assert result.ok
    assert result.executed
    assert result.errors == []
    assert lines == ["hi"]


def test_parse_errors_prevent_execution():
    lines, result = run_source('print "before"; var = 1; print ; print "after";')
    assert not result.executed
    assert lines == []
    assert len(result.parse_errors) == 2
    assert all(isinstance(e, ParseError) for e in result.errors)


def test_scan_errors_prevent_execution():
    lines, result = run_source('print "ok"; @')
    assert not result.executed
    assert lines == []
    assert [type(e) for e in result.errors] == [ScanError]


def test_resolution_errors_prevent_execution():
    lines, result = run_source('print "before"; return 1;')
    assert not result.executed
    assert lines == []
    assert [e.kind for e in result.resolution_errors] == [ErrorKind.RETURN_OUTSIDE_FUNCTION]
    assert isinstance(result.errors[0], ResolutionError)


def test_errors_from_every_static_stage_are_reported_together():
    lines, result = run_source("@\nprint ;\n{ var a = a; }\n")
    kinds = [e.kind for e in result.errors]
    assert kinds == [
        ErrorKind.UNEXPECTED_CHARACTER,
        ErrorKind.UNEXPECTED_TOKEN,
        ErrorKind.SELF_REFERENTIAL_INITIALIZER,
    ]
    assert [e.line for e in result.errors] == [1, 2, 3]


def test_runtime_error_stops_remaining_statements():
    lines, result = run_source('print "one"; print -"two"; print "three";')
    assert result.executed
    assert lines == ["one"]
    assert isinstance(result.runtime_error, LoxRuntimeError)
    assert result.errors == [result.runtime_error]
    assert not result.ok


def test_error_message_includes_line_and_file():
    lines, result = run_source("\n\nprint nope;")
    assert result.runtime_error.line == 3
    assert str(result.runtime_error) == "Undefined variable 'nope' on line 3 in <test>"
    _, parse_result = run_source("print 1")
    assert str(parse_result.parse_errors[0]) == "Expect ';' after value at end on line 1 in <test>"


def test_interpreter_keeps_globals_between_runs():
    lines = []
    interpreter = Interpreter(output=lines.append)
    run("var count = 1; fun bump() { count = count + 1; }", interpreter)
    run("bump(); bump(); print count;", interpreter)
    assert lines == ["3"]


def test_closures_survive_later_runs():
    """
    Test that node ids from separate runs never collide, so a closure made
    in one run still reads the right scope in the next.
    """
    lines = []
    interpreter = Interpreter(output=lines.append)
    run(
        "fun make() { var secret = \"kept\"; fun get() { return secret; } return get; }\n"
        "var g = make();",
        interpreter,
    )
    first_count = interpreter.node_count
    run("{ var x = 1; { var y = 2; print g(); print x + y; } }", interpreter)
    assert interpreter.node_count > first_count
    assert lines == ["kept", "3"]


def test_analyze_does_not_execute():
    analysis = analyze("print 1; { var a = 1; print a; }")
    assert analysis.errors == []
    assert len(analysis.statements) == 2
    assert len(analysis.locals) == 1
    assert analysis.next_id > 0


def test_debug_dump_when_env_var_set(monkeypatch, caplog):
    monkeypatch.setenv("LOXDEBUG", "1")
    with caplog.at_level(logging.DEBUG, logger="loxlang.runner"):
        analyze("print 1;")
    assert any(message.startswith("Tokens:") for message in caplog.messages)
    assert any(message.startswith("AST:") for message in caplog.messages)


def test_no_debug_dump_by_default(monkeypatch, caplog):
    monkeypatch.delenv("LOXDEBUG", raising=False)
    with caplog.at_level(logging.DEBUG, logger="loxlang.runner"):
        analyze("print 1;")
    assert not any(message.startswith("Tokens:") for message in caplog.messages)


def test_deeply_nested_source_runs():
    lines, result = run_source("print " + "(" * 50 + "1" + ")" * 50 + ";")
    assert result.ok
    assert lines == ["1"]

    lines, result = run_source("{" * 200 + "print 2;" + "}" * 200)
    assert result.ok
    assert lines == ["2"]


def test_nesting_beyond_the_stack_is_a_parse_error():
    lines, result = run_source("print " + "(" * 5000 + "1" + ")" * 5000 + "; print 3;")
    assert [e.kind for e in result.errors] == [ErrorKind.NESTING_TOO_DEEP]
    assert isinstance(result.parse_errors[0], ParseError)
    assert result.parse_errors[0].token.lexeme == "("
    assert not result.executed
    assert lines == []


def test_recursion_limit_is_restored_after_run():
    before = sys.getrecursionlimit()
    run_source("fun f(n) { if (n > 0) f(n - 1); } f(500);")
    assert sys.getrecursionlimit() == before
