"""
Utility functions shared across loxlang tests.
"""
from loxlang.interpreter import Interpreter
from loxlang.lexer import scan
from loxlang.parser import Parser
from loxlang.resolver import Resolver
from loxlang.runner import RunResult, run


def parse_source(source: str):
    """
    Parse source code and return the AST. Fails the test on any error.
    """
    tokens, scan_errors = scan(source, "<test>")
    assert scan_errors == []
    parser = Parser(tokens, "<test>")
    statements = parser.parse()
    assert parser.errors == [], parser.errors
    return statements


def parse_with_errors(source: str):
    """
    Parse source code and return the AST together with the parse errors.
    """
    tokens, _ = scan(source, "<test>")
    parser = Parser(tokens, "<test>")
    statements = parser.parse()
    return statements, parser.errors


def resolve_source(source: str):
    """
    Parse and resolve source code. Returns the AST, distances and resolver errors.
    """
    statements = parse_source(source)
    resolver = Resolver("<test>")
    locals_ = resolver.resolve(statements)
    return statements, locals_, resolver.errors


def run_source(source: str) -> tuple[list[str], RunResult]:
    """
    Run source code, capturing printed lines instead of writing to stdout.
    """
    lines: list[str] = []
    interpreter = Interpreter(output=lines.append, file="<test>")
    result = run(source, interpreter, "<test>")
    return lines, result


def output_of(source: str) -> list[str]:
    """
    Run source code that must not fail and return the printed lines.
    """
    lines, result = run_source(source)
    assert result.ok, result.errors
    return lines
