"""
loxlang pipeline.

Runs one source string through every stage:

1. The lexer turns the text into tokens, collecting scan errors.
2. The parser builds the AST, recovering after each broken statement.
3. The resolver computes scope distances and checks scoping rules.
4. The interpreter walks the AST, unless any earlier stage reported an error.

Nothing is printed here. Every problem comes back inside the
:class:`RunResult` for the caller to format. Set ``LOXDEBUG`` in the
environment to log the token list and AST at DEBUG level.


File: runner.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import logging
import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field

from loxlang.exceptions import LoxError, LoxRuntimeError, ParseError, ResolutionError, ScanError
from loxlang.interpreter import Interpreter
from loxlang.lexer import Token, scan
from loxlang.nodes import Stmt
from loxlang.parser import Parser
from loxlang.resolver import Resolver

logger = logging.getLogger(__name__)

# Each level of source nesting or of script recursion costs several Python
# frames, so the default limit of 1000 is far too low.
RECURSION_LIMIT = 20_000


@dataclass
class Analysis:
    """Everything the static stages produce for one source string."""

    tokens: list[Token]
    statements: list[Stmt]
    locals: dict[int, int]
    scan_errors: list[ScanError] = field(default_factory=list)
    parse_errors: list[ParseError] = field(default_factory=list)
    resolution_errors: list[ResolutionError] = field(default_factory=list)
    next_id: int = 0

    @property
    def errors(self) -> list[LoxError]:
        return [*self.scan_errors, *self.parse_errors, *self.resolution_errors]


@dataclass
class RunResult:
    """Outcome of running one source string."""

    analysis: Analysis
    runtime_error: LoxRuntimeError | None = None
    executed: bool = False

    @property
    def scan_errors(self) -> list[ScanError]:
        return self.analysis.scan_errors

    @property
    def parse_errors(self) -> list[ParseError]:
        return self.analysis.parse_errors

    @property
    def resolution_errors(self) -> list[ResolutionError]:
        return self.analysis.resolution_errors

    @property
    def errors(self) -> list[LoxError]:
        """
        All errors in pipeline order.
        """
        errors = self.analysis.errors
        if self.runtime_error is not None:
            errors.append(self.runtime_error)
        return errors

    @property
    def ok(self) -> bool:
        return not self.errors


@contextmanager
def recursion_limit(limit: int = RECURSION_LIMIT):
    """
    Raise the interpreter's recursion limit to at least ``limit`` for the
    duration of the block, then put the previous limit back.
    """
    previous = sys.getrecursionlimit()
    if limit > previous:
        sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def debug_dump(tokens: list[Token], statements: list[Stmt]) -> None:
    """
    Log tokenized source and AST.
    """
    logger.debug("Tokens: %s", tokens)
    logger.debug("AST: %s", statements)


def analyze(source: str, file: str | None = None, first_id: int = 0) -> Analysis:
    """
    Scan, parse and resolve ``source`` without running it.

    Parameters:
        source (str): Program text.
        file (str): Script name used in error messages.
        first_id (int): Id of the first AST node, so nodes from separate
            sources fed to one interpreter never share an id.
    """
    tokens, scan_errors = scan(source, file)
    parser = Parser(tokens, file, first_id=first_id)
    resolver = Resolver(file)
    with recursion_limit():
        statements = parser.parse()
        locals_ = resolver.resolve(statements)

        if os.environ.get("LOXDEBUG"):
            debug_dump(tokens, statements)

    logger.debug(
        "Analyzed %s: %d tokens, %d statements, %d resolved references",
        file or "<script>", len(tokens), len(statements), len(locals_),
    )
    return Analysis(
        tokens=tokens,
        statements=statements,
        locals=locals_,
        scan_errors=scan_errors,
        parse_errors=parser.errors,
        resolution_errors=resolver.errors,
        next_id=parser.next_id,
    )


def run(source: str, interpreter: Interpreter | None = None, file: str | None = None) -> RunResult:
    """
    Run a program.

    Parameters:
        source (str): Program text.
        interpreter (Interpreter): Interpreter to run in. Globals persist
            between calls that share one. A new one is created when omitted.
        file (str): Script name used in error messages.

    Returns:
        RunResult: the analysis plus the runtime error, if there was one.
    """
    if interpreter is None:
        interpreter = Interpreter(file=file)

    analysis = analyze(source, file, first_id=interpreter.node_count)
    interpreter.node_count = analysis.next_id
    result = RunResult(analysis)

    if analysis.errors:
        logger.info(
            "Not running %s: %d static error(s)", file or "<script>", len(analysis.errors)
        )
        return result

    interpreter.resolve(analysis.locals)
    result.executed = True
    try:
        with recursion_limit():
            interpreter.interpret(analysis.statements)
    except LoxRuntimeError as e:
        logger.info("Runtime error: %s", e)
        result.runtime_error = e
    return result
