"""Errors.

Every stage of the pipeline reports problems as instances of
:class:`LoxError`. Scan, parse and resolution errors are collected into lists
and handed back to the caller; runtime errors are raised and stop the run.


File: exceptions.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from enum import Enum


class ErrorKind(str, Enum):
    """
    Enumeration of every diagnostic the interpreter can produce.
    """

    # Scanning
    UNEXPECTED_CHARACTER = "unexpected_character"
    UNTERMINATED_STRING = "unterminated_string"

    # Parsing
    UNEXPECTED_TOKEN = "unexpected_token"
    INVALID_ASSIGNMENT_TARGET = "invalid_assignment_target"
    TOO_MANY_PARAMETERS = "too_many_parameters"
    TOO_MANY_ARGUMENTS = "too_many_arguments"
    NESTING_TOO_DEEP = "nesting_too_deep"

    # Resolution
    SELF_REFERENTIAL_INITIALIZER = "self_referential_initializer"
    DUPLICATE_VARIABLE_IN_SCOPE = "duplicate_variable_in_scope"
    RETURN_OUTSIDE_FUNCTION = "return_outside_function"
    BREAK_OUTSIDE_LOOP = "break_outside_loop"

    # Runtime
    OPERAND_MUST_BE_NUMBER = "operand_must_be_number"
    OPERANDS_MUST_BE_NUMBERS = "operands_must_be_numbers"
    OPERANDS_MUST_BE_NUMBERS_OR_STRINGS = "operands_must_be_numbers_or_strings"
    UNDEFINED_VARIABLE = "undefined_variable"
    NOT_CALLABLE = "not_callable"
    ARITY_MISMATCH = "arity_mismatch"
    STACK_OVERFLOW = "stack_overflow"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


class LoxError(Exception):
    """
    Base class for all interpreter diagnostics.

    Attributes:
        kind (ErrorKind): What went wrong.
        message (str): Human readable description without location.
        token (Token | None): Token the error points at, when there is one.
        line (int | None): Source line of the error.
        file (str | None): Name of the script, when known.
    """
    def __init__(self, kind, message, token=None, line=None, file=None):
        self.kind = kind
        self.message = message
        self.token = token
        self.line = line if line is not None else getattr(token, "line", None)
        self.file = file
        super().__init__(message)

    def __str__(self):
        text = self.message
        if self.line is not None:
            text += f" on line {self.line}"
        if self.file is not None:
            text += f" in {self.file}"
        return text


class ScanError(LoxError):
    """
    Error for characters the scanner cannot turn into a token.
    """


class ParseError(LoxError):
    """
    Error for token sequences that do not match the grammar.
    """


class ResolutionError(LoxError):
    """
    Error for scoping mistakes found before the program runs.
    """


class LoxRuntimeError(LoxError):
    """
    Error raised while evaluating a program. Ends the current run.
    """


class ArityMismatchError(LoxRuntimeError):
    """
    Error for calling a function with the wrong number of arguments.
    """
    def __init__(self, expected, got, token=None, file=None):
        self.expected = expected
        self.got = got
        super().__init__(
            ErrorKind.ARITY_MISMATCH,
            f"Expected {expected} arguments but got {got}",
            token,
            file=file,
        )
