"""Lexer for loxlang.

This lexer performs a single pass over the source code using a combined
regular expression of named groups. Each match yields a :class:`Token`
containing its type, lexeme, literal value and source line number.

Tokens cover literals (numbers, strings), keywords (``var``, ``fun``,
``while`` …), operators and delimiters. ``//`` comments and whitespace are
skipped. Characters that do not start any token are recorded as
:class:`ScanError` values and scanning carries on, so the caller always gets
a complete token list ending in ``EOF``.


File: lexer.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.1
License: MIT
"""

import re
from dataclasses import dataclass
from enum import Enum

from loxlang.exceptions import ErrorKind, ScanError


class TokenType(str, Enum):
    """
    Enumeration of token types.
    """

    # Single-character tokens
    LEFT_PAREN = "LEFT_PAREN"
    RIGHT_PAREN = "RIGHT_PAREN"
    LEFT_BRACE = "LEFT_BRACE"
    RIGHT_BRACE = "RIGHT_BRACE"
    COMMA = "COMMA"
    DOT = "DOT"
    MINUS = "MINUS"
    PLUS = "PLUS"
    SEMICOLON = "SEMICOLON"
    SLASH = "SLASH"
    STAR = "STAR"

    # One or two character tokens
    BANG = "BANG"
    BANG_EQUAL = "BANG_EQUAL"
    EQUAL = "EQUAL"
    EQUAL_EQUAL = "EQUAL_EQUAL"
    GREATER = "GREATER"
    GREATER_EQUAL = "GREATER_EQUAL"
    LESS = "LESS"
    LESS_EQUAL = "LESS_EQUAL"

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Keywords
    AND = "AND"
    BREAK = "BREAK"
    CLASS = "CLASS"
    ELSE = "ELSE"
    FALSE = "FALSE"
    FUN = "FUN"
    FOR = "FOR"
    IF = "IF"
    NIL = "NIL"
    OR = "OR"
    PRINT = "PRINT"
    RETURN = "RETURN"
    SUPER = "SUPER"
    THIS = "THIS"
    TRUE = "TRUE"
    VAR = "VAR"
    WHILE = "WHILE"

    EOF = "EOF"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


KEYWORDS: dict[str, TokenType] = {
    "and": TokenType.AND,
    "break": TokenType.BREAK,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "fun": TokenType.FUN,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
}


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token.

    Attributes:
        type (TokenType): The token type.
        lexeme (str): The exact source text of the token.
        literal (float | str | None): Parsed value for NUMBER and STRING tokens.
        line (int): The line the token starts on.
    """
    type: TokenType
    lexeme: str
    literal: object
    line: int

    def __repr__(self) -> str:
        """
        Return a string representation of the token.
        """
        return f"Token({self.type}, {self.lexeme!r}, line={self.line})"


# Two-character operators must come before their one-character prefixes.
TOKEN_SPECIFICATION: list[tuple[str, str]] = [
    # Literals
    ('NUMBER',         r'\d+(?:\.\d+)?'),
    ('STRING',         r'"[^"]*"'),
    ('UNTERMINATED',   r'"[^"]*\Z'),

    # Identifiers and keywords
    ('IDENTIFIER',     r'[A-Za-z_][A-Za-z0-9_]*'),

    # Comments
    ('COMMENT',        r'//[^\n]*'),

    # Comparison and equality
    ('BANG_EQUAL',     r'!='),
    ('EQUAL_EQUAL',    r'=='),
    ('GREATER_EQUAL',  r'>='),
    ('LESS_EQUAL',     r'<='),
    ('BANG',           r'!'),
    ('EQUAL',          r'='),
    ('GREATER',        r'>'),
    ('LESS',           r'<'),

    # Delimiters
    ('LEFT_PAREN',     r'\('),
    ('RIGHT_PAREN',    r'\)'),
    ('LEFT_BRACE',     r'\{'),
    ('RIGHT_BRACE',    r'\}'),
    ('COMMA',          r','),
    ('DOT',            r'\.'),
    ('SEMICOLON',      r';'),

    # Arithmetic operators
    ('MINUS',          r'-'),
    ('PLUS',           r'\+'),
    ('SLASH',          r'/'),
    ('STAR',           r'\*'),

    # Miscellaneous
    ('NEWLINE',        r'\n'),
    ('SKIP',           r'[ \t\r]+'),
    ('MISMATCH',       r'.'),
]

TOKEN_REGEX = re.compile(
    '|'.join(f'(?P<{name}>{pattern})' for name, pattern in TOKEN_SPECIFICATION)
)


def scan(source: str, file: str | None = None) -> tuple[list[Token], list[ScanError]]:
    """
    Convert a string of source code into a list of tokens.

    Parameters:
        source (str): The source code to scan.
        file (str | None): Script name used in error messages.

    Returns:
        list[Token]: The tokens, always terminated by an EOF token.
        list[ScanError]: Errors collected along the way.
    """
    tokens: list[Token] = []
    errors: list[ScanError] = []
    line_num = 1

    for match_obj in TOKEN_REGEX.finditer(source):
        kind = match_obj.lastgroup
        value = match_obj.group()

        if kind == 'NEWLINE':
            line_num += 1
            continue
        if kind in ('SKIP', 'COMMENT'):
            continue
        if kind == 'MISMATCH':
            errors.append(ScanError(
                ErrorKind.UNEXPECTED_CHARACTER,
                f"Unexpected character '{value}'",
                line=line_num,
                file=file,
            ))
            continue
        if kind == 'UNTERMINATED':
            errors.append(ScanError(
                ErrorKind.UNTERMINATED_STRING,
                "Unterminated string",
                line=line_num,
                file=file,
            ))
            line_num += value.count('\n')
            continue

        if kind == 'NUMBER':
            tokens.append(Token(TokenType.NUMBER, value, float(value), line_num))
        elif kind == 'STRING':
            tokens.append(Token(TokenType.STRING, value, value[1:-1], line_num))
            line_num += value.count('\n')
        elif kind == 'IDENTIFIER':
            tokens.append(Token(KEYWORDS.get(value, TokenType.IDENTIFIER), value, None, line_num))
        else:
            tokens.append(Token(TokenType(kind), value, None, line_num))

    tokens.append(Token(TokenType.EOF, "", None, line_num))
    return tokens, errors
