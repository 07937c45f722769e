"""
Main parser entry point for loxlang.

This module defines the `Parser` class, which coordinates the recursive
descent parsing process. The actual parsing routines are split across
`loxlang.parser.expressions` and `loxlang.parser.statements`.

A malformed statement does not abort the parse. The error is recorded, the
parser skips ahead to the next statement boundary and carries on, so a single
run reports one error per broken statement.


File: parser.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.1
License: MIT
"""

from loxlang.exceptions import ErrorKind, ParseError
from loxlang.lexer import Token, TokenType
from loxlang.nodes import Node, Stmt

from . import expressions as _expr
from . import statements as _stmt
from .expressions import MAX_ARGUMENTS

STATEMENT_STARTS = (
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
)


class Parser:
    """loxlang parser."""

    def __init__(self, tokens: list[Token], file: str | None = None, first_id: int = 0):
        """
        Initialize the parser with a list of tokens.

        Parameters:
            tokens (list): A list of Token instances ending with EOF.
            file (str): The name of the script, used in error messages.
            first_id (int): The id given to the first node built.
        """
        self.tokens = tokens
        self.position = 0
        self.curr_token = self.tokens[self.position]
        self.source_file = file
        self.errors: list[ParseError] = []
        self.next_id = first_id


    def node(self, node: Node) -> Node:
        """
        Stamp a freshly built node with the next id and return it.
        """
        node.node_id = self.next_id
        self.next_id += 1
        return node

    def at_end(self) -> bool:
        return self.curr_token.type == TokenType.EOF

    def check(self, *token_types: TokenType) -> bool:
        return self.curr_token.type in token_types

    def previous(self) -> Token:
        return self.tokens[self.position - 1]

    def advance(self) -> Token:
        """
        Move to the next token and return the one just consumed.
        """
        if not self.at_end():
            self.position += 1
            self.curr_token = self.tokens[self.position]
        return self.previous()

    def match(self, *token_types: TokenType) -> Token | None:
        """
        Consume the current token if it is one of ``token_types``.
        """
        if self.check(*token_types):
            return self.advance()
        return None

    def eat(self, token_type: TokenType, message: str) -> Token:
        """
        Consume the current token if it matches the expected type.

        Parameters:
            token_type (TokenType): The expected token type.
            message (str): Error message if the token does not match.

        Returns:
            Token: The consumed token.

        Raises:
            ParseError: If the token does not match the expected type.
        """
        if self.curr_token.type == token_type:
            return self.advance()
        raise self.error(self.curr_token, message)

    def error(self, token: Token, message: str,
              kind: ErrorKind = ErrorKind.UNEXPECTED_TOKEN) -> ParseError:
        """
        Build a parse error pointing at ``token``. The caller raises it.
        """
        where = "at end" if token.type == TokenType.EOF else f"at '{token.lexeme}'"
        return ParseError(kind, f"{message} {where}", token, file=self.source_file)

    def synchronize(self) -> None:
        """
        Discard tokens until the start of the next statement.
        """
        self.advance()
        while not self.at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.curr_token.type in STATEMENT_STARTS:
                return
            self.advance()


    # Expression wrappers
    def expression(self):
        """
        Parse a full expression starting from the lowest precedence.
        """
        return _expr.parse_expression(self)

    def assignment(self):
        """
        Parse a right-associative assignment.
        """
        return _expr.parse_assignment(self)

    def logical_or(self):
        """
        Parse a logical OR expression.
        """
        return _expr.parse_logical_or(self)

    def logical_and(self):
        """
        Parse a logical AND expression.
        """
        return _expr.parse_logical_and(self)

    def equality(self):
        """
        Parse an equality expression using '==' or '!='.
        """
        return _expr.parse_equality(self)

    def comparison(self):
        """
        Parse a comparison expression using relational operators.
        """
        return _expr.parse_comparison(self)

    def term(self):
        """
        Parse an addition or subtraction expression.
        """
        return _expr.parse_term(self)

    def factor(self):
        """
        Parse a multiplication or division expression.
        """
        return _expr.parse_factor(self)

    def unary(self):
        """
        Parse a prefix '!' or '-' expression.
        """
        return _expr.parse_unary(self)

    def call(self):
        """
        Parse a call expression, possibly chained.
        """
        return _expr.parse_call(self)

    def primary(self):
        """
        Parse a literal, variable, or parenthesized group.
        """
        return _expr.parse_primary(self)


    # Statement wrappers
    def declaration(self) -> Stmt | None:
        """
        Parse a declaration, recovering from any parse error inside it.
        """
        try:
            return _stmt.parse_declaration(self)
        except ParseError as e:
            self.errors.append(e)
            self.synchronize()
            return None

    def statement(self) -> Stmt:
        """
        Parse a single statement.
        """
        return _stmt.parse_statement(self)

    def block(self) -> list[Stmt]:
        """
        Parse a block of statements enclosed in braces.
        """
        return _stmt.parse_block(self)


    def parse(self) -> list[Stmt]:
        """
        Parse the full input into a list of statements.

        Statements that failed to parse are left out; their errors are in
        ``self.errors``.
        """
        statements = []
        while not self.at_end():
            try:
                stmt = self.declaration()
            except RecursionError:
                # There is no statement boundary to resume at once the nesting
                # has been abandoned, so the rest of the input is skipped.
                self.errors.append(
                    self.error(self.curr_token, "Nesting too deep", ErrorKind.NESTING_TOO_DEEP)
                )
                break
            if stmt is not None:
                statements.append(stmt)
        return statements
