"""Statement parsing utilities for loxlang.

These functions operate on a `loxlang.parser.parser.Parser` instance and
handle the various statement forms in the language such as blocks,
conditionals, loops, and function definitions.


File: statements.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from typing import TYPE_CHECKING

from loxlang.exceptions import ErrorKind
from loxlang.lexer import TokenType
from loxlang.nodes import (
    Block,
    Break,
    Expression,
    Function,
    If,
    Literal,
    Print,
    Return,
    Stmt,
    Var,
    While,
)

from .expressions import MAX_ARGUMENTS

if TYPE_CHECKING:
    from loxlang.parser import Parser


def parse_declaration(parser: 'Parser') -> Stmt:
    """
    Parse a declaration or, failing that, a statement.

    Syntax:
        fun <name>(<params>) { <block> }
        var <name> (= <expression>)? ;
        <statement>
    """
    if parser.match(TokenType.FUN):
        return parse_function(parser)
    if parser.match(TokenType.VAR):
        return parse_var_declaration(parser)
    return parser.statement()


def parse_statement(parser: 'Parser') -> Stmt:
    """
    Parse a single statement.

    Args:
        parser: The parser instance.

    Returns:
        Stmt: The statement node.
    """
    tok = parser.curr_token
    if tok.type == TokenType.PRINT:
        return parse_print(parser)
    elif tok.type == TokenType.LEFT_BRACE:
        parser.advance()
        return parser.node(Block(parser.block()))
    elif tok.type == TokenType.IF:
        return parse_if(parser)
    elif tok.type == TokenType.WHILE:
        return parse_while(parser)
    elif tok.type == TokenType.FOR:
        return parse_for(parser)
    elif tok.type == TokenType.RETURN:
        return parse_return(parser)
    elif tok.type == TokenType.BREAK:
        return parse_break(parser)
    return parse_expression_statement(parser)


def parse_block(parser: 'Parser') -> list[Stmt]:
    """
    Parse the statements of a block. The opening brace is already consumed.

    Syntax:
        { <declaration>* }

    Returns:
        list: the statements of the block.
    """
    statements = []
    while not parser.check(TokenType.RIGHT_BRACE) and not parser.at_end():
        stmt = parser.declaration()
        if stmt is not None:
            statements.append(stmt)
    parser.eat(TokenType.RIGHT_BRACE, "Expect '}' after block")
    return statements


def parse_print(parser: 'Parser') -> Stmt:
    """
    Parse a 'print' statement.

    Syntax:
        print <expression> ;
    """
    parser.eat(TokenType.PRINT, "Expect 'print'")
    value = parser.expression()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after value")
    return parser.node(Print(value))


def parse_expression_statement(parser: 'Parser') -> Stmt:
    expr = parser.expression()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after expression")
    return parser.node(Expression(expr))


def parse_if(parser: 'Parser') -> Stmt:
    """
    Parse a conditional 'if' statement with an optional else branch.

    Syntax:
        if ( <condition> ) <statement> (else <statement>)?

    A dangling else binds to the nearest if.
    """
    parser.eat(TokenType.IF, "Expect 'if'")
    parser.eat(TokenType.LEFT_PAREN, "Expect '(' after 'if'")
    condition = parser.expression()
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after if condition")

    then_branch = parser.statement()
    else_branch = None
    if parser.match(TokenType.ELSE):
        else_branch = parser.statement()

    return parser.node(If(condition, then_branch, else_branch))


def parse_while(parser: 'Parser') -> Stmt:
    """
    Parse a 'while' statement.

    Syntax:
        while ( <condition> ) <statement>
    """
    parser.eat(TokenType.WHILE, "Expect 'while'")
    parser.eat(TokenType.LEFT_PAREN, "Expect '(' after 'while'")
    condition = parser.expression()
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after condition")
    body = parser.statement()
    return parser.node(While(condition, body))


def parse_for(parser: 'Parser') -> Stmt:
    """
    Parse a 'for' statement and desugar it into a 'while' loop.

    Syntax:
        for ( <initializer>? ; <condition>? ; <increment>? ) <statement>

    Returns:
        Stmt: ``{ init; while (cond) { body; incr; } }`` with the
        missing parts left out. A missing condition is ``true``.
    """
    parser.eat(TokenType.FOR, "Expect 'for'")
    parser.eat(TokenType.LEFT_PAREN, "Expect '(' after 'for'")

    if parser.match(TokenType.SEMICOLON):
        initializer = None
    elif parser.match(TokenType.VAR):
        initializer = parse_var_declaration(parser)
    else:
        initializer = parse_expression_statement(parser)

    condition = None
    if not parser.check(TokenType.SEMICOLON):
        condition = parser.expression()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after loop condition")

    increment = None
    if not parser.check(TokenType.RIGHT_PAREN):
        increment = parser.expression()
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after for clauses")

    body = parser.statement()

    if increment is not None:
        body = parser.node(Block([body, parser.node(Expression(increment))]))
    if condition is None:
        condition = parser.node(Literal(True))
    body = parser.node(While(condition, body))
    if initializer is not None:
        body = parser.node(Block([initializer, body]))

    return body


def parse_return(parser: 'Parser') -> Stmt:
    """
    Parse a 'return' statement.

    Syntax:
        return <expression>? ;
    """
    keyword = parser.eat(TokenType.RETURN, "Expect 'return'")
    value = None
    if not parser.check(TokenType.SEMICOLON):
        value = parser.expression()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after return value")
    return parser.node(Return(keyword, value))


def parse_break(parser: 'Parser') -> Stmt:
    """
    Parse a 'break' control statement.

    Syntax:
        break ;
    """
    keyword = parser.eat(TokenType.BREAK, "Expect 'break'")
    parser.eat(TokenType.SEMICOLON, "Expect ';' after 'break'")
    return parser.node(Break(keyword))


def parse_function(parser: 'Parser') -> Stmt:
    """
    Parse a function definition. The 'fun' keyword is already consumed.

    Syntax:
        fun <name>(<params>) { <block> }
    """
    name = parser.eat(TokenType.IDENTIFIER, "Expect function name")
    parser.eat(TokenType.LEFT_PAREN, "Expect '(' after function name")
    params = []
    if not parser.check(TokenType.RIGHT_PAREN):
        params.append(parser.eat(TokenType.IDENTIFIER, "Expect parameter name"))
        while parser.match(TokenType.COMMA):
            if len(params) >= MAX_ARGUMENTS:
                raise parser.error(
                    parser.curr_token,
                    f"Can't have more than {MAX_ARGUMENTS} parameters",
                    ErrorKind.TOO_MANY_PARAMETERS,
                )
            params.append(parser.eat(TokenType.IDENTIFIER, "Expect parameter name"))
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after parameters")
    parser.eat(TokenType.LEFT_BRACE, "Expect '{' before function body")
    body = parser.block()
    return parser.node(Function(name, params, body))


def parse_var_declaration(parser: 'Parser') -> Stmt:
    """
    Parse a `var` declaration. The 'var' keyword is already consumed.

    Syntax:
        var <identifier> (= <expression>)? ;

    Returns:
        Stmt: Var node with ``initializer`` None when omitted.
    """
    name = parser.eat(TokenType.IDENTIFIER, "Expect variable name")
    initializer = None
    if parser.match(TokenType.EQUAL):
        initializer = parser.expression()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after variable declaration")
    return parser.node(Var(name, initializer))
