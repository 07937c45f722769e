"""
Expression parsing utilities for loxlang.

These functions operate on a `loxlang.parser.parser.Parser` instance and
implement the recursive descent logic for expressions, maintaining
operator precedence and associativity.

Grammar, lowest precedence first:

    expression  -> assignment
    assignment  -> IDENTIFIER "=" assignment | logic_or
    logic_or    -> logic_and ( "or" logic_and )*
    logic_and   -> equality ( "and" equality )*
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" ) unary | call
    call        -> primary ( "(" arguments? ")" )*
    primary     -> "true" | "false" | "nil" | NUMBER | STRING
                 | IDENTIFIER | "(" expression ")"
"""

from typing import TYPE_CHECKING

from loxlang.exceptions import ErrorKind
from loxlang.lexer import TokenType
from loxlang.nodes import (
    Assign,
    Binary,
    Call,
    Expr,
    Grouping,
    Literal,
    Logical,
    Unary,
    Variable,
)

if TYPE_CHECKING:
    from loxlang.parser import Parser

# Upper bound on parameters and call arguments.
MAX_ARGUMENTS = 255


# ---- Entry point ----

def parse_expression(parser: 'Parser') -> Expr:
    """Parse an expression starting from the lowest-precedence operator."""
    return parser.assignment()


def parse_assignment(parser: 'Parser') -> Expr:
    """Parse an assignment. Only a plain variable may be assigned to."""
    expr = parser.logical_or()

    if parser.check(TokenType.EQUAL):
        equals = parser.advance()
        value = parser.assignment()
        if isinstance(expr, Variable):
            return parser.node(Assign(expr.name, value))
        raise parser.error(equals, "Invalid assignment target", ErrorKind.INVALID_ASSIGNMENT_TARGET)

    return expr


def parse_logical_or(parser: 'Parser') -> Expr:
    """Parse logical OR expressions using the 'or' keyword."""
    result = parser.logical_and()
    while parser.check(TokenType.OR):
        op_tok = parser.advance()
        result = parser.node(Logical(result, op_tok, parser.logical_and()))
    return result


def parse_logical_and(parser: 'Parser') -> Expr:
    """Parse logical AND expressions using the 'and' keyword."""
    result = parser.equality()
    while parser.check(TokenType.AND):
        op_tok = parser.advance()
        result = parser.node(Logical(result, op_tok, parser.equality()))
    return result


def parse_equality(parser: 'Parser') -> Expr:
    """Parse equality expressions (==, !=)."""
    result = parser.comparison()
    while parser.check(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
        op_tok = parser.advance()
        result = parser.node(Binary(result, op_tok, parser.comparison()))
    return result


def parse_comparison(parser: 'Parser') -> Expr:
    """Parse comparison expressions (<, >, <=, >=)."""
    result = parser.term()
    while parser.check(
        TokenType.GREATER,
        TokenType.GREATER_EQUAL,
        TokenType.LESS,
        TokenType.LESS_EQUAL,
    ):
        op_tok = parser.advance()
        result = parser.node(Binary(result, op_tok, parser.term()))
    return result


def parse_term(parser: 'Parser') -> Expr:
    """Parse addition and subtraction expressions."""
    result = parser.factor()
    while parser.check(TokenType.MINUS, TokenType.PLUS):
        op_tok = parser.advance()
        result = parser.node(Binary(result, op_tok, parser.factor()))
    return result


def parse_factor(parser: 'Parser') -> Expr:
    """Parse multiplication and division expressions."""
    result = parser.unary()
    while parser.check(TokenType.SLASH, TokenType.STAR):
        op_tok = parser.advance()
        result = parser.node(Binary(result, op_tok, parser.unary()))
    return result


def parse_unary(parser: 'Parser') -> Expr:
    """Parse prefix negation and logical not. Right-recursive."""
    if parser.check(TokenType.BANG, TokenType.MINUS):
        op_tok = parser.advance()
        return parser.node(Unary(op_tok, parser.unary()))
    return parser.call()


def parse_call(parser: 'Parser') -> Expr:
    """Parse a primary expression followed by any number of call suffixes."""
    expr = parser.primary()
    while parser.match(TokenType.LEFT_PAREN):
        expr = _finish_call(parser, expr)
    return expr


def _finish_call(parser: 'Parser', callee: Expr) -> Expr:
    arguments: list[Expr] = []
    if not parser.check(TokenType.RIGHT_PAREN):
        arguments.append(parser.expression())
        while parser.match(TokenType.COMMA):
            if len(arguments) >= MAX_ARGUMENTS:
                raise parser.error(
                    parser.curr_token,
                    f"Can't have more than {MAX_ARGUMENTS} arguments",
                    ErrorKind.TOO_MANY_ARGUMENTS,
                )
            arguments.append(parser.expression())
    paren = parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after arguments")
    return parser.node(Call(callee, paren, arguments))


# ---- Highest precedence ----

def parse_primary(parser: 'Parser') -> Expr:
    """Parse a literal, variable, or parenthesized expression."""
    tok = parser.curr_token

    if tok.type == TokenType.FALSE:
        parser.advance()
        return parser.node(Literal(False))
    if tok.type == TokenType.TRUE:
        parser.advance()
        return parser.node(Literal(True))
    if tok.type == TokenType.NIL:
        parser.advance()
        return parser.node(Literal(None))

    if tok.type in (TokenType.NUMBER, TokenType.STRING):
        parser.advance()
        return parser.node(Literal(tok.literal))

    if tok.type == TokenType.IDENTIFIER:
        parser.advance()
        return parser.node(Variable(tok))

    if tok.type == TokenType.LEFT_PAREN:
        parser.advance()
        inner = parser.expression()
        parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after expression")
        return parser.node(Grouping(inner))

    raise parser.error(tok, "Expect expression")
