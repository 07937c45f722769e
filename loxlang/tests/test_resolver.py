"""
Tests for static scope resolution in loxlang.
"""
from loxlang.exceptions import ErrorKind
from loxlang.lexer import scan
from loxlang.nodes import Expression, Grouping, Literal, Variable
from loxlang.parser import Parser
from loxlang.resolver import Resolver

from loxlang.tests.utils import resolve_source


def variables_named(node, name, found=None):
    """
    Collect every Variable node reading ``name``, in source order.
    """
    if found is None:
        found = []
    if isinstance(node, Variable) and node.name.lexeme == name:
        found.append(node)
    children = vars(node).values() if hasattr(node, "node_id") else []
    for value in children:
        items = value if isinstance(value, list) else [value]
        for item in items:
            if hasattr(item, "node_id"):
                variables_named(item, name, found)
    return found


def test_globals_are_left_unresolved():
    statements, locals_, errors = resolve_source("var a = 1; print a;")
    assert errors == []
    assert locals_ == {}


def test_distances_count_scopes_outwards():
    source = (
        "{\n"
        "  var a = 1;\n"
        "  {\n"
        "    var b = 2;\n"
        "    { print a; print b; }\n"
        "  }\n"
        "}\n"
    )
    statements, locals_, errors = resolve_source(source)
    assert errors == []
    (read_a,) = variables_named(statements[0], "a")
    (read_b,) = variables_named(statements[0], "b")
    assert locals_[read_a.node_id] == 2
    assert locals_[read_b.node_id] == 1


def test_same_name_resolves_independently():
    source = "{ var x = 1; print x; { var x = 2; print x; } }"
    statements, locals_, errors = resolve_source(source)
    assert errors == []
    outer, inner = variables_named(statements[0], "x")
    assert outer == inner
    assert locals_[outer.node_id] == 0
    assert locals_[inner.node_id] == 0


def test_function_parameters_and_closures():
    source = (
        "fun outer(n) {\n"
        "  fun inner() { return n; }\n"
        "  return inner;\n"
        "}\n"
    )
    statements, locals_, errors = resolve_source(source)
    assert errors == []
    (read_n,) = variables_named(statements[0], "n")
    (read_inner,) = variables_named(statements[0], "inner")
    assert locals_[read_n.node_id] == 1
    assert locals_[read_inner.node_id] == 0


def test_self_referential_local_initializer():
    _, _, errors = resolve_source("{ var a = a; }")
    assert [e.kind for e in errors] == [ErrorKind.SELF_REFERENTIAL_INITIALIZER]
    assert errors[0].token.lexeme == "a"


def test_self_referential_global_initializer_is_allowed():
    _, _, errors = resolve_source("var a = a;")
    assert errors == []


def test_shadowing_outer_local_in_initializer_is_an_error():
    _, _, errors = resolve_source("{ var a = 1; { var a = a + 1; } }")
    assert [e.kind for e in errors] == [ErrorKind.SELF_REFERENTIAL_INITIALIZER]


def test_duplicate_local_declaration():
    _, _, errors = resolve_source("{ var a = 1; var a = 2; }")
    assert [e.kind for e in errors] == [ErrorKind.DUPLICATE_VARIABLE_IN_SCOPE]


def test_duplicate_parameter():
    _, _, errors = resolve_source("fun f(a, a) {}")
    assert [e.kind for e in errors] == [ErrorKind.DUPLICATE_VARIABLE_IN_SCOPE]


def test_global_redeclaration_is_allowed():
    _, _, errors = resolve_source("var a = 1; var a = 2; fun a() {}")
    assert errors == []


def test_return_outside_function():
    _, _, errors = resolve_source("return 1;")
    assert [e.kind for e in errors] == [ErrorKind.RETURN_OUTSIDE_FUNCTION]


def test_return_inside_function_is_allowed():
    _, _, errors = resolve_source("fun f() { while (true) { return 1; } }")
    assert errors == []


def test_break_outside_loop():
    _, _, errors = resolve_source("break;")
    assert [e.kind for e in errors] == [ErrorKind.BREAK_OUTSIDE_LOOP]


def test_break_does_not_cross_function_boundary():
    _, _, errors = resolve_source("while (true) { fun f() { break; } }")
    assert [e.kind for e in errors] == [ErrorKind.BREAK_OUTSIDE_LOOP]


def test_errors_are_collected_not_raised():
    _, _, errors = resolve_source("return 1; { var b = b; var b; } break;")
    assert [e.kind for e in errors] == [
        ErrorKind.RETURN_OUTSIDE_FUNCTION,
        ErrorKind.SELF_REFERENTIAL_INITIALIZER,
        ErrorKind.DUPLICATE_VARIABLE_IN_SCOPE,
        ErrorKind.BREAK_OUTSIDE_LOOP,
    ]


def test_resolution_is_deterministic():
    """
    Test that scanning, parsing and resolving the same source twice gives
    equal trees and equal distance maps.
    """
    source = (
        "fun make() { var c = 0; fun inc() { c = c + 1; return c; } return inc; }\n"
        "{ var x = make(); print x(); }\n"
    )
    runs = []
    for _ in range(2):
        tokens, _ = scan(source)
        statements = Parser(tokens).parse()
        runs.append((statements, Resolver().resolve(statements)))
    (ast1, locals1), (ast2, locals2) = runs
    assert ast1 == ast2
    assert locals1 == locals2
    assert locals1


def test_ast_too_deep_to_walk_is_reported():
    expr = Literal(1.0)
    for _ in range(50_000):
        expr = Grouping(expr)
    resolver = Resolver("<test>")

    resolver.resolve([Expression(expr)])

    assert [e.kind for e in resolver.errors] == [ErrorKind.NESTING_TOO_DEEP]
    assert str(resolver.errors[0]) == "Nesting too deep in <test>"
    assert resolver.scopes == []
