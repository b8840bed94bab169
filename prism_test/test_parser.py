from dataclasses import FrozenInstanceError

import pytest

from conftest import parse
from prism.parsing.expr import AssignmentExpr, LiteralExpr, LogicalExpr, VariableExpr
from prism.parsing.stmt import BlockStmt, ExpressionStmt, IfStmt, PrintStmt, VarStmt, WhileStmt


def parse_expression(source):
    stmts, handler = parse(f"{source};")
    assert not handler.errors, [str(error) for error in handler.errors]
    assert len(stmts) == 1 and isinstance(stmts[0], ExpressionStmt)
    return stmts[0].expression


@pytest.mark.parametrize("source, tree", [
    ("1 + 2 * 3", "(+ 1 (* 2 3))"),
    ("1 * 2 + 3", "(+ (* 1 2) 3)"),
    ("1 - 2 - 3", "(- (- 1 2) 3)"),
    ("8 / 4 / 2", "(/ (/ 8 4) 2)"),
    ("(1 + 2) * 3", "(* (grouping (+ 1 2)) 3)"),
    ("-1 * 2", "(* (- 1) 2)"),
    ("!-x", "(! (- x))"),
    ("!!true", "(! (! true))"),
    ("1 < 2 == true", "(== (< 1 2) true)"),
    ("a != b == c", "(== (!= a b) c)"),
    ("a >= b > c <= d < e", "(< (<= (> (>= a b) c) d) e)"),
    ("a or b and c", "(or a (and b c))"),
    ("a and b or c", "(or (and a b) c)"),
    ("a or b or c", "(or (or a b) c)"),
    ("a == 1 and b", "(and (== a 1) b)"),
    ("a = b = 3", "(= a (= b 3))"),
    ("a = b or c", "(= a (or b c))"),
    ('x == nil', "(== x nil)"),
    ('"s" + "t"', '(+ "s" "t")'),
])
def test_precedence_and_associativity(source, tree):
    assert str(parse_expression(source)) == tree


def test_logical_operators_build_logical_nodes():
    expr = parse_expression("a and b")
    assert isinstance(expr, LogicalExpr)
    assert expr.operator.lexeme == "and"


def test_literals():
    assert parse_expression("12.5") == LiteralExpr(12.5)
    assert parse_expression('"str"') == LiteralExpr("str")
    assert parse_expression("true") == LiteralExpr(True)
    assert parse_expression("false") == LiteralExpr(False)
    assert parse_expression("nil") == LiteralExpr(None)


def test_assignment():
    expr = parse_expression("a = 1")
    assert isinstance(expr, AssignmentExpr)
    assert expr.name.lexeme == "a"
    assert expr.value == LiteralExpr(1.0)


def test_var_declarations():
    stmts, handler = parse("var a; var b = 1;")
    assert not handler.errors
    assert isinstance(stmts[0], VarStmt) and stmts[0].name.lexeme == "a" and stmts[0].initializer is None
    assert isinstance(stmts[1], VarStmt) and stmts[1].initializer == LiteralExpr(1.0)


def test_block():
    stmts, handler = parse("{ var a = 1; print a; {} }")
    assert not handler.errors
    (block,) = stmts
    assert isinstance(block, BlockStmt)
    assert isinstance(block.statements, tuple)
    assert [type(stmt) for stmt in block.statements] == [VarStmt, PrintStmt, BlockStmt]


def test_dangling_else_binds_to_nearest_if():
    stmts, handler = parse("if (a) if (b) print 1; else print 2;")
    assert not handler.errors
    (outer,) = stmts
    assert isinstance(outer, IfStmt)
    assert outer.else_branch is None
    assert isinstance(outer.then_branch, IfStmt)
    assert isinstance(outer.then_branch.else_branch, PrintStmt)


def test_while():
    stmts, handler = parse("while (x > 0) x = x - 1;")
    assert not handler.errors
    (loop,) = stmts
    assert isinstance(loop, WhileStmt)
    assert str(loop.condition) == "(> x 0)"
    assert isinstance(loop.body, ExpressionStmt)


def test_nodes_are_immutable():
    expr = parse_expression("a")
    assert isinstance(expr, VariableExpr)
    with pytest.raises(FrozenInstanceError):
        expr.name = None  # type: ignore


@pytest.mark.parametrize("source, message", [
    ("print 1 +;", "[line 1] Error at ';': Expect expression."),
    ("print 1", "[line 1] Error at end: Expect ';' after value."),
    ("1 + 2", "[line 1] Error at end: Expect ';' after expression."),
    ("var 1 = 2;", "[line 1] Error at '1': Expect variable name."),
    ("var a = 1", "[line 1] Error at end: Expect ';' after variable declaration."),
    ("{ print 1;", "[line 1] Error at end: Expect '}' after block."),
    ("if x", "[line 1] Error at 'x': Expect '(' after 'if'."),
    ("if (x print 1;", "[line 1] Error at 'print': Expect ')' after if condition."),
    ("while x", "[line 1] Error at 'x': Expect '(' after 'while'."),
    ("while (x print 1;", "[line 1] Error at 'print': Expect ')' after condition."),
    ("(1 + 2;", "[line 1] Error at ';': Expect ')' after expression."),
    ("\n\n)", "[line 3] Error at ')': Expect expression."),
])
def test_syntax_errors(source, message):
    _, handler = parse(source)
    assert [str(error) for error in handler.errors] == [message]
    assert handler.had_error


def test_independent_errors_are_all_reported():
    stmts, handler = parse("print 1 +; var = 2; print 3;")
    assert [error.message for error in handler.errors] == ["Expect expression.", "Expect variable name."]
    assert len(stmts) == 1
    assert str(stmts[0]) == "<print: 3>"


def test_synchronizes_before_statement_keyword():
    stmts, handler = parse("1 + ) print 2;")
    assert len(handler.errors) == 1
    assert [str(stmt) for stmt in stmts] == ["<print: 2>"]


def test_error_inside_block_keeps_block():
    stmts, handler = parse("{ print; print 1; }")
    assert len(handler.errors) == 1
    (block,) = stmts
    assert [str(stmt) for stmt in block.statements] == ["<print: 1>"]


@pytest.mark.parametrize("source", ["a + b = c;", "(a) = 1;", "-a = 1;", "1 = 2;"])
def test_invalid_assignment_target_is_reported_without_unwinding(source):
    stmts, handler = parse(source)
    assert [error.message for error in handler.errors] == ["Invalid assignment target."]
    assert handler.errors[0].where == " at '='"
    assert len(stmts) == 1
    assert not isinstance(stmts[0].expression, AssignmentExpr)


def test_deep_nesting_is_a_syntax_error():
    nested = "(" * 5000 + "1" + ")" * 5000
    stmts, handler = parse(f"print {nested};\nprint 2;")
    assert [error.message for error in handler.errors] == ["Expression nesting is too deep."]
    assert [str(stmt) for stmt in stmts] == ["<print: 2>"]
