import pytest

from prism.language.prism_types import prism_equality, prism_object_to_str, prism_truth
from prism.runtime.interpreter import prism_division
from prism.utilities.error import PrismRuntimeError


@pytest.mark.parametrize("source, output", [
    ("print 1 + 2 * 3;", "7"),
    ("print 7 - 10;", "-3"),
    ("print 10 / 4;", "2.5"),
    ("print 2 * 3.5;", "7"),
    ("print 0.1 + 0.2;", "0.30000000000000004"),
    ("print -(-3);", "3"),
    ("print 1 / 0;", "inf"),
    ("print -1 / 0;", "-inf"),
    ("print 1 / -0;", "-inf"),
    ("print 0 / 0;", "nan"),
    ("print 3 > 2;", "true"),
    ("print 2 >= 3;", "false"),
    ("print 1 <= 1;", "true"),
    ("print 1 < 1;", "false"),
    ('print "a" + "b";', "ab"),
    ('print "" + "";', ""),
    ("print 100;", "100"),
    ("print 2.50;", "2.5"),
    ("print nil;", "nil"),
    ("print true;", "true"),
    ('print "with spaces";', "with spaces"),
])
def test_expressions(session, source, output):
    assert session.execute(source) == [output]


@pytest.mark.parametrize("source, output", [
    ("nil == nil", "true"),
    ("nil == false", "false"),
    ("nil != nil", "false"),
    ("1 == 1", "true"),
    ("1 == 2", "false"),
    ('"a" == "a"', "true"),
    ('1 == "1"', "false"),
    ("0 == false", "false"),
    ("1 == true", "false"),
    ("true != false", "true"),
    ("(0 / 0) == (0 / 0)", "false"),
])
def test_equality(session, source, output):
    assert session.execute(f"print {source};") == [output]


@pytest.mark.parametrize("source, output", [
    ("nil or 5", "5"),
    ("false and 5", "false"),
    ("nil and 5", "nil"),
    ("1 and 2", "2"),
    ("false or nil", "nil"),
    ('"" or 1', ""),
    ("true or undefined", "true"),
    ("false and undefined", "false"),
])
def test_logical_operators_return_operands(session, source, output):
    assert session.execute(f"print {source};") == [output]


@pytest.mark.parametrize("condition, output", [
    ("nil", "falsy"),
    ("false", "falsy"),
    ("true", "truthy"),
    ("0", "truthy"),
    ('""', "truthy"),
    ('"false"', "truthy"),
])
def test_truthiness(session, condition, output):
    assert session.execute(f'if ({condition}) print "truthy"; else print "falsy";') == [output]


def test_if_without_else_is_a_no_op(session):
    assert session.execute('if (false) print "no";') == []


@pytest.mark.parametrize("source, message", [
    ('"a" + 1;', "Operands must be two numbers or two strings."),
    ('1 + "a";', "Operands must be two numbers or two strings."),
    ("nil + nil;", "Operands must be two numbers or two strings."),
    ("true + 1;", "Operands must be two numbers or two strings."),
    ('-"a";', "Operand must be a number."),
    ("-nil;", "Operand must be a number."),
    ('"a" * 2;', "Operands must be numbers."),
    ('"a" < "b";', "Operands must be numbers."),
    ("true - false;", "Operands must be numbers."),
    ("nil / 1;", "Operands must be numbers."),
    ("print x;", "Undefined variable 'x'."),
    ("x = 1;", "Undefined variable 'x'."),
])
def test_runtime_errors(session, source, message):
    assert session.execute(source) == []
    (error,) = session.handler.errors
    assert isinstance(error, PrismRuntimeError)
    assert error.message == message
    assert session.handler.had_runtime_error
    assert not session.handler.had_error


def test_runtime_error_reports_operator_line(session):
    session.execute('var a = 1;\n\nprint a +\n "b";')
    (error,) = session.handler.errors
    assert str(error) == "Operands must be two numbers or two strings.\n[line 3]"


def test_runtime_error_aborts_remaining_statements(session):
    assert session.execute('print 1; print -"a"; print 2;') == ["1"]
    assert len(session.handler.errors) == 1


def test_long_operator_chains_do_not_exhaust_the_stack(session):
    assert session.execute("print " + " + ".join(["1"] * 5000) + ";") == ["5000"]
    assert session.execute("print " + " or ".join(["false"] * 5000) + " or \"last\";") == ["last"]
    assert session.execute("print " + " and ".join(["true"] * 5000) + ";") == ["true"]
    assert not session.handler.errors


def test_deep_nesting_is_a_runtime_error(session):
    assert session.execute("print 1;\nprint " + "!" * 500 + "true;\nprint 2;") == ["1"]
    (error,) = session.handler.errors
    assert isinstance(error, PrismRuntimeError)
    assert str(error) == "Stack overflow.\n[line 2]"


def test_globals_persist_between_calls(session):
    session.execute("var a = 1;")
    session.execute("print a;")
    assert session.execute("a = a + 1; print a;") == ["2"]


def test_interpret_again_after_runtime_error(session):
    session.execute("var a = 1; a = -nil; a = 3;")
    assert session.execute("print a;") == ["1"]
    assert not session.handler.errors


def test_scope_is_restored_after_runtime_error(session):
    session.execute("{ var inner = 1; { var deeper = 2; nope; } }")
    assert len(session.handler.errors) == 1
    assert session.interpreter._environment is session.interpreter.globals
    session.execute("var top = 1;")
    assert "top" in session.interpreter.globals
    session.execute("print inner;")
    assert session.handler.errors[0].message == "Undefined variable 'inner'."


def test_block_shadowing(session):
    assert session.execute("var x = 1; { var x = 2; print x; } print x;") == ["2", "1"]


def test_block_assigns_outer(session):
    assert session.execute("var x = 1; { x = 2; } print x;") == ["2"]


def test_block_locals_are_dropped(session):
    session.execute("{ var local = 1; }")
    session.execute("print local;")
    assert session.handler.errors[0].message == "Undefined variable 'local'."


def test_redeclaration_overwrites(session):
    assert session.execute("var a = 1; var a; print a;") == ["nil"]


def test_assignment_is_an_expression(session):
    assert session.execute("var a; var b; print a = b = 3; print a; print b;") == ["3", "3", "3"]


def test_operands_evaluate_left_to_right(session):
    assert session.execute("var a = 1; print (a = 2) + a;") == ["4"]
    assert session.execute("var b = 1; print b + (b = 5);") == ["6"]


def test_while_countdown(session):
    assert session.execute("var x = 10; while (x > 0) { x = x - 1; } print x;") == ["0"]


def test_while_body_gets_fresh_scope_each_iteration(session):
    source = "var i = 0; while (i < 3) { var j; print j; j = i; i = i + 1; }"
    assert session.execute(source) == ["nil", "nil", "nil"]


def test_while_false_never_runs(session):
    assert session.execute('while (nil) print "never";') == []


@pytest.mark.parametrize("value, text", [
    (None, "nil"),
    (True, "true"),
    (False, "false"),
    (3.0, "3"),
    (-0.0, "-0"),
    (3.25, "3.25"),
    (1e21, "1e+21"),
    ("3.0", "3.0"),
])
def test_stringification(value, text):
    assert prism_object_to_str(value) == text


def test_truth_and_equality_helpers():
    assert [prism_truth(value) for value in (None, False, True, 0.0, "")] == [False, False, True, True, True]
    assert prism_equality(None, None)
    assert not prism_equality(0.0, False)
    assert not prism_equality(1.0, "1")


def test_division_follows_ieee_754():
    assert prism_division(1.0, 0.0) == float("inf")
    assert prism_division(-1.0, 0.0) == float("-inf")
    assert prism_division(1.0, -0.0) == float("-inf")
    assert prism_division(0.0, 0.0) != prism_division(0.0, 0.0)
    assert prism_division(9.0, 3.0) == 3.0
