from __future__ import annotations

import pytest

from tests.support.harness import (
    BinaryOperationFailure,
    TypeMismatch,
    UndefinedVariable,
    run_output_case,
    run_program,
    run_runtime_case,
)

SCENARIOS = [
    pytest.param("1 + 2 * 3;", ("number", 7), None, id="precedence"),
    pytest.param("1 - 2 - 3;", ("number", -4), None, id="left-assoc"),
    pytest.param("(1 + 2) * 3;", ("number", 9), None, id="grouping"),
    pytest.param("10 / 4;", ("number", 2.5), None, id="division"),
    pytest.param("-(3);", ("number", -3), None, id="negate"),
    pytest.param("--3;", ("number", 3), None, id="double-negate"),
    pytest.param('"foo" + "bar";', ("string", "foobar"), None, id="concat"),
    pytest.param("1 < 2;", ("bool", True), None, id="less"),
    pytest.param("2 <= 2;", ("bool", True), None, id="less-equal"),
    pytest.param("2 > 3;", ("bool", False), None, id="greater"),
    pytest.param("3 >= 3;", ("bool", True), None, id="greater-equal"),
    pytest.param("1 == 1;", ("bool", True), None, id="eq-number"),
    pytest.param("1 != 2;", ("bool", True), None, id="neq-number"),
    pytest.param('"a" == "a";', ("bool", True), None, id="eq-string"),
    pytest.param('1 == "1";', ("bool", False), None, id="eq-mixed-types"),
    pytest.param("nil == nil;", ("bool", True), None, id="eq-nil"),
    pytest.param("nil == false;", ("bool", False), None, id="nil-not-false"),
    pytest.param("true == true;", ("bool", True), None, id="eq-bool"),
    pytest.param("clock == clock;", ("bool", True), None, id="eq-callable-identity"),
    pytest.param(
        "fun f() {} fun g() {} f == g;",
        ("bool", False),
        None,
        id="neq-distinct-callables",
    ),
    pytest.param("!nil;", ("bool", True), None, id="not-nil"),
    pytest.param("!false;", ("bool", True), None, id="not-false"),
    pytest.param("!0;", ("bool", False), None, id="not-zero"),
    pytest.param('!"";', ("bool", False), None, id="not-empty-string"),
    pytest.param("!clock;", ("bool", False), None, id="not-callable"),
    pytest.param("false and (1/0);", ("bool", False), None, id="and-short-circuit"),
    pytest.param("true or (1/0);", ("bool", True), None, id="or-short-circuit"),
    pytest.param("false and missing;", ("bool", False), None, id="and-skips-rhs"),
    pytest.param("true or missing();", ("bool", True), None, id="or-skips-rhs"),
    pytest.param("nil or 2;", ("number", 2), None, id="or-returns-operand"),
    pytest.param("1 and 2;", ("number", 2), None, id="and-returns-operand"),
    pytest.param("nil and 2;", ("nil", None), None, id="and-returns-falsy-lhs"),
    pytest.param("true and missing;", None, UndefinedVariable, id="and-evaluates-rhs"),
    pytest.param('1 + "a";', None, BinaryOperationFailure, id="add-mixed"),
    pytest.param('"a" < "b";', None, BinaryOperationFailure, id="compare-strings"),
    pytest.param("nil * 2;", None, BinaryOperationFailure, id="mul-nil"),
    pytest.param('-"a";', None, TypeMismatch, id="negate-string"),
    pytest.param("-nil;", None, TypeMismatch, id="negate-nil"),
]

PRINT_CASES = [
    pytest.param("print 1 + 2;", "3\n", id="integral"),
    pytest.param("print 7 / 2;", "3.5\n", id="fraction"),
    pytest.param("print -0.5;", "-0.5\n", id="negative-fraction"),
    pytest.param("print 1 / 0;", "inf\n", id="div-zero"),
    pytest.param("print -1 / 0;", "-inf\n", id="div-zero-negative"),
    pytest.param("print 0 / 0;", "nan\n", id="div-zero-zero"),
    pytest.param("print 1000000000000000;", "1000000000000000\n", id="large-integral"),
    pytest.param("print 100000000000000000000;", "1e+20\n", id="huge-uses-exponent"),
    pytest.param("print -0;", "-0.0\n", id="negative-zero"),
    pytest.param('print "a" + "b";', "ab\n", id="string-raw"),
    pytest.param("print nil;", "nil\n", id="nil"),
    pytest.param("print true;", "true\n", id="bool"),
]

TRUTHINESS_CASES = [
    pytest.param("0", "yes", id="zero"),
    pytest.param('""', "yes", id="empty-string"),
    pytest.param("clock", "yes", id="callable"),
    pytest.param("true", "yes", id="true"),
    pytest.param("nil", "no", id="nil"),
    pytest.param("false", "no", id="false"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_operators(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


@pytest.mark.parametrize("source, expected_output", PRINT_CASES)
def test_print_format(source: str, expected_output: str) -> None:
    run_output_case(source, expected_output, None)


@pytest.mark.parametrize("value, expected", TRUTHINESS_CASES)
def test_truthiness(value: str, expected: str) -> None:
    output = run_program(f'if ({value}) print "yes"; else print "no";')
    assert output == f"{expected}\n"


def test_binary_failure_message() -> None:
    with pytest.raises(BinaryOperationFailure) as exc_info:
        run_program('print 1 + "a";')

    err = exc_info.value
    assert err.operator == "+"
    assert str(err) == 'Cannot perform operation + between operands 1 and "a". (line 1)'


def test_type_mismatch_message() -> None:
    with pytest.raises(TypeMismatch) as exc_info:
        run_program('\nprint -"a";')

    assert str(exc_info.value) == "Expected Number but found String. (line 2)"
