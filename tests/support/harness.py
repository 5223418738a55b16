from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from slox.evaluator import Interpreter
from slox.lexer_rd import LexError, Lexer
from slox.parser_rd import ParseError, parse_source
from slox.resolver import ResolveError
from slox.runner import compile_source, run
from slox.tree import ExpressionStmt
from slox.types import (
    AggregateError,
    BinaryOperationFailure,
    IncorrectArgumentCount,
    LoxBool,
    LoxCallable,
    LoxNil,
    LoxNumber,
    LoxRuntimeError,
    LoxString,
    NotCallable,
    TypeMismatch,
    UndefinedVariable,
    Value,
)

RuntimeExpectation = Optional[Tuple[str, object]]

KEYWORDS = Lexer.KEYWORDS


def run_program(source: str, interpreter: Optional[Interpreter] = None) -> str:
    """Run source through the whole pipeline and return what it printed."""
    out = io.StringIO()
    if interpreter is None:
        interpreter = Interpreter(stdout=out)
    else:
        interpreter.stdout = out

    run(source, interpreter)
    return out.getvalue()


def eval_program(source: str) -> Optional[Value]:
    """Run source; when the last statement is an expression, return its value."""
    interpreter = Interpreter(stdout=io.StringIO())
    statements = compile_source(source, interpreter)

    if statements and isinstance(statements[-1], ExpressionStmt):
        interpreter.interpret(statements[:-1])
        return interpreter.interpret_expression(statements[-1].expression)

    interpreter.interpret(statements)
    return None


def parse_sexpr(source: str) -> List[str]:
    """Parse source and render each top-level statement as an s-expression."""
    return [str(stmt) for stmt in parse_source(source)]


def verify_result(value: object, kind: str, expected: object) -> None:
    """Assert runtime result shape/value compatibility."""
    match kind:
        case "string":
            assert isinstance(
                value, LoxString
            ), f"expected LoxString, got {type(value).__name__}"
            assert (
                value.value == expected
            ), f"expected {expected!r}, got {value.value!r}"
            return
        case "number":
            assert isinstance(
                value, LoxNumber
            ), f"expected number, got {type(value).__name__}"
            assert (
                abs(value.value - float(expected)) <= 1e-9
            ), f"expected {expected}, got {value.value}"
            return
        case "bool":
            assert isinstance(
                value, LoxBool
            ), f"expected bool, got {type(value).__name__}"
            assert value.value is bool(
                expected
            ), f"expected {expected}, got {value.value}"
            return
        case "nil":
            assert isinstance(
                value, LoxNil
            ), f"expected LoxNil, got {type(value).__name__}"
            return
        case "callable":
            assert isinstance(
                value, LoxCallable
            ), f"expected LoxCallable, got {type(value).__name__}"
            assert repr(value) == expected, f"expected {expected!r}, got {value!r}"
            return
        case _:
            raise AssertionError(f"unknown expectation kind {kind}")


def run_runtime_case(
    source: str,
    expectation: RuntimeExpectation,
    expected_exc: Optional[type],
) -> None:
    """Evaluate one scenario with optional expected exception."""
    if expected_exc is not None:
        with pytest.raises(expected_exc):
            eval_program(source)
        return

    result = eval_program(source)
    if expectation is not None:
        verify_result(result, expectation[0], expectation[1])


def run_output_case(
    source: str,
    expected_output: Optional[str],
    expected_exc: Optional[type],
) -> None:
    """Run one program and compare its printed output."""
    if expected_exc is not None:
        with pytest.raises(expected_exc):
            run_program(source)
        return

    output = run_program(source)
    if expected_output is not None:
        assert output == expected_output, f"expected {expected_output!r}, got {output!r}"
