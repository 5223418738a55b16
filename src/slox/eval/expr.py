from __future__ import annotations

import math
from typing import Optional

from ..types import (
    BinaryOperationFailure,
    LoxBool,
    LoxNumber,
    LoxString,
    LoxRuntimeError,
    TypeMismatch,
    Value,
)
from ..utils import lox_equals
from .helpers import is_truthy

def eval_unary(op: str, rhs: Value, line: Optional[int] = None) -> Value:
    match op:
        case '-':
            if not isinstance(rhs, LoxNumber):
                raise TypeMismatch(rhs, "Number", line)
            return LoxNumber(-rhs.value)
        case '!':
            return LoxBool(not is_truthy(rhs))
        case _:
            raise LoxRuntimeError(f"Unsupported unary op {op}", line)

def _divide(lhs: float, rhs: float) -> float:
    # IEEE-754 semantics: dividing by zero yields inf/-inf/nan instead of raising.
    if rhs == 0:
        if lhs == 0 or math.isnan(lhs):
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)
    return lhs / rhs

def apply_binary_operator(op: str, lhs: Value, rhs: Value, line: Optional[int] = None) -> Value:
    match (op, lhs, rhs):
        case ('==', _, _):
            return LoxBool(lox_equals(lhs, rhs))
        case ('!=', _, _):
            return LoxBool(not lox_equals(lhs, rhs))

        case ('+', LoxNumber(value=a), LoxNumber(value=b)):
            return LoxNumber(a + b)
        case ('+', LoxString(value=a), LoxString(value=b)):
            return LoxString(a + b)
        case ('-', LoxNumber(value=a), LoxNumber(value=b)):
            return LoxNumber(a - b)
        case ('*', LoxNumber(value=a), LoxNumber(value=b)):
            return LoxNumber(a * b)
        case ('/', LoxNumber(value=a), LoxNumber(value=b)):
            return LoxNumber(_divide(a, b))

        case ('<', LoxNumber(value=a), LoxNumber(value=b)):
            return LoxBool(a < b)
        case ('<=', LoxNumber(value=a), LoxNumber(value=b)):
            return LoxBool(a <= b)
        case ('>', LoxNumber(value=a), LoxNumber(value=b)):
            return LoxBool(a > b)
        case ('>=', LoxNumber(value=a), LoxNumber(value=b)):
            return LoxBool(a >= b)

        case _:
            raise BinaryOperationFailure(op, lhs, rhs, line)
