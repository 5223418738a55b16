from __future__ import annotations

import os as _os
from typing import Optional

from .types import (
    LoxBool,
    LoxCallable,
    LoxNil,
    LoxNumber,
    LoxString,
    Value,
)

DEBUG_PY_TRACE_ENV = "SLOX_DEBUG_PY_TRACE"


def debug_py_trace_enabled() -> bool:
    return _os.environ.get(DEBUG_PY_TRACE_ENV, "") not in ("", "0")


def lox_equals(lhs: Value, rhs: Value) -> bool:
    match (lhs, rhs):
        case (LoxNil(), LoxNil()):
            return True
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return a == b
        case (LoxString(value=a), LoxString(value=b)):
            return a == b
        case (LoxBool(value=a), LoxBool(value=b)):
            return a == b
        case (LoxCallable(), LoxCallable()):
            return lhs is rhs
        case _:
            return False


def stringify(value: Optional[Value]) -> str:
    """Textual form written by `print`."""
    if isinstance(value, LoxString):
        return value.value

    if isinstance(value, LoxNil) or value is None:
        return "nil"

    return repr(value)
