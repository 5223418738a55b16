from __future__ import annotations

from ..types import LoxBool, LoxNil, Value

def is_truthy(val: Value) -> bool:
    match val:
        case LoxBool(value=b):
            return b
        case LoxNil():
            return False
        case _:
            return True
