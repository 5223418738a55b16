"""Built-in native functions registered via slox.runtime."""

from __future__ import annotations

import time
from typing import List

from .runtime import register_stdlib
from .types import LoxNumber, Value

@register_stdlib("clock", arity=0)
def std_clock(_interpreter, args: List[Value]) -> LoxNumber:
    return LoxNumber(time.time())
