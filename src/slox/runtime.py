from __future__ import annotations

import importlib
from typing import Dict

from .eval.fn import make_native
from .types import LoxCallable, NativeFn

_STDLIB_INITIALIZED = False

class Builtins:
    stdlib_functions: Dict[str, LoxCallable] = {}

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_stdlib hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("slox.stdlib")
    _STDLIB_INITIALIZED = True

def register_stdlib(name: str, *, arity: int):
    def dec(fn: NativeFn):
        Builtins.stdlib_functions[name] = make_native(name, arity, fn)
        return fn

    return dec
