from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..tree import FunctionStmt
from ..types import NIL, Environment, LoxCallable, Return, Value

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def make_function(stmt: FunctionStmt, closure: Environment) -> LoxCallable:
    """Build a callable closing over the environment active at its definition."""
    params = [p.name for p in stmt.params]
    body = stmt.body.statements

    def call(interpreter: 'Interpreter', arguments: List[Value]) -> Value:
        frame = Environment(enclosing=closure)

        for name, argument in zip(params, arguments):
            frame.define(name, argument)

        completion = interpreter.execute_block(body, frame)

        if isinstance(completion, Return):
            return completion.value
        return NIL

    return LoxCallable(description=f"<fn {stmt.name.name}>", arity=len(params), fn=call)

def make_native(name: str, arity: int, fn) -> LoxCallable:
    return LoxCallable(description=f"<native fn {name}>", arity=arity, fn=fn)
