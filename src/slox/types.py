from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional
from typing_extensions import TypeAlias

from .tree import Variable, format_number

if TYPE_CHECKING:
    from .evaluator import Interpreter

# ---------- Value Model ----------

@dataclass(frozen=True)
class LoxNil:
    def __repr__(self) -> str:
        return "nil"

@dataclass(frozen=True)
class LoxNumber:
    value: float
    def __repr__(self) -> str:
        return format_number(self.value)

@dataclass(frozen=True)
class LoxString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass(frozen=True)
class LoxBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

NativeFn = Callable[['Interpreter', List['Value']], 'Value']

@dataclass(eq=False)
class LoxCallable:
    """Native or user-defined function: a description, a fixed arity and a body."""
    description: str
    arity: int
    fn: NativeFn

    def call(self, interpreter: 'Interpreter', arguments: List['Value']) -> 'Value':
        return self.fn(interpreter, arguments)

    def __repr__(self) -> str:
        return self.description

Value: TypeAlias = (
    LoxNil
    | LoxNumber
    | LoxString
    | LoxBool
    | LoxCallable
)

NIL = LoxNil()

def type_name(value: Value) -> str:
    match value:
        case LoxBool():
            return "Boolean"
        case LoxNumber():
            return "Number"
        case LoxString():
            return "String"
        case LoxCallable():
            return "Callable"
        case LoxNil():
            return "Nil"
        case _:
            raise TypeError(f"not a slox value: {value!r}")

# ---------- Completions ----------

@dataclass(frozen=True)
class Return:
    """Completion of a `return` statement, carried up to the call boundary."""
    value: Value

Completion: TypeAlias = Optional[Return]

# ---------- Exceptions ----------

class SloxError(Exception):
    """Base of every error the pipeline reports to its caller."""
    line: Optional[int]

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line

class AggregateError(SloxError):
    """Several errors from one scan/parse/resolve pass, one per line."""

    def __init__(self, errors: Iterable[SloxError]):
        self.errors: List[SloxError] = list(errors)
        super().__init__("\n".join(str(e) for e in self.errors))

    def __str__(self) -> str:
        return "\n".join(str(e) for e in self.errors)

class LoxRuntimeError(SloxError):
    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message} (line {self.line})"

class UndefinedVariable(LoxRuntimeError):
    def __init__(self, variable: Variable):
        super().__init__(f"Undefined variable '{variable.name}'.", variable.line or None)
        self.variable = variable

class TypeMismatch(LoxRuntimeError):
    def __init__(self, value: Value, expected: str, line: Optional[int] = None):
        super().__init__(f"Expected {expected} but found {type_name(value)}.", line)
        self.value = value
        self.expected = expected

class BinaryOperationFailure(LoxRuntimeError):
    def __init__(self, operator: str, lhs: Value, rhs: Value, line: Optional[int] = None):
        super().__init__(
            f"Cannot perform operation {operator} between operands {lhs!r} and {rhs!r}.", line
        )
        self.operator = operator
        self.lhs = lhs
        self.rhs = rhs

class NotCallable(LoxRuntimeError):
    def __init__(self, callee: Variable, value: Value):
        super().__init__(f"'{callee.name}' is not callable ({type_name(value)}).", callee.line or None)
        self.callee = callee
        self.value = value

class IncorrectArgumentCount(LoxRuntimeError):
    def __init__(self, expected: int, actual: int, line: Optional[int] = None):
        super().__init__(f"Expected {expected} arguments but got {actual}.", line)
        self.expected = expected
        self.actual = actual

# ---------- Environment ----------

class Environment:
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.enclosing = enclosing
        # None marks a declared-but-unassigned variable.
        self.values: Dict[str, Optional[Value]] = {}

    def define(self, name: str, value: Optional[Value] = None) -> None:
        self.values[name] = value

    def get(self, variable: Variable) -> Value:
        env: Optional[Environment] = self

        while env is not None:
            if variable.name in env.values:
                value = env.values[variable.name]
                return NIL if value is None else value
            env = env.enclosing

        raise UndefinedVariable(variable)

    def assign(self, variable: Variable, value: Value) -> None:
        env: Optional[Environment] = self

        while env is not None:
            if variable.name in env.values:
                env.values[variable.name] = value
                return
            env = env.enclosing

        raise UndefinedVariable(variable)

    def ancestor(self, distance: int) -> 'Environment':
        env = self

        for _ in range(distance):
            if env.enclosing is None:
                raise LoxRuntimeError(f"Scope distance {distance} exceeds environment depth")
            env = env.enclosing

        return env

    def get_at(self, distance: int, variable: Variable) -> Value:
        values = self.ancestor(distance).values

        if variable.name not in values:
            raise UndefinedVariable(variable)
        value = values[variable.name]

        return NIL if value is None else value

    def assign_at(self, distance: int, variable: Variable, value: Value) -> None:
        values = self.ancestor(distance).values

        if variable.name not in values:
            raise UndefinedVariable(variable)

        values[variable.name] = value
