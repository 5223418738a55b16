"""AST node classes produced by the parser and consumed by the resolver and evaluator.

Nodes compare by identity (``eq=False``) so the resolver can annotate one
particular variable reference; ``str(node)`` renders a deterministic
s-expression for structural comparison and ``--ast`` dumps.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from math import copysign
from typing import TYPE_CHECKING, Iterable, List, Optional, Union

if TYPE_CHECKING:
    from .types import Value

LiteralValue = Union[float, str, bool, None]


def format_number(value: float) -> str:
    if value != value or value in (float("inf"), float("-inf")):
        return str(value)
    # Large magnitudes and negative zero keep the float form (1e+20, -0.0).
    if value.is_integer() and abs(value) < 1e16 and (value != 0 or copysign(1.0, value) > 0):
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class Variable:
    """A name used both as an AST leaf and as an environment key."""
    name: str
    line: int = field(default=0, compare=False)

    def __str__(self) -> str:
        return f"(var {self.name})"


# ---------- Expressions ----------

class Expr:
    pass


@dataclass(eq=False)
class AssignExpr(Expr):
    variable: Variable
    value: Expr

    def __str__(self) -> str:
        return f"(= {self.variable} {self.value})"


@dataclass(eq=False)
class LiteralExpr(Expr):
    value: LiteralValue

    def __str__(self) -> str:
        v = self.value
        if v is None:
            return "nil"
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, float):
            return format_number(v)
        return f'"{v}"'


@dataclass(eq=False)
class LogicalExpr(Expr):
    left: Expr
    operator: str  # 'and' | 'or'
    right: Expr
    line: int = 0

    def __str__(self) -> str:
        return f"({self.operator} {self.left} {self.right})"


@dataclass(eq=False)
class UnaryExpr(Expr):
    operator: str  # '-' | '!'
    operand: Expr
    line: int = 0

    def __str__(self) -> str:
        return f"({self.operator} {self.operand})"


@dataclass(eq=False)
class BinaryExpr(Expr):
    left: Expr
    operator: str
    right: Expr
    line: int = 0

    def __str__(self) -> str:
        return f"({self.operator} {self.left} {self.right})"


@dataclass(eq=False)
class VariableExpr(Expr):
    variable: Variable

    def __str__(self) -> str:
        return str(self.variable)


@dataclass(eq=False)
class CallExpr(Expr):
    # Callees are restricted to bare variable references.
    callee: VariableExpr
    arguments: List[Expr]
    line: int = 0

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"(call {self.callee} {args})" if args else f"(call {self.callee})"


@dataclass(eq=False)
class GroupingExpr(Expr):
    expression: Expr

    def __str__(self) -> str:
        return f"(group {self.expression})"


@dataclass(eq=False)
class ValueExpr(Expr):
    """A pre-evaluated runtime value embedded in the tree (native functions)."""
    value: 'Value'

    def __str__(self) -> str:
        return repr(self.value)


# ---------- Statements ----------

class Stmt:
    pass


@dataclass(eq=False)
class BlockStmt(Stmt):
    statements: List[Stmt]

    def __str__(self) -> str:
        inner = " ".join(str(s) for s in self.statements)
        return f"(block {inner})" if inner else "(block)"


@dataclass(eq=False)
class ExpressionStmt(Stmt):
    expression: Expr

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(eq=False)
class FunctionStmt(Stmt):
    name: Variable
    params: List[Variable]
    body: BlockStmt

    def __str__(self) -> str:
        params = ", ".join(p.name for p in self.params)
        return f"(function {self.name.name} [{params}] {self.body})"


@dataclass(eq=False)
class IfStmt(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None

    def __str__(self) -> str:
        if self.else_branch is None:
            return f"(if {self.condition} then {self.then_branch})"
        return f"(if {self.condition} then {self.then_branch} else {self.else_branch})"


@dataclass(eq=False)
class PrintStmt(Stmt):
    expression: Expr

    def __str__(self) -> str:
        return f"(print {self.expression})"


@dataclass(eq=False)
class ReturnStmt(Stmt):
    value: Optional[Expr]
    line: int = 0

    def __str__(self) -> str:
        return f"(return {self.value})" if self.value is not None else "(return)"


@dataclass(eq=False)
class VarStmt(Stmt):
    variable: Variable
    initializer: Optional[Expr] = None

    def __str__(self) -> str:
        if self.initializer is None:
            return f"(define {self.variable})"
        return f"(define {self.variable} {self.initializer})"


@dataclass(eq=False)
class WhileStmt(Stmt):
    condition: Expr
    body: Stmt

    def __str__(self) -> str:
        return f"(while {self.condition} {self.body})"


def pretty(statements: Iterable[Stmt]) -> str:
    """Render a statement list one s-expression per line."""
    return "\n".join(str(s) for s in statements)
