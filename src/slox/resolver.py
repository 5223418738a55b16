"""Static scope resolution.

Walks the AST once before execution, keeping a stack of block scopes
(name -> "fully initialized" flag). Every local variable reference is
annotated on the interpreter with the number of scopes between the use and
its binding; references found in no scope are globals. Self-referential
initializers and top-level `return` are reported here, before any code runs.
"""
from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from .tree import (
    AssignExpr,
    BinaryExpr,
    BlockStmt,
    CallExpr,
    Expr,
    ExpressionStmt,
    FunctionStmt,
    GroupingExpr,
    IfStmt,
    LiteralExpr,
    LogicalExpr,
    PrintStmt,
    ReturnStmt,
    Stmt,
    UnaryExpr,
    ValueExpr,
    VarStmt,
    Variable,
    VariableExpr,
    WhileStmt,
)
from .types import AggregateError, SloxError

if TYPE_CHECKING:
    from .evaluator import Interpreter


class ResolveError(SloxError):
    """Static resolution error"""

    def __str__(self) -> str:
        if self.line is None:
            return f"Error: {self.message}"
        return f"[line {self.line}] Error: {self.message}"


class FunctionKind(Enum):
    NONE = auto()
    FUNCTION = auto()


class Resolver:
    def __init__(self, interpreter: 'Interpreter'):
        self.interpreter = interpreter
        self.scopes: List[Dict[str, bool]] = []
        self.current_function = FunctionKind.NONE
        self.errors: List[ResolveError] = []

    def resolve(self, statements: Iterable[Stmt]) -> None:
        """Resolve a whole program; raise AggregateError on static errors"""
        for stmt in statements:
            self.resolve_stmt(stmt)

        if self.errors:
            errors, self.errors = self.errors, []
            raise AggregateError(errors)

    # ---------------- scopes ----------------

    def begin_scope(self) -> None:
        self.scopes.append({})

    def end_scope(self) -> None:
        self.scopes.pop()

    def declare(self, variable: Variable) -> None:
        if self.scopes:
            self.scopes[-1][variable.name] = False

    def define(self, variable: Variable) -> None:
        if self.scopes:
            self.scopes[-1][variable.name] = True

    def resolve_local(self, expr: Expr, variable: Variable) -> None:
        for depth, scope in enumerate(reversed(self.scopes)):
            if variable.name in scope:
                self.interpreter.resolve(expr, depth)
                return

        # In no enclosing scope: a global, looked up by name at run time.
        self.interpreter.resolve(expr, None)

    def error(self, message: str, line: Optional[int]) -> None:
        self.errors.append(ResolveError(message, line or None))

    # ---------------- statements ----------------

    def resolve_stmt(self, stmt: Stmt) -> None:
        match stmt:
            case BlockStmt(statements=statements):
                self.begin_scope()
                for inner in statements:
                    self.resolve_stmt(inner)
                self.end_scope()
            case VarStmt(variable=variable, initializer=initializer):
                self.declare(variable)
                if initializer is not None:
                    self.resolve_expr(initializer)
                self.define(variable)
            case FunctionStmt():
                # Defined before the body so the function can recurse.
                self.declare(stmt.name)
                self.define(stmt.name)
                self.resolve_function(stmt)
            case ExpressionStmt(expression=expression) | PrintStmt(expression=expression):
                self.resolve_expr(expression)
            case IfStmt(condition=condition, then_branch=then_branch, else_branch=else_branch):
                self.resolve_expr(condition)
                self.resolve_stmt(then_branch)
                if else_branch is not None:
                    self.resolve_stmt(else_branch)
            case ReturnStmt(value=value, line=line):
                if self.current_function == FunctionKind.NONE:
                    self.error("Can't return from top-level code.", line)
                if value is not None:
                    self.resolve_expr(value)
            case WhileStmt(condition=condition, body=body):
                self.resolve_expr(condition)
                self.resolve_stmt(body)
            case _:
                raise TypeError(f"Unknown statement node {type(stmt).__name__}")

    def resolve_function(self, stmt: FunctionStmt) -> None:
        enclosing = self.current_function
        self.current_function = FunctionKind.FUNCTION

        # Parameters and body share one scope, matching the call frame.
        self.begin_scope()
        for param in stmt.params:
            self.declare(param)
            self.define(param)
        for inner in stmt.body.statements:
            self.resolve_stmt(inner)
        self.end_scope()

        self.current_function = enclosing

    # ---------------- expressions ----------------

    def resolve_expr(self, expr: Expr) -> None:
        match expr:
            case VariableExpr(variable=variable):
                if self.scopes and self.scopes[-1].get(variable.name) is False:
                    self.error("Can't read local variable in its own initializer.", variable.line)
                self.resolve_local(expr, variable)
            case AssignExpr(variable=variable, value=value):
                self.resolve_expr(value)
                self.resolve_local(expr, variable)
            case BinaryExpr(left=left, right=right) | LogicalExpr(left=left, right=right):
                self.resolve_expr(left)
                self.resolve_expr(right)
            case UnaryExpr(operand=operand):
                self.resolve_expr(operand)
            case CallExpr(callee=callee, arguments=arguments):
                self.resolve_expr(callee)
                for argument in arguments:
                    self.resolve_expr(argument)
            case GroupingExpr(expression=inner):
                self.resolve_expr(inner)
            case LiteralExpr() | ValueExpr():
                pass
            case _:
                raise TypeError(f"Unknown expression node {type(expr).__name__}")


def resolve(interpreter: 'Interpreter', statements: Iterable[Stmt]) -> None:
    Resolver(interpreter).resolve(statements)
