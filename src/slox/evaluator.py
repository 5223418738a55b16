from __future__ import annotations

from typing import Iterable, List, Optional, TextIO
from weakref import WeakKeyDictionary

from .eval.expr import apply_binary_operator, eval_unary
from .eval.fn import make_function
from .eval.helpers import is_truthy
from .runtime import Builtins, init_stdlib
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
    LiteralValue,
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
from .types import (
    NIL,
    Completion,
    Environment,
    IncorrectArgumentCount,
    LoxBool,
    LoxCallable,
    LoxNumber,
    LoxRuntimeError,
    LoxString,
    NotCallable,
    Return,
    Value,
)
from .utils import stringify


def literal_value(value: LiteralValue) -> Value:
    match value:
        case None:
            return NIL
        case bool():
            return LoxBool(value)
        case float() | int():
            return LoxNumber(float(value))
        case str():
            return LoxString(value)
        case _:
            raise LoxRuntimeError(f"Unsupported literal {value!r}")


class Interpreter:
    """Tree-walking evaluator.

    One instance is meant to live across many `interpret` calls (a REPL), so
    later input sees earlier global definitions. All mutable state sits on
    the instance: the global scope, the current scope and the resolver's
    scope distances.
    """

    def __init__(self, stdout: Optional[TextIO] = None):
        init_stdlib()
        self.stdout = stdout
        self.globals = Environment()
        self.environment = self.globals
        # Resolver output: scope distance per reference, None for globals.
        # Weak keys: entries go away with the tree they annotate.
        self.locals: WeakKeyDictionary[Expr, Optional[int]] = WeakKeyDictionary()

        for name, fn in Builtins.stdlib_functions.items():
            self.define_native(name, fn)

    def define_native(self, name: str, fn: LoxCallable) -> None:
        self.execute(VarStmt(Variable(name), ValueExpr(fn)))

    def resolve(self, expr: Expr, depth: Optional[int]) -> None:
        self.locals[expr] = depth

    # ---------------- Public API ----------------

    def interpret(self, statements: Iterable[Stmt]) -> None:
        try:
            for stmt in statements:
                completion = self.execute(stmt)

                if completion is not None:
                    raise LoxRuntimeError("Can't return from top-level code.")
        except RecursionError:
            self.environment = self.globals
            raise LoxRuntimeError("Stack overflow.") from None

    # ---------------- Statements ----------------

    def execute(self, stmt: Stmt) -> Completion:
        match stmt:
            case ExpressionStmt(expression=expression):
                self.evaluate(expression)
            case PrintStmt(expression=expression):
                print(stringify(self.evaluate(expression)), file=self.stdout)
            case VarStmt(variable=variable, initializer=initializer):
                value = None if initializer is None else self.evaluate(initializer)
                self.environment.define(variable.name, value)
            case BlockStmt(statements=statements):
                return self.execute_block(statements, Environment(enclosing=self.environment))
            case IfStmt(condition=condition, then_branch=then_branch, else_branch=else_branch):
                if is_truthy(self.evaluate(condition)):
                    return self.execute(then_branch)
                if else_branch is not None:
                    return self.execute(else_branch)
            case WhileStmt(condition=condition, body=body):
                while is_truthy(self.evaluate(condition)):
                    completion = self.execute(body)
                    if completion is not None:
                        return completion
            case FunctionStmt(name=name):
                self.environment.define(name.name, make_function(stmt, self.environment))
            case ReturnStmt(value=value):
                return Return(NIL if value is None else self.evaluate(value))
            case _:
                raise LoxRuntimeError(f"Unknown statement node {type(stmt).__name__}")

        return None

    def execute_block(self, statements: List[Stmt], environment: Environment) -> Completion:
        previous = self.environment
        self.environment = environment

        try:
            for stmt in statements:
                completion = self.execute(stmt)
                if completion is not None:
                    return completion
        finally:
            self.environment = previous

        return None

    # ---------------- Expressions ----------------

    def evaluate(self, expr: Expr) -> Value:
        match expr:
            case LiteralExpr(value=value):
                return literal_value(value)
            case GroupingExpr(expression=inner):
                return self.evaluate(inner)
            case ValueExpr(value=value):
                return value
            case VariableExpr(variable=variable):
                return self.look_up(expr, variable)
            case AssignExpr(variable=variable, value=value_expr):
                value = self.evaluate(value_expr)
                self.assign(expr, variable, value)
                return value
            case LogicalExpr(left=left, operator=operator, right=right):
                lhs = self.evaluate(left)
                if operator == 'or' and is_truthy(lhs):
                    return lhs
                if operator == 'and' and not is_truthy(lhs):
                    return lhs
                return self.evaluate(right)
            case UnaryExpr(operator=operator, operand=operand, line=line):
                return eval_unary(operator, self.evaluate(operand), line or None)
            case BinaryExpr(left=left, operator=operator, right=right, line=line):
                lhs = self.evaluate(left)
                rhs = self.evaluate(right)
                return apply_binary_operator(operator, lhs, rhs, line or None)
            case CallExpr():
                return self.call(expr)
            case _:
                raise LoxRuntimeError(f"Unknown expression node {type(expr).__name__}")

    def call(self, expr: CallExpr) -> Value:
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(arg) for arg in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise NotCallable(expr.callee.variable, callee)

        if len(arguments) != callee.arity:
            raise IncorrectArgumentCount(callee.arity, len(arguments), expr.line or None)

        return callee.call(self, arguments)

    def look_up(self, expr: Expr, variable: Variable) -> Value:
        if expr not in self.locals:
            # Unresolved tree: search the scope chain by name.
            return self.environment.get(variable)

        distance = self.locals[expr]
        if distance is None:
            return self.globals.get(variable)

        return self.environment.get_at(distance, variable)

    def assign(self, expr: Expr, variable: Variable, value: Value) -> None:
        if expr not in self.locals:
            self.environment.assign(variable, value)
            return

        distance = self.locals[expr]
        if distance is None:
            self.globals.assign(variable, value)
        else:
            self.environment.assign_at(distance, variable, value)

    def interpret_expression(self, expr: Expr) -> Value:
        """Evaluate one top-level expression and hand back its value (REPL echo)."""
        try:
            return self.evaluate(expr)
        except RecursionError:
            self.environment = self.globals
            raise LoxRuntimeError("Stack overflow.") from None
