from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

from .evaluator import Interpreter
from .lexer_rd import tokenize
from .parser_rd import ParseError, parse
from .resolver import Resolver
from .tree import AssignExpr, ExpressionStmt, Stmt, pretty
from .types import LoxRuntimeError, SloxError, Value
from .utils import debug_py_trace_enabled

# sysexits(3) codes: static errors are bad input data, runtime errors are internal.
EXIT_DATAERR = 65
EXIT_SOFTWARE = 70
EXIT_NOINPUT = 66

def compile_source(src: str, interpreter: Interpreter) -> List[Stmt]:
    """Scan, parse and resolve; any static error is raised before execution."""
    tokens = tokenize(src)

    try:
        statements = parse(tokens)
        Resolver(interpreter).resolve(statements)
    except RecursionError:
        raise ParseError("Expression nests too deeply.") from None

    return statements

def run(src: str, interpreter: Optional[Interpreter] = None, stdout: Optional[TextIO] = None) -> Interpreter:
    """Run a whole program and return the interpreter holding its globals."""
    if interpreter is None:
        interpreter = Interpreter(stdout=stdout)

    statements = compile_source(src, interpreter)
    interpreter.interpret(statements)

    return interpreter

def repl_eval(src: str, interpreter: Interpreter) -> Tuple[Optional[Value], bool]:
    """
    Evaluate one REPL submission against a persistent interpreter.

    Returns (value, is_stmt): a lone non-assignment expression statement hands
    its value back for echoing; everything else runs as statements.
    """
    statements = compile_source(src, interpreter)

    if len(statements) == 1:
        stmt = statements[0]
        if isinstance(stmt, ExpressionStmt) and not isinstance(stmt.expression, AssignExpr):
            return interpreter.interpret_expression(stmt.expression), False

    interpreter.interpret(statements)
    return None, True

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg

def report(exc: BaseException) -> None:
    print(exc, file=sys.stderr)

    if debug_py_trace_enabled() and exc.__traceback__ is not None:
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")

def run_file(arg: str, dump_ast: bool = False) -> int:
    try:
        source = _load_source(arg)
    except OSError as exc:
        print(f"Cannot read {arg}: {exc}", file=sys.stderr)
        return EXIT_NOINPUT

    interpreter = Interpreter()

    try:
        statements = compile_source(source, interpreter)
    except SloxError as exc:
        report(exc)
        return EXIT_DATAERR

    if dump_ast:
        print(pretty(statements))
        return 0

    try:
        interpreter.interpret(statements)
    except LoxRuntimeError as exc:
        report(exc)
        return EXIT_SOFTWARE

    return 0

def main() -> None:
    dump_ast = False
    arg = None
    it = iter(sys.argv[1:])

    for token in it:
        if token == "--ast":
            dump_ast = True
            continue

        if token in ("-h", "--help"):
            print("usage: slox [--ast] [FILE | - | SOURCE]")
            return

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if arg is None and not dump_ast and sys.stdin.isatty():
        from .repl import repl
        repl()
        return

    sys.exit(run_file(arg or "-", dump_ast=dump_ast))

if __name__ == "__main__":
    main()
