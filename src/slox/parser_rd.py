"""
Recursive Descent Parser for slox

Structure:
- Lexer: Token stream from source
- Parser: one method per grammar tier, lowest precedence first
- AST: dataclass nodes from tree.py

Errors inside a statement raise ParseError; the top-level driver records it
and resynchronizes at the next statement boundary, so every syntax error in
a source is reported in one run.
"""

from typing import List, Optional

from .token_types import TT, Tok, describe
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
    VarStmt,
    Variable,
    VariableExpr,
    WhileStmt,
)
from .types import AggregateError, SloxError

MAX_ARGS = 255

# ============================================================================
# Parser
# ============================================================================

class ParseError(SloxError):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        super().__init__(message, token.line if token else None)
        self.token = token

    def __str__(self) -> str:
        if self.token is None:
            return f"Error: {self.message}"
        return f"[line {self.token.line}] Error at {describe(self.token)}: {self.message}"

class Parser:
    """
    Recursive descent parser for slox.

    Expression precedence (lowest to highest):
    1. assignment (=, right associative)
    2. or
    3. and
    4. equality (==, !=)
    5. comparison (<, <=, >, >=)
    6. addition (+, -)
    7. multiplication (*, /)
    8. unary (!, -)
    9. call (ident(args))
    10. primary (literals, identifiers, parens)
    """

    # Tokens that begin a statement; panic-mode recovery stops before them.
    SYNC_TOKENS = frozenset({
        TT.CLASS, TT.FUN, TT.VAR, TT.FOR, TT.IF, TT.WHILE, TT.PRINT, TT.RETURN,
    })

    def __init__(self, tokens: List[Tok]):
        if not tokens or tokens[-1].type != TT.EOF:
            last_line = tokens[-1].line if tokens else 1
            tokens = list(tokens) + [Tok(TT.EOF, "", last_line)]
        self.tokens = tokens
        self.pos = 0
        self.errors: List[ParseError] = []

    # ========================================================================
    # Token Navigation
    # ========================================================================

    @property
    def current(self) -> Tok:
        return self.tokens[self.pos]

    def peek(self, offset: int = 0) -> Tok:
        """Look ahead at token"""
        idx = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def previous(self) -> Tok:
        return self.tokens[self.pos - 1]

    def at_end(self) -> bool:
        return self.current.type == TT.EOF

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        tok = self.current
        if not self.at_end():
            self.pos += 1
        return tok

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: str) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            raise ParseError(message, self.current)
        return self.advance()

    def record(self, message: str, token: Tok) -> None:
        """Record a non-fatal error; parser state stays valid"""
        self.errors.append(ParseError(message, token))

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> List[Stmt]:
        """Parse every statement, collecting errors in self.errors"""
        statements: List[Stmt] = []

        while not self.at_end():
            try:
                statements.append(self.parse_declaration())
            except ParseError as exc:
                self.errors.append(exc)
                self.synchronize()

        return statements

    def parse(self) -> List[Stmt]:
        """Parse entire program; raise the collected errors if any"""
        statements = self.parse_program()

        if self.errors:
            raise AggregateError(self.errors)
        return statements

    def synchronize(self) -> None:
        """Discard tokens until a statement boundary"""
        self.advance()

        while not self.at_end():
            if self.previous().type == TT.SEMICOLON:
                return
            if self.current.type in self.SYNC_TOKENS:
                return
            self.advance()

    # ========================================================================
    # Declarations
    # ========================================================================

    def parse_declaration(self) -> Stmt:
        if self.check(TT.CLASS):
            keyword = self.advance()
            self.skip_class_body()
            raise ParseError("Classes are not supported.", keyword)
        if self.match(TT.FUN):
            return self.parse_function()
        if self.match(TT.VAR):
            return self.parse_var_declaration()
        return self.parse_statement()

    def skip_class_body(self) -> None:
        """Skip to the brace closing a class body, leaving it for synchronize"""
        while not self.check(TT.LEFT_BRACE):
            if self.at_end() or self.check(TT.SEMICOLON):
                return
            self.advance()

        depth = 0
        while not self.at_end():
            if self.check(TT.LEFT_BRACE):
                depth += 1
            elif self.check(TT.RIGHT_BRACE):
                depth -= 1
                if depth == 0:
                    return
            self.advance()

    def parse_function(self) -> FunctionStmt:
        """fun NAME ( params? ) { body }"""
        name_tok = self.expect(TT.IDENTIFIER, "Expect function name.")
        self.expect(TT.LEFT_PAREN, "Expect '(' after function name.")

        params: List[Variable] = []
        if not self.check(TT.RIGHT_PAREN):
            while True:
                if len(params) == MAX_ARGS:
                    self.record(f"Can't have more than {MAX_ARGS} parameters.", self.current)
                tok = self.expect(TT.IDENTIFIER, "Expect parameter name.")
                params.append(Variable(tok.lexeme, tok.line))
                if not self.match(TT.COMMA):
                    break

        self.expect(TT.RIGHT_PAREN, "Expect ')' after parameters.")
        self.expect(TT.LEFT_BRACE, "Expect '{' before function body.")
        body = BlockStmt(self.parse_block())

        return FunctionStmt(Variable(name_tok.lexeme, name_tok.line), params, body)

    def parse_var_declaration(self) -> VarStmt:
        name_tok = self.expect(TT.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TT.EQUAL):
            initializer = self.parse_expr()

        self.expect(TT.SEMICOLON, "Expect ';' after variable declaration.")
        return VarStmt(Variable(name_tok.lexeme, name_tok.line), initializer)

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Stmt:
        if self.match(TT.FOR):
            return self.parse_for_stmt()
        if self.match(TT.IF):
            return self.parse_if_stmt()
        if self.match(TT.PRINT):
            return self.parse_print_stmt()
        if self.match(TT.RETURN):
            return self.parse_return_stmt()
        if self.match(TT.WHILE):
            return self.parse_while_stmt()
        if self.match(TT.LEFT_BRACE):
            return BlockStmt(self.parse_block())

        return self.parse_expression_stmt()

    def parse_for_stmt(self) -> Stmt:
        """
        Parse for loop and desugar it:
        for (init; cond; incr) body  =>  { init; while (cond) { body; incr; } }
        """
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Optional[Stmt]
        if self.match(TT.SEMICOLON):
            initializer = None
        elif self.match(TT.VAR):
            initializer = self.parse_var_declaration()
        else:
            initializer = self.parse_expression_stmt()

        condition: Optional[Expr] = None
        if not self.check(TT.SEMICOLON):
            condition = self.parse_expr()
        self.expect(TT.SEMICOLON, "Expect ';' after loop condition.")

        increment: Optional[Expr] = None
        if not self.check(TT.RIGHT_PAREN):
            increment = self.parse_expr()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.parse_statement()

        if increment is not None:
            body = BlockStmt([body, ExpressionStmt(increment)])
        if condition is None:
            condition = LiteralExpr(True)
        body = WhileStmt(condition, body)
        if initializer is not None:
            body = BlockStmt([initializer, body])

        return body

    def parse_if_stmt(self) -> IfStmt:
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.parse_expr()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.parse_statement()
        else_branch = None
        if self.match(TT.ELSE):
            else_branch = self.parse_statement()

        return IfStmt(condition, then_branch, else_branch)

    def parse_print_stmt(self) -> PrintStmt:
        value = self.parse_expr()
        self.expect(TT.SEMICOLON, "Expect ';' after value.")
        return PrintStmt(value)

    def parse_return_stmt(self) -> ReturnStmt:
        keyword = self.previous()
        value = None
        if not self.check(TT.SEMICOLON):
            value = self.parse_expr()

        self.expect(TT.SEMICOLON, "Expect ';' after return value.")
        return ReturnStmt(value, keyword.line)

    def parse_while_stmt(self) -> WhileStmt:
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.parse_expr()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after condition.")
        return WhileStmt(condition, self.parse_statement())

    def parse_block(self) -> List[Stmt]:
        """Statements up to the closing brace; the '{' is already consumed"""
        statements: List[Stmt] = []

        while not self.check(TT.RIGHT_BRACE) and not self.at_end():
            statements.append(self.parse_declaration())

        self.expect(TT.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def parse_expression_stmt(self) -> ExpressionStmt:
        expr = self.parse_expr()
        self.expect(TT.SEMICOLON, "Expect ';' after expression.")
        return ExpressionStmt(expr)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Expr:
        return self.parse_assignment()

    def parse_assignment(self) -> Expr:
        """Parse assignment: ident = expr (right associative)"""
        expr = self.parse_or_expr()

        if self.check(TT.EQUAL):
            equals = self.advance()
            value = self.parse_assignment()

            if isinstance(expr, VariableExpr):
                return AssignExpr(expr.variable, value)

            # Not fatal: the right-hand side was consumed so no resync is needed.
            self.record("Invalid assignment target.", equals)

        return expr

    def parse_or_expr(self) -> Expr:
        left = self.parse_and_expr()

        while self.check(TT.OR):
            op = self.advance()
            right = self.parse_and_expr()
            left = LogicalExpr(left, 'or', right, op.line)

        return left

    def parse_and_expr(self) -> Expr:
        left = self.parse_equality_expr()

        while self.check(TT.AND):
            op = self.advance()
            right = self.parse_equality_expr()
            left = LogicalExpr(left, 'and', right, op.line)

        return left

    def parse_equality_expr(self) -> Expr:
        left = self.parse_comparison_expr()

        while self.check(TT.BANG_EQUAL, TT.EQUAL_EQUAL):
            op = self.advance()
            right = self.parse_comparison_expr()
            left = BinaryExpr(left, op.lexeme, right, op.line)

        return left

    def parse_comparison_expr(self) -> Expr:
        left = self.parse_add_expr()

        while self.check(TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL):
            op = self.advance()
            right = self.parse_add_expr()
            left = BinaryExpr(left, op.lexeme, right, op.line)

        return left

    def parse_add_expr(self) -> Expr:
        """Parse addition/subtraction: expr + expr"""
        left = self.parse_mul_expr()

        while self.check(TT.MINUS, TT.PLUS):
            op = self.advance()
            right = self.parse_mul_expr()
            left = BinaryExpr(left, op.lexeme, right, op.line)

        return left

    def parse_mul_expr(self) -> Expr:
        """Parse multiplication/division: expr * expr"""
        left = self.parse_unary_expr()

        while self.check(TT.SLASH, TT.STAR):
            op = self.advance()
            right = self.parse_unary_expr()
            left = BinaryExpr(left, op.lexeme, right, op.line)

        return left

    def parse_unary_expr(self) -> Expr:
        """Parse unary operators: -expr, !expr"""
        if self.check(TT.BANG, TT.MINUS):
            op = self.advance()
            return UnaryExpr(op.lexeme, self.parse_unary_expr(), op.line)

        return self.parse_call_expr()

    def parse_call_expr(self) -> Expr:
        """Parse ident(args); only bare identifiers can be called"""
        if self.check(TT.IDENTIFIER) and self.peek(1).type == TT.LEFT_PAREN:
            name = self.advance()
            self.advance()  # (
            callee = VariableExpr(Variable(name.lexeme, name.line))
            arguments = self.parse_arg_list()
            paren = self.expect(TT.RIGHT_PAREN, "Expect ')' after arguments.")
            return CallExpr(callee, arguments, paren.line)

        return self.parse_primary_expr()

    def parse_arg_list(self) -> List[Expr]:
        arguments: List[Expr] = []

        if self.check(TT.RIGHT_PAREN):
            return arguments

        while True:
            if len(arguments) == MAX_ARGS:
                self.record(f"Can't have more than {MAX_ARGS} arguments.", self.current)
            arguments.append(self.parse_expr())
            if not self.match(TT.COMMA):
                break

        return arguments

    def parse_primary_expr(self) -> Expr:
        tok = self.current

        match tok.type:
            case TT.FALSE:
                self.advance()
                return LiteralExpr(False)
            case TT.TRUE:
                self.advance()
                return LiteralExpr(True)
            case TT.NIL:
                self.advance()
                return LiteralExpr(None)
            case TT.NUMBER | TT.STRING:
                self.advance()
                return LiteralExpr(tok.literal)
            case TT.IDENTIFIER:
                self.advance()
                return VariableExpr(Variable(tok.lexeme, tok.line))
            case TT.LEFT_PAREN:
                self.advance()
                expr = self.parse_expr()
                self.expect(TT.RIGHT_PAREN, "Expect ')' after expression.")
                return GroupingExpr(expr)

        raise ParseError("Expect expression.", tok)

# ============================================================================
# Convenience
# ============================================================================

def parse(tokens: List[Tok]) -> List[Stmt]:
    """Parse tokens into statements, raising AggregateError on syntax errors"""
    return Parser(tokens).parse()


def parse_source(source: str) -> List[Stmt]:
    """
    Parse slox source code to a statement list.

    Lexical errors are raised before parsing starts.
    """
    from .lexer_rd import tokenize

    return parse(tokenize(source))
