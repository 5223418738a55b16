"""
Lexer for slox

Tokenizes slox source code into a stream of tokens.

Features:
- Single-pass tokenization
- Line tracking for error reporting
- Error collection: scanning continues past bad characters so every
  lexical error in a source is reported together
"""

from typing import List, Optional, Tuple

from .token_types import TT, Tok, Literal
from .types import AggregateError, SloxError

# ============================================================================
# Lexer Implementation
# ============================================================================

class LexError(SloxError):
    """Lexical analysis error"""

    def __str__(self) -> str:
        return f"[line {self.line}] Error: {self.message}"


class Lexer:
    """
    slox lexer.

    Whitespace and ``//`` comments are discarded; the token list always ends
    with an EOF token.
    """

    # Keyword mapping
    KEYWORDS = {
        'and': TT.AND,
        'class': TT.CLASS,
        'else': TT.ELSE,
        'false': TT.FALSE,
        'fun': TT.FUN,
        'for': TT.FOR,
        'if': TT.IF,
        'nil': TT.NIL,
        'or': TT.OR,
        'print': TT.PRINT,
        'return': TT.RETURN,
        'super': TT.SUPER,
        'this': TT.THIS,
        'true': TT.TRUE,
        'var': TT.VAR,
        'while': TT.WHILE,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('!=', TT.BANG_EQUAL),
        ('==', TT.EQUAL_EQUAL),
        ('<=', TT.LESS_EQUAL),
        ('>=', TT.GREATER_EQUAL),

        # Single-character operators
        ('!', TT.BANG),
        ('=', TT.EQUAL),
        ('<', TT.LESS),
        ('>', TT.GREATER),
        ('(', TT.LEFT_PAREN),
        (')', TT.RIGHT_PAREN),
        ('{', TT.LEFT_BRACE),
        ('}', TT.RIGHT_BRACE),
        (',', TT.COMMA),
        ('.', TT.DOT),
        ('-', TT.MINUS),
        ('+', TT.PLUS),
        (';', TT.SEMICOLON),
        ('*', TT.STAR),
        ('/', TT.SLASH),
    ]

    def __init__(self, source: str, emit_comments: bool = False):
        self.source = source
        self.pos = 0
        self.start = 0
        self.line = 1
        self.tokens: List[Tok] = []
        self.errors: List[LexError] = []
        self.emit_comments = emit_comments

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def scan_tokens(self) -> Tuple[List[Tok], List[LexError]]:
        """Tokenize entire source, return (tokens, errors)"""
        while self.pos < len(self.source):
            self.start = self.pos
            self.scan_token()

        self.start = self.pos
        self.emit(TT.EOF)
        return self.tokens, self.errors

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source; raise the collected errors if any"""
        tokens, errors = self.scan_tokens()

        if errors:
            raise AggregateError(errors)
        return tokens

    def scan_token(self):
        """Scan next token"""
        ch = self.peek()

        # Skip whitespace
        if ch in (' ', '\r', '\t'):
            self.advance()
            return

        # Newlines
        if ch == '\n':
            self.advance()
            self.line += 1
            return

        # Comments
        if ch == '/' and self.peek(1) == '/':
            self.skip_comment()
            return

        # String literals
        if ch == '"':
            self.scan_string()
            return

        # Numbers
        if is_digit(ch):
            self.scan_number()
            return

        # Identifiers and keywords
        if is_alpha(ch):
            self.scan_identifier()
            return

        # Operators and punctuation
        self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self):
        """Scan string literal: "..." (may span lines, no escapes)"""
        start_line = self.line
        self.advance()  # Opening quote

        while self.pos < len(self.source) and self.peek() != '"':
            if self.peek() == '\n':
                self.line += 1
            self.advance()

        if self.pos >= len(self.source):
            self.error("Unterminated string.", start_line)
            return

        self.advance()  # Closing quote
        value = self.source[self.start + 1:self.pos - 1]
        self.emit(TT.STRING, value, line=start_line)

    def scan_number(self):
        """Scan number literal"""
        # Integer part
        while is_digit(self.peek()):
            self.advance()

        # Decimal part; a '.' not followed by a digit is left for the DOT token
        if self.peek() == '.' and is_digit(self.peek(1)):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.emit(TT.NUMBER, float(self.source[self.start:self.pos]))

    def scan_identifier(self):
        """Scan identifier or keyword"""
        while is_alnum(self.peek()):
            self.advance()

        text = self.source[self.start:self.pos]
        self.emit(self.KEYWORDS.get(text, TT.IDENTIFIER))

    def scan_operator(self):
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                self.emit(op_type)
                return

        ch = self.advance()
        self.error(f"Unexpected character: {ch}")

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        result = self.source[self.pos:self.pos + n]
        self.pos += n
        return result

    def skip_comment(self):
        """Skip comment until end of line"""
        while self.peek() not in ('\n', '\0'):
            self.advance()

        if self.emit_comments:
            self.emit(TT.COMMENT)

    def emit(self, token_type: TT, literal: Literal = None, line: Optional[int] = None):
        """Emit a token"""
        tok = Tok(
            type=token_type,
            lexeme=self.source[self.start:self.pos],
            line=self.line if line is None else line,
            literal=literal,
        )
        self.tokens.append(tok)

    def error(self, message: str, line: Optional[int] = None):
        self.errors.append(LexError(message, self.line if line is None else line))


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'

def is_alpha(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'

def is_alnum(ch: str) -> bool:
    return is_alpha(ch) or is_digit(ch)

# ============================================================================
# Convenience
# ============================================================================

def scan(source: str) -> Tuple[List[Tok], List[LexError]]:
    """Tokenize source, returning tokens and any lexical errors"""
    return Lexer(source).scan_tokens()

def tokenize(source: str) -> List[Tok]:
    """Tokenize source, raising AggregateError on lexical errors"""
    return Lexer(source).tokenize()
