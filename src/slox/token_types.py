"""
Token Types for the slox scanner and parser

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Optional, Union
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - mirrors grammar terminals"""

    # Single-character punctuation
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # One or two character operators
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    # Special
    COMMENT = auto()
    EOF = auto()


Literal = Union[str, float, None]


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    lexeme: str
    line: int = 0
    literal: Literal = None

    def __repr__(self):
        if self.literal is not None:
            return f"Tok({self.type.name}, {self.lexeme!r}, {self.literal!r}, line {self.line})"
        return f"Tok({self.type.name}, {self.lexeme!r}, line {self.line})"


def describe(tok: Optional[Tok]) -> str:
    """Human name for a token in error messages."""
    if tok is None or tok.type == TT.EOF:
        return "end"
    return f"'{tok.lexeme}'"
