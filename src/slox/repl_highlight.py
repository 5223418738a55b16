"""prompt_toolkit lexer for live slox syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as LoxLexer
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "reserved": "ansired",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
}

# Token type → highlight group.
_TT_GROUP = {
    TT.AND: "keyword",
    TT.ELSE: "keyword",
    TT.FUN: "keyword",
    TT.FOR: "keyword",
    TT.IF: "keyword",
    TT.OR: "keyword",
    TT.PRINT: "keyword",
    TT.RETURN: "keyword",
    TT.VAR: "keyword",
    TT.WHILE: "keyword",
    TT.CLASS: "reserved",
    TT.SUPER: "reserved",
    TT.THIS: "reserved",
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.NIL: "constant",
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.IDENTIFIER: "identifier",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.STAR: "operator",
    TT.SLASH: "operator",
    TT.BANG: "operator",
    TT.BANG_EQUAL: "operator",
    TT.EQUAL: "operator",
    TT.EQUAL_EQUAL: "operator",
    TT.LESS: "operator",
    TT.LESS_EQUAL: "operator",
    TT.GREATER: "operator",
    TT.GREATER_EQUAL: "operator",
    TT.LEFT_PAREN: "punctuation",
    TT.RIGHT_PAREN: "punctuation",
    TT.LEFT_BRACE: "punctuation",
    TT.RIGHT_BRACE: "punctuation",
    TT.COMMA: "punctuation",
    TT.DOT: "punctuation",
    TT.SEMICOLON: "punctuation",
    TT.COMMENT: "comment",
}


def _is_function_name(tokens: list[Tok], idx: int) -> bool:
    """Identifier being declared after `fun` or called as `name(`."""
    if idx > 0 and tokens[idx - 1].type == TT.FUN:
        return True
    return idx + 1 < len(tokens) and tokens[idx + 1].type == TT.LEFT_PAREN


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    tokens, _errors = LoxLexer(text, emit_comments=True).scan_tokens()

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        if tok.type == TT.EOF or not tok.lexeme:
            continue

        # Find actual position of this token in the line from pos onwards.
        idx = text.find(tok.lexeme, pos)
        if idx < 0:
            continue

        # Unstyled gap before token.
        if idx > pos:
            result.append(("", text[pos:idx]))

        group = _TT_GROUP.get(tok.type, "")
        if tok.type == TT.IDENTIFIER and _is_function_name(tokens, i):
            group = "function"
        result.append((GROUP_STYLE.get(group, ""), tok.lexeme))
        pos = idx + len(tok.lexeme)

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class SloxLexer(Lexer):
    """prompt_toolkit Lexer that highlights slox source using the scanner."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
