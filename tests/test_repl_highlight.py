from __future__ import annotations

from prompt_toolkit.document import Document

from slox.repl_highlight import GROUP_STYLE, SloxLexer, _highlight_line


def _styles(text: str) -> dict[str, str]:
    return {fragment: style for style, fragment in _highlight_line(text) if fragment.strip()}


def test_fragments_cover_the_line() -> None:
    text = 'var  greeting = "hi"; // note'
    assert "".join(fragment for _, fragment in _highlight_line(text)) == text


def test_token_groups() -> None:
    styles = _styles('fun add(a) { return nil or true; } // done')

    assert styles["fun"] == GROUP_STYLE["keyword"]
    assert styles["return"] == GROUP_STYLE["keyword"]
    assert styles["add"] == GROUP_STYLE["function"]
    assert styles["nil"] == GROUP_STYLE["constant"]
    assert styles["true"] == GROUP_STYLE["boolean"]
    assert styles["// done"] == GROUP_STYLE["comment"]


def test_literals_and_calls() -> None:
    styles = _styles('print clock() + 1.5 + "s";')

    assert styles["clock"] == GROUP_STYLE["function"]
    assert styles["1.5"] == GROUP_STYLE["number"]
    assert styles['"s"'] == GROUP_STYLE["string"]


def test_reserved_words() -> None:
    styles = _styles("class this super")

    assert set(styles.values()) == {GROUP_STYLE["reserved"]}


def test_bad_characters_left_unstyled() -> None:
    text = "x @ y"
    assert "".join(fragment for _, fragment in _highlight_line(text)) == text


def test_empty_line() -> None:
    assert _highlight_line("") == [("", "")]


def test_lexer_per_line() -> None:
    get_line = SloxLexer().lex_document(Document("var a = 1;\nprint a;"))

    assert get_line(1)[0] == (GROUP_STYLE["keyword"], "print")
    assert get_line(5) == [("", "")]
