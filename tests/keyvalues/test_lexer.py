from __future__ import annotations

from shelfscan.keyvalues.lexer import TokenKind, tokenize


def test_tokenize_emits_strings_and_braces_with_positions() -> None:
    tokens = tokenize('"AppState"\n{\n  "appid"  "220"\n}\n')

    assert [token.kind for token in tokens] == [
        TokenKind.QUOTED_STRING,
        TokenKind.OPEN_BRACE,
        TokenKind.QUOTED_STRING,
        TokenKind.QUOTED_STRING,
        TokenKind.CLOSE_BRACE,
    ]
    assert [token.value for token in tokens if token.kind is TokenKind.QUOTED_STRING] == [
        "AppState",
        "appid",
        "220",
    ]
    assert (tokens[2].line, tokens[2].column) == (3, 3)


def test_tokenize_unescapes_backslashes_and_quotes() -> None:
    tokens = tokenize(r'"path" "C:\\Program Files (x86)\\Steam" "quote" "say \"hi\""')

    assert tokens[1].value == "C:\\Program Files (x86)\\Steam"
    assert tokens[3].value == 'say "hi"'


def test_tokenize_keeps_unknown_escapes_verbatim() -> None:
    tokens = tokenize(r'"path" "D:\SteamLibrary"')

    assert tokens[1].value == "D:\\SteamLibrary"


def test_unterminated_string_stops_at_newline() -> None:
    tokens = tokenize('"path" "broken\n}\n')

    assert tokens[1].kind is TokenKind.INVALID
    assert tokens[1].value == "broken"
    assert tokens[1].error == "unterminated quoted string"
    assert tokens[2].kind is TokenKind.CLOSE_BRACE
    assert tokens[2].line == 2


def test_unquoted_text_is_reported_not_dropped() -> None:
    tokens = tokenize('// note\n"key" "value"')

    assert tokens[0].kind is TokenKind.INVALID
    assert tokens[0].value == "//"
    assert tokens[1].kind is TokenKind.INVALID
    assert tokens[1].value == "note"
    assert [token.value for token in tokens[2:]] == ["key", "value"]


def test_empty_input_has_no_tokens() -> None:
    assert tokenize("") == []
    assert tokenize("  \n\t ") == []
