"""Single-pass tokenizer for the KeyValues text format."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

_ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "t": "\t"}
_STRUCTURAL = {"{", "}", '"'}


class TokenKind(Enum):
    QUOTED_STRING = "quoted-string"
    OPEN_BRACE = "open-brace"
    CLOSE_BRACE = "close-brace"
    INVALID = "invalid"


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    value: str
    line: int
    column: int
    error: str | None = None


def tokenize(text: str) -> list[Token]:
    """Split *text* into quoted strings and braces.

    Faults never raise. An unterminated string (closed by a raw newline or
    by end of input) and unquoted stray text both come back as ``INVALID``
    tokens carrying an ``error`` message.
    """

    tokens: list[Token] = []
    index = 0
    line = 1
    line_start = 0
    length = len(text)

    while index < length:
        char = text[index]

        if char == "\n":
            line += 1
            index += 1
            line_start = index
            continue
        if char.isspace():
            index += 1
            continue

        column = index - line_start + 1
        if char == "{":
            tokens.append(Token(TokenKind.OPEN_BRACE, char, line, column))
            index += 1
            continue
        if char == "}":
            tokens.append(Token(TokenKind.CLOSE_BRACE, char, line, column))
            index += 1
            continue

        if char == '"':
            index += 1
            buffer: list[str] = []
            closed = False
            while index < length:
                current = text[index]
                if current == '"':
                    closed = True
                    index += 1
                    break
                if current == "\n":
                    break
                if current == "\\" and index + 1 < length and text[index + 1] != "\n":
                    following = text[index + 1]
                    buffer.append(_ESCAPES.get(following, current + following))
                    index += 2
                    continue
                buffer.append(current)
                index += 1

            value = "".join(buffer)
            if closed:
                tokens.append(Token(TokenKind.QUOTED_STRING, value, line, column))
            else:
                tokens.append(
                    Token(TokenKind.INVALID, value, line, column, error="unterminated quoted string")
                )
            continue

        start = index
        while index < length and not text[index].isspace() and text[index] not in _STRUCTURAL:
            index += 1
        tokens.append(
            Token(
                TokenKind.INVALID,
                text[start:index],
                line,
                column,
                error=f"unexpected unquoted text {text[start:index]!r}",
            )
        )

    return tokens
