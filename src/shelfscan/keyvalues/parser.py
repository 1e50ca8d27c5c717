"""Recursive-descent builder for KeyValues documents with local fault recovery."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from shelfscan.keyvalues.lexer import Token, TokenKind, tokenize

FormatNode = dict[str, Union[str, "FormatNode"]]


@dataclass(frozen=True, slots=True)
class ParseDiagnostic:
    """A recovered local fault inside one document."""

    message: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.message} (line {self.line}, column {self.column})"


@dataclass(slots=True)
class ParseResult:
    """Parsed tree plus the faults skipped while building it."""

    root: FormatNode = field(default_factory=dict)
    diagnostics: list[ParseDiagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


@dataclass(slots=True)
class ParseError(Exception):
    """Raised by strict parsing when a document contains any fault."""

    diagnostics: list[ParseDiagnostic]
    partial: FormatNode

    def __str__(self) -> str:
        first = self.diagnostics[0] if self.diagnostics else "unknown fault"
        return f"Malformed KeyValues document: {first} ({len(self.diagnostics)} fault(s))"


class _TreeBuilder:
    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._position = 0
        self.diagnostics: list[ParseDiagnostic] = []

    def _peek(self) -> Token | None:
        if self._position < len(self._tokens):
            return self._tokens[self._position]
        return None

    def _advance(self) -> Token:
        token = self._tokens[self._position]
        self._position += 1
        return token

    def _report(self, message: str, token: Token | None) -> None:
        if token is None:
            last = self._tokens[-1] if self._tokens else None
            line = last.line if last else 1
            column = last.column if last else 1
            self.diagnostics.append(ParseDiagnostic(message, line, column))
            return
        self.diagnostics.append(ParseDiagnostic(message, token.line, token.column))

    def _synchronize(self) -> None:
        """Discard tokens up to the closing brace of the current block.

        Nested blocks met on the way are skipped whole. The closing brace
        itself is left for the caller.
        """

        depth = 0
        while (token := self._peek()) is not None:
            if token.kind is TokenKind.OPEN_BRACE:
                depth += 1
            elif token.kind is TokenKind.CLOSE_BRACE:
                if depth == 0:
                    return
                depth -= 1
            elif token.kind is TokenKind.INVALID:
                self._report(token.error or "invalid token", token)
            self._advance()

    def _skip_line(self, fault: Token) -> None:
        """Report *fault* and drop the tokens after it on the same line.

        An unterminated string already ends at its newline, so the next line
        starts a fresh key/value pair. Braces are never dropped here.
        """

        self._report(fault.error or "invalid token", fault)
        self._advance()
        while (token := self._peek()) is not None and token.line == fault.line:
            if token.kind in (TokenKind.OPEN_BRACE, TokenKind.CLOSE_BRACE):
                return
            if token.kind is TokenKind.INVALID:
                self._report(token.error or "invalid token", token)
            self._advance()

    def build_block(self, target: FormatNode, depth: int) -> None:
        while True:
            token = self._peek()
            if token is None:
                if depth > 0:
                    self._report("unexpected end of input inside an open block", None)
                return

            if token.kind is TokenKind.CLOSE_BRACE:
                self._advance()
                if depth > 0:
                    return
                self._report("closing brace without a matching open brace", token)
                continue

            if token.kind is TokenKind.OPEN_BRACE:
                self._report("block without a key", token)
                self._synchronize_block()
                continue

            if token.kind is TokenKind.INVALID:
                self._skip_line(token)
                continue

            key = self._advance().value
            value_token = self._peek()
            if value_token is None:
                self._report(f"key {key!r} has no value", token)
                continue

            if value_token.kind is TokenKind.QUOTED_STRING:
                self._advance()
                target[key] = value_token.value
            elif value_token.kind is TokenKind.OPEN_BRACE:
                self._advance()
                existing = target.get(key)
                child: FormatNode = existing if isinstance(existing, dict) else {}
                target[key] = child
                self.build_block(child, depth + 1)
            elif value_token.kind is TokenKind.CLOSE_BRACE:
                self._report(f"key {key!r} has no value", token)
            else:
                self._skip_line(value_token)

    def _synchronize_block(self) -> None:
        # Skip an anonymous block including its own closing brace.
        self._advance()
        self._synchronize()
        if self._peek() is not None:
            self._advance()
        else:
            self._report("unexpected end of input inside an open block", None)


def parse(text: str, *, strict: bool = False) -> ParseResult:
    """Parse KeyValues *text* into a nested mapping.

    Malformed input is recovered locally and reported through
    ``ParseResult.diagnostics``. With ``strict=True`` any fault raises
    :class:`ParseError` instead.
    """

    builder = _TreeBuilder(tokenize(text))
    root: FormatNode = {}
    builder.build_block(root, 0)
    if strict and builder.diagnostics:
        raise ParseError(builder.diagnostics, root)
    return ParseResult(root=root, diagnostics=builder.diagnostics)


def lookup(node: FormatNode, key: str) -> str | FormatNode | None:
    """Return ``node[key]``, falling back to a case-insensitive match."""

    if key in node:
        return node[key]
    folded = key.casefold()
    for candidate, value in node.items():
        if candidate.casefold() == folded:
            return value
    return None


def first_block(node: FormatNode, preferred: str) -> FormatNode | None:
    """Return the block under *preferred*, else the first block at this level."""

    value = lookup(node, preferred)
    if isinstance(value, dict):
        return value
    for candidate in node.values():
        if isinstance(candidate, dict):
            return candidate
    return None
