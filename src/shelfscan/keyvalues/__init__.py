"""KeyValues text format tokenizer and tolerant parser."""

from .lexer import Token, TokenKind, tokenize
from .parser import FormatNode, ParseDiagnostic, ParseError, ParseResult, first_block, lookup, parse

__all__ = [
    "FormatNode",
    "ParseDiagnostic",
    "ParseError",
    "ParseResult",
    "Token",
    "TokenKind",
    "first_block",
    "lookup",
    "parse",
    "tokenize",
]
