from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .spans import Span


class TokenKind(str, Enum):
    # Trivia
    WHITESPACE = "whitespace"
    COMMENT = "comment"
    BLOCK_COMMENT = "block_comment"

    # Atoms
    BOOLEAN = "boolean"
    CHARACTER = "character"
    STRING = "string"
    NUMBER = "number"
    SYMBOL = "symbol"

    # Claimed by a token provider
    XTLANG_TYPE = "xtlang_type"
    TYPED_NAME = "typed_name"
    TYPE_ANNOTATION = "type_annotation"
    GENERIC_IDENTIFIER = "generic_identifier"

    # Punctuation
    LPAREN = "("
    RPAREN = ")"
    HASH_PAREN = "#("
    QUOTE = "'"
    QUASIQUOTE = "`"
    UNQUOTE = ","
    UNQUOTE_SPLICING = ",@"
    DOT = "."

    EOF = "EOF"


TRIVIA = frozenset({TokenKind.WHITESPACE, TokenKind.COMMENT, TokenKind.BLOCK_COMMENT})

# Kinds a provider may claim at a datum position.
DATUM_CLAIMS = frozenset({TokenKind.XTLANG_TYPE, TokenKind.TYPED_NAME, TokenKind.GENERIC_IDENTIFIER})


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    lexeme: str
    span: Span

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.lexeme!r}, {self.span.format()})"
