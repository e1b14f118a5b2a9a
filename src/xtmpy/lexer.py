from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from . import atoms
from .errors import ErrorKind, InternalInvariantViolation, ParseError
from .provider import Claim, TokenProvider
from .spans import Position, Span
from .tokens import DATUM_CLAIMS, Token, TokenKind


logger = logging.getLogger(__name__)

_PUNCT = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "'": TokenKind.QUOTE,
    "`": TokenKind.QUASIQUOTE,
}


@dataclass(slots=True)
class _Cursor:
    file: str
    src: str
    i: int = 0
    line: int = 1
    col: int = 1
    byte: int = 0

    def eof(self) -> bool:
        return self.i >= len(self.src)

    def peek(self, n: int = 0) -> str:
        j = self.i + n
        if j >= len(self.src):
            return ""
        return self.src[j]

    def advance(self, n: int = 1) -> None:
        for _ in range(n):
            if self.eof():
                return
            ch = self.src[self.i]
            self.i += 1
            self.byte += 1 if ch < "\x80" else len(ch.encode("utf-8", "surrogatepass"))
            if ch == "\n":
                self.line += 1
                self.col = 1
            else:
                self.col += 1

    def advance_while(self, pred: Callable[[str], bool]) -> None:
        while not self.eof() and pred(self.peek()):
            self.advance()

    def pos(self) -> Position:
        return Position(offset=self.i, line=self.line, column=self.col, byte=self.byte)


def tokenize(src: str, *, file: str = "<memory>", provider: TokenProvider | None = None) -> list[Token]:
    """Split ``src`` into tokens, trivia included, ending with an EOF token."""
    cur = _Cursor(file=file, src=src)
    tokens: list[Token] = []

    def make_span(start: Position, end: Position) -> Span:
        return Span(file=file, start=start, end=end)

    def emit(kind: TokenKind, start: Position) -> None:
        end = cur.pos()
        tokens.append(Token(kind, src[start.offset : end.offset], make_span(start, end)))

    def error_at(start: Position, kind: ErrorKind, msg: str, hint: str | None = None) -> ParseError:
        end = cur.pos()
        if end.offset < start.offset:
            end = start
        return ParseError(span=make_span(start, end), kind=kind, message=msg, hint=hint)

    def accept_claim(claim: Claim, start: Position) -> None:
        if not start.offset < claim.end <= len(src):
            raise InternalInvariantViolation(
                span=make_span(start, start),
                message=f"token provider claimed an invalid end offset {claim.end} for {claim.kind.value}",
            )
        if any(ch in atoms.ATOM_BREAKS for ch in src[start.offset : claim.end]):
            raise InternalInvariantViolation(
                span=make_span(start, start),
                message=f"token provider claim for {claim.kind.value} crosses a delimiter",
            )
        cur.advance(claim.end - cur.i)
        logger.debug("provider claimed %s %r", claim.kind.value, src[start.offset : claim.end])
        emit(claim.kind, start)

    while not cur.eof():
        ch = cur.peek()
        start = cur.pos()

        # whitespace
        if ch in atoms.WHITESPACE:
            cur.advance_while(lambda c: c in atoms.WHITESPACE)
            emit(TokenKind.WHITESPACE, start)
            continue

        # line comments: ; and #!
        if ch == ";" or (ch == "#" and cur.peek(1) == "!"):
            cur.advance_while(lambda c: c != "\n")
            emit(TokenKind.COMMENT, start)
            continue

        # block comment #| ... |#, nestable
        if ch == "#" and cur.peek(1) == "|":
            depth = 0
            while True:
                if cur.eof():
                    raise error_at(
                        start,
                        ErrorKind.UNTERMINATED_BLOCK_COMMENT,
                        "unterminated block comment",
                        hint=f"add {depth} closing |#",
                    )
                if cur.peek() == "#" and cur.peek(1) == "|":
                    depth += 1
                    cur.advance(2)
                elif cur.peek() == "|" and cur.peek(1) == "#":
                    depth -= 1
                    cur.advance(2)
                    if depth == 0:
                        break
                else:
                    cur.advance()
            emit(TokenKind.BLOCK_COMMENT, start)
            continue

        if ch == "|" and cur.peek(1) == "#":
            cur.advance(2)
            raise error_at(
                start,
                ErrorKind.UNEXPECTED_TOKEN,
                "unexpected '|#' outside of a block comment",
                hint="remove it or open the comment with #|",
            )

        # strings
        if ch == '"':
            cur.advance()
            while True:
                c = cur.peek()
                if c == "":
                    raise error_at(start, ErrorKind.UNTERMINATED_STRING, "unterminated string literal", hint="close the quote")
                if c == '"':
                    cur.advance()
                    break
                if c == "\\":
                    n = atoms.escape_length(src, cur.i)
                    if n == 0:
                        if cur.peek(1) == "":
                            cur.advance()
                            raise error_at(start, ErrorKind.UNTERMINATED_STRING, "unterminated string literal", hint="close the quote")
                        esc_start = cur.pos()
                        cur.advance(2)
                        raise error_at(
                            esc_start,
                            ErrorKind.INVALID_ESCAPE_SEQUENCE,
                            f"invalid escape sequence {src[esc_start.offset : cur.i]!r}",
                            hint='valid escapes are \\" \\\\ \\n \\t \\r and \\xHH',
                        )
                    cur.advance(n)
                    continue
                cur.advance()
            emit(TokenKind.STRING, start)
            continue

        # punctuation
        if ch == ",":
            if cur.peek(1) == "@":
                cur.advance(2)
                emit(TokenKind.UNQUOTE_SPLICING, start)
            else:
                cur.advance()
                emit(TokenKind.UNQUOTE, start)
            continue
        k = _PUNCT.get(ch)
        if k is not None:
            cur.advance()
            emit(k, start)
            continue

        if ch == "#":
            nxt = cur.peek(1)
            if nxt == "(":
                cur.advance(2)
                emit(TokenKind.HASH_PAREN, start)
                continue

            if nxt == "\\":
                cur.advance(2)
                first = cur.peek()
                if first == "" or first.isspace():
                    raise error_at(
                        start,
                        ErrorKind.INVALID_CHARACTER_LITERAL,
                        "character literal is missing its character",
                        hint="use #\\space, #\\newline, #\\return or #\\tab for whitespace",
                    )
                cur.advance()
                if not atoms.is_delimiter(first):
                    cur.advance_while(lambda c: not atoms.is_delimiter(c))
                text = src[start.offset : cur.i]
                if atoms.character_value(text) is None:
                    raise error_at(
                        start,
                        ErrorKind.INVALID_CHARACTER_LITERAL,
                        f"invalid character literal {text!r}",
                        hint="expected #\\<char>, #\\space, #\\newline, #\\return, #\\tab or #\\x<hex>",
                    )
                emit(TokenKind.CHARACTER, start)
                continue

            cur.advance()
            cur.advance_while(lambda c: not atoms.is_delimiter(c))
            text = src[start.offset : cur.i]
            if atoms.is_boolean(text):
                emit(TokenKind.BOOLEAN, start)
                continue
            if atoms.parse_number(text) is not None:
                emit(TokenKind.NUMBER, start)
                continue
            if atoms.is_radix_with_suffix(text):
                raise error_at(
                    start,
                    ErrorKind.UNEXPECTED_TOKEN,
                    f"unexpected {text!r}",
                    hint="radix-prefixed numbers do not take a type suffix",
                )
            raise error_at(
                start,
                ErrorKind.UNEXPECTED_TOKEN,
                f"unexpected {text!r}",
                hint="'#' must start #t, #f, #\\char, #(, #| or a #x/#b/#o/#d number",
            )

        if provider is not None:
            claim = provider.try_claim(src, cur.i)
            if claim is not None and claim.kind in DATUM_CLAIMS:
                accept_claim(claim, start)
                if claim.kind is TokenKind.TYPED_NAME:
                    ann_start = cur.pos()
                    ann = provider.try_claim(src, cur.i)
                    if ann is None or ann.kind is not TokenKind.TYPE_ANNOTATION:
                        raise InternalInvariantViolation(
                            span=make_span(start, ann_start),
                            message="token provider claimed a typed name without a type annotation",
                        )
                    accept_claim(ann, ann_start)
                continue

        # raw atom
        cur.advance_while(lambda c: not atoms.is_delimiter(c))
        text = src[start.offset : cur.i]
        emit(atoms.classify_atom(text), start)

    eof_pos = cur.pos()
    tokens.append(Token(TokenKind.EOF, "", make_span(eof_pos, eof_pos)))
    logger.debug("tokenized %s into %d tokens", file, len(tokens))
    return tokens
