from __future__ import annotations

import logging
from dataclasses import dataclass, field

from . import ast as A
from . import atoms
from .errors import ErrorKind, InternalInvariantViolation, ParseError
from .spans import Span
from .tokens import TRIVIA, Token, TokenKind


logger = logging.getLogger(__name__)

_QUOTE_FORMS: dict[TokenKind, type[A.QuoteForm]] = {
    TokenKind.QUOTE: A.Quote,
    TokenKind.QUASIQUOTE: A.Quasiquote,
    TokenKind.UNQUOTE: A.Unquote,
    TokenKind.UNQUOTE_SPLICING: A.UnquoteSplicing,
}
_OPENERS = frozenset({TokenKind.LPAREN, TokenKind.HASH_PAREN, *_QUOTE_FORMS})


def _span_of(v: object) -> Span:
    # Token and AST nodes both carry .span.
    sp = getattr(v, "span", None)
    if sp is None:
        raise TypeError(f"value has no span: {type(v)!r}")
    return sp


def join_span(*vals: object) -> Span:
    """Join spans of tokens/nodes into a single span (from first to last)."""
    real = [v for v in vals if v is not None]
    if not real:
        raise ValueError("join_span() requires at least one value")
    first = _span_of(real[0])
    last = _span_of(real[-1])
    return Span(file=first.file, start=first.start, end=last.end)


def make_atom(tok: Token) -> A.Node:
    """Build the leaf node for a classified atom token."""
    kind, text, span = tok.kind, tok.lexeme, tok.span
    if kind is TokenKind.SYMBOL or kind is TokenKind.DOT:
        return A.Symbol(span=span, text=text)
    if kind is TokenKind.NUMBER:
        parts = atoms.parse_number(text)
        if parts is None:
            raise InternalInvariantViolation(span=span, message=f"number token {text!r} is not a number")
        return A.Number(
            span=span,
            text=text,
            kind=parts.kind,
            radix=parts.radix,
            numeral=parts.numeral,
            suffix=parts.suffix,
        )
    if kind is TokenKind.STRING:
        return A.String(span=span, text=text, value=atoms.decode_string(text[1:-1]))
    if kind is TokenKind.BOOLEAN:
        return A.Boolean(span=span, text=text, value=text[1] in "tT")
    if kind is TokenKind.CHARACTER:
        value = atoms.character_value(text)
        if value is None:
            raise InternalInvariantViolation(span=span, message=f"character token {text!r} does not decode")
        return A.Character(span=span, text=text, value=value)
    if kind is TokenKind.XTLANG_TYPE:
        return A.XtlangType(span=span, text=text)
    if kind is TokenKind.GENERIC_IDENTIFIER:
        return A.GenericIdentifier(span=span, text=text)
    raise InternalInvariantViolation(span=span, message=f"{kind.value} token where a datum was expected")


@dataclass(slots=True)
class _Frame:
    """An open list, vector or quote form waiting for its data."""

    open: Token
    items: list[A.Node] = field(default_factory=list)
    dot: Token | None = None
    tail: A.Node | None = None

    @property
    def is_quote(self) -> bool:
        return self.open.kind in _QUOTE_FORMS


@dataclass(slots=True)
class Parser:
    """Assembles compound data from a token stream.

    Open lists, vectors and quote marks live on an explicit frame stack, so
    nesting depth is not limited by Python's recursion limit.
    """

    tokens: list[Token]
    i: int = 0
    stack: list[_Frame] = field(default_factory=list)
    items: list[A.Node] = field(default_factory=list)
    trivia: list[Token] = field(default_factory=list)

    def parse(self) -> tuple[list[A.Node], list[Token], Token]:
        """Return (top-level data, all trivia tokens, the EOF token)."""
        toks = self.tokens
        while True:
            tok = toks[self.i]
            kind = tok.kind

            if kind in TRIVIA:
                self.trivia.append(tok)
                self.i += 1
                continue

            if kind is TokenKind.EOF:
                if self.stack:
                    raise self._unterminated(self.stack[-1], tok)
                logger.debug("parsed %d top-level data", len(self.items))
                return self.items, self.trivia, tok

            if kind in _OPENERS:
                self.stack.append(_Frame(open=tok))
                self.i += 1
                continue

            if kind is TokenKind.RPAREN:
                self._close(tok)
                self.i += 1
                continue

            if kind is TokenKind.DOT and self.stack and self.stack[-1].open.kind is TokenKind.LPAREN:
                self._dot(tok)
                self.i += 1
                continue

            if kind is TokenKind.TYPED_NAME:
                self._deliver(self._typed_identifier(tok))
                self.i += 2
                continue

            self._deliver(make_atom(tok))
            self.i += 1

    def _typed_identifier(self, tok: Token) -> A.TypedIdentifier:
        ann = self.tokens[self.i + 1]
        if ann.kind is not TokenKind.TYPE_ANNOTATION or ann.span.start.offset != tok.span.end.offset:
            raise InternalInvariantViolation(span=tok.span, message="typed name is not followed by its type annotation")
        return A.TypedIdentifier(
            span=join_span(tok, ann),
            name=A.Symbol(span=tok.span, text=tok.lexeme),
            annotation=A.TypeAnnotation(span=ann.span, text=ann.lexeme),
        )

    def _dot(self, tok: Token) -> None:
        frame = self.stack[-1]
        if frame.dot is not None:
            raise ParseError(
                span=tok.span,
                kind=ErrorKind.MALFORMED_DOTTED_PAIR,
                message="more than one '.' in a list",
            )
        nxt = self.tokens[self.i + 1]
        if nxt.kind not in TRIVIA:
            if nxt.kind in (TokenKind.RPAREN, TokenKind.EOF):
                message = "expected a datum after '.'"
            else:
                message = "'.' must be followed by whitespace"
            raise ParseError(
                span=tok.span,
                kind=ErrorKind.MALFORMED_DOTTED_PAIR,
                message=message,
                hint="write dotted pairs as (a . b)",
            )
        frame.dot = tok

    def _close(self, tok: Token) -> None:
        if not self.stack:
            raise ParseError(
                span=tok.span,
                kind=ErrorKind.UNEXPECTED_TOKEN,
                message="unexpected ')'",
                hint="remove the unmatched ')'",
            )
        frame = self.stack[-1]
        if frame.is_quote:
            raise ParseError(
                span=tok.span,
                kind=ErrorKind.UNEXPECTED_TOKEN,
                message=f"expected a datum after {frame.open.lexeme!r}, found ')'",
            )
        self.stack.pop()

        span = join_span(frame.open, tok)
        if frame.open.kind is TokenKind.HASH_PAREN:
            self._deliver(A.Vector(span=span, items=tuple(frame.items)))
            return
        if frame.dot is not None and frame.tail is None:
            raise ParseError(
                span=frame.dot.span,
                kind=ErrorKind.MALFORMED_DOTTED_PAIR,
                message="expected a datum after '.'",
                hint="write dotted pairs as (a . b)",
            )
        self._deliver(A.List(span=span, items=tuple(frame.items), tail=frame.tail))

    def _deliver(self, node: A.Node) -> None:
        # Close any quote marks waiting for this datum, innermost first.
        while self.stack and self.stack[-1].is_quote:
            frame = self.stack.pop()
            node = _QUOTE_FORMS[frame.open.kind](span=join_span(frame.open, node), datum=node)

        if not self.stack:
            self.items.append(node)
            return

        frame = self.stack[-1]
        if frame.dot is None:
            frame.items.append(node)
        elif frame.tail is None:
            frame.tail = node
        else:
            raise ParseError(
                span=node.span,
                kind=ErrorKind.MALFORMED_DOTTED_PAIR,
                message="only one datum may follow '.'",
                hint="write dotted pairs as (a . b)",
            )

    def _unterminated(self, frame: _Frame, eof: Token) -> ParseError:
        if frame.is_quote:
            return ParseError(
                span=eof.span,
                kind=ErrorKind.UNEXPECTED_TOKEN,
                message=f"expected a datum after {frame.open.lexeme!r}, found end of input",
            )
        what = "vector" if frame.open.kind is TokenKind.HASH_PAREN else "list"
        return ParseError(
            span=join_span(frame.open, eof),
            kind=ErrorKind.UNTERMINATED_LIST,
            message=f"unterminated {what}",
            hint="add the missing ')'",
        )


def parse_tokens(tokens: list[Token]) -> tuple[list[A.Node], list[Token], Token]:
    return Parser(tokens=tokens).parse()
