"""Default token provider for xtlang types and typed identifiers.

Recognises, at the start of an atom:

- bracketed types: ``[i64,i32]*`` (closure), ``<i64,double>`` (tuple),
  ``|4,i64|`` (array) and ``/4,float/`` (vector),
- type annotations: ``:i64``, ``:double*``, ``:<i64,i8*>``,
- typed names: the ``x`` of ``x:i64`` (the annotation follows as its own claim),
- generic identifiers: ``Pair{i64,double}*``.

Everything else is declined and left to the atom classifier.
"""

from __future__ import annotations

from dataclasses import dataclass

from .atoms import ATOM_BREAKS, is_delimiter
from .provider import Claim
from .tokens import TokenKind


_CLOSING = {"[": "]", "<": ">", "|": "|", "/": "/"}


def _is_symbol_char(ch: str) -> bool:
    return not is_delimiter(ch)


def _is_digit(ch: str) -> bool:
    return ch != "" and ch in "0123456789"


@dataclass(slots=True)
class _Scan:
    src: str
    i: int

    def peek(self) -> str:
        if self.i >= len(self.src):
            return ""
        return self.src[self.i]

    def advance(self) -> None:
        self.i += 1

    def match(self, keyword: str) -> bool:
        for ch in keyword:
            if self.peek() != ch:
                return False
            self.advance()
        return True

    def skip_stars(self) -> None:
        while self.peek() == "*":
            self.advance()

    def broken(self) -> bool:
        # End of input, or a delimiter no type may contain.
        ch = self.peek()
        return ch == "" or ch in ATOM_BREAKS


def _scan_simple_type(s: _Scan) -> bool:
    c = s.peek()
    matched = False

    if c == "i":
        s.advance()
        c = s.peek()
        if c == "1":
            s.advance()
            c = s.peek()
            if c == "6":
                s.advance()
                matched = True
            elif c == "*" or is_delimiter(c):
                matched = True
        elif c == "8":
            s.advance()
            matched = True
        elif c == "3":
            s.advance()
            if s.peek() == "2":
                s.advance()
                matched = True
        elif c == "6":
            s.advance()
            if s.peek() == "4":
                s.advance()
                matched = True
    elif c == "f":
        s.advance()
        c = s.peek()
        if c == "l":
            matched = s.match("loat")
        elif c == "3":
            s.advance()
            if s.peek() == "2":
                s.advance()
                matched = True
        elif c == "6":
            s.advance()
            if s.peek() == "4":
                s.advance()
                matched = True
        else:
            matched = True
    elif c == "d":
        s.advance()
        if s.peek() == "o":
            matched = s.match("ouble")
        else:
            matched = True
    elif c == "v":
        matched = s.match("void")

    if not matched:
        return False
    s.skip_stars()
    return is_delimiter(s.peek())


def _scan_bracket_type(s: _Scan) -> bool:
    open_ = s.peek()
    close = _CLOSING.get(open_)
    if close is None:
        return False
    s.advance()

    if open_ in "|/":
        if not _is_digit(s.peek()):
            return False
    elif s.broken():
        return False

    found_comma = False
    found_nested = False
    depth = 1

    while depth > 0:
        if s.broken():
            return False
        c = s.peek()
        if c == open_ and open_ != close:
            depth += 1
            s.advance()
        elif c == close:
            depth -= 1
            s.advance()
        elif c == "," and depth == 1:
            found_comma = True
            s.advance()
        elif c in "[<":
            if depth == 1:
                found_nested = True
            inner_close = _CLOSING[c]
            inner_depth = 1
            s.advance()
            while inner_depth > 0:
                if s.broken():
                    return False
                ic = s.peek()
                if ic == c:
                    inner_depth += 1
                elif ic == inner_close:
                    inner_depth -= 1
                s.advance()
        elif c in "|/":
            s.advance()
            if _is_digit(s.peek()):
                if depth == 1:
                    found_nested = True
                inner_close = _CLOSING[c]
                while s.peek() != inner_close:
                    if s.broken():
                        return False
                    s.advance()
                s.advance()
        else:
            s.advance()

    if not found_comma and not found_nested:
        return False
    s.skip_stars()
    return is_delimiter(s.peek())


def _scan_type_after_colon(s: _Scan) -> bool:
    if s.peek() in ("[", "<", "|", "/"):
        return _scan_bracket_type(s)
    return _scan_simple_type(s)


def _scan_generic_args(s: _Scan) -> bool:
    # s is just past the opening "{".
    depth = 1
    found_content = False
    while depth > 0:
        if s.broken():
            return False
        c = s.peek()
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
        else:
            found_content = True
        s.advance()
    if not found_content:
        return False
    s.skip_stars()
    return is_delimiter(s.peek())


class XtlangTypeProvider:
    """Token provider implementing xtlang's type and identifier syntax."""

    def try_claim(self, src: str, offset: int) -> Claim | None:
        s = _Scan(src, offset)
        first = s.peek()

        if first in ("[", "<", "|", "/"):
            if _scan_bracket_type(s):
                return Claim(TokenKind.XTLANG_TYPE, s.i)
            return None

        if first == ":":
            s.advance()
            if _scan_type_after_colon(s):
                return Claim(TokenKind.TYPE_ANNOTATION, s.i)
            return None

        if not _is_symbol_char(first) or _is_digit(first) or first in ("{", ".", "+", "-"):
            return None

        while _is_symbol_char(s.peek()) and s.peek() not in (":", "{"):
            s.advance()

        if s.peek() == ":":
            name_end = s.i
            s.advance()
            if _scan_type_after_colon(s):
                return Claim(TokenKind.TYPED_NAME, name_end)
            return None

        if s.peek() == "{":
            s.advance()
            if _scan_generic_args(s):
                return Claim(TokenKind.GENERIC_IDENTIFIER, s.i)
            return None

        return None


XTLANG = XtlangTypeProvider()
