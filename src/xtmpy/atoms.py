"""Atom classification: booleans, characters, strings, numbers and symbols.

Everything here works on raw text that the scanner has already cut out of the
buffer; nothing in this module knows about positions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from fractions import Fraction

from .tokens import TokenKind


WHITESPACE = " \t\r\n\f\v"
DELIMITERS = frozenset(WHITESPACE + "();\"'`,#")

# Delimiters no token may span. Bracketed xtlang types contain commas (and
# may contain "#"), so those two are left out.
ATOM_BREAKS = frozenset(WHITESPACE + "();\"'`")


def is_delimiter(ch: str) -> bool:
    """True for delimiter characters and for end of input ("")."""
    return ch == "" or ch in DELIMITERS


_BOOLEAN_RE = re.compile(r"#[tTfF]")

_SUFFIX = r"(?::(?P<suffix>[A-Za-z][A-Za-z0-9]*))?"
_EXP = r"(?:[eE][+-]?[0-9]+)"

_RADIX_RES: tuple[tuple[int, re.Pattern[str]], ...] = (
    (16, re.compile(r"#[xX](?P<num>[0-9a-fA-F]+)")),
    (2, re.compile(r"#[bB](?P<num>[01]+)")),
    (8, re.compile(r"#[oO](?P<num>[0-7]+)")),
    (10, re.compile(r"#[dD](?P<num>[0-9]+)")),
)
_RATIONAL_RE = re.compile(r"(?P<num>[+-]?[0-9]+/[0-9]+)" + _SUFFIX)
_FLOAT_RE = re.compile(
    r"(?P<num>[+-]?(?:"
    rf"[0-9]+\.[0-9]*{_EXP}?"
    rf"|\.[0-9]+{_EXP}?"
    rf"|[0-9]+{_EXP}"
    r"))" + _SUFFIX
)
_INTEGER_RE = re.compile(r"(?P<num>[+-]?[0-9]+)" + _SUFFIX)

# Used only to produce a better message for "#x1A:i32" style atoms.
_RADIX_WITH_SUFFIX_RE = re.compile(r"#[xXbBoOdD][0-9a-fA-F]+:.*")

_CHAR_NAMES = {
    "space": " ",
    "newline": "\n",
    "return": "\r",
    "tab": "\t",
}
_CHAR_HEX_RE = re.compile(r"x(?P<hex>[0-9a-fA-F]+)")

_ESCAPE_RE = re.compile(r"\\(?:(?P<simple>[\"\\ntr])|[xX](?P<hex>[0-9a-fA-F]{2}))")
_SIMPLE_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t", "r": "\r"}


@dataclass(frozen=True, slots=True)
class NumberParts:
    kind: str  # "integer" | "rational" | "float"
    radix: int
    numeral: str  # digits (with sign, point, exponent) but without prefix or suffix
    suffix: str | None = None


def parse_number(text: str) -> NumberParts | None:
    """Match ``text`` against the numeric grammar; first full match wins."""
    if text.startswith("#"):
        for radix, pattern in _RADIX_RES:
            m = pattern.fullmatch(text)
            if m:
                return NumberParts(kind="integer", radix=radix, numeral=m.group("num"))
        return None

    for kind, pattern in (("rational", _RATIONAL_RE), ("float", _FLOAT_RE), ("integer", _INTEGER_RE)):
        m = pattern.fullmatch(text)
        if m:
            return NumberParts(kind=kind, radix=10, numeral=m.group("num"), suffix=m.group("suffix"))
    return None


def number_value(parts: NumberParts) -> int | float | Fraction:
    if parts.kind == "integer":
        return int(parts.numeral, parts.radix)
    if parts.kind == "float":
        return float(parts.numeral)
    num, den = parts.numeral.split("/")
    if int(den) == 0:
        raise ZeroDivisionError(f"rational literal with zero denominator: {parts.numeral}")
    return Fraction(int(num), int(den))


def is_boolean(text: str) -> bool:
    return _BOOLEAN_RE.fullmatch(text) is not None


def is_radix_with_suffix(text: str) -> bool:
    return _RADIX_WITH_SUFFIX_RE.fullmatch(text) is not None


def classify_atom(text: str) -> TokenKind:
    """Classify a raw atom that no token provider claimed.

    ``text`` is a maximal run of non-delimiter characters, so it never starts
    with "#" (those are dispatched by the scanner).
    """
    if text == ".":
        return TokenKind.DOT
    if parse_number(text) is not None:
        return TokenKind.NUMBER
    return TokenKind.SYMBOL


def character_value(text: str) -> str | None:
    """Decode a ``#\\...`` literal, or return None if it is not one."""
    if not text.startswith("#\\"):
        return None
    body = text[2:]
    if body in _CHAR_NAMES:
        return _CHAR_NAMES[body]
    if len(body) == 1:
        return None if body.isspace() else body
    m = _CHAR_HEX_RE.fullmatch(body)
    if m:
        code = int(m.group("hex"), 16)
        if code <= 0x10FFFF:
            return chr(code)
    return None


def decode_string(body: str) -> str:
    """Decode the escapes of a string body (the text between the quotes)."""

    def repl(m: re.Match[str]) -> str:
        simple = m.group("simple")
        if simple is not None:
            return _SIMPLE_ESCAPES[simple]
        return chr(int(m.group("hex"), 16))

    return _ESCAPE_RE.sub(repl, body)


def escape_length(src: str, i: int) -> int:
    """Length of the escape sequence starting at ``src[i] == "\\"``, or 0."""
    m = _ESCAPE_RE.match(src, i)
    if m is None:
        return 0
    return m.end() - i
