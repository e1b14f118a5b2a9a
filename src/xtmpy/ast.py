from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import ClassVar

from . import atoms
from .spans import Span
from .tokens import Token


@dataclass(frozen=True, slots=True)
class Node:
    span: Span


@dataclass(frozen=True, slots=True)
class Atom(Node):
    """A leaf node; ``text`` is exactly the source covered by ``span``."""

    text: str


@dataclass(frozen=True, slots=True)
class Boolean(Atom):
    value: bool


@dataclass(frozen=True, slots=True)
class Character(Atom):
    value: str  # the decoded character


@dataclass(frozen=True, slots=True)
class String(Atom):
    value: str  # escapes decoded, quotes removed


@dataclass(frozen=True, slots=True)
class Number(Atom):
    kind: str  # "integer" | "rational" | "float"
    radix: int = 10
    numeral: str = ""  # text without radix prefix or typed suffix
    suffix: str | None = None  # typed suffix without the colon, e.g. "i64"

    @property
    def value(self) -> int | float | Fraction:
        """The numeric value, ignoring any typed suffix.

        Reading never evaluates numbers, so ``1/0`` is a valid ``Number``;
        asking for its value raises ZeroDivisionError.
        """
        return atoms.number_value(atoms.NumberParts(self.kind, self.radix, self.numeral, self.suffix))


@dataclass(frozen=True, slots=True)
class Symbol(Atom):
    @property
    def name(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class XtlangType(Atom):
    """A bare xtlang type such as ``[i64,i64]*`` or ``<i32,double>``."""


@dataclass(frozen=True, slots=True)
class TypeAnnotation(Atom):
    """The ``:i64`` half of a typed identifier. Never a datum on its own."""

    @property
    def type(self) -> str:
        return self.text[1:]


@dataclass(frozen=True, slots=True)
class GenericIdentifier(Atom):
    """A name parameterised by a brace type list, e.g. ``Pair{i64,double}*``."""

    @property
    def name(self) -> str:
        return self.text[: self.text.index("{")]

    @property
    def type_args(self) -> str:
        return self.text[self.text.index("{") + 1 : self.text.rindex("}")]


@dataclass(frozen=True, slots=True)
class TypedIdentifier(Node):
    name: Symbol
    annotation: TypeAnnotation

    @property
    def text(self) -> str:
        return self.name.text + self.annotation.text


@dataclass(frozen=True, slots=True)
class List(Node):
    items: tuple[Node, ...] = ()
    tail: Node | None = None  # set only for dotted pairs: (a b . tail)

    @property
    def dotted(self) -> bool:
        return self.tail is not None


@dataclass(frozen=True, slots=True)
class Vector(Node):
    items: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class QuoteForm(Node):
    prefix: ClassVar[str] = ""

    datum: Node


@dataclass(frozen=True, slots=True)
class Quote(QuoteForm):
    prefix: ClassVar[str] = "'"


@dataclass(frozen=True, slots=True)
class Quasiquote(QuoteForm):
    prefix: ClassVar[str] = "`"


@dataclass(frozen=True, slots=True)
class Unquote(QuoteForm):
    prefix: ClassVar[str] = ","


@dataclass(frozen=True, slots=True)
class UnquoteSplicing(QuoteForm):
    prefix: ClassVar[str] = ",@"


@dataclass(frozen=True, slots=True)
class Program(Node):
    items: tuple[Node, ...] = ()

    # whitespace and comment tokens, kept only when requested
    trivia: tuple[Token, ...] = ()
