from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .spans import Span


class ErrorKind(str, Enum):
    UNTERMINATED_STRING = "UnterminatedString"
    UNTERMINATED_BLOCK_COMMENT = "UnterminatedBlockComment"
    UNTERMINATED_LIST = "UnterminatedList"
    MALFORMED_DOTTED_PAIR = "MalformedDottedPair"
    INVALID_CHARACTER_LITERAL = "InvalidCharacterLiteral"
    INVALID_ESCAPE_SEQUENCE = "InvalidEscapeSequence"
    UNEXPECTED_TOKEN = "UnexpectedToken"
    INTERNAL_INVARIANT_VIOLATION = "InternalInvariantViolation"


@dataclass(slots=True)
class ParseError(Exception):
    """A syntax error in the source being read."""

    span: Span
    kind: ErrorKind
    message: str
    hint: str | None = None

    def __str__(self) -> str:
        base = f"{self.span.format()}: {self.message}"
        if self.hint:
            return f"{base}\nhint: {self.hint}"
        return base


@dataclass(slots=True)
class InternalInvariantViolation(RuntimeError):
    """The reader produced something inconsistent.

    Raised for reader (or token provider) bugs, never for bad user input, so
    it is intentionally not a ParseError.
    """

    span: Span
    message: str

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.INTERNAL_INVARIANT_VIOLATION

    def __str__(self) -> str:
        return f"{self.span.format()}: internal reader error: {self.message} (please report this)"
