from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    """A concrete source position.

    ``offset`` indexes the decoded ``str`` buffer and ``byte`` is the same
    position in its UTF-8 encoding. Both are 0-based; line/column are 1-based
    for user-facing messages.
    """

    offset: int
    line: int
    column: int
    byte: int


START = Position(offset=0, line=1, column=1, byte=0)


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open span [start, end) in a single file."""

    file: str
    start: Position
    end: Position

    def format(self) -> str:
        return f"{self.file}:{self.start.line}:{self.start.column}"

    def text(self, src: str) -> str:
        return src[self.start.offset : self.end.offset]

    def contains(self, other: Span) -> bool:
        return self.start.offset <= other.start.offset and other.end.offset <= self.end.offset
