"""Program assembly, span invariants and traversal."""

from __future__ import annotations

from collections.abc import Iterator

from . import ast as A
from .errors import InternalInvariantViolation
from .spans import START, Span
from .tokens import Token


def children(node: A.Node) -> tuple[A.Node, ...]:
    """Direct children of ``node`` in source order."""
    if isinstance(node, A.List):
        if node.tail is not None:
            return node.items + (node.tail,)
        return node.items
    if isinstance(node, (A.Vector, A.Program)):
        return node.items
    if isinstance(node, A.QuoteForm):
        return (node.datum,)
    if isinstance(node, A.TypedIdentifier):
        return (node.name, node.annotation)
    return ()


def walk(node: A.Node) -> Iterator[A.Node]:
    """Yield ``node`` and all of its descendants, pre-order."""
    stack = [node]
    while stack:
        cur = stack.pop()
        yield cur
        stack.extend(reversed(children(cur)))


def build_program(
    src: str,
    items: list[A.Node],
    trivia: list[Token],
    eof: Token,
    *,
    keep_trivia: bool = False,
) -> A.Program:
    program = A.Program(
        span=Span(file=eof.span.file, start=START, end=eof.span.end),
        items=tuple(items),
        trivia=tuple(trivia) if keep_trivia else (),
    )
    check_coverage(src, program, trivia)
    check_invariants(src, program)
    return program


def check_coverage(src: str, program: A.Program, trivia: list[Token]) -> None:
    """Top-level data plus top-level trivia must tile the buffer exactly."""
    pieces: list[tuple[Span, str]] = [(n.span, type(n).__name__) for n in program.items]
    pieces.extend((t.span, t.kind.value) for t in trivia)
    pieces.sort(key=lambda p: p[0].start.offset)

    pos = 0
    for span, what in pieces:
        if span.start.offset < pos:
            # trivia inside a top-level datum
            if span.end.offset > pos:
                raise InternalInvariantViolation(span=span, message=f"{what} overlaps the previous datum")
            continue
        if span.start.offset != pos:
            raise InternalInvariantViolation(span=span, message=f"gap before {what} at offset {pos}")
        pos = span.end.offset
    if pos != len(src):
        raise InternalInvariantViolation(span=program.span, message=f"input not consumed after offset {pos}")


def _check_delimiters(src: str, node: A.Node) -> str | None:
    start, end = node.span.start.offset, node.span.end.offset
    if isinstance(node, A.Atom):
        text = node.span.text(src)
        if text != node.text:
            return f"atom text {node.text!r} does not match source {text!r}"
    elif isinstance(node, A.List):
        if not (src.startswith("(", start) and src.endswith(")", start, end)):
            return "list is not delimited by parentheses"
    elif isinstance(node, A.Vector):
        if not (src.startswith("#(", start) and src.endswith(")", start, end)):
            return "vector is not delimited by #( and )"
    elif isinstance(node, A.QuoteForm):
        if not src.startswith(node.prefix, start, end):
            return f"{type(node).__name__} does not start with {node.prefix!r}"
    elif isinstance(node, A.TypedIdentifier):
        if node.name.span.end.offset != node.annotation.span.start.offset:
            return "typed identifier parts are not adjacent"
    return None


def check_invariants(src: str, program: A.Program) -> None:
    """Every node contains its children, in order and without overlap."""
    for node in walk(program):
        span = node.span
        if span.start.offset > span.end.offset:
            raise InternalInvariantViolation(span=span, message="span ends before it starts")
        if not isinstance(node, A.Program):
            problem = _check_delimiters(src, node)
            if problem is not None:
                raise InternalInvariantViolation(span=span, message=problem)

        prev_end = span.start.offset
        for child in children(node):
            if not span.contains(child.span):
                raise InternalInvariantViolation(
                    span=child.span,
                    message=f"{type(child).__name__} escapes its parent {type(node).__name__}",
                )
            if child.span.start.offset < prev_end:
                raise InternalInvariantViolation(span=child.span, message=f"{type(child).__name__} overlaps its sibling")
            prev_end = child.span.end.offset
