from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .ast import Program
from .lexer import tokenize
from .parser import parse_tokens
from .provider import TokenProvider
from .tree import build_program
from .xtlang import XTLANG


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ParseResult:
    files: dict[str, Program]  # absolute path -> program


def parse_source(
    src: str,
    *,
    file: str = "<memory>",
    provider: TokenProvider | None = XTLANG,
    trivia: bool = False,
) -> Program:
    """Read a whole document.

    ``provider`` decides xtlang types and typed identifiers; pass None to read
    plain Scheme. With ``trivia=True`` whitespace and comment tokens are kept
    on ``Program.trivia``.
    """
    toks = tokenize(src, file=file, provider=provider)
    items, trivia_toks, eof = parse_tokens(toks)
    return build_program(src, items, trivia_toks, eof, keep_trivia=trivia)


def parse_file(
    path: str | Path,
    *,
    provider: TokenProvider | None = XTLANG,
    trivia: bool = False,
) -> Program:
    p = Path(path).expanduser().resolve()
    src = p.read_text(encoding="utf-8")
    logger.debug("reading %s (%d characters)", p, len(src))
    return parse_source(src, file=str(p), provider=provider, trivia=trivia)


def parse_files(
    paths: list[str | Path],
    *,
    provider: TokenProvider | None = XTLANG,
    trivia: bool = False,
) -> ParseResult:
    files: dict[str, Program] = {}
    for path in paths:
        p = Path(path).expanduser().resolve()
        if str(p) in files:
            continue
        files[str(p)] = parse_file(p, provider=provider, trivia=trivia)
    return ParseResult(files=files)
