from __future__ import annotations

from .api import ParseResult, parse_file, parse_files, parse_source
from .errors import ErrorKind, InternalInvariantViolation, ParseError
from .format import format_node, format_program
from .lexer import tokenize
from .provider import Claim, TokenProvider
from .xtlang import XTLANG, XtlangTypeProvider

__all__ = [
    "XTLANG",
    "Claim",
    "ErrorKind",
    "InternalInvariantViolation",
    "ParseError",
    "ParseResult",
    "TokenProvider",
    "XtlangTypeProvider",
    "format_node",
    "format_program",
    "parse_file",
    "parse_files",
    "parse_source",
    "tokenize",
]
