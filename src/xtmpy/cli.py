from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import fields, is_dataclass
from pathlib import Path

from .api import parse_files
from .errors import InternalInvariantViolation, ParseError
from .format import format_program
from .lexer import tokenize
from .spans import Span
from .xtlang import XTLANG


logger = logging.getLogger(__name__)


def _to_jsonable(obj):
    if isinstance(obj, Span):
        return [obj.start.byte, obj.end.byte]
    if is_dataclass(obj):
        out = {"type": type(obj).__name__}
        for f in fields(obj):
            out[f.name] = _to_jsonable(getattr(obj, f.name))
        return out
    if isinstance(obj, (tuple, list)):
        return [_to_jsonable(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _to_jsonable(v) for k, v in obj.items()}
    return obj


def _print_tokens(path: str, provider) -> None:
    src = Path(path).read_text(encoding="utf-8")
    for tok in tokenize(src, file=path, provider=provider):
        print(f"{tok.span.start.line}:{tok.span.start.column}\t{tok.kind.value}\t{tok.lexeme!r}")


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="xtmpy", description="Read Extempore (.xtm) source files")
    ap.add_argument("files", nargs="+", help="Source files to read")
    out = ap.add_mutually_exclusive_group()
    out.add_argument("--json", action="store_true", help="Print the syntax tree as JSON")
    out.add_argument("--tokens", action="store_true", help="Print the token stream")
    ap.add_argument(
        "--no-xtlang",
        action="store_true",
        help="Read plain Scheme: do not recognise xtlang types and typed identifiers",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    provider = None if args.no_xtlang else XTLANG

    try:
        if args.tokens:
            for path in args.files:
                _print_tokens(path, provider)
            return 0

        res = parse_files(args.files, provider=provider)
    except ParseError as e:
        print(str(e), file=sys.stderr)
        return 1
    except InternalInvariantViolation as e:
        logger.error("%s", e)
        return 2

    if args.json:
        payload = {path: _to_jsonable(prog) for path, prog in res.files.items()}
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        for path, prog in res.files.items():
            if len(res.files) > 1:
                print(f";; {path}")
            sys.stdout.write(format_program(prog))
    return 0
