from __future__ import annotations

from fractions import Fraction
from pathlib import Path

import pytest

from xtmpy import ErrorKind, ParseError, format_program, parse_file, parse_files, parse_source
from xtmpy import ast as A


def _parse_error(src: str) -> ParseError:
    with pytest.raises(ParseError) as e:
        parse_source(src, file="x.xtm")
    return e.value


def test_quoted_dotted_list() -> None:
    prog = parse_source("'(a b . c)")
    [q] = prog.items
    assert isinstance(q, A.Quote)
    lst = q.datum
    assert isinstance(lst, A.List)
    assert lst.dotted
    assert [s.name for s in lst.items] == ["a", "b"]
    assert isinstance(lst.tail, A.Symbol)
    assert lst.tail.name == "c"
    assert (q.span.start.offset, q.span.end.offset) == (0, 10)
    assert (lst.span.start.offset, lst.span.end.offset) == (1, 10)


def test_dotted_pair_vs_float() -> None:
    [pair] = parse_source("(1 . 2)").items
    assert isinstance(pair, A.List)
    assert [n.value for n in pair.items] == [1]
    assert pair.tail.value == 2

    [lst] = parse_source("(1.2)").items
    assert isinstance(lst, A.List)
    assert not lst.dotted
    [num] = lst.items
    assert isinstance(num, A.Number)
    assert num.kind == "float"
    assert num.value == 1.2


def test_empty_head_dotted_pair_is_allowed() -> None:
    [lst] = parse_source("( . a)").items
    assert lst.items == ()
    assert lst.tail.name == "a"


def test_dot_outside_a_list_is_a_symbol() -> None:
    [vec, q] = parse_source("#(a . b) '.").items
    assert isinstance(vec, A.Vector)
    assert [n.text for n in vec.items] == ["a", ".", "b"]
    assert isinstance(q.datum, A.Symbol)
    assert q.datum.name == "."


def test_string_escapes_are_decoded() -> None:
    [s] = parse_source('"ab\\x41cd"').items
    assert isinstance(s, A.String)
    assert s.value == "abAcd"
    assert s.text == '"ab\\x41cd"'

    [s] = parse_source('"q\\"b\\\\s\\n\\t\\r"').items
    assert s.value == 'q"b\\s\n\t\r'

    [s] = parse_source('"a\\X41b"').items
    assert s.value == "aAb"


def test_nested_block_comment_is_one_comment() -> None:
    prog = parse_source("#| a #| b |# c |#", trivia=True)
    assert prog.items == ()
    assert [t.kind.value for t in prog.trivia] == ["block_comment"]


def test_stray_block_comment_close() -> None:
    e = _parse_error("#| a |# b |#")
    assert e.kind is ErrorKind.UNEXPECTED_TOKEN
    assert str(e).startswith("x.xtm:1:11: ")
    assert e.span.start.offset == 10


def test_radix_number_rejects_type_suffix() -> None:
    e = _parse_error("#x1A:i32")
    assert e.kind is ErrorKind.UNEXPECTED_TOKEN
    assert "type suffix" in str(e)

    [n] = parse_source("#x1A").items
    assert (n.radix, n.numeral, n.value) == (16, "1A", 26)


def test_typed_literals() -> None:
    a, b, c = parse_source("42:i64 1.5:f 3/4:i32").items
    assert (a.kind, a.suffix, a.value) == ("integer", "i64", 42)
    assert (b.kind, b.suffix, b.value) == ("float", "f", 1.5)
    assert (c.kind, c.suffix, c.value) == ("rational", "i32", Fraction(3, 4))


def test_booleans_and_characters() -> None:
    t, f, lst = parse_source("#t #F (#\\( #\\) #\\space #\\x41 #\\λ)").items
    assert t.value is True
    assert f.value is False
    assert [c.value for c in lst.items] == ["(", ")", " ", "A", "λ"]


def test_bind_func_with_typed_identifiers() -> None:
    src = "(bind-func add\n  (lambda (a:i64 b:double*)\n    (+ a b)))\n"
    [form] = parse_source(src).items
    lam = form.items[2]
    args = lam.items[1]
    assert [type(a).__name__ for a in args.items] == ["TypedIdentifier", "TypedIdentifier"]
    assert [(a.name.name, a.annotation.type) for a in args.items] == [("a", "i64"), ("b", "double*")]


@pytest.mark.parametrize(
    ("src", "kind"),
    [
        ('"abc', ErrorKind.UNTERMINATED_STRING),
        ('"ab\\', ErrorKind.UNTERMINATED_STRING),
        ('"a\\qb"', ErrorKind.INVALID_ESCAPE_SEQUENCE),
        ('"\\x4"', ErrorKind.INVALID_ESCAPE_SEQUENCE),
        ('"\\X4"', ErrorKind.INVALID_ESCAPE_SEQUENCE),
        ("#| a #| b |#", ErrorKind.UNTERMINATED_BLOCK_COMMENT),
        ("(a (b)", ErrorKind.UNTERMINATED_LIST),
        ("#(1 2", ErrorKind.UNTERMINATED_LIST),
        ("(a . b c)", ErrorKind.MALFORMED_DOTTED_PAIR),
        ("(a . b . c)", ErrorKind.MALFORMED_DOTTED_PAIR),
        ("(a .)", ErrorKind.MALFORMED_DOTTED_PAIR),
        ("(a . )", ErrorKind.MALFORMED_DOTTED_PAIR),
        ("(a .(b))", ErrorKind.MALFORMED_DOTTED_PAIR),
        ("#\\foo", ErrorKind.INVALID_CHARACTER_LITERAL),
        ("#\\ ", ErrorKind.INVALID_CHARACTER_LITERAL),
        ("#\\", ErrorKind.INVALID_CHARACTER_LITERAL),
        ("#\\x110000", ErrorKind.INVALID_CHARACTER_LITERAL),
        (")", ErrorKind.UNEXPECTED_TOKEN),
        ("'", ErrorKind.UNEXPECTED_TOKEN),
        ("(a ')", ErrorKind.UNEXPECTED_TOKEN),
        ("#true", ErrorKind.UNEXPECTED_TOKEN),
        ("#z", ErrorKind.UNEXPECTED_TOKEN),
    ],
)
def test_error_kinds(src: str, kind: ErrorKind) -> None:
    e = _parse_error(src)
    assert e.kind is kind
    assert str(e).startswith("x.xtm:")


def test_error_carries_hint_line() -> None:
    e = _parse_error("(define x")
    assert e.kind is ErrorKind.UNTERMINATED_LIST
    assert str(e) == "x.xtm:1:1: unterminated list\nhint: add the missing ')'"


def test_error_position_is_line_and_column() -> None:
    e = _parse_error('(a\n  "oops')
    assert (e.span.start.line, e.span.start.column) == (2, 3)


def test_empty_and_comment_only_documents() -> None:
    assert parse_source("").items == ()
    assert parse_source("; nothing here\n#!shebang").items == ()
    assert format_program(parse_source("  \n")) == ""


def test_parse_file_and_parse_files(tmp_path: Path) -> None:
    a = tmp_path / "a.xtm"
    a.write_text("(define x 1)\n", encoding="utf-8")
    b = tmp_path / "b.xtm"
    b.write_text("(bind-func f (lambda (y:i64) y))\n", encoding="utf-8")

    prog = parse_file(a)
    assert prog.span.file == str(a.resolve())

    res = parse_files([a, b, a])
    assert list(res.files) == [str(a.resolve()), str(b.resolve())]


def test_parse_file_error_names_the_file(tmp_path: Path) -> None:
    bad = tmp_path / "bad.xtm"
    bad.write_text("(a\n", encoding="utf-8")
    with pytest.raises(ParseError) as e:
        parse_file(bad)
    assert str(e.value).startswith(f"{bad.resolve()}:1:1: unterminated list")
