from __future__ import annotations

import os

from xtmpy import format_node, format_program, parse_source
from xtmpy import ast as A
from xtmpy.testing import generate_sources
from xtmpy.tree import walk


def _corpus() -> list[tuple[str, str]]:
    seed = int(os.environ.get("XTMPY_CORPUS_SEED", "1"))
    count = int(os.environ.get("XTMPY_CORPUS_CASES", "500"))
    return [(f"corpus:{seed}:{i}.xtm", src) for i, src in enumerate(generate_sources(seed=seed, count=count))]


def test_corpus_formatting_is_a_fixed_point() -> None:
    for name, src in _corpus():
        ast1 = parse_source(src, file=name)
        out1 = format_program(ast1)
        ast2 = parse_source(out1, file=name)
        out2 = format_program(ast2)
        assert out2 == out1, f"formatting is not stable for {name}\n{src}"


def test_corpus_top_level_spans_cover_the_buffer() -> None:
    for name, src in _corpus():
        prog = parse_source(src, file=name, trivia=True)
        pieces = [n.span for n in prog.items]
        pieces.extend(t.span for t in prog.trivia if not any(n.span.contains(t.span) for n in prog.items))
        pieces.sort(key=lambda sp: sp.start.offset)
        assert "".join(sp.text(src) for sp in pieces) == src, name


def test_corpus_data_reread_alone() -> None:
    for name, src in _corpus()[:100]:
        prog = parse_source(src, file=name)
        for node in walk(prog):
            if isinstance(node, (A.Program, A.TypeAnnotation)):
                continue
            [again] = parse_source(node.span.text(src)).items
            assert format_node(again) == format_node(node), name


def test_corpus_byte_offsets_match_utf8() -> None:
    for name, src in _corpus()[:100]:
        prog = parse_source(src, file=name)
        data = src.encode("utf-8")
        for node in walk(prog):
            sp = node.span
            assert data[sp.start.byte : sp.end.byte].decode("utf-8") == sp.text(src), name
