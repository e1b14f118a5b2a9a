from __future__ import annotations

from . import ast as A


def format_program(program: A.Program) -> str:
    """Canonical text for ``program``: one top-level datum per line.

    Comments are not preserved; atoms keep their exact source text.
    """
    if not program.items:
        return ""
    return "\n".join(format_node(it) for it in program.items) + "\n"


def format_node(node: A.Node) -> str:
    if isinstance(node, A.Atom):
        return node.text
    if isinstance(node, A.TypedIdentifier):
        return node.name.text + node.annotation.text
    if isinstance(node, A.List):
        parts = [format_node(it) for it in node.items]
        if node.tail is not None:
            parts.append(".")
            parts.append(format_node(node.tail))
        return "(" + " ".join(parts) + ")"
    if isinstance(node, A.Vector):
        return "#(" + " ".join(format_node(it) for it in node.items) + ")"
    if isinstance(node, A.QuoteForm):
        body = format_node(node.datum)
        # ", @x" must not turn into ",@x"
        if isinstance(node, A.Unquote) and body.startswith("@"):
            return node.prefix + " " + body
        return node.prefix + body
    raise TypeError(f"cannot format {type(node).__name__}")
