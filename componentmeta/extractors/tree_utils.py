import re
from typing import Iterator, Optional

QUOTES = ("'", '"', "`")


def get_text(node, source: bytes) -> str:
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def string_value(node, source: bytes) -> str:
    text = get_text(node, source)
    if len(text) >= 2 and text[0] in QUOTES and text[-1] == text[0]:
        return text[1:-1]
    return text


def has_child(node, child_type: str) -> bool:
    return any(c.type == child_type for c in node.children)


def first_named_child(node) -> Optional[object]:
    for c in node.named_children:
        if c.type != "comment":
            return c
    return None


def walk(node) -> Iterator[object]:
    """Pre-order walk, document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def top_level_statements(root) -> Iterator[object]:
    """Program-level statements, with `export` wrappers opened up.

    Yields ``(statement, export_node)`` pairs where ``export_node`` is the
    enclosing export statement or ``None``.
    """
    for child in root.named_children:
        if child.type == "export_statement":
            declaration = child.child_by_field_name("declaration")
            if declaration is not None:
                yield declaration, child
            continue
        yield child, None


def first_error(node) -> Optional[object]:
    for n in walk(node):
        if n.type == "ERROR" or n.is_missing:
            return n
    return None


ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "v": "\v", "f": "\f", "b": "\b", "0": "\0"}
LINE_CONTINUATIONS = {"\n", "\r", "\r\n", "\u2028", "\u2029"}


def _cook_escape(match) -> str:
    seq = match.group(1)
    if seq.startswith("u{"):
        code_point = int(seq[2:-1], 16)
        return chr(code_point) if code_point <= 0x10FFFF else ""
    if len(seq) > 1 and seq[0] in "ux":
        return chr(int(seq[1:], 16))
    if seq in LINE_CONTINUATIONS:
        return ""
    return SIMPLE_ESCAPES.get(seq, seq)


def unescape(text: str) -> str:
    """Evaluate the backslash escapes of a string or template fragment."""
    return ESCAPE_RE.sub(_cook_escape, text)
