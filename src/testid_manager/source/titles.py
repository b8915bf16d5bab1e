"""Find test declarations and their literal titles in a parsed file.

A call is a test declaration when its callee is ``it``/``test`` either as a
bare identifier or as the final property of a member access (``cy.it``).
Only a plain string literal or a template literal without substitutions is
an eligible title; any other first argument is ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from tree_sitter import Node

from testid_manager.source.parser import SourceTree

DECLARATION_NAMES = frozenset({"it", "test"})

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-3][0-7]{0,2}|[4-7][0-7]?|\r\n|.)",
    re.DOTALL,
)
_SURROGATE_PAIR_RE = re.compile(r"[\ud800-\udbff][\udc00-\udfff]")
_SURROGATE_RE = re.compile(r"[\ud800-\udfff]")


class LiteralKind(StrEnum):
    string = "string"
    template = "template"


@dataclass
class TitleNode:
    """The title argument of one test declaration.

    ``text`` is the title as the test runner sees it (escapes decoded for
    string literals, the raw fragment for template literals). ``raw`` is the
    source between the delimiters.
    """

    tree: SourceTree
    kind: LiteralKind
    quote: str
    text: str
    raw: str
    content_start: int
    content_end: int
    line: int
    column: int

    def replace_raw(self, raw: str) -> None:
        """Replace the literal's content, keeping its delimiters."""
        self.tree.replace(self.content_start, self.content_end, raw)

    def encode(self, text: str) -> str:
        """Escape *text* for this literal's delimiter."""
        if self.kind is LiteralKind.template:
            escaped = text.replace("`", "\\`").replace("${", "\\${")
        else:
            escaped = text.replace("\\", "\\\\").replace(self.quote, "\\" + self.quote)
            escaped = escaped.replace("\n", "\\n").replace("\r", "\\r")
        # Lone surrogates cannot be written as UTF-8.
        return _SURROGATE_RE.sub(lambda m: f"\\u{ord(m.group(0)):04x}", escaped)


def extract_titles(tree: SourceTree) -> list[TitleNode]:
    """Return every eligible test-declaration title in source order."""
    titles: list[TitleNode] = []
    stack = [tree.root]
    while stack:
        node = stack.pop()
        if node.type == "call_expression":
            title = _title_for_call(tree, node)
            if title is not None:
                titles.append(title)
        stack.extend(reversed(node.children))
    return titles


def declaration_name(call: Node) -> str | None:
    """Resolve the invoked name of a call: ``it(...)`` or ``obj.it(...)``."""
    callee = call.child_by_field_name("function")
    if callee is None:
        return None
    match callee.type:
        case "identifier":
            name_node = callee
        case "member_expression":
            name_node = callee.child_by_field_name("property")
        case _:
            return None
    if name_node is None or name_node.text is None:
        return None
    return name_node.text.decode("utf-8")


def _title_for_call(tree: SourceTree, call: Node) -> TitleNode | None:
    if declaration_name(call) not in DECLARATION_NAMES:
        return None
    arguments = call.child_by_field_name("arguments")
    # Tagged templates (it`...`) have no argument list.
    if arguments is None or arguments.type != "arguments":
        return None
    args = [child for child in arguments.named_children if child.type != "comment"]
    if not args:
        return None

    first = args[0]
    match first.type:
        case "string":
            text = _decode_string(tree, first)
            kind = LiteralKind.string
        case "template_string":
            if any(child.type == "template_substitution" for child in first.children):
                return None
            text = tree.text(first.start_byte + 1, first.end_byte - 1)
            kind = LiteralKind.template
        case _:
            return None

    row, column = first.start_point
    return TitleNode(
        tree=tree,
        kind=kind,
        quote=tree.text(first.start_byte, first.start_byte + 1),
        text=text,
        raw=tree.text(first.start_byte + 1, first.end_byte - 1),
        content_start=first.start_byte + 1,
        content_end=first.end_byte - 1,
        line=row + 1,
        column=column + 1,
    )


def _decode_string(tree: SourceTree, node: Node) -> str:
    return decode_escapes(tree.text(node.start_byte + 1, node.end_byte - 1))


def decode_escapes(raw: str) -> str:
    """Return the value of string-literal content *raw*.

    ``\\uXXXX`` escapes forming a UTF-16 surrogate pair are combined into
    one code point; a lone surrogate is kept as is.
    """
    text = _ESCAPE_RE.sub(lambda m: _decode_escape(m.group(0)), raw)
    return _SURROGATE_PAIR_RE.sub(_join_surrogates, text)


def _decode_escape(seq: str) -> str:
    body = seq[1:]
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    if body.startswith("u{"):
        return chr(int(body[2:-1], 16))
    if body[:1] in ("u", "x") and len(body) > 1:
        return chr(int(body[1:], 16))
    if body in ("\n", "\r", "\r\n", "\u2028", "\u2029"):
        # Line continuation.
        return ""
    if all(c in "01234567" for c in body):
        return chr(int(body, 8))
    return body


def _join_surrogates(match: re.Match[str]) -> str:
    high, low = match.group(0)
    return chr(0x10000 + ((ord(high) - 0xD800) << 10) + (ord(low) - 0xDC00))
