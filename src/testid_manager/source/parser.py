"""Tree-sitter source adapter: parse source text, record edits, print it back.

The adapter exposes a two-step contract. :func:`parse_source` turns file
bytes into a :class:`SourceTree`; callers mutate nodes through
:meth:`SourceTree.replace`, and :meth:`SourceTree.print` splices every
recorded replacement into the original bytes. Bytes outside a replaced range
are reproduced verbatim, so formatting and comments survive untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import tree_sitter_javascript as ts_js
import tree_sitter_typescript as ts_ts
from tree_sitter import Language, Node, Parser, Tree

from testid_manager.core.errors import ParseFailure

logger = logging.getLogger(__name__)

JAVASCRIPT = "javascript"
TYPESCRIPT = "typescript"
TSX = "tsx"

_SUFFIX_GRAMMARS = {
    ".ts": TYPESCRIPT,
    ".mts": TYPESCRIPT,
    ".cts": TYPESCRIPT,
    ".tsx": TSX,
}

_parser_cache: dict[str, Parser] = {}


def grammar_for(path: Path) -> str:
    """Return the grammar name used for *path* (JavaScript unless TS/TSX)."""
    return _SUFFIX_GRAMMARS.get(path.suffix.lower(), JAVASCRIPT)


def _get_parser(grammar: str) -> Parser:
    if grammar in _parser_cache:
        return _parser_cache[grammar]

    if grammar == TYPESCRIPT:
        language = Language(ts_ts.language_typescript())
    elif grammar == TSX:
        language = Language(ts_ts.language_tsx())
    else:
        language = Language(ts_js.language())

    parser = Parser(language)
    _parser_cache[grammar] = parser
    return parser


@dataclass
class _Edit:
    start_byte: int
    end_byte: int
    replacement: bytes


@dataclass
class SourceTree:
    """A parsed file plus the byte-range edits recorded against it."""

    path: Path
    source: bytes
    tree: Tree
    _edits: list[_Edit] = field(default_factory=list)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def changed(self) -> bool:
        return bool(self._edits)

    def text(self, start_byte: int, end_byte: int) -> str:
        return self.source[start_byte:end_byte].decode("utf-8")

    def replace(self, start_byte: int, end_byte: int, replacement: str) -> None:
        """Record that ``source[start_byte:end_byte]`` becomes *replacement*.

        Raises ``ValueError`` if the range overlaps an earlier edit.
        """
        for edit in self._edits:
            if start_byte < edit.end_byte and edit.start_byte < end_byte:
                raise ValueError(
                    f"Overlapping edit in {self.path} at bytes {start_byte}-{end_byte}"
                )
        self._edits.append(_Edit(start_byte, end_byte, replacement.encode("utf-8")))

    def print(self) -> bytes:
        """Return the source with all recorded edits applied."""
        if not self._edits:
            return self.source
        out = bytearray(self.source)
        for edit in sorted(self._edits, key=lambda e: e.start_byte, reverse=True):
            out[edit.start_byte : edit.end_byte] = edit.replacement
        return bytes(out)


def parse_source(path: Path, source: bytes) -> SourceTree:
    """Parse *source* (the contents of *path*) into a :class:`SourceTree`.

    Raises:
        ParseFailure: If the text is not valid UTF-8 or the tree contains
            syntax errors.
    """
    try:
        source.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseFailure(path, 1, exc.start + 1, "file is not valid UTF-8") from None

    grammar = grammar_for(path)
    tree = _get_parser(grammar).parse(source)
    if tree.root_node.has_error:
        node = _first_error(tree.root_node)
        row, column = node.start_point if node is not None else (0, 0)
        detail = "missing token" if node is not None and node.is_missing else "syntax error"
        raise ParseFailure(path, row + 1, column + 1, detail)

    logger.debug("Parsed %s with %s grammar", path, grammar)
    return SourceTree(path=path, source=source, tree=tree)


def _first_error(root: Node) -> Node | None:
    """Return the first ERROR or missing node in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None
