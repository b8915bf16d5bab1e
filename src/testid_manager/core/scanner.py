"""Occurrence scanning: apply an :class:`IdPattern` to extracted titles."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from testid_manager.core.models import IdPattern, Occurrence
from testid_manager.source.parser import SourceTree
from testid_manager.source.titles import TitleNode, extract_titles

logger = logging.getLogger(__name__)


@dataclass
class ScannedFile:
    """A parsed file, its eligible titles, and the ids found among them."""

    tree: SourceTree
    titles: list[TitleNode]
    occurrences: list[Occurrence]


def match_title(pattern: IdPattern, title: TitleNode) -> Occurrence | None:
    """Return the occurrence for *title* if it starts with an active id."""
    match = pattern.matcher.match(title.text)
    if match is None:
        return None
    return Occurrence(
        id=match.group("id"),
        number=int(match.group("digits")),
        title=title.text,
        file=title.tree.path,
        line=title.line,
        column=title.column,
    )


def scan_tree(pattern: IdPattern, tree: SourceTree) -> ScannedFile:
    """Extract titles from *tree* and record every matching identifier."""
    titles = extract_titles(tree)
    occurrences = [occ for occ in (match_title(pattern, t) for t in titles) if occ]
    logger.debug(
        "Scanned %s: %d titles, %d with ids", tree.path, len(titles), len(occurrences)
    )
    return ScannedFile(tree=tree, titles=titles, occurrences=occurrences)


def iter_occurrences(scanned: Iterable[ScannedFile]) -> Iterable[Occurrence]:
    for item in scanned:
        yield from item.occurrences
