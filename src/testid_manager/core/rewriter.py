"""Title rewriting: strip an id prefix or apply a newly allocated one.

Edits go through the title node into its :class:`SourceTree`, so only the
literal's content changes and the printer reproduces everything else
verbatim. Where the literal has escape sequences the rewrite is applied to
the raw content so they are kept as written.
"""

from __future__ import annotations

import logging

from testid_manager.core.models import IdPattern, TitleChange
from testid_manager.source.titles import LiteralKind, TitleNode, decode_escapes

logger = logging.getLogger(__name__)


def strip_id(pattern: IdPattern, text: str) -> str:
    """Remove a leading id match from *text* and trim surrounding whitespace."""
    return pattern.matcher.sub("", text, count=1).strip()


def apply_id(pattern: IdPattern, text: str, new_id: str) -> str:
    """Return *text* with any existing id replaced by ``"<new_id>: "``."""
    return f"{new_id}: {strip_id(pattern, text)}"


class Rewriter:
    """Mutates title nodes in place and records what changed."""

    def __init__(self, pattern: IdPattern) -> None:
        self._pattern = pattern

    def strip(self, title: TitleNode) -> TitleChange | None:
        """Remove the active id from *title*; returns ``None`` if it has none."""
        if self._pattern.matcher.match(title.text) is None:
            return None
        new_text = strip_id(self._pattern, title.text)
        logger.info('Removing ID from: "%s" -> "%s"', title.text, new_text)
        return self._commit(title, new_text, self._render(title, None, new_text))

    def apply(self, title: TitleNode, new_id: str) -> TitleChange | None:
        """Give *title* the id *new_id*; returns ``None`` if nothing changed."""
        new_text = apply_id(self._pattern, title.text, new_id)
        logger.info("Updating test title to: %s", new_text)
        change = self._commit(title, new_text, self._render(title, new_id, new_text))
        if change is not None:
            change.assigned_id = new_id
        return change

    def _render(self, title: TitleNode, new_id: str | None, new_text: str) -> str:
        """Compute the new literal content for *title*."""
        lead = title.encode(f"{new_id}: ") if new_id is not None else ""
        if title.kind is LiteralKind.template:
            return lead + strip_id(self._pattern, title.raw)
        if title.raw == title.text:
            return title.encode(new_text)

        # Keep the raw escapes only if the stripped raw content still means
        # the stripped title; otherwise re-escape the decoded title.
        stripped_raw = strip_id(self._pattern, title.raw)
        if decode_escapes(stripped_raw) == strip_id(self._pattern, title.text):
            return lead + stripped_raw
        return title.encode(new_text)

    @staticmethod
    def _commit(title: TitleNode, new_text: str, new_raw: str) -> TitleChange | None:
        if new_raw == title.raw:
            return None
        title.replace_raw(new_raw)
        return TitleChange(
            file=title.tree.path,
            line=title.line,
            old_title=title.text,
            new_title=new_text,
        )
