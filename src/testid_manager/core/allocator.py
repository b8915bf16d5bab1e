"""Sequential identifier allocation across the whole file set.

Files are walked in discovery order and declarations in source order. Each
declaration either keeps its existing id or receives the next unused id at
or after the shared :class:`AllocationCursor`. The cursor only moves forward
and is never reset during a run; ids already present in the
:class:`UsedIdRegistry` are skipped rather than reassigned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from testid_manager.core.models import IdPattern
from testid_manager.core.registry import UsedIdRegistry
from testid_manager.source.titles import TitleNode

logger = logging.getLogger(__name__)


@dataclass
class AllocationCursor:
    """The next number considered for a fresh id."""

    value: int

    def advance_past(self, number: int) -> None:
        if number + 1 < self.value:
            raise ValueError(f"Cursor cannot move backwards from {self.value} to {number + 1}")
        self.value = number + 1


@dataclass(frozen=True)
class Decision:
    """Either leave a title unchanged or assign it ``assigned_id``."""

    title: TitleNode
    assigned_id: str | None = None
    existing_id: str | None = None

    @property
    def unchanged(self) -> bool:
        return self.assigned_id is None


class Allocator:
    """Hands out run-wide unique ids in document-then-file order."""

    def __init__(
        self,
        pattern: IdPattern,
        registry: UsedIdRegistry,
        cursor: AllocationCursor | None = None,
        overwrite: bool = False,
    ) -> None:
        self._pattern = pattern
        self._registry = registry
        self._cursor = cursor if cursor is not None else AllocationCursor(pattern.base_number)
        self._overwrite = overwrite

    @property
    def cursor(self) -> AllocationCursor:
        return self._cursor

    def next_id(self) -> str:
        """Consume and return the first unused id at or after the cursor."""
        number = self._cursor.value
        candidate = self._pattern.format(number)
        while self._registry.is_used(candidate):
            number += 1
            candidate = self._pattern.format(number)
        self._registry.mark_used(candidate, number)
        self._cursor.advance_past(number)
        return candidate

    def decide(self, title: TitleNode) -> Decision:
        """Decide what happens to one declaration title."""
        match = self._pattern.matcher.match(title.text)
        existing = match.group("id") if match else None
        if existing is not None and not self._overwrite:
            logger.info("Skipping (existing ID): %s", title.text)
            return Decision(title=title, existing_id=existing)
        return Decision(title=title, assigned_id=self.next_id(), existing_id=existing)

    def allocate(self, titles: list[TitleNode]) -> list[Decision]:
        """Decide for every title of one file, in source order."""
        return [self.decide(title) for title in titles]
