"""Run-scoped registry of identifiers already in use.

Occurrences are grouped by their full identifier (prefix and digits), so ids
under another prefix never collide with the active namespace. The registry
drives duplicate detection, gap reporting, and seeds the allocator's used
set.
"""

from __future__ import annotations

from collections.abc import Iterable

from testid_manager.core.models import IdPattern, Occurrence


class UsedIdRegistry:
    """Maps each identifier to the occurrences bearing it."""

    def __init__(self) -> None:
        self._occurrences: dict[str, list[Occurrence]] = {}
        self._used: set[str] = set()
        self._numbers: set[int] = set()

    @classmethod
    def from_occurrences(cls, occurrences: Iterable[Occurrence]) -> UsedIdRegistry:
        registry = cls()
        for occ in occurrences:
            registry.record(occ)
        return registry

    # -- Mutation ------------------------------------------------------------

    def record(self, occurrence: Occurrence) -> None:
        """Register a pre-existing occurrence; its id becomes used."""
        self._occurrences.setdefault(occurrence.id, []).append(occurrence)
        self._used.add(occurrence.id)
        self._numbers.add(occurrence.number)

    def mark_used(self, id_: str, number: int) -> None:
        """Register a freshly allocated id so it is never handed out again."""
        self._used.add(id_)
        self._numbers.add(number)

    # -- Queries -------------------------------------------------------------

    def is_used(self, id_: str) -> bool:
        return id_ in self._used

    @property
    def total(self) -> int:
        """Number of occurrences recorded (duplicates counted each time)."""
        return sum(len(items) for items in self._occurrences.values())

    @property
    def numbers(self) -> frozenset[int]:
        return frozenset(self._numbers)

    def duplicates(self) -> dict[str, list[Occurrence]]:
        """Return every id recorded more than once, in first-seen order."""
        return {
            id_: items for id_, items in self._occurrences.items() if len(items) > 1
        }

    def missing(self, base_number: int) -> list[int]:
        """Numbers in ``[base_number, max(seen)]`` that no occurrence carries.

        An empty registry reports nothing; there is no upper bound.
        """
        seen = {occ.number for items in self._occurrences.values() for occ in items}
        if not seen:
            return []
        return [n for n in range(base_number, max(seen) + 1) if n not in seen]

    def missing_ids(self, pattern: IdPattern) -> list[str]:
        return [pattern.format(n) for n in self.missing(pattern.base_number)]
