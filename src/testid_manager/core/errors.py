"""Exceptions raised by testid-manager.

Every error carries a user-facing message naming the offending file,
identifier or title. The CLI reports these and exits non-zero.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from testid_manager.core.models import Occurrence


class TestIdError(RuntimeError):
    """Base class for all testid-manager failures."""

    __test__ = False


class InvalidSeedFormat(TestIdError, ValueError):
    """Raised when a base id has no trailing run of digits."""

    def __init__(self, base_id: str) -> None:
        super().__init__(
            f"baseId must end with a number (e.g. e2e-001, T1001), got {base_id!r}"
        )
        self.base_id = base_id


class ParseFailure(TestIdError):
    """Raised when a source file cannot be parsed into a syntax tree."""

    def __init__(self, path: Path, line: int, column: int, detail: str = "syntax error") -> None:
        super().__init__(f"Failed to parse {path}:{line}:{column}: {detail}")
        self.path = path
        self.line = line
        self.column = column


class DuplicateIdentifiers(TestIdError):
    """Raised when the same identifier appears on more than one declaration."""

    def __init__(self, duplicates: dict[str, list[Occurrence]]) -> None:
        ids = ", ".join(duplicates)
        super().__init__(f"Duplicate test IDs found: {ids}")
        self.duplicates = duplicates


class WriteFailure(TestIdError):
    """Raised when a changed file cannot be persisted.

    ``written`` lists files that were written before the failure and
    ``restored`` those whose original content was put back.
    """

    def __init__(
        self,
        path: Path,
        reason: str,
        written: list[Path] | None = None,
        restored: list[Path] | None = None,
    ) -> None:
        message = f"Failed to write {path}: {reason}"
        written = written or []
        restored = restored or []
        if written:
            message += f" (restored {len(restored)} of {len(written)} already written files)"
        super().__init__(message)
        self.path = path
        self.written = written
        self.restored = restored
