"""Core domain models for testid-manager.

Data that crosses component boundaries is a Pydantic BaseModel. Identifiers
are ``<prefix><digits>`` tokens such as ``"e2e-007"`` where the digit run is
zero-padded to a width fixed for the whole run.
"""

from __future__ import annotations

import re
from functools import cached_property
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DEFAULT_GLOB = "tests/**/*.{ts,js}"


class ManagerConfig(BaseModel):
    """Resolved settings for a single run.

    Field aliases match the keys used in ``testid-manager.config.json``.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    base_id: str | None = Field(default=None, alias="baseId")
    glob: str = DEFAULT_GLOB
    overwrite: bool = Field(default=False, alias="overwriteExistingIds")


# ---------------------------------------------------------------------------
# Id pattern
# ---------------------------------------------------------------------------


class IdPattern(BaseModel):
    """Prefix and fixed digit width derived from a seed identifier."""

    model_config = ConfigDict(frozen=True)

    prefix: str
    width: int = Field(gt=0)
    base_number: int = Field(ge=0)

    @cached_property
    def matcher(self) -> re.Pattern[str]:
        """Anchored matcher: prefix, exactly ``width`` digits, colon, spaces."""
        return re.compile(
            rf"^(?P<id>{re.escape(self.prefix)}(?P<digits>[0-9]{{{self.width}}})):\s*"
        )

    def format(self, number: int) -> str:
        """Render *number* as a full identifier, zero-padded to ``width``."""
        return f"{self.prefix}{number:0{self.width}d}"


# ---------------------------------------------------------------------------
# Occurrences
# ---------------------------------------------------------------------------


class Occurrence(BaseModel):
    """One identifier observed in a test declaration title."""

    model_config = ConfigDict(frozen=True)

    id: str
    number: int
    title: str
    file: Path
    line: int
    column: int

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


# ---------------------------------------------------------------------------
# Run results
# ---------------------------------------------------------------------------


class TitleChange(BaseModel):
    """A single rewritten title."""

    file: Path
    line: int
    old_title: str
    new_title: str
    assigned_id: str | None = None


class FileChange(BaseModel):
    """Printed output for one file whose titles were rewritten."""

    path: Path
    original: bytes
    updated: bytes
    titles: list[TitleChange] = Field(default_factory=list)


class CompareReport(BaseModel):
    """Audit of the identifiers currently present in the file set."""

    total: int
    duplicates: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    files_scanned: int = 0


class AddResult(BaseModel):
    """Outcome of an ``add`` run."""

    files_scanned: int = 0
    assigned: list[TitleChange] = Field(default_factory=list)
    skipped: int = 0
    changed_files: list[Path] = Field(default_factory=list)
    unchanged_files: list[Path] = Field(default_factory=list)


class CleanResult(BaseModel):
    """Outcome of a ``clean`` run."""

    files_scanned: int = 0
    cleaned: list[TitleChange] = Field(default_factory=list)
    changed_files: list[Path] = Field(default_factory=list)
    unchanged_files: list[Path] = Field(default_factory=list)
