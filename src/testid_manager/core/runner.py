"""Orchestration of the add, clean and compare operations.

Every operation scans the whole file set before anything is written. For
``add`` this is what makes the duplicate check a real gate: a duplicate in
the last file is reported before the first file is touched.
"""

from __future__ import annotations

import logging
from pathlib import Path

from testid_manager.core.allocator import AllocationCursor, Allocator
from testid_manager.core.errors import DuplicateIdentifiers, InvalidSeedFormat
from testid_manager.core.files import discover_files
from testid_manager.core.ids import parse_base_id
from testid_manager.core.models import (
    AddResult,
    CleanResult,
    CompareReport,
    FileChange,
    ManagerConfig,
    TitleChange,
)
from testid_manager.core.registry import UsedIdRegistry
from testid_manager.core.rewriter import Rewriter
from testid_manager.core.scanner import ScannedFile, iter_occurrences, scan_tree
from testid_manager.core.writer import write_changes
from testid_manager.source.parser import parse_source

logger = logging.getLogger(__name__)


class Orchestrator:
    """Runs one operation over the files selected by a :class:`ManagerConfig`.

    The :class:`IdPattern` is derived once from ``config.base_id`` when the
    orchestrator is created, so an invalid seed fails before any file is read.
    """

    def __init__(self, config: ManagerConfig, project_dir: Path) -> None:
        if not config.base_id:
            raise InvalidSeedFormat(config.base_id or "")
        self.config = config
        self.project_dir = project_dir
        self.pattern = parse_base_id(config.base_id)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def discover(self) -> list[Path]:
        return discover_files(self.config.glob, self.project_dir)

    def scan(self, files: list[Path]) -> list[ScannedFile]:
        """Parse every file and collect its ids; the first parse error aborts."""
        scanned: list[ScannedFile] = []
        for path in files:
            with (self.project_dir / path).open("rb") as f:
                source = f.read()
            scanned.append(scan_tree(self.pattern, parse_source(path, source)))
        return scanned

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def compare(self) -> CompareReport:
        """Report total, duplicate and missing ids; never writes."""
        files = self.discover()
        scanned = self.scan(files)
        registry = UsedIdRegistry.from_occurrences(iter_occurrences(scanned))
        return CompareReport(
            total=registry.total,
            duplicates=list(registry.duplicates()),
            missing=registry.missing_ids(self.pattern),
            files_scanned=len(files),
        )

    def clean(self) -> CleanResult:
        """Strip the active id from every matching title."""
        files = self.discover()
        scanned = self.scan(files)
        rewriter = Rewriter(self.pattern)

        changes: list[FileChange] = []
        unchanged: list[Path] = []
        cleaned: list[TitleChange] = []
        for item in scanned:
            titles = [c for c in (rewriter.strip(t) for t in item.titles) if c]
            cleaned.extend(titles)
            change = self._finish_file(item, titles)
            if change is None:
                unchanged.append(item.tree.path)
            else:
                changes.append(change)

        written = write_changes(changes, self.project_dir)
        return CleanResult(
            files_scanned=len(files),
            cleaned=cleaned,
            changed_files=written,
            unchanged_files=unchanged,
        )

    def add(self) -> AddResult:
        """Assign ids to every declaration that lacks one (or all, when overwriting).

        Raises:
            DuplicateIdentifiers: If any id already appears more than once.
                No file is modified in that case.
        """
        files = self.discover()
        scanned = self.scan(files)
        registry = UsedIdRegistry.from_occurrences(iter_occurrences(scanned))

        duplicates = registry.duplicates()
        if duplicates:
            raise DuplicateIdentifiers(duplicates)
        logger.info("No duplicate test IDs found.")

        # When overwriting, every existing id is about to be reassigned.
        used = UsedIdRegistry() if self.config.overwrite else registry
        allocator = Allocator(
            self.pattern,
            used,
            AllocationCursor(self.pattern.base_number),
            overwrite=self.config.overwrite,
        )
        rewriter = Rewriter(self.pattern)

        changes: list[FileChange] = []
        unchanged: list[Path] = []
        assigned: list[TitleChange] = []
        skipped = 0
        for item in scanned:
            titles: list[TitleChange] = []
            for decision in allocator.allocate(item.titles):
                if decision.unchanged:
                    skipped += 1
                    continue
                change = rewriter.apply(decision.title, decision.assigned_id)
                if change is not None:
                    titles.append(change)
            assigned.extend(titles)
            change = self._finish_file(item, titles)
            if change is None:
                unchanged.append(item.tree.path)
            else:
                changes.append(change)

        written = write_changes(changes, self.project_dir)
        return AddResult(
            files_scanned=len(files),
            assigned=assigned,
            skipped=skipped,
            changed_files=written,
            unchanged_files=unchanged,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _finish_file(item: ScannedFile, titles: list[TitleChange]) -> FileChange | None:
        """Print a mutated tree; unchanged files produce nothing to write."""
        if not item.tree.changed:
            logger.debug("No changes: %s", item.tree.path)
            return None
        return FileChange(
            path=item.tree.path,
            original=item.tree.source,
            updated=item.tree.print(),
            titles=titles,
        )
