"""Persist rewritten files atomically, undoing earlier writes on failure."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from testid_manager.core.errors import WriteFailure
from testid_manager.core.models import FileChange

logger = logging.getLogger(__name__)


def atomic_write(path: Path, content: bytes) -> None:
    """Write *content* to *path* via tmp + fsync + replace."""
    tmp_path = path.parent / f".{path.name}.tmp"
    mode = path.stat().st_mode & 0o777 if path.exists() else 0o644
    fd = os.open(str(tmp_path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    try:
        try:
            os.write(fd, content)
            os.fsync(fd)
        finally:
            os.close(fd)
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def write_changes(changes: list[FileChange], project_dir: Path) -> list[Path]:
    """Write every changed file; returns the paths written.

    If a write fails, files already written in this call are restored from
    their original bytes before :class:`WriteFailure` is raised.
    """
    written: list[FileChange] = []
    for change in changes:
        target = project_dir / change.path
        try:
            atomic_write(target, change.updated)
        except OSError as exc:
            logger.error("Failed to write %s: %s", change.path, exc)
            restored = _restore(written, project_dir)
            raise WriteFailure(
                change.path,
                exc.strerror or str(exc),
                written=[c.path for c in written],
                restored=restored,
            ) from exc
        written.append(change)
        logger.info("Updated file: %s", change.path)
    return [c.path for c in written]


def _restore(written: list[FileChange], project_dir: Path) -> list[Path]:
    restored: list[Path] = []
    for change in reversed(written):
        try:
            atomic_write(project_dir / change.path, change.original)
        except OSError:
            logger.exception("Could not restore %s", change.path)
            continue
        restored.append(change.path)
    return restored
