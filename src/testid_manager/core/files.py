"""Glob-based discovery of the source files to process."""

from __future__ import annotations

import glob
import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternations: ``*.{ts,js}`` -> ``*.ts``, ``*.js``."""
    match = _BRACE_RE.search(pattern)
    if match is None or "," not in match.group(1):
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(head + option + tail))
    return expanded


def discover_files(pattern: str, project_dir: Path) -> list[Path]:
    """Return the files matching *pattern* under *project_dir*.

    Paths are relative to *project_dir* when the pattern is relative.
    Directories are skipped and the result is sorted so that every run
    visits files in the same order.
    """
    found: set[Path] = set()
    for expanded in expand_braces(pattern):
        if Path(expanded).is_absolute():
            matches = glob.glob(expanded, recursive=True)
            found.update(Path(m) for m in matches if Path(m).is_file())
        else:
            matches = glob.glob(expanded, root_dir=project_dir, recursive=True)
            found.update(Path(m) for m in matches if (project_dir / m).is_file())

    files = sorted(found, key=lambda p: p.as_posix())
    logger.debug("Pattern %r matched %d files", pattern, len(files))
    return files
