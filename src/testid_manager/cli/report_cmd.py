"""User-facing output for the testid-manager commands."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import click

from testid_manager.core.models import (
    AddResult,
    CleanResult,
    CompareReport,
    ManagerConfig,
    Occurrence,
    TitleChange,
)


def print_config(config: ManagerConfig) -> None:
    click.echo(
        f"Config: base_id={config.base_id}, glob={config.glob}, "
        f"overwrite={str(config.overwrite).lower()}"
    )


def print_no_files() -> None:
    click.echo("No files matched the pattern.")


def print_compare_report(report: CompareReport) -> None:
    """Print the audit in the order total, duplicates, missing."""
    click.echo(f"Found {report.total} total IDs")
    click.echo(f"Duplicate IDs: {_join_or_none(report.duplicates)}")
    click.echo(f"Missing IDs: {_join_or_none(report.missing)}")


def print_duplicates(duplicates: dict[str, list[Occurrence]]) -> None:
    click.echo("Duplicate test IDs found:", err=True)
    for id_, items in duplicates.items():
        click.echo("", err=True)
        click.echo(f"ID >>> {id_} <<< appears in:", err=True)
        for occ in items:
            click.echo(f' - {occ.file}:{occ.line}: "{_printable(occ.title)}"', err=True)
    click.echo("", err=True)
    click.echo("Fix duplicates before proceeding.", err=True)


def print_add_result(result: AddResult) -> None:
    _print_file_summary(result.assigned, result.changed_files, result.unchanged_files)
    click.echo(
        f"Assigned {len(result.assigned)} IDs in {len(result.changed_files)} files"
        f" ({result.skipped} existing IDs kept)"
    )


def print_clean_result(result: CleanResult) -> None:
    _print_file_summary(result.cleaned, result.changed_files, result.unchanged_files)
    click.echo(
        f"Removed {len(result.cleaned)} IDs from {len(result.changed_files)} files"
    )


def _print_file_summary(
    changes: Sequence[TitleChange],
    changed_files: Sequence[Path],
    unchanged_files: Sequence[Path],
) -> None:
    by_file: dict[Path, list[TitleChange]] = {}
    for change in changes:
        by_file.setdefault(change.file, []).append(change)

    for path in changed_files:
        click.echo(f"Updated file: {path}")
        for change in by_file.get(path, []):
            click.echo(
                f'  {change.line:>5}: "{_printable(change.old_title)}"'
                f' -> "{_printable(change.new_title)}"'
            )
    for path in unchanged_files:
        click.echo(f"No changes: {path}")


def _join_or_none(items: Sequence[str]) -> str:
    return ", ".join(items) if items else "None"


def _printable(title: str) -> str:
    """Backslash-escape lone surrogates, which cannot be written as UTF-8."""
    return title.encode("utf-8", "backslashreplace").decode("utf-8")
