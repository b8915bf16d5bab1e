"""testid-manager CLI entry point."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, NoReturn

import click

from testid_manager.cli import report_cmd
from testid_manager.core.config import resolve_config
from testid_manager.core.errors import DuplicateIdentifiers, TestIdError
from testid_manager.core.logging import configure_logging
from testid_manager.core.runner import Orchestrator


def _shared_options(func: Callable[..., Any]) -> Callable[..., Any]:
    options = [
        click.option(
            "--base-id",
            default=None,
            help="Seed identifier, e.g. e2e-001 (falls back to baseId in config).",
        ),
        click.option(
            "--files",
            default=None,
            help="Glob selecting source files (falls back to glob in config).",
        ),
        click.option(
            "--project-dir",
            type=click.Path(exists=True, file_okay=False, path_type=Path),
            default=Path.cwd,
            help="Project root directory.",
        ),
        click.option("--json-logs", is_flag=True, default=False, help="Output logs as JSON."),
        click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(package_name="testid-manager")
def cli() -> None:
    """testid-manager: sequential IDs for test titles."""


@cli.command()
@_shared_options
@click.option(
    "--overwrite/--no-overwrite",
    default=None,
    help="Reassign declarations that already carry an ID.",
)
def add(
    base_id: str | None,
    files: str | None,
    project_dir: Path,
    json_logs: bool,
    verbose: bool,
    overwrite: bool | None,
) -> None:
    """Assign IDs to test titles that do not have one yet."""
    orchestrator = _prepare(base_id, files, project_dir, json_logs, verbose, overwrite=overwrite)
    try:
        result = orchestrator.add()
    except DuplicateIdentifiers as exc:
        report_cmd.print_duplicates(exc.duplicates)
        raise SystemExit(1)
    except (TestIdError, OSError) as exc:
        _fail(exc)

    if result.files_scanned == 0:
        report_cmd.print_no_files()
        return
    report_cmd.print_add_result(result)


@cli.command()
@_shared_options
def clean(
    base_id: str | None,
    files: str | None,
    project_dir: Path,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Remove IDs with the base ID's prefix from test titles."""
    orchestrator = _prepare(base_id, files, project_dir, json_logs, verbose)
    try:
        result = orchestrator.clean()
    except (TestIdError, OSError) as exc:
        _fail(exc)

    if result.files_scanned == 0:
        report_cmd.print_no_files()
        return
    report_cmd.print_clean_result(result)


@cli.command()
@_shared_options
def compare(
    base_id: str | None,
    files: str | None,
    project_dir: Path,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Report duplicate and missing IDs without changing any file."""
    orchestrator = _prepare(base_id, files, project_dir, json_logs, verbose)
    try:
        report = orchestrator.compare()
    except (TestIdError, OSError) as exc:
        _fail(exc)

    if report.files_scanned == 0:
        report_cmd.print_no_files()
        return
    report_cmd.print_compare_report(report)


def _prepare(
    base_id: str | None,
    files: str | None,
    project_dir: Path,
    json_logs: bool,
    verbose: bool,
    overwrite: bool | None = None,
) -> Orchestrator:
    """Configure logging, resolve config, and build the orchestrator."""
    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "INFO")

    project_dir = project_dir.resolve()
    try:
        config = resolve_config(project_dir, base_id=base_id, glob=files, overwrite=overwrite)
    except (OSError, ValueError) as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc

    if not config.base_id:
        raise click.UsageError(
            "A base ID is required: pass --base-id or set baseId in the config file."
        )

    report_cmd.print_config(config)
    try:
        return Orchestrator(config, project_dir)
    except TestIdError as exc:
        _fail(exc)


def _fail(exc: Exception) -> NoReturn:
    click.echo(f"Error: {exc}", err=True)
    raise SystemExit(1)
