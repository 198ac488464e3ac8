"""Test coverage audit command."""
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

# Module-level console instance (will be set by register function)
console: Console = Console()


def _display_report(report) -> None:
    table = Table(title="Test project coverage")
    table.add_column("Gap", style="bold")
    table.add_column("Project", style="cyan")
    for name in report.missing:
        table.add_row("[yellow]missing tests[/yellow]", name)
    for name in report.orphaned:
        table.add_row("[magenta]orphaned tests[/magenta]", name)
    console.print(table)


def audit(
    src_root: Path = typer.Argument(..., help="Directory holding source projects"),
    test_root: Path = typer.Argument(..., help="Directory holding test projects"),
    exclude: Optional[str] = typer.Option(None, "--exclude", "-e", help="Source projects matching this pattern need no tests"),
    suffix: Optional[str] = typer.Option(None, "--suffix", help="Test project name suffix (default: .Tests)"),
    scaffold_missing: bool = typer.Option(False, "--scaffold", help="Scaffold a test project for every missing one"),
    template: Optional[str] = typer.Option(None, "--template", "-t", help="Template used with --scaffold (default: xunit)"),
    out_dir: Optional[Path] = typer.Option(None, "--out-dir", "-o", help="Output directory used with --scaffold (default: TEST_ROOT)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Check that every source project has a test project and vice versa.

    Gaps are a report, not a failure: the command exits 0 when it could
    complete the comparison.
    """
    from solkit.cli_scaffold_commands import write_scaffold
    from solkit.cli_support import (
        EXIT_USAGE,
        handle_cli_error,
        load_config,
        parse_pattern,
        print_info,
        print_success,
        print_warning,
        require_dirs,
        setup_file_logging,
    )
    from solkit.core.auditor import audit as run_audit
    from solkit.core.errors import ArgumentError, SolkitError
    from solkit.core.scaffolder import missing_test_projects
    from solkit.core.scanner import Workspace

    setup_file_logging(log_file=log_file, verbose=verbose)

    try:
        _, workspace_cfg = load_config(config)
        require_dirs([src_root, test_root], "root")
        exclude_pattern = parse_pattern(exclude or workspace_cfg.audit.exclude, "--exclude")
        suffix = suffix if suffix is not None else workspace_cfg.scaffold.suffix

        def names_under(root: Path):
            return Workspace(
                roots=[root],
                manifest_glob=workspace_cfg.manifest_glob,
                exclude_dirs=workspace_cfg.exclude_dirs,
            ).project_names()

        source_names = names_under(src_root)
        test_names = names_under(test_root)
    except ArgumentError as e:
        handle_cli_error(e, console, verbose, exit_code=EXIT_USAGE)
    except SolkitError as e:
        handle_cli_error(e, console, verbose)

    report = run_audit(source_names, test_names, exclude=exclude_pattern, suffix=suffix)

    console.print(
        f"Source projects: {report.source_count}  Test projects: {report.test_count}  "
        f"Excluded: {len(report.excluded)}"
    )
    if report.excluded and verbose:
        for name in report.excluded:
            print_info(console, f"Excluded {name}")

    if report.is_clean():
        print_success(console, "Every source project has a test project")
    else:
        _display_report(report)
        print_warning(
            console,
            f"{report.missing_count} missing, {report.orphaned_count} orphaned",
        )

    if scaffold_missing and report.missing:
        write_scaffold(
            template or workspace_cfg.scaffold.template,
            missing_test_projects(report, suffix),
            out_dir or test_root,
            suffix,
            verbose=verbose,
        )


def register_audit_commands(app: typer.Typer, shared_console: Console) -> None:
    """Register audit commands with the main Typer app."""
    global console
    console = shared_console
    app.command(name="audit")(audit)
