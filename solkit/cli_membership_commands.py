"""Solution membership synchronization command."""
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

# Module-level console instance (will be set by register function)
console: Console = Console()


def _find_solution(directory: Path) -> Optional[Path]:
    """Return the only .sln/.slnx file in directory, if exactly one exists."""
    candidates = sorted(directory.glob("*.sln")) + sorted(directory.glob("*.slnx"))
    if len(candidates) == 1:
        return candidates[0]
    return None


def sync_membership(
    roots: Optional[List[Path]] = typer.Argument(None, help="Source roots whose projects belong in the solution"),
    solution: Optional[Path] = typer.Option(None, "--solution", "-s", help="Solution file (default: from config or the only .sln in cwd)"),
    name_filter: Optional[str] = typer.Option(None, "--filter", "-f", help="Only projects whose directory name matches"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Abort the whole sync after this many seconds"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be removed and added"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Rebuild the solution's project list from the manifests under ROOTS.

    Every current member is removed, then every discovered project is added.
    Projects that fail to add are reported; the sync still exits 0.
    """
    from solkit.cli_support import (
        EXIT_USAGE,
        handle_cli_error,
        load_config,
        parse_pattern,
        print_error,
        print_failures,
        print_info,
        print_success,
        print_warning,
        require_dirs,
        setup_file_logging,
    )
    from solkit.core.config import SolkitSettings
    from solkit.core.errors import ArgumentError, SolkitError
    from solkit.core.scanner import Workspace
    from solkit.core.synchronizer import MembershipSynchronizer
    from solkit.services.solution import DotnetSolution

    setup_file_logging(log_file=log_file, verbose=verbose)
    settings = SolkitSettings.from_env()

    try:
        loader, workspace_cfg = load_config(config)
        if not roots:
            roots = loader.resolve_all(workspace_cfg.source_roots)

        if solution is None and workspace_cfg.solution:
            solution = loader.resolve(workspace_cfg.solution)
        if solution is None:
            solution = _find_solution(Path.cwd())
        if solution is None:
            raise ArgumentError("No solution file given (use --solution or solution in solkit.yml)")
        if not settings.mock and not solution.is_file():
            raise ArgumentError(f"Solution file '{solution}' not found")

        workspace = Workspace(
            roots=require_dirs(roots, "source root"),
            name_pattern=parse_pattern(name_filter, "--filter"),
            manifest_glob=workspace_cfg.manifest_glob,
            exclude_dirs=workspace_cfg.exclude_dirs,
        )
    except ArgumentError as e:
        handle_cli_error(e, console, verbose, exit_code=EXIT_USAGE)
    except SolkitError as e:
        handle_cli_error(e, console, verbose)

    if next(workspace.manifests(), None) is None:
        print_error(console, "No project manifests found; refusing to empty the solution")
        raise typer.Exit(1)

    aggregator = DotnetSolution(
        solution,
        dotnet=settings.dotnet_executable,
        call_timeout=settings.aggregator_call_timeout,
        mock=settings.mock,
    )
    synchronizer = MembershipSynchronizer(
        aggregator,
        timeout=timeout if timeout is not None else settings.sync_timeout,
    )

    try:
        result = synchronizer.synchronize(workspace, dry_run=dry_run)
    except SolkitError as e:
        handle_cli_error(e, console, verbose)

    if dry_run:
        print_warning(console, "DRY RUN - solution not modified")
        for member in result.removed:
            console.print(f"  [red]-[/red] {escape(member)}")
        for path in result.added:
            console.print(f"  [green]+[/green] {escape(path)}")

    for duplicate in result.duplicates:
        print_info(console, f"Skipped duplicate {escape(duplicate)}")
    print_failures(console, result.failures)

    summary = f"{solution.name}: {len(result.removed)} removed, {len(result.added)} added"
    if result.partial:
        print_warning(console, f"{summary}, {len(result.failures)} failed")
    else:
        print_success(console, summary)


def register_membership_commands(app: typer.Typer, shared_console: Console) -> None:
    """Register membership commands with the main Typer app."""
    global console
    console = shared_console
    app.command(name="sync-membership")(sync_membership)
