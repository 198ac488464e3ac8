"""Project reference rewrite command."""
import re
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Module-level console instance (will be set by register function)
console: Console = Console()


def rewrite_refs(
    root: Path = typer.Argument(..., help="Directory to search for project manifests"),
    pattern: Optional[str] = typer.Option(None, "--pattern", "-p", help=r"Regex matched against reference paths (default: ^\.\.[/\\])"),
    replacement: Optional[str] = typer.Option(None, "--replacement", "-r", help="Text that replaces the matched prefix"),
    marker: Optional[str] = typer.Option(None, "--marker", "-m", help="Substring marking already-rewritten paths"),
    name_filter: Optional[str] = typer.Option(None, "--filter", "-f", help="Only projects whose directory name matches"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would change without writing"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Rewrite ProjectReference paths in every manifest under ROOT.

    References matching --pattern are redirected to --replacement. References
    already containing the marker are left alone, so running twice is safe.
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
    from solkit.core.errors import ArgumentError, SolkitError
    from solkit.core.rewriter import rewrite_workspace
    from solkit.core.scanner import Workspace
    from solkit.models.rules import RewriteRule

    setup_file_logging(log_file=log_file, verbose=verbose)

    try:
        _, workspace_cfg = load_config(config)
        rewrite_cfg = workspace_cfg.rewrite

        replacement = replacement or rewrite_cfg.replacement
        if not replacement:
            raise ArgumentError("No replacement given (use --replacement or rewrite.replacement in solkit.yml)")
        try:
            rule = RewriteRule(
                pattern=pattern or rewrite_cfg.pattern,
                replacement=replacement,
                marker=marker or rewrite_cfg.marker,
            )
        except (ValueError, re.error) as e:
            raise ArgumentError(f"Invalid rewrite rule: {e}") from e

        workspace = Workspace(
            roots=require_dirs([root], "root"),
            name_pattern=parse_pattern(name_filter, "--filter"),
            manifest_glob=workspace_cfg.manifest_glob,
            exclude_dirs=workspace_cfg.exclude_dirs,
        )
    except ArgumentError as e:
        handle_cli_error(e, console, verbose, exit_code=EXIT_USAGE)
    except SolkitError as e:
        handle_cli_error(e, console, verbose)

    try:
        summary = rewrite_workspace(workspace, rule, dry_run=dry_run)
    except SolkitError as e:
        handle_cli_error(e, console, verbose)

    if summary.manifest_count == 0:
        print_warning(console, f"No project manifests found under {root}")
        raise typer.Exit(1)

    if summary.changed:
        table = Table(title="Rewritten references" + (" (dry run)" if dry_run else ""))
        table.add_column("Manifest", style="cyan")
        table.add_column("References", justify="right")
        for path, count in summary.changed:
            table.add_row(escape(str(path)), str(count))
        console.print(table)

    print_failures(console, summary.failures)
    if summary.failures and not (summary.changed or summary.unchanged):
        print_error(console, "No manifest could be processed")
        raise typer.Exit(1)

    verb = "Would rewrite" if dry_run else "Rewrote"
    if summary.reference_count:
        print_success(
            console,
            f"{verb} {summary.reference_count} references in {len(summary.changed)} of "
            f"{summary.manifest_count} manifests",
        )
    else:
        print_info(console, f"Nothing to rewrite in {summary.manifest_count} manifests")


def register_refs_commands(app: typer.Typer, shared_console: Console) -> None:
    """Register reference commands with the main Typer app."""
    global console
    console = shared_console
    app.command(name="rewrite-refs")(rewrite_refs)
