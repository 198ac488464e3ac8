"""Test project scaffolding command."""
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

# Module-level console instance (will be set by register function)
console: Console = Console()


def write_scaffold(
    template_name: str,
    names: List[str],
    out_dir: Path,
    suffix: str,
    verbose: bool = False,
) -> List[Path]:
    """Load a template and scaffold names into out_dir, reporting on console.

    Shared by `scaffold` and `audit --scaffold`. Exits 1 after reporting if
    any target could not be written.
    """
    from solkit.cli_support import (
        EXIT_FAILURE,
        EXIT_USAGE,
        handle_cli_error,
        print_failures,
        print_success,
        print_warning,
    )
    from solkit.core.errors import ArgumentError
    from solkit.core.scaffolder import TemplateScaffolder, default_output_path
    from solkit.core.template_loader import TemplateLoader

    try:
        template = TemplateLoader().load(template_name)
    except FileNotFoundError as e:
        handle_cli_error(ArgumentError(str(e)), console, verbose, exit_code=EXIT_USAGE)

    scaffolder = TemplateScaffolder(template, suffix=suffix)
    result = scaffolder.scaffold(names, default_output_path(out_dir))

    for path in result.written:
        print_success(console, f"Wrote {escape(str(path))}")
    print_failures(console, result.failures)
    if result.partial:
        print_warning(console, f"{len(result.written)} written, {len(result.failures)} failed")
        raise typer.Exit(EXIT_FAILURE)
    return result.written


def scaffold(
    template: str = typer.Argument(..., help="Template file, or name of a bundled template (e.g. xunit)"),
    names: List[str] = typer.Argument(..., help="Test project names, e.g. Foo.Tests"),
    out_dir: Optional[Path] = typer.Option(None, "--out-dir", "-o", help="Directory that receives <name>/<name>.csproj"),
    suffix: Optional[str] = typer.Option(None, "--suffix", help="Suffix stripped to find the source project (default: .Tests)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Generate test project manifests from a template.

    The template's {0} slot receives the source project name (NAME without
    its suffix). Existing files are overwritten.
    """
    from solkit.cli_support import EXIT_USAGE, handle_cli_error, load_config, setup_file_logging
    from solkit.core.errors import ArgumentError, SolkitError

    setup_file_logging(log_file=log_file, verbose=verbose)

    try:
        loader, workspace_cfg = load_config(config)
        if out_dir is None and workspace_cfg.scaffold.out_dir:
            out_dir = loader.resolve(workspace_cfg.scaffold.out_dir)
        if out_dir is None:
            raise ArgumentError("No output directory given (use --out-dir)")
    except ArgumentError as e:
        handle_cli_error(e, console, verbose, exit_code=EXIT_USAGE)
    except SolkitError as e:
        handle_cli_error(e, console, verbose)

    write_scaffold(
        template,
        names,
        out_dir,
        suffix if suffix is not None else workspace_cfg.scaffold.suffix,
        verbose=verbose,
    )


def register_scaffold_commands(app: typer.Typer, shared_console: Console) -> None:
    """Register scaffolding commands with the main Typer app."""
    global console
    console = shared_console
    app.command(name="scaffold")(scaffold)
