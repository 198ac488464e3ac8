"""Shared utilities for solkit CLI modules."""
from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import typer
from rich.console import Console
from rich.markup import escape

from solkit.models.pattern import Pattern, make_pattern

CONFIG_FILENAME = "solkit.yml"

# Exit codes
EXIT_FAILURE = 1
EXIT_USAGE = 2


def find_config(config_path: Optional[str] = None) -> Optional[str]:
    """Locate the workspace configuration file, if there is one."""
    if config_path:
        return config_path

    if env_config := os.environ.get("SOLKIT_CONFIG"):
        return env_config

    current = Path.cwd()
    for directory in [current, *current.parents]:
        candidate = directory / CONFIG_FILENAME
        if candidate.exists():
            return str(candidate)

    return None


def load_config(config_path: Optional[str]) -> Tuple["ConfigLoader", "WorkspaceConfig"]:
    """Load solkit.yml (or defaults when none is found).

    An explicitly passed --config must exist.
    """
    from solkit.config.loader import ConfigLoader
    from solkit.core.errors import ArgumentError

    loader = ConfigLoader(find_config(config_path))
    try:
        config = loader.load(required=config_path is not None)
    except FileNotFoundError as e:
        raise ArgumentError(str(e)) from e
    return loader, config


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands.

    Args:
        log_file: Path to log file (optional)
        verbose: Enable verbose logging
    """
    from solkit.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file, verbose=verbose)


def parse_pattern(text: Optional[str], option: str) -> Optional[Pattern]:
    """Turn a CLI filter into a Pattern, rejecting broken regexes."""
    from solkit.core.errors import ArgumentError

    if not text:
        return None
    try:
        return make_pattern(text)
    except re.error as e:
        raise ArgumentError(f"{option}: invalid pattern {text!r}: {e}") from e


def require_dirs(paths: Iterable[Path], what: str) -> List[Path]:
    """Validate that every path is an existing directory."""
    from solkit.core.errors import ArgumentError

    paths = list(paths)
    if not paths:
        raise ArgumentError(f"No {what} given")
    for path in paths:
        if not path.is_dir():
            raise ArgumentError(f"{what.capitalize()} '{path}' is not a directory")
    return paths


def handle_cli_error(
    e: Exception,
    console: Console,
    verbose: bool = False,
    exit_code: int = EXIT_FAILURE
) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        e: Exception to handle
        console: Rich console for output
        verbose: Show exception traceback if True
        exit_code: Exit code to use
    """
    console.print(f"[red]Error:[/red] {e}")
    if verbose:
        console.print_exception()
    raise typer.Exit(exit_code)


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    """Print success message with consistent formatting."""
    console.print(f"[green]{prefix}[/green] {message}")


def print_error(console: Console, message: str, prefix: str = "✗") -> None:
    """Print error message with consistent formatting."""
    console.print(f"[red]{prefix}[/red] {message}")


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    """Print warning message with consistent formatting."""
    console.print(f"[yellow]{prefix}[/yellow] {message}")


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    """Print info message with consistent formatting."""
    console.print(f"[cyan]{prefix}[/cyan] {message}")


def print_failures(console: Console, failures) -> None:
    """Print one line per failed batch item."""
    for failure in failures:
        print_error(console, escape(f"{failure.item}: {failure.reason}"))
