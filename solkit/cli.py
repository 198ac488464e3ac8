#!/usr/bin/env python3
"""solkit CLI - Keep a multi-project workspace's manifests and solution in line."""

import typer
from rich.console import Console

from solkit.cli_audit_commands import register_audit_commands
from solkit.cli_membership_commands import register_membership_commands
from solkit.cli_refs_commands import register_refs_commands
from solkit.cli_scaffold_commands import register_scaffold_commands
from solkit.core.logger import get_logger

app = typer.Typer(
    name="solkit",
    help="""solkit - Workspace maintenance for multi-project solutions

Rewrites project references, rebuilds solution membership, scaffolds
test projects and audits test coverage.

Quick start:
  solkit audit src tests                   # Which projects lack tests?
  solkit scaffold xunit Foo.Tests -o tests # Create a test project
  solkit sync-membership src tests         # Rebuild the .sln project list
  solkit rewrite-refs src -r '..\\..\\private-repo\\src\\'
""",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)

# Attach modular subcommands
register_refs_commands(app, console)
register_membership_commands(app, console)
register_scaffold_commands(app, console)
register_audit_commands(app, console)

if __name__ == "__main__":
    app()
