"""Shared CLI options."""

from __future__ import annotations

from typing import List, Optional

import typer

PathsArgument = typer.Argument(None, help="Workflow files or directories (default: .github/workflows)")
GitHubTokenOption = typer.Option(
    None, "--github-token", "-g", help="GitHub access token (default: GITHUB_TOKEN env value)",
)
SelectOption = typer.Option(
    None, "--select", "-s",
    help='Select specific actions, with optional trailing wildcard (e.g. --select "actions/*")',
)
ExcludeOption = typer.Option(
    None, "--exclude", "-e",
    help='Exclude specific actions, with optional trailing wildcard (e.g. --exclude "actions/*")',
)
WorkersOption = typer.Option(
    None, "--workers", "-w", help="Limit parallelism when accessing the GitHub API (default: CPU count)",
)
StrictOption = typer.Option(False, "--strict", help="Strict mode, abort on any error")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable verbose logging (or set VERBOSE)")
ColorOption = typer.Option(None, "--color", help="Colored output: auto, always or never (or set COLOR)")
OutputOption = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml")
ModeOption = typer.Option("compat", "--mode", "-m", help="Upgrade mode: compat or latest")

Paths = Optional[List[str]]
Patterns = Optional[List[str]]
