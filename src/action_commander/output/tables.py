"""Rich table builders for the list command."""

from __future__ import annotations

import os

from rich.table import Table

from action_commander.models.report import WorkflowReport
from action_commander.models.workflow import Release
from action_commander.output.themes import styled_status


def _release_cell(release: Release, current: Release) -> str:
    if not release.exists:
        return "-"
    if release == current:
        return "[green]✓ current[/green]"
    return str(release)


def workflow_table(report: WorkflowReport) -> Table:
    table = Table(title=f"workflow [bold]{os.path.basename(report.file_path)}[/bold]", expand=True)
    table.add_column("Action", style="magenta", no_wrap=True)
    table.add_column("Ref", style="cyan")
    table.add_column("Current", style="dim")
    table.add_column("Compat")
    table.add_column("Latest", style="bold")
    table.add_column("Status", no_wrap=True)

    for s in report.steps:
        table.add_row(
            s.action,
            s.ref,
            str(s.current) if s.resolved else "[yellow]could not resolve[/yellow]",
            _release_cell(s.latest_compatible, s.current),
            _release_cell(s.latest, s.current),
            styled_status(s.status),
        )
    return table
