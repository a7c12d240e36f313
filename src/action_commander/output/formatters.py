"""Table / JSON / YAML output dispatch."""

from __future__ import annotations

import json
from typing import Any

import yaml
from rich.console import Console

from action_commander.models.report import StepReport, WorkflowReport
from action_commander.models.workflow import Release

console = Console()


def _release_to_dict(r: Release) -> dict[str, str] | None:
    if not r.exists:
        return None
    return {"version": r.version, "commit": r.commit_hash}


def _step_to_dict(s: StepReport) -> dict[str, Any]:
    return {
        "action": s.action,
        "ref": s.ref,
        "current": _release_to_dict(s.current),
        "latest_compatible": _release_to_dict(s.latest_compatible),
        "latest": _release_to_dict(s.latest),
        "is_latest": s.is_latest,
        "status": s.status,
    }


def reports_to_data(reports: list[WorkflowReport]) -> list[dict[str, Any]]:
    return [
        {"workflow": r.file_path, "steps": [_step_to_dict(s) for s in r.steps]}
        for r in reports
    ]


def output_reports(reports: list[WorkflowReport], fmt: str, out: Console | None = None) -> None:
    out = out or console
    if fmt == "json":
        out.print_json(json.dumps(reports_to_data(reports), indent=2))
    elif fmt == "yaml":
        out.print(yaml.safe_dump(reports_to_data(reports), default_flow_style=False, sort_keys=False))
    else:
        from action_commander.output.tables import workflow_table
        if not reports:
            out.print("[dim]No actions found.[/dim]")
        for r in reports:
            out.print(workflow_table(r))
