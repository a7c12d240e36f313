"""Tests for action_commander.output."""

from __future__ import annotations

import io
import json

import yaml
from rich.console import Console

from action_commander.models.report import StepReport, WorkflowReport
from action_commander.models.workflow import Release
from action_commander.output.formatters import output_reports, reports_to_data


def make_console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, force_terminal=False, color_system=None, width=160), buf


def sample_reports() -> list[WorkflowReport]:
    current = Release("v1.0.0", "ddd444")
    return [
        WorkflowReport(
            file_path=".github/workflows/ci.yaml",
            steps=[
                StepReport(
                    action="owner/repo",
                    ref="v1",
                    current=current,
                    latest=Release("v2.0.0", "aaa111"),
                    latest_compatible=Release("v1.2.0", "bbb222"),
                ),
                StepReport(action="owner/gone", ref="main", current=Release(), latest=Release(), latest_compatible=Release()),
            ],
        )
    ]


class TestReportsToData:
    def test_shape(self) -> None:
        data = reports_to_data(sample_reports())
        assert data[0]["workflow"] == ".github/workflows/ci.yaml"
        first, second = data[0]["steps"]
        assert first["current"] == {"version": "v1.0.0", "commit": "ddd444"}
        assert first["latest"] == {"version": "v2.0.0", "commit": "aaa111"}
        assert first["status"] == "compat upgrade"
        assert second["current"] is None
        assert second["status"] == "unresolved"


class TestOutputReports:
    def test_json(self) -> None:
        console, buf = make_console()
        output_reports(sample_reports(), "json", console)
        assert json.loads(buf.getvalue()) == reports_to_data(sample_reports())

    def test_yaml(self) -> None:
        console, buf = make_console()
        output_reports(sample_reports(), "yaml", console)
        assert yaml.safe_load(buf.getvalue()) == reports_to_data(sample_reports())

    def test_table(self) -> None:
        console, buf = make_console()
        output_reports(sample_reports(), "table", console)
        out = buf.getvalue()
        assert "workflow ci.yaml" in out
        assert "owner/repo" in out
        assert "compat upgrade" in out
        assert "could not resolve" in out

    def test_table_empty(self) -> None:
        console, buf = make_console()
        output_reports([], "table", console)
        assert "No actions found." in buf.getvalue()
