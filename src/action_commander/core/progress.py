"""Progress display and diagnostics collection for resolution passes."""

from __future__ import annotations

import logging
import os
import threading
from collections import defaultdict

from rich.console import Console
from rich.markup import escape
from rich.status import Status

from action_commander.models import Severity
from action_commander.models.diagnostic import DiagnosticRecord
from action_commander.models.workflow import Root, Step, Workflow
from action_commander.output.themes import styled_severity

logger = logging.getLogger(__name__)


class ProgressLogger:
    """A small, thread-safe reporter for an engine's progress.

    Output is organised in phases.  Within a phase, every event is sent to the
    ``logging`` module at debug level, tagged with its severity, workflow and
    action; info and above are also shown on the console, either as
    a single status line updated in place (``fancy``) or as one line per event.
    Warnings and errors are kept as diagnostics until :meth:`show_diagnostics`.
    """

    def __init__(self, console: Console | None = None, fancy: bool = False):
        self.console = console or Console(stderr=True)
        self.fancy = fancy
        self._lock = threading.RLock()
        self._phase_open = False
        self._status: Status | None = None
        self._diagnostics: dict[str, list[DiagnosticRecord]] = defaultdict(list)
        self._workflow_width = 0
        self._action_width = 0

    def precompute_widths(self, root: Root) -> None:
        for workflow in root.workflows.values():
            self._workflow_width = max(self._workflow_width, len(os.path.basename(workflow.file_path)))
            for step in workflow.steps:
                self._action_width = max(self._action_width, len(step.action.name))

    # ------------------------------------------------------------------
    # phases
    # ------------------------------------------------------------------

    def start_phase(self, msg: str) -> None:
        with self._lock:
            if self._phase_open:
                raise RuntimeError(f"current phase must be finished before starting: {msg}")
            self._phase_open = True
            self._diagnostics.clear()
            self.console.print(f"[bold]{escape(msg)}[/bold]")
            if self.fancy:
                self._status = self.console.status("")
                self._status.start()

    def finish_phase(self, msg: str) -> None:
        with self._lock:
            if not self._phase_open:
                raise RuntimeError(f"no phase to finish: {msg}")
            self._phase_open = False
            if self._status is not None:
                self._status.stop()
                self._status = None
            self.console.print(f"[bold]{escape(msg)}[/bold]")
            self.console.print()

    @property
    def in_phase(self) -> bool:
        return self._phase_open

    # ------------------------------------------------------------------
    # events
    # ------------------------------------------------------------------

    def debug(self, workflow: Workflow | None, step: Step | None, msg: str) -> None:
        self._event(Severity.DEBUG, workflow, step, msg)

    def info(self, workflow: Workflow | None, step: Step | None, msg: str) -> None:
        self._event(Severity.INFO, workflow, step, msg)

    def warn(self, workflow: Workflow | None, step: Step | None, msg: str) -> None:
        self._event(Severity.WARN, workflow, step, msg)

    def error(self, workflow: Workflow | None, step: Step | None, msg: str) -> None:
        self._event(Severity.ERROR, workflow, step, msg)

    def _event(self, severity: Severity, workflow: Workflow | None, step: Step | None, msg: str) -> None:
        workflow_path = workflow.file_path if workflow else ""
        action_name = step.action.name if step else ""
        # mirrored at debug level: the console rendering below is the
        # user-facing copy, the log record is for verbose/headless runs
        logger.debug(
            "%s workflow=%s action=%s: %s",
            severity,
            workflow_path,
            action_name,
            msg,
            extra={"severity": severity, "workflow": workflow_path, "action": action_name},
        )
        if severity < Severity.INFO:
            return

        with self._lock:
            if not self._phase_open:
                raise RuntimeError(f"phase must be started before reporting progress: {msg}")
            if severity >= Severity.WARN:
                self._diagnostics[workflow_path].append(
                    DiagnosticRecord(severity=severity, workflow=workflow_path, action=action_name, message=msg)
                )
            self._render(severity, workflow_path, action_name, msg)

    def _render(self, severity: Severity, workflow_path: str, action_name: str, msg: str) -> None:
        name = escape(os.path.basename(workflow_path))
        header = (
            f"workflow=[bold]{name}[/bold]{' ' * (self._workflow_width - len(name))} "
            f"action=[bold]{escape(action_name)}[/bold]{' ' * (self._action_width - len(action_name))}"
        )
        text = escape(msg)
        if severity >= Severity.WARN:
            text = styled_severity(severity, text)
        if self._status is not None:
            self._status.update(f"{header}\n  ↳ {text}")
        else:
            self.console.print(f"{header} → {text}", highlight=False)

    # ------------------------------------------------------------------
    # diagnostics
    # ------------------------------------------------------------------

    @property
    def diagnostics(self) -> dict[str, list[DiagnosticRecord]]:
        with self._lock:
            return {path: list(records) for path, records in self._diagnostics.items()}

    def show_diagnostics(self) -> None:
        """Render the warnings and errors collected so far, grouped by file."""
        with self._lock:
            if not self._diagnostics:
                return
            self.console.print("[bold]diagnostics[/bold]")
            for path in sorted(self._diagnostics):
                self.console.print(f"  [bold]{escape(path)}[/bold]")
                for rec in self._diagnostics[path]:
                    line = f"    {str(rec.severity):>5} {rec.action:<{self._action_width}} → {rec.message}"
                    self.console.print(styled_severity(rec.severity, escape(line)), highlight=False)
            self.console.print()
            self._diagnostics.clear()
