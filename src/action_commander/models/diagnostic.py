"""Diagnostic result models."""

from __future__ import annotations

from dataclasses import dataclass

from action_commander.models import Severity


@dataclass
class DiagnosticRecord:
    severity: Severity
    workflow: str
    action: str
    message: str
