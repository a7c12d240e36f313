"""Report models consumed by the ``list`` output layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from action_commander.models.workflow import Release, Step


@dataclass
class StepReport:
    action: str
    ref: str
    current: Release
    latest: Release
    latest_compatible: Release

    @property
    def resolved(self) -> bool:
        return self.current.exists

    @property
    def has_candidates(self) -> bool:
        return self.latest.exists or self.latest_compatible.exists

    @property
    def is_latest(self) -> bool:
        return self.resolved and self.current == self.latest

    @property
    def is_latest_compatible(self) -> bool:
        return self.resolved and self.current == self.latest_compatible

    @property
    def status(self) -> str:
        if not self.resolved:
            return "unresolved"
        if not self.has_candidates:
            return "no releases"
        if self.is_latest:
            return "up to date"
        if self.latest_compatible.exists and not self.is_latest_compatible:
            return "compat upgrade"
        return "major upgrade"

    @classmethod
    def from_step(cls, step: Step) -> StepReport:
        candidates = step.action.upgrade_candidates
        return cls(
            action=step.action.name,
            ref=step.action.ref,
            current=step.action.release,
            latest=candidates.latest,
            latest_compatible=candidates.latest_compatible,
        )


@dataclass
class WorkflowReport:
    file_path: str
    steps: list[StepReport] = field(default_factory=list)
