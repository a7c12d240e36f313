"""Workflow, step, action and release models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Release:
    """A resolved (version, commit) pair."""

    version: str = ""
    commit_hash: str = ""

    @property
    def exists(self) -> bool:
        return bool(self.version or self.commit_hash)

    def __str__(self) -> str:
        if self.version:
            return f"{self.commit_hash} @ {self.version}"
        if self.commit_hash:
            return self.commit_hash
        return "<unknown version>"


@dataclass(frozen=True)
class UpgradeCandidates:
    # absolute latest release
    latest: Release = field(default_factory=Release)
    # latest release sharing the current major version, presumed compatible
    latest_compatible: Release = field(default_factory=Release)

    @property
    def empty(self) -> bool:
        return not (self.latest.exists or self.latest_compatible.exists)


@dataclass
class Action:
    """An action reference as found in a step's ``uses:`` directive.

    ``release`` and ``upgrade_candidates`` are filled in by the engine.
    """

    name: str
    ref: str
    release: Release = field(default_factory=Release)
    upgrade_candidates: UpgradeCandidates = field(default_factory=UpgradeCandidates)

    @property
    def repo(self) -> str:
        """The ``owner/repo`` hosting the action.

        Actions may live in a subdirectory (``owner/repo/path/to/action``) or
        be reusable workflows (``owner/repo/.github/workflows/x.yml``).
        """
        return "/".join(self.name.split("/")[:2])

    @property
    def label(self) -> str:
        return f"{self.name}@{self.ref}"


@dataclass
class Step:
    line_number: int
    action: Action


@dataclass
class Workflow:
    file_path: str
    steps: list[Step] = field(default_factory=list)


@dataclass
class Root:
    workflows: dict[str, Workflow] = field(default_factory=dict)

    @property
    def workflow_count(self) -> int:
        return len(self.workflows)

    @property
    def step_count(self) -> int:
        return sum(len(w.steps) for w in self.workflows.values())

    def sorted_workflows(self) -> list[Workflow]:
        return [self.workflows[key] for key in sorted(self.workflows)]
