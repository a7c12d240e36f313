"""Shared test fixtures."""

from __future__ import annotations

import io
import threading
from collections import Counter
from typing import Iterator

import pytest
from rich.console import Console

from action_commander.core.errors import NotFoundError
from action_commander.core.progress import ProgressLogger
from action_commander.models.workflow import Action, Release, Root, Step, Workflow


class FakeSource:
    """In-memory stand-in for the GitHub API, counting every lookup."""

    def __init__(
        self,
        refs: dict[tuple[str, str], str] | None = None,
        tags: dict[tuple[str, str], list[str]] | None = None,
        releases: dict[str, list[Release]] | None = None,
        errors: dict[tuple[str, str], Exception] | None = None,
    ):
        self.refs = refs or {}
        self.tags = tags or {}
        self.releases = releases or {}
        self.errors = errors or {}
        self.calls: Counter[tuple[str, str, str]] = Counter()
        self.consumed: Counter[str] = Counter()
        self._lock = threading.Lock()

    def _record(self, kind: str, repo: str, param: str) -> None:
        with self._lock:
            self.calls[(kind, repo, param)] += 1
        error = self.errors.get((kind, repo))
        if error is not None:
            raise error

    def resolve_ref(self, repo: str, ref: str) -> str:
        self._record("ref", repo, ref)
        try:
            return self.refs[(repo, ref)]
        except KeyError:
            raise NotFoundError(f"failed to resolve reference {ref}") from None

    def tags_for_commit(self, repo: str, commit_hash: str) -> list[str]:
        self._record("tags", repo, commit_hash)
        return self.tags.get((repo, commit_hash), [])

    def iter_releases(self, repo: str) -> Iterator[Release]:
        self._record("releases", repo, "")
        for release in self.releases.get(repo, []):
            with self._lock:
                self.consumed[repo] += 1
            yield release

    def count(self, kind: str) -> int:
        return sum(n for (k, _, _), n in self.calls.items() if k == kind)


def make_step(name: str, ref: str, line_number: int = 0) -> Step:
    return Step(line_number=line_number, action=Action(name=name, ref=ref))


def make_root(*workflows: tuple[str, list[Step]]) -> Root:
    root = Root()
    for path, steps in workflows:
        root.workflows[path] = Workflow(file_path=path, steps=steps)
    return root


@pytest.fixture
def example_source() -> FakeSource:
    """A repository with a v1 -> v2 upgrade path."""
    return FakeSource(
        refs={
            ("owner/repo", "v1.0.0"): "differenthash",
            ("owner/repo", "v1"): "differenthash",
            ("owner/repo", "main"): "mainhash",
            ("owner/other", "v3"): "otherhash",
        },
        tags={
            ("owner/repo", "differenthash"): ["v1.0.0", "v1"],
            ("owner/other", "otherhash"): ["v3.1.0", "v3"],
        },
        releases={
            "owner/repo": [
                Release("v2.0.0", "aaa111"),
                Release("v1.2.0", "bbb222"),
                Release("v1.1.0", "ccc333"),
                Release("v1.0.0", "differenthash"),
            ],
            "owner/other": [Release("v3.1.0", "otherhash")],
        },
    )


@pytest.fixture
def progress_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def progress(progress_output: io.StringIO) -> ProgressLogger:
    console = Console(file=progress_output, force_terminal=False, color_system=None, width=200)
    return ProgressLogger(console, fancy=False)
