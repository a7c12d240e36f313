"""Find workflow files and extract the actions their steps use."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Sequence

from action_commander.core.errors import PatternError
from action_commander.models.workflow import Action, Root, Step, Workflow

logger = logging.getLogger(__name__)

WORKFLOW_DIR = Path(".github") / "workflows"
WORKFLOW_GLOB = "*.y*ml"  # matches *.yml and *.yaml

_USES = re.compile(r"^\s*-?\s*uses:\s*([\w\-]+/[\w\-]+(?:/[\w\-./]+)?)@([\w\-./]+)(?:\s*#.*)?$")


def find_workflows(paths: Sequence[str | Path] = (), workflow_dir: str | Path = WORKFLOW_DIR) -> list[Path]:
    """Resolve CLI path arguments to a list of workflow files.

    With no paths, ``workflow_dir`` (relative to the current directory) is
    searched.  A directory contributes its own YAML files and, when it is the
    root of a git repository, the YAML files of its ``workflow_dir``.
    """
    workflow_dir = Path(workflow_dir)
    if not paths:
        return _find_in_dir(workflow_dir)

    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            raise FileNotFoundError(f"no such file or directory: {path}")
        if path.is_dir():
            if (path / ".git").is_dir():
                files.extend(_find_in_dir(path / workflow_dir))
            files.extend(_find_in_dir(path))
        else:
            files.append(path)
    return files


def _find_in_dir(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.glob(WORKFLOW_GLOB) if p.is_file())


def parse_action(line: str) -> Action | None:
    """Parse a ``uses: owner/repo@ref`` line, returning None for anything else."""
    m = _USES.match(line.rstrip("\r\n"))
    if not m:
        return None
    return Action(name=m.group(1), ref=m.group(2))


def validate_pattern(pattern: str) -> None:
    """Check an action selection pattern (exact name, or prefix ending in ``*``)."""
    if not pattern:
        raise PatternError("empty pattern not allowed")
    wildcards = pattern.count("*")
    if wildcards > 1:
        raise PatternError(f'multiple wildcards not supported, got: "{pattern}"')
    if wildcards == 1 and not pattern.endswith("*"):
        raise PatternError(f'wildcards are only supported at the end of patterns, got: "{pattern}"')


def matches_pattern(name: str, pattern: str) -> bool:
    if pattern.endswith("*"):
        return name.startswith(pattern[:-1])
    return name == pattern


def is_selected(name: str, selects: Sequence[str] = (), excludes: Sequence[str] = ()) -> bool:
    """Excludes always win; with no selects every remaining action is selected."""
    if any(matches_pattern(name, p) for p in excludes):
        return False
    if not selects:
        return True
    return any(matches_pattern(name, p) for p in selects)


def scan_file(path: str | Path, selects: Sequence[str] = (), excludes: Sequence[str] = ()) -> Workflow:
    steps: list[Step] = []
    with open(path, encoding="utf-8", newline="") as f:
        for line_number, line in enumerate(f):
            action = parse_action(line)
            if action is None or not is_selected(action.name, selects, excludes):
                continue
            steps.append(Step(line_number=line_number, action=action))
    logger.debug("scanned %s: %d step(s)", path, len(steps))
    return Workflow(file_path=str(path), steps=steps)


def scan_workflows(
    files: Sequence[str | Path],
    selects: Sequence[str] = (),
    excludes: Sequence[str] = (),
) -> Root:
    for pattern in (*selects, *excludes):
        validate_pattern(pattern)
    root = Root()
    for f in files:
        workflow = scan_file(f, selects, excludes)
        root.workflows[workflow.file_path] = workflow
    return root
