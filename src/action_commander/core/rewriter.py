"""Rewrite workflow files to pin actions to commit hashes."""

from __future__ import annotations

import logging
import os
import re
import stat
import tempfile
from pathlib import Path
from typing import Callable

from action_commander.core.errors import RewriteError
from action_commander.core.update_checker import choose_pin, pin_comment
from action_commander.models import PinMode
from action_commander.models.workflow import Release, Root, Step, Workflow

logger = logging.getLogger(__name__)

RewriteStrategy = Callable[[Workflow, Step], Release]

_EOL = re.compile(r"\r?\n$")


def rewrite_strategy_for_mode(mode: PinMode) -> RewriteStrategy:
    def strategy(_workflow: Workflow, step: Step) -> Release:
        return choose_pin(mode, step)

    return strategy


def rewrite_line(line: str, step: Step, pin: Release) -> str:
    """Replace the ``uses:`` value of a single line, keeping its indentation and EOL.

    Any comment trailing the old reference is dropped.
    """
    before, sep, _ = line.partition("uses:")
    if not sep:
        raise RewriteError(f"expected `uses:` declaration on line {step.line_number}, got {line!r}")
    m = _EOL.search(line)
    eol = m.group(0) if m else ""
    out = f"{before}uses: {step.action.name}@{pin.commit_hash}"
    comment = pin_comment(step, pin)
    if comment:
        out += f" # {comment}"
    return out + eol


def rewrite_workflow(workflow: Workflow, strategy: RewriteStrategy) -> str:
    """Return the new content of a workflow file with every resolvable step pinned."""
    steps = {s.line_number: s for s in workflow.steps}
    with open(workflow.file_path, encoding="utf-8", newline="") as f:
        lines = f.readlines()

    out: list[str] = []
    for line_number, line in enumerate(lines):
        step = steps.get(line_number)
        if step is None:
            out.append(line)
            continue
        pin = strategy(workflow, step)
        if not pin.exists:
            logger.debug("skipping unresolved action %s", step.action.label)
            out.append(line)
            continue
        out.append(rewrite_line(line, step, pin))
    return "".join(out)


def atomic_write(path: Path, content: str) -> None:
    """Write a file atomically: write to temp, then rename over the original."""
    try:
        mode = stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        mode = None
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        if mode is not None:
            os.chmod(tmp, mode)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def rewrite_workflows(root: Root, strategy: RewriteStrategy) -> None:
    for workflow in root.sorted_workflows():
        try:
            content = rewrite_workflow(workflow, strategy)
        except (OSError, UnicodeDecodeError) as e:
            raise RewriteError(f"failed to read workflow {workflow.file_path}: {e}") from e
        logger.debug("writing pinned file %s", workflow.file_path)
        try:
            atomic_write(Path(workflow.file_path), content)
        except OSError as e:
            raise RewriteError(f"failed to atomically replace file {workflow.file_path}: {e}") from e
