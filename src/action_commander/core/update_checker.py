"""Choose upgrade candidates and the release to pin for each step."""

from __future__ import annotations

from typing import Iterable

from action_commander.models import PinMode
from action_commander.models.workflow import Release, Step, UpgradeCandidates
from action_commander.utils.version_compare import choose_newer, is_upgrade_candidate, major


def select_upgrade_candidates(current: Release, candidates: Iterable[Release]) -> UpgradeCandidates:
    """Find the latest and latest same-major releases at or above ``current``.

    ``candidates`` is consumed lazily and iteration stops at the first release
    older than ``current``: releases are expected newest first, so anything
    after that point is assumed to be older too.  A repository whose tags were
    created out of version order may therefore under-report its upgrades.
    """
    if not current.version:
        return UpgradeCandidates()

    current_major = major(current.version)
    latest = Release()
    latest_compatible = Release()

    for candidate in candidates:
        if not is_upgrade_candidate(current.version, candidate.version):
            break
        latest = choose_newer(latest, candidate)
        if major(candidate.version) == current_major:
            latest_compatible = choose_newer(latest_compatible, candidate)

    return UpgradeCandidates(latest=latest, latest_compatible=latest_compatible)


def choose_pin(mode: PinMode, step: Step) -> Release:
    """Pick the release to write back for a step under the given mode.

    Falls back to the current release when the wanted candidate is missing;
    the result is absent only if nothing was ever resolved.
    """
    current = step.action.release
    candidates = step.action.upgrade_candidates
    if mode is PinMode.COMPAT:
        return candidates.latest_compatible if candidates.latest_compatible.exists else current
    if mode is PinMode.LATEST:
        return candidates.latest if candidates.latest.exists else current
    if mode is PinMode.CURRENT:
        return current
    raise ValueError(f"invalid pin mode: {mode!r}")


def pin_comment(step: Step, pin: Release) -> str:
    """Return the inline comment written after a pinned hash ("" for none)."""
    if pin.version:
        return pin.version
    if step.action.ref != pin.commit_hash:
        return f"ref:{step.action.ref}"
    return ""
