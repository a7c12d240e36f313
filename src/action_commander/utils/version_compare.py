"""Semver comparison utilities.

Tags are only treated as semantic versions in their ``v``-prefixed form
(``v1.2.3``, ``v1.2.3-rc.1``).  The shorthand forms ``v1`` and ``v1.2`` are
accepted as ``v1.0.0`` and ``v1.2.0``, since floating major tags are how most
actions are published.
"""

from __future__ import annotations

import functools
import re

import semver

from action_commander.models.workflow import Release

_SHORTHAND = re.compile(r"^v(0|[1-9]\d*)(?:\.(0|[1-9]\d*))?$")


def parse_version(v: str) -> semver.Version | None:
    """Parse a ``v``-prefixed version string, returning None on failure."""
    if not v or not v.startswith("v"):
        return None
    m = _SHORTHAND.match(v)
    if m:
        return semver.Version(major=int(m.group(1)), minor=int(m.group(2) or 0))
    try:
        # build metadata never takes part in precedence
        return semver.Version.parse(v[1:]).replace(build=None)
    except (ValueError, TypeError):
        return None


def is_valid(v: str) -> bool:
    return parse_version(v) is not None


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings, returning -1, 0 or 1.

    An invalid version is considered less than any valid one, and all invalid
    versions compare equal to each other.
    """
    pa = parse_version(a)
    pb = parse_version(b)
    if pa is None and pb is None:
        return 0
    if pa is None:
        return -1
    if pb is None:
        return 1
    return pa.compare(pb)


def major(v: str) -> str:
    """Return the major version prefix (e.g. ``v2``), or "" if invalid."""
    parsed = parse_version(v)
    if parsed is None:
        return ""
    return f"v{parsed.major}"


def sort_descending(versions: list[str]) -> list[str]:
    """Sort versions newest first.

    Equal versions are ordered by their string form so the most specific tag
    (``v1.0.0`` over ``v1``) comes first.
    """

    def _cmp(a: str, b: str) -> int:
        c = compare_versions(a, b)
        if c:
            return c
        return (a > b) - (a < b)

    return sorted(versions, key=functools.cmp_to_key(_cmp), reverse=True)


def is_upgrade_candidate(current: str, candidate: str) -> bool:
    """Return True if candidate is equal to or newer than current.

    Equal versions count as candidates so that a release which is already the
    latest selects itself.  A current version that is not semver at all (a
    branch name, say) is worse than any tagged release.
    """
    current_valid = is_valid(current)
    candidate_valid = is_valid(candidate)
    if current_valid and candidate_valid:
        return compare_versions(current, candidate) <= 0
    return candidate_valid and not current_valid


def choose_newer(a: Release, b: Release) -> Release:
    """Return whichever release has the greater version; ties favor ``b``."""
    if compare_versions(a.version, b.version) == 1:
        return a
    return b
