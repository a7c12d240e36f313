"""Tests for action_commander.core.update_checker."""

from __future__ import annotations

from typing import Iterator

import pytest

from action_commander.core.update_checker import choose_pin, pin_comment, select_upgrade_candidates
from action_commander.models import PinMode
from action_commander.models.workflow import Release, UpgradeCandidates

from conftest import make_step

RELEASES = [
    Release("v2.0.0", "aaa111"),
    Release("v1.2.0", "bbb222"),
    Release("v1.1.0", "ccc333"),
    Release("v1.0.0", "ddd444"),
]


class TestSelectUpgradeCandidates:
    def test_latest_and_compatible(self) -> None:
        result = select_upgrade_candidates(Release("v1.0.0", "ddd444"), RELEASES)
        assert result.latest == Release("v2.0.0", "aaa111")
        assert result.latest_compatible == Release("v1.2.0", "bbb222")

    def test_current_is_already_latest(self) -> None:
        current = Release("v2.0.0", "aaa111")
        result = select_upgrade_candidates(current, RELEASES)
        assert result.latest == current
        assert result.latest_compatible == current

    def test_missing_version_does_not_consume_stream(self) -> None:
        consumed = []

        def releases() -> Iterator[Release]:
            for r in RELEASES:
                consumed.append(r)
                yield r

        assert select_upgrade_candidates(Release(commit_hash="abc"), releases()) == UpgradeCandidates()
        assert consumed == []

    def test_stops_at_first_older_release(self) -> None:
        """Anything after the first older release is never inspected."""
        consumed = []

        def releases() -> Iterator[Release]:
            for r in [Release("v1.1.0", "a"), Release("v0.9.0", "b"), Release("v3.0.0", "c")]:
                consumed.append(r)
                yield r

        result = select_upgrade_candidates(Release("v1.0.0", "x"), releases())
        assert result.latest == Release("v1.1.0", "a")
        assert len(consumed) == 2

    def test_non_semver_release_stops_iteration(self) -> None:
        result = select_upgrade_candidates(
            Release("v1.0.0", "x"),
            [Release("nightly", "n"), Release("v2.0.0", "a")],
        )
        assert result.empty

    def test_no_compatible_release(self) -> None:
        result = select_upgrade_candidates(Release("v0.5.0", "x"), [Release("v1.0.0", "a")])
        assert result.latest == Release("v1.0.0", "a")
        assert not result.latest_compatible.exists

    def test_equal_versions_prefer_later_observed(self) -> None:
        result = select_upgrade_candidates(
            Release("v1.0.0", "x"),
            [Release("v1.1.0", "first"), Release("v1.1.0", "second")],
        )
        assert result.latest.commit_hash == "second"
        assert result.latest_compatible.commit_hash == "second"

    def test_empty_stream(self) -> None:
        assert select_upgrade_candidates(Release("v1.0.0", "x"), []).empty


class TestChoosePin:
    def _step(self, candidates: UpgradeCandidates):
        step = make_step("owner/repo", "v1")
        step.action.release = Release("v1.0.0", "ddd444")
        step.action.upgrade_candidates = candidates
        return step

    def test_modes(self) -> None:
        step = self._step(UpgradeCandidates(latest=RELEASES[0], latest_compatible=RELEASES[1]))
        assert choose_pin(PinMode.CURRENT, step) == Release("v1.0.0", "ddd444")
        assert choose_pin(PinMode.COMPAT, step) == RELEASES[1]
        assert choose_pin(PinMode.LATEST, step) == RELEASES[0]

    @pytest.mark.parametrize("mode", [PinMode.COMPAT, PinMode.LATEST])
    def test_falls_back_to_current(self, mode: PinMode) -> None:
        step = self._step(UpgradeCandidates())
        assert choose_pin(mode, step) == Release("v1.0.0", "ddd444")

    def test_invalid_mode(self) -> None:
        with pytest.raises(ValueError):
            choose_pin("bogus", self._step(UpgradeCandidates()))  # type: ignore[arg-type]


class TestPinComment:
    def test_version_comment(self) -> None:
        assert pin_comment(make_step("owner/repo", "main"), Release("v1.0.0", "abc")) == "v1.0.0"

    def test_ref_comment_when_unversioned(self) -> None:
        assert pin_comment(make_step("owner/repo", "main"), Release(commit_hash="abc")) == "ref:main"

    def test_no_comment_when_ref_is_hash(self) -> None:
        assert pin_comment(make_step("owner/repo", "abc"), Release(commit_hash="abc")) == ""
