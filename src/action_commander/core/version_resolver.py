"""Cached version resolution on top of a remote release source."""

from __future__ import annotations

import logging
import threading
from typing import Iterator, Protocol

from action_commander.core.errors import OperationCancelled
from action_commander.core.github_client import split_repo
from action_commander.core.request_cache import RequestCache
from action_commander.core.update_checker import select_upgrade_candidates
from action_commander.models.workflow import Release, UpgradeCandidates

logger = logging.getLogger(__name__)


class ReleaseSource(Protocol):
    """The remote lookups needed to resolve action versions."""

    def resolve_ref(self, repo: str, ref: str) -> str:
        ...

    def tags_for_commit(self, repo: str, commit_hash: str) -> list[str]:
        ...

    def iter_releases(self, repo: str) -> Iterator[Release]:
        ...


def _check_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise OperationCancelled("resolution cancelled")


class VersionResolver:
    """Memoizes each kind of lookup against a :class:`ReleaseSource`.

    The three caches are independent because their keys and failure
    patterns differ: ``(repo, ref)``, ``(repo, commit)`` and
    ``(repo, version)``.
    """

    def __init__(self, source: ReleaseSource):
        self.source = source
        self.ref_cache: RequestCache[str] = RequestCache("ref-cache")
        self.tag_cache: RequestCache[list[str]] = RequestCache("tag-cache")
        self.upgrade_cache: RequestCache[UpgradeCandidates] = RequestCache("upgrade-cache")

    def resolve_ref(self, repo: str, ref: str, cancel: threading.Event | None = None) -> str:
        split_repo(repo)
        _check_cancelled(cancel)
        return self.ref_cache.do((repo, ref), lambda: self.source.resolve_ref(repo, ref))

    def tags_for_commit(self, repo: str, commit_hash: str, cancel: threading.Event | None = None) -> list[str]:
        split_repo(repo)
        _check_cancelled(cancel)
        tags = self.tag_cache.do((repo, commit_hash), lambda: self.source.tags_for_commit(repo, commit_hash))
        return list(tags)

    def get_upgrade_candidates(
        self,
        repo: str,
        current: Release,
        cancel: threading.Event | None = None,
    ) -> UpgradeCandidates:
        """Return upgrade candidates for ``current``, cached per (repo, version).

        Without a resolved version there is nothing to compare against, so no
        lookup is made at all.
        """
        if not current.version:
            return UpgradeCandidates()
        split_repo(repo)
        _check_cancelled(cancel)
        return self.upgrade_cache.do(
            (repo, current.version),
            lambda: select_upgrade_candidates(current, self._releases(repo, cancel)),
        )

    def _releases(self, repo: str, cancel: threading.Event | None) -> Iterator[Release]:
        for release in self.source.iter_releases(repo):
            _check_cancelled(cancel)
            yield release
