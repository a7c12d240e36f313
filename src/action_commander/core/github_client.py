"""GitHub REST and GraphQL API wrapper."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterator

import httpx

from action_commander import __version__
from action_commander.core.errors import (
    AuthenticationError,
    InvalidRepositoryError,
    NotFoundError,
    QueryError,
    TransportError,
)
from action_commander.models.workflow import Release
from action_commander.utils.version_compare import is_valid, sort_descending

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
PAGE_SIZE = 100

_HEX = re.compile(r"^[A-Fa-f0-9]+$")

RELEASES_QUERY = """
query($owner: String!, $repo: String!, $cursor: String, $pageSize: Int!) {
  repository(owner: $owner, name: $repo) {
    releases(first: $pageSize, after: $cursor, orderBy: {field: CREATED_AT, direction: DESC}) {
      pageInfo { hasNextPage endCursor }
      nodes {
        tagName
        url
        tag { target { oid ... on Tag { target { oid } } } }
      }
    }
  }
}
"""

VERSION_TAGS_QUERY = """
query($owner: String!, $repo: String!, $cursor: String, $pageSize: Int!) {
  repository(owner: $owner, name: $repo) {
    refs(refPrefix: "refs/tags/", first: $pageSize, after: $cursor) {
      pageInfo { hasNextPage endCursor }
      nodes {
        name
        target { oid ... on Tag { target { oid } } }
      }
    }
  }
}
"""


def split_repo(repo: str) -> tuple[str, str]:
    """Split ``owner/repo`` into its parts, validating the format."""
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise InvalidRepositoryError(repo)
    return parts[0], parts[1]


def is_hex(ref: str) -> bool:
    return bool(_HEX.match(ref))


def _field(payload: Any, *keys: str) -> Any:
    """Walk nested response objects, raising TransportError on an unexpected shape."""
    value = payload
    for key in keys:
        if not isinstance(value, dict) or key not in value:
            raise TransportError(f"malformed response: missing field {'.'.join(keys)}")
        value = value[key]
    return value


def _target_oids(target: Any) -> tuple[str, str]:
    """Return (direct oid, dereferenced oid) for a lightweight or annotated tag."""
    target = target if isinstance(target, dict) else {}
    nested = target.get("target")
    nested = nested if isinstance(nested, dict) else {}
    return target.get("oid", "") or "", nested.get("oid", "") or ""


class GitHubClient:
    """Thin wrapper around the GitHub APIs needed to resolve action versions."""

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._http: httpx.Client | None = http_client

    @property
    def http(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(
                base_url=self.api_url,
                timeout=self.timeout,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/vnd.github+json",
                    "User-Agent": f"action-commander/{__version__}",
                },
            )
        return self._http

    def close(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # transport
    # ------------------------------------------------------------------

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = self.http.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise TransportError(f"request failure: {e}") from e
        logger.debug(
            "github: %s %s status=%d ratelimit.remaining=%s ratelimit.used=%s ratelimit.reset=%s",
            method,
            path,
            resp.status_code,
            resp.headers.get("x-ratelimit-remaining", ""),
            resp.headers.get("x-ratelimit-used", ""),
            resp.headers.get("x-ratelimit-reset", ""),
        )
        return resp

    @staticmethod
    def _decode(resp: httpx.Response) -> dict:
        try:
            payload = resp.json()
        except ValueError as e:
            # covers both invalid JSON and bodies that are not valid UTF-8
            raise TransportError(f"failed to decode response: {e}") from e
        if not isinstance(payload, dict):
            raise TransportError(f"malformed response: expected an object, got {type(payload).__name__}")
        return payload

    def _rest(self, path: str) -> dict:
        resp = self._send("GET", path)
        if resp.status_code == 401:
            raise AuthenticationError("invalid auth token")
        if resp.status_code == 403:
            raise AuthenticationError("access denied")
        if resp.status_code in (404, 422):
            raise NotFoundError(f"not found: {path}")
        if resp.status_code >= 400:
            raise TransportError(f"http error: {resp.status_code} {resp.reason_phrase}")
        return self._decode(resp)

    def _graphql(self, query: str, variables: dict[str, Any]) -> dict:
        resp = self._send("POST", "/graphql", json={"query": query, "variables": variables})
        if resp.status_code >= 400:
            raise TransportError(f"graphql transport error: {resp.status_code} {resp.reason_phrase}")
        payload = self._decode(resp)
        errors = [e for e in payload.get("errors") or [] if isinstance(e, dict)]
        if errors:
            messages = [e.get("message", "") for e in errors]
            if any(e.get("type") == "NOT_FOUND" for e in errors):
                raise NotFoundError(f"query errors: {messages}")
            raise QueryError(f"query errors: {messages}")
        data = payload.get("data")
        if not isinstance(data, dict) or data.get("repository") is None:
            raise NotFoundError(f"repository {variables.get('owner')}/{variables.get('repo')} not found")
        return data

    # ------------------------------------------------------------------
    # version lookups
    # ------------------------------------------------------------------

    def validate_auth(self) -> str:
        """Check the token by fetching the authenticated user's login."""
        user = self._rest("/user")
        return _field(user, "login")

    def resolve_ref(self, repo: str, ref: str) -> str:
        """Return the full commit hash for a (short) hash, branch or tag name."""
        owner, name = split_repo(repo)
        base = f"/repos/{owner}/{name}"

        # Each interpretation is tried in turn; only "not found" moves on to
        # the next one.
        if is_hex(ref):
            try:
                return _field(self._rest(f"{base}/commits/{ref}"), "sha")
            except NotFoundError:
                pass

        try:
            return _field(self._rest(f"{base}/git/ref/heads/{ref}"), "object", "sha")
        except NotFoundError:
            pass

        try:
            obj = _field(self._rest(f"{base}/git/ref/tags/{ref}"), "object")
        except NotFoundError:
            pass
        else:
            if _field(obj, "type") == "commit":
                return _field(obj, "sha")
            # annotated tag: one more hop from the tag object to its commit
            try:
                return _field(self._rest(f"{base}/git/tags/{_field(obj, 'sha')}"), "object", "sha")
            except NotFoundError:
                pass

        raise NotFoundError(f"failed to resolve reference {ref}")

    def tags_for_commit(self, repo: str, commit_hash: str) -> list[str]:
        """Return semver tags pointing at a commit, newest and most specific first."""
        owner, name = split_repo(repo)
        variables: dict[str, Any] = {"owner": owner, "repo": name, "cursor": None, "pageSize": PAGE_SIZE}
        tags: list[str] = []
        while True:
            refs = _field(self._graphql(VERSION_TAGS_QUERY, variables), "repository", "refs")
            for node in _field(refs, "nodes") or []:
                tag_name = _field(node, "name")
                if not isinstance(tag_name, str) or not is_valid(tag_name):
                    continue
                if commit_hash and commit_hash in _target_oids(node.get("target")):
                    tags.append(tag_name)
            if not _field(refs, "pageInfo", "hasNextPage"):
                break
            variables["cursor"] = _field(refs, "pageInfo", "endCursor")
        return sort_descending(tags)

    def iter_releases(self, repo: str) -> Iterator[Release]:
        """Lazily yield every release of a repository, most recently created first."""
        owner, name = split_repo(repo)
        variables: dict[str, Any] = {"owner": owner, "repo": name, "cursor": None, "pageSize": PAGE_SIZE}
        while True:
            releases = _field(self._graphql(RELEASES_QUERY, variables), "repository", "releases")
            for node in _field(releases, "nodes") or []:
                tag = _field(node, "tag") or {}
                direct, nested = _target_oids(tag.get("target") if isinstance(tag, dict) else None)
                version = _field(node, "tagName")
                if not isinstance(version, str):
                    raise TransportError("malformed response: release tagName is not a string")
                yield Release(version=version, commit_hash=nested or direct)
            if not _field(releases, "pageInfo", "hasNextPage"):
                return
            variables["cursor"] = _field(releases, "pageInfo", "endCursor")
