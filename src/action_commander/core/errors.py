"""Exception hierarchy shared by the resolver, engine and CLI."""

from __future__ import annotations


class ActionCommanderError(Exception):
    """Base class for all expected failures."""


class ValidationError(ActionCommanderError):
    """Raised for bad input, before any network access."""


class InvalidRepositoryError(ValidationError):
    def __init__(self, repo: str):
        super().__init__(f'repository must be specified in "owner/repo" format, got "{repo}"')
        self.repo = repo


class PatternError(ValidationError):
    """Raised for a malformed --select/--exclude pattern."""


class GitHubError(ActionCommanderError):
    """Base class for errors returned by the GitHub APIs."""


class TransportError(GitHubError):
    pass


class AuthenticationError(GitHubError):
    pass


class NotFoundError(GitHubError):
    pass


class QueryError(GitHubError):
    pass


class ResolutionError(ActionCommanderError):
    """A step (or the whole pass, in strict mode) could not be resolved."""


class RewriteError(ActionCommanderError):
    pass


class OperationCancelled(ActionCommanderError):
    """Work was abandoned because the resolution pass is shutting down."""
