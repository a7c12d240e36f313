"""Plumbing shared by the list, pin and upgrade commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Sequence

import typer
from rich.console import Console
from rich.logging import RichHandler

from action_commander.config.settings import Settings
from action_commander.core.engine import Engine
from action_commander.core.errors import GitHubError, PatternError
from action_commander.core.github_client import GitHubClient
from action_commander.core.progress import ProgressLogger
from action_commander.core.scanner import WORKFLOW_DIR, find_workflows, scan_workflows, validate_pattern
from action_commander.core.version_resolver import VersionResolver
from action_commander.models.workflow import Root

err_console = Console(stderr=True)


def fail(msg: str) -> NoReturn:
    err_console.print(f"Error: {msg}", markup=False, highlight=False, soft_wrap=True)
    raise typer.Exit(1)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def load_settings(
    github_token: str | None,
    workers: int | None,
    strict: bool,
    verbose: bool,
    color: str | None,
) -> Settings:
    """Merge command-line flags over environment-derived settings and validate them."""
    settings = Settings.from_env()
    if github_token:
        settings.github_token = github_token
    if workers is not None:
        settings.workers = workers
    settings.strict = strict
    settings.verbose = verbose or settings.verbose
    if color:
        settings.color = color
    try:
        settings.validate()
    except ValueError as e:
        fail(str(e))
    return settings


def validate_patterns(selects: Sequence[str], excludes: Sequence[str]) -> None:
    for flag, patterns in (("--select", selects), ("--exclude", excludes)):
        for pattern in patterns:
            try:
                validate_pattern(pattern)
            except PatternError as e:
                fail(f"invalid {flag} pattern: {e}")


def scan(
    paths: Sequence[str],
    selects: Sequence[str],
    excludes: Sequence[str],
    workflow_dir: str | Path = WORKFLOW_DIR,
) -> Root | None:
    """Find and scan workflow files; None means there was nothing to scan."""
    try:
        files = find_workflows(paths, workflow_dir)
    except OSError as e:
        fail(f"error finding workflow files: {e}")
    if not files:
        err_console.print("[yellow]warning: no workflows found[/yellow]")
        return None
    try:
        return scan_workflows(files, selects, excludes)
    except (OSError, UnicodeDecodeError) as e:
        fail(f"failed to scan workflow files: {e}")


def connect(settings: Settings) -> GitHubClient:
    client = GitHubClient(settings.github_token, api_url=settings.api_url, timeout=settings.request_timeout)
    try:
        client.validate_auth()
    except GitHubError as e:
        client.close()
        fail(f"GitHub authentication failed: {e}")
    return client


def make_engine(root: Root, client: GitHubClient, settings: Settings) -> Engine:
    return Engine(
        root,
        VersionResolver(client),
        workers=settings.workers,
        strict=settings.strict,
        progress=ProgressLogger(err_console, fancy=settings.fancy_output),
    )
