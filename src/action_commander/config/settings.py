"""Application configuration and defaults."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

COLOR_CHOICES = ("auto", "always", "never")

Getenv = Callable[[str], "str | None"]


def _default_workers() -> int:
    return os.cpu_count() or 1


def _truthy(value: str | None) -> bool:
    return bool(value) and value not in ("0", "false", "False")


@dataclass
class Settings:
    github_token: str = ""
    api_url: str = "https://api.github.com"
    request_timeout: float = 30.0
    workers: int = field(default_factory=_default_workers)
    strict: bool = False
    verbose: bool = False
    color: str = "auto"
    no_color: bool = False
    workflow_dir: Path = Path(".github") / "workflows"

    @classmethod
    def from_env(cls, getenv: Getenv = os.environ.get) -> Settings:
        """Build settings from ``GITHUB_TOKEN``, ``GITHUB_API_URL``, ``VERBOSE`` and ``COLOR``."""
        settings = cls()
        settings.github_token = getenv("GITHUB_TOKEN") or ""
        settings.api_url = getenv("GITHUB_API_URL") or settings.api_url
        settings.verbose = _truthy(getenv("VERBOSE"))
        settings.color = getenv("COLOR") or settings.color
        settings.no_color = getenv("NO_COLOR") is not None
        return settings

    def validate(self) -> None:
        if self.color not in COLOR_CHOICES:
            raise ValueError(f"--color must be one of: {', '.join(COLOR_CHOICES)}")
        if not self.github_token:
            raise ValueError("either --github-token/-g flag or GITHUB_TOKEN env var are required")

    @property
    def fancy_output(self) -> bool:
        """Whether progress is drawn in place; never alongside verbose logs."""
        if self.color == "always":
            return True
        if self.color == "never":
            return False
        return sys.stderr.isatty() and not self.no_color and not self.verbose
