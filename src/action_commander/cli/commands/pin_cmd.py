"""acom pin / acom upgrade - Rewrite workflows to pinned commit hashes."""

from __future__ import annotations

from typing import Sequence

from action_commander.cli.common import connect, fail, load_settings, make_engine, scan, setup_logging, validate_patterns
from action_commander.cli.options import (
    ColorOption,
    ExcludeOption,
    GitHubTokenOption,
    ModeOption,
    Paths,
    PathsArgument,
    Patterns,
    SelectOption,
    StrictOption,
    VerboseOption,
    WorkersOption,
)
from action_commander.config.settings import Settings
from action_commander.core.errors import ActionCommanderError
from action_commander.models import PinMode

UPGRADE_MODES = (PinMode.COMPAT.value, PinMode.LATEST.value)


def _run(mode: PinMode, settings: Settings, paths: Sequence[str], selects: Sequence[str], excludes: Sequence[str]) -> None:
    validate_patterns(selects, excludes)
    setup_logging(settings.verbose)

    client = connect(settings)
    with client:
        root = scan(paths, selects, excludes, settings.workflow_dir)
        if root is None:
            return
        engine = make_engine(root, client, settings)
        try:
            engine.pin(mode)
        except KeyboardInterrupt:
            engine.cancel()
            fail("interrupted")
        except ActionCommanderError as e:
            fail(str(e))


def pin(
    paths: Paths = PathsArgument,
    github_token: str = GitHubTokenOption,
    select: Patterns = SelectOption,
    exclude: Patterns = ExcludeOption,
    workers: int = WorkersOption,
    strict: bool = StrictOption,
    verbose: bool = VerboseOption,
    color: str = ColorOption,
) -> None:
    """Pin current action versions to immutable commit hashes.

    \b
    Examples:
      acom pin
      acom pin --exclude "actions/*"
      acom pin .github/workflows/ci.yaml
    """
    settings = load_settings(github_token, workers, strict, verbose, color)
    _run(PinMode.CURRENT, settings, paths or [], select or [], exclude or [])


def upgrade(
    paths: Paths = PathsArgument,
    mode: str = ModeOption,
    github_token: str = GitHubTokenOption,
    select: Patterns = SelectOption,
    exclude: Patterns = ExcludeOption,
    workers: int = WorkersOption,
    strict: bool = StrictOption,
    verbose: bool = VerboseOption,
    color: str = ColorOption,
) -> None:
    """Upgrade and re-pin action versions according to --mode.

    \b
    Modes:
      compat (default)  newest release with the same major version
      latest            newest release regardless of major version

    \b
    Examples:
      acom upgrade
      acom upgrade --mode=latest --select actions/setup-go
    """
    if mode not in UPGRADE_MODES:
        fail('--mode/-m must be one of "compat" or "latest"')
    settings = load_settings(github_token, workers, strict, verbose, color)
    _run(PinMode.from_str(mode), settings, paths or [], select or [], exclude or [])
