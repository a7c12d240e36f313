"""acom list - List current action versions and available upgrades."""

from __future__ import annotations

from action_commander.cli.common import connect, fail, load_settings, make_engine, scan, setup_logging, validate_patterns
from action_commander.cli.options import (
    ColorOption,
    ExcludeOption,
    GitHubTokenOption,
    OutputOption,
    Paths,
    PathsArgument,
    Patterns,
    SelectOption,
    StrictOption,
    VerboseOption,
    WorkersOption,
)
from action_commander.core.errors import ActionCommanderError
from action_commander.output.formatters import output_reports

OUTPUT_CHOICES = ("table", "json", "yaml")


def list_actions(
    paths: Paths = PathsArgument,
    output: str = OutputOption,
    github_token: str = GitHubTokenOption,
    select: Patterns = SelectOption,
    exclude: Patterns = ExcludeOption,
    workers: int = WorkersOption,
    strict: bool = StrictOption,
    verbose: bool = VerboseOption,
    color: str = ColorOption,
) -> None:
    """List current action versions and available upgrades.

    \b
    Examples:
      acom list
      acom list .github/workflows/ci.yaml
      acom list --select actions/setup-go
    """
    settings = load_settings(github_token, workers, strict, verbose, color)
    if output not in OUTPUT_CHOICES:
        fail(f"--output/-o must be one of: {', '.join(OUTPUT_CHOICES)}")
    selects, excludes = select or [], exclude or []
    validate_patterns(selects, excludes)
    setup_logging(settings.verbose)

    client = connect(settings)
    with client:
        root = scan(paths or [], selects, excludes, settings.workflow_dir)
        if root is None:
            return
        engine = make_engine(root, client, settings)
        try:
            reports = engine.list_updates()
        except KeyboardInterrupt:
            engine.cancel()
            fail("interrupted")
        except ActionCommanderError as e:
            fail(str(e))

    output_reports(reports, output)
