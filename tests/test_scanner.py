"""Tests for action_commander.core.scanner."""

from __future__ import annotations

from pathlib import Path

import pytest

from action_commander.core.errors import PatternError
from action_commander.core.scanner import (
    find_workflows,
    is_selected,
    parse_action,
    scan_file,
    scan_workflows,
    validate_pattern,
)

WORKFLOW = """\
jobs:
  test:
    steps:
      - uses: actions/checkout@v4
      - name: Setup
        uses: actions/setup-go@v5.0.1 # pinned
      - uses: ./local-action
      - uses: docker://alpine:3.19
      - uses: slsa-framework/slsa-github-generator/.github/workflows/builder_go_slsa3.yml@v2.0.0
      - run: echo "uses: not/an@action"
"""


class TestParseAction:
    @pytest.mark.parametrize(
        ("line", "name", "ref"),
        [
            ("      - uses: actions/checkout@v4\n", "actions/checkout", "v4"),
            ("        uses: actions/setup-go@v5.0.1 # pinned\r\n", "actions/setup-go", "v5.0.1"),
            ("uses: owner/repo/sub/dir@main", "owner/repo/sub/dir", "main"),
            ("  - uses:   owner/repo@feature/branch-1", "owner/repo", "feature/branch-1"),
        ],
    )
    def test_matches(self, line: str, name: str, ref: str) -> None:
        action = parse_action(line)
        assert action is not None
        assert (action.name, action.ref) == (name, ref)

    @pytest.mark.parametrize(
        "line",
        [
            "      - uses: ./local-action",
            "      - uses: docker://alpine:3.19",
            "      - uses: actions/checkout",
            '      - run: echo "uses: not/an@action"',
            "# uses: actions/checkout@v4",
            "",
        ],
    )
    def test_ignores(self, line: str) -> None:
        assert parse_action(line) is None


class TestPatterns:
    @pytest.mark.parametrize("pattern", ["actions/checkout", "actions/*", "*"])
    def test_valid(self, pattern: str) -> None:
        validate_pattern(pattern)

    @pytest.mark.parametrize(
        ("pattern", "message"),
        [
            ("", "empty pattern not allowed"),
            ("actions/**", "multiple wildcards not supported"),
            ("*/checkout", "wildcards are only supported at the end of patterns"),
        ],
    )
    def test_invalid(self, pattern: str, message: str) -> None:
        with pytest.raises(PatternError, match=message):
            validate_pattern(pattern)

    def test_selection(self) -> None:
        assert is_selected("actions/checkout")
        assert is_selected("actions/checkout", selects=["actions/*"])
        assert not is_selected("docker/login", selects=["actions/*"])
        assert is_selected("actions/checkout", selects=["actions/checkout"])
        assert not is_selected("actions/checkout-extra", selects=["actions/checkout"])

    def test_exclude_wins(self) -> None:
        assert not is_selected("actions/checkout", selects=["actions/*"], excludes=["actions/checkout"])
        assert is_selected("actions/setup-go", selects=["actions/*"], excludes=["actions/checkout"])


class TestScan:
    def test_scan_file(self, tmp_path: Path) -> None:
        path = tmp_path / "ci.yml"
        path.write_text(WORKFLOW)
        workflow = scan_file(path)
        assert workflow.file_path == str(path)
        assert [(s.line_number, s.action.label) for s in workflow.steps] == [
            (3, "actions/checkout@v4"),
            (5, "actions/setup-go@v5.0.1"),
            (8, "slsa-framework/slsa-github-generator/.github/workflows/builder_go_slsa3.yml@v2.0.0"),
        ]

    def test_scan_with_selection(self, tmp_path: Path) -> None:
        path = tmp_path / "ci.yml"
        path.write_text(WORKFLOW)
        root = scan_workflows([path], selects=["actions/*"], excludes=["actions/setup-go"])
        assert [s.action.name for s in root.workflows[str(path)].steps] == ["actions/checkout"]

    def test_invalid_pattern_rejected_before_reading(self, tmp_path: Path) -> None:
        with pytest.raises(PatternError):
            scan_workflows([tmp_path / "missing.yml"], selects=["a*b"])


class TestFindWorkflows:
    def test_explicit_file(self, tmp_path: Path) -> None:
        path = tmp_path / "ci.yaml"
        path.write_text("")
        assert find_workflows([path]) == [path]

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            find_workflows([tmp_path / "nope"])

    def test_directory(self, tmp_path: Path) -> None:
        for name in ("b.yml", "a.yaml", "notes.txt"):
            (tmp_path / name).write_text("")
        assert find_workflows([tmp_path]) == [tmp_path / "a.yaml", tmp_path / "b.yml"]

    def test_git_repository_root(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        workflows = tmp_path / ".github" / "workflows"
        workflows.mkdir(parents=True)
        (workflows / "ci.yaml").write_text("")
        assert find_workflows([tmp_path]) == [workflows / "ci.yaml"]

    def test_default_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        workflows = tmp_path / ".github" / "workflows"
        workflows.mkdir(parents=True)
        (workflows / "release.yml").write_text("")
        monkeypatch.chdir(tmp_path)
        assert [p.name for p in find_workflows()] == ["release.yml"]

    def test_default_directory_missing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert find_workflows() == []

    def test_custom_workflow_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "ci" / "pipelines"
        custom.mkdir(parents=True)
        (custom / "build.yaml").write_text("")
        monkeypatch.chdir(tmp_path)
        assert find_workflows(workflow_dir=Path("ci") / "pipelines") == [Path("ci") / "pipelines" / "build.yaml"]

    def test_git_repository_custom_workflow_directory(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        custom = tmp_path / "pipelines"
        custom.mkdir()
        (custom / "build.yml").write_text("")
        assert find_workflows([tmp_path], workflow_dir="pipelines") == [custom / "build.yml"]
