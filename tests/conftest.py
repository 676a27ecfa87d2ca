from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path
from typing import Any

import pytest

from blessed_golden.metrics import reset_metrics

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


class StubStatusProvider:
    """Canned ``git status --porcelain`` output per relative path."""

    def __init__(self, responses: dict[str, Any] | None = None, default: str = "") -> None:
        self.responses = dict(responses or {})
        self.default = default
        self.calls: list[tuple[Path, str]] = []

    def status(self, repo_root: Path, relative_path: str) -> str:
        self.calls.append((repo_root, relative_path))
        value = self.responses.get(relative_path, self.default)
        if isinstance(value, Exception):
            raise value
        return value


class FakeGit:
    """Resolves every project to a fixed repository root without spawning git."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def repo_root(self, cwd: Path) -> Path:
        return self.root


def write_fixture(root: Path, relative: str, cases: dict[str, Any]) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cases, indent=2), encoding="utf-8")
    return path


def regex_case(regex: str, inputs: list[str]) -> dict[str, Any]:
    return {"harness": "parse_compile_match", "params": {"regex": regex, "inputs": inputs}}


@pytest.fixture(autouse=True)
def _clean_metrics():
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path.resolve() / "project"
    (root / "src").mkdir(parents=True)
    return root


def _git(root: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=root,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def git_repo(project: Path):
    """An initialized git repository at the project root."""
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    _git(project, "init", "-q")
    _git(project, "config", "user.email", "blessed@example.com")
    _git(project, "config", "user.name", "Blessed Tests")
    _git(project, "config", "commit.gpgsign", "false")

    class Repo:
        root = project

        @staticmethod
        def run(*args: str) -> str:
            return _git(project, *args)

    return Repo
