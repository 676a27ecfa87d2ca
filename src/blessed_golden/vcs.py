"""Version-control collaborator (git).

Two calls: resolve the repository root, and query the short status of one
repo-relative path. The pipeline depends only on ``StatusProvider`` so tests
can substitute a stub for the external process.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from .errors import StatusQueryError, VcsError

logger = logging.getLogger(__name__)


class StatusProvider(Protocol):
    def status(self, repo_root: Path, relative_path: str) -> str:
        """Raw porcelain status text for ``relative_path`` (possibly empty)."""
        ...


def _exit_detail(result: subprocess.CompletedProcess[bytes]) -> str:
    stderr = result.stderr.decode("utf-8", errors="replace").strip()
    return f"(exit code: {result.returncode}): {stderr}"


class GitClient:
    def __init__(self, git_bin: str = "git") -> None:
        self.git_bin = git_bin

    def _run(self, args: list[str], cwd: Path) -> subprocess.CompletedProcess[bytes]:
        return subprocess.run(
            [self.git_bin, *args],
            cwd=cwd,
            capture_output=True,
            check=False,
        )

    def repo_root(self, cwd: Path) -> Path:
        """Absolute repository root containing ``cwd``."""
        try:
            result = self._run(["rev-parse", "--show-toplevel"], cwd)
        except OSError as exc:
            raise VcsError(
                f"Failed to execute {self.git_bin} command: {exc}. Is git installed and in PATH?"
            ) from exc

        if result.returncode != 0:
            raise VcsError(f"`git rev-parse --show-toplevel` failed {_exit_detail(result)}")

        try:
            root_text = result.stdout.decode("utf-8").strip()
        except UnicodeDecodeError as exc:
            raise VcsError(f"Git root path is not valid UTF-8: {result.stdout!r}") from exc

        if not root_text:
            raise VcsError("Failed to determine git root directory")
        root = Path(root_text)
        if not root.is_absolute():
            raise VcsError(f"Determined git root path is not absolute: {root_text!r}")
        return root

    def status(self, repo_root: Path, relative_path: str) -> str:
        """Porcelain status of exactly ``relative_path``.

        Case names may contain ``*``, ``?`` or ``[``; the path is never a glob.
        """
        try:
            result = self._run(
                ["--literal-pathspecs", "status", "--porcelain", "--", relative_path],
                repo_root,
            )
        except OSError as exc:
            raise StatusQueryError(f"Failed to execute git status: {exc}") from exc

        if result.returncode != 0:
            raise StatusQueryError(f"`git status` failed {_exit_detail(result)}")

        text = result.stdout.decode("utf-8", errors="replace")
        logger.debug("git status for %s: %r", relative_path, text)
        return text
