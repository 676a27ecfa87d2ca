"""Golden verification: turn a git status line into pass/fail.

The artifact bytes are never compared here. The freshly written artifact is
judged by what version control says about it:

    ??            untracked            fail
    M / AM        modified_unstaged    fail
    A / (empty)   staged_new_or_clean  pass
    anything else unexpected           fail, raw text quoted
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .errors import GoldenMismatchError

GitStatusClass = Literal[
    "untracked",
    "modified_unstaged",
    "staged_new_or_clean",
    "unexpected",
]


@dataclass(frozen=True)
class StatusClassification:
    status: GitStatusClass
    raw: str

    @property
    def passed(self) -> bool:
        return self.status == "staged_new_or_clean"


def classify_status(raw: str) -> StatusClassification:
    text = raw.lstrip()
    if text.startswith("??"):
        return StatusClassification("untracked", raw)
    if text.startswith("M") or text.startswith("AM"):
        return StatusClassification("modified_unstaged", raw)
    if text.startswith("A") or not text.strip():
        return StatusClassification("staged_new_or_clean", raw)
    return StatusClassification("unexpected", raw)


@dataclass(frozen=True)
class Verdict:
    case_name: str
    relative_path: str
    status: GitStatusClass
    raw: str
    message: str | None = None

    @property
    def passed(self) -> bool:
        return self.status == "staged_new_or_clean"

    def raise_for_status(self) -> None:
        if not self.passed:
            raise GoldenMismatchError(self.message or f"Blessed test {self.case_name!r} failed")


def _failure_message(case_name: str, relative_path: str, classification: StatusClassification) -> str | None:
    if classification.status == "untracked":
        return (
            f"Blessed test {case_name!r}: untracked file {relative_path!r}. "
            "Review the output and `git add` the file."
        )
    if classification.status == "modified_unstaged":
        return (
            f"Blessed test {case_name!r}: file {relative_path!r} differs from the git index. "
            "Review the changes, then `git add` or revert them."
        )
    if classification.status == "unexpected":
        return (
            f"Blessed test {case_name!r}: unexpected git status for {relative_path!r}: "
            f"{classification.raw!r}. Check the repository state."
        )
    return None


def verify_artifact(case_name: str, relative_path: str, raw_status: str) -> Verdict:
    classification = classify_status(raw_status)
    return Verdict(
        case_name=case_name,
        relative_path=relative_path,
        status=classification.status,
        raw=raw_status,
        message=_failure_message(case_name, relative_path, classification),
    )
