"""Turn discovered fixture cases into runnable test descriptors.

Pure path arithmetic: nothing here touches the file system.

The output path depends only on the output directory and the case name, so
two fixture files declaring the same case name claim the same artifact.
``find_output_collisions`` reports those claims; the pipeline decides whether
they are fatal (see ``Config.case_collisions``).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Any, ClassVar

from pydantic import JsonValue

from .discovery import FixtureFile, sanitize_identifier
from .errors import CaseNameCollisionError, PathContainmentError

ARTIFACT_EXTENSION = "json"
SYNTHETIC_ID_PREFIX = "blessed_test"


@dataclass(frozen=True)
class TestCaseDescriptor:
    __test__: ClassVar[bool] = False

    synthetic_id: str
    case_name: str
    fixture_path: Path
    fixture_stem: str
    harness_name: str
    params: JsonValue
    output_path: Path
    relative_output_path: str

    def summary(self) -> dict[str, Any]:
        return {
            "id": self.synthetic_id,
            "case": self.case_name,
            "fixture": str(self.fixture_path),
            "harness": self.harness_name,
            "output_path": str(self.output_path),
            "relative_output_path": self.relative_output_path,
        }


def synthetic_id_for(stem: str, case_name: str) -> str:
    """Host-runner id for a case.

    Not unique: sanitizing maps ``a-b`` and ``a_b`` in one file to the same id,
    and fixture files sharing a stem share an id namespace. pytest suffixes
    repeated ids, and selecting units by id matches all of them. See
    ``find_id_collisions``.
    """
    return sanitize_identifier(f"{SYNTHETIC_ID_PREFIX}_{stem}_{case_name}")


def output_path_for(output_dir: Path, case_name: str) -> Path:
    return output_dir / f"{case_name}.{ARTIFACT_EXTENSION}"


def relative_to_repo(path: Path, repo_root: Path) -> str:
    """``path`` relative to ``repo_root`` in POSIX form, or PathContainmentError."""
    try:
        relative = PurePath(path).relative_to(repo_root)
    except ValueError as exc:
        raise PathContainmentError(
            f"Output file path {str(path)!r} is not inside git root {str(repo_root)!r}"
        ) from exc
    return relative.as_posix()


def synthesize_file(
    fixture: FixtureFile, output_dir: Path, repo_root: Path
) -> list[TestCaseDescriptor]:
    descriptors = []
    for case_name, definition in fixture.cases.items():
        output_path = output_path_for(output_dir, case_name)
        descriptors.append(
            TestCaseDescriptor(
                synthetic_id=synthetic_id_for(fixture.stem, case_name),
                case_name=case_name,
                fixture_path=fixture.path,
                fixture_stem=fixture.stem,
                harness_name=definition.harness,
                params=definition.params,
                output_path=output_path,
                relative_output_path=relative_to_repo(output_path, repo_root),
            )
        )
    return descriptors


def synthesize(
    fixtures: Iterable[FixtureFile], output_dir: Path, repo_root: Path
) -> list[TestCaseDescriptor]:
    """One descriptor per (fixture, case), in fixture order then case order."""
    descriptors: list[TestCaseDescriptor] = []
    for fixture in fixtures:
        descriptors.extend(synthesize_file(fixture, output_dir, repo_root))
    return descriptors


def find_output_collisions(
    descriptors: Iterable[TestCaseDescriptor],
) -> dict[str, list[TestCaseDescriptor]]:
    """Artifact paths claimed by more than one descriptor."""
    claims: dict[str, list[TestCaseDescriptor]] = {}
    for descriptor in descriptors:
        claims.setdefault(descriptor.relative_output_path, []).append(descriptor)
    return {path: group for path, group in claims.items() if len(group) > 1}


def find_id_collisions(
    descriptors: Iterable[TestCaseDescriptor],
) -> dict[str, list[TestCaseDescriptor]]:
    """Synthetic ids shared by more than one descriptor."""
    claims: dict[str, list[TestCaseDescriptor]] = {}
    for descriptor in descriptors:
        claims.setdefault(descriptor.synthetic_id, []).append(descriptor)
    return {sid: group for sid, group in claims.items() if len(group) > 1}


def describe_collisions(collisions: dict[str, list[TestCaseDescriptor]]) -> str:
    lines = []
    for path, group in sorted(collisions.items()):
        fixtures = ", ".join(repr(str(d.fixture_path)) for d in group)
        lines.append(
            f"case {group[0].case_name!r} -> {path!r} is declared by {len(group)} cases in: {fixtures}"
        )
    return "; ".join(lines)


def ensure_no_collisions(descriptors: Iterable[TestCaseDescriptor]) -> None:
    collisions = find_output_collisions(descriptors)
    if collisions:
        raise CaseNameCollisionError(
            "Blessed case names must be unique across fixture files: "
            + describe_collisions(collisions)
        )
