"""Fixture discovery.

A fixture file is a JSON object mapping case names to
``{"harness": <name>, "params": <any JSON>}``. Discovery is all-or-nothing:
the first unreadable or malformed file aborts it, naming the file.
"""

from __future__ import annotations

import glob
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

from pydantic import BaseModel, JsonValue, TypeAdapter, ValidationError

from .errors import (
    FixtureDiscoveryError,
    FixtureParseError,
    FixtureReadError,
    describe_validation_error,
)

logger = logging.getLogger(__name__)

IDENTIFIER_FILLER = "_"


class TestCaseDefinition(BaseModel):
    __test__: ClassVar[bool] = False

    harness: str
    params: JsonValue


_FIXTURE_ADAPTER: TypeAdapter[dict[str, TestCaseDefinition]] = TypeAdapter(
    dict[str, TestCaseDefinition]
)


@dataclass(frozen=True)
class FixtureFile:
    path: Path
    stem: str
    cases: dict[str, TestCaseDefinition] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.cases)


@dataclass(frozen=True)
class DiscoveryResult:
    pattern: str
    files: tuple[FixtureFile, ...] = ()

    @property
    def found_files(self) -> bool:
        return bool(self.files)

    @property
    def case_count(self) -> int:
        return sum(len(f) for f in self.files)


def sanitize_identifier(text: str) -> str:
    """Replace every non-alphanumeric character with ``_``."""
    return "".join(ch if ch.isalnum() else IDENTIFIER_FILLER for ch in text)


def fixture_stem(path: Path) -> str:
    """File name minus its final extension, made identifier-safe.

    ``regex.blessed.json`` -> ``regex_blessed``.
    """
    return sanitize_identifier(path.stem)


def _case_name_problem(name: str) -> str | None:
    if not name:
        return "case name must not be empty"
    if name in (".", ".."):
        return f"case name {name!r} is not a valid file name"
    if "/" in name or "\\" in name:
        return f"case name {name!r} must not contain path separators"
    return None


def parse_fixture(path: Path, content: str | bytes) -> dict[str, TestCaseDefinition]:
    try:
        cases = _FIXTURE_ADAPTER.validate_json(content)
    except ValidationError as exc:
        raise FixtureParseError(
            f"Failed to parse blessed file {str(path)!r}: {describe_validation_error(exc)}"
        ) from exc

    for name in cases:
        problem = _case_name_problem(name)
        if problem is not None:
            raise FixtureParseError(f"Failed to parse blessed file {str(path)!r}: {problem}")
    return cases


def load_fixture(path: Path) -> FixtureFile:
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise FixtureReadError(f"Failed to read blessed file {str(path)!r}: {exc}") from exc
    return FixtureFile(path=path, stem=fixture_stem(path), cases=parse_fixture(path, content))


def find_fixture_paths(pattern: str) -> list[Path]:
    """Regular files matching an absolute, ``**``-aware glob, in sorted order."""
    try:
        matches = glob.glob(pattern, recursive=True)
    except (OSError, ValueError) as exc:
        raise FixtureDiscoveryError(f"Failed to read glob pattern {pattern!r}: {exc}") from exc
    return sorted(Path(match) for match in matches if Path(match).is_file())


def discover_fixtures(pattern: str) -> DiscoveryResult:
    logger.info("Searching for blessed files using glob: %s", pattern)

    files = []
    for path in find_fixture_paths(pattern):
        logger.info("Processing blessed definition file: %s", path)
        files.append(load_fixture(path))

    result = DiscoveryResult(pattern=pattern, files=tuple(files))
    if not result.found_files:
        logger.warning("No blessed definition files match %s", pattern)
    return result


def fixture_summary(result: DiscoveryResult) -> dict[str, Any]:
    return {
        "pattern": result.pattern,
        "files": [
            {"path": str(f.path), "stem": f.stem, "cases": sorted(f.cases)}
            for f in result.files
        ],
        "case_count": result.case_count,
    }
