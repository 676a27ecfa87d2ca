"""Generation pipeline: config -> paths -> discovery -> descriptors -> units.

``plan_generation`` is the setup phase. Any error there aborts generation for
the whole run. ``build_units`` turns a plan into named zero-argument units for
whichever host runner drives them (pytest via ``pytest_plugin``, or the CLI).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .config import Config
from .discovery import DiscoveryResult, discover_fixtures
from .errors import NoFixturesFoundError
from .execution import run_case
from .registry import HarnessRegistry
from .synthesis import (
    TestCaseDescriptor,
    describe_collisions,
    ensure_no_collisions,
    find_id_collisions,
    find_output_collisions,
    synthesize,
)
from .vcs import GitClient, StatusProvider
from .verification import Verdict

logger = logging.getLogger(__name__)

NO_FILES_UNIT_NAME = "blessed_no_files_found"


@dataclass(frozen=True)
class ProjectPaths:
    project_root: Path
    repo_root: Path
    output_dir: Path
    glob_pattern: str


def resolve_project_paths(config: Config, git: GitClient) -> ProjectPaths:
    project_root = config.project_root.resolve()
    repo_root = git.repo_root(project_root).resolve()
    output_dir = config.output_dir_path.resolve()
    return ProjectPaths(
        project_root=project_root,
        repo_root=repo_root,
        output_dir=output_dir,
        glob_pattern=str(project_root / config.fixture_glob),
    )


@dataclass(frozen=True)
class GenerationPlan:
    paths: ProjectPaths
    discovery: DiscoveryResult
    descriptors: tuple[TestCaseDescriptor, ...] = ()
    git_bin: str = "git"

    @property
    def found_files(self) -> bool:
        return self.discovery.found_files

    @property
    def missing_fixtures_message(self) -> str:
        return (
            "Blessed error: No test definition files found matching glob pattern "
            f"{self.paths.glob_pattern!r}"
        )


def plan_generation(config: Config, git: GitClient | None = None) -> GenerationPlan:
    git = git or GitClient(config.git_bin)
    paths = resolve_project_paths(config, git)
    discovery = discover_fixtures(paths.glob_pattern)
    descriptors = synthesize(discovery.files, paths.output_dir, paths.repo_root)

    if config.case_collisions == "error":
        ensure_no_collisions(descriptors)
    else:
        collisions = find_output_collisions(descriptors)
        if collisions:
            logger.warning(
                "Blessed case name collisions (artifacts will race): %s",
                describe_collisions(collisions),
            )

    for synthetic_id, group in find_id_collisions(descriptors).items():
        logger.warning(
            "Blessed test id %s is shared by cases %s; host runners will disambiguate them",
            synthetic_id,
            [d.case_name for d in group],
        )

    logger.info("Generated %d blessed tests.", len(descriptors))
    return GenerationPlan(
        paths=paths,
        discovery=discovery,
        descriptors=tuple(descriptors),
        git_bin=config.git_bin,
    )


@dataclass(frozen=True)
class BlessedUnit:
    """A named, zero-argument test unit."""

    name: str
    _run: Callable[[], Verdict] = field(repr=False)
    descriptor: TestCaseDescriptor | None = None

    def run(self) -> Verdict:
        return self._run()

    def check(self) -> Verdict:
        """Run and raise GoldenMismatchError unless the artifact passes."""
        verdict = self.run()
        verdict.raise_for_status()
        return verdict


def _no_files_unit(message: str) -> BlessedUnit:
    def _fail() -> Verdict:
        raise NoFixturesFoundError(message)

    return BlessedUnit(name=NO_FILES_UNIT_NAME, _run=_fail)


def build_units(
    plan: GenerationPlan,
    registry: HarnessRegistry,
    status_provider: StatusProvider | None = None,
) -> list[BlessedUnit]:
    if not plan.found_files:
        return [_no_files_unit(plan.missing_fixtures_message)]

    provider = status_provider or GitClient(plan.git_bin)
    repo_root = plan.paths.repo_root

    def _bind(descriptor: TestCaseDescriptor) -> BlessedUnit:
        return BlessedUnit(
            name=descriptor.synthetic_id,
            _run=lambda: run_case(descriptor, registry, repo_root, provider),
            descriptor=descriptor,
        )

    return [_bind(descriptor) for descriptor in plan.descriptors]


def select_units(units: Sequence[BlessedUnit], case_names: Sequence[str]) -> list[BlessedUnit]:
    """Units whose case name or unit name is listed; all units when nothing is listed."""
    if not case_names:
        return list(units)
    wanted = set(case_names)
    return [
        unit for unit in units
        if unit.name in wanted
        or (unit.descriptor is not None and unit.descriptor.case_name in wanted)
    ]
