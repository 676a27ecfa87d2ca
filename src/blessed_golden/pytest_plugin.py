"""pytest binding: one parametrized test per blessed case.

Usage, in any test module:

    from blessed_golden.pytest_plugin import blessed_tests

    test_blessed = blessed_tests("myproject.harnesses")

Setup failures (no git root, malformed fixture, colliding case names) raise
while the module is imported, so pytest reports one collection error and runs
none of the generated tests.
"""

from __future__ import annotations

from collections.abc import Callable
from types import ModuleType
from typing import Any

import pytest

from .config import Config
from .errors import BlessedError
from .pipeline import BlessedUnit, build_units, plan_generation
from .registry import HarnessRegistry, build_registry
from .vcs import GitClient, StatusProvider


def _unique_modules(modules: list[str | ModuleType]) -> list[str | ModuleType]:
    seen: set[str] = set()
    unique = []
    for module in modules:
        name = module if isinstance(module, str) else module.__name__
        if name in seen:
            continue
        seen.add(name)
        unique.append(module)
    return unique


def run_unit(unit: BlessedUnit) -> None:
    """Run a unit, reporting blessed failures without a Python traceback."""
    try:
        unit.check()
    except BlessedError as exc:
        pytest.fail(str(exc), pytrace=False)


def blessed_tests(
    *harness_modules: str | ModuleType,
    config: Config | None = None,
    registry: HarnessRegistry | None = None,
    status_provider: StatusProvider | None = None,
    git: GitClient | None = None,
) -> Callable[..., Any]:
    """Build a pytest test function parametrized over every blessed case.

    Harness modules come from ``BLESSED_HARNESS_MODULES`` followed by the
    positional arguments; pass ``registry`` to skip module loading entirely.
    """
    config = config or Config.from_env()
    if registry is None:
        registry = build_registry(_unique_modules([*config.harness_modules, *harness_modules]))

    git = git or GitClient(config.git_bin)
    plan = plan_generation(config, git)
    units = build_units(plan, registry, status_provider or git)

    @pytest.mark.parametrize("unit", units, ids=[unit.name for unit in units])
    def test_blessed(unit: BlessedUnit) -> None:
        run_unit(unit)

    return test_blessed
