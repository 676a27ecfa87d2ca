"""CLI interface for the blessed golden-file engine."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from .config import Config
from .discovery import fixture_summary
from .errors import BlessedError
from .logging import setup_logging
from .metrics import get_metrics, reset_metrics
from .pipeline import build_units, plan_generation, select_units
from .registry import build_registry
from .vcs import GitClient


@click.group()
@click.option(
    "--root", "project_root",
    type=click.Path(file_okay=False, path_type=Path),
    help="Project root (defaults to BLESSED_PROJECT_ROOT or the current directory).",
)
@click.option("--glob", "fixture_glob", type=str, help="Fixture glob relative to the project root.")
@click.option("--output-dir", type=str, help="Artifact directory relative to the project root.")
@click.option(
    "--module", "-m", "modules",
    multiple=True,
    help="Module to import for harness registration (repeatable).",
)
@click.option("--log-format", type=click.Choice(["json", "text"]), help="Log output format.")
@click.pass_context
def main(
    ctx: click.Context,
    project_root: Path | None,
    fixture_glob: str | None,
    output_dir: str | None,
    modules: tuple[str, ...],
    log_format: str | None,
):
    """Blessed golden-file test engine."""
    config = Config.from_env().with_overrides(
        project_root=project_root,
        fixture_glob=fixture_glob,
        output_dir=output_dir,
        log_format=log_format,
    )
    if modules:
        config = config.with_overrides(harness_modules=[*config.harness_modules, *modules])
    setup_logging(config.log_format)
    ctx.obj = config


def _plan_or_exit(config: Config):
    try:
        return plan_generation(config, GitClient(config.git_bin))
    except BlessedError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


@main.command("list")
@click.option("--json", "as_json", is_flag=True, help="Emit descriptors as JSON.")
@click.pass_obj
def list_cases(config: Config, as_json: bool):
    """List the test cases synthesized from fixture files."""
    plan = _plan_or_exit(config)
    if not plan.found_files:
        click.echo(plan.missing_fixtures_message, err=True)
        sys.exit(1)
    if as_json:
        listing = {
            "fixtures": fixture_summary(plan.discovery),
            "cases": [d.summary() for d in plan.descriptors],
        }
        click.echo(json.dumps(listing, indent=2, sort_keys=True))
        return
    for descriptor in plan.descriptors:
        click.echo(
            f"{descriptor.synthetic_id}  {descriptor.harness_name}  {descriptor.relative_output_path}"
        )
    click.echo(f"{len(plan.descriptors)} case(s) in {len(plan.discovery.files)} fixture file(s)")


@main.command()
@click.pass_obj
def harnesses(config: Config):
    """List registered harnesses in resolution order."""
    registry = build_registry(config.harness_modules)
    if not len(registry):
        click.echo("No harnesses registered. Pass --module or set BLESSED_HARNESS_MODULES.", err=True)
        sys.exit(1)
    for entry in registry:
        click.echo(f"{entry.name}  ({entry.origin})")


@main.command()
@click.option("--case", "case_names", multiple=True, help="Only run this case or unit name (repeatable).")
@click.pass_obj
def run(config: Config, case_names: tuple[str, ...]):
    """Regenerate artifacts and check them against git."""
    registry = build_registry(config.harness_modules)
    plan = _plan_or_exit(config)
    units = select_units(build_units(plan, registry, GitClient(config.git_bin)), case_names)
    if not units:
        click.echo(f"Error: no cases match {list(case_names)}", err=True)
        sys.exit(1)

    reset_metrics()
    failures = 0
    for unit in units:
        try:
            verdict = unit.run()
        except BlessedError as exc:
            failures += 1
            click.echo(f"FAIL {unit.name} [{exc.tier}/{exc.code}]: {exc}")
            continue
        except Exception as exc:
            # A raising harness body fails its own unit only.
            failures += 1
            click.echo(f"FAIL {unit.name}: {type(exc).__name__}: {exc}")
            continue
        if verdict.passed:
            click.echo(f"PASS {unit.name}")
        else:
            failures += 1
            click.echo(f"FAIL {unit.name}: {verdict.message}")

    metrics = get_metrics()
    click.echo(
        f"{len(units) - failures} passed, {failures} failed "
        f"(verdicts: {json.dumps(metrics['verdicts'], sort_keys=True)})"
    )
    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
