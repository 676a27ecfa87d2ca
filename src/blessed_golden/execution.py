"""Run one descriptor: resolve harness, invoke, render, persist, verify."""

from __future__ import annotations

import copy
import json
import logging
import time
from pathlib import Path
from typing import Any

from .errors import (
    ArtifactWriteError,
    HarnessInvocationError,
    HarnessNotFoundError,
    StatusQueryError,
)
from .metrics import record_harness_invocation, record_unit_failed, record_verdict
from .registry import HarnessRegistry
from .synthesis import TestCaseDescriptor
from .vcs import StatusProvider
from .verification import Verdict, verify_artifact

logger = logging.getLogger(__name__)

ERROR_KEY = "blessed_error"


def render_artifact(value: Any) -> str:
    """Pretty JSON with sorted keys, so equal values always give equal bytes."""
    return json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False)


def execute_case(descriptor: TestCaseDescriptor, registry: HarnessRegistry) -> str:
    """Invoke the descriptor's harness and return the artifact text.

    An adapter failure is not raised: it becomes ``{"blessed_error": ...}``.
    """
    entry = registry.lookup(descriptor.harness_name)
    if entry is None:
        raise HarnessNotFoundError(
            f"Blessed harness function {descriptor.harness_name!r} not found. "
            f"Available: {registry.names()!r}"
        )

    started = time.perf_counter()
    try:
        result = entry.invoke(copy.deepcopy(descriptor.params))
        success = True
    except HarnessInvocationError as exc:
        result = {ERROR_KEY: str(exc)}
        success = False
    duration_ms = (time.perf_counter() - started) * 1000.0

    record_harness_invocation(entry.name, duration_ms, success)
    logger.debug(
        "Harness %s ran for case %s",
        entry.name,
        descriptor.case_name,
        extra={
            "blessed_harness": entry.name,
            "blessed_case": descriptor.case_name,
            "blessed_duration_ms": round(duration_ms, 3),
            "blessed_error": not success,
        },
    )
    return render_artifact(result)


def write_artifact(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ArtifactWriteError(
            f"Failed to create output directory {str(path.parent)!r}: {exc}"
        ) from exc
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ArtifactWriteError(f"Failed to write blessed output file {str(path)!r}: {exc}") from exc


def run_case(
    descriptor: TestCaseDescriptor,
    registry: HarnessRegistry,
    repo_root: Path,
    status_provider: StatusProvider,
) -> Verdict:
    """Execute, persist and classify one descriptor.

    Raises on anything fatal to the unit (missing harness, write failure,
    status query failure). A failing classification is returned, not raised;
    call ``Verdict.raise_for_status()`` to turn it into an error.
    """
    try:
        text = execute_case(descriptor, registry)
        write_artifact(descriptor.output_path, text)
        try:
            raw = status_provider.status(repo_root, descriptor.relative_output_path)
        except StatusQueryError as exc:
            raise StatusQueryError(
                f"Blessed test {descriptor.case_name!r}: failed to get git status "
                f"for {descriptor.relative_output_path!r}: {exc}"
            ) from exc
    except Exception:
        record_unit_failed()
        raise

    verdict = verify_artifact(descriptor.case_name, descriptor.relative_output_path, raw)
    record_verdict(verdict.status, verdict.passed)
    if verdict.passed:
        logger.info("Blessed test %s passed", descriptor.synthetic_id)
    else:
        logger.warning("Blessed test %s failed: %s", descriptor.synthetic_id, verdict.status)
    return verdict
