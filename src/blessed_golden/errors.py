"""Error types for the blessed pipeline.

Two tiers matter to callers:
- setup: anything raised while locating the project, discovering fixtures or
  synthesizing descriptors. One of these aborts generation for the whole run.
- runtime: raised by a single generated unit. Fatal to that unit only.

HarnessInvocationError is neither: it is the adapter's error channel and ends
up as ``{"blessed_error": ...}`` artifact content.
"""

from __future__ import annotations

from typing import Literal

from pydantic import ValidationError

ErrorTier = Literal["setup", "runtime", "harness", "other"]

ERROR_TIER_BY_CODE: dict[str, ErrorTier] = {
    "config_error": "setup",
    "vcs_error": "setup",
    "glob_error": "setup",
    "fixture_read_error": "setup",
    "fixture_parse_error": "setup",
    "path_containment_error": "setup",
    "case_name_collision": "setup",
    "harness_not_found": "runtime",
    "artifact_write_error": "runtime",
    "golden_mismatch": "runtime",
    "status_query_error": "runtime",
    "no_fixtures_found": "runtime",
    "harness_invocation_error": "harness",
}


class BlessedError(Exception):
    code = "blessed_error"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code

    @property
    def tier(self) -> ErrorTier:
        return classify_error_code(self.code)


class BlessedSetupError(BlessedError):
    code = "config_error"


class VcsError(BlessedSetupError):
    code = "vcs_error"


class FixtureDiscoveryError(BlessedSetupError):
    code = "glob_error"


class FixtureReadError(FixtureDiscoveryError):
    code = "fixture_read_error"


class FixtureParseError(FixtureDiscoveryError):
    code = "fixture_parse_error"


class PathContainmentError(BlessedSetupError):
    code = "path_containment_error"


class CaseNameCollisionError(BlessedSetupError):
    code = "case_name_collision"


class BlessedRunError(BlessedError):
    code = "golden_mismatch"


class HarnessNotFoundError(BlessedRunError):
    code = "harness_not_found"


class ArtifactWriteError(BlessedRunError):
    code = "artifact_write_error"


class GoldenMismatchError(BlessedRunError):
    code = "golden_mismatch"


class StatusQueryError(BlessedRunError):
    code = "status_query_error"


class NoFixturesFoundError(BlessedRunError):
    code = "no_fixtures_found"


class HarnessInvocationError(BlessedError):
    """Framework-level wiring failure inside a harness adapter."""

    code = "harness_invocation_error"


class HarnessDefinitionError(TypeError):
    """A function cannot be adapted into a harness."""


class RegistryFrozenError(RuntimeError):
    pass


def classify_error_code(error_code: str | None) -> ErrorTier:
    normalized = str(error_code or "").strip().lower()
    if not normalized:
        return "other"
    return ERROR_TIER_BY_CODE.get(normalized, "other")


def describe_validation_error(exc: ValidationError) -> str:
    """One-line, version-stable rendering of a pydantic ValidationError.

    The default ``str(exc)`` embeds documentation URLs that change between
    pydantic releases, which would leak into golden artifacts.
    """
    parts = []
    for error in exc.errors(include_url=False):
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        parts.append(f"{location}: {error['msg']}")
    return f"{exc.error_count()} validation error(s) for {exc.title}: " + "; ".join(parts)
