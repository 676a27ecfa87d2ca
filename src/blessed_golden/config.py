import os
from dataclasses import dataclass, field, replace
from pathlib import Path

DEFAULT_FIXTURE_GLOB = "src/**/*.blessed.json"
DEFAULT_OUTPUT_DIR = "blessed"

COLLISION_POLICIES = ("error", "warn")
LOG_FORMATS = ("json", "text")


def _split_modules(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Config:
    project_root: Path
    fixture_glob: str = DEFAULT_FIXTURE_GLOB
    output_dir: str = DEFAULT_OUTPUT_DIR
    harness_modules: tuple[str, ...] = field(default_factory=tuple)
    git_bin: str = "git"
    case_collisions: str = "error"
    log_format: str = "text"

    def __post_init__(self) -> None:
        if self.case_collisions not in COLLISION_POLICIES:
            raise ValueError(
                f"BLESSED_CASE_COLLISIONS must be one of {COLLISION_POLICIES}, "
                f"got {self.case_collisions!r}"
            )
        if self.log_format not in LOG_FORMATS:
            raise ValueError(
                f"BLESSED_LOG_FORMAT must be one of {LOG_FORMATS}, got {self.log_format!r}"
            )

    @property
    def output_dir_path(self) -> Path:
        """Output directory; relative values hang off project_root."""
        path = Path(self.output_dir)
        if path.is_absolute():
            return path
        return self.project_root / path

    def with_overrides(self, **overrides: object) -> "Config":
        """Copy with every non-None override applied (CLI flags beat environment)."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if "project_root" in changes:
            changes["project_root"] = Path(str(changes["project_root"]))
        if "harness_modules" in changes:
            changes["harness_modules"] = tuple(changes["harness_modules"])  # type: ignore[arg-type]
        return replace(self, **changes)  # type: ignore[arg-type]

    @classmethod
    def from_env(cls) -> "Config":
        project_root = os.environ.get("BLESSED_PROJECT_ROOT", "").strip()

        return cls(
            project_root=Path(project_root) if project_root else Path.cwd(),
            fixture_glob=os.environ.get("BLESSED_FIXTURE_GLOB", DEFAULT_FIXTURE_GLOB),
            output_dir=os.environ.get("BLESSED_OUTPUT_DIR", DEFAULT_OUTPUT_DIR),
            harness_modules=_split_modules(os.environ.get("BLESSED_HARNESS_MODULES", "")),
            git_bin=os.environ.get("BLESSED_GIT_BIN", "git"),
            case_collisions=os.environ.get("BLESSED_CASE_COLLISIONS", "error").strip().lower(),
            log_format=os.environ.get("BLESSED_LOG_FORMAT", "text").strip().lower(),
        )
