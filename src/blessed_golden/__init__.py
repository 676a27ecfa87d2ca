"""Data-driven golden-file tests checked against git."""

from .config import Config
from .errors import (
    BlessedError,
    BlessedRunError,
    BlessedSetupError,
    HarnessInvocationError,
)
from .pipeline import BlessedUnit, GenerationPlan, build_units, plan_generation
from .registry import HarnessEntry, HarnessRegistry, build_registry, harness
from .verification import Verdict, classify_status

__all__ = [
    "BlessedError",
    "BlessedRunError",
    "BlessedSetupError",
    "BlessedUnit",
    "Config",
    "GenerationPlan",
    "HarnessEntry",
    "HarnessInvocationError",
    "HarnessRegistry",
    "Verdict",
    "build_registry",
    "build_units",
    "classify_status",
    "harness",
    "plan_generation",
]
