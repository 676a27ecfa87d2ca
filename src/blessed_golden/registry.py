"""Harness registry.

Harness modules mark functions with ``@harness``; marking does not touch any
global table. ``build_registry`` is the one initialization routine: it imports
the listed modules in order, registers every marked function in definition
order, then freezes the registry. After that the registry is read-only and is
handed to the pipeline explicitly.

Resolution order is registration order. Duplicate names are rejected at
registration, so ``lookup`` never has to choose between two entries.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from types import ModuleType
from typing import Any, TypeVar

from .adapter import InvokeFn, adapt, harness_types
from .errors import RegistryFrozenError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

HARNESS_ATTR = "__blessed_harness__"


@dataclass(frozen=True)
class HarnessSpec:
    """Marker attached to a function by ``@harness``."""

    name: str
    origin: str


@dataclass(frozen=True)
class HarnessEntry:
    name: str
    invoke: InvokeFn
    origin: str = "<unknown>"


def _origin(fn: Callable[..., Any]) -> str:
    return f"{fn.__module__}.{fn.__qualname__}"


def harness(fn: F) -> F:
    """Mark ``fn`` as a harness registered under its own name.

    The signature is checked eagerly so a badly typed harness fails at import
    time, not when its first fixture runs.

    Usage:
        @harness
        def parse_compile_match(case: Case) -> Output:
            ...
    """
    harness_types(fn)
    setattr(fn, HARNESS_ATTR, HarnessSpec(name=fn.__name__, origin=_origin(fn)))
    return fn


def marked_harnesses(module: ModuleType) -> list[Callable[..., Any]]:
    """Functions defined in ``module`` carrying the ``@harness`` marker, in definition order.

    Harnesses imported from elsewhere are skipped; they belong to their own module.
    """
    found = []
    for value in vars(module).values():
        spec = getattr(value, HARNESS_ATTR, None)
        if not isinstance(spec, HarnessSpec) or not callable(value):
            continue
        if getattr(value, "__module__", None) != module.__name__:
            continue
        found.append(value)
    return found


class HarnessRegistry:
    def __init__(self) -> None:
        self._entries: list[HarnessEntry] = []
        self._frozen = False

    def register(self, name: str, invoke: InvokeFn, origin: str | None = None) -> HarnessEntry:
        """Add an entry under ``name``. Only valid before ``freeze()``."""
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register harness {name!r}: registry is frozen"
            )
        existing = self.lookup(name)
        if existing is not None:
            raise ValueError(
                f"Duplicate harness name={name!r} "
                f"(already registered from {existing.origin}, "
                f"rejected from {origin or '<unknown>'})"
            )
        entry = HarnessEntry(name=name, invoke=invoke, origin=origin or "<unknown>")
        self._entries.append(entry)
        logger.debug("Registered harness %s from %s", name, entry.origin)
        return entry

    def register_function(self, fn: Callable[..., Any]) -> HarnessEntry:
        """Adapt a typed function and register it under its own name."""
        spec = getattr(fn, HARNESS_ATTR, None)
        name = spec.name if isinstance(spec, HarnessSpec) else fn.__name__
        return self.register(name, adapt(fn), origin=_origin(fn))

    def load_module(self, module: ModuleType) -> list[HarnessEntry]:
        return [self.register_function(fn) for fn in marked_harnesses(module)]

    def lookup(self, name: str) -> HarnessEntry | None:
        for entry in self._entries:
            if entry.name == name:
                return entry
        return None

    def names(self) -> list[str]:
        return [entry.name for entry in self._entries]

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def __iter__(self) -> Iterator[HarnessEntry]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"<HarnessRegistry {state} names={self.names()!r}>"


def build_registry(modules: Iterable[str | ModuleType]) -> HarnessRegistry:
    """Import ``modules`` in order, register their marked harnesses, freeze."""
    registry = HarnessRegistry()
    for item in modules:
        module = importlib.import_module(item) if isinstance(item, str) else item
        entries = registry.load_module(module)
        logger.info(
            "Loaded %d harness(es) from %s: %s",
            len(entries),
            module.__name__,
            [entry.name for entry in entries],
        )
    registry.freeze()
    return registry
