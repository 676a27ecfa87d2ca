"""Harnesses used by the engine tests (imported as a module, not collected)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from blessed_golden import harness


class Pair(BaseModel):
    a: int
    b: int


class Sum(BaseModel):
    total: int


@harness
def add(pair: Pair) -> Sum:
    return Sum(total=pair.a + pair.b)


@harness
def shout(text: str) -> str:
    return text.upper()


@harness
def divide(pair: Pair) -> int:
    return pair.a // pair.b


@harness
def leak_object(value: int) -> dict[str, Any]:
    return {"value": object()}


CALLS: list[int] = []


@harness
def count_calls(value: int) -> int:
    CALLS.append(value)
    return len(CALLS)


def not_marked(value: int) -> int:
    return value
