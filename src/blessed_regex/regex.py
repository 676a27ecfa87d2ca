"""A deliberately tiny regex dialect: literals and single char classes.

``ab`` matches any input containing ``ab``; ``[xyz]`` matches any input
containing one of x, y, z. Nothing else is supported.
"""

from __future__ import annotations

from dataclasses import dataclass


class InvalidRegex(ValueError):
    pass


@dataclass(frozen=True)
class Literal:
    text: str

    def tagged(self) -> dict[str, str]:
        return {"Literal": self.text}


@dataclass(frozen=True)
class CharClass:
    chars: str

    def tagged(self) -> dict[str, str]:
        return {"CharClass": self.chars}


Regex = Literal | CharClass


def parse_regex(regex: str) -> Regex:
    if len(regex) >= 2 and regex.startswith("[") and regex.endswith("]"):
        chars = regex[1:-1]
        if "[" in chars or "]" in chars:
            raise InvalidRegex("Nested or mismatched brackets not supported")
        return CharClass(chars)
    if "[" in regex or "]" in regex:
        raise InvalidRegex("Mismatched or misplaced brackets")
    return Literal(regex)


def match_regex(regex: Regex, text: str) -> bool:
    if isinstance(regex, Literal):
        return regex.text in text
    return any(ch in regex.chars for ch in text)
