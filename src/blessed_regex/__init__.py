"""Sample regex parser/matcher exercised by the blessed fixtures."""

from .regex import CharClass, InvalidRegex, Literal, match_regex, parse_regex

__all__ = ["CharClass", "InvalidRegex", "Literal", "match_regex", "parse_regex"]
