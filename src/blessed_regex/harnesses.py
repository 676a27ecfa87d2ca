from __future__ import annotations

from pydantic import BaseModel, Field

from blessed_golden import harness

from .regex import InvalidRegex, match_regex, parse_regex


class Case(BaseModel):
    regex: str
    inputs: list[str]


class Output(BaseModel):
    ast: dict[str, str] | None = None
    parse_error: dict[str, str] | None = None
    matches: dict[str, bool] = Field(default_factory=dict)


@harness
def parse_compile_match(case: Case) -> Output:
    """Parse ``case.regex`` and match it against every input.

    Parse errors are reported in ``parse_error``; they are expected output.
    """
    try:
        ast = parse_regex(case.regex)
    except InvalidRegex as exc:
        return Output(parse_error={"InvalidRegex": str(exc)})

    return Output(
        ast=ast.tagged(),
        matches={text: match_regex(ast, text) for text in case.inputs},
    )
