import pytest
from pydantic import BaseModel, ValidationError

from blessed_golden.errors import (
    CaseNameCollisionError,
    FixtureParseError,
    GoldenMismatchError,
    HarnessInvocationError,
    HarnessNotFoundError,
    classify_error_code,
    describe_validation_error,
)


class Point(BaseModel):
    x: int
    y: int


@pytest.mark.parametrize(
    ("error", "tier"),
    [
        (FixtureParseError("bad"), "setup"),
        (CaseNameCollisionError("dup"), "setup"),
        (HarnessNotFoundError("gone"), "runtime"),
        (GoldenMismatchError("differs"), "runtime"),
        (HarnessInvocationError("wiring"), "harness"),
    ],
)
def test_errors_carry_code_and_tier(error, tier):
    assert error.tier == tier
    assert classify_error_code(error.code) == tier


def test_code_can_be_overridden_per_instance():
    error = FixtureParseError("bad", code="fixture_read_error")
    assert error.code == "fixture_read_error"
    assert FixtureParseError.code == "fixture_parse_error"


def test_unknown_codes_are_other():
    assert classify_error_code(None) == "other"
    assert classify_error_code("  ") == "other"
    assert classify_error_code("mystery") == "other"
    assert classify_error_code(" HARNESS_NOT_FOUND ") == "runtime"


def test_validation_errors_render_on_one_line_without_urls():
    with pytest.raises(ValidationError) as excinfo:
        Point.model_validate({"x": "nope"})

    text = describe_validation_error(excinfo.value)
    assert text.startswith("2 validation error(s) for Point: ")
    assert "x: Input should be a valid integer" in text
    assert "y: Field required" in text
    assert "\n" not in text
    assert "http" not in text
