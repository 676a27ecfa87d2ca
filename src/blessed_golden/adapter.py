"""Bind a typed ``Input -> Output`` function to the uniform harness contract.

The uniform contract is ``invoke(value) -> value`` over plain JSON values. A
failure to convert between the fixture JSON and the function's declared types
raises HarnessInvocationError; the pipeline turns that into a
``{"blessed_error": ...}`` artifact rather than a test failure. Domain-level
failures belong inside ``Output`` as ordinary data.
"""

from __future__ import annotations

import inspect
import json
from collections.abc import Callable
from typing import Any, get_type_hints

from pydantic import TypeAdapter, ValidationError

from .errors import HarnessDefinitionError, HarnessInvocationError, describe_validation_error

InvokeFn = Callable[[Any], Any]


def harness_types(fn: Callable[..., Any]) -> tuple[Any, Any]:
    """Return the (input, output) annotations of a single-argument function."""
    params = list(inspect.signature(fn).parameters.values())
    if len(params) != 1:
        raise HarnessDefinitionError(
            f"Harness function {fn.__qualname__} must have exactly one argument, got {len(params)}"
        )
    try:
        hints = get_type_hints(fn)
    except NameError as exc:
        raise HarnessDefinitionError(
            f"Cannot resolve type hints of harness function {fn.__qualname__}: {exc}"
        ) from exc

    arg_name = params[0].name
    if arg_name not in hints:
        raise HarnessDefinitionError(
            f"Harness function {fn.__qualname__} argument {arg_name!r} must be typed"
        )
    if "return" not in hints:
        raise HarnessDefinitionError(
            f"Harness function {fn.__qualname__} must have a return type"
        )
    return hints[arg_name], hints["return"]


def adapt(fn: Callable[[Any], Any]) -> InvokeFn:
    """Wrap ``fn`` into ``invoke(value) -> value``.

    Input is validated strictly, in JSON mode, against the function's parameter
    annotation: JSON objects still become models and arrays become tuples, but
    ``"2"`` never becomes ``2``. Output is dumped in JSON mode with the return
    annotation. Aliases are honored on the way out so harness models can choose
    their serialized field names.
    """
    input_type, output_type = harness_types(fn)
    input_adapter: TypeAdapter[Any] = TypeAdapter(input_type)
    output_adapter: TypeAdapter[Any] = TypeAdapter(output_type)

    def invoke(value: Any) -> Any:
        try:
            data = input_adapter.validate_json(json.dumps(value), strict=True)
        except ValidationError as exc:
            raise HarnessInvocationError(
                f"Failed to deserialize input: {describe_validation_error(exc)}"
            ) from exc

        output = fn(data)

        try:
            return output_adapter.dump_python(
                output, mode="json", by_alias=True, warnings="error"
            )
        except ValueError as exc:  # PydanticSerializationError is a ValueError
            raise HarnessInvocationError(f"Failed to serialize output: {exc}") from exc

    invoke.__name__ = f"invoke_{fn.__name__}"
    invoke.__qualname__ = invoke.__name__
    invoke.__wrapped__ = fn  # type: ignore[attr-defined]
    return invoke
