from __future__ import annotations

from typing import Sequence

import jsonschema

from apprentice.llm.schema import tool_params_to_schema
from apprentice.llm.types import ModelProvider, ToolParam, ToolParamSpec

_EXPECTED = 'expect 1 parameter called "command" of type string.'


class ToolValidator:
    @staticmethod
    def validate(
        specs: Sequence[ToolParamSpec],
        params: Sequence[ToolParam],
    ) -> tuple[dict, str | None]:
        """
        Check call-site *params* against the declared *specs*.

        Returns the arguments as a dict and, when they do not match, the
        diagnostic that goes back to the model as the tool result.
        """
        arguments = {p.name: p.value for p in params}
        # Strict schema: undeclared arguments are rejected.
        schema = tool_params_to_schema(tuple(specs), ModelProvider.OPENAI)
        try:
            jsonschema.validate(instance=arguments, schema=schema)
        except jsonschema.ValidationError as e:
            return arguments, _diagnostic(e, len(params), specs)
        if len(arguments) != len(params):
            # Repeated names collapse in the dict.
            return arguments, f"wrong number of input parameters, {_EXPECTED}"
        return arguments, None


def _diagnostic(
    error: jsonschema.ValidationError,
    given: int,
    specs: Sequence[ToolParamSpec],
) -> str:
    if given > len(specs) or given < sum(1 for s in specs if s.required):
        return f"wrong number of input parameters, {_EXPECTED}"
    if error.validator == "type":
        return f"wrong parameter value type, {_EXPECTED}"
    if error.validator in ("required", "additionalProperties"):
        return f"wrong parameter name, {_EXPECTED}"
    return f"{error.message}, {_EXPECTED}"
