"""
Role tables, tool-declaration schemas and payload helpers shared by the
provider adapters.
"""

from __future__ import annotations

import math
from typing import Any

from apprentice.errors import ResponseFormatError
from apprentice.llm.types import ModelProvider, Role, ToolParamSpec

# Indexed by ``Role`` value: SYSTEM, MODEL, USER.
_ROLE_TABLES: dict[ModelProvider, tuple[str, str, str]] = {
    ModelProvider.OPENAI: ("system", "assistant", "user"),
    ModelProvider.ANTHROPIC: ("", "assistant", "user"),
    ModelProvider.GCP: ("system", "model", "user"),
}

_VENDOR_ROLES: dict[str, Role] = {
    "system": Role.SYSTEM,
    "assistant": Role.MODEL,
    "model": Role.MODEL,
    "user": Role.USER,
}

# Providers whose tool schemas reject undeclared arguments.
_STRICT_SCHEMA = {ModelProvider.OPENAI, ModelProvider.ANTHROPIC}


def role_to_llm(provider: ModelProvider, role: Role) -> str:
    return _ROLE_TABLES[provider][role.value]


def llm_to_role(role: Any) -> Role:
    """Map a vendor role string back to a logical ``Role``."""
    if isinstance(role, str) and role in _VENDOR_ROLES:
        return _VENDOR_ROLES[role]
    raise ResponseFormatError(f"LLM returned message with an unknown role: {role!r}.")


def tool_params_to_schema(
    params: tuple[ToolParamSpec, ...] | list[ToolParamSpec],
    provider: ModelProvider,
) -> dict:
    """
    Build the JSON-schema object describing a tool's parameters.

    ``properties`` keeps declaration order and ``required`` lists the
    required names in the same order.
    """
    properties: dict[str, dict] = {}
    required: list[str] = []
    for param in params:
        properties[param.name] = {
            "type": param.type.value,
            "description": param.description,
        }
        if param.required:
            required.append(param.name)

    schema: dict = {
        "type": "object",
        "properties": properties,
        "required": required,
    }
    if provider in _STRICT_SCHEMA:
        schema["additionalProperties"] = False
    return schema


def set_int_param(payload: dict, key: str, value: int | None) -> None:
    if value is not None:
        payload[key] = int(value)


def set_float_param(payload: dict, key: str, value: float | None) -> None:
    if value is not None and math.isfinite(value):
        payload[key] = float(value)


def require_str(value: Any, element: str) -> str:
    """Return *value* if it is a string, else fail with a format error."""
    if not isinstance(value, str):
        raise ResponseFormatError(f"can't extract {element} from LLM API response.")
    return value
