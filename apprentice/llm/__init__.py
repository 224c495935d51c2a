"""LLM subsystem -- message model, transport and vendor adapters."""

from apprentice.llm.types import (
    Message,
    ModelProvider,
    ParamType,
    Role,
    Text,
    ToolCall,
    ToolChoice,
    ToolParam,
    ToolParamSpec,
    ToolResult,
    ToolSpec,
)

__all__ = [
    "Message",
    "ModelProvider",
    "ParamType",
    "Role",
    "Text",
    "ToolCall",
    "ToolChoice",
    "ToolParam",
    "ToolParamSpec",
    "ToolResult",
    "ToolSpec",
]
