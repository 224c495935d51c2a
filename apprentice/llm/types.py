"""Provider-independent conversation and tool-calling vocabulary."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Union


class Role(IntEnum):
    """Logical roles.  The value indexes the per-provider role tables."""

    SYSTEM = 0
    MODEL = 1
    USER = 2

    def __str__(self) -> str:
        return ("system", "apprentice", "user")[self.value]


@dataclass
class ToolParam:
    """A call-site argument as produced by the model."""

    name: str
    value: Any


@dataclass
class Text:
    role: Role
    content: str


@dataclass
class ToolCall:
    """
    A model request to invoke a tool.

    ``call_id`` is empty for providers that do not assign identifiers.
    """

    call_id: str
    name: str
    params: list[ToolParam] = field(default_factory=list)


@dataclass
class ToolResult:
    call_id: str
    name: str
    result: str


Message = Union[Text, ToolCall, ToolResult]


# ---------------------------------------------------------------------------
# Tool declarations
# ---------------------------------------------------------------------------

class ParamType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class ToolParamSpec:
    name: str
    description: str
    type: ParamType = ParamType.STRING
    required: bool = False


@dataclass(frozen=True)
class ToolSpec:
    """Declaration of a tool the model may call.  Immutable per chat."""

    name: str
    description: str
    params: tuple[ToolParamSpec, ...] = ()


class ToolChoiceMode(str, Enum):
    NONE = "none"
    AUTO = "auto"
    CALL_ONE = "call_one"
    FORCE = "force"


@dataclass(frozen=True)
class ToolChoice:
    """
    Policy governing tool use on a single turn.

    Use the ``NONE``, ``AUTO`` and ``CALL_ONE`` constants, or
    ``ToolChoice.force(name)`` to require a specific tool.
    """

    mode: ToolChoiceMode
    name: str | None = None

    @classmethod
    def force(cls, name: str) -> ToolChoice:
        return cls(ToolChoiceMode.FORCE, name)

    @property
    def uses_tools(self) -> bool:
        return self.mode is not ToolChoiceMode.NONE


ToolChoice.NONE = ToolChoice(ToolChoiceMode.NONE)
ToolChoice.AUTO = ToolChoice(ToolChoiceMode.AUTO)
ToolChoice.CALL_ONE = ToolChoice(ToolChoiceMode.CALL_ONE)


class ModelProvider(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GCP = "gcp"
