from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from apprentice.llm.types import ParamType, ToolParam, ToolParamSpec, ToolSpec
from apprentice.tools.validation import ToolValidator

COMMAND_PARAM = ToolParamSpec(
    name="command",
    description="command to execute",
    type=ParamType.STRING,
    required=True,
)


def command_param(
    params: Sequence[ToolParam],
    specs: Sequence[ToolParamSpec] = (COMMAND_PARAM,),
) -> tuple[str | None, str | None]:
    """
    Extract the single ``command`` string argument.

    Returns ``(command, None)`` on success or ``(None, diagnostic)`` where
    the diagnostic is meant to be sent back to the model as the tool result.
    """
    arguments, diagnostic = ToolValidator.validate(specs, params)
    if diagnostic is not None:
        return None, diagnostic
    return arguments["command"], None


class Tool(ABC):
    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def description(self) -> str: ...

    @property
    def params(self) -> tuple[ToolParamSpec, ...]:
        return (COMMAND_PARAM,)

    def get_spec(self) -> ToolSpec:
        return ToolSpec(self.name, self.description, self.params)

    @abstractmethod
    async def call(self, params: Sequence[ToolParam]) -> str:
        """Run the tool.  Bad arguments yield a diagnostic string, not an error."""
        ...
