from __future__ import annotations

from apprentice.llm.types import ToolSpec
from apprentice.tools.base import Tool


def unknown_tool_message(name: str) -> str:
    return f'Unknown tool "{name}" was requested.'


class ToolRegistry:
    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool, *, overwrite: bool = False) -> None:
        if tool.name in self._tools and not overwrite:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def list(self) -> list[Tool]:
        """Tools in registration order."""
        return list(self._tools.values())

    def specs(self) -> list[ToolSpec]:
        return [t.get_spec() for t in self._tools.values()]
