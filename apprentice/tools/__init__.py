"""Tools the model can call."""

from apprentice.tools.base import Tool
from apprentice.tools.help import HelpTool
from apprentice.tools.registry import ToolRegistry
from apprentice.tools.shell import ShellTool

__all__ = ["HelpTool", "ShellTool", "Tool", "ToolRegistry"]
