"""Output formatting utilities for the CLI."""

from __future__ import annotations

import json
from typing import Sequence

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from apprentice.tools.base import Tool


class OutputFormatter:
    """Rich-based output for the non-interactive ``apprentice`` commands."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def format_tool_list(self, tools: Sequence[Tool]) -> None:
        table = Table(title="Registered Tools", show_lines=True)
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Parameters", no_wrap=True)
        table.add_column("Description")

        for t in tools:
            params = Text()
            for i, p in enumerate(t.params):
                if i:
                    params.append("\n")
                params.append(p.name, style="bold" if p.required else "")
                params.append(f": {p.type.value}", style="dim")
            table.add_row(t.name, params, t.description)

        self.console.print(table)

    def format_config(self, config: dict) -> None:
        text = json.dumps(config, indent=2, default=str)
        self.console.print(Syntax(text, "json", theme="monokai"))

    def format_error(self, error: BaseException) -> None:
        self.console.print(Text(f"ERROR: {error}", style="bold red"))
