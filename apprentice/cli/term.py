"""Terminal interaction: prompts, dialogue output and tool confirmation."""

from __future__ import annotations

import os
import sys
from abc import ABC, abstractmethod

import typer
from rich.console import Console
from rich.rule import Rule
from rich.text import Text

from apprentice import __version__
from apprentice.config import Settings
from apprentice.errors import InputError

LOGO = r"""
    ___    ___   ___   ___   ____ _  __ ______ ____ _____ ____
   / _ |  / _ \ / _ \ / _ \ / __// |/ //_  __//  _// ___// __/
  / __ | / ___// ___// , _// _/ /    /  / /  _/ / / /__ / _/
 /_/ |_|/_/   /_/   /_/|_|/___//_/|_/  /_/  /___/ \___//___/"""

INSTRUCTIONS = "For help use ?, to exit use Ctrl+C"

HELP = """You are in a dialogue with Apprentice, please enter your request.
Apprentice can ask clarifying questions, use tools, for example,
execute a shell command (each time it will ask for user confirmation), etc.
It is not recommended to trust the application blindly."""


class Terminal(ABC):
    """
    Line-based interaction with the human; the shell confirmation reads a
    single key where the terminal allows it.

    Read methods raise ``EOFError`` / ``KeyboardInterrupt`` on end of input
    or interrupt, and ``InputError`` for any other read failure.
    """

    @abstractmethod
    def user_input(self) -> str: ...

    @abstractmethod
    def apprentice_print(self, text: str) -> None: ...

    @abstractmethod
    def print_error(self, text: str) -> None: ...

    @abstractmethod
    def print_intro(self) -> None: ...

    @abstractmethod
    def print_help(self) -> None: ...

    @abstractmethod
    def print_tool_message(self, tool: str, message: str) -> None: ...

    @abstractmethod
    def tool_input(self, tool: str, prompt: str) -> str: ...

    def tool_key(self, tool: str, prompt: str) -> str:
        """Read a single-key answer; line-based terminals read a line."""
        return self.tool_input(tool, prompt)

    def begin_tool_format(self) -> None:
        """Called right before a command writes to the terminal."""

    def end_tool_format(self) -> None:
        """Called after the command has finished writing."""


class RichTerminal(Terminal):
    """
    ``Terminal`` rendered with rich.

    With ``TERM=dumb`` the prompts are plain ``USER> `` style labels and no
    styles are applied.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        console: Console | None = None,
        dumb: bool | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.dumb = os.environ.get("TERM") == "dumb" if dumb is None else dumb
        self.console = console or Console(highlight=False, no_color=self.dumb)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _label(self, name: str, style: str) -> Text:
        if self.dumb:
            return Text(f"{name}> ")
        return Text.assemble((f" {name} ", f"reverse {style}"), (" > ", style))

    def _read(self, prompt: Text) -> str:
        try:
            return self.console.input(prompt)
        except OSError as e:
            raise InputError(str(e)) from e

    # ------------------------------------------------------------------
    # Terminal interface
    # ------------------------------------------------------------------

    def user_input(self) -> str:
        return self._read(self._label("USER", self.settings.user_style))

    def apprentice_print(self, text: str) -> None:
        line = self._label("APPRENTICE", self.settings.apprentice_style)
        line.append(text, style=None if self.dumb else self.settings.apprentice_style)
        self.console.print(line)

    def print_error(self, text: str) -> None:
        line = self._label("APPRENTICE", self.settings.apprentice_style)
        line.append(text, style=None if self.dumb else "bold red")
        self.console.print(line)

    def print_intro(self) -> None:
        style = None if self.dumb else self.settings.apprentice_style
        self.console.print(
            Text(f"{LOGO}\n (ver. {__version__})\n\n{INSTRUCTIONS}", style=style)
        )

    def print_help(self) -> None:
        self.console.print(
            Text(HELP, style=None if self.dumb else self.settings.apprentice_style)
        )

    def print_tool_message(self, tool: str, message: str) -> None:
        line = self._label(tool, self.settings.tool_style)
        line.append(message, style=None if self.dumb else self.settings.tool_style)
        self.console.print(line)

    def tool_input(self, tool: str, prompt: str) -> str:
        label = self._label(tool, self.settings.tool_style)
        label.append(prompt, style=None if self.dumb else self.settings.tool_style)
        return self._read(label)

    def tool_key(self, tool: str, prompt: str) -> str:
        # Piped stdin and dumb terminals answer with a line.
        if self.dumb or not sys.stdin.isatty():
            return self.tool_input(tool, prompt)
        label = self._label(tool, self.settings.tool_style)
        label.append(prompt, style=self.settings.tool_style)
        self.console.print(label, end="")
        try:
            key = typer.getchar()
        except OSError as e:
            raise InputError(str(e)) from e
        self.console.print(key, markup=False)
        return key

    def begin_tool_format(self) -> None:
        if not self.dumb:
            self.console.print(Rule(style=self.settings.tool_style))
        # Command output bypasses the console; flush what rich has buffered.
        self.console.file.flush()

    def end_tool_format(self) -> None:
        if not self.dumb:
            self.console.print(Rule(style=self.settings.tool_style))
